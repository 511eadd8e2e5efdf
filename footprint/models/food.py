"""
Food entries (one receipt or meal) and their line items.

FoodEntry.co2e_kg is the sum of its details; details are deleted with
their entry.
"""
from decimal import Decimal
from sqlalchemy import Boolean, CheckConstraint, ForeignKey, Integer, Numeric, String
from sqlalchemy.orm import Mapped, mapped_column, relationship

from footprint.db.base import Base
from footprint.models.event import ConsumptionEventMixin, MeteredMixin


class FoodEntry(ConsumptionEventMixin, Base):
    category = "food"
    __tablename__ = "food_entries"
    __table_args__ = (
        CheckConstraint("co2e_kg >= 0", name="ck_food_entries_co2e_nonneg"),
    )

    entry_type: Mapped[str] = mapped_column(String(32), nullable=False, default="grocery")

    details: Mapped[list["FoodDetail"]] = relationship(
        back_populates="entry",
        cascade="all, delete-orphan",
        order_by="FoodDetail.id",
    )


class FoodDetail(MeteredMixin, Base):
    __tablename__ = "food_details"
    __table_args__ = (
        CheckConstraint("co2e_kg >= 0", name="ck_food_details_co2e_nonneg"),
    )

    id: Mapped[int] = mapped_column(Integer, primary_key=True, index=True)
    food_entry_id: Mapped[int] = mapped_column(
        ForeignKey("food_entries.id", ondelete="CASCADE"), nullable=False, index=True
    )
    item: Mapped[str] = mapped_column(String(128), nullable=False)
    food_category: Mapped[str] = mapped_column(String(32), nullable=False, default="other")
    packaged: Mapped[bool] = mapped_column(Boolean, nullable=False, default=False)
    co2e_kg: Mapped[Decimal] = mapped_column(Numeric(14, 4), nullable=False, default=Decimal("0"))

    entry: Mapped[FoodEntry] = relationship(back_populates="details")
