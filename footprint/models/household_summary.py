"""
HouseholdSummary: the persisted trailing-12-month average per category.

Derived, never edited directly. One row per household; each category
column is rewritten by the trailing-window averager after every event
mutation (last write wins). NULL means "never computed".
"""
from datetime import datetime
from decimal import Decimal
from sqlalchemy import Integer, Numeric, DateTime, ForeignKey, func
from sqlalchemy.orm import Mapped, mapped_column

from footprint.db.base import Base


class HouseholdSummary(Base):
    __tablename__ = "household_summary"

    id: Mapped[int] = mapped_column(Integer, primary_key=True, index=True)
    household_id: Mapped[int] = mapped_column(
        ForeignKey("households.id", ondelete="CASCADE"), nullable=False, unique=True
    )
    electricity: Mapped[Decimal | None] = mapped_column(Numeric(14, 4), nullable=True)
    natural_gas: Mapped[Decimal | None] = mapped_column(Numeric(14, 4), nullable=True)
    gasoline: Mapped[Decimal | None] = mapped_column(Numeric(14, 4), nullable=True)
    air_travel: Mapped[Decimal | None] = mapped_column(Numeric(14, 4), nullable=True)
    food: Mapped[Decimal | None] = mapped_column(Numeric(14, 4), nullable=True)
    updated_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        server_default=func.now(),
        onupdate=func.now(),
        nullable=False,
    )
