from datetime import date
from decimal import Decimal
from sqlalchemy import Boolean, CheckConstraint, Date, Integer, Numeric, String
from sqlalchemy.orm import Mapped, mapped_column

from footprint.db.base import Base
from footprint.models.event import ConsumptionEventMixin, MeteredMixin


class AirTrip(ConsumptionEventMixin, MeteredMixin, Base):
    """
    One trip dated by its leave date; canonical unit miles.

    direct_entry=True: co2e_kg = co2e_kg_per_trip * num_travelers and the
    distance columns may be NULL.
    """

    category = "air_travel"
    __tablename__ = "air_travel"
    __table_args__ = (
        CheckConstraint("co2e_kg >= 0", name="ck_air_travel_co2e_nonneg"),
        CheckConstraint("num_travelers >= 1", name="ck_air_travel_travelers"),
    )

    return_date: Mapped[date | None] = mapped_column(Date, nullable=True)
    roundtrip: Mapped[bool] = mapped_column(Boolean, nullable=False, default=False)
    num_travelers: Mapped[int] = mapped_column(Integer, nullable=False, default=1)
    origin: Mapped[str | None] = mapped_column(String(64), nullable=True)
    destination: Mapped[str | None] = mapped_column(String(64), nullable=True)
    direct_entry: Mapped[bool] = mapped_column(Boolean, nullable=False, default=False)
    co2e_kg_per_trip: Mapped[Decimal | None] = mapped_column(Numeric(14, 4), nullable=True)
