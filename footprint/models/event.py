"""
Column mixins shared by the consumption event tables.

ConsumptionEventMixin: ownership, dates, computed CO2e, timestamps.
MeteredMixin:          raw quantity/unit, canonical quantity, optional
                       user-supplied carbon intensity.

Single-date categories store period_start == period_end.
"""
from datetime import datetime, date
from decimal import Decimal
from sqlalchemy import Integer, String, Numeric, DateTime, Date, ForeignKey, func
from sqlalchemy.orm import Mapped, mapped_column


class ConsumptionEventMixin:
    id: Mapped[int] = mapped_column(Integer, primary_key=True, index=True)
    household_id: Mapped[int] = mapped_column(
        ForeignKey("households.id", ondelete="CASCADE"), nullable=False, index=True
    )
    period_start: Mapped[date] = mapped_column(Date, nullable=False, index=True)
    period_end: Mapped[date] = mapped_column(Date, nullable=False)
    co2e_kg: Mapped[Decimal] = mapped_column(Numeric(14, 4), nullable=False, default=Decimal("0"))
    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), server_default=func.now(), nullable=False
    )
    updated_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        server_default=func.now(),
        onupdate=func.now(),
        nullable=False,
    )


class MeteredMixin:
    quantity: Mapped[Decimal | None] = mapped_column(Numeric(14, 4), nullable=True)
    unit: Mapped[str] = mapped_column(String(16), nullable=False)
    canonical_quantity: Mapped[Decimal | None] = mapped_column(Numeric(14, 4), nullable=True)
    carbon_intensity: Mapped[Decimal | None] = mapped_column(
        Numeric(14, 6), nullable=True,
        comment="User-supplied kg CO2e per canonical unit; NULL means category default",
    )
