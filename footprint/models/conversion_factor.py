from decimal import Decimal
from sqlalchemy import Integer, String, Numeric, UniqueConstraint
from sqlalchemy.orm import Mapped, mapped_column

from footprint.db.base import Base


class ConversionFactor(Base):
    """Category-scoped unit factor: amount_in_end_unit = amount * factor."""

    __tablename__ = "conversion_factors"
    __table_args__ = (
        UniqueConstraint("category", "start_unit", "end_unit", name="uq_conversion_factor_pair"),
    )

    id: Mapped[int] = mapped_column(Integer, primary_key=True, index=True)
    category: Mapped[str] = mapped_column(String(32), nullable=False, index=True)
    start_unit: Mapped[str] = mapped_column(String(16), nullable=False)
    end_unit: Mapped[str] = mapped_column(String(16), nullable=False)
    factor: Mapped[Decimal] = mapped_column(Numeric(18, 8), nullable=False)
