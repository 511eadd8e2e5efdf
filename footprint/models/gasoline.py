from decimal import Decimal
from sqlalchemy import CheckConstraint, Numeric
from sqlalchemy.orm import Mapped, mapped_column

from footprint.db.base import Base
from footprint.models.event import ConsumptionEventMixin, MeteredMixin


class GasolinePurchase(ConsumptionEventMixin, MeteredMixin, Base):
    """
    One fill-up; canonical unit gallons.

    When only dollars and price_per_unit are given, `quantity` holds the
    derived volume (dollars / price_per_unit).
    """

    category = "gasoline"
    __tablename__ = "gasoline"
    __table_args__ = (
        CheckConstraint("co2e_kg >= 0", name="ck_gasoline_co2e_nonneg"),
    )

    dollars: Mapped[Decimal | None] = mapped_column(Numeric(12, 2), nullable=True)
    price_per_unit: Mapped[Decimal | None] = mapped_column(Numeric(10, 4), nullable=True)
