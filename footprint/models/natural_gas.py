from sqlalchemy import CheckConstraint

from footprint.db.base import Base
from footprint.models.event import ConsumptionEventMixin, MeteredMixin


class NaturalGasUsage(ConsumptionEventMixin, MeteredMixin, Base):
    """One natural gas bill; canonical unit therms."""

    category = "natural_gas"
    __tablename__ = "natural_gas"
    __table_args__ = (
        CheckConstraint("co2e_kg >= 0", name="ck_natural_gas_co2e_nonneg"),
        CheckConstraint("period_end >= period_start", name="ck_natural_gas_period"),
    )
