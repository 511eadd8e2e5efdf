from sqlalchemy import CheckConstraint

from footprint.db.base import Base
from footprint.models.event import ConsumptionEventMixin, MeteredMixin


class ElectricityUsage(ConsumptionEventMixin, MeteredMixin, Base):
    """One electricity bill; canonical unit kWh."""

    category = "electricity"
    __tablename__ = "electricity"
    __table_args__ = (
        CheckConstraint("co2e_kg >= 0", name="ck_electricity_co2e_nonneg"),
        CheckConstraint("period_end >= period_start", name="ck_electricity_period"),
    )
