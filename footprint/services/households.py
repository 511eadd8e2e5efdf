"""
Household service: create/read households and their stored summary.
"""
from __future__ import annotations

import logging
from datetime import date
from decimal import Decimal
from typing import Any, Optional

from footprint.models import Household, HouseholdSummary
from footprint.services.store import RecordStore
from footprint.services.trailing_average import refresh_household_summary

logger = logging.getLogger(__name__)


def create_household(store: RecordStore, **fields: Any) -> Household:
    household = store.insert_household(**fields)
    logger.info("Created household %s (%s)", household.id, household.name)
    return household


def get_household(store: RecordStore, household_id: int) -> Household:
    return store.get_household(household_id)


def get_summary(store: RecordStore, household_id: int) -> Optional[HouseholdSummary]:
    """Stored averages; None until the first recompute writes a row."""
    store.get_household(household_id)
    return store.get_summary(household_id)


def recompute_summary(
    store: RecordStore,
    household_id: int,
    today: Optional[date] = None,
) -> Optional[HouseholdSummary]:
    store.get_household(household_id)
    refresh_household_summary(store, household_id, today)
    return store.get_summary(household_id)


def summary_total(summary: Optional[HouseholdSummary]) -> Optional[Decimal]:
    """Sum of the categories that have a stored value."""
    if summary is None:
        return None
    values = [
        summary.electricity, summary.natural_gas, summary.gasoline,
        summary.air_travel, summary.food,
    ]
    present = [Decimal(v) for v in values if v is not None]
    return sum(present, Decimal("0")) if present else None
