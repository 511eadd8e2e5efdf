"""
Trailing-window averager: representative monthly emissions per category.

Definition
----------
Window  = the 12 calendar months ending with the current month (inclusive).
Average = sum(monthly totals in the window) / 12.

Months without events contribute zero; the denominator is always 12. Events
are bucketed with the majority-month rule and events whose month key falls
outside the window are dropped even if their range overlaps it.

A window with no events at all is a no-op: nothing is written and the
previously stored value is left in place.

Public API
----------
trailing_window(today)                               -> (first_month, last_month)
compute_trailing_average(events, today, category)    -> TrailingAverage
calculate_household_average(store, household_id, category, today) -> TrailingAverage
update_household_average(store, household_id, category, today)    -> Decimal | None
refresh_household_summary(store, household_id, today)             -> dict
"""
from __future__ import annotations

import logging
from dataclasses import dataclass
from datetime import date
from decimal import Decimal, ROUND_HALF_UP
from typing import Any, Iterable, Optional

from footprint.services.aggregation import (
    DatedEmission,
    MonthlyBucket,
    add_months,
    iter_months,
    month_end,
    month_key,
    month_start,
    utc_today,
)
from footprint.services.categories import CATEGORIES, Category, get_category
from footprint.services.store import RecordStore

logger = logging.getLogger(__name__)

WINDOW_MONTHS = 12
_QUANT = Decimal("0.0001")


# ---------------------------------------------------------------------------
# Result type (plain dataclass, no ORM, no Pydantic)
# ---------------------------------------------------------------------------

@dataclass
class TrailingAverage:
    category: Optional[Category]
    first_month: date
    last_month: date
    months: list[MonthlyBucket]   # always WINDOW_MONTHS entries, oldest first
    event_count: int
    average_kg: Optional[Decimal]  # None when the window holds no events


def trailing_window(today: Optional[date] = None) -> tuple[date, date]:
    last = month_start(today or utc_today())
    return add_months(last, -(WINDOW_MONTHS - 1)), last


# ---------------------------------------------------------------------------
# Core, pure
# ---------------------------------------------------------------------------

def compute_trailing_average(
    events: Iterable[DatedEmission | Any],
    today: Optional[date] = None,
    category: Optional[Category] = None,
) -> TrailingAverage:
    first, last = trailing_window(today)
    slots = {month: Decimal("0") for month in iter_months(first, last)}

    counted = 0
    for event in events:
        if not isinstance(event, DatedEmission):
            event = DatedEmission.from_record(event)
        key = month_key(event)
        if key not in slots:
            continue
        slots[key] += event.co2e_kg
        counted += 1

    average = None
    if counted:
        raw = sum(slots.values(), Decimal("0")) / Decimal(WINDOW_MONTHS)
        average = raw.quantize(_QUANT, rounding=ROUND_HALF_UP)

    return TrailingAverage(
        category=category,
        first_month=first,
        last_month=last,
        months=[MonthlyBucket(month=m, total_co2e_kg=v) for m, v in slots.items()],
        event_count=counted,
        average_kg=average,
    )


# ---------------------------------------------------------------------------
# Store-backed
# ---------------------------------------------------------------------------

def calculate_household_average(
    store: RecordStore,
    household_id: int,
    category: Category | str,
    today: Optional[date] = None,
) -> TrailingAverage:
    """Read the household's events overlapping the window and average them. No writes."""
    config = get_category(category)
    first, last = trailing_window(today)
    rows = store.filter_events(config.model, household_id, start=first, end=month_end(last))
    return compute_trailing_average(rows, today, config.category)


def update_household_average(
    store: RecordStore,
    household_id: int,
    category: Category | str,
    today: Optional[date] = None,
) -> Optional[Decimal]:
    """
    Recompute and upsert the household's trailing average for one category.

    Returns the stored value, or None when the window is empty (no write).
    Raises StoreError when the store is unavailable.
    """
    result = calculate_household_average(store, household_id, category, today)
    if result.average_kg is None:
        logger.debug(
            "No %s events for household %s in %s..%s; summary left untouched",
            result.category.value, household_id, result.first_month, result.last_month,
        )
        return None

    store.upsert_summary(household_id, result.category.value, result.average_kg)
    logger.info(
        "Household %s %s trailing average = %s kg/month (%d events)",
        household_id, result.category.value, result.average_kg, result.event_count,
    )
    return result.average_kg


def refresh_household_summary(
    store: RecordStore,
    household_id: int,
    today: Optional[date] = None,
) -> dict[Category, Optional[Decimal]]:
    """Recompute every category for a household."""
    return {
        category: update_household_average(store, household_id, category, today)
        for category in CATEGORIES
    }
