"""
Footprint service: event lifecycle per consumption category.

Public API
----------
record_event(store, household_id, category, payload, factors)          -> EventResult
edit_event(store, household_id, category, event_id, payload, factors)  -> EventResult
delete_event(store, household_id, category, event_id)                 -> EventResult
list_events(store, household_id, category, start, end)                -> list[row]
monthly_series(store, household_id, category, start, end)             -> list[MonthlyBucket]

Mutation order: convert -> calculate -> write + commit -> recompute the
trailing average. Conversion and calculation errors abort before anything is
written. A StoreError raised while recomputing does not undo the committed
event; it is logged and handed back as `EventResult.warning`.
"""
from __future__ import annotations

import logging
from dataclasses import dataclass
from datetime import date
from decimal import Decimal, ROUND_HALF_UP
from typing import Any, Callable, Optional

from footprint.core.config import settings
from footprint.core.errors import InvalidInputError, StoreError, UnsupportedUnitError
from footprint.models import FoodDetail
from footprint.services.aggregation import (
    MonthlyBucket,
    aggregate_by_month,
    month_end,
    month_start,
    utc_today,
)
from footprint.services.categories import Category, CategoryConfig, get_category
from footprint.services.emissions import DEFAULT_INTENSITIES, IntensityDefaults, calculate
from footprint.services.store import RecordStore
from footprint.services.trailing_average import update_household_average
from footprint.services.units import (
    ConversionFactorTable,
    as_decimal,
    convert,
    derive_quantity_from_cost,
)

logger = logging.getLogger(__name__)

# Food details are stored at the column scale; the entry total is summed from
# the stored values.
_KG_PLACES = Decimal("0.0001")


# ---------------------------------------------------------------------------
# Result type
# ---------------------------------------------------------------------------

@dataclass
class EventResult:
    category: Category
    event: Any = None                            # ORM row; None after delete
    event_id: Optional[int] = None
    household_average: Optional[Decimal] = None  # None: window empty or recompute failed
    warning: Optional[str] = None


@dataclass
class _Context:
    config: CategoryConfig
    factors: ConversionFactorTable
    defaults: IntensityDefaults
    allow_unknown_units: bool


# ---------------------------------------------------------------------------
# Helpers
# ---------------------------------------------------------------------------

def _optional_decimal(value: Any, field: str) -> Optional[Decimal]:
    return None if value is None else as_decimal(value, field)


def _period(start: Optional[date], end: Optional[date]) -> tuple[date, date]:
    if start is None:
        raise InvalidInputError("period_start is required.", field="period_start")
    end = end or start
    if end < start:
        raise InvalidInputError(
            f"period_end {end} is before period_start {start}.", field="period_end"
        )
    return start, end


def _to_canonical(ctx: _Context, quantity: Any, unit: str) -> Decimal:
    try:
        return convert(quantity, unit, ctx.config.category, ctx.factors)
    except UnsupportedUnitError as exc:
        if not ctx.allow_unknown_units:
            raise
        logger.warning(
            "%s; treating %s %s as %s",
            exc.message, quantity, unit, ctx.config.canonical_unit,
        )
        return as_decimal(quantity, "quantity")


# ---------------------------------------------------------------------------
# Per-category field builders: payload dict -> column values
# ---------------------------------------------------------------------------

def _metered_fields(ctx: _Context, payload: dict) -> dict[str, Any]:
    start, end = _period(payload.get("period_start"), payload.get("period_end"))
    unit = payload.get("unit") or ctx.config.canonical_unit
    quantity = as_decimal(payload.get("quantity"), "quantity")
    intensity = _optional_decimal(payload.get("carbon_intensity"), "carbon_intensity")
    canonical = _to_canonical(ctx, quantity, unit)
    return {
        "period_start": start,
        "period_end": end,
        "quantity": quantity,
        "unit": unit,
        "canonical_quantity": canonical,
        "carbon_intensity": intensity,
        "co2e_kg": calculate(
            ctx.config.category, canonical, intensity, defaults=ctx.defaults
        ),
    }


def _gasoline_fields(ctx: _Context, payload: dict) -> dict[str, Any]:
    day, _ = _period(payload.get("occurred_on"), None)
    unit = payload.get("unit") or ctx.config.canonical_unit
    dollars = _optional_decimal(payload.get("dollars"), "dollars")
    price = _optional_decimal(payload.get("price_per_unit"), "price_per_unit")
    quantity = derive_quantity_from_cost(payload.get("quantity"), dollars, price)
    intensity = _optional_decimal(payload.get("carbon_intensity"), "carbon_intensity")
    canonical = _to_canonical(ctx, quantity, unit)
    return {
        "period_start": day,
        "period_end": day,
        "quantity": quantity,
        "unit": unit,
        "dollars": dollars,
        "price_per_unit": price,
        "canonical_quantity": canonical,
        "carbon_intensity": intensity,
        "co2e_kg": calculate(
            Category.gasoline, canonical, intensity, defaults=ctx.defaults
        ),
    }


def _air_travel_fields(ctx: _Context, payload: dict) -> dict[str, Any]:
    day, _ = _period(payload.get("leave_date"), None)
    return_date = payload.get("return_date")
    if return_date is not None and return_date < day:
        raise InvalidInputError(
            f"return_date {return_date} is before leave_date {day}.", field="return_date"
        )
    travelers = payload.get("num_travelers")
    travelers = 1 if travelers is None else travelers
    direct_entry = bool(payload.get("direct_entry"))
    unit = payload.get("unit") or ctx.config.canonical_unit
    distance = payload.get("distance")
    intensity = _optional_decimal(payload.get("carbon_intensity"), "carbon_intensity")

    if direct_entry:
        per_trip = as_decimal(payload.get("co2e_kg_per_trip"), "co2e_kg_per_trip")
        quantity = _optional_decimal(distance, "distance")
        canonical = None if quantity is None else _to_canonical(ctx, quantity, unit)
        co2e = calculate(
            Category.air_travel, traveler_count=travelers, direct_value=per_trip,
            direct_entry=True, defaults=ctx.defaults,
        )
    else:
        per_trip = None
        quantity = as_decimal(distance, "distance")
        canonical = _to_canonical(ctx, quantity, unit)
        co2e = calculate(
            Category.air_travel, canonical, intensity, travelers, defaults=ctx.defaults
        )

    return {
        "period_start": day,
        "period_end": day,
        "return_date": return_date,
        "roundtrip": bool(payload.get("roundtrip")),
        "num_travelers": travelers,
        "origin": payload.get("origin"),
        "destination": payload.get("destination"),
        "quantity": quantity,
        "unit": unit,
        "canonical_quantity": canonical,
        "carbon_intensity": intensity,
        "direct_entry": direct_entry,
        "co2e_kg_per_trip": per_trip,
        "co2e_kg": co2e,
    }


def _food_fields(ctx: _Context, payload: dict) -> dict[str, Any]:
    day, _ = _period(payload.get("occurred_on"), None)
    items = payload.get("items") or []
    if not items:
        raise InvalidInputError("A food entry needs at least one item.", field="items")

    details = []
    for item in items:
        unit = item.get("unit") or ctx.config.canonical_unit
        quantity = as_decimal(item.get("quantity"), "quantity")
        intensity = _optional_decimal(item.get("carbon_intensity"), "carbon_intensity")
        food_category = (item.get("food_category") or "other").strip().lower()
        canonical = _to_canonical(ctx, quantity, unit)
        details.append(FoodDetail(
            item=item.get("item"),
            food_category=food_category,
            packaged=bool(item.get("packaged")),
            quantity=quantity,
            unit=unit,
            canonical_quantity=canonical,
            carbon_intensity=intensity,
            co2e_kg=calculate(
                Category.food, canonical, intensity,
                food_category=food_category, defaults=ctx.defaults,
            ).quantize(_KG_PLACES, rounding=ROUND_HALF_UP),
        ))

    return {
        "period_start": day,
        "period_end": day,
        "entry_type": payload.get("entry_type") or "grocery",
        "co2e_kg": sum((d.co2e_kg for d in details), Decimal("0")),
        "details": details,
    }


_BUILDERS: dict[Category, Callable[[_Context, dict], dict[str, Any]]] = {
    Category.electricity: _metered_fields,
    Category.natural_gas: _metered_fields,
    Category.gasoline: _gasoline_fields,
    Category.air_travel: _air_travel_fields,
    Category.food: _food_fields,
}


def build_event_fields(
    category: Category | str,
    payload: dict,
    factors: ConversionFactorTable,
    defaults: IntensityDefaults = DEFAULT_INTENSITIES,
    allow_unknown_units: Optional[bool] = None,
) -> dict[str, Any]:
    """Convert and calculate without touching the store."""
    config = get_category(category)
    if allow_unknown_units is None:
        allow_unknown_units = settings.UNKNOWN_UNIT_FALLBACK
    ctx = _Context(config, factors, defaults, allow_unknown_units)
    return _BUILDERS[config.category](ctx, payload)


# ---------------------------------------------------------------------------
# Recompute step (non-fatal)
# ---------------------------------------------------------------------------

def _recompute(
    store: RecordStore,
    household_id: int,
    category: Category,
    today: Optional[date],
) -> tuple[Optional[Decimal], Optional[str]]:
    try:
        return update_household_average(store, household_id, category, today), None
    except StoreError as exc:
        logger.warning(
            "Household %s %s average not recomputed: %s",
            household_id, category.value, exc.message,
        )
        return None, (
            f"Event saved, but the {category.value} trailing average "
            f"could not be recomputed: {exc.message}"
        )


# ---------------------------------------------------------------------------
# Public: lifecycle
# ---------------------------------------------------------------------------

def record_event(
    store: RecordStore,
    household_id: int,
    category: Category | str,
    payload: dict,
    factors: ConversionFactorTable,
    defaults: IntensityDefaults = DEFAULT_INTENSITIES,
    *,
    allow_unknown_units: Optional[bool] = None,
    today: Optional[date] = None,
) -> EventResult:
    config = get_category(category)
    store.get_household(household_id)
    fields = build_event_fields(config.category, payload, factors, defaults, allow_unknown_units)

    row = store.insert(config.model(household_id=household_id, **fields))
    logger.info(
        "Recorded %s event %s for household %s: %s kg CO2e",
        config.category.value, row.id, household_id, row.co2e_kg,
    )

    average, warning = _recompute(store, household_id, config.category, today)
    return EventResult(config.category, row, row.id, average, warning)


def edit_event(
    store: RecordStore,
    household_id: int,
    category: Category | str,
    event_id: int,
    payload: dict,
    factors: ConversionFactorTable,
    defaults: IntensityDefaults = DEFAULT_INTENSITIES,
    *,
    allow_unknown_units: Optional[bool] = None,
    today: Optional[date] = None,
) -> EventResult:
    """Replace the editable fields of an event in place and recompute its CO2e."""
    config = get_category(category)
    store.get_household(household_id)
    row = store.get_event(config.model, household_id, event_id, config.category.value)
    fields = build_event_fields(config.category, payload, factors, defaults, allow_unknown_units)

    row = store.update(row, fields)
    logger.info(
        "Edited %s event %s for household %s: %s kg CO2e",
        config.category.value, event_id, household_id, row.co2e_kg,
    )

    average, warning = _recompute(store, household_id, config.category, today)
    return EventResult(config.category, row, row.id, average, warning)


def delete_event(
    store: RecordStore,
    household_id: int,
    category: Category | str,
    event_id: int,
    *,
    today: Optional[date] = None,
) -> EventResult:
    config = get_category(category)
    store.get_household(household_id)
    row = store.get_event(config.model, household_id, event_id, config.category.value)

    store.delete(row)
    logger.info("Deleted %s event %s for household %s", config.category.value, event_id, household_id)

    average, warning = _recompute(store, household_id, config.category, today)
    return EventResult(config.category, None, event_id, average, warning)


# ---------------------------------------------------------------------------
# Public: reads
# ---------------------------------------------------------------------------

def list_events(
    store: RecordStore,
    household_id: int,
    category: Category | str,
    start: Optional[date] = None,
    end: Optional[date] = None,
) -> list[Any]:
    config = get_category(category)
    store.get_household(household_id)
    return store.filter_events(config.model, household_id, start, end)


def monthly_series(
    store: RecordStore,
    household_id: int,
    category: Category | str,
    start: Optional[date] = None,
    end: Optional[date] = None,
) -> list[MonthlyBucket]:
    """
    Zero-filled monthly CO2e totals, oldest first. A range given only a
    `start` runs through the current month.
    """
    if start and not end:
        end = max(utc_today(), start)
    if start and end and end < start:
        raise InvalidInputError(f"end {end} is before start {start}.", field="end")
    rows = list_events(
        store, household_id, category,
        month_start(start) if start else None,
        month_end(end) if end else None,
    )
    return aggregate_by_month(rows, start, end)
