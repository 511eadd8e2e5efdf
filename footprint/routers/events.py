"""
Consumption events router.

POST   /households/{id}/electricity                 record a bill
POST   /households/{id}/natural-gas                 record a bill
POST   /households/{id}/gasoline                    record a fill-up
POST   /households/{id}/air-travel                  record a trip
POST   /households/{id}/food                        record a food entry
PUT    /households/{id}/{category}/{event_id}       edit in place (full replacement)
GET    /households/{id}/{category}                  list events
GET    /households/{id}/{category}/monthly          zero-filled monthly series
DELETE /households/{id}/{category}/{event_id}       delete

Every mutation recomputes the household's trailing 12-month average for
that category. If the recompute fails the event is still saved and the
response carries a `warning`.
"""
from __future__ import annotations

import enum
from datetime import date
from typing import Any, Optional

from fastapi import APIRouter, Depends, Query, status

from footprint.routers.deps import get_conversion_factors, get_store
from footprint.schemas.common import ErrorResponse
from footprint.schemas.events import (
    AirTravelIn,
    AirTravelOut,
    DeleteResponse,
    ElectricityIn,
    EventListResponse,
    EventResponse,
    FoodEntryIn,
    FoodEntryOut,
    GasolineIn,
    GasolineOut,
    MeteredEventOut,
    MonthlyBucketOut,
    MonthlySeriesResponse,
    NaturalGasIn,
)
from footprint.services.categories import Category
from footprint.services.emissions import IntensityDefaults, get_intensity_defaults
from footprint.services.footprint import (
    EventResult,
    delete_event,
    edit_event,
    list_events,
    monthly_series,
    record_event,
)
from footprint.services.store import RecordStore
from footprint.services.units import ConversionFactorTable

router = APIRouter(prefix="/households/{household_id}", tags=["events"])


class CategoryPath(str, enum.Enum):
    electricity = "electricity"
    natural_gas = "natural-gas"
    gasoline = "gasoline"
    air_travel = "air-travel"
    food = "food"

    @property
    def category(self) -> Category:
        return Category(self.value.replace("-", "_"))


# ---------------------------------------------------------------------------
# Serialization helpers
# ---------------------------------------------------------------------------

_OUT = {
    Category.electricity: MeteredEventOut,
    Category.natural_gas: MeteredEventOut,
    Category.gasoline: GasolineOut,
    Category.air_travel: AirTravelOut,
    Category.food: FoodEntryOut,
}


def _event_out(category: Category, row: Any):
    return _OUT[category].model_validate(row)


def _to_response(result: EventResult) -> EventResponse:
    return EventResponse(
        category=result.category.value,
        event=_event_out(result.category, result.event),
        household_average_kg=result.household_average,
        warning=result.warning,
    )


def _record(
    category: Category,
    household_id: int,
    body: Any,
    store: RecordStore,
    factors: ConversionFactorTable,
    defaults: IntensityDefaults,
) -> EventResponse:
    result = record_event(store, household_id, category, body.model_dump(), factors, defaults)
    return _to_response(result)


def _edit(
    category: Category,
    household_id: int,
    event_id: int,
    body: Any,
    store: RecordStore,
    factors: ConversionFactorTable,
    defaults: IntensityDefaults,
) -> EventResponse:
    result = edit_event(store, household_id, category, event_id, body.model_dump(), factors, defaults)
    return _to_response(result)


_MUTATION_RESPONSES = {
    404: {"model": ErrorResponse, "description": "Household or event not found."},
    422: {"model": ErrorResponse, "description": "Invalid input or unsupported unit."},
}


# ---------------------------------------------------------------------------
# Electricity
# ---------------------------------------------------------------------------

@router.post(
    "/electricity",
    response_model=EventResponse,
    status_code=status.HTTP_201_CREATED,
    summary="Record an electricity bill",
    responses=_MUTATION_RESPONSES,
)
def create_electricity(
    household_id: int,
    body: ElectricityIn,
    store: RecordStore = Depends(get_store),
    factors: ConversionFactorTable = Depends(get_conversion_factors),
    defaults: IntensityDefaults = Depends(get_intensity_defaults),
):
    """Billing period + usage in kWh (or MWh/Wh). Default intensity 0.0004 kg/kWh."""
    return _record(Category.electricity, household_id, body, store, factors, defaults)


@router.put(
    "/electricity/{event_id}",
    response_model=EventResponse,
    summary="Edit an electricity bill",
    responses=_MUTATION_RESPONSES,
)
def update_electricity(
    household_id: int,
    event_id: int,
    body: ElectricityIn,
    store: RecordStore = Depends(get_store),
    factors: ConversionFactorTable = Depends(get_conversion_factors),
    defaults: IntensityDefaults = Depends(get_intensity_defaults),
):
    return _edit(Category.electricity, household_id, event_id, body, store, factors, defaults)


# ---------------------------------------------------------------------------
# Natural gas
# ---------------------------------------------------------------------------

@router.post(
    "/natural-gas",
    response_model=EventResponse,
    status_code=status.HTTP_201_CREATED,
    summary="Record a natural gas bill",
    responses=_MUTATION_RESPONSES,
)
def create_natural_gas(
    household_id: int,
    body: NaturalGasIn,
    store: RecordStore = Depends(get_store),
    factors: ConversionFactorTable = Depends(get_conversion_factors),
    defaults: IntensityDefaults = Depends(get_intensity_defaults),
):
    """
    Billing period + usage in therms, CCF or MCF.

    CCF/MCF are converted to therms with the stored conversion factor; the
    default intensity is 5.291 kg CO2e per therm.
    """
    return _record(Category.natural_gas, household_id, body, store, factors, defaults)


@router.put(
    "/natural-gas/{event_id}",
    response_model=EventResponse,
    summary="Edit a natural gas bill",
    responses=_MUTATION_RESPONSES,
)
def update_natural_gas(
    household_id: int,
    event_id: int,
    body: NaturalGasIn,
    store: RecordStore = Depends(get_store),
    factors: ConversionFactorTable = Depends(get_conversion_factors),
    defaults: IntensityDefaults = Depends(get_intensity_defaults),
):
    return _edit(Category.natural_gas, household_id, event_id, body, store, factors, defaults)


# ---------------------------------------------------------------------------
# Gasoline
# ---------------------------------------------------------------------------

@router.post(
    "/gasoline",
    response_model=EventResponse,
    status_code=status.HTTP_201_CREATED,
    summary="Record a gasoline purchase",
    responses=_MUTATION_RESPONSES,
)
def create_gasoline(
    household_id: int,
    body: GasolineIn,
    store: RecordStore = Depends(get_store),
    factors: ConversionFactorTable = Depends(get_conversion_factors),
    defaults: IntensityDefaults = Depends(get_intensity_defaults),
):
    """Volume, or dollars spent + price per unit (volume = dollars / price)."""
    return _record(Category.gasoline, household_id, body, store, factors, defaults)


@router.put(
    "/gasoline/{event_id}",
    response_model=EventResponse,
    summary="Edit a gasoline purchase",
    responses=_MUTATION_RESPONSES,
)
def update_gasoline(
    household_id: int,
    event_id: int,
    body: GasolineIn,
    store: RecordStore = Depends(get_store),
    factors: ConversionFactorTable = Depends(get_conversion_factors),
    defaults: IntensityDefaults = Depends(get_intensity_defaults),
):
    return _edit(Category.gasoline, household_id, event_id, body, store, factors, defaults)


# ---------------------------------------------------------------------------
# Air travel
# ---------------------------------------------------------------------------

@router.post(
    "/air-travel",
    response_model=EventResponse,
    status_code=status.HTTP_201_CREATED,
    summary="Record a trip",
    responses=_MUTATION_RESPONSES,
)
def create_air_travel(
    household_id: int,
    body: AirTravelIn,
    store: RecordStore = Depends(get_store),
    factors: ConversionFactorTable = Depends(get_conversion_factors),
    defaults: IntensityDefaults = Depends(get_intensity_defaults),
):
    """
    distance x travelers x intensity, or with `direct_entry`,
    `co2e_kg_per_trip` x travelers.
    """
    return _record(Category.air_travel, household_id, body, store, factors, defaults)


@router.put(
    "/air-travel/{event_id}",
    response_model=EventResponse,
    summary="Edit a trip",
    responses=_MUTATION_RESPONSES,
)
def update_air_travel(
    household_id: int,
    event_id: int,
    body: AirTravelIn,
    store: RecordStore = Depends(get_store),
    factors: ConversionFactorTable = Depends(get_conversion_factors),
    defaults: IntensityDefaults = Depends(get_intensity_defaults),
):
    return _edit(Category.air_travel, household_id, event_id, body, store, factors, defaults)


# ---------------------------------------------------------------------------
# Food
# ---------------------------------------------------------------------------

@router.post(
    "/food",
    response_model=EventResponse,
    status_code=status.HTTP_201_CREATED,
    summary="Record a food entry",
    responses=_MUTATION_RESPONSES,
)
def create_food(
    household_id: int,
    body: FoodEntryIn,
    store: RecordStore = Depends(get_store),
    factors: ConversionFactorTable = Depends(get_conversion_factors),
    defaults: IntensityDefaults = Depends(get_intensity_defaults),
):
    """One receipt or meal; the entry total is the sum of its items."""
    return _record(Category.food, household_id, body, store, factors, defaults)


@router.put(
    "/food/{event_id}",
    response_model=EventResponse,
    summary="Edit a food entry (items are replaced)",
    responses=_MUTATION_RESPONSES,
)
def update_food(
    household_id: int,
    event_id: int,
    body: FoodEntryIn,
    store: RecordStore = Depends(get_store),
    factors: ConversionFactorTable = Depends(get_conversion_factors),
    defaults: IntensityDefaults = Depends(get_intensity_defaults),
):
    return _edit(Category.food, household_id, event_id, body, store, factors, defaults)


# ---------------------------------------------------------------------------
# Generic reads / delete
# ---------------------------------------------------------------------------

@router.get(
    "/{category}",
    response_model=EventListResponse,
    summary="List a household's events for one category",
)
def get_events(
    household_id: int,
    category: CategoryPath,
    start: Optional[date] = Query(default=None, description="Only events ending on or after this date."),
    end: Optional[date] = Query(default=None, description="Only events starting on or before this date."),
    store: RecordStore = Depends(get_store),
):
    rows = list_events(store, household_id, category.category, start, end)
    return EventListResponse(
        category=category.category.value,
        count=len(rows),
        events=[_event_out(category.category, r) for r in rows],
    )


@router.get(
    "/{category}/monthly",
    response_model=MonthlySeriesResponse,
    summary="Monthly CO2e series",
)
def get_monthly_series(
    household_id: int,
    category: CategoryPath,
    start: Optional[date] = Query(default=None, examples=["2025-11-01"]),
    end: Optional[date] = Query(default=None, examples=["2026-10-31"]),
    store: RecordStore = Depends(get_store),
):
    """
    Totals per calendar month, oldest first, zero-filled between the first
    and last month (or across `start`..`end` when given). Billing periods
    count toward the month holding most of their days.
    """
    buckets = monthly_series(store, household_id, category.category, start, end)
    return MonthlySeriesResponse(
        category=category.category.value,
        months=[MonthlyBucketOut(month=b.label, total_co2e_kg=b.total_co2e_kg) for b in buckets],
    )


@router.delete(
    "/{category}/{event_id}",
    response_model=DeleteResponse,
    summary="Delete an event",
    responses={404: {"model": ErrorResponse, "description": "Household or event not found."}},
)
def remove_event(
    household_id: int,
    category: CategoryPath,
    event_id: int,
    store: RecordStore = Depends(get_store),
):
    result = delete_event(store, household_id, category.category, event_id)
    return DeleteResponse(
        category=result.category.value,
        deleted_id=result.event_id,
        household_average_kg=result.household_average,
        warning=result.warning,
    )
