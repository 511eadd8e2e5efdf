"""
Households router.

POST /households                              create
GET  /households/{id}                         read
GET  /households/{id}/summary                 stored trailing 12-month averages
POST /households/{id}/summary/recompute       recompute every category now
"""
from __future__ import annotations

from datetime import date
from typing import Optional

from fastapi import APIRouter, Depends, Query, status

from footprint.models import HouseholdSummary
from footprint.routers.deps import get_store
from footprint.schemas.common import ErrorResponse
from footprint.schemas.household import HouseholdIn, HouseholdOut, HouseholdSummaryOut
from footprint.services.households import (
    create_household,
    get_household,
    get_summary,
    recompute_summary,
    summary_total,
)
from footprint.services.store import RecordStore

router = APIRouter(prefix="/households", tags=["households"])

_NOT_FOUND = {404: {"model": ErrorResponse, "description": "Household not found."}}


def _summary_to_response(household_id: int, summary: Optional[HouseholdSummary]) -> HouseholdSummaryOut:
    if summary is None:
        return HouseholdSummaryOut(household_id=household_id)
    return HouseholdSummaryOut(
        household_id=household_id,
        electricity=summary.electricity,
        natural_gas=summary.natural_gas,
        gasoline=summary.gasoline,
        air_travel=summary.air_travel,
        food=summary.food,
        total_kg=summary_total(summary),
        updated_at=summary.updated_at,
    )


@router.post(
    "",
    response_model=HouseholdOut,
    status_code=status.HTTP_201_CREATED,
    summary="Create a household",
)
def create(body: HouseholdIn, store: RecordStore = Depends(get_store)):
    return create_household(store, **body.model_dump())


@router.get(
    "/{household_id}",
    response_model=HouseholdOut,
    summary="Read a household",
    responses=_NOT_FOUND,
)
def read(household_id: int, store: RecordStore = Depends(get_store)):
    return get_household(store, household_id)


@router.get(
    "/{household_id}/summary",
    response_model=HouseholdSummaryOut,
    summary="Trailing 12-month averages per category",
    responses=_NOT_FOUND,
)
def read_summary(household_id: int, store: RecordStore = Depends(get_store)):
    """
    Representative monthly emissions (kg CO2e) per category, as last
    recomputed. A category that has never had an event in its window is null.
    """
    return _summary_to_response(household_id, get_summary(store, household_id))


@router.post(
    "/{household_id}/summary/recompute",
    response_model=HouseholdSummaryOut,
    summary="Recompute every category's trailing average",
    responses=_NOT_FOUND,
)
def recompute(
    household_id: int,
    today: Optional[date] = Query(
        default=None,
        description="Evaluate the window as of this date. Defaults to today (UTC).",
    ),
    store: RecordStore = Depends(get_store),
):
    return _summary_to_response(household_id, recompute_summary(store, household_id, today))
