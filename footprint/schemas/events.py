"""
Consumption event request / response schemas.

POST/PUT /households/{id}/electricity   -> ElectricityIn -> EventResponse[MeteredEventOut]
POST/PUT /households/{id}/natural-gas   -> NaturalGasIn  -> EventResponse[MeteredEventOut]
POST/PUT /households/{id}/gasoline      -> GasolineIn    -> EventResponse[GasolineOut]
POST/PUT /households/{id}/air-travel    -> AirTravelIn   -> EventResponse[AirTravelOut]
POST/PUT /households/{id}/food          -> FoodEntryIn   -> EventResponse[FoodEntryOut]

Quantities are Decimal on the way in and serialized as strings on the way
out so values round-trip exactly.
"""
from __future__ import annotations

from datetime import date, datetime
from decimal import Decimal
from typing import Annotated, Literal, Optional, Union

from pydantic import AliasChoices, BaseModel, ConfigDict, Field, model_validator

FoodCategory = Literal["meat", "dairy", "produce", "grains", "processed", "other"]


# ---------------------------------------------------------------------------
# Requests
# ---------------------------------------------------------------------------

class BillingPeriodIn(BaseModel):
    period_start: date = Field(..., examples=["2026-01-05"])
    period_end: date = Field(..., examples=["2026-02-03"])
    quantity: Decimal = Field(..., ge=0, description="Amount billed, in `unit`.")
    carbon_intensity: Optional[Decimal] = Field(
        default=None,
        ge=0,
        description="kg CO2e per canonical unit. Omit to use the category default.",
    )

    @model_validator(mode="after")
    def check_period(self) -> "BillingPeriodIn":
        if self.period_end < self.period_start:
            raise ValueError("period_end must not be before period_start")
        return self


class ElectricityIn(BillingPeriodIn):
    unit: Literal["kwh", "mwh", "wh"] = "kwh"


class NaturalGasIn(BillingPeriodIn):
    unit: Literal["therms", "ccf", "mcf"] = "therms"


class GasolineIn(BaseModel):
    """Either `quantity`, or both `dollars` and `price_per_unit`."""
    occurred_on: date = Field(..., examples=["2026-02-14"])
    quantity: Optional[Decimal] = Field(default=None, ge=0)
    unit: Literal["gallons", "liters"] = "gallons"
    dollars: Optional[Decimal] = Field(default=None, ge=0, examples=["30.00"])
    price_per_unit: Optional[Decimal] = Field(default=None, ge=0, examples=["3.75"])
    carbon_intensity: Optional[Decimal] = Field(default=None, ge=0)


class AirTravelIn(BaseModel):
    leave_date: date
    return_date: Optional[date] = None
    roundtrip: bool = False
    num_travelers: int = Field(default=1, ge=1)
    origin: Optional[str] = Field(default=None, max_length=64)
    destination: Optional[str] = Field(default=None, max_length=64)
    distance: Optional[Decimal] = Field(default=None, ge=0)
    unit: Literal["miles", "km"] = "miles"
    carbon_intensity: Optional[Decimal] = Field(
        default=None, ge=0, description="kg CO2e per traveler-mile."
    )
    direct_entry: bool = Field(
        default=False,
        description="Use `co2e_kg_per_trip` x travelers instead of distance x intensity.",
    )
    co2e_kg_per_trip: Optional[Decimal] = Field(default=None, ge=0)

    @model_validator(mode="after")
    def check_inputs(self) -> "AirTravelIn":
        if self.return_date is not None and self.return_date < self.leave_date:
            raise ValueError("return_date must not be before leave_date")
        if self.direct_entry and self.co2e_kg_per_trip is None:
            raise ValueError("co2e_kg_per_trip is required when direct_entry is true")
        if not self.direct_entry and self.distance is None:
            raise ValueError("distance is required unless direct_entry is true")
        return self


class FoodItemIn(BaseModel):
    item: str = Field(..., min_length=1, max_length=128, examples=["Cheddar cheese"])
    food_category: FoodCategory = "other"
    packaged: bool = False
    quantity: Decimal = Field(..., ge=0)
    unit: Literal["kg", "g", "lb", "oz"] = "kg"
    carbon_intensity: Optional[Decimal] = Field(
        default=None, ge=0, description="kg CO2e per kg. Omit to use the food category default."
    )


class FoodEntryIn(BaseModel):
    occurred_on: date
    entry_type: str = Field(default="grocery", max_length=32, examples=["grocery", "restaurant"])
    items: list[FoodItemIn] = Field(..., min_length=1)


# ---------------------------------------------------------------------------
# Responses
# ---------------------------------------------------------------------------

class _EventOutBase(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: int
    household_id: int
    co2e_kg: Decimal
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None


class MeteredEventOut(_EventOutBase):
    category: Literal["electricity", "natural_gas"]
    period_start: date
    period_end: date
    quantity: Optional[Decimal] = None
    unit: str
    canonical_quantity: Optional[Decimal] = None
    carbon_intensity: Optional[Decimal] = None


class GasolineOut(_EventOutBase):
    category: Literal["gasoline"]
    occurred_on: date = Field(validation_alias=AliasChoices("occurred_on", "period_start"))
    quantity: Optional[Decimal] = None
    unit: str
    dollars: Optional[Decimal] = None
    price_per_unit: Optional[Decimal] = None
    canonical_quantity: Optional[Decimal] = None
    carbon_intensity: Optional[Decimal] = None


class AirTravelOut(_EventOutBase):
    category: Literal["air_travel"]
    leave_date: date = Field(validation_alias=AliasChoices("leave_date", "period_start"))
    return_date: Optional[date] = None
    roundtrip: bool
    num_travelers: int
    origin: Optional[str] = None
    destination: Optional[str] = None
    distance: Optional[Decimal] = Field(default=None, validation_alias=AliasChoices("distance", "quantity"))
    unit: str
    canonical_quantity: Optional[Decimal] = None
    carbon_intensity: Optional[Decimal] = None
    direct_entry: bool
    co2e_kg_per_trip: Optional[Decimal] = None


class FoodDetailOut(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: int
    item: str
    food_category: str
    packaged: bool
    quantity: Optional[Decimal] = None
    unit: str
    canonical_quantity: Optional[Decimal] = None
    carbon_intensity: Optional[Decimal] = None
    co2e_kg: Decimal


class FoodEntryOut(_EventOutBase):
    category: Literal["food"]
    occurred_on: date = Field(validation_alias=AliasChoices("occurred_on", "period_start"))
    entry_type: str
    details: list[FoodDetailOut] = []


EventOut = Annotated[
    Union[MeteredEventOut, GasolineOut, AirTravelOut, FoodEntryOut],
    Field(discriminator="category"),
]


class EventResponse(BaseModel):
    category: str
    event: EventOut
    household_average_kg: Optional[Decimal] = Field(
        default=None,
        description="Trailing 12-month average after this change; null if not recomputed.",
    )
    warning: Optional[str] = Field(
        default=None,
        description="Set when the event was saved but the average could not be recomputed.",
    )


class DeleteResponse(BaseModel):
    category: str
    deleted_id: int
    household_average_kg: Optional[Decimal] = None
    warning: Optional[str] = None


class EventListResponse(BaseModel):
    category: str
    count: int
    events: list[EventOut]


class MonthlyBucketOut(BaseModel):
    month: str = Field(..., examples=["2026-02"])
    total_co2e_kg: Decimal


class MonthlySeriesResponse(BaseModel):
    category: str
    months: list[MonthlyBucketOut]
