"""
Household request / response schemas.
"""
from __future__ import annotations

from datetime import datetime
from decimal import Decimal
from typing import Optional

from pydantic import BaseModel, ConfigDict, Field, field_validator


class HouseholdIn(BaseModel):
    name: str = Field(..., min_length=1, max_length=128, examples=["The Garcias"])
    num_members: int = Field(default=1, ge=1)
    sq_ft: Optional[int] = Field(default=None, ge=0)
    num_vehicles: int = Field(default=0, ge=0)
    zipcode: Optional[str] = Field(default=None, max_length=10, examples=["94110"])

    @field_validator("name", mode="before")
    @classmethod
    def strip_name(cls, v: str) -> str:
        if isinstance(v, str):
            v = v.strip()
        return v


class HouseholdOut(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: int
    name: str
    num_members: int
    sq_ft: Optional[int] = None
    num_vehicles: int
    zipcode: Optional[str] = None
    created_at: Optional[datetime] = None


class HouseholdSummaryOut(BaseModel):
    """Trailing 12-month average kg CO2e per month, by category. Null = never computed."""
    household_id: int
    electricity: Optional[Decimal] = None
    natural_gas: Optional[Decimal] = None
    gasoline: Optional[Decimal] = None
    air_travel: Optional[Decimal] = None
    food: Optional[Decimal] = None
    total_kg: Optional[Decimal] = None
    updated_at: Optional[datetime] = None
