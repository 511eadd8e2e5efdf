"""
Per-category configuration records.

One immutable CategoryConfig per consumption category: canonical unit, the
enumerated source units it accepts, how it is dated and the ORM model it
is stored in.
"""
from __future__ import annotations

import enum
from dataclasses import dataclass
from types import MappingProxyType

from footprint.core.errors import InvalidInputError
from footprint.models import (
    AirTrip,
    ElectricityUsage,
    FoodEntry,
    GasolinePurchase,
    NaturalGasUsage,
)


class Category(str, enum.Enum):
    electricity = "electricity"
    natural_gas = "natural_gas"
    gasoline = "gasoline"
    air_travel = "air_travel"
    food = "food"


class Dating(str, enum.Enum):
    billing_period = "billing_period"   # start..end range
    single_date = "single_date"         # period_start == period_end


@dataclass(frozen=True)
class CategoryConfig:
    category: Category
    canonical_unit: str
    units: frozenset[str]
    dating: Dating
    model: type


CATEGORIES: MappingProxyType[Category, CategoryConfig] = MappingProxyType({
    Category.electricity: CategoryConfig(
        category=Category.electricity,
        canonical_unit="kwh",
        units=frozenset({"kwh", "mwh", "wh"}),
        dating=Dating.billing_period,
        model=ElectricityUsage,
    ),
    Category.natural_gas: CategoryConfig(
        category=Category.natural_gas,
        canonical_unit="therms",
        units=frozenset({"therms", "ccf", "mcf"}),
        dating=Dating.billing_period,
        model=NaturalGasUsage,
    ),
    Category.gasoline: CategoryConfig(
        category=Category.gasoline,
        canonical_unit="gallons",
        units=frozenset({"gallons", "liters"}),
        dating=Dating.single_date,
        model=GasolinePurchase,
    ),
    Category.air_travel: CategoryConfig(
        category=Category.air_travel,
        canonical_unit="miles",
        units=frozenset({"miles", "km"}),
        dating=Dating.single_date,
        model=AirTrip,
    ),
    Category.food: CategoryConfig(
        category=Category.food,
        canonical_unit="kg",
        units=frozenset({"kg", "g", "lb", "oz"}),
        dating=Dating.single_date,
        model=FoodEntry,
    ),
})


def get_category(category: Category | str) -> CategoryConfig:
    """Resolve a category by enum, value or URL segment."""
    if isinstance(category, Category):
        return CATEGORIES[category]
    key = str(category).strip().lower().replace("-", "_")
    try:
        return CATEGORIES[Category(key)]
    except ValueError:
        raise InvalidInputError(f"Unknown category: {category!r}", field="category") from None
