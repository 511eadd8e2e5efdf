"""
Emission calculator: canonical quantity + carbon intensity -> kg CO2e.

Standard   co2e = canonical_quantity * intensity
Air travel co2e = distance * traveler_count * intensity
Direct     co2e = direct_value * traveler_count      (air travel only)

`intensity=None` means "use the category default"; an explicit 0 is kept.
Defaults live in an immutable IntensityDefaults record built once from
settings and passed in by the caller.
"""
from __future__ import annotations

from dataclasses import dataclass, field
from decimal import Decimal
from types import MappingProxyType
from typing import Any, Mapping, Optional

from footprint.core.config import Settings, settings
from footprint.core.errors import InvalidInputError
from footprint.services.categories import Category, get_category
from footprint.services.units import as_decimal

# kg CO2e per kg of food, by food category.
FOOD_CATEGORY_INTENSITIES: Mapping[str, Decimal] = MappingProxyType({
    "meat": Decimal("27.0"),
    "dairy": Decimal("13.0"),
    "produce": Decimal("2.0"),
    "grains": Decimal("2.7"),
    "processed": Decimal("4.0"),
    "other": Decimal("2.5"),
})

FOOD_CATEGORIES = tuple(FOOD_CATEGORY_INTENSITIES)


@dataclass(frozen=True)
class IntensityDefaults:
    electricity: Decimal
    natural_gas: Decimal
    gasoline: Decimal
    air_travel: Decimal
    food: Mapping[str, Decimal] = field(default_factory=lambda: FOOD_CATEGORY_INTENSITIES)

    @classmethod
    def from_settings(cls, config: Settings) -> "IntensityDefaults":
        return cls(
            electricity=config.DEFAULT_CI_ELECTRICITY,
            natural_gas=config.DEFAULT_CI_NATURAL_GAS,
            gasoline=config.DEFAULT_CI_GASOLINE,
            air_travel=config.DEFAULT_CI_AIR_TRAVEL,
        )

    def for_category(self, category: Category, food_category: Optional[str] = None) -> Decimal:
        if category is Category.food:
            key = (food_category or "other").strip().lower()
            if key not in self.food:
                raise InvalidInputError(
                    f"Unknown food category: {food_category!r}", field="food_category"
                )
            return self.food[key]
        return getattr(self, category.value)


DEFAULT_INTENSITIES = IntensityDefaults.from_settings(settings)


def get_intensity_defaults() -> IntensityDefaults:
    """FastAPI dependency; tests override it to inject a custom table."""
    return DEFAULT_INTENSITIES


def _traveler_count(value: Any) -> int:
    if value is None:
        return 1
    if isinstance(value, bool) or not isinstance(value, int) or value < 1:
        raise InvalidInputError(
            "traveler_count must be a positive integer.", field="num_travelers"
        )
    return value


def calculate(
    category: Category | str,
    canonical_quantity: Any = None,
    intensity: Any = None,
    traveler_count: Any = None,
    direct_value: Any = None,
    *,
    direct_entry: bool = False,
    food_category: Optional[str] = None,
    defaults: IntensityDefaults = DEFAULT_INTENSITIES,
) -> Decimal:
    """Return the event's emissions in kg CO2e (never negative)."""
    category = get_category(category).category

    if direct_entry:
        if category is not Category.air_travel:
            raise InvalidInputError(
                f"Direct CO2e entry is only supported for air travel, not {category.value}.",
                field="direct_entry",
            )
        per_trip = as_decimal(direct_value, "co2e_kg_per_trip")
        return per_trip * _traveler_count(traveler_count)

    quantity = as_decimal(canonical_quantity, "quantity")
    if intensity is None:
        factor = defaults.for_category(category, food_category)
    else:
        factor = as_decimal(intensity, "carbon_intensity")

    if category is Category.air_travel:
        return quantity * _traveler_count(traveler_count) * factor
    return quantity * factor
