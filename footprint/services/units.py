"""
Unit converter: raw quantity in a source unit -> canonical unit of its category.

Public API
----------
as_decimal(value, field)                                   -> Decimal
convert(amount, from_unit, category, factors)              -> Decimal
convert_between(amount, from_unit, to_unit, category, factors) -> Decimal
derive_quantity_from_cost(quantity, dollars, price_per_unit)   -> Decimal

Factors are category-scoped: `amount_in_end_unit = amount * factor`. When a
pair is only stored in the opposite direction its reciprocal is used. A pair
with no factor at all is an UnsupportedUnitError; there is no implicit 1:1.
"""
from __future__ import annotations

from decimal import Decimal, InvalidOperation
from types import MappingProxyType
from typing import Any, Iterable, Mapping, Optional

from footprint.core.errors import InvalidInputError, UnsupportedUnitError
from footprint.services.categories import Category, CategoryConfig, get_category

# (category, start_unit, end_unit, factor), seeded by migration 0002.
DEFAULT_CONVERSION_FACTORS: tuple[tuple[str, str, str, Decimal], ...] = (
    ("electricity", "mwh", "kwh", Decimal("1000")),
    ("electricity", "wh", "kwh", Decimal("0.001")),
    ("natural_gas", "ccf", "therms", Decimal("1.037")),
    ("natural_gas", "mcf", "therms", Decimal("10.37")),
    ("gasoline", "liters", "gallons", Decimal("0.264172")),
    ("air_travel", "km", "miles", Decimal("0.621371")),
    ("food", "g", "kg", Decimal("0.001")),
    ("food", "lb", "kg", Decimal("0.453592")),
    ("food", "oz", "kg", Decimal("0.0283495")),
)

FactorKey = tuple[str, str, str]


# ---------------------------------------------------------------------------
# Numeric coercion
# ---------------------------------------------------------------------------

def as_decimal(value: Any, field: str) -> Decimal:
    """
    Coerce a numeric input to a finite, non-negative Decimal.

    None, booleans, non-numeric strings, NaN and infinity are rejected rather
    than silently read as zero.
    """
    if value is None:
        raise InvalidInputError(f"{field} is required.", field=field)
    if isinstance(value, bool):
        raise InvalidInputError(f"{field} must be numeric.", field=field)
    try:
        number = value if isinstance(value, Decimal) else Decimal(str(value).strip())
    except (InvalidOperation, ValueError):
        raise InvalidInputError(f"{field} must be numeric, got {value!r}.", field=field) from None
    if not number.is_finite():
        raise InvalidInputError(f"{field} must be a finite number.", field=field)
    if number < 0:
        raise InvalidInputError(f"{field} must not be negative.", field=field)
    return number


def _normalize_unit(unit: Optional[str]) -> str:
    return (unit or "").strip().lower()


# ---------------------------------------------------------------------------
# Factor table
# ---------------------------------------------------------------------------

class ConversionFactorTable:
    """Read-only lookup over category-scoped conversion factors."""

    def __init__(self, factors: Mapping[FactorKey, Decimal] | None = None):
        normalized = {
            (_normalize_unit(c), _normalize_unit(s), _normalize_unit(e)): Decimal(f)
            for (c, s, e), f in (factors or {}).items()
        }
        self._factors = MappingProxyType(normalized)

    @classmethod
    def from_rows(cls, rows: Iterable[Any]) -> "ConversionFactorTable":
        """Build from ConversionFactor rows or (category, start, end, factor) tuples."""
        factors: dict[FactorKey, Decimal] = {}
        for row in rows:
            if isinstance(row, tuple):
                category, start, end, factor = row
            else:
                category, start, end, factor = row.category, row.start_unit, row.end_unit, row.factor
            factors[(category, start, end)] = Decimal(factor)
        return cls(factors)

    @classmethod
    def defaults(cls) -> "ConversionFactorTable":
        return cls.from_rows(DEFAULT_CONVERSION_FACTORS)

    def __len__(self) -> int:
        return len(self._factors)

    def lookup(self, category: str, start_unit: str, end_unit: str) -> Optional[Decimal]:
        """Direct factor, else reciprocal of the inverse pair, else None."""
        category = _normalize_unit(category)
        start_unit = _normalize_unit(start_unit)
        end_unit = _normalize_unit(end_unit)
        direct = self._factors.get((category, start_unit, end_unit))
        if direct is not None:
            return direct
        inverse = self._factors.get((category, end_unit, start_unit))
        if inverse:
            return Decimal(1) / inverse
        return None


# ---------------------------------------------------------------------------
# Conversion
# ---------------------------------------------------------------------------

def _resolve(category: Category | str, unit: str) -> CategoryConfig:
    try:
        return get_category(category)
    except InvalidInputError:
        raise UnsupportedUnitError(str(category), unit) from None


def _check_unit(config: CategoryConfig, unit: str, to_unit: Optional[str] = None) -> None:
    if unit not in config.units:
        raise UnsupportedUnitError(config.category.value, unit, to_unit)


def convert_between(
    amount: Any,
    from_unit: str,
    to_unit: str,
    category: Category | str,
    factors: ConversionFactorTable,
) -> Decimal:
    """Convert `amount` between any two units accepted by the category."""
    quantity = as_decimal(amount, "quantity")
    from_unit = _normalize_unit(from_unit)
    to_unit = _normalize_unit(to_unit)
    config = _resolve(category, from_unit)
    _check_unit(config, from_unit, to_unit)
    _check_unit(config, to_unit, to_unit)

    if from_unit == to_unit:
        return quantity

    factor = factors.lookup(config.category.value, from_unit, to_unit)
    if factor is None:
        raise UnsupportedUnitError(config.category.value, from_unit, to_unit)
    return quantity * factor


def convert(
    amount: Any,
    from_unit: str,
    category: Category | str,
    factors: ConversionFactorTable,
) -> Decimal:
    """Convert `amount` from `from_unit` into the category's canonical unit."""
    config = _resolve(category, _normalize_unit(from_unit))
    return convert_between(amount, from_unit, config.canonical_unit, config.category, factors)


def derive_quantity_from_cost(
    quantity: Any = None,
    dollars: Any = None,
    price_per_unit: Any = None,
) -> Decimal:
    """
    Return the raw quantity, deriving it as dollars / price_per_unit when absent.

    The derivation needs both values present and strictly positive.
    """
    if quantity is not None:
        return as_decimal(quantity, "quantity")
    if dollars is None or price_per_unit is None:
        raise InvalidInputError(
            "Provide a quantity, or both dollars and price_per_unit.", field="quantity"
        )
    spent = as_decimal(dollars, "dollars")
    price = as_decimal(price_per_unit, "price_per_unit")
    if spent == 0:
        raise InvalidInputError("dollars must be greater than zero.", field="dollars")
    if price == 0:
        raise InvalidInputError("price_per_unit must be greater than zero.", field="price_per_unit")
    return spent / price
