"""
Tests for the unit converter: canonical conversion, reciprocal lookups,
derive-from-cost and input validation.
"""
from decimal import Decimal

import pytest

from footprint.core.errors import InvalidInputError, UnsupportedUnitError
from footprint.models import ConversionFactor, FoodEntry
from footprint.services.categories import Category, Dating, get_category
from footprint.services.units import (
    DEFAULT_CONVERSION_FACTORS,
    ConversionFactorTable,
    as_decimal,
    convert,
    convert_between,
    derive_quantity_from_cost,
)

FACTORS = ConversionFactorTable.defaults()


class TestConvert:
    def test_canonical_unit_is_returned_unchanged(self):
        assert convert(Decimal("42.5"), "therms", "natural_gas", FACTORS) == Decimal("42.5")

    def test_ccf_to_therms_uses_stored_factor(self):
        table = ConversionFactorTable({("natural_gas", "ccf", "therms"): Decimal("0.96")})
        assert convert(100, "ccf", "natural_gas", table) == Decimal("96")

    def test_seeded_factors(self):
        assert convert(10, "mcf", "natural_gas", FACTORS) == Decimal("103.70")
        assert convert(2, "mwh", "electricity", FACTORS) == Decimal("2000")
        assert convert(1000, "g", "food", FACTORS) == Decimal("1.000")

    def test_unit_and_category_are_case_insensitive(self):
        assert convert(1, " CCF ", "natural-gas", FACTORS) == Decimal("1.037")

    def test_inverse_pair_uses_reciprocal(self):
        table = ConversionFactorTable({("gasoline", "gallons", "liters"): Decimal("4")})
        assert convert(8, "liters", "gasoline", table) == Decimal("2")

    def test_missing_factor_raises_unsupported_unit(self):
        empty = ConversionFactorTable()
        with pytest.raises(UnsupportedUnitError) as exc:
            convert(5, "ccf", "natural_gas", empty)
        assert exc.value.details["from_unit"] == "ccf"
        assert exc.value.details["to_unit"] == "therms"

    def test_unit_outside_category_raises_unsupported_unit(self):
        with pytest.raises(UnsupportedUnitError):
            convert(5, "liters", "electricity", FACTORS)

    def test_unknown_category_raises_unsupported_unit(self):
        with pytest.raises(UnsupportedUnitError):
            convert(5, "kwh", "solar", FACTORS)


class TestRoundTrip:
    @pytest.mark.parametrize("category,unit", [
        ("natural_gas", "ccf"),
        ("natural_gas", "mcf"),
        ("gasoline", "liters"),
        ("air_travel", "km"),
        ("food", "oz"),
    ])
    def test_convert_and_back(self, category, unit):
        canonical = convert(Decimal("123.45"), unit, category, FACTORS)
        config_unit = {
            "natural_gas": "therms", "gasoline": "gallons", "air_travel": "miles", "food": "kg",
        }[category]
        back = convert_between(canonical, config_unit, unit, category, FACTORS)
        assert abs(back - Decimal("123.45")) < Decimal("1e-9")


class TestDeriveFromCost:
    def test_dollars_over_price(self):
        assert derive_quantity_from_cost(None, Decimal("30"), Decimal("3.75")) == Decimal("8")

    def test_explicit_quantity_wins(self):
        assert derive_quantity_from_cost(Decimal("5"), Decimal("30"), Decimal("3.75")) == Decimal("5")

    def test_no_quantity_and_no_cost_pair(self):
        with pytest.raises(InvalidInputError):
            derive_quantity_from_cost(None, Decimal("30"), None)

    @pytest.mark.parametrize("dollars,price", [(0, 3), (30, 0)])
    def test_zero_cost_values_rejected(self, dollars, price):
        with pytest.raises(InvalidInputError):
            derive_quantity_from_cost(None, dollars, price)


class TestAsDecimal:
    @pytest.mark.parametrize("value", [None, "abc", float("nan"), float("inf"), -1, True])
    def test_rejects_bad_input(self, value):
        with pytest.raises(InvalidInputError):
            as_decimal(value, "quantity")

    def test_float_is_read_through_str(self):
        assert as_decimal(0.1, "quantity") == Decimal("0.1")


class TestStoredFactors:
    def test_seeded_table_is_loaded(self, store):
        table = store.load_conversion_factors()
        assert table.lookup("natural_gas", "mcf", "therms") == Decimal("10.37")
        assert convert(Decimal("2"), "mwh", "electricity", table) == Decimal("2000")

    def test_empty_table_falls_back_to_built_in_factors(self, store, db):
        db.query(ConversionFactor).delete()
        try:
            table = store.load_conversion_factors()
            assert len(table) == len(DEFAULT_CONVERSION_FACTORS)
        finally:
            db.rollback()


class TestCategories:
    @pytest.mark.parametrize("name", ["natural-gas", "natural_gas", " Natural_Gas ", Category.natural_gas])
    def test_resolves_enum_value_or_url_segment(self, name):
        config = get_category(name)
        assert config.category is Category.natural_gas
        assert config.canonical_unit == "therms"
        assert config.dating is Dating.billing_period

    def test_single_date_categories(self):
        assert get_category("air-travel").dating is Dating.single_date
        assert get_category("food").model is FoodEntry

    def test_unknown_category(self):
        with pytest.raises(InvalidInputError):
            get_category("solar")
