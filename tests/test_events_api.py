"""
HTTP tests for the consumption event lifecycle.

Each test gets a fresh household (see the `household_id` fixture) and dates
relative to the current month, so the trailing window always covers them.
"""
from __future__ import annotations

from decimal import Decimal

from footprint.core.config import settings
from footprint.core.errors import StoreError
from footprint.main import app
from footprint.routers.deps import get_conversion_factors
from footprint.services.units import ConversionFactorTable
from conftest import months_ago


def D(value) -> Decimal:
    return Decimal(str(value))


def _bill(months: int, quantity="100", **extra) -> dict:
    payload = {
        "period_start": months_ago(months, day=3).isoformat(),
        "period_end": months_ago(months, day=27).isoformat(),
        "quantity": quantity,
    }
    payload.update(extra)
    return payload


# ---------------------------------------------------------------------------
# Reference scenarios
# ---------------------------------------------------------------------------

class TestReferenceScenarios:
    def test_natural_gas_ccf(self, client, household_id):
        app.dependency_overrides[get_conversion_factors] = lambda: ConversionFactorTable(
            {("natural_gas", "ccf", "therms"): Decimal("0.96")}
        )
        r = client.post(f"/households/{household_id}/natural-gas", json=_bill(1, unit="ccf"))
        assert r.status_code == 201
        body = r.json()
        assert body["category"] == "natural_gas"
        assert D(body["event"]["canonical_quantity"]) == Decimal("96")
        assert D(body["event"]["co2e_kg"]) == Decimal("507.936")
        assert D(body["household_average_kg"]) == Decimal("42.328")
        assert body["warning"] is None

    def test_gasoline_from_dollars(self, client, household_id):
        r = client.post(f"/households/{household_id}/gasoline", json={
            "occurred_on": months_ago(2).isoformat(),
            "dollars": "30",
            "price_per_unit": "3.75",
        })
        assert r.status_code == 201
        event = r.json()["event"]
        assert D(event["quantity"]) == Decimal("8")
        assert D(event["co2e_kg"]) == Decimal("75.68")
        assert event["occurred_on"] == months_ago(2).isoformat()

    def test_air_travel_direct_entry(self, client, household_id):
        r = client.post(f"/households/{household_id}/air-travel", json={
            "leave_date": months_ago(1).isoformat(),
            "direct_entry": True,
            "co2e_kg_per_trip": "250",
            "num_travelers": 3,
        })
        assert r.status_code == 201
        event = r.json()["event"]
        assert D(event["co2e_kg"]) == Decimal("750")
        assert event["direct_entry"] is True
        assert event["distance"] is None

    def test_three_months_average(self, client, household_id):
        for months in (1, 2, 3):
            r = client.post(
                f"/households/{household_id}/electricity",
                json=_bill(months, quantity="100", carbon_intensity="1"),
            )
            assert r.status_code == 201
        assert D(r.json()["household_average_kg"]) == Decimal("25")

        summary = client.get(f"/households/{household_id}/summary").json()
        assert D(summary["electricity"]) == Decimal("25")
        assert summary["natural_gas"] is None
        assert D(summary["total_kg"]) == Decimal("25")


# ---------------------------------------------------------------------------
# Per-category recording
# ---------------------------------------------------------------------------

class TestRecording:
    def test_electricity_default_intensity(self, client, household_id):
        r = client.post(f"/households/{household_id}/electricity", json=_bill(1, quantity="2", unit="mwh"))
        assert r.status_code == 201
        event = r.json()["event"]
        assert D(event["canonical_quantity"]) == Decimal("2000")
        assert D(event["co2e_kg"]) == Decimal("0.8")
        assert event["carbon_intensity"] is None

    def test_air_travel_distance_in_km(self, client, household_id):
        r = client.post(f"/households/{household_id}/air-travel", json={
            "leave_date": months_ago(1).isoformat(),
            "return_date": months_ago(1, day=17).isoformat(),
            "roundtrip": True,
            "origin": "SFO",
            "destination": "JFK",
            "distance": "1000",
            "unit": "km",
            "num_travelers": 2,
        })
        assert r.status_code == 201
        event = r.json()["event"]
        assert D(event["canonical_quantity"]) == Decimal("621.371")
        assert D(event["co2e_kg"]) == Decimal("0.2485")
        assert event["num_travelers"] == 2
        assert event["roundtrip"] is True

    def test_air_travel_requires_distance_without_direct_entry(self, client, household_id):
        r = client.post(f"/households/{household_id}/air-travel", json={
            "leave_date": months_ago(1).isoformat(),
        })
        assert r.status_code == 422
        assert r.json()["code"] == "VALIDATION_ERROR"

    def test_food_entry_sums_items(self, client, household_id):
        r = client.post(f"/households/{household_id}/food", json={
            "occurred_on": months_ago(1).isoformat(),
            "entry_type": "grocery",
            "items": [
                {"item": "Ground beef", "food_category": "meat", "quantity": "500", "unit": "g"},
                {"item": "Milk", "food_category": "dairy", "quantity": "1"},
            ],
        })
        assert r.status_code == 201
        event = r.json()["event"]
        assert D(event["co2e_kg"]) == Decimal("26.5")
        assert [d["item"] for d in event["details"]] == ["Ground beef", "Milk"]
        assert D(event["details"][0]["canonical_quantity"]) == Decimal("0.5")

    def test_food_entry_total_matches_stored_items(self, client, household_id):
        # 1 oz = 0.0283495 kg at 2.5 kg/kg -> 0.07087375, stored as 0.0709
        r = client.post(f"/households/{household_id}/food", json={
            "occurred_on": months_ago(1).isoformat(),
            "items": [
                {"item": "Crackers", "food_category": "other", "quantity": "1", "unit": "oz"},
                {"item": "Cookies", "food_category": "other", "quantity": "1", "unit": "oz"},
            ],
        })
        assert r.status_code == 201
        event = r.json()["event"]
        assert [D(d["co2e_kg"]) for d in event["details"]] == [Decimal("0.0709"), Decimal("0.0709")]
        assert D(event["co2e_kg"]) == Decimal("0.1418")
        assert D(event["co2e_kg"]) == sum(D(d["co2e_kg"]) for d in event["details"])

    def test_food_entry_needs_items(self, client, household_id):
        r = client.post(f"/households/{household_id}/food", json={
            "occurred_on": months_ago(1).isoformat(), "items": [],
        })
        assert r.status_code == 422

    def test_gasoline_without_quantity_or_cost(self, client, household_id):
        r = client.post(f"/households/{household_id}/gasoline", json={
            "occurred_on": months_ago(1).isoformat(),
            "dollars": "30",
        })
        assert r.status_code == 422
        assert r.json()["code"] == "INVALID_INPUT"
        assert client.get(f"/households/{household_id}/gasoline").json()["count"] == 0

    def test_unknown_household(self, client):
        r = client.post("/households/999999/electricity", json=_bill(1))
        assert r.status_code == 404
        assert r.json()["code"] == "HOUSEHOLD_NOT_FOUND"


# ---------------------------------------------------------------------------
# Unit handling
# ---------------------------------------------------------------------------

class TestUnits:
    def test_missing_factor_rejects_event(self, client, household_id):
        app.dependency_overrides[get_conversion_factors] = lambda: ConversionFactorTable()
        r = client.post(f"/households/{household_id}/natural-gas", json=_bill(1, unit="mcf"))
        assert r.status_code == 422
        body = r.json()
        assert body["code"] == "UNSUPPORTED_UNIT"
        assert body["details"]["from_unit"] == "mcf"
        assert client.get(f"/households/{household_id}/natural-gas").json()["count"] == 0

    def test_fallback_treats_amount_as_canonical(self, client, household_id, monkeypatch):
        monkeypatch.setattr(settings, "UNKNOWN_UNIT_FALLBACK", True)
        app.dependency_overrides[get_conversion_factors] = lambda: ConversionFactorTable()
        r = client.post(f"/households/{household_id}/natural-gas", json=_bill(1, quantity="10", unit="mcf"))
        assert r.status_code == 201
        event = r.json()["event"]
        assert D(event["canonical_quantity"]) == Decimal("10")
        assert D(event["co2e_kg"]) == Decimal("52.91")

    def test_unit_outside_category_is_a_validation_error(self, client, household_id):
        r = client.post(f"/households/{household_id}/electricity", json=_bill(1, unit="liters"))
        assert r.status_code == 422
        assert r.json()["code"] == "VALIDATION_ERROR"

    def test_period_end_before_start(self, client, household_id):
        payload = _bill(1)
        payload["period_start"], payload["period_end"] = payload["period_end"], payload["period_start"]
        r = client.post(f"/households/{household_id}/electricity", json=payload)
        assert r.status_code == 422
        assert r.json()["code"] == "VALIDATION_ERROR"


# ---------------------------------------------------------------------------
# Edit / delete / list
# ---------------------------------------------------------------------------

class TestLifecycle:
    def test_edit_replaces_in_place_and_recomputes(self, client, household_id):
        ids = []
        for months in (1, 2, 3):
            r = client.post(
                f"/households/{household_id}/electricity",
                json=_bill(months, quantity="100", carbon_intensity="1"),
            )
            ids.append(r.json()["event"]["id"])

        r = client.put(
            f"/households/{household_id}/electricity/{ids[0]}",
            json=_bill(1, quantity="400", carbon_intensity="1"),
        )
        assert r.status_code == 200
        body = r.json()
        assert body["event"]["id"] == ids[0]
        assert D(body["event"]["co2e_kg"]) == Decimal("400")
        assert D(body["household_average_kg"]) == Decimal("50")

        listed = client.get(f"/households/{household_id}/electricity").json()
        assert listed["count"] == 3

    def test_edit_food_replaces_items(self, client, household_id):
        r = client.post(f"/households/{household_id}/food", json={
            "occurred_on": months_ago(1).isoformat(),
            "items": [{"item": "Cheese", "food_category": "dairy", "quantity": "1"}],
        })
        entry_id = r.json()["event"]["id"]

        r = client.put(f"/households/{household_id}/food/{entry_id}", json={
            "occurred_on": months_ago(1).isoformat(),
            "items": [
                {"item": "Rice", "food_category": "grains", "quantity": "2"},
                {"item": "Apples", "food_category": "produce", "quantity": "1", "carbon_intensity": "0"},
            ],
        })
        assert r.status_code == 200
        event = r.json()["event"]
        assert [d["item"] for d in event["details"]] == ["Rice", "Apples"]
        assert D(event["co2e_kg"]) == Decimal("5.4")

    def test_edit_unknown_event(self, client, household_id):
        r = client.put(f"/households/{household_id}/electricity/999999", json=_bill(1))
        assert r.status_code == 404
        assert r.json()["code"] == "EVENT_NOT_FOUND"

    def test_cannot_touch_another_households_event(self, client, household_id):
        other = client.post("/households", json={"name": "Neighbours"}).json()["id"]
        event_id = client.post(f"/households/{other}/electricity", json=_bill(1)).json()["event"]["id"]

        assert client.delete(f"/households/{household_id}/electricity/{event_id}").status_code == 404
        assert client.get(f"/households/{other}/electricity").json()["count"] == 1

    def test_delete_recomputes_and_second_delete_is_404(self, client, household_id):
        ids = [
            client.post(
                f"/households/{household_id}/electricity",
                json=_bill(months, quantity="120", carbon_intensity="1"),
            ).json()["event"]["id"]
            for months in (1, 2)
        ]

        r = client.delete(f"/households/{household_id}/electricity/{ids[0]}")
        assert r.status_code == 200
        assert r.json()["deleted_id"] == ids[0]
        assert D(r.json()["household_average_kg"]) == Decimal("10")

        r = client.delete(f"/households/{household_id}/electricity/{ids[0]}")
        assert r.status_code == 404
        assert r.json()["code"] == "EVENT_NOT_FOUND"

    def test_deleting_last_event_leaves_stored_average(self, client, household_id):
        event_id = client.post(
            f"/households/{household_id}/gasoline",
            json={"occurred_on": months_ago(1).isoformat(), "quantity": "12", "carbon_intensity": "1"},
        ).json()["event"]["id"]

        r = client.delete(f"/households/{household_id}/gasoline/{event_id}")
        assert r.status_code == 200
        assert r.json()["household_average_kg"] is None

        summary = client.get(f"/households/{household_id}/summary").json()
        assert D(summary["gasoline"]) == Decimal("1")

    def test_list_is_ordered_and_filterable(self, client, household_id):
        for months in (1, 3, 2):
            client.post(f"/households/{household_id}/electricity", json=_bill(months))

        events = client.get(f"/households/{household_id}/electricity").json()["events"]
        starts = [e["period_start"] for e in events]
        assert starts == sorted(starts)

        r = client.get(
            f"/households/{household_id}/electricity",
            params={"start": months_ago(2, day=1).isoformat()},
        )
        assert r.json()["count"] == 2

    def test_unknown_category_path(self, client, household_id):
        r = client.get(f"/households/{household_id}/solar")
        assert r.status_code == 422
        assert r.json()["code"] == "VALIDATION_ERROR"


# ---------------------------------------------------------------------------
# Monthly series
# ---------------------------------------------------------------------------

class TestMonthlySeries:
    def test_zero_filled_series(self, client, household_id):
        client.post(f"/households/{household_id}/electricity", json=_bill(3, quantity="10", carbon_intensity="1"))
        client.post(f"/households/{household_id}/electricity", json=_bill(1, quantity="30", carbon_intensity="1"))

        r = client.get(f"/households/{household_id}/electricity/monthly")
        assert r.status_code == 200
        months = r.json()["months"]
        assert [m["month"] for m in months] == [
            months_ago(3).strftime("%Y-%m"),
            months_ago(2).strftime("%Y-%m"),
            months_ago(1).strftime("%Y-%m"),
        ]
        assert [D(m["total_co2e_kg"]) for m in months] == [Decimal("10"), Decimal("0"), Decimal("30")]

    def test_requested_range(self, client, household_id):
        client.post(f"/households/{household_id}/electricity", json=_bill(2, quantity="10", carbon_intensity="1"))
        r = client.get(
            f"/households/{household_id}/natural-gas/monthly",
            params={"start": months_ago(3, day=1).isoformat(), "end": months_ago(0, day=1).isoformat()},
        )
        months = r.json()["months"]
        assert len(months) == 4
        assert all(D(m["total_co2e_kg"]) == 0 for m in months)

    def test_start_only_runs_through_current_month(self, client, household_id):
        r = client.get(
            f"/households/{household_id}/food/monthly",
            params={"start": months_ago(2, day=1).isoformat()},
        )
        assert r.status_code == 200
        months = r.json()["months"]
        assert [m["month"] for m in months] == [
            months_ago(2).strftime("%Y-%m"),
            months_ago(1).strftime("%Y-%m"),
            months_ago(0).strftime("%Y-%m"),
        ]
        assert all(D(m["total_co2e_kg"]) == 0 for m in months)

    def test_empty_category_without_range(self, client, household_id):
        r = client.get(f"/households/{household_id}/food/monthly")
        assert r.json()["months"] == []


# ---------------------------------------------------------------------------
# Non-fatal recompute failures
# ---------------------------------------------------------------------------

class TestRecomputeFailure:
    def test_event_saved_with_warning(self, client, household_id, monkeypatch):
        def broken(*args, **kwargs):
            raise StoreError("summary table unavailable")

        monkeypatch.setattr("footprint.services.footprint.update_household_average", broken)
        r = client.post(f"/households/{household_id}/electricity", json=_bill(1))

        assert r.status_code == 201
        body = r.json()
        assert body["household_average_kg"] is None
        assert "could not be recomputed" in body["warning"]
        assert client.get(f"/households/{household_id}/electricity").json()["count"] == 1
