from decimal import Decimal

import pytest

from pricing_engine import AircraftPricingOverride, InvalidCatalog, InvalidOverride, resolve_aircraft_price
from pricing_engine.overrides import SOURCE_COMPUTED, SOURCE_OVERRIDE, validate_override

SELECTION = {"tier_id": "performance", "usage_band_id": "20-50", "addon_ids": [], "location_id": None}


def test_no_override_returns_computed_price(payload):
    price = resolve_aircraft_price("ac-1", SELECTION, payload)

    assert price.source == SOURCE_COMPUTED
    assert price.total == Decimal("2392.50")
    assert price.stale_override is False


def test_monthly_override_replaces_service_price(payload):
    price = resolve_aircraft_price("ac-1", SELECTION, payload, override={"aircraft_id": "ac-1", "override_monthly": 1200})

    assert price.source == SOURCE_OVERRIDE
    assert price.service_price == Decimal("1200")
    assert price.total == Decimal("1200")
    # the computed breakdown is still reported alongside
    assert price.computed.total == Decimal("2392.50")


def test_hangar_override_keeps_computed_service_price(payload):
    selection = dict(SELECTION, location_id="sky-harbour")
    price = resolve_aircraft_price(
        "ac-2", selection, payload, override={"aircraft_id": "ac-2", "override_hangar_cost": 1500},
    )

    assert price.service_price == Decimal("2392.50")
    assert price.hangar_cost == Decimal("1500")
    assert price.total == Decimal("3892.50")


def test_both_overrides(payload):
    selection = dict(SELECTION, location_id="sky-harbour")
    override = AircraftPricingOverride.from_row({
        "aircraft_id": "ac-3", "override_monthly": "1800", "override_hangar_cost": "1000",
    })
    price = resolve_aircraft_price("ac-3", selection, payload, override=override)
    assert price.total == Decimal("2800")


def test_scoped_override_only_applies_on_its_location(payload):
    override = {"aircraft_id": "ac-4", "override_monthly": 1000, "location_id": "fa-hangar"}

    elsewhere = resolve_aircraft_price("ac-4", dict(SELECTION, location_id="sky-harbour"), payload, override=override)
    assert elsewhere.source == SOURCE_COMPUTED

    there = resolve_aircraft_price("ac-4", dict(SELECTION, location_id="fa-hangar"), payload, override=override)
    assert there.source == SOURCE_OVERRIDE
    assert there.total == Decimal("1900")


def test_override_for_removed_location_falls_back_to_computed(payload):
    override = {"aircraft_id": "ac-5", "override_monthly": 900, "location_id": "closed-hangar"}
    price = resolve_aircraft_price("ac-5", SELECTION, payload, override=override)

    assert price.source == SOURCE_COMPUTED
    assert price.total == Decimal("2392.50")
    assert price.stale_override is True
    assert "closed-hangar" in price.stale_reason


def test_override_for_missing_aircraft_is_stale(payload):
    override = AircraftPricingOverride.from_row({"aircraft_id": "ac-6", "override_monthly": 900})
    with pytest.raises(InvalidOverride):
        validate_override(override, payload, aircraft_exists=False)

    price = resolve_aircraft_price("ac-6", SELECTION, payload, override=override, aircraft_exists=False)
    assert price.stale_override is True


def test_override_row_validation():
    with pytest.raises(InvalidCatalog):
        AircraftPricingOverride.from_row({"override_monthly": 100})
    with pytest.raises(InvalidCatalog):
        AircraftPricingOverride.from_row({"aircraft_id": "ac-7", "override_monthly": -1})
    assert AircraftPricingOverride.from_row({"aircraft_id": "ac-7", "override_monthly": ""}).is_empty


def test_price_to_dict(payload):
    data = resolve_aircraft_price("ac-1", SELECTION, payload, override={"aircraft_id": "ac-1", "override_monthly": 1200}).to_dict()
    assert data["source"] == "override"
    assert data["total"] == 1200.0
    assert data["computed"]["total"] == 2392.5


def test_override_scoped_by_location_slug(catalog_state):
    catalog_state["locations"].append({
        "id": "loc-7", "name": "North Ramp", "slug": "north-ramp", "hangar_cost_monthly": 300,
    })
    override = {"aircraft_id": "ac-8", "override_monthly": 1000, "location_id": "north-ramp"}

    price = resolve_aircraft_price("ac-8", dict(SELECTION, location_id="loc-7"), catalog_state, override=override)
    assert price.source == SOURCE_OVERRIDE
    assert price.total == Decimal("1300")

    elsewhere = resolve_aircraft_price("ac-8", dict(SELECTION, location_id="fa-hangar"), catalog_state, override=override)
    assert elsewhere.source == SOURCE_COMPUTED
