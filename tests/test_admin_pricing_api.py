from conftest import ADMIN_HEADERS


def test_admin_routes_require_token(seeded_db, client):
    assert client.get("/api/admin/pricing/tiers").status_code == 401
    response = client.get("/api/admin/pricing/tiers", headers={"Authorization": "Bearer wrong"})
    assert response.status_code == 401


def test_admin_api_disabled_without_configured_token(seeded_db, client):
    from app import app
    app.config["ADMIN_API_TOKEN"] = None
    assert client.get("/api/admin/pricing/tiers", headers=ADMIN_HEADERS).status_code == 503


def test_live_catalog(seeded_db, client):
    data = client.get("/api/admin/pricing/catalog", headers=ADMIN_HEADERS).get_json()
    assert data["problems"] == []
    assert len(data["catalog"]["tiers"]) == 3


def test_list_and_save_tiers(seeded_db, client):
    data = client.get("/api/admin/pricing/tiers", headers=ADMIN_HEADERS).get_json()
    assert data["count"] == 3

    response = client.post("/api/admin/pricing/tiers", json={
        "id": "jet", "name": "Light Jet", "base_monthly": 5200, "sort_order": 4,
    }, headers=ADMIN_HEADERS)
    assert response.status_code == 200
    assert response.get_json()["row"]["id"] == "jet"
    assert client.get("/api/admin/pricing/tiers", headers=ADMIN_HEADERS).get_json()["count"] == 4


def test_invalid_row_reports_problems(seeded_db, client):
    response = client.post("/api/admin/pricing/addons", json={"id": "odd", "price": -10}, headers=ADMIN_HEADERS)
    data = response.get_json()
    assert response.status_code == 400
    assert data["problems"]


def test_deactivate_and_activate(seeded_db, client):
    response = client.post("/api/admin/pricing/addons/gpu/deactivate", headers=ADMIN_HEADERS)
    assert response.status_code == 200
    assert response.get_json()["row"]["active"] is False

    active = client.get("/api/admin/pricing/addons?include_inactive=0", headers=ADMIN_HEADERS).get_json()
    assert "gpu" not in [row["id"] for row in active["addons"]]

    response = client.post("/api/admin/pricing/addons/gpu/activate", headers=ADMIN_HEADERS)
    assert response.get_json()["row"]["active"] is True

    assert client.post("/api/admin/pricing/tiers/blimp/deactivate", headers=ADMIN_HEADERS).status_code == 404


def test_usage_bands(seeded_db, client):
    bands = client.get("/api/admin/pricing/usage-bands", headers=ADMIN_HEADERS).get_json()["usage_bands"]
    assert [b["id"] for b in bands] == ["0-20", "20-50", "50+"]

    response = client.put("/api/admin/pricing/usage-bands", json={"usage_bands": [
        {"id": "low", "min_hours": 0, "max_hours": 25, "multiplier": 1},
        {"id": "high", "min_hours": 30, "multiplier": 1.5},
    ]}, headers=ADMIN_HEADERS)
    assert response.status_code == 400
    assert any("Gap" in p for p in response.get_json()["problems"])

    response = client.put("/api/admin/pricing/usage-bands", json={"usage_bands": [
        {"id": "low", "min_hours": 0, "max_hours": 30, "multiplier": 1},
        {"id": "high", "min_hours": 30, "multiplier": 1.5},
    ]}, headers=ADMIN_HEADERS)
    assert response.status_code == 200
    assert len(response.get_json()["usage_bands"]) == 2

    assert client.put("/api/admin/pricing/usage-bands", json={}, headers=ADMIN_HEADERS).status_code == 400


def test_assumptions(seeded_db, client):
    response = client.put("/api/admin/pricing/assumptions", json={"labor_rate": 55}, headers=ADMIN_HEADERS)
    assert response.status_code == 200

    data = client.get("/api/admin/pricing/assumptions", headers=ADMIN_HEADERS).get_json()
    assert data["assumptions"]["labor_rate"] == 55
    assert data["assumptions"]["cfi_allocation"] == 150

    response = client.put("/api/admin/pricing/assumptions", json={"card_fee_pct": "abc"}, headers=ADMIN_HEADERS)
    assert response.status_code == 400


def test_overrides(seeded_db, client):
    response = client.post("/api/admin/pricing/overrides", json={"aircraft_id": "ac-1", "override_monthly": 1200}, headers=ADMIN_HEADERS)
    assert response.status_code == 200
    assert response.get_json()["override"]["stale"] is False

    assert client.get("/api/admin/pricing/overrides", headers=ADMIN_HEADERS).get_json()["count"] == 1
    assert client.post("/api/admin/pricing/overrides", json={"override_monthly": 5}, headers=ADMIN_HEADERS).status_code == 400

    assert client.delete("/api/admin/pricing/overrides/ac-1", headers=ADMIN_HEADERS).status_code == 200
    assert client.delete("/api/admin/pricing/overrides/ac-1", headers=ADMIN_HEADERS).status_code == 404


def test_publish_requires_label(seeded_db, client):
    response = client.post("/api/admin/pricing/publish", json={}, headers=ADMIN_HEADERS)
    assert response.status_code == 400


def test_publish_and_history(seeded_db, client):
    response = client.post("/api/admin/pricing/publish", json={"label": "Q1"}, headers=ADMIN_HEADERS)
    assert response.status_code == 201
    first_id = response.get_json()["snapshot"]["id"]
    client.post("/api/admin/pricing/publish", json={"label": "Q2"}, headers=ADMIN_HEADERS)

    history = client.get("/api/admin/pricing/snapshots", headers=ADMIN_HEADERS).get_json()
    assert history["count"] == 2
    assert history["snapshots"][-1]["id"] == first_id
    assert "payload" not in history["snapshots"][0]

    assert client.get("/api/admin/pricing/snapshots?limit=x", headers=ADMIN_HEADERS).status_code == 400


def test_publish_rejects_broken_catalog(seeded_db, client):
    for tier_id in ("light", "performance", "turbine"):
        client.post(f"/api/admin/pricing/tiers/{tier_id}/deactivate", headers=ADMIN_HEADERS)

    response = client.post("/api/admin/pricing/publish", json={"label": "Nothing to sell"}, headers=ADMIN_HEADERS)
    assert response.status_code == 400
    assert client.get("/api/pricing/snapshot/latest").status_code == 404


def test_margins(seeded_db, client):
    margins = client.get("/api/admin/pricing/margins", headers=ADMIN_HEADERS).get_json()["margins"]
    assert len(margins) == 9

    light_low = next(m for m in margins if m["tier_id"] == "light" and m["usage_band_id"] == "0-20")
    assert light_low["final_price"] == 850.0
    assert light_low["total_cost"] == 635.0

    with_hangar = client.get("/api/admin/pricing/margins?location_id=fa-hangar", headers=ADMIN_HEADERS).get_json()["margins"]
    assert with_hangar[0]["hangar_cost"] == 900.0

    assert client.get("/api/admin/pricing/margins?snapshot_id=000000000000000000000000", headers=ADMIN_HEADERS).status_code == 404


def test_non_finite_price_is_rejected_and_never_published(seeded_db, client):
    for amount in ("Infinity", "NaN"):
        response = client.post("/api/admin/pricing/tiers", json={"id": "light", "base_monthly": amount}, headers=ADMIN_HEADERS)
        assert response.status_code == 400
        assert response.get_json()["problems"]

    client.post("/api/admin/pricing/publish", json={"label": "Q1"}, headers=ADMIN_HEADERS)
    assert client.get("/api/pricing/info").status_code == 200
    assert client.get("/api/pricing/starting-prices").get_json()["startingPrices"]["light"] == 850.0


def test_bad_sort_order_is_rejected(seeded_db, client):
    response = client.post("/api/admin/pricing/tiers", json={"id": "jet", "base_monthly": 5000, "sort_order": "abc"}, headers=ADMIN_HEADERS)
    assert response.status_code == 400


def test_duplicate_band_ids_are_rejected(seeded_db, client):
    response = client.put("/api/admin/pricing/usage-bands", json={"usage_bands": [
        {"id": "x", "min_hours": 0, "max_hours": 20, "multiplier": 1},
        {"id": "x", "min_hours": 20, "multiplier": 1.5},
    ]}, headers=ADMIN_HEADERS)
    assert response.status_code == 400

    bands = client.get("/api/admin/pricing/usage-bands", headers=ADMIN_HEADERS).get_json()["usage_bands"]
    assert [b["id"] for b in bands] == ["0-20", "20-50", "50+"]
