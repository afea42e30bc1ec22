from conftest import ADMIN_HEADERS

QUOTE_REQUEST = {
    "customer": {"name": "Pat Doe", "email": "pat@example.com", "phone": "555-0100", "aircraft": "N123AB SR22"},
    "tierId": "performance",
    "usageBandId": "20-50",
    "addOnIds": ["gpu"],
    "locationId": "sky-harbour",
}


def test_health(client):
    response = client.get("/api/health")
    assert response.status_code == 200
    assert response.get_json()["status"] == "ok"


def test_nothing_published_yet(seeded_db, client):
    response = client.get("/api/pricing/snapshot/latest")
    assert response.status_code == 404
    assert response.get_json()["success"] is False

    response = client.post("/api/pricing/calculate", json={"tierId": "light", "usageBandId": "0-20"})
    assert response.status_code == 404


def test_latest_snapshot(published_client):
    response = published_client.get("/api/pricing/snapshot/latest")
    data = response.get_json()

    assert response.status_code == 200
    assert data["snapshot"]["label"] == "Initial pricing"
    assert data["snapshot"]["published_by"] == "ops@example.com"
    assert len(data["snapshot"]["payload"]["tiers"]) == 3


def test_calculate(published_client):
    response = published_client.post("/api/pricing/calculate", json={
        "tierId": "performance", "usageBandId": "20-50", "addOnIds": [], "locationId": "sky-harbour",
    })
    data = response.get_json()

    assert response.status_code == 200
    assert data["breakdown"]["usageAdjustedPrice"] == 2392.5
    assert data["breakdown"]["total"] == 4392.5
    assert data["snapshotId"]


def test_calculate_without_band_is_rejected(published_client):
    response = published_client.post("/api/pricing/calculate", json={"tierId": "light"})
    assert response.status_code == 400
    assert response.get_json()["field"] == "usage band"


def test_calculate_unknown_tier(published_client):
    response = published_client.post("/api/pricing/calculate", json={"tierId": "blimp", "usageBandId": "0-20"})
    assert response.status_code == 404
    assert response.get_json()["kind"] == "tier"


def test_calculate_requires_body(published_client):
    response = published_client.post("/api/pricing/calculate", json={})
    assert response.status_code == 400


def test_public_pricing_ignores_unpublished_edits(published_client):
    published_client.post("/api/admin/pricing/tiers", json={"id": "performance", "base_monthly": 1999}, headers=ADMIN_HEADERS)

    response = published_client.post("/api/pricing/calculate", json={"tierId": "performance", "usageBandId": "0-20"})
    assert response.get_json()["breakdown"]["total"] == 1650.0


def test_price_table(published_client):
    response = published_client.get("/api/pricing/table/light")
    table = response.get_json()["table"]
    assert [row["total"] for row in table] == [850.0, 1232.5, 1615.0]

    response = published_client.get("/api/pricing/table/light?addOnIds=gpu,detailing&locationId=fa-hangar")
    assert response.get_json()["table"][2]["total"] == 2685.0

    assert published_client.get("/api/pricing/table/blimp").status_code == 404


def test_starting_prices(published_client):
    response = published_client.get("/api/pricing/starting-prices")
    assert response.get_json()["startingPrices"] == {"light": 850.0, "performance": 1650.0, "turbine": 3200.0}


def test_pricing_info(published_client):
    data = published_client.get("/api/pricing/info").get_json()
    assert [tier["id"] for tier in data["pricing"]["tiers"]] == ["light", "performance", "turbine"]
    assert len(data["pricing"]["usageBands"]) == 3


def test_recommendation(published_client):
    data = published_client.get("/api/pricing/recommendation?make=Cirrus&model=SR22&hours=35").get_json()
    assert data["tierId"] == "performance"
    assert data["usageBandId"] == "20-50"

    data = published_client.get("/api/pricing/recommendation?make=Daher&model=TBM 940").get_json()
    assert data["tierId"] == "turbine"
    assert data["usageBandId"] is None

    assert published_client.get("/api/pricing/recommendation?hours=lots").status_code == 400


def test_fleet_discount(client):
    response = client.post("/api/pricing/fleet-discount", json={"aircraftCount": 3, "monthlyPrice": 1000})
    data = response.get_json()
    assert data["discount"] == 250.0
    assert data["finalPrice"] == 750.0

    assert client.post("/api/pricing/fleet-discount", json={"aircraftCount": 0, "monthlyPrice": 1000}).status_code == 400


def test_hangar_partners(published_client):
    hangars = published_client.get("/api/locations/hangars").get_json()["hangars"]
    assert {h["id"] for h in hangars} == {"sky-harbour", "fa-hangar"}
    assert {h["hangar_cost_monthly"] for h in hangars} == {2000.0, 900.0}


def test_create_and_fetch_quote(published_client):
    response = published_client.post("/api/quotes", json=QUOTE_REQUEST)
    data = response.get_json()

    assert response.status_code == 201
    assert data["breakdown"]["total"] == 4442.5

    quote = published_client.get(f"/api/quotes/{data['quote_id']}").get_json()["quote"]
    assert quote["status"] == "draft"
    assert quote["snapshot_id"] == data["snapshotId"]
    assert quote["snapshot_label"] == "Initial pricing"
    assert quote["selection"]["addon_ids"] == ["gpu"]


def test_quote_requires_customer_email(published_client):
    response = published_client.post("/api/quotes", json=dict(QUOTE_REQUEST, customer={"name": "Pat"}))
    assert response.status_code == 400


def test_quote_status(published_client):
    quote_id = published_client.post("/api/quotes", json=QUOTE_REQUEST).get_json()["quote_id"]

    response = published_client.post(f"/api/quotes/{quote_id}/status", json={"status": "sent"})
    assert response.status_code == 200
    assert published_client.get(f"/api/quotes/{quote_id}").get_json()["quote"]["status"] == "sent"

    assert published_client.post(f"/api/quotes/{quote_id}/status", json={"status": "lost"}).status_code == 400
    assert published_client.post("/api/quotes/000000000000000000000000/status", json={"status": "sent"}).status_code == 404


def test_unknown_quote(published_client):
    assert published_client.get("/api/quotes/not-a-quote").status_code == 404


def test_invoice_lines_come_from_the_quoted_snapshot(published_client):
    quote_id = published_client.post("/api/quotes", json=QUOTE_REQUEST).get_json()["quote_id"]

    # price rise, hangar closed, republished
    published_client.post("/api/admin/pricing/tiers", json={"id": "performance", "base_monthly": 1999}, headers=ADMIN_HEADERS)
    published_client.post("/api/admin/pricing/locations/sky-harbour/deactivate", headers=ADMIN_HEADERS)
    response = published_client.post("/api/admin/pricing/publish", json={"label": "Spring pricing"}, headers=ADMIN_HEADERS)
    assert response.status_code == 201

    data = published_client.get(f"/api/quotes/{quote_id}/invoice-line").get_json()
    assert data["matchesQuote"] is True
    assert data["total_cents"] == 444250
    assert [line["amount_cents"] for line in data["lines"]] == [239250, 5000, 200000]
    assert all(line["quantity"] == 1 for line in data["lines"])

    new_quote = published_client.post("/api/quotes", json=QUOTE_REQUEST)
    assert new_quote.status_code == 404


def test_quote_pdf(published_client):
    quote_id = published_client.post("/api/quotes", json=QUOTE_REQUEST).get_json()["quote_id"]

    response = published_client.get(f"/api/quotes/{quote_id}/pdf")
    assert response.status_code == 200
    assert response.mimetype == "application/pdf"
    assert response.data[:4] == b"%PDF"


def test_aircraft_price_with_override(published_client):
    published_client.post("/api/admin/pricing/overrides", json={"aircraft_id": "ac-1", "override_monthly": 1200}, headers=ADMIN_HEADERS)

    response = published_client.post("/api/aircraft/ac-1/price", json={"tierId": "performance", "usageBandId": "20-50"})
    price = response.get_json()["price"]
    assert response.status_code == 200
    assert price["source"] == "override"
    assert price["total"] == 1200.0
    assert price["computed"]["total"] == 2392.5


def test_aircraft_price_without_override(published_client):
    price = published_client.post("/api/aircraft/ac-9/price", json={"tierId": "light", "usageBandId": "0-20"}).get_json()["price"]
    assert price["source"] == "computed"
    assert price["total"] == 850.0


def test_stale_override_is_flagged_for_review(published_client):
    published_client.post("/api/admin/pricing/overrides", json={
        "aircraft_id": "ac-2", "override_monthly": 900, "location_id": "closed-hangar",
    }, headers=ADMIN_HEADERS)

    price = published_client.post("/api/aircraft/ac-2/price", json={"tierId": "light", "usageBandId": "0-20"}).get_json()["price"]
    assert price["source"] == "computed"
    assert price["staleOverride"] is True

    stale = published_client.get("/api/admin/pricing/overrides?stale=1", headers=ADMIN_HEADERS).get_json()["overrides"]
    assert [o["aircraft_id"] for o in stale] == ["ac-2"]


def test_aircraft_flag_sent_as_string(published_client):
    published_client.post("/api/admin/pricing/overrides", json={"aircraft_id": "ac-3", "override_monthly": 700}, headers=ADMIN_HEADERS)

    price = published_client.post("/api/aircraft/ac-3/price", json={
        "tierId": "light", "usageBandId": "0-20", "aircraftExists": "false",
    }).get_json()["price"]
    assert price["source"] == "computed"
    assert price["staleOverride"] is True

    price = published_client.post("/api/aircraft/ac-3/price", json={
        "tierId": "light", "usageBandId": "0-20", "aircraftExists": "true",
    }).get_json()["price"]
    assert price["source"] == "override"
    assert price["total"] == 700.0
