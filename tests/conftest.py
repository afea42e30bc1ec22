import os
import sys

import mongomock
import pytest

sys.path.insert(0, os.path.dirname(os.path.dirname(os.path.abspath(__file__))))

from pricing_engine import CatalogPayload  # noqa: E402
from pricing_engine.db import set_db  # noqa: E402
from pricing_engine.defaults import default_catalog_state  # noqa: E402

ADMIN_TOKEN = "test-admin-token"
ADMIN_HEADERS = {"Authorization": f"Bearer {ADMIN_TOKEN}", "X-Admin-User": "ops@example.com"}


@pytest.fixture
def catalog_state():
    return default_catalog_state()


@pytest.fixture
def payload(catalog_state):
    return CatalogPayload.from_dict(catalog_state)


@pytest.fixture
def db():
    database = mongomock.MongoClient()["hangar_cpq_test"]
    set_db(database)
    yield database
    set_db(None)


@pytest.fixture
def seeded_db(db):
    from seed_pricing_catalog import seed_catalog
    seed_catalog(db)
    return db


@pytest.fixture
def client(db):
    from app import app
    app.config.update(TESTING=True, ADMIN_API_TOKEN=ADMIN_TOKEN)
    with app.test_client() as test_client:
        yield test_client


@pytest.fixture
def published_client(seeded_db, client):
    response = client.post("/api/admin/pricing/publish", json={"label": "Initial pricing"}, headers=ADMIN_HEADERS)
    assert response.status_code == 201
    return client
