import mongomock
import pytest
from django.apps import apps
from rest_framework.test import APIClient

from modules.apikeys.dtos import APIKeyRecord
from modules.apikeys.models import APIKey
from modules.core.backends import CatalogSettings, build_backends
from modules.products.dtos import Product

TEST_API_KEY = "test-api-key-123"


@pytest.fixture(autouse=True)
def _use_db(db):
    """Automatically use the test database for all tests."""


@pytest.fixture()
def api_client():
    """DRF APIClient for testing API endpoints."""
    return APIClient()


@pytest.fixture()
def api_key():
    """A provisioned API key row."""
    return APIKey.objects.create(key=TEST_API_KEY, client_id="test-client")


@pytest.fixture()
def auth_client(api_key):
    """APIClient sending a valid raw key in ``Authorization``."""
    client = APIClient()
    client.credentials(HTTP_AUTHORIZATION=api_key.key)
    return client


@pytest.fixture()
def api_client_with_correlation(api_client):
    """APIClient pre-configured with a known correlation ID header."""
    cid = "test-correlation-id-fixture"
    api_client.defaults["HTTP_X_REQUEST_ID"] = cid
    return api_client, cid


@pytest.fixture()
def mongo_database():
    """A fresh in-memory MongoDB database."""
    return mongomock.MongoClient()["icecream_test"]


@pytest.fixture()
def mongo_client(monkeypatch, mongo_database):
    """Authenticated APIClient served by the MongoDB adapters."""
    config = CatalogSettings(store_backend="mongodb", mongodb_url="mongodb://unused")
    backends = build_backends(config, database=mongo_database)
    monkeypatch.setattr(apps.get_app_config("core"), "backends", backends)
    backends.api_keys.add(APIKeyRecord(key=TEST_API_KEY, client_id="test-client"))

    client = APIClient()
    client.credentials(HTTP_AUTHORIZATION=TEST_API_KEY)
    return client


def _make_product(product_id: str = "001", **overrides) -> Product:
    defaults = {
        "product_id": product_id,
        "name": "Vanilla",
        "image_closed": "",
        "image_open": "",
        "description": "",
        "story": "",
        "sourcing_values": [],
        "ingredients": [],
        "allergy_info": "",
        "dietary_certifications": "",
    }
    defaults.update(overrides)
    return Product(**defaults)


@pytest.fixture()
def make_product():
    """Factory for Product values; every field but the id defaults to empty."""
    return _make_product


@pytest.fixture()
def product_payload():
    """Factory for full wire payloads with exactly the ten allow-listed fields."""

    def _payload(product_id: str = "001", **overrides) -> dict:
        return _make_product(product_id, **overrides).to_wire()

    return _payload
