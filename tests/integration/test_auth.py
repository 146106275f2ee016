"""Integration tests for API key authentication.

Validates:
  - /health and the OpenAPI schema are public (no key required).
  - /products endpoints return 401 without a key or with an unknown key.
  - A provisioned raw key in ``Authorization`` is accepted.
  - Duplicated keys are rejected like unknown ones.
"""

from datetime import timedelta

import pytest
from django.apps import apps
from django.utils import timezone

from modules.apikeys.models import APIKey
from modules.core.backends import CatalogSettings, build_backends

pytestmark = pytest.mark.integration


class TestPublicEndpoints:
    """Health check and schema must remain accessible without credentials."""

    def test_health_is_public(self, client):
        response = client.get("/health")
        assert response.status_code == 200
        assert response.json()["status"] == "healthy"

    def test_schema_is_public(self, api_client):
        response = api_client.get("/api/schema/")
        assert response.status_code == 200


class TestProtectedEndpoints:
    """Every product route requires a valid key (Fail Closed)."""

    @pytest.mark.parametrize(
        "method, path",
        [
            ("get", "/products"),
            ("post", "/products"),
            ("get", "/products/001"),
            ("put", "/products/001"),
            ("patch", "/products/001"),
            ("delete", "/products/001"),
        ],
    )
    def test_no_key_returns_401(self, api_client, method, path):
        response = getattr(api_client, method)(path)
        assert response.status_code == 401

    def test_401_includes_www_authenticate_header(self, api_client):
        response = api_client.get("/products")
        assert response.status_code == 401
        assert response["WWW-Authenticate"] == 'APIKey realm="api"'

    def test_unknown_key_returns_401(self, api_client, api_key):
        api_client.credentials(HTTP_AUTHORIZATION="not-the-key")
        response = api_client.get("/products")
        assert response.status_code == 401

    def test_valid_key_passes(self, auth_client, product_payload):
        response = auth_client.post("/products", product_payload("001"), format="json")
        assert response.status_code == 201

    def test_surrounding_whitespace_is_ignored(self, api_client, api_key):
        api_client.credentials(HTTP_AUTHORIZATION=f"  {api_key.key} ")
        response = api_client.get("/products/001")
        assert response.status_code == 404

    def test_scheme_prefix_is_not_stripped(self, api_client, api_key):
        api_client.credentials(HTTP_AUTHORIZATION=f"Bearer {api_key.key}")
        response = api_client.get("/products")
        assert response.status_code == 401

    def test_duplicated_key_returns_401(self, api_client, api_key):
        APIKey.objects.create(key=api_key.key, client_id="other-client")
        api_client.credentials(HTTP_AUTHORIZATION=api_key.key)

        response = api_client.get("/products")

        assert response.status_code == 401
        assert response.json()["detail"] == "invalid api key"


class TestKeyPolicy:
    @pytest.fixture()
    def enforcing(self, monkeypatch):
        backends = build_backends(CatalogSettings(enforce_key_policy=True))
        monkeypatch.setattr(apps.get_app_config("core"), "backends", backends)

    def test_revoked_key_returns_401(self, enforcing, api_client):
        APIKey.objects.create(key="revoked-key", revoked=True)
        api_client.credentials(HTTP_AUTHORIZATION="revoked-key")
        assert api_client.get("/products").status_code == 401

    def test_expired_key_returns_401(self, enforcing, api_client):
        APIKey.objects.create(key="old-key", expiry=timezone.now() - timedelta(days=1))
        api_client.credentials(HTTP_AUTHORIZATION="old-key")
        assert api_client.get("/products").status_code == 401

    def test_active_key_passes(self, enforcing, api_client):
        APIKey.objects.create(key="fresh-key", expiry=timezone.now() + timedelta(days=1))
        api_client.credentials(HTTP_AUTHORIZATION="fresh-key")
        assert api_client.get("/products").status_code == 404
