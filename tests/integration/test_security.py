"""Security-related integration tests."""

from __future__ import annotations

import pytest
from fastapi import status
from fastapi.testclient import TestClient

from freshmarket.config import get_settings
from freshmarket.server.app import create_app


@pytest.fixture()
def secure_client(monkeypatch) -> TestClient:
    monkeypatch.setenv("FRESHMARKET_API_TOKEN", "secret-token")
    get_settings.cache_clear()
    app = create_app()
    client = TestClient(app)
    yield client
    monkeypatch.delenv("FRESHMARKET_API_TOKEN", raising=False)
    get_settings.cache_clear()


def test_mutations_require_api_token(secure_client, buyer):
    response = secure_client.post("/buyer/shopping-lists", headers={"X-User-ID": buyer.id})
    assert response.status_code == status.HTTP_401_UNAUTHORIZED
    assert response.json() == {"error": "Unauthorized"}

    headers = {"Authorization": "Bearer secret-token", "X-User-ID": buyer.id}
    response = secure_client.post("/buyer/shopping-lists", headers=headers)
    assert response.status_code == status.HTTP_201_CREATED

    headers = {"X-API-Key": "secret-token", "X-User-ID": buyer.id}
    response = secure_client.post("/buyer/shopping-lists", headers=headers)
    assert response.status_code == status.HTTP_201_CREATED


def test_reads_do_not_need_api_token(secure_client, apple):
    response = secure_client.get("/products")
    assert response.status_code == status.HTTP_200_OK


def test_missing_or_unknown_user_is_unauthenticated(client):
    response = client.get("/buyer/shopping-lists")
    assert response.status_code == status.HTTP_401_UNAUTHORIZED
    assert response.json() == {"error": "Authentication required"}

    response = client.get("/buyer/shopping-lists", headers={"X-User-ID": "nobody"})
    assert response.status_code == status.HTTP_401_UNAUTHORIZED
    assert response.json() == {"error": "Invalid user"}


def test_roles_are_enforced(client, buyer, vendor, admin):
    assert client.get("/admin/orders", headers={"X-User-ID": buyer.id}).status_code == 403
    assert client.get("/vendor/products", headers={"X-User-ID": admin.id}).status_code == 403
    response = client.get("/buyer/shopping-lists", headers={"X-User-ID": vendor.id})
    assert response.status_code == status.HTTP_403_FORBIDDEN
    assert response.json() == {"error": "Access denied"}
