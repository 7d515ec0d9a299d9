"""Integration tests for the public catalog and registration endpoints."""

from __future__ import annotations

from fastapi import status

from tests.integration.utils import auth_headers


def test_health(client):
    response = client.get("/health")
    assert response.status_code == status.HTTP_200_OK
    assert response.json()["status"] == "ok"


def test_products_filter_by_category(client, apple, cucumber):
    response = client.get("/products")
    assert response.status_code == status.HTTP_200_OK
    assert {item["name"] for item in response.json()} == {"Apple", "Cucumber"}

    response = client.get("/products", params={"category": "fruit"})
    assert [item["name"] for item in response.json()] == ["Apple"]

    response = client.get(f"/products/{cucumber.id}")
    assert response.json()["category"] == "vegetable"


def test_unknown_product_returns_error_body(client):
    response = client.get("/products/missing")
    assert response.status_code == status.HTTP_404_NOT_FOUND
    assert response.json() == {"error": "Product not found"}


def test_register_vendor_starts_pending(client):
    response = client.post(
        "/users",
        json={"email": "Farm@Example.com", "role": "vendor", "phone_number": "50001234"},
        headers=auth_headers(),
    )
    assert response.status_code == status.HTTP_201_CREATED
    body = response.json()
    assert body["email"] == "farm@example.com"
    assert body["vendor_status"] == "pending"


def test_admin_accounts_cannot_self_register(client):
    response = client.post(
        "/users",
        json={"email": "root@example.com", "role": "admin"},
        headers=auth_headers(),
    )
    assert response.status_code == status.HTTP_400_BAD_REQUEST
    assert response.json()["error"] == "Invalid request"


def test_duplicate_email_rejected(client, buyer):
    response = client.post(
        "/users",
        json={"email": buyer.email, "role": "buyer"},
        headers=auth_headers(),
    )
    assert response.status_code == status.HTTP_400_BAD_REQUEST
    assert response.json() == {"error": "User already exists"}
