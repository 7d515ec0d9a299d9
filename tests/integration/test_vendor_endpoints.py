"""Integration tests for vendor offer management and fulfilment."""

from __future__ import annotations

import httpx
from fastapi import status

from freshmarket.config import get_settings
from freshmarket.quality import QualityAnalyzer
from freshmarket.server import deps
from tests.integration.utils import auth_headers


def _list_offer(client, vendor, item, **overrides):
    payload = {
        "catalog_item_id": item.id,
        "quantity": 10,
        "unit": "kg",
        "price": 1.25,
        "origin": "Spain",
    }
    payload.update(overrides)
    return client.post("/vendor/products", json=payload, headers=auth_headers(vendor))


def test_pending_vendor_is_blocked(client, make_vendor, apple):
    pending = make_vendor(approved=False)

    response = _list_offer(client, pending, apple)
    assert response.status_code == status.HTTP_403_FORBIDDEN
    assert response.json() == {"error": "Your vendor account is pending approval"}

    response = client.get("/vendor/products", headers=auth_headers(pending))
    assert response.status_code == status.HTTP_403_FORBIDDEN


def test_vendor_offer_lifecycle(client, vendor, apple):
    created = _list_offer(client, vendor, apple)
    assert created.status_code == status.HTTP_201_CREATED
    offer = created.json()
    assert offer["product"]["name"] == "Apple"
    assert offer["initial_stock"] == 10

    response = client.put(
        f"/vendor/products/{offer['id']}",
        json={"price": 1.5},
        headers=auth_headers(vendor),
    )
    assert response.status_code == status.HTTP_200_OK
    assert response.json()["price"] == 1.5

    response = client.put(
        f"/vendor/products/{offer['id']}", json={}, headers=auth_headers(vendor)
    )
    assert response.status_code == status.HTTP_400_BAD_REQUEST

    response = client.delete(f"/vendor/products/{offer['id']}", headers=auth_headers(vendor))
    assert response.status_code == status.HTTP_204_NO_CONTENT
    active = client.get(
        "/vendor/products", params={"active": "true"}, headers=auth_headers(vendor)
    ).json()
    assert active == []

    response = client.delete(
        f"/vendor/products/{offer['id']}",
        params={"hard": "true"},
        headers=auth_headers(vendor),
    )
    assert response.status_code == status.HTTP_204_NO_CONTENT
    response = client.get(f"/vendor/products/{offer['id']}", headers=auth_headers(vendor))
    assert response.status_code == status.HTTP_404_NOT_FOUND


def test_vendors_cannot_touch_each_others_offers(client, make_vendor, apple):
    owner = make_vendor()
    intruder = make_vendor()
    offer = _list_offer(client, owner, apple).json()

    response = client.put(
        f"/vendor/products/{offer['id']}",
        json={"price": 0.1},
        headers=auth_headers(intruder),
    )
    assert response.status_code == status.HTTP_404_NOT_FOUND


def test_invalid_offer_payload_is_rejected(client, vendor, apple):
    response = _list_offer(client, vendor, apple, unit="lb", price=0)
    assert response.status_code == status.HTTP_400_BAD_REQUEST
    body = response.json()
    assert body["error"] == "Invalid request"
    assert body["detail"]


def test_inventory_stock_update(client, vendor, apple):
    offer = _list_offer(client, vendor, apple).json()

    response = client.put(
        f"/vendor/inventory/{offer['id']}",
        json={"quantity": 4},
        headers=auth_headers(vendor),
    )
    assert response.status_code == status.HTTP_200_OK
    assert response.json()["quantity"] == 4

    (line,) = client.get("/vendor/inventory", headers=auth_headers(vendor)).json()
    assert line["current_stock"] == 4
    assert line["initial_stock"] == 10


def test_listing_survives_unusable_quality_reply(app, client, vendor, apple):
    upload_dir = get_settings().upload_dir
    upload_dir.mkdir(parents=True, exist_ok=True)
    (upload_dir / "apple.jpg").write_bytes(b"jpeg")
    reply = {"choices": [{"message": {"content": '{"freshness": {"score": "high"}}'}}]}
    analyzer = QualityAnalyzer(
        base_url="https://vision.test/v1",
        api_key="sk-test",
        model="vision-mini",
        upload_dir=upload_dir,
        transport=httpx.MockTransport(lambda request: httpx.Response(200, json=reply)),
    )
    app.dependency_overrides[deps.get_quality_analyzer] = lambda: analyzer

    response = _list_offer(client, vendor, apple, image_url="/uploads/apple.jpg")

    assert response.status_code == status.HTTP_201_CREATED
    assert response.json()["quality_report"] is None
    listed = client.get("/vendor/products", headers=auth_headers(vendor)).json()
    assert [offer["id"] for offer in listed] == [response.json()["id"]]
