"""Integration tests for the administration endpoints."""

from __future__ import annotations

from fastapi import status

from freshmarket.db.offers import create_offer
from tests.integration.utils import auth_headers


def test_vendor_approval_flow(client, admin, make_vendor):
    pending = make_vendor(approved=False)

    listed = client.get(
        "/admin/vendors", params={"status": "pending"}, headers=auth_headers(admin)
    ).json()
    assert [vendor["id"] for vendor in listed] == [pending.id]

    response = client.put(f"/admin/vendors/{pending.id}/approve", headers=auth_headers(admin))
    assert response.status_code == status.HTTP_200_OK
    assert response.json()["vendor_status"] == "approved"

    response = client.put(f"/admin/vendors/{pending.id}/reject", headers=auth_headers(admin))
    assert response.json()["vendor_status"] == "rejected"


def test_catalog_management(client, admin, vendor, apple):
    response = client.post(
        "/admin/catalog",
        json={"name": "Mango", "category": "fruit"},
        headers=auth_headers(admin),
    )
    assert response.status_code == status.HTTP_201_CREATED
    mango = response.json()

    response = client.post(
        "/admin/catalog",
        json={"name": "Mango", "category": "fruit"},
        headers=auth_headers(admin),
    )
    assert response.status_code == status.HTTP_400_BAD_REQUEST

    response = client.put(
        f"/admin/catalog/{mango['id']}",
        json={"name": "Alphonso Mango"},
        headers=auth_headers(admin),
    )
    assert response.json()["name"] == "Alphonso Mango"

    create_offer(
        vendor_id=vendor.id,
        catalog_item_id=apple.id,
        quantity=1,
        unit="kg",
        price=1,
        origin="Spain",
    )
    response = client.delete(f"/admin/catalog/{apple.id}", headers=auth_headers(admin))
    assert response.status_code == status.HTTP_400_BAD_REQUEST
    assert "1 vendor(s)" in response.json()["error"]

    counts = {
        item["name"]: item["offer_count"]
        for item in client.get("/admin/catalog", headers=auth_headers(admin)).json()
    }
    assert counts == {"Alphonso Mango": 0, "Apple": 1}

    response = client.delete(f"/admin/catalog/{mango['id']}", headers=auth_headers(admin))
    assert response.status_code == status.HTTP_204_NO_CONTENT


def test_dashboard_and_commission_summary(client, admin, make_vendor, apple):
    make_vendor(approved=False)

    stats = client.get("/admin/dashboard/stats", headers=auth_headers(admin)).json()
    assert stats["pending_vendors"] == 1
    assert stats["total_products"] == 1
    assert stats["total_orders"] == 0

    summary = client.get(
        "/admin/orders/commission/summary",
        params={"startDate": "2025-01-01T00:00:00", "endDate": "2025-12-31T23:59:59"},
        headers=auth_headers(admin),
    )
    assert summary.status_code == status.HTTP_200_OK
    assert summary.json() == {
        "total_commission": 0.0,
        "order_count": 0,
        "average_commission": 0.0,
    }

    assert client.get("/admin/orders", headers=auth_headers(admin)).json() == []
    response = client.get("/admin/orders/unknown", headers=auth_headers(admin))
    assert response.status_code == status.HTTP_404_NOT_FOUND


def test_analysis_unavailable_without_vision_config(client, admin, vendor, apple):
    offer = create_offer(
        vendor_id=vendor.id,
        catalog_item_id=apple.id,
        quantity=1,
        unit="kg",
        price=1,
        origin="Spain",
        image_url="/uploads/apple.jpg",
    )

    response = client.post(f"/admin/offers/{offer.id}/analyze", headers=auth_headers(admin))

    assert response.status_code == status.HTTP_503_SERVICE_UNAVAILABLE
