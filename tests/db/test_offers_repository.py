"""Unit tests for the vendor offer repository helpers."""

from __future__ import annotations

from datetime import datetime, timezone

import pytest

from freshmarket.db.offers import (
    create_offer,
    deactivate_offer,
    delete_offer,
    get_offer,
    get_vendor_offer,
    list_matchable_offers,
    list_vendor_offers,
    set_quality_report,
    update_offer,
    update_stock,
)
from freshmarket.db.users import reject_vendor
from freshmarket.errors import ForbiddenError, NotFoundError, ValidationFailure
from freshmarket.models.offers import QualityReport, QualityScore


def _list(vendor_id, catalog_item_id, **overrides):
    payload = {
        "vendor_id": vendor_id,
        "catalog_item_id": catalog_item_id,
        "quantity": 5,
        "unit": "kg",
        "price": 1.0,
        "origin": "Spain",
    }
    payload.update(overrides)
    return create_offer(**payload)


def test_create_offer_records_initial_stock(vendor, apple):
    offer = _list(vendor.id, apple.id, quantity=12.5, origin="  Kuwait ")

    assert offer.initial_stock == 12.5
    assert offer.origin == "Kuwait"
    assert offer.is_active is True
    assert offer.product.name == "Apple"
    assert get_vendor_offer(vendor.id, offer.id) == offer


def test_unapproved_vendor_cannot_list(make_vendor, apple):
    pending = make_vendor(approved=False)
    with pytest.raises(ForbiddenError, match="not approved"):
        _list(pending.id, apple.id)


def test_unknown_catalog_item(vendor):
    with pytest.raises(NotFoundError, match="Product not found in catalog"):
        _list(vendor.id, "missing")


@pytest.mark.parametrize(
    "overrides",
    [{"unit": "lb"}, {"quantity": 0}, {"price": -1}, {"origin": "   "}],
)
def test_invalid_offer_fields(vendor, apple, overrides):
    with pytest.raises(ValidationFailure):
        _list(vendor.id, apple.id, **overrides)


def test_offers_are_scoped_to_their_vendor(make_vendor, apple):
    owner = make_vendor()
    other = make_vendor()
    offer = _list(owner.id, apple.id)

    with pytest.raises(NotFoundError):
        get_vendor_offer(other.id, offer.id)
    with pytest.raises(NotFoundError):
        update_offer(other.id, offer.id, price=9.0)
    assert list_vendor_offers(other.id) == []


def test_update_and_deactivate_offer(vendor, apple):
    offer = _list(vendor.id, apple.id)

    updated = update_offer(vendor.id, offer.id, price=1.75, unit="gram", quantity=900)
    assert (updated.price, updated.unit, updated.quantity) == (1.75, "gram", 900)
    assert updated.initial_stock == 5

    deactivate_offer(vendor.id, offer.id)
    assert [o.id for o in list_vendor_offers(vendor.id, active=False)] == [offer.id]
    assert list_vendor_offers(vendor.id, active=True) == []
    assert get_offer(offer.id) is not None


@pytest.mark.parametrize("origin", ["   ", "", None])
def test_update_rejects_blank_origin(vendor, apple, origin):
    offer = _list(vendor.id, apple.id)

    with pytest.raises(ValidationFailure, match="origin are required"):
        update_offer(vendor.id, offer.id, origin=origin)
    assert get_offer(offer.id).origin == offer.origin
    assert update_offer(vendor.id, offer.id, origin="  Valencia ").origin == "Valencia"


def test_hard_delete_removes_offer(vendor, apple):
    offer = _list(vendor.id, apple.id)
    delete_offer(vendor.id, offer.id)
    assert get_offer(offer.id) is None


def test_update_stock(vendor, apple):
    offer = _list(vendor.id, apple.id, quantity=10)

    restocked = update_stock(vendor.id, offer.id, quantity=4)
    assert restocked.quantity == 4
    assert restocked.initial_stock == 10

    reset = update_stock(vendor.id, offer.id, quantity=20, initial_stock=20)
    assert reset.initial_stock == 20

    with pytest.raises(ValidationFailure):
        update_stock(vendor.id, offer.id, quantity=-1)


def test_matchable_offers_exclude_inactive_and_unapproved(make_vendor, apple, cucumber):
    approved = make_vendor()
    later_rejected = make_vendor()
    visible = _list(approved.id, apple.id)
    hidden = _list(approved.id, apple.id, price=0.5)
    rejected_offer = _list(later_rejected.id, apple.id, price=0.1)
    _list(approved.id, cucumber.id)

    deactivate_offer(approved.id, hidden.id)
    reject_vendor(later_rejected.id)

    matchable = list_matchable_offers(apple.id)
    assert [offer.id for offer in matchable] == [visible.id]
    assert rejected_offer.id not in {offer.id for offer in matchable}


def test_quality_report_round_trips(vendor, apple):
    offer = _list(vendor.id, apple.id, image_url="/uploads/apple.jpg")
    report = QualityReport(
        freshness=QualityScore(score=4, description="Crisp"),
        ripeness="Ripe",
        color="Deep red",
        overall_quality="Good",
        analyzed_at=datetime(2025, 5, 1, tzinfo=timezone.utc),
    )

    stored = set_quality_report(offer.id, report)

    assert stored.quality_report == report
    assert get_offer(offer.id).quality_report.freshness.score == 4
