"""Vendor offer persistence helpers."""
# mypy: ignore-errors

from __future__ import annotations

import json
from typing import List, Optional

from sqlalchemy import delete, func, select
from sqlalchemy.orm import Session

from freshmarket.errors import ForbiddenError, NotFoundError, ValidationFailure
from freshmarket.models.offers import InventoryLine, QualityReport, VendorOffer

from .catalog import catalog_item_to_model
from .models import CatalogItemORM, OrderItemORM, SelectionORM, UserORM, VendorOfferORM
from .repository import session_scope

UNITS = ("kg", "gram")

_UNSET = object()


def _report_from_payload(payload: Optional[str]) -> Optional[QualityReport]:
    if not payload:
        return None
    try:
        return QualityReport.model_validate_json(payload)
    except ValueError:
        return None


def offer_to_model(row: VendorOfferORM) -> VendorOffer:
    return VendorOffer.model_validate(
        {
            "id": row.id,
            "vendor_id": row.vendor_id,
            "catalog_item_id": row.catalog_item_id,
            "product": catalog_item_to_model(row.catalog_item),
            "unit": row.unit,
            "price": row.price,
            "quantity": row.quantity,
            "initial_stock": row.initial_stock,
            "origin": row.origin,
            "is_active": row.is_active,
            "image_url": row.image_url,
            "quality_report": _report_from_payload(row.quality_report),
            "created_at": row.created_at,
            "updated_at": row.updated_at,
        }
    )


def _validate_unit(unit: str) -> str:
    if unit not in UNITS:
        raise ValidationFailure("Unit must be 'kg' or 'gram'")
    return unit


def _validate_positive(value: float, label: str) -> float:
    number = float(value)
    if number <= 0:
        raise ValidationFailure(f"{label} must be greater than 0")
    return number


def _validate_origin(origin: Optional[str]) -> str:
    if not origin or not str(origin).strip():
        raise ValidationFailure("Product ID, quantity, unit, price, and origin are required")
    return str(origin).strip()


def _owned_offer(session: Session, vendor_id: str, offer_id: str) -> VendorOfferORM:
    row = session.get(VendorOfferORM, offer_id)
    if row is None or row.vendor_id != vendor_id:
        raise NotFoundError("Product not found")
    return row


def create_offer(
    *,
    vendor_id: str,
    catalog_item_id: str,
    quantity: float,
    unit: str,
    price: float,
    origin: str,
    image_url: Optional[str] = None,
) -> VendorOffer:
    """List a catalog item for sale; only approved vendors may do so."""

    origin = _validate_origin(origin)
    with session_scope() as session:
        vendor = session.get(UserORM, vendor_id)
        if vendor is None or vendor.role != "vendor" or vendor.vendor_status != "approved":
            raise ForbiddenError("Vendor account not approved")
        if session.get(CatalogItemORM, catalog_item_id) is None:
            raise NotFoundError("Product not found in catalog")

        stock = _validate_positive(quantity, "Quantity")
        row = VendorOfferORM(
            vendor_id=vendor_id,
            catalog_item_id=catalog_item_id,
            quantity=stock,
            initial_stock=stock,
            unit=_validate_unit(unit),
            price=_validate_positive(price, "Price"),
            origin=origin,
            image_url=image_url,
            is_active=True,
        )
        session.add(row)
        session.flush()
        return offer_to_model(row)


def list_vendor_offers(vendor_id: str, active: Optional[bool] = None) -> List[VendorOffer]:
    """Return a vendor's own offers, newest first."""

    with session_scope() as session:
        query = select(VendorOfferORM).where(VendorOfferORM.vendor_id == vendor_id)
        if active is not None:
            query = query.where(VendorOfferORM.is_active.is_(active))
        rows = session.execute(query.order_by(VendorOfferORM.created_at.desc())).scalars().all()
        return [offer_to_model(row) for row in rows]


def get_vendor_offer(vendor_id: str, offer_id: str) -> VendorOffer:
    with session_scope() as session:
        return offer_to_model(_owned_offer(session, vendor_id, offer_id))


def get_offer(offer_id: str) -> Optional[VendorOffer]:
    with session_scope() as session:
        row = session.get(VendorOfferORM, offer_id)
        if row is None:
            return None
        return offer_to_model(row)


def update_offer(
    vendor_id: str,
    offer_id: str,
    *,
    quantity: float | object = _UNSET,
    unit: str | object = _UNSET,
    price: float | object = _UNSET,
    origin: str | object = _UNSET,
    is_active: bool | object = _UNSET,
    image_url: str | None | object = _UNSET,
) -> VendorOffer:
    with session_scope() as session:
        row = _owned_offer(session, vendor_id, offer_id)

        if quantity is not _UNSET:
            row.quantity = _validate_positive(quantity, "Quantity")
        if unit is not _UNSET:
            row.unit = _validate_unit(unit)
        if price is not _UNSET:
            row.price = _validate_positive(price, "Price")
        if origin is not _UNSET:
            row.origin = _validate_origin(origin)
        if is_active is not _UNSET:
            row.is_active = bool(is_active)
        if image_url is not _UNSET:
            row.image_url = image_url

        session.flush()
        return offer_to_model(row)


def deactivate_offer(vendor_id: str, offer_id: str) -> None:
    """Soft delete: the offer disappears from matching but keeps its history."""

    with session_scope() as session:
        row = _owned_offer(session, vendor_id, offer_id)
        row.is_active = False


def delete_offer(vendor_id: str, offer_id: str) -> None:
    """Hard delete an offer that no order has purchased from."""

    with session_scope() as session:
        row = _owned_offer(session, vendor_id, offer_id)
        ordered = session.execute(
            select(func.count(OrderItemORM.id)).where(OrderItemORM.vendor_offer_id == offer_id)
        ).scalar_one()
        if ordered:
            raise ValidationFailure(
                "Cannot delete a product that appears on orders; deactivate it instead"
            )
        session.execute(delete(SelectionORM).where(SelectionORM.vendor_offer_id == offer_id))
        session.delete(row)


def update_stock(
    vendor_id: str,
    offer_id: str,
    *,
    quantity: float,
    initial_stock: Optional[float] = None,
) -> VendorOffer:
    """Set current stock; ``initial_stock`` is recorded once unless given explicitly."""

    with session_scope() as session:
        row = _owned_offer(session, vendor_id, offer_id)
        stock = float(quantity)
        if stock < 0:
            raise ValidationFailure("Quantity cannot be negative")
        row.quantity = stock
        if initial_stock is not None:
            row.initial_stock = float(initial_stock)
        elif not row.initial_stock:
            row.initial_stock = stock
        session.flush()
        return offer_to_model(row)


def inventory_summary(vendor_id: str) -> List[InventoryLine]:
    """Per-offer stock report: sold counts completed order lines, pending the rest."""

    with session_scope() as session:
        rows = (
            session.execute(
                select(VendorOfferORM)
                .where(VendorOfferORM.vendor_id == vendor_id)
                .order_by(VendorOfferORM.created_at.desc())
            )
            .scalars()
            .all()
        )
        summary: List[InventoryLine] = []
        for row in rows:
            ordered = session.execute(
                select(OrderItemORM.quantity, OrderItemORM.status).where(
                    OrderItemORM.vendor_offer_id == row.id
                )
            ).all()
            sold = sum(quantity for quantity, status in ordered if status == "completed")
            pending = sum(quantity for quantity, status in ordered if status != "completed")
            current = float(row.quantity)
            initial = float(row.initial_stock) if row.initial_stock else current + sold
            summary.append(
                InventoryLine(
                    offer_id=row.id,
                    product=catalog_item_to_model(row.catalog_item),
                    origin=row.origin,
                    unit=row.unit,
                    initial_stock=initial,
                    current_stock=current,
                    sold_quantity=sold,
                    pending_quantity=pending,
                    ending_inventory=current - pending,
                    is_active=row.is_active,
                )
            )
        return summary


def list_matchable_offers(catalog_item_id: str) -> List[VendorOffer]:
    """Active offers for a catalog item from approved vendors, in listing order."""

    with session_scope() as session:
        rows = (
            session.execute(
                select(VendorOfferORM)
                .join(UserORM, UserORM.id == VendorOfferORM.vendor_id)
                .where(
                    VendorOfferORM.catalog_item_id == catalog_item_id,
                    VendorOfferORM.is_active.is_(True),
                    UserORM.vendor_status == "approved",
                )
                .order_by(VendorOfferORM.created_at, VendorOfferORM.id)
            )
            .scalars()
            .all()
        )
        return [offer_to_model(row) for row in rows]


def set_quality_report(offer_id: str, report: Optional[QualityReport]) -> VendorOffer:
    with session_scope() as session:
        row = session.get(VendorOfferORM, offer_id)
        if row is None:
            raise NotFoundError("Product not found")
        row.quality_report = (
            json.dumps(report.model_dump(mode="json"), sort_keys=True) if report else None
        )
        session.flush()
        return offer_to_model(row)


__all__ = [
    "UNITS",
    "create_offer",
    "deactivate_offer",
    "delete_offer",
    "get_offer",
    "get_vendor_offer",
    "inventory_summary",
    "list_matchable_offers",
    "list_vendor_offers",
    "offer_to_model",
    "set_quality_report",
    "update_offer",
    "update_stock",
]
