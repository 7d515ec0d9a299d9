"""Shopping list, item and selection persistence helpers."""
# mypy: ignore-errors

from __future__ import annotations

from typing import List, Optional

from sqlalchemy import delete, select
from sqlalchemy.orm import Session

from freshmarket.errors import NotFoundError, ValidationFailure
from freshmarket.models.matching import MatchingResult
from freshmarket.models.shopping import Selection, ShoppingList, ShoppingListItem
from freshmarket.pricing.matching import MatchRequest, match_offers

from .catalog import catalog_item_to_model
from .models import (
    CatalogItemORM,
    SelectionORM,
    ShoppingListItemORM,
    ShoppingListORM,
    VendorOfferORM,
)
from .offers import UNITS, list_matchable_offers, offer_to_model
from .repository import session_scope


def selection_to_model(row: SelectionORM, *, include_offer: bool = True) -> Selection:
    return Selection.model_validate(
        {
            "id": row.id,
            "shopping_list_id": row.shopping_list_id,
            "shopping_list_item_id": row.shopping_list_item_id,
            "vendor_offer_id": row.vendor_offer_id,
            "offer": offer_to_model(row.offer) if include_offer else None,
            "created_at": row.created_at,
        }
    )


def item_to_model(row: ShoppingListItemORM) -> ShoppingListItem:
    return ShoppingListItem.model_validate(
        {
            "id": row.id,
            "shopping_list_id": row.shopping_list_id,
            "catalog_item_id": row.catalog_item_id,
            "product": catalog_item_to_model(row.catalog_item),
            "quantity": row.quantity,
            "unit": row.unit,
            "origin_preference": row.origin_preference,
            "selection": selection_to_model(row.selection) if row.selection else None,
        }
    )


def shopping_list_to_model(row: ShoppingListORM) -> ShoppingList:
    return ShoppingList.model_validate(
        {
            "id": row.id,
            "buyer_id": row.buyer_id,
            "status": row.status,
            "items": [item_to_model(item) for item in row.items],
            "created_at": row.created_at,
            "updated_at": row.updated_at,
        }
    )


def owned_list(session: Session, list_id: str, buyer_id: str) -> ShoppingListORM:
    row = session.get(ShoppingListORM, list_id)
    if row is None or row.buyer_id != buyer_id:
        raise NotFoundError("Shopping list not found")
    return row


def owned_item(session: Session, item_id: str, buyer_id: Optional[str]) -> ShoppingListItemORM:
    row = session.get(ShoppingListItemORM, item_id)
    if row is None or (buyer_id is not None and row.shopping_list.buyer_id != buyer_id):
        raise NotFoundError("Shopping list item not found")
    return row


def create_shopping_list(buyer_id: str) -> ShoppingList:
    with session_scope() as session:
        row = ShoppingListORM(buyer_id=buyer_id, status="draft")
        session.add(row)
        session.flush()
        return shopping_list_to_model(row)


def list_shopping_lists(buyer_id: str) -> List[ShoppingList]:
    """Return the buyer's shopping lists, newest first."""

    with session_scope() as session:
        rows = (
            session.execute(
                select(ShoppingListORM)
                .where(ShoppingListORM.buyer_id == buyer_id)
                .order_by(ShoppingListORM.created_at.desc())
            )
            .scalars()
            .all()
        )
        return [shopping_list_to_model(row) for row in rows]


def get_shopping_list(list_id: str, buyer_id: str) -> ShoppingList:
    with session_scope() as session:
        return shopping_list_to_model(owned_list(session, list_id, buyer_id))


def delete_shopping_list(list_id: str, buyer_id: str) -> None:
    with session_scope() as session:
        row = owned_list(session, list_id, buyer_id)
        if row.status != "draft":
            raise ValidationFailure("Completed shopping lists cannot be deleted")
        session.execute(delete(SelectionORM).where(SelectionORM.shopping_list_id == list_id))
        session.delete(row)


def add_item(
    list_id: str,
    buyer_id: str,
    *,
    catalog_item_id: str,
    quantity: float,
    unit: str,
    origin_preference: Optional[str] = None,
) -> ShoppingListItem:
    if unit not in UNITS:
        raise ValidationFailure("Unit must be 'kg' or 'gram'")
    if float(quantity) <= 0:
        raise ValidationFailure("Quantity must be greater than 0")
    with session_scope() as session:
        shopping_list = owned_list(session, list_id, buyer_id)
        if shopping_list.status != "draft":
            raise ValidationFailure("Shopping list is already completed")
        if session.get(CatalogItemORM, catalog_item_id) is None:
            raise NotFoundError("Product not found in catalog")
        row = ShoppingListItemORM(
            shopping_list_id=list_id,
            catalog_item_id=catalog_item_id,
            quantity=float(quantity),
            unit=unit,
            origin_preference=(origin_preference or "").strip() or None,
        )
        session.add(row)
        session.flush()
        return item_to_model(row)


def remove_item(list_id: str, item_id: str, buyer_id: str) -> None:
    with session_scope() as session:
        owned_list(session, list_id, buyer_id)
        row = session.get(ShoppingListItemORM, item_id)
        if row is None or row.shopping_list_id != list_id:
            raise NotFoundError("Item not found")
        session.delete(row)


def get_item(item_id: str, buyer_id: Optional[str] = None) -> ShoppingListItem:
    with session_scope() as session:
        return item_to_model(owned_item(session, item_id, buyer_id))


def find_matches(item_id: str, buyer_id: Optional[str] = None) -> MatchingResult:
    """Price every eligible offer for a shopping list item, cheapest first."""

    item = get_item(item_id, buyer_id)
    request = MatchRequest(
        catalog_item_id=item.catalog_item_id,
        quantity=item.quantity,
        unit=item.unit,
        origin_preference=item.origin_preference,
    )
    offers = list_matchable_offers(item.catalog_item_id)
    return MatchingResult(item=item, options=match_offers(request, offers))


def save_selection(item_id: str, vendor_offer_id: str, buyer_id: Optional[str] = None) -> Selection:
    """Replace the item's selection with ``vendor_offer_id``.

    The prior selection is removed before the new one is inserted, so exactly
    one selection survives per item.
    """

    with session_scope() as session:
        item = owned_item(session, item_id, buyer_id)
        offer = session.execute(
            select(VendorOfferORM).where(
                VendorOfferORM.id == vendor_offer_id,
                VendorOfferORM.is_active.is_(True),
            )
        ).scalar_one_or_none()
        if offer is None:
            raise NotFoundError("Vendor product not found or inactive")

        session.execute(
            delete(SelectionORM).where(SelectionORM.shopping_list_item_id == item_id)
        )
        row = SelectionORM(
            shopping_list_id=item.shopping_list_id,
            shopping_list_item_id=item_id,
            vendor_offer_id=offer.id,
        )
        session.add(row)
        session.flush()
        return selection_to_model(row)


__all__ = [
    "add_item",
    "create_shopping_list",
    "delete_shopping_list",
    "find_matches",
    "get_item",
    "get_shopping_list",
    "item_to_model",
    "list_shopping_lists",
    "owned_item",
    "owned_list",
    "remove_item",
    "save_selection",
    "selection_to_model",
    "shopping_list_to_model",
]
