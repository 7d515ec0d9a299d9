"""Catalog persistence helpers (admin-managed produce types)."""

from __future__ import annotations

from typing import List, Optional

from sqlalchemy import func, select
from sqlalchemy.orm import Session

from freshmarket.errors import NotFoundError, ValidationFailure
from freshmarket.models.catalog import CatalogItem

from .models import CatalogItemORM, VendorOfferORM
from .repository import session_scope

CATEGORIES = ("fruit", "vegetable")

DEFAULT_FRUITS = (
    "Apple", "Banana", "Orange", "Grape", "Strawberry", "Watermelon",
    "Mango", "Pineapple", "Kiwi", "Peach", "Pear", "Cherry",
    "Blueberry", "Raspberry", "Blackberry", "Lemon", "Lime", "Avocado",
    "Papaya", "Coconut", "Pomegranate", "Fig", "Date", "Plum",
)

DEFAULT_VEGETABLES = (
    "Tomato", "Potato", "Onion", "Carrot", "Cucumber", "Lettuce",
    "Bell Pepper", "Broccoli", "Cauliflower", "Spinach", "Cabbage",
    "Garlic", "Ginger", "Celery", "Corn", "Peas", "Green Beans",
    "Eggplant", "Zucchini", "Mushroom", "Radish", "Beetroot", "Turnip",
    "Pumpkin", "Sweet Potato", "Asparagus", "Artichoke", "Okra",
)


def catalog_item_to_model(row: CatalogItemORM, offer_count: Optional[int] = None) -> CatalogItem:
    return CatalogItem.model_validate(
        {
            "id": row.id,
            "name": row.name,
            "category": row.category,
            "offer_count": offer_count,
        }
    )


def _validate_category(category: str) -> str:
    if category not in CATEGORIES:
        raise ValidationFailure(f"Category must be one of: {', '.join(CATEGORIES)}")
    return category


def _name_taken(session: Session, name: str) -> bool:
    return session.execute(
        select(CatalogItemORM.id).where(CatalogItemORM.name == name)
    ).first() is not None


def _offer_count(session: Session, item_id: str) -> int:
    return session.execute(
        select(func.count(VendorOfferORM.id)).where(VendorOfferORM.catalog_item_id == item_id)
    ).scalar_one()


def list_catalog(category: Optional[str] = None, *, with_counts: bool = False) -> List[CatalogItem]:
    """Return catalog items sorted by name, optionally filtered by category."""

    with session_scope() as session:
        query = select(CatalogItemORM).order_by(CatalogItemORM.name)
        if category:
            query = query.where(CatalogItemORM.category == category)
        rows = session.execute(query).scalars().all()
        if not with_counts:
            return [catalog_item_to_model(row) for row in rows]
        return [catalog_item_to_model(row, _offer_count(session, row.id)) for row in rows]


def get_catalog_item(item_id: str) -> Optional[CatalogItem]:
    with session_scope() as session:
        row = session.get(CatalogItemORM, item_id)
        if row is None:
            return None
        return catalog_item_to_model(row)


def get_catalog_item_by_name(name: str) -> Optional[CatalogItem]:
    with session_scope() as session:
        row = session.execute(
            select(CatalogItemORM).where(CatalogItemORM.name == name.strip())
        ).scalar_one_or_none()
        if row is None:
            return None
        return catalog_item_to_model(row)


def create_catalog_item(*, name: str, category: str) -> CatalogItem:
    clean_name = name.strip()
    if not clean_name:
        raise ValidationFailure("Name and category are required")
    _validate_category(category)
    with session_scope() as session:
        if _name_taken(session, clean_name):
            raise ValidationFailure("Product already exists in catalog")
        row = CatalogItemORM(name=clean_name, category=category)
        session.add(row)
        session.flush()
        return catalog_item_to_model(row)


def update_catalog_item(
    item_id: str,
    *,
    name: Optional[str] = None,
    category: Optional[str] = None,
) -> CatalogItem:
    with session_scope() as session:
        row = session.get(CatalogItemORM, item_id)
        if row is None:
            raise NotFoundError("Product not found")

        if name and name.strip() != row.name:
            if _name_taken(session, name.strip()):
                raise ValidationFailure("Product name already exists")
            row.name = name.strip()
        if category:
            row.category = _validate_category(category)

        session.flush()
        return catalog_item_to_model(row)


def delete_catalog_item(item_id: str) -> None:
    """Remove a catalog item that no vendor offer references."""

    with session_scope() as session:
        row = session.get(CatalogItemORM, item_id)
        if row is None:
            raise NotFoundError("Product not found")
        in_use = _offer_count(session, item_id)
        if in_use:
            raise ValidationFailure(
                f"Cannot delete product. It is being used by {in_use} vendor(s)"
            )
        session.delete(row)


def seed_catalog() -> int:
    """Insert the default fruit and vegetable catalog; returns rows added."""

    added = 0
    with session_scope() as session:
        for category, names in (("fruit", DEFAULT_FRUITS), ("vegetable", DEFAULT_VEGETABLES)):
            for name in names:
                if _name_taken(session, name):
                    continue
                session.add(CatalogItemORM(name=name, category=category))
                added += 1
    return added


__all__ = [
    "CATEGORIES",
    "catalog_item_to_model",
    "create_catalog_item",
    "delete_catalog_item",
    "get_catalog_item",
    "get_catalog_item_by_name",
    "list_catalog",
    "seed_catalog",
    "update_catalog_item",
]
