"""Shopping list models."""

from __future__ import annotations

from datetime import datetime
from typing import Literal, Optional

from pydantic import BaseModel, ConfigDict, Field

from freshmarket.models.catalog import CatalogItem, Unit
from freshmarket.models.offers import VendorOffer

ShoppingListStatus = Literal["draft", "completed"]


class Selection(BaseModel):
    """Buyer's chosen vendor offer for one shopping list item."""

    id: str
    shopping_list_id: str
    shopping_list_item_id: str
    vendor_offer_id: str
    offer: Optional[VendorOffer] = None
    created_at: datetime

    model_config = ConfigDict(frozen=True)


class ShoppingListItem(BaseModel):
    """Requested produce need on a buyer's shopping list."""

    id: str
    shopping_list_id: str
    catalog_item_id: str
    product: CatalogItem
    quantity: float = Field(gt=0)
    unit: Unit
    origin_preference: Optional[str] = None
    selection: Optional[Selection] = None

    model_config = ConfigDict(frozen=True)


class ShoppingList(BaseModel):
    """Buyer shopping list with its items and current selections."""

    id: str
    buyer_id: str
    status: ShoppingListStatus
    items: list[ShoppingListItem] = Field(default_factory=list)
    created_at: datetime
    updated_at: datetime

    model_config = ConfigDict(frozen=True)


__all__ = ["Selection", "ShoppingList", "ShoppingListItem", "ShoppingListStatus"]
