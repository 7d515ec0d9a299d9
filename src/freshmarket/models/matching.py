"""Offer matching result models."""

from __future__ import annotations

from pydantic import BaseModel, ConfigDict, Field

from freshmarket.models.catalog import Unit
from freshmarket.models.offers import VendorOffer
from freshmarket.models.shopping import ShoppingListItem


class OfferMatch(BaseModel):
    """Eligible offer priced against a buyer's requested quantity."""

    offer: VendorOffer
    price_per_unit: float
    price_per_gram: float
    total_price: float
    available_quantity: float
    available_unit: Unit
    vendor_count: int = Field(default=1, ge=1)
    is_best_price: bool = False

    model_config = ConfigDict(frozen=True)


class MatchingResult(BaseModel):
    item: ShoppingListItem
    options: list[OfferMatch] = Field(default_factory=list)


__all__ = ["MatchingResult", "OfferMatch"]
