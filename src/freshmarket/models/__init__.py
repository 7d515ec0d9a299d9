"""Pydantic models defining shared data contracts."""

from freshmarket.models.catalog import CatalogItem, Category, Unit
from freshmarket.models.matching import MatchingResult, OfferMatch
from freshmarket.models.offers import InventoryLine, QualityReport, QualityScore, VendorOffer
from freshmarket.models.orders import (
    CheckoutLine,
    CheckoutSummary,
    CommissionSummary,
    DashboardStats,
    Order,
    OrderItem,
    VendorOrder,
)
from freshmarket.models.shopping import Selection, ShoppingList, ShoppingListItem
from freshmarket.models.users import User, VendorSummary

__all__ = [
    "CatalogItem",
    "Category",
    "Unit",
    "MatchingResult",
    "OfferMatch",
    "InventoryLine",
    "QualityReport",
    "QualityScore",
    "VendorOffer",
    "CheckoutLine",
    "CheckoutSummary",
    "CommissionSummary",
    "DashboardStats",
    "Order",
    "OrderItem",
    "VendorOrder",
    "Selection",
    "ShoppingList",
    "ShoppingListItem",
    "User",
    "VendorSummary",
]
