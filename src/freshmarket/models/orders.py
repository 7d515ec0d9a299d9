"""Order, checkout and reporting models."""

from __future__ import annotations

from datetime import datetime
from typing import Literal, Optional

from pydantic import BaseModel, ConfigDict, Field

from freshmarket.models.catalog import CatalogItem, Unit

OrderItemStatus = Literal["pending", "preparing", "ready", "completed"]
ORDER_ITEM_STATUSES: tuple[str, ...] = ("pending", "preparing", "ready", "completed")


def present_amount(value: float) -> float:
    """Round a currency figure for presentation."""

    return round(value, 2)


class OrderItem(BaseModel):
    """Frozen snapshot of one purchased line."""

    id: str
    order_id: str
    vendor_offer_id: str
    vendor_id: str
    product_name: str
    origin: str
    quantity: float
    unit: Unit
    unit_price: float
    total_price: float
    status: OrderItemStatus = "pending"
    created_at: datetime

    model_config = ConfigDict(frozen=True)


class Order(BaseModel):
    """Order created from a completed shopping list."""

    id: str
    shopping_list_id: str
    buyer_id: str
    subtotal: float
    platform_commission: float
    grand_total: float
    items: list[OrderItem] = Field(default_factory=list)
    created_at: datetime

    model_config = ConfigDict(frozen=True)

    @property
    def short_id(self) -> str:
        return self.id.replace("-", "")[:8]

    def presented(self) -> "Order":
        """Return a copy with currency figures rounded for display."""

        return self.model_copy(
            update={
                "subtotal": present_amount(self.subtotal),
                "platform_commission": present_amount(self.platform_commission),
                "grand_total": present_amount(self.grand_total),
                "items": [
                    item.model_copy(
                        update={
                            "unit_price": present_amount(item.unit_price),
                            "total_price": present_amount(item.total_price),
                        }
                    )
                    for item in self.items
                ],
            }
        )


class CheckoutLine(BaseModel):
    product: CatalogItem
    vendor_offer_id: str
    origin: str
    image_url: Optional[str] = None
    quantity: float
    unit: Unit
    unit_price: float
    total_price: float

    model_config = ConfigDict(frozen=True)


class CheckoutSummary(BaseModel):
    """Pre-purchase pricing of a draft shopping list."""

    shopping_list_id: str
    items: list[CheckoutLine] = Field(default_factory=list)
    subtotal: float
    platform_commission: float
    grand_total: float

    model_config = ConfigDict(frozen=True)


class VendorOrder(BaseModel):
    """A vendor's share of one order."""

    order_id: str
    order_date: datetime
    items: list[OrderItem] = Field(default_factory=list)
    total_amount: float


class CommissionSummary(BaseModel):
    total_commission: float
    order_count: int
    average_commission: float


class DashboardStats(BaseModel):
    total_vendors: int
    pending_vendors: int
    approved_vendors: int
    total_products: int
    total_orders: int
    total_commission: float


__all__ = [
    "ORDER_ITEM_STATUSES",
    "CheckoutLine",
    "CheckoutSummary",
    "CommissionSummary",
    "DashboardStats",
    "Order",
    "OrderItem",
    "OrderItemStatus",
    "VendorOrder",
    "present_amount",
]
