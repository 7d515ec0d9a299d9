"""Vendor-facing order message text."""

from __future__ import annotations

from typing import Sequence

from freshmarket.models.orders import OrderItem


def _format_quantity(quantity: float) -> str:
    return f"{quantity:g}"


def build_order_message(order_short_id: str, items: Sequence[OrderItem], currency: str = "KWD") -> str:
    """Summarize one vendor's share of an order in a single SMS-sized message."""

    lines = ", ".join(
        f"{_format_quantity(item.quantity)}{item.unit} {item.product_name}({item.origin})"
        for item in items
    )
    total = sum(item.total_price for item in items)
    return (
        f"🛒 New Order #{order_short_id}\n"
        f"{lines}\n"
        f"Total: {total:.2f} {currency}\n"
        "Please check your vendor dashboard for details."
    )


__all__ = ["build_order_message"]
