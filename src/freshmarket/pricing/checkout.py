"""Checkout pricing: line totals, subtotal and platform commission."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Iterable, Optional, Sequence, Tuple

from freshmarket.errors import CheckoutBlocked

from .matching import price_per_gram
from .units import to_grams, unit_grams

COMMISSION_RATE = 0.05


@dataclass(frozen=True)
class PricedLine:
    """One selected offer priced for the buyer's requested quantity.

    ``unit_price`` is expressed in the buyer's unit, not the vendor's.
    """

    quantity: float
    unit: str
    price_per_gram: float
    unit_price: float
    total_price: float


@dataclass(frozen=True)
class CheckoutQuote:
    lines: Tuple[PricedLine, ...]
    subtotal: float
    platform_commission: float
    grand_total: float


@dataclass(frozen=True)
class CheckoutRequestLine:
    """Shopping list item paired with its selected offer (if any)."""

    product_name: str
    quantity: float
    unit: str
    offer_price: Optional[float] = None
    offer_unit: Optional[str] = None

    @property
    def is_selected(self) -> bool:
        return self.offer_price is not None and self.offer_unit is not None


def price_line(quantity: float, unit: str, offer_price: float, offer_unit: str) -> PricedLine:
    per_gram = price_per_gram(offer_price, offer_unit)
    return PricedLine(
        quantity=quantity,
        unit=unit,
        price_per_gram=per_gram,
        unit_price=per_gram * unit_grams(unit),
        total_price=per_gram * to_grams(quantity, unit),
    )


def commission_for(subtotal: float) -> float:
    return subtotal * COMMISSION_RATE


def ensure_all_selected(lines: Iterable[CheckoutRequestLine]) -> None:
    """Raise naming the first product without a selected offer."""

    for line in lines:
        if not line.is_selected:
            raise CheckoutBlocked(f"Please select a vendor option for {line.product_name}")


def quote_checkout(lines: Sequence[CheckoutRequestLine]) -> CheckoutQuote:
    """Price every selected line and aggregate order totals (unrounded)."""

    ensure_all_selected(lines)
    priced = tuple(
        price_line(line.quantity, line.unit, line.offer_price, line.offer_unit)  # type: ignore[arg-type]
        for line in lines
    )
    subtotal = 0.0
    for line in priced:
        subtotal += line.total_price
    commission = commission_for(subtotal)
    return CheckoutQuote(
        lines=priced,
        subtotal=subtotal,
        platform_commission=commission,
        grand_total=subtotal + commission,
    )


__all__ = [
    "COMMISSION_RATE",
    "CheckoutQuote",
    "CheckoutRequestLine",
    "PricedLine",
    "commission_for",
    "ensure_all_selected",
    "price_line",
    "quote_checkout",
]
