"""Pure pricing and matching engine."""

from freshmarket.pricing.checkout import (
    COMMISSION_RATE,
    CheckoutQuote,
    CheckoutRequestLine,
    PricedLine,
    quote_checkout,
)
from freshmarket.pricing.matching import MatchRequest, match_offers
from freshmarket.pricing.units import to_grams, unit_grams

__all__ = [
    "COMMISSION_RATE",
    "CheckoutQuote",
    "CheckoutRequestLine",
    "MatchRequest",
    "PricedLine",
    "match_offers",
    "quote_checkout",
    "to_grams",
    "unit_grams",
]
