"""Offer matching: eligibility, per-request pricing, ranking and deduplication."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Dict, Hashable, Iterable, List, Sequence, Tuple

from freshmarket.models.matching import OfferMatch
from freshmarket.models.offers import VendorOffer

from .units import to_grams, unit_grams


@dataclass(frozen=True)
class MatchRequest:
    """Quantity a buyer needs of one catalog item.

    ``origin_preference`` is carried for display and never filters offers.
    """

    catalog_item_id: str
    quantity: float
    unit: str
    origin_preference: str | None = None

    @property
    def grams(self) -> float:
        return to_grams(self.quantity, self.unit)


def price_per_gram(price: float, unit: str) -> float:
    return price / unit_grams(unit)


def is_eligible(offer: VendorOffer, request: MatchRequest) -> bool:
    """An offer qualifies when its available stock covers the requested grams."""

    return to_grams(offer.quantity, offer.unit) >= request.grams


def dedup_key(offer: VendorOffer) -> Tuple[Hashable, ...]:
    return (offer.catalog_item_id, offer.origin, offer.quantity, offer.price)


def _priced(offer: VendorOffer, request: MatchRequest) -> OfferMatch:
    per_gram = price_per_gram(offer.price, offer.unit)
    return OfferMatch(
        offer=offer,
        price_per_unit=offer.price,
        price_per_gram=per_gram,
        total_price=per_gram * request.grams,
        available_quantity=offer.quantity,
        available_unit=offer.unit,
    )


def match_offers(request: MatchRequest, offers: Iterable[VendorOffer]) -> List[OfferMatch]:
    """Rank the offers able to satisfy ``request``, cheapest first.

    ``offers`` must already be restricted to active offers from approved vendors
    for the requested catalog item; their iteration order breaks price ties.
    """

    priced = [_priced(offer, request) for offer in offers if is_eligible(offer, request)]
    priced.sort(key=lambda match: match.total_price)

    group_sizes: Dict[Tuple[Hashable, ...], int] = {}
    for match in priced:
        key = dedup_key(match.offer)
        group_sizes[key] = group_sizes.get(key, 0) + 1

    deduplicated: List[OfferMatch] = []
    seen: set[Tuple[Hashable, ...]] = set()
    for match in priced:
        key = dedup_key(match.offer)
        if key in seen:
            continue
        seen.add(key)
        deduplicated.append(
            match.model_copy(
                update={
                    "vendor_count": group_sizes[key],
                    "is_best_price": not deduplicated,
                }
            )
        )
    return deduplicated


def best_price(matches: Sequence[OfferMatch]) -> OfferMatch | None:
    return matches[0] if matches else None


__all__ = [
    "MatchRequest",
    "best_price",
    "dedup_key",
    "is_eligible",
    "match_offers",
    "price_per_gram",
]
