"""Dependency definitions for the Freshmarket API server."""

from __future__ import annotations

from datetime import datetime
from typing import Callable, List, Optional

from fastapi import Depends, Header, HTTPException, Request, status

from freshmarket.config import Settings, get_settings
from freshmarket.db import catalog as catalog_repo
from freshmarket.db import offers as offers_repo
from freshmarket.db import orders as orders_repo
from freshmarket.db import shopping_lists as lists_repo
from freshmarket.db import users as users_repo
from freshmarket.models.catalog import CatalogItem
from freshmarket.models.matching import MatchingResult
from freshmarket.models.offers import VendorOffer
from freshmarket.models.orders import CheckoutSummary, CommissionSummary, Order
from freshmarket.models.shopping import Selection
from freshmarket.models.users import User
from freshmarket.notifications import NotificationWorker, VendorNotifier, build_sms_gateway
from freshmarket.quality import QualityAnalyzer, build_quality_analyzer

UserLookup = Callable[[str], Optional[User]]
CatalogProvider = Callable[[Optional[str]], List[CatalogItem]]
CatalogItemFetcher = Callable[[str], Optional[CatalogItem]]
OfferCreator = Callable[[dict], VendorOffer]
MatchFinder = Callable[[str, str], MatchingResult]
SelectionSaver = Callable[[str, str, str], Selection]
CheckoutSummarizer = Callable[[str, str], CheckoutSummary]
OrderPlacer = Callable[[str, str], Order]
CommissionReporter = Callable[[Optional[datetime], Optional[datetime]], CommissionSummary]


def get_user_lookup() -> UserLookup:
    return users_repo.get_user


def get_catalog_provider() -> CatalogProvider:
    return lambda category: catalog_repo.list_catalog(category)


def get_catalog_item_fetcher() -> CatalogItemFetcher:
    return catalog_repo.get_catalog_item


def get_offer_creator() -> OfferCreator:
    return lambda payload: offers_repo.create_offer(**payload)


def get_match_finder() -> MatchFinder:
    return lists_repo.find_matches


def get_selection_saver() -> SelectionSaver:
    return lambda item_id, offer_id, buyer_id: lists_repo.save_selection(
        item_id, offer_id, buyer_id=buyer_id
    )


def get_checkout_summarizer() -> CheckoutSummarizer:
    return orders_repo.checkout_summary


def get_order_placer() -> OrderPlacer:
    return orders_repo.place_order


def get_commission_reporter() -> CommissionReporter:
    return orders_repo.commission_summary


def get_notification_worker(request: Request) -> NotificationWorker:
    """Return the process-wide worker created at application start."""

    return request.app.state.notification_worker


def get_quality_analyzer(request: Request) -> Optional[QualityAnalyzer]:
    return request.app.state.quality_analyzer


def build_notification_worker(settings: Settings) -> NotificationWorker:
    notifier = VendorNotifier.from_settings(settings, build_sms_gateway(settings))
    return NotificationWorker(notifier, shutdown_timeout=settings.notification_timeout)


def build_analyzer(settings: Settings) -> Optional[QualityAnalyzer]:
    return build_quality_analyzer(settings)


def require_api_token(
    request: Request,
    settings = Depends(get_settings),
) -> None:
    """Ensure requests carry the configured API token when required."""

    token = settings.api_token
    if not token:
        return

    auth_header = request.headers.get("Authorization")
    if auth_header and auth_header.split("Bearer ")[-1].strip() == token:
        return

    if request.headers.get("X-API-Key") == token:
        return

    if request.query_params.get("api_token") == token:
        return

    raise HTTPException(status_code=status.HTTP_401_UNAUTHORIZED, detail="Unauthorized")


def get_current_user(
    user_id: Optional[str] = Header(default=None, alias="X-User-ID"),
    lookup: UserLookup = Depends(get_user_lookup),
) -> User:
    """Resolve the calling account from the ``X-User-ID`` header."""

    if not user_id:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED, detail="Authentication required"
        )
    user = lookup(user_id.strip())
    if user is None:
        raise HTTPException(status_code=status.HTTP_401_UNAUTHORIZED, detail="Invalid user")
    return user


def require_role(*roles: str) -> Callable[..., User]:
    def _dependency(user: User = Depends(get_current_user)) -> User:
        if user.role not in roles:
            raise HTTPException(status_code=status.HTTP_403_FORBIDDEN, detail="Access denied")
        return user

    return _dependency


require_buyer = require_role("buyer")
require_admin = require_role("admin")
_require_vendor = require_role("vendor")


def require_approved_vendor(user: User = Depends(_require_vendor)) -> User:
    if user.vendor_status != "approved":
        raise HTTPException(
            status_code=status.HTTP_403_FORBIDDEN,
            detail="Your vendor account is pending approval",
        )
    return user
