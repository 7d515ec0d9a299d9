"""ASGI application for Freshmarket."""
# mypy: ignore-errors

from __future__ import annotations

import logging
from datetime import datetime
from time import perf_counter
from typing import Any, Literal, Optional
from uuid import uuid4

from fastapi import Body, Depends, FastAPI, HTTPException, Query, Request, status
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse, Response
from prometheus_client import CONTENT_TYPE_LATEST, generate_latest
from pydantic import BaseModel, Field
from starlette.exceptions import HTTPException as StarletteHTTPException

from freshmarket import __version__, metrics
from freshmarket.config import Settings, get_settings
from freshmarket.db import catalog as catalog_repo
from freshmarket.db import offers as offers_repo
from freshmarket.db import orders as orders_repo
from freshmarket.db import shopping_lists as lists_repo
from freshmarket.db import users as users_repo
from freshmarket.errors import (
    CheckoutBlocked,
    ConflictError,
    ForbiddenError,
    IntegrationError,
    NotFoundError,
    ValidationFailure,
)
from freshmarket.logging_utils import configure_logging as configure_app_logging
from freshmarket.models.catalog import CatalogItem, Category, Unit
from freshmarket.models.matching import MatchingResult
from freshmarket.models.offers import InventoryLine, VendorOffer
from freshmarket.models.orders import (
    CheckoutSummary,
    CommissionSummary,
    DashboardStats,
    Order,
    OrderItem,
    VendorOrder,
)
from freshmarket.models.shopping import Selection, ShoppingList, ShoppingListItem
from freshmarket.models.users import NotificationPreference, User, VendorStatus, VendorSummary
from freshmarket.notifications import NotificationWorker
from freshmarket.quality import QualityAnalyzer
from freshmarket.server import deps

logger = logging.getLogger(__name__)

_ERROR_STATUS = (
    (NotFoundError, status.HTTP_404_NOT_FOUND),
    (ValidationFailure, status.HTTP_400_BAD_REQUEST),
    (ForbiddenError, status.HTTP_403_FORBIDDEN),
    (ConflictError, status.HTTP_409_CONFLICT),
    (IntegrationError, status.HTTP_502_BAD_GATEWAY),
)


def _json_safe(value: Any) -> Any:
    """Convert non-serializable values into JSON-safe representations."""

    if isinstance(value, (str, int, float, bool)) or value is None:
        return value
    if isinstance(value, bytes):
        try:
            return value.decode("utf-8")
        except UnicodeDecodeError:
            return value.hex()
    if isinstance(value, (list, tuple)):
        return [_json_safe(entry) for entry in value]
    if isinstance(value, dict):
        return {key: _json_safe(sub_value) for key, sub_value in value.items()}
    return repr(value)


def _normalize_validation_errors(errors: list[dict[str, Any]]) -> list[dict[str, Any]]:
    """Ensure validation error payloads can be serialized to JSON."""

    return [{key: _json_safe(value) for key, value in error.items()} for error in errors]


def _log_extra(request: Request) -> dict[str, Any]:
    request_id = getattr(request.state, "request_id", None)
    return {"extra": {"request_id": request_id}} if request_id else {}


def _configure_logging(settings: Settings) -> None:
    secrets = [
        settings.api_token or "",
        settings.sms_auth_token or "",
        settings.vision_api_key or "",
    ]
    configure_app_logging(settings.log_level, settings.log_format, secrets)


def _attach_quality_report(
    analyzer: Optional[QualityAnalyzer],
    offer: VendorOffer,
) -> VendorOffer:
    """Best-effort image analysis for a freshly listed or re-imaged offer."""

    if analyzer is None or not offer.image_url:
        return offer
    try:
        report = analyzer.analyze(offer.image_url, offer.product.name)
    except IntegrationError as exc:
        logger.warning("Quality analysis skipped for offer %s: %s", offer.id, exc)
        return offer
    return offers_repo.set_quality_report(offer.id, report)


def create_app() -> FastAPI:
    """Create and configure a FastAPI application instance."""

    settings = get_settings()
    _configure_logging(settings)

    application = FastAPI(title="Freshmarket", version=__version__)
    application.state.notification_worker = deps.build_notification_worker(settings)
    application.state.quality_analyzer = deps.build_analyzer(settings)

    @application.on_event("startup")
    async def start_notification_worker() -> None:
        application.state.notification_worker.start()

    @application.on_event("shutdown")
    async def stop_notification_worker() -> None:
        application.state.notification_worker.stop()

    logger.debug("Application created with log level %s", settings.log_level)

    access_logger = logging.getLogger("freshmarket.access")

    @application.middleware("http")
    async def log_request_response(request: Request, call_next):
        """Tag requests with an id, record metrics and emit access logs."""

        request_id = request.headers.get("X-Request-ID") or uuid4().hex
        request.state.request_id = request_id
        start = perf_counter()
        method = request.method
        try:
            response: Response = await call_next(request)
        except Exception:
            duration_ms = (perf_counter() - start) * 1000
            access_logger.exception(
                "HTTP %s %s status=500 duration_ms=%.2f",
                method,
                request.url.path,
                duration_ms,
                extra={"request_id": request_id},
            )
            path = _route_path(request)
            metrics.REQUEST_COUNT.labels(method=method, path=path, status="500").inc()
            metrics.REQUEST_LATENCY.labels(method=method, path=path).observe(duration_ms / 1000.0)
            raise

        duration_ms = (perf_counter() - start) * 1000
        response.headers.setdefault("X-Request-ID", request_id)
        if settings.log_requests:
            access_logger.info(
                "HTTP %s %s status=%s duration_ms=%.2f",
                method,
                request.url.path,
                response.status_code,
                duration_ms,
                extra={"request_id": request_id},
            )
        path = _route_path(request)
        metrics.REQUEST_COUNT.labels(
            method=method,
            path=path,
            status=str(response.status_code),
        ).inc()
        metrics.REQUEST_LATENCY.labels(method=method, path=path).observe(duration_ms / 1000.0)
        return response

    @application.exception_handler(RequestValidationError)
    async def validation_exception_handler(request: Request, exc: RequestValidationError):
        logger.warning(
            "Validation error on %s %s: %s",
            request.method,
            request.url.path,
            exc.errors(),
            **_log_extra(request),
        )
        return JSONResponse(
            status_code=status.HTTP_400_BAD_REQUEST,
            content={
                "error": "Invalid request",
                "detail": _normalize_validation_errors(exc.errors()),
            },
        )

    @application.exception_handler(StarletteHTTPException)
    async def http_exception_handler(request: Request, exc: StarletteHTTPException):
        return JSONResponse(
            status_code=exc.status_code,
            content={"error": str(exc.detail)},
            headers=getattr(exc, "headers", None),
        )

    def _domain_error_handler(status_code: int):
        async def _handler(request: Request, exc: Exception):
            log = logger.warning if status_code >= 500 else logger.info
            log(
                "%s %s -> %s: %s",
                request.method,
                request.url.path,
                status_code,
                exc,
                **_log_extra(request),
            )
            return JSONResponse(status_code=status_code, content={"error": str(exc)})

        return _handler

    for exc_type, status_code in _ERROR_STATUS:
        application.add_exception_handler(exc_type, _domain_error_handler(status_code))

    # ------------------------------------------------------------------ public

    @application.get("/health", summary="Liveness probe")
    def health() -> dict[str, str]:
        return {"status": "ok", "version": __version__}

    @application.get("/metrics", include_in_schema=False)
    def metrics_endpoint() -> Response:
        return Response(generate_latest(), media_type=CONTENT_TYPE_LATEST)

    @application.get("/products", response_model=list[CatalogItem], summary="List catalog")
    def products_list(
        category: Optional[Category] = Query(default=None),
        provider: deps.CatalogProvider = Depends(deps.get_catalog_provider),
    ) -> list[CatalogItem]:
        return provider(category)

    @application.get("/products/{product_id}", response_model=CatalogItem, summary="Get catalog item")
    def products_get(
        product_id: str,
        fetcher: deps.CatalogItemFetcher = Depends(deps.get_catalog_item_fetcher),
    ) -> CatalogItem:
        item = fetcher(product_id)
        if item is None:
            raise NotFoundError("Product not found")
        return item

    @application.post(
        "/users",
        response_model=User,
        status_code=status.HTTP_201_CREATED,
        summary="Register a buyer or vendor",
    )
    def users_create(
        payload: UserCreateRequest = Body(...),
        auth: None = Depends(deps.require_api_token),
    ) -> User:
        return users_repo.create_user(**payload.model_dump())

    # ------------------------------------------------------------------ vendor

    @application.post(
        "/vendor/products",
        response_model=VendorOffer,
        status_code=status.HTTP_201_CREATED,
        summary="List a catalog item for sale",
    )
    def vendor_products_create(
        payload: OfferCreateRequest = Body(...),
        auth: None = Depends(deps.require_api_token),
        vendor: User = Depends(deps.require_approved_vendor),
        creator: deps.OfferCreator = Depends(deps.get_offer_creator),
        analyzer: Optional[QualityAnalyzer] = Depends(deps.get_quality_analyzer),
    ) -> VendorOffer:
        offer = creator({**payload.model_dump(), "vendor_id": vendor.id})
        logger.info(
            "Vendor %s listed offer %s product=%s",
            vendor.id,
            offer.id,
            offer.product.name,
        )
        return _attach_quality_report(analyzer, offer)

    @application.get(
        "/vendor/products",
        response_model=list[VendorOffer],
        summary="List the vendor's offers",
    )
    def vendor_products_list(
        active: Optional[bool] = Query(default=None),
        vendor: User = Depends(deps.require_approved_vendor),
    ) -> list[VendorOffer]:
        return offers_repo.list_vendor_offers(vendor.id, active)

    @application.get(
        "/vendor/products/{offer_id}",
        response_model=VendorOffer,
        summary="Get one of the vendor's offers",
    )
    def vendor_products_get(
        offer_id: str,
        vendor: User = Depends(deps.require_approved_vendor),
    ) -> VendorOffer:
        return offers_repo.get_vendor_offer(vendor.id, offer_id)

    @application.put(
        "/vendor/products/{offer_id}",
        response_model=VendorOffer,
        summary="Update an offer",
    )
    def vendor_products_update(
        offer_id: str,
        payload: OfferUpdateRequest = Body(...),
        auth: None = Depends(deps.require_api_token),
        vendor: User = Depends(deps.require_approved_vendor),
        analyzer: Optional[QualityAnalyzer] = Depends(deps.get_quality_analyzer),
    ) -> VendorOffer:
        update_payload = payload.model_dump(exclude_unset=True)
        if not update_payload:
            raise ValidationFailure("No fields provided for update")
        offer = offers_repo.update_offer(vendor.id, offer_id, **update_payload)
        if update_payload.get("image_url"):
            offer = _attach_quality_report(analyzer, offer)
        return offer

    @application.delete(
        "/vendor/products/{offer_id}",
        status_code=status.HTTP_204_NO_CONTENT,
        summary="Deactivate (or hard delete) an offer",
    )
    def vendor_products_delete(
        offer_id: str,
        hard: bool = Query(default=False),
        auth: None = Depends(deps.require_api_token),
        vendor: User = Depends(deps.require_approved_vendor),
    ) -> Response:
        if hard:
            offers_repo.delete_offer(vendor.id, offer_id)
        else:
            offers_repo.deactivate_offer(vendor.id, offer_id)
        return Response(status_code=status.HTTP_204_NO_CONTENT)

    @application.get(
        "/vendor/inventory",
        response_model=list[InventoryLine],
        summary="Stock summary per offer",
    )
    def vendor_inventory(vendor: User = Depends(deps.require_approved_vendor)) -> list[InventoryLine]:
        return offers_repo.inventory_summary(vendor.id)

    @application.put(
        "/vendor/inventory/{offer_id}",
        response_model=VendorOffer,
        summary="Set current stock for an offer",
    )
    def vendor_inventory_update(
        offer_id: str,
        payload: StockUpdateRequest = Body(...),
        auth: None = Depends(deps.require_api_token),
        vendor: User = Depends(deps.require_approved_vendor),
    ) -> VendorOffer:
        return offers_repo.update_stock(
            vendor.id,
            offer_id,
            quantity=payload.quantity,
            initial_stock=payload.initial_stock,
        )

    @application.get(
        "/vendor/orders",
        response_model=list[VendorOrder],
        summary="Orders containing the vendor's offers",
    )
    def vendor_orders(vendor: User = Depends(deps.require_approved_vendor)) -> list[VendorOrder]:
        return orders_repo.list_vendor_orders(vendor.id)

    @application.put(
        "/vendor/orders/items/{item_id}/status",
        response_model=OrderItem,
        summary="Advance an order line's fulfilment status",
    )
    def vendor_order_item_status(
        item_id: str,
        payload: OrderItemStatusRequest = Body(...),
        auth: None = Depends(deps.require_api_token),
        vendor: User = Depends(deps.require_approved_vendor),
    ) -> OrderItem:
        return orders_repo.update_order_item_status(vendor.id, item_id, payload.status)

    # ------------------------------------------------------------------- buyer

    @application.post(
        "/buyer/shopping-lists",
        response_model=ShoppingList,
        status_code=status.HTTP_201_CREATED,
        summary="Start a shopping list",
    )
    def buyer_lists_create(
        auth: None = Depends(deps.require_api_token),
        buyer: User = Depends(deps.require_buyer),
    ) -> ShoppingList:
        return lists_repo.create_shopping_list(buyer.id)

    @application.get(
        "/buyer/shopping-lists",
        response_model=list[ShoppingList],
        summary="List the buyer's shopping lists",
    )
    def buyer_lists(buyer: User = Depends(deps.require_buyer)) -> list[ShoppingList]:
        return lists_repo.list_shopping_lists(buyer.id)

    @application.get(
        "/buyer/shopping-lists/{list_id}",
        response_model=ShoppingList,
        summary="Get a shopping list",
    )
    def buyer_lists_get(list_id: str, buyer: User = Depends(deps.require_buyer)) -> ShoppingList:
        return lists_repo.get_shopping_list(list_id, buyer.id)

    @application.delete(
        "/buyer/shopping-lists/{list_id}",
        status_code=status.HTTP_204_NO_CONTENT,
        summary="Delete a draft shopping list",
    )
    def buyer_lists_delete(
        list_id: str,
        auth: None = Depends(deps.require_api_token),
        buyer: User = Depends(deps.require_buyer),
    ) -> Response:
        lists_repo.delete_shopping_list(list_id, buyer.id)
        return Response(status_code=status.HTTP_204_NO_CONTENT)

    @application.post(
        "/buyer/shopping-lists/{list_id}/items",
        response_model=ShoppingListItem,
        status_code=status.HTTP_201_CREATED,
        summary="Add an item to a shopping list",
    )
    def buyer_list_items_create(
        list_id: str,
        payload: ShoppingListItemCreateRequest = Body(...),
        auth: None = Depends(deps.require_api_token),
        buyer: User = Depends(deps.require_buyer),
    ) -> ShoppingListItem:
        return lists_repo.add_item(list_id, buyer.id, **payload.model_dump())

    @application.delete(
        "/buyer/shopping-lists/{list_id}/items/{item_id}",
        status_code=status.HTTP_204_NO_CONTENT,
        summary="Remove an item from a shopping list",
    )
    def buyer_list_items_delete(
        list_id: str,
        item_id: str,
        auth: None = Depends(deps.require_api_token),
        buyer: User = Depends(deps.require_buyer),
    ) -> Response:
        lists_repo.remove_item(list_id, item_id, buyer.id)
        return Response(status_code=status.HTTP_204_NO_CONTENT)

    @application.get(
        "/buyer/shopping-list-items/{item_id}/matching",
        response_model=MatchingResult,
        summary="Rank vendor offers for a shopping list item",
    )
    def buyer_item_matching(
        item_id: str,
        buyer: User = Depends(deps.require_buyer),
        finder: deps.MatchFinder = Depends(deps.get_match_finder),
    ) -> MatchingResult:
        result = finder(item_id, buyer.id)
        logger.debug("Matching item=%s options=%s", item_id, len(result.options))
        return result

    @application.post(
        "/buyer/shopping-list-items/{item_id}/select",
        response_model=Selection,
        summary="Choose the vendor offer for an item",
    )
    def buyer_item_select(
        item_id: str,
        payload: SelectionRequest = Body(...),
        auth: None = Depends(deps.require_api_token),
        buyer: User = Depends(deps.require_buyer),
        saver: deps.SelectionSaver = Depends(deps.get_selection_saver),
    ) -> Selection:
        return saver(item_id, payload.vendor_offer_id, buyer.id)

    @application.get(
        "/buyer/shopping-lists/{list_id}/checkout",
        response_model=CheckoutSummary,
        summary="Review totals before placing the order",
    )
    def buyer_checkout_summary(
        list_id: str,
        buyer: User = Depends(deps.require_buyer),
        summarizer: deps.CheckoutSummarizer = Depends(deps.get_checkout_summarizer),
    ) -> CheckoutSummary:
        return summarizer(list_id, buyer.id)

    @application.post(
        "/buyer/shopping-lists/{list_id}/checkout",
        response_model=Order,
        status_code=status.HTTP_201_CREATED,
        summary="Place the order",
    )
    def buyer_checkout(
        list_id: str,
        request: Request,
        auth: None = Depends(deps.require_api_token),
        buyer: User = Depends(deps.require_buyer),
        placer: deps.OrderPlacer = Depends(deps.get_order_placer),
        worker: NotificationWorker = Depends(deps.get_notification_worker),
    ) -> Order:
        try:
            order = placer(list_id, buyer.id)
        except CheckoutBlocked:
            metrics.CHECKOUTS.labels(result="blocked").inc()
            raise
        except ConflictError:
            metrics.CHECKOUTS.labels(result="conflict").inc()
            raise
        metrics.CHECKOUTS.labels(result="succeeded").inc()
        logger.info(
            "Checkout completed list_id=%s order=%s",
            list_id,
            order.short_id,
            extra={"request_id": request.state.request_id, "order_id": order.id},
        )
        worker.submit(order)
        return order.presented()

    @application.get(
        "/buyer/orders/{order_id}",
        response_model=Order,
        summary="Order receipt",
    )
    def buyer_order(order_id: str, buyer: User = Depends(deps.require_buyer)) -> Order:
        return orders_repo.get_buyer_order(order_id, buyer.id).presented()

    # ------------------------------------------------------------------- admin

    @application.get(
        "/admin/dashboard/stats",
        response_model=DashboardStats,
        summary="Marketplace counters",
    )
    def admin_stats(admin: User = Depends(deps.require_admin)) -> DashboardStats:
        return orders_repo.dashboard_stats()

    @application.get(
        "/admin/vendors",
        response_model=list[VendorSummary],
        summary="List vendor accounts",
    )
    def admin_vendors(
        vendor_status: Optional[VendorStatus] = Query(default=None, alias="status"),
        admin: User = Depends(deps.require_admin),
    ) -> list[VendorSummary]:
        return users_repo.list_vendors(vendor_status)

    @application.get(
        "/admin/vendors/{vendor_id}",
        response_model=VendorSummary,
        summary="Get a vendor account",
    )
    def admin_vendor(vendor_id: str, admin: User = Depends(deps.require_admin)) -> VendorSummary:
        return users_repo.get_vendor(vendor_id)

    @application.put(
        "/admin/vendors/{vendor_id}/approve",
        response_model=User,
        summary="Approve a vendor",
    )
    def admin_vendor_approve(
        vendor_id: str,
        auth: None = Depends(deps.require_api_token),
        admin: User = Depends(deps.require_admin),
    ) -> User:
        logger.info("Admin %s approved vendor %s", admin.id, vendor_id)
        return users_repo.approve_vendor(vendor_id)

    @application.put(
        "/admin/vendors/{vendor_id}/reject",
        response_model=User,
        summary="Reject a vendor",
    )
    def admin_vendor_reject(
        vendor_id: str,
        auth: None = Depends(deps.require_api_token),
        admin: User = Depends(deps.require_admin),
    ) -> User:
        logger.info("Admin %s rejected vendor %s", admin.id, vendor_id)
        return users_repo.reject_vendor(vendor_id)

    @application.get(
        "/admin/catalog",
        response_model=list[CatalogItem],
        summary="Catalog with offer counts",
    )
    def admin_catalog(
        category: Optional[Category] = Query(default=None),
        admin: User = Depends(deps.require_admin),
    ) -> list[CatalogItem]:
        return catalog_repo.list_catalog(category, with_counts=True)

    @application.post(
        "/admin/catalog",
        response_model=CatalogItem,
        status_code=status.HTTP_201_CREATED,
        summary="Add a catalog item",
    )
    def admin_catalog_create(
        payload: CatalogItemCreateRequest = Body(...),
        auth: None = Depends(deps.require_api_token),
        admin: User = Depends(deps.require_admin),
    ) -> CatalogItem:
        return catalog_repo.create_catalog_item(name=payload.name, category=payload.category)

    @application.put(
        "/admin/catalog/{item_id}",
        response_model=CatalogItem,
        summary="Rename or recategorize a catalog item",
    )
    def admin_catalog_update(
        item_id: str,
        payload: CatalogItemUpdateRequest = Body(...),
        auth: None = Depends(deps.require_api_token),
        admin: User = Depends(deps.require_admin),
    ) -> CatalogItem:
        return catalog_repo.update_catalog_item(
            item_id, name=payload.name, category=payload.category
        )

    @application.delete(
        "/admin/catalog/{item_id}",
        status_code=status.HTTP_204_NO_CONTENT,
        summary="Delete an unused catalog item",
    )
    def admin_catalog_delete(
        item_id: str,
        auth: None = Depends(deps.require_api_token),
        admin: User = Depends(deps.require_admin),
    ) -> Response:
        catalog_repo.delete_catalog_item(item_id)
        return Response(status_code=status.HTTP_204_NO_CONTENT)

    @application.get("/admin/orders", response_model=list[Order], summary="List all orders")
    def admin_orders(admin: User = Depends(deps.require_admin)) -> list[Order]:
        return [order.presented() for order in orders_repo.list_orders()]

    @application.get(
        "/admin/orders/commission/summary",
        response_model=CommissionSummary,
        summary="Platform commission over an optional date range",
    )
    def admin_commission(
        start_date: Optional[datetime] = Query(default=None, alias="startDate"),
        end_date: Optional[datetime] = Query(default=None, alias="endDate"),
        admin: User = Depends(deps.require_admin),
        reporter: deps.CommissionReporter = Depends(deps.get_commission_reporter),
    ) -> CommissionSummary:
        return reporter(start_date, end_date)

    @application.get("/admin/orders/{order_id}", response_model=Order, summary="Get an order")
    def admin_order(order_id: str, admin: User = Depends(deps.require_admin)) -> Order:
        return orders_repo.get_order(order_id).presented()

    @application.post(
        "/admin/offers/{offer_id}/analyze",
        response_model=VendorOffer,
        summary="Re-run image quality analysis for an offer",
    )
    def admin_offer_analyze(
        offer_id: str,
        auth: None = Depends(deps.require_api_token),
        admin: User = Depends(deps.require_admin),
        analyzer: Optional[QualityAnalyzer] = Depends(deps.get_quality_analyzer),
    ) -> VendorOffer:
        if analyzer is None:
            raise HTTPException(
                status_code=status.HTTP_503_SERVICE_UNAVAILABLE,
                detail="Image analysis is not configured",
            )
        offer = offers_repo.get_offer(offer_id)
        if offer is None:
            raise NotFoundError("Product not found")
        if not offer.image_url:
            raise ValidationFailure("Product has no image to analyze")
        report = analyzer.analyze(offer.image_url, offer.product.name)
        return offers_repo.set_quality_report(offer.id, report)

    return application


def _route_path(request: Request) -> str:
    """Label metrics with the route template so ids do not explode cardinality."""

    route = request.scope.get("route")
    return getattr(route, "path", None) or request.url.path


class UserCreateRequest(BaseModel):
    email: str = Field(..., min_length=3, max_length=255)
    role: Literal["buyer", "vendor"]
    phone_number: Optional[str] = Field(default=None, max_length=32)
    notification_preference: NotificationPreference = "sms"


class OfferCreateRequest(BaseModel):
    catalog_item_id: str = Field(..., min_length=1)
    quantity: float = Field(..., gt=0)
    unit: Unit
    price: float = Field(..., gt=0)
    origin: str = Field(..., min_length=1, max_length=255)
    image_url: Optional[str] = Field(default=None, max_length=512)


class OfferUpdateRequest(BaseModel):
    quantity: Optional[float] = Field(default=None, gt=0)
    unit: Optional[Unit] = None
    price: Optional[float] = Field(default=None, gt=0)
    origin: Optional[str] = Field(default=None, min_length=1, max_length=255)
    is_active: Optional[bool] = None
    image_url: Optional[str] = Field(default=None, max_length=512)


class StockUpdateRequest(BaseModel):
    quantity: float = Field(..., ge=0)
    initial_stock: Optional[float] = Field(default=None, ge=0)


class OrderItemStatusRequest(BaseModel):
    status: str = Field(..., min_length=1)


class ShoppingListItemCreateRequest(BaseModel):
    catalog_item_id: str = Field(..., min_length=1)
    quantity: float = Field(..., gt=0)
    unit: Unit
    origin_preference: Optional[str] = Field(default=None, max_length=255)


class SelectionRequest(BaseModel):
    vendor_offer_id: str = Field(..., min_length=1)


class CatalogItemCreateRequest(BaseModel):
    name: str = Field(..., min_length=1, max_length=255)
    category: Category


class CatalogItemUpdateRequest(BaseModel):
    name: Optional[str] = Field(default=None, min_length=1, max_length=255)
    category: Optional[Category] = None


app = create_app()

__all__ = ["app", "create_app"]
