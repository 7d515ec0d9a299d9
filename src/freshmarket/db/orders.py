"""Checkout, order fulfilment and commission reporting persistence helpers."""
# mypy: ignore-errors

from __future__ import annotations

import logging
from datetime import datetime, timezone
from typing import Dict, List, Optional, Tuple

from sqlalchemy import func, select, update
from sqlalchemy.orm import Session

from freshmarket.errors import CheckoutBlocked, ConflictError, NotFoundError, ValidationFailure
from freshmarket.models.orders import (
    ORDER_ITEM_STATUSES,
    CheckoutLine,
    CheckoutSummary,
    CommissionSummary,
    DashboardStats,
    Order,
    OrderItem,
    VendorOrder,
    present_amount,
)
from freshmarket.pricing.checkout import CheckoutQuote, CheckoutRequestLine, quote_checkout

from .catalog import catalog_item_to_model
from .models import (
    CatalogItemORM,
    OrderItemORM,
    OrderORM,
    ShoppingListItemORM,
    ShoppingListORM,
    UserORM,
)
from .repository import session_scope
from .shopping_lists import owned_list

logger = logging.getLogger(__name__)


def order_item_to_model(row: OrderItemORM) -> OrderItem:
    return OrderItem.model_validate(
        {
            "id": row.id,
            "order_id": row.order_id,
            "vendor_offer_id": row.vendor_offer_id,
            "vendor_id": row.vendor_id,
            "product_name": row.product_name,
            "origin": row.origin,
            "quantity": row.quantity,
            "unit": row.unit,
            "unit_price": row.unit_price,
            "total_price": row.total_price,
            "status": row.status,
            "created_at": row.created_at,
        }
    )


def order_to_model(row: OrderORM) -> Order:
    return Order.model_validate(
        {
            "id": row.id,
            "shopping_list_id": row.shopping_list_id,
            "buyer_id": row.buyer_id,
            "subtotal": row.subtotal,
            "platform_commission": row.platform_commission,
            "grand_total": row.grand_total,
            "items": [order_item_to_model(item) for item in row.items],
            "created_at": row.created_at,
        }
    )


def _draft_list(session: Session, list_id: str, buyer_id: str) -> ShoppingListORM:
    row = owned_list(session, list_id, buyer_id)
    if row.status != "draft":
        raise NotFoundError("Shopping list not found")
    return row


def _quote(items: List[ShoppingListItemORM]) -> CheckoutQuote:
    if not items:
        raise CheckoutBlocked("Shopping list has no items")
    lines = []
    for item in items:
        offer = item.selection.offer if item.selection else None
        lines.append(
            CheckoutRequestLine(
                product_name=item.catalog_item.name,
                quantity=float(item.quantity),
                unit=item.unit,
                offer_price=float(offer.price) if offer else None,
                offer_unit=offer.unit if offer else None,
            )
        )
    return quote_checkout(lines)


def checkout_summary(list_id: str, buyer_id: str) -> CheckoutSummary:
    """Price a draft list for review; figures are rounded for display."""

    with session_scope() as session:
        shopping_list = _draft_list(session, list_id, buyer_id)
        quote = _quote(shopping_list.items)
        lines = []
        for item, priced in zip(shopping_list.items, quote.lines):
            offer = item.selection.offer
            lines.append(
                CheckoutLine(
                    product=catalog_item_to_model(item.catalog_item),
                    vendor_offer_id=offer.id,
                    origin=offer.origin,
                    image_url=offer.image_url,
                    quantity=item.quantity,
                    unit=item.unit,
                    unit_price=present_amount(priced.unit_price),
                    total_price=present_amount(priced.total_price),
                )
            )
        return CheckoutSummary(
            shopping_list_id=shopping_list.id,
            items=lines,
            subtotal=present_amount(quote.subtotal),
            platform_commission=present_amount(quote.platform_commission),
            grand_total=present_amount(quote.grand_total),
        )


def place_order(list_id: str, buyer_id: str) -> Order:
    """Create an order from a fully selected draft list in one transaction.

    The list is flipped to ``completed`` with a conditional update; when another
    request already completed it, nothing is written and ``ConflictError`` is raised.
    """

    with session_scope() as session:
        shopping_list = _draft_list(session, list_id, buyer_id)
        items = list(shopping_list.items)
        quote = _quote(items)

        claimed = session.execute(
            update(ShoppingListORM)
            .where(ShoppingListORM.id == list_id, ShoppingListORM.status == "draft")
            .values(status="completed", updated_at=datetime.now(timezone.utc).replace(tzinfo=None))
            .execution_options(synchronize_session=False)
        )
        if claimed.rowcount != 1:
            raise ConflictError("Shopping list is no longer in draft")

        order = OrderORM(
            shopping_list_id=list_id,
            buyer_id=buyer_id,
            subtotal=quote.subtotal,
            platform_commission=quote.platform_commission,
            grand_total=quote.grand_total,
        )
        for position, (item, priced) in enumerate(zip(items, quote.lines)):
            offer = item.selection.offer
            order.items.append(
                OrderItemORM(
                    position=position,
                    vendor_offer_id=offer.id,
                    vendor_id=offer.vendor_id,
                    product_name=item.catalog_item.name,
                    origin=offer.origin,
                    quantity=float(item.quantity),
                    unit=item.unit,
                    unit_price=priced.unit_price,
                    total_price=priced.total_price,
                    status="pending",
                )
            )
        session.add(order)
        session.flush()
        logger.info(
            "Order created order_id=%s list_id=%s items=%s grand_total=%.4f",
            order.id,
            list_id,
            len(items),
            quote.grand_total,
            extra={"order_id": order.id},
        )
        return order_to_model(order)


def get_buyer_order(order_id: str, buyer_id: str) -> Order:
    with session_scope() as session:
        row = session.get(OrderORM, order_id)
        if row is None or row.buyer_id != buyer_id:
            raise NotFoundError("Order not found")
        return order_to_model(row)


def list_vendor_orders(vendor_id: str) -> List[VendorOrder]:
    """Group the vendor's order lines by order, newest first."""

    with session_scope() as session:
        rows = session.execute(
            select(OrderItemORM, OrderORM.created_at)
            .join(OrderORM, OrderORM.id == OrderItemORM.order_id)
            .where(OrderItemORM.vendor_id == vendor_id)
            .order_by(OrderORM.created_at.desc(), OrderItemORM.position)
        ).all()

        grouped: Dict[str, Tuple[datetime, List[OrderItem]]] = {}
        for item, created_at in rows:
            _, lines = grouped.setdefault(item.order_id, (created_at, []))
            lines.append(order_item_to_model(item))

        return [
            VendorOrder(
                order_id=order_id,
                order_date=created_at,
                items=lines,
                total_amount=sum(line.total_price for line in lines),
            )
            for order_id, (created_at, lines) in grouped.items()
        ]


def update_order_item_status(vendor_id: str, item_id: str, status: str) -> OrderItem:
    """Advance a vendor's order line along pending -> preparing -> ready -> completed."""

    if status not in ORDER_ITEM_STATUSES:
        raise ValidationFailure("Invalid status")
    with session_scope() as session:
        row = session.get(OrderItemORM, item_id)
        if row is None or row.vendor_id != vendor_id:
            raise NotFoundError("Order item not found")
        current = ORDER_ITEM_STATUSES.index(row.status)
        target = ORDER_ITEM_STATUSES.index(status)
        if target <= current:
            raise ValidationFailure(f"Cannot move order item from '{row.status}' to '{status}'")
        row.status = status
        session.flush()
        return order_item_to_model(row)


def list_orders() -> List[Order]:
    with session_scope() as session:
        rows = session.execute(select(OrderORM).order_by(OrderORM.created_at.desc())).scalars().all()
        return [order_to_model(row) for row in rows]


def get_order(order_id: str) -> Order:
    with session_scope() as session:
        row = session.get(OrderORM, order_id)
        if row is None:
            raise NotFoundError("Order not found")
        return order_to_model(row)


def commission_summary(
    start: Optional[datetime] = None,
    end: Optional[datetime] = None,
) -> CommissionSummary:
    with session_scope() as session:
        query = select(
            func.coalesce(func.sum(OrderORM.platform_commission), 0.0),
            func.count(OrderORM.id),
            func.coalesce(func.avg(OrderORM.platform_commission), 0.0),
        )
        if start is not None:
            query = query.where(OrderORM.created_at >= start)
        if end is not None:
            query = query.where(OrderORM.created_at <= end)
        total, count, average = session.execute(query).one()
        return CommissionSummary(
            total_commission=float(total),
            order_count=int(count),
            average_commission=float(average),
        )


def dashboard_stats() -> DashboardStats:
    with session_scope() as session:

        def _vendor_count(status: Optional[str] = None) -> int:
            query = select(func.count(UserORM.id)).where(UserORM.role == "vendor")
            if status:
                query = query.where(UserORM.vendor_status == status)
            return session.execute(query).scalar_one()

        total_commission = session.execute(
            select(func.coalesce(func.sum(OrderORM.platform_commission), 0.0))
        ).scalar_one()
        return DashboardStats(
            total_vendors=_vendor_count(),
            pending_vendors=_vendor_count("pending"),
            approved_vendors=_vendor_count("approved"),
            total_products=session.execute(select(func.count(CatalogItemORM.id))).scalar_one(),
            total_orders=session.execute(select(func.count(OrderORM.id))).scalar_one(),
            total_commission=float(total_commission),
        )


__all__ = [
    "checkout_summary",
    "commission_summary",
    "dashboard_stats",
    "get_buyer_order",
    "get_order",
    "list_orders",
    "list_vendor_orders",
    "order_to_model",
    "place_order",
    "update_order_item_status",
]
