"""SQLAlchemy models representing Freshmarket persistence tables."""

from __future__ import annotations

from datetime import datetime, timezone
from typing import List, Optional
from uuid import uuid4

from sqlalchemy import (
    Boolean,
    DateTime,
    Float,
    ForeignKey,
    Integer,
    String,
    Text,
    UniqueConstraint,
    func,
)
from sqlalchemy.orm import DeclarativeBase, Mapped, mapped_column, relationship


def _new_id() -> str:
    return str(uuid4())


def _utcnow() -> datetime:
    return datetime.now(timezone.utc).replace(tzinfo=None)


class Base(DeclarativeBase):
    """Declarative base class for Freshmarket ORM models."""


class UserORM(Base):
    """Marketplace account; vendors carry an approval status."""

    __tablename__ = "users"

    id: Mapped[str] = mapped_column(String(36), primary_key=True, default=_new_id)
    email: Mapped[str] = mapped_column(String(255), nullable=False, unique=True)
    role: Mapped[str] = mapped_column(String(16), nullable=False)
    vendor_status: Mapped[Optional[str]] = mapped_column(String(16), nullable=True)
    phone_number: Mapped[Optional[str]] = mapped_column(String(32), nullable=True)
    notification_preference: Mapped[str] = mapped_column(String(16), nullable=False, default="sms")
    created_at: Mapped[datetime] = mapped_column(
        DateTime,
        default=_utcnow,
        nullable=False,
    )

    offers: Mapped[List["VendorOfferORM"]] = relationship(back_populates="vendor")


class CatalogItemORM(Base):
    """Platform-defined produce type."""

    __tablename__ = "catalog_items"

    id: Mapped[str] = mapped_column(String(36), primary_key=True, default=_new_id)
    name: Mapped[str] = mapped_column(String(255), nullable=False, unique=True)
    category: Mapped[str] = mapped_column(String(16), nullable=False)
    created_at: Mapped[datetime] = mapped_column(
        DateTime,
        server_default=func.now(),
        nullable=False,
    )

    offers: Mapped[List["VendorOfferORM"]] = relationship(back_populates="catalog_item")


class VendorOfferORM(Base):
    """Vendor listing of a catalog item with price, stock and origin."""

    __tablename__ = "vendor_offers"

    id: Mapped[str] = mapped_column(String(36), primary_key=True, default=_new_id)
    vendor_id: Mapped[str] = mapped_column(String(36), ForeignKey("users.id"), nullable=False)
    catalog_item_id: Mapped[str] = mapped_column(
        String(36), ForeignKey("catalog_items.id"), nullable=False
    )
    unit: Mapped[str] = mapped_column(String(8), nullable=False)
    price: Mapped[float] = mapped_column(Float, nullable=False)
    quantity: Mapped[float] = mapped_column(Float, nullable=False)
    initial_stock: Mapped[Optional[float]] = mapped_column(Float, nullable=True)
    origin: Mapped[str] = mapped_column(String(255), nullable=False)
    is_active: Mapped[bool] = mapped_column(Boolean, nullable=False, default=True)
    image_url: Mapped[Optional[str]] = mapped_column(String(1024), nullable=True)
    quality_report: Mapped[Optional[str]] = mapped_column(Text, nullable=True)
    created_at: Mapped[datetime] = mapped_column(
        DateTime,
        default=_utcnow,
        nullable=False,
    )
    updated_at: Mapped[datetime] = mapped_column(
        DateTime,
        default=_utcnow,
        onupdate=_utcnow,
        nullable=False,
    )

    vendor: Mapped[UserORM] = relationship(back_populates="offers")
    catalog_item: Mapped[CatalogItemORM] = relationship(back_populates="offers")


class ShoppingListORM(Base):
    """Buyer shopping list; ``draft`` until checkout completes it."""

    __tablename__ = "shopping_lists"

    id: Mapped[str] = mapped_column(String(36), primary_key=True, default=_new_id)
    buyer_id: Mapped[str] = mapped_column(String(36), ForeignKey("users.id"), nullable=False)
    status: Mapped[str] = mapped_column(String(16), nullable=False, default="draft")
    created_at: Mapped[datetime] = mapped_column(
        DateTime,
        default=_utcnow,
        nullable=False,
    )
    updated_at: Mapped[datetime] = mapped_column(
        DateTime,
        default=_utcnow,
        onupdate=_utcnow,
        nullable=False,
    )

    items: Mapped[List["ShoppingListItemORM"]] = relationship(
        back_populates="shopping_list",
        cascade="all, delete-orphan",
        order_by="ShoppingListItemORM.created_at",
    )


class ShoppingListItemORM(Base):
    """Requested quantity of a catalog item on a shopping list."""

    __tablename__ = "shopping_list_items"

    id: Mapped[str] = mapped_column(String(36), primary_key=True, default=_new_id)
    shopping_list_id: Mapped[str] = mapped_column(
        String(36), ForeignKey("shopping_lists.id", ondelete="CASCADE"), nullable=False
    )
    catalog_item_id: Mapped[str] = mapped_column(
        String(36), ForeignKey("catalog_items.id"), nullable=False
    )
    quantity: Mapped[float] = mapped_column(Float, nullable=False)
    unit: Mapped[str] = mapped_column(String(8), nullable=False)
    origin_preference: Mapped[Optional[str]] = mapped_column(String(255), nullable=True)
    created_at: Mapped[datetime] = mapped_column(
        DateTime,
        default=_utcnow,
        nullable=False,
    )

    shopping_list: Mapped[ShoppingListORM] = relationship(back_populates="items")
    catalog_item: Mapped[CatalogItemORM] = relationship()
    selection: Mapped[Optional["SelectionORM"]] = relationship(
        back_populates="item",
        cascade="all, delete-orphan",
        uselist=False,
    )


class SelectionORM(Base):
    """The single vendor offer chosen for a shopping list item."""

    __tablename__ = "selections"

    id: Mapped[str] = mapped_column(String(36), primary_key=True, default=_new_id)
    shopping_list_id: Mapped[str] = mapped_column(
        String(36), ForeignKey("shopping_lists.id", ondelete="CASCADE"), nullable=False
    )
    shopping_list_item_id: Mapped[str] = mapped_column(
        String(36), ForeignKey("shopping_list_items.id", ondelete="CASCADE"), nullable=False
    )
    vendor_offer_id: Mapped[str] = mapped_column(
        String(36), ForeignKey("vendor_offers.id"), nullable=False
    )
    created_at: Mapped[datetime] = mapped_column(
        DateTime,
        default=_utcnow,
        nullable=False,
    )

    item: Mapped[ShoppingListItemORM] = relationship(back_populates="selection")
    offer: Mapped[VendorOfferORM] = relationship()

    __table_args__ = (
        UniqueConstraint("shopping_list_item_id", name="uq_selections_item"),
    )


class OrderORM(Base):
    """Order totals frozen at checkout time."""

    __tablename__ = "orders"

    id: Mapped[str] = mapped_column(String(36), primary_key=True, default=_new_id)
    shopping_list_id: Mapped[str] = mapped_column(
        String(36), ForeignKey("shopping_lists.id"), nullable=False
    )
    buyer_id: Mapped[str] = mapped_column(String(36), ForeignKey("users.id"), nullable=False)
    subtotal: Mapped[float] = mapped_column(Float, nullable=False)
    platform_commission: Mapped[float] = mapped_column(Float, nullable=False)
    grand_total: Mapped[float] = mapped_column(Float, nullable=False)
    created_at: Mapped[datetime] = mapped_column(
        DateTime,
        default=_utcnow,
        nullable=False,
    )

    items: Mapped[List["OrderItemORM"]] = relationship(
        back_populates="order",
        cascade="all, delete-orphan",
        order_by="OrderItemORM.position",
    )


class OrderItemORM(Base):
    """Snapshot of one purchased line plus its fulfilment status."""

    __tablename__ = "order_items"

    id: Mapped[str] = mapped_column(String(36), primary_key=True, default=_new_id)
    order_id: Mapped[str] = mapped_column(
        String(36), ForeignKey("orders.id", ondelete="CASCADE"), nullable=False
    )
    position: Mapped[int] = mapped_column(Integer, nullable=False, default=0)
    vendor_offer_id: Mapped[str] = mapped_column(
        String(36), ForeignKey("vendor_offers.id"), nullable=False
    )
    vendor_id: Mapped[str] = mapped_column(String(36), ForeignKey("users.id"), nullable=False)
    product_name: Mapped[str] = mapped_column(String(255), nullable=False)
    origin: Mapped[str] = mapped_column(String(255), nullable=False)
    quantity: Mapped[float] = mapped_column(Float, nullable=False)
    unit: Mapped[str] = mapped_column(String(8), nullable=False)
    unit_price: Mapped[float] = mapped_column(Float, nullable=False)
    total_price: Mapped[float] = mapped_column(Float, nullable=False)
    status: Mapped[str] = mapped_column(String(16), nullable=False, default="pending")
    created_at: Mapped[datetime] = mapped_column(
        DateTime,
        default=_utcnow,
        nullable=False,
    )

    order: Mapped[OrderORM] = relationship(back_populates="items")
    offer: Mapped[VendorOfferORM] = relationship()


__all__ = [
    "Base",
    "UserORM",
    "CatalogItemORM",
    "VendorOfferORM",
    "ShoppingListORM",
    "ShoppingListItemORM",
    "SelectionORM",
    "OrderORM",
    "OrderItemORM",
]
