"""User and vendor approval persistence helpers."""

from __future__ import annotations

from typing import List, Optional

from sqlalchemy import func, select

from freshmarket.errors import NotFoundError, ValidationFailure
from freshmarket.models.users import User, VendorSummary

from .models import UserORM, VendorOfferORM
from .repository import session_scope

ROLES = ("buyer", "vendor", "admin")
VENDOR_STATUSES = ("pending", "approved", "rejected")


def user_to_model(row: UserORM) -> User:
    return User.model_validate(
        {
            "id": row.id,
            "email": row.email,
            "role": row.role,
            "vendor_status": row.vendor_status,
            "phone_number": row.phone_number,
            "notification_preference": row.notification_preference,
            "created_at": row.created_at,
        }
    )


def create_user(
    *,
    email: str,
    role: str,
    phone_number: Optional[str] = None,
    notification_preference: str = "sms",
) -> User:
    """Register an account; vendors start in ``pending`` status."""

    if role not in ROLES:
        raise ValidationFailure(f"Unknown role '{role}'")
    normalized_email = email.strip().lower()
    with session_scope() as session:
        existing = session.execute(
            select(UserORM.id).where(UserORM.email == normalized_email)
        ).first()
        if existing:
            raise ValidationFailure("User already exists")
        row = UserORM(
            email=normalized_email,
            role=role,
            vendor_status="pending" if role == "vendor" else None,
            phone_number=phone_number.strip() if phone_number else None,
            notification_preference=notification_preference,
        )
        session.add(row)
        session.flush()
        return user_to_model(row)


def get_user(user_id: str) -> Optional[User]:
    with session_scope() as session:
        row = session.get(UserORM, user_id)
        if row is None:
            return None
        return user_to_model(row)


def list_vendors(status: Optional[str] = None) -> List[VendorSummary]:
    """Return vendor accounts (newest first) with their offer counts."""

    with session_scope() as session:
        offer_count = (
            select(func.count(VendorOfferORM.id))
            .where(VendorOfferORM.vendor_id == UserORM.id)
            .scalar_subquery()
        )
        query = select(UserORM, offer_count).where(UserORM.role == "vendor")
        if status:
            query = query.where(UserORM.vendor_status == status)
        rows = session.execute(query.order_by(UserORM.created_at.desc())).all()
        return [
            VendorSummary.model_validate({**user_to_model(row).model_dump(), "offer_count": count})
            for row, count in rows
        ]


def get_vendor(vendor_id: str) -> VendorSummary:
    with session_scope() as session:
        row = session.get(UserORM, vendor_id)
        if row is None or row.role != "vendor":
            raise NotFoundError("Vendor not found")
        count = session.execute(
            select(func.count(VendorOfferORM.id)).where(VendorOfferORM.vendor_id == vendor_id)
        ).scalar_one()
        return VendorSummary.model_validate({**user_to_model(row).model_dump(), "offer_count": count})


def set_vendor_status(vendor_id: str, status: str) -> User:
    """Record the admin decision on a vendor account."""

    if status not in VENDOR_STATUSES:
        raise ValidationFailure(f"Unknown vendor status '{status}'")
    with session_scope() as session:
        row = session.get(UserORM, vendor_id)
        if row is None or row.role != "vendor":
            raise NotFoundError("Vendor not found")
        row.vendor_status = status
        session.flush()
        return user_to_model(row)


def approve_vendor(vendor_id: str) -> User:
    return set_vendor_status(vendor_id, "approved")


def reject_vendor(vendor_id: str) -> User:
    return set_vendor_status(vendor_id, "rejected")


__all__ = [
    "approve_vendor",
    "create_user",
    "get_user",
    "get_vendor",
    "list_vendors",
    "reject_vendor",
    "set_vendor_status",
    "user_to_model",
]
