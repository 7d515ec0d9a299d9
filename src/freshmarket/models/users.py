"""User and vendor account models."""

from __future__ import annotations

from datetime import datetime
from typing import Literal, Optional

from pydantic import BaseModel, ConfigDict, Field

Role = Literal["buyer", "vendor", "admin"]
VendorStatus = Literal["pending", "approved", "rejected"]
NotificationPreference = Literal["sms", "whatsapp", "both"]


class User(BaseModel):
    """Marketplace account (buyer, vendor or admin)."""

    id: str
    email: str
    role: Role
    vendor_status: Optional[VendorStatus] = None
    phone_number: Optional[str] = None
    notification_preference: NotificationPreference = "sms"
    created_at: datetime

    model_config = ConfigDict(frozen=True)


class VendorSummary(User):
    """Vendor account annotated with the number of offers it has listed."""

    offer_count: int = Field(default=0, ge=0)


__all__ = ["NotificationPreference", "Role", "User", "VendorStatus", "VendorSummary"]
