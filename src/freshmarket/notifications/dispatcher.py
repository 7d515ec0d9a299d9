"""Fan out order notifications to the vendors whose offers were purchased."""

from __future__ import annotations

import asyncio
import logging
from collections import OrderedDict
from typing import Awaitable, Callable, Dict, List, Optional, Protocol

from pydantic import BaseModel, ConfigDict

from freshmarket import metrics
from freshmarket.config import Settings
from freshmarket.db.users import get_user
from freshmarket.errors import IntegrationError
from freshmarket.models.orders import Order, OrderItem
from freshmarket.models.users import User

from .messages import build_order_message
from .phone import format_phone_number

logger = logging.getLogger(__name__)

ContactLookup = Callable[[str], Optional[User]]
Sender = Callable[[str, str], Awaitable[str]]


class MessageGateway(Protocol):
    @property
    def whatsapp_enabled(self) -> bool: ...

    async def send_sms(self, to: str, body: str) -> str: ...

    async def send_whatsapp(self, to: str, body: str) -> str: ...


class NotificationReport(BaseModel):
    """Per-order delivery tally: one count per vendor."""

    sent: int = 0
    failed: int = 0
    skipped: int = 0

    model_config = ConfigDict(frozen=True)


class VendorNotifier:
    """Deliver one message per vendor for a freshly placed order.

    Vendors are notified concurrently and independently. Each attempt is bounded
    by ``timeout``; a timed-out or rejected attempt is retried up to
    ``max_attempts`` and then counted as a failure. Delivery problems are never
    raised to the caller.
    """

    def __init__(
        self,
        gateway: Optional[MessageGateway],
        *,
        contact_lookup: ContactLookup = get_user,
        currency: str = "KWD",
        default_country_code: str = "965",
        timeout: float = 10.0,
        max_attempts: int = 2,
        retry_delay: float = 1.0,
    ) -> None:
        self._gateway = gateway
        self._contact_lookup = contact_lookup
        self._currency = currency
        self._default_country_code = default_country_code
        self._timeout = timeout
        self._max_attempts = max(1, int(max_attempts))
        self._retry_delay = max(0.0, float(retry_delay))

    @classmethod
    def from_settings(cls, settings: Settings, gateway: Optional[MessageGateway]) -> "VendorNotifier":
        return cls(
            gateway,
            currency=settings.currency,
            default_country_code=settings.default_country_code,
            timeout=settings.notification_timeout,
            max_attempts=settings.notification_max_attempts,
            retry_delay=settings.notification_retry_delay,
        )

    async def notify_order(self, order: Order) -> NotificationReport:
        by_vendor: Dict[str, List[OrderItem]] = OrderedDict()
        for item in order.items:
            by_vendor.setdefault(item.vendor_id, []).append(item)

        if self._gateway is None:
            logger.info(
                "Messaging disabled; skipping %s vendor notification(s) for order %s",
                len(by_vendor),
                order.short_id,
                extra={"order_id": order.id},
            )
            metrics.VENDOR_NOTIFICATIONS.labels(result="skipped").inc(len(by_vendor))
            return NotificationReport(skipped=len(by_vendor))

        outcomes = await asyncio.gather(
            *(self._notify_vendor(order, vendor_id, items) for vendor_id, items in by_vendor.items()),
            return_exceptions=True,
        )

        counts = {"sent": 0, "failed": 0, "skipped": 0}
        for vendor_id, outcome in zip(by_vendor, outcomes):
            if isinstance(outcome, BaseException):
                logger.error(
                    "Vendor notification crashed vendor_id=%s order=%s",
                    vendor_id,
                    order.short_id,
                    exc_info=outcome,
                    extra={"order_id": order.id},
                )
                outcome = "failed"
            counts[outcome] += 1
            metrics.VENDOR_NOTIFICATIONS.labels(result=outcome).inc()

        report = NotificationReport(**counts)
        logger.info(
            "Vendor notifications for order %s sent=%s failed=%s skipped=%s",
            order.short_id,
            report.sent,
            report.failed,
            report.skipped,
            extra={"order_id": order.id},
        )
        return report

    async def _notify_vendor(self, order: Order, vendor_id: str, items: List[OrderItem]) -> str:
        vendor = await asyncio.to_thread(self._contact_lookup, vendor_id)
        phone = format_phone_number(
            vendor.phone_number if vendor else None,
            self._default_country_code,
        )
        if phone is None:
            logger.info("Vendor %s has no usable phone number; skipping", vendor_id)
            return "skipped"

        message = build_order_message(order.short_id, items, self._currency)
        delivered = 0
        for channel, send in self._channels(vendor.notification_preference):
            try:
                await self._send_with_retry(channel, send, phone, message)
                delivered += 1
            except (IntegrationError, asyncio.TimeoutError) as exc:
                logger.warning(
                    "Vendor %s %s delivery failed for order %s: %s",
                    vendor_id,
                    channel,
                    order.short_id,
                    str(exc) or type(exc).__name__,
                )
        return "sent" if delivered else "failed"

    def _channels(self, preference: str) -> List[tuple[str, Sender]]:
        assert self._gateway is not None
        sms = ("sms", self._gateway.send_sms)
        whatsapp = ("whatsapp", self._gateway.send_whatsapp)
        if preference == "whatsapp":
            if self._gateway.whatsapp_enabled:
                return [whatsapp]
            logger.warning("WhatsApp not configured, falling back to SMS")
            return [sms]
        if preference == "both":
            return [sms, whatsapp] if self._gateway.whatsapp_enabled else [sms]
        return [sms]

    async def _send_with_retry(self, channel: str, send: Sender, phone: str, message: str) -> None:
        delay = self._retry_delay
        for attempt in range(1, self._max_attempts + 1):
            try:
                await asyncio.wait_for(send(phone, message), timeout=self._timeout)
                return
            except (IntegrationError, asyncio.TimeoutError) as exc:
                if attempt == self._max_attempts:
                    raise
                logger.warning(
                    "%s attempt %s/%s to %s failed: %s. Retrying in %.1fs",
                    channel,
                    attempt,
                    self._max_attempts,
                    phone,
                    str(exc) or "timed out",
                    delay,
                )
                await asyncio.sleep(delay)

    async def aclose(self) -> None:
        closer = getattr(self._gateway, "aclose", None)
        if closer is not None:
            await closer()


__all__ = ["NotificationReport", "VendorNotifier"]
