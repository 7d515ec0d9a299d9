"""Tests for per-vendor order notification fan-out."""

from __future__ import annotations

import asyncio
from datetime import datetime

from freshmarket.errors import IntegrationError
from freshmarket.models.orders import Order, OrderItem
from freshmarket.models.users import User
from freshmarket.notifications.dispatcher import NotificationReport, VendorNotifier


class FakeGateway:
    """Records messages; numbers listed in ``failing``/``hanging`` misbehave."""

    def __init__(self, *, whatsapp=False, failing=(), hanging=(), flaky=()):
        self._whatsapp = whatsapp
        self.failing = set(failing)
        self.hanging = set(hanging)
        self.flaky = {number: 1 for number in flaky}
        self.sent: list[tuple[str, str, str]] = []

    @property
    def whatsapp_enabled(self) -> bool:
        return self._whatsapp

    async def send_sms(self, to: str, body: str) -> str:
        return await self._deliver("sms", to, body)

    async def send_whatsapp(self, to: str, body: str) -> str:
        return await self._deliver("whatsapp", to, body)

    async def _deliver(self, channel, to, body):
        if to in self.hanging:
            await asyncio.sleep(5)
        if to in self.failing:
            raise IntegrationError("rejected")
        if self.flaky.get(to):
            self.flaky[to] -= 1
            raise IntegrationError("temporary outage")
        self.sent.append((channel, to, body))
        return f"SM{len(self.sent)}"


def _vendor(vendor_id, phone, preference="sms"):
    return User(
        id=vendor_id,
        email=f"{vendor_id}@example.com",
        role="vendor",
        vendor_status="approved",
        phone_number=phone,
        notification_preference=preference,
        created_at=datetime(2025, 5, 1),
    )


def _order(*vendor_ids):
    items = [
        OrderItem(
            id=f"item-{index}",
            order_id="0f3a9c1e-0000-4000-8000-000000000000",
            vendor_offer_id=f"offer-{index}",
            vendor_id=vendor_id,
            product_name="Apple",
            origin="Spain",
            quantity=1,
            unit="kg",
            unit_price=1.2,
            total_price=1.2,
            created_at=datetime(2025, 5, 1),
        )
        for index, vendor_id in enumerate(vendor_ids)
    ]
    return Order(
        id="0f3a9c1e-0000-4000-8000-000000000000",
        shopping_list_id="list-1",
        buyer_id="buyer-1",
        subtotal=1.2 * len(items),
        platform_commission=0.06 * len(items),
        grand_total=1.26 * len(items),
        items=items,
        created_at=datetime(2025, 5, 1),
    )


def _notifier(gateway, vendors, **kwargs):
    directory = {vendor.id: vendor for vendor in vendors}
    options = {"timeout": 0.05, "max_attempts": 1, "retry_delay": 0}
    options.update(kwargs)
    return VendorNotifier(gateway, contact_lookup=directory.get, **options)


def test_one_message_per_vendor():
    gateway = FakeGateway()
    vendors = [_vendor("v1", "+96550000001"), _vendor("v2", "50000002")]

    report = asyncio.run(_notifier(gateway, vendors).notify_order(_order("v1", "v1", "v2")))

    assert report == NotificationReport(sent=2)
    recipients = sorted(to for _, to, _ in gateway.sent)
    assert recipients == ["+96550000001", "+96550000002"]
    body = next(body for _, to, body in gateway.sent if to == "+96550000001")
    assert body.startswith("🛒 New Order #0f3a9c1e\n1kg Apple(Spain), 1kg Apple(Spain)\n")
    assert "Total: 2.40 KWD" in body


def test_failing_vendor_does_not_block_others():
    gateway = FakeGateway(failing={"+96550000001"}, hanging={"+96550000002"})
    vendors = [
        _vendor("v1", "+96550000001"),
        _vendor("v2", "+96550000002"),
        _vendor("v3", "+96550000003"),
    ]

    report = asyncio.run(_notifier(gateway, vendors).notify_order(_order("v1", "v2", "v3")))

    assert report == NotificationReport(sent=1, failed=2)
    assert [to for _, to, _ in gateway.sent] == ["+96550000003"]


def test_transient_failure_is_retried():
    gateway = FakeGateway(flaky={"+96550000001"})
    notifier = _notifier(gateway, [_vendor("v1", "+96550000001")], max_attempts=2)

    report = asyncio.run(notifier.notify_order(_order("v1")))

    assert report == NotificationReport(sent=1)
    assert len(gateway.sent) == 1


def test_vendor_without_phone_is_skipped():
    gateway = FakeGateway()
    vendors = [_vendor("v1", None), _vendor("v2", "12")]

    report = asyncio.run(_notifier(gateway, vendors).notify_order(_order("v1", "v2", "ghost")))

    assert report == NotificationReport(skipped=3)
    assert gateway.sent == []


def test_whatsapp_preference_falls_back_to_sms():
    gateway = FakeGateway(whatsapp=False)
    vendors = [_vendor("v1", "+96550000001", preference="whatsapp")]

    asyncio.run(_notifier(gateway, vendors).notify_order(_order("v1")))

    assert [channel for channel, _, _ in gateway.sent] == ["sms"]


def test_both_preference_uses_both_channels():
    gateway = FakeGateway(whatsapp=True)
    vendors = [_vendor("v1", "+96550000001", preference="both")]

    report = asyncio.run(_notifier(gateway, vendors).notify_order(_order("v1")))

    assert report == NotificationReport(sent=1)
    assert sorted(channel for channel, _, _ in gateway.sent) == ["sms", "whatsapp"]


def test_disabled_messaging_skips_everyone():
    report = asyncio.run(
        VendorNotifier(None, contact_lookup=lambda _: None).notify_order(_order("v1", "v2"))
    )

    assert report == NotificationReport(skipped=2)
