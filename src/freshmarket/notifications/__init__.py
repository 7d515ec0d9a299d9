"""Vendor order notifications (SMS / WhatsApp)."""

from freshmarket.notifications.dispatcher import NotificationReport, VendorNotifier
from freshmarket.notifications.messages import build_order_message
from freshmarket.notifications.phone import format_phone_number
from freshmarket.notifications.sms import SmsGateway, build_sms_gateway
from freshmarket.notifications.worker import NotificationWorker

__all__ = [
    "NotificationReport",
    "NotificationWorker",
    "SmsGateway",
    "VendorNotifier",
    "build_order_message",
    "build_sms_gateway",
    "format_phone_number",
]
