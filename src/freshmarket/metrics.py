"""Prometheus metrics definitions for Freshmarket."""

from __future__ import annotations

from prometheus_client import Counter, Histogram

REQUEST_COUNT = Counter(
    "freshmarket_http_requests_total",
    "Total number of HTTP requests processed by the Freshmarket API",
    ["method", "path", "status"],
)

REQUEST_LATENCY = Histogram(
    "freshmarket_http_request_duration_seconds",
    "Latency of HTTP requests processed by the Freshmarket API",
    ["method", "path"],
)

CHECKOUTS = Counter(
    "freshmarket_checkouts_total",
    "Checkout attempts by result",
    ["result"],
)

VENDOR_NOTIFICATIONS = Counter(
    "freshmarket_vendor_notifications_total",
    "Vendor order notifications by delivery result",
    ["result"],
)

QUALITY_ANALYSES = Counter(
    "freshmarket_quality_analyses_total",
    "Offer image quality analyses by result",
    ["result"],
)

__all__ = [
    "REQUEST_COUNT",
    "REQUEST_LATENCY",
    "CHECKOUTS",
    "VENDOR_NOTIFICATIONS",
    "QUALITY_ANALYSES",
]
