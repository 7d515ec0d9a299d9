"""Tests for logging utilities and sensitive data redaction."""

from __future__ import annotations

import json
import logging

import pytest

from freshmarket.logging_utils import configure_logging, mask_phone_numbers


def _record(msg, *args, **extra):
    record = logging.LogRecord(
        name="freshmarket.test.redaction",
        level=logging.INFO,
        pathname=__file__,
        lineno=0,
        msg=msg,
        args=args,
        exc_info=None,
    )
    for key, value in extra.items():
        setattr(record, key, value)
    return record


def _format(record):
    handler = logging.getLogger().handlers[0]
    for filter_ in handler.filters:
        filter_.filter(record)
    return handler.format(record)


@pytest.mark.parametrize("fmt", ["plain", "json"])
def test_sensitive_data_filter_redacts_tokens(fmt):
    secret = "top-secret-token"
    configure_logging("INFO", fmt, [secret])

    formatted = _format(_record("Authorization header Bearer %s", secret))

    assert secret not in formatted
    assert "[redacted]" in formatted


def test_phone_numbers_keep_last_four_digits():
    configure_logging("INFO", "plain", [])

    formatted = _format(_record("sms to %s failed", "+96550001234"))

    assert "+96550001234" not in formatted
    assert "+***1234" in formatted
    assert mask_phone_numbers("order 12345 total 3.50") == "order 12345 total 3.50"


def test_json_format_carries_order_and_request_ids():
    configure_logging("DEBUG", "json", [])

    payload = json.loads(_format(_record("placed", order_id="o-1", request_id="r-1")))

    assert payload["message"] == "placed"
    assert payload["order_id"] == "o-1"
    assert payload["request_id"] == "r-1"
    assert payload["logger"] == "freshmarket.test.redaction"
