"""Phone number normalization for outbound vendor messages."""

from __future__ import annotations

import re
from typing import Optional

_NON_DIALABLE = re.compile(r"[^\d+]")


def format_phone_number(raw: Optional[str], default_country_code: str = "965") -> Optional[str]:
    """Return ``raw`` in E.164 form, or ``None`` when it cannot be dialled.

    Numbers already carrying ``+`` are trusted as-is. Local numbers of 8-10
    digits get ``default_country_code`` prepended.
    """

    if not raw:
        return None
    cleaned = _NON_DIALABLE.sub("", raw)
    if not cleaned:
        return None
    if cleaned.startswith("+"):
        return cleaned if len(cleaned) > 1 else None
    if cleaned.startswith(default_country_code):
        return f"+{cleaned}"
    if cleaned.startswith("1") and len(cleaned) == 11:
        return f"+{cleaned}"
    if 8 <= len(cleaned) <= 10:
        return f"+{default_country_code}{cleaned}"
    return None


__all__ = ["format_phone_number"]
