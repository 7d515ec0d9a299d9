"""Shared helpers for integration tests."""

from __future__ import annotations

from freshmarket.config import get_settings
from freshmarket.models.users import User


def auth_headers(user: User | None = None) -> dict[str, str]:
    headers: dict[str, str] = {}
    token = get_settings().api_token
    if token:
        headers["Authorization"] = f"Bearer {token}"
    if user is not None:
        headers["X-User-ID"] = user.id
    return headers
