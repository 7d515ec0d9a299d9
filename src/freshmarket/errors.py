"""Domain exceptions shared by the persistence, pricing and API layers."""

from __future__ import annotations


class NotFoundError(ValueError):
    """Entity is missing or not owned by the caller."""


class ValidationFailure(ValueError):
    """Input is malformed or violates a domain rule."""


class CheckoutBlocked(ValidationFailure):
    """Checkout preconditions are not met (the message names the product)."""


class ForbiddenError(PermissionError):
    """Caller has the wrong role or an unapproved vendor account."""


class ConflictError(RuntimeError):
    """State changed underneath the request (e.g. list no longer in draft)."""


class IntegrationError(RuntimeError):
    """An external gateway (SMS, image analysis) failed."""


__all__ = [
    "NotFoundError",
    "ValidationFailure",
    "CheckoutBlocked",
    "ForbiddenError",
    "ConflictError",
    "IntegrationError",
]
