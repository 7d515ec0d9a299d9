"""Unit normalization for produce quantities."""

from __future__ import annotations

GRAMS_PER_KG = 1000


def to_grams(quantity: float, unit: str) -> float:
    """Convert ``quantity`` expressed in ``unit`` to grams.

    Only ``kg`` is scaled; ``gram`` quantities pass through unchanged.
    """

    if unit == "kg":
        return quantity * GRAMS_PER_KG
    return quantity


def unit_grams(unit: str) -> float:
    """Number of grams in one ``unit``."""

    return to_grams(1, unit)


__all__ = ["GRAMS_PER_KG", "to_grams", "unit_grams"]
