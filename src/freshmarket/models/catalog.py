"""Catalog item models."""

from __future__ import annotations

from typing import Literal, Optional

from pydantic import BaseModel, ConfigDict

Category = Literal["fruit", "vegetable"]
Unit = Literal["kg", "gram"]


class CatalogItem(BaseModel):
    """Platform-defined produce type, independent of any vendor."""

    id: str
    name: str
    category: Category
    offer_count: Optional[int] = None

    model_config = ConfigDict(frozen=True)


__all__ = ["CatalogItem", "Category", "Unit"]
