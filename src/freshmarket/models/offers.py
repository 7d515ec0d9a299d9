"""Vendor offer and quality report models."""

from __future__ import annotations

from datetime import datetime
from typing import Optional

from pydantic import BaseModel, ConfigDict, Field

from freshmarket.models.catalog import CatalogItem, Unit


class QualityScore(BaseModel):
    score: float = 0
    max_score: float = 5
    description: str = "Not assessed"

    model_config = ConfigDict(frozen=True)


class QualityReport(BaseModel):
    """Freshness/ripeness/defects assessment of an offer image."""

    freshness: QualityScore = Field(default_factory=QualityScore)
    ripeness: str = "Not assessed"
    visible_defects: QualityScore = Field(
        default_factory=lambda: QualityScore(score=5, description="No defects noted")
    )
    color: str = "Not assessed"
    overall_quality: str = "Not assessed"
    analyzed_at: datetime

    model_config = ConfigDict(frozen=True)


class VendorOffer(BaseModel):
    """One vendor's priced listing of a catalog item."""

    id: str
    vendor_id: str
    catalog_item_id: str
    product: CatalogItem
    unit: Unit
    price: float = Field(description="Price per unit of sale.")
    quantity: float = Field(description="Available stock in the unit of sale.")
    initial_stock: Optional[float] = None
    origin: str
    is_active: bool = True
    image_url: Optional[str] = None
    quality_report: Optional[QualityReport] = None
    created_at: datetime
    updated_at: datetime

    model_config = ConfigDict(frozen=True)


class InventoryLine(BaseModel):
    """Stock movement summary for one vendor offer."""

    offer_id: str
    product: CatalogItem
    origin: str
    unit: Unit
    initial_stock: float
    current_stock: float
    sold_quantity: float
    pending_quantity: float
    ending_inventory: float
    is_active: bool

    model_config = ConfigDict(frozen=True)


__all__ = ["InventoryLine", "QualityReport", "QualityScore", "VendorOffer"]
