"""Offer image quality analysis."""

from freshmarket.quality.analyzer import (
    QualityAnalyzer,
    build_quality_analyzer,
    extract_json_blob,
    normalize_report,
)

__all__ = ["QualityAnalyzer", "build_quality_analyzer", "extract_json_blob", "normalize_report"]
