"""Vision-model assessment of vendor offer photos."""
# mypy: ignore-errors

from __future__ import annotations

import base64
import json
import logging
import re
from datetime import datetime, timezone
from pathlib import Path, PurePosixPath
from typing import Any, Mapping, Optional

import httpx
from pydantic import ValidationError

from freshmarket import metrics
from freshmarket.config import Settings
from freshmarket.errors import IntegrationError
from freshmarket.models.offers import QualityReport, QualityScore

logger = logging.getLogger(__name__)

DEFAULT_BASE_URL = "https://api.openai.com/v1"
_JSON_BLOCK_RE = re.compile(r"```(?:json)?\s*(\{.*?\})\s*```", re.DOTALL)
_MIME_TYPES = {".png": "image/png", ".webp": "image/webp"}

QUALITY_PROMPT = (
    "Analyze this {product} image and provide a detailed quality assessment. "
    "Return a JSON object with the following structure:\n"
    "{{\n"
    '  "freshness": {{"score": 5, "maxScore": 5, "description": "Brief description of freshness"}},\n'
    '  "ripeness": "Description of ripeness level (e.g. \'Ripe, ready to eat\', \'Underripe\')",\n'
    '  "visibleDefects": {{"score": 5, "maxScore": 5, "description": "Visible defects, blemishes or issues"}},\n'
    '  "color": "Description of color quality and consistency",\n'
    '  "overallQuality": "Brief overall quality assessment"\n'
    "}}\n"
    "For visibleDefects score: 5 = no defects, 4 = minor blemishes, 3 = noticeable defects, "
    "2 = fungal growth or decay, 1 = severe rot or major damage. If the image quality is poor "
    "or the product is not clearly visible, note that in the assessment. Return only JSON."
)


def extract_json_blob(text: str) -> str:
    match = _JSON_BLOCK_RE.search(text)
    if match:
        return match.group(1).strip()

    start = text.find("{")
    end = text.rfind("}")
    if start != -1 and end != -1 and end > start:
        return text[start : end + 1].strip()
    return text.strip()


def _pick(payload: Mapping[str, Any], *keys: str) -> Any:
    for key in keys:
        if key in payload:
            return payload[key]
    return None


def _score(entry: Any, default_score: float, default_description: str) -> QualityScore:
    # Older responses describe defects as a bare string.
    if isinstance(entry, str):
        return QualityScore(score=default_score, description=entry)
    if not isinstance(entry, Mapping):
        return QualityScore(score=default_score, description=default_description)
    return QualityScore(
        score=_pick(entry, "score") or default_score,
        max_score=_pick(entry, "maxScore", "max_score") or 5,
        description=_pick(entry, "description") or default_description,
    )


def normalize_report(payload: Mapping[str, Any], analyzed_at: Optional[datetime] = None) -> QualityReport:
    """Coerce a loosely shaped model response into a :class:`QualityReport`."""

    return QualityReport(
        freshness=_score(_pick(payload, "freshness"), 0, "Not assessed"),
        ripeness=_pick(payload, "ripeness") or "Not assessed",
        visible_defects=_score(
            _pick(payload, "visibleDefects", "visible_defects"), 5, "No defects noted"
        ),
        color=_pick(payload, "color") or "Not assessed",
        overall_quality=_pick(payload, "overallQuality", "overall_quality") or "Not assessed",
        analyzed_at=analyzed_at or datetime.now(timezone.utc),
    )


class QualityAnalyzer:
    """Send an offer image to an OpenAI-compatible chat completions endpoint."""

    def __init__(
        self,
        *,
        base_url: str,
        api_key: str,
        model: str,
        upload_dir: Path,
        timeout: float = 30.0,
        transport: Optional[httpx.BaseTransport] = None,
    ) -> None:
        self._base_url = base_url.rstrip("/")
        self._api_key = api_key
        self._model = model
        self._upload_dir = Path(upload_dir)
        self._timeout = timeout
        self._transport = transport

    def analyze(self, image_url: str, product_name: str) -> QualityReport:
        try:
            report = self._analyze(image_url, product_name)
        except IntegrationError:
            metrics.QUALITY_ANALYSES.labels(result="failed").inc()
            raise
        metrics.QUALITY_ANALYSES.labels(result="succeeded").inc()
        return report

    def _analyze(self, image_url: str, product_name: str) -> QualityReport:
        image_path = self._resolve_image(image_url)
        try:
            encoded = base64.b64encode(image_path.read_bytes()).decode("ascii")
        except OSError as exc:
            raise IntegrationError(f"Failed to analyze image: {exc}") from exc
        mime_type = _MIME_TYPES.get(image_path.suffix.lower(), "image/jpeg")

        payload = {
            "model": self._model,
            "temperature": 0.3,
            "max_tokens": 500,
            "messages": [
                {
                    "role": "user",
                    "content": [
                        {"type": "text", "text": QUALITY_PROMPT.format(product=product_name)},
                        {
                            "type": "image_url",
                            "image_url": {"url": f"data:{mime_type};base64,{encoded}"},
                        },
                    ],
                }
            ],
        }
        content = self._execute_chat(payload)
        json_blob = extract_json_blob(content)
        try:
            parsed = json.loads(json_blob)
        except json.JSONDecodeError as exc:
            snippet = json_blob.strip().replace("\n", " ")[:200]
            raise IntegrationError(
                f"Failed to parse quality analysis response: payload={snippet}"
            ) from exc
        if not isinstance(parsed, dict):
            raise IntegrationError("Failed to parse quality analysis response")
        try:
            return normalize_report(parsed)
        except ValidationError as exc:
            raise IntegrationError("Failed to parse quality analysis response") from exc

    def _resolve_image(self, image_url: str) -> Path:
        # Only the file name is honoured so references cannot escape upload_dir.
        filename = PurePosixPath(image_url.replace("\\", "/")).name
        path = self._upload_dir / filename
        if not filename or not path.is_file():
            raise IntegrationError(f"Image file not found: {filename or image_url}")
        return path

    def _execute_chat(self, payload: dict[str, Any]) -> str:
        endpoint = self._base_url
        if not endpoint.endswith("/chat/completions"):
            endpoint = f"{endpoint}/chat/completions"
        headers = {"Authorization": f"Bearer {self._api_key}"}
        try:
            with httpx.Client(timeout=self._timeout, transport=self._transport) as client:
                response = client.post(endpoint, json=payload, headers=headers)
            response.raise_for_status()
            body = response.json()
        except httpx.HTTPError as exc:
            logger.warning("Quality analysis request failed: %s", exc)
            raise IntegrationError(f"Failed to analyze image: {exc}") from exc
        except ValueError as exc:
            raise IntegrationError("Quality analysis returned a non-JSON body") from exc

        choices = body.get("choices") or []
        if not choices:
            raise IntegrationError("Quality analysis returned no choices")
        message = choices[0].get("message") or {}
        content = (message.get("content") or "").strip()
        if not content:
            raise IntegrationError("Quality analysis returned an empty response")
        return content


def build_quality_analyzer(settings: Settings) -> QualityAnalyzer | None:
    """Create the analyzer when image analysis is enabled and keyed."""

    if not settings.vision_enabled:
        return None
    if not settings.vision_api_key:
        logger.warning("Image analysis enabled but no API key configured; analysis disabled")
        return None
    return QualityAnalyzer(
        base_url=settings.vision_base_url or DEFAULT_BASE_URL,
        api_key=settings.vision_api_key,
        model=settings.vision_model,
        upload_dir=settings.upload_dir,
        timeout=settings.vision_timeout,
    )


__all__ = [
    "QualityAnalyzer",
    "build_quality_analyzer",
    "extract_json_blob",
    "normalize_report",
]
