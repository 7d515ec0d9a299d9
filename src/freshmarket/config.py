"""Application configuration helpers."""

from __future__ import annotations

import os
from functools import lru_cache
from pathlib import Path
from typing import Optional

from pydantic import BaseModel, ConfigDict, Field

ENV_FILE_CANDIDATES = (Path(".env"), Path(".env.local"))


class Settings(BaseModel):
    """Global application settings loaded from environment variables or .env files."""

    database_path: Path = Field(
        default=Path("./data/freshmarket.db"),
        description="SQLite database location.",
    )
    api_token: Optional[str] = Field(
        default=None,
        description="Bearer token required for mutating endpoints.",
    )
    log_level: str = Field(default="INFO", description="Logging level (DEBUG/INFO/WARNING/ERROR)")
    log_format: str = Field(
        default="plain",
        description="Logging format (plain/json).",
    )
    log_requests: bool = Field(
        default=True,
        description="Emit request access logs when true.",
    )
    upload_dir: Path = Field(
        default=Path("./data/uploads"),
        description="Directory holding vendor offer images referenced by image_url.",
    )
    currency: str = Field(default="KWD", description="Currency code shown in vendor messages.")
    sms_enabled: bool = Field(
        default=False,
        description="Send vendor order notifications through the SMS gateway when true.",
    )
    sms_base_url: str = Field(
        default="https://api.twilio.com/2010-04-01",
        description="Twilio-compatible REST API base URL.",
    )
    sms_account_sid: Optional[str] = Field(default=None, description="SMS gateway account SID.")
    sms_auth_token: Optional[str] = Field(default=None, description="SMS gateway auth token.")
    sms_from_number: Optional[str] = Field(default=None, description="Sender number for SMS.")
    whatsapp_from_number: Optional[str] = Field(
        default=None,
        description="Sender number for WhatsApp messages (WhatsApp disabled when unset).",
    )
    default_country_code: str = Field(
        default="965",
        description="Country code assumed for local phone numbers without one.",
    )
    notification_timeout: float = Field(
        default=10.0,
        description="Seconds allowed per notification attempt before it counts as failed.",
    )
    notification_max_attempts: int = Field(
        default=2,
        description="Maximum delivery attempts per vendor notification.",
    )
    notification_retry_delay: float = Field(
        default=1.0,
        description="Seconds to wait between notification attempts.",
    )
    vision_enabled: bool = Field(
        default=False,
        description="Run image quality analysis on new offers when true.",
    )
    vision_base_url: Optional[str] = Field(
        default=None,
        description="OpenAI-compatible base URL used for image quality analysis.",
    )
    vision_api_key: Optional[str] = Field(default=None, description="Image analysis API key.")
    vision_model: str = Field(default="gpt-4o", description="Vision model identifier.")
    vision_timeout: float = Field(
        default=30.0,
        description="Seconds allowed for a single image analysis request.",
    )

    model_config = ConfigDict(frozen=True)


def _coerce_bool(value: str) -> bool:
    return value.strip().lower() in {"1", "true", "yes", "on"}


def _parse_env_file(path: Path) -> dict[str, str]:
    payload: dict[str, str] = {}
    try:
        with path.open("r", encoding="utf-8") as handle:
            for raw_line in handle:
                line = raw_line.strip()
                if not line or line.startswith("#") or "=" not in line:
                    continue
                key, raw_value = line.split("=", 1)
                payload[key.strip()] = raw_value.strip()
    except FileNotFoundError:
        return {}
    return payload


def _load_env_file_values() -> dict[str, str]:
    values: dict[str, str] = {}
    for candidate in ENV_FILE_CANDIDATES:
        values.update(_parse_env_file(candidate))
    return values


_STRING_FIELDS = {
    "FRESHMARKET_API_TOKEN": "api_token",
    "FRESHMARKET_LOG_LEVEL": "log_level",
    "FRESHMARKET_LOG_FORMAT": "log_format",
    "FRESHMARKET_CURRENCY": "currency",
    "FRESHMARKET_SMS_BASE_URL": "sms_base_url",
    "FRESHMARKET_SMS_ACCOUNT_SID": "sms_account_sid",
    "FRESHMARKET_SMS_AUTH_TOKEN": "sms_auth_token",
    "FRESHMARKET_SMS_FROM_NUMBER": "sms_from_number",
    "FRESHMARKET_WHATSAPP_FROM_NUMBER": "whatsapp_from_number",
    "FRESHMARKET_DEFAULT_COUNTRY_CODE": "default_country_code",
    "FRESHMARKET_VISION_BASE_URL": "vision_base_url",
    "FRESHMARKET_VISION_API_KEY": "vision_api_key",
    "FRESHMARKET_VISION_MODEL": "vision_model",
}
_PATH_FIELDS = {
    "FRESHMARKET_DATABASE_PATH": "database_path",
    "FRESHMARKET_UPLOAD_DIR": "upload_dir",
}
_BOOL_FIELDS = {
    "FRESHMARKET_LOG_REQUESTS": "log_requests",
    "FRESHMARKET_SMS_ENABLED": "sms_enabled",
    "FRESHMARKET_VISION_ENABLED": "vision_enabled",
}
_FLOAT_FIELDS = {
    "FRESHMARKET_NOTIFICATION_TIMEOUT": "notification_timeout",
    "FRESHMARKET_NOTIFICATION_RETRY_DELAY": "notification_retry_delay",
    "FRESHMARKET_VISION_TIMEOUT": "vision_timeout",
}
_INT_FIELDS = {
    "FRESHMARKET_NOTIFICATION_MAX_ATTEMPTS": "notification_max_attempts",
}


def _load_from_env() -> dict[str, object]:
    """Load optional overrides from env vars (with .env fallbacks)."""

    file_values = _load_env_file_values()

    def _env(key: str) -> Optional[str]:
        return os.environ.get(key) or file_values.get(key)

    payload: dict[str, object] = {}
    for key, field_name in _STRING_FIELDS.items():
        if (value := _env(key)):
            payload[field_name] = value
    for key, field_name in _PATH_FIELDS.items():
        if (value := _env(key)):
            payload[field_name] = Path(value)
    for key, field_name in _BOOL_FIELDS.items():
        if (value := _env(key)):
            payload[field_name] = _coerce_bool(value)
    for key, field_name in _FLOAT_FIELDS.items():
        if (value := _env(key)):
            try:
                payload[field_name] = float(value)
            except ValueError:
                pass
    for key, field_name in _INT_FIELDS.items():
        if (value := _env(key)):
            try:
                payload[field_name] = int(value)
            except ValueError:
                pass
    return payload


@lru_cache
def get_settings() -> Settings:
    """Return cached application settings."""

    return Settings(**_load_from_env())
