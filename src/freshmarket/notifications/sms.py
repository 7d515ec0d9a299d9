"""Async client for a Twilio-compatible messaging REST API."""

from __future__ import annotations

import logging
from typing import Optional

import httpx

from freshmarket.config import Settings
from freshmarket.errors import IntegrationError

logger = logging.getLogger(__name__)


class SmsGateway:
    """Send SMS and WhatsApp messages through the account's Messages resource."""

    def __init__(
        self,
        *,
        base_url: str,
        account_sid: str,
        auth_token: str,
        from_number: Optional[str],
        whatsapp_from_number: Optional[str] = None,
        timeout: float = 10.0,
        transport: Optional[httpx.AsyncBaseTransport] = None,
    ) -> None:
        self._account_sid = account_sid
        self._from_number = from_number
        self._whatsapp_from_number = whatsapp_from_number
        self._client = httpx.AsyncClient(
            base_url=base_url.rstrip("/"),
            auth=(account_sid, auth_token),
            timeout=timeout,
            transport=transport,
        )

    @property
    def whatsapp_enabled(self) -> bool:
        return bool(self._whatsapp_from_number)

    async def send_sms(self, to: str, body: str) -> str:
        if not self._from_number:
            raise IntegrationError("SMS sender number is not configured")
        return await self._send(sender=self._from_number, to=to, body=body)

    async def send_whatsapp(self, to: str, body: str) -> str:
        if not self._whatsapp_from_number:
            raise IntegrationError("WhatsApp number not configured")
        sender = self._whatsapp_from_number
        if not sender.startswith("whatsapp:"):
            sender = f"whatsapp:{sender}"
        return await self._send(sender=sender, to=f"whatsapp:{to}", body=body)

    async def _send(self, *, sender: str, to: str, body: str) -> str:
        endpoint = f"/Accounts/{self._account_sid}/Messages.json"
        try:
            response = await self._client.post(
                endpoint,
                data={"From": sender, "To": to, "Body": body},
            )
            response.raise_for_status()
        except httpx.HTTPStatusError as exc:
            raise IntegrationError(
                f"Message gateway rejected request: status={exc.response.status_code}"
            ) from exc
        except httpx.HTTPError as exc:
            raise IntegrationError(f"Message gateway unreachable: {exc}") from exc

        payload = response.json()
        message_sid = str(payload.get("sid") or "")
        logger.debug("Message accepted sid=%s to=%s status=%s", message_sid, to, payload.get("status"))
        return message_sid

    async def aclose(self) -> None:
        await self._client.aclose()


def build_sms_gateway(settings: Settings) -> SmsGateway | None:
    """Create the gateway when messaging is enabled and credentials are present."""

    if not settings.sms_enabled:
        return None
    if not settings.sms_account_sid or not settings.sms_auth_token:
        logger.warning("SMS enabled but account SID or auth token missing; notifications disabled")
        return None
    return SmsGateway(
        base_url=settings.sms_base_url,
        account_sid=settings.sms_account_sid,
        auth_token=settings.sms_auth_token,
        from_number=settings.sms_from_number,
        whatsapp_from_number=settings.whatsapp_from_number,
        timeout=settings.notification_timeout,
    )


__all__ = ["SmsGateway", "build_sms_gateway"]
