"""Email delivery via the Resend REST API.

``send`` never raises on transport failure: the outcome is returned as a
``DeliveryResult`` and logged, so callers cannot accidentally fail a
pipeline step because an email bounced.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Protocol

import httpx

from src.config import settings
from src.errors import DeliveryError

logger = logging.getLogger(__name__)

RESEND_API_URL = "https://api.resend.com/emails"


@dataclass(frozen=True)
class DeliveryResult:
    """Outcome of one send attempt."""

    ok: bool
    message_id: str | None = None
    error: str | None = None


class EmailSender(Protocol):
    def send(self, to: str, subject: str, html: str) -> DeliveryResult: ...


class ResendEmailSender:
    """Sends HTML email through Resend using httpx."""

    def __init__(
        self,
        api_key: str | None = None,
        sender: str | None = None,
        timeout: float | None = None,
        client: httpx.Client | None = None,
    ) -> None:
        self._api_key = api_key if api_key is not None else settings.resend_api_key
        self._sender = sender or settings.email_from
        self._timeout = timeout or settings.email_timeout_seconds
        self._client = client

    def _post(self, payload: dict[str, object]) -> str:
        if not self._api_key:
            raise DeliveryError("RESEND_API_KEY is not configured")

        headers = {"Authorization": f"Bearer {self._api_key}"}
        if self._client is not None:
            r = self._client.post(RESEND_API_URL, json=payload, headers=headers, timeout=self._timeout)
        else:
            r = httpx.post(RESEND_API_URL, json=payload, headers=headers, timeout=self._timeout)

        if r.status_code >= 400:
            raise DeliveryError(
                f"Resend API error: {r.text}",
                metadata={"status_code": r.status_code},
            )
        return str(r.json().get("id", ""))

    def send(self, to: str, subject: str, html: str) -> DeliveryResult:
        try:
            message_id = self._post(
                {"from": self._sender, "to": [to], "subject": subject, "html": html}
            )
        except (httpx.HTTPError, DeliveryError) as exc:
            logger.error("Failed to send email to %s (%s): %s", to, subject, exc)
            return DeliveryResult(ok=False, error=str(exc))

        logger.info("Email sent to %s (%s) id=%s", to, subject, message_id)
        return DeliveryResult(ok=True, message_id=message_id)
