from __future__ import annotations

import logging
from typing import Dict, Optional

import httpx

from accounts.domain.errors import EmailDeliveryError
from accounts.domain.ports.email_port import EmailPort

logger = logging.getLogger(__name__)


class HttpSmtpEmailAdapter(EmailPort):
    """Posts messages to an HTTP mail relay ({to, from, subject, body} as JSON)."""

    def __init__(
        self,
        base_url: str,
        *,
        sender: str,
        client: Optional[httpx.AsyncClient] = None,
        timeout: float = 5.0,
        send_path: str = "/send",
    ) -> None:
        self._base_url = base_url.rstrip("/")
        self._sender = sender
        self._send_path = send_path if send_path.startswith("/") else f"/{send_path}"
        self._owns_client: bool = client is None
        self._client: httpx.AsyncClient = client or httpx.AsyncClient(timeout=timeout)

    async def send(
        self,
        *,
        to: str,
        subject: str,
        body: str,
        idempotency_key: str | None = None,
    ) -> None:
        headers: Dict[str, str] = {}
        if idempotency_key:
            headers["Idempotency-Key"] = idempotency_key

        url = f"{self._base_url}{self._send_path}"
        payload = {"to": to, "from": self._sender, "subject": subject, "body": body}

        try:
            resp = await self._client.post(url, json=payload, headers=headers)
        except httpx.HTTPError as e:
            raise EmailDeliveryError(f"SMTP HTTP error: {e}") from e

        if not resp.is_success:
            raise EmailDeliveryError(
                f"SMTP responded {resp.status_code}: {resp.text[:200]}"
            )
        logger.debug("email relayed", extra={"to": to, "status": resp.status_code})

    async def aclose(self) -> None:
        if self._owns_client:
            await self._client.aclose()
