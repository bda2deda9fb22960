"""
Resend API client: one POST per send, no retries.

Failures come back as a ProviderFailure value instead of an exception, so
callers branch on the result type:

    result = await client.send(...)
    if isinstance(result, ProviderFailure):
        ...
"""

import logging
from dataclasses import dataclass
from typing import Any, Literal, Optional, Union

import httpx

from app.config import settings

logger = logging.getLogger(__name__)

FailureKind = Literal["provider_error", "transport_error", "malformed_response"]


@dataclass(frozen=True)
class ProviderSuccess:
    id: str


@dataclass(frozen=True)
class ProviderFailure:
    kind: FailureKind
    message: str
    status_code: Optional[int] = None


ProviderResult = Union[ProviderSuccess, ProviderFailure]


def build_payload(
    from_: str,
    to: str,
    subject: str,
    text: str,
    html: Optional[str] = None,
) -> dict[str, Any]:
    """Request body for POST /emails. 'html' is present only when supplied."""
    payload: dict[str, Any] = {
        "from": from_,
        "to": to,
        "subject": subject,
        "text": text,
    }
    if html is not None:
        payload["html"] = html
    return payload


class ResendClient:
    """Thin async client for the Resend send-email endpoint."""

    def __init__(
        self,
        api_key: str,
        base_url: Optional[str] = None,
        timeout: Optional[float] = None,
        transport: Optional[httpx.AsyncBaseTransport] = None,
    ) -> None:
        self.api_key = api_key
        self.base_url = (base_url or settings.resend_api_url).rstrip("/")
        self.timeout = timeout if timeout is not None else settings.resend_timeout_seconds
        self._transport = transport

    @property
    def endpoint(self) -> str:
        return f"{self.base_url}/emails"

    async def send(
        self,
        from_: str,
        to: str,
        subject: str,
        text: str,
        html: Optional[str] = None,
    ) -> ProviderResult:
        payload = build_payload(from_, to, subject, text, html)
        headers = {
            "Authorization": f"Bearer {self.api_key}",
            "Content-Type": "application/json",
        }

        try:
            async with httpx.AsyncClient(timeout=self.timeout, transport=self._transport) as client:
                response = await client.post(self.endpoint, headers=headers, json=payload)
        except httpx.HTTPError as e:
            logger.warning("Resend request failed: %s", type(e).__name__)
            return ProviderFailure(kind="transport_error", message=str(e) or type(e).__name__)

        if not response.is_success:
            return ProviderFailure(
                kind="provider_error",
                message=f"Resend API error: {response.status_code} - {response.text}",
                status_code=response.status_code,
            )

        try:
            body = response.json()
        except ValueError:
            body = None

        message_id = body.get("id") if isinstance(body, dict) else None
        if not isinstance(message_id, str) or not message_id:
            return ProviderFailure(
                kind="malformed_response",
                message="Resend API returned no message id",
                status_code=response.status_code,
            )

        return ProviderSuccess(id=message_id)
