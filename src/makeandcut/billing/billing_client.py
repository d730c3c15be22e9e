"""Stripe checkout client and webhook signature verification."""

from __future__ import annotations

import hashlib
import hmac
import json
import logging
import time
from collections.abc import Callable
from dataclasses import dataclass, field
from typing import Any

import httpx

from ..exceptions import AppError, RemoteServiceError

logger = logging.getLogger(__name__)

WEBHOOK_TOLERANCE_SECONDS = 300


class BillingError(RemoteServiceError):
    """Raised when the billing API rejects or fails a request."""

    service = "billing"


class WebhookSignatureError(AppError):
    """Raised when a webhook payload cannot be authenticated."""


@dataclass(slots=True)
class CheckoutSession:
    id: str
    url: str


@dataclass(slots=True)
class BillingClient:
    """Thin wrapper over the Stripe REST API using form-encoded requests."""

    secret_key: str
    price_id: str
    frontend_url: str
    webhook_secret: str = ""
    api_base: str = "https://api.stripe.com/v1"
    timeout_seconds: float = 15.0
    clock: Callable[[], float] = time.time
    log: logging.Logger = field(default_factory=lambda: logger)

    async def create_checkout_session(self, email: str) -> CheckoutSession:
        if not self.price_id:
            raise BillingError("Stripe price id is not configured")
        frontend = self.frontend_url.rstrip("/")
        form = {
            "mode": "subscription",
            "line_items[0][price]": self.price_id,
            "line_items[0][quantity]": "1",
            "success_url": f"{frontend}/success?session_id={{CHECKOUT_SESSION_ID}}",
            "cancel_url": f"{frontend}/cancel",
            "customer_email": email,
            "metadata[email]": email,
            "subscription_data[metadata][email]": email,
        }
        body = await self._request("POST", "/checkout/sessions", data=form)
        session_id, url = body.get("id"), body.get("url")
        if not session_id or not url:
            raise BillingError("Stripe response is missing session id or url")
        self.log.info("billing.checkout.created", extra={"session_id": session_id})
        return CheckoutSession(id=str(session_id), url=str(url))

    async def retrieve_checkout_session(self, session_id: str) -> dict[str, Any]:
        return await self._request("GET", f"/checkout/sessions/{session_id}")

    async def _request(
        self, method: str, path: str, *, data: dict[str, str] | None = None
    ) -> dict[str, Any]:
        if not self.secret_key:
            raise BillingError("Stripe secret key is not configured")
        headers = {"Authorization": f"Bearer {self.secret_key}"}
        try:
            async with httpx.AsyncClient(timeout=self.timeout_seconds) as client:
                response = await client.request(
                    method, f"{self.api_base}{path}", headers=headers, data=data
                )
        except httpx.HTTPError as exc:
            self.log.error("billing.request.transport_error", exc_info=exc)
            raise BillingError(f"Stripe request failed: {exc}") from exc

        if response.status_code != 200:
            detail = _extract_error(response)
            self.log.error(
                "billing.request.rejected status=%s detail=%s",
                response.status_code,
                detail,
            )
            raise BillingError(
                f"Stripe request failed (status={response.status_code}): {detail}"
            )
        try:
            return response.json()
        except ValueError as exc:
            raise BillingError("Stripe returned a non-JSON response") from exc

    def verify_webhook(self, payload: bytes, signature_header: str | None) -> dict[str, Any]:
        """Authenticate a webhook delivery and return the decoded event.

        The header has the form ``t=<unix ts>,v1=<hex hmac>[,v1=...]``; the
        signed message is ``"<ts>.<raw body>"``.
        """
        if not self.webhook_secret:
            raise WebhookSignatureError("Webhook signing secret is not configured")
        if not signature_header:
            raise WebhookSignatureError("Missing Stripe-Signature header")

        timestamp: str | None = None
        signatures: list[str] = []
        for part in signature_header.split(","):
            key, _, value = part.strip().partition("=")
            if key == "t":
                timestamp = value
            elif key == "v1":
                signatures.append(value)
        if timestamp is None or not signatures:
            raise WebhookSignatureError("Malformed Stripe-Signature header")
        try:
            issued_at = int(timestamp)
        except ValueError:
            raise WebhookSignatureError("Malformed signature timestamp") from None

        signed = f"{timestamp}.".encode("utf-8") + payload
        expected = hmac.new(
            self.webhook_secret.encode("utf-8"), signed, hashlib.sha256
        ).hexdigest()
        if not any(hmac.compare_digest(expected, candidate) for candidate in signatures):
            raise WebhookSignatureError("Signature mismatch")
        if abs(self.clock() - issued_at) > WEBHOOK_TOLERANCE_SECONDS:
            raise WebhookSignatureError("Signature timestamp outside tolerance")

        try:
            event = json.loads(payload)
        except ValueError:
            raise WebhookSignatureError("Webhook payload is not valid JSON") from None
        if not isinstance(event, dict):
            raise WebhookSignatureError("Webhook payload is not an event object")
        return event


def _extract_error(response: httpx.Response) -> str:
    try:
        data = response.json()
    except ValueError:
        return response.text
    error = data.get("error") if isinstance(data, dict) else None
    if isinstance(error, dict):
        return (error.get("message") or "").strip() or str(error)
    return str(data)


__all__ = [
    "BillingClient",
    "BillingError",
    "CheckoutSession",
    "WebhookSignatureError",
]
