"""HTTP routes for checkout and billing webhooks."""

from __future__ import annotations

from fastapi import APIRouter, Depends, Header, Request
from pydantic import BaseModel, ConfigDict, Field

from .billing_client import BillingClient
from .billing_service import BillingEventHandler

router = APIRouter(prefix="/api", tags=["billing"])


class CheckoutRequest(BaseModel):
    email: str


class CheckoutResponse(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    session_id: str = Field(alias="sessionId")
    url: str


class CheckoutSessionStatus(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    id: str
    status: str | None = None
    payment_status: str | None = Field(default=None, alias="paymentStatus")
    customer_email: str | None = Field(default=None, alias="customerEmail")


class WebhookAck(BaseModel):
    received: bool = True


def get_billing_client(request: Request) -> BillingClient:
    try:
        return request.app.state.billing_client  # type: ignore[attr-defined]
    except AttributeError as exc:
        raise RuntimeError("BillingClient is not configured") from exc


def get_billing_event_handler(request: Request) -> BillingEventHandler:
    try:
        return request.app.state.billing_event_handler  # type: ignore[attr-defined]
    except AttributeError as exc:
        raise RuntimeError("BillingEventHandler is not configured") from exc


@router.post("/create-checkout-session", response_model=CheckoutResponse)
async def create_checkout_session(
    payload: CheckoutRequest,
    client: BillingClient = Depends(get_billing_client),
) -> CheckoutResponse:
    session = await client.create_checkout_session(payload.email.strip().lower())
    return CheckoutResponse(session_id=session.id, url=session.url)


@router.get("/checkout-session/{session_id}", response_model=CheckoutSessionStatus)
async def checkout_session(
    session_id: str,
    client: BillingClient = Depends(get_billing_client),
) -> CheckoutSessionStatus:
    body = await client.retrieve_checkout_session(session_id)
    details = body.get("customer_details") or {}
    return CheckoutSessionStatus(
        id=str(body.get("id") or session_id),
        status=body.get("status"),
        payment_status=body.get("payment_status"),
        customer_email=body.get("customer_email") or details.get("email"),
    )


@router.post("/webhook", response_model=WebhookAck)
async def billing_webhook(
    request: Request,
    stripe_signature: str | None = Header(None, alias="Stripe-Signature"),
    client: BillingClient = Depends(get_billing_client),
    handler: BillingEventHandler = Depends(get_billing_event_handler),
) -> WebhookAck:
    payload = await request.body()
    event = client.verify_webhook(payload, stripe_signature)
    handler.apply(event)
    return WebhookAck()
