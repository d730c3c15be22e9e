"""Applies verified billing events to accounts."""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Any

from ..accounts.accounts_models import PlanTier
from ..accounts.accounts_service import AccountService

logger = logging.getLogger(__name__)

PLAN_BY_EVENT = {
    "checkout.session.completed": PlanTier.PRO,
    "customer.subscription.deleted": PlanTier.FREE,
}


def event_email(obj: dict[str, Any]) -> str | None:
    """Customer email of a checkout session or subscription object."""
    candidates = [obj.get("customer_email")]
    for key in ("customer_details", "metadata"):
        nested = obj.get(key)
        if isinstance(nested, dict):
            candidates.append(nested.get("email"))
    return next((value for value in candidates if isinstance(value, str) and value), None)


@dataclass(slots=True)
class BillingEventHandler:
    accounts: AccountService

    def apply(self, event: dict[str, Any]) -> PlanTier | None:
        """Change the customer's plan for subscription events; ignore the rest."""
        event_type = event.get("type")
        plan = PLAN_BY_EVENT.get(str(event_type))
        if plan is None:
            logger.info("billing.webhook.ignored", extra={"event_type": event_type})
            return None

        data = event.get("data")
        obj = data.get("object") if isinstance(data, dict) else None
        if not isinstance(obj, dict):
            logger.warning("billing.webhook.malformed", extra={"event_type": event_type})
            return None
        email = event_email(obj)
        if not email:
            logger.warning("billing.webhook.no_email", extra={"event_type": event_type})
            return None
        if self.accounts.change_plan(email, plan) is None:
            return None
        return plan
