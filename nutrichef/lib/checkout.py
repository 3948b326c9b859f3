"""
Hosted checkout for paid plans.

No local subscription row is created here. Access is granted only when
the checkout.session.completed webhook confirms payment.
"""

import logging
from typing import Optional

import stripe

from ..core.config import (
    require_env,
    default_success_url,
    default_cancel_url,
    STRIPE_SECRET_KEY,
)
from ..core.errors import MissingParameters, PlanNotPurchasable
from ..db import get_admin_client
from .customers import CustomerResolver
from .subscriptions import PLANS_TABLE


logger = logging.getLogger(__name__)


class CheckoutService:
    """Starts Stripe Checkout sessions for subscription plans."""

    def __init__(self, client=None, customers: Optional[CustomerResolver] = None):
        self.client = client or get_admin_client()
        self.customers = customers or CustomerResolver(self.client)

    def resolve_price_id(self, price_id: Optional[str], plan_id: Optional[str]) -> str:
        """
        Pick the Stripe price to charge.
        An explicit price wins; otherwise the plan's stripe_price_id.
        """
        if price_id:
            return price_id

        if not plan_id:
            raise MissingParameters("Missing priceId or planId")

        result = (
            self.client.table(PLANS_TABLE)
            .select("stripe_price_id")
            .eq("id", plan_id)
            .limit(1)
            .execute()
        )

        if not result.data or not result.data[0].get("stripe_price_id"):
            raise PlanNotPurchasable("Plan not found or missing stripe_price_id")

        return result.data[0]["stripe_price_id"]

    def create_checkout_session(
        self,
        user: dict,
        price_id: Optional[str] = None,
        plan_id: Optional[str] = None,
        success_url: Optional[str] = None,
        cancel_url: Optional[str] = None,
    ) -> str:
        """
        Create a Stripe Checkout session for an authenticated user.
        Returns the URL to redirect the browser to.
        """
        selected_price_id = self.resolve_price_id(price_id, plan_id)

        stripe.api_key = require_env(STRIPE_SECRET_KEY)
        success_url = success_url or default_success_url()
        cancel_url = cancel_url or default_cancel_url()

        customer_id = self.customers.ensure_customer(user["id"], user.get("email"))

        session = stripe.checkout.Session.create(
            mode="subscription",
            payment_method_types=["card"],
            customer=customer_id,
            line_items=[{"price": selected_price_id, "quantity": 1}],
            success_url=success_url,
            cancel_url=cancel_url,
            allow_promotion_codes=True,
            metadata={"user_id": user["id"], "price_id": selected_price_id},
            subscription_data={"metadata": {"user_id": user["id"]}},
        )

        logger.info(
            f"Created checkout session {session.id} for user {user['id']} "
            f"(price={selected_price_id})"
        )
        return session.url
