"""
Stripe customer <-> user mapping.
The mapping lives on profiles.stripe_customer_id.

Not atomic: two first checkouts racing for the same user can both
create a Stripe customer; the later profile write wins.
"""

import logging
from typing import Optional

import stripe

from ..db import get_admin_client


logger = logging.getLogger(__name__)

PROFILES_TABLE = "profiles"


class CustomerResolver:
    """Finds or creates the Stripe customer for a user."""

    def __init__(self, client=None):
        self.client = client or get_admin_client()

    def get_customer_id(self, user_id: str) -> Optional[str]:
        result = (
            self.client.table(PROFILES_TABLE)
            .select("id, stripe_customer_id")
            .eq("id", user_id)
            .limit(1)
            .execute()
        )
        if not result.data:
            return None
        return result.data[0].get("stripe_customer_id")

    def ensure_customer(self, user_id: str, email: Optional[str]) -> str:
        """
        Return the user's Stripe customer id, creating it on first checkout.
        Requires stripe.api_key to be set by the caller.
        """
        customer_id = self.get_customer_id(user_id)
        if customer_id:
            return customer_id

        params = {"metadata": {"user_id": user_id}}
        if email:
            params["email"] = email

        customer = stripe.Customer.create(**params)
        logger.info(f"Created Stripe customer {customer.id} for user {user_id}")

        self.remember_customer(user_id, customer.id)
        return customer.id

    def remember_customer(self, user_id: str, customer_id: str) -> None:
        self.client.table(PROFILES_TABLE).update({
            "stripe_customer_id": customer_id,
        }).eq("id", user_id).execute()

    def lookup_user_by_customer(self, customer_id: Optional[str]) -> Optional[str]:
        """Reverse lookup for events that only carry the customer."""
        if not customer_id:
            return None

        result = (
            self.client.table(PROFILES_TABLE)
            .select("id")
            .eq("stripe_customer_id", customer_id)
            .limit(1)
            .execute()
        )

        if not result.data:
            return None
        return result.data[0]["id"]
