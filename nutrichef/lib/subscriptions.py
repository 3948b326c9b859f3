"""
Subscription reconciliation.
Keeps user_subscriptions in sync with Stripe webhook events.

Key design:
- Stripe is the source of truth; rows are written only from webhooks
- Current-row policy: a user's current subscription is the row with the
  newest created_at, ties broken by the greatest id
- Upserts target the current row, so replaying an event is harmless
- Cancellation matches user AND Stripe subscription id, never just the user
- Rows are never deleted here
"""

import logging
from datetime import datetime, timezone
from typing import Callable, List, Optional

from ..db import get_admin_client
from ..models import (
    PREMIUM_FEATURE,
    SubscriptionPlan,
    SubscriptionStatus,
    UserSubscription,
)


logger = logging.getLogger(__name__)

PLANS_TABLE = "subscription_plans"
SUBSCRIPTIONS_TABLE = "user_subscriptions"


def utc_now() -> datetime:
    return datetime.now(timezone.utc)


def pick_current_row(rows: List[dict]) -> Optional[dict]:
    """Newest created_at wins; equal timestamps fall back to the greatest id."""
    if not rows:
        return None
    return max(rows, key=lambda row: (row.get("created_at") or "", str(row.get("id") or "")))


def grants_feature(subscription: Optional[UserSubscription], feature: str) -> bool:
    """Only an active subscription on a plan listing the feature unlocks it."""
    if not subscription or not subscription.plan:
        return False
    if subscription.status != SubscriptionStatus.ACTIVE:
        return False
    return feature in subscription.plan.features


class SubscriptionService:
    """Reads plans and mirrors Stripe subscription state locally."""

    def __init__(self, client=None, clock: Optional[Callable[[], datetime]] = None):
        self.client = client or get_admin_client()
        self.clock = clock or utc_now

    # -- Plans ---------------------------------------------------------

    def list_plans(self) -> List[SubscriptionPlan]:
        """Active plans, cheapest first."""
        result = (
            self.client.table(PLANS_TABLE)
            .select("*")
            .eq("is_active", True)
            .order("price")
            .execute()
        )
        return [SubscriptionPlan(**row) for row in result.data or []]

    def get_plan(self, plan_id: str) -> Optional[dict]:
        result = (
            self.client.table(PLANS_TABLE)
            .select("*")
            .eq("id", plan_id)
            .limit(1)
            .execute()
        )
        return result.data[0] if result.data else None

    def resolve_plan_id(self, price_id: Optional[str]) -> Optional[str]:
        """
        Map a Stripe price to our plan id.
        Unknown prices return None so the event still applies (catalog drift).
        """
        if not price_id:
            return None

        result = (
            self.client.table(PLANS_TABLE)
            .select("id")
            .eq("stripe_price_id", price_id)
            .limit(1)
            .execute()
        )

        if not result.data:
            logger.warning(f"No plan matches Stripe price {price_id}; leaving plan unchanged")
            return None

        return result.data[0]["id"]

    # -- Subscription rows ---------------------------------------------

    def get_current_row(self, user_id: str) -> Optional[dict]:
        """The row every reconciliation step targets for this user."""
        result = (
            self.client.table(SUBSCRIPTIONS_TABLE)
            .select("*")
            .eq("user_id", user_id)
            .order("created_at", desc=True)
            .execute()
        )
        return pick_current_row(result.data or [])

    def upsert_active_subscription(
        self,
        user_id: Optional[str],
        stripe_subscription_id: str,
        price_id: Optional[str] = None,
    ) -> Optional[dict]:
        """
        Mark the user's current subscription active, creating it if needed.
        Replaying the same event rewrites the same values; only updated_at
        moves, since it is stamped from the clock on every write.

        Returns the written row data, or None when the event cannot be
        attributed to a user.
        """
        if not user_id:
            logger.warning(
                f"Subscription {stripe_subscription_id} has no resolvable user; skipping"
            )
            return None

        plan_id = self.resolve_plan_id(price_id)
        now = self.clock().isoformat()

        payload = {
            "status": SubscriptionStatus.ACTIVE.value,
            "stripe_subscription_id": stripe_subscription_id,
            "updated_at": now,
        }
        if plan_id:
            payload["plan_id"] = plan_id

        existing = self.get_current_row(user_id)

        if existing:
            self.client.table(SUBSCRIPTIONS_TABLE).update(payload).eq("id", existing["id"]).execute()
            logger.info(
                f"Activated subscription row {existing['id']} for user {user_id} "
                f"(stripe={stripe_subscription_id}, plan={plan_id})"
            )
            return {**existing, **payload}

        row = {
            "user_id": user_id,
            "started_at": now,
            "auto_renew": True,
            **payload,
        }
        result = self.client.table(SUBSCRIPTIONS_TABLE).insert(row).execute()
        logger.info(
            f"Created subscription row for user {user_id} "
            f"(stripe={stripe_subscription_id}, plan={plan_id})"
        )
        return result.data[0] if result.data else row

    def cancel(self, user_id: str, stripe_subscription_id: str) -> int:
        """
        Mark the row for this exact Stripe subscription as cancelled.
        Returns how many rows matched.
        """
        result = (
            self.client.table(SUBSCRIPTIONS_TABLE)
            .update({
                "status": SubscriptionStatus.CANCELLED.value,
                "updated_at": self.clock().isoformat(),
            })
            .eq("user_id", user_id)
            .eq("stripe_subscription_id", stripe_subscription_id)
            .execute()
        )

        matched = len(result.data or [])
        if matched:
            logger.info(f"Cancelled subscription {stripe_subscription_id} for user {user_id}")
        else:
            logger.warning(
                f"Cancel for {stripe_subscription_id} matched no row of user {user_id}"
            )
        return matched

    # -- Read side used by the app -------------------------------------

    def get_current_subscription(self, user_id: str) -> Optional[UserSubscription]:
        """Current row with its plan embedded."""
        row = self.get_current_row(user_id)
        if not row:
            return None

        plan = self.get_plan(row["plan_id"]) if row.get("plan_id") else None
        return UserSubscription(**row, plan=SubscriptionPlan(**plan) if plan else None)

    def has_feature_access(self, user_id: str, feature: str) -> bool:
        return grants_feature(self.get_current_subscription(user_id), feature)

    def is_premium(self, user_id: str) -> bool:
        return self.has_feature_access(user_id, PREMIUM_FEATURE)
