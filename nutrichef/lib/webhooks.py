"""
Stripe event routing.

Handles:
- checkout.session.completed
- customer.subscription.created
- customer.subscription.updated
- customer.subscription.deleted

Everything else is acknowledged and ignored, so new Stripe event types
never break delivery. A handler that raises becomes HandlerFailure and
the endpoint answers 500; Stripe then redelivers, which is safe because
every handler is idempotent.
"""

import logging
from typing import Optional

from ..core.errors import HandlerFailure
from ..models import (
    CheckoutCompleted,
    SubscriptionChanged,
    SubscriptionDeleted,
    UnhandledEvent,
)
from .customers import CustomerResolver
from .events import parse_event
from .subscriptions import SubscriptionService


logger = logging.getLogger(__name__)

HANDLED = "handled"
IGNORED = "ignored"
SKIPPED = "skipped"


class EventRouter:
    """Dispatches verified events to the reconciliation handlers."""

    def __init__(
        self,
        subscriptions: Optional[SubscriptionService] = None,
        customers: Optional[CustomerResolver] = None,
    ):
        self.subscriptions = subscriptions or SubscriptionService()
        self.customers = customers or CustomerResolver(self.subscriptions.client)
        self.handlers = {
            CheckoutCompleted: self.handle_checkout_completed,
            SubscriptionChanged: self.handle_subscription_changed,
            SubscriptionDeleted: self.handle_subscription_deleted,
        }

    def dispatch(self, event: dict) -> str:
        """
        Apply one verified event.

        Returns:
            "handled", "skipped" (no attributable user) or "ignored"

        Raises:
            HandlerFailure: Anything went wrong while mutating state
        """
        event_type = event.get("type", "unknown")

        try:
            parsed = parse_event(event)
            if isinstance(parsed, UnhandledEvent):
                logger.debug(f"Ignoring webhook event type: {event_type}")
                return IGNORED

            logger.info(f"Processing webhook event: {event_type}, id={parsed.event_id}")
            return self.handlers[type(parsed)](parsed)

        except Exception as e:
            logger.exception(f"Webhook handler error for {event_type}")
            raise HandlerFailure(event_type, e) from e

    def resolve_user(self, user_id: Optional[str], customer_id: Optional[str]) -> Optional[str]:
        """Prefer the user id Stripe echoed back; fall back to the customer mapping."""
        return user_id or self.customers.lookup_user_by_customer(customer_id)

    def handle_checkout_completed(self, event: CheckoutCompleted) -> str:
        if not event.user_id:
            logger.warning(
                f"checkout.session.completed {event.event_id} has no user_id; nothing to update"
            )
            return SKIPPED

        if event.subscription_id:
            self.subscriptions.upsert_active_subscription(
                event.user_id, event.subscription_id, event.price_id
            )

        if event.customer_id:
            self.customers.remember_customer(event.user_id, event.customer_id)

        return HANDLED

    def handle_subscription_changed(self, event: SubscriptionChanged) -> str:
        if not event.subscription_id:
            logger.warning(f"{event.event_type} {event.event_id} has no subscription id; skipping")
            return SKIPPED

        user_id = self.resolve_user(event.user_id, event.customer_id)
        if not user_id:
            logger.warning(
                f"{event.event_type} {event.event_id}: no user for customer {event.customer_id}"
            )
            return SKIPPED

        self.subscriptions.upsert_active_subscription(
            user_id, event.subscription_id, event.price_id
        )
        return HANDLED

    def handle_subscription_deleted(self, event: SubscriptionDeleted) -> str:
        if not event.subscription_id:
            logger.warning(
                f"customer.subscription.deleted {event.event_id} has no subscription id; skipping"
            )
            return SKIPPED

        user_id = self.resolve_user(event.user_id, event.customer_id)
        if not user_id:
            logger.warning(
                f"customer.subscription.deleted {event.event_id}: "
                f"no user for customer {event.customer_id}"
            )
            return SKIPPED

        self.subscriptions.cancel(user_id, event.subscription_id)
        return HANDLED
