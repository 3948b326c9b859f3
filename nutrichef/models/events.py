"""
Typed Stripe webhook events.

Stripe payloads are loose JSON. Each recognized event type gets its own
variant carrying only what its handler needs; anything else becomes
UnhandledEvent so nothing reads fields speculatively.
"""

from typing import Literal, Optional, Union
from pydantic import BaseModel


CHECKOUT_COMPLETED = "checkout.session.completed"
SUBSCRIPTION_CREATED = "customer.subscription.created"
SUBSCRIPTION_UPDATED = "customer.subscription.updated"
SUBSCRIPTION_DELETED = "customer.subscription.deleted"


class CheckoutCompleted(BaseModel):
    """Payment finished on the hosted checkout page."""
    event_id: str
    user_id: Optional[str] = None
    customer_id: Optional[str] = None
    subscription_id: Optional[str] = None
    price_id: Optional[str] = None


class SubscriptionChanged(BaseModel):
    """Subscription created or updated on Stripe's side."""
    event_id: str
    event_type: Literal["customer.subscription.created", "customer.subscription.updated"]
    subscription_id: Optional[str] = None
    customer_id: Optional[str] = None
    user_id: Optional[str] = None
    price_id: Optional[str] = None


class SubscriptionDeleted(BaseModel):
    """Subscription ended (cancelled immediately or at period end)."""
    event_id: str
    subscription_id: Optional[str] = None
    customer_id: Optional[str] = None
    user_id: Optional[str] = None


class UnhandledEvent(BaseModel):
    """Any event type we acknowledge but do not act on."""
    event_id: str
    event_type: str


BillingEvent = Union[CheckoutCompleted, SubscriptionChanged, SubscriptionDeleted, UnhandledEvent]
