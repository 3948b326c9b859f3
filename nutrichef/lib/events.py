"""
Turn a verified Stripe event dict into one of the typed variants.
"""

from typing import Optional

from ..models import (
    CHECKOUT_COMPLETED,
    SUBSCRIPTION_CREATED,
    SUBSCRIPTION_UPDATED,
    SUBSCRIPTION_DELETED,
    BillingEvent,
    CheckoutCompleted,
    SubscriptionChanged,
    SubscriptionDeleted,
    UnhandledEvent,
)


def _metadata_user_id(obj: dict) -> Optional[str]:
    return (obj.get("metadata") or {}).get("user_id") or None


def _first_price_id(items: Optional[dict]) -> Optional[str]:
    """Price of the first line item in a Stripe list object."""
    data = (items or {}).get("data") or []
    if not data:
        return None
    return (data[0].get("price") or {}).get("id")


def _object_id(value) -> Optional[str]:
    # Expanded references arrive as full objects instead of ids
    if isinstance(value, dict):
        return value.get("id")
    return value


def parse_event(event: dict) -> BillingEvent:
    """
    Map a raw event onto its variant.

    Fields Stripe left out come through as None; handlers decide whether
    the event is still actionable.
    """
    event_type = event.get("type", "")
    event_id = event.get("id", "")
    obj = (event.get("data") or {}).get("object") or {}

    if event_type == CHECKOUT_COMPLETED:
        metadata = obj.get("metadata") or {}
        return CheckoutCompleted(
            event_id=event_id,
            user_id=_metadata_user_id(obj) or obj.get("client_reference_id"),
            customer_id=_object_id(obj.get("customer")),
            subscription_id=_object_id(obj.get("subscription")),
            price_id=metadata.get("price_id") or _first_price_id(obj.get("line_items")),
        )

    if event_type in (SUBSCRIPTION_CREATED, SUBSCRIPTION_UPDATED):
        return SubscriptionChanged(
            event_id=event_id,
            event_type=event_type,
            subscription_id=obj.get("id"),
            customer_id=_object_id(obj.get("customer")),
            user_id=_metadata_user_id(obj),
            price_id=_first_price_id(obj.get("items")),
        )

    if event_type == SUBSCRIPTION_DELETED:
        return SubscriptionDeleted(
            event_id=event_id,
            subscription_id=obj.get("id"),
            customer_id=_object_id(obj.get("customer")),
            user_id=_metadata_user_id(obj),
        )

    return UnhandledEvent(event_id=event_id, event_type=event_type or "unknown")
