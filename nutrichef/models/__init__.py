from .schemas import (
    PREMIUM_FEATURE,
    SubscriptionStatus,
    SubscriptionPlan,
    UserSubscription,
    CheckoutRequest,
    CheckoutResponse,
    SubscriptionStatusResponse,
    FeatureAccessResponse,
)
from .events import (
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

__all__ = [
    "PREMIUM_FEATURE",
    "SubscriptionStatus",
    "SubscriptionPlan",
    "UserSubscription",
    "CheckoutRequest",
    "CheckoutResponse",
    "SubscriptionStatusResponse",
    "FeatureAccessResponse",
    "CHECKOUT_COMPLETED",
    "SUBSCRIPTION_CREATED",
    "SUBSCRIPTION_UPDATED",
    "SUBSCRIPTION_DELETED",
    "BillingEvent",
    "CheckoutCompleted",
    "SubscriptionChanged",
    "SubscriptionDeleted",
    "UnhandledEvent",
]
