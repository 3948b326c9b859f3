from .subscriptions import SubscriptionService
from .customers import CustomerResolver
from .checkout import CheckoutService
from .webhooks import EventRouter
from .signature import verify_event
from .auth import authenticate, get_current_user

__all__ = [
    "SubscriptionService",
    "CustomerResolver",
    "CheckoutService",
    "EventRouter",
    "verify_event",
    "authenticate",
    "get_current_user",
]
