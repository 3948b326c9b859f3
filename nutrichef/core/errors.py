"""
Billing error taxonomy.

Each error maps to one HTTP outcome:
- InvalidSignature      -> 400 (definitive, Stripe should not retry)
- Unauthenticated       -> 401
- MissingParameters     -> 400
- PlanNotPurchasable    -> 400
- HandlerFailure        -> 500 (Stripe retries delivery later)
- ConfigurationError    -> 500 naming the missing variable
"""


class BillingError(Exception):
    """Base class for billing errors."""
    pass


class InvalidSignature(BillingError):
    """Webhook payload could not be authenticated."""
    pass


class Unauthenticated(BillingError):
    """Missing or invalid bearer credential."""
    pass


class MissingParameters(BillingError):
    """Checkout requested with neither a price nor a plan."""
    pass


class PlanNotPurchasable(BillingError):
    """Plan does not exist or has no Stripe price."""
    pass


class HandlerFailure(BillingError):
    """Unexpected error while applying a webhook event."""

    def __init__(self, event_type: str, cause: Exception):
        self.event_type = event_type
        self.cause = cause
        super().__init__(f"Handler for {event_type} failed: {cause}")


class ConfigurationError(BillingError):
    """Required environment variable is not set."""

    def __init__(self, variable: str):
        self.variable = variable
        super().__init__(f"Missing required environment variable: {variable}")
