"""
Data models for the NutriChef billing API.
Mirrors the Supabase rows this service reads and writes.
"""

from datetime import datetime
from enum import Enum
from typing import List, Optional
from pydantic import BaseModel, ConfigDict, Field


PREMIUM_FEATURE = "ai_mentoring"


class SubscriptionStatus(str, Enum):
    """Lifecycle of a local subscription row."""
    ACTIVE = "active"
    CANCELLED = "cancelled"
    EXPIRED = "expired"
    PENDING = "pending"


class SubscriptionPlan(BaseModel):
    """Purchasable tier. Read-only from this service's point of view."""
    id: str
    name: str
    description: Optional[str] = None
    price: float
    currency: str
    billing_period: str
    features: List[str] = Field(default_factory=list)
    stripe_product_id: Optional[str] = None
    stripe_price_id: Optional[str] = None
    is_active: bool = True
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None


class UserSubscription(BaseModel):
    """Local mirror of a user's Stripe subscription."""
    id: str
    user_id: str
    plan_id: Optional[str] = None
    status: SubscriptionStatus = SubscriptionStatus.PENDING
    started_at: Optional[datetime] = None
    expires_at: Optional[datetime] = None
    auto_renew: bool = True
    payment_method: Optional[str] = None
    stripe_subscription_id: Optional[str] = None
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None
    plan: Optional[SubscriptionPlan] = None


class CheckoutRequest(BaseModel):
    """
    Start a hosted checkout.
    Either price_id or plan_id; the web client sends camelCase.
    """
    model_config = ConfigDict(populate_by_name=True)

    price_id: Optional[str] = Field(default=None, alias="priceId")
    plan_id: Optional[str] = Field(default=None, alias="planId")
    success_url: Optional[str] = Field(default=None, alias="successUrl")
    cancel_url: Optional[str] = Field(default=None, alias="cancelUrl")


class CheckoutResponse(BaseModel):
    url: str


class SubscriptionStatusResponse(BaseModel):
    """What the app polls after checkout to refresh its state."""
    subscription: Optional[UserSubscription] = None
    is_premium: bool = False


class FeatureAccessResponse(BaseModel):
    feature: str
    has_access: bool
