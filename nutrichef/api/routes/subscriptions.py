"""
Subscription read routes.
The app calls these after checkout to refresh its view of the plan.

Endpoints:
- GET /plans - Active plans, cheapest first
- GET /status - Current subscription + premium flag
- GET /features/{feature} - Whether the user's plan includes a feature
"""

from typing import List

from fastapi import APIRouter, Depends

from ...lib import SubscriptionService, get_current_user
from ...lib.subscriptions import grants_feature
from ...models import (
    PREMIUM_FEATURE,
    FeatureAccessResponse,
    SubscriptionPlan,
    SubscriptionStatusResponse,
)


router = APIRouter()


def get_subscription_service() -> SubscriptionService:
    return SubscriptionService()


@router.get("/plans", response_model=List[SubscriptionPlan])
async def list_plans(
    service: SubscriptionService = Depends(get_subscription_service),
):
    """Public plan catalog for the pricing page."""
    return service.list_plans()


@router.get("/status", response_model=SubscriptionStatusResponse)
async def get_subscription_status(
    user: dict = Depends(get_current_user),
    service: SubscriptionService = Depends(get_subscription_service),
):
    """
    Current subscription for the authenticated user.

    Returns:
    - subscription: newest subscription row with its plan, or null
    - is_premium: whether AI mentoring is unlocked
    """
    subscription = service.get_current_subscription(user["id"])
    return SubscriptionStatusResponse(
        subscription=subscription,
        is_premium=grants_feature(subscription, PREMIUM_FEATURE),
    )


@router.get("/features/{feature}", response_model=FeatureAccessResponse)
async def check_feature_access(
    feature: str,
    user: dict = Depends(get_current_user),
    service: SubscriptionService = Depends(get_subscription_service),
):
    """Feature gate used by premium screens."""
    return FeatureAccessResponse(
        feature=feature,
        has_access=service.has_feature_access(user["id"], feature),
    )
