"""
Checkout route.
Starts a Stripe-hosted checkout for a plan; the webhook does the rest.
"""

import logging

from fastapi import APIRouter, Depends, HTTPException, Request
from pydantic import ValidationError

from ...core.errors import ConfigurationError, MissingParameters, PlanNotPurchasable
from ...lib import CheckoutService, get_current_user
from ...models import CheckoutRequest, CheckoutResponse


logger = logging.getLogger(__name__)

router = APIRouter()


def get_checkout_service() -> CheckoutService:
    return CheckoutService()


@router.post("/session", response_model=CheckoutResponse)
async def create_checkout_session(
    request: Request,
    user: dict = Depends(get_current_user),
    service: CheckoutService = Depends(get_checkout_service),
):
    """
    Create a Stripe Checkout session.

    Body (camelCase, as sent by the web app):
    - priceId: Stripe price to charge, or
    - planId: our plan id, resolved to its Stripe price
    - successUrl / cancelUrl: optional, default to FRONTEND_URL pages

    An empty body counts as {}; unparseable or mistyped bodies are 400.

    Returns:
    - url: Redirect the browser here
    """
    raw = await request.body()

    try:
        body = CheckoutRequest.model_validate_json(raw) if raw.strip() else CheckoutRequest()
    except ValidationError as e:
        logger.warning(f"Rejected checkout body for user {user['id']}: {e.error_count()} error(s)")
        raise HTTPException(status_code=400, detail="Invalid request body")

    try:
        url = service.create_checkout_session(
            user=user,
            price_id=body.price_id,
            plan_id=body.plan_id,
            success_url=body.success_url,
            cancel_url=body.cancel_url,
        )
    except (MissingParameters, PlanNotPurchasable) as e:
        raise HTTPException(status_code=400, detail=str(e))
    except ConfigurationError:
        raise
    except Exception as e:
        logger.exception(f"Checkout failed for user {user['id']}")
        raise HTTPException(status_code=500, detail=str(e))

    return CheckoutResponse(url=url)
