"""
Webhook handlers.
Only Stripe webhooks - no other integrations needed.

Handles:
- checkout.session.completed
- customer.subscription.created
- customer.subscription.updated
- customer.subscription.deleted

All subscription state is written here, from Stripe's events.
The app refetches its own subscription row afterwards.
"""

import logging

from fastapi import APIRouter, Depends, Request
from fastapi.responses import PlainTextResponse

from ...core.config import require_env, STRIPE_WEBHOOK_SECRET
from ...core.errors import HandlerFailure, InvalidSignature
from ...core.logging_config import sanitize_log_data
from ...lib import EventRouter, verify_event


logger = logging.getLogger(__name__)

router = APIRouter()


def get_event_router() -> EventRouter:
    return EventRouter()


@router.post("/stripe")
async def stripe_webhook(
    request: Request,
    event_router: EventRouter = Depends(get_event_router),
):
    """
    Handle Stripe webhook events.

    - 400 (plain text) when the signature does not verify; nothing is written
    - 500 (plain text) when a handler fails; Stripe will redeliver
    - 200 otherwise, including event types we ignore
    """
    payload = await request.body()
    sig_header = request.headers.get("stripe-signature")
    webhook_secret = require_env(STRIPE_WEBHOOK_SECRET)

    if logger.isEnabledFor(logging.DEBUG):
        logger.debug("Webhook delivery headers: %s", sanitize_log_data(dict(request.headers)))

    try:
        event = verify_event(payload, sig_header, webhook_secret)
    except InvalidSignature as e:
        return PlainTextResponse(f"Webhook Error: {e}", status_code=400)

    try:
        outcome = event_router.dispatch(event)
    except HandlerFailure:
        return PlainTextResponse("Webhook error", status_code=500)

    # Acknowledge receipt
    return {"received": True, "outcome": outcome}
