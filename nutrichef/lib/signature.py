"""
Stripe webhook signature verification.

Works on the exact bytes Stripe sent. The body must not be parsed or
re-serialized before this check, or the HMAC will not match.
"""

import json
import logging
from typing import Optional

import stripe

from ..core.errors import InvalidSignature


logger = logging.getLogger(__name__)

DEFAULT_TOLERANCE = 300  # seconds, same as Stripe's SDK default


def verify_event(
    payload: bytes,
    sig_header: Optional[str],
    secret: str,
    tolerance: int = DEFAULT_TOLERANCE,
) -> dict:
    """
    Verify a webhook delivery and return the parsed event.

    Args:
        payload: Raw request body, untouched
        sig_header: Value of the Stripe-Signature header
        secret: Webhook signing secret (whsec_...)
        tolerance: Max age of the signed timestamp in seconds

    Returns:
        Event as a plain dict

    Raises:
        InvalidSignature: Missing header, bad signature, stale timestamp,
            or a body that is not UTF-8 JSON.
    """
    if not sig_header:
        logger.warning("Webhook rejected: missing Stripe-Signature header")
        raise InvalidSignature("Missing Stripe-Signature header")

    try:
        body = payload.decode("utf-8")
    except UnicodeDecodeError:
        logger.warning("Webhook rejected: body is not valid UTF-8")
        raise InvalidSignature("Invalid payload encoding")

    try:
        stripe.WebhookSignature.verify_header(body, sig_header, secret, tolerance)
    except stripe.SignatureVerificationError as e:
        logger.warning(f"Webhook signature verification failed: {e}")
        raise InvalidSignature(str(e))

    try:
        event = json.loads(body)
    except ValueError:
        logger.warning("Webhook rejected: signed body is not JSON")
        raise InvalidSignature("Invalid payload")

    if not isinstance(event, dict) or "type" not in event:
        raise InvalidSignature("Invalid payload")

    logger.info(f"Verified webhook event: {event['type']}, id={event.get('id')}")
    return event
