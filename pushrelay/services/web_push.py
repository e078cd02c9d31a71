"""Single Web Push delivery via pywebpush, classified into an outcome."""

from __future__ import annotations

import logging
from enum import Enum

from pywebpush import WebPushException, webpush
from requests.exceptions import RequestException

from pushrelay.models.push_subscription import Subscription

logger = logging.getLogger(__name__)

# Push service statuses meaning the subscription will never accept messages again
GONE_STATUS_CODES = frozenset({404, 410})


class DeliveryOutcome(str, Enum):
    DELIVERED = "delivered"
    FAILED_RETRYABLE = "failed_retryable"
    FAILED_GONE = "failed_gone"


def classify_status(status_code: int | None) -> DeliveryOutcome:
    """Map a push service HTTP status to a delivery outcome."""
    if status_code is not None and 200 <= status_code < 300:
        return DeliveryOutcome.DELIVERED
    if status_code in GONE_STATUS_CODES:
        return DeliveryOutcome.FAILED_GONE
    return DeliveryOutcome.FAILED_RETRYABLE


def send_web_push(
    payload: bytes,
    subscription: Subscription,
    *,
    vapid_private_key: str,
    vapid_claims: dict[str, str],
    ttl: int,
) -> DeliveryOutcome:
    """
    Send one signed Web Push message.

    Args:
        payload: Serialized notification body
        subscription: Target subscription
        vapid_private_key: VAPID private key (base64url or PEM)
        vapid_claims: VAPID claims, at least {"sub": "mailto:..."}
        ttl: Time-to-live hint for the push service in seconds

    Returns:
        Outcome of the attempt. Errors are classified, never raised.
    """
    try:
        webpush(
            subscription_info=subscription.to_subscription_info(),
            data=payload,
            vapid_private_key=vapid_private_key,
            # pywebpush adds "aud"/"exp" to the claims dict it is given
            vapid_claims=dict(vapid_claims),
            ttl=ttl,
        )
    except WebPushException as e:
        status_code = e.response.status_code if e.response is not None else None
        outcome = classify_status(status_code)
        logger.warning(f"Web push failed for {subscription.endpoint} (status={status_code}): {e}")
        return outcome
    except RequestException as e:
        logger.warning(f"Web push transport error for {subscription.endpoint}: {e}")
        return DeliveryOutcome.FAILED_RETRYABLE

    logger.info(f"Web push sent to {subscription.endpoint[:50]}...")
    return DeliveryOutcome.DELIVERED
