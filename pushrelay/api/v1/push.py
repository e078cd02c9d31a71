import logging

from fastapi import APIRouter, Request

from pushrelay.api.deps import RelayDep, SettingsDep
from pushrelay.core.exceptions import ClientInputError
from pushrelay.core.limiter import PUSH_RATE_LIMIT, limiter
from pushrelay.schemas.push_subscription import (
    PushMessageCreate,
    PushResponse,
    PushSubscriptionCreate,
    PushUnsubscribe,
    StatusResponse,
    VapidPublicKeyResponse,
)

logger = logging.getLogger(__name__)

router = APIRouter()


@router.get("/vapid-public-key", response_model=VapidPublicKeyResponse)
def get_vapid_public_key(settings: SettingsDep) -> dict:
    """Get VAPID public key for push subscription."""
    return {"publicKey": settings.VAPID_PUBLIC_KEY}


@router.post("/subscribe", response_model=StatusResponse)
def subscribe_to_push(*, relay: RelayDep, payload: PushSubscriptionCreate) -> dict:
    """Register or refresh a browser push subscription."""
    relay.subscribe(payload.endpoint, payload.keys.p256dh, payload.keys.auth)
    return {"status": "success", "message": "Subscribed successfully"}


@router.post("/unsubscribe", response_model=StatusResponse)
def unsubscribe_from_push(*, relay: RelayDep, payload: PushUnsubscribe) -> dict:
    """Unsubscribe from web push notifications."""
    if not payload.endpoint:
        raise ClientInputError("endpoint must not be empty")

    if not relay.unsubscribe(payload.endpoint):
        return {"status": "not_found", "message": "Subscription not found"}

    return {"status": "success", "message": "Unsubscribed successfully"}


@router.post("/push", response_model=PushResponse)
@limiter.limit(PUSH_RATE_LIMIT)
async def push_to_all(request: Request, relay: RelayDep, payload: PushMessageCreate) -> dict:
    """Broadcast a notification to every subscriber."""
    summary = await relay.send(payload)
    logger.info(
        f"Push request done: success={summary.delivered}, failed={summary.failed}, "
        f"removed={summary.removed}, total={summary.total}"
    )
    return {
        "status": "success",
        "success": summary.delivered,
        "failed": summary.failed,
        "removed": summary.removed,
        "total": summary.total,
        "message": (
            f"Pushed to {summary.delivered + summary.failed} subscribers: "
            f"{summary.delivered} succeeded, {summary.failed} failed"
        ),
    }
