from .push_subscription import (
    PushMessageCreate,
    PushResponse,
    PushSubscriptionCreate,
    PushUnsubscribe,
    StatusResponse,
    SubscriptionKeysIn,
    VapidPublicKeyResponse,
)

__all__ = [
    "PushMessageCreate",
    "PushResponse",
    "PushSubscriptionCreate",
    "PushUnsubscribe",
    "StatusResponse",
    "SubscriptionKeysIn",
    "VapidPublicKeyResponse",
]
