from __future__ import annotations

from pydantic import BaseModel, Field


class SubscriptionKeysIn(BaseModel):
    p256dh: str = Field(..., min_length=1, description="Encryption key")
    auth: str = Field(..., min_length=1, description="Auth secret")


class PushSubscriptionCreate(BaseModel):
    """Subscription object as produced by PushManager.subscribe() in the browser."""

    endpoint: str = Field(..., min_length=1)
    keys: SubscriptionKeysIn


class PushUnsubscribe(BaseModel):
    """Unsubscribe request."""

    endpoint: str = ""


class PushMessageCreate(BaseModel):
    """Message to broadcast to every subscriber."""

    title: str
    body: str
    icon: str | None = None
    url: str | None = None


class StatusResponse(BaseModel):
    status: str
    message: str


class PushResponse(StatusResponse):
    success: int
    failed: int
    removed: int
    total: int


class VapidPublicKeyResponse(BaseModel):
    publicKey: str
