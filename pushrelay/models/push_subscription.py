from __future__ import annotations

from pydantic import BaseModel, ConfigDict, Field


class SubscriptionKeys(BaseModel):
    """Client-side encryption material of a push subscription."""

    model_config = ConfigDict(frozen=True)

    p256dh: str  # Encryption key
    auth: str  # Auth secret


class Subscription(BaseModel):
    """Web Push subscription for browser notifications, keyed by endpoint."""

    model_config = ConfigDict(frozen=True)

    endpoint: str = Field(..., min_length=1)
    keys: SubscriptionKeys

    @classmethod
    def create(cls, endpoint: str, p256dh: str, auth: str) -> Subscription:
        return cls(endpoint=endpoint, keys=SubscriptionKeys(p256dh=p256dh, auth=auth))

    def to_subscription_info(self) -> dict:
        """Return dict in the format expected by pywebpush."""
        return {
            "endpoint": self.endpoint,
            "keys": {
                "p256dh": self.keys.p256dh,
                "auth": self.keys.auth,
            },
        }
