from __future__ import annotations

import asyncio
from dataclasses import dataclass

from pushrelay.models.push_subscription import Subscription
from pushrelay.schemas.push_subscription import PushMessageCreate
from pushrelay.services.delivery import DeliveryEngine
from pushrelay.services.eviction import evict
from pushrelay.services.registry import SubscriptionRegistry


@dataclass(frozen=True)
class SendSummary:
    delivered: int
    failed: int
    removed: int
    total: int


class PushRelay:
    """Subscribe, unsubscribe and send, wired over one registry and engine."""

    def __init__(self, registry: SubscriptionRegistry, engine: DeliveryEngine):
        self.registry = registry
        self.engine = engine

    def subscribe(self, endpoint: str, p256dh: str, auth: str) -> Subscription:
        return self.registry.upsert(endpoint, p256dh, auth)

    def unsubscribe(self, endpoint: str) -> bool:
        return self.registry.remove(endpoint)

    async def send(self, message: PushMessageCreate) -> SendSummary:
        """Broadcast to the current subscribers, then evict gone endpoints."""
        snapshot = self.registry.snapshot()
        result = await self.engine.broadcast(message, snapshot)

        removed = 0
        if result.gone_endpoints:
            # eviction writes the state file
            removed = await asyncio.to_thread(evict, self.registry, result.gone_endpoints)

        return SendSummary(
            delivered=result.delivered,
            failed=result.failed,
            removed=removed,
            total=self.registry.count(),
        )
