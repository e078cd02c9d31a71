"""Concurrent fan-out of one message to a snapshot of subscriptions."""

from __future__ import annotations

import asyncio
import json
import logging
import time
from dataclasses import dataclass, field
from typing import Callable, Iterable, Mapping

from pushrelay.core.exceptions import DeliveryError
from pushrelay.models.push_subscription import Subscription
from pushrelay.schemas.push_subscription import PushMessageCreate
from pushrelay.services.web_push import DeliveryOutcome, send_web_push

logger = logging.getLogger(__name__)

Sender = Callable[..., DeliveryOutcome]


@dataclass(frozen=True)
class BroadcastResult:
    delivered: int = 0
    failed: int = 0
    gone_endpoints: frozenset[str] = field(default_factory=frozenset)

    @classmethod
    def from_outcomes(cls, outcomes: Iterable[tuple[str, DeliveryOutcome]]) -> BroadcastResult:
        """Reduce per-endpoint outcomes into aggregate counts."""
        delivered = 0
        failed = 0
        gone: set[str] = set()
        for endpoint, outcome in outcomes:
            if outcome is DeliveryOutcome.DELIVERED:
                delivered += 1
                continue
            failed += 1
            if outcome is DeliveryOutcome.FAILED_GONE:
                gone.add(endpoint)
        return cls(delivered=delivered, failed=failed, gone_endpoints=frozenset(gone))


def serialize_message(message: PushMessageCreate, timestamp: int | None = None) -> bytes:
    """Build the JSON notification body delivered to the service worker."""
    notification = {
        "title": message.title,
        "body": message.body,
        "icon": message.icon or "",
        "url": message.url or "",
        "timestamp": int(time.time()) if timestamp is None else timestamp,
    }
    return json.dumps(notification, ensure_ascii=False).encode("utf-8")


class DeliveryEngine:
    """Delivers a message to every subscription in a snapshot, best effort."""

    def __init__(
        self,
        vapid_private_key: str,
        vapid_claims_email: str,
        ttl: int = 30,
        max_concurrency: int = 10,
        sender: Sender = send_web_push,
    ):
        self.vapid_private_key = vapid_private_key
        self.vapid_claims = {"sub": vapid_claims_email}
        self.ttl = ttl
        self.max_concurrency = max_concurrency
        self._sender = sender

    def _deliver(self, payload: bytes, subscription: Subscription) -> DeliveryOutcome:
        try:
            return self._sender(
                payload,
                subscription,
                vapid_private_key=self.vapid_private_key,
                vapid_claims=self.vapid_claims,
                ttl=self.ttl,
            )
        except Exception as e:
            error = DeliveryError(subscription.endpoint, f"Unexpected delivery error: {e}")
            error.__cause__ = e
            logger.error(str(error), exc_info=error)
            return DeliveryOutcome.FAILED_RETRYABLE

    async def broadcast(
        self,
        message: PushMessageCreate,
        snapshot: Mapping[str, Subscription],
    ) -> BroadcastResult:
        """
        Send *message* to every subscription in *snapshot*.

        Deliveries run on worker threads, at most max_concurrency at a time.
        Waits for every outcome; a failing subscription never stops the rest.
        The registry is not touched: gone endpoints are only reported.
        """
        if not snapshot:
            return BroadcastResult()

        payload = serialize_message(message)
        semaphore = asyncio.Semaphore(self.max_concurrency)

        async def deliver_one(endpoint: str, subscription: Subscription) -> tuple[str, DeliveryOutcome]:
            async with semaphore:
                outcome = await asyncio.to_thread(self._deliver, payload, subscription)
            return endpoint, outcome

        outcomes = await asyncio.gather(
            *[deliver_one(endpoint, subscription) for endpoint, subscription in snapshot.items()]
        )
        result = BroadcastResult.from_outcomes(outcomes)
        logger.info(
            f"Broadcast finished: {result.delivered}/{len(snapshot)} delivered, "
            f"{result.failed} failed, {len(result.gone_endpoints)} gone"
        )
        return result
