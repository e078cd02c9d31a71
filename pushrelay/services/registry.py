"""In-memory registry of push subscriptions shared by all request handlers."""

from __future__ import annotations

import logging
import threading

from pydantic import ValidationError

from pushrelay.core.exceptions import ClientInputError, PersistenceError
from pushrelay.core.locks import ReadWriteLock
from pushrelay.models.push_subscription import Subscription
from pushrelay.services.subscription_store import SubscriptionStore

logger = logging.getLogger(__name__)


class SubscriptionRegistry:
    """Owns the endpoint -> subscription map and keeps the store in sync."""

    def __init__(self, store: SubscriptionStore):
        self._store = store
        self._subscriptions: dict[str, Subscription] = {}
        self._lock = ReadWriteLock()
        # Serializes snapshot+save so two writes of the file never interleave
        self._persist_lock = threading.Lock()

    def load(self) -> int:
        """Replace the current entries with the stored state. Returns the entry count."""
        try:
            loaded = self._store.load()
        except PersistenceError as e:
            logger.warning(f"Failed to load subscriptions, starting empty: {e}")
            loaded = {}

        with self._lock.write_locked():
            self._subscriptions = dict(loaded)
            count = len(self._subscriptions)

        if count:
            logger.info(f"Loaded {count} subscriptions from {self._store.path}")
        return count

    def upsert(self, endpoint: str, p256dh: str, auth: str) -> Subscription:
        """Insert or replace the subscription for *endpoint*."""
        if not endpoint:
            raise ClientInputError("endpoint must not be empty")
        if not p256dh or not auth:
            raise ClientInputError("keys.p256dh and keys.auth must not be empty")

        try:
            subscription = Subscription.create(endpoint, p256dh, auth)
        except ValidationError as e:
            raise ClientInputError(f"Invalid subscription: {e}") from e

        with self._lock.write_locked():
            self._subscriptions[endpoint] = subscription
            count = len(self._subscriptions)

        logger.info(f"Subscribed: {endpoint} (total subscriptions: {count})")
        self.persist()
        return subscription

    def remove(self, endpoint: str, persist: bool = True) -> bool:
        """
        Delete the subscription for *endpoint*.

        Args:
            endpoint: Subscription endpoint
            persist: Write the store afterwards. Batch callers pass False and
                call persist() once themselves.

        Returns:
            True if the endpoint was registered.
        """
        with self._lock.write_locked():
            existed = self._subscriptions.pop(endpoint, None) is not None

        if existed:
            logger.info(f"Unsubscribed: {endpoint}")
            if persist:
                self.persist()
        return existed

    def snapshot(self) -> dict[str, Subscription]:
        """Copy of the current entries, safe to iterate without any lock."""
        with self._lock.read_locked():
            return dict(self._subscriptions)

    def count(self) -> int:
        with self._lock.read_locked():
            return len(self._subscriptions)

    def persist(self) -> bool:
        """
        Write the current entries to the store.

        Failures are logged and reported through the return value only; the
        in-memory change that triggered the write has already succeeded.
        """
        with self._persist_lock:
            try:
                self._store.save(self.snapshot())
            except PersistenceError as e:
                logger.warning(f"Failed to save subscriptions: {e}")
                return False
        return True
