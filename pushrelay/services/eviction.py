"""Removal of subscriptions the push service reported as gone."""

from __future__ import annotations

import logging
from typing import Iterable

from pushrelay.services.registry import SubscriptionRegistry

logger = logging.getLogger(__name__)


def evict(registry: SubscriptionRegistry, gone_endpoints: Iterable[str]) -> int:
    """
    Remove every gone endpoint from *registry* and persist once.

    Returns:
        Number of endpoints that were still registered.
    """
    removed = 0
    for endpoint in gone_endpoints:
        if registry.remove(endpoint, persist=False):
            removed += 1
            logger.info(f"Removed expired subscription: {endpoint}")

    if removed:
        registry.persist()
    return removed
