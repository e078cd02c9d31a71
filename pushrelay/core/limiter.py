"""Rate limiting configuration."""

from __future__ import annotations

from slowapi import Limiter
from slowapi.util import get_remote_address

# Single process, so in-memory counters are enough
limiter = Limiter(
    key_func=get_remote_address,
    storage_uri="memory://",
    default_limits=["1000/hour"],  # Fallback for endpoints without an explicit limit
)

PUSH_RATE_LIMIT = "60/minute"


def get_limiter() -> Limiter:
    """Get limiter instance."""
    return limiter
