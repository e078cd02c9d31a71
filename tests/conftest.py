import threading
from pathlib import Path
from typing import Generator

import pytest

from pushrelay.core.config import Settings, get_settings
from pushrelay.core.limiter import limiter
from pushrelay.models.push_subscription import Subscription
from pushrelay.services.delivery import DeliveryEngine
from pushrelay.services.registry import SubscriptionRegistry
from pushrelay.services.subscription_store import SubscriptionStore
from pushrelay.services.web_push import DeliveryOutcome

TEST_PUBLIC_KEY = "BEl62iUYgUivxIkv69yViEuiBIa-Ib9-SkvMeAtA3LFgDzkrxZJjSgSnfckjBJuBkr3qBUYIHBQFLXYp5Nksh8U"
TEST_PRIVATE_KEY = "UUxI4O8-FbRouAevSmBQ6o18hgE4nSG3qwvJTfKc-ls"


class FakeSender:
    """Stands in for pywebpush: returns a preset outcome per endpoint."""

    def __init__(self, outcomes: dict[str, DeliveryOutcome | Exception] | None = None):
        self.outcomes = outcomes or {}
        self.calls: list[dict] = []
        self._lock = threading.Lock()

    def __call__(self, payload: bytes, subscription: Subscription, **kwargs) -> DeliveryOutcome:
        with self._lock:
            self.calls.append({"payload": payload, "endpoint": subscription.endpoint, **kwargs})
        outcome = self.outcomes.get(subscription.endpoint, DeliveryOutcome.DELIVERED)
        if isinstance(outcome, Exception):
            raise outcome
        return outcome


class CountingStore(SubscriptionStore):
    """SubscriptionStore that counts save() calls."""

    def __init__(self, path):
        super().__init__(path)
        self.saves = 0

    def save(self, subscriptions) -> None:
        self.saves += 1
        super().save(subscriptions)


@pytest.fixture(autouse=True)
def _reset_global_state() -> Generator[None, None, None]:
    limiter.reset()
    get_settings.cache_clear()
    yield
    get_settings.cache_clear()


@pytest.fixture
def state_file(tmp_path: Path) -> Path:
    return tmp_path / "data" / "subscriptions.json"


@pytest.fixture
def store(state_file: Path) -> CountingStore:
    return CountingStore(state_file)


@pytest.fixture
def registry(store: CountingStore) -> SubscriptionRegistry:
    return SubscriptionRegistry(store)


@pytest.fixture
def fake_sender() -> FakeSender:
    return FakeSender()


@pytest.fixture
def engine(fake_sender: FakeSender) -> DeliveryEngine:
    return DeliveryEngine(
        vapid_private_key=TEST_PRIVATE_KEY,
        vapid_claims_email="mailto:test@example.com",
        ttl=30,
        max_concurrency=4,
        sender=fake_sender,
    )


@pytest.fixture
def settings(state_file: Path, tmp_path: Path) -> Settings:
    return Settings(
        _env_file=None,
        VAPID_PUBLIC_KEY=TEST_PUBLIC_KEY,
        VAPID_PRIVATE_KEY=TEST_PRIVATE_KEY,
        SUBSCRIPTIONS_FILE=str(state_file),
        STATIC_DIR=str(tmp_path / "static"),
    )
