"""File-based storage for push subscriptions, keyed by endpoint."""

from __future__ import annotations

import contextlib
import json
import logging
import os
from pathlib import Path
from typing import Mapping

from pydantic import ValidationError

from pushrelay.core.exceptions import CorruptStateError, PersistenceError
from pushrelay.models.push_subscription import Subscription

logger = logging.getLogger(__name__)


class SubscriptionStore:
    """
    Reads and writes the whole subscription set as one JSON document.

    The file maps endpoint -> {"endpoint": ..., "keys": {"p256dh": ..., "auth": ...}}
    and is rewritten wholesale on every save.
    """

    def __init__(self, path: str | Path):
        self.path = Path(path)

    def load(self) -> dict[str, Subscription]:
        """
        Load every stored subscription.

        Returns:
            Mapping of endpoint to subscription. Empty when the file does not
            exist yet or is blank.

        Raises:
            CorruptStateError: file content is not a valid subscription map
            PersistenceError: file could not be read
        """
        if not self.path.exists():
            logger.info(f"Subscriptions file not found, starting empty: {self.path}")
            return {}

        try:
            raw_bytes = self.path.read_bytes()
        except OSError as e:
            raise PersistenceError(f"Failed to read subscriptions file {self.path}: {e}") from e

        try:
            raw = raw_bytes.decode("utf-8")
        except UnicodeDecodeError as e:
            raise CorruptStateError(f"Subscriptions file {self.path} is not valid UTF-8: {e}") from e

        if not raw.strip():
            return {}

        try:
            data = json.loads(raw)
        except json.JSONDecodeError as e:
            raise CorruptStateError(f"Failed to parse subscriptions file {self.path}: {e}") from e

        if not isinstance(data, dict):
            raise CorruptStateError(f"Subscriptions file {self.path} must contain a JSON object")

        subscriptions: dict[str, Subscription] = {}
        for key, entry in data.items():
            try:
                subscription = Subscription.model_validate(entry)
            except ValidationError as e:
                raise CorruptStateError(
                    f"Invalid subscription entry for {key} in {self.path}: {e}"
                ) from e
            if subscription.endpoint != key:
                # the endpoint is the identity, the map key is only an index
                logger.warning(f"Subscription stored under {key} has endpoint {subscription.endpoint}, re-keying")
            subscriptions[subscription.endpoint] = subscription
        return subscriptions

    def save(self, subscriptions: Mapping[str, Subscription]) -> None:
        """
        Atomically replace the stored state with *subscriptions*.

        Data goes to a sibling temp file which is fsynced and renamed over the
        target, so readers only ever see the old or the new snapshot.

        Raises:
            PersistenceError: directory or file could not be written
        """
        payload = {
            endpoint: subscription.to_subscription_info()
            for endpoint, subscription in subscriptions.items()
        }
        tmp_path = self.path.with_suffix(self.path.suffix + ".tmp")
        try:
            self.path.parent.mkdir(parents=True, exist_ok=True)
            with open(tmp_path, "w", encoding="utf-8") as f:
                json.dump(payload, f, indent=2, sort_keys=True, ensure_ascii=False)
                f.flush()
                os.fsync(f.fileno())
            os.replace(tmp_path, self.path)
        except OSError as e:
            with contextlib.suppress(OSError):
                tmp_path.unlink(missing_ok=True)
            raise PersistenceError(f"Failed to write subscriptions file {self.path}: {e}") from e
