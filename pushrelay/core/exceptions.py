"""Exception hierarchy for the push relay."""

from __future__ import annotations


class PushRelayError(Exception):
    """Base class for all relay errors."""


class ClientInputError(PushRelayError):
    """Malformed or missing request data supplied by a client."""


class PersistenceError(PushRelayError):
    """The subscription state file could not be read or written."""


class CorruptStateError(PersistenceError):
    """The subscription state file exists but its content is not valid."""


class DeliveryError(PushRelayError):
    """A single push delivery failed in an unexpected way."""

    def __init__(self, endpoint: str, message: str):
        super().__init__(f"{message} ({endpoint})")
        self.endpoint = endpoint


class ConfigurationError(PushRelayError):
    """Required startup configuration is missing."""
