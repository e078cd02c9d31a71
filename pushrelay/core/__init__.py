from .config import Settings, get_settings
from .exceptions import (
    ClientInputError,
    ConfigurationError,
    CorruptStateError,
    DeliveryError,
    PersistenceError,
    PushRelayError,
)

__all__ = [
    "Settings",
    "get_settings",
    "ClientInputError",
    "ConfigurationError",
    "CorruptStateError",
    "DeliveryError",
    "PersistenceError",
    "PushRelayError",
]
