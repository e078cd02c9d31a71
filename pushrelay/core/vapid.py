"""Generate VAPID keys for Web Push notifications."""

from __future__ import annotations

from dataclasses import dataclass

from cryptography.hazmat.primitives import serialization
from py_vapid import Vapid
from py_vapid.utils import b64urlencode


@dataclass(frozen=True)
class VapidKeyPair:
    public_key: str
    private_key: str


def generate_vapid_keys() -> VapidKeyPair:
    """
    Create a fresh P-256 key pair.

    Both keys are URL-safe base64 without padding: the public key is the
    uncompressed point (65 bytes), the private key the raw 32-byte scalar.
    Browsers use the public key as applicationServerKey; pywebpush accepts
    the private key as-is.
    """
    vapid = Vapid()
    vapid.generate_keys()

    public_key_bytes = vapid.public_key.public_bytes(
        encoding=serialization.Encoding.X962,
        format=serialization.PublicFormat.UncompressedPoint,
    )
    private_value = vapid.private_key.private_numbers().private_value
    return VapidKeyPair(
        public_key=b64urlencode(public_key_bytes),
        private_key=b64urlencode(private_value.to_bytes(32, "big")),
    )


def format_keys(keys: VapidKeyPair) -> str:
    lines = [
        "=" * 70,
        "VAPID KEYS GENERATED",
        "=" * 70,
        "",
        "Add to the environment:",
        "",
        f"export VAPID_PUBLIC_KEY={keys.public_key}",
        f"export VAPID_PRIVATE_KEY={keys.private_key}",
        "",
        "Or to .env:",
        "",
        f"VAPID_PUBLIC_KEY={keys.public_key}",
        f"VAPID_PRIVATE_KEY={keys.private_key}",
        "=" * 70,
    ]
    return "\n".join(lines)


def main() -> None:
    print(format_keys(generate_vapid_keys()))


if __name__ == "__main__":
    main()
