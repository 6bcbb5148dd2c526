"""Storage key derivation."""

from .keys import QUEUED_KEYS_KEY, storage_key, storage_key_hex

__all__ = [
    "QUEUED_KEYS_KEY",
    "storage_key",
    "storage_key_hex",
]
