"""
Storage key derivation for plain (non-map) storage items.

A plain storage value lives under::

    twox_128(module name) ++ twox_128(item name)

For example `Session::QueuedKeys`, the next session's validator set and
their session keys, is read and subscribed to under
`storage_key(b"Session", b"QueuedKeys")`.
"""

from __future__ import annotations

from typing import Final

from grandma.crypto.hashing import twox_128


def storage_key(module: bytes, item: bytes) -> bytes:
    """Return the 32-byte storage key of `module::item`."""
    return twox_128(module) + twox_128(item)


def storage_key_hex(module: bytes, item: bytes) -> str:
    """Return the storage key of `module::item` as a 0x-prefixed hex string."""
    return "0x" + storage_key(module, item).hex()


QUEUED_KEYS_KEY: Final = storage_key_hex(b"Session", b"QueuedKeys")
"""Storage key of the queued validator set and their session keys."""
