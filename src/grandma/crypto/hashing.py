"""
Hash functions used for storage keys and address checksums.

Two unrelated primitives live here:

- `twox_128`: two lanes of xxHash64 (seeds 0 and 1). Not cryptographic.
  Substrate uses it to turn pallet and item names into short, stable
  storage key prefixes.
- `blake2b_512`: BLAKE2b with a 64-byte digest. Only the first two bytes
  are ever used, as the SS58 address checksum.
"""

from __future__ import annotations

import hashlib

import xxhash


def twox_64(data: bytes, seed: int = 0) -> bytes:
    """Return the xxHash64 digest of `data` with `seed`, as 8 little-endian bytes."""
    return xxhash.xxh64_intdigest(data, seed=seed).to_bytes(8, "little")


def twox_128(data: bytes) -> bytes:
    """
    Return the 16-byte twin-lane xxHash64 of `data`.

    The first 8 bytes are the seed-0 digest and the last 8 the seed-1
    digest, both little-endian.
    """
    return twox_64(data, 0) + twox_64(data, 1)


def blake2b_512(data: bytes) -> bytes:
    """Return the 64-byte BLAKE2b digest of `data`."""
    return hashlib.blake2b(data, digest_size=64).digest()
