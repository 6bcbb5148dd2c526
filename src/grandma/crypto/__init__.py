"""Hashing and SS58 address encoding."""

from .hashing import blake2b_512, twox_64, twox_128
from .ss58 import (
    AddressFormatError,
    Base58,
    decode_address,
    decode_address_with_prefix,
    encode_address,
)

__all__ = [
    "AddressFormatError",
    "Base58",
    "blake2b_512",
    "decode_address",
    "decode_address_with_prefix",
    "encode_address",
    "twox_64",
    "twox_128",
]
