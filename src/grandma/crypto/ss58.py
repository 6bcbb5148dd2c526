"""
SS58 address encoding.

An SS58 address is the base58 text form of a public key together with the
network it belongs to::

    base58( [prefix: 1 byte][public key: 32 bytes][checksum: 2 bytes] )

    checksum = blake2b_512(b"SS58PRE" ++ prefix ++ public key)[:2]

The same key renders as a different string on every network, so addresses
are for display only. Lookups always use the raw 32-byte key.

Only the single-byte prefix form (networks 0..255) is handled here.
"""

from __future__ import annotations

from typing import Final

from .hashing import blake2b_512

SS58_CONTEXT: Final = b"SS58PRE"
"""Domain separation prefix hashed in front of the checksummed payload."""

PUBLIC_KEY_LENGTH: Final = 32
"""Length of the raw public key carried by an address."""

CHECKSUM_LENGTH: Final = 2
"""Number of checksum bytes appended to the payload."""

ADDRESS_LENGTH: Final = 1 + PUBLIC_KEY_LENGTH + CHECKSUM_LENGTH
"""Length of a decoded address: prefix, key and checksum."""


class AddressFormatError(ValueError):
    """Raised when an address string is not a valid SS58 address."""


class Base58:
    """
    Base58 encoding/decoding (Bitcoin-style alphabet).

    Base58 excludes visually ambiguous characters (0, O, I, l) making it
    suitable for human-readable identifiers like addresses.
    """

    ALPHABET: Final[str] = "123456789ABCDEFGHJKLMNPQRSTUVWXYZabcdefghijkmnopqrstuvwxyz"
    """Base58 alphabet (Bitcoin style, excludes 0, O, I, l)."""

    @classmethod
    def encode(cls, data: bytes) -> str:
        """
        Encode bytes as Base58 string.

        Leading zero bytes become leading '1' characters.
        """
        leading_zeros = len(data) - len(data.lstrip(b"\x00"))

        num = int.from_bytes(data, "big")
        result: list[str] = []
        while num > 0:
            num, remainder = divmod(num, 58)
            result.append(cls.ALPHABET[remainder])

        result.extend([cls.ALPHABET[0]] * leading_zeros)
        return "".join(reversed(result))

    @classmethod
    def decode(cls, s: str) -> bytes:
        """
        Decode Base58 string to bytes.

        Leading '1' characters become leading zero bytes.

        Raises:
            ValueError: If string contains invalid characters.
        """
        leading_ones = len(s) - len(s.lstrip(cls.ALPHABET[0]))

        num = 0
        for char in s:
            index = cls.ALPHABET.find(char)
            if index < 0:
                raise ValueError(f"Invalid Base58 character: {char!r}")
            num = num * 58 + index

        result = b"" if num == 0 else num.to_bytes((num.bit_length() + 7) // 8, "big")
        return b"\x00" * leading_ones + result


def _checksum(payload: bytes) -> bytes:
    """Return the two checksum bytes for a prefix-plus-key payload."""
    return blake2b_512(SS58_CONTEXT + payload)[:CHECKSUM_LENGTH]


def encode_address(public_key: bytes, prefix: int) -> str:
    """
    Encode a 32-byte public key as an SS58 address for network `prefix`.

    Raises:
        ValueError: If the key is not 32 bytes or the prefix is not in 0..255.
    """
    if len(public_key) != PUBLIC_KEY_LENGTH:
        raise ValueError(f"Public key must be {PUBLIC_KEY_LENGTH} bytes, got {len(public_key)}")
    if not 0 <= prefix <= 0xFF:
        raise ValueError(f"Network prefix must be in 0..255, got {prefix}")

    payload = bytes([prefix]) + bytes(public_key)
    return Base58.encode(payload + _checksum(payload))


def decode_address_with_prefix(address: str) -> tuple[bytes, int]:
    """
    Decode an SS58 address into its public key and network prefix.

    Raises:
        AddressFormatError: On invalid characters, wrong length or checksum mismatch.
    """
    try:
        raw = Base58.decode(address)
    except ValueError as e:
        raise AddressFormatError(f"{address!r} is not base58: {e}") from e

    if len(raw) != ADDRESS_LENGTH:
        raise AddressFormatError(
            f"{address!r} decodes to {len(raw)} bytes, expected {ADDRESS_LENGTH}"
        )

    payload, checksum = raw[:-CHECKSUM_LENGTH], raw[-CHECKSUM_LENGTH:]
    if _checksum(payload) != checksum:
        raise AddressFormatError(f"{address!r} has an invalid checksum")

    return payload[1:], payload[0]


def decode_address(address: str) -> bytes:
    """
    Decode an SS58 address into its 32-byte public key.

    Raises:
        AddressFormatError: On invalid characters, wrong length or checksum mismatch.
    """
    public_key, _ = decode_address_with_prefix(address)
    return public_key
