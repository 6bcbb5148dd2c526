"""
SCALE compact integer encoding.

WHAT IS A COMPACT INTEGER?
--------------------------
SCALE prefixes every variable-length sequence with its element count.
Most counts are tiny, so instead of a fixed u32 the count is written in
"compact" form: 1, 2 or 4 bytes for small values, and a length-prefixed
big integer for anything larger.


HOW THE MODE BITS WORK
----------------------
The two least significant bits of the first byte select the mode::

    0b00  single byte   value in the upper 6 bits            0 .. 2^6 - 1
    0b01  two bytes     value in the upper 14 bits (LE)      2^6 .. 2^14 - 1
    0b10  four bytes    value in the upper 30 bits (LE)      2^14 .. 2^30 - 1
    0b11  big integer   upper 6 bits + 4 = number of         2^30 .. 2^536 - 1
                        little-endian bytes that follow

Example: 300 does not fit in 6 bits, so it uses two-byte mode::

    300 << 2 | 0b01 = 1201 = 0x04B1  ->  bytes [0xB1, 0x04]


CANONICAL FORM
--------------
A value must use the smallest mode that can hold it. Decoding rejects
encodings that waste space, exactly like the node's own codec, so a
payload decodes the same way here as it does on chain.
"""

from __future__ import annotations

from typing import IO, Any, Final

from pydantic import GetCoreSchemaHandler
from pydantic_core import core_schema
from typing_extensions import Self

from .exceptions import DecodeError, ScaleTypeError, ScaleValueError
from .scale_base import ScaleType, read_exact

SINGLE_BYTE_LIMIT: Final = 1 << 6
"""First value that no longer fits the single-byte mode."""

TWO_BYTE_LIMIT: Final = 1 << 14
"""First value that no longer fits the two-byte mode."""

FOUR_BYTE_LIMIT: Final = 1 << 30
"""First value that needs the big-integer mode."""

MAX_BIG_INTEGER_BYTES: Final = 67
"""Largest payload the big-integer mode can announce: (0b111111 + 4) bytes."""


def encode_compact(value: int) -> bytes:
    """
    Encode a non-negative integer in SCALE compact form.

    Raises:
        ScaleValueError: If the value is negative or needs more than 67 bytes.
    """
    if value < 0:
        raise ScaleValueError(f"Compact integers are unsigned, got {value}")

    if value < SINGLE_BYTE_LIMIT:
        return bytes([value << 2])
    if value < TWO_BYTE_LIMIT:
        return ((value << 2) | 0b01).to_bytes(2, "little")
    if value < FOUR_BYTE_LIMIT:
        return ((value << 2) | 0b10).to_bytes(4, "little")

    # Big-integer mode: minimal little-endian bytes, at least 4.
    length = max(4, (value.bit_length() + 7) // 8)
    if length > MAX_BIG_INTEGER_BYTES:
        raise ScaleValueError(f"{value} is too large for a compact integer")
    return bytes([((length - 4) << 2) | 0b11]) + value.to_bytes(length, "little")


def decode_compact(stream: IO[bytes], type_name: str = "Compact") -> int:
    """
    Read one compact integer from `stream`.

    Raises:
        DecodeError: If the stream is truncated or the encoding is not canonical.
    """
    offset = stream.tell()
    first = read_exact(stream, 1, type_name)[0]
    mode = first & 0b11

    if mode == 0b00:
        return first >> 2

    if mode == 0b01:
        value = int.from_bytes(bytes([first]) + read_exact(stream, 1, type_name), "little") >> 2
        if value < SINGLE_BYTE_LIMIT:
            raise DecodeError(type_name, "non-canonical two-byte encoding", offset=offset)
        return value

    if mode == 0b10:
        value = int.from_bytes(bytes([first]) + read_exact(stream, 3, type_name), "little") >> 2
        if value < TWO_BYTE_LIMIT:
            raise DecodeError(type_name, "non-canonical four-byte encoding", offset=offset)
        return value

    length = (first >> 2) + 4
    data = read_exact(stream, length, type_name)
    if data[-1] == 0:
        raise DecodeError(type_name, "big integer has a zero top byte", offset=offset)
    value = int.from_bytes(data, "little")
    if value < FOUR_BYTE_LIMIT:
        raise DecodeError(type_name, "non-canonical big-integer encoding", offset=offset)
    return value


class Compact(int, ScaleType):
    """An unsigned integer that is written in SCALE compact form."""

    def __new__(cls, value: int) -> Self:
        """Create a compact integer, rejecting negative and non-integer values."""
        if not isinstance(value, int) or isinstance(value, bool):
            raise ScaleTypeError(f"Expected int, got {type(value).__name__}")
        if value < 0:
            raise ScaleValueError(f"Compact integers are unsigned, got {value}")
        return super().__new__(cls, value)

    @classmethod
    def __get_pydantic_core_schema__(
        cls, source_type: Any, handler: GetCoreSchemaHandler
    ) -> core_schema.CoreSchema:
        """Validate through the constructor, serialize as a plain int."""
        return core_schema.no_info_plain_validator_function(
            cls,
            serialization=core_schema.plain_serializer_function_ser_schema(int),
        )

    @classmethod
    def is_fixed_size(cls) -> bool:
        """The encoded width depends on the value."""
        return False

    @classmethod
    def get_byte_length(cls) -> int:
        """Compact integers have no fixed byte length."""
        raise ScaleTypeError(f"{cls.__name__} is variable-size and has no fixed byte length")

    def serialize(self, stream: IO[bytes]) -> int:
        """Write the compact encoding of the value."""
        data = encode_compact(int(self))
        stream.write(data)
        return len(data)

    @classmethod
    def deserialize(cls, stream: IO[bytes]) -> Self:
        """Read a compact integer from `stream`."""
        return cls(decode_compact(stream, cls.__name__))

    def __repr__(self) -> str:
        return f"Compact({int(self)})"

    __hash__ = int.__hash__
