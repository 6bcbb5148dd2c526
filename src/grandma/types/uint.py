"""Fixed-width unsigned integer types."""

from __future__ import annotations

from typing import IO, Any, ClassVar, Literal, SupportsIndex, SupportsInt

from pydantic import GetCoreSchemaHandler
from pydantic_core import core_schema
from typing_extensions import Self

from .scale_base import ScaleType, read_exact


class BaseUint(int, ScaleType):
    """
    A base class for unsigned integer types that inherits from `int`.

    SCALE encodes fixed-width integers little-endian, in exactly `BITS // 8` bytes.
    """

    BITS: ClassVar[int]
    """The number of bits in the integer (overridden by subclasses)."""

    def __new__(cls, value: SupportsInt) -> Self:
        """
        Create and validate a new Uint instance.

        Raises:
            TypeError: If `value` is not an integer.
            OverflowError: If `value` is outside the allowed range [0, 2**BITS - 1].
        """
        if not isinstance(value, int) or isinstance(value, bool):
            raise TypeError(f"Expected int, got {type(value).__name__}")
        int_value = int(value)
        if not (0 <= int_value < (2**cls.BITS)):
            raise OverflowError(f"{int_value} is out of range for {cls.__name__}")
        return super().__new__(cls, int_value)

    @classmethod
    def __get_pydantic_core_schema__(
        cls, source_type: Any, handler: GetCoreSchemaHandler
    ) -> core_schema.CoreSchema:
        """Hook into Pydantic's validation system."""

        def validate(value: Any) -> BaseUint:
            """Pydantic validation function that calls the class constructor."""
            try:
                return cls(value)
            except (OverflowError, TypeError) as e:
                raise ValueError(str(e)) from e

        return core_schema.json_or_python_schema(
            json_schema=core_schema.int_schema(ge=0, lt=2**cls.BITS),
            python_schema=core_schema.no_info_plain_validator_function(validate),
            serialization=core_schema.plain_serializer_function_ser_schema(
                lambda instance: int(instance)
            ),
        )

    @classmethod
    def is_fixed_size(cls) -> bool:
        """Fixed-width integers always take `BITS // 8` bytes."""
        return True

    @classmethod
    def get_byte_length(cls) -> int:
        """Get the byte length of this integer type."""
        return cls.BITS // 8

    def serialize(self, stream: IO[bytes]) -> int:
        """Write the little-endian bytes of the integer to `stream`."""
        data = self.to_bytes()
        stream.write(data)
        return len(data)

    @classmethod
    def deserialize(cls, stream: IO[bytes]) -> Self:
        """Read `BITS // 8` little-endian bytes from `stream`."""
        data = read_exact(stream, cls.get_byte_length(), cls.__name__)
        return cls(int.from_bytes(data, "little"))

    def to_bytes(
        self,
        length: SupportsIndex | None = None,
        byteorder: Literal["little", "big"] = "little",
        *,
        signed: bool = False,
    ) -> bytes:
        """
        Return an array of bytes representing the integer.

        Defaults to little-endian and a fixed length based on `BITS`.
        """
        actual_length = self.BITS // 8 if length is None else int(length)
        return super().to_bytes(length=actual_length, byteorder=byteorder, signed=signed)

    def __repr__(self) -> str:
        """Return the official string representation of the object."""
        return f"{type(self).__name__}({int(self)})"

    def __str__(self) -> str:
        """Return the informal, user-friendly string representation."""
        return str(int(self))

    __hash__ = int.__hash__


class Uint8(BaseUint):
    """A type representing an 8-bit unsigned integer (u8)."""

    BITS = 8


class Uint16(BaseUint):
    """A type representing a 16-bit unsigned integer (u16)."""

    BITS = 16


class Uint32(BaseUint):
    """A type representing a 32-bit unsigned integer (u32)."""

    BITS = 32


class Uint64(BaseUint):
    """A type representing a 64-bit unsigned integer (u64)."""

    BITS = 64


class Uint128(BaseUint):
    """A type representing a 128-bit unsigned integer (u128)."""

    BITS = 128
