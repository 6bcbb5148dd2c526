"""Sequence and tuple types."""

from __future__ import annotations

from typing import (
    IO,
    Any,
    ClassVar,
    Generic,
    Iterator,
    Sequence,
    Type,
    TypeVar,
    cast,
    overload,
)

from pydantic import Field, field_validator
from typing_extensions import Self

from .compact import decode_compact, encode_compact
from .exceptions import DecodeError, ScaleTypeError, ScaleValueError
from .scale_base import ScaleModel, ScaleType, remaining

T = TypeVar("T", bound=ScaleType)
"""
Generic type parameter for collection elements.

Example:
    class AccountIds(ScaleVec[AccountId]):
        ELEMENT_TYPE = AccountId

    ids = AccountIds(data=[...])
    x = ids[0]  # Type checker infers `x: AccountId`
"""


def _coerce_element(element_type: Type[ScaleType], element: Any) -> ScaleType:
    """Return `element` as an instance of `element_type`, converting if needed."""
    if isinstance(element, element_type):
        return element
    try:
        return cast(Any, element_type)(element)
    except Exception as e:
        raise ScaleTypeError(
            f"Expected {element_type.__name__}, got {type(element).__name__}"
        ) from e


class ScaleVec(ScaleModel, Generic[T]):
    """
    Variable-length SCALE sequence (`Vec<T>`).

    Subclasses must define:
        ELEMENT_TYPE: The SCALE type of each element

    Example:
        class Precommits(ScaleVec[SignedPrecommit]):
            ELEMENT_TYPE = SignedPrecommit

    SCALE Encoding:
        [compact element count][element 0][element 1]...
    """

    ELEMENT_TYPE: ClassVar[Type[ScaleType]]
    """The SCALE type of elements in this sequence."""

    data: Sequence[T] = Field(default_factory=tuple)
    """
    The immutable sequence of elements.

    Accepts lists or tuples on input; stored as a tuple after validation.
    """

    @field_validator("data", mode="before")
    @classmethod
    def _validate_vec_data(cls, v: Any) -> tuple[ScaleType, ...]:
        """Validate and convert input to a tuple of ELEMENT_TYPE elements."""
        if not hasattr(cls, "ELEMENT_TYPE"):
            raise ScaleTypeError(f"{cls.__name__} must define ELEMENT_TYPE")

        if isinstance(v, (list, tuple)):
            elements = v
        elif hasattr(v, "__iter__") and not isinstance(v, (str, bytes)):
            elements = list(v)
        else:
            raise ScaleTypeError(f"Expected iterable, got {type(v).__name__}")

        return tuple(_coerce_element(cls.ELEMENT_TYPE, element) for element in elements)

    @classmethod
    def is_fixed_size(cls) -> bool:
        """A vector's size depends on its element count."""
        return False

    @classmethod
    def get_byte_length(cls) -> int:
        """Vectors are variable-size, so this raises a ScaleTypeError."""
        raise ScaleTypeError(f"{cls.__name__}: variable-size vector has no fixed byte length")

    def serialize(self, stream: IO[bytes]) -> int:
        """Write the compact element count followed by every element."""
        prefix = encode_compact(len(self.data))
        stream.write(prefix)
        return len(prefix) + sum(element.serialize(stream) for element in self.data)

    @classmethod
    def deserialize(cls, stream: IO[bytes]) -> Self:
        """
        Read the compact element count, then that many elements.

        The declared count is checked against the bytes left in the stream
        before any element is read. Fixed-size elements need exactly
        `count * size` bytes; variable-size elements always contain a
        compact prefix, so they need at least one byte each.
        """
        offset = stream.tell()
        count = decode_compact(stream, cls.__name__)
        left = remaining(stream)

        if cls.ELEMENT_TYPE.is_fixed_size():
            needed = count * cls.ELEMENT_TYPE.get_byte_length()
        else:
            needed = count
        if needed > left:
            raise DecodeError(
                cls.__name__,
                f"declared {count} elements need {needed} bytes, only {left} left",
                offset=offset,
            )

        elements = [cls.ELEMENT_TYPE.deserialize(stream) for _ in range(count)]
        return cls(data=elements)

    def __iter__(self) -> Iterator[T]:  # type: ignore[override]
        """Iterate over elements."""
        return iter(self.data)

    @overload
    def __getitem__(self, index: int) -> T: ...
    @overload
    def __getitem__(self, index: slice) -> Sequence[T]: ...

    def __getitem__(self, index: int | slice) -> T | Sequence[T]:
        """Access element(s) by index or slice."""
        return self.data[index]


class ScaleTuple(ScaleModel):
    """
    Heterogeneous, positional SCALE tuple (`(A, B, ...)`).

    Subclasses must define:
        ELEMENT_TYPES: The SCALE type at each position

    SCALE Encoding:
        [element 0][element 1]... with no prefix and no separators.
    """

    ELEMENT_TYPES: ClassVar[tuple[Type[ScaleType], ...]]
    """The SCALE type of each position, in order."""

    data: tuple[Any, ...] = Field(default_factory=tuple)
    """The elements, one per position in `ELEMENT_TYPES`."""

    @field_validator("data", mode="before")
    @classmethod
    def _validate_tuple_data(cls, v: Any) -> tuple[ScaleType, ...]:
        """Validate arity and convert each element to its positional type."""
        if not hasattr(cls, "ELEMENT_TYPES"):
            raise ScaleTypeError(f"{cls.__name__} must define ELEMENT_TYPES")

        elements = tuple(v)
        if len(elements) != len(cls.ELEMENT_TYPES):
            raise ScaleValueError(
                f"{cls.__name__} requires exactly {len(cls.ELEMENT_TYPES)} elements, "
                f"got {len(elements)}"
            )
        return tuple(
            _coerce_element(element_type, element)
            for element_type, element in zip(cls.ELEMENT_TYPES, elements, strict=True)
        )

    @classmethod
    def is_fixed_size(cls) -> bool:
        """A tuple is fixed-size if and only if every position is."""
        return all(element_type.is_fixed_size() for element_type in cls.ELEMENT_TYPES)

    @classmethod
    def get_byte_length(cls) -> int:
        """Get the byte length if every position is fixed-size."""
        if not cls.is_fixed_size():
            raise ScaleTypeError(f"{cls.__name__}: variable-size tuple has no fixed byte length")
        return sum(element_type.get_byte_length() for element_type in cls.ELEMENT_TYPES)

    def serialize(self, stream: IO[bytes]) -> int:
        """Write every element in positional order."""
        return sum(element.serialize(stream) for element in self.data)

    @classmethod
    def deserialize(cls, stream: IO[bytes]) -> Self:
        """Read every element in positional order."""
        return cls(
            data=tuple(element_type.deserialize(stream) for element_type in cls.ELEMENT_TYPES)
        )
