"""Base classes and interfaces for all SCALE types."""

from __future__ import annotations

import io
import os
from abc import ABC, abstractmethod
from typing import IO, Any

from typing_extensions import Iterator, Self

from .base import StrictBaseModel
from .exceptions import DecodeError, UnexpectedEndError


def remaining(stream: IO[bytes]) -> int:
    """Return how many bytes are left between the stream cursor and its end."""
    position = stream.tell()
    end = stream.seek(0, os.SEEK_END)
    stream.seek(position)
    return end - position


def read_exact(stream: IO[bytes], size: int, type_name: str) -> bytes:
    """
    Read exactly `size` bytes from `stream`.

    Raises:
        UnexpectedEndError: If fewer than `size` bytes are available.
    """
    offset = stream.tell()
    data = stream.read(size)
    if len(data) != size:
        raise UnexpectedEndError(
            type_name, expected_bytes=size, actual_bytes=len(data), offset=offset
        )
    return data


class ScaleType(ABC):
    """
    Abstract base class for all SCALE types.

    SCALE values are self-delimiting: every type knows how many bytes it
    needs, so decoding only takes a stream and leaves the cursor right
    after the value.
    """

    @classmethod
    @abstractmethod
    def is_fixed_size(cls) -> bool:
        """Check if every value of the type encodes to the same number of bytes."""
        ...

    @classmethod
    @abstractmethod
    def get_byte_length(cls) -> int:
        """
        Get the byte length of the type if it is fixed-size.

        Raises:
            ScaleTypeError: If the type is not fixed-size.
        """
        ...

    @abstractmethod
    def serialize(self, stream: IO[bytes]) -> int:
        """
        Serializes the object and writes it to a binary stream.

        Returns:
            int: The number of bytes written.
        """
        ...

    @classmethod
    @abstractmethod
    def deserialize(cls, stream: IO[bytes]) -> Self:
        """
        Deserializes one value from the current stream position.

        Raises:
            DecodeError: If the bytes do not form a valid value.
        """
        ...

    def encode_bytes(self) -> bytes:
        """Serializes the object to a byte string."""
        with io.BytesIO() as stream:
            self.serialize(stream)
            return stream.getvalue()

    @classmethod
    def decode_prefix(cls, data: bytes) -> tuple[Self, int]:
        """
        Decode one value from the start of `data`.

        Returns:
            The value and the number of bytes it consumed.
        """
        with io.BytesIO(data) as stream:
            value = cls.deserialize(stream)
            return value, stream.tell()

    @classmethod
    def decode_bytes(cls, data: bytes) -> Self:
        """
        Decode one value from the start of `data`, ignoring any trailing bytes.

        Nodes routinely append fields a reader does not care about (for
        example the vote ancestries after a justification's commit).
        """
        value, _ = cls.decode_prefix(data)
        return value

    @classmethod
    def decode_all_bytes(cls, data: bytes) -> Self:
        """
        Decode `data` as exactly one value.

        Raises:
            DecodeError: If bytes are left over after the value.
        """
        value, consumed = cls.decode_prefix(data)
        if consumed != len(data):
            raise DecodeError(
                cls.__name__,
                f"{len(data) - consumed} trailing bytes after value",
                offset=consumed,
            )
        return value


class ScaleModel(StrictBaseModel, ScaleType):
    """
    Base class for SCALE types that use Pydantic validation.

    Subclasses store their elements in a `data` field and get natural
    iteration, indexing and `len()`.
    """

    data: Any

    def __len__(self) -> int:
        """Return the number of elements."""
        return len(self.data)

    def __iter__(self) -> Iterator[Any]:  # type: ignore[override]
        """Iterate over elements, so tuples unpack like `a, b = pair`."""
        return iter(self.data)

    def __getitem__(self, index: Any) -> Any:
        """Access element(s) by index or slice."""
        return self.data[index]

    def __repr__(self) -> str:
        """String representation showing the class name and data."""
        return f"{self.__class__.__name__}(data={list(self.data)!r})"
