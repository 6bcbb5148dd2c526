"""
SCALE Struct type: ordered heterogeneous collections with named fields.

SCALE has no field tags and no offsets. A struct is simply the
concatenation of its fields' encodings in declaration order, so a reader
must know the exact field list (and order) the writer used.
"""

from __future__ import annotations

from typing import IO, Type, cast

from typing_extensions import Self

from .base import StrictBaseModel
from .exceptions import ScaleTypeError
from .scale_base import ScaleType


class Struct(StrictBaseModel, ScaleType):
    """
    SCALE Struct: a strict, ordered collection of heterogeneous named fields.

    Example:
        >>> class Precommit(Struct):
        ...     target_hash: Hash
        ...     target_number: BlockNumber

    Serialization format:
        [field_1][field_2]...[field_n]
    """

    @classmethod
    def _field_types(cls) -> list[tuple[str, Type[ScaleType]]]:
        """Return (name, type) pairs in declaration order."""
        return [
            (name, cast(Type[ScaleType], field.annotation))
            for name, field in cls.model_fields.items()
        ]

    @classmethod
    def is_fixed_size(cls) -> bool:
        """A struct is fixed-size only when all its fields are."""
        return all(field_type.is_fixed_size() for _, field_type in cls._field_types())

    @classmethod
    def get_byte_length(cls) -> int:
        """
        Calculate the exact byte length for fixed-size structs.

        Raises:
            ScaleTypeError: If called on a variable-size struct.
        """
        if not cls.is_fixed_size():
            raise ScaleTypeError(f"{cls.__name__} is variable-size")
        return sum(field_type.get_byte_length() for _, field_type in cls._field_types())

    def serialize(self, stream: IO[bytes]) -> int:
        """Write every field in declaration order."""
        return sum(getattr(self, name).serialize(stream) for name, _ in self._field_types())

    @classmethod
    def deserialize(cls, stream: IO[bytes]) -> Self:
        """
        Read every field in declaration order.

        Any field failing to decode aborts the whole struct; no partially
        built instance escapes.
        """
        fields = {name: field_type.deserialize(stream) for name, field_type in cls._field_types()}
        return cls(**fields)
