"""SCALE codec types used to decode the node's binary payloads."""

from .base import CamelModel, StrictBaseModel
from .byte_arrays import BaseBytes, Bytes32, Bytes64
from .collections import ScaleTuple, ScaleVec
from .compact import Compact, decode_compact, encode_compact
from .container import Struct
from .exceptions import (
    DecodeError,
    ScaleError,
    ScaleTypeError,
    ScaleValueError,
    UnexpectedEndError,
)
from .scale_base import ScaleType
from .uint import BaseUint, Uint8, Uint16, Uint32, Uint64, Uint128

__all__ = [
    # Core types
    "BaseUint",
    "Uint8",
    "Uint16",
    "Uint32",
    "Uint64",
    "Uint128",
    "Compact",
    "decode_compact",
    "encode_compact",
    "BaseBytes",
    "Bytes32",
    "Bytes64",
    "CamelModel",
    "StrictBaseModel",
    "ScaleType",
    "ScaleVec",
    "ScaleTuple",
    "Struct",
    # Exceptions
    "ScaleError",
    "ScaleTypeError",
    "ScaleValueError",
    "DecodeError",
    "UnexpectedEndError",
]
