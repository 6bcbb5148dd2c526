"""JSON-RPC transport to the node."""

from .client import RpcClient, RpcError, TransportError, normalize_url
from .envelope import (
    GET_STORAGE,
    JUSTIFICATIONS,
    ROUND_STATE,
    STATE_STORAGE,
    SUBSCRIBE_JUSTIFICATIONS,
    SUBSCRIBE_STORAGE,
    SYSTEM_PROPERTIES,
    RpcEnvelope,
    StorageChangeSet,
    hex_to_bytes,
    parse_envelope,
)

__all__ = [
    "GET_STORAGE",
    "JUSTIFICATIONS",
    "ROUND_STATE",
    "STATE_STORAGE",
    "SUBSCRIBE_JUSTIFICATIONS",
    "SUBSCRIBE_STORAGE",
    "SYSTEM_PROPERTIES",
    "RpcClient",
    "RpcEnvelope",
    "RpcError",
    "StorageChangeSet",
    "TransportError",
    "hex_to_bytes",
    "normalize_url",
    "parse_envelope",
]
