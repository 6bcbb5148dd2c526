"""Session keys and validator set tracking."""

from .keys import (
    DarwiniaSessionKeys,
    PolkadotSessionKeys,
    QueuedKey,
    QueuedKeys,
    SessionKeyLayout,
    SessionKeys,
    SubstrateSessionKeys,
    decode_queued_keys,
)
from .tracker import ValidatorSetTracker

__all__ = [
    "DarwiniaSessionKeys",
    "PolkadotSessionKeys",
    "QueuedKey",
    "QueuedKeys",
    "SessionKeyLayout",
    "SessionKeys",
    "SubstrateSessionKeys",
    "ValidatorSetTracker",
    "decode_queued_keys",
]
