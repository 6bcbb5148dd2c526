"""Test helpers for grandma unit tests."""

from __future__ import annotations

from .builders import (
    ALICE,
    ALICE_SS58,
    BOB,
    BOB_SS58,
    dumps,
    envelope,
    justification_notification,
    make_account_id,
    make_justification,
    make_queued_keys,
    notification,
    round_state_json,
    storage_notification,
    to_hex,
)
from .mocks import MockRpcClient

__all__ = [
    # Constants
    "ALICE",
    "ALICE_SS58",
    "BOB",
    "BOB_SS58",
    # Builders
    "dumps",
    "envelope",
    "justification_notification",
    "make_account_id",
    "make_justification",
    "make_queued_keys",
    "notification",
    "round_state_json",
    "storage_notification",
    "to_hex",
    # Mocks
    "MockRpcClient",
]
