"""
JSON-RPC message shapes exchanged with the node.

Subscriptions deliver notifications shaped like::

    {"jsonrpc": "2.0", "method": "grandpa_justifications",
     "params": {"subscription": "...", "result": "0x..."}}

Only the `method` and `params.result` parts are used. Anything that is
not a notification (subscription confirmations, replies) does not parse
as an envelope and is skipped by the caller.
"""

from __future__ import annotations

from typing import Any, Final

from pydantic import ValidationError

from grandma.types import CamelModel, DecodeError

JUSTIFICATIONS: Final = "grandpa_justifications"
"""Notification method carrying a SCALE-encoded justification as hex."""

STATE_STORAGE: Final = "state_storage"
"""Notification method carrying a storage change set."""

SUBSCRIBE_JUSTIFICATIONS: Final = "grandpa_subscribeJustifications"
"""Subscription call for finality justifications."""

SUBSCRIBE_STORAGE: Final = "state_subscribeStorage"
"""Subscription call for storage changes under a list of keys."""

GET_STORAGE: Final = "state_getStorage"
"""Call returning the hex value stored under a key, or null."""

ROUND_STATE: Final = "grandpa_roundState"
"""Call returning the node's view of the current round."""

SYSTEM_PROPERTIES: Final = "system_properties"
"""Call returning chain properties, including the SS58 prefix."""


class NotificationParams(CamelModel):
    """The `params` object of a subscription notification."""

    subscription: Any = None
    """Subscription identifier assigned by the node."""

    result: Any
    """The notification payload."""


class RpcEnvelope(CamelModel):
    """A subscription notification."""

    method: str
    """Notification kind, e.g. `state_storage`."""

    params: NotificationParams
    """Subscription id and payload."""

    @property
    def result(self) -> Any:
        """Shortcut to the payload."""
        return self.params.result


class StorageChangeSet(CamelModel):
    """Payload of a `state_storage` notification."""

    block: str
    """Hash of the block the changes apply to."""

    changes: list[tuple[str, str | None]]
    """(key, value) pairs; a null value means the key was removed."""

    def value_of(self, key: str) -> str | None:
        """
        Return the hex value for `key`.

        Falls back to the first change when `key` is not listed, since a
        single-key subscription only ever reports that key.
        """
        for changed_key, value in self.changes:
            if changed_key.lower() == key.lower():
                return value
        return self.changes[0][1] if self.changes else None


def parse_envelope(text: str | bytes) -> RpcEnvelope | None:
    """Parse a raw message as a notification, or return None if it is not one."""
    try:
        return RpcEnvelope.model_validate_json(text)
    except ValidationError:
        return None


def hex_to_bytes(value: Any, type_name: str = "hex payload") -> bytes:
    """
    Convert a 0x-prefixed (or bare) hex string to bytes.

    Raises:
        DecodeError: If `value` is not a string of hex digits.
    """
    if not isinstance(value, str):
        raise DecodeError(type_name, f"expected a hex string, got {type(value).__name__}")
    try:
        return bytes.fromhex(value.removeprefix("0x"))
    except ValueError as e:
        raise DecodeError(type_name, f"invalid hex: {e}") from e
