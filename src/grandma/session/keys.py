"""
Session key layouts and the queued validator set.

Every chain binds a stash account to a record of role keys, one per
consensus subsystem. The roles and their order differ between runtimes,
and SCALE carries no field names, so the layout has to be chosen up front.
Whatever the layout, only the GRANDPA key matters here: it is the
identity that signs precommits.
"""

from __future__ import annotations

from enum import Enum
from typing import Type

from grandma.grandpa.primitives import AccountId
from grandma.types import ScaleTuple, ScaleVec, Struct


class SessionKeys(Struct):
    """Base class for a runtime's session key record."""

    def grandpa_key(self) -> AccountId:
        """Return the key this stash votes with in GRANDPA."""
        raise NotImplementedError


class DarwiniaSessionKeys(SessionKeys):
    """Session keys of Darwinia and Crab."""

    babe: AccountId
    grandpa: AccountId
    im_online: AccountId
    authority_discovery: AccountId

    def grandpa_key(self) -> AccountId:
        return self.grandpa


class PolkadotSessionKeys(SessionKeys):
    """Session keys of Polkadot and Kusama (relay chains with parachain roles)."""

    grandpa: AccountId
    babe: AccountId
    im_online: AccountId
    para_validator: AccountId
    para_assignment: AccountId
    authority_discovery: AccountId

    def grandpa_key(self) -> AccountId:
        return self.grandpa


class SubstrateSessionKeys(SessionKeys):
    """Session keys of the Substrate reference node."""

    grandpa: AccountId
    babe: AccountId
    im_online: AccountId
    authority_discovery: AccountId

    def grandpa_key(self) -> AccountId:
        return self.grandpa


class QueuedKey(ScaleTuple):
    """One `(stash, session keys)` pair of the queued validator set."""

    @property
    def stash(self) -> AccountId:
        """The validator's long-lived stash account."""
        return self[0]

    @property
    def session_keys(self) -> SessionKeys:
        """The role keys bound to the stash."""
        return self[1]


class QueuedKeys(ScaleVec[QueuedKey]):
    """The queued validator set, in the order the node enumerates it."""

    def authorities(self) -> dict[AccountId, AccountId]:
        """Map every GRANDPA key to the stash that owns it."""
        return {pair.session_keys.grandpa_key(): pair.stash for pair in self.data}


class DarwiniaQueuedKey(QueuedKey):
    ELEMENT_TYPES = (AccountId, DarwiniaSessionKeys)


class DarwiniaQueuedKeys(QueuedKeys):
    ELEMENT_TYPE = DarwiniaQueuedKey


class PolkadotQueuedKey(QueuedKey):
    ELEMENT_TYPES = (AccountId, PolkadotSessionKeys)


class PolkadotQueuedKeys(QueuedKeys):
    ELEMENT_TYPE = PolkadotQueuedKey


class SubstrateQueuedKey(QueuedKey):
    ELEMENT_TYPES = (AccountId, SubstrateSessionKeys)


class SubstrateQueuedKeys(QueuedKeys):
    ELEMENT_TYPE = SubstrateQueuedKey


class SessionKeyLayout(Enum):
    """The closed set of session key layouts this tool can decode."""

    DARWINIA = "darwinia"
    POLKADOT = "polkadot"
    SUBSTRATE = "substrate"

    @property
    def queued_keys_type(self) -> Type[QueuedKeys]:
        """The `QueuedKeys` class that decodes this layout."""
        return _QUEUED_KEYS_TYPES[self]


_QUEUED_KEYS_TYPES: dict[SessionKeyLayout, Type[QueuedKeys]] = {
    SessionKeyLayout.DARWINIA: DarwiniaQueuedKeys,
    SessionKeyLayout.POLKADOT: PolkadotQueuedKeys,
    SessionKeyLayout.SUBSTRATE: SubstrateQueuedKeys,
}


def decode_queued_keys(data: bytes, layout: SessionKeyLayout) -> QueuedKeys:
    """
    Decode a `Session::QueuedKeys` storage value.

    The value must be consumed exactly; leftover bytes mean the layout
    does not match the chain.

    Raises:
        DecodeError: If `data` is not a valid queued key set for `layout`.
    """
    return layout.queued_keys_type.decode_all_bytes(data)
