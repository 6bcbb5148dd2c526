"""
GRANDPA wire types.

These mirror the node's own definitions field for field, because SCALE
structs carry no tags: decoding only works if the fields appear here in
exactly the order the node writes them.
"""

from __future__ import annotations

from typing_extensions import Self

from grandma.crypto.ss58 import decode_address, encode_address
from grandma.types import Bytes32, Bytes64, ScaleVec, Struct, Uint32, Uint64


class AccountId(Bytes32):
    """
    A 32-byte public key.

    Identity is the raw bytes. The SS58 form depends on the network prefix
    and is only ever produced for display.
    """

    def to_ss58(self, prefix: int) -> str:
        """Render the key as an SS58 address on network `prefix`."""
        return encode_address(self, prefix)

    @classmethod
    def from_ss58(cls, address: str) -> Self:
        """
        Parse an SS58 address of any network.

        Raises:
            AddressFormatError: If the address is malformed.
        """
        return cls(decode_address(address))


class Hash(Bytes32):
    """A 32-byte block hash."""

    def __str__(self) -> str:
        return "0x" + self.hex()


class Signature(Bytes64):
    """An ed25519 signature. Carried along, never inspected or verified."""

    def __repr__(self) -> str:
        return "Signature(omitted)"


class BlockNumber(Uint32):
    """A block height."""


class RoundNumber(Uint64):
    """A GRANDPA round number."""


class Precommit(Struct):
    """A vote for a block in the second (final) phase of a round."""

    target_hash: Hash
    """Hash of the block voted for."""

    target_number: BlockNumber
    """Height of the block voted for."""


class SignedPrecommit(Struct):
    """A precommit together with its signature and the authority that cast it."""

    precommit: Precommit
    """The vote itself."""

    signature: Signature
    """Signature over the vote (opaque here)."""

    id: AccountId
    """GRANDPA key of the authority that cast the vote."""


class SignedPrecommits(ScaleVec[SignedPrecommit]):
    """The precommits collected in a commit."""

    ELEMENT_TYPE = SignedPrecommit


class Commit(Struct):
    """A finalized target plus the precommits that justify it."""

    target_hash: Hash
    """Hash of the finalized block."""

    target_number: BlockNumber
    """Height of the finalized block."""

    precommits: SignedPrecommits
    """Precommits from a supermajority of the authority set."""


class Justification(Struct):
    """
    Proof that a block was finalized in a given round.

    The node appends the vote ancestries (block headers) after the commit.
    They are not needed to tally votes and are left undecoded, which is why
    justifications are decoded with `decode_bytes` rather than
    `decode_all_bytes`.
    """

    round: RoundNumber
    """The round the commit was produced in."""

    commit: Commit
    """The commit message."""
