"""
One-shot snapshot of the round in progress.

Two queries are reconciled: the validator set (to turn GRANDPA keys into
stash accounts) and the node's round state (weights and missing voters).
The two are read at slightly different moments, so a missing voter may
not be in the validator set that was read; such voters are reported with
an unknown identity instead of being dropped.

Unlike the continuous monitor, nothing here is skipped on error: a
snapshot built from partial data would be misleading.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import TYPE_CHECKING, Any

from pydantic import ValidationError

from grandma.grandpa.primitives import AccountId
from grandma.grandpa.round_state import Phase, ReportedRoundStates
from grandma.rpc.envelope import GET_STORAGE, ROUND_STATE, hex_to_bytes
from grandma.session.keys import SessionKeyLayout, decode_queued_keys
from grandma.storage.keys import QUEUED_KEYS_KEY
from grandma.types import DecodeError

if TYPE_CHECKING:
    from grandma.rpc.client import RpcClient

logger = logging.getLogger(__name__)


class SnapshotError(Exception):
    """
    A snapshot could not be built.

    Raised when either query returns something that does not decode.
    """


@dataclass(frozen=True, slots=True)
class MissingVoter:
    """An authority that has not voted in a phase yet."""

    authority: AccountId
    """GRANDPA key reported by the node."""

    stash: AccountId | None
    """Stash owning the key, or None when the key is not in the validator set."""

    @property
    def known(self) -> bool:
        """True when the key resolved to a stash."""
        return self.stash is not None


@dataclass(frozen=True, slots=True)
class PhaseSnapshot:
    """One voting phase with missing voters resolved."""

    current_weight: int
    """Weight accumulated so far."""

    missing: list[MissingVoter]
    """Authorities that have not voted in this phase."""


@dataclass(frozen=True, slots=True)
class RoundStateSnapshot:
    """The round in progress, ready for display."""

    set_id: int
    round: int
    total_weight: int
    threshold_weight: int
    prevotes: PhaseSnapshot
    precommits: PhaseSnapshot


def resolve_phase(phase: Phase, authorities: dict[AccountId, AccountId]) -> PhaseSnapshot:
    """Look up the stash of every missing voter in `phase`."""
    return PhaseSnapshot(
        current_weight=phase.current_weight,
        missing=[
            MissingVoter(authority=authority, stash=authorities.get(authority))
            for authority in phase.missing
        ],
    )


def build_snapshot(
    storage_value: Any,
    round_states: Any,
    layout: SessionKeyLayout,
) -> RoundStateSnapshot:
    """
    Reconcile raw query results into a snapshot.

    Args:
        storage_value: Hex result of reading `Session::QueuedKeys`.
        round_states: JSON result of `grandpa_roundState`.
        layout: Session key layout of the chain.

    Raises:
        SnapshotError: If either result does not decode.
    """
    if storage_value is None:
        raise SnapshotError("Validator set not found in storage")

    try:
        queued_keys = decode_queued_keys(hex_to_bytes(storage_value, "QueuedKeys"), layout)
    except DecodeError as e:
        raise SnapshotError(f"Validator set did not decode: {e}") from e

    try:
        reported = ReportedRoundStates.model_validate(round_states)
    except ValidationError as e:
        raise SnapshotError(f"Round state did not decode: {e}") from e

    authorities = queued_keys.authorities()
    best = reported.best
    return RoundStateSnapshot(
        set_id=reported.set_id,
        round=best.round,
        total_weight=best.total_weight,
        threshold_weight=best.threshold_weight,
        prevotes=resolve_phase(best.prevotes, authorities),
        precommits=resolve_phase(best.precommits, authorities),
    )


async def take_snapshot(client: RpcClient, layout: SessionKeyLayout) -> RoundStateSnapshot:
    """
    Query the node and build a snapshot of the round in progress.

    The two requests are issued one after the other on `client`.

    Raises:
        SnapshotError: If a result does not decode.
        TransportError: If the node cannot be queried.
    """
    storage_value = await client.request(GET_STORAGE, [QUEUED_KEYS_KEY])
    round_states = await client.request(ROUND_STATE)
    snapshot = build_snapshot(storage_value, round_states, layout)
    logger.debug(
        "Snapshot of round %d: %d prevotes and %d precommits missing",
        snapshot.round,
        len(snapshot.prevotes.missing),
        len(snapshot.precommits.missing),
    )
    return snapshot
