"""
Round state reported by the node's `grandpa_roundState` call.

Unlike justifications, this arrives as plain JSON. Authorities that have
not voted yet are listed as SS58 addresses and are converted to raw keys
on the way in.
"""

from __future__ import annotations

from typing import Any

from pydantic import Field, field_validator

from grandma.types import CamelModel

from .primitives import AccountId


class Phase(CamelModel):
    """Progress of one voting phase (prevote or precommit) of a round."""

    current_weight: int
    """Voting weight accumulated so far."""

    missing: list[AccountId] = Field(default_factory=list)
    """Authorities that have not contributed to this phase yet."""

    @field_validator("missing", mode="before")
    @classmethod
    def _parse_addresses(cls, v: Any) -> list[AccountId]:
        """Convert SS58 strings to raw keys; malformed addresses fail validation."""
        if not isinstance(v, list):
            raise ValueError(f"Expected a list of addresses, got {type(v).__name__}")
        keys: list[AccountId] = []
        for item in v:
            if isinstance(item, AccountId):
                keys.append(item)
            elif isinstance(item, str):
                keys.append(AccountId.from_ss58(item))
            else:
                raise ValueError(f"Expected an SS58 address, got {type(item).__name__}")
        return keys


class RoundState(CamelModel):
    """Weights and missing voters of one round."""

    round: int
    """The round number."""

    total_weight: int
    """Sum of the weights of all authorities."""

    threshold_weight: int
    """Weight a phase needs to reach a supermajority."""

    prevotes: Phase
    """First voting phase."""

    precommits: Phase
    """Second (final) voting phase."""


class ReportedRoundStates(CamelModel):
    """The full `grandpa_roundState` response."""

    set_id: int
    """Identifier of the current authority set."""

    best: RoundState
    """The round currently in progress."""

    background: list[RoundState] = Field(default_factory=list)
    """Older rounds that are still being tracked."""
