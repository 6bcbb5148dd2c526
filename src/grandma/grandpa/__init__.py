"""GRANDPA finality types: justifications and round state."""

from .primitives import (
    AccountId,
    BlockNumber,
    Commit,
    Hash,
    Justification,
    Precommit,
    RoundNumber,
    Signature,
    SignedPrecommit,
    SignedPrecommits,
)
from .round_state import Phase, ReportedRoundStates, RoundState

__all__ = [
    "AccountId",
    "BlockNumber",
    "Commit",
    "Hash",
    "Justification",
    "Phase",
    "Precommit",
    "ReportedRoundStates",
    "RoundNumber",
    "RoundState",
    "Signature",
    "SignedPrecommit",
    "SignedPrecommits",
]
