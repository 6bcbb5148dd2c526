"""
Per-round precommit tally.

The tally answers one question for the current validator set: who has
precommitted, and how often? It is rebuilt from scratch whenever the
validator set changes and incremented as justifications arrive.

Repeated precommits from one authority are counted every time they appear.
The count is an observation of what the node relayed, not a judgement.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from enum import Enum

from grandma.grandpa.primitives import AccountId, Justification, RoundNumber
from grandma.session.keys import QueuedKeys

logger = logging.getLogger(__name__)


class Visibility(Enum):
    """Which validators a report lists."""

    ALL = "all"
    VOTED = "voted"
    UNVOTED = "unvoted"

    def includes(self, votes: int) -> bool:
        """Check whether a validator with `votes` precommits is listed."""
        if self is Visibility.VOTED:
            return votes > 0
        if self is Visibility.UNVOTED:
            return votes == 0
        return True


@dataclass(slots=True)
class TallyEntry:
    """Vote count of one authority."""

    stash: AccountId
    """Stash account controlling the authority."""

    votes: int = 0
    """Precommits seen since the tally was last rebuilt."""

    @property
    def voted(self) -> bool:
        """True once at least one precommit was seen."""
        return self.votes > 0


@dataclass(frozen=True, slots=True)
class TallyReport:
    """Point-in-time view of the tally."""

    round: RoundNumber | None
    """Round of the last applied justification, if any."""

    total: int
    """Number of authorities in the current set."""

    voted: int
    """Number of authorities with at least one precommit."""

    entries: list[TallyEntry]
    """Copies of the entries selected by the requested visibility."""


@dataclass(slots=True)
class VoteTally:
    """Precommit counts keyed by GRANDPA authority key."""

    entries: dict[AccountId, TallyEntry] = field(default_factory=dict)
    """Current counts. Replaced wholesale on every validator set change."""

    round: RoundNumber | None = None
    """Round of the last applied justification."""

    def on_validator_set_change(self, queued_keys: QueuedKeys) -> None:
        """
        Rebuild the tally for a new validator set.

        Every count restarts at zero. Authorities can rotate their keys
        between sessions, so entries for departed keys must not survive.
        """
        self.entries = {
            pair.session_keys.grandpa_key(): TallyEntry(stash=pair.stash) for pair in queued_keys
        }
        logger.info("Tally reset for %d validators", len(self.entries))

    def on_justification(self, data: bytes) -> Justification:
        """
        Decode a justification and count its precommits.

        Raises:
            DecodeError: If `data` is not a justification. Counts are untouched.
        """
        justification = Justification.decode_bytes(data)
        self.apply(justification)
        return justification

    def apply(self, justification: Justification) -> int:
        """
        Count the precommits of an already decoded justification.

        Precommits from keys outside the current set are ignored.

        Returns:
            The number of precommits that matched a known authority.
        """
        counted = 0
        for signed in justification.commit.precommits:
            entry = self.entries.get(signed.id)
            if entry is None:
                continue
            entry.votes += 1
            counted += 1

        self.round = justification.round
        logger.debug(
            "Round %d: %d of %d precommits from known authorities",
            justification.round,
            counted,
            len(justification.commit.precommits),
        )
        return counted

    @property
    def total(self) -> int:
        """Number of authorities being tracked."""
        return len(self.entries)

    @property
    def voted(self) -> int:
        """Number of authorities with at least one precommit."""
        return sum(1 for entry in self.entries.values() if entry.voted)

    def report(self, visibility: Visibility = Visibility.ALL) -> TallyReport:
        """Snapshot the tally, listing the entries `visibility` selects."""
        return TallyReport(
            round=self.round,
            total=self.total,
            voted=self.voted,
            entries=[
                TallyEntry(stash=entry.stash, votes=entry.votes)
                for entry in self.entries.values()
                if visibility.includes(entry.votes)
            ],
        )
