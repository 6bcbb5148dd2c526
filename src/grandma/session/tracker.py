"""Tracks the validator set announced through `Session::QueuedKeys`."""

from __future__ import annotations

import logging
from dataclasses import dataclass, field

from grandma.grandpa.primitives import AccountId

from .keys import QueuedKeys, SessionKeyLayout, decode_queued_keys

logger = logging.getLogger(__name__)


@dataclass(slots=True)
class ValidatorSetTracker:
    """
    Holds the most recently decoded validator set.

    A payload that fails to decode leaves the previous set in place; the
    `DecodeError` is raised to the caller, who decides whether that is fatal.
    """

    layout: SessionKeyLayout
    """Session key layout of the chain being watched."""

    queued_keys: QueuedKeys | None = field(default=None, init=False)
    """The current validator set, or None before the first update."""

    def replace(self, data: bytes) -> QueuedKeys:
        """
        Decode `data` and make it the current validator set.

        Raises:
            DecodeError: If `data` does not decode; the current set is kept.
        """
        queued_keys = decode_queued_keys(data, self.layout)
        self.queued_keys = queued_keys
        logger.debug("Validator set replaced: %d validators", len(queued_keys))
        return queued_keys

    def authorities(self) -> dict[AccountId, AccountId]:
        """Map each GRANDPA key of the current set to its stash."""
        if self.queued_keys is None:
            return {}
        return self.queued_keys.authorities()
