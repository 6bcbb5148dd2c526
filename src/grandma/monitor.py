"""
Continuous finality monitor.

Routes notifications, strictly in arrival order, to the validator set
tracker (storage changes) and the vote tally (justifications), printing a
tally report after every justification.

A notification whose payload does not decode is logged, counted and
dropped; the previous state carries on. Only losing the connection stops
the loop.
"""

from __future__ import annotations

import logging
from collections.abc import Callable
from dataclasses import dataclass, field
from typing import TYPE_CHECKING, Any

from pydantic import ValidationError

from grandma import metrics
from grandma.report import render_tally
from grandma.rpc.envelope import (
    JUSTIFICATIONS,
    STATE_STORAGE,
    SUBSCRIBE_JUSTIFICATIONS,
    SUBSCRIBE_STORAGE,
    RpcEnvelope,
    StorageChangeSet,
    hex_to_bytes,
)
from grandma.session.keys import SessionKeyLayout
from grandma.session.tracker import ValidatorSetTracker
from grandma.storage.keys import QUEUED_KEYS_KEY
from grandma.tally import TallyReport, Visibility, VoteTally
from grandma.types import DecodeError

if TYPE_CHECKING:
    from grandma.rpc.client import RpcClient

logger = logging.getLogger(__name__)


@dataclass(slots=True)
class Monitor:
    """Owns the validator set tracker and the vote tally for one connection."""

    layout: SessionKeyLayout
    """Session key layout of the chain."""

    ss58_prefix: int
    """Prefix for displaying stash addresses."""

    visibility: Visibility = Visibility.ALL
    """Which validators each report lists."""

    color: bool = True
    """Whether reports use ANSI colors."""

    emit: Callable[[str], None] = print
    """Sink for report lines."""

    tracker: ValidatorSetTracker = field(init=False)
    """Current validator set."""

    tally: VoteTally = field(default_factory=VoteTally, init=False)
    """Precommit counts for the current validator set."""

    dropped: int = field(default=0, init=False)
    """Notifications dropped because they did not decode."""

    def __post_init__(self) -> None:
        self.tracker = ValidatorSetTracker(self.layout)

    def handle(self, envelope: RpcEnvelope) -> TallyReport | None:
        """
        Process one notification.

        Returns:
            The tally report printed for a justification, otherwise None.
        """
        if envelope.method == STATE_STORAGE:
            self._on_storage_change(envelope.result)
            return None
        if envelope.method == JUSTIFICATIONS:
            return self._on_justification(envelope.result)

        logger.debug("Ignoring notification %s", envelope.method)
        return None

    def _drop(self, event: str, error: Exception) -> None:
        self.dropped += 1
        metrics.decode_failures.labels(event=event).inc()
        logger.warning("Dropped %s notification: %s", event, error)

    def _on_storage_change(self, result: Any) -> None:
        try:
            change_set = StorageChangeSet.model_validate(result)
            value = change_set.value_of(QUEUED_KEYS_KEY)
            if value is None:
                raise DecodeError("QueuedKeys", "storage value was removed")
            queued_keys = self.tracker.replace(hex_to_bytes(value, "QueuedKeys"))
        except (DecodeError, ValidationError) as e:
            self._drop(STATE_STORAGE, e)
            return

        self.tally.on_validator_set_change(queued_keys)
        metrics.validator_set_changes.inc()
        metrics.validators_count.set(self.tally.total)
        metrics.validators_voted.set(0)

    def _on_justification(self, result: Any) -> TallyReport | None:
        try:
            justification = self.tally.on_justification(hex_to_bytes(result, "Justification"))
        except DecodeError as e:
            self._drop(JUSTIFICATIONS, e)
            return None

        metrics.justifications_processed.inc()
        metrics.current_round.set(int(justification.round))
        metrics.validators_voted.set(self.tally.voted)

        report = self.tally.report(self.visibility)
        for line in render_tally(report, self.ss58_prefix, color=self.color):
            self.emit(line)
        return report

    async def run(self, client: RpcClient) -> None:
        """
        Subscribe and process notifications until the connection fails.

        Raises:
            TransportError: When the connection is lost.
        """
        await client.subscribe(SUBSCRIBE_JUSTIFICATIONS)
        await client.subscribe(SUBSCRIBE_STORAGE, [[QUEUED_KEYS_KEY]])

        async for envelope in client.notifications():
            self.handle(envelope)
