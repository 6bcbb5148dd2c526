"""Tests for console rendering."""

from grandma.grandpa import RoundNumber
from grandma.report import GREEN, RED, SEPARATOR, UNKNOWN_IDENTITY, render_snapshot, render_tally
from grandma.snapshot import MissingVoter, PhaseSnapshot, RoundStateSnapshot
from grandma.tally import TallyEntry, TallyReport
from tests.grandma.helpers import ALICE, ALICE_SS58, BOB, BOB_SS58


def make_report() -> TallyReport:
    return TallyReport(
        round=RoundNumber(12),
        total=2,
        voted=1,
        entries=[TallyEntry(stash=ALICE, votes=3), TallyEntry(stash=BOB, votes=0)],
    )


class TestRenderTally:
    def test_plain_lines(self) -> None:
        lines = render_tally(make_report(), 42, color=False)

        assert lines == [
            f"validator: {ALICE_SS58} [   3 vote(s)]",
            f"validator: {BOB_SS58} [   0 vote(s)]",
            "round    : 12",
            "total    : 2",
            "voted    : 1",
            SEPARATOR,
        ]

    def test_colors_follow_voted_state(self) -> None:
        alice_line, bob_line = render_tally(make_report(), 42)[:2]
        assert f"{GREEN}{ALICE_SS58}" in alice_line
        assert f"{RED}{BOB_SS58}" in bob_line

    def test_prefix_changes_display_only(self) -> None:
        lines = render_tally(make_report(), 0, color=False)
        assert "15oF4uVJwmo4TdGW7VfQxNLavjCXviqxT9S1MgbjMNHr6Sp5" in lines[0]

    def test_no_round_yet(self) -> None:
        report = TallyReport(round=None, total=0, voted=0, entries=[])
        assert render_tally(report, 42, color=False)[0] == "round    : -"


class TestRenderSnapshot:
    def test_missing_voters(self) -> None:
        snapshot = RoundStateSnapshot(
            set_id=4,
            round=99,
            total_weight=3,
            threshold_weight=3,
            prevotes=PhaseSnapshot(current_weight=3, missing=[]),
            precommits=PhaseSnapshot(
                current_weight=1,
                missing=[
                    MissingVoter(authority=BOB, stash=ALICE),
                    MissingVoter(authority=BOB, stash=None),
                ],
            ),
        )

        lines = render_snapshot(snapshot, 42, color=False)

        assert lines[:4] == [
            "set id   : 4",
            "round    : 99",
            "total    : 3",
            "threshold: 3",
        ]
        assert lines[4] == "prevotes : 3/3 (0 missing)"
        assert lines[5] == "precommits: 1/3 (2 missing)"
        assert lines[6] == f"  - {ALICE_SS58}"
        assert lines[7] == f"  - {UNKNOWN_IDENTITY} ({BOB_SS58})"
