"""Console rendering of tally reports and round state snapshots."""

from __future__ import annotations

from typing import Final

from grandma.snapshot import MissingVoter, PhaseSnapshot, RoundStateSnapshot
from grandma.tally import TallyReport

# ANSI color codes
GREEN: Final = "\x1b[38;5;40m"
RED: Final = "\x1b[38;5;196m"
CYAN: Final = "\x1b[38;5;51m"
MAGENTA: Final = "\x1b[38;5;201m"
YELLOW: Final = "\x1b[38;5;220m"
RESET: Final = "\x1b[0m"

SEPARATOR: Final = "=" * 74
"""Printed after every tally report."""

UNKNOWN_IDENTITY: Final = "identity unknown"
"""Shown for a missing voter whose key is not in the validator set."""


def _paint(text: str, color: str, enabled: bool) -> str:
    return f"{color}{text}{RESET}" if enabled else text


def _label(name: str, color: bool) -> str:
    return _paint(f"{name:<9}: ", MAGENTA, color)


def render_tally(report: TallyReport, ss58_prefix: int, *, color: bool = True) -> list[str]:
    """
    Render a tally report, one line per listed validator, then the totals.

    Validators that voted are green, the others red.
    """
    lines = []
    for entry in report.entries:
        stash = _paint(entry.stash.to_ss58(ss58_prefix), GREEN if entry.voted else RED, color)
        votes = _paint(f" [{entry.votes:4} vote(s)]", CYAN, color)
        lines.append(f"{_paint('validator: ', MAGENTA, color)}{stash}{votes}")

    round_text = "-" if report.round is None else str(report.round)
    lines.append(_label("round", color) + _paint(round_text, CYAN, color))
    lines.append(_label("total", color) + _paint(str(report.total), CYAN, color))
    lines.append(_label("voted", color) + _paint(str(report.voted), CYAN, color))
    lines.append(_paint(SEPARATOR, YELLOW, color))
    return lines


def _render_voter(voter: MissingVoter, ss58_prefix: int, color: bool) -> str:
    if voter.stash is not None:
        return _paint(voter.stash.to_ss58(ss58_prefix), RED, color)
    authority = voter.authority.to_ss58(ss58_prefix)
    return _paint(f"{UNKNOWN_IDENTITY} ({authority})", YELLOW, color)


def _render_phase(
    name: str, phase: PhaseSnapshot, threshold: int, ss58_prefix: int, color: bool
) -> list[str]:
    weight = _paint(f"{phase.current_weight}/{threshold}", CYAN, color)
    lines = [f"{_label(name, color)}{weight} ({len(phase.missing)} missing)"]
    lines.extend(f"  - {_render_voter(voter, ss58_prefix, color)}" for voter in phase.missing)
    return lines


def render_snapshot(
    snapshot: RoundStateSnapshot, ss58_prefix: int, *, color: bool = True
) -> list[str]:
    """Render a round state snapshot: weights, then missing voters per phase."""
    lines = [
        _label("set id", color) + _paint(str(snapshot.set_id), CYAN, color),
        _label("round", color) + _paint(str(snapshot.round), CYAN, color),
        _label("total", color) + _paint(str(snapshot.total_weight), CYAN, color),
        _label("threshold", color) + _paint(str(snapshot.threshold_weight), CYAN, color),
    ]
    threshold = snapshot.threshold_weight
    lines.extend(_render_phase("prevotes", snapshot.prevotes, threshold, ss58_prefix, color))
    lines.extend(_render_phase("precommits", snapshot.precommits, threshold, ss58_prefix, color))
    return lines
