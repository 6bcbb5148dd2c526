"""
Runtime configuration for the monitor.

Chains differ in two ways that matter here: the SS58 prefix their
addresses are shown with, and the layout of their session keys. Both are
resolved once at startup and then passed explicitly to whatever needs them.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from typing import Any

from grandma.api import MetricsServerConfig
from grandma.session.keys import SessionKeyLayout
from grandma.tally import Visibility


@dataclass(frozen=True, slots=True)
class ChainPreset:
    """Defaults for a known chain."""

    ss58_prefix: int
    """Prefix used when the node does not report one."""

    layout: SessionKeyLayout
    """Session key layout of the chain's runtime."""


class Chain(Enum):
    """Chains with a known session key layout."""

    DARWINIA = "darwinia"
    POLKADOT = "polkadot"
    KUSAMA = "kusama"
    SUBSTRATE = "substrate"

    @property
    def preset(self) -> ChainPreset:
        """Default prefix and layout for the chain."""
        return CHAIN_PRESETS[self]


CHAIN_PRESETS: dict[Chain, ChainPreset] = {
    Chain.DARWINIA: ChainPreset(ss58_prefix=18, layout=SessionKeyLayout.DARWINIA),
    Chain.POLKADOT: ChainPreset(ss58_prefix=0, layout=SessionKeyLayout.POLKADOT),
    Chain.KUSAMA: ChainPreset(ss58_prefix=2, layout=SessionKeyLayout.POLKADOT),
    Chain.SUBSTRATE: ChainPreset(ss58_prefix=42, layout=SessionKeyLayout.SUBSTRATE),
}
"""Known chains and their defaults."""


@dataclass(frozen=True, slots=True)
class MonitorConfig:
    """Everything the CLI resolved before connecting."""

    ws_url: str
    """WebSocket address of the node."""

    chain: Chain = Chain.DARWINIA
    """Chain being watched."""

    visibility: Visibility = Visibility.ALL
    """Which validators each tally report lists."""

    ss58_prefix: int | None = None
    """Explicit address prefix; None means ask the node."""

    color: bool = True
    """Whether console output uses ANSI colors."""

    metrics: MetricsServerConfig = field(default_factory=MetricsServerConfig)
    """Metrics endpoint settings."""

    @property
    def layout(self) -> SessionKeyLayout:
        """Session key layout of the configured chain."""
        return self.chain.preset.layout


def resolve_ss58_prefix(
    explicit: int | None,
    properties: Any,
    chain: Chain,
) -> int:
    """
    Pick the address prefix once, at startup.

    Order of preference: the explicit setting, the `ss58Format` the node
    reports in `system_properties`, then the chain's default.
    """
    if explicit is not None:
        return explicit
    reported = properties.get("ss58Format") if isinstance(properties, dict) else None
    if isinstance(reported, int) and 0 <= reported <= 0xFF:
        return reported
    return chain.preset.ss58_prefix
