"""Tests for CLI functions.

Covers argument parsing, prefix discovery and the exit status of both
run modes. Network access is replaced with scripted clients.
"""

from __future__ import annotations

import logging
from collections.abc import Iterator
from unittest.mock import AsyncMock, MagicMock, patch

import pytest

from grandma.__main__ import (
    ColoredFormatter,
    build_parser,
    config_from_args,
    discover_ss58_prefix,
    main,
    run_round_state,
)
from grandma.config import Chain, MonitorConfig
from grandma.rpc import GET_STORAGE, ROUND_STATE, SYSTEM_PROPERTIES, RpcError, TransportError
from grandma.session import SessionKeyLayout
from grandma.snapshot import SnapshotError
from grandma.tally import Visibility
from tests.grandma.helpers import (
    ALICE,
    ALICE_SS58,
    MockRpcClient,
    make_account_id,
    make_queued_keys,
    round_state_json,
    to_hex,
)


@pytest.fixture(autouse=True)
def _restore_root_logger() -> Iterator[None]:
    """`main` installs a handler on the root logger; remove it afterwards."""
    root = logging.getLogger()
    handlers, level = list(root.handlers), root.level
    yield
    root.handlers[:] = handlers
    root.setLevel(level)


class TestArguments:
    def test_defaults(self) -> None:
        config = config_from_args(build_parser().parse_args(["--ws", "127.0.0.1:9944"]))

        assert config == MonitorConfig(ws_url="127.0.0.1:9944")
        assert config.layout is SessionKeyLayout.DARWINIA

    def test_all_options(self) -> None:
        args = build_parser().parse_args(
            [
                "--ws",
                "wss://rpc.polkadot.io",
                "--log",
                "unvoted",
                "--chain",
                "polkadot",
                "--ss58-prefix",
                "0",
                "--metrics-port",
                "9700",
                "--no-color",
            ]
        )
        config = config_from_args(args)

        assert config.chain is Chain.POLKADOT
        assert config.visibility is Visibility.UNVOTED
        assert config.ss58_prefix == 0
        assert config.metrics.enabled
        assert config.metrics.port == 9700
        assert not config.color

    def test_ws_required(self) -> None:
        with pytest.raises(SystemExit):
            build_parser().parse_args([])

    def test_unknown_visibility(self) -> None:
        with pytest.raises(SystemExit):
            build_parser().parse_args(["--ws", "x", "--log", "some"])

    def test_prefix_out_of_range(self) -> None:
        with pytest.raises(SystemExit) as exc_info:
            main(["--ws", "x", "--ss58-prefix", "256"])
        assert exc_info.value.code == 2


class TestDiscoverSs58Prefix:
    @pytest.mark.asyncio
    async def test_node_report(self) -> None:
        client = MockRpcClient(responses={SYSTEM_PROPERTIES: {"ss58Format": 18}})
        config = MonitorConfig(ws_url="x", chain=Chain.POLKADOT)

        assert await discover_ss58_prefix(client, config) == 18  # type: ignore[arg-type]

    @pytest.mark.asyncio
    async def test_explicit_prefix_skips_query(self) -> None:
        client = MockRpcClient()
        config = MonitorConfig(ws_url="x", ss58_prefix=42)

        assert await discover_ss58_prefix(client, config) == 42  # type: ignore[arg-type]
        assert client.requests == []

    @pytest.mark.asyncio
    async def test_rpc_error_falls_back_to_preset(self) -> None:
        client = MockRpcClient(responses={SYSTEM_PROPERTIES: RpcError(SYSTEM_PROPERTIES, "nope")})
        config = MonitorConfig(ws_url="x", chain=Chain.KUSAMA)

        assert await discover_ss58_prefix(client, config) == 2  # type: ignore[arg-type]


def _patched_connect(client: MockRpcClient) -> MagicMock:
    rpc_client = MagicMock()
    rpc_client.connect = AsyncMock(return_value=client)
    return rpc_client


class TestRunRoundState:
    @pytest.mark.asyncio
    async def test_prints_snapshot(self, capsys: pytest.CaptureFixture[str]) -> None:
        stash = make_account_id(0x0A)
        client = MockRpcClient(
            responses={
                SYSTEM_PROPERTIES: {"ss58Format": 42},
                GET_STORAGE: to_hex(make_queued_keys([(stash, ALICE)]).encode_bytes()),
                ROUND_STATE: round_state_json(round=5, precommits_missing=[ALICE_SS58]),
            }
        )
        config = MonitorConfig(ws_url="x", color=False)

        with patch("grandma.__main__.RpcClient", _patched_connect(client)):
            await run_round_state(config)

        out = capsys.readouterr().out
        assert "round    : 5" in out
        assert f"  - {stash.to_ss58(42)}" in out
        assert client.closed


class TestMain:
    def test_transport_error_exits_1(self) -> None:
        with patch(
            "grandma.__main__.run_monitor", AsyncMock(side_effect=TransportError("closed"))
        ):
            assert main(["--ws", "x", "--no-color"]) == 1

    def test_snapshot_error_exits_1(self) -> None:
        with patch(
            "grandma.__main__.run_round_state", AsyncMock(side_effect=SnapshotError("bad"))
        ):
            assert main(["--ws", "x", "--round-state", "--no-color"]) == 1

    def test_round_state_mode_selected(self) -> None:
        with (
            patch("grandma.__main__.run_round_state", AsyncMock()) as round_state,
            patch("grandma.__main__.run_monitor", AsyncMock()) as monitor,
        ):
            assert main(["--ws", "x", "--round-state"]) == 0

        round_state.assert_awaited_once()
        monitor.assert_not_awaited()


def test_colored_formatter() -> None:
    record = logging.LogRecord("grandma.monitor", logging.WARNING, "", 0, "dropped", None, None)
    formatted = ColoredFormatter().format(record)
    assert ColoredFormatter.YELLOW in formatted
    assert formatted.endswith("dropped")
