"""
GRANDPA monitor CLI entry point.

Watch precommits as justifications arrive, or print the state of the
round in progress once.

Usage::

    python -m grandma --ws 127.0.0.1:9944
    python -m grandma --ws wss://rpc.polkadot.io --chain polkadot --log unvoted
    python -m grandma --ws 127.0.0.1:9944 --round-state

Options:
    --ws             Node WebSocket address (required)
    --log            Which validators to list: all, voted, unvoted (default: all)
    --chain          Chain preset: darwinia, polkadot, kusama, substrate (default: darwinia)
    --ss58-prefix    Address prefix; default is what the node reports
    --round-state    Print the round in progress once and exit
    --metrics-port   Serve Prometheus metrics on this port
"""

from __future__ import annotations

import argparse
import asyncio
import logging
import sys

from grandma.api import MetricsServer, MetricsServerConfig
from grandma.config import Chain, MonitorConfig, resolve_ss58_prefix
from grandma.monitor import Monitor
from grandma.report import render_snapshot
from grandma.rpc.client import RpcClient, RpcError, TransportError
from grandma.rpc.envelope import SYSTEM_PROPERTIES
from grandma.snapshot import SnapshotError, take_snapshot
from grandma.tally import Visibility

logger = logging.getLogger(__name__)


class ColoredFormatter(logging.Formatter):
    """Logging formatter with ANSI colors for better readability."""

    # ANSI color codes
    GREY = "\x1b[38;5;244m"
    BLUE = "\x1b[38;5;39m"
    GREEN = "\x1b[38;5;40m"
    YELLOW = "\x1b[38;5;220m"
    RED = "\x1b[38;5;196m"
    BOLD_RED = "\x1b[38;5;196;1m"
    CYAN = "\x1b[38;5;51m"
    RESET = "\x1b[0m"

    LEVEL_COLORS = {
        logging.DEBUG: GREY,
        logging.INFO: GREEN,
        logging.WARNING: YELLOW,
        logging.ERROR: RED,
        logging.CRITICAL: BOLD_RED,
    }

    def format(self, record: logging.LogRecord) -> str:
        """Format log record with colors."""
        color = self.LEVEL_COLORS.get(record.levelno, self.RESET)
        timestamp = self.formatTime(record, self.datefmt)
        colored_time = f"{self.CYAN}{timestamp}{self.RESET}"
        levelname = f"{color}{record.levelname:8}{self.RESET}"
        name = f"{self.BLUE}{record.name}{self.RESET}"
        return f"{colored_time} {levelname} {name}: {record.getMessage()}"


def setup_logging(verbose: bool = False, no_color: bool = False) -> None:
    """Configure logging with optional colors. Logs go to stderr, reports to stdout."""
    level = logging.DEBUG if verbose else logging.INFO

    handler = logging.StreamHandler()
    handler.setLevel(level)

    if no_color:
        formatter = logging.Formatter(
            "%(asctime)s %(levelname)-8s %(name)s: %(message)s",
            datefmt="%Y-%m-%d %H:%M:%S",
        )
    else:
        formatter = ColoredFormatter(datefmt="%Y-%m-%d %H:%M:%S")

    handler.setFormatter(formatter)

    root = logging.getLogger()
    root.setLevel(level)
    root.addHandler(handler)


async def discover_ss58_prefix(client: RpcClient, config: MonitorConfig) -> int:
    """
    Resolve the address prefix once, right after connecting.

    The node is only asked when no prefix was given on the command line.
    """
    properties = None
    if config.ss58_prefix is None:
        try:
            properties = await client.request(SYSTEM_PROPERTIES)
        except RpcError as e:
            logger.warning("Node did not report chain properties: %s", e)

    prefix = resolve_ss58_prefix(config.ss58_prefix, properties, config.chain)
    logger.info("Using SS58 prefix %d", prefix)
    return prefix


async def run_monitor(config: MonitorConfig) -> None:
    """
    Run the continuous monitor until the connection is lost.

    Raises:
        TransportError: When the node cannot be reached or the stream ends.
    """
    server = MetricsServer(config.metrics)
    await server.start()
    try:
        async with await RpcClient.connect(config.ws_url) as client:
            prefix = await discover_ss58_prefix(client, config)
            monitor = Monitor(
                layout=config.layout,
                ss58_prefix=prefix,
                visibility=config.visibility,
                color=config.color,
            )
            await monitor.run(client)
    finally:
        await server.stop()


async def run_round_state(config: MonitorConfig) -> None:
    """
    Print the round in progress once.

    Raises:
        TransportError: When the node cannot be reached.
        SnapshotError: When a query result does not decode.
    """
    async with await RpcClient.connect(config.ws_url) as client:
        prefix = await discover_ss58_prefix(client, config)
        snapshot = await take_snapshot(client, config.layout)

    for line in render_snapshot(snapshot, prefix, color=config.color):
        print(line)


def build_parser() -> argparse.ArgumentParser:
    """Build the command line parser."""
    parser = argparse.ArgumentParser(
        prog="grandma",
        description="GRANDPA finality monitor",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog=__doc__,
    )
    parser.add_argument(
        "--ws",
        required=True,
        metavar="URI:PORT",
        help="The node's WebSocket address",
    )
    parser.add_argument(
        "--log",
        choices=[v.value for v in Visibility],
        default=Visibility.ALL.value,
        help="Which validators to list after each justification (default: all)",
    )
    parser.add_argument(
        "--chain",
        choices=[c.value for c in Chain],
        default=Chain.DARWINIA.value,
        help="Chain preset selecting the session key layout (default: darwinia)",
    )
    parser.add_argument(
        "--ss58-prefix",
        type=int,
        default=None,
        help="Address prefix (default: reported by the node, else the chain preset)",
    )
    parser.add_argument(
        "--round-state",
        action="store_true",
        help="Print the round in progress once and exit",
    )
    parser.add_argument(
        "--metrics-port",
        type=int,
        default=None,
        help="Serve Prometheus metrics on this port",
    )
    parser.add_argument(
        "-v",
        "--verbose",
        action="store_true",
        help="Enable debug logging",
    )
    parser.add_argument(
        "--no-color",
        action="store_true",
        help="Disable colored output",
    )
    return parser


def config_from_args(args: argparse.Namespace) -> MonitorConfig:
    """Turn parsed arguments into a `MonitorConfig`."""
    if args.ss58_prefix is not None and not 0 <= args.ss58_prefix <= 0xFF:
        raise ValueError(f"--ss58-prefix must be in 0..255, got {args.ss58_prefix}")

    metrics = MetricsServerConfig()
    if args.metrics_port is not None:
        metrics = MetricsServerConfig(port=args.metrics_port, enabled=True)

    return MonitorConfig(
        ws_url=args.ws,
        chain=Chain(args.chain),
        visibility=Visibility(args.log),
        ss58_prefix=args.ss58_prefix,
        color=not args.no_color,
        metrics=metrics,
    )


def main(argv: list[str] | None = None) -> int:
    """CLI entry point."""
    parser = build_parser()
    args = parser.parse_args(argv)

    try:
        config = config_from_args(args)
    except ValueError as e:
        parser.error(str(e))

    setup_logging(args.verbose, args.no_color)

    runner = run_round_state if args.round_state else run_monitor
    try:
        asyncio.run(runner(config))
    except KeyboardInterrupt:
        logger.info("Shutting down...")
    except (TransportError, SnapshotError) as e:
        logger.error("%s", e)
        return 1
    return 0


if __name__ == "__main__":
    sys.exit(main())
