"""
HTTP server for health checks and Prometheus metrics.

Provides:
- /health - Health check endpoint
- /metrics - Prometheus metrics endpoint
"""

from __future__ import annotations

import json
import logging
from dataclasses import dataclass, field
from typing import Final

from aiohttp import web

from grandma.metrics import generate_metrics

logger = logging.getLogger(__name__)

STATUS_HEALTHY: Final = "healthy"
"""Fixed healthy status returned by the health endpoint."""

SERVICE_NAME: Final = "grandma"
"""Fixed service identifier returned by the health endpoint."""


async def _handle_health(_request: web.Request) -> web.Response:
    """Handle health check endpoint."""
    return web.Response(
        body=json.dumps({"status": STATUS_HEALTHY, "service": SERVICE_NAME}),
        content_type="application/json",
    )


async def _handle_metrics(_request: web.Request) -> web.Response:
    """Handle Prometheus metrics endpoint."""
    return web.Response(
        body=generate_metrics(),
        content_type="text/plain; version=0.0.4",
        charset="utf-8",
    )


@dataclass(frozen=True, slots=True)
class MetricsServerConfig:
    """Configuration for the metrics server."""

    host: str = "0.0.0.0"
    """Host address to bind to."""

    port: int = 9615
    """Port to listen on."""

    enabled: bool = False
    """Whether the server is started at all."""


@dataclass(slots=True)
class MetricsServer:
    """HTTP server exposing metrics while the monitor runs on the same event loop."""

    config: MetricsServerConfig
    """Server configuration."""

    _runner: web.AppRunner | None = field(default=None, init=False)
    """The aiohttp application runner."""

    async def start(self) -> None:
        """Start serving in the background."""
        if not self.config.enabled:
            logger.info("Metrics server is disabled")
            return

        app = web.Application()
        app.add_routes(
            [
                web.get("/health", _handle_health),
                web.get("/metrics", _handle_metrics),
            ]
        )

        self._runner = web.AppRunner(app)
        await self._runner.setup()
        site = web.TCPSite(self._runner, self.config.host, self.config.port)
        await site.start()

        logger.info("Metrics server listening on %s:%d", self.config.host, self.config.port)

    async def stop(self) -> None:
        """Stop serving."""
        if self._runner is not None:
            await self._runner.cleanup()
            self._runner = None
            logger.info("Metrics server stopped")
