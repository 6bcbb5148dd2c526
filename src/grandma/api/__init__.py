"""HTTP endpoints for health checks and metrics."""

from .server import MetricsServer, MetricsServerConfig

__all__ = [
    "MetricsServer",
    "MetricsServerConfig",
]
