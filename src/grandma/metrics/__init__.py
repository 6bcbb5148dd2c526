"""
Metrics module for observability.

Provides counters and gauges tracking finality progress and dropped
notifications. Exposes metrics in Prometheus text format.
"""

from .registry import (
    REGISTRY,
    current_round,
    decode_failures,
    generate_metrics,
    justifications_processed,
    validator_set_changes,
    validators_count,
    validators_voted,
)

__all__ = [
    "REGISTRY",
    "current_round",
    "decode_failures",
    "generate_metrics",
    "justifications_processed",
    "validator_set_changes",
    "validators_count",
    "validators_voted",
]
