"""
Metric registry using prometheus_client.

Exposes the monitor's view of finality in Prometheus text format via the
/metrics endpoint.
"""

from __future__ import annotations

from prometheus_client import (
    CollectorRegistry,
    Counter,
    Gauge,
    generate_latest,
)

# Dedicated registry, so the default Python process metrics stay out.
REGISTRY = CollectorRegistry()

# -----------------------------------------------------------------------------
# Finality
# -----------------------------------------------------------------------------

current_round = Gauge(
    "grandma_round",
    "Round of the last justification seen",
    registry=REGISTRY,
)

justifications_processed = Counter(
    "grandma_justifications_processed_total",
    "Justifications decoded and tallied",
    registry=REGISTRY,
)

# -----------------------------------------------------------------------------
# Validator Set
# -----------------------------------------------------------------------------

validators_count = Gauge(
    "grandma_validators_count",
    "Authorities in the current validator set",
    registry=REGISTRY,
)

validators_voted = Gauge(
    "grandma_validators_voted",
    "Authorities with at least one precommit since the last set change",
    registry=REGISTRY,
)

validator_set_changes = Counter(
    "grandma_validator_set_changes_total",
    "Validator set updates applied",
    registry=REGISTRY,
)

# -----------------------------------------------------------------------------
# Errors
# -----------------------------------------------------------------------------

decode_failures = Counter(
    "grandma_decode_failures_total",
    "Notifications dropped because their payload did not decode",
    ["event"],
    registry=REGISTRY,
)


def generate_metrics() -> bytes:
    """
    Generate Prometheus metrics output.

    Returns:
        Prometheus text format output as bytes.
    """
    return generate_latest(REGISTRY)
