"""Metrics instrumentation."""

from __future__ import annotations

from prometheus_client import Counter

mutations_total = Counter(
    "pantry_mutations_total",
    "Inventory mutations by operation and outcome",
    ["op", "outcome"],
)
snapshots_total = Counter(
    "pantry_snapshots_total", "Collection snapshots applied to the local mirror"
)


def inc_mutation(op: str, outcome: str) -> None:
    mutations_total.labels(op=op, outcome=outcome).inc()


def inc_snapshots(n: int = 1) -> None:
    snapshots_total.inc(n)
