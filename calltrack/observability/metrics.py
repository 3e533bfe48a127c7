"""Prometheus metrics for call tracking."""

from prometheus_client import Counter

CALLS_LOGGED = Counter(
    "calltrack_calls_logged_total",
    "Total number of calls logged to any tracker",
)

ASSERTIONS = Counter(
    "calltrack_assertions_total",
    "Total number of assertion checks run",
    labelnames=["check", "outcome"],
)
