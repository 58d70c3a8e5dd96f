"""Monitoring and metrics instrumentation for the resilient client.

Exports custom Prometheus metrics for poll loops, mutations and HTTP traffic.
"""

from resilient_client.monitoring.metrics import (
    condition_evaluations_total,
    condition_timeouts_total,
    condition_wait_seconds,
    http_requests_total,
    mutations_total,
    transient_errors_total,
)

__all__ = [
    "condition_evaluations_total",
    "condition_timeouts_total",
    "condition_wait_seconds",
    "transient_errors_total",
    "mutations_total",
    "http_requests_total",
]
