"""Custom Prometheus metrics for the resilient client.

Integration suites can expose these through a pushgateway or a /metrics
endpoint of the test runner. Useful signals:
- condition_timeouts_total (flaky or broken propagation in the backend)
- transient_errors_total (backend instability during the run)
- condition_wait_seconds (how long tests wait for consistency)
- mutations_total{outcome="verification_timeout"} (writes never observed)
"""

from prometheus_client import Counter, Histogram

# === Poll Loop Metrics ===

condition_evaluations_total = Counter(
    "condition_evaluations_total",
    "Total condition evaluations by outcome",
    ["satisfied"],
)
"""
Condition evaluations counter, one increment per poll attempt.

Labels:
- satisfied: true (condition held), false (not yet, or transient error)
"""

condition_timeouts_total = Counter(
    "condition_timeouts_total",
    "Total poll loops that exhausted their timeout budget",
)

transient_errors_total = Counter(
    "transient_errors_total",
    "Total transient errors swallowed by poll loops",
    ["kind"],
)
"""
Transient errors counter by error kind.

Labels:
- kind: client (unexpected status), io (network failure)
"""

condition_wait_seconds = Histogram(
    "condition_wait_seconds",
    "Time from first evaluation until a condition was satisfied",
    buckets=[0.01, 0.05, 0.1, 0.5, 1.0, 2.0, 5.0, 10.0, 30.0, 60.0],
)

# === Mutation Metrics ===

mutations_total = Counter(
    "mutations_total",
    "Total mutate-then-verify operations by outcome",
    ["outcome"],
)
"""
Mutate-then-verify counter by outcome.

Labels:
- outcome: verified, skipped (no change made), mutation_failed, verification_timeout
"""

# === HTTP Metrics ===

http_requests_total = Counter(
    "http_requests_total",
    "Total HTTP requests sent by method and status",
    ["method", "status"],
)
