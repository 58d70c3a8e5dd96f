"""
Resilient HTTP client for integration tests against eventually-consistent services.

Content repositories and indexing backends rarely make the effect of a request
visible the moment the request returns. This package lets a test:
- Poll an operation until a condition over its result holds
- Fail with a clear timeout after a bounded budget
- Perform a mutation exactly once, then poll a separate "reflected" check

Architecture: httpx transport + immutable poll schedules + composable predicates
"""

from resilient_client.executor import RequestExecutor
from resilient_client.http.client import ResilientClient
from resilient_client.logging_config import configure_logging
from resilient_client.retry import (
    ConditionTimeout,
    MutationFailure,
    PollSchedule,
    RetryDriver,
    ValidationFailure,
    VerificationProtocol,
    VerificationTimeout,
)

__version__ = "0.1.0"

__all__ = [
    "ResilientClient",
    "RequestExecutor",
    "PollSchedule",
    "RetryDriver",
    "VerificationProtocol",
    "ConditionTimeout",
    "ValidationFailure",
    "MutationFailure",
    "VerificationTimeout",
    "configure_logging",
]
