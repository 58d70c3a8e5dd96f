"""
Poll, retry and verify primitives.

This package implements the eventually-consistent assertion engine:

1. **PollSchedule**: Immutable timing (poll delay, interval growth, budget)
2. **ConditionEvaluator**: The poll loop with transient/fatal classification
3. **RetryDriver**: retry-until-condition / exists / true / no-exception
4. **VerificationProtocol**: One-shot mutation followed by polled verification

Main Components:
    - PollSchedule: Frozen schedule, rebuilt via ``with_*`` methods
    - ConditionEvaluator: Runs one Condition and emits one event per attempt
    - RetryDriver: Converts timeouts into ValidationFailure
    - VerificationProtocol: request_and_verify / may_request_and_verify

Usage:
    >>> from resilient_client.retry import PollSchedule, RetryDriver
    >>> driver = RetryDriver(PollSchedule(poll_interval_ms=100, timeout_ms=5000))
    >>> page = driver.retry_until_condition(fetch_page, lambda r: r.status_code == 200)
"""

from resilient_client.retry.driver import RetryDriver
from resilient_client.retry.evaluator import (
    Condition,
    ConditionEvaluator,
    EvaluatedAttempt,
    EvaluationListener,
    LoggingEvaluationListener,
)
from resilient_client.retry.exceptions import (
    ConditionTimeout,
    MutationFailure,
    ValidationFailure,
    VerificationTimeout,
)
from resilient_client.retry.schedule import (
    DEFAULT_RETRY_SCHEDULE,
    DEFAULT_VERIFICATION_SCHEDULE,
    PollSchedule,
)
from resilient_client.retry.verification import VerificationProtocol

__all__ = [
    "PollSchedule",
    "DEFAULT_RETRY_SCHEDULE",
    "DEFAULT_VERIFICATION_SCHEDULE",
    "Condition",
    "ConditionEvaluator",
    "EvaluatedAttempt",
    "EvaluationListener",
    "LoggingEvaluationListener",
    "RetryDriver",
    "VerificationProtocol",
    "ConditionTimeout",
    "ValidationFailure",
    "MutationFailure",
    "VerificationTimeout",
]
