"""
Retry driver: looping primitives over the condition evaluator.

Each primitive runs one poll loop and converts budget exhaustion into a
single ValidationFailure carrying the timeout as its cause. Which primitive
failed is only visible through the message, so tests should pass a
descriptive message (or alias) per call.
"""

import time
from collections.abc import Callable, Sized
from typing import Any, TypeVar

import structlog

from resilient_client.retry.evaluator import (
    Condition,
    ConditionEvaluator,
    EvaluationListener,
)
from resilient_client.retry.exceptions import ConditionTimeout, ValidationFailure
from resilient_client.retry.schedule import DEFAULT_RETRY_SCHEDULE, PollSchedule

logger = structlog.get_logger(__name__)

T = TypeVar("T")

DEFAULT_TIMEOUT_MESSAGE = "timeout waiting for condition"


def exists(value: Any) -> bool:
    """True for a non-null value that, when sized, is not empty."""
    if value is None:
        return False
    if isinstance(value, Sized):
        return len(value) > 0
    return True


def is_true(value: Any) -> bool:
    return value is True


def anything(value: Any) -> bool:
    return True


class RetryDriver:
    """
    Owns a default poll schedule and exposes retry primitives.

    Every primitive accepts an optional schedule overriding the default for
    that single call.

    Attributes:
        schedule: Default poll schedule
    """

    def __init__(
        self,
        schedule: PollSchedule = DEFAULT_RETRY_SCHEDULE,
        listener_factory: Callable[[PollSchedule], EvaluationListener] | None = None,
        clock: Callable[[], float] = time.monotonic,
        sleep: Callable[[float], None] = time.sleep,
    ):
        self.schedule = schedule
        self._listener_factory = listener_factory
        self._clock = clock
        self._sleep = sleep

    def retry_until_condition(
        self,
        operation: Callable[[], T],
        predicate: Callable[[T], bool],
        schedule: PollSchedule | None = None,
        message: str | None = None,
    ) -> T:
        """
        Retry the operation until its result satisfies the predicate.

        Args:
            operation: Zero-argument operation to poll
            predicate: Success judgment over the operation result
            schedule: Per-call schedule override
            message: Descriptive failure message

        Returns:
            The first result satisfying the predicate

        Raises:
            ValidationFailure: Timeout reached before the predicate held
        """
        schedule = schedule or self.schedule
        evaluator = self._evaluator(schedule)

        try:
            return evaluator.evaluate(Condition(operation, predicate, schedule.alias))
        except ConditionTimeout as e:
            logger.warning(
                "Retry budget exhausted",
                alias=e.alias,
                attempts=e.attempts,
                elapsed_ms=e.elapsed_ms,
                timeout_ms=e.timeout_ms,
            )
            raise ValidationFailure(message or DEFAULT_TIMEOUT_MESSAGE, cause=e) from e

    def retry_until_exists(
        self,
        operation: Callable[[], T],
        schedule: PollSchedule | None = None,
        message: str | None = None,
    ) -> T:
        """Retry the operation until it returns a non-null, non-empty value."""
        return self.retry_until_condition(operation, exists, schedule, message)

    def retry_until_true(
        self,
        operation: Callable[[], bool],
        schedule: PollSchedule | None = None,
        message: str | None = None,
    ) -> bool:
        """Retry the operation until it returns ``True``."""
        return self.retry_until_condition(operation, is_true, schedule, message)

    def retry_until_no_exception(
        self,
        operation: Callable[[], T],
        schedule: PollSchedule | None = None,
        message: str | None = None,
    ) -> T:
        """
        Retry the operation until it completes without a transient error.

        The result itself is not judged; only error classification matters.
        """
        return self.retry_until_condition(operation, anything, schedule, message)

    def _evaluator(self, schedule: PollSchedule) -> ConditionEvaluator:
        listener = self._listener_factory(schedule) if self._listener_factory else None
        return ConditionEvaluator(schedule, listener, clock=self._clock, sleep=self._sleep)
