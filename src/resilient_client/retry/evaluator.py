"""
Condition evaluation loop.

This module implements the poll loop every retry and verification helper
is built on. One call to ConditionEvaluator.evaluate():

    1. Waits the schedule's poll delay (if any)
    2. Invokes the operation; transient errors count as "not satisfied",
       fatal errors abort the loop and propagate unchanged
    3. Applies the predicate; a satisfied condition returns the value
    4. Otherwise sleeps the current poll interval, grows it by the
       multiplier and tries again, unless the next attempt would start at
       or after the deadline, in which case ConditionTimeout is raised

The deadline is only checked between attempts: an operation in flight when
the budget runs out is allowed to finish.

Usage:
    evaluator = ConditionEvaluator(schedule)
    response = evaluator.evaluate(Condition(fetch, lambda r: r.status_code == 200))
"""

import time
from collections.abc import Callable
from dataclasses import dataclass
from typing import Any, Generic, Protocol, TypeVar

import structlog

from resilient_client.config import settings
from resilient_client.exceptions import kind_of
from resilient_client.monitoring.metrics import (
    condition_evaluations_total,
    condition_timeouts_total,
    condition_wait_seconds,
    transient_errors_total,
)
from resilient_client.retry.exceptions import ConditionTimeout
from resilient_client.retry.schedule import PollSchedule

logger = structlog.get_logger(__name__)

T = TypeVar("T")


@dataclass(frozen=True)
class Condition(Generic[T]):
    """
    An operation paired with the predicate that decides success.

    Attributes:
        operation: Zero-argument callable producing the value to check
        predicate: Success judgment over the produced value
        alias: Optional label for log correlation (overrides the schedule's)
    """

    operation: Callable[[], T]
    predicate: Callable[[T], bool]
    alias: str | None = None


@dataclass(frozen=True)
class EvaluatedAttempt:
    """
    Outcome of one poll attempt, handed to the evaluation listener.

    Attributes:
        attempt_number: 1-indexed attempt counter
        elapsed_ms: Time since the first evaluation started
        remaining_ms: Budget left (never negative)
        poll_interval_ms: Interval that follows this attempt
        satisfied: Whether the condition held
        value: Observed value, or the transient error raised by the operation
        alias: Label of the poll loop
    """

    attempt_number: int
    elapsed_ms: int
    remaining_ms: int
    poll_interval_ms: int
    satisfied: bool
    value: Any
    alias: str | None = None

    def __post_init__(self) -> None:
        """Validate attempt invariants."""
        if self.attempt_number < 1:
            raise ValueError("attempt_number must be >= 1")

        if self.elapsed_ms < 0:
            raise ValueError("elapsed_ms must be >= 0")


class EvaluationListener(Protocol):
    """Receives exactly one event per poll attempt."""

    def condition_evaluated(self, attempt: EvaluatedAttempt) -> None:
        ...


class LoggingEvaluationListener:
    """
    Logs every evaluated attempt as a structured event.

    The same value-to-string conversion is applied whether or not the
    condition was satisfied; only the message differs.
    """

    def __init__(self, value_to_string: Callable[[Any], str] = str):
        self.value_to_string = value_to_string

    def condition_evaluated(self, attempt: EvaluatedAttempt) -> None:
        value = self._to_string(attempt.value)
        log = logger.bind(alias=attempt.alias) if attempt.alias else logger

        if attempt.satisfied:
            log.info(
                f"condition satisfied after {attempt.attempt_number} attempt(s) "
                f"in {attempt.elapsed_ms}ms",
                attempts=attempt.attempt_number,
                elapsed_ms=attempt.elapsed_ms,
                value=value,
            )
        else:
            log.info(
                f"condition not satisfied after {attempt.attempt_number} attempt(s)",
                attempts=attempt.attempt_number,
                poll_interval_ms=attempt.poll_interval_ms,
                elapsed_ms=attempt.elapsed_ms,
                remaining_ms=attempt.remaining_ms,
                value=value,
            )

    def _to_string(self, value: Any) -> str:
        if isinstance(value, BaseException):
            return f"{type(value).__name__}: {value}"
        return self.value_to_string(value)


class ConditionEvaluator:
    """
    Runs one condition through the poll loop of a schedule.

    The clock and sleep functions are injectable so tests can drive the
    loop with a fake clock. The evaluator keeps no state between calls.

    Attributes:
        schedule: Poll schedule governing delays, growth and budget
        listener: Sink for per-attempt events
    """

    def __init__(
        self,
        schedule: PollSchedule,
        listener: EvaluationListener | None = None,
        clock: Callable[[], float] = time.monotonic,
        sleep: Callable[[float], None] = time.sleep,
    ):
        self.schedule = schedule
        self.listener = listener or LoggingEvaluationListener(schedule.value_to_string)
        self._clock = clock
        self._sleep = sleep

    def evaluate(self, condition: Condition[T]) -> T:
        """
        Poll the condition until it is satisfied.

        Args:
            condition: Operation + predicate to evaluate

        Returns:
            The first value that satisfied the predicate

        Raises:
            ConditionTimeout: Budget exhausted before the condition held
            Exception: Any non-retryable error raised by the operation or predicate
        """
        schedule = self.schedule
        alias = condition.alias or schedule.alias

        if schedule.poll_delay_ms > 0:
            logger.debug("Delaying first poll", alias=alias, poll_delay_ms=schedule.poll_delay_ms)
            self._sleep(schedule.poll_delay_ms / 1000)

        start = self._clock()
        attempt = 0
        last_value: Any = None
        last_error: BaseException | None = None

        while True:
            attempt += 1
            interval_ms = schedule.interval_for(attempt)
            satisfied = False

            try:
                value: Any = condition.operation()
                last_value, last_error = value, None
                satisfied = bool(condition.predicate(value))
            except Exception as e:
                if not schedule.is_retryable(e):
                    logger.warning(
                        "Non-retryable error, aborting poll loop",
                        alias=alias,
                        attempt=attempt,
                        error_type=type(e).__name__,
                        error=str(e),
                    )
                    raise

                last_error = e
                value = e
                error_kind = kind_of(e)
                logger.info(
                    "Transient error, will retry",
                    alias=alias,
                    attempt=attempt,
                    error_kind=error_kind.value if error_kind else None,
                    error_type=type(e).__name__,
                    error=str(e),
                )
                if settings.PROMETHEUS_ENABLED and error_kind is not None:
                    transient_errors_total.labels(kind=error_kind.value).inc()

            elapsed_ms = self._elapsed_ms(start)
            self.listener.condition_evaluated(
                EvaluatedAttempt(
                    attempt_number=attempt,
                    elapsed_ms=elapsed_ms,
                    remaining_ms=max(schedule.timeout_ms - elapsed_ms, 0),
                    poll_interval_ms=int(interval_ms),
                    satisfied=satisfied,
                    value=value,
                    alias=alias,
                )
            )
            if settings.PROMETHEUS_ENABLED:
                condition_evaluations_total.labels(satisfied=str(satisfied).lower()).inc()

            if satisfied:
                if settings.PROMETHEUS_ENABLED:
                    condition_wait_seconds.observe(elapsed_ms / 1000)
                return value

            # Deadline check happens before the next attempt starts
            if elapsed_ms + interval_ms >= schedule.timeout_ms:
                if settings.PROMETHEUS_ENABLED:
                    condition_timeouts_total.inc()
                raise ConditionTimeout(
                    attempts=attempt,
                    elapsed_ms=elapsed_ms,
                    timeout_ms=schedule.timeout_ms,
                    last_value=last_value,
                    last_error=last_error,
                    alias=alias,
                )

            self._sleep(interval_ms / 1000)

    def _elapsed_ms(self, start: float) -> int:
        return int(round((self._clock() - start) * 1000))
