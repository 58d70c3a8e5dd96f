"""
Immutable poll schedules.

A PollSchedule fixes every timing decision of a poll loop: how long to wait
before the first evaluation, the first poll interval and how it grows, the
total budget, and which error kinds count as transient. Schedules are never
mutated; every ``with_*`` method returns a new instance, so one schedule may
be shared read-only between tests and threads.
"""

from collections.abc import Callable
from dataclasses import dataclass, field, replace
from typing import Any

from resilient_client.config import Settings
from resilient_client.exceptions import kind_of
from resilient_client.models.enums import ErrorKind

DEFAULT_RETRYABLE_KINDS = frozenset({ErrorKind.CLIENT, ErrorKind.IO})


@dataclass(frozen=True)
class PollSchedule:
    """
    Timing configuration of a poll loop.

    Attributes:
        poll_delay_ms: Wait before the first evaluation
        poll_interval_ms: Interval after the first unsatisfied attempt (seed)
        multiplier: Growth factor applied to the interval after each attempt
        timeout_ms: Total budget measured from the first evaluation
        retryable_kinds: Error kinds swallowed and retried
        alias: Label used to correlate log events of one loop
        value_to_string: Conversion of the observed value for log events
    """

    poll_delay_ms: int = 0
    poll_interval_ms: int = 1000
    multiplier: float = 2.0
    timeout_ms: int = 30000
    retryable_kinds: frozenset[ErrorKind] = DEFAULT_RETRYABLE_KINDS
    alias: str | None = None
    value_to_string: Callable[[Any], str] = field(default=str, compare=False)

    def __post_init__(self) -> None:
        """Validate schedule invariants."""
        if self.poll_delay_ms < 0:
            raise ValueError("poll_delay_ms must be >= 0")

        if self.poll_interval_ms < 0:
            raise ValueError("poll_interval_ms must be >= 0")

        if self.multiplier < 1:
            raise ValueError("multiplier must be >= 1")

        if self.timeout_ms <= 0:
            raise ValueError("timeout_ms must be > 0")

        # Accept any iterable of kinds, store a frozenset
        object.__setattr__(self, "retryable_kinds", frozenset(self.retryable_kinds))

    @classmethod
    def from_settings(cls, settings: Settings) -> "PollSchedule":
        """Build the read-path retry schedule from settings."""
        return cls(
            poll_delay_ms=settings.RETRY_POLL_DELAY_MS,
            poll_interval_ms=settings.RETRY_POLL_INTERVAL_MS,
            multiplier=settings.RETRY_MULTIPLIER,
            timeout_ms=settings.RETRY_TIMEOUT_MS,
            retryable_kinds=ErrorKind.parse(settings.RETRY_ON),
        )

    @classmethod
    def verification_from_settings(cls, settings: Settings) -> "PollSchedule":
        """Build the write-path verification schedule from settings."""
        return cls(
            poll_delay_ms=settings.VERIFY_POLL_DELAY_MS,
            poll_interval_ms=settings.VERIFY_POLL_INTERVAL_MS,
            multiplier=settings.VERIFY_MULTIPLIER,
            timeout_ms=settings.VERIFY_TIMEOUT_MS,
            retryable_kinds=ErrorKind.parse(settings.VERIFY_RETRY_ON),
        )

    def interval_for(self, attempt: int) -> float:
        """
        Poll interval (ms) following the given attempt.

        Equals ``poll_interval_ms * multiplier ** (attempt - 1)``, capped at
        ``timeout_ms``: any interval reaching the budget ends the loop, so
        growth past it never changes the outcome.
        """
        if attempt < 1:
            raise ValueError("attempt must be >= 1")

        if self.poll_interval_ms == 0 or self.multiplier == 1:
            return float(self.poll_interval_ms)

        try:
            interval = self.poll_interval_ms * float(self.multiplier) ** (attempt - 1)
        except OverflowError:
            return float(self.timeout_ms)
        return min(interval, float(self.timeout_ms))

    def is_retryable(self, error: BaseException) -> bool:
        """True when the error is tagged with a kind in the retryable set."""
        return kind_of(error) in self.retryable_kinds

    def with_poll_delay(self, poll_delay_ms: int) -> "PollSchedule":
        return replace(self, poll_delay_ms=poll_delay_ms)

    def with_poll_interval(self, poll_interval_ms: int) -> "PollSchedule":
        return replace(self, poll_interval_ms=poll_interval_ms)

    def with_multiplier(self, multiplier: float) -> "PollSchedule":
        return replace(self, multiplier=multiplier)

    def with_timeout(self, timeout_ms: int) -> "PollSchedule":
        return replace(self, timeout_ms=timeout_ms)

    def with_retry_on(self, *kinds: ErrorKind) -> "PollSchedule":
        return replace(self, retryable_kinds=frozenset(kinds))

    def with_alias(self, alias: str | None) -> "PollSchedule":
        return replace(self, alias=alias)

    def with_value_to_string(self, value_to_string: Callable[[Any], str]) -> "PollSchedule":
        return replace(self, value_to_string=value_to_string)

    def describe(self) -> dict[str, Any]:
        """Log-friendly summary of the schedule."""
        return {
            "poll_delay_ms": self.poll_delay_ms,
            "poll_interval_ms": self.poll_interval_ms,
            "multiplier": self.multiplier,
            "timeout_ms": self.timeout_ms,
            "retry_on": sorted(kind.value for kind in self.retryable_kinds),
            "alias": self.alias,
        }


DEFAULT_RETRY_SCHEDULE = PollSchedule()

DEFAULT_VERIFICATION_SCHEDULE = PollSchedule(poll_delay_ms=2000)
