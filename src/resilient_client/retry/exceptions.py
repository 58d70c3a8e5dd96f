"""
Poll engine exceptions.

Failure taxonomy surfaced to callers:
- ConditionTimeout: condition never held within the schedule's budget
- ValidationFailure: the single failure type tests catch; wraps any cause
- MutationFailure: the one-shot mutating request itself raised
- VerificationTimeout: the mutation succeeded but was never observed

Transient errors never reach the caller; they are logged and retried.
"""

from typing import Any

from resilient_client.exceptions import TaggedError
from resilient_client.models.enums import ErrorKind


class ConditionTimeout(TaggedError):
    """
    Raised when a condition is not satisfied within the timeout budget.

    Attributes:
        attempts: Number of evaluations performed
        elapsed_ms: Time from the first evaluation to the timeout decision
        last_value: Value returned by the last successful operation call (if any)
        last_error: Transient error raised by the last attempt (if any)
        alias: Alias of the poll loop
    """

    kind = ErrorKind.TIMEOUT

    def __init__(
        self,
        attempts: int,
        elapsed_ms: int,
        timeout_ms: int,
        last_value: Any = None,
        last_error: BaseException | None = None,
        alias: str | None = None,
    ) -> None:
        self.attempts = attempts
        self.elapsed_ms = elapsed_ms
        self.timeout_ms = timeout_ms
        self.last_value = last_value
        self.last_error = last_error
        self.alias = alias

        details: dict[str, Any] = {
            "attempts": attempts,
            "elapsed_ms": elapsed_ms,
            "timeout_ms": timeout_ms,
        }
        if alias:
            details["alias"] = alias
        if last_error is not None:
            details["last_error"] = f"{type(last_error).__name__}: {last_error}"

        prefix = f"[{alias}] " if alias else ""
        super().__init__(
            f"{prefix}condition not satisfied after {attempts} attempt(s) within {timeout_ms}ms",
            details,
        )


class ValidationFailure(TaggedError):
    """
    Raised to the test when a request or condition did not validate.

    Wraps the original cause (timeout, fatal transport error, unmet
    predicate) together with an optional descriptive message supplied by
    the test. The cause is also chained as ``__cause__``.
    """

    kind = ErrorKind.VALIDATION

    def __init__(
        self,
        message: str,
        cause: BaseException | None = None,
        details: dict[str, Any] | None = None,
    ) -> None:
        details = dict(details or {})
        if cause is not None:
            details.setdefault("cause", type(cause).__name__)
        super().__init__(message, details)
        self.cause = cause


class MutationFailure(ValidationFailure):
    """Raised when the one-shot mutating request fails; nothing was verified."""

    kind = ErrorKind.MUTATION


class VerificationTimeout(ValidationFailure):
    """Raised when a mutation succeeded but was never reflected in time."""
