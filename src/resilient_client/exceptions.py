"""
Base exception carrying an error kind.

Poll loops classify failures by kind (see ErrorKind) rather than by
exception class: a collaborator that wants its failures retried must raise
a TaggedError subclass whose kind is in the schedule's retryable set.
Anything else, tagged or not, aborts the loop.
"""

from typing import Any

from resilient_client.models.enums import ErrorKind


class TaggedError(Exception):
    """
    Base exception for all resilient client errors.

    Attributes:
        kind: Error kind used for retry classification
        message: Human-readable error description
        details: Structured error data for logging/metrics
    """

    kind: ErrorKind = ErrorKind.CLIENT

    def __init__(self, message: str, details: dict[str, Any] | None = None):
        """
        Initialize tagged error.

        Args:
            message: Human-readable error description
            details: Structured error data for logging/metrics
        """
        super().__init__(message)
        self.message = message
        self.details = details or {}

    def __str__(self) -> str:
        if self.details:
            return f"{self.message} | Details: {self.details}"
        return self.message


def kind_of(error: BaseException) -> ErrorKind | None:
    """Return the error kind of an exception, or None when untagged."""
    kind = getattr(error, "kind", None)
    return kind if isinstance(kind, ErrorKind) else None
