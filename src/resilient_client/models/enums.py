"""
Enumerations for the resilient client.

All enums are closed taxonomies - no values outside these sets are permitted.
"""

from enum import Enum


class ErrorKind(str, Enum):
    """
    Closed taxonomy of failure kinds.

    Every error raised by this package carries exactly one kind. Poll
    schedules decide whether an error is transient by checking its kind
    against their retryable set, never by exception class.
    """

    CLIENT = "client"  # Request completed with an unexpected status
    IO = "io"  # Network failure, connection reset, read timeout
    TIMEOUT = "timeout"  # Poll budget exhausted
    VALIDATION = "validation"  # Condition failed or wrapped failure
    MUTATION = "mutation"  # One-shot mutating request raised

    @classmethod
    def parse(cls, values: "list[str] | tuple[str, ...]") -> frozenset["ErrorKind"]:
        """Parse configured kind names (case-insensitive) into a frozenset."""
        return frozenset(cls(value.lower()) for value in values)
