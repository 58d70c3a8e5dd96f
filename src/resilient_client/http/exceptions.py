"""
Custom exceptions for the HTTP transport layer.

These exceptions tag transport failures with an ErrorKind so that poll
schedules can tell transient failures (retry) from fatal ones (abort).
"""

from typing import Any

from resilient_client.exceptions import TaggedError
from resilient_client.models.enums import ErrorKind


class ClientError(TaggedError):
    """
    Raised when the service answers with an unexpected status code.

    Retried by default: an eventually-consistent backend commonly answers
    404 or 503 until the resource becomes visible.
    """

    kind = ErrorKind.CLIENT

    def __init__(
        self,
        message: str,
        status_code: int | None = None,
        body: str | None = None,
        details: dict[str, Any] | None = None,
    ):
        details = dict(details or {})
        if status_code is not None:
            details["status_code"] = status_code
        if body:
            # First 500 chars only, avoid excessive logging
            details["body_snippet"] = body[:500]
        super().__init__(message, details)
        self.status_code = status_code
        self.body = body


class TransportIOError(TaggedError):
    """
    Raised when unable to talk to the service at all.

    Includes connection refused, resets, DNS failures, protocol errors.
    """

    kind = ErrorKind.IO


class RequestTimeoutError(TransportIOError):
    """
    Raised when a single request exceeds the HTTP timeout.

    Separate from the poll budget: this is the per-request socket timeout.
    """
