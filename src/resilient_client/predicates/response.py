"""
Response predicates: status code membership and body containment.

Both predicates are permissive when nothing was configured, so a request
executor can always include them in its composed success condition.
"""

from typing import Protocol

import structlog

logger = structlog.get_logger(__name__)


class ResponseLike(Protocol):
    """Anything exposing a numeric status code and a textual body (httpx.Response fits)."""

    @property
    def status_code(self) -> int:
        ...

    @property
    def text(self) -> str:
        ...


class StatusCodePredicate:
    """
    True when the response status is one of the expected codes.

    With no expected codes configured every status is accepted.
    """

    def __init__(self, *expected_status: int):
        self.expected_status = frozenset(expected_status)

    def __call__(self, response: ResponseLike) -> bool:
        status_code = response.status_code

        if not self.expected_status:
            logger.debug("Expected status not provided, returning true", status_code=status_code)
            return True

        if status_code in self.expected_status:
            logger.debug("Response status code matches", status_code=status_code)
            return True

        logger.warning(
            "Unexpected response status code",
            status_code=status_code,
            expected_status=sorted(self.expected_status),
        )
        return False

    def __repr__(self) -> str:
        return f"StatusCodePredicate({', '.join(str(s) for s in sorted(self.expected_status))})"


class BodyContainsPredicate:
    """
    True when the response body contains the expected substring.

    Matching is exact and case-sensitive. With no expected content
    configured every body is accepted.
    """

    def __init__(self, expected: str | None = None):
        self.expected = expected

    def __call__(self, response: ResponseLike) -> bool:
        if self.expected is None:
            return True

        content = response.text

        if self.expected in content:
            logger.debug("Response body contains expected content", expected=self.expected)
            return True

        logger.warning(
            "Response does not contain expected content",
            expected=self.expected,
            body=content[:500],
        )
        return False

    def __repr__(self) -> str:
        return f"BodyContainsPredicate({self.expected!r})"
