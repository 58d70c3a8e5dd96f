"""
Synchronous HTTP client for the service under test.

Wraps an httpx.Client and exposes one RequestExecutor per verb, so tests
read as ``client.get("/content/page.json").with_expected_status(200).execute()``.

Features:
- Basic authentication, disabled per request on demand
- Per-request redirect policy and streaming
- Transport failures tagged as ErrorKind.IO, unexpected status as ErrorKind.CLIENT
- Request/response logging through HttpLoggingHook
"""

from collections.abc import Iterable
from typing import TYPE_CHECKING

import httpx
import structlog

from resilient_client.config import Settings
from resilient_client.config import settings as default_settings
from resilient_client.http.exceptions import (
    ClientError,
    RequestTimeoutError,
    TransportIOError,
)
from resilient_client.http.interceptors import HttpLoggingHook
from resilient_client.monitoring.metrics import http_requests_total

if TYPE_CHECKING:
    from resilient_client.executor import RequestExecutor

logger = structlog.get_logger(__name__)


class ResilientClient:
    """
    HTTP client whose verb helpers return resilient request executors.

    Attributes:
        base_url: Base URL of the service under test
        settings: Settings used for timeouts, auth, logging and schedules
    """

    def __init__(
        self,
        base_url: str | None = None,
        user: str | None = None,
        password: str | None = None,
        settings: Settings | None = None,
        transport: httpx.BaseTransport | None = None,
    ):
        """
        Initialize the client.

        Args:
            base_url: Service URL (default: settings.BASE_URL)
            user: Basic-auth user (default: settings.HTTP_USER; None disables auth)
            password: Basic-auth password (default: settings.HTTP_PASSWORD)
            settings: Settings instance (default: global settings)
            transport: Custom httpx transport (e.g. httpx.MockTransport in tests)
        """
        self.settings = settings or default_settings
        self.base_url = (base_url or self.settings.BASE_URL).rstrip("/")

        user = user if user is not None else self.settings.HTTP_USER
        password = password if password is not None else self.settings.HTTP_PASSWORD
        self._auth = httpx.BasicAuth(user, password or "") if user else None

        event_hooks: dict[str, list] = {"request": [], "response": []}
        if self.settings.HTTP_LOGGING_ENABLED:
            event_hooks["response"].append(HttpLoggingHook(self.settings))

        self._client = httpx.Client(
            base_url=self.base_url,
            timeout=httpx.Timeout(self.settings.HTTP_TIMEOUT),
            follow_redirects=self.settings.FOLLOW_REDIRECTS,
            event_hooks=event_hooks,
            transport=transport,
        )

        logger.info(
            "Resilient client initialized",
            base_url=self.base_url,
            authenticated=self._auth is not None,
            timeout=self.settings.HTTP_TIMEOUT,
        )

    # === Verb helpers ===

    def get(self, path: str) -> "RequestExecutor":
        return self.request("GET", path)

    def post(self, path: str) -> "RequestExecutor":
        return self.request("POST", path)

    def put(self, path: str) -> "RequestExecutor":
        return self.request("PUT", path)

    def patch(self, path: str) -> "RequestExecutor":
        return self.request("PATCH", path)

    def delete(self, path: str) -> "RequestExecutor":
        return self.request("DELETE", path)

    def head(self, path: str) -> "RequestExecutor":
        return self.request("HEAD", path)

    def options(self, path: str) -> "RequestExecutor":
        return self.request("OPTIONS", path)

    def trace(self, path: str) -> "RequestExecutor":
        return self.request("TRACE", path)

    def request(self, method: str, path: str) -> "RequestExecutor":
        """Start a resilient request for any method."""
        from resilient_client.executor import RequestExecutor

        return RequestExecutor(self, method).path(path)

    # === Transport ===

    def build_request(self, method: str, path: str, **kwargs) -> httpx.Request:
        """Build an httpx request against the base URL (see httpx.Client.build_request)."""
        return self._client.build_request(method, path, **kwargs)

    def do_request(
        self,
        request: httpx.Request,
        expected_status: Iterable[int] = (),
        stream: bool = False,
        follow_redirects: bool | None = None,
        authenticate: bool = True,
    ) -> httpx.Response:
        """
        Send a built request.

        Args:
            request: Request to send
            expected_status: Accepted status codes (empty accepts any)
            stream: Leave the body unread; caller must close the response
            follow_redirects: Override the client's redirect policy
            authenticate: Send basic-auth credentials

        Returns:
            The response

        Raises:
            ClientError: Status not in expected_status
            RequestTimeoutError: Request exceeded HTTP_TIMEOUT
            TransportIOError: Network-level failure
        """
        follow = self.settings.FOLLOW_REDIRECTS if follow_redirects is None else follow_redirects
        auth = self._auth if authenticate else None

        try:
            response = self._client.send(
                request, auth=auth, follow_redirects=follow, stream=stream
            )
        except httpx.TimeoutException as e:
            raise RequestTimeoutError(
                f"Timeout sending {request.method} {request.url}",
                details={"url": str(request.url), "timeout": self.settings.HTTP_TIMEOUT},
            ) from e
        except httpx.TransportError as e:
            raise TransportIOError(
                f"Error sending {request.method} {request.url}: {e}",
                details={"url": str(request.url), "error_type": type(e).__name__},
            ) from e

        if self.settings.PROMETHEUS_ENABLED:
            http_requests_total.labels(method=request.method, status=str(response.status_code)).inc()

        expected = frozenset(expected_status)
        if expected and response.status_code not in expected:
            body = None
            if stream:
                response.close()
            else:
                body = response.text
            raise ClientError(
                f"Expected HTTP status: {sorted(expected)} but got: {response.status_code} "
                f"for {request.method} {request.url.path}",
                status_code=response.status_code,
                body=body,
            )

        return response

    def close(self) -> None:
        """Close pooled connections."""
        self._client.close()

    def __enter__(self) -> "ResilientClient":
        return self

    def __exit__(self, *exc_info) -> None:
        self.close()

    def __repr__(self) -> str:
        return f"{self.__class__.__name__}(base_url={self.base_url})"
