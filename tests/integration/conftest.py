"""Integration test fixtures (in-process backend and live-service checks).

Provides an eventually-consistent content repository served through
httpx.MockTransport, and a check that skips live tests when the service
configured in BASE_URL is not reachable.
"""

import json
import time

import httpx
import pytest

from resilient_client.config import Settings
from resilient_client.http.client import ResilientClient


class EventuallyConsistentRepository:
    """Content store whose writes become readable only after a lag.

    POST /content/<name> stores a page, DELETE removes it. Reads of
    /content/<name>.json answer 404 until the write is older than the lag.
    """

    def __init__(self, lag_seconds: float = 0.05):
        self.lag_seconds = lag_seconds
        self.pages: dict[str, tuple[float, dict]] = {}
        self.writes = 0

    def __call__(self, request: httpx.Request) -> httpx.Response:
        path = request.url.path

        if request.method == "GET" and path.endswith(".json"):
            entry = self.pages.get(path[: -len(".json")])
            if entry is None or time.monotonic() - entry[0] < self.lag_seconds:
                return httpx.Response(404, text="Not Found")
            return httpx.Response(200, json=entry[1])

        if request.method == "POST":
            self.writes += 1
            fields = dict(httpx.QueryParams(request.content.decode()))
            self.pages[path] = (time.monotonic(), {"jcr:primaryType": "cq:Page", **fields})
            return httpx.Response(201, text=json.dumps({"path": path}))

        if request.method == "DELETE":
            self.writes += 1
            if self.pages.pop(path, None) is None:
                return httpx.Response(404)
            return httpx.Response(200)

        return httpx.Response(405)


@pytest.fixture
def repository() -> EventuallyConsistentRepository:
    return EventuallyConsistentRepository()


@pytest.fixture
def repository_client(repository, test_settings: Settings):
    """Client talking to the in-process repository."""
    with ResilientClient(settings=test_settings, transport=httpx.MockTransport(repository)) as client:
        yield client


@pytest.fixture(scope="session")
def live_settings() -> Settings:
    return Settings()


@pytest.fixture(scope="session")
def check_service(live_settings: Settings):
    """Check if the service at BASE_URL is available.

    Skips tests if the service is not reachable.
    """
    try:
        httpx.get(live_settings.BASE_URL, timeout=5)
    except httpx.HTTPError as e:
        pytest.skip(f"Service not available at {live_settings.BASE_URL}: {e}")
