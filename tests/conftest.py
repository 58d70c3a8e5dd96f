"""Shared test fixtures and configuration for all tests.

This conftest.py provides common fixtures used across unit and integration tests.
"""

from collections.abc import Callable

import httpx
import pytest

from resilient_client.config import Settings
from resilient_client.http.client import ResilientClient


@pytest.fixture
def test_settings() -> Settings:
    """Test settings with fast schedules and no network defaults.

    Override specific settings in individual tests as needed:
        def test_something(test_settings):
            test_settings.RETRY_TIMEOUT_MS = 500
    """
    return Settings(
        # === Application ===
        APP_NAME="Resilient Client (Test)",
        LOG_LEVEL="DEBUG",
        ENVIRONMENT="development",

        # === Target Service ===
        BASE_URL="http://testserver",
        HTTP_USER="admin",
        HTTP_PASSWORD="admin",
        HTTP_TIMEOUT=5.0,

        # === Schedules (milliseconds, kept short for tests) ===
        RETRY_POLL_DELAY_MS=0,
        RETRY_POLL_INTERVAL_MS=10,
        RETRY_MULTIPLIER=1.0,
        RETRY_TIMEOUT_MS=300,
        VERIFY_POLL_DELAY_MS=0,
        VERIFY_POLL_INTERVAL_MS=10,
        VERIFY_MULTIPLIER=1.0,
        VERIFY_TIMEOUT_MS=300,

        # === Monitoring ===
        PROMETHEUS_ENABLED=False,
    )


@pytest.fixture
def make_client(test_settings: Settings) -> Callable[..., ResilientClient]:
    """Factory fixture to create a ResilientClient over an httpx.MockTransport.

    Usage:
        def test_something(make_client):
            client = make_client(lambda request: httpx.Response(200, text="ok"))
    """
    clients: list[ResilientClient] = []

    def _create(
        handler: Callable[[httpx.Request], httpx.Response],
        settings: Settings | None = None,
    ) -> ResilientClient:
        client = ResilientClient(
            settings=settings or test_settings,
            transport=httpx.MockTransport(handler),
        )
        clients.append(client)
        return client

    yield _create

    for client in clients:
        client.close()
