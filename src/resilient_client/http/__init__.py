"""HTTP transport for the service under test (httpx based)."""

from resilient_client.http.client import ResilientClient
from resilient_client.http.exceptions import (
    ClientError,
    RequestTimeoutError,
    TransportIOError,
)
from resilient_client.http.interceptors import HttpLoggingHook

__all__ = [
    "ResilientClient",
    "HttpLoggingHook",
    "ClientError",
    "TransportIOError",
    "RequestTimeoutError",
]
