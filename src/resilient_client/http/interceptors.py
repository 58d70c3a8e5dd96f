"""
HTTP exchange logging.

HttpLoggingHook is registered as an httpx response event hook and logs one
line per exchange: request line, status code, reason phrase on errors, and,
when enabled in settings, headers and bodies of request and response.
"""

import httpx
import structlog

from resilient_client.config import Settings

logger = structlog.get_logger(__name__)


class HttpLoggingHook:
    """
    httpx response hook that logs every request/response pair.

    Attributes:
        settings: Source of the HTTP_LOG_* switches and excluded headers
    """

    def __init__(self, settings: Settings):
        self.settings = settings
        self.excluded_headers = {name.lower() for name in settings.HTTP_LOG_EXCLUDED_HEADERS}

    def __call__(self, response: httpx.Response) -> None:
        request = response.request
        fields: dict[str, object] = {
            "method": request.method,
            "url": str(request.url),
            "status_code": response.status_code,
        }

        if response.status_code >= 400:
            fields["reason"] = response.reason_phrase

        if self.settings.HTTP_LOG_REQUEST_HEADERS:
            fields["request_headers"] = self._headers(request.headers)

        if self.settings.HTTP_LOG_REQUEST_ENTITY and request.method not in ("GET", "HEAD"):
            fields["request_entity"] = request.read().decode("utf-8", errors="replace")

        if self.settings.HTTP_LOG_RESPONSE_HEADERS:
            fields["response_headers"] = self._headers(response.headers)

        if self.settings.HTTP_LOG_RESPONSE_ENTITY:
            fields["response_entity"] = response.read().decode("utf-8", errors="replace")

        logger.info(f"{request.method} {request.url.raw_path.decode('ascii')}", **fields)

    def _headers(self, headers: httpx.Headers) -> dict[str, str]:
        return {
            name: value
            for name, value in headers.items()
            if name.lower() not in self.excluded_headers
        }
