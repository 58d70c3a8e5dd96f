"""
Request executor: the façade test authors use.

A RequestExecutor collects request details and expectations through chained
calls, then runs the request along one of three paths:

1. Retry disabled: send once, check the composed predicate, fail immediately
2. Retry enabled (default): poll with RetryDriver until the predicate holds
3. Verifier set: send through the retry path exactly once, then poll the
   verifier with VerificationProtocol until the write is reflected

Every failure reaches the test as a ValidationFailure (MutationFailure and
VerificationTimeout keep their type) carrying the failure message and cause.

Usage:
    response = (
        client.post("/content/page")
        .with_form_parameters({"title": "Home"})
        .with_expected_status(200, 201)
        .with_verifier(lambda: page_exists("/content/page"), alias="page created")
        .execute()
    )
"""

import json
from collections.abc import Callable, Iterable, Mapping
from dataclasses import dataclass, field
from json import JSONDecodeError
from typing import TYPE_CHECKING, Any, TypeVar

import httpx
import structlog
from pydantic import BaseModel
from pydantic import ValidationError as PydanticValidationError

from resilient_client.http.exceptions import TransportIOError
from resilient_client.models.multipart import MultiPartNameValuePair
from resilient_client.predicates.composition import AllOf, all_of
from resilient_client.predicates.document import JsonDocument
from resilient_client.predicates.json_verifiers import JsonNodeVerifier, json_predicate
from resilient_client.predicates.response import BodyContainsPredicate, StatusCodePredicate
from resilient_client.retry.driver import RetryDriver
from resilient_client.retry.exceptions import ValidationFailure
from resilient_client.retry.schedule import PollSchedule
from resilient_client.retry.verification import VerificationProtocol

if TYPE_CHECKING:
    from resilient_client.http.client import ResilientClient

logger = structlog.get_logger(__name__)

M = TypeVar("M", bound=BaseModel)

DEFAULT_FAILURE_MESSAGE = "error executing request"
UNMET_CONDITION_MESSAGE = "HTTP response does not meet expected condition"


def describe_value(value: Any) -> str:
    """Log rendering of polled values: status line for responses, str() otherwise."""
    if isinstance(value, httpx.Response):
        return f"{value.http_version} {value.status_code} {value.reason_phrase}"
    return str(value)


def read_body(response: httpx.Response) -> bool:
    """
    Load a streamed body so content checks can see it.

    Draining the stream also closes it. Read failures are IO errors, so a
    poll loop retries them like any other transport failure.
    """
    try:
        response.read()
    except httpx.TransportError as e:
        request = response.request
        raise TransportIOError(
            f"Error reading body of {request.method} {request.url}: {e}",
            details={"url": str(request.url), "error_type": type(e).__name__},
        ) from e
    return True


@dataclass
class RequestState:
    """
    Builder state accumulated by a RequestExecutor.

    Owned by a single executor; never shared between executors.
    """

    method: str
    path: str = "/"
    params: list[tuple[str, str]] = field(default_factory=list)
    headers: list[tuple[str, str]] = field(default_factory=list)
    entity: dict[str, Any] = field(default_factory=dict)
    charset: str = "utf-8"
    follow_redirects: bool | None = None
    authenticate: bool = True
    stream: bool = False

    expected_status: tuple[int, ...] = ()
    expected_content: str | None = None
    expected_condition: Callable[[httpx.Response], bool] | None = None

    verifier: Callable[[], bool] | None = None
    verifier_alias: str | None = None
    disable_retry: bool = False
    retry_schedule: PollSchedule | None = None
    verification_schedule: PollSchedule | None = None
    alias: str | None = None
    failure_message: str | None = None


class RequestExecutor:
    """
    Fluent, resilient execution of one HTTP request.

    The request is built once, on first use, and reused for every attempt.

    Attributes:
        client: Client used to build and send the request
        state: Accumulated builder state
    """

    def __init__(self, client: "ResilientClient", method: str):
        self.client = client
        self.state = RequestState(method=method.upper())
        self._request: httpx.Request | None = None

    # === Request ===

    def path(self, path: str) -> "RequestExecutor":
        self.state.path = path
        return self

    def add_parameter(self, name: str, value: str) -> "RequestExecutor":
        self.state.params.append((name, value))
        return self

    def with_parameters(
        self, parameters: Mapping[str, str] | Iterable[tuple[str, str]]
    ) -> "RequestExecutor":
        items = parameters.items() if isinstance(parameters, Mapping) else parameters
        self.state.params.extend(items)
        return self

    def add_header(self, name: str, value: str) -> "RequestExecutor":
        self.state.headers.append((name, value))
        return self

    def with_headers(
        self, headers: Mapping[str, str] | Iterable[tuple[str, str]]
    ) -> "RequestExecutor":
        items = headers.items() if isinstance(headers, Mapping) else headers
        self.state.headers.extend(items)
        return self

    def with_charset(self, charset: str) -> "RequestExecutor":
        self.state.charset = charset
        return self

    def with_form_parameters(self, form_parameters: Mapping[str, str]) -> "RequestExecutor":
        self.state.entity = {"data": dict(form_parameters)}
        return self

    def with_entity(self, content: str | bytes, content_type: str | None = None) -> "RequestExecutor":
        if isinstance(content, str):
            content = content.encode(self.state.charset)
        self.state.entity = {"content": content}
        if content_type:
            self.state.headers.append(("Content-Type", content_type))
        return self

    def with_json_entity(self, obj: Any) -> "RequestExecutor":
        """Serialize obj (pydantic models included) as the JSON request body."""
        if isinstance(obj, BaseModel):
            body = obj.model_dump_json()
        else:
            body = json.dumps(obj)
        return self.with_entity(body, f"application/json; charset={self.state.charset}")

    def with_multipart_entity(
        self, parameters: Mapping[str, str] | Iterable[MultiPartNameValuePair]
    ) -> "RequestExecutor":
        if isinstance(parameters, Mapping):
            parts = [MultiPartNameValuePair(name=name, value=value) for name, value in parameters.items()]
        else:
            parts = list(parameters)

        files = [
            (part.name, (None, part.encoded_value(), part.content_type()))
            for part in parts
        ]
        self.state.entity = {"files": files}
        return self

    def follow_redirects(self, follow: bool) -> "RequestExecutor":
        self.state.follow_redirects = follow
        return self

    def disable_authentication(self) -> "RequestExecutor":
        self.state.authenticate = False
        return self

    def stream(self) -> "RequestExecutor":
        """Leave the response body unread; the caller must close the response."""
        self.state.stream = True
        return self

    # === Expectations ===

    def with_expected_status(self, *expected_status: int) -> "RequestExecutor":
        self.state.expected_status = tuple(expected_status)
        return self

    def with_expected_content(self, expected_content: str) -> "RequestExecutor":
        self.state.expected_content = expected_content
        return self

    def with_expected_condition(
        self, expected_condition: Callable[[httpx.Response], bool]
    ) -> "RequestExecutor":
        self.state.expected_condition = expected_condition
        return self

    def with_expected_json(self, verifier: JsonNodeVerifier) -> "RequestExecutor":
        return self.with_expected_condition(json_predicate(verifier))

    # === Resilience ===

    def disable_retry(self) -> "RequestExecutor":
        self.state.disable_retry = True
        return self

    def with_retry_schedule(self, schedule: PollSchedule) -> "RequestExecutor":
        self.state.retry_schedule = schedule
        return self

    def with_verification_schedule(self, schedule: PollSchedule) -> "RequestExecutor":
        self.state.verification_schedule = schedule
        return self

    def with_verifier(self, verifier: Callable[[], bool], alias: str | None = None) -> "RequestExecutor":
        self.state.verifier = verifier
        self.state.verifier_alias = alias
        return self

    def with_alias(self, alias: str) -> "RequestExecutor":
        self.state.alias = alias
        return self

    def with_failure_message(self, failure_message: str) -> "RequestExecutor":
        self.state.failure_message = failure_message
        return self

    # === Execution ===

    def execute(self, precondition: Callable[[], bool] | None = None) -> httpx.Response | None:
        """
        Execute the request along the configured path.

        Args:
            precondition: Checked first; when false the request is skipped

        Returns:
            The accepted response, or None when the precondition was not met

        Raises:
            ValidationFailure: Any failure (MutationFailure / VerificationTimeout
                on the verification path)
        """
        if precondition is not None:
            try:
                proceed = precondition()
            except Exception as e:
                raise self._failure(e) from e
            if not proceed:
                logger.info("Precondition not met, skipping request", method=self.state.method, path=self.state.path)
                return None

        request = self.build_request()

        if self.state.verifier is None:
            return self._do_execute(request)

        schedule = self._verification_schedule().with_alias(
            self.state.verifier_alias or self.alias(request)
        )
        try:
            return VerificationProtocol(schedule).request_and_verify(
                lambda: self._do_execute(request), self.state.verifier
            )
        except Exception as e:
            raise self._failure(e) from e

    def get_json(self) -> JsonDocument:
        """Execute and parse the response body as a JSON document."""
        response = self._require_response()
        try:
            return JsonDocument.parse(response.text)
        except JSONDecodeError as e:
            raise ValidationFailure("error reading response body as JSON", cause=e) from e

    def get_json_as(self, model: type[M]) -> M:
        """Execute and validate the JSON response body into a pydantic model."""
        response = self._require_response()
        try:
            return model.model_validate_json(response.text)
        except PydanticValidationError as e:
            raise ValidationFailure(f"error reading JSON body as type: {model.__name__}", cause=e) from e

    # === Internals ===

    def build_request(self) -> httpx.Request:
        """Build the request once; later calls return the same object."""
        if self._request is None:
            state = self.state
            self._request = self.client.build_request(
                state.method,
                state.path,
                params=state.params or None,
                headers=state.headers or None,
                **state.entity,
            )
            logger.debug("HTTP request built", method=self._request.method, url=str(self._request.url))
        return self._request

    def alias(self, request: httpx.Request | None = None) -> str:
        """Explicit alias, else "<METHOD> <path>" of the built request."""
        if self.state.alias:
            return self.state.alias
        request = request or self.build_request()
        return f"{request.method} {request.url.path}"

    def success_predicate(self) -> AllOf:
        """Status check AND the optional content and custom checks."""
        state = self.state
        return all_of(
            StatusCodePredicate(*state.expected_status),
            BodyContainsPredicate(state.expected_content) if state.expected_content is not None else None,
            state.expected_condition,
        )

    def _do_execute(self, request: httpx.Request) -> httpx.Response:
        predicate = self.success_predicate()
        if self.state.stream and self._checks_content():
            predicate = all_of(read_body, predicate)

        if self.state.disable_retry:
            try:
                response = self._send(request)
                satisfied = predicate(response)
            except Exception as e:
                raise self._failure(e) from e

            if not satisfied:
                raise ValidationFailure(
                    self.state.failure_message or UNMET_CONDITION_MESSAGE,
                    details={"alias": self.alias(request), "status_code": response.status_code},
                )
            return response

        driver = RetryDriver(self._retry_schedule().with_alias(self.alias(request)))
        try:
            return driver.retry_until_condition(lambda: self._send(request), predicate)
        except Exception as e:
            raise self._failure(e) from e

    def _send(self, request: httpx.Request) -> httpx.Response:
        state = self.state
        return self.client.do_request(
            request,
            expected_status=state.expected_status,
            stream=state.stream,
            follow_redirects=state.follow_redirects,
            authenticate=state.authenticate,
        )

    def _checks_content(self) -> bool:
        return self.state.expected_content is not None or self.state.expected_condition is not None

    def _require_response(self) -> httpx.Response:
        response = self.execute()
        if response is None:
            raise ValidationFailure("no response: precondition not met")
        try:
            response.read()
        except (httpx.TransportError, httpx.StreamError) as e:
            raise ValidationFailure("error reading response body", cause=e) from e
        return response

    def _retry_schedule(self) -> PollSchedule:
        if self.state.retry_schedule is not None:
            return self.state.retry_schedule
        return PollSchedule.from_settings(self.client.settings).with_value_to_string(describe_value)

    def _verification_schedule(self) -> PollSchedule:
        if self.state.verification_schedule is not None:
            return self.state.verification_schedule
        return PollSchedule.verification_from_settings(self.client.settings).with_value_to_string(
            describe_value
        )

    def _failure(self, error: Exception) -> ValidationFailure:
        """Wrap an error with the failure message, keeping the failure subtype."""
        message = self.state.failure_message or DEFAULT_FAILURE_MESSAGE
        failure_type = type(error) if isinstance(error, ValidationFailure) else ValidationFailure
        logger.warning(
            message,
            method=self.state.method,
            path=self.state.path,
            error_type=type(error).__name__,
            error=str(error),
        )
        return failure_type(message, cause=error)
