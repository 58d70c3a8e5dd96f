"""
Mutate-then-verify protocol.

A mutating request is sent exactly once; replaying it blindly could apply
the side effect twice. Its effect is then confirmed by polling a separate
verification check under the verification schedule, whose poll delay covers
the backend's propagation latency.

Failure reporting keeps the two phases apart:
- MutationFailure: the write itself failed, nothing was verified
- VerificationTimeout: the write succeeded but was never observed
"""

import time
from collections.abc import Callable
from typing import TypeVar

import structlog

from resilient_client.config import settings
from resilient_client.monitoring.metrics import mutations_total
from resilient_client.retry.evaluator import (
    Condition,
    ConditionEvaluator,
    EvaluationListener,
)
from resilient_client.retry.exceptions import (
    ConditionTimeout,
    MutationFailure,
    VerificationTimeout,
)
from resilient_client.retry.schedule import DEFAULT_VERIFICATION_SCHEDULE, PollSchedule

logger = structlog.get_logger(__name__)

T = TypeVar("T")


def _record(outcome: str) -> None:
    if settings.PROMETHEUS_ENABLED:
        mutations_total.labels(outcome=outcome).inc()


class VerificationProtocol:
    """
    Two-phase helper: one-shot mutation, then polled verification.

    Attributes:
        schedule: Verification schedule (alias is taken from it)
    """

    def __init__(
        self,
        schedule: PollSchedule = DEFAULT_VERIFICATION_SCHEDULE,
        listener: EvaluationListener | None = None,
        clock: Callable[[], float] = time.monotonic,
        sleep: Callable[[float], None] = time.sleep,
    ):
        self.schedule = schedule
        self._listener = listener
        self._clock = clock
        self._sleep = sleep

    def request_and_verify(self, mutate: Callable[[], T], verify: Callable[[], bool]) -> T:
        """
        Perform the mutation once, then wait until it is reflected.

        Args:
            mutate: Mutating operation, invoked exactly once
            verify: Check returning ``True`` once the mutation is observable

        Returns:
            Result of the mutating operation

        Raises:
            MutationFailure: The mutating operation raised
            VerificationTimeout: The mutation was not reflected in time
        """
        log = logger.bind(alias=self.schedule.alias)
        log.info("Sending mutating request")

        try:
            result = mutate()
        except Exception as e:
            log.warning("Mutating request failed", error_type=type(e).__name__, error=str(e))
            _record("mutation_failed")
            raise MutationFailure("error calling request", cause=e) from e

        self._verify(verify)
        return result

    def may_request_and_verify(
        self, conditional_mutate: Callable[[], bool], verify: Callable[[], bool]
    ) -> bool:
        """
        Perform a mutation that may be a no-op, verifying only real changes.

        Args:
            conditional_mutate: Returns whether a change was actually made
            verify: Check returning ``True`` once the change is observable

        Returns:
            Whether a change was made

        Raises:
            MutationFailure: The mutating operation raised
            VerificationTimeout: The change was not reflected in time
        """
        log = logger.bind(alias=self.schedule.alias)
        log.info("Sending conditional mutating request")

        try:
            changed = bool(conditional_mutate())
        except Exception as e:
            log.warning("Mutating request failed", error_type=type(e).__name__, error=str(e))
            _record("mutation_failed")
            raise MutationFailure("error calling request", cause=e) from e

        if not changed:
            log.info("No change made, skipping verification")
            _record("skipped")
            return False

        self._verify(verify)
        return True

    def _verify(self, verify: Callable[[], bool]) -> None:
        logger.info("Verifying request", **self.schedule.describe())

        evaluator = ConditionEvaluator(
            self.schedule, self._listener, clock=self._clock, sleep=self._sleep
        )
        try:
            evaluator.evaluate(Condition(verify, lambda reflected: reflected is True))
        except ConditionTimeout as e:
            _record("verification_timeout")
            raise VerificationTimeout(
                "timeout while waiting for request to be reflected", cause=e
            ) from e

        _record("verified")
