"""Unit test fixtures (fakes and stubs).

Provides a fake clock so poll loops run instantly and deterministically,
and a recording listener to inspect per-attempt events.
"""

import pytest

from resilient_client.retry.evaluator import EvaluatedAttempt


class FakeClock:
    """Monotonic clock whose time only moves when sleep() or advance() is called."""

    def __init__(self, start: float = 0.0):
        self.now = start
        self.sleeps: list[float] = []

    def __call__(self) -> float:
        return self.now

    def sleep(self, seconds: float) -> None:
        self.sleeps.append(seconds)
        self.now += seconds

    def advance(self, seconds: float) -> None:
        self.now += seconds


class RecordingListener:
    """Evaluation listener that keeps every attempt."""

    def __init__(self):
        self.attempts: list[EvaluatedAttempt] = []

    def condition_evaluated(self, attempt: EvaluatedAttempt) -> None:
        self.attempts.append(attempt)


class Sequence:
    """Operation returning (or raising) scripted values, counting calls."""

    def __init__(self, *outcomes):
        self.outcomes = list(outcomes)
        self.calls = 0

    def __call__(self):
        outcome = self.outcomes[min(self.calls, len(self.outcomes) - 1)]
        self.calls += 1
        if isinstance(outcome, BaseException):
            raise outcome
        return outcome


@pytest.fixture
def fake_clock() -> FakeClock:
    return FakeClock()


@pytest.fixture
def recording_listener() -> RecordingListener:
    return RecordingListener()


@pytest.fixture
def sequence():
    """Factory fixture for scripted operations.

    Usage:
        def test_something(sequence):
            op = sequence(None, None, "value")
    """
    return Sequence
