"""
Unit tests for PollSchedule.

Tests backoff growth, immutability, validation and settings loading.
"""

from dataclasses import FrozenInstanceError

import pytest

from resilient_client.config import Settings
from resilient_client.http.exceptions import ClientError, TransportIOError
from resilient_client.models.enums import ErrorKind
from resilient_client.retry.exceptions import ConditionTimeout
from resilient_client.retry.schedule import (
    DEFAULT_RETRY_SCHEDULE,
    DEFAULT_VERIFICATION_SCHEDULE,
    PollSchedule,
)


# ============================================================================
# Backoff Growth
# ============================================================================


@pytest.mark.parametrize(
    "seed,multiplier,attempt,expected",
    [
        (10, 2.0, 1, 10),
        (10, 2.0, 2, 20),
        (10, 2.0, 3, 40),
        (10, 2.0, 6, 320),
        (50, 1.0, 5, 50),
        (100, 1.5, 3, 225),
    ],
)
def test_interval_grows_geometrically(seed, multiplier, attempt, expected):
    """Test interval before attempt k+1 equals seed * multiplier^(k-1)."""
    schedule = PollSchedule(poll_interval_ms=seed, multiplier=multiplier)

    assert schedule.interval_for(attempt) == pytest.approx(expected)


def test_interval_is_non_decreasing():
    """Test intervals never shrink across attempts."""
    schedule = PollSchedule(poll_interval_ms=7, multiplier=1.3)

    intervals = [schedule.interval_for(k) for k in range(1, 20)]

    assert intervals == sorted(intervals)


def test_zero_interval_never_grows():
    """Test a zero seed stays zero at any attempt."""
    schedule = PollSchedule(poll_interval_ms=0, multiplier=2)

    assert schedule.interval_for(5000) == 0


def test_interval_capped_at_timeout():
    """Test late attempts stay finite and never exceed the budget."""
    schedule = PollSchedule(poll_interval_ms=10, multiplier=2, timeout_ms=30000)

    assert schedule.interval_for(15) == 30000
    assert schedule.interval_for(5000) == 30000


def test_interval_for_rejects_attempt_zero():
    """Test attempts are 1-indexed."""
    with pytest.raises(ValueError, match="attempt must be >= 1"):
        PollSchedule().interval_for(0)


# ============================================================================
# Immutability
# ============================================================================


def test_with_methods_return_new_schedule():
    """Test with_* builds a new schedule and leaves the original untouched."""
    original = PollSchedule(poll_interval_ms=100, timeout_ms=1000)

    changed = (
        original.with_timeout(5000)
        .with_multiplier(3)
        .with_poll_delay(250)
        .with_poll_interval(20)
        .with_alias("GET /content")
    )

    assert changed is not original
    assert (changed.timeout_ms, changed.multiplier, changed.poll_delay_ms) == (5000, 3, 250)
    assert changed.poll_interval_ms == 20
    assert changed.alias == "GET /content"
    assert original.timeout_ms == 1000
    assert original.poll_interval_ms == 100
    assert original.alias is None


def test_schedule_is_frozen():
    """Test fields cannot be reassigned."""
    schedule = PollSchedule()

    with pytest.raises(FrozenInstanceError):
        schedule.timeout_ms = 1  # type: ignore[misc]


def test_with_value_to_string():
    """Test the value-to-string function is replaceable and excluded from equality."""
    schedule = PollSchedule().with_value_to_string(lambda value: "custom")

    assert schedule.value_to_string(object()) == "custom"
    assert schedule == PollSchedule()


# ============================================================================
# Validation
# ============================================================================


@pytest.mark.parametrize(
    "kwargs,message",
    [
        ({"multiplier": 0.5}, "multiplier must be >= 1"),
        ({"timeout_ms": 0}, "timeout_ms must be > 0"),
        ({"poll_delay_ms": -1}, "poll_delay_ms must be >= 0"),
        ({"poll_interval_ms": -5}, "poll_interval_ms must be >= 0"),
    ],
)
def test_invalid_schedule_rejected(kwargs, message):
    """Test invariant violations raise ValueError at construction."""
    with pytest.raises(ValueError, match=message):
        PollSchedule(**kwargs)


def test_with_multiplier_validates():
    """Test rebuilt schedules are validated too."""
    with pytest.raises(ValueError):
        PollSchedule().with_multiplier(0.9)


# ============================================================================
# Error Classification
# ============================================================================


def test_default_schedule_retries_client_and_io():
    """Test transport failures are transient by default."""
    schedule = PollSchedule()

    assert schedule.is_retryable(ClientError("404", status_code=404))
    assert schedule.is_retryable(TransportIOError("connection refused"))


def test_untagged_and_other_kinds_are_fatal():
    """Test classification is by kind membership, never by class hierarchy."""
    schedule = PollSchedule()

    assert not schedule.is_retryable(RuntimeError("boom"))
    assert not schedule.is_retryable(KeyError("missing"))
    assert not schedule.is_retryable(ConditionTimeout(attempts=1, elapsed_ms=0, timeout_ms=1))


def test_with_retry_on_narrows_kinds():
    """Test retryable kinds can be replaced."""
    schedule = PollSchedule().with_retry_on(ErrorKind.IO)

    assert schedule.retryable_kinds == frozenset({ErrorKind.IO})
    assert schedule.is_retryable(TransportIOError("reset"))
    assert not schedule.is_retryable(ClientError("503", status_code=503))


# ============================================================================
# Settings
# ============================================================================


def test_from_settings(test_settings: Settings):
    """Test read-path schedule mirrors RETRY_* settings."""
    test_settings.RETRY_ON = ["IO"]

    schedule = PollSchedule.from_settings(test_settings)

    assert schedule.poll_interval_ms == 10
    assert schedule.multiplier == 1.0
    assert schedule.timeout_ms == 300
    assert schedule.retryable_kinds == frozenset({ErrorKind.IO})


def test_verification_from_settings():
    """Test verification schedule defaults include a propagation delay."""
    schedule = PollSchedule.verification_from_settings(Settings())

    assert schedule.poll_delay_ms == 2000
    assert schedule.retryable_kinds == frozenset({ErrorKind.CLIENT, ErrorKind.IO})


def test_default_schedules():
    """Test module defaults."""
    assert DEFAULT_RETRY_SCHEDULE.poll_delay_ms == 0
    assert DEFAULT_RETRY_SCHEDULE.poll_interval_ms == 1000
    assert DEFAULT_RETRY_SCHEDULE.multiplier == 2.0
    assert DEFAULT_VERIFICATION_SCHEDULE.poll_delay_ms == 2000


def test_describe():
    """Test the log summary lists kinds in a stable order."""
    summary = PollSchedule(alias="POST /content").describe()

    assert summary["retry_on"] == ["client", "io"]
    assert summary["alias"] == "POST /content"
