"""
Tests for the retry scheduler.
"""

import pytest

from oss_health_analyzer.errors import (
    NotFoundError,
    RateLimitedError,
    ServerError,
    TransientNetworkError,
)
from oss_health_analyzer.retry import RetryScheduler, compute_backoff_delay


class FlakyOperation:
    """Fails with the given errors, then returns 'ok'."""

    def __init__(self, errors):
        self.errors = list(errors)
        self.calls = 0

    async def __call__(self):
        self.calls += 1
        if self.errors:
            raise self.errors.pop(0)
        return "ok"


@pytest.fixture
def sleeps():
    return []


@pytest.fixture
def scheduler(sleeps):
    async def fake_sleep(delay):
        sleeps.append(delay)

    return RetryScheduler(sleep=fake_sleep, rand=lambda _low, _high: 0.0)


def test_compute_backoff_delay_doubles_and_caps():
    assert compute_backoff_delay(0) == 1.0
    assert compute_backoff_delay(1) == 2.0
    assert compute_backoff_delay(3) == 8.0
    assert compute_backoff_delay(6) == 60.0
    assert compute_backoff_delay(10_000) == 60.0


def test_delay_for_adds_bounded_jitter():
    seen = []

    def rand(low, high):
        seen.append((low, high))
        return high

    scheduler = RetryScheduler(rand=rand)
    assert scheduler.delay_for(2) == pytest.approx(4.0 * 1.3)
    assert seen == [(0, pytest.approx(1.2))]


@pytest.mark.asyncio
async def test_succeeds_after_three_failures(scheduler, sleeps):
    operation = FlakyOperation(
        [ServerError("boom", 500), RateLimitedError("slow down", 429), TransientNetworkError("reset")]
    )
    result = await scheduler.run_with_retry(operation, max_attempts=5)
    assert result == "ok"
    assert operation.calls == 4
    assert sleeps == [1.0, 2.0, 4.0]


@pytest.mark.asyncio
async def test_always_failing_reraises_after_retries(scheduler, sleeps):
    operation = FlakyOperation([ServerError("boom", 500)] * 10)
    with pytest.raises(ServerError):
        await scheduler.run_with_retry(operation, max_attempts=3)
    assert operation.calls == 4
    assert len(sleeps) == 3


@pytest.mark.asyncio
async def test_non_retryable_error_is_not_retried(scheduler, sleeps):
    operation = FlakyOperation([NotFoundError("missing", 404)])
    with pytest.raises(NotFoundError):
        await scheduler.run_with_retry(operation)
    assert operation.calls == 1
    assert sleeps == []


@pytest.mark.asyncio
async def test_zero_attempts_calls_once(scheduler):
    operation = FlakyOperation([ServerError("boom", 500)])
    with pytest.raises(ServerError):
        await scheduler.run_with_retry(operation, max_attempts=0)
    assert operation.calls == 1


@pytest.mark.asyncio
async def test_default_max_attempts_is_five(scheduler, sleeps):
    operation = FlakyOperation([ServerError("boom", 500)] * 10)
    with pytest.raises(ServerError):
        await scheduler.run_with_retry(operation)
    assert operation.calls == 6
    assert sleeps == [1.0, 2.0, 4.0, 8.0, 16.0]
