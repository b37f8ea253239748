"""
Bounded exponential-backoff retry for acquisition calls.
"""

import asyncio
import random
from typing import Awaitable, Callable, TypeVar

from rich.console import Console

from oss_health_analyzer.config import (
    DEFAULT_BASE_DELAY,
    DEFAULT_MAX_ATTEMPTS,
    DEFAULT_MAX_DELAY,
    is_verbose,
)
from oss_health_analyzer.errors import is_retryable

console = Console(stderr=True)

T = TypeVar("T")

JITTER_RATIO = 0.3


def compute_backoff_delay(
    attempt: int,
    base_delay: float = DEFAULT_BASE_DELAY,
    max_delay: float = DEFAULT_MAX_DELAY,
) -> float:
    """
    Deterministic part of the delay before retry number `attempt` (0-indexed).

    Returns:
        min(base_delay * 2**attempt, max_delay) in seconds.
    """
    # Cap the exponent so huge attempt numbers do not overflow floats.
    exponent = min(attempt, 64)
    return min(base_delay * (2**exponent), max_delay)


class RetryScheduler:
    """
    Runs an async operation, retrying retryable failures with backoff.

    The sleep and random functions are injectable so tests can run the
    schedule without waiting.
    """

    def __init__(
        self,
        base_delay: float = DEFAULT_BASE_DELAY,
        max_delay: float = DEFAULT_MAX_DELAY,
        jitter_ratio: float = JITTER_RATIO,
        sleep: Callable[[float], Awaitable[None]] = asyncio.sleep,
        rand: Callable[[float, float], float] = random.uniform,
        max_attempts: int = DEFAULT_MAX_ATTEMPTS,
    ):
        self.base_delay = base_delay
        self.max_delay = max_delay
        self.jitter_ratio = jitter_ratio
        self.max_attempts = max_attempts
        self._sleep = sleep
        self._rand = rand

    def delay_for(self, attempt: int) -> float:
        """Full delay (backoff plus jitter) before retry `attempt`."""
        delay = compute_backoff_delay(attempt, self.base_delay, self.max_delay)
        return delay + self._rand(0, self.jitter_ratio * delay)

    async def run_with_retry(
        self,
        operation: Callable[[], Awaitable[T]],
        max_attempts: int | None = None,
    ) -> T:
        """
        Await `operation()` until it succeeds or retries run out.

        Args:
            operation: Zero-argument callable returning a fresh awaitable.
            max_attempts: Number of retries after the initial call. Defaults
                to the scheduler's setting (5).

        Returns:
            The operation's result.

        Raises:
            The last retryable error once max_attempts retries have failed,
            or any non-retryable error on first occurrence.
        """
        retries = self.max_attempts if max_attempts is None else max_attempts
        attempt = 0
        while True:
            try:
                return await operation()
            except Exception as error:
                if not is_retryable(error) or attempt >= retries:
                    raise
                delay = self.delay_for(attempt)
                if is_verbose():
                    console.print(
                        f"[dim]Retry {attempt + 1}/{retries} in {delay:.1f}s "
                        f"after {type(error).__name__}: {error}[/dim]"
                    )
                await self._sleep(delay)
                attempt += 1


async def run_with_retry(
    operation: Callable[[], Awaitable[T]], max_attempts: int = DEFAULT_MAX_ATTEMPTS
) -> T:
    """Run `operation` with a default RetryScheduler."""
    return await RetryScheduler().run_with_retry(operation, max_attempts)
