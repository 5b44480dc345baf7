"""Retry with exponential backoff, and a shared rate limiter."""

import asyncio
import logging
import random
import time
from dataclasses import dataclass
from typing import Awaitable, Callable, List, Optional, TypeVar

logger = logging.getLogger(__name__)

T = TypeVar("T")

# Substrings (lowercased) that mark an error as a transient network failure
NETWORK_ERROR_MARKERS: List[str] = [
    "timeout",
    "econnreset",
    "econnrefused",
    "etimedout",
    "socket hang up",
    "network",
    "navigation timeout",
    "target closed",
    "page closed",
]

JITTER_FRACTION = 0.2


@dataclass
class RetryOptions:
    """
    Backoff parameters for with_retry.

    Delays are in seconds. With the defaults the waits are roughly 1s, 2s,
    4s before giving up after the fourth attempt.
    """

    max_retries: int = 3
    initial_delay: float = 1.0
    max_delay: float = 30.0
    backoff_multiplier: float = 2.0
    is_retryable: Optional[Callable[[BaseException], bool]] = None


def calculate_delay(
    attempt: int,
    options: RetryOptions,
    rng: Callable[[], float] = random.random,
) -> float:
    """Backoff delay for a zero-based attempt number, with ±20% jitter."""
    base_delay = options.initial_delay * (options.backoff_multiplier ** attempt)
    jitter = base_delay * JITTER_FRACTION * (rng() * 2 - 1)
    return min(base_delay + jitter, options.max_delay)


def is_network_retryable(error: BaseException) -> bool:
    """True if the error message looks like a timeout or dropped connection."""
    message = str(error).lower()
    return any(marker in message for marker in NETWORK_ERROR_MARKERS)


async def with_retry(
    fn: Callable[[], Awaitable[T]],
    options: Optional[RetryOptions] = None,
    context: Optional[str] = None,
    sleep: Callable[[float], Awaitable[None]] = asyncio.sleep,
) -> T:
    """
    Await fn(), retrying failures with exponential backoff.

    Args:
        fn: Zero-argument coroutine factory (called once per attempt)
        options: Retry parameters (defaults to RetryOptions())
        context: Short label for log messages
        sleep: Sleep coroutine (injectable for tests)

    Returns:
        Result of the first successful attempt

    Raises:
        The last error once retries are exhausted, or immediately when
        options.is_retryable rejects it.
    """
    opts = options or RetryOptions()
    attempt = 0

    while True:
        try:
            return await fn()
        except Exception as e:
            if attempt >= opts.max_retries:
                logger.error(
                    f"Giving up on {context or 'operation'} after {attempt + 1} attempts: {e}"
                )
                raise

            if opts.is_retryable and not opts.is_retryable(e):
                logger.debug(f"Not retrying {context or 'operation'}: {e}")
                raise

            delay = calculate_delay(attempt, opts)
            logger.warning(
                f"Attempt {attempt + 1} failed for {context or 'operation'}, "
                f"retrying in {delay:.1f}s: {e}"
            )
            await sleep(delay)
            attempt += 1


def network_retry(max_retries: int = 3, initial_delay: float = 1.0) -> RetryOptions:
    """RetryOptions that only retry transient network failures."""
    return RetryOptions(
        max_retries=max_retries,
        initial_delay=initial_delay,
        is_retryable=is_network_retryable,
    )


class RateLimiter:
    """
    Enforce a minimum gap between successive operation starts.

    Each caller reserves the next free start slot under a lock, then sleeps
    outside the lock until that slot arrives. One instance is shared by all
    concurrent detail fetches.
    """

    def __init__(
        self,
        delay_seconds: float,
        clock: Callable[[], float] = time.monotonic,
        sleep: Callable[[float], Awaitable[None]] = asyncio.sleep,
    ):
        self.delay_seconds = max(0.0, delay_seconds)
        self._clock = clock
        self._sleep = sleep
        self._next_start: Optional[float] = None
        self._lock = asyncio.Lock()

    async def wait(self) -> None:
        """Wait until this caller may start its operation."""
        async with self._lock:
            now = self._clock()
            start = now if self._next_start is None else max(now, self._next_start)
            self._next_start = start + self.delay_seconds

        wait_time = start - now
        if wait_time > 0:
            await self._sleep(wait_time)
