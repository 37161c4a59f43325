"""Async retry with exponential backoff and jitter."""

import asyncio
import random
from typing import Awaitable, Callable, Optional, TypeVar

T = TypeVar("T")

SleepFunc = Callable[[float], Awaitable[None]]


async def async_retry_with_backoff(
    func: Callable[[], Awaitable[T]],
    *,
    max_retries: int = 3,
    base_delay: float = 1.0,
    max_delay: float = 30.0,
    exponential_base: float = 2.0,
    jitter: bool = True,
    is_retryable: Optional[Callable[[Exception], bool]] = None,
    rng: Optional[random.Random] = None,
    sleep_func: Optional[SleepFunc] = None,
) -> T:
    """Async retry with exponential backoff and jitter.

    Retries an async function on failure with increasing delays.
    Jitter adds 50-150% randomness to delay to prevent thundering herd.

    Args:
        func: Async function to retry (no arguments; use lambda for args).
        max_retries: Maximum retry attempts (default 3).
        base_delay: Initial delay in seconds (default 1.0).
        max_delay: Maximum delay cap in seconds (default 30.0).
        exponential_base: Multiplier per retry (default 2.0).
        jitter: Add randomness to delay (default True, 50-150% of base).
        is_retryable: Predicate deciding whether an error is retried
            (default: every Exception is retried).
        rng: Injectable Random instance for deterministic testing.
        sleep_func: Injectable sleep function for time control in tests.

    Returns:
        Result from the function on success.

    Raises:
        Exception: The last exception if all retries are exhausted, or the
            first non-retryable exception.

    Testing example:
        >>> sleep_times = []
        >>> async def fake_sleep(s): sleep_times.append(s)
        >>> await async_retry_with_backoff(
        ...     func, rng=random.Random(42), sleep_func=fake_sleep
        ... )
    """
    _rng = rng or random.Random()
    _sleep = sleep_func or asyncio.sleep

    for attempt in range(max_retries + 1):
        try:
            return await func()
        except Exception as e:
            if attempt == max_retries or (is_retryable is not None and not is_retryable(e)):
                raise

            delay = min(base_delay * (exponential_base**attempt), max_delay)
            if jitter:
                delay = delay * (0.5 + _rng.random())

            await _sleep(delay)

    raise RuntimeError("async_retry_with_backoff: unexpected state")
