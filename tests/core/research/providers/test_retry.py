"""Tests for async_retry_with_backoff."""

import random

import pytest

from research_orchestrator.core.errors.search import SearchProviderError
from research_orchestrator.core.research.providers.retry import async_retry_with_backoff


class _Flaky:
    """Callable that fails ``failures`` times before returning ``result``."""

    def __init__(self, failures: int, error: Exception, result: str = "ok"):
        self.failures = failures
        self.error = error
        self.result = result
        self.calls = 0

    async def __call__(self) -> str:
        self.calls += 1
        if self.calls <= self.failures:
            raise self.error
        return self.result


class TestAsyncRetryWithBackoff:
    """Backoff schedule and retry predicate."""

    @pytest.mark.asyncio
    async def test_success_without_retry(self):
        sleeps: list[float] = []

        async def fake_sleep(seconds: float) -> None:
            sleeps.append(seconds)

        func = _Flaky(0, RuntimeError("boom"))
        assert await async_retry_with_backoff(func, sleep_func=fake_sleep) == "ok"
        assert func.calls == 1
        assert sleeps == []

    @pytest.mark.asyncio
    async def test_exponential_delays_without_jitter(self):
        sleeps: list[float] = []

        async def fake_sleep(seconds: float) -> None:
            sleeps.append(seconds)

        func = _Flaky(3, RuntimeError("boom"))
        result = await async_retry_with_backoff(
            func, max_retries=3, base_delay=1.0, max_delay=3.0, jitter=False, sleep_func=fake_sleep
        )
        assert result == "ok"
        assert sleeps == [1.0, 2.0, 3.0]

    @pytest.mark.asyncio
    async def test_jitter_is_deterministic_with_seeded_rng(self):
        runs: list[list[float]] = []
        for _ in range(2):
            sleeps: list[float] = []

            async def fake_sleep(seconds: float, bucket: list[float] = sleeps) -> None:
                bucket.append(seconds)

            await async_retry_with_backoff(
                _Flaky(2, RuntimeError("boom")),
                max_retries=2,
                rng=random.Random(42),
                sleep_func=fake_sleep,
            )
            runs.append(sleeps)

        assert runs[0] == runs[1]
        assert len(runs[0]) == 2
        assert 0.5 <= runs[0][0] <= 1.5
        assert 1.0 <= runs[0][1] <= 3.0

    @pytest.mark.asyncio
    async def test_raises_last_error_when_exhausted(self):
        async def fake_sleep(_seconds: float) -> None:
            return None

        func = _Flaky(5, RuntimeError("still failing"))
        with pytest.raises(RuntimeError, match="still failing"):
            await async_retry_with_backoff(func, max_retries=2, sleep_func=fake_sleep)
        assert func.calls == 3

    @pytest.mark.asyncio
    async def test_non_retryable_raised_immediately(self):
        async def fake_sleep(_seconds: float) -> None:
            raise AssertionError("should not sleep")

        error = SearchProviderError(provider="wikipedia", message="bad request", retryable=False)
        func = _Flaky(1, error)
        with pytest.raises(SearchProviderError):
            await async_retry_with_backoff(
                func,
                max_retries=3,
                is_retryable=lambda e: isinstance(e, SearchProviderError) and e.retryable,
                sleep_func=fake_sleep,
            )
        assert func.calls == 1
