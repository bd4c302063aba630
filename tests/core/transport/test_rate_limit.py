"""Tests for the process-wide minimum-interval rate limiter."""

import asyncio

import pytest

from switchyard.core.errors import RequestCancelledError
from switchyard.core.transport import (
    CancellationToken,
    MinIntervalRateLimiter,
    get_rate_limiter,
    reset_rate_limiter_for_testing,
)


class TestMinIntervalRateLimiter:
    """Tests for call-start spacing."""

    @pytest.mark.asyncio
    async def test_first_call_does_not_wait(self, fake_clock):
        """The very first call starts immediately."""
        limiter = MinIntervalRateLimiter(0.5, clock=fake_clock, sleep_func=fake_clock.sleep)
        assert await limiter.await_slot() == 0.0
        assert fake_clock.sleeps == []
        assert limiter.last_start == 100.0

    @pytest.mark.asyncio
    async def test_back_to_back_calls_are_spaced(self, fake_clock):
        """A second immediate call waits out the remaining interval."""
        limiter = MinIntervalRateLimiter(0.5, clock=fake_clock, sleep_func=fake_clock.sleep)
        await limiter.await_slot()
        fake_clock.now += 0.2

        waited = await limiter.await_slot()

        assert waited == pytest.approx(0.3)
        assert limiter.last_start == pytest.approx(100.5)

    @pytest.mark.asyncio
    async def test_no_wait_after_interval_elapsed(self, fake_clock):
        """Calls spaced further apart than the interval never wait."""
        limiter = MinIntervalRateLimiter(0.5, clock=fake_clock, sleep_func=fake_clock.sleep)
        await limiter.await_slot()
        fake_clock.now += 2.0
        assert await limiter.await_slot() == 0.0

    @pytest.mark.asyncio
    async def test_concurrent_callers_start_one_interval_apart(self, fake_clock):
        """Concurrent callers are released one interval apart, in arrival order."""
        limiter = MinIntervalRateLimiter(0.5, clock=fake_clock, sleep_func=fake_clock.sleep)
        starts: list[float] = []

        async def caller():
            await limiter.await_slot()
            starts.append(fake_clock())

        await asyncio.gather(*(caller() for _ in range(4)))

        assert starts == pytest.approx([100.0, 100.5, 101.0, 101.5])
        gaps = [b - a for a, b in zip(starts, starts[1:])]
        assert all(gap >= 0.5 - 1e-9 for gap in gaps)

    @pytest.mark.asyncio
    async def test_real_clock_spacing(self):
        """With the real clock, starts are at least min_interval apart."""
        limiter = MinIntervalRateLimiter(0.05)
        loop = asyncio.get_running_loop()
        starts: list[float] = []

        async def caller():
            await limiter.await_slot()
            starts.append(loop.time())

        await asyncio.gather(*(caller() for _ in range(3)))

        starts.sort()
        assert all(b - a >= 0.045 for a, b in zip(starts, starts[1:]))

    @pytest.mark.asyncio
    async def test_cancelled_while_waiting(self, fake_clock):
        """A cancelled token aborts the wait."""
        limiter = MinIntervalRateLimiter(0.5, clock=fake_clock, sleep_func=fake_clock.sleep)
        await limiter.await_slot()
        token = CancellationToken()
        token.cancel("stop")

        with pytest.raises(RequestCancelledError):
            await limiter.await_slot(token)

    def test_negative_interval_rejected(self):
        """Negative intervals are a programming error."""
        with pytest.raises(ValueError):
            MinIntervalRateLimiter(-1)


class TestGlobalRateLimiter:
    """Tests for the process-wide singleton."""

    def test_singleton(self):
        """Repeated access returns the same limiter."""
        assert get_rate_limiter() is get_rate_limiter()

    def test_interval_applies_on_creation_only(self):
        """min_interval is honoured by the creating call only."""
        first = get_rate_limiter(0.25)
        assert first.min_interval == 0.25
        assert get_rate_limiter(2.0).min_interval == 0.25

    def test_reset_creates_new_instance(self):
        """reset_rate_limiter_for_testing drops the instance."""
        first = get_rate_limiter()
        reset_rate_limiter_for_testing()
        assert get_rate_limiter() is not first
