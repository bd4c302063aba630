"""Tests for CancellationToken."""

import asyncio

import pytest

from switchyard.core.errors import RequestCancelledError
from switchyard.core.transport import CancellationToken


class TestCancellationToken:
    """Tests for cooperative cancellation."""

    def test_initial_state(self):
        """A new token is not cancelled."""
        token = CancellationToken()
        assert token.cancelled is False
        assert token.reason is None
        token.raise_if_cancelled()

    def test_first_reason_wins(self):
        """cancel is idempotent and keeps the first reason."""
        token = CancellationToken()
        token.cancel("first")
        token.cancel("second")
        assert token.cancelled is True
        assert token.reason == "first"
        with pytest.raises(RequestCancelledError, match="first"):
            token.raise_if_cancelled()

    @pytest.mark.asyncio
    async def test_guard_returns_result(self):
        """guard passes through the awaitable's result."""
        token = CancellationToken()

        async def compute():
            return 42

        assert await token.guard(compute()) == 42

    @pytest.mark.asyncio
    async def test_guard_propagates_inner_error(self):
        """Errors from the awaitable are not masked."""
        token = CancellationToken()

        async def boom():
            raise ValueError("bad")

        with pytest.raises(ValueError, match="bad"):
            await token.guard(boom())

    @pytest.mark.asyncio
    async def test_guard_interrupts_pending_work(self):
        """Cancelling wakes the guard and cancels the inner task."""
        token = CancellationToken()
        inner_cancelled = asyncio.Event()

        async def long_running():
            try:
                await asyncio.sleep(10)
            except asyncio.CancelledError:
                inner_cancelled.set()
                raise

        task = asyncio.create_task(token.guard(long_running()))
        await asyncio.sleep(0)
        token.cancel("user")

        with pytest.raises(RequestCancelledError) as exc_info:
            await task
        assert exc_info.value.reason == "user"
        assert inner_cancelled.is_set()

    @pytest.mark.asyncio
    async def test_guard_on_cancelled_token(self):
        """A token cancelled up front never runs the work to completion."""
        token = CancellationToken()
        token.cancel()

        with pytest.raises(RequestCancelledError):
            await token.guard(asyncio.sleep(10))

    @pytest.mark.asyncio
    async def test_sleep_wakes_early(self):
        """sleep returns early via RequestCancelledError when cancelled."""
        token = CancellationToken()
        loop = asyncio.get_running_loop()
        loop.call_later(0.01, token.cancel, "timeout")
        started = loop.time()

        with pytest.raises(RequestCancelledError):
            await token.sleep(10)
        assert loop.time() - started < 5
