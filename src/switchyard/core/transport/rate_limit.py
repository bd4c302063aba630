"""Process-wide minimum-interval rate limiter.

Serializes the *start* times of outbound calls so that any two starts are
at least ``min_interval`` seconds apart, across all concurrent callers.
Completions overlap freely. The lock is held across the wait, so waiters
are released strictly one interval apart in arrival order.
"""

import asyncio
import logging
import threading
import time
from typing import TYPE_CHECKING, Callable, Optional

from switchyard.core.observability import audit_log
from switchyard.core.transport.models import SleepFunc

if TYPE_CHECKING:
    from switchyard.core.transport.cancellation import CancellationToken

logger = logging.getLogger(__name__)

DEFAULT_MIN_INTERVAL = 0.5


class MinIntervalRateLimiter:
    """Enforces a minimum spacing between call starts.

    Args:
        min_interval: Minimum seconds between two call starts
        clock: Monotonic clock, injectable for tests
        sleep_func: Sleep coroutine, injectable for tests
    """

    def __init__(
        self,
        min_interval: float = DEFAULT_MIN_INTERVAL,
        *,
        clock: Callable[[], float] = time.monotonic,
        sleep_func: Optional[SleepFunc] = None,
    ):
        if min_interval < 0:
            raise ValueError("min_interval must be >= 0")
        self.min_interval = min_interval
        self._clock = clock
        self._sleep = sleep_func or asyncio.sleep
        self._last_start: Optional[float] = None
        self._lock: Optional[asyncio.Lock] = None

    def _get_lock(self) -> asyncio.Lock:
        """Lazily create the asyncio lock inside the running loop."""
        if self._lock is None:
            self._lock = asyncio.Lock()
        return self._lock

    @property
    def last_start(self) -> Optional[float]:
        return self._last_start

    async def await_slot(self, cancel_token: Optional["CancellationToken"] = None) -> float:
        """Wait until this caller may start a call.

        Returns:
            Seconds spent waiting (0.0 if no wait was needed)

        Raises:
            RequestCancelledError: If *cancel_token* fires while waiting
        """
        async with self._get_lock():
            waited = 0.0
            if self._last_start is not None:
                wait = self._last_start + self.min_interval - self._clock()
                if wait > 0:
                    logger.debug("Rate limiter delaying call start by %.3fs", wait)
                    audit_log("rate_limit_wait", wait_seconds=round(wait, 3))
                    if cancel_token is not None:
                        await cancel_token.guard(self._sleep(wait))
                    else:
                        await self._sleep(wait)
                    waited = wait
            self._last_start = self._clock()
            return waited


# =============================================================================
# Global Instance
# =============================================================================

_rate_limiter: Optional[MinIntervalRateLimiter] = None
_rate_limiter_lock = threading.Lock()


def get_rate_limiter(min_interval: Optional[float] = None) -> MinIntervalRateLimiter:
    """Get the process-wide rate limiter.

    Thread-safe lazy initialization using double-checked locking. The
    *min_interval* argument only applies to the call that creates it.
    """
    global _rate_limiter
    if _rate_limiter is None:
        with _rate_limiter_lock:
            if _rate_limiter is None:
                _rate_limiter = MinIntervalRateLimiter(
                    DEFAULT_MIN_INTERVAL if min_interval is None else min_interval
                )
    return _rate_limiter


def reset_rate_limiter_for_testing() -> None:
    """Drop the global rate limiter so the next access creates a fresh one."""
    global _rate_limiter
    with _rate_limiter_lock:
        _rate_limiter = None
