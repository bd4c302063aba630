"""Cooperative cancellation for in-flight requests.

A ``CancellationToken`` is created by the caller, threaded through the
orchestrator and transport, and checked at every suspension point. Any
awaitable can be raced against it with ``guard``.
"""

import asyncio
import logging
from typing import Awaitable, Optional, TypeVar

from switchyard.core.errors import RequestCancelledError

logger = logging.getLogger(__name__)

T = TypeVar("T")


class CancellationToken:
    """One-shot cancellation signal shared across tasks."""

    def __init__(self) -> None:
        self._cancelled = False
        self._reason: Optional[str] = None
        self._event: Optional[asyncio.Event] = None

    def _get_event(self) -> asyncio.Event:
        """Lazily create the event inside the running loop."""
        if self._event is None:
            self._event = asyncio.Event()
            if self._cancelled:
                self._event.set()
        return self._event

    @property
    def cancelled(self) -> bool:
        return self._cancelled

    @property
    def reason(self) -> Optional[str]:
        return self._reason

    def cancel(self, reason: Optional[str] = None) -> None:
        """Signal cancellation. Idempotent; the first reason wins."""
        if self._cancelled:
            return
        self._cancelled = True
        self._reason = reason
        if self._event is not None:
            self._event.set()
        logger.debug("Cancellation requested: %s", reason or "no reason given")

    def raise_if_cancelled(self) -> None:
        if self._cancelled:
            raise RequestCancelledError(self._reason)

    async def guard(self, awaitable: Awaitable[T]) -> T:
        """Await *awaitable* unless the token fires first.

        Raises:
            RequestCancelledError: If cancelled before or while awaiting;
                the inner awaitable is cancelled in that case.
        """
        task = asyncio.ensure_future(awaitable)
        if self._cancelled:
            task.cancel()
            await asyncio.gather(task, return_exceptions=True)
            raise RequestCancelledError(self._reason)

        waiter = asyncio.ensure_future(self._get_event().wait())
        try:
            await asyncio.wait({task, waiter}, return_when=asyncio.FIRST_COMPLETED)
        finally:
            # Also runs when the surrounding task is itself cancelled
            if not waiter.done():
                waiter.cancel()
            if not task.done():
                task.cancel()
                await asyncio.gather(task, return_exceptions=True)

        if task.cancelled():
            raise RequestCancelledError(self._reason)
        return task.result()

    async def sleep(self, delay: float) -> None:
        """Sleep for *delay* seconds, waking early on cancellation."""
        await self.guard(asyncio.sleep(delay))
