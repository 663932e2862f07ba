"""
Timer scheduling seam.

All waits in the application (alert countdown, no-movement window,
check-ins, stats refresh) are scheduled callbacks, never blocking sleeps.
Components receive a Scheduler so tests can drive time by hand.
"""

import asyncio
from datetime import datetime, timezone
from typing import Callable, Optional, Protocol


class TimerHandle(Protocol):
    """Handle for a scheduled callback."""

    def cancel(self) -> None:
        ...


class Scheduler(Protocol):
    """Clock plus delayed-callback scheduling."""

    def now(self) -> datetime:
        ...

    def call_later(self, delay: float, callback: Callable[[], None]) -> TimerHandle:
        ...


def utcnow() -> datetime:
    return datetime.now(timezone.utc)


class AsyncioScheduler:
    """
    Scheduler backed by the asyncio event loop.

    Callbacks run on the loop thread, one at a time, so components
    driven by it need no extra locking.

    Usage:
        scheduler = AsyncioScheduler()
        handle = scheduler.call_later(30, on_expire)
        handle.cancel()
    """

    def __init__(self, loop: Optional[asyncio.AbstractEventLoop] = None):
        self._loop = loop

    def _get_loop(self) -> asyncio.AbstractEventLoop:
        if self._loop is None:
            self._loop = asyncio.get_running_loop()
        return self._loop

    def now(self) -> datetime:
        return utcnow()

    def call_later(self, delay: float, callback: Callable[[], None]) -> asyncio.TimerHandle:
        return self._get_loop().call_later(max(0.0, delay), callback)
