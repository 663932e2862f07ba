"""
Optional device sensor feeds (battery, motion).

Both are optional for the emergency monitor: a missing feed only means
fewer alert types are available.
"""

import logging
from typing import Callable, Generic, Optional, Protocol, TypeVar

from .fall import AccelerationSample

logger = logging.getLogger(__name__)

T = TypeVar("T")


class SensorSubscription(Protocol):
    def cancel(self) -> None:
        ...


class BatteryProvider(Protocol):
    """Reports battery level in percent (0-100)."""

    level: Optional[float]

    def subscribe(self, callback: Callable[[float], None]) -> SensorSubscription:
        ...


class MotionProvider(Protocol):
    """Reports 3-axis acceleration samples."""

    def subscribe(self, callback: Callable[[AccelerationSample], None]) -> SensorSubscription:
        ...


class _FeedSubscription:
    def __init__(self, feed: "SensorFeed", callback):
        self._feed = feed
        self.callback = callback

    def cancel(self) -> None:
        self._feed._callbacks.discard(self)


class SensorFeed(Generic[T]):
    """
    In-process sensor feed fed by an external source.

    Usage:
        battery = SensorFeed[float]()
        battery.subscribe(monitor.on_battery_level)
        battery.push(15.0)
    """

    def __init__(self):
        self._callbacks: set[_FeedSubscription] = set()
        self.latest: Optional[T] = None

    @property
    def level(self) -> Optional[T]:
        """Last reading; lets a battery feed satisfy BatteryProvider."""
        return self.latest

    @property
    def subscriber_count(self) -> int:
        return len(self._callbacks)

    def subscribe(self, callback: Callable[[T], None]) -> _FeedSubscription:
        subscription = _FeedSubscription(self, callback)
        self._callbacks.add(subscription)
        return subscription

    def push(self, value: T) -> None:
        self.latest = value
        for subscription in list(self._callbacks):
            subscription.callback(value)
