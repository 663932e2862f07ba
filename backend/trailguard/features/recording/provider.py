"""
Location provider boundary.

The provider owns the actual positioning resource and serializes its own
updates. Recording sessions and the emergency monitor are read-only
subscribers of the same provider.
"""

import logging
from typing import Callable, Optional, Protocol

from trailguard.shared.errors import LocationUnavailableError

from .models import GPSFix

logger = logging.getLogger(__name__)

FixCallback = Callable[[GPSFix], None]


class Subscription(Protocol):
    def cancel(self) -> None:
        ...


class LocationProvider(Protocol):
    """
    Source of discrete GPS fixes.

    subscribe() raises LocationUnavailableError when permission is
    denied or no positioning hardware is present.
    """

    def subscribe(self, callback: FixCallback) -> Subscription:
        ...


class _PushSubscription:
    def __init__(self, provider: "PushLocationProvider", callback: FixCallback):
        self._provider = provider
        self._callback = callback
        self.active = True

    def cancel(self) -> None:
        if self.active:
            self.active = False
            self._provider._remove(self)


class PushLocationProvider:
    """
    In-process provider fed by an external source (HTTP client, replay).

    Usage:
        provider = PushLocationProvider()
        sub = provider.subscribe(session.on_location_update)
        provider.push(fix)
        sub.cancel()
    """

    def __init__(self):
        self._subscriptions: list[_PushSubscription] = []
        self._unavailable_reason: Optional[str] = None
        self.last_fix: Optional[GPSFix] = None

    @property
    def available(self) -> bool:
        return self._unavailable_reason is None

    @property
    def subscriber_count(self) -> int:
        return len(self._subscriptions)

    def mark_unavailable(self, reason: str) -> None:
        """Make future subscribe() calls fail (permission revoked, no GPS)."""
        self._unavailable_reason = reason

    def mark_available(self) -> None:
        self._unavailable_reason = None

    def subscribe(self, callback: FixCallback) -> _PushSubscription:
        if self._unavailable_reason is not None:
            raise LocationUnavailableError(self._unavailable_reason)
        subscription = _PushSubscription(self, callback)
        self._subscriptions.append(subscription)
        return subscription

    def push(self, fix: GPSFix) -> None:
        """Deliver one fix to every active subscriber, in subscription order."""
        self.last_fix = fix
        for subscription in list(self._subscriptions):
            if subscription.active:
                subscription._callback(fix)

    def _remove(self, subscription: _PushSubscription) -> None:
        if subscription in self._subscriptions:
            self._subscriptions.remove(subscription)
