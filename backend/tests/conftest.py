"""
Shared test fixtures.

ManualScheduler drives timers by hand so alert countdowns and the
no-movement window can be tested without waiting.
"""

from datetime import datetime, timedelta, timezone
from typing import Callable, Optional

import pytest
from fastapi.testclient import TestClient

from trailguard.features.profiles import EmergencyContact, UserFitnessProfile
from trailguard.features.recording import GPSFix
from trailguard.features.tracking import TrackerRegistry
from trailguard.main import app

BASE_TIME = datetime(2024, 6, 1, 8, 0, tzinfo=timezone.utc)
BASE_LAT = 43.0
BASE_LON = 76.0

# Meters per degree of latitude on the 6,371 km sphere
METERS_PER_DEG_LAT = 111_194.93


class ManualTimer:
    def __init__(self, when: datetime, callback: Callable[[], None]):
        self.when = when
        self.callback = callback
        self.cancelled = False

    def cancel(self) -> None:
        self.cancelled = True


class ManualScheduler:
    """Scheduler whose clock only moves when advance() is called."""

    def __init__(self, start: datetime = BASE_TIME):
        self._now = start
        self._timers: list[ManualTimer] = []

    def now(self) -> datetime:
        return self._now

    def call_later(self, delay: float, callback: Callable[[], None]) -> ManualTimer:
        timer = ManualTimer(self._now + timedelta(seconds=delay), callback)
        self._timers.append(timer)
        return timer

    def advance(self, seconds: float) -> None:
        """Move the clock forward, firing due timers in order."""
        target = self._now + timedelta(seconds=seconds)
        while True:
            due = [t for t in self._timers if not t.cancelled and t.when <= target]
            if not due:
                break
            timer = min(due, key=lambda t: t.when)
            self._timers.remove(timer)
            self._now = timer.when
            timer.callback()
        self._timers = [t for t in self._timers if not t.cancelled]
        self._now = target

    @property
    def pending(self) -> int:
        return sum(1 for t in self._timers if not t.cancelled)


def build_fix(
    seconds: float,
    north_m: float = 0.0,
    altitude: Optional[float] = None,
    accuracy: Optional[float] = None,
) -> GPSFix:
    """Fix `north_m` meters north of the base point, `seconds` after BASE_TIME."""
    return GPSFix(
        latitude=BASE_LAT + north_m / METERS_PER_DEG_LAT,
        longitude=BASE_LON,
        altitude=altitude,
        accuracy=accuracy,
        timestamp=BASE_TIME + timedelta(seconds=seconds),
    )


@pytest.fixture
def scheduler():
    return ManualScheduler()


@pytest.fixture
def make_fix():
    return build_fix


@pytest.fixture
def contact():
    return EmergencyContact(
        id="c1",
        name="Aigerim",
        phone="+77010000000",
        relationship="sister",
        telegram_chat_id=12345,
    )


@pytest.fixture
def profile(contact):
    return UserFitnessProfile(id="u1", emergency_contacts=[contact])


@pytest.fixture
def profile_without_contacts():
    return UserFitnessProfile(id="u2")


class CollectingNotifier:
    """Alert notifier double; every dispatch counts as delivered."""

    def __init__(self):
        self.dispatches = []

    def send_alert(self, dispatch):
        self.dispatches.append(dispatch)
        return True


@pytest.fixture
def collecting_notifier():
    return CollectingNotifier()


@pytest.fixture
def registry(scheduler, collecting_notifier):
    return TrackerRegistry(scheduler, notifier=collecting_notifier)


@pytest.fixture
def client(registry):
    """API client whose trackers run on the manual scheduler."""
    with TestClient(app) as client:
        app.state.trackers = registry
        yield client
