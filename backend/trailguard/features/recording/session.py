"""
Recording session state machine.

Owns the accepted fixes of one recording and keeps running aggregates
consistent with them. States:

    idle -> recording <-> paused -> stopped

Aggregates are updated in O(1) per accepted fix from the previous fix.
Pauses split the recording into segments: the step bridging a pause
contributes no duration, distance, speed or elevation.
"""

import logging
import threading
import uuid
from datetime import datetime
from typing import Callable, Optional

from trailguard.shared.elevation import elevation_delta
from trailguard.shared.errors import SessionStateError, ValidationError
from trailguard.shared.geo import average_speed, distance
from trailguard.shared.scheduler import Scheduler, TimerHandle, utcnow

from .models import (
    FinishedRecording,
    FixRejection,
    GPSFix,
    RecordingState,
    RecordingStats,
)
from .provider import LocationProvider, Subscription

logger = logging.getLogger(__name__)

StatsCallback = Callable[[RecordingStats], None]


class RecordingSession:
    """
    One continuous recording attempt, start to stop.

    Usage:
        session = RecordingSession(provider, max_accuracy_m=50)
        session.start("Ridge loop")
        ...
        finished = session.stop()
    """

    def __init__(
        self,
        location_provider: LocationProvider,
        max_accuracy_m: Optional[float] = 50.0,
        session_id: Optional[str] = None,
        clock: Callable[[], datetime] = utcnow,
        scheduler: Optional[Scheduler] = None,
        stats_refresh_seconds: float = 0.0,
        on_stats: Optional[StatsCallback] = None,
    ):
        self.id = session_id or str(uuid.uuid4())
        self.max_accuracy_m = max_accuracy_m
        self._provider = location_provider
        self._clock = clock
        self._scheduler = scheduler
        self._stats_refresh_seconds = stats_refresh_seconds
        self._on_stats = on_stats
        self._lock = threading.RLock()

        self.state = RecordingState.IDLE
        self.name: Optional[str] = None
        self.description: Optional[str] = None
        self.started_at: Optional[datetime] = None
        self.ended_at: Optional[datetime] = None

        self._subscription: Optional[Subscription] = None
        self._ticker: Optional[TimerHandle] = None
        self._finished: Optional[FinishedRecording] = None
        self._reset_track()

    def _reset_track(self) -> None:
        self._fixes: list[GPSFix] = []
        self._segment_open = False
        self._distance = 0.0
        self._duration = 0.0
        self._max_speed = 0.0
        self._current_speed = 0.0
        self._gain = 0.0
        self._loss = 0.0
        self.rejections: dict[FixRejection, int] = {r: 0 for r in FixRejection}
        self.ignored_count = 0

    # =========================================================================
    # Lifecycle
    # =========================================================================

    @property
    def fixes(self) -> tuple[GPSFix, ...]:
        return tuple(self._fixes)

    @property
    def last_fix(self) -> Optional[GPSFix]:
        return self._fixes[-1] if self._fixes else None

    @property
    def is_active(self) -> bool:
        return self.state in (RecordingState.RECORDING, RecordingState.PAUSED)

    def start(self, name: str, description: Optional[str] = None) -> None:
        """
        Begin recording.

        Raises:
            ValidationError: empty name or session already started
            LocationUnavailableError: provider refused the subscription
        """
        with self._lock:
            if not name or not name.strip():
                raise ValidationError("Trail name is required")
            if self.state != RecordingState.IDLE:
                raise ValidationError(f"Recording {self.id} is already {self.state.value}")

            # Subscribe first: a provider failure leaves the session idle
            self._subscription = self._provider.subscribe(self.on_location_update)

            self._reset_track()
            self.name = name.strip()
            self.description = description.strip() if description and description.strip() else None
            self.started_at = self._clock()
            self.state = RecordingState.RECORDING
            self._segment_open = True
            self._schedule_tick()

        logger.info(f"Recording {self.id} started: {self.name!r}")

    def pause(self) -> None:
        with self._lock:
            if self.state != RecordingState.RECORDING:
                raise SessionStateError("pause", self.state.value)
            self.state = RecordingState.PAUSED
            self._cancel_tick()
        logger.info(f"Recording {self.id} paused")

    def resume(self) -> None:
        with self._lock:
            if self.state != RecordingState.PAUSED:
                raise SessionStateError("resume", self.state.value)
            self.state = RecordingState.RECORDING
            # Next accepted fix starts a new segment
            self._segment_open = False
            self._schedule_tick()
        logger.info(f"Recording {self.id} resumed")

    def stop(self) -> FinishedRecording:
        """
        Finalize the recording and release the location subscription.

        Returns:
            Immutable FinishedRecording snapshot
        """
        with self._lock:
            if not self.is_active:
                raise SessionStateError("stop", self.state.value)

            self._cancel_tick()
            if self._subscription is not None:
                self._subscription.cancel()
                self._subscription = None

            self.state = RecordingState.STOPPED
            self.ended_at = self._clock()
            self._finished = FinishedRecording(
                id=self.id,
                name=self.name,
                description=self.description,
                started_at=self.started_at,
                ended_at=self.ended_at,
                stats=self._snapshot(),
                fixes=tuple(self._fixes),
            )

        stats = self._finished.stats
        logger.info(
            f"Recording {self.id} stopped: {stats.fix_count} fixes, "
            f"{stats.distance_m:.0f} m, {stats.duration_s:.0f} s, "
            f"{stats.rejected_count} rejected"
        )
        return self._finished

    @property
    def finished(self) -> Optional[FinishedRecording]:
        """Snapshot produced by stop(), None until then."""
        return self._finished

    # =========================================================================
    # Fix ingestion
    # =========================================================================

    def on_location_update(self, fix: GPSFix) -> bool:
        """
        Offer one fix to the session.

        Returns:
            True if the fix was accepted
        """
        with self._lock:
            if self.state != RecordingState.RECORDING:
                if self.state == RecordingState.PAUSED:
                    self.ignored_count += 1
                return False

            rejection = self._check(fix)
            if rejection is not None:
                self.rejections[rejection] += 1
                logger.debug(f"Recording {self.id} rejected fix at {fix.timestamp}: {rejection.value}")
                return False

            self._accept(fix)
            return True

    def _check(self, fix: GPSFix) -> Optional[FixRejection]:
        last = self.last_fix
        if last is not None and fix.timestamp <= last.timestamp:
            return FixRejection.NOT_MONOTONIC
        if (
            self.max_accuracy_m is not None
            and fix.accuracy is not None
            and fix.accuracy > self.max_accuracy_m
        ):
            return FixRejection.LOW_ACCURACY
        return None

    def _accept(self, fix: GPSFix) -> None:
        last = self.last_fix
        if last is not None and self._segment_open:
            step = distance(last, fix)
            dt = (fix.timestamp - last.timestamp).total_seconds()
            speed = average_speed(step, dt)

            self._distance += step
            self._duration += dt
            self._current_speed = speed
            self._max_speed = max(self._max_speed, speed)

            climb = elevation_delta(last, fix)
            if climb > 0:
                self._gain += climb
            else:
                self._loss -= climb
        else:
            self._current_speed = 0.0

        self._segment_open = True
        self._fixes.append(fix)

    # =========================================================================
    # Statistics
    # =========================================================================

    @property
    def rejected_count(self) -> int:
        return sum(self.rejections.values())

    def get_current_stats(self) -> RecordingStats:
        """Current aggregates; all zero when no fixes were accepted."""
        with self._lock:
            return self._snapshot()

    def _snapshot(self) -> RecordingStats:
        if not self._fixes:
            return RecordingStats(rejected_count=self.rejected_count)
        return RecordingStats(
            distance_m=self._distance,
            duration_s=self._duration,
            average_speed_mps=average_speed(self._distance, self._duration),
            max_speed_mps=self._max_speed,
            current_speed_mps=self._current_speed,
            elevation_gain_m=self._gain,
            elevation_loss_m=self._loss,
            fix_count=len(self._fixes),
            rejected_count=self.rejected_count,
        )

    def _schedule_tick(self) -> None:
        if self._scheduler is None or self._on_stats is None or self._stats_refresh_seconds <= 0:
            return
        self._ticker = self._scheduler.call_later(self._stats_refresh_seconds, self._tick)

    def _cancel_tick(self) -> None:
        if self._ticker is not None:
            self._ticker.cancel()
            self._ticker = None

    def _tick(self) -> None:
        with self._lock:
            self._ticker = None
            if self.state != RecordingState.RECORDING:
                return
            stats = self._snapshot()
            self._schedule_tick()
        self._on_stats(stats)
