"""
Hike tracker service.

One explicitly constructed tracker per user hike wires the recording
session, the emergency monitor and completion verification around a
single location provider. Trackers are held by a TrackerRegistry that
lives on the application state, not in module globals.
"""

import logging
from collections import deque
from typing import Optional, Sequence

from trailguard.features.completion import (
    CompletionPolicy,
    CompletionResult,
    RewardSink,
    verify_completion,
)
from trailguard.features.profiles import UserFitnessProfile
from trailguard.features.recording import (
    FinishedRecording,
    GPSFix,
    PushLocationProvider,
    RecordingSession,
    RecordingStats,
)
from trailguard.features.safety import (
    AccelerationSample,
    AlertEvent,
    AlertNotifier,
    EmergencyMonitor,
    LoggingAlertNotifier,
    MonitorConfig,
    SensorFeed,
    TelegramAlertNotifier,
)
from trailguard.shared.constants import TrailDifficulty
from trailguard.shared.scheduler import Scheduler
from trailguard.shared.telegram import TelegramNotifier

logger = logging.getLogger(__name__)

EVENT_HISTORY_SIZE = 50


class HikeTracker:
    """
    Recording + safety for one hike.

    Usage:
        tracker = HikeTracker(scheduler, profile=profile)
        tracker.start("Ridge loop")
        tracker.push_fix(fix)
        finished, result = tracker.stop()
    """

    def __init__(
        self,
        scheduler: Scheduler,
        profile: Optional[UserFitnessProfile] = None,
        difficulty: TrailDifficulty = TrailDifficulty.MODERATE,
        planned_route: Optional[Sequence[tuple[float, float]]] = None,
        notifier: Optional[AlertNotifier] = None,
        reward_sink: Optional[RewardSink] = None,
        policy: Optional[CompletionPolicy] = None,
        monitor_config: Optional[MonitorConfig] = None,
        max_accuracy_m: Optional[float] = 50.0,
        stats_refresh_seconds: float = 0.0,
        tracker_id: Optional[str] = None,
    ):
        self.profile = profile
        self.difficulty = difficulty
        self.policy = policy or CompletionPolicy()
        self.reward_sink = reward_sink

        self.provider = PushLocationProvider()
        self.battery: SensorFeed[float] = SensorFeed()
        self.motion: SensorFeed[AccelerationSample] = SensorFeed()

        self.session = RecordingSession(
            self.provider,
            max_accuracy_m=max_accuracy_m,
            session_id=tracker_id,
            clock=scheduler.now,
            scheduler=scheduler,
            stats_refresh_seconds=stats_refresh_seconds,
            on_stats=self._on_stats,
        )
        self.monitor = EmergencyMonitor(
            scheduler,
            contacts=profile.emergency_contacts if profile else (),
            notifier=notifier,
            config=monitor_config or MonitorConfig(max_accuracy_m=max_accuracy_m),
            location_provider=self.provider,
            battery=self.battery,
            motion=self.motion,
            planned_route=planned_route,
        )

        self.events: deque[AlertEvent] = deque(maxlen=EVENT_HISTORY_SIZE)
        self.monitor.add_listener(self.events.append)

        self.live_stats = RecordingStats.empty()
        self.result: Optional[CompletionResult] = None
        self.reward_submitted = False

    @property
    def id(self) -> str:
        return self.session.id

    # =========================================================================
    # Lifecycle
    # =========================================================================

    def start(self, name: str, description: Optional[str] = None) -> None:
        self.session.start(name, description)
        self.monitor.set_hiking(True)

    def pause(self) -> None:
        self.session.pause()

    def resume(self) -> None:
        self.session.resume()

    def stop(self) -> tuple[FinishedRecording, CompletionResult]:
        """
        Stop recording and monitoring, then verify completion.

        Completed results are forwarded to the reward sink.
        """
        finished = self.session.stop()
        self.monitor.set_hiking(False)
        self.result = self.verify()

        if self.result.completed and self.reward_sink is not None:
            try:
                self.reward_sink.submit(finished, self.result)
                self.reward_submitted = True
            except Exception as e:
                logger.error(f"Reward submission failed for {finished.id}: {e}")

        return finished, self.result

    def verify(self, policy: Optional[CompletionPolicy] = None) -> CompletionResult:
        """(Re-)verify the finished recording; builds a new result each time."""
        return verify_completion(
            self.session.finished,
            policy or self.policy,
            difficulty=self.difficulty,
            profile=self.profile,
        )

    def close(self) -> None:
        """Tear down without verification (abandoned hike, shutdown)."""
        if self.session.is_active:
            self.session.stop()
        self.monitor.set_hiking(False)

    # =========================================================================
    # Inputs
    # =========================================================================

    def push_fix(self, fix: GPSFix) -> bool:
        """
        Feed one fix to every consumer.

        Returns:
            True if the recording session accepted it
        """
        before = len(self.session.fixes)
        self.provider.push(fix)
        return len(self.session.fixes) > before

    def push_battery(self, level: float) -> None:
        self.battery.push(level)

    def push_motion(self, sample: AccelerationSample) -> None:
        self.motion.push(sample)

    def _on_stats(self, stats: RecordingStats) -> None:
        self.live_stats = stats


class TrackerRegistry:
    """
    Trackers by recording id.

    At most `max_finished` stopped trackers are kept; the oldest are
    evicted when a new tracker is created.

    Usage:
        registry = TrackerRegistry.from_settings(settings, scheduler)
        tracker = registry.create(profile=profile)
    """

    def __init__(
        self,
        scheduler: Scheduler,
        notifier: Optional[AlertNotifier] = None,
        reward_sink: Optional[RewardSink] = None,
        policy: Optional[CompletionPolicy] = None,
        monitor_config: Optional[MonitorConfig] = None,
        max_accuracy_m: Optional[float] = 50.0,
        stats_refresh_seconds: float = 0.0,
        max_finished: int = 100,
    ):
        self.scheduler = scheduler
        self.notifier = notifier
        self.reward_sink = reward_sink
        self.policy = policy
        self.monitor_config = monitor_config
        self.max_accuracy_m = max_accuracy_m
        self.stats_refresh_seconds = stats_refresh_seconds
        self.max_finished = max_finished
        self._trackers: dict[str, HikeTracker] = {}

    @classmethod
    def from_settings(cls, settings, scheduler: Scheduler, reward_sink: Optional[RewardSink] = None) -> "TrackerRegistry":
        if settings.telegram_bot_token:
            notifier: AlertNotifier = TelegramAlertNotifier(TelegramNotifier(settings.telegram_bot_token))
        else:
            notifier = LoggingAlertNotifier()

        return cls(
            scheduler,
            notifier=notifier,
            reward_sink=reward_sink,
            policy=CompletionPolicy.from_settings(settings),
            monitor_config=MonitorConfig.from_settings(settings),
            max_accuracy_m=settings.max_fix_accuracy_m,
            stats_refresh_seconds=settings.stats_refresh_seconds,
            max_finished=settings.max_finished_recordings,
        )

    def create(
        self,
        profile: Optional[UserFitnessProfile] = None,
        difficulty: TrailDifficulty = TrailDifficulty.MODERATE,
        planned_route: Optional[Sequence[tuple[float, float]]] = None,
    ) -> HikeTracker:
        self._evict_finished()
        tracker = HikeTracker(
            self.scheduler,
            profile=profile,
            difficulty=difficulty,
            planned_route=planned_route,
            notifier=self.notifier,
            reward_sink=self.reward_sink,
            policy=self.policy,
            monitor_config=self.monitor_config,
            max_accuracy_m=self.max_accuracy_m,
            stats_refresh_seconds=self.stats_refresh_seconds,
        )
        self._trackers[tracker.id] = tracker
        return tracker

    def _evict_finished(self) -> None:
        finished = [
            tracker_id for tracker_id, tracker in self._trackers.items()
            if tracker.session.finished is not None and not tracker.session.is_active
        ]
        # insertion order, oldest first
        for tracker_id in finished[:max(0, len(finished) - self.max_finished)]:
            self.remove(tracker_id)
            logger.debug(f"Evicted finished tracker {tracker_id}")

    def get(self, tracker_id: str) -> Optional[HikeTracker]:
        return self._trackers.get(tracker_id)

    def remove(self, tracker_id: str) -> None:
        tracker = self._trackers.pop(tracker_id, None)
        if tracker is not None:
            tracker.close()

    def close_all(self) -> None:
        for tracker_id in list(self._trackers):
            self.remove(tracker_id)
        logger.info("All hike trackers closed")

    def __len__(self) -> int:
        return len(self._trackers)
