"""
Emergency / anomaly monitor.

Runs only while the hiker is hiking AND has at least one emergency
contact; otherwise no timers are scheduled and no listeners attached.

Checks:
- no movement beyond a small threshold within the window -> no_movement
- battery at or below the threshold -> low_battery
- acceleration magnitude spike -> fall
- distance from the planned route -> off_trail
- manual trigger -> manual

Every raised alert starts a cancellable countdown. When it expires the
alert is handed to the notification collaborator; cancelling ("I'm OK")
clears all anomaly flags and sends nothing.
"""

import asyncio
import inspect
import logging
import threading
from dataclasses import dataclass, field, replace
from datetime import datetime, timedelta
from enum import Enum
from functools import partial
from typing import Callable, Iterable, List, Optional, Sequence

from trailguard.features.profiles import EmergencyContact
from trailguard.features.recording.models import GPSFix
from trailguard.features.recording.provider import LocationProvider
from trailguard.shared.constants import AlertType
from trailguard.shared.errors import ValidationError
from trailguard.shared.geo import distance, distance_to_route
from trailguard.shared.scheduler import Scheduler, TimerHandle

from .fall import AccelerationSample, FallDetector
from .messages import format_alert_message
from .notifier import AlertDispatch, AlertNotifier, LoggingAlertNotifier
from .sensors import BatteryProvider, MotionProvider

logger = logging.getLogger(__name__)


class AlertEventKind(str, Enum):
    RAISED = "raised"
    CANCELLED = "cancelled"
    SENT = "sent"
    SEND_FAILED = "send_failed"
    CHECK_IN = "check_in"


@dataclass(frozen=True)
class AlertEvent:
    """Side effect emitted to listeners; the monitor never delivers itself."""
    kind: AlertEventKind
    at: datetime
    alert_type: Optional[AlertType] = None
    message: Optional[str] = None
    contact_count: int = 0
    error: Optional[str] = None


@dataclass(frozen=True)
class MonitorConfig:
    """Thresholds and timer lengths for the anomaly monitor."""
    no_movement_minutes: float = 30.0
    movement_threshold_m: float = 5.0
    low_battery_percent: float = 20.0
    fall_threshold: float = 20.0
    motion_history_size: int = 100
    countdown_seconds: float = 30.0
    check_in_minutes: float = 60.0
    off_trail_distance_m: float = 500.0
    max_accuracy_m: Optional[float] = 50.0

    @classmethod
    def from_settings(cls, settings) -> "MonitorConfig":
        return cls(
            no_movement_minutes=settings.no_movement_minutes,
            movement_threshold_m=settings.movement_threshold_m,
            low_battery_percent=settings.low_battery_percent,
            fall_threshold=settings.fall_threshold,
            motion_history_size=settings.motion_history_size,
            countdown_seconds=settings.alert_countdown_seconds,
            check_in_minutes=settings.check_in_minutes,
            off_trail_distance_m=settings.off_trail_distance_m,
            max_accuracy_m=settings.max_fix_accuracy_m,
        )


@dataclass
class EmergencyMonitorState:
    """In-memory flags of one monitoring run. Reset when monitoring stops."""
    is_monitoring: bool = False
    last_movement: Optional[datetime] = None
    fall_detected: bool = False
    no_movement_detected: bool = False
    off_trail_detected: bool = False
    alerts_sent: int = 0
    emergency_triggered: bool = False
    battery_level: Optional[float] = None
    last_check_in: Optional[datetime] = None
    pending_alerts: List[AlertType] = field(default_factory=list)


@dataclass(frozen=True)
class EmergencyContactAlert:
    """Summary of the alerting setup shown to clients."""
    enabled: bool
    contacts: List[EmergencyContact]
    no_movement_minutes: float
    low_battery_percent: float
    off_trail_distance_m: float
    last_check_in: Optional[datetime] = None
    next_check_in: Optional[datetime] = None


EventListener = Callable[[AlertEvent], None]


class EmergencyMonitor:
    """
    Timer/threshold subsystem raising safety alerts during a hike.

    Usage:
        monitor = EmergencyMonitor(scheduler, contacts, location_provider=provider)
        monitor.add_listener(events.append)
        monitor.set_hiking(True)
        ...
        monitor.cancel_alert()   # "I'm OK"
        monitor.set_hiking(False)
    """

    def __init__(
        self,
        scheduler: Scheduler,
        contacts: Iterable[EmergencyContact] = (),
        notifier: Optional[AlertNotifier] = None,
        config: Optional[MonitorConfig] = None,
        location_provider: Optional[LocationProvider] = None,
        battery: Optional[BatteryProvider] = None,
        motion: Optional[MotionProvider] = None,
        planned_route: Optional[Sequence[tuple[float, float]]] = None,
    ):
        self.config = config or MonitorConfig()
        self.contacts: List[EmergencyContact] = list(contacts)
        self.notifier = notifier or LoggingAlertNotifier()
        self.planned_route = list(planned_route) if planned_route else []
        self._scheduler = scheduler
        self._location_provider = location_provider
        self._battery = battery
        self._motion = motion
        self._lock = threading.RLock()

        self.state = EmergencyMonitorState()
        self._is_hiking = False
        self._listeners: list[EventListener] = []
        self._subscriptions: list = []
        self._no_movement_timer: Optional[TimerHandle] = None
        self._check_in_timer: Optional[TimerHandle] = None
        self._countdowns: dict[AlertType, TimerHandle] = {}
        self._send_tasks: set[asyncio.Task] = set()
        self._last_location: Optional[GPSFix] = None
        self._battery_alerted = False
        self._started_at: Optional[datetime] = None
        self._fall = FallDetector(self.config.fall_threshold, self.config.motion_history_size)

    # =========================================================================
    # Activation gate
    # =========================================================================

    @property
    def is_monitoring(self) -> bool:
        return self.state.is_monitoring

    @property
    def current_location(self) -> Optional[GPSFix]:
        return self._last_location

    @property
    def motion_history(self) -> tuple[AccelerationSample, ...]:
        return tuple(self._fall.history)

    def add_listener(self, listener: EventListener) -> None:
        self._listeners.append(listener)

    def set_hiking(self, is_hiking: bool) -> None:
        with self._lock:
            self._is_hiking = is_hiking
            self._sync_activation()

    def set_contacts(self, contacts: Iterable[EmergencyContact]) -> None:
        with self._lock:
            self.contacts = list(contacts)
            self._sync_activation()

    def _sync_activation(self) -> None:
        should_monitor = self._is_hiking and bool(self.contacts)
        if should_monitor and not self.state.is_monitoring:
            self._start()
        elif not should_monitor and self.state.is_monitoring:
            self._stop()

    def _start(self) -> None:
        now = self._scheduler.now()
        self.state = EmergencyMonitorState(is_monitoring=True, last_movement=now)
        self._started_at = now
        self._last_location = None
        self._battery_alerted = False
        self._fall.clear()

        if self._location_provider is not None:
            self._attach("location", self._location_provider, self.on_location)
        if self._battery is not None:
            self._attach("battery", self._battery, self.on_battery_level)
        if self._motion is not None:
            self._attach("motion", self._motion, self.on_acceleration)

        self._arm_no_movement_timer()
        self._arm_check_in_timer()
        logger.info(f"Emergency monitoring started ({len(self.contacts)} contacts)")

        level = getattr(self._battery, "level", None) if self._battery is not None else None
        if level is not None:
            self.on_battery_level(level)

    def _attach(self, name: str, provider, callback) -> None:
        try:
            self._subscriptions.append(provider.subscribe(callback))
        except Exception as e:
            logger.warning(f"Emergency monitor running without {name} feed: {e}")

    def _stop(self) -> None:
        for subscription in self._subscriptions:
            subscription.cancel()
        self._subscriptions = []

        self._cancel_timer("_no_movement_timer")
        self._cancel_timer("_check_in_timer")
        for handle in self._countdowns.values():
            handle.cancel()
        self._countdowns.clear()

        self.state = EmergencyMonitorState()
        self._last_location = None
        self._started_at = None
        self._fall.clear()
        logger.info("Emergency monitoring stopped")

    def _cancel_timer(self, attr: str) -> None:
        handle = getattr(self, attr)
        if handle is not None:
            handle.cancel()
            setattr(self, attr, None)

    # =========================================================================
    # Sensor input
    # =========================================================================

    def on_location(self, fix: GPSFix) -> None:
        with self._lock:
            if not self.state.is_monitoring:
                return

            last = self._last_location
            if last is not None and fix.timestamp <= last.timestamp:
                return
            if (
                self.config.max_accuracy_m is not None
                and fix.accuracy is not None
                and fix.accuracy > self.config.max_accuracy_m
            ):
                return

            if last is not None and distance(last, fix) > self.config.movement_threshold_m:
                self.state.last_movement = self._scheduler.now()
                self.state.no_movement_detected = False
                self._arm_no_movement_timer()

            self._last_location = fix

            if (
                self.planned_route
                and not self.state.off_trail_detected
                and distance_to_route(fix, self.planned_route) > self.config.off_trail_distance_m
            ):
                self.state.off_trail_detected = True
                self._raise(AlertType.OFF_TRAIL)

    def on_battery_level(self, level: float) -> None:
        with self._lock:
            self.state.battery_level = level
            if not self.state.is_monitoring:
                return

            if level > self.config.low_battery_percent:
                self._battery_alerted = False
                return

            if not self.state.emergency_triggered and not self._battery_alerted:
                self._battery_alerted = True
                self._raise(AlertType.LOW_BATTERY)

    def on_acceleration(self, sample: AccelerationSample) -> None:
        with self._lock:
            if not self.state.is_monitoring:
                return
            if self._fall.add(sample) and not self.state.fall_detected:
                logger.warning(f"Potential fall detected (magnitude {sample.magnitude:.1f})")
                self.state.fall_detected = True
                self._raise(AlertType.FALL)

    # =========================================================================
    # Timers
    # =========================================================================

    def _arm_no_movement_timer(self) -> None:
        self._cancel_timer("_no_movement_timer")
        self._no_movement_timer = self._scheduler.call_later(
            self.config.no_movement_minutes * 60, self._on_no_movement
        )

    def _on_no_movement(self) -> None:
        with self._lock:
            self._no_movement_timer = None
            if not self.state.is_monitoring:
                return
            logger.warning(
                f"No movement detected for {self.config.no_movement_minutes:g} minutes"
            )
            self.state.no_movement_detected = True
            self._raise(AlertType.NO_MOVEMENT)

    def _arm_check_in_timer(self) -> None:
        if self.config.check_in_minutes <= 0:
            return
        self._check_in_timer = self._scheduler.call_later(
            self.config.check_in_minutes * 60, self._on_check_in
        )

    def _on_check_in(self) -> None:
        with self._lock:
            self._check_in_timer = None
            if not self.state.is_monitoring:
                return
            self.state.last_check_in = self._scheduler.now()
            self._arm_check_in_timer()
        logger.info("Automatic check-in")
        self._emit(AlertEvent(AlertEventKind.CHECK_IN, at=self.state.last_check_in))

    # =========================================================================
    # Alert protocol
    # =========================================================================

    def trigger_manual(self) -> bool:
        """
        Raise a manual alert.

        Raises:
            ValidationError: monitoring is not active
        """
        with self._lock:
            if not self.state.is_monitoring:
                raise ValidationError("Emergency monitoring is not active")
            return self._raise(AlertType.MANUAL)

    def _raise(self, alert_type: AlertType) -> bool:
        if alert_type in self._countdowns:
            return False

        self.state.emergency_triggered = True
        self.state.alerts_sent += 1
        self._countdowns[alert_type] = self._scheduler.call_later(
            self.config.countdown_seconds, partial(self._on_countdown_expired, alert_type)
        )
        self.state.pending_alerts = list(self._countdowns)

        logger.warning(
            f"Emergency alert raised: {alert_type.value} "
            f"(sending in {self.config.countdown_seconds:g}s unless cancelled)"
        )
        self._emit(AlertEvent(AlertEventKind.RAISED, at=self._scheduler.now(), alert_type=alert_type))
        return True

    def cancel_alert(self) -> bool:
        """
        Hiker confirmed they are OK.

        Aborts every pending countdown and clears all anomaly flags.

        Returns:
            False if there was nothing to cancel
        """
        with self._lock:
            if not self.state.emergency_triggered and not self._countdowns:
                return False

            cancelled = list(self._countdowns)
            for handle in self._countdowns.values():
                handle.cancel()
            self._countdowns.clear()

            self.state.emergency_triggered = False
            self.state.fall_detected = False
            self.state.no_movement_detected = False
            self.state.off_trail_detected = False
            self.state.pending_alerts = []

            if self.state.is_monitoring:
                self.state.last_movement = self._scheduler.now()
                self._arm_no_movement_timer()

        logger.info(f"Emergency alert cancelled by user: {[a.value for a in cancelled]}")
        now = self._scheduler.now()
        for alert_type in cancelled or [None]:
            self._emit(AlertEvent(AlertEventKind.CANCELLED, at=now, alert_type=alert_type))
        return True

    def _on_countdown_expired(self, alert_type: AlertType) -> None:
        with self._lock:
            self._countdowns.pop(alert_type, None)
            self.state.pending_alerts = list(self._countdowns)
            if not self.state.is_monitoring:
                return

            message = format_alert_message(
                alert_type,
                location=self._last_location,
                battery_level=self.state.battery_level,
                no_movement_minutes=self.config.no_movement_minutes,
            )
            dispatch = AlertDispatch(
                alert_type=alert_type,
                message=message,
                contacts=list(self.contacts),
                location=self._last_location,
                created_at=self._scheduler.now(),
            )

        self._deliver(dispatch)

    def _deliver(self, dispatch: AlertDispatch) -> None:
        try:
            result = self.notifier.send_alert(dispatch)
        except Exception as e:
            logger.error(f"Emergency alert delivery failed: {e}")
            self._finish_send(dispatch, False, error=str(e))
            return

        if inspect.isawaitable(result):
            task = asyncio.ensure_future(result)
            # Keep strong references to delivery tasks to prevent GC
            self._send_tasks.add(task)
            task.add_done_callback(partial(self._on_send_done, dispatch))
        else:
            self._finish_send(dispatch, bool(result))

    def _on_send_done(self, dispatch: AlertDispatch, task: asyncio.Task) -> None:
        self._send_tasks.discard(task)
        if task.cancelled():
            self._finish_send(dispatch, False, error="delivery cancelled")
            return
        error = task.exception()
        if error is not None:
            logger.error(f"Emergency alert delivery failed: {error}")
            self._finish_send(dispatch, False, error=str(error))
            return
        self._finish_send(dispatch, bool(task.result()))

    def _finish_send(self, dispatch: AlertDispatch, ok: bool, error: Optional[str] = None) -> None:
        kind = AlertEventKind.SENT if ok else AlertEventKind.SEND_FAILED
        if ok:
            logger.warning(
                f"Emergency alert {dispatch.alert_type.value} sent to "
                f"{len(dispatch.contacts)} contacts"
            )
        else:
            logger.error(f"Emergency alert {dispatch.alert_type.value} was not delivered")
        self._emit(AlertEvent(
            kind,
            at=self._scheduler.now(),
            alert_type=dispatch.alert_type,
            message=dispatch.message,
            contact_count=len(dispatch.contacts),
            error=error if not ok else None,
        ))

    def _emit(self, event: AlertEvent) -> None:
        for listener in list(self._listeners):
            try:
                listener(event)
            except Exception:
                logger.exception(f"Alert listener failed on {event.kind.value} event")

    # =========================================================================
    # Queries
    # =========================================================================

    def snapshot(self) -> EmergencyMonitorState:
        """Copy of the current state."""
        with self._lock:
            return replace(self.state, pending_alerts=list(self.state.pending_alerts))

    def contact_alert_summary(self) -> EmergencyContactAlert:
        last = self.state.last_check_in or self._started_at
        next_check_in = None
        if self.state.is_monitoring and last is not None and self.config.check_in_minutes > 0:
            next_check_in = last + timedelta(minutes=self.config.check_in_minutes)

        return EmergencyContactAlert(
            enabled=bool(self.contacts),
            contacts=list(self.contacts),
            no_movement_minutes=self.config.no_movement_minutes,
            low_battery_percent=self.config.low_battery_percent,
            off_trail_distance_m=self.config.off_trail_distance_m,
            last_check_in=self.state.last_check_in,
            next_check_in=next_check_in,
        )
