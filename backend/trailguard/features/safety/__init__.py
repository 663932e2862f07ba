"""
Hiker safety module.

Usage:
    from trailguard.features.safety import EmergencyMonitor, MonitorConfig
    from trailguard.features.safety import personalize_difficulty

Available components:
- EmergencyMonitor: no-movement, battery, fall, off-trail and manual alerts
- FallDetector: bounded-history acceleration spike detector
- SensorFeed: in-process battery/motion feed
- AlertNotifier implementations: LoggingAlertNotifier, TelegramAlertNotifier
- personalize_difficulty: difficulty adjusted to a fitness profile
"""
from .fall import AccelerationSample, FallDetector
from .sensors import BatteryProvider, MotionProvider, SensorFeed
from .messages import format_alert_message, format_location
from .notifier import (
    AlertDispatch,
    AlertNotifier,
    LoggingAlertNotifier,
    TelegramAlertNotifier,
)
from .monitor import (
    AlertEvent,
    AlertEventKind,
    EmergencyContactAlert,
    EmergencyMonitor,
    EmergencyMonitorState,
    MonitorConfig,
)
from .difficulty import (
    AdjustmentFactor,
    PersonalizedDifficulty,
    adjust_difficulty,
    personalize_difficulty,
)

__all__ = [
    "AccelerationSample",
    "FallDetector",
    "BatteryProvider",
    "MotionProvider",
    "SensorFeed",
    "format_alert_message",
    "format_location",
    "AlertDispatch",
    "AlertNotifier",
    "LoggingAlertNotifier",
    "TelegramAlertNotifier",
    "AlertEvent",
    "AlertEventKind",
    "EmergencyContactAlert",
    "EmergencyMonitor",
    "EmergencyMonitorState",
    "MonitorConfig",
    "AdjustmentFactor",
    "PersonalizedDifficulty",
    "adjust_difficulty",
    "personalize_difficulty",
]
