"""
Shared utilities (NOT business logic).

Usage:
    from trailguard.shared import haversine, average_speed
    from trailguard.shared.formatters import format_distance
"""
from .geo import (
    haversine,
    distance,
    total_distance,
    average_speed,
    distance_to_route,
    EARTH_RADIUS_M,
)
from .elevation import (
    elevation_delta,
    elevation_gain,
    elevation_loss,
    calculate_elevation_changes,
)
from .formatters import (
    format_distance,
    format_duration,
    format_speed,
)
from .constants import (
    TrailDifficulty,
    DIFFICULTY_SCALE,
    ExperienceLevel,
    AlertType,
    DistanceUnit,
    SpeedUnit,
)
from .errors import (
    TrailGuardError,
    ValidationError,
    SessionStateError,
    LocationUnavailableError,
)
from .scheduler import Scheduler, TimerHandle, AsyncioScheduler, utcnow
from .telegram import TelegramNotifier

__all__ = [
    # geo
    "haversine",
    "distance",
    "total_distance",
    "average_speed",
    "distance_to_route",
    "EARTH_RADIUS_M",
    # elevation
    "elevation_delta",
    "elevation_gain",
    "elevation_loss",
    "calculate_elevation_changes",
    # formatters
    "format_distance",
    "format_duration",
    "format_speed",
    # constants
    "TrailDifficulty",
    "DIFFICULTY_SCALE",
    "ExperienceLevel",
    "AlertType",
    "DistanceUnit",
    "SpeedUnit",
    # errors
    "TrailGuardError",
    "ValidationError",
    "SessionStateError",
    "LocationUnavailableError",
    # scheduler
    "Scheduler",
    "TimerHandle",
    "AsyncioScheduler",
    "utcnow",
    # telegram
    "TelegramNotifier",
]
