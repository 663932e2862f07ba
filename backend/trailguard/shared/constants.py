"""
Unified constants for trail difficulty, alerts and units.

This module provides a single source of truth for enum naming
across the entire application.
"""

from enum import Enum


class TrailDifficulty(str, Enum):
    """
    Trail difficulty tiers, ordered from easiest to hardest.

    Used in:
    - Completion reward multipliers
    - Personalized difficulty assessment
    """
    EASY = "Easy"
    MODERATE = "Moderate"
    HARD = "Hard"
    EXPERT = "Expert"


# Ordered scale for index arithmetic
DIFFICULTY_SCALE: list[TrailDifficulty] = [
    TrailDifficulty.EASY,
    TrailDifficulty.MODERATE,
    TrailDifficulty.HARD,
    TrailDifficulty.EXPERT,
]


class ExperienceLevel(str, Enum):
    """Hiker experience tier."""
    BEGINNER = "beginner"
    INTERMEDIATE = "intermediate"
    ADVANCED = "advanced"
    EXPERT = "expert"


class AlertType(str, Enum):
    """
    Emergency alert types raised by the anomaly monitor.

    OFF_TRAIL is only available when a planned route is known.
    """
    FALL = "fall"
    NO_MOVEMENT = "no_movement"
    OFF_TRAIL = "off_trail"
    LOW_BATTERY = "low_battery"
    MANUAL = "manual"


class DistanceUnit(str, Enum):
    METERS = "meters"
    KILOMETERS = "kilometers"
    MILES = "miles"


class SpeedUnit(str, Enum):
    MPS = "mps"
    KMH = "kmh"
    MPH = "mph"


METERS_PER_MILE = 1609.344
