"""
Recording data model.

GPSFix is immutable once recorded; FinishedRecording is the frozen
snapshot a stopped session hands to verification and export.
"""

from dataclasses import dataclass, field
from datetime import datetime
from enum import Enum
from typing import Optional


class RecordingState(str, Enum):
    """Lifecycle state of a recording session."""
    IDLE = "idle"
    RECORDING = "recording"
    PAUSED = "paused"
    STOPPED = "stopped"


class FixRejection(str, Enum):
    """Why an incoming fix was dropped (low-confidence fix)."""
    NOT_MONOTONIC = "not_monotonic"
    LOW_ACCURACY = "low_accuracy"


@dataclass(frozen=True)
class GPSFix:
    """One GPS sample."""
    latitude: float
    longitude: float
    timestamp: datetime
    altitude: Optional[float] = None    # meters
    accuracy: Optional[float] = None    # horizontal, meters

    def __post_init__(self):
        if not -90.0 <= self.latitude <= 90.0:
            raise ValueError(f"latitude out of range: {self.latitude}")
        if not -180.0 <= self.longitude <= 180.0:
            raise ValueError(f"longitude out of range: {self.longitude}")
        if self.timestamp.tzinfo is None or self.timestamp.utcoffset() is None:
            raise ValueError("timestamp must be timezone-aware")


@dataclass(frozen=True)
class RecordingStats:
    """Aggregates over the accepted fixes of a session."""
    distance_m: float = 0.0
    duration_s: float = 0.0
    average_speed_mps: float = 0.0
    max_speed_mps: float = 0.0
    current_speed_mps: float = 0.0
    elevation_gain_m: float = 0.0
    elevation_loss_m: float = 0.0
    fix_count: int = 0
    rejected_count: int = 0

    @classmethod
    def empty(cls) -> "RecordingStats":
        return cls()


@dataclass(frozen=True)
class FinishedRecording:
    """Immutable result of stopping a recording session."""
    id: str
    name: str
    started_at: datetime
    ended_at: datetime
    stats: RecordingStats
    fixes: tuple[GPSFix, ...] = field(default_factory=tuple)
    description: Optional[str] = None

    @property
    def distance_m(self) -> float:
        return self.stats.distance_m

    @property
    def duration_s(self) -> float:
        return self.stats.duration_s

    @property
    def fix_count(self) -> int:
        return len(self.fixes)
