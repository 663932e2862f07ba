"""
Trail recording module.

Usage:
    from trailguard.features.recording import RecordingSession, PushLocationProvider

Available components:
- GPSFix, RecordingStats, FinishedRecording: data model
- RecordingSession: lifecycle state machine and incremental aggregates
- PushLocationProvider: in-process location provider
- to_gpx, to_json: export of finished recordings
"""
from .models import (
    GPSFix,
    RecordingState,
    RecordingStats,
    FinishedRecording,
    FixRejection,
)
from .provider import LocationProvider, PushLocationProvider, Subscription
from .session import RecordingSession
from .export import to_gpx, to_json

__all__ = [
    "GPSFix",
    "RecordingState",
    "RecordingStats",
    "FinishedRecording",
    "FixRejection",
    "LocationProvider",
    "PushLocationProvider",
    "Subscription",
    "RecordingSession",
    "to_gpx",
    "to_json",
]
