"""
Hike tracking module.

Usage:
    from trailguard.features.tracking import HikeTracker, TrackerRegistry
"""
from .service import HikeTracker, TrackerRegistry

__all__ = [
    "HikeTracker",
    "TrackerRegistry",
]
