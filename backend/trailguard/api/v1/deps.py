"""
Route dependencies.

Trackers live on the application state and are resolved per request.
"""

from fastapi import Depends, HTTPException, Request

from trailguard.features.tracking import HikeTracker, TrackerRegistry


def get_registry(request: Request) -> TrackerRegistry:
    return request.app.state.trackers


def get_tracker(
    recording_id: str,
    registry: TrackerRegistry = Depends(get_registry)
) -> HikeTracker:
    tracker = registry.get(recording_id)
    if tracker is None:
        raise HTTPException(status_code=404, detail=f"Recording {recording_id} not found")
    return tracker
