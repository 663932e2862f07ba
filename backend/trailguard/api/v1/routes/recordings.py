"""
Recording Routes

Endpoints for GPS trail recording and completion.
"""

from typing import Literal

from fastapi import APIRouter, Depends, HTTPException
from fastapi.responses import Response

from trailguard.api.v1.deps import get_registry, get_tracker
from trailguard.features.completion import CompletionResult
from trailguard.features.recording import to_gpx, to_json
from trailguard.features.recording.schemas import (
    CompletionResultSchema,
    FixIn,
    FixResult,
    RecordingResponse,
    RecordingStatsSchema,
    StartRecordingRequest,
    StatsDisplay,
    StopRecordingResponse,
)
from trailguard.features.tracking import HikeTracker, TrackerRegistry
from trailguard.shared.errors import (
    LocationUnavailableError,
    SessionStateError,
    ValidationError,
)
from trailguard.shared.formatters import format_distance, format_duration, format_speed

router = APIRouter()


def _stats_display(stats) -> StatsDisplay:
    return StatsDisplay(
        distance=format_distance(stats.distance_m),
        duration=format_duration(stats.duration_s),
        average_speed=format_speed(stats.average_speed_mps),
        max_speed=format_speed(stats.max_speed_mps),
    )


def _recording_response(tracker: HikeTracker) -> RecordingResponse:
    session = tracker.session
    stats = session.get_current_stats()
    return RecordingResponse(
        id=session.id,
        name=session.name,
        description=session.description,
        state=session.state,
        started_at=session.started_at,
        ended_at=session.ended_at,
        stats=RecordingStatsSchema.model_validate(stats),
        display=_stats_display(stats),
    )


def _completion_response(result: CompletionResult) -> CompletionResultSchema:
    return CompletionResultSchema.model_validate(result)


@router.post("", response_model=RecordingResponse, status_code=201)
async def start_recording(
    request: StartRecordingRequest,
    registry: TrackerRegistry = Depends(get_registry)
):
    """
    Start recording a trail.

    Emergency monitoring starts too when the profile has contacts.
    """
    route = [(p.latitude, p.longitude) for p in request.planned_route or []]
    tracker = registry.create(
        profile=request.profile,
        difficulty=request.difficulty,
        planned_route=route,
    )

    try:
        tracker.start(request.name, request.description)
    except ValidationError as e:
        registry.remove(tracker.id)
        raise HTTPException(status_code=400, detail=str(e))
    except LocationUnavailableError as e:
        registry.remove(tracker.id)
        raise HTTPException(status_code=503, detail=f"Location unavailable: {e}")

    return _recording_response(tracker)


@router.post("/{recording_id}/fixes", response_model=FixResult)
async def submit_fix(fix: FixIn, tracker: HikeTracker = Depends(get_tracker)):
    """
    Submit one GPS fix.

    Out-of-order and low-accuracy fixes are dropped, not errors.
    """
    accepted = tracker.push_fix(fix.to_fix())
    stats = tracker.session.get_current_stats()
    return FixResult(
        accepted=accepted,
        state=tracker.session.state,
        stats=RecordingStatsSchema.model_validate(stats),
        display=_stats_display(stats),
    )


@router.post("/{recording_id}/pause", response_model=RecordingResponse)
async def pause_recording(tracker: HikeTracker = Depends(get_tracker)):
    try:
        tracker.pause()
    except SessionStateError as e:
        raise HTTPException(status_code=409, detail=str(e))
    return _recording_response(tracker)


@router.post("/{recording_id}/resume", response_model=RecordingResponse)
async def resume_recording(tracker: HikeTracker = Depends(get_tracker)):
    try:
        tracker.resume()
    except SessionStateError as e:
        raise HTTPException(status_code=409, detail=str(e))
    return _recording_response(tracker)


@router.post("/{recording_id}/stop", response_model=StopRecordingResponse)
async def stop_recording(tracker: HikeTracker = Depends(get_tracker)):
    """
    Stop recording and verify completion.

    Completed recordings are forwarded to the reward collaborator.
    """
    try:
        _, result = tracker.stop()
    except SessionStateError as e:
        raise HTTPException(status_code=409, detail=str(e))

    return StopRecordingResponse(
        recording=_recording_response(tracker),
        completion=_completion_response(result),
    )


@router.get("/{recording_id}", response_model=RecordingResponse)
async def get_recording(tracker: HikeTracker = Depends(get_tracker)):
    return _recording_response(tracker)


@router.get("/{recording_id}/stats", response_model=RecordingStatsSchema)
async def get_stats(tracker: HikeTracker = Depends(get_tracker)):
    """Current aggregates; all zero before the first accepted fix."""
    return RecordingStatsSchema.model_validate(tracker.session.get_current_stats())


@router.get("/{recording_id}/completion", response_model=CompletionResultSchema)
async def get_completion(tracker: HikeTracker = Depends(get_tracker)):
    """Re-verify the recording; unfinished recordings are not completed."""
    return _completion_response(tracker.verify())


@router.get("/{recording_id}/export")
async def export_recording(
    format: Literal["gpx", "json"] = "gpx",
    tracker: HikeTracker = Depends(get_tracker)
):
    """Export a finished recording as GPX or JSON."""
    finished = tracker.session.finished
    if finished is None:
        raise HTTPException(status_code=409, detail="Recording is not finished")

    if format == "json":
        return to_json(finished)

    return Response(
        content=to_gpx(finished),
        media_type="application/gpx+xml",
        headers={"Content-Disposition": f'attachment; filename="{finished.id}.gpx"'},
    )


@router.delete("/{recording_id}", status_code=204)
async def discard_recording(
    recording_id: str,
    registry: TrackerRegistry = Depends(get_registry)
):
    """Discard a recording and tear down its timers."""
    if registry.get(recording_id) is None:
        raise HTTPException(status_code=404, detail=f"Recording {recording_id} not found")
    registry.remove(recording_id)
    return Response(status_code=204)
