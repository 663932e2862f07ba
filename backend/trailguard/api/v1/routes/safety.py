"""
Safety Routes

Endpoints feeding the emergency monitor and acting on alerts.
"""

from fastapi import APIRouter, Depends, HTTPException

from trailguard.api.v1.deps import get_tracker
from trailguard.features.safety import AccelerationSample
from trailguard.features.safety.schemas import (
    AlertActionResponse,
    AlertEventSchema,
    BatteryReading,
    ContactAlertSchema,
    MonitorStateSchema,
    MotionReading,
    SafetyStatusResponse,
)
from trailguard.features.tracking import HikeTracker
from trailguard.shared.errors import ValidationError

router = APIRouter()


def _state(tracker: HikeTracker) -> MonitorStateSchema:
    return MonitorStateSchema.model_validate(tracker.monitor.snapshot())


@router.get("/{recording_id}/safety", response_model=SafetyStatusResponse)
async def get_safety_status(tracker: HikeTracker = Depends(get_tracker)):
    """Monitor flags, alerting setup and recent alert events."""
    return SafetyStatusResponse(
        state=_state(tracker),
        alerting=ContactAlertSchema.model_validate(tracker.monitor.contact_alert_summary()),
        events=[AlertEventSchema.model_validate(e) for e in tracker.events],
    )


@router.post("/{recording_id}/safety/battery", response_model=MonitorStateSchema)
async def report_battery(reading: BatteryReading, tracker: HikeTracker = Depends(get_tracker)):
    tracker.push_battery(reading.level)
    return _state(tracker)


@router.post("/{recording_id}/safety/motion", response_model=MonitorStateSchema)
async def report_motion(reading: MotionReading, tracker: HikeTracker = Depends(get_tracker)):
    if reading.timestamp is not None:
        sample = AccelerationSample(reading.x, reading.y, reading.z, reading.timestamp)
    else:
        sample = AccelerationSample(reading.x, reading.y, reading.z)
    tracker.push_motion(sample)
    return _state(tracker)


@router.post("/{recording_id}/safety/alert", response_model=AlertActionResponse)
async def trigger_alert(tracker: HikeTracker = Depends(get_tracker)):
    """
    Manual emergency alert.

    Contacts are notified after the countdown unless cancelled.
    """
    try:
        changed = tracker.monitor.trigger_manual()
    except ValidationError as e:
        raise HTTPException(status_code=409, detail=str(e))
    return AlertActionResponse(changed=changed, state=_state(tracker))


@router.post("/{recording_id}/safety/cancel", response_model=AlertActionResponse)
async def cancel_alert(tracker: HikeTracker = Depends(get_tracker)):
    """Hiker is OK: abort pending alerts and clear anomaly flags."""
    changed = tracker.monitor.cancel_alert()
    return AlertActionResponse(changed=changed, state=_state(tracker))
