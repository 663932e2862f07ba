"""
Recording export.

Serializes a finished recording as GPX (via gpxpy) or as the JSON
export envelope used by clients.
"""

import logging
from typing import Any, Optional

import gpxpy
import gpxpy.gpx

from trailguard.shared.scheduler import utcnow

from .models import FinishedRecording

logger = logging.getLogger(__name__)

EXPORT_VERSION = "1.0"
GPX_CREATOR = "TrailGuard"


def to_gpx(recording: FinishedRecording) -> str:
    """
    Build a GPX 1.1 document with one track and one segment.

    Args:
        recording: Finished recording

    Returns:
        GPX XML text
    """
    gpx = gpxpy.gpx.GPX()
    gpx.creator = GPX_CREATOR
    gpx.name = recording.name
    gpx.description = recording.description
    gpx.time = recording.started_at

    track = gpxpy.gpx.GPXTrack(name=recording.name, description=recording.description)
    segment = gpxpy.gpx.GPXTrackSegment()
    track.segments.append(segment)
    gpx.tracks.append(track)

    for fix in recording.fixes:
        point = gpxpy.gpx.GPXTrackPoint(
            latitude=fix.latitude,
            longitude=fix.longitude,
            elevation=fix.altitude,
            time=fix.timestamp,
        )
        segment.points.append(point)

    logger.debug(f"Exported recording {recording.id} as GPX ({len(recording.fixes)} points)")
    return gpx.to_xml(version="1.1")


def to_json(recording: FinishedRecording, exported_at: Optional[Any] = None) -> dict:
    """
    Build the JSON export envelope.

    Returns:
        Dict with version, exported_at, format and trail
    """
    exported_at = exported_at or utcnow()
    stats = recording.stats

    return {
        "version": EXPORT_VERSION,
        "exported_at": exported_at.isoformat(),
        "format": "json",
        "trail": {
            "id": recording.id,
            "name": recording.name,
            "description": recording.description,
            "started_at": recording.started_at.isoformat(),
            "ended_at": recording.ended_at.isoformat(),
            "distance_m": stats.distance_m,
            "duration_s": stats.duration_s,
            "average_speed_mps": stats.average_speed_mps,
            "max_speed_mps": stats.max_speed_mps,
            "elevation_gain_m": stats.elevation_gain_m,
            "elevation_loss_m": stats.elevation_loss_m,
            "coordinates": [
                {
                    "latitude": fix.latitude,
                    "longitude": fix.longitude,
                    "altitude": fix.altitude,
                    "accuracy": fix.accuracy,
                    "timestamp": fix.timestamp.isoformat(),
                }
                for fix in recording.fixes
            ],
        },
    }
