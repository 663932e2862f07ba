"""
Tests for GPX and JSON export of finished recordings.
"""

from datetime import datetime, timezone

import gpxpy
import pytest

from trailguard.features.recording import (
    FinishedRecording,
    PushLocationProvider,
    RecordingSession,
    to_gpx,
    to_json,
)


@pytest.fixture
def finished(scheduler, make_fix) -> FinishedRecording:
    session = RecordingSession(PushLocationProvider(), clock=scheduler.now)
    session.start("Big Almaty Lake", "Morning loop")
    session.on_location_update(make_fix(0, altitude=2500, accuracy=5))
    session.on_location_update(make_fix(60, north_m=80, altitude=2520, accuracy=8))
    session.on_location_update(make_fix(120, north_m=160, altitude=2510))
    scheduler.advance(120)
    return session.stop()


class TestGpxExport:

    def test_parses_back(self, finished):
        gpx = gpxpy.parse(to_gpx(finished))

        assert gpx.name == "Big Almaty Lake"
        assert len(gpx.tracks) == 1
        assert len(gpx.tracks[0].segments) == 1

        points = gpx.tracks[0].segments[0].points
        assert len(points) == 3
        assert points[0].latitude == pytest.approx(finished.fixes[0].latitude)
        assert points[1].elevation == pytest.approx(2520)
        assert all(p.horizontal_dilution is None for p in points)
        assert points[2].time == finished.fixes[2].timestamp

    def test_track_length_close_to_recorded(self, finished):
        gpx = gpxpy.parse(to_gpx(finished))
        assert gpx.length_2d() == pytest.approx(finished.distance_m, rel=0.01)

    def test_empty_recording(self, scheduler):
        session = RecordingSession(PushLocationProvider(), clock=scheduler.now)
        session.start("Nothing")
        gpx = gpxpy.parse(to_gpx(session.stop()))
        assert gpx.get_points_no() == 0


class TestJsonExport:

    def test_envelope(self, finished):
        exported_at = datetime(2024, 6, 2, tzinfo=timezone.utc)
        data = to_json(finished, exported_at=exported_at)

        assert data["version"] == "1.0"
        assert data["format"] == "json"
        assert data["exported_at"] == exported_at.isoformat()

        trail = data["trail"]
        assert trail["id"] == finished.id
        assert trail["name"] == "Big Almaty Lake"
        assert trail["description"] == "Morning loop"
        assert trail["distance_m"] == finished.distance_m
        assert trail["duration_s"] == 120

    def test_coordinates(self, finished):
        coords = to_json(finished)["trail"]["coordinates"]
        assert len(coords) == 3
        assert coords[0]["altitude"] == 2500
        assert coords[0]["accuracy"] == 5
        assert coords[2]["accuracy"] is None
        assert coords[1]["timestamp"] == finished.fixes[1].timestamp.isoformat()
