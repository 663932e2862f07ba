"""
API tests for recording endpoints.
"""

from datetime import datetime, timedelta, timezone

import gpxpy
import pytest

API = "/api/v1/recordings"
BASE_TIME = datetime(2024, 6, 1, 8, 0, tzinfo=timezone.utc)
METERS_PER_DEG_LAT = 111_194.93


def fix_payload(seconds, north_m=0.0, **extra):
    payload = {
        "latitude": 43.0 + north_m / METERS_PER_DEG_LAT,
        "longitude": 76.0,
        "timestamp": (BASE_TIME + timedelta(seconds=seconds)).isoformat(),
    }
    payload.update(extra)
    return payload


@pytest.fixture
def recording_id(client):
    response = client.post(API, json={"name": "Kok-Zhailau", "difficulty": "Hard"})
    assert response.status_code == 201
    return response.json()["id"]


def walk(client, recording_id, count=12):
    for i in range(count):
        response = client.post(
            f"{API}/{recording_id}/fixes",
            json=fix_payload(i * 40, north_m=i * 60, altitude=1500 + i),
        )
        assert response.status_code == 200


# =============================================================================
# Lifecycle
# =============================================================================

class TestLifecycle:

    def test_health(self, client):
        response = client.get("/health")
        assert response.status_code == 200
        assert response.json()["status"] == "healthy"

    def test_start(self, client, registry):
        response = client.post(API, json={"name": "Kok-Zhailau", "description": "north ridge"})

        assert response.status_code == 201
        data = response.json()
        assert data["state"] == "recording"
        assert data["name"] == "Kok-Zhailau"
        assert data["stats"]["fix_count"] == 0
        assert data["stats"]["distance_m"] == 0.0
        assert data["display"]["distance"] == "0 m"
        assert data["display"]["duration"] == "0:00"
        assert len(registry) == 1

    def test_start_blank_name(self, client, registry):
        response = client.post(API, json={"name": "   "})
        assert response.status_code == 400
        assert len(registry) == 0

    def test_start_missing_name(self, client):
        assert client.post(API, json={}).status_code == 422

    def test_unknown_recording(self, client):
        assert client.get(f"{API}/nope").status_code == 404
        assert client.post(f"{API}/nope/pause").status_code == 404

    def test_pause_resume(self, client, recording_id):
        response = client.post(f"{API}/{recording_id}/pause")
        assert response.status_code == 200
        assert response.json()["state"] == "paused"

        assert client.post(f"{API}/{recording_id}/pause").status_code == 409

        response = client.post(f"{API}/{recording_id}/resume")
        assert response.json()["state"] == "recording"
        assert client.post(f"{API}/{recording_id}/resume").status_code == 409

    def test_stop_twice(self, client, recording_id):
        assert client.post(f"{API}/{recording_id}/stop").status_code == 200
        response = client.post(f"{API}/{recording_id}/stop")
        assert response.status_code == 409
        assert "stopped" in response.json()["detail"]

    def test_delete(self, client, recording_id, registry):
        assert client.delete(f"{API}/{recording_id}").status_code == 204
        assert client.get(f"{API}/{recording_id}").status_code == 404
        assert len(registry) == 0


# =============================================================================
# Fixes and stats
# =============================================================================

class TestFixes:

    def test_accepted_and_rejected(self, client, recording_id):
        response = client.post(f"{API}/{recording_id}/fixes", json=fix_payload(0))
        assert response.json()["accepted"] is True

        response = client.post(f"{API}/{recording_id}/fixes", json=fix_payload(0, north_m=30))
        data = response.json()
        assert data["accepted"] is False
        assert data["stats"]["fix_count"] == 1
        assert data["stats"]["rejected_count"] == 1

        response = client.post(f"{API}/{recording_id}/fixes", json=fix_payload(10, accuracy=120))
        assert response.json()["accepted"] is False

    def test_invalid_coordinates(self, client, recording_id):
        payload = fix_payload(0)
        payload["latitude"] = 95.0
        assert client.post(f"{API}/{recording_id}/fixes", json=payload).status_code == 422

    def test_stats(self, client, recording_id):
        walk(client, recording_id, count=3)
        stats = client.get(f"{API}/{recording_id}/stats").json()
        assert stats["fix_count"] == 3
        assert stats["duration_s"] == 80
        assert stats["distance_m"] == pytest.approx(120, rel=1e-3)
        assert stats["elevation_gain_m"] == pytest.approx(2)

    def test_display_formatting(self, client, recording_id):
        walk(client, recording_id, count=2)
        response = client.post(f"{API}/{recording_id}/fixes", json=fix_payload(80, north_m=120))
        display = response.json()["display"]
        assert display["distance"] == "120 m"
        assert display["duration"] == "1:20"
        assert display["average_speed"] == "5.4 km/h"

    def test_paused_fixes_ignored(self, client, recording_id):
        client.post(f"{API}/{recording_id}/pause")
        response = client.post(f"{API}/{recording_id}/fixes", json=fix_payload(0))
        assert response.json()["accepted"] is False
        assert response.json()["state"] == "paused"


# =============================================================================
# Completion and export
# =============================================================================

class TestCompletion:

    def test_completed(self, client, recording_id):
        walk(client, recording_id)

        response = client.post(f"{API}/{recording_id}/stop")
        assert response.status_code == 200
        data = response.json()
        assert data["recording"]["state"] == "stopped"
        completion = data["completion"]
        assert completion["completed"] is True
        assert completion["completion_percentage"] == 100.0
        assert completion["difficulty"] == "Hard"
        assert completion["token_reward"] > 0
        assert completion["reasons"] == []

    def test_not_completed(self, client, recording_id):
        walk(client, recording_id, count=3)
        completion = client.post(f"{API}/{recording_id}/stop").json()["completion"]

        assert completion["completed"] is False
        assert completion["token_reward"] == 0
        assert len(completion["reasons"]) == 3

    def test_reverify(self, client, recording_id):
        walk(client, recording_id)
        stopped = client.post(f"{API}/{recording_id}/stop").json()["completion"]
        assert client.get(f"{API}/{recording_id}/completion").json() == stopped

    def test_completion_before_stop(self, client, recording_id):
        data = client.get(f"{API}/{recording_id}/completion").json()
        assert data["completed"] is False
        assert data["reasons"] == ["no finished recording"]


class TestExport:

    def test_not_finished(self, client, recording_id):
        assert client.get(f"{API}/{recording_id}/export").status_code == 409

    def test_gpx(self, client, recording_id):
        walk(client, recording_id)
        client.post(f"{API}/{recording_id}/stop")

        response = client.get(f"{API}/{recording_id}/export", params={"format": "gpx"})
        assert response.status_code == 200
        assert response.headers["content-type"].startswith("application/gpx+xml")

        gpx = gpxpy.parse(response.text)
        assert gpx.get_points_no() == 12

    def test_json(self, client, recording_id):
        walk(client, recording_id)
        client.post(f"{API}/{recording_id}/stop")

        data = client.get(f"{API}/{recording_id}/export", params={"format": "json"}).json()
        assert data["format"] == "json"
        assert data["trail"]["name"] == "Kok-Zhailau"
        assert len(data["trail"]["coordinates"]) == 12

    def test_unknown_format(self, client, recording_id):
        response = client.get(f"{API}/{recording_id}/export", params={"format": "kml"})
        assert response.status_code == 422


class TestDifficulty:

    def test_personalized(self, client):
        response = client.post("/api/v1/difficulty/personalized", json={
            "difficulty": "Moderate",
            "profile": {"id": "u1", "fitness_level": 90, "experience_level": "advanced"},
        })
        assert response.status_code == 200
        data = response.json()
        assert data["original"] == "Moderate"
        assert data["personalized"] == "Easy"
        assert len(data["factors"]) == 3
