"""
Recording schemas.

Pydantic models for API request/response.
"""
from datetime import datetime, timezone
from typing import List, Optional

from pydantic import BaseModel, ConfigDict, Field

from trailguard.features.profiles import UserFitnessProfile
from trailguard.shared.constants import TrailDifficulty

from .models import GPSFix, RecordingState


class RoutePoint(BaseModel):
    """Point of a planned route."""
    latitude: float = Field(..., ge=-90, le=90)
    longitude: float = Field(..., ge=-180, le=180)


class StartRecordingRequest(BaseModel):
    """Request to start recording a trail."""
    name: str
    description: Optional[str] = None
    difficulty: TrailDifficulty = TrailDifficulty.MODERATE
    profile: Optional[UserFitnessProfile] = None
    planned_route: Optional[List[RoutePoint]] = None


class FixIn(BaseModel):
    """One GPS fix reported by the client."""
    latitude: float = Field(..., ge=-90, le=90)
    longitude: float = Field(..., ge=-180, le=180)
    altitude: Optional[float] = None
    accuracy: Optional[float] = Field(default=None, ge=0)
    timestamp: datetime

    def to_fix(self) -> GPSFix:
        timestamp = self.timestamp
        if timestamp.tzinfo is None:
            timestamp = timestamp.replace(tzinfo=timezone.utc)
        return GPSFix(
            latitude=self.latitude,
            longitude=self.longitude,
            altitude=self.altitude,
            accuracy=self.accuracy,
            timestamp=timestamp,
        )


class RecordingStatsSchema(BaseModel):
    """Current aggregates of a recording."""
    model_config = ConfigDict(from_attributes=True)

    distance_m: float
    duration_s: float
    average_speed_mps: float
    max_speed_mps: float
    current_speed_mps: float
    elevation_gain_m: float
    elevation_loss_m: float
    fix_count: int
    rejected_count: int


class StatsDisplay(BaseModel):
    """Human-readable stats for clients that do not format themselves."""
    distance: str
    duration: str
    average_speed: str
    max_speed: str


class RecordingResponse(BaseModel):
    """Recording session summary."""
    id: str
    name: Optional[str]
    description: Optional[str] = None
    state: RecordingState
    started_at: Optional[datetime] = None
    ended_at: Optional[datetime] = None
    stats: RecordingStatsSchema
    display: StatsDisplay


class FixResult(BaseModel):
    """Outcome of submitting a fix."""
    accepted: bool
    state: RecordingState
    stats: RecordingStatsSchema
    display: StatsDisplay


class CompletionResultSchema(BaseModel):
    """Completion verdict."""
    model_config = ConfigDict(from_attributes=True)

    completed: bool
    completion_percentage: float
    distance_m: float
    duration_s: float
    fix_count: int
    token_reward: int
    nft_eligible: bool
    difficulty: TrailDifficulty
    reasons: List[str] = []


class StopRecordingResponse(BaseModel):
    """Finished recording with its completion verdict."""
    recording: RecordingResponse
    completion: CompletionResultSchema
