"""
Safety schemas.

Pydantic models for API request/response.
"""
from datetime import datetime
from typing import List, Optional

from pydantic import BaseModel, ConfigDict, Field

from trailguard.features.profiles import EmergencyContact, UserFitnessProfile
from trailguard.shared.constants import AlertType, ExperienceLevel, TrailDifficulty

from .monitor import AlertEventKind


class BatteryReading(BaseModel):
    level: float = Field(..., ge=0, le=100, description="Battery level in percent")


class MotionReading(BaseModel):
    x: float
    y: float
    z: float
    timestamp: Optional[datetime] = None


class MonitorStateSchema(BaseModel):
    """Emergency monitor flags."""
    model_config = ConfigDict(from_attributes=True)

    is_monitoring: bool
    last_movement: Optional[datetime] = None
    fall_detected: bool
    no_movement_detected: bool
    off_trail_detected: bool
    alerts_sent: int
    emergency_triggered: bool
    battery_level: Optional[float] = None
    last_check_in: Optional[datetime] = None
    pending_alerts: List[AlertType] = []


class AlertEventSchema(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    kind: AlertEventKind
    at: datetime
    alert_type: Optional[AlertType] = None
    message: Optional[str] = None
    contact_count: int = 0
    error: Optional[str] = None


class ContactAlertSchema(BaseModel):
    """Alerting setup: contacts and auto-trigger conditions."""
    model_config = ConfigDict(from_attributes=True)

    enabled: bool
    contacts: List[EmergencyContact]
    no_movement_minutes: float
    low_battery_percent: float
    off_trail_distance_m: float
    last_check_in: Optional[datetime] = None
    next_check_in: Optional[datetime] = None


class SafetyStatusResponse(BaseModel):
    state: MonitorStateSchema
    alerting: ContactAlertSchema
    events: List[AlertEventSchema]


class AlertActionResponse(BaseModel):
    """Result of a manual trigger or cancel."""
    changed: bool
    state: MonitorStateSchema


class DifficultyRequest(BaseModel):
    difficulty: TrailDifficulty
    profile: UserFitnessProfile


class AdjustmentFactorSchema(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    factor: str
    impact: float
    description: str


class DifficultyResponse(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    original: TrailDifficulty
    personalized: TrailDifficulty
    fitness_score: int
    experience_level: ExperienceLevel
    factors: List[AdjustmentFactorSchema]
    recommendations: List[str]
