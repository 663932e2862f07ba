"""
Fitness profile schemas.

Pydantic models for the user data consumed by completion rewards and
the emergency monitor. Profiles are owned elsewhere; this core only reads them.
"""

from pydantic import BaseModel, Field
from typing import List, Optional

from trailguard.shared.constants import ExperienceLevel, TrailDifficulty


class EmergencyContact(BaseModel):
    """Person notified when an emergency alert is sent."""
    id: str
    name: str
    phone: str
    email: Optional[str] = None
    relationship: str = ""
    priority: int = 1
    telegram_chat_id: Optional[int] = None


class UserFitnessProfile(BaseModel):
    """Fitness and experience data for one user."""
    id: str
    fitness_level: int = Field(default=50, ge=0, le=100)
    experience_level: ExperienceLevel = ExperienceLevel.INTERMEDIATE
    completed_trails: int = Field(default=0, ge=0)
    total_distance_m: float = Field(default=0.0, ge=0)
    average_pace_min_km: float = 15.0
    preferred_difficulty: List[TrailDifficulty] = Field(
        default_factory=lambda: [TrailDifficulty.EASY, TrailDifficulty.MODERATE]
    )
    emergency_contacts: List[EmergencyContact] = Field(default_factory=list)

    @property
    def has_emergency_contacts(self) -> bool:
        return len(self.emergency_contacts) > 0
