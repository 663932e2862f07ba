"""
Application Configuration

Uses Pydantic Settings for type-safe configuration.
"""

from typing import List, Optional
from pydantic_settings import BaseSettings
from pydantic import Field, field_validator, ConfigDict


class Settings(BaseSettings):
    """Application settings with validation."""

    # === Core ===
    debug: bool = Field(default=False, description="Enable debug mode")
    log_level: str = Field(default="INFO", description="Logging level")

    # === CORS ===
    cors_origins: List[str] = Field(
        default_factory=lambda: ["http://localhost:5173", "http://localhost:3000"],
        description="Allowed CORS origins"
    )

    # === Recording ===
    max_fix_accuracy_m: float = Field(
        default=50.0,
        gt=0,
        description="Fixes reporting a worse horizontal accuracy are rejected"
    )
    stats_refresh_seconds: float = Field(
        default=1.0,
        description="Live stats publish interval; 0 disables the ticker"
    )
    max_finished_recordings: int = Field(
        default=100,
        gt=0,
        description="Stopped recordings kept in memory; the oldest are evicted first"
    )

    # === Completion policy ===
    min_distance_m: float = Field(default=500.0, ge=0)
    min_duration_s: float = Field(default=300.0, ge=0)
    min_fix_count: int = Field(default=10, ge=0)

    # === Emergency monitor ===
    no_movement_minutes: float = Field(default=30.0, gt=0)
    movement_threshold_m: float = Field(default=5.0, ge=0)
    low_battery_percent: float = Field(default=20.0, ge=0, le=100)
    fall_threshold: float = Field(
        default=20.0,
        description="Acceleration magnitude (input units) treated as a fall"
    )
    motion_history_size: int = Field(default=100, gt=0)
    alert_countdown_seconds: float = Field(default=30.0, ge=0)
    check_in_minutes: float = Field(
        default=60.0,
        description="Automatic check-in interval; 0 disables check-ins"
    )
    off_trail_distance_m: float = Field(default=500.0, gt=0)

    # === Telegram ===
    telegram_bot_token: Optional[str] = Field(
        default=None,
        description="Telegram Bot token for emergency alert delivery"
    )

    @field_validator('cors_origins', mode='before')
    @classmethod
    def parse_cors_origins(cls, v):
        """Parse CORS origins from comma-separated string."""
        if isinstance(v, str):
            return [origin.strip() for origin in v.split(',')]
        return v

    model_config = ConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore"
    )


# Global settings instance
settings = Settings()
