"""Engine configuration using Pydantic Settings.

Thresholds, the projection window and the alert flags are owned by the
host application; the engine only reads them.
"""

import zoneinfo

from pydantic import Field, field_validator, model_validator
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Engine settings loaded from environment variables."""

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
    )

    # Logging
    log_format: str = "json"  # 'json' or 'text'
    log_level: str = "INFO"
    service_name: str = "glucose-insights"

    # Glucose thresholds (mg/dL)
    glucose_high: int = Field(default=180, ge=120, le=400)
    glucose_low: int = Field(default=70, ge=40, le=120)

    # Projected alerts
    projection_minutes: int = Field(default=20, ge=10, le=40)
    predict_high_enabled: bool = True
    predict_low_enabled: bool = True
    notifications_enabled: bool = True  # Master switch for the alert pass

    # IANA zone used for hour-of-day bucketing
    timezone: str = "UTC"

    # Persistence of the two alert cooldown timestamps
    cooldown_state_path: str = "alert_cooldown.json"

    # Rolling retention for the glucose log (~13 months)
    glucose_retention_days: int = Field(default=400, ge=1)

    @field_validator("timezone")
    @classmethod
    def validate_timezone(cls, v: str) -> str:
        """Ensure the timezone is a known IANA zone."""
        try:
            zoneinfo.ZoneInfo(v)
        except (KeyError, ValueError, zoneinfo.ZoneInfoNotFoundError):
            msg = f"Invalid timezone: {v}"
            raise ValueError(msg)
        return v

    @model_validator(mode="after")
    def validate_threshold_ordering(self) -> "Settings":
        """Ensure glucose_low < glucose_high."""
        if self.glucose_low >= self.glucose_high:
            msg = "glucose_low must be less than glucose_high"
            raise ValueError(msg)
        return self

    @property
    def tzinfo(self) -> zoneinfo.ZoneInfo:
        """The configured timezone as a tzinfo object."""
        return zoneinfo.ZoneInfo(self.timezone)


settings = Settings()
