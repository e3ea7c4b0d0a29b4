"""Story 6.1: Projected alert schemas.

Configuration snapshot consumed by the alert pass, the persisted
cooldown record, and the request handed to the notification dispatcher.
"""

from pydantic import BaseModel, ConfigDict, Field, model_validator

from glucose_insights.config import Settings
from glucose_insights.models.alert import AlertKind, AlertUrgency


class AlertConfig(BaseModel):
    """Alert settings read at the start of each alert pass.

    Validates that threshold ordering is consistent.
    """

    model_config = ConfigDict(frozen=True)

    high_threshold: int = Field(
        default=180,
        ge=120,
        le=400,
        description="High threshold (mg/dL). Range: 120-400.",
    )
    low_threshold: int = Field(
        default=70,
        ge=40,
        le=120,
        description="Low threshold (mg/dL). Range: 40-120.",
    )
    projection_minutes: int = Field(
        default=20,
        ge=10,
        le=40,
        description="How far ahead to project (minutes). Range: 10-40.",
    )
    predict_high_enabled: bool = True
    predict_low_enabled: bool = True
    notifications_enabled: bool = True

    @model_validator(mode="after")
    def validate_threshold_ordering(self) -> "AlertConfig":
        """Ensure low_threshold < high_threshold."""
        if self.low_threshold >= self.high_threshold:
            msg = "low_threshold must be less than high_threshold"
            raise ValueError(msg)
        return self

    @classmethod
    def from_settings(cls, settings: Settings) -> "AlertConfig":
        """Snapshot the alert-relevant values from engine settings."""
        return cls(
            high_threshold=settings.glucose_high,
            low_threshold=settings.glucose_low,
            projection_minutes=settings.projection_minutes,
            predict_high_enabled=settings.predict_high_enabled,
            predict_low_enabled=settings.predict_low_enabled,
            notifications_enabled=settings.notifications_enabled,
        )


class AlertCooldownState(BaseModel):
    """Last-fired time per alert kind, epoch milliseconds (None = never)."""

    last_high_fired_ms: int | None = Field(default=None, ge=0)
    last_low_fired_ms: int | None = Field(default=None, ge=0)

    def last_fired(self, kind: AlertKind) -> int | None:
        if kind == AlertKind.HIGH:
            return self.last_high_fired_ms
        return self.last_low_fired_ms

    def mark_fired(self, kind: AlertKind, now_ms: int) -> "AlertCooldownState":
        """Return a copy with the given kind's timestamp moved to now."""
        field = "last_high_fired_ms" if kind == AlertKind.HIGH else "last_low_fired_ms"
        return self.model_copy(update={field: now_ms})


class GlucoseProjection(BaseModel):
    """Short-term linear projection from the latest samples."""

    model_config = ConfigDict(frozen=True)

    current_value: int
    rate_per_minute: float  # mg/dL/min
    projection_minutes: int
    projected_value: float


class AlertRequest(BaseModel):
    """A fired alert, ready for the notification collaborator."""

    model_config = ConfigDict(frozen=True)

    kind: AlertKind
    title: str
    body: str
    urgency: AlertUrgency
    current_value: int
    projected_value: float
    rate_per_minute: float
    projection_minutes: int
    fired_at_ms: int
