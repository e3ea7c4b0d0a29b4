"""Story 2.1: Glucose sample schema."""

from datetime import datetime, tzinfo

from pydantic import BaseModel, ConfigDict, Field, field_validator

from glucose_insights.models.glucose import TrendDirection, parse_trend


class GlucoseSample(BaseModel):
    """One CGM estimated glucose value (EGV)."""

    model_config = ConfigDict(frozen=True)

    timestamp_ms: int = Field(..., gt=0, description="Epoch milliseconds")
    value: int = Field(..., gt=0, le=1000, description="Glucose in mg/dL")
    trend: TrendDirection = Field(
        default=TrendDirection.NONE, description="Qualitative slope category"
    )

    @field_validator("trend", mode="before")
    @classmethod
    def normalize_trend(cls, v: object) -> TrendDirection:
        """Accept vendor trend names and codes."""
        return parse_trend(v)  # type: ignore[arg-type]

    def local_time(self, tz: tzinfo) -> datetime:
        """Sample time as an aware datetime in the given zone."""
        return datetime.fromtimestamp(self.timestamp_ms / 1000, tz)
