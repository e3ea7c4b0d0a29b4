"""Story 4.1: Insight result schemas.

Derived, immutable records produced by one analysis pass. Nothing here
is persisted; every pass recomputes them from the logs.
"""

from pydantic import BaseModel, ConfigDict, Field

from glucose_insights.schemas.events import FoodEvent, InsulinEvent


class PostMealCurve(BaseModel):
    """Glucose response following one logged meal."""

    model_config = ConfigDict(frozen=True)

    food_event: FoodEvent
    baseline_glucose: int = Field(..., description="Glucose anchored just before the meal")
    peak: int = Field(..., description="Highest glucose in the 3h window")
    peak_minutes: int = Field(..., description="Minutes from meal to peak")
    glucose_at_60: int | None = None
    glucose_at_120: int | None = None
    glucose_at_180: int | None = None
    delta_at_60: int | None = Field(default=None, description="Rise from baseline")
    delta_at_120: int | None = None
    delta_at_180: int | None = None


class PostInsulinCurve(BaseModel):
    """Glucose response following one rapid-acting dose."""

    model_config = ConfigDict(frozen=True)

    insulin_event: InsulinEvent
    baseline_glucose: int = Field(..., description="Glucose at dose time")
    nadir: int = Field(..., description="Lowest glucose in the 4h window")
    nadir_minutes: int = Field(..., description="Minutes from dose to nadir")
    glucose_at_60: int | None = None
    glucose_at_120: int | None = None
    glucose_at_180: int | None = None
    drop_at_60: int | None = Field(default=None, description="Fall from baseline")
    drop_at_120: int | None = None
    drop_at_180: int | None = None


class TimeOfDayStats(BaseModel):
    """Range statistics for one 4-hour clock band."""

    model_config = ConfigDict(frozen=True)

    label: str = Field(..., description="Band label, e.g. '4–8 AM'")
    start_hour: int = Field(..., ge=0, le=23)
    end_hour: int = Field(..., ge=1, le=24, description="Exclusive end hour")
    avg_glucose: float = 0.0
    pct_in_range: int = 0
    pct_low: int = 0
    pct_high: int = 0
    count: int = 0


class OverallStats(BaseModel):
    """Whole-history glucose summary. Empty history leaves every value unset."""

    model_config = ConfigDict(frozen=True)

    count: int = 0
    avg_glucose: float | None = None
    pct_in_range: int | None = None
    pct_low: int | None = None
    pct_high: int | None = None
    estimated_a1c: float | None = Field(
        default=None, description="Glucose management indicator, percent"
    )


class InsightResult(BaseModel):
    """Immutable snapshot of one analysis pass."""

    model_config = ConfigDict(frozen=True)

    post_meal_curves: tuple[PostMealCurve, ...] = ()
    post_insulin_curves: tuple[PostInsulinCurve, ...] = ()
    time_of_day_stats: tuple[TimeOfDayStats, ...] = ()
    overall: OverallStats = OverallStats()
    estimated_isf: float | None = Field(
        default=None, description="mg/dL drop per unit of rapid insulin"
    )
    estimated_icr: float | None = Field(
        default=None, description="Grams of carbohydrate per unit of insulin"
    )
    avg_post_meal_rise: float | None = Field(
        default=None, description="Mean positive rise at 60 min after meals"
    )
    hypoglycemia_hours: tuple[int, ...] = Field(
        default=(), description="Hours of day where lows are most common"
    )
    high_glucose_hours: tuple[int, ...] = Field(
        default=(), description="Hours of day where highs are most common"
    )
    total_readings: int = 0
    data_span_days: int = 0
    warnings_and_tips: tuple[str, ...] = ()

    @property
    def meal_count(self) -> int:
        return len(self.post_meal_curves)

    @property
    def dose_count(self) -> int:
        return len(self.post_insulin_curves)


class PersonalContext(BaseModel):
    """Optional personal details added to the insight prompt."""

    age: int | None = Field(default=None, ge=1, le=120)
    weight_kg: float | None = Field(default=None, gt=0, le=400)
    height_cm: float | None = Field(default=None, gt=0, le=250)

    def is_empty(self) -> bool:
        return self.age is None and self.weight_kg is None and self.height_cm is None
