"""Story 4.3: Insight analysis pass.

Runs every analyzer over one snapshot of the glucose, food and insulin
logs and gathers the results into a single immutable InsightResult.
Nothing is cached between passes.
"""

from collections.abc import Iterable
from datetime import tzinfo

from glucose_insights.config import settings
from glucose_insights.logging_config import correlation_scope, get_logger
from glucose_insights.schemas.events import FoodEvent, InsulinEvent
from glucose_insights.schemas.glucose import GlucoseSample
from glucose_insights.schemas.insights import InsightResult
from glucose_insights.services.alignment import SampleIndex, require_snapshot
from glucose_insights.services.correction_analysis import compute_post_insulin_curves
from glucose_insights.services.glucose_stats import (
    compute_overall_stats,
    data_span_days,
    is_high,
    is_low,
    most_common_hours,
)
from glucose_insights.services.meal_analysis import compute_post_meal_curves
from glucose_insights.services.metrics import (
    average_post_meal_rise,
    estimate_icr,
    estimate_isf,
)
from glucose_insights.services.time_of_day import compute_time_of_day
from glucose_insights.services.tips import TipInputs, build_tips

logger = get_logger(__name__)


def analyze(
    glucose: Iterable[GlucoseSample],
    food: Iterable[FoodEvent],
    insulin: Iterable[InsulinEvent],
    tz: tzinfo | None = None,
) -> InsightResult:
    """Run a full analysis pass.

    Args:
        glucose: Glucose log snapshot (any order; may be empty).
        food: Food log snapshot (may be empty).
        insulin: Insulin log snapshot (may be empty).
        tz: Zone for hour-of-day bucketing. Defaults to the configured zone.

    Returns:
        InsightResult for this snapshot.

    Raises:
        MissingSnapshotError: If any snapshot is None.
    """
    require_snapshot("glucose", glucose)
    require_snapshot("food", food)
    require_snapshot("insulin", insulin)

    if tz is None:
        tz = settings.tzinfo

    with correlation_scope():
        index = SampleIndex(glucose)
        samples = index.samples

        meal_curves = compute_post_meal_curves(index, food)
        insulin_curves = compute_post_insulin_curves(index, insulin)
        time_of_day = compute_time_of_day(samples, tz)
        overall = compute_overall_stats(samples)

        isf = estimate_isf(insulin_curves)
        icr = estimate_icr(meal_curves, insulin_curves, isf=isf)
        avg_rise = average_post_meal_rise(meal_curves)

        tips = build_tips(
            TipInputs(
                time_of_day=time_of_day,
                avg_post_meal_rise=avg_rise,
                total_samples=len(samples),
                time_in_range_pct=overall.pct_in_range,
                meal_curves=meal_curves,
                tz=tz,
            )
        )

        result = InsightResult(
            post_meal_curves=tuple(meal_curves),
            post_insulin_curves=tuple(insulin_curves),
            time_of_day_stats=tuple(time_of_day),
            overall=overall,
            estimated_isf=isf,
            estimated_icr=icr,
            avg_post_meal_rise=avg_rise,
            hypoglycemia_hours=tuple(most_common_hours(samples, tz, is_low)),
            high_glucose_hours=tuple(most_common_hours(samples, tz, is_high)),
            total_readings=len(samples),
            data_span_days=data_span_days(samples),
            warnings_and_tips=tuple(tips),
        )

        logger.info(
            "Insight analysis complete",
            readings=result.total_readings,
            meal_curves=result.meal_count,
            insulin_curves=result.dose_count,
            isf=round(isf, 1) if isf is not None else None,
            icr=round(icr, 1) if icr is not None else None,
            tips=len(tips),
        )
        return result
