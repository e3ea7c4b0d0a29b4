"""Story 3.2: Post-meal response curves.

For each logged meal, anchors a baseline glucose just before eating,
finds the peak in the 3-hour window after the meal, and measures the
rise from baseline at 60, 120 and 180 minutes.
"""

from collections.abc import Iterable

from glucose_insights.logging_config import get_logger
from glucose_insights.schemas.events import FoodEvent
from glucose_insights.schemas.glucose import GlucoseSample
from glucose_insights.schemas.insights import PostMealCurve
from glucose_insights.services.alignment import (
    MS_PER_MINUTE,
    SampleIndex,
    minutes,
    require_snapshot,
)

logger = get_logger(__name__)

# Baseline is anchored this long before the logged meal time
BASELINE_OFFSET_MINUTES = 10

# Tolerance around the baseline anchor (± minutes)
BASELINE_WINDOW_MINUTES = 20

# Post-meal peak search window
PEAK_WINDOW_MINUTES = 180

# Fixed checkpoints after the meal and their tolerance (± minutes)
CHECKPOINT_MINUTES = (60, 120, 180)
CHECKPOINT_WINDOW_MINUTES = 15


def build_post_meal_curve(index: SampleIndex, meal: FoodEvent) -> PostMealCurve | None:
    """Extract the response curve for a single meal.

    Args:
        index: Sorted glucose samples.
        meal: The logged meal.

    Returns:
        The curve, or None when no baseline or no post-meal sample exists.
    """
    t0 = meal.timestamp_ms
    baseline = index.closest(
        t0 - minutes(BASELINE_OFFSET_MINUTES), minutes(BASELINE_WINDOW_MINUTES)
    )
    if baseline is None:
        return None

    window = index.between(t0, t0 + minutes(PEAK_WINDOW_MINUTES))
    if not window:
        return None
    # max() keeps the first sample on equal values
    peak = max(window, key=lambda s: s.value)

    checkpoints: dict[int, int | None] = {}
    for offset in CHECKPOINT_MINUTES:
        sample = index.closest(t0 + minutes(offset), minutes(CHECKPOINT_WINDOW_MINUTES))
        checkpoints[offset] = sample.value if sample is not None else None

    def delta(value: int | None) -> int | None:
        return value - baseline.value if value is not None else None

    return PostMealCurve(
        food_event=meal,
        baseline_glucose=baseline.value,
        peak=peak.value,
        peak_minutes=(peak.timestamp_ms - t0) // MS_PER_MINUTE,
        glucose_at_60=checkpoints[60],
        glucose_at_120=checkpoints[120],
        glucose_at_180=checkpoints[180],
        delta_at_60=delta(checkpoints[60]),
        delta_at_120=delta(checkpoints[120]),
        delta_at_180=delta(checkpoints[180]),
    )


def compute_post_meal_curves(
    samples: Iterable[GlucoseSample] | SampleIndex,
    food: Iterable[FoodEvent],
) -> list[PostMealCurve]:
    """Build one response curve per meal that has usable glucose coverage.

    Meals without a baseline sample or without any reading in the peak
    window are left out; that is a data-coverage gap, not an error.

    Args:
        samples: Glucose samples in any order, or a prebuilt index.
        food: Logged meals.

    Returns:
        Curves in the order the meals were supplied.
    """
    require_snapshot("glucose", samples)
    require_snapshot("food", food)

    index = samples if isinstance(samples, SampleIndex) else SampleIndex(samples)
    meals = list(food)
    if len(index) == 0:
        return []

    curves = []
    for meal in meals:
        curve = build_post_meal_curve(index, meal)
        if curve is not None:
            curves.append(curve)

    logger.debug(
        "Computed post-meal curves",
        meals=len(meals),
        curves=len(curves),
        skipped=len(meals) - len(curves),
    )
    return curves
