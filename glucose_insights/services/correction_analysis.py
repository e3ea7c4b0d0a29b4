"""Story 3.3: Post-insulin response curves.

Evaluates the glucose fall after each rapid-acting dose. These curves
feed the insulin sensitivity factor (ISF) estimate.
"""

from collections.abc import Iterable

from glucose_insights.logging_config import get_logger
from glucose_insights.models.events import RESPONSE_INSULIN_TYPES
from glucose_insights.schemas.events import InsulinEvent
from glucose_insights.schemas.glucose import GlucoseSample
from glucose_insights.schemas.insights import PostInsulinCurve
from glucose_insights.services.alignment import (
    MS_PER_MINUTE,
    SampleIndex,
    minutes,
    require_snapshot,
)

logger = get_logger(__name__)

# Tolerance around the dose time when anchoring the baseline (± minutes)
BASELINE_WINDOW_MINUTES = 20

# Doses starting below this baseline are excluded
MIN_BASELINE_GLUCOSE = 100  # mg/dL

# Post-dose nadir search window
NADIR_WINDOW_MINUTES = 240

# Fixed checkpoints after the dose and their tolerance (± minutes)
CHECKPOINT_MINUTES = (60, 120, 180)
CHECKPOINT_WINDOW_MINUTES = 15


def build_post_insulin_curve(
    index: SampleIndex, dose: InsulinEvent
) -> PostInsulinCurve | None:
    """Extract the response curve for a single dose.

    Args:
        index: Sorted glucose samples.
        dose: The logged dose.

    Returns:
        The curve, or None when the dose does not qualify.
    """
    t0 = dose.timestamp_ms
    baseline = index.closest(t0, minutes(BASELINE_WINDOW_MINUTES))
    if baseline is None or baseline.value < MIN_BASELINE_GLUCOSE:
        return None

    window = index.between(t0, t0 + minutes(NADIR_WINDOW_MINUTES))
    if not window:
        return None
    nadir = min(window, key=lambda s: s.value)

    checkpoints: dict[int, int | None] = {}
    for offset in CHECKPOINT_MINUTES:
        sample = index.closest(t0 + minutes(offset), minutes(CHECKPOINT_WINDOW_MINUTES))
        checkpoints[offset] = sample.value if sample is not None else None

    def drop(value: int | None) -> int | None:
        return baseline.value - value if value is not None else None

    return PostInsulinCurve(
        insulin_event=dose,
        baseline_glucose=baseline.value,
        nadir=nadir.value,
        nadir_minutes=(nadir.timestamp_ms - t0) // MS_PER_MINUTE,
        glucose_at_60=checkpoints[60],
        glucose_at_120=checkpoints[120],
        glucose_at_180=checkpoints[180],
        drop_at_60=drop(checkpoints[60]),
        drop_at_120=drop(checkpoints[120]),
        drop_at_180=drop(checkpoints[180]),
    )


def compute_post_insulin_curves(
    samples: Iterable[GlucoseSample] | SampleIndex,
    insulin: Iterable[InsulinEvent],
) -> list[PostInsulinCurve]:
    """Build one response curve per qualifying rapid-acting dose.

    Long-acting doses never participate. Doses with no baseline within
    20 minutes, a baseline under 100 mg/dL, or no reading in the 4-hour
    window are skipped.

    Args:
        samples: Glucose samples in any order, or a prebuilt index.
        insulin: Logged doses.

    Returns:
        Curves in the order the doses were supplied.
    """
    require_snapshot("glucose", samples)
    require_snapshot("insulin", insulin)

    index = samples if isinstance(samples, SampleIndex) else SampleIndex(samples)
    doses = [d for d in insulin if d.insulin_type in RESPONSE_INSULIN_TYPES]
    if len(index) == 0:
        return []

    curves = []
    for dose in doses:
        curve = build_post_insulin_curve(index, dose)
        if curve is not None:
            curves.append(curve)

    logger.debug(
        "Computed post-insulin curves",
        doses=len(doses),
        curves=len(curves),
        skipped=len(doses) - len(curves),
    )
    return curves
