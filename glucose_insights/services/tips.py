"""Story 4.2: Warnings and tips.

A fixed, ordered set of heuristics over the aggregated statistics and
meal curves. Each rule is evaluated independently and contributes at
most one advisory string. The thresholds are tuned policy constants.
"""

from collections.abc import Callable, Sequence
from dataclasses import dataclass
from datetime import datetime, tzinfo

from glucose_insights.schemas.insights import PostMealCurve, TimeOfDayStats
from glucose_insights.services.time_of_day import (
    EARLY_MORNING_SLOT,
    OVERNIGHT_SLOT,
    find_slot,
)

# Post-meal spike: mean 60-minute rise above this (mg/dL)
SPIKE_RISE_THRESHOLD = 60

# Dawn phenomenon: 4-8 AM mean above this and this far above 12-4 AM
DAWN_MEAN_THRESHOLD = 140
DAWN_GAP = 20

# Nocturnal lows: share of 12-4 AM readings below 70 (%)
NOCTURNAL_LOW_PCT = 10

# Lunchtime highs: meals in these local hours peaking above the threshold
LUNCH_HOURS = range(11, 14)
LUNCH_PEAK_THRESHOLD = 200
LUNCH_MIN_MEALS = 3

# Overall time-in-range
TIR_MIN_SAMPLES = 50
TIR_TARGET_FLOOR = 50

# Late peaking: peak strictly between these minutes after eating
LATE_PEAK_MIN_MINUTES = 120
LATE_PEAK_MAX_MINUTES = 240
LATE_PEAK_MIN_MEALS = 5

# Data volume thresholds
REASSURANCE_MIN_SAMPLES = 100
INSUFFICIENT_DATA_SAMPLES = 30


@dataclass
class TipInputs:
    """Everything the rules look at."""

    time_of_day: Sequence[TimeOfDayStats]
    avg_post_meal_rise: float | None
    total_samples: int
    time_in_range_pct: int | None
    meal_curves: Sequence[PostMealCurve]
    tz: tzinfo


def post_meal_spike_tip(inputs: TipInputs) -> str | None:
    rise = inputs.avg_post_meal_rise
    if rise is None or rise <= SPIKE_RISE_THRESHOLD:
        return None
    return (
        f"Your glucose rises an average of {rise:.0f} mg/dL within 60 min of eating. "
        "Consider taking rapid insulin 15–20 min before meals rather than at meal time."
    )


def dawn_phenomenon_tip(inputs: TipInputs) -> str | None:
    early = find_slot(inputs.time_of_day, EARLY_MORNING_SLOT)
    overnight = find_slot(inputs.time_of_day, OVERNIGHT_SLOT)
    if early is None or overnight is None or early.count == 0 or overnight.count == 0:
        return None
    if early.avg_glucose <= DAWN_MEAN_THRESHOLD:
        return None
    if early.avg_glucose <= overnight.avg_glucose + DAWN_GAP:
        return None
    return (
        "Dawn phenomenon detected: your glucose rises significantly between 4–8 AM "
        f"(avg {early.avg_glucose:.0f} mg/dL). Consider adjusting basal insulin or "
        "discussing timing with your care team."
    )


def nocturnal_low_tip(inputs: TipInputs) -> str | None:
    overnight = find_slot(inputs.time_of_day, OVERNIGHT_SLOT)
    if overnight is None or overnight.pct_low <= NOCTURNAL_LOW_PCT:
        return None
    return (
        f"{overnight.pct_low}% of your overnight readings are below 70 mg/dL. "
        "Nocturnal hypoglycemia is a safety concern. Consider reducing evening "
        "long-acting insulin."
    )


def lunchtime_high_tip(inputs: TipInputs) -> str | None:
    lunch_highs = [
        c
        for c in inputs.meal_curves
        if c.peak > LUNCH_PEAK_THRESHOLD
        and _local_hour(c.food_event.timestamp_ms, inputs.tz) in LUNCH_HOURS
    ]
    if len(lunch_highs) < LUNCH_MIN_MEALS:
        return None
    return (
        f"Lunchtime meals frequently spike above {LUNCH_PEAK_THRESHOLD} mg/dL. "
        "Try lower-carb options or pre-bolusing 15–20 min before eating."
    )


def time_in_range_tip(inputs: TipInputs) -> str | None:
    tir = inputs.time_in_range_pct
    if inputs.total_samples < TIR_MIN_SAMPLES or tir is None or tir >= TIR_TARGET_FLOOR:
        return None
    return (
        f"Overall time-in-range is {tir}%. The clinical target is 70%+. "
        "Use the AI insights feature for personalized recommendations."
    )


def late_peak_tip(inputs: TipInputs) -> str | None:
    meals = inputs.meal_curves
    if len(meals) < LATE_PEAK_MIN_MEALS:
        return None
    late = [
        c.peak_minutes
        for c in meals
        if LATE_PEAK_MIN_MINUTES < c.peak_minutes < LATE_PEAK_MAX_MINUTES
    ]
    if len(late) * 2 <= len(meals):
        return None
    avg_minutes = sum(late) / len(late)
    return (
        f"Your glucose tends to peak late ({avg_minutes:.0f} min average after eating). "
        "High-fat or high-protein meals can slow glucose absorption; consider extended "
        "or split bolusing."
    )


# Evaluated in this order; each contributes at most one tip
PATTERN_RULES: tuple[Callable[[TipInputs], str | None], ...] = (
    post_meal_spike_tip,
    dawn_phenomenon_tip,
    nocturnal_low_tip,
    lunchtime_high_tip,
    time_in_range_tip,
    late_peak_tip,
)

REASSURANCE_TIP = (
    "Patterns look reasonable. Keep logging meals and insulin to get more "
    "precise recommendations."
)

INSUFFICIENT_DATA_TIP = (
    "Keep collecting data. Insights become more accurate with 2+ weeks of readings."
)


def build_tips(inputs: TipInputs) -> list[str]:
    """Run every rule and collect the advice.

    Args:
        inputs: Aggregated statistics for the pass.

    Returns:
        Advisory strings in rule order.
    """
    tips = [tip for rule in PATTERN_RULES if (tip := rule(inputs)) is not None]

    if not tips and inputs.total_samples >= REASSURANCE_MIN_SAMPLES:
        tips.append(REASSURANCE_TIP)
    if inputs.total_samples < INSUFFICIENT_DATA_SAMPLES:
        tips.append(INSUFFICIENT_DATA_TIP)

    return tips


def _local_hour(timestamp_ms: int, tz: tzinfo) -> int:
    return datetime.fromtimestamp(timestamp_ms / 1000, tz).hour
