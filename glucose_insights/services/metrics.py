"""Story 3.6: Insulin sensitivity and carb ratio estimates.

Derives two coefficients from the response curves:

- ISF: mg/dL glucose drop per unit of rapid insulin, from the drop at
  120 minutes after each qualifying dose, outlier-trimmed.
- ICR: grams of carbohydrate covered per unit, from the average meal
  rise at 60 minutes converted to units through the ISF.

Both report None when the data is too thin to support an estimate.
"""

from collections.abc import Sequence

from glucose_insights.schemas.insights import PostInsulinCurve, PostMealCurve

# Minimum usable dose ratios for an ISF estimate
MIN_ISF_SAMPLES = 3

# Fraction trimmed from each end of the sorted ISF ratios (at least one each)
ISF_TRIM_FRACTION = 0.2

# Minimum curves for an ICR estimate
MIN_ICR_MEAL_CURVES = 5
MIN_ICR_INSULIN_CURVES = 3


def trimmed_mean(values: Sequence[float], fraction: float = ISF_TRIM_FRACTION) -> float | None:
    """Mean after dropping the highest and lowest share of values.

    ``cut = max(1, int(n * fraction))`` values are removed from each end.

    Args:
        values: Values to average.
        fraction: Share trimmed from each end.

    Returns:
        The trimmed mean, or None if nothing remains after trimming.
    """
    ordered = sorted(values)
    cut = max(1, int(len(ordered) * fraction))
    kept = ordered[cut : len(ordered) - cut]
    if not kept:
        return None
    return sum(kept) / len(kept)


def isf_ratios(curves: Sequence[PostInsulinCurve]) -> list[float]:
    """Per-dose ISF samples (drop at 120 min / units).

    Doses where glucose did not fall by 120 minutes (likely a concurrent
    meal) or with zero units are left out.
    """
    ratios = []
    for curve in curves:
        drop = curve.drop_at_120
        units = curve.insulin_event.units
        if drop is None or drop <= 0 or units <= 0:
            continue
        ratios.append(drop / units)
    return ratios


def estimate_isf(curves: Sequence[PostInsulinCurve]) -> float | None:
    """Estimate the insulin sensitivity factor.

    Args:
        curves: Post-insulin curves (baseline >= 100 mg/dL already enforced).

    Returns:
        Trimmed-mean mg/dL per unit, or None with fewer than 3 usable doses.
    """
    ratios = isf_ratios(curves)
    if len(ratios) < MIN_ISF_SAMPLES:
        return None
    return trimmed_mean(ratios)


def average_post_meal_rise(curves: Sequence[PostMealCurve]) -> float | None:
    """Mean of the positive 60-minute rises, or None if there are none."""
    rises = [c.delta_at_60 for c in curves if c.delta_at_60 is not None and c.delta_at_60 > 0]
    if not rises:
        return None
    return sum(rises) / len(rises)


def estimate_icr(
    meal_curves: Sequence[PostMealCurve],
    insulin_curves: Sequence[PostInsulinCurve],
    isf: float | None = None,
) -> float | None:
    """Estimate the insulin-to-carb ratio.

    units_needed = average 60-minute rise / ISF, then
    ICR = average carbs per meal / units_needed.

    Args:
        meal_curves: Post-meal curves.
        insulin_curves: Post-insulin curves.
        isf: Precomputed ISF. Estimated from insulin_curves when omitted.

    Returns:
        Grams per unit, or None when any input is insufficient.
    """
    if len(meal_curves) < MIN_ICR_MEAL_CURVES or len(insulin_curves) < MIN_ICR_INSULIN_CURVES:
        return None

    if isf is None:
        isf = estimate_isf(insulin_curves)
    if isf is None or isf <= 0:
        return None

    avg_rise = average_post_meal_rise(meal_curves)
    if avg_rise is None:
        return None

    units_needed = avg_rise / isf
    if units_needed <= 0:
        return None

    avg_carbs = sum(c.food_event.carbs for c in meal_curves) / len(meal_curves)
    return avg_carbs / units_needed
