"""Story 4.4: Insight prompt builder.

Transcribes an InsightResult into the text prompt sent to an external
natural-language insight provider. Calling the provider is the host
application's job; this module only produces text.
"""

from glucose_insights.schemas.insights import (
    InsightResult,
    PersonalContext,
    PostInsulinCurve,
    PostMealCurve,
)
from glucose_insights.services.glucose_stats import HIGH_THRESHOLD, LOW_THRESHOLD

# How many of the most recent curves to transcribe
RECENT_MEAL_LIMIT = 10
RECENT_DOSE_LIMIT = 8

SYSTEM_PROMPT = """\
You are a diabetes management assistant. Analyze this patient's CGM and \
tracking data and provide specific, actionable insulin dosing suggestions. \
Be precise with numbers. Always recommend they discuss changes with their \
doctor.\
"""

REQUEST_ITEMS = (
    "Assessment of current glucose control",
    "Specific insulin timing recommendations (e.g. pre-bolus timing)",
    "Suggested ISF and ICR adjustments if data supports it",
    "Suggestions to reduce post-meal spikes",
    "Any patterns that suggest basal insulin adjustment",
    "Target glucose ranges and how close this patient is to non-diabetic levels",
)


def _signed(value: int | None) -> str:
    return "n/a" if value is None else f"{value:+d}"


def _plain(value: int | None) -> str:
    return "n/a" if value is None else str(value)


def _meal_line(curve: PostMealCurve) -> str:
    meal = curve.food_event
    return (
        f"  {meal.display_name}: {meal.carbs:.0f}g carbs, "
        f"baseline {curve.baseline_glucose}, "
        f"peak {curve.peak - curve.baseline_glucose:+d} at {curve.peak_minutes}min, "
        f"{_signed(curve.delta_at_60)} at 60min, "
        f"{_signed(curve.delta_at_120)} at 120min, "
        f"{_signed(curve.delta_at_180)} at 180min"
    )


def _dose_line(curve: PostInsulinCurve) -> str:
    dose = curve.insulin_event
    return (
        f"  {dose.units:.1f}u {dose.insulin_type.label}: "
        f"baseline {curve.baseline_glucose}, "
        f"nadir {curve.nadir} at {curve.nadir_minutes}min, "
        f"drop at 60={_plain(curve.drop_at_60)}, 120={_plain(curve.drop_at_120)}, "
        f"180={_plain(curve.drop_at_180)}"
    )


def _format_hours(hours: tuple[int, ...]) -> str:
    return ", ".join(f"{h}:00" for h in hours)


def build_insight_prompt(
    result: InsightResult,
    context: PersonalContext | None = None,
) -> str:
    """Build the user prompt for an analysis result.

    Empty time-of-day bands and unavailable estimates are left out rather
    than shown as zeros.

    Args:
        result: Output of one analysis pass.
        context: Optional personal details.

    Returns:
        Formatted prompt string for the AI provider.
    """
    lines = [
        "=== DATA SUMMARY ===",
        f"Data span: {result.data_span_days} days, {result.total_readings} glucose readings",
    ]

    overall = result.overall
    if overall.count > 0:
        lines.append(f"Overall avg glucose: {overall.avg_glucose:.0f} mg/dL")
        lines.append(
            f"Time in range ({LOW_THRESHOLD}-{HIGH_THRESHOLD}): {overall.pct_in_range}%  |  "
            f"Time low: {overall.pct_low}%  |  Time high: {overall.pct_high}%"
        )
        lines.append(f"Estimated A1c: {overall.estimated_a1c:.1f}%")

    if result.estimated_isf is not None:
        lines.append(
            "Estimated insulin sensitivity factor (ISF): "
            f"{result.estimated_isf:.0f} mg/dL per unit"
        )
    if result.estimated_icr is not None:
        lines.append(
            "Estimated insulin-to-carb ratio (ICR): "
            f"1 unit per {result.estimated_icr:.0f}g carbs"
        )
    if result.avg_post_meal_rise is not None:
        lines.append(
            "Average glucose rise at 60 min post-meal: "
            f"+{result.avg_post_meal_rise:.0f} mg/dL"
        )

    if context is not None and not context.is_empty():
        lines += ["", "=== PATIENT ==="]
        if context.age is not None:
            lines.append(f"Age: {context.age}")
        if context.weight_kg is not None:
            lines.append(f"Weight: {context.weight_kg:.0f} kg")
        if context.height_cm is not None:
            lines.append(f"Height: {context.height_cm:.0f} cm")

    populated = [s for s in result.time_of_day_stats if s.count > 0]
    if populated:
        lines += ["", "=== TIME OF DAY PATTERNS ==="]
        for s in populated:
            lines.append(
                f"{s.label}: avg {s.avg_glucose:.0f} mg/dL, in-range {s.pct_in_range}%, "
                f"low {s.pct_low}%, high {s.pct_high}% (n={s.count})"
            )

    meals = sorted(
        result.post_meal_curves,
        key=lambda c: c.food_event.timestamp_ms,
        reverse=True,
    )[:RECENT_MEAL_LIMIT]
    if meals:
        lines += ["", f"=== POST-MEAL RESPONSES (recent {len(meals)} meals) ==="]
        lines += [_meal_line(c) for c in meals]

    doses = sorted(
        result.post_insulin_curves,
        key=lambda c: c.insulin_event.timestamp_ms,
        reverse=True,
    )[:RECENT_DOSE_LIMIT]
    if doses:
        lines += ["", f"=== POST-INSULIN RESPONSES (recent {len(doses)} doses) ==="]
        lines += [_dose_line(c) for c in doses]

    if result.hypoglycemia_hours:
        lines += [
            "",
            f"Most common hypoglycemia hours: {_format_hours(result.hypoglycemia_hours)}",
        ]
    if result.high_glucose_hours:
        lines.append(
            f"Most common high glucose hours: {_format_hours(result.high_glucose_hours)}"
        )

    if result.warnings_and_tips:
        lines += ["", "=== DETECTED PATTERNS ==="]
        lines += [f"- {tip}" for tip in result.warnings_and_tips]

    lines += ["", "=== REQUEST ===", "Based on this data, please provide:"]
    lines += [f"{i}. {item}" for i, item in enumerate(REQUEST_ITEMS, start=1)]
    lines += ["", "Be specific with numbers and timing. Keep response under 600 words."]

    return "\n".join(lines)
