"""Story 3.4: Time-of-day glucose statistics.

Buckets the whole glucose history into six fixed 4-hour clock bands by
local hour of day (the date is ignored) and reports range statistics
for each band.
"""

from collections.abc import Iterable
from datetime import tzinfo

from glucose_insights.schemas.glucose import GlucoseSample
from glucose_insights.schemas.insights import TimeOfDayStats
from glucose_insights.services.alignment import require_snapshot
from glucose_insights.services.glucose_stats import range_percentages

# Band label -> (start hour inclusive, end hour exclusive)
TIME_SLOTS: dict[str, tuple[int, int]] = {
    "12–4 AM": (0, 4),
    "4–8 AM": (4, 8),
    "8 AM–12 PM": (8, 12),
    "12–4 PM": (12, 16),
    "4–8 PM": (16, 20),
    "8 PM–12 AM": (20, 24),
}

OVERNIGHT_SLOT = "12–4 AM"
EARLY_MORNING_SLOT = "4–8 AM"


def classify_time_slot(hour: int) -> str:
    """Classify an hour of day into its 4-hour band.

    Args:
        hour: Hour of day (0-23).

    Returns:
        Band label.
    """
    for label, (start, end) in TIME_SLOTS.items():
        if start <= hour < end:
            return label
    msg = f"hour out of range: {hour}"
    raise ValueError(msg)


def compute_time_of_day(
    samples: Iterable[GlucoseSample],
    tz: tzinfo,
) -> list[TimeOfDayStats]:
    """Compute range statistics for each clock band.

    All six bands are always returned in clock order. A band with no
    samples reports zeros and a count of 0.

    Args:
        samples: Glucose samples in any order.
        tz: Zone whose local clock defines the hour of day.

    Returns:
        Six TimeOfDayStats, midnight band first.
    """
    require_snapshot("glucose", samples)

    values_by_slot: dict[str, list[int]] = {label: [] for label in TIME_SLOTS}
    for sample in samples:
        values_by_slot[classify_time_slot(sample.local_time(tz).hour)].append(
            sample.value
        )

    result = []
    for label, (start, end) in TIME_SLOTS.items():
        values = values_by_slot[label]
        if not values:
            result.append(TimeOfDayStats(label=label, start_hour=start, end_hour=end))
            continue

        pct_low, pct_in_range, pct_high = range_percentages(values)
        result.append(
            TimeOfDayStats(
                label=label,
                start_hour=start,
                end_hour=end,
                avg_glucose=sum(values) / len(values),
                pct_in_range=pct_in_range,
                pct_low=pct_low,
                pct_high=pct_high,
                count=len(values),
            )
        )

    return result


def find_slot(stats: Iterable[TimeOfDayStats], label: str) -> TimeOfDayStats | None:
    """Look up a band by label."""
    for slot in stats:
        if slot.label == label:
            return slot
    return None
