"""Story 3.5: Whole-history glucose statistics.

Range percentages, average glucose, estimated A1c and the hours of day
where lows and highs cluster.
"""

from collections import Counter
from collections.abc import Callable, Iterable, Sequence
from datetime import tzinfo

from glucose_insights.schemas.glucose import GlucoseSample
from glucose_insights.schemas.insights import OverallStats

# Glucose range thresholds (mg/dL); the in-range band is inclusive
LOW_THRESHOLD = 70
HIGH_THRESHOLD = 180

# How many hours to report for low/high clustering
TOP_HOURS = 3

MS_PER_DAY = 86_400_000


def is_low(value: int) -> bool:
    return value < LOW_THRESHOLD


def is_high(value: int) -> bool:
    return value > HIGH_THRESHOLD


def is_in_range(value: int) -> bool:
    return LOW_THRESHOLD <= value <= HIGH_THRESHOLD


def range_percentages(values: Sequence[int]) -> tuple[int, int, int]:
    """Split readings into low / in-range / high integer percentages.

    Percentages are truncated, so the three may sum to slightly under 100.

    Args:
        values: Glucose values in mg/dL. Must not be empty.

    Returns:
        Tuple of (pct_low, pct_in_range, pct_high).
    """
    total = len(values)
    low = sum(1 for v in values if is_low(v))
    in_range = sum(1 for v in values if is_in_range(v))
    high = sum(1 for v in values if is_high(v))
    return low * 100 // total, in_range * 100 // total, high * 100 // total


def time_in_range_pct(values: Sequence[int]) -> int | None:
    """Truncated percentage of readings within 70-180 mg/dL."""
    if not values:
        return None
    return range_percentages(values)[1]


def estimate_a1c(avg_glucose: float) -> float:
    """Estimate A1c (%) from mean glucose using the ADAG relation."""
    return (avg_glucose + 46.7) / 28.7


def compute_overall_stats(samples: Sequence[GlucoseSample]) -> OverallStats:
    """Summarize the whole glucose history.

    Args:
        samples: Glucose samples in any order.

    Returns:
        OverallStats; every metric is None when there are no samples.
    """
    values = [s.value for s in samples]
    if not values:
        return OverallStats()

    avg = sum(values) / len(values)
    pct_low, pct_in_range, pct_high = range_percentages(values)
    return OverallStats(
        count=len(values),
        avg_glucose=avg,
        pct_in_range=pct_in_range,
        pct_low=pct_low,
        pct_high=pct_high,
        estimated_a1c=estimate_a1c(avg),
    )


def most_common_hours(
    samples: Iterable[GlucoseSample],
    tz: tzinfo,
    predicate: Callable[[int], bool],
    limit: int = TOP_HOURS,
) -> list[int]:
    """Hours of day with the most readings matching predicate.

    Ties keep the hour that appeared first in the input.

    Args:
        samples: Glucose samples, normally in time order.
        tz: Zone whose local clock defines the hour.
        predicate: Test applied to each glucose value.
        limit: Maximum number of hours returned.

    Returns:
        Up to ``limit`` hours, most frequent first.
    """
    counts = Counter(
        s.local_time(tz).hour for s in samples if predicate(s.value)
    )
    return [hour for hour, _ in counts.most_common(limit)]


def data_span_days(samples: Sequence[GlucoseSample]) -> int:
    """Whole days between the first and last sample."""
    if len(samples) < 2:
        return 0
    timestamps = [s.timestamp_ms for s in samples]
    return (max(timestamps) - min(timestamps)) // MS_PER_DAY
