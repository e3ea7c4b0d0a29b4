"""Story 3.1: Temporal alignment of glucose samples.

Matches a target time to the nearest CGM sample inside a tolerance
window. Every response-curve extractor anchors its readings through
here, so the lookup is a binary search over sorted timestamps.
"""

from bisect import bisect_left, bisect_right
from collections.abc import Iterable, Sequence

from glucose_insights.schemas.glucose import GlucoseSample

MS_PER_MINUTE = 60_000


class MissingSnapshotError(ValueError):
    """Raised when a caller passes no snapshot at all instead of an empty one."""


def require_snapshot(name: str, value: object) -> None:
    """Reject an absent input snapshot.

    Args:
        name: Snapshot name for the error message.
        value: The snapshot supplied by the caller.

    Raises:
        MissingSnapshotError: If value is None.
    """
    if value is None:
        msg = f"{name} snapshot is required (pass an empty list when there is no data)"
        raise MissingSnapshotError(msg)


def minutes(n: int) -> int:
    """Convert minutes to milliseconds."""
    return n * MS_PER_MINUTE


def sort_samples(samples: Iterable[GlucoseSample]) -> list[GlucoseSample]:
    """Return samples in chronological order."""
    return sorted(samples, key=lambda s: s.timestamp_ms)


class SampleIndex:
    """Sorted glucose samples with their timestamps kept for bisection."""

    def __init__(self, samples: Iterable[GlucoseSample]):
        self.samples: list[GlucoseSample] = sort_samples(samples)
        self.timestamps: list[int] = [s.timestamp_ms for s in self.samples]

    def __len__(self) -> int:
        return len(self.samples)

    def closest(self, target_ms: int, window_ms: int) -> GlucoseSample | None:
        """Nearest sample to target_ms within ±window_ms, earliest on a tie."""
        lo = bisect_left(self.timestamps, target_ms - window_ms)
        hi = bisect_right(self.timestamps, target_ms + window_ms)

        best: GlucoseSample | None = None
        best_distance = 0
        for sample in self.samples[lo:hi]:
            distance = abs(sample.timestamp_ms - target_ms)
            # Strict comparison keeps the earlier sample on a tie
            if best is None or distance < best_distance:
                best = sample
                best_distance = distance
        return best

    def between(self, start_ms: int, end_ms: int) -> list[GlucoseSample]:
        """Samples with start_ms <= timestamp <= end_ms, in time order."""
        lo = bisect_left(self.timestamps, start_ms)
        hi = bisect_right(self.timestamps, end_ms)
        return self.samples[lo:hi]


def closest_sample(
    samples: Sequence[GlucoseSample],
    target_ms: int,
    window_ms: int,
) -> GlucoseSample | None:
    """Find the sample nearest to a target time.

    Only samples with |timestamp - target| <= window_ms qualify. When two
    samples are exactly equidistant the earlier one wins.

    Args:
        samples: Chronologically sorted samples.
        target_ms: Target epoch milliseconds.
        window_ms: Tolerance on either side of the target.

    Returns:
        The nearest qualifying sample, or None if the window is empty.
    """
    if not samples:
        return None
    return SampleIndex(samples).closest(target_ms, window_ms)
