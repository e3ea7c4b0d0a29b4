"""Story 3.1: Tests for temporal alignment."""

import pytest

from glucose_insights.services.alignment import (
    MissingSnapshotError,
    SampleIndex,
    closest_sample,
    minutes,
    require_snapshot,
)


class TestClosestSample:
    """Tests for closest_sample."""

    def test_empty_samples(self, base_ms):
        """No samples means no match."""
        assert closest_sample([], base_ms, minutes(15)) is None

    def test_exact_match(self, make_series, base_ms):
        """A sample exactly at the target wins."""
        samples = make_series([100, 110, 120])
        match = closest_sample(samples, base_ms + minutes(5), minutes(15))
        assert match is not None
        assert match.value == 110

    def test_nearest_within_window(self, make_sample, base_ms):
        """The nearer of two candidates is chosen."""
        samples = [make_sample(0, 100), make_sample(12, 150)]
        match = closest_sample(samples, base_ms + minutes(9), minutes(15))
        assert match.value == 150

    def test_window_is_inclusive(self, make_sample, base_ms):
        """A sample exactly window_ms away still qualifies."""
        samples = [make_sample(15, 130)]
        match = closest_sample(samples, base_ms, minutes(15))
        assert match is not None
        assert match.value == 130

    def test_outside_window(self, make_sample, base_ms):
        """Samples beyond the window are ignored."""
        samples = [make_sample(-30, 100), make_sample(16, 130)]
        assert closest_sample(samples, base_ms, minutes(15)) is None

    def test_tie_prefers_earliest(self, make_sample, base_ms):
        """Equidistant samples resolve to the earlier one."""
        samples = [make_sample(-5, 90), make_sample(5, 140)]
        match = closest_sample(samples, base_ms, minutes(15))
        assert match.value == 90


class TestSampleIndex:
    """Tests for SampleIndex."""

    def test_sorts_input(self, make_sample):
        """Samples are stored in chronological order."""
        index = SampleIndex([make_sample(10, 120), make_sample(0, 100), make_sample(5, 110)])
        assert [s.value for s in index.samples] == [100, 110, 120]
        assert index.timestamps == sorted(index.timestamps)
        assert len(index) == 3

    def test_between_inclusive(self, make_series, base_ms):
        """Both window edges are included."""
        index = SampleIndex(make_series([100, 110, 120, 130, 140]))
        window = index.between(base_ms + minutes(5), base_ms + minutes(15))
        assert [s.value for s in window] == [110, 120, 130]

    def test_between_empty(self, make_series, base_ms):
        """A window with no samples returns an empty list."""
        index = SampleIndex(make_series([100, 110]))
        assert index.between(base_ms + minutes(60), base_ms + minutes(90)) == []


class TestRequireSnapshot:
    """Tests for the absent-snapshot precondition."""

    def test_none_raises(self):
        """None is rejected with a clear error."""
        with pytest.raises(MissingSnapshotError, match="glucose snapshot is required"):
            require_snapshot("glucose", None)

    def test_is_value_error(self):
        """Callers can catch it as a ValueError."""
        with pytest.raises(ValueError):
            require_snapshot("food", None)

    def test_empty_is_accepted(self):
        """An empty snapshot is ordinary data, not an error."""
        require_snapshot("insulin", [])
