"""Story 3.5: Tests for whole-history glucose statistics."""

import pytest

from glucose_insights.services.glucose_stats import (
    compute_overall_stats,
    data_span_days,
    estimate_a1c,
    is_high,
    is_low,
    most_common_hours,
    range_percentages,
    time_in_range_pct,
)

# 2024-03-04 00:00 UTC
MIDNIGHT_MS = 1_709_510_400_000


class TestRangePercentages:
    """Tests for range classification."""

    def test_truncated(self):
        """Shares are truncated integer percentages."""
        assert range_percentages([60, 100, 200]) == (33, 33, 33)

    def test_time_in_range_empty(self):
        assert time_in_range_pct([]) is None

    def test_time_in_range(self):
        assert time_in_range_pct([70, 120, 180, 181]) == 75


class TestComputeOverallStats:
    """Tests for compute_overall_stats."""

    def test_empty_history(self):
        """No readings leaves every metric unset."""
        stats = compute_overall_stats([])
        assert stats.count == 0
        assert stats.avg_glucose is None
        assert stats.pct_in_range is None
        assert stats.estimated_a1c is None

    def test_summary(self, make_series):
        stats = compute_overall_stats(make_series([60, 100, 140, 200]))

        assert stats.count == 4
        assert stats.avg_glucose == pytest.approx(125.0)
        assert stats.pct_low == 25
        assert stats.pct_in_range == 50
        assert stats.pct_high == 25
        assert stats.estimated_a1c == pytest.approx((125.0 + 46.7) / 28.7)

    def test_a1c_reference_point(self):
        """A mean of 154 mg/dL is roughly 7% A1c."""
        assert estimate_a1c(154) == pytest.approx(7.0, abs=0.01)


class TestMostCommonHours:
    """Tests for most_common_hours."""

    def test_top_three_low_hours(self, make_sample, utc):
        hours = [3, 3, 3, 2, 2, 22, 15]
        samples = [
            make_sample(h * 60 + i, 60, start_ms=MIDNIGHT_MS) for i, h in enumerate(hours)
        ]
        samples.append(make_sample(5 * 60, 120, start_ms=MIDNIGHT_MS))

        assert most_common_hours(samples, utc, is_low) == [3, 2, 22]

    def test_no_matches(self, make_series, utc):
        assert most_common_hours(make_series([120, 130]), utc, is_high) == []


class TestDataSpanDays:
    """Tests for data_span_days."""

    def test_whole_days(self, make_sample):
        samples = [make_sample(0, 100), make_sample(3 * 24 * 60 + 600, 120)]
        assert data_span_days(samples) == 3

    def test_single_sample(self, make_sample):
        assert data_span_days([make_sample(0, 100)]) == 0
