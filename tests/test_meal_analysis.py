"""Story 3.2: Tests for post-meal response curves."""

import pytest

from glucose_insights.services.alignment import MissingSnapshotError, SampleIndex
from glucose_insights.services.meal_analysis import (
    build_post_meal_curve,
    compute_post_meal_curves,
)


class TestComputePostMealCurves:
    """Tests for compute_post_meal_curves."""

    def test_exact_checkpoint_deltas(self, make_sample, make_meal):
        """Samples at the anchor and each checkpoint give exact deltas."""
        samples = [
            make_sample(-10, 100),
            make_sample(60, 160),
            make_sample(120, 140),
            make_sample(180, 110),
        ]

        curves = compute_post_meal_curves(samples, [make_meal(0)])

        assert len(curves) == 1
        curve = curves[0]
        assert curve.baseline_glucose == 100
        assert curve.glucose_at_60 == 160
        assert curve.glucose_at_120 == 140
        assert curve.glucose_at_180 == 110
        assert curve.delta_at_60 == 60
        assert curve.delta_at_120 == 40
        assert curve.delta_at_180 == 10
        assert curve.peak == 160
        assert curve.peak_minutes == 60

    def test_meal_without_baseline_is_skipped(self, make_series, make_meal):
        """A meal with no sample near its anchor yields one fewer curve."""
        # Data around the first meal only; the second meal's baseline window is empty
        samples = make_series([100 + i for i in range(40)], start_offset=-20)
        samples += make_series([150] * 10, start_offset=620)
        meals = [make_meal(0), make_meal(600)]

        curves = compute_post_meal_curves(samples, meals)

        assert len(curves) == len(meals) - 1
        assert curves[0].food_event == meals[0]

    def test_end_to_end_rise(self, make_sample, make_meal):
        """100 -> 220 over three hours after a 50 g meal."""
        samples = [make_sample(-10, 100), make_sample(-5, 100), make_sample(0, 100)]
        samples += [make_sample(m, 100 + int(2 * m / 3)) for m in range(5, 185, 5)]
        meal = make_meal(0, carbs=50)

        curves = compute_post_meal_curves(samples, [meal])

        assert len(curves) == 1
        curve = curves[0]
        assert curve.food_event.carbs == 50
        assert curve.baseline_glucose == 100
        assert curve.peak == 220
        assert curve.peak_minutes == 180
        assert curve.delta_at_60 == 140 - 100
        assert curve.delta_at_180 == 120

    def test_missing_checkpoints_are_none(self, make_series, make_meal):
        """Checkpoints without a nearby sample stay unset."""
        samples = make_series([100, 105, 110, 130, 150, 160, 170], start_offset=-10, step_minutes=12)

        curve = compute_post_meal_curves(samples, [make_meal(0)])[0]

        assert curve.delta_at_60 is not None
        assert curve.delta_at_120 is None
        assert curve.delta_at_180 is None

    def test_zero_delta_is_not_missing(self, make_sample, make_meal):
        """A return to baseline is reported as 0, not None."""
        samples = [
            make_sample(-10, 110),
            make_sample(60, 170),
            make_sample(120, 110),
        ]

        curve = compute_post_meal_curves(samples, [make_meal(0)])[0]

        assert curve.delta_at_120 == 0
        assert curve.delta_at_180 is None

    def test_no_samples_after_meal(self, make_sample, make_meal):
        """A baseline alone is not enough for a curve."""
        samples = [make_sample(-10, 100), make_sample(-5, 102)]
        assert compute_post_meal_curves(samples, [make_meal(0)]) == []

    def test_empty_logs(self, make_meal):
        """Empty logs are ordinary data."""
        assert compute_post_meal_curves([], [make_meal(0)]) == []
        assert compute_post_meal_curves([], []) == []

    def test_none_snapshot_raises(self, make_meal):
        """An absent glucose snapshot is a precondition violation."""
        with pytest.raises(MissingSnapshotError):
            compute_post_meal_curves(None, [make_meal(0)])

    def test_accepts_prebuilt_index(self, make_series, make_meal):
        """A SampleIndex can be shared across extractors."""
        index = SampleIndex(make_series([100, 120, 140, 160], start_offset=-10, step_minutes=20))
        assert len(compute_post_meal_curves(index, [make_meal(0)])) == 1


class TestBuildPostMealCurve:
    """Tests for peak selection in build_post_meal_curve."""

    def test_peak_tie_keeps_first(self, make_sample, make_meal):
        """Equal peak values resolve to the earliest sample."""
        index = SampleIndex(
            [make_sample(-10, 100), make_sample(30, 180), make_sample(90, 180), make_sample(150, 120)]
        )

        curve = build_post_meal_curve(index, make_meal(0))

        assert curve.peak == 180
        assert curve.peak_minutes == 30

    def test_peak_minutes_floor(self, make_sample, make_meal):
        """Peak offset is truncated to whole minutes."""
        index = SampleIndex([make_sample(-10, 100), make_sample(44.5, 190)])
        assert build_post_meal_curve(index, make_meal(0)).peak_minutes == 44

    def test_peak_window_is_three_hours(self, make_sample, make_meal):
        """Readings after 180 minutes do not count toward the peak."""
        index = SampleIndex(
            [make_sample(-10, 100), make_sample(170, 150), make_sample(185, 250)]
        )
        assert build_post_meal_curve(index, make_meal(0)).peak == 150
