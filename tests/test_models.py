"""Story 2.1: Tests for domain enums and record schemas."""

import pytest
from pydantic import ValidationError

from glucose_insights.models.events import InsulinType, MealType
from glucose_insights.models.glucose import TrendDirection, parse_trend
from glucose_insights.schemas.events import FoodEvent
from glucose_insights.schemas.glucose import GlucoseSample


class TestParseTrend:
    """Tests for parse_trend."""

    @pytest.mark.parametrize(
        ("raw", "expected"),
        [
            ("DoubleUp", TrendDirection.DOUBLE_UP),
            ("singledown", TrendDirection.SINGLE_DOWN),
            ("flat", TrendDirection.FLAT),
            (5, TrendDirection.FORTY_FIVE_DOWN),
            (TrendDirection.SINGLE_UP, TrendDirection.SINGLE_UP),
            ("NotComputable", TrendDirection.NONE),
            ("sideways", TrendDirection.NONE),
            (42, TrendDirection.NONE),
            (None, TrendDirection.NONE),
        ],
    )
    def test_parse(self, raw, expected):
        assert parse_trend(raw) == expected


class TestGlucoseSample:
    def test_rejects_non_positive_value(self):
        with pytest.raises(ValidationError):
            GlucoseSample(timestamp_ms=1_709_553_600_000, value=0)

    def test_rejects_non_positive_timestamp(self):
        with pytest.raises(ValidationError):
            GlucoseSample(timestamp_ms=0, value=120)

    def test_local_time(self, utc):
        sample = GlucoseSample(timestamp_ms=1_709_553_600_000, value=120)
        assert sample.local_time(utc).hour == 12


class TestEventLabels:
    def test_meal_label(self):
        assert MealType.SNACK.label == "Snack"

    def test_insulin_label(self):
        assert InsulinType.LONG.label == "Long-acting"

    def test_display_name_falls_back_to_meal_type(self):
        meal = FoodEvent(name="  ", carbs=30, meal_type=MealType.DINNER, timestamp_ms=1)
        assert meal.display_name == "Dinner"
