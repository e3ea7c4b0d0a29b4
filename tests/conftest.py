"""Pytest configuration and shared fixtures.

Builders for synthetic glucose, food and insulin logs. All offsets are
minutes relative to BASE_MS (2024-03-04 12:00 UTC) unless a start time
is passed explicitly.
"""

import logging
import zoneinfo
from collections.abc import Callable

import pytest

from glucose_insights.models.events import InsulinType, MealType
from glucose_insights.schemas.events import FoodEvent, InsulinEvent
from glucose_insights.schemas.glucose import GlucoseSample

BASE_MS = 1_709_553_600_000
MS_PER_MINUTE = 60_000


@pytest.fixture(autouse=True)
def restore_root_logging():
    """Undo any setup_logging() call a test makes on the root logger."""
    root = logging.getLogger()
    handlers = list(root.handlers)
    level = root.level
    yield
    root.handlers[:] = handlers
    root.setLevel(level)


@pytest.fixture
def utc() -> zoneinfo.ZoneInfo:
    return zoneinfo.ZoneInfo("UTC")


@pytest.fixture
def base_ms() -> int:
    return BASE_MS


@pytest.fixture
def make_sample() -> Callable[..., GlucoseSample]:
    """Build one sample at an offset in minutes from BASE_MS."""

    def _make(offset_minutes: float, value: int, start_ms: int = BASE_MS) -> GlucoseSample:
        return GlucoseSample(
            timestamp_ms=start_ms + int(offset_minutes * MS_PER_MINUTE),
            value=value,
        )

    return _make


@pytest.fixture
def make_series(make_sample) -> Callable[..., list[GlucoseSample]]:
    """Build evenly spaced samples (5-minute CGM cadence by default)."""

    def _make(
        values: list[int],
        start_offset: float = 0,
        step_minutes: float = 5,
        start_ms: int = BASE_MS,
    ) -> list[GlucoseSample]:
        return [
            make_sample(start_offset + i * step_minutes, value, start_ms=start_ms)
            for i, value in enumerate(values)
        ]

    return _make


@pytest.fixture
def make_meal() -> Callable[..., FoodEvent]:
    """Build a logged meal at an offset in minutes from BASE_MS."""

    def _make(
        offset_minutes: float = 0,
        carbs: float = 50,
        name: str = "",
        meal_type: MealType = MealType.LUNCH,
        start_ms: int = BASE_MS,
    ) -> FoodEvent:
        return FoodEvent(
            name=name,
            carbs=carbs,
            meal_type=meal_type,
            timestamp_ms=start_ms + int(offset_minutes * MS_PER_MINUTE),
        )

    return _make


@pytest.fixture
def make_dose() -> Callable[..., InsulinEvent]:
    """Build a logged insulin dose at an offset in minutes from BASE_MS."""

    def _make(
        offset_minutes: float = 0,
        units: float = 4,
        insulin_type: InsulinType = InsulinType.RAPID,
        start_ms: int = BASE_MS,
    ) -> InsulinEvent:
        return InsulinEvent(
            units=units,
            insulin_type=insulin_type,
            timestamp_ms=start_ms + int(offset_minutes * MS_PER_MINUTE),
        )

    return _make
