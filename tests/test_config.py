"""Story 1.1: Tests for engine settings and alert configuration."""

import pytest
from pydantic import ValidationError

from glucose_insights.config import Settings
from glucose_insights.models.alert import AlertKind
from glucose_insights.schemas.alert import AlertConfig, AlertCooldownState


class TestSettings:
    """Tests for Settings."""

    def test_defaults(self, monkeypatch):
        for name in ("GLUCOSE_HIGH", "GLUCOSE_LOW", "PROJECTION_MINUTES", "TIMEZONE"):
            monkeypatch.delenv(name, raising=False)

        settings = Settings(_env_file=None)

        assert settings.glucose_high == 180
        assert settings.glucose_low == 70
        assert settings.projection_minutes == 20
        assert settings.glucose_retention_days == 400
        assert settings.tzinfo.key == "UTC"

    def test_environment_override(self, monkeypatch):
        monkeypatch.setenv("GLUCOSE_HIGH", "220")
        monkeypatch.setenv("TIMEZONE", "Europe/Berlin")
        monkeypatch.setenv("NOTIFICATIONS_ENABLED", "false")

        settings = Settings(_env_file=None)

        assert settings.glucose_high == 220
        assert settings.tzinfo.key == "Europe/Berlin"
        assert settings.notifications_enabled is False

    def test_invalid_timezone(self):
        with pytest.raises(ValidationError, match="Invalid timezone"):
            Settings(_env_file=None, timezone="Mars/Olympus_Mons")

    def test_threshold_ordering(self):
        with pytest.raises(ValidationError, match="glucose_low must be less than glucose_high"):
            Settings(_env_file=None, glucose_low=120, glucose_high=120)

    @pytest.mark.parametrize("minutes", [9, 41])
    def test_projection_window_bounds(self, minutes):
        with pytest.raises(ValidationError):
            Settings(_env_file=None, projection_minutes=minutes)


class TestAlertConfig:
    """Tests for AlertConfig."""

    def test_from_settings(self):
        settings = Settings(
            _env_file=None,
            glucose_high=200,
            glucose_low=80,
            projection_minutes=30,
            predict_low_enabled=False,
        )

        config = AlertConfig.from_settings(settings)

        assert config.high_threshold == 200
        assert config.low_threshold == 80
        assert config.projection_minutes == 30
        assert config.predict_high_enabled is True
        assert config.predict_low_enabled is False

    def test_low_must_be_below_high(self):
        with pytest.raises(ValidationError, match="low_threshold must be less than high_threshold"):
            AlertConfig(high_threshold=120, low_threshold=120)

    def test_frozen(self):
        config = AlertConfig()
        with pytest.raises(ValidationError):
            config.high_threshold = 250


class TestAlertCooldownState:
    def test_mark_fired_returns_copy(self):
        state = AlertCooldownState()
        updated = state.mark_fired(AlertKind.LOW, 5_000)

        assert state.last_low_fired_ms is None
        assert updated.last_low_fired_ms == 5_000
        assert updated.last_fired(AlertKind.HIGH) is None
