"""
Tests for environment-driven settings.
"""
import pytest
from pydantic import ValidationError

from screw_sort.config import Settings, get_settings
from screw_sort.gameplay import constants


class TestSettings:
    """Tests for Settings defaults and overrides."""

    def test_defaults_follow_constants(self):
        settings = Settings()
        assert settings.slot_count == constants.SLOT_COUNT
        assert settings.match_count == constants.MATCH_COUNT
        assert settings.level_time == constants.LEVEL_TIME
        assert settings.max_health == constants.MAX_HEALTH

    def test_environment_overrides(self, monkeypatch):
        monkeypatch.setenv("SCREW_SORT_SLOT_COUNT", "7")
        monkeypatch.setenv("screw_sort_audio_enabled", "false")

        settings = Settings()

        assert settings.slot_count == 7
        assert settings.audio_enabled is False

    def test_combo_window_in_seconds(self):
        assert Settings(combo_window_ms=2500).combo_window == pytest.approx(2.5)

    @pytest.mark.parametrize("field,value", [
        ("slot_count", 0),
        ("match_count", 1),
        ("lerp_speed", 1.5),
        ("level_time", 0),
    ])
    def test_rejects_invalid_values(self, field, value):
        with pytest.raises(ValidationError):
            Settings(**{field: value})


class TestGetSettings:
    """Tests for the cached accessor."""

    def test_is_cached(self):
        get_settings.cache_clear()
        assert get_settings() is get_settings()
        get_settings.cache_clear()
