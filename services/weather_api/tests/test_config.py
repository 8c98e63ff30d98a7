"""Tests for environment-driven Settings."""

import pytest
from pydantic import ValidationError

from services.weather_api.config import Settings


class TestSettings:
    def test_declared_settings(self):
        assert set(Settings.model_fields) == {
            "app_name",
            "app_version",
            "environment",
            "cors_origins",
            "sentry_dsn",
            "sentry_traces_sample_rate",
            "openweathermap_api_key",
            "openweathermap_base_url",
            "weather_api_timeout_s",
            "weather_cache_ttl_s",
            "weather_cache_max_entries",
            "weather_collapse_inflight",
        }

    def test_weather_cache_defaults(self, monkeypatch):
        monkeypatch.delenv("WEATHER_CACHE_TTL_S", raising=False)
        monkeypatch.delenv("WEATHER_CACHE_MAX_ENTRIES", raising=False)
        monkeypatch.delenv("WEATHER_COLLAPSE_INFLIGHT", raising=False)
        settings = Settings(_env_file=None)
        assert settings.weather_cache_ttl_s == 600.0
        assert settings.weather_cache_max_entries == 100
        assert settings.weather_collapse_inflight is False

    def test_read_from_environment(self, monkeypatch):
        monkeypatch.setenv("WEATHER_CACHE_MAX_ENTRIES", "25")
        monkeypatch.setenv("WEATHER_COLLAPSE_INFLIGHT", "true")
        settings = Settings(_env_file=None)
        assert settings.weather_cache_max_entries == 25
        assert settings.weather_collapse_inflight is True

    def test_capacity_must_be_positive(self, monkeypatch):
        monkeypatch.setenv("WEATHER_CACHE_MAX_ENTRIES", "0")
        with pytest.raises(ValidationError):
            Settings(_env_file=None)
