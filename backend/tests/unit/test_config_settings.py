"""Unit tests for application settings configuration."""

from pathlib import Path

import pytest

from healthlog.config import Settings
from healthlog.domain.exceptions import ConfigurationError
from healthlog.domain.stats_engine import build_stats_config


def test_settings_uses_backend_env_file_independent_of_cwd():
    """Settings should always include backend/.env as an env source."""
    env_files = Settings.model_config.get("env_file")
    assert env_files is not None

    normalized = {str(Path(item)) for item in env_files}
    expected_backend_env = str(Path(__file__).resolve().parents[2] / ".env")

    assert expected_backend_env in normalized
    assert str(Path(".env")) in normalized


def test_statistics_defaults_are_valid():
    settings = Settings(_env_file=None)
    config = build_stats_config(settings.stats_time_zone, settings.streak_horizon_days)
    assert config.time_zone.key == "UTC"
    assert config.streak_horizon_days == 365


def test_statistics_settings_read_from_environment(monkeypatch):
    monkeypatch.setenv("STATS_TIME_ZONE", "Asia/Shanghai")
    monkeypatch.setenv("STREAK_HORIZON_DAYS", "90")
    settings = Settings(_env_file=None)
    config = build_stats_config(settings.stats_time_zone, settings.streak_horizon_days)
    assert config.time_zone.key == "Asia/Shanghai"
    assert config.streak_horizon_days == 90


def test_bad_statistics_settings_fail_fast(monkeypatch):
    monkeypatch.setenv("STATS_TIME_ZONE", "Atlantis/Capital")
    settings = Settings(_env_file=None)
    with pytest.raises(ConfigurationError):
        build_stats_config(settings.stats_time_zone, settings.streak_horizon_days)
