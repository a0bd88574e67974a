"""Tests for environment-driven settings."""

from decimal import Decimal

import pytest
from pydantic import ValidationError

from payrank.config import (
    AppSettings,
    RankingSettings,
    Settings,
    get_settings,
    validate_all_settings,
)
from payrank.models.invoice import WeightConfig


@pytest.fixture(autouse=True)
def _clean_env(monkeypatch, tmp_path):
    """Run from an empty directory so a local .env can't leak in."""
    monkeypatch.chdir(tmp_path)
    for name in (
        "PAYRANK_WEIGHT_IMPORTANCE",
        "PAYRANK_WEIGHT_AGE",
        "PAYRANK_WEIGHT_AMOUNT",
        "DEFAULT_CASH_BALANCE",
        "SNAPSHOT_PATH",
        "LOG_LEVEL",
    ):
        monkeypatch.delenv(name, raising=False)
    get_settings.cache_clear()
    yield
    get_settings.cache_clear()


class TestRankingSettings:
    """Tests for the default weights."""

    def test_defaults(self):
        """60/30/10 out of the box."""
        assert RankingSettings().to_weights() == WeightConfig(importance=60, age=30, amount=10)

    def test_from_env(self, monkeypatch):
        """Prefixed environment variables override the defaults."""
        monkeypatch.setenv("PAYRANK_WEIGHT_AGE", "45")

        assert RankingSettings().weight_age == 45.0

    def test_out_of_range(self, monkeypatch):
        """Weights outside the slider range are rejected."""
        monkeypatch.setenv("PAYRANK_WEIGHT_AMOUNT", "101")

        with pytest.raises(ValidationError):
            RankingSettings()


class TestAppSettings:
    """Tests for desk-level settings."""

    def test_defaults(self):
        """Starting cash and snapshot path defaults."""
        settings = AppSettings()

        assert settings.default_cash_balance == Decimal("15000")
        assert settings.snapshot_path == "data/payables.json"
        assert settings.log_level == "INFO"

    def test_only_desk_fields(self):
        """Every app setting is read by the desk or the logging setup."""
        assert set(AppSettings.model_fields) == {
            "log_level", "default_cash_balance", "snapshot_path",
        }

    def test_log_level_normalized(self, monkeypatch):
        """Log level is case-insensitive."""
        monkeypatch.setenv("LOG_LEVEL", " debug ")

        assert AppSettings().log_level == "DEBUG"

    def test_log_level_unknown(self, monkeypatch):
        """Unknown log levels are rejected."""
        monkeypatch.setenv("LOG_LEVEL", "LOUD")

        with pytest.raises(ValidationError):
            AppSettings()


class TestSettingsAccess:
    """Tests for the root container and caching."""

    def test_sub_settings(self):
        """The root container exposes both groups."""
        settings = Settings()

        assert isinstance(settings.ranking, RankingSettings)
        assert isinstance(settings.app, AppSettings)

    def test_get_settings_cached(self):
        """get_settings returns the same instance until cleared."""
        first = get_settings()

        assert get_settings() is first
        get_settings.cache_clear()
        assert get_settings() is not first

    def test_validate_all(self, monkeypatch):
        """Invalid groups are reported, not raised."""
        assert validate_all_settings() == {"ranking": True, "app": True}

        monkeypatch.setenv("PAYRANK_WEIGHT_IMPORTANCE", "-1")
        results = validate_all_settings()

        assert results["ranking"] is False
        assert "ranking_error" in results
        assert results["app"] is True
