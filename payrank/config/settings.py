"""
Configuration Management for PayRank

Uses pydantic-settings for type-safe configuration from environment variables.

DESIGN DECISION: All configuration is centralized here.
The allocator itself takes its weights and cash as arguments;
these settings only supply the defaults the desk starts from.
"""

from decimal import Decimal
from functools import lru_cache

from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

from payrank.models.invoice import WeightConfig


class RankingSettings(BaseSettings):
    """Default weighting preferences for the priority score."""

    model_config = SettingsConfigDict(
        env_prefix="PAYRANK_",
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore"
    )

    # Slider range on the settings surface is 0-100
    weight_importance: float = Field(
        default=60.0,
        ge=0.0,
        le=100.0,
        description="Weight of Critical/High tags"
    )
    weight_age: float = Field(
        default=30.0,
        ge=0.0,
        le=100.0,
        description="Prioritize older bills"
    )
    weight_amount: float = Field(
        default=10.0,
        ge=0.0,
        le=100.0,
        description="Prioritize larger bills"
    )

    def to_weights(self) -> WeightConfig:
        return WeightConfig(
            importance=self.weight_importance,
            age=self.weight_age,
            amount=self.weight_amount,
        )


class AppSettings(BaseSettings):
    """
    Main application settings.

    Loads configuration from environment variables and .env file.
    """

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore"
    )

    # Logging
    log_level: str = Field(
        default="INFO",
        description="Minimum level for local structured logs"
    )

    # Payables desk
    default_cash_balance: Decimal = Field(
        default=Decimal("15000"),
        description="Cash balance the desk starts with"
    )
    snapshot_path: str = Field(
        default="data/payables.json",
        description="Where the JSON snapshot is written and read"
    )

    @field_validator('log_level')
    @classmethod
    def validate_log_level(cls, v: str) -> str:
        level = v.strip().upper()
        if level not in {"DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"}:
            raise ValueError(f"Unknown log level: {v}")
        return level


class Settings(BaseSettings):
    """
    Root settings container.

    Aggregates all sub-settings for easy access.
    """

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore"
    )

    @property
    def ranking(self) -> RankingSettings:
        return RankingSettings()

    @property
    def app(self) -> AppSettings:
        return AppSettings()


@lru_cache()
def get_settings() -> Settings:
    """
    Get application settings (cached).

    Call get_settings.cache_clear() to reload if needed.
    """
    return Settings()


def validate_all_settings() -> dict[str, bool]:
    """
    Validate all settings are properly configured.

    Returns a dict of {setting_name: is_valid}.
    Useful for startup checks.
    """
    results = {}

    settings = get_settings()

    try:
        _ = settings.ranking
        results["ranking"] = True
    except ValueError as e:
        results["ranking"] = False
        results["ranking_error"] = str(e)

    try:
        _ = settings.app
        results["app"] = True
    except ValueError as e:
        results["app"] = False
        results["app_error"] = str(e)

    return results
