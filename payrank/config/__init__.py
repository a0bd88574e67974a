"""Configuration package."""

from payrank.config.logging_config import configure_logging
from payrank.config.settings import (
    AppSettings,
    RankingSettings,
    Settings,
    get_settings,
    validate_all_settings,
)

__all__ = [
    "configure_logging",
    "AppSettings",
    "RankingSettings",
    "Settings",
    "get_settings",
    "validate_all_settings",
]
