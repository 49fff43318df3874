"""Configuration package."""

from ledger.config.settings import (
    AppSettings,
    CategorySettings,
    DisplaySettings,
    Settings,
    ValidationSettings,
    get_settings,
    validate_all_settings,
)

__all__ = [
    "AppSettings",
    "CategorySettings",
    "DisplaySettings",
    "Settings",
    "ValidationSettings",
    "get_settings",
    "validate_all_settings",
]
