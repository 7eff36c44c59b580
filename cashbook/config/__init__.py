"""Configuration package."""

from cashbook.config.settings import (
    AppSettings,
    CloudinarySettings,
    RelaySettings,
    Settings,
    SupabaseSettings,
    get_settings,
    validate_all_settings,
)

__all__ = [
    "AppSettings",
    "CloudinarySettings",
    "RelaySettings",
    "Settings",
    "SupabaseSettings",
    "get_settings",
    "validate_all_settings",
]
