"""Configuration management module."""

from .settings import (
    Settings,
    AppConfig,
    ProviderConfig,
    LoggingConfig,
    PROVIDERS,
    get_settings,
    reload_settings,
)

__all__ = [
    "Settings",
    "AppConfig",
    "ProviderConfig",
    "LoggingConfig",
    "PROVIDERS",
    "get_settings",
    "reload_settings",
]
