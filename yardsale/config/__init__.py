"""Configuration module for Yard Sale Finder."""

from .settings import (
    APP_CONFIG,
    AppSettings,
    DatabaseConfig,
    SearchConfig,
    get_settings,
)

__all__ = [
    'APP_CONFIG',
    'AppSettings',
    'DatabaseConfig',
    'SearchConfig',
    'get_settings',
]
