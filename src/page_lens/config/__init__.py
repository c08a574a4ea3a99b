"""
Configuration module - Centralized settings management.

This module provides type-safe configuration management using Pydantic,
supporting environment variables, YAML files, and CLI arguments.

Usage:
    from page_lens.config import get_settings, load_config
    
    # Settings loaded once for the CLI process
    settings = get_settings()
    
    # Or load fresh settings with overrides
    settings = load_config(cache={"max_size": 10})

Environment Variables:
    PAGE_LENS__CACHE__TTL_SECONDS=60
    PAGE_LENS__EXTRACTION__MAX_CHARS=8000
    PAGE_LENS__BUILDER__MAX_DEPTH=48
"""

from page_lens.config.settings import (
    Settings,
    BuilderSettings,
    ExtractionSettings,
    CacheSettings,
    ProviderSettings,
    LoggingSettings,
)
from page_lens.config.loader import ConfigLoader, load_config

_settings: Settings | None = None


def get_settings() -> Settings:
    """
    Get the process-wide settings instance.
    
    Settings are loaded once from environment variables and config files.
    Call reset_settings() to reload.
    
    Returns:
        Loaded Settings instance
    """
    global _settings
    if _settings is None:
        _settings = load_config()
    return _settings


def reset_settings() -> None:
    """Reset the loaded settings (forces reload on next get_settings())."""
    global _settings
    _settings = None


__all__ = [
    "Settings",
    "BuilderSettings",
    "ExtractionSettings",
    "CacheSettings",
    "ProviderSettings",
    "LoggingSettings",
    "ConfigLoader",
    "load_config",
    "get_settings",
    "reset_settings",
]
