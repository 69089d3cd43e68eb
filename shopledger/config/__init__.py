"""Configuration package."""

from shopledger.config.settings import (
    DEFAULT_SESSION_SECRET,
    AppSettings,
    AuthSettings,
    DatabaseSettings,
    InsecureConfigurationError,
    LLMSettings,
    Settings,
    ensure_secure_settings,
    get_settings,
    validate_all_settings,
)

__all__ = [
    "DEFAULT_SESSION_SECRET",
    "AppSettings",
    "AuthSettings",
    "DatabaseSettings",
    "InsecureConfigurationError",
    "LLMSettings",
    "Settings",
    "ensure_secure_settings",
    "get_settings",
    "validate_all_settings",
]
