"""
Configuration Management for Shop Ledger

Uses pydantic-settings for type-safe configuration from environment variables.

DESIGN DECISION: All configuration is centralized here.
This makes it easy to see what external dependencies exist and
ensures all required configuration is validated at startup.
"""

from functools import lru_cache
from typing import Optional

from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict


DEFAULT_SESSION_SECRET = "change-me-in-production"


class InsecureConfigurationError(ValueError):
    """Settings that are only acceptable on a developer machine."""
    pass


class DatabaseSettings(BaseSettings):
    """Relational database configuration."""

    model_config = SettingsConfigDict(
        env_prefix="DATABASE_",
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore"
    )

    url: str = Field(
        default="sqlite:///./shop_ledger.db",
        description="SQLAlchemy database URL"
    )
    echo: bool = Field(
        default=False,
        description="Log every SQL statement"
    )


class LLMSettings(BaseSettings):
    """Chat-completion provider configuration."""

    model_config = SettingsConfigDict(
        env_prefix="LLM_",
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore"
    )

    provider: str = Field(
        default="gemini",
        description="LLM provider: gemini or openai (any OpenAI-compatible API)"
    )
    api_key: str = Field(
        default="",
        description="API key for the provider"
    )
    model_name: str = Field(
        default="gemini-1.5-flash",
        description="Model to use"
    )
    base_url: Optional[str] = Field(
        default=None,
        description="Base URL for OpenAI-compatible endpoints (e.g. Groq)"
    )
    max_tokens: int = Field(
        default=500,
        ge=50,
        le=8192,
        description="Maximum tokens in response"
    )
    temperature: float = Field(
        default=0.7,
        ge=0.0,
        le=2.0,
        description="Sampling temperature"
    )
    timeout_seconds: float = Field(
        default=30.0,
        gt=0,
        description="Upper bound on a single completion request"
    )

    @field_validator('provider')
    @classmethod
    def validate_provider(cls, v: str) -> str:
        """Only known providers."""
        v = v.strip().lower()
        if v not in {"gemini", "openai"}:
            raise ValueError(f"Unsupported LLM provider: {v}")
        return v


class AuthSettings(BaseSettings):
    """Session authentication configuration."""

    model_config = SettingsConfigDict(
        env_prefix="AUTH_",
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore"
    )

    session_secret: str = Field(
        default=DEFAULT_SESSION_SECRET,
        min_length=8,
        description="Secret used to sign session cookies"
    )
    session_max_age_seconds: int = Field(
        default=7 * 24 * 60 * 60,
        ge=60,
        description="Session cookie lifetime"
    )
    https_only: bool = Field(
        default=False,
        description="Only send the session cookie over HTTPS"
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

    # Environment
    app_environment: str = Field(
        default="development",
        description="Application environment"
    )
    debug_mode: bool = Field(
        default=False,
        description="Enable debug mode"
    )
    log_level: str = Field(
        default="INFO",
        description="Root log level"
    )

    # Server
    host: str = Field(
        default="0.0.0.0",
        description="Interface to bind"
    )
    port: int = Field(
        default=5000,
        ge=1,
        le=65535,
        description="Port to listen on"
    )

    # Presentation
    currency_symbol: str = Field(
        default="₹",
        max_length=5,
        description="Symbol used when rendering amounts into descriptions"
    )

    # Assistant context bounds
    recent_transactions_limit: int = Field(
        default=10,
        ge=1,
        le=100,
        description="Recent transactions included in the shop context"
    )
    top_items_limit: int = Field(
        default=5,
        ge=1,
        le=50,
        description="Top products / expense categories in the shop context"
    )
    prompt_recent_limit: int = Field(
        default=5,
        ge=0,
        le=50,
        description="Recent transactions rendered into the prompt"
    )

    @field_validator('log_level')
    @classmethod
    def validate_log_level(cls, v: str) -> str:
        v = v.strip().upper()
        if v not in {"DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"}:
            raise ValueError(f"Unknown log level: {v}")
        return v


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

    # Sub-settings are loaded lazily to allow partial configuration

    @property
    def database(self) -> DatabaseSettings:
        return DatabaseSettings()

    @property
    def llm(self) -> LLMSettings:
        return LLMSettings()

    @property
    def auth(self) -> AuthSettings:
        return AuthSettings()

    @property
    def app(self) -> AppSettings:
        return AppSettings()


@lru_cache()
def get_settings() -> Settings:
    """
    Get application settings (cached).

    Uses LRU cache to ensure settings are only loaded once.
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

    for name in ("database", "llm", "auth", "app"):
        try:
            _ = getattr(settings, name)
            results[name] = True
        except Exception as e:
            results[name] = False
            results[f"{name}_error"] = str(e)

    return results


def ensure_secure_settings(settings: Settings) -> None:
    """
    Refuse development-only defaults outside development.

    Raises:
        InsecureConfigurationError: The session secret is still the
            built-in default and APP_ENVIRONMENT is not development
    """
    environment = settings.app.app_environment.strip().lower()
    if environment == "development":
        return
    if settings.auth.session_secret == DEFAULT_SESSION_SECRET:
        raise InsecureConfigurationError(
            f"AUTH_SESSION_SECRET must be set when APP_ENVIRONMENT is '{environment}'"
        )
