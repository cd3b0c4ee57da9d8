"""Type-safe environment configuration using Pydantic Settings."""

from typing import Literal

from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

DEFAULT_API_BASE_URL = "https://hacker-news.firebaseio.com/v0/"


class Settings(BaseSettings):
    """
    Client configuration loaded from environment variables.

    Every field has a default so the client works without any environment.
    Invalid values raise a ValidationError when the settings are loaded.
    """

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=True,
        extra="ignore",  # Ignore extra fields in .env
        env_ignore_empty=True,
    )

    APP_NAME: str = Field(
        default="hackernews-client",
        description="Application name"
    )

    ENVIRONMENT: Literal["development", "staging", "production"] = Field(
        default="development",
        description="Application environment"
    )

    LOG_LEVEL: str = Field(
        default="INFO",
        description="Logging level"
    )

    # Hacker News API
    HN_API_BASE_URL: str = Field(
        default=DEFAULT_API_BASE_URL,
        description="Base URL of the Hacker News Firebase API"
    )

    API_TIMEOUT: float = Field(
        default=30,
        description="HTTP timeout in seconds",
        gt=0  # Must be greater than 0
    )

    HN_MAX_CONCURRENCY: int | None = Field(
        default=None,
        description="Maximum in-flight item fetches per paginated call (unset = unbounded)",
        gt=0
    )

    @field_validator("LOG_LEVEL")
    @classmethod
    def validate_log_level(cls, v: str) -> str:
        """Validate log level is one of the standard levels."""
        valid_levels = ["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"]
        v_upper = v.upper()
        if v_upper not in valid_levels:
            raise ValueError(
                f"LOG_LEVEL must be one of {valid_levels}, got '{v}'"
            )
        return v_upper

    @field_validator("HN_API_BASE_URL")
    @classmethod
    def validate_base_url(cls, v: str) -> str:
        """Require an http(s) URL and normalise the trailing slash."""
        v = v.strip()
        if not v.startswith(("http://", "https://")):
            raise ValueError(
                f"HN_API_BASE_URL must start with http:// or https://, got '{v}'"
            )
        return v.rstrip("/") + "/"


# Singleton instance
_settings: Settings | None = None


def get_settings() -> Settings:
    """
    Get the application settings singleton.

    Loads settings from environment variables and .env file on first call.
    Subsequent calls return the cached instance.

    Returns:
        Settings: The application settings instance

    Raises:
        ValidationError: If environment variables are invalid
    """
    global _settings
    if _settings is None:
        _settings = Settings()
    return _settings


def reset_settings() -> None:
    """Reset the settings singleton. Useful for testing."""
    global _settings
    _settings = None
