"""Typed settings loader for the weather lookup CLI."""

from __future__ import annotations

from pathlib import Path
from typing import Any

from pydantic import Field, ValidationError, field_validator, model_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

from .exceptions import ConfigError


def _default_config_dir() -> Path:
    return Path.home() / ".config" / "weather-lookup"


class Settings(BaseSettings):
    """Application settings loaded from environment variables and `.env`."""

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
    )

    weather_provider: str | None = Field(default=None, alias="WEATHER_PROVIDER")
    weather_user_agent: str = Field(
        default="weather-lookup/0.1 (contact: weather-lookup@example.com)",
        alias="WEATHER_USER_AGENT",
    )
    weather_timeout_seconds: float = Field(default=15.0, alias="WEATHER_TIMEOUT_SECONDS")
    geocoder_base_url: str = Field(
        default="https://nominatim.openstreetmap.org",
        alias="GEOCODER_BASE_URL",
    )
    geocoder_timeout_seconds: float = Field(default=10.0, alias="GEOCODER_TIMEOUT_SECONDS")
    weather_max_print: int = Field(default=24, alias="WEATHER_MAX_PRINT")

    config_dir: Path = Field(default_factory=_default_config_dir, alias="WEATHER_CONFIG_DIR")
    journal_dir: Path = Field(default=Path("./data/journal"), alias="JOURNAL_DIR")
    raw_payload_dir: Path = Field(default=Path("./data/raw"), alias="RAW_PAYLOAD_DIR")
    journal_enabled: bool = Field(default=False, alias="JOURNAL_ENABLED")

    @field_validator("weather_provider", mode="before")
    @classmethod
    def empty_string_to_none(cls, value: Any) -> Any:
        """Treat an empty WEATHER_PROVIDER as unset so the stored preference applies."""
        if isinstance(value, str) and value.strip() == "":
            return None
        return value

    @model_validator(mode="after")
    def validate_settings(self) -> Settings:
        """Validate cross-field and range constraints."""
        if not self.weather_user_agent.strip():
            raise ValueError("WEATHER_USER_AGENT must not be empty.")
        if self.weather_timeout_seconds <= 0:
            raise ValueError("WEATHER_TIMEOUT_SECONDS must be > 0.")
        if not self.geocoder_base_url.startswith(("http://", "https://")):
            raise ValueError("GEOCODER_BASE_URL must be an http(s) URL.")
        if self.geocoder_timeout_seconds <= 0:
            raise ValueError("GEOCODER_TIMEOUT_SECONDS must be > 0.")
        if self.weather_max_print <= 0:
            raise ValueError("WEATHER_MAX_PRINT must be > 0.")
        return self

    def safe_summary(self) -> dict[str, Any]:
        """Return config summary for journaling."""
        return {
            "weather_provider": self.weather_provider,
            "weather_timeout_seconds": self.weather_timeout_seconds,
            "geocoder_base_url": str(self.geocoder_base_url),
            "geocoder_timeout_seconds": self.geocoder_timeout_seconds,
            "config_dir": str(self.config_dir),
            "journal_enabled": self.journal_enabled,
        }


def load_settings() -> Settings:
    """Load and validate settings, raising ConfigError on failure."""
    try:
        settings = Settings()
    except ValidationError as exc:
        raise ConfigError(f"Invalid configuration: {exc}") from exc
    except OSError as exc:
        raise ConfigError(f"Failed reading environment/.env: {exc}") from exc
    return settings
