"""Application settings powered by Pydantic BaseSettings."""

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict

from delivery_dashboard.config.constants import (
    DEFAULT_POLLBOT_URL,
    DEFAULT_REFRESH_INTERVAL_SECONDS,
    DEFAULT_REQUEST_TIMEOUT_SECONDS,
)


class DashboardSettings(BaseSettings):
    """Centralized environment configuration."""

    model_config = SettingsConfigDict(
        env_prefix="", case_sensitive=False, env_file=".env", env_file_encoding="utf-8"
    )

    pollbot_url: str = Field(
        default=DEFAULT_POLLBOT_URL, validation_alias="POLLBOT_URL", min_length=1
    )
    refresh_interval_seconds: float = Field(
        default=DEFAULT_REFRESH_INTERVAL_SECONDS,
        validation_alias="REFRESH_INTERVAL_SECONDS",
        gt=0,
    )
    request_timeout_seconds: float = Field(
        default=DEFAULT_REQUEST_TIMEOUT_SECONDS,
        validation_alias="REQUEST_TIMEOUT_SECONDS",
        gt=0,
        le=300,
    )
    log_level: str = Field(default="INFO", validation_alias="LOG_LEVEL")
    json_logs: bool = Field(default=False, validation_alias="JSON_LOGS")


def get_settings() -> DashboardSettings:
    """Get a settings instance."""
    return DashboardSettings()
