"""Application configuration settings."""

from __future__ import annotations

from functools import lru_cache

from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

ENV_FILE = ".env"
ENV_FILE_ENCODING = "utf-8"


class Settings(BaseSettings):
    """Application configuration values loaded from environment variables."""

    model_config = SettingsConfigDict(
        env_file=ENV_FILE, env_file_encoding=ENV_FILE_ENCODING, extra="ignore"
    )

    database_url: str = Field(
        description="Database connection URL used by SQLAlchemy to connect to the DB",
        min_length=1,
    )
    secret_key: str = Field(
        description="Secret key for signing JWT tokens", min_length=1
    )
    access_token_expire_minutes: int = Field(
        default=60 * 24,
        description="Number of minutes before access tokens expire",
        gt=0,
    )
    app_timezone: str = Field(
        default="UTC",
        description="IANA timezone name or UTC offset used for stored timestamps",
    )
    allowed_origins: str = Field(
        default="http://localhost:5173,http://localhost:5174",
        description="Comma separated origins allowed by the CORS middleware",
    )
    log_level: str = Field(default="INFO", description="Root logging level")
    notifications_page_size: int = Field(
        default=50,
        description="Maximum number of notifications returned by the list endpoint",
        gt=0,
    )
    realtime_auth_timeout_seconds: float | None = Field(
        default=10.0,
        description="Seconds a new websocket may wait before sending its auth frame",
        gt=0,
    )
    realtime_max_sessions_per_user: int | None = Field(
        default=None,
        description="Maximum concurrent realtime sessions per user (unbounded when empty)",
        gt=0,
    )

    @field_validator("log_level")
    @classmethod
    def _normalize_log_level(cls, value: str) -> str:
        return value.strip().upper() or "INFO"

    @property
    def allowed_origin_list(self) -> list[str]:
        """Return ``allowed_origins`` split into individual origins."""

        return [
            origin.strip() for origin in self.allowed_origins.split(",") if origin.strip()
        ]


@lru_cache
def get_settings() -> Settings:
    """Return cached application settings instance."""

    return Settings()


def reset_settings_cache() -> None:
    """Clear the settings cache to force reloading from the environment."""

    get_settings.cache_clear()


__all__ = ["Settings", "get_settings", "reset_settings_cache"]
