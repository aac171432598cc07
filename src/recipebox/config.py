"""
Recipe Box - Configuration and settings.

Settings are read from the environment and an optional .env file.
"""

from functools import lru_cache
from typing import Literal

from pydantic_settings import BaseSettings, SettingsConfigDict

DEFAULT_USER_AGENT = (
    "Mozilla/5.0 (Windows NT 10.0; Win64; x64) "
    "AppleWebKit/537.36 (KHTML, like Gecko) "
    "Chrome/120.0.0.0 Safari/537.36"
)


class Settings(BaseSettings):
    """
    Application settings.

    Nothing here is required, so the recipe import pipeline works
    out of the box. Image re-hosting is disabled until
    IMAGE_UPLOAD_URL is set.
    """

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
    )

    # Application
    recipebox_env: Literal["development", "staging", "production"] = "development"
    log_level: Literal["DEBUG", "INFO", "WARNING", "ERROR"] = "INFO"

    # Outbound HTTP
    fetch_timeout_seconds: float = 15.0
    user_agent: str = DEFAULT_USER_AGENT

    # Durable image store (upload bytes, receive URL)
    image_upload_url: str | None = None
    image_upload_token: str | None = None

    # Web
    cors_origins: list[str] = [
        "http://localhost:5173",  # Vite dev server
        "http://127.0.0.1:5173",
    ]

    @property
    def is_development(self) -> bool:
        return self.recipebox_env == "development"

    @property
    def is_production(self) -> bool:
        return self.recipebox_env == "production"


@lru_cache
def get_settings() -> Settings:
    """Get cached settings instance."""
    return Settings()


class _SettingsProxy:
    """Lazy proxy for settings to avoid loading .env at import time."""

    _instance: Settings | None = None

    def __getattr__(self, name: str):
        if self._instance is None:
            self._instance = get_settings()
        return getattr(self._instance, name)


settings = _SettingsProxy()
