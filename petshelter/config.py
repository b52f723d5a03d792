"""Application configuration settings."""
from __future__ import annotations

import os
from functools import lru_cache

from pydantic import BaseModel, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

# --- Runtime toggles -----------------------------------------------------
# Execution environment: "dev" | "local" | "test" | "staging" | "prod"
ENV = os.getenv("APP_ENV", "dev").lower()

DEFAULT_JWT_SECRET = "change-me"


class Settings(BaseSettings):
    """Environment configuration for the pet shelter backend."""

    app_env: str = ENV
    database_url: str = "sqlite:///petshelter.db"
    JWT_SECRET: str = DEFAULT_JWT_SECRET
    JWT_ACCESS_TTL_MINUTES: int = 60
    CORS_ALLOW_ORIGINS: list[str] = [
        "http://localhost:3000",
        "http://localhost:5173",
    ]
    SENTRY_DSN: str | None = None
    PROMETHEUS_ENABLED: bool = False
    ALLOW_DB_CREATE_ALL: bool = False
    LOG_LEVEL: str = "INFO"

    # --- Suspicious activity monitor ----------------------------------------
    MONITOR_ENABLED: bool = True
    MONITOR_INTERVAL_SECONDS: int = 60
    MONITOR_WINDOW_SECONDS: int = 60
    MONITOR_THRESHOLD: int = 5

    model_config = SettingsConfigDict(
        env_file=".env", env_prefix="", env_file_encoding="utf-8", extra="ignore"
    )

    @field_validator("MONITOR_INTERVAL_SECONDS", "MONITOR_WINDOW_SECONDS", "MONITOR_THRESHOLD")
    @classmethod
    def _positive(cls, value: int) -> int:
        if value <= 0:
            raise ValueError("monitor settings must be positive integers")
        return value

    @field_validator("SENTRY_DSN")
    @classmethod
    def _strip_empty_dsn(cls, value: str | None) -> str | None:
        """Normalise empty DSNs to ``None`` so they read as 'disabled'."""

        if value is None:
            return None
        cleaned = value.strip()
        return cleaned or None


class AppInfo(BaseModel):
    name: str = "petshelter-backend"
    version: str = "0.1.0"


settings = Settings()


@lru_cache
def get_settings() -> Settings:
    """Return cached application settings."""

    return settings


__all__ = [
    "ENV",
    "DEFAULT_JWT_SECRET",
    "Settings",
    "AppInfo",
    "settings",
    "get_settings",
]
