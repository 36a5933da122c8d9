"""Application settings and configuration management."""
from __future__ import annotations

from typing import List

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Settings loaded from environment variables or defaults."""

    DB_PATH: str = Field(default="data/sessions.db")
    APP_CONFIG_PATH: str | None = None

    PAUSE_THRESHOLD_SECONDS: float = Field(default=0.5, ge=0.0)
    DEFAULT_LANGUAGE: str = "en"
    LIST_LIMIT_DEFAULT: int = Field(default=10, ge=1)
    LIST_LIMIT_MAX: int = Field(default=100, ge=1)

    CORS_ORIGINS: List[str] = Field(default_factory=lambda: ["*"])

    model_config = SettingsConfigDict(env_file=".env", validate_assignment=True, extra="ignore")


settings = Settings()
