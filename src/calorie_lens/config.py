"""Application configuration."""

import os

from pydantic_settings import BaseSettings, SettingsConfigDict

_ENVIRONMENT = os.getenv("ENVIRONMENT", "local")


class Settings(BaseSettings):
    """Application settings loaded from environment variables."""

    log_level: str = "INFO"
    ai_base_url: str = "https://www.needware.dev/v1"
    ai_api_key: str = ""
    ai_model: str = "google/gemini-2.5-flash"
    ai_temperature: float = 0.3
    ai_max_tokens: int = 1000
    ai_timeout_seconds: float = 60.0
    daily_calorie_goal: int = 2000
    session_ttl_seconds: int = 43200
    environment: str = _ENVIRONMENT

    model_config = SettingsConfigDict(
        env_file=(f".env.{_ENVIRONMENT}", ".env"),
        extra="ignore",
    )
