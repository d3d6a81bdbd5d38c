"""Application configuration."""

import os

from pydantic import field_validator
from pydantic_settings import BaseSettings


class Settings(BaseSettings):
    """Application settings loaded from environment variables."""

    # Hackatime
    hackatime_api_base: str = os.getenv(
        "HACKATIME_API_BASE", "https://hackatime.hackclub.com/api/v1/users"
    )
    hackatime_username: str = os.getenv("HACKATIME_USERNAME", "")
    fetch_batch_size: int = int(os.getenv("FETCH_BATCH_SIZE", "10"))
    request_timeout: float = float(os.getenv("REQUEST_TIMEOUT", "30"))

    # Goals
    goal_mode: str = os.getenv("GOAL_MODE", "total")  # "daily" or "total"
    daily_goal_hours: float = float(os.getenv("DAILY_GOAL_HOURS", "1"))
    target_total_hours: float = float(os.getenv("TARGET_TOTAL_HOURS", "225"))
    streak_min_minutes: int = int(os.getenv("STREAK_MIN_MINUTES", "1"))
    legacy_leap_year_pacing: bool = os.getenv(
        "LEGACY_LEAP_YEAR_PACING", "false"
    ).lower() in ("1", "true", "yes")

    # Calendar days are bucketed in this timezone
    timezone: str = os.getenv("TIMEZONE", "UTC")

    # Storage
    database_path: str = os.getenv("DATABASE_PATH", "data/hackagoal.db")
    image_dir: str = os.getenv("IMAGE_DIR", "static/images")

    # Server
    server_host: str = os.getenv("SERVER_HOST", "0.0.0.0")
    server_port: int = int(os.getenv("SERVER_PORT", "8000"))

    # Logging
    log_level: str = os.getenv("LOG_LEVEL", "INFO")

    @field_validator("goal_mode")
    @classmethod
    def _check_goal_mode(cls, value: str) -> str:
        value = value.lower()
        if value not in ("daily", "total"):
            raise ValueError(f"goal_mode must be 'daily' or 'total', got {value!r}")
        return value

    @field_validator("fetch_batch_size")
    @classmethod
    def _check_batch_size(cls, value: int) -> int:
        if value < 1:
            raise ValueError("fetch_batch_size must be at least 1")
        return value

    class Config:
        """Pydantic config."""

        env_file = ".env"
        case_sensitive = False


settings = Settings()
