"""Configuration management for the Academy cohort service."""

from datetime import date
from functools import lru_cache

from dotenv import load_dotenv
from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict

# Load environment variables from .env file (only if accessible)
try:
    load_dotenv()
except (PermissionError, OSError):
    # Environment variables should be set directly
    pass


class Settings(BaseSettings):
    """Application settings loaded from environment variables."""

    model_config = SettingsConfigDict(
        env_file=".env",
        case_sensitive=True,
        extra="ignore",
    )

    # Supabase configuration (required)
    SUPABASE_URL: str = Field(..., description="Supabase project URL")
    SUPABASE_SERVICE_ROLE_KEY: str = Field(..., description="Supabase service role key")
    SUPABASE_ANON_KEY: str | None = Field(
        default=None, description="Anon key used by realtime clients (falls back to service key)"
    )

    # Environment
    ACADEMY_ENV: str = Field(default="dev", description="Environment: dev, staging, prod")

    # Scheduled jobs
    CRON_SECRET: str | None = Field(
        default=None, description="Shared bearer secret for cron endpoints (open when unset)"
    )

    # Program calendar
    PROGRAM_START_DATE: date = Field(
        default=date(2026, 2, 2), description="First day of the cohort program"
    )
    PROGRAM_LENGTH_DAYS: int = Field(default=25, description="Number of program days")
    ACADEMY_TIMEZONE: str = Field(
        default="UTC", description="Time zone used for recognition hour windows"
    )

    # Day content sources
    LOCAL_CONTENT_PATH: str | None = Field(
        default=None, description="Local checkout of the course content repo"
    )
    GITHUB_TOKEN: str | None = Field(default=None, description="Token for the GitHub contents API")
    GITHUB_CONTENT_OWNER: str = Field(default="luborfedak", description="Content repo owner")
    GITHUB_CONTENT_REPO: str = Field(default="ai-academy", description="Content repo name")
    GITHUB_CONTENT_BRANCH: str = Field(default="main", description="Content repo branch")
    CONTENT_CACHE_TTL_SECONDS: int = Field(
        default=300, description="In-memory TTL for resolved day content"
    )

    # Live sessions
    LIVE_SESSION_HEARTBEAT_SECONDS: float = Field(
        default=5.0, description="Interval between advisory heartbeats"
    )


@lru_cache
def get_settings() -> Settings:
    """
    Get cached settings instance.

    Returns:
        Settings instance

    Raises:
        ValidationError: If required environment variables are missing
    """
    return Settings()
