"""
Configuration Utility - Environment Variables Management

Centralized configuration loading from .env files using pydantic-settings.
Settings are frozen once built; entry points construct them via get_settings()
and pass the instance explicitly to every component that needs it.

Usage:
    from utils.config import get_settings

    settings = get_settings()
    base_url = settings.ACCESS_PLANIT_BASE_URL
"""

from functools import lru_cache

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict

REQUIRED_CREDENTIALS = ("ACCESS_PLANIT_USER", "ACCESS_PLANIT_PASS")


class Settings(BaseSettings):
    """Application settings loaded from environment variables."""

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=True,
        extra="ignore",
        frozen=True,
    )

    # Credentials
    ACCESS_PLANIT_USER: str = Field(default="")
    ACCESS_PLANIT_PASS: str = Field(default="")

    # API Configuration
    ACCESS_PLANIT_BASE_URL: str = Field(
        default="https://shelter.accessplanit.com/accessplansandbox", min_length=8
    )
    TOKEN_ENDPOINT: str = Field(default="/api/v2/token")
    COURSE_TEMPLATES_ENDPOINT: str = Field(default="/api/v2/coursetemplate")
    COURSE_DATES_ENDPOINT: str = Field(default="/api/v2/coursedate")
    COURSE_DATE_HELP_ENDPOINT: str = Field(default="/apihelp/v2/modules/courseDate")
    COURSE_TEMPLATE_HELP_ENDPOINT: str = Field(default="/apihelp/v2/modules/courseTemplate")

    # Fetch Configuration
    FETCH_LIMIT: int = Field(default=10, ge=1)
    OUTPUT_DIR: str = Field(default="output")

    # Scheduler Configuration
    SCHEDULE_INTERVAL_MINUTES: float = Field(default=15, gt=0)
    SCHEDULE_SKIP_IF_RUNNING: bool = Field(default=False)
    RUN_ONCE: bool = Field(default=False)

    # Logging Configuration
    LOG_LEVEL: str = Field(default="INFO")
    LOG_FORMAT: str = Field(default="text")

    # Application Metadata
    APP_NAME: str = Field(default="planit-fetch")
    APP_VERSION: str = Field(default="0.1.0")

    def missing_credentials(self) -> list[str]:
        """Return names of required credential variables that are unset or blank."""
        return [name for name in REQUIRED_CREDENTIALS if not getattr(self, name).strip()]


@lru_cache()
def get_settings() -> Settings:
    """Get cached settings instance.

    Returns:
        Singleton Settings instance
    """
    return Settings()
