"""
Application configuration using pydantic-settings.
Values are read from environment variables (or a local .env file).
DATABASE_URL has no default: connecting without it is a configuration error.
"""

from functools import lru_cache
from typing import Optional

from pydantic_settings import BaseSettings


class Settings(BaseSettings):
    # Application
    APP_NAME: str = "DevEvent"
    APP_VERSION: str = "0.1.0"
    ENVIRONMENT: str = "development"
    LOG_LEVEL: str = "INFO"

    # Database
    DATABASE_URL: Optional[str] = None
    DATABASE_NAME: Optional[str] = None  # overrides the database named in the URL

    model_config = {
        "env_file": ".env",
        "case_sensitive": True,
        "extra": "ignore",
    }


@lru_cache()
def get_settings() -> Settings:
    return Settings()
