"""
Configuration settings for the Parcel Dispatch Frontend.

This module handles application configuration using Pydantic settings.
"""

from pydantic_settings import BaseSettings
from typing import Optional


class Settings(BaseSettings):
    """Application settings."""

    # Application
    app_name: str = "Parcel Dispatch Frontend"
    debug: bool = False
    log_level: str = "INFO"

    # Backend API
    api_base_url: str = "http://localhost:3001"
    api_prefix: str = "/api"
    api_token: Optional[str] = None
    request_timeout_seconds: float = 20.0

    # Package list pagination
    default_page_size: int = 25
    max_page_size: int = 100

    # Auto-refresh intervals (seconds)
    package_refresh_seconds: float = 10.0
    returns_refresh_seconds: float = 15.0
    driver_refresh_seconds: float = 10.0

    class Config:
        env_file = ".env"
        case_sensitive = False


settings = Settings()
