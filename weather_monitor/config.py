"""
Runtime settings for the Weather Monitor API.

Everything comes from environment variables or a local .env file; the
defaults are enough to run against a local SQLite database.
"""

import os
import secrets
from typing import List, Union

from pydantic import Field, field_validator, ConfigDict
from pydantic_settings import BaseSettings


class Settings(BaseSettings):
    """Process-wide settings. Names match the environment variables exactly."""

    # API Configuration
    PROJECT_NAME: str = "Weather Monitor API"
    API_PREFIX: str = "/api"
    ENVIRONMENT: str = "production"
    DEBUG: bool = False

    # Token Configuration
    SECRET_KEY: str = Field(
        default_factory=lambda: os.getenv("SECRET_KEY") or secrets.token_urlsafe(32),
        description="Secret key for JWT signing. MUST be set via SECRET_KEY environment variable in production!"
    )
    ALGORITHM: str = "HS256"
    ACCESS_TOKEN_EXPIRE_MINUTES: int = 15
    REFRESH_TOKEN_EXPIRE_DAYS: int = 7

    # Session cookie carrying the refresh token
    REFRESH_COOKIE_NAME: str = "jwt"
    REFRESH_COOKIE_PATH: str = "/api/auth"

    # CORS Configuration
    # Note: Using Union[str, List] to avoid pydantic-settings JSON parsing of plain strings
    BACKEND_CORS_ORIGINS: Union[str, List[str]] = "http://localhost:5173"

    @field_validator("BACKEND_CORS_ORIGINS", mode="before")
    @classmethod
    def assemble_cors_origins(
        cls, v: Union[str, List[str]]
    ) -> List[str]:
        """Accept a comma-separated string or a list; empty means no CORS."""
        if v is None or v == "":
            return []
        if isinstance(v, str):
            return [i.strip() for i in v.split(",") if i.strip()]
        elif isinstance(v, list):
            return v
        raise ValueError(f"Invalid CORS origins format: {v}")

    # Database Configuration
    DATABASE_URL: str = "sqlite+aiosqlite:///./weather_monitor.db"
    AUTO_CREATE_TABLES: bool = True

    @field_validator("DATABASE_URL", mode="before")
    @classmethod
    def assemble_db_connection(cls, v: str) -> str:
        """Rewrite Render/Railway/Heroku style URLs to the asyncpg driver."""
        if isinstance(v, str):
            if v.startswith("postgres://"):
                return v.replace("postgres://", "postgresql+asyncpg://", 1)
            if v.startswith("postgresql://"):
                return v.replace("postgresql://", "postgresql+asyncpg://", 1)
        return v

    # Rate Limiting
    RATE_LIMIT_ENABLED: bool = True
    RATE_LIMIT_DEFAULT: str = "100/15minutes"
    RATE_LIMIT_AUTH: str = "5/minute"

    # Weather provider (weatherstack)
    WEATHERSTACK_API_KEY: str = ""
    WEATHERSTACK_BASE_URL: str = "http://api.weatherstack.com"
    WEATHER_TIMEOUT_SECONDS: float = 10.0

    # Logging
    LOG_LEVEL: str = "INFO"
    LOG_TO_FILE: bool = True
    LOG_DIR: str = "logs"

    model_config = ConfigDict(
        env_file=".env",
        case_sensitive=True,
        extra="ignore",
    )

    @property
    def secure_cookies(self) -> bool:
        """Cookies are sent over HTTPS only, except in local development."""
        return self.ENVIRONMENT.lower() != "development"


settings = Settings()
