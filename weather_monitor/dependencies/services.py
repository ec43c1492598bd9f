"""
Service dependencies.

Builds the application's services from settings. Tests replace any of these
through app.dependency_overrides.
"""

from functools import lru_cache

from fastapi import Depends
from sqlalchemy.ext.asyncio import AsyncSession

from weather_monitor.config import settings
from weather_monitor.database import get_db
from weather_monitor.services.auth import AuthService
from weather_monitor.services.history import HistoryService
from weather_monitor.services.weather import WeatherService
from weather_monitor.utils.security import TokenIssuer


@lru_cache()
def get_token_issuer() -> TokenIssuer:
    """Process-wide token issuer signed with SECRET_KEY."""
    return TokenIssuer(
        secret_key=settings.SECRET_KEY,
        algorithm=settings.ALGORITHM,
        access_expire_minutes=settings.ACCESS_TOKEN_EXPIRE_MINUTES,
        refresh_expire_days=settings.REFRESH_TOKEN_EXPIRE_DAYS,
    )


@lru_cache()
def get_weather_service() -> WeatherService:
    """Weather provider client configured from settings."""
    return WeatherService(
        api_key=settings.WEATHERSTACK_API_KEY,
        base_url=settings.WEATHERSTACK_BASE_URL,
        timeout=settings.WEATHER_TIMEOUT_SECONDS,
    )


def get_auth_service(
    db: AsyncSession = Depends(get_db),
    token_issuer: TokenIssuer = Depends(get_token_issuer),
) -> AuthService:
    return AuthService(db, token_issuer)


def get_history_service(db: AsyncSession = Depends(get_db)) -> HistoryService:
    return HistoryService(db)
