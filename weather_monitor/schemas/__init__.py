# Pydantic schemas package

from weather_monitor.schemas.base import BaseSchema, TimestampSchema, IDSchema, MessageResponse
from weather_monitor.schemas.auth import (
    UserCreate, LoginRequest, Identity, AuthResponse, TokenResponse, User
)
from weather_monitor.schemas.history import (
    HistoryRecord, HistoryOwner, HistoryRecordWithOwner,
    HistoryDeleteResponse, HistoryClearResponse,
)
from weather_monitor.schemas.weather import WeatherLocation, WeatherCurrent, WeatherReport

__all__ = [
    # Base schemas
    "BaseSchema", "TimestampSchema", "IDSchema", "MessageResponse",

    # Auth schemas
    "UserCreate", "LoginRequest", "Identity", "AuthResponse", "TokenResponse", "User",

    # History schemas
    "HistoryRecord", "HistoryOwner", "HistoryRecordWithOwner",
    "HistoryDeleteResponse", "HistoryClearResponse",

    # Weather schemas
    "WeatherLocation", "WeatherCurrent", "WeatherReport",
]
