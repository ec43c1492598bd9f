"""
Rate limiting.

A single slowapi limiter shared by the application middleware (default
limit on every route) and the stricter per-route limits on auth endpoints.
"""

from slowapi import Limiter
from slowapi.util import get_remote_address

from weather_monitor.config import settings

limiter = Limiter(
    key_func=get_remote_address,
    default_limits=[settings.RATE_LIMIT_DEFAULT],
    enabled=settings.RATE_LIMIT_ENABLED,
)
