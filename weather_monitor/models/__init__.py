# Database models package

from weather_monitor.models.base import BaseModel
from weather_monitor.models.user import Role, User
from weather_monitor.models.search_history import SearchHistory

__all__ = [
    "BaseModel",
    "Role",
    "User",
    "SearchHistory",
]

# Configure all mappers after all models are imported
# This resolves bidirectional relationships defined with string references
from sqlalchemy.orm import configure_mappers
configure_mappers()
