# CRUD operations package

from weather_monitor.crud.base import CRUDBase
from weather_monitor.crud.user import CRUDUser, user
from weather_monitor.crud.search_history import CRUDSearchHistory, search_history

__all__ = [
    "CRUDBase",
    "CRUDUser", "user",
    "CRUDSearchHistory", "search_history",
]
