"""
Search history schemas.
"""

from datetime import datetime
from typing import Optional

from weather_monitor.schemas.base import BaseSchema, IDSchema


class HistoryRecord(IDSchema):
    """A single weather lookup snapshot."""
    user_id: str
    city: str
    temperature: float
    condition: str
    humidity: Optional[float] = None
    wind_speed: Optional[float] = None
    searched_at: datetime


class HistoryOwner(IDSchema):
    """Owner details joined into admin listings."""
    name: str
    email: str


class HistoryRecordWithOwner(HistoryRecord):
    """History record with its owner, for admin listings."""
    owner: HistoryOwner


class HistoryDeleteResponse(BaseSchema):
    message: str
    id: str


class HistoryClearResponse(BaseSchema):
    message: str
    deleted_count: int
