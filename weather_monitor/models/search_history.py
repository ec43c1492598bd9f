"""
Search history database model.

One row per successful weather lookup, owned by the user who made it.
"""

from datetime import datetime, timezone

from sqlalchemy import Column, DateTime, Float, ForeignKey, Index, String
from sqlalchemy.orm import relationship

from weather_monitor.models.base import BaseModel

CITY_MAX_LENGTH = 200
CONDITION_MAX_LENGTH = 255


def utcnow() -> datetime:
    return datetime.now(timezone.utc)


class SearchHistory(BaseModel):
    """
    Snapshot of a weather lookup.

    The owner is fixed at creation; records are never reassigned.
    """

    __tablename__ = "search_history"

    user_id = Column(
        String(36),
        ForeignKey("users.id", ondelete="CASCADE"),
        nullable=False,
        index=True,
    )
    city = Column(String(CITY_MAX_LENGTH), nullable=False)
    temperature = Column(Float, nullable=False)
    condition = Column(String(CONDITION_MAX_LENGTH), nullable=False)
    humidity = Column(Float, nullable=True)
    wind_speed = Column(Float, nullable=True)
    searched_at = Column(DateTime(timezone=True), nullable=False, default=utcnow, index=True)

    owner = relationship("User", back_populates="search_history")

    __table_args__ = (
        Index("idx_search_history_user_searched", "user_id", "searched_at"),
    )

    def __repr__(self):
        return f"<SearchHistory(id={self.id}, user_id={self.user_id}, city='{self.city}')>"
