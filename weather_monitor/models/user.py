"""
User database model.

This module contains the User model for password and token authentication.
"""

import enum

from sqlalchemy import Column, String, Text
from sqlalchemy.orm import relationship

from weather_monitor.models.base import BaseModel, TimestampMixin


class Role(str, enum.Enum):
    """Roles a user may hold. Stored as plain strings."""

    USER = "user"
    ADMIN = "admin"


class User(TimestampMixin, BaseModel):
    """
    User model.

    The password is stored only as a bcrypt hash. refresh_token holds the most
    recently issued refresh token; each login overwrites it.
    """

    __tablename__ = "users"

    name = Column(String(100), nullable=False)
    email = Column(String(255), unique=True, index=True, nullable=False)
    hashed_password = Column(String(255), nullable=False)
    role = Column(String(20), nullable=False, default=Role.USER.value)
    refresh_token = Column(Text, nullable=True)

    search_history = relationship(
        "SearchHistory",
        back_populates="owner",
        cascade="all, delete-orphan",
        passive_deletes=True,
    )

    def __repr__(self):
        return f"<User(id={self.id}, email='{self.email}', role='{self.role}')>"
