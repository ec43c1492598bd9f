"""
Base database model with common fields and functionality.

This module contains the base SQLAlchemy model with an opaque string id,
plus a mixin adding created_at/updated_at for models that need them.
"""

import uuid
from sqlalchemy import Column, DateTime, String
from sqlalchemy.orm import declared_attr
from sqlalchemy.sql import func

from weather_monitor.database import Base


def generate_id() -> str:
    """Return a new opaque record identifier."""
    return str(uuid.uuid4())


class BaseModel(Base):
    """
    Base model with common database fields.

    All other models should inherit from this class to get
    an automatically generated UUID string primary key.
    """

    __abstract__ = True

    id = Column(String(36), primary_key=True, index=True, default=generate_id)

    def __repr__(self) -> str:
        """String representation of the model instance."""
        return f"<{self.__class__.__name__}(id={self.id})>"


class TimestampMixin:
    """Adds created_at and updated_at columns."""

    @declared_attr
    def created_at(cls):
        """Timestamp when record was created."""
        return Column(DateTime(timezone=True), server_default=func.now(), nullable=False)

    @declared_attr
    def updated_at(cls):
        """Timestamp when record was last updated."""
        return Column(DateTime(timezone=True), server_default=func.now(), onupdate=func.now(), nullable=False)
