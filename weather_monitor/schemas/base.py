"""
Shared Pydantic building blocks.

Every schema reads from ORM objects, so route handlers can return models
directly and let response_model do the filtering.
"""

from datetime import datetime
from pydantic import BaseModel, ConfigDict


class BaseSchema(BaseModel):
    """Root of all API schemas."""

    model_config = ConfigDict(from_attributes=True)


class IDSchema(BaseSchema):
    """Anything addressed by an opaque string id."""

    id: str


class TimestampSchema(BaseSchema):
    created_at: datetime
    updated_at: datetime


class MessageResponse(BaseSchema):
    """Plain acknowledgement."""

    message: str
