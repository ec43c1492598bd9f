"""
Authentication schemas.

This module contains Pydantic schemas for authentication requests and responses.
"""

from typing import Optional, Union
from pydantic import EmailStr, Field, field_validator

from weather_monitor.models.user import Role
from weather_monitor.schemas.base import BaseSchema, IDSchema, TimestampSchema


class UserCreate(BaseSchema):
    """Registration payload."""
    name: str = Field(..., min_length=3, max_length=100)
    email: EmailStr
    password: str = Field(..., min_length=6)
    role: Optional[Role] = None

    @field_validator("email")
    @classmethod
    def normalize_email(cls, v: str) -> str:
        """Addresses are compared case-insensitively."""
        return v.lower()


class LoginRequest(BaseSchema):
    """Login payload."""
    email: EmailStr
    password: str = Field(..., min_length=1)

    @field_validator("email")
    @classmethod
    def normalize_email(cls, v: str) -> str:
        return v.lower()


class Identity(IDSchema):
    """
    The authenticated caller.

    Resolved once per request by the authorization gate and passed
    explicitly to the services that need it.
    """
    name: str
    email: EmailStr
    role: str

    def has_role(self, role: Union[Role, str]) -> bool:
        """Return True when the caller holds the given role."""
        return self.role == getattr(role, "value", role)


class AuthResponse(Identity):
    """Identity plus a freshly issued access token."""
    token: str


class TokenResponse(BaseSchema):
    """A new access token."""
    token: str


class User(IDSchema, TimestampSchema):
    """User as returned by read endpoints. Never carries secrets."""
    name: str
    email: EmailStr
    role: str
