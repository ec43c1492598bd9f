"""
Authentication dependencies.

This module contains dependency injection functions for authentication
and authorization. Every protected route resolves the caller through
get_current_user; admin routes add require_role on top.
"""

from typing import Optional

from fastapi import Depends, Security
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer
from sqlalchemy.ext.asyncio import AsyncSession

from weather_monitor.core.exceptions import AuthError, ForbiddenError
from weather_monitor.crud.user import user as user_crud
from weather_monitor.database import get_db
from weather_monitor.dependencies.services import get_token_issuer
from weather_monitor.models.user import Role
from weather_monitor.schemas.auth import Identity
from weather_monitor.utils.logging_config import get_logger
from weather_monitor.utils.security import TokenIssuer

logger = get_logger(__name__)

# Don't auto-raise, missing credentials are reported through AuthError
bearer_scheme = HTTPBearer(auto_error=False)


async def get_current_user(
    credentials: Optional[HTTPAuthorizationCredentials] = Security(bearer_scheme),
    db: AsyncSession = Depends(get_db),
    token_issuer: TokenIssuer = Depends(get_token_issuer),
) -> Identity:
    """
    Resolve the caller from the bearer access token.

    Args:
        credentials: Authorization header (Bearer token)
        db: Database session
        token_issuer: Verifies the token signature and expiry

    Returns:
        Identity of the authenticated user

    Raises:
        AuthError: If the header is missing or malformed, the token is
            invalid or expired, or the user no longer exists
    """
    if credentials is None or not credentials.credentials:
        raise AuthError("Not authorized, no token")

    payload = token_issuer.decode(credentials.credentials)

    user_obj = await user_crud.get(db, payload["sub"])
    if user_obj is None:
        raise AuthError("Not authorized, user not found")

    return Identity.model_validate(user_obj)


def require_role(role: Role):
    """
    Build a dependency that only lets callers holding `role` through.

    Args:
        role: Required role

    Returns:
        Dependency returning the caller's Identity

    Raises:
        ForbiddenError: If the caller does not hold the role
    """

    async def role_checker(current_user: Identity = Depends(get_current_user)) -> Identity:
        if not current_user.has_role(role):
            logger.warning(f"User {current_user.id} ({current_user.role}) denied {role.value} access")
            raise ForbiddenError(f"Not authorized as {role.value}")
        return current_user

    return role_checker


require_admin = require_role(Role.ADMIN)
