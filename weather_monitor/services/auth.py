"""
Authentication service.

Registration, login with refresh-token rotation, and session lookups.
"""

import hmac
from typing import Optional, Tuple

from sqlalchemy.ext.asyncio import AsyncSession

from weather_monitor.core.exceptions import AuthError
from weather_monitor.crud.user import user as user_crud
from weather_monitor.schemas.auth import AuthResponse, Identity, LoginRequest, TokenResponse, UserCreate
from weather_monitor.utils.logging_config import get_logger
from weather_monitor.utils.security import REFRESH_TOKEN, TokenIssuer, verify_password

logger = get_logger(__name__)

INVALID_CREDENTIALS = "Invalid credentials"


class AuthService:
    """Coordinates credential checks, token issuance and refresh-token storage."""

    def __init__(self, db: AsyncSession, token_issuer: TokenIssuer):
        self.db = db
        self.tokens = token_issuer

    async def register(self, user_in: UserCreate) -> AuthResponse:
        """
        Create a user and return its identity with an access token.

        Raises:
            ConflictError: If the email is already registered
        """
        new_user = await user_crud.create(self.db, obj_in=user_in)
        logger.info(f"User registered: {new_user.email} ({new_user.role})")

        return AuthResponse(
            id=new_user.id,
            name=new_user.name,
            email=new_user.email,
            role=new_user.role,
            token=self.tokens.create_access_token(new_user.id),
        )

    async def login(self, credentials: LoginRequest) -> Tuple[AuthResponse, str]:
        """
        Check credentials and open a new session.

        The new refresh token replaces the one stored on the user, so only
        the most recent login can refresh.

        Returns:
            The identity with an access token, and the refresh token for the cookie

        Raises:
            AuthError: Same message for an unknown email and a wrong password
        """
        user_obj = await user_crud.get_by_email(self.db, email=credentials.email)

        if user_obj is None or not verify_password(credentials.password, user_obj.hashed_password):
            logger.warning(f"Failed login attempt for {credentials.email}")
            raise AuthError(INVALID_CREDENTIALS)

        access_token = self.tokens.create_access_token(user_obj.id)
        refresh_token = self.tokens.create_refresh_token(user_obj.id)
        await user_crud.set_refresh_token(self.db, user=user_obj, token=refresh_token)
        logger.info(f"User logged in: {user_obj.email}")

        return (
            AuthResponse(
                id=user_obj.id,
                name=user_obj.name,
                email=user_obj.email,
                role=user_obj.role,
                token=access_token,
            ),
            refresh_token,
        )

    def me(self, identity: Identity) -> Identity:
        """The caller as already resolved by the authorization gate."""
        return Identity(id=identity.id, name=identity.name, email=identity.email, role=identity.role)

    async def refresh(self, refresh_token: Optional[str]) -> Tuple[TokenResponse, str]:
        """
        Exchange the stored refresh token for a new access token.

        The refresh token is rotated on every use.

        Raises:
            AuthError: If the token is missing, invalid, expired, or no longer
                the one stored for its user
        """
        if not refresh_token:
            raise AuthError("Not authorized, no refresh token")

        payload = self.tokens.decode(refresh_token, expected_type=REFRESH_TOKEN)
        user_obj = await user_crud.get(self.db, payload["sub"])

        if (
            user_obj is None
            or not user_obj.refresh_token
            or not hmac.compare_digest(user_obj.refresh_token, refresh_token)
        ):
            logger.warning(f"Rejected refresh token for user {payload['sub']}")
            raise AuthError("Invalid refresh token")

        new_refresh_token = self.tokens.create_refresh_token(user_obj.id)
        await user_crud.set_refresh_token(self.db, user=user_obj, token=new_refresh_token)

        return TokenResponse(token=self.tokens.create_access_token(user_obj.id)), new_refresh_token

    async def logout(self, identity: Identity) -> None:
        """Forget the caller's refresh token."""
        user_obj = await user_crud.get(self.db, identity.id)
        if user_obj is not None:
            await user_crud.set_refresh_token(self.db, user=user_obj, token=None)
        logger.info(f"User logged out: {identity.email}")
