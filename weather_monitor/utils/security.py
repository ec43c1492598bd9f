"""
Security utilities.

This module contains password hashing helpers and the TokenIssuer that
signs and verifies access and refresh tokens.
"""

import uuid
from datetime import datetime, timedelta, timezone
from typing import Any, Dict

from jose import ExpiredSignatureError, JWTError, jwt
from passlib.context import CryptContext

from weather_monitor.core.exceptions import AuthError

# Password hashing context
pwd_context = CryptContext(schemes=["bcrypt"], deprecated="auto")

ACCESS_TOKEN = "access"
REFRESH_TOKEN = "refresh"


def verify_password(plain_password: str, hashed_password: str) -> bool:
    """
    Verify a password against its hash.

    bcrypt compares in constant time; a malformed stored hash never matches.

    Args:
        plain_password: Plain text password
        hashed_password: Hashed password

    Returns:
        True if password matches, False otherwise
    """
    try:
        return pwd_context.verify(plain_password, hashed_password)
    except (ValueError, TypeError):
        return False


def get_password_hash(password: str) -> str:
    """
    Hash a password.

    Args:
        password: Plain text password

    Returns:
        Salted bcrypt hash
    """
    return pwd_context.hash(password)


class TokenIssuer:
    """
    Issues and verifies signed JWTs bound to a user id.

    Access tokens are short lived bearer credentials. Refresh tokens live for
    days and are also persisted on the user record, so issuing a new one
    invalidates the previous one.
    """

    def __init__(
        self,
        secret_key: str,
        algorithm: str = "HS256",
        access_expire_minutes: int = 15,
        refresh_expire_days: int = 7,
    ):
        self.secret_key = secret_key
        self.algorithm = algorithm
        self.access_expires = timedelta(minutes=access_expire_minutes)
        self.refresh_expires = timedelta(days=refresh_expire_days)

    def _encode(self, user_id: str, token_type: str, expires_delta: timedelta) -> str:
        now = datetime.now(timezone.utc)
        payload = {
            "sub": str(user_id),
            "type": token_type,
            "iat": now,
            "exp": now + expires_delta,
            # Unique per token so two tokens issued in the same second still differ
            "jti": uuid.uuid4().hex,
        }
        return jwt.encode(payload, self.secret_key, algorithm=self.algorithm)

    def create_access_token(self, user_id: str) -> str:
        """Create a short-lived access token for the given user."""
        return self._encode(user_id, ACCESS_TOKEN, self.access_expires)

    def create_refresh_token(self, user_id: str) -> str:
        """Create a long-lived refresh token for the given user."""
        return self._encode(user_id, REFRESH_TOKEN, self.refresh_expires)

    def decode(self, token: str, expected_type: str = ACCESS_TOKEN) -> Dict[str, Any]:
        """
        Verify and decode a token.

        Args:
            token: Encoded JWT
            expected_type: "access" or "refresh"

        Returns:
            Decoded claims

        Raises:
            AuthError: On bad signature, malformed token, expiry, missing
                subject, or a token of the wrong type
        """
        try:
            payload = jwt.decode(token, self.secret_key, algorithms=[self.algorithm])
        except ExpiredSignatureError:
            raise AuthError("Token expired")
        except JWTError:
            raise AuthError("Invalid token")

        if not payload.get("sub") or payload.get("type") != expected_type:
            raise AuthError("Invalid token")
        return payload
