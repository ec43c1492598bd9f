"""
Authentication router.

This module contains endpoints for registration, login, token refresh,
logout and the current-user lookup.
"""

from fastapi import APIRouter, Depends, Request, Response, status

from weather_monitor.config import settings
from weather_monitor.core.rate_limit import limiter
from weather_monitor.dependencies.auth import get_current_user
from weather_monitor.dependencies.services import get_auth_service
from weather_monitor.schemas.auth import AuthResponse, Identity, LoginRequest, TokenResponse, UserCreate
from weather_monitor.schemas.base import MessageResponse
from weather_monitor.services.auth import AuthService

router = APIRouter(
    prefix="/auth",
    tags=["authentication"],
    responses={401: {"description": "Unauthorized"}},
)


def set_refresh_cookie(response: Response, refresh_token: str) -> None:
    """Deliver the refresh token as an HttpOnly, same-site session cookie."""
    response.set_cookie(
        key=settings.REFRESH_COOKIE_NAME,
        value=refresh_token,
        max_age=settings.REFRESH_TOKEN_EXPIRE_DAYS * 24 * 60 * 60,
        path=settings.REFRESH_COOKIE_PATH,
        httponly=True,
        secure=settings.secure_cookies,
        samesite="strict",
    )


@router.post("/register", response_model=AuthResponse, status_code=status.HTTP_201_CREATED)
@limiter.limit(settings.RATE_LIMIT_AUTH)
async def register(
    request: Request,
    user_in: UserCreate,
    auth_service: AuthService = Depends(get_auth_service),
):
    """
    Register a new user.

    Returns the new user's identity and an access token. Role defaults to
    "user" when not given.
    """
    return await auth_service.register(user_in)


@router.post("/login", response_model=AuthResponse)
@limiter.limit(settings.RATE_LIMIT_AUTH)  # Strict limit to slow down brute force attempts
async def login(
    request: Request,
    response: Response,
    credentials: LoginRequest,
    auth_service: AuthService = Depends(get_auth_service),
):
    """
    Authenticate with email and password.

    Returns an access token in the body and sets the refresh token cookie.
    """
    auth, refresh_token = await auth_service.login(credentials)
    set_refresh_cookie(response, refresh_token)
    return auth


@router.post("/refresh", response_model=TokenResponse)
async def refresh(
    request: Request,
    response: Response,
    auth_service: AuthService = Depends(get_auth_service),
):
    """
    Exchange the refresh token cookie for a new access token.

    The cookie is rotated; the previous refresh token stops working.
    """
    token_response, refresh_token = await auth_service.refresh(
        request.cookies.get(settings.REFRESH_COOKIE_NAME)
    )
    set_refresh_cookie(response, refresh_token)
    return token_response


@router.post("/logout", response_model=MessageResponse)
async def logout(
    response: Response,
    current_user: Identity = Depends(get_current_user),
    auth_service: AuthService = Depends(get_auth_service),
):
    """Invalidate the stored refresh token and clear the cookie."""
    await auth_service.logout(current_user)
    response.delete_cookie(
        key=settings.REFRESH_COOKIE_NAME,
        path=settings.REFRESH_COOKIE_PATH,
        httponly=True,
        secure=settings.secure_cookies,
        samesite="strict",
    )
    return MessageResponse(message="Logged out")


@router.get("/me", response_model=Identity)
async def get_me(
    current_user: Identity = Depends(get_current_user),
    auth_service: AuthService = Depends(get_auth_service),
):
    """Get the current user's id, name, email and role."""
    return auth_service.me(current_user)
