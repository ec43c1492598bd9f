"""
Error taxonomy and exception handlers.

Every application error is an HTTPException subclass carrying its status
code, so routers and services raise them directly and the handlers below
render them as {"message": ...} bodies.
"""

from typing import Dict, Optional

from fastapi import FastAPI, HTTPException, Request, status
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from slowapi.errors import RateLimitExceeded
from starlette.exceptions import HTTPException as StarletteHTTPException

from weather_monitor.utils.logging_config import get_logger

logger = get_logger(__name__)


class APIError(HTTPException):
    """Base class for errors raised by the application."""

    status_code: int = status.HTTP_500_INTERNAL_SERVER_ERROR
    default_message: str = "Internal server error"

    def __init__(self, message: Optional[str] = None, headers: Optional[Dict[str, str]] = None):
        super().__init__(
            status_code=type(self).status_code,
            detail=message or self.default_message,
            headers=headers,
        )

    @property
    def message(self) -> str:
        return self.detail


class ValidationError(APIError):
    """Malformed or missing input."""
    status_code = status.HTTP_400_BAD_REQUEST
    default_message = "Invalid request"


class ConflictError(APIError):
    """Duplicate unique key."""
    status_code = status.HTTP_400_BAD_REQUEST
    default_message = "User already exists"


class AuthError(APIError):
    """Missing, invalid or expired credential, or a failed login."""
    status_code = status.HTTP_401_UNAUTHORIZED
    default_message = "Not authorized"

    def __init__(self, message: Optional[str] = None):
        super().__init__(message, headers={"WWW-Authenticate": "Bearer"})


class ForbiddenError(APIError):
    """Authenticated but not permitted."""
    status_code = status.HTTP_403_FORBIDDEN
    default_message = "Forbidden"


class NotFoundError(APIError):
    """Referenced entity does not exist."""
    status_code = status.HTTP_404_NOT_FOUND
    default_message = "Not found"


class UpstreamError(APIError):
    """The external weather provider failed or reported an error."""
    status_code = status.HTTP_502_BAD_GATEWAY
    default_message = "Weather API Error"


class InternalError(APIError):
    """Anything unexpected."""


def _format_validation_error(exc: RequestValidationError) -> str:
    """Render the first validation failure as '<field>: <message>'."""
    errors = exc.errors()
    if not errors:
        return ValidationError.default_message
    first = errors[0]
    # Drop the "body"/"query"/"path" prefix FastAPI puts in front of the field name
    location = [str(part) for part in first.get("loc", ())[1:]]
    message = first.get("msg", ValidationError.default_message)
    if location:
        return f"{'.'.join(location)}: {message}"
    return message


async def http_exception_handler(request: Request, exc: StarletteHTTPException):
    """Render any HTTPException (including APIError) as {"message": ...}."""
    return JSONResponse(
        status_code=exc.status_code,
        content={"message": exc.detail},
        headers=getattr(exc, "headers", None),
    )


async def validation_exception_handler(request: Request, exc: RequestValidationError):
    """Request body/params failed schema validation: first message wins."""
    message = _format_validation_error(exc)
    logger.info(f"Validation failed on {request.method} {request.url.path}: {message}")
    return JSONResponse(
        status_code=status.HTTP_400_BAD_REQUEST,
        content={"message": message},
    )


async def rate_limit_exception_handler(request: Request, exc: RateLimitExceeded):
    logger.warning(f"Rate limit exceeded for {request.client.host if request.client else 'unknown'} on {request.url.path}")
    return JSONResponse(
        status_code=status.HTTP_429_TOO_MANY_REQUESTS,
        content={"message": "Too many requests, please try again later."},
    )


async def unhandled_exception_handler(request: Request, exc: Exception):
    logger.exception(f"Unhandled error on {request.method} {request.url.path}: {exc}")
    return JSONResponse(
        status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
        content={"message": InternalError.default_message},
    )


def register_exception_handlers(app: FastAPI) -> None:
    """Attach the error handlers to the application."""
    app.add_exception_handler(StarletteHTTPException, http_exception_handler)
    app.add_exception_handler(RequestValidationError, validation_exception_handler)
    app.add_exception_handler(RateLimitExceeded, rate_limit_exception_handler)
    app.add_exception_handler(Exception, unhandled_exception_handler)
