"""
Main FastAPI application for the Weather Monitor API.

This module contains the main FastAPI application instance, middleware
setup and the root and health endpoints.
"""

from contextlib import asynccontextmanager

from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from slowapi.middleware import SlowAPIMiddleware

from weather_monitor import __version__
from weather_monitor.config import settings
from weather_monitor.core.exceptions import register_exception_handlers
from weather_monitor.core.middleware import RequestLoggingMiddleware
from weather_monitor.core.rate_limit import limiter
from weather_monitor.database import create_tables, engine
from weather_monitor.dependencies.services import get_weather_service
from weather_monitor.routers.admin import router as admin_router
from weather_monitor.routers.auth import router as auth_router
from weather_monitor.routers.weather import router as weather_router
from weather_monitor.utils.logging_config import setup_logging, get_logger

# Import all models to ensure SQLAlchemy relationships are properly configured
import weather_monitor.models  # noqa: F401 - triggers import of all model classes

# Initialize logging
setup_logging()
logger = get_logger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    """
    Lifespan context manager for FastAPI application.

    Handles startup and shutdown events.

    Note: With AUTO_CREATE_TABLES disabled, run `alembic upgrade head`
    to create/update database tables.
    """
    # Startup
    logger.info("=" * 60)
    logger.info(f"{settings.PROJECT_NAME} - Application starting up")
    logger.info(f"Environment: {settings.ENVIRONMENT}")
    logger.info(f"Database: {settings.DATABASE_URL.split('://')[0]}")
    logger.info(f"Rate limiting: {'enabled' if settings.RATE_LIMIT_ENABLED else 'disabled'}")
    logger.info("=" * 60)

    if settings.AUTO_CREATE_TABLES:
        await create_tables()
        logger.info("Database tables created")
    else:
        logger.warning("Remember to run 'alembic upgrade head' to apply database migrations")

    if not settings.WEATHERSTACK_API_KEY:
        logger.warning("WEATHERSTACK_API_KEY is not set; weather lookups will fail")

    yield

    # Shutdown
    await get_weather_service().aclose()
    await engine.dispose()
    logger.info("=" * 60)
    logger.info(f"{settings.PROJECT_NAME} - Application shutting down")
    logger.info("=" * 60)


app = FastAPI(
    title=settings.PROJECT_NAME,
    description="Weather lookups with per-user search history and admin oversight",
    version=__version__,
    openapi_url=f"{settings.API_PREFIX}/openapi.json",
    docs_url="/docs",
    redoc_url="/redoc",
    lifespan=lifespan,
)

# Add rate limiter to app state
app.state.limiter = limiter
app.add_middleware(SlowAPIMiddleware)

register_exception_handlers(app)

# Set up CORS
if settings.BACKEND_CORS_ORIGINS:
    app.add_middleware(
        CORSMiddleware,
        allow_origins=[str(origin) for origin in settings.BACKEND_CORS_ORIGINS],
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

app.add_middleware(RequestLoggingMiddleware)


@app.get("/")
async def root(request: Request):
    """Root endpoint returning API information."""
    return {
        "message": f"Welcome to {settings.PROJECT_NAME}",
        "version": __version__,
        "docs": "/docs",
        "redoc": "/redoc"
    }


@app.get("/health")
@limiter.exempt
async def health_check(request: Request):
    """Health check endpoint. Not rate limited."""
    return {"status": "healthy"}


# Include routers
app.include_router(auth_router, prefix=settings.API_PREFIX)
app.include_router(weather_router, prefix=settings.API_PREFIX)
app.include_router(admin_router, prefix=settings.API_PREFIX)
