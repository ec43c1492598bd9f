"""
Shared test fixtures.

The environment is fixed here, before the application is imported, so the
settings singleton picks up the test database and disabled rate limits.
"""

import asyncio
import os

os.environ["DATABASE_URL"] = "sqlite+aiosqlite:///./test_weather_monitor.db"
os.environ["ENVIRONMENT"] = "development"
os.environ["RATE_LIMIT_ENABLED"] = "false"
os.environ["LOG_TO_FILE"] = "false"
os.environ["AUTO_CREATE_TABLES"] = "true"
os.environ["SECRET_KEY"] = "test-secret-key-not-for-production"
os.environ["WEATHERSTACK_API_KEY"] = "test-access-key"

import httpx
import pytest
from fastapi.testclient import TestClient
from sqlalchemy.ext.asyncio import AsyncSession, create_async_engine
from sqlalchemy.orm import sessionmaker

from weather_monitor.database import Base, drop_tables
from weather_monitor.dependencies.services import get_weather_service
from weather_monitor.main import app
from weather_monitor.services.weather import WeatherService
from weather_monitor.utils.security import TokenIssuer

TEST_SECRET = os.environ["SECRET_KEY"]

LONDON_PAYLOAD = {
    "location": {
        "name": "London",
        "country": "United Kingdom",
        "region": "City of London, Greater London",
        "lat": "51.517",
        "lon": "-0.106",
        "localtime": "2026-10-19 10:15",
    },
    "current": {
        "observation_time": "09:15 AM",
        "temperature": 13,
        "weather_icons": ["https://assets.weatherstack.com/images/wsymbol_0006_mist.png"],
        "weather_descriptions": ["Partly cloudy"],
        "wind_speed": 11,
        "wind_dir": "WSW",
        "pressure": 1016,
        "humidity": 82,
        "cloudcover": 75,
        "feelslike": 12,
        "uv_index": 2,
        "visibility": 10,
        "is_day": "yes",
    },
}


class StubWeatherProvider:
    """
    Stand-in for the weatherstack API.

    Tests set `payload` and `status_code`; every request is kept in
    `requests` for inspection.
    """

    def __init__(self):
        self.payload = LONDON_PAYLOAD
        self.status_code = 200
        self.requests = []
        self._service = None

    def handler(self, request: httpx.Request) -> httpx.Response:
        self.requests.append(request)
        return httpx.Response(self.status_code, json=self.payload)

    def service(self) -> WeatherService:
        if self._service is None:
            self._service = WeatherService(
                api_key="test-access-key",
                base_url="http://weather.test",
                transport=httpx.MockTransport(self.handler),
            )
        return self._service


@pytest.fixture
def weather_provider():
    """A fresh stub provider per test."""
    return StubWeatherProvider()


@pytest.fixture
def client(weather_provider):
    """
    Test client against a freshly reset database.

    The lifespan recreates the tables; the weather service talks to the stub.
    """
    asyncio.run(drop_tables())
    app.dependency_overrides[get_weather_service] = weather_provider.service

    with TestClient(app) as test_client:
        yield test_client

    app.dependency_overrides.clear()


@pytest.fixture
async def db(tmp_path):
    """Isolated database session for CRUD and service tests."""
    engine = create_async_engine(f"sqlite+aiosqlite:///{tmp_path / 'test.db'}", echo=False)
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)

    session_factory = sessionmaker(engine, class_=AsyncSession, expire_on_commit=False)
    async with session_factory() as session:
        yield session

    await engine.dispose()


@pytest.fixture
def token_issuer():
    return TokenIssuer(secret_key=TEST_SECRET)


def register(client, name="Alice Smith", email="alice@example.com", password="secret1", role=None):
    """Register a user through the API and return the response."""
    body = {"name": name, "email": email, "password": password}
    if role is not None:
        body["role"] = role
    return client.post("/api/auth/register", json=body)


def login(client, email="alice@example.com", password="secret1"):
    """Log in through the API and return the response."""
    return client.post("/api/auth/login", json={"email": email, "password": password})


def auth_headers(token: str) -> dict:
    return {"Authorization": f"Bearer {token}"}
