"""
Weather lookup proxy.

Fetches current conditions from weatherstack and maps the response onto
the fixed WeatherReport shape used by the API and the search history.
"""

from datetime import datetime
from typing import Any, Dict, Optional

import httpx
from pydantic import ValidationError as PydanticValidationError

from weather_monitor.core.exceptions import UpstreamError, ValidationError
from weather_monitor.schemas.weather import WeatherCurrent, WeatherLocation, WeatherReport
from weather_monitor.utils.logging_config import get_logger

logger = get_logger(__name__)

# Provider fields that fall back only when absent (zero is a valid reading)
NUMERIC_FIELDS = (
    "temperature",
    "feelslike",
    "humidity",
    "wind_speed",
    "pressure",
    "visibility",
    "uv_index",
    "cloudcover",
)


def _section(raw: Dict[str, Any], key: str) -> Dict[str, Any]:
    value = raw.get(key)
    return value if isinstance(value, dict) else {}


def normalize(raw: Dict[str, Any], city: str, now: Optional[datetime] = None) -> WeatherReport:
    """
    Map a provider payload onto WeatherReport.

    Text fields fall back on any empty value, numeric fields only when the
    provider omitted them. localtime defaults to the current wall clock
    rendered in the locale's date/time format.

    Args:
        raw: Decoded provider response (may be partial)
        city: The city that was requested
        now: Clock override, mainly for tests

    Returns:
        WeatherReport with every field populated

    Raises:
        UpstreamError: If the provider sent values of the wrong type
    """
    location = _section(raw, "location")
    current = _section(raw, "current")
    now = now or datetime.now()

    try:
        return WeatherReport(
            location=WeatherLocation(
                name=location.get("name") or city,
                country=location.get("country") or "",
                region=location.get("region") or "",
                localtime=location.get("localtime") or now.strftime("%c"),
                lat=location.get("lat") or "",
                lon=location.get("lon") or "",
            ),
            current=WeatherCurrent(
                **{field: current.get(field) for field in NUMERIC_FIELDS},
                wind_dir=current.get("wind_dir") or "",
                weather_descriptions=current.get("weather_descriptions") or ["N/A"],
                weather_icons=current.get("weather_icons") or [],
                is_day=current.get("is_day") or "yes",
                observation_time=current.get("observation_time") or "",
            ),
        )
    except PydanticValidationError as e:
        logger.error(f"Unexpected weather provider payload for '{city}': {e}")
        raise UpstreamError("Unexpected response from weather provider")


class WeatherService:
    """
    Client for the weatherstack current-conditions endpoint.

    One httpx.AsyncClient is opened on first use and reused so connections
    to the provider are pooled; aclose() releases it.
    """

    def __init__(
        self,
        api_key: str,
        base_url: str = "http://api.weatherstack.com",
        timeout: float = 10.0,
        transport: Optional[httpx.AsyncBaseTransport] = None,
    ):
        self.api_key = api_key
        self.base_url = base_url
        self.timeout = timeout
        self.transport = transport
        self._client: Optional[httpx.AsyncClient] = None

    @property
    def client(self) -> httpx.AsyncClient:
        if self._client is None or self._client.is_closed:
            self._client = httpx.AsyncClient(
                base_url=self.base_url, timeout=self.timeout, transport=self.transport
            )
        return self._client

    async def aclose(self) -> None:
        """Close the pooled client, if one was opened."""
        if self._client is not None:
            await self._client.aclose()
            self._client = None

    async def fetch(self, city: str) -> Dict[str, Any]:
        """
        Get the raw provider payload for a city.

        Raises:
            ValidationError: If city is blank
            UpstreamError: If the provider reports an error or cannot be reached
        """
        if not city or not city.strip():
            raise ValidationError("City name is required")

        try:
            response = await self.client.get(
                "/current",
                params={"access_key": self.api_key, "query": city.strip()},
            )
        except httpx.HTTPError as e:
            logger.warning(f"Weather provider request failed for '{city}': {e!r}")
            raise UpstreamError(str(e) or "Weather API Error")

        try:
            data = response.json()
        except ValueError:
            data = None

        # weatherstack reports failures in the body, often with a 200 status
        if isinstance(data, dict) and data.get("error"):
            error = data["error"]
            info = error.get("info") if isinstance(error, dict) else None
            logger.warning(f"Weather provider error for '{city}': {info}")
            raise UpstreamError(info or "Weather API Error")

        if response.is_error or not isinstance(data, dict):
            logger.warning(f"Weather provider returned HTTP {response.status_code} for '{city}'")
            raise UpstreamError(f"Weather API returned HTTP {response.status_code}")

        return data

    async def lookup(self, city: str) -> WeatherReport:
        """Fetch and normalize current weather for a city."""
        raw = await self.fetch(city)
        return normalize(raw, city.strip())
