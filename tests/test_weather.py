"""
Tests for the weather lookup proxy and the weather endpoint.
"""

from datetime import datetime

import httpx
import pytest

from weather_monitor.core.exceptions import UpstreamError, ValidationError
from weather_monitor.services.weather import WeatherService, normalize

from conftest import LONDON_PAYLOAD, auth_headers, register


def make_service(handler) -> WeatherService:
    return WeatherService(
        api_key="test-access-key",
        base_url="http://weather.test",
        transport=httpx.MockTransport(handler),
    )


def test_normalize_full_payload():
    report = normalize(LONDON_PAYLOAD, "london")
    assert report.location.name == "London"
    assert report.location.country == "United Kingdom"
    assert report.location.localtime == "2026-10-19 10:15"
    assert report.current.temperature == 13
    assert report.current.humidity == 82
    assert report.current.wind_dir == "WSW"
    assert report.current.condition == "Partly cloudy"


def test_normalize_empty_payload_uses_defaults():
    now = datetime(2026, 10, 19, 10, 15, 0)
    report = normalize({}, "Paris", now=now)

    assert report.location.name == "Paris"
    assert report.location.country == ""
    assert report.location.region == ""
    assert report.location.localtime == now.strftime("%c")
    assert report.location.lat == ""
    assert report.location.lon == ""

    assert report.current.temperature is None
    assert report.current.feelslike is None
    assert report.current.humidity is None
    assert report.current.wind_speed is None
    assert report.current.pressure is None
    assert report.current.visibility is None
    assert report.current.uv_index is None
    assert report.current.cloudcover is None
    assert report.current.wind_dir == ""
    assert report.current.observation_time == ""
    assert report.current.weather_descriptions == ["N/A"]
    assert report.current.weather_icons == []
    assert report.current.is_day == "yes"
    assert report.current.condition == "N/A"


def test_normalize_missing_temperature_is_null_in_output():
    """An absent reading is present in the serialized shape as null."""
    report = normalize({"current": {"humidity": 40}}, "Oslo")
    data = report.model_dump()
    assert "temperature" in data["current"]
    assert data["current"]["temperature"] is None
    assert data["current"]["humidity"] == 40


def test_normalize_keeps_zero_readings():
    """Zero is a real measurement, not a missing one."""
    report = normalize({"current": {"temperature": 0, "wind_speed": 0, "uv_index": 0}}, "Reykjavik")
    assert report.current.temperature == 0
    assert report.current.wind_speed == 0
    assert report.current.uv_index == 0


def test_normalize_empty_text_falls_back():
    report = normalize(
        {"location": {"name": ""}, "current": {"weather_descriptions": [], "is_day": ""}},
        "Lima",
    )
    assert report.location.name == "Lima"
    assert report.current.weather_descriptions == ["N/A"]
    assert report.current.is_day == "yes"


def test_normalize_wrong_types_is_upstream_error():
    with pytest.raises(UpstreamError):
        normalize({"current": {"temperature": "very warm"}}, "Cairo")


@pytest.mark.asyncio
async def test_fetch_sends_key_and_city():
    seen = []

    def handler(request):
        seen.append(request)
        return httpx.Response(200, json=LONDON_PAYLOAD)

    data = await make_service(handler).fetch("  London ")

    assert data == LONDON_PAYLOAD
    assert seen[0].url.path == "/current"
    assert seen[0].url.params["access_key"] == "test-access-key"
    assert seen[0].url.params["query"] == "London"


@pytest.mark.asyncio
async def test_fetch_blank_city_is_validation_error():
    def handler(request):
        raise AssertionError("provider must not be called")

    with pytest.raises(ValidationError) as exc_info:
        await make_service(handler).fetch("   ")
    assert exc_info.value.message == "City name is required"


@pytest.mark.asyncio
async def test_fetch_provider_error_info():
    """weatherstack reports errors in a 200 body."""
    def handler(request):
        return httpx.Response(
            200,
            json={"success": False, "error": {"code": 615, "type": "request_failed",
                                              "info": "Your API request failed. Please try again."}},
        )

    with pytest.raises(UpstreamError) as exc_info:
        await make_service(handler).fetch("Atlantis")
    assert exc_info.value.message == "Your API request failed. Please try again."
    assert exc_info.value.status_code == 502


@pytest.mark.asyncio
async def test_fetch_provider_error_without_info():
    def handler(request):
        return httpx.Response(200, json={"success": False, "error": {"code": 101}})

    with pytest.raises(UpstreamError) as exc_info:
        await make_service(handler).fetch("London")
    assert exc_info.value.message == "Weather API Error"


@pytest.mark.asyncio
async def test_fetch_http_error_status():
    def handler(request):
        return httpx.Response(503, text="Service Unavailable")

    with pytest.raises(UpstreamError) as exc_info:
        await make_service(handler).fetch("London")
    assert "503" in exc_info.value.message


@pytest.mark.asyncio
async def test_fetch_network_failure():
    def handler(request):
        raise httpx.ConnectError("Connection refused", request=request)

    with pytest.raises(UpstreamError) as exc_info:
        await make_service(handler).fetch("London")
    assert exc_info.value.message == "Connection refused"


@pytest.mark.asyncio
async def test_lookup_partial_payload():
    def handler(request):
        return httpx.Response(200, json={"current": {"temperature": 18}})

    report = await make_service(handler).lookup("London")
    assert report.location.name == "London"
    assert report.current.temperature == 18
    assert report.current.humidity is None


def test_weather_endpoint_requires_auth(client):
    response = client.get("/api/weather/London")
    assert response.status_code == 401
    assert response.json()["message"] == "Not authorized, no token"


def test_weather_endpoint_returns_report_and_records_history(client, weather_provider):
    token = register(client).json()["token"]

    response = client.get("/api/weather/London", headers=auth_headers(token))
    assert response.status_code == 200
    data = response.json()
    assert data["location"]["name"] == "London"
    assert data["current"]["temperature"] == 13
    assert data["current"]["weather_descriptions"] == ["Partly cloudy"]
    assert len(weather_provider.requests) == 1

    history = client.get("/api/weather/history", headers=auth_headers(token)).json()
    assert len(history) == 1
    assert history[0]["city"] == "London"
    assert history[0]["temperature"] == 13
    assert history[0]["condition"] == "Partly cloudy"
    assert history[0]["humidity"] == 82
    assert history[0]["wind_speed"] == 11


def test_weather_endpoint_provider_error(client, weather_provider):
    weather_provider.payload = {"success": False, "error": {"info": "Invalid access key"}}
    token = register(client).json()["token"]

    response = client.get("/api/weather/London", headers=auth_headers(token))
    assert response.status_code == 502
    assert response.json()["message"] == "Invalid access key"

    history = client.get("/api/weather/history", headers=auth_headers(token)).json()
    assert history == []


def test_weather_without_temperature_fails_and_is_not_recorded(client, weather_provider):
    """A lookup either succeeds and is recorded, or fails; never one without the other."""
    weather_provider.payload = {"location": {"name": "Oslo"}, "current": {"humidity": 40}}
    token = register(client).json()["token"]

    response = client.get("/api/weather/Oslo", headers=auth_headers(token))
    assert response.status_code == 502
    assert response.json()["message"] == "Weather provider returned no temperature"

    history = client.get("/api/weather/history", headers=auth_headers(token)).json()
    assert history == []


def test_every_successful_lookup_is_recorded_once(client, weather_provider):
    token = register(client).json()["token"]

    for _ in range(3):
        assert client.get("/api/weather/London", headers=auth_headers(token)).status_code == 200

    history = client.get("/api/weather/history", headers=auth_headers(token)).json()
    assert len(history) == 3
    assert len({r["id"] for r in history}) == 3


@pytest.mark.asyncio
async def test_service_reuses_one_client():
    service = make_service(lambda request: httpx.Response(200, json=LONDON_PAYLOAD))

    await service.fetch("London")
    first_client = service.client
    await service.fetch("Paris")
    assert service.client is first_client

    await service.aclose()
    assert first_client.is_closed
    await service.aclose()

    # A closed service opens a fresh client on next use
    await service.fetch("Rome")
    assert service.client is not first_client
    await service.aclose()
