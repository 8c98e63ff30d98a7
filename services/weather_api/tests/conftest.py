"""
Shared test fixtures for the Weather API test suite.

Provides:
- FakeOpenWeather: an httpx.MockTransport handler standing in for
  OpenWeatherMap; records every request and serves canned payloads
- FakeClock: manually advanced monotonic clock for TTL tests
- weather_service wired to both, and an async FastAPI test client
- factory functions for OpenWeatherMap payload shapes
"""

import asyncio
import os
from typing import Any

import httpx
import pytest
from httpx import ASGITransport, AsyncClient

# Ensure test env vars before any app imports
os.environ.setdefault("ENVIRONMENT", "development")
os.environ.setdefault("OPENWEATHERMAP_API_KEY", "test-key-123")
os.environ.setdefault("SENTRY_DSN", "")

from services.weather_api.weather.cache import WeatherCaches  # noqa: E402
from services.weather_api.weather.client import OpenWeatherClient  # noqa: E402
from services.weather_api.weather.service import WeatherService  # noqa: E402

TEST_BASE_URL = "https://owm.test/data/2.5"
TEST_API_KEY = "test-key-123"


# ---------------------------------------------------------------------------
# Payload factories: trimmed OpenWeatherMap response shapes
# ---------------------------------------------------------------------------

def make_current_weather(
    name: str = "Paris",
    lat: float = 48.8534,
    lon: float = 2.3488,
    temp: float = 18.4,
) -> dict[str, Any]:
    return {
        "coord": {"lon": lon, "lat": lat},
        "weather": [{"id": 800, "main": "Clear", "description": "clear sky", "icon": "01d"}],
        "main": {"temp": temp, "feels_like": temp - 0.6, "humidity": 58, "pressure": 1016},
        "wind": {"speed": 3.6, "deg": 240},
        "name": name,
        "cod": 200,
    }


def make_forecast(name: str = "Paris") -> dict[str, Any]:
    return {
        "cod": "200",
        "cnt": 2,
        "list": [
            {"dt": 1760875200, "main": {"temp": 16.1}, "weather": [{"id": 801, "main": "Clouds"}]},
            {"dt": 1760886000, "main": {"temp": 14.7}, "weather": [{"id": 500, "main": "Rain"}]},
        ],
        "city": {"name": name, "coord": {"lat": 48.8534, "lon": 2.3488}},
    }


def make_air_pollution(aqi: int = 2) -> dict[str, Any]:
    return {
        "coord": {"lon": 2.3488, "lat": 48.8534},
        "list": [
            {
                "main": {"aqi": aqi},
                "components": {"co": 201.94, "no2": 12.68, "o3": 68.66, "pm2_5": 4.1, "pm10": 6.3},
                "dt": 1760875200,
            }
        ],
    }


# ---------------------------------------------------------------------------
# Fakes
# ---------------------------------------------------------------------------

class FakeOpenWeather:
    """
    Records upstream requests and answers by endpoint name
    (weather / forecast / air_pollution).

    respond() overrides the canned payload; fail_with() makes every request
    raise the given exception; delay suspends each request so concurrent
    callers overlap.
    """

    def __init__(self) -> None:
        self.requests: list[httpx.Request] = []
        self.delay: float = 0.0
        self._routes: dict[str, tuple[int, Any]] = {
            "weather": (200, make_current_weather()),
            "forecast": (200, make_forecast()),
            "air_pollution": (200, make_air_pollution()),
        }
        self._exc: Exception | None = None

    def respond(self, endpoint: str, status: int = 200, json: Any = None) -> None:
        self._routes[endpoint] = (status, json)

    def fail_with(self, exc: Exception) -> None:
        self._exc = exc

    async def handler(self, request: httpx.Request) -> httpx.Response:
        self.requests.append(request)
        if self.delay:
            await asyncio.sleep(self.delay)
        if self._exc is not None:
            raise self._exc
        endpoint = request.url.path.rsplit("/", 1)[-1]
        status, body = self._routes.get(endpoint, (404, {"cod": "404", "message": "Internal error"}))
        return httpx.Response(status, json=body)

    def calls(self, endpoint: str | None = None) -> list[httpx.Request]:
        if endpoint is None:
            return list(self.requests)
        return [r for r in self.requests if r.url.path.endswith(f"/{endpoint}")]


class FakeClock:
    def __init__(self, start: float = 1000.0) -> None:
        self.now = start

    def __call__(self) -> float:
        return self.now

    def advance(self, seconds: float) -> None:
        self.now += seconds


# ---------------------------------------------------------------------------
# Fixtures
# ---------------------------------------------------------------------------

@pytest.fixture
def upstream() -> FakeOpenWeather:
    return FakeOpenWeather()


@pytest.fixture
def clock() -> FakeClock:
    return FakeClock()


@pytest.fixture
async def http_client(upstream):
    async with httpx.AsyncClient(transport=httpx.MockTransport(upstream.handler)) as http:
        yield http


@pytest.fixture
def owm_client(http_client) -> OpenWeatherClient:
    return OpenWeatherClient(http_client, api_key=TEST_API_KEY, base_url=TEST_BASE_URL)


@pytest.fixture
def weather_caches(clock) -> WeatherCaches:
    return WeatherCaches(ttl_seconds=600, capacity=100, clock=clock)


@pytest.fixture
def weather_service(owm_client, weather_caches) -> WeatherService:
    return WeatherService(owm_client, weather_caches)


@pytest.fixture
async def app(weather_service):
    """The FastAPI app with a test WeatherService injected into state."""
    from services.weather_api.config import settings
    from services.weather_api.main import app as _app

    _app.state.settings = settings
    _app.state.weather_service = weather_service
    return _app


@pytest.fixture
async def client(app):
    """Async HTTP client bound to the test app."""
    transport = ASGITransport(app=app)
    async with AsyncClient(transport=transport, base_url="http://test") as ac:
        yield ac
