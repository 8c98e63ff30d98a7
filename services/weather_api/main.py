"""
Weather API FastAPI service — cached OpenWeatherMap proxy for the browser UI.

Entrypoint: uvicorn services.weather_api.main:app --host 0.0.0.0 --port 8000
"""

import logging
import uuid
from contextlib import asynccontextmanager

import httpx
from fastapi import FastAPI, Request, Response
from starlette.responses import JSONResponse

from services.weather_api.config import settings
from services.weather_api.middleware.cors import CORS_HEADERS, setup_cors
from services.weather_api.middleware.sentry import setup_sentry
from services.weather_api.routers import health, weather
from services.weather_api.weather.cache import WeatherCaches
from services.weather_api.weather.client import OpenWeatherClient
from services.weather_api.weather.service import WeatherService

logger = logging.getLogger(__name__)


def build_weather_service(http: httpx.AsyncClient) -> WeatherService:
    """Wire the client, caches and orchestrator from settings."""
    client = OpenWeatherClient(
        http,
        api_key=settings.openweathermap_api_key,
        base_url=settings.openweathermap_base_url,
    )
    caches = WeatherCaches(
        ttl_seconds=settings.weather_cache_ttl_s,
        capacity=settings.weather_cache_max_entries,
    )
    return WeatherService(
        client,
        caches,
        collapse_inflight=settings.weather_collapse_inflight,
    )


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Startup/shutdown lifecycle."""
    setup_sentry()

    if not settings.openweathermap_api_key:
        logger.warning("OPENWEATHERMAP_API_KEY not set; upstream calls will be rejected")

    http = httpx.AsyncClient(timeout=settings.weather_api_timeout_s)
    app.state.settings = settings
    app.state.weather_service = build_weather_service(http)

    yield

    await http.aclose()


app = FastAPI(
    title="Weather API",
    version=settings.app_version,
    docs_url="/docs" if settings.environment == "development" else None,
    redoc_url=None,
    lifespan=lifespan,
)

app.include_router(health.router)
app.include_router(weather.router)

# CORS (needs to be outermost to handle preflight)
setup_cors(app)


@app.middleware("http")
async def request_id_middleware(request: Request, call_next) -> Response:
    request_id = request.headers.get("x-request-id", str(uuid.uuid4()))
    request.state.request_id = request_id
    response = await call_next(request)
    response.headers["X-Request-ID"] = request_id
    return response


# -- Exception Handlers --

@app.exception_handler(404)
async def not_found_handler(request: Request, exc) -> JSONResponse:
    return JSONResponse(
        status_code=404,
        content={"error": "Resource not found."},
        headers=CORS_HEADERS,
    )


@app.exception_handler(500)
async def internal_error_handler(request: Request, exc) -> JSONResponse:
    return JSONResponse(
        status_code=500,
        content={"error": "Internal server error"},
        headers=CORS_HEADERS,
    )
