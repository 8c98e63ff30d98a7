"""
OpenWeatherMap client.

Endpoints used (all under openweathermap_base_url, metric units):
  /weather        current conditions, by q=<city> or lat/lon
  /forecast       5-day / 3-hour forecast, by q=<city> or lat/lon
  /air_pollution  current air pollution, lat/lon only

Error responses look like {"cod": "404", "message": "city not found"}.
They are raised as UpstreamError with the upstream status, message and cod
untouched so the request handler can pass them through verbatim.

Network failures (httpx.HTTPError) are not caught here; they surface as
internal errors. There is no retry.
"""

from __future__ import annotations

import logging
from typing import Any

import httpx

from services.weather_api.weather.errors import UpstreamError

logger = logging.getLogger(__name__)

DEFAULT_ERROR_MESSAGE = "Failed to fetch data"


def _error_details(resp: httpx.Response) -> tuple[str | None, Any]:
    """Return (message, cod) from an error body, tolerating non-JSON bodies."""
    try:
        data = resp.json()
    except ValueError:
        return None, None
    if not isinstance(data, dict):
        return None, None
    return data.get("message") or None, data.get("cod")


class OpenWeatherClient:
    """
    Thin async wrapper around the OpenWeatherMap REST API.

    Usage:
        async with httpx.AsyncClient(timeout=5.0) as http:
            client = OpenWeatherClient(http, api_key="...")
            payload = await client.fetch("weather", {"q": "Paris"})
    """

    def __init__(
        self,
        http: httpx.AsyncClient,
        api_key: str,
        base_url: str = "https://api.openweathermap.org/data/2.5",
    ) -> None:
        """
        Args:
            http:     Shared httpx.AsyncClient, owned by the application lifespan.
            api_key:  OpenWeatherMap API key (OPENWEATHERMAP_API_KEY env var).
            base_url: API root without a trailing slash.
        """
        self._http = http
        self._api_key = api_key
        self._base_url = base_url.rstrip("/")

    async def fetch(
        self,
        endpoint: str,
        params: dict[str, Any],
        default_error: str = DEFAULT_ERROR_MESSAGE,
    ) -> Any:
        """
        GET {base_url}/{endpoint} and return the decoded JSON body.

        Raises:
            UpstreamError: the provider answered with a non-2xx status.
        """
        query = {**params, "appid": self._api_key, "units": "metric"}
        resp = await self._http.get(f"{self._base_url}/{endpoint}", params=query)

        if not resp.is_success:
            message, code = _error_details(resp)
            logger.warning(
                "OpenWeatherMap returned %d for endpoint=%s: %s",
                resp.status_code,
                endpoint,
                resp.text[:200],
            )
            raise UpstreamError(
                message or default_error,
                status_code=resp.status_code,
                code=code,
            )

        return resp.json()
