"""Resolve a city name to coordinates via a current-weather lookup."""

from __future__ import annotations

import logging

from services.weather_api.weather.client import OpenWeatherClient
from services.weather_api.weather.errors import ResolutionError, UpstreamError
from services.weather_api.weather.query import Coordinates, DataType

logger = logging.getLogger(__name__)

CITY_NOT_FOUND_MESSAGE = "City not found"


class LocationResolver:
    """
    Turns a city into coordinates by reading `coord` from /weather.

    The lookup result is not cached; only the payload the caller finally
    asked for goes into a cache store.
    """

    def __init__(self, client: OpenWeatherClient) -> None:
        self._client = client

    async def resolve(self, city: str) -> Coordinates:
        try:
            payload = await self._client.fetch(
                DataType.current.endpoint,
                {"q": city},
                default_error=CITY_NOT_FOUND_MESSAGE,
            )
        except UpstreamError as exc:
            raise ResolutionError.from_upstream(exc) from exc

        coord = payload.get("coord") if isinstance(payload, dict) else None
        try:
            coords = Coordinates(lat=float(coord["lat"]), lon=float(coord["lon"]))
        except (TypeError, KeyError, ValueError):
            logger.warning("OpenWeatherMap /weather response for city=%r has no coord", city)
            raise ResolutionError(CITY_NOT_FOUND_MESSAGE, status_code=502) from None

        logger.debug("Resolved city=%r to lat=%s lon=%s", city, coords.lat, coords.lon)
        return coords
