"""
Weather query — the validated form of an inbound request body.

Body shape:  {"city"?: str, "lat"?: number, "lon"?: number, "type"?: str}

Coordinates win when both are present and numeric; otherwise a non-blank city
is required. City names are trimmed and capped at 100 characters before they
reach the cache key or the upstream query.

Cache key format:
  coordinates  ->  "{lat:.2f},{lon:.2f}-{type}"   e.g. "51.51,-0.13-current"
  city         ->  "{city}-{type}"                e.g. "Paris-air_quality"

Rounding to 2 decimals (~1 km) means nearby coordinate requests share an entry.
"""

from __future__ import annotations

import math
from dataclasses import dataclass
from enum import Enum
from typing import Any

from services.weather_api.weather.errors import REQUIRED_LOCATION_MESSAGE, ValidationError

MAX_CITY_LENGTH = 100


class DataType(str, Enum):
    current = "current"
    forecast = "forecast"
    air_quality = "air_quality"

    @property
    def endpoint(self) -> str:
        """OpenWeatherMap path segment serving this data type."""
        return _ENDPOINTS[self]


_ENDPOINTS = {
    DataType.current: "weather",
    DataType.forecast: "forecast",
    DataType.air_quality: "air_pollution",
}


@dataclass(frozen=True)
class Coordinates:
    lat: float
    lon: float

    def as_params(self) -> dict[str, float]:
        return {"lat": self.lat, "lon": self.lon}


def _is_number(value: Any) -> bool:
    # bool is an int subclass; JSON true/false is not a coordinate
    if isinstance(value, bool) or not isinstance(value, (int, float)):
        return False
    try:
        return math.isfinite(float(value))
    except OverflowError:
        # JSON integers beyond float range
        return False


def _sanitize_city(value: Any) -> str | None:
    if not isinstance(value, str):
        return None
    city = value.strip()
    return city[:MAX_CITY_LENGTH] if city else None


@dataclass(frozen=True)
class WeatherQuery:
    """A request descriptor with exactly one usable location form."""

    type: DataType = DataType.current
    city: str | None = None
    coords: Coordinates | None = None

    @classmethod
    def from_body(cls, body: Any) -> "WeatherQuery":
        """Validate a decoded JSON body.

        Raises ValidationError when the body is not an object, carries neither
        a city nor numeric lat/lon, or names an unknown data type.
        """
        if not isinstance(body, dict):
            raise ValidationError(REQUIRED_LOCATION_MESSAGE)

        raw_type = body.get("type")
        if raw_type is None:
            data_type = DataType.current
        else:
            try:
                data_type = DataType(raw_type)
            except (TypeError, ValueError):
                raise ValidationError(f"Unsupported data type: {raw_type}") from None

        lat, lon = body.get("lat"), body.get("lon")
        if _is_number(lat) and _is_number(lon):
            return cls(type=data_type, coords=Coordinates(float(lat), float(lon)))

        city = _sanitize_city(body.get("city"))
        if city is not None:
            return cls(type=data_type, city=city)

        raise ValidationError(REQUIRED_LOCATION_MESSAGE)

    @property
    def cache_key(self) -> str:
        if self.coords is not None:
            return f"{self.coords.lat:.2f},{self.coords.lon:.2f}-{self.type.value}"
        return f"{self.city}-{self.type.value}"

    @property
    def needs_resolution(self) -> bool:
        """Air pollution is only served by coordinates."""
        return self.type is DataType.air_quality and self.coords is None

    def location_params(self) -> dict[str, Any]:
        if self.coords is not None:
            return self.coords.as_params()
        return {"q": self.city}
