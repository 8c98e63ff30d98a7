"""
Weather proxy package.

Provides the OpenWeatherMap client, per-type in-memory caches, city-to-coordinate
resolution and the cache-first WeatherService that ties them together.
"""

from services.weather_api.weather.cache import CacheStore, WeatherCaches
from services.weather_api.weather.client import OpenWeatherClient
from services.weather_api.weather.query import DataType, WeatherQuery
from services.weather_api.weather.resolver import LocationResolver
from services.weather_api.weather.service import FetchResult, WeatherService

__all__ = [
    "CacheStore",
    "DataType",
    "FetchResult",
    "LocationResolver",
    "OpenWeatherClient",
    "WeatherCaches",
    "WeatherQuery",
    "WeatherService",
]
