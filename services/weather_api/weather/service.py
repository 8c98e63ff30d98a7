"""
WeatherService — cache-first fetch orchestration for the weather proxy.

Cache strategy: one CacheStore per data type (WeatherCaches), keyed by the
normalised query key, so repeated lookups for the same city or the same
~1 km coordinate cell are served without an upstream call.

Flow for a validated WeatherQuery:
  1. Look up the store for query.type; on hit return {..., cached: true}
  2. Air quality by city: resolve the city to coordinates first
  3. Fetch the endpoint for query.type from OpenWeatherMap
  4. Store the raw payload and return it with cached: false

Upstream and resolution failures propagate as WeatherAPIError subclasses and
never touch the cache.

Concurrent misses for the same key each fetch upstream unless
collapse_inflight is enabled, in which case they share one fetch.
"""

from __future__ import annotations

import asyncio
import logging
from dataclasses import dataclass
from typing import Any

from services.weather_api.weather.cache import CacheStore, WeatherCaches
from services.weather_api.weather.client import OpenWeatherClient
from services.weather_api.weather.query import DataType, WeatherQuery
from services.weather_api.weather.resolver import LocationResolver

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class FetchResult:
    payload: Any
    cached: bool

    def to_body(self) -> dict[str, Any]:
        """Upstream payload with the `cached` flag merged in."""
        body = dict(self.payload) if isinstance(self.payload, dict) else {"data": self.payload}
        body["cached"] = self.cached
        return body


class WeatherService:
    """
    Usage:
        service = WeatherService(client, WeatherCaches(ttl_seconds=600, capacity=100))
        result = await service.handle(WeatherQuery.from_body(body))
        return result.to_body()
    """

    def __init__(
        self,
        client: OpenWeatherClient,
        caches: WeatherCaches,
        resolver: LocationResolver | None = None,
        collapse_inflight: bool = False,
    ) -> None:
        self._client = client
        self._caches = caches
        self._resolver = resolver or LocationResolver(client)
        self._collapse_inflight = collapse_inflight
        self._inflight: dict[tuple[DataType, str], asyncio.Future] = {}

    @property
    def caches(self) -> WeatherCaches:
        return self._caches

    async def handle(self, query: WeatherQuery) -> FetchResult:
        store = self._caches.for_type(query.type)
        key = query.cache_key

        cached = store.lookup(key)
        if cached is not None:
            return FetchResult(payload=cached, cached=True)

        if not self._collapse_inflight:
            payload = await self._fetch_and_store(query, store, key)
            return FetchResult(payload=payload, cached=False)

        inflight_key = (query.type, key.lower())
        task = self._inflight.get(inflight_key)
        if task is None:
            task = asyncio.ensure_future(self._fetch_and_store(query, store, key))
            self._inflight[inflight_key] = task
            task.add_done_callback(lambda done: self._forget(inflight_key, done))
        else:
            logger.debug("Joining in-flight %s fetch for key=%s", query.type.value, key)

        # shield: one caller going away must not cancel the fetch the others wait on
        payload = await asyncio.shield(task)
        return FetchResult(payload=payload, cached=False)

    def _forget(self, inflight_key: tuple[DataType, str], done: asyncio.Future) -> None:
        if self._inflight.get(inflight_key) is done:
            del self._inflight[inflight_key]

    async def _fetch_and_store(self, query: WeatherQuery, store: CacheStore, key: str) -> Any:
        params = query.location_params()
        if query.needs_resolution:
            coords = await self._resolver.resolve(query.city)
            params = coords.as_params()

        logger.info("Fetching %s data for %s from OpenWeatherMap", query.type.value, key)
        payload = await self._client.fetch(query.type.endpoint, params)

        store.store(key, payload)
        return payload
