from __future__ import annotations

import asyncio
import logging

from weatherbot.core.config import settings
from weatherbot.schemas.weather import WeatherCacheStatus, WeatherSnapshot
from weatherbot.services.weather_cache import WeatherCache
from weatherbot.services.weather_client import OpenWeatherClient, WeatherServiceError
from weatherbot.services.weather_normalizer import WeatherPayloadError, normalize_weather


logger = logging.getLogger(__name__)


class WeatherService:
    """Serves current weather from cache first, upstream second, stale cache last."""

    def __init__(
        self,
        cache: WeatherCache,
        client: OpenWeatherClient | None = None,
        *,
        timeout: float | None = None,
    ) -> None:
        self.cache = cache
        self.client = client or OpenWeatherClient()
        self.timeout = timeout if timeout is not None else settings.weather_timeout_sec

    async def get_current_weather(self, lat: float, lon: float) -> WeatherSnapshot:
        validate_location(lat, lon)

        cached = self.cache.get(lat, lon)
        if cached is not None and cached.is_fresh(self.cache.now()):
            return cached

        try:
            snapshot = await self._fetch(lat, lon)
        except WeatherServiceError as exc:
            fallback = self.cache.get(lat, lon)
            if fallback is None:
                raise
            logger.info("Serving stale weather for %.2f,%.2f after upstream failure: %s", lat, lon, exc.code)
            return fallback.as_stale()

        return self.cache.set(lat, lon, snapshot)

    def get_cache_status(self, lat: float, lon: float) -> WeatherCacheStatus:
        return self.cache.status(lat, lon)

    def clear_cache(self) -> None:
        self.cache.clear()

    async def _fetch(self, lat: float, lon: float) -> WeatherSnapshot:
        # The client timeout bounds each call; wait_for bounds the pair
        try:
            payload = await asyncio.wait_for(
                asyncio.to_thread(self.client.fetch, lat, lon),
                timeout=self.timeout * 2,
            )
        except asyncio.TimeoutError as exc:
            logger.warning("Weather fetch for %.2f,%.2f timed out", lat, lon)
            raise WeatherServiceError("weather_api_timeout", status_code=503) from exc
        except WeatherServiceError:
            raise
        except Exception as exc:
            logger.warning("Weather fetch for %.2f,%.2f failed unexpectedly: %s", lat, lon, exc)
            raise WeatherServiceError("weather_api_error", status_code=502) from exc

        try:
            return normalize_weather(payload, fetched_at=self.cache.now(), ttl=self.cache.ttl)
        except (WeatherPayloadError, AttributeError, KeyError, IndexError) as exc:
            logger.warning("Discarding unusable weather payload: %s", exc)
            raise WeatherServiceError("weather_api_error", status_code=502) from exc


def validate_location(lat: float, lon: float) -> None:
    if not -90 <= lat <= 90 or not -180 <= lon <= 180:
        raise WeatherServiceError("invalid_location", status_code=400)
