from __future__ import annotations

from functools import lru_cache

from weatherbot.core.cache import get_redis
from weatherbot.core.config import settings
from weatherbot.services.availability_cache import AvailabilityCache
from weatherbot.services.llm_generator import build_generator
from weatherbot.services.recommendation_service import RecommendationService
from weatherbot.services.weather_cache import InMemoryWeatherStore, RedisWeatherStore, WeatherCache
from weatherbot.services.weather_service import WeatherService


@lru_cache
def get_recommendation_service() -> RecommendationService:
    return RecommendationService(
        build_generator(settings),
        AvailabilityCache(ttl_seconds=settings.llm_availability_ttl_seconds),
    )


@lru_cache
def get_weather_service() -> WeatherService:
    if settings.weather_cache_backend == "redis":
        store = RedisWeatherStore(get_redis(), prefix=settings.redis_key_prefix)
    else:
        store = InMemoryWeatherStore()
    cache = WeatherCache(
        store,
        max_entries=settings.weather_cache_max_entries,
        ttl_seconds=settings.weather_cache_ttl_seconds,
    )
    return WeatherService(cache)
