"""Location-keyed weather snapshot cache with bounded size.

Entries are kept past their freshness window on purpose: an expired snapshot
is still the best answer when the upstream API is down, so freshness is
judged by the caller, and the only removal policy is size-based eviction
(oldest ``fetched_at`` first).
"""

from __future__ import annotations

import json
import logging
from dataclasses import dataclass
from datetime import datetime, timedelta
from typing import Protocol

import redis
from redis.exceptions import RedisError

from weatherbot.core.cache import Clock, utc_now
from weatherbot.schemas.weather import WeatherCacheStatus, WeatherSnapshot


logger = logging.getLogger(__name__)

DEFAULT_MAX_ENTRIES = 10

# Anything a store can throw at us that should degrade to a cache miss
STORE_ERRORS = (RedisError, OSError, ValueError, KeyError, TypeError)


def cache_key(lat: float, lon: float) -> str:
    return f"{lat:.2f},{lon:.2f}"


@dataclass(frozen=True, slots=True)
class WeatherCacheEntry:
    key: str
    data: WeatherSnapshot
    fetched_at: datetime


class WeatherStore(Protocol):
    def load(self, key: str) -> WeatherCacheEntry | None: ...

    def save(self, entry: WeatherCacheEntry) -> None: ...

    def delete(self, key: str) -> None: ...

    def clear(self) -> None: ...

    def keys_oldest_first(self) -> list[str]: ...


class InMemoryWeatherStore:
    def __init__(self) -> None:
        self._entries: dict[str, WeatherCacheEntry] = {}

    def load(self, key: str) -> WeatherCacheEntry | None:
        return self._entries.get(key)

    def save(self, entry: WeatherCacheEntry) -> None:
        self._entries[entry.key] = entry

    def delete(self, key: str) -> None:
        self._entries.pop(key, None)

    def clear(self) -> None:
        self._entries.clear()

    def keys_oldest_first(self) -> list[str]:
        ordered = sorted(self._entries.values(), key=lambda entry: entry.fetched_at)
        return [entry.key for entry in ordered]


class RedisWeatherStore:
    """One JSON value per location plus a sorted set scored by fetch time."""

    def __init__(self, client: redis.Redis, prefix: str = "weather") -> None:
        self._redis = client
        self._prefix = prefix
        self._index_key = f"{prefix}:index"

    def _value_key(self, key: str) -> str:
        return f"{self._prefix}:entry:{key}"

    def load(self, key: str) -> WeatherCacheEntry | None:
        raw = self._redis.get(self._value_key(key))
        if raw is None:
            return None
        decoded = json.loads(raw)
        return WeatherCacheEntry(
            key=key,
            data=WeatherSnapshot.model_validate(decoded["data"]),
            fetched_at=datetime.fromisoformat(decoded["fetchedAt"]),
        )

    def save(self, entry: WeatherCacheEntry) -> None:
        payload = json.dumps(
            {
                "data": entry.data.model_dump(mode="json", by_alias=True),
                "fetchedAt": entry.fetched_at.isoformat(),
            }
        )
        pipe = self._redis.pipeline()
        pipe.set(self._value_key(entry.key), payload)
        pipe.zadd(self._index_key, {entry.key: entry.fetched_at.timestamp()})
        pipe.execute()

    def delete(self, key: str) -> None:
        pipe = self._redis.pipeline()
        pipe.delete(self._value_key(key))
        pipe.zrem(self._index_key, key)
        pipe.execute()

    def clear(self) -> None:
        keys = self._redis.zrange(self._index_key, 0, -1)
        pipe = self._redis.pipeline()
        for key in keys:
            pipe.delete(self._value_key(key))
        pipe.delete(self._index_key)
        pipe.execute()

    def keys_oldest_first(self) -> list[str]:
        return list(self._redis.zrange(self._index_key, 0, -1))


class WeatherCache:
    def __init__(
        self,
        store: WeatherStore | None = None,
        *,
        max_entries: int = DEFAULT_MAX_ENTRIES,
        ttl_seconds: float = 3600,
        clock: Clock = utc_now,
    ) -> None:
        self.store = store if store is not None else InMemoryWeatherStore()
        self.max_entries = max_entries
        self.ttl = timedelta(seconds=ttl_seconds)
        self._clock = clock

    def now(self) -> datetime:
        return self._clock()

    def get(self, lat: float, lon: float) -> WeatherSnapshot | None:
        entry = self._load(cache_key(lat, lon))
        if entry is None:
            return None
        logger.debug("Weather cache hit for %s", entry.key)
        return entry.data

    def set(self, lat: float, lon: float, snapshot: WeatherSnapshot) -> WeatherSnapshot:
        key = cache_key(lat, lon)
        if snapshot.fetched_at is None:
            fetched_at = self._clock()
            snapshot = snapshot.model_copy(update={"fetched_at": fetched_at, "cache_expiry": fetched_at + self.ttl})
        entry = WeatherCacheEntry(key=key, data=snapshot, fetched_at=snapshot.fetched_at)
        try:
            self.store.save(entry)
            self._evict()
        except STORE_ERRORS as exc:
            logger.warning("Failed to write weather cache entry %s: %s", key, exc)
        return snapshot

    def remove(self, lat: float, lon: float) -> None:
        key = cache_key(lat, lon)
        try:
            self.store.delete(key)
        except STORE_ERRORS as exc:
            logger.warning("Failed to remove weather cache entry %s: %s", key, exc)

    def clear(self) -> None:
        try:
            self.store.clear()
        except STORE_ERRORS as exc:
            logger.warning("Failed to clear weather cache: %s", exc)

    def status(self, lat: float, lon: float) -> WeatherCacheStatus:
        entry = self._load(cache_key(lat, lon))
        if entry is None:
            return WeatherCacheStatus(exists=False)
        now = self._clock()
        return WeatherCacheStatus(
            exists=True,
            fresh=entry.data.is_fresh(now),
            age_seconds=(now - entry.fetched_at).total_seconds(),
            fetched_at=entry.fetched_at,
            expires_at=entry.data.expires_at,
        )

    def _load(self, key: str) -> WeatherCacheEntry | None:
        try:
            return self.store.load(key)
        except STORE_ERRORS as exc:
            logger.warning("Failed to read weather cache entry %s: %s", key, exc)
            return None

    def _evict(self) -> None:
        keys = self.store.keys_oldest_first()
        overflow = len(keys) - self.max_entries
        for key in keys[: max(overflow, 0)]:
            logger.debug("Evicting weather cache entry %s", key)
            self.store.delete(key)
