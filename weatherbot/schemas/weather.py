from __future__ import annotations

from datetime import datetime, timedelta

from pydantic import BaseModel, ConfigDict, Field, model_validator
from pydantic.alias_generators import to_camel


DEFAULT_CACHE_TTL = timedelta(hours=1)


class WeatherSnapshot(BaseModel):
    """Point-in-time weather reading used as decision input (imperial units)."""

    model_config = ConfigDict(frozen=True, populate_by_name=True, alias_generator=to_camel)

    temperature: float = Field(ge=-100, le=150)
    feels_like: float | None = Field(default=None, ge=-150, le=200)
    conditions: str = Field(min_length=1)
    precipitation_probability: float | None = Field(default=None, ge=0, le=100)
    wind_speed: float | None = Field(default=None, ge=0)
    uv_index: float | None = Field(default=None, ge=0)
    humidity: float | None = Field(default=None, ge=0, le=100)
    fetched_at: datetime | None = None
    cache_expiry: datetime | None = None
    is_stale: bool = False

    @model_validator(mode="after")
    def check_expiry(self) -> "WeatherSnapshot":
        if self.fetched_at and self.cache_expiry and self.cache_expiry <= self.fetched_at:
            raise ValueError("cacheExpiry must be after fetchedAt")
        return self

    @property
    def expires_at(self) -> datetime | None:
        if self.cache_expiry is not None:
            return self.cache_expiry
        if self.fetched_at is not None:
            return self.fetched_at + DEFAULT_CACHE_TTL
        return None

    def is_fresh(self, now: datetime) -> bool:
        expires_at = self.expires_at
        return expires_at is not None and now < expires_at

    def as_stale(self) -> "WeatherSnapshot":
        return self.model_copy(update={"is_stale": True})


class WeatherCacheStatus(BaseModel):
    model_config = ConfigDict(populate_by_name=True, alias_generator=to_camel)

    exists: bool
    fresh: bool = False
    age_seconds: float | None = None
    fetched_at: datetime | None = None
    expires_at: datetime | None = None
