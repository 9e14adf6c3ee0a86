"""Conversion of raw OpenWeather payloads into ``WeatherSnapshot``."""

from __future__ import annotations

import math
from datetime import datetime, timedelta
from typing import Any, Mapping

from pydantic import ValidationError

from weatherbot.schemas.weather import DEFAULT_CACHE_TTL, WeatherSnapshot


CONDITION_BY_ICON: dict[str, str] = {
    "01d": "Clear and sunny",
    "01n": "Clear",
    "02d": "Partly cloudy",
    "02n": "Partly cloudy",
    "03d": "Cloudy",
    "03n": "Cloudy",
    "04d": "Very cloudy",
    "04n": "Very cloudy",
    "09d": "Rainy",
    "09n": "Rainy",
    "10d": "Rainy",
    "10n": "Rainy",
    "11d": "Thunderstorms",
    "11n": "Thunderstorms",
    "13d": "Snowy",
    "13n": "Snowy",
    "50d": "Foggy",
    "50n": "Foggy",
}

# 3-hour slots; four of them cover the rest of a school day
FORECAST_SLOTS = 4


class WeatherPayloadError(ValueError):
    """Raised when an upstream payload lacks the fields a snapshot needs."""


def map_condition(icon: Any, description: Any) -> str:
    if isinstance(icon, str) and icon in CONDITION_BY_ICON:
        return CONDITION_BY_ICON[icon]
    if isinstance(description, str) and description:
        return description.capitalize()
    return "Unknown"


def round_half_up(value: float) -> int:
    """Round halves upward like JavaScript Math.round (32.5 -> 33, -2.5 -> -2)."""
    return math.floor(value + 0.5)


def precipitation_probability(forecast: Any, slots: int = FORECAST_SLOTS) -> float:
    entries = _mapping(forecast, "forecast").get("list") or []
    if not isinstance(entries, list):
        raise WeatherPayloadError("Forecast list must be an array")
    pops = [float(entry.get("pop") or 0) for entry in entries[:slots] if isinstance(entry, Mapping)]
    if not pops:
        return 0.0
    return float(round_half_up(max(pops) * 100))


def normalize_weather(
    payload: Mapping[str, Any],
    fetched_at: datetime,
    ttl: timedelta = DEFAULT_CACHE_TTL,
) -> WeatherSnapshot:
    current = payload.get("current") if isinstance(payload, Mapping) else None
    if not isinstance(current, Mapping):
        raise WeatherPayloadError("Weather payload is missing current conditions")

    main = _mapping(current.get("main"), "main")
    if main.get("temp") is None:
        raise WeatherPayloadError("Weather payload is missing temperature")
    wind = _mapping(current.get("wind"), "wind")
    entries = current.get("weather") or []
    summary = entries[0] if isinstance(entries, list) and entries and isinstance(entries[0], Mapping) else {}

    try:
        feels_like = main.get("feels_like")
        wind_speed = wind.get("speed")
        return WeatherSnapshot(
            temperature=round_half_up(float(main["temp"])),
            feels_like=round_half_up(float(feels_like)) if feels_like is not None else None,
            conditions=map_condition(summary.get("icon"), summary.get("description")),
            precipitation_probability=precipitation_probability(payload.get("forecast")),
            wind_speed=round_half_up(float(wind_speed)) if wind_speed is not None else None,
            uv_index=round_half_up(float(current.get("uvi") or 0)),
            humidity=main.get("humidity"),
            fetched_at=fetched_at,
            cache_expiry=fetched_at + ttl,
        )
    except (TypeError, ValueError, OverflowError, ValidationError) as exc:
        raise WeatherPayloadError(f"Invalid weather payload: {exc}") from exc


def _mapping(value: Any, name: str) -> Mapping[str, Any]:
    if value is None:
        return {}
    if not isinstance(value, Mapping):
        raise WeatherPayloadError(f"Weather payload field {name!r} must be an object")
    return value
