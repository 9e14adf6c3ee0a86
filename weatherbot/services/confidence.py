from __future__ import annotations

from weatherbot.schemas.weather import WeatherSnapshot


LLM_CONFIDENCE = 0.95
RULES_BASE_CONFIDENCE = 0.85
EXTREME_CONFIDENCE = 1.0

MIN_CONFIDENCE = 0.5
MAX_CONFIDENCE = 1.0
STALE_PENALTY = 0.2
MISSING_TEMPERATURE_PENALTY = 0.3
MISSING_FIELD_PENALTY = 0.1


def score_weather_quality(
    *,
    temperature: float | None,
    precipitation_probability: float | None,
    wind_speed: float | None,
    is_stale: bool = False,
) -> float:
    confidence = 1.0
    if is_stale:
        confidence -= STALE_PENALTY
    if temperature is None:
        confidence -= MISSING_TEMPERATURE_PENALTY
    if precipitation_probability is None:
        confidence -= MISSING_FIELD_PENALTY
    if wind_speed is None:
        confidence -= MISSING_FIELD_PENALTY
    return _clamp(round(confidence, 4), MIN_CONFIDENCE, MAX_CONFIDENCE)


def score_snapshot(snapshot: WeatherSnapshot) -> float:
    return score_weather_quality(
        temperature=snapshot.temperature,
        precipitation_probability=snapshot.precipitation_probability,
        wind_speed=snapshot.wind_speed,
        is_stale=snapshot.is_stale,
    )


def rules_confidence(snapshot: WeatherSnapshot) -> float:
    """Rule results start at the rules baseline and only go down with poor data."""

    return min(RULES_BASE_CONFIDENCE, score_snapshot(snapshot))


def _clamp(value: float, min_value: float, max_value: float) -> float:
    return max(min_value, min(max_value, value))
