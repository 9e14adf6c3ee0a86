"""Extreme weather classification and fixed safety responses."""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum

from weatherbot.schemas.recommendation import Category, RecommendationSet
from weatherbot.schemas.weather import WeatherSnapshot


EXTREME_COLD_BELOW_F = 0
EXTREME_HEAT_ABOVE_F = 100
HIGH_WIND_ABOVE_MPH = 45
SEVERE_CONDITIONS: tuple[str, ...] = (
    "thunderstorm",
    "hurricane",
    "tornado",
    "severe",
    "blizzard",
    "ice storm",
)


class ExtremeWeather(str, Enum):
    NONE = "none"
    EXTREME_COLD = "extreme-cold"
    EXTREME_HEAT = "extreme-heat"
    HIGH_WINDS = "high-winds"
    SEVERE_STORM = "severe-storm"


@dataclass(frozen=True, slots=True)
class SafetyResponse:
    message: str
    # (category, text); a None category means the entry is an instruction, not clothing
    items: tuple[tuple[Category | None, str], ...]


SAFETY_RESPONSES: dict[ExtremeWeather, SafetyResponse] = {
    ExtremeWeather.EXTREME_COLD: SafetyResponse(
        message="The weather is extremely cold today. It might be safer to stay indoors if possible.",
        items=(
            ("outerwear", "Heavy winter coat"),
            ("base_layers", "Warm layers underneath"),
            ("footwear", "Insulated snow boots"),
            ("accessories", "Warm hat that covers ears"),
            ("accessories", "Insulated gloves"),
            ("accessories", "Scarf to cover face"),
        ),
    ),
    ExtremeWeather.EXTREME_HEAT: SafetyResponse(
        message="The weather is very hot today. Try to stay indoors during the hottest part of the day.",
        items=(
            ("base_layers", "Light, breathable clothing"),
            ("accessories", "Wide-brimmed hat"),
            ("accessories", "Sunglasses"),
            ("accessories", "Sunscreen"),
            ("accessories", "Plenty of water"),
        ),
    ),
    ExtremeWeather.HIGH_WINDS: SafetyResponse(
        message="Very strong winds today. Be careful outside and hold on to hats!",
        items=(
            ("outerwear", "Secure jacket with zipper"),
            ("base_layers", "No loose clothing"),
            ("footwear", "Sturdy shoes"),
        ),
    ),
    ExtremeWeather.SEVERE_STORM: SafetyResponse(
        message="There is severe weather today. It is safest to stay indoors.",
        items=(
            (None, "Stay inside"),
            (None, "Emergency kit ready"),
            (None, "Follow weather alerts"),
        ),
    ),
}


def classify(snapshot: WeatherSnapshot) -> ExtremeWeather:
    """Return the extreme-weather class, checked in priority order."""

    if snapshot.temperature < EXTREME_COLD_BELOW_F:
        return ExtremeWeather.EXTREME_COLD
    if snapshot.temperature > EXTREME_HEAT_ABOVE_F:
        return ExtremeWeather.EXTREME_HEAT
    if (snapshot.wind_speed or 0) > HIGH_WIND_ABOVE_MPH:
        return ExtremeWeather.HIGH_WINDS
    conditions = snapshot.conditions.lower()
    if any(keyword in conditions for keyword in SEVERE_CONDITIONS):
        return ExtremeWeather.SEVERE_STORM
    return ExtremeWeather.NONE


def safety_recommendation(kind: ExtremeWeather) -> RecommendationSet:
    safety = _safety_for(kind)
    recommendations = RecommendationSet()
    recommendations.add_note(safety.message)
    for category, text in safety.items:
        if category is None:
            recommendations.add_note(text)
        else:
            recommendations.add(category, text)
    return recommendations


def safety_spoken_response(kind: ExtremeWeather) -> str:
    safety = _safety_for(kind)
    items = ", ".join(text for _, text in safety.items)
    return f"Important safety message: {safety.message} {items}."


def _safety_for(kind: ExtremeWeather) -> SafetyResponse:
    if kind is ExtremeWeather.NONE:
        raise ValueError("No safety response for ordinary weather")
    return SAFETY_RESPONSES[kind]


__all__ = [
    "ExtremeWeather",
    "SAFETY_RESPONSES",
    "classify",
    "safety_recommendation",
    "safety_spoken_response",
]
