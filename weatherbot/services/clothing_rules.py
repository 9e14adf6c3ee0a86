"""Deterministic weather-to-clothing rule engine."""

from __future__ import annotations

from weatherbot.schemas.profile import Profile
from weatherbot.schemas.recommendation import ClothingItem, RecommendationSet
from weatherbot.schemas.weather import WeatherSnapshot
from weatherbot.services.extreme_weather import ExtremeWeather, classify, safety_recommendation


# Temperature bands are half-open: [low, high)
COLD_BELOW_F = 40
COOL_BELOW_F = 60
MODERATE_BELOW_F = 75

RAIN_PROBABILITY_ABOVE = 50
STRONG_WIND_ABOVE_MPH = 30
BREEZY_WIND_ABOVE_MPH = 15
WARM_ABOVE_F = 70
HIGH_UV_ABOVE = 6
MODERATE_UV_ABOVE = 3
YOUNG_CHILD_MAX_AGE = 5

CONFLICT_COLD_BELOW_F = 50
CONFLICT_UV_ABOVE = 5

SUNNY_CHANGE_NOTE = "The weather might change! It looks sunny now but rain is likely later."
WARM_WINDY_NOTE = "It's warm but windy. You might want a light jacket that's easy to take off."
COLD_SUNNY_NOTE = "Even though it's cold, the sun is strong. Protect your eyes!"
STRONG_WIND_NOTE = "It's very windy today. Zip up your jacket and hold on to your hat!"
BREEZY_NOTE = "It's a little breezy today, so hats might blow away."


def recommend(snapshot: WeatherSnapshot, profile: Profile) -> RecommendationSet:
    """Map a weather snapshot and profile to a categorized recommendation.

    Extreme weather replaces the whole output with the fixed safety set;
    otherwise layers run in order: temperature band, precipitation, wind, UV,
    then the conflict resolver.
    """

    extreme = classify(snapshot)
    if extreme is not ExtremeWeather.NONE:
        return safety_recommendation(extreme)

    recommendations = RecommendationSet()
    _apply_temperature_band(recommendations, snapshot.temperature, profile)
    _apply_precipitation(recommendations, snapshot)
    _apply_wind(recommendations, snapshot)
    _apply_uv(recommendations, snapshot)
    resolve_conflicts(recommendations, snapshot)
    return recommendations


def temperature_band(temperature: float) -> str:
    if temperature < COLD_BELOW_F:
        return "cold"
    if temperature < COOL_BELOW_F:
        return "cool"
    if temperature < MODERATE_BELOW_F:
        return "moderate"
    return "hot"


def _apply_temperature_band(recs: RecommendationSet, temperature: float, profile: Profile) -> None:
    young = profile.age <= YOUNG_CHILD_MAX_AGE
    girl = profile.is_girl
    band = temperature_band(temperature)

    if band == "cold":
        recs.add("base_layers", "Long-sleeve shirt or thermal", "To stay warm")
        recs.add("outerwear", "Warm winter coat", "It's very cold outside")
        if young:
            bottoms = "Pull-on pants or leggings"
        else:
            bottoms = "Warm pants or leggings" if girl else "Warm pants or jeans"
        recs.add("bottoms", bottoms, "To keep your legs warm")
        recs.add("accessories", "Warm hat", "To keep your head warm")
        recs.add("accessories", "Mittens" if young else "Gloves", "To keep your hands warm")
        recs.add("footwear", "Warm boots with easy fasteners" if young else "Warm boots", "To keep your feet warm")
    elif band == "cool":
        recs.add("base_layers", "Long-sleeve shirt", "For comfort")
        recs.add("outerwear", "Light jacket or hoodie", "In case it gets cooler")
        if young:
            bottoms = "Pull-on pants or leggings" if girl else "Pull-on pants"
        else:
            bottoms = "Pants or leggings" if girl else "Pants or jeans"
        recs.add("bottoms", bottoms, "Good for playing")
        recs.add(
            "footwear",
            "Sneakers with velcro" if young else "Sneakers or closed-toe shoes",
            "Good for running around",
        )
    elif band == "moderate":
        recs.add("base_layers", "T-shirt", "It's nice outside")
        recs.add(
            "bottoms",
            "Shorts, skirt, or capris" if girl else "Shorts or light pants",
            "Comfortable for the weather",
        )
        recs.add("footwear", "Sneakers or slip-on shoes" if young else "Sneakers", "Perfect for playing")
    else:
        recs.add("base_layers", "Light t-shirt or tank top", "To stay cool")
        recs.add("bottoms", "Shorts or a sundress" if girl else "Shorts", "It's hot outside")
        recs.add(
            "footwear",
            "Sandals with easy straps" if young else "Sandals or breathable sneakers",
            "To keep your feet cool",
        )


def _is_rainy(snapshot: WeatherSnapshot) -> bool:
    probability = snapshot.precipitation_probability or 0
    return probability > RAIN_PROBABILITY_ABOVE or "rain" in snapshot.conditions.lower()


def _apply_precipitation(recs: RecommendationSet, snapshot: WeatherSnapshot) -> None:
    if not _is_rainy(snapshot):
        return
    recs.add("outerwear", "Raincoat or poncho", "To stay dry")
    recs.add("accessories", "Umbrella", "Protection from rain")
    # rain boots win over whatever the temperature band chose
    recs.replace("footwear", [ClothingItem(item="Rain boots", reason="To keep your feet dry")])


def _apply_wind(recs: RecommendationSet, snapshot: WeatherSnapshot) -> None:
    wind = snapshot.wind_speed or 0
    if wind > STRONG_WIND_ABOVE_MPH:
        recs.add("outerwear", "Windbreaker", "To block the strong wind")
        recs.add_note(STRONG_WIND_NOTE)
    elif wind > BREEZY_WIND_ABOVE_MPH and snapshot.temperature > WARM_ABOVE_F:
        recs.add_note(BREEZY_NOTE)


def _apply_uv(recs: RecommendationSet, snapshot: WeatherSnapshot) -> None:
    uv = snapshot.uv_index or 0
    if uv > HIGH_UV_ABOVE:
        uv_text = format_number(uv)
        recs.add("accessories", "Sunglasses", "Protect your eyes from the sun")
        recs.add("accessories", "Hat with brim", "Sun protection")
        recs.add("accessories", "Sunscreen", f"The UV index is {uv_text} - sun protection is important!")
        recs.add_note(f"The UV index is {uv_text} today, so wear sunscreen and a hat!")
    elif uv > MODERATE_UV_ABOVE:
        recs.add("accessories", "Sunscreen", "Some sun protection recommended")


def resolve_conflicts(recs: RecommendationSet, snapshot: WeatherSnapshot) -> RecommendationSet:
    """Patch contradictions the single-signal layers cannot see jointly."""

    conditions = snapshot.conditions.lower()
    wind = snapshot.wind_speed or 0
    uv = snapshot.uv_index or 0
    probability = snapshot.precipitation_probability or 0

    sunny = "clear" in conditions or "sunny" in conditions
    if sunny and probability > RAIN_PROBABILITY_ABOVE:
        recs.add("accessories", "Umbrella", "Rain is likely later")
        recs.add_note(SUNNY_CHANGE_NOTE)

    if snapshot.temperature > WARM_ABOVE_F and wind > BREEZY_WIND_ABOVE_MPH:
        recs.add_note(WARM_WINDY_NOTE)

    if snapshot.temperature < CONFLICT_COLD_BELOW_F and uv > CONFLICT_UV_ABOVE:
        recs.add("accessories", "Sunglasses", "The sun is strong even though it's cold")
        recs.add_note(COLD_SUNNY_NOTE)
    return recs


def temperature_description(temperature: float) -> str:
    if temperature < 32:
        return "very cold"
    if temperature < 45:
        return "cold"
    if temperature < 60:
        return "chilly"
    if temperature < 70:
        return "nice"
    if temperature < 80:
        return "warm"
    if temperature < 90:
        return "hot"
    return "very hot"


def build_spoken_response(snapshot: WeatherSnapshot, recs: RecommendationSet) -> str:
    parts: list[str] = []
    temperature = format_number(snapshot.temperature)
    sentence = f"It's {temperature_description(snapshot.temperature)} today at {temperature} degrees"
    if snapshot.feels_like is not None and round(snapshot.feels_like) != round(snapshot.temperature):
        sentence += f", but it feels like {format_number(snapshot.feels_like)}"
    parts.append(sentence + ".")
    parts.append(f"The weather is {snapshot.conditions.lower()}.")

    wear: list[str] = []
    if recs.outerwear:
        wear.append(format_list(recs.names("outerwear")))
    if recs.base_layers:
        wear.append(format_list(recs.names("base_layers")))
    if recs.bottoms:
        wear.append(format_list(recs.names("bottoms")))
    if wear:
        parts.append(f"You should wear {', and '.join(wear)}.")
    if recs.footwear:
        parts.append(f"For your feet, wear {format_list(recs.names('footwear'))}.")
    if recs.accessories:
        parts.append(f"Don't forget {format_list(recs.names('accessories'))}!")
    parts.extend(recs.special_notes)
    parts.append("Have a great day!")
    return " ".join(parts)


def format_list(items: list[str]) -> str:
    lowered = [item.lower() for item in items]
    if not lowered:
        return ""
    if len(lowered) == 1:
        return lowered[0]
    if len(lowered) == 2:
        return f"{lowered[0]} and {lowered[1]}"
    return f"{', '.join(lowered[:-1])}, and {lowered[-1]}"


def format_number(value: float) -> str:
    if float(value).is_integer():
        return str(int(value))
    return f"{value:g}"


__all__ = [
    "build_spoken_response",
    "format_list",
    "recommend",
    "resolve_conflicts",
    "temperature_band",
    "temperature_description",
]
