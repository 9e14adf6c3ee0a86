from __future__ import annotations

from weatherbot.schemas.recommendation import RecommendationRequest
from weatherbot.services.clothing_rules import format_number
from weatherbot.services.prompt_analysis import GENERAL_CONTEXT, PromptAnalysis


SYSTEM_PROMPT_RECOMMENDATION = """You are a clothing advisor for a {age} year old {gender}.
Use {language_style} language that is appropriate for this age.{young_hint}

Rules:
- Recommend practical clothing for the weather below. Use ONLY the provided weather values.
- Every category key must be present; use an empty array when nothing is needed.
- spokenResponse: one or two friendly sentences spoken directly to the child.

Output STRICT JSON only (no code fences, no extra keys):
{{"recommendations":{{"baseLayers":["..."],"outerwear":["..."],"bottoms":["..."],"accessories":["..."],"footwear":["..."]}},"spokenResponse":"..."}}
"""

LABELED_FORMAT_INSTRUCTIONS = """
Please recommend appropriate clothing for this child based on the weather and context.
Organize your response in the following format:

Base layers: [items]
Outerwear: [items]
Bottoms: [items]
Accessories: [items]
Footwear: [items]

Spoken: [A friendly, age-appropriate sentence or two explaining the recommendations]

Keep recommendations practical and appropriate for the child's age."""

YOUNG_CHILD_HINT = "For young children, prioritize easy-to-wear items with simple fasteners."


def language_style(age: int) -> str:
    if age < 6:
        return "simple, fun, and easy to understand"
    if age < 10:
        return "clear and friendly"
    return "straightforward"


def weather_lines(request: RecommendationRequest) -> list[str]:
    weather = request.weather
    lines = [f"- Temperature: {format_number(weather.temperature)}°F"]
    if weather.feels_like is not None:
        lines.append(f"- Feels like: {format_number(weather.feels_like)}°F")
    lines.append(f"- Conditions: {weather.conditions}")
    if weather.precipitation_probability is not None:
        lines.append(f"- Chance of precipitation: {format_number(weather.precipitation_probability)}%")
    if weather.wind_speed is not None:
        lines.append(f"- Wind speed: {format_number(weather.wind_speed)} mph")
    if weather.uv_index is not None:
        lines.append(f"- UV index: {format_number(weather.uv_index)}")
    return lines


def context_lines(request: RecommendationRequest, analysis: PromptAnalysis, timeframe: str) -> list[str]:
    lines: list[str] = []
    if request.prompt:
        lines.append(f"Context: {request.prompt}")
    if analysis.context != GENERAL_CONTEXT:
        lines.append(f"Activity: {analysis.context}")
    lines.append(f"Timeframe: {timeframe}")
    return lines


def build_json_prompt(request: RecommendationRequest, analysis: PromptAnalysis, timeframe: str) -> str:
    profile = request.profile
    system = SYSTEM_PROMPT_RECOMMENDATION.format(
        age=profile.age,
        gender=profile.gender,
        language_style=language_style(profile.age),
        young_hint=f"\n{YOUNG_CHILD_HINT}" if profile.age < 6 else "",
    )
    sections = [system, "Current weather conditions:", *weather_lines(request)]
    sections.extend(context_lines(request, analysis, timeframe))
    return "\n".join(sections)


def build_labeled_prompt(request: RecommendationRequest, analysis: PromptAnalysis, timeframe: str) -> str:
    profile = request.profile
    sections = [
        f"You are a helpful clothing advisor for a {profile.age} year old {profile.gender}.",
        f"Use {language_style(profile.age)} language that is appropriate for this age.",
        "",
        "Current weather conditions:",
        *weather_lines(request),
        "",
        *context_lines(request, analysis, timeframe),
        LABELED_FORMAT_INSTRUCTIONS,
    ]
    if profile.age < 6:
        sections.append(YOUNG_CHILD_HINT)
    return "\n".join(sections)
