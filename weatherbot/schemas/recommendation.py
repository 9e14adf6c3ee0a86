from __future__ import annotations

from datetime import datetime
from enum import Enum
from typing import Any, Literal

from pydantic import BaseModel, ConfigDict, Field, field_validator, model_validator
from pydantic.alias_generators import to_camel

from weatherbot.schemas.profile import PROFILE_IDS, Profile
from weatherbot.schemas.weather import WeatherSnapshot


Category = Literal["base_layers", "outerwear", "bottoms", "accessories", "footwear"]
CATEGORIES: tuple[Category, ...] = ("base_layers", "outerwear", "bottoms", "accessories", "footwear")

Timeframe = Literal["morning", "afternoon", "evening", "today"]


class ResultSource(str, Enum):
    RULES = "rules"
    LLM = "llm"


class ClothingItem(BaseModel):
    """A single recommended item. Bare strings are accepted and become ``item``."""

    model_config = ConfigDict(frozen=True)

    item: str = Field(min_length=1)
    reason: str | None = None

    @model_validator(mode="before")
    @classmethod
    def coerce_text(cls, data: Any) -> Any:
        if isinstance(data, str):
            return {"item": data}
        return data

    def matches(self, name: str) -> bool:
        return self.item.strip().lower() == name.strip().lower()


class RecommendationSet(BaseModel):
    model_config = ConfigDict(populate_by_name=True, alias_generator=to_camel)

    base_layers: list[ClothingItem] = Field(default_factory=list)
    outerwear: list[ClothingItem] = Field(default_factory=list)
    bottoms: list[ClothingItem] = Field(default_factory=list)
    accessories: list[ClothingItem] = Field(default_factory=list)
    footwear: list[ClothingItem] = Field(default_factory=list)
    special_notes: list[str] = Field(default_factory=list)

    @field_validator("base_layers", "outerwear", "bottoms", "accessories", "footwear", mode="before")
    @classmethod
    def drop_none(cls, value: Any) -> Any:
        if value is None:
            return []
        return value

    def items(self, category: Category) -> list[ClothingItem]:
        return getattr(self, category)

    def names(self, category: Category) -> list[str]:
        return [entry.item for entry in self.items(category)]

    def contains(self, category: Category, name: str) -> bool:
        return any(entry.matches(name) for entry in self.items(category))

    def add(self, category: Category, item: str, reason: str | None = None) -> bool:
        if self.contains(category, item):
            return False
        self.items(category).append(ClothingItem(item=item, reason=reason))
        return True

    def replace(self, category: Category, items: list[ClothingItem]) -> None:
        setattr(self, category, list(items))

    def add_note(self, note: str) -> bool:
        if note in self.special_notes:
            return False
        self.special_notes.append(note)
        return True

    def is_empty(self) -> bool:
        return not any(self.items(category) for category in CATEGORIES)


class RecommendationRequest(BaseModel):
    model_config = ConfigDict(populate_by_name=True, alias_generator=to_camel)

    profile: Profile
    weather: WeatherSnapshot
    prompt: str | None = Field(default=None, max_length=500)
    timeframe: Timeframe | None = None

    @field_validator("profile")
    @classmethod
    def known_profile(cls, value: Profile) -> Profile:
        if value.id not in PROFILE_IDS:
            raise ValueError(f"Profile ID must be one of: {', '.join(PROFILE_IDS)}")
        return value


class RecommendationResult(BaseModel):
    model_config = ConfigDict(frozen=True, populate_by_name=True, alias_generator=to_camel)

    id: str
    profile_id: str
    weather_data: WeatherSnapshot
    recommendations: RecommendationSet
    spoken_response: str
    source: ResultSource
    confidence: float = Field(ge=0.0, le=1.0)
    created_at: datetime
    processing_time_ms: int = 0


class ProfilesResponse(BaseModel):
    profiles: list[Profile]
