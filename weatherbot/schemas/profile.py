from __future__ import annotations

from typing import Any, Literal

from pydantic import BaseModel, ConfigDict, model_validator
from pydantic.alias_generators import to_camel


Age = Literal[4, 7, 10]
Gender = Literal["girl", "boy"]
ComplexityLevel = Literal["simple", "moderate", "complex"]
VocabularyStyle = Literal["girl-typical", "boy-typical"]

COMPLEXITY_BY_AGE: dict[int, ComplexityLevel] = {
    4: "simple",
    7: "moderate",
    10: "complex",
}


class Profile(BaseModel):
    """A child's profile. Complexity and vocabulary follow from age and gender."""

    model_config = ConfigDict(frozen=True, populate_by_name=True, alias_generator=to_camel)

    id: str
    age: Age
    gender: Gender
    complexity_level: ComplexityLevel
    vocabulary_style: VocabularyStyle
    display_name: str | None = None

    @model_validator(mode="before")
    @classmethod
    def derive_styles(cls, data: Any) -> Any:
        if not isinstance(data, dict):
            return data
        payload = dict(data)
        age = payload.get("age")
        gender = payload.get("gender")

        expected_complexity = COMPLEXITY_BY_AGE.get(age) if isinstance(age, int) else None
        complexity = payload.get("complexity_level", payload.get("complexityLevel"))
        if complexity is None:
            complexity = expected_complexity
        elif expected_complexity is not None and complexity != expected_complexity:
            raise ValueError(f'Complexity level "{complexity}" doesn\'t match age {age}')

        expected_vocabulary = f"{gender}-typical" if gender in ("girl", "boy") else None
        vocabulary = payload.get("vocabulary_style", payload.get("vocabularyStyle"))
        if vocabulary is None:
            vocabulary = expected_vocabulary
        elif expected_vocabulary is not None and vocabulary != expected_vocabulary:
            raise ValueError(f'Vocabulary style "{vocabulary}" doesn\'t match gender {gender}')

        payload.pop("complexityLevel", None)
        payload.pop("vocabularyStyle", None)
        payload["complexity_level"] = complexity
        payload["vocabulary_style"] = vocabulary
        return payload

    @property
    def is_simple(self) -> bool:
        return self.complexity_level == "simple"

    @property
    def is_girl(self) -> bool:
        return self.gender == "girl"


USER_PROFILES: tuple[Profile, ...] = (
    Profile(id="4yo-girl", age=4, gender="girl", display_name="4 year old girl - simple clothing, easy fasteners"),
    Profile(id="7yo-boy", age=7, gender="boy", display_name="7 year old boy - moderate complexity"),
    Profile(id="10yo-boy", age=10, gender="boy", display_name="10 year old boy - more complex clothing options"),
)

PROFILE_IDS: tuple[str, ...] = tuple(profile.id for profile in USER_PROFILES)


def get_profile(profile_id: str) -> Profile | None:
    for profile in USER_PROFILES:
        if profile.id == profile_id:
            return profile
    return None
