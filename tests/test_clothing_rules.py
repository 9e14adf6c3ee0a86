from __future__ import annotations

from weatherbot.schemas.profile import get_profile
from weatherbot.schemas.weather import WeatherSnapshot
from weatherbot.services import clothing_rules
from weatherbot.services.clothing_rules import (
    BREEZY_NOTE,
    COLD_SUNNY_NOTE,
    STRONG_WIND_NOTE,
    SUNNY_CHANGE_NOTE,
    WARM_WINDY_NOTE,
    build_spoken_response,
    format_list,
    recommend,
    temperature_band,
    temperature_description,
)

BOY = get_profile("7yo-boy")
GIRL = get_profile("4yo-girl")
OLDER_BOY = get_profile("10yo-boy")

COAT_CLASS = ("coat", "jacket", "hoodie", "windbreaker", "raincoat")


def _snapshot(**overrides) -> WeatherSnapshot:
    data = {
        "temperature": 65,
        "conditions": "Cloudy",
        "precipitation_probability": 10,
        "wind_speed": 5,
        "uv_index": 1,
    }
    data.update(overrides)
    return WeatherSnapshot(**data)


def test_temperature_bands_are_half_open():
    assert temperature_band(39.9) == "cold"
    assert temperature_band(40) == "cool"
    assert temperature_band(59.9) == "cool"
    assert temperature_band(60) == "moderate"
    assert temperature_band(74.9) == "moderate"
    assert temperature_band(75) == "hot"


def test_cold_weather_for_young_child_uses_mittens_and_easy_boots():
    recs = recommend(_snapshot(temperature=30), GIRL)

    assert recs.names("outerwear") == ["Warm winter coat"]
    assert "Mittens" in recs.names("accessories")
    assert "Gloves" not in recs.names("accessories")
    assert recs.names("footwear") == ["Warm boots with easy fasteners"]
    assert recs.names("bottoms") == ["Pull-on pants or leggings"]


def test_cold_weather_for_older_child_uses_gloves():
    recs = recommend(_snapshot(temperature=30), BOY)

    assert recs.names("accessories") == ["Warm hat", "Gloves"]
    assert recs.names("footwear") == ["Warm boots"]
    assert recs.names("bottoms") == ["Warm pants or jeans"]


def test_moderate_weather_wording_follows_gender():
    assert recommend(_snapshot(temperature=70), GIRL).names("bottoms") == ["Shorts, skirt, or capris"]
    assert recommend(_snapshot(temperature=70), BOY).names("bottoms") == ["Shorts or light pants"]


def test_outerwear_is_heavier_at_30_than_at_80():
    cold = recommend(_snapshot(temperature=30), OLDER_BOY)
    hot = recommend(_snapshot(temperature=80), OLDER_BOY)

    assert cold.outerwear
    assert any(word in name.lower() for name in cold.names("outerwear") for word in COAT_CLASS)
    assert not any(word in name.lower() for name in hot.names("outerwear") for word in COAT_CLASS)


def test_rain_replaces_footwear_with_rain_boots():
    recs = recommend(_snapshot(temperature=55, conditions="Rainy", precipitation_probability=80), BOY)

    assert recs.names("footwear") == ["Rain boots"]
    assert recs.names("outerwear") == ["Light jacket or hoodie", "Raincoat or poncho"]
    assert "Umbrella" in recs.names("accessories")


def test_rain_in_conditions_triggers_precipitation_overlay_without_probability():
    recs = recommend(_snapshot(conditions="Light rain", precipitation_probability=None), BOY)

    assert recs.names("footwear") == ["Rain boots"]


def test_strong_wind_adds_windbreaker_and_note():
    recs = recommend(_snapshot(temperature=50, wind_speed=35), BOY)

    assert "Windbreaker" in recs.names("outerwear")
    assert STRONG_WIND_NOTE in recs.special_notes


def test_warm_breezy_day_adds_notes_only():
    recs = recommend(_snapshot(temperature=78, wind_speed=20), BOY)

    assert "Windbreaker" not in recs.names("outerwear")
    assert BREEZY_NOTE in recs.special_notes
    assert WARM_WINDY_NOTE in recs.special_notes


def test_high_uv_adds_sun_protection_citing_index():
    recs = recommend(_snapshot(temperature=80, uv_index=8), BOY)

    assert recs.names("accessories") == ["Sunglasses", "Hat with brim", "Sunscreen"]
    sunscreen = recs.accessories[2]
    assert "8" in sunscreen.reason
    assert any("UV index is 8" in note for note in recs.special_notes)


def test_moderate_uv_adds_sunscreen_only():
    recs = recommend(_snapshot(temperature=80, uv_index=5), BOY)

    assert recs.names("accessories") == ["Sunscreen"]


def test_sunny_with_likely_rain_adds_single_umbrella_and_note():
    recs = recommend(_snapshot(temperature=72, conditions="Clear and sunny", precipitation_probability=60), BOY)

    assert recs.names("accessories").count("Umbrella") == 1
    assert SUNNY_CHANGE_NOTE in recs.special_notes


def test_cold_sunny_day_adds_sunglasses():
    recs = recommend(_snapshot(temperature=45, uv_index=6), BOY)

    assert "Sunglasses" in recs.names("accessories")
    assert "Sunscreen" in recs.names("accessories")
    assert COLD_SUNNY_NOTE in recs.special_notes


def test_no_duplicate_items_within_a_category():
    recs = recommend(
        _snapshot(temperature=45, conditions="Clear, rain later", precipitation_probability=90, uv_index=9, wind_speed=40),
        BOY,
    )

    for category in ("base_layers", "outerwear", "bottoms", "accessories", "footwear"):
        names = [name.lower() for name in recs.names(category)]
        assert len(names) == len(set(names))


def test_recommend_is_deterministic():
    snapshot = _snapshot(temperature=72, wind_speed=18, uv_index=7, precipitation_probability=55)

    first = recommend(snapshot, GIRL)
    second = recommend(snapshot, GIRL)

    assert first.model_dump_json() == second.model_dump_json()


def test_resolve_conflicts_is_idempotent():
    snapshot = _snapshot(temperature=45, uv_index=7, conditions="Sunny", precipitation_probability=70)
    recs = recommend(snapshot, BOY)
    before = recs.model_dump()

    clothing_rules.resolve_conflicts(recs, snapshot)

    assert recs.model_dump() == before


def test_temperature_description_scale():
    assert temperature_description(20) == "very cold"
    assert temperature_description(40) == "cold"
    assert temperature_description(50) == "chilly"
    assert temperature_description(65) == "nice"
    assert temperature_description(75) == "warm"
    assert temperature_description(85) == "hot"
    assert temperature_description(95) == "very hot"


def test_spoken_response_mentions_feels_like_and_items():
    snapshot = _snapshot(temperature=30, feels_like=22)
    spoken = build_spoken_response(snapshot, recommend(snapshot, BOY))

    assert spoken.startswith("It's very cold today at 30 degrees, but it feels like 22.")
    assert "warm winter coat" in spoken
    assert "For your feet, wear warm boots." in spoken
    assert spoken.endswith("Have a great day!")


def test_format_list_uses_oxford_comma():
    assert format_list([]) == ""
    assert format_list(["Hat"]) == "hat"
    assert format_list(["Hat", "Gloves"]) == "hat and gloves"
    assert format_list(["Hat", "Gloves", "Scarf"]) == "hat, gloves, and scarf"
