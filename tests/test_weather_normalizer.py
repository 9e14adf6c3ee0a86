from __future__ import annotations

from datetime import UTC, datetime, timedelta

import pytest

from weatherbot.services.weather_normalizer import (
    WeatherPayloadError,
    map_condition,
    normalize_weather,
    round_half_up,
)

FETCHED = datetime(2025, 3, 1, 8, 0, tzinfo=UTC)


def _payload() -> dict:
    return {
        "current": {
            "main": {"temp": 41.6, "feels_like": 35.2, "humidity": 70},
            "wind": {"speed": 12.4},
            "weather": [{"icon": "10d", "description": "light rain"}],
        },
        "forecast": {
            "list": [
                {"pop": 0.2},
                {"pop": 0.65},
                {"pop": 0.4},
                {"pop": 0.1},
                {"pop": 0.99},
            ]
        },
    }


def test_normalize_weather_rounds_and_maps_fields():
    snapshot = normalize_weather(_payload(), fetched_at=FETCHED)

    assert snapshot.temperature == 42
    assert snapshot.feels_like == 35
    assert snapshot.wind_speed == 12
    assert snapshot.conditions == "Rainy"
    assert snapshot.humidity == 70
    assert snapshot.uv_index == 0
    assert snapshot.precipitation_probability == 65
    assert snapshot.fetched_at == FETCHED
    assert snapshot.cache_expiry == FETCHED + timedelta(hours=1)
    assert not snapshot.is_stale


def test_custom_ttl_sets_expiry():
    snapshot = normalize_weather(_payload(), fetched_at=FETCHED, ttl=timedelta(minutes=10))

    assert snapshot.cache_expiry == FETCHED + timedelta(minutes=10)


def test_missing_forecast_means_zero_precipitation():
    payload = _payload()
    del payload["forecast"]

    assert normalize_weather(payload, fetched_at=FETCHED).precipitation_probability == 0


def test_map_condition_falls_back_to_description_then_unknown():
    assert map_condition("01d", "clear sky") == "Clear and sunny"
    assert map_condition("99x", "volcanic ash") == "Volcanic ash"
    assert map_condition(None, None) == "Unknown"


@pytest.mark.parametrize(
    "payload",
    [
        {},
        {"current": {"main": {}}},
        {"current": {"main": {"temp": "hot"}}},
        {"current": {"main": {"temp": 500}}},
        {"current": {"main": ["garbage"]}},
        {"current": {"main": {"temp": 50}, "wind": "x"}},
        {"current": {"main": {"temp": 50}}, "forecast": [{"pop": 0.5}]},
        {"current": {"main": {"temp": 50}}, "forecast": {"list": "soon"}},
    ],
)
def test_invalid_payloads_raise(payload):
    with pytest.raises(WeatherPayloadError):
        normalize_weather(payload, fetched_at=FETCHED)


def test_odd_summary_shapes_fall_back_to_unknown():
    payload = {"current": {"main": {"temp": 50}, "weather": [["10d"]]}}

    assert normalize_weather(payload, fetched_at=FETCHED).conditions == "Unknown"
    assert map_condition(["10d"], {"text": "rain"}) == "Unknown"


@pytest.mark.parametrize(("value", "expected"), [(32.5, 33), (-2.5, -2), (41.49, 41), (0.5, 1)])
def test_round_half_up_matches_browser_rounding(value, expected):
    assert round_half_up(value) == expected


def test_half_degree_temperatures_round_up():
    payload = _payload()
    payload["current"]["main"]["temp"] = 32.5
    payload["forecast"] = {"list": [{"pop": 0.125}]}

    snapshot = normalize_weather(payload, fetched_at=FETCHED)

    assert snapshot.temperature == 33
    assert snapshot.precipitation_probability == 13
