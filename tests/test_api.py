from __future__ import annotations

from datetime import UTC, datetime

import pytest
from fastapi.testclient import TestClient

from weatherbot.api.deps import get_recommendation_service, get_weather_service
from weatherbot.main import create_app
from weatherbot.services.availability_cache import AvailabilityCache
from weatherbot.services.recommendation_service import RecommendationService
from weatherbot.services.weather_cache import WeatherCache
from weatherbot.services.weather_client import WeatherServiceError
from weatherbot.services.weather_service import WeatherService

T0 = datetime(2025, 3, 1, 8, 0, tzinfo=UTC)

REQUEST_BODY = {
    "profile": {"id": "7yo-boy", "age": 7, "gender": "boy"},
    "weather": {
        "temperature": 30,
        "conditions": "Cloudy",
        "precipitationProbability": 10,
        "windSpeed": 5,
        "uvIndex": 1,
    },
    "prompt": "What should I wear to school?",
    "timeframe": "morning",
}


class FakeWeatherClient:
    def __init__(self, error: WeatherServiceError | None = None) -> None:
        self.error = error

    def fetch(self, lat: float, lon: float) -> dict:
        if self.error:
            raise self.error
        return {
            "current": {
                "main": {"temp": 61.4, "feels_like": 60, "humidity": 40},
                "wind": {"speed": 4},
                "weather": [{"icon": "01d", "description": "clear sky"}],
            },
            "forecast": {"list": [{"pop": 0.1}]},
        }


@pytest.fixture
def client_factory():
    def build(weather_client: FakeWeatherClient | None = None) -> TestClient:
        app = create_app()
        clock = lambda: T0  # noqa: E731
        service = RecommendationService(None, AvailabilityCache(clock=clock), clock=clock)
        weather = WeatherService(WeatherCache(clock=clock), weather_client or FakeWeatherClient(), timeout=1)
        app.dependency_overrides[get_recommendation_service] = lambda: service
        app.dependency_overrides[get_weather_service] = lambda: weather
        return TestClient(app)

    return build


def test_healthz(client_factory):
    resp = client_factory().get("/healthz")

    assert resp.status_code == 200
    assert resp.json() == {"status": "ok"}


def test_create_recommendation_returns_camel_case_result(client_factory):
    resp = client_factory().post("/api/recommendations", json=REQUEST_BODY)

    assert resp.status_code == 200
    body = resp.json()
    assert body["profileId"] == "7yo-boy"
    assert body["source"] == "rules"
    assert body["confidence"] == 0.85
    assert body["id"].startswith("rec-")
    assert body["recommendations"]["outerwear"][0]["item"] == "Warm winter coat"
    assert set(body["recommendations"]) >= {"baseLayers", "outerwear", "bottoms", "accessories", "footwear"}
    assert body["weatherData"]["precipitationProbability"] == 10
    assert body["spokenResponse"]


@pytest.mark.parametrize(
    "patch",
    [
        {"profile": {"id": "7yo-boy", "age": 5, "gender": "boy"}},
        {"profile": {"id": "7yo-boy", "age": 7, "gender": "robot"}},
        {"weather": {"temperature": 300, "conditions": "Cloudy"}},
        {"prompt": "x" * 501},
        {"timeframe": "midnight"},
    ],
)
def test_invalid_requests_are_rejected(client_factory, patch):
    body = {**REQUEST_BODY, **patch}

    resp = client_factory().post("/api/recommendations", json=body)

    assert resp.status_code == 422


def test_list_profiles(client_factory):
    resp = client_factory().get("/api/recommendations/profiles")

    assert resp.status_code == 200
    profiles = resp.json()["profiles"]
    assert [p["id"] for p in profiles] == ["4yo-girl", "7yo-boy", "10yo-boy"]
    assert profiles[0]["complexityLevel"] == "simple"
    assert profiles[0]["vocabularyStyle"] == "girl-typical"


def test_get_weather(client_factory):
    resp = client_factory().get("/api/weather", params={"lat": 42.36, "lon": -71.06})

    assert resp.status_code == 200
    body = resp.json()
    assert body["temperature"] == 61
    assert body["conditions"] == "Clear and sunny"
    assert body["isStale"] is False


def test_get_weather_upstream_error_maps_status(client_factory):
    client = client_factory(FakeWeatherClient(error=WeatherServiceError("weather_api_key_missing", 503)))

    resp = client.get("/api/weather", params={"lat": 42.36, "lon": -71.06})

    assert resp.status_code == 503
    assert resp.json()["detail"] == "weather_api_key_missing"


def test_get_weather_rejects_out_of_range_coordinates(client_factory):
    resp = client_factory().get("/api/weather", params={"lat": 120, "lon": 0})

    assert resp.status_code == 422


def test_weather_cache_status_and_clear(client_factory):
    client = client_factory()
    client.get("/api/weather", params={"lat": 42.36, "lon": -71.06})

    status = client.get("/api/weather/cache", params={"lat": 42.36, "lon": -71.06}).json()
    assert status["exists"] is True
    assert status["fresh"] is True
    assert status["ageSeconds"] == 0

    assert client.delete("/api/weather/cache").status_code == 204
    cleared = client.get("/api/weather/cache", params={"lat": 42.36, "lon": -71.06}).json()
    assert cleared["exists"] is False
