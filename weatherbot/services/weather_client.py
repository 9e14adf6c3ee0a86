from __future__ import annotations

import logging
from typing import Any, Dict

import requests

from weatherbot.core.config import settings


logger = logging.getLogger(__name__)


class WeatherServiceError(Exception):
    """Raised when current weather cannot be obtained from upstream."""

    def __init__(self, code: str, status_code: int = 503) -> None:
        super().__init__(code)
        self.code = code
        self.status_code = status_code


class OpenWeatherClient:
    """Fetches OpenWeather current conditions plus the short-range forecast."""

    def __init__(
        self,
        api_key: str | None = None,
        base_url: str | None = None,
        session: requests.Session | None = None,
    ) -> None:
        self.api_key = api_key or settings.weather_api_key
        self.base_url = (base_url or settings.weather_api_base_url).rstrip("/")
        self.units = settings.weather_units
        self.timeout = settings.weather_timeout_sec
        self.session = session or requests.Session()

    def fetch(self, lat: float, lon: float) -> Dict[str, Any]:
        """Return ``{"current": ..., "forecast": ...}`` raw payloads for a location."""
        if not self.api_key:
            raise WeatherServiceError("weather_api_key_missing", status_code=503)

        params = {"lat": lat, "lon": lon, "units": self.units, "appid": self.api_key}
        return {
            "current": self._get("weather", params),
            "forecast": self._get("forecast", params),
        }

    def _get(self, path: str, params: Dict[str, Any]) -> Dict[str, Any]:
        try:
            resp = self.session.get(f"{self.base_url}/{path}", params=params, timeout=self.timeout)
        except requests.Timeout as exc:
            logger.warning("OpenWeather /%s timed out after %ss", path, self.timeout)
            raise WeatherServiceError("weather_api_timeout", status_code=503) from exc
        except requests.RequestException as exc:
            logger.warning("OpenWeather /%s request failed: %s", path, exc)
            raise WeatherServiceError("weather_service_unavailable", status_code=503) from exc

        if resp.status_code >= 400:
            logger.warning("OpenWeather /%s returned HTTP %s", path, resp.status_code)
            raise WeatherServiceError("weather_api_error", status_code=502)
        try:
            payload = resp.json()
        except ValueError as exc:
            raise WeatherServiceError("weather_api_error", status_code=502) from exc
        if not isinstance(payload, dict):
            raise WeatherServiceError("weather_api_error", status_code=502)
        return payload
