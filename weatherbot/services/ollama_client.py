from __future__ import annotations

import logging
from typing import Any

import requests

from weatherbot.core.config import settings


logger = logging.getLogger(__name__)


class OllamaClientError(RuntimeError):
    """Raised when the Ollama API call fails or returns an unusable payload."""


class OllamaClient:
    """Minimal client for a local Ollama server."""

    def __init__(
        self,
        base_url: str | None = None,
        model: str | None = None,
        session: requests.Session | None = None,
    ) -> None:
        self.base_url = (base_url or settings.ollama_base_url).rstrip("/")
        self.model = model or settings.ollama_model
        self.timeout = settings.llm_timeout_sec
        self.health_timeout = settings.llm_health_timeout_sec
        self.session = session or requests.Session()

    def generate(self, prompt: str) -> str:
        try:
            resp = self.session.post(
                f"{self.base_url}/api/generate",
                json={"model": self.model, "prompt": prompt, "stream": False},
                timeout=self.timeout,
            )
            resp.raise_for_status()
            payload: Any = resp.json()
        except requests.RequestException as exc:
            logger.warning("Ollama generate request failed: %s", exc)
            raise OllamaClientError(str(exc)) from exc
        except ValueError as exc:
            raise OllamaClientError("Invalid JSON from Ollama API") from exc

        if not isinstance(payload, dict):
            raise OllamaClientError("Invalid response from Ollama API")
        if payload.get("error"):
            raise OllamaClientError(f"Ollama API error: {payload['error']}")
        text = payload.get("response")
        if not isinstance(text, str) or not text:
            raise OllamaClientError("Invalid response from Ollama API")
        return text

    def check_health(self) -> bool:
        try:
            resp = self.session.get(f"{self.base_url}/api/tags", timeout=self.health_timeout)
        except requests.RequestException as exc:
            logger.warning("Ollama health check failed: %s", exc)
            return False
        return resp.status_code == 200
