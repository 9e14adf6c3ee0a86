"""LLM backends that turn a recommendation request into raw response text."""

from __future__ import annotations

import logging
from typing import Protocol

from weatherbot.core.config import Settings, settings
from weatherbot.schemas.recommendation import RecommendationRequest
from weatherbot.services.gemini_client import GeminiClient, GeminiClientError
from weatherbot.services.ollama_client import OllamaClient, OllamaClientError
from weatherbot.services.prompt_analysis import PromptAnalysis
from weatherbot.services.prompt_templates import build_json_prompt, build_labeled_prompt


logger = logging.getLogger(__name__)


class LLMGenerationError(RuntimeError):
    """Raised when a backend cannot produce response text."""


class LLMGenerator(Protocol):
    name: str

    def check_health(self) -> bool: ...

    def generate(self, request: RecommendationRequest, analysis: PromptAnalysis, timeframe: str) -> str: ...


class GeminiGenerator:
    name = "gemini"

    def __init__(
        self,
        client: GeminiClient | None = None,
        api_key: str | None = None,
        *,
        model_name: str | None = None,
        timeout: float | None = None,
    ) -> None:
        self._client = client
        self._api_key = api_key if api_key is not None else settings.gemini_api_key
        self.model_name = model_name or settings.gemini_model
        self.timeout = timeout if timeout is not None else settings.llm_timeout_sec

    def check_health(self) -> bool:
        # Gemini has no cheap ping, so a configured key counts as available.
        # A failing key or quota surfaces in generate() and marks the backend
        # unavailable in the orchestrator's availability cache.
        return self._client is not None or bool(self._api_key)

    def generate(self, request: RecommendationRequest, analysis: PromptAnalysis, timeframe: str) -> str:
        prompt = build_json_prompt(request, analysis, timeframe)
        try:
            text = self._get_client().generate_recommendation(
                prompt,
                temperature=settings.llm_temperature,
                max_output_tokens=settings.llm_max_tokens,
            )
        except (GeminiClientError, ValueError) as exc:
            raise LLMGenerationError(str(exc)) from exc
        if not text:
            raise LLMGenerationError("Empty response from Gemini")
        return text

    def _get_client(self) -> GeminiClient:
        if self._client is None:
            self._client = GeminiClient(self._api_key or "", model_name=self.model_name, timeout=self.timeout)
        return self._client


class OllamaGenerator:
    name = "ollama"

    def __init__(self, client: OllamaClient | None = None) -> None:
        self._client = client or OllamaClient()

    def check_health(self) -> bool:
        return self._client.check_health()

    def generate(self, request: RecommendationRequest, analysis: PromptAnalysis, timeframe: str) -> str:
        prompt = build_labeled_prompt(request, analysis, timeframe)
        try:
            return self._client.generate(prompt)
        except OllamaClientError as exc:
            raise LLMGenerationError(str(exc)) from exc


def build_generator(config: Settings = settings) -> LLMGenerator | None:
    if config.llm_provider == "gemini":
        return GeminiGenerator(
            api_key=config.gemini_api_key,
            model_name=config.gemini_model,
            timeout=config.llm_timeout_sec,
        )
    if config.llm_provider == "ollama":
        return OllamaGenerator(OllamaClient(base_url=config.ollama_base_url, model=config.ollama_model))
    logger.info("LLM provider disabled; recommendations will use rules only")
    return None
