"""Gemini client constrained to the clothing recommendation JSON contract."""

from __future__ import annotations

import logging
from typing import Any, Dict

import google.generativeai as genai
from google.generativeai import types as genai_types

from weatherbot.core.config import settings


logger = logging.getLogger(__name__)

CATEGORY_FIELDS = ("baseLayers", "outerwear", "bottoms", "accessories", "footwear")

RECOMMENDATION_RESPONSE_SCHEMA: Dict[str, Any] = {
    "type": "OBJECT",
    "properties": {
        "recommendations": {
            "type": "OBJECT",
            "properties": {field: {"type": "ARRAY", "items": {"type": "STRING"}} for field in CATEGORY_FIELDS},
            "required": list(CATEGORY_FIELDS),
        },
        "spokenResponse": {"type": "STRING"},
    },
    "required": ["recommendations", "spokenResponse"],
}


class GeminiClientError(RuntimeError):
    """Raised when Gemini cannot return recommendation text."""


def build_generation_config(*, temperature: float, max_output_tokens: int) -> genai_types.GenerationConfig:
    return genai_types.GenerationConfig(
        temperature=temperature,
        max_output_tokens=max_output_tokens,
        response_mime_type="application/json",
        response_schema=RECOMMENDATION_RESPONSE_SCHEMA,
    )


class GeminiClient:
    def __init__(self, api_key: str, model_name: str | None = None, timeout: float | None = None) -> None:
        if not api_key:
            raise ValueError("Gemini API key is required")

        self.model_name = model_name or settings.gemini_model
        self.timeout = timeout if timeout is not None else settings.llm_timeout_sec
        genai.configure(api_key=api_key)
        self._model = genai.GenerativeModel(self.model_name)

    def generate_recommendation(self, prompt: str, *, temperature: float, max_output_tokens: int) -> str:
        """Return the raw JSON text of one recommendation.

        The response schema pins Gemini to the five clothing categories plus
        ``spokenResponse``; the caller still parses the text tolerantly.
        """
        if not prompt:
            raise ValueError("Prompt must not be empty")

        try:
            response = self._model.generate_content(
                prompt,
                generation_config=build_generation_config(
                    temperature=temperature, max_output_tokens=max_output_tokens
                ),
                request_options={"timeout": self.timeout},
            )
            text = response.text or ""
        except Exception as exc:
            raise GeminiClientError(str(exc)) from exc

        usage = getattr(response, "usage_metadata", None)
        if usage:
            logger.debug(
                "Gemini %s used %s prompt / %s output tokens",
                self.model_name,
                getattr(usage, "prompt_token_count", None),
                getattr(usage, "candidates_token_count", None),
            )
        return text
