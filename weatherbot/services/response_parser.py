"""Normalize LLM output into a :class:`RecommendationSet` and a spoken sentence.

Strict JSON matching the response contract is the primary format. Labeled
text ("Outerwear: ...") and free prose are handled by a best-effort
heuristic path kept for older prompt templates.
"""

from __future__ import annotations

import json
import logging
import re
from dataclasses import dataclass, field
from typing import Any, Literal

from pydantic import ValidationError

from weatherbot.schemas.recommendation import CATEGORIES, RecommendationSet
from weatherbot.services.parser_data import (
    CATEGORY_KEYWORDS,
    CATEGORY_LABELS,
    CONTEXT_WINDOW_CHARS,
    MAX_PROSE_ITEMS_PER_CATEGORY,
    PLACEHOLDER_ITEMS,
    QUOTE_PAIRS,
    SPOKEN_FALLBACK_MAX_CHARS,
)


logger = logging.getLogger(__name__)

ParseFormat = Literal["json", "labeled", "prose", "empty", "invalid-json"]

_FENCE_OPEN = re.compile(r"^\s*```[a-zA-Z]*[ \t]*\n?")
_FENCE_CLOSE = re.compile(r"\n?[ \t]*```\s*$")
_SENTENCE_SPLIT = re.compile(r"[.!?]+")
_PARAGRAPH_SPLIT = re.compile(r"\n\s*\n")
_SPOKEN_MARKER = re.compile(r"Spoken[*_]*\s*:[*_]*\s*(.+?)(?:\n\s*\n|$)", re.IGNORECASE | re.DOTALL)
_LABEL_LINE = re.compile(
    r"^[\s>*_#\-+]*(?:" + "|".join(CATEGORY_LABELS.values()) + r")[*_]*\s*:",
    re.IGNORECASE,
)
_SECOND_PERSON = re.compile(r"\byou(?:r|'re|'ll)?\b", re.IGNORECASE)
_EMPHASIS = re.compile(r"(\*\*|__|\*)(.+?)\1")
_UNDERSCORE_EMPHASIS = re.compile(r"(?<!\w)_(\S(?:.*?\S)?)_(?!\w)")
_LIST_MARKER = re.compile(r"^\s*(?:[-*+•]|\d+[.)])\s+")
_HEADING_MARKER = re.compile(r"^\s*(?:#{1,6}|>)\s*")


class LLMResponseFormatError(ValueError):
    """Raised when strict JSON output does not match the response contract."""


@dataclass(slots=True)
class ParsedResponse:
    recommendations: RecommendationSet = field(default_factory=RecommendationSet)
    spoken_response: str = ""
    format: ParseFormat = "empty"

    @property
    def is_usable(self) -> bool:
        return not self.recommendations.is_empty()


def parse_llm_response(text: Any) -> ParsedResponse:
    """Best-effort parse. Never raises; an unusable result means fall back."""

    if not isinstance(text, str) or not text.strip():
        return ParsedResponse()

    unfenced = strip_code_fence(text)
    if unfenced.lstrip().startswith("{"):
        try:
            return parse_json_response(unfenced)
        except LLMResponseFormatError as exc:
            logger.warning("LLM JSON response rejected: %s", exc)
            return ParsedResponse(format="invalid-json")

    recommendations, labeled = _extract(text)
    return ParsedResponse(
        recommendations=recommendations,
        spoken_response=extract_spoken_response(text),
        format="labeled" if labeled else "prose",
    )


def parse_json_response(text: str) -> ParsedResponse:
    try:
        data = json.loads(strip_code_fence(text))
    except json.JSONDecodeError as exc:
        raise LLMResponseFormatError(f"invalid JSON: {exc.msg}") from exc
    if not isinstance(data, dict):
        raise LLMResponseFormatError("top-level JSON value must be an object")
    if "recommendations" not in data or "spokenResponse" not in data:
        raise LLMResponseFormatError("missing recommendations or spokenResponse")

    raw_recs = data["recommendations"]
    spoken = data["spokenResponse"]
    if not isinstance(raw_recs, dict):
        raise LLMResponseFormatError("recommendations must be an object")
    if not isinstance(spoken, str):
        raise LLMResponseFormatError("spokenResponse must be a string")

    try:
        parsed = RecommendationSet.model_validate(raw_recs)
    except ValidationError as exc:
        raise LLMResponseFormatError(f"invalid recommendations: {exc.error_count()} error(s)") from exc

    recommendations = RecommendationSet(special_notes=[clean_markdown(n) for n in parsed.special_notes if n])
    for category in CATEGORIES:
        for entry in parsed.items(category):
            name = clean_markdown(entry.item)
            if name and name.lower() not in PLACEHOLDER_ITEMS:
                recommendations.add(category, name, entry.reason)

    return ParsedResponse(
        recommendations=recommendations,
        spoken_response=_finalize_spoken(spoken),
        format="json",
    )


def strip_code_fence(text: str) -> str:
    stripped = text.strip()
    if not stripped.startswith("```"):
        return stripped
    stripped = _FENCE_OPEN.sub("", stripped, count=1)
    stripped = _FENCE_CLOSE.sub("", stripped, count=1)
    return stripped.strip()


def extract_recommendations(text: str) -> RecommendationSet:
    recommendations, _ = _extract(text)
    return recommendations


def _extract(text: str) -> tuple[RecommendationSet, bool]:
    recommendations = RecommendationSet()
    if not text:
        return recommendations, False
    if _extract_labeled(text, recommendations):
        return recommendations, True
    _extract_from_prose(text, recommendations)
    return recommendations, False


def _extract_labeled(text: str, recommendations: RecommendationSet) -> bool:
    found = False
    for category, label in CATEGORY_LABELS.items():
        pattern = re.compile(label + r"[*_]*\s*:[*_]*[ \t]*(.+?)[ \t]*(?:\n|$)", re.IGNORECASE)
        match = pattern.search(text)
        if not match:
            continue
        found = True
        for raw in match.group(1).split(","):
            item = clean_markdown(raw)
            if item and item.lower() not in PLACEHOLDER_ITEMS:
                recommendations.add(category, item)
    return found


def _extract_from_prose(text: str, recommendations: RecommendationSet) -> None:
    sentences = [s.strip() for s in _SENTENCE_SPLIT.split(text) if s.strip()]
    for sentence in sentences:
        lowered = sentence.lower()
        for category, keywords in CATEGORY_KEYWORDS.items():
            for keyword in keywords:
                match = re.search(rf"\b{re.escape(keyword)}(?:e?s)?\b", lowered)
                if not match:
                    continue
                start = max(0, match.start() - CONTEXT_WINDOW_CHARS)
                end = min(len(sentence), match.end() + CONTEXT_WINDOW_CHARS)
                context = clean_markdown(sentence[start:end])
                existing = [name.lower() for name in recommendations.names(category)]
                if context and not any(keyword in name for name in existing):
                    recommendations.add(category, context)
                break

    for category in CATEGORIES:
        items = recommendations.items(category)
        if len(items) > MAX_PROSE_ITEMS_PER_CATEGORY:
            recommendations.replace(category, items[:MAX_PROSE_ITEMS_PER_CATEGORY])


def extract_spoken_response(text: str) -> str:
    if not text or not text.strip():
        return ""

    marker = _SPOKEN_MARKER.search(text)
    if marker:
        return _finalize_spoken(marker.group(1))

    paragraphs = [p.strip() for p in _PARAGRAPH_SPLIT.split(text) if p.strip()]
    for paragraph in paragraphs:
        if _LABEL_LINE.match(paragraph):
            continue
        if _SECOND_PERSON.search(paragraph):
            return _finalize_spoken(paragraph)

    if len(text) < SPOKEN_FALLBACK_MAX_CHARS:
        return _finalize_spoken(text)
    return _finalize_spoken(paragraphs[0] if paragraphs else text)


def clean_markdown(text: str) -> str:
    lines = []
    for line in text.splitlines():
        line = _HEADING_MARKER.sub("", line)
        line = _LIST_MARKER.sub("", line)
        line = _EMPHASIS.sub(r"\2", line)
        line = _UNDERSCORE_EMPHASIS.sub(r"\1", line)
        line = line.replace("**", "").replace("`", "")
        line = line.strip().strip("*").strip()
        if line:
            lines.append(line)
    return " ".join(lines)


def _finalize_spoken(text: str) -> str:
    cleaned = re.sub(r"\s+", " ", clean_markdown(text)).strip()
    return strip_surrounding_quotes(cleaned)


def strip_surrounding_quotes(text: str) -> str:
    if len(text) >= 2:
        closing = QUOTE_PAIRS.get(text[0])
        if closing is not None and text[-1] == closing:
            return text[1:-1].strip()
    return text


__all__ = [
    "LLMResponseFormatError",
    "ParsedResponse",
    "clean_markdown",
    "extract_recommendations",
    "extract_spoken_response",
    "parse_json_response",
    "parse_llm_response",
    "strip_code_fence",
]
