"""Keyword and context extraction from a child's spoken question."""

from __future__ import annotations

import re
from dataclasses import dataclass, field
from datetime import datetime

from weatherbot.schemas.recommendation import Timeframe


STOP_WORDS: frozenset[str] = frozenset(
    {
        "i", "me", "my", "myself", "we", "our", "ours", "ourselves", "you", "your", "yours",
        "yourself", "yourselves", "he", "him", "his", "himself", "she", "her", "hers",
        "herself", "it", "its", "itself", "they", "them", "their", "theirs", "themselves",
        "what", "which", "who", "whom", "this", "that", "these", "those", "am", "is", "are",
        "was", "were", "be", "been", "being", "have", "has", "had", "having", "do", "does",
        "did", "doing", "a", "an", "the", "and", "but", "if", "or", "because", "as", "until",
        "while", "of", "at", "by", "for", "with", "about", "against", "between", "into",
        "through", "during", "before", "after", "above", "below", "to", "from", "up", "down",
        "in", "out", "on", "off", "over", "under", "again", "further", "then", "once", "here",
        "there", "when", "where", "why", "how", "all", "both", "each", "few", "more", "most",
        "other", "some", "such", "no", "nor", "not", "only", "own", "same", "so", "than",
        "too", "very", "s", "t", "can", "will", "just", "don", "should", "now", "want",
    }
)

# Checked in insertion order; first category with a matching keyword wins
CONTEXT_KEYWORDS: dict[str, frozenset[str]] = {
    "school": frozenset({"school", "class", "classroom", "bus", "teacher", "homework", "study"}),
    "outdoor": frozenset({"outside", "park", "playground", "garden", "yard", "nature", "trail", "hike"}),
    "sports": frozenset(
        {
            "soccer", "football", "basketball", "baseball", "practice", "game", "sport",
            "tennis", "hockey", "volleyball", "running", "exercise", "gym",
        }
    ),
    "indoor": frozenset({"inside", "indoors", "home", "house", "room", "building"}),
    "party": frozenset({"party", "birthday", "celebration", "event", "gathering", "friend"}),
}

GENERAL_CONTEXT = "general"


@dataclass(slots=True)
class PromptAnalysis:
    keywords: list[str] = field(default_factory=list)
    context: str = GENERAL_CONTEXT


def analyze_prompt(prompt: str | None) -> PromptAnalysis:
    if not prompt or not isinstance(prompt, str):
        return PromptAnalysis()
    keywords = extract_keywords(prompt)
    return PromptAnalysis(keywords=keywords, context=_determine_context(keywords))


def extract_keywords(text: str | None) -> list[str]:
    if not text or not isinstance(text, str):
        return []
    words = re.sub(r"[^\w\s]", " ", text.lower()).split()
    # dict keeps first-seen order while dropping duplicates
    return list(dict.fromkeys(word for word in words if word not in STOP_WORDS))


def extract_timeframe(prompt: str | None, now: datetime) -> Timeframe:
    if not prompt or not isinstance(prompt, str):
        return "today"
    lowered = prompt.lower()
    if "morning" in lowered:
        return "morning"
    if "afternoon" in lowered:
        return "afternoon"
    if "evening" in lowered or "tonight" in lowered or "night" in lowered:
        return "evening"
    if re.search(r"\bnow\b", lowered):
        if now.hour < 12:
            return "morning"
        if now.hour < 17:
            return "afternoon"
        return "evening"
    return "today"


def _determine_context(keywords: list[str]) -> str:
    for context, context_keywords in CONTEXT_KEYWORDS.items():
        if any(keyword in context_keywords for keyword in keywords):
            return context
    return GENERAL_CONTEXT
