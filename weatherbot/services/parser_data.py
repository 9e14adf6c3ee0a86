"""Keyword and label tables for the best-effort LLM text parser."""

from __future__ import annotations

from weatherbot.schemas.recommendation import Category


# Label text as it appears in "Base layers: ..." style output
CATEGORY_LABELS: dict[Category, str] = {
    "base_layers": r"Base\s+layers?",
    "outerwear": r"Outerwear",
    "bottoms": r"Bottoms?",
    "accessories": r"Accessories",
    "footwear": r"Footwear",
}

# Searched in order; the first keyword found in a sentence wins for that category
CATEGORY_KEYWORDS: dict[Category, tuple[str, ...]] = {
    "base_layers": (
        "shirt",
        "thermal",
        "undershirt",
        "t-shirt",
        "tee",
        "long-sleeve",
        "short-sleeve",
        "base layer",
        "layer",
    ),
    "outerwear": (
        "coat",
        "jacket",
        "hoodie",
        "sweatshirt",
        "sweater",
        "cardigan",
        "vest",
        "windbreaker",
        "raincoat",
        "poncho",
    ),
    "bottoms": (
        "pants",
        "jeans",
        "shorts",
        "skirt",
        "leggings",
        "trousers",
        "sweatpants",
        "joggers",
    ),
    "accessories": (
        "hat",
        "cap",
        "beanie",
        "gloves",
        "mittens",
        "scarf",
        "sunglasses",
        "umbrella",
        "backpack",
        "bag",
        "socks",
    ),
    "footwear": (
        "shoes",
        "boots",
        "sneakers",
        "sandals",
        "rain boots",
        "winter boots",
        "snow boots",
        "slippers",
    ),
}

PLACEHOLDER_ITEMS: frozenset[str] = frozenset({"none", "n/a", "na", "nothing", "-", "[items]"})

CONTEXT_WINDOW_CHARS = 50
MAX_PROSE_ITEMS_PER_CATEGORY = 3
SPOKEN_FALLBACK_MAX_CHARS = 500

QUOTE_PAIRS: dict[str, str] = {
    '"': '"',
    "'": "'",
    "“": "”",
    "‘": "’",
}
