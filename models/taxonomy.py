"""Canonical catalog taxonomy and quiz keyword tables.

This module centralises the labels used to read the store catalog: product
categories, garment roles, and the keyword tables that map quiz answers
(style, occasion, color preference) onto product tags. Helper functions keep
normalisation consistent across the engine, the stores and the API models.
"""

from typing import Dict, Iterable, List, Tuple


def _normalize_key(value: str) -> str:
    """Normalise a free-form string into a taxonomy key."""

    return value.strip().lower().replace(" ", "-").replace("_", "-")


CATEGORIES = ("clothes", "accessories", "shoes")
GENDERS = ("male", "female", "unisex")
PURPOSES = ("personal", "gift")

ROLES = ("top", "bottom", "outerwear", "footwear", "accessory")

# Clothing rules are checked in this order; the first keyword hit wins.
CLOTHING_ROLE_RULES: Tuple[Tuple[str, Tuple[str, ...]], ...] = (
    ("outerwear", ("jacket", "coat", "blazer", "parka", "cardigan", "outerwear", "windbreaker")),
    ("bottom", ("pant", "jean", "short", "trouser", "chino", "jogger", "skirt", "legging", "bottom")),
    ("top", ("shirt", "tee", "top", "polo", "blouse", "sweater", "hoodie", "tank", "sweatshirt")),
)
CATEGORY_ROLES: Dict[str, str] = {
    "shoes": "footwear",
    "accessories": "accessory",
}

STYLE_KEYWORDS: Dict[str, List[str]] = {
    "casual-street": ["casual", "streetwear", "urban", "relaxed", "everyday"],
    "smart-casual": ["smart", "business", "polished", "refined", "classic"],
    "formal-elegant": ["formal", "elegant", "sophisticated", "dressy", "luxury"],
    "athleisure": ["athletic", "sporty", "active", "comfort", "performance"],
    "minimalist": ["minimal", "simple", "clean", "basic", "essential"],
    "trendy": ["trendy", "fashion", "modern", "contemporary", "statement"],
}

OCCASION_KEYWORDS: Dict[str, List[str]] = {
    "daily-wear": ["everyday", "casual", "daily", "versatile"],
    "work-office": ["office", "business", "professional", "work"],
    "date-night": ["date", "evening", "romantic", "special"],
    "wedding-event": ["wedding", "formal", "event", "party"],
    "vacation": ["vacation", "travel", "resort", "leisure"],
    "party": ["party", "night", "club", "celebration"],
    "birthday": ["gift", "special", "celebration"],
    "anniversary": ["gift", "romantic", "special", "luxury"],
    "christmas": ["gift", "holiday", "festive"],
    "valentines": ["gift", "romantic", "love"],
    "graduation": ["gift", "celebration", "formal"],
    "just-because": ["gift", "versatile", "everyday"],
}

COLOR_HARMONY: Dict[str, List[str]] = {
    "neutrals": ["black", "white", "gray", "beige", "navy", "brown"],
    "dark": ["black", "navy", "charcoal", "burgundy", "forest", "brown"],
    "earth": ["brown", "tan", "olive", "rust", "beige", "forest"],
    "bright": ["red", "blue", "yellow", "orange", "green", "pink"],
    "pastels": ["pink", "blue", "lavender", "mint", "peach", "cream"],
}

# Every color the store tags products with; used when the shopper lets the stylist decide.
ALL_COLORS = [
    "black", "white", "gray", "beige", "navy", "brown", "red", "blue", "green",
    "pink", "yellow", "orange", "purple", "burgundy", "olive", "tan", "cream",
    "charcoal", "forest", "mint", "lavender", "peach", "rust",
]
COLOR_DECIDE = "ai-decide"

PREMIUM_BRANDS = ["Calvin Klein", "Ralph Lauren", "Michael Kors"]


def validate_category(value: str) -> str:
    """Validate and normalise a product category.

    Raises a :class:`ValueError` if the category is not part of the catalog
    taxonomy.
    """

    key = _normalize_key(value)
    if key not in CATEGORIES:
        raise ValueError(f"Unsupported category '{value}'. Allowed: {sorted(CATEGORIES)}")
    return key


def normalize_gender(value: str | None) -> str | None:
    """Map a gender label onto ``male``/``female``/``unisex``; blanks become ``None``."""

    if value is None:
        return None
    key = _normalize_key(str(value))
    if not key:
        return None
    if key not in GENDERS:
        raise ValueError(f"Unsupported gender '{value}'. Allowed: {list(GENDERS)}")
    return key


def normalize_answer_key(value: str | None) -> str:
    """Normalise a quiz option id such as ``Smart Casual`` into ``smart-casual``."""

    return _normalize_key(value or "")


def preferred_colors(color_answer: str | None) -> List[str]:
    """Return the color family accepted for a quiz color answer."""

    key = _normalize_key(color_answer or "")
    if not key or key == COLOR_DECIDE:
        return list(ALL_COLORS)
    return list(COLOR_HARMONY.get(key, []))


def normalise_tags(values: Iterable[str]) -> List[str]:
    """Lower-case and deduplicate free-form tags while preserving order."""

    normalised = []
    seen = set()
    for value in values:
        key = str(value).strip().lower()
        if key and key not in seen:
            normalised.append(key)
            seen.add(key)
    return normalised


__all__ = [
    "CATEGORIES",
    "GENDERS",
    "PURPOSES",
    "ROLES",
    "CLOTHING_ROLE_RULES",
    "CATEGORY_ROLES",
    "STYLE_KEYWORDS",
    "OCCASION_KEYWORDS",
    "COLOR_HARMONY",
    "ALL_COLORS",
    "COLOR_DECIDE",
    "PREMIUM_BRANDS",
    "validate_category",
    "normalize_gender",
    "normalize_answer_key",
    "preferred_colors",
    "normalise_tags",
]
