"""Deterministic relevance scoring of catalog products against quiz answers."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import List, Set

from models.product import Product
from models.quiz import QuizAnswers
from models.taxonomy import OCCASION_KEYWORDS, PREMIUM_BRANDS, STYLE_KEYWORDS, preferred_colors

WEIGHTS = {
    "style": 18,
    "occasion": 14,
    "color": 12,
    "color_variety": 5,
    "size": 15,
    "brand_diversity": 6,
    "subcategory_diversity": 8,
    "gift_suitable": 20,
    "premium_brand": 8,
    "featured": 8,
}

_TOP_SIZE_HINTS = ("shirt", "jacket", "hoodie", "top", "tee", "polo", "sweater", "blazer")
_BOTTOM_SIZE_HINTS = ("pant", "short", "jean", "trouser", "chino", "jogger", "skirt")


@dataclass
class LookContext:
    """What has already been placed in the look being composed."""

    colors: Set[str] = field(default_factory=set)
    brands: Set[str] = field(default_factory=set)
    subcategories: Set[str] = field(default_factory=set)

    def add(self, product: Product) -> None:
        self.colors.update(product.colors)
        self.brands.add(product.brand)
        self.subcategories.add(product.subcategory or product.category)


@dataclass(frozen=True)
class ProductScore:
    product: Product
    score: int
    reasons: List[str]


def _keyword_hit(keywords: List[str], fields: List[str]) -> str | None:
    for keyword in keywords:
        if any(keyword in value for value in fields):
            return keyword
    return None


def _size_available(product: Product, answers: QuizAnswers) -> bool:
    sizes = answers.sizes
    if sizes.is_empty():
        return False
    available = set(product.sizes)
    if product.category == "shoes":
        return bool(sizes.shoe) and sizes.shoe in available
    if product.category != "clothes":
        return False
    subcategory = product.subcategory
    if any(hint in subcategory for hint in _TOP_SIZE_HINTS) and sizes.top in available and sizes.top:
        return True
    if any(hint in subcategory for hint in _BOTTOM_SIZE_HINTS) and sizes.bottom in available and sizes.bottom:
        return True
    return bool((sizes.top and sizes.top in available) or (sizes.bottom and sizes.bottom in available))


def score_product(product: Product, answers: QuizAnswers, context: LookContext | None = None) -> ProductScore:
    """Score how well a product answers the quiz, given what the look already holds."""

    context = context or LookContext()
    score = 0
    reasons: List[str] = []

    style_hit = _keyword_hit(STYLE_KEYWORDS.get(answers.style, []), product.tags + product.style)
    if style_hit:
        score += WEIGHTS["style"]
        reasons.append(f"Style match: {style_hit}")

    occasion_hit = _keyword_hit(OCCASION_KEYWORDS.get(answers.occasion, []), product.occasions + product.tags)
    if occasion_hit:
        score += WEIGHTS["occasion"]
        reasons.append(f"Occasion match: {occasion_hit}")

    palette = preferred_colors(answers.color)
    for color in product.colors:
        if any(color in preferred or preferred in color for preferred in palette):
            score += WEIGHTS["color"]
            reasons.append(f"Color match: {color}")
            if color not in context.colors:
                score += WEIGHTS["color_variety"]
                reasons.append("Adds color variety")
            break

    if _size_available(product, answers):
        score += WEIGHTS["size"]
        reasons.append("Size available")

    if product.brand not in context.brands:
        score += WEIGHTS["brand_diversity"]
    if (product.subcategory or product.category) not in context.subcategories:
        score += WEIGHTS["subcategory_diversity"]

    if answers.is_gift:
        if product.gift_suitable:
            score += WEIGHTS["gift_suitable"]
            reasons.append("Gift suitable")
        if product.brand in PREMIUM_BRANDS:
            score += WEIGHTS["premium_brand"]
            reasons.append("Premium brand")

    if product.featured:
        score += WEIGHTS["featured"]
        reasons.append("Featured/Popular")

    return ProductScore(product=product, score=score, reasons=reasons)


__all__ = ["WEIGHTS", "LookContext", "ProductScore", "score_product"]
