"""Pricing and copywriting for assembled looks.

Everything here is pure string composition over templates. Missing quiz
fields fall back to generic wording, so building a look's narrative cannot
fail.
"""

from __future__ import annotations

from typing import Dict, List, Sequence, Tuple

from models.look import LookItem
from models.quiz import QuizAnswers

PERSONAL_LOOKS: List[Tuple[str, str]] = [
    ("Everyday Essential", "Your go-to outfit for daily adventures"),
    ("Signature Style", "A look that defines your fashion identity"),
    ("Weekend Ready", "Comfortable yet stylish for off-duty days"),
    ("Statement Maker", "Turn heads with this bold ensemble"),
    ("Classic Refined", "Timeless elegance that never goes out of style"),
]

GIFT_SETS: List[Tuple[str, str]] = [
    ("Premium Gift Set", "A luxurious collection they'll treasure"),
    ("Style Starter Kit", "Everything needed to elevate their wardrobe"),
    ("Occasion Perfect", "Curated for your special celebration"),
    ("Thoughtful Collection", "A meaningful gift they'll love"),
    ("Complete Look Gift", "Head-to-toe style in one package"),
]

OCCASION_NAMES: Dict[str, Tuple[str, str]] = {
    "date-night": ("Date Night Perfection", "Make a lasting impression"),
    "work-office": ("Office Ready", "Professional yet stylish"),
    "wedding-event": ("Event Elegance", "Stand out at any occasion"),
    "vacation": ("Vacation Vibes", "Travel in style"),
    "party": ("Party Mode", "Ready to celebrate"),
}

ROLE_NOTES: Dict[str, str] = {
    "top": "signature piece",
    "bottom": "Anchors the outfit",
    "outerwear": "Layer it for instant polish",
    "footwear": "Completes the look perfectly",
    "accessory": "The perfect finishing touch",
}

GENERIC_TIP = "Each piece complements the others beautifully"


def _humanize(value: str) -> str:
    return value.replace("-", " ").strip()


def total_price(items: Sequence[LookItem]) -> float:
    """Exact sum of the item prices, with no rounding."""

    return sum(item.price for item in items)


def look_name(index: int, answers: QuizAnswers) -> Tuple[str, str]:
    """Return ``(name, description)`` for the zero-based look index."""

    if not answers.is_gift and index == 0 and answers.occasion in OCCASION_NAMES:
        return OCCASION_NAMES[answers.occasion]
    templates = GIFT_SETS if answers.is_gift else PERSONAL_LOOKS
    if index < len(templates):
        return templates[index]
    if answers.is_gift:
        return f"Gift Set #{index + 1}", "A curated selection just for you"
    return f"Look #{index + 1}", "A curated selection just for you"


def style_tip(index: int, answers: QuizAnswers, items: Sequence[LookItem]) -> str:
    tips: List[str] = []
    tips.append(f"This {_humanize(answers.style)} look pairs perfectly together" if answers.style else GENERIC_TIP)
    tips.append(
        "A complete head-to-toe ensemble" if len(items) >= 3 else "Mix and match with your existing wardrobe"
    )
    if answers.is_gift:
        tips.append("A thoughtful gift they'll love")
    elif answers.occasion:
        tips.append(f"Perfect for {_humanize(answers.occasion)}")
    else:
        tips.append("A versatile combination")
    tips.append(GENERIC_TIP)
    tips.append(
        f"Curated for your {_humanize(answers.color)} color preference"
        if answers.color and answers.color != "ai-decide"
        else "Colors picked to work together"
    )
    return tips[index] if index < len(tips) else tips[0]


def styling_note(role: str, brand: str, reasons: Sequence[str]) -> str:
    if reasons:
        return reasons[0]
    if role == "top" and brand:
        return f"{brand} {ROLE_NOTES['top']}"
    return ROLE_NOTES.get(role, "Adds style")


def stylist_message(answers: QuizAnswers, look_count: int) -> str:
    """Default stylist intro shown above the looks."""

    style = _humanize(answers.style) if answers.style else "stylish"
    noun = "gift sets" if answers.is_gift else "looks"
    if look_count == 1:
        noun = noun[:-1]
    return f"Here are {look_count} amazing {style} {noun} curated just for you!"


__all__ = [
    "PERSONAL_LOOKS",
    "GIFT_SETS",
    "OCCASION_NAMES",
    "total_price",
    "look_name",
    "style_tip",
    "styling_note",
    "stylist_message",
]
