"""Quiz answers collected from the shopper before recommendations."""

from __future__ import annotations

import math
from dataclasses import asdict, dataclass, field
from typing import Any, Dict, Optional

from models.taxonomy import normalize_answer_key, normalize_gender


@dataclass(frozen=True)
class SizePreferences:
    top: str = ""
    bottom: str = ""
    shoe: str = ""

    def __post_init__(self) -> None:
        object.__setattr__(self, "top", str(self.top or "").strip().upper())
        object.__setattr__(self, "bottom", str(self.bottom or "").strip().upper())
        object.__setattr__(self, "shoe", str(self.shoe or "").strip().upper())

    def is_empty(self) -> bool:
        return not (self.top or self.bottom or self.shoe)


@dataclass(frozen=True)
class QuizAnswers:
    """Answers to the AI Dresser quiz. Never mutated by the engine."""

    purpose: str = "personal"
    gender: Optional[str] = None
    style: str = ""
    occasion: str = ""
    budget: Any = None
    color: str = ""
    sizes: SizePreferences = field(default_factory=SizePreferences)
    recipient: Optional[str] = None
    relationship: Optional[str] = None

    def __post_init__(self) -> None:
        purpose = normalize_answer_key(self.purpose) or "personal"
        object.__setattr__(self, "purpose", purpose if purpose in {"personal", "gift"} else "personal")
        object.__setattr__(self, "gender", normalize_gender(self.gender))
        object.__setattr__(self, "style", normalize_answer_key(self.style))
        object.__setattr__(self, "occasion", normalize_answer_key(self.occasion))
        object.__setattr__(self, "color", normalize_answer_key(self.color))
        if isinstance(self.sizes, dict):
            object.__setattr__(self, "sizes", SizePreferences(**self.sizes))
        elif self.sizes is None:
            object.__setattr__(self, "sizes", SizePreferences())

    @property
    def is_gift(self) -> bool:
        return self.purpose == "gift"

    def budget_ceiling(self, default: float) -> float:
        """Return the numeric budget, falling back to ``default`` when unparseable.

        Zero, negative and non-finite values (``nan``, ``inf``) also fall back.
        """

        raw = self.budget
        if isinstance(raw, bool):
            return default
        if isinstance(raw, (int, float)):
            return raw if math.isfinite(raw) and raw > 0 else default
        text = str(raw or "").strip().replace(",", "")
        if not text:
            return default
        try:
            value = float(text)
        except ValueError:
            return default
        if not math.isfinite(value) or value <= 0:
            return default
        return int(value) if value.is_integer() else value

    def to_dict(self) -> Dict[str, Any]:
        payload = asdict(self)
        payload["budget"] = "" if self.budget is None else str(self.budget)
        return payload


__all__ = ["QuizAnswers", "SizePreferences"]
