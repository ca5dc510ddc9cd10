"""Stylist intro copy, written by Gemini when a key is configured."""
from __future__ import annotations

import logging
from typing import List, Optional

from google import generativeai as genai

from dresser_app.config import DresserConfig
from dresser_app.logging_config import get_logger, log_event
from logic import look_narrative
from logic.safety import system_instruction
from models.look import Look
from models.quiz import QuizAnswers

logger = get_logger(__name__)


def build_prompt(answers: QuizAnswers, looks: List[Look]) -> str:
    lines = [
        "Write a short intro for these outfit recommendations.",
        f"Purpose: {answers.purpose}",
        f"Style: {answers.style or 'any'}",
        f"Occasion: {answers.occasion or 'any'}",
        f"Color preference: {answers.color or 'any'}",
    ]
    for look in looks:
        brands = sorted({item.brand for item in look.items if item.brand})
        lines.append(
            f"Look {look.look_number}: {look.look_name}, {len(look.items)} items, "
            f"total {look.total_price}, brands {', '.join(brands) or 'assorted'}"
        )
    return "\n".join(lines)


class StylistMessageWriter:
    """Produces the message shown above the looks.

    Without an API key the template message is used; with one, Gemini writes
    the copy and the template remains the answer whenever the call fails or
    returns nothing.
    """

    def __init__(self, config: DresserConfig, model: Optional[object] = None) -> None:
        self.config = config
        self._model = model
        if self._model is None and config.api_key:
            genai.configure(api_key=config.api_key)
            self._model = genai.GenerativeModel(
                model_name=config.model,
                system_instruction=system_instruction("stylist"),
            )

    @property
    def uses_model(self) -> bool:
        return self._model is not None

    def write(self, answers: QuizAnswers, looks: List[Look]) -> str:
        fallback = look_narrative.stylist_message(answers, len(looks))
        if self._model is None or not looks:
            return fallback
        try:
            response = self._model.generate_content(build_prompt(answers, looks))
            text = (getattr(response, "text", "") or "").strip()
        except Exception as exc:  # noqa: BLE001
            log_event(logger, logging.WARNING, "stylist_message_failed", error=str(exc))
            return fallback
        return text or fallback


__all__ = ["StylistMessageWriter", "build_prompt"]
