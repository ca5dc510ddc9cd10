"""Deterministic look assembly with transparent diagnostics."""
from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Dict, List, Optional, Sequence, Set, Tuple

from logic.category_bucketer import RoleBuckets
from logic.product_scoring import LookContext, ProductScore, score_product
from models.product import Product
from models.quiz import QuizAnswers

logger = logging.getLogger(__name__)

# One entry per slot; later roles in a slot are fallbacks when earlier ones have no fit.
SLOTS: Tuple[Tuple[str, ...], ...] = (
    ("top",),
    ("bottom", "outerwear"),
    ("footwear",),
    ("accessory",),
)

ROLE_BUDGET_SHARE: Dict[str, float] = {
    "top": 0.3,
    "bottom": 0.3,
    "outerwear": 0.3,
    "footwear": 0.25,
    "accessory": 0.15,
}


@dataclass(frozen=True)
class Pick:
    product: Product
    role: str
    reasons: List[str]


@dataclass(frozen=True)
class ComposedLook:
    attempt: int
    picks: List[Pick]

    @property
    def running_total(self) -> float:
        return sum(pick.product.price for pick in self.picks)


@dataclass(frozen=True)
class CompositionResult:
    looks: List[ComposedLook]
    diagnostics: Dict[str, object]


def _rank_key(
    scored: ProductScore,
    catalog_index: int,
    used_before: Set[str],
    target_price: float,
) -> Tuple[bool, int, float, int]:
    return (
        scored.product.product_id in used_before,
        -scored.score,
        abs(scored.product.price - target_price),
        catalog_index,
    )


def _pick_for_slot(
    slot: Sequence[str],
    buckets: RoleBuckets,
    answers: QuizAnswers,
    budget: float,
    running_total: float,
    in_look: Set[str],
    used_before: Set[str],
    context: LookContext,
) -> Optional[Pick]:
    for role in slot:
        target_price = budget * ROLE_BUDGET_SHARE.get(role, 0.25)
        ranked: List[Tuple[Tuple[bool, int, float, int], ProductScore]] = []
        for index, product in enumerate(buckets.for_role(role)):
            if product.product_id in in_look:
                continue
            if running_total + product.price > budget:
                continue
            scored = score_product(product, answers, context)
            ranked.append((_rank_key(scored, index, used_before, target_price), scored))
        if not ranked:
            continue
        ranked.sort(key=lambda entry: entry[0])
        best = ranked[0][1]
        return Pick(product=best.product, role=role, reasons=best.reasons)
    return None


def compose_looks(
    buckets: RoleBuckets,
    answers: QuizAnswers,
    budget: float,
    look_count: int,
    min_items: int = 1,
) -> CompositionResult:
    """Fill every slot of up to ``look_count`` looks without exceeding ``budget``.

    Products used by an earlier look are ranked after fresh ones but stay
    eligible. Slots without an affordable candidate are skipped; looks ending
    with fewer than ``min_items`` items are dropped and do not count.
    """

    used_before: Set[str] = set()
    looks: List[ComposedLook] = []
    skipped_slots: List[Dict[str, object]] = []
    dropped: List[int] = []

    for attempt in range(1, max(0, look_count) + 1):
        picks: List[Pick] = []
        in_look: Set[str] = set()
        context = LookContext()
        running_total = 0
        for slot in SLOTS:
            pick = _pick_for_slot(
                slot, buckets, answers, budget, running_total, in_look, used_before, context
            )
            if pick is None:
                skipped_slots.append({"attempt": attempt, "slot": "/".join(slot)})
                continue
            picks.append(pick)
            in_look.add(pick.product.product_id)
            context.add(pick.product)
            running_total += pick.product.price

        if len(picks) < max(1, min_items):
            dropped.append(attempt)
            logger.info("Dropped look attempt %s with %s items", attempt, len(picks))
            continue
        used_before.update(in_look)
        looks.append(ComposedLook(attempt=attempt, picks=picks))
        logger.info(
            "Composed look attempt %s with %s items totalling %s", attempt, len(picks), running_total
        )

    diagnostics: Dict[str, object] = {
        "attempts": max(0, look_count),
        "composed": len(looks),
        "dropped_attempts": dropped,
        "skipped_slots": skipped_slots,
        "budget": budget,
    }
    return CompositionResult(looks=looks, diagnostics=diagnostics)


__all__ = ["SLOTS", "ROLE_BUDGET_SHARE", "Pick", "ComposedLook", "CompositionResult", "compose_looks"]
