"""Look assembly entry point: filter, bucket, compose and narrate."""
from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Dict, Iterable, List

from logic.catalog_filter import filter_catalog
from logic.category_bucketer import bucket_by_role
from logic.look_composer import ComposedLook, compose_looks
from logic import look_narrative
from models.look import Look, LookItem
from models.product import Product
from models.quiz import QuizAnswers

logger = logging.getLogger(__name__)

DEFAULT_LOOK_COUNT = 5
DEFAULT_BUDGET = 10000


@dataclass(frozen=True)
class RecommendationResult:
    looks: List[Look]
    products_analyzed: int
    diagnostics: Dict[str, object]

    @property
    def is_empty(self) -> bool:
        return not self.looks


def _to_look(position: int, composed: ComposedLook, answers: QuizAnswers) -> Look:
    items = [
        LookItem(
            product_id=pick.product.product_id,
            product_name=pick.product.name,
            brand=pick.product.brand,
            category=pick.product.category,
            role=pick.role,
            price=pick.product.price,
            image_url=pick.product.primary_image,
            product_url=pick.product.product_url,
            styling_note=look_narrative.styling_note(pick.role, pick.product.brand, pick.reasons),
        )
        for pick in composed.picks
    ]
    name, description = look_narrative.look_name(position, answers)
    return Look(
        look_number=position + 1,
        look_name=name,
        look_description=description,
        total_price=look_narrative.total_price(items),
        style_tip=look_narrative.style_tip(position, answers, items),
        items=items,
    )


def generate_looks(
    answers: QuizAnswers,
    products: Iterable[Product],
    look_count: int = DEFAULT_LOOK_COUNT,
    exclude_product_ids: Iterable[str] | None = None,
    default_budget: float = DEFAULT_BUDGET,
) -> RecommendationResult:
    """Assemble up to ``look_count`` budget-bounded looks from a catalog snapshot.

    An empty ``looks`` list means the catalog could not support any look; the
    caller decides how to surface that.
    """

    catalog = list(products)
    filtered = filter_catalog(catalog, gender=answers.gender, exclude_product_ids=exclude_product_ids)
    buckets = bucket_by_role(filtered.items)
    budget = answers.budget_ceiling(default_budget)
    composition = compose_looks(buckets, answers, budget=budget, look_count=look_count)
    looks = [_to_look(position, composed, answers) for position, composed in enumerate(composition.looks)]

    diagnostics: Dict[str, object] = {
        "filter": filtered.debug,
        "removed": filtered.removed,
        "bucket_sizes": {role: len(items) for role, items in buckets.buckets.items()},
        "unassigned": [product.product_id for product in buckets.unassigned],
        "composition": composition.diagnostics,
    }
    logger.info(
        "Generated %s looks from %s products (%s eligible)",
        len(looks),
        len(catalog),
        len(filtered.items),
    )
    return RecommendationResult(looks=looks, products_analyzed=len(catalog), diagnostics=diagnostics)


def regenerate_looks(
    answers: QuizAnswers,
    products: Iterable[Product],
    previous_product_ids: Iterable[str],
    look_count: int = DEFAULT_LOOK_COUNT,
    default_budget: float = DEFAULT_BUDGET,
) -> RecommendationResult:
    """Build a fresh set of looks that avoids every product shown before."""

    return generate_looks(
        answers,
        products,
        look_count=look_count,
        exclude_product_ids=set(previous_product_ids),
        default_budget=default_budget,
    )


def summarize_looks(looks: List[Look], products_analyzed: int) -> Dict[str, object]:
    total_items = sum(len(look.items) for look in looks)
    average = round(sum(look.total_price for look in looks) / len(looks)) if looks else 0
    return {
        "total_looks": len(looks),
        "total_items": total_items,
        "average_look_price": average,
        "products_analyzed": products_analyzed,
    }


__all__ = [
    "DEFAULT_LOOK_COUNT",
    "RecommendationResult",
    "generate_looks",
    "regenerate_looks",
    "summarize_looks",
]
