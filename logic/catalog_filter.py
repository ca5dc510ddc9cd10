"""Deterministic catalog filtering by stock, gender and exclusions."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Dict, Iterable, List, Optional

from models.product import Product


@dataclass(frozen=True)
class FilteringResult:
    """Captures the outcome of a filtering step."""

    items: List[Product]
    removed: Dict[str, str]
    debug: Dict[str, object]


def _removal_reason(product: Product, gender: Optional[str], excluded: set) -> Optional[str]:
    if product.product_id in excluded:
        return "shown in an earlier set of looks"
    if product.in_stock is False:
        return "out of stock"
    if product.stock_qty is not None and product.stock_qty <= 0:
        return "no stock quantity left"
    if gender and gender != "unisex" and product.gender not in {gender, "unisex"}:
        return f"made for {product.gender}"
    return None


def filter_catalog(
    products: Iterable[Product],
    gender: Optional[str] = None,
    exclude_product_ids: Iterable[str] | None = None,
) -> FilteringResult:
    """Keep in-stock, gender-appropriate products not excluded by the caller.

    Catalog order is preserved so later tie-breaks stay stable.
    """

    excluded = set(exclude_product_ids or [])
    kept: List[Product] = []
    removed: Dict[str, str] = {}
    total = 0
    for product in products:
        total += 1
        reason = _removal_reason(product, gender, excluded)
        if reason:
            removed[product.product_id] = reason
        else:
            kept.append(product)

    debug = {
        "input_count": total,
        "kept_count": len(kept),
        "removed_count": len(removed),
        "gender": gender or "any",
        "excluded_count": len(excluded),
    }
    return FilteringResult(items=kept, removed=removed, debug=debug)


__all__ = ["FilteringResult", "filter_catalog"]
