"""Partition candidate products into garment roles."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Dict, Iterable, List, Optional

from models.product import Product
from models.taxonomy import CATEGORY_ROLES, CLOTHING_ROLE_RULES, ROLES


@dataclass(frozen=True)
class RoleBuckets:
    buckets: Dict[str, List[Product]]
    unassigned: List[Product]

    def for_role(self, role: str) -> List[Product]:
        return self.buckets.get(role, [])


def assign_role(product: Product) -> Optional[str]:
    """Return the garment role for a product, or ``None`` when nothing matches.

    Shoes and accessories map straight from their category. Clothes are matched
    by substring against the subcategory first and then each tag, walking the
    rules in order; the first hit wins.
    """

    if product.category in CATEGORY_ROLES:
        return CATEGORY_ROLES[product.category]
    for text in [product.subcategory, *product.tags]:
        if not text:
            continue
        for role, keywords in CLOTHING_ROLE_RULES:
            if any(keyword in text for keyword in keywords):
                return role
    return None


def bucket_by_role(products: Iterable[Product]) -> RoleBuckets:
    """Group products by role, keeping catalog order inside each bucket."""

    buckets: Dict[str, List[Product]] = {role: [] for role in ROLES}
    unassigned: List[Product] = []
    for product in products:
        role = assign_role(product)
        if role is None:
            unassigned.append(product)
        else:
            buckets[role].append(product)
    return RoleBuckets(buckets=buckets, unassigned=unassigned)


__all__ = ["RoleBuckets", "assign_role", "bucket_by_role"]
