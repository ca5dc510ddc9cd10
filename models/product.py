"""Catalog product data model and helpers."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Dict, List, Optional

from models.taxonomy import normalise_tags, normalize_gender, validate_category

PLACEHOLDER_IMAGE = "/placeholder.jpg"


def _ensure_list(value: Any) -> List[Any]:
    """Coerce a scalar or iterable into a list."""

    if value is None:
        return []
    if isinstance(value, (list, tuple, set)):
        return list(value)
    return [value]


def _first_present(metadata: Dict[str, Any], *keys: str) -> Any:
    for key in keys:
        if key in metadata and metadata[key] is not None:
            return metadata[key]
    return None


@dataclass(frozen=True)
class Product:
    """A read-only catalog entry as the look engine sees it."""

    product_id: str
    name: str
    brand: str
    category: str
    price: float
    subcategory: str = ""
    original_price: Optional[float] = None
    images: List[str] = field(default_factory=list)
    colors: List[str] = field(default_factory=list)
    sizes: List[str] = field(default_factory=list)
    gender: str = "unisex"
    tags: List[str] = field(default_factory=list)
    in_stock: bool = True
    stock_qty: Optional[int] = None
    occasions: List[str] = field(default_factory=list)
    style: List[str] = field(default_factory=list)
    featured: bool = False
    gift_suitable: bool = False

    def __post_init__(self) -> None:
        object.__setattr__(self, "category", validate_category(self.category))
        object.__setattr__(self, "subcategory", str(self.subcategory or "").strip().lower())
        object.__setattr__(self, "gender", normalize_gender(self.gender) or "unisex")
        if self.price < 0:
            raise ValueError(f"Product {self.product_id} has a negative price")
        object.__setattr__(self, "images", [str(image) for image in _ensure_list(self.images) if image])
        object.__setattr__(self, "colors", normalise_tags(_ensure_list(self.colors)))
        object.__setattr__(self, "sizes", [str(size).strip().upper() for size in _ensure_list(self.sizes)])
        object.__setattr__(self, "tags", normalise_tags(_ensure_list(self.tags)))
        object.__setattr__(self, "occasions", normalise_tags(_ensure_list(self.occasions)))
        object.__setattr__(self, "style", normalise_tags(_ensure_list(self.style)))

    @property
    def primary_image(self) -> str:
        return self.images[0] if self.images else PLACEHOLDER_IMAGE

    @property
    def product_url(self) -> str:
        return f"/shop/{self.product_id}"

    def to_record(self) -> Dict[str, Any]:
        """Serialise into the snake_case record layout used by the stores."""

        return {
            "product_id": self.product_id,
            "name": self.name,
            "brand": self.brand,
            "category": self.category,
            "subcategory": self.subcategory,
            "price": self.price,
            "original_price": self.original_price,
            "images": list(self.images),
            "colors": list(self.colors),
            "sizes": list(self.sizes),
            "gender": self.gender,
            "tags": list(self.tags),
            "in_stock": self.in_stock,
            "stock_qty": self.stock_qty,
            "occasions": list(self.occasions),
            "style": list(self.style),
            "featured": self.featured,
            "gift_suitable": self.gift_suitable,
        }


def from_raw_record(metadata: Dict[str, Any]) -> Product:
    """Factory to build a :class:`Product` from a loose catalog record.

    Accepts both the storefront's camelCase document layout (``inStock``,
    ``stockQty``, ``giftSuitable``) and snake_case keys.
    """

    product_id = _first_present(metadata, "product_id", "id")
    missing = [
        name
        for name, value in (
            ("id", product_id),
            ("name", metadata.get("name")),
            ("category", metadata.get("category")),
            ("price", metadata.get("price")),
        )
        if value in (None, "")
    ]
    if missing:
        raise ValueError(f"Missing required fields for Product: {missing}")

    stock_qty = _first_present(metadata, "stock_qty", "stockQty")
    original_price = _first_present(metadata, "original_price", "originalPrice")
    in_stock = _first_present(metadata, "in_stock", "inStock")

    return Product(
        product_id=str(product_id),
        name=str(metadata["name"]),
        brand=str(metadata.get("brand") or ""),
        category=str(metadata["category"]),
        subcategory=str(metadata.get("subcategory") or ""),
        price=metadata["price"] if isinstance(metadata["price"], (int, float)) else float(metadata["price"]),
        original_price=original_price,
        images=_ensure_list(metadata.get("images") or metadata.get("image")),
        colors=_ensure_list(metadata.get("colors")),
        sizes=_ensure_list(metadata.get("sizes")),
        gender=metadata.get("gender") or "unisex",
        tags=_ensure_list(metadata.get("tags")),
        in_stock=in_stock is not False,
        stock_qty=int(stock_qty) if stock_qty is not None else None,
        occasions=_ensure_list(metadata.get("occasions")),
        style=_ensure_list(metadata.get("style")),
        featured=bool(metadata.get("featured", False)),
        gift_suitable=bool(_first_present(metadata, "gift_suitable", "giftSuitable") or False),
    )


__all__ = ["Product", "from_raw_record", "PLACEHOLDER_IMAGE"]
