"""Look and look item schemas."""

from dataclasses import asdict, dataclass, field
from typing import Any, Dict, List


@dataclass(frozen=True)
class LookItem:
    product_id: str
    product_name: str
    brand: str
    category: str
    role: str
    price: float
    image_url: str
    product_url: str
    styling_note: str


@dataclass(frozen=True)
class Look:
    look_number: int
    look_name: str
    look_description: str
    total_price: float
    style_tip: str
    items: List[LookItem] = field(default_factory=list)

    @property
    def product_ids(self) -> List[str]:
        return [item.product_id for item in self.items]

    def to_dict(self) -> Dict[str, Any]:
        return asdict(self)
