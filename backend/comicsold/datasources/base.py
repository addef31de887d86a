from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Dict, List, Optional

SOURCE_BROWSE = "browse"
SOURCE_FINDING = "finding"


@dataclass
class Price:
    value: str
    currency: str = "USD"


@dataclass
class NormalizedItem:
    title: str
    price: Optional[Price] = None
    image_url: Optional[str] = None
    detail_url: Optional[str] = None
    sold_date: Optional[str] = None
    item_id: Optional[str] = None
    condition: Optional[str] = None

    def to_dict(self) -> Dict[str, Any]:
        """JSON shape; fields the source did not provide are left out."""
        out: Dict[str, Any] = {"title": self.title}
        if self.item_id:
            out["itemId"] = self.item_id
        if self.price is not None:
            out["price"] = {"value": self.price.value, "currency": self.price.currency}
        if self.image_url:
            out["image"] = {"imageUrl": self.image_url}
        if self.detail_url:
            out["detailUrl"] = self.detail_url
        if self.sold_date:
            out["soldDate"] = self.sold_date
        if self.condition:
            out["condition"] = self.condition
        return out


@dataclass
class SearchResult:
    source: str
    items: List[NormalizedItem] = field(default_factory=list)

    def to_dict(self) -> Dict[str, Any]:
        return {
            "source": self.source,
            "_source": self.source,
            "count": len(self.items),
            "items": [item.to_dict() for item in self.items],
        }
