"""
Adapters from eBay's two native listing shapes to NormalizedItem.

Browse returns flat objects; Finding wraps every scalar in a single-element
list. Each adapter only deals with its own shape, so the resolver never has
to branch on where an item came from.
"""

from __future__ import annotations

from typing import Any, Dict, List, Optional

from .datasources.base import NormalizedItem, Price


def _first(value: Any) -> Any:
    """Unwrap Finding's single-element arrays (``["x"]`` -> ``"x"``)."""
    while isinstance(value, list):
        if not value:
            return None
        value = value[0]
    return value


def _text(value: Any) -> Optional[str]:
    value = _first(value)
    if value is None:
        return None
    value = str(value).strip()
    return value or None


def from_browse_summary(summary: Dict[str, Any]) -> NormalizedItem:
    price = None
    raw_price = summary.get("price") or {}
    if raw_price.get("value") is not None:
        price = Price(
            value=str(raw_price["value"]), currency=raw_price.get("currency") or "USD"
        )

    image = summary.get("image") or {}
    if not image.get("imageUrl"):
        thumbs = summary.get("thumbnailImages") or []
        image = thumbs[0] if thumbs else {}

    return NormalizedItem(
        title=summary.get("title") or "",
        price=price,
        image_url=image.get("imageUrl"),
        detail_url=summary.get("itemWebUrl"),
        sold_date=summary.get("itemEndDate") or summary.get("itemCreationDate"),
        item_id=summary.get("itemId"),
        condition=summary.get("condition"),
    )


def from_finding_item(item: Dict[str, Any]) -> NormalizedItem:
    price = None
    selling_status = _first(item.get("sellingStatus")) or {}
    current = _first(selling_status.get("convertedCurrentPrice")) or _first(
        selling_status.get("currentPrice")
    )
    if isinstance(current, dict) and current.get("__value__") is not None:
        price = Price(
            value=str(current["__value__"]),
            currency=current.get("@currencyId") or "USD",
        )

    listing_info = _first(item.get("listingInfo")) or {}
    condition = _first(item.get("condition")) or {}

    return NormalizedItem(
        title=_text(item.get("title")) or "",
        price=price,
        image_url=_text(item.get("galleryURL")),
        detail_url=_text(item.get("viewItemURL")),
        sold_date=_text(listing_info.get("endTime")),
        item_id=_text(item.get("itemId")),
        condition=_text(condition.get("conditionDisplayName"))
        if isinstance(condition, dict)
        else None,
    )


def browse_items(payload: Dict[str, Any]) -> List[NormalizedItem]:
    return [from_browse_summary(s) for s in payload.get("itemSummaries") or []]


def finding_items(payload: Dict[str, Any]) -> List[NormalizedItem]:
    response = _first(payload.get("findCompletedItemsResponse")) or {}
    search_result = _first(response.get("searchResult")) or {}
    return [from_finding_item(i) for i in search_result.get("item") or []]
