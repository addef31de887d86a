"""
Sold-listings resolver: Browse first, Finding when Browse cannot authenticate.
"""

from __future__ import annotations

import logging
from typing import Optional

from .datasources.base import SOURCE_BROWSE, SOURCE_FINDING, SearchResult
from .datasources.ebay_api import EbayAPIClient
from .datasources.ebay_auth import TokenCache
from .errors import AuthError, ConfigError, ValidationError
from .normalize import browse_items, finding_items

logger = logging.getLogger(__name__)

MIN_LIMIT = 1
MAX_LIMIT = 50
MODES = (SOURCE_BROWSE, SOURCE_FINDING)


def validate_query(title, limit, mode=None):
    """Return cleaned ``(title, limit, mode)`` or raise ValidationError."""
    title = (title or "").strip()
    if not title:
        raise ValidationError("Missing title parameter")

    if isinstance(limit, bool) or (isinstance(limit, float) and not limit.is_integer()):
        raise ValidationError("Invalid limit", detail="limit must be an integer")
    try:
        limit = int(limit)
    except (TypeError, ValueError):
        raise ValidationError("Invalid limit", detail="limit must be an integer")
    if not MIN_LIMIT <= limit <= MAX_LIMIT:
        raise ValidationError(
            "Invalid limit", detail=f"limit must be between {MIN_LIMIT} and {MAX_LIMIT}"
        )

    if mode is not None:
        mode = mode.strip().lower() or None
    if mode is not None and mode not in MODES:
        raise ValidationError("Invalid mode", detail=f"mode must be one of {MODES}")
    return title, limit, mode


class SoldListingsResolver:
    def __init__(
        self,
        token_cache: Optional[TokenCache] = None,
        client: Optional[EbayAPIClient] = None,
    ):
        self.token_cache = token_cache or TokenCache()
        self.client = client or EbayAPIClient()

    def resolve(self, title: str, limit: int = 10, mode: Optional[str] = None) -> SearchResult:
        title, limit, mode = validate_query(title, limit, mode)

        if mode == SOURCE_FINDING:
            return self._search_finding(title, limit)
        if mode == SOURCE_BROWSE:
            return self._search_browse(title, limit)

        try:
            return self._search_browse(title, limit)
        except (AuthError, ConfigError) as e:
            logger.warning(f"Browse unavailable ({e.message}); falling back to Finding")
            return self._search_finding(title, limit)

    def _search_browse(self, title: str, limit: int) -> SearchResult:
        token = self.token_cache.acquire_token()
        try:
            payload = self.client.search_browse(token, title, limit)
        except AuthError:
            # a rejected token must not be served again
            self.token_cache.invalidate()
            raise
        items = browse_items(payload)[:limit]
        logger.info(f"Browse returned {len(items)} items for '{title}'")
        return SearchResult(source=SOURCE_BROWSE, items=items)

    def _search_finding(self, title: str, limit: int) -> SearchResult:
        payload = self.client.search_finding(title, limit)
        items = finding_items(payload)[:limit]
        logger.info(f"Finding returned {len(items)} items for '{title}'")
        return SearchResult(source=SOURCE_FINDING, items=items)
