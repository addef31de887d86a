"""
Glue between the HTTP layer and the resolver / token cache.
"""

from __future__ import annotations

from datetime import datetime, timezone
from typing import Any, Dict, Optional

from ..config import settings
from ..datasources.ebay_api import EbayAPIClient
from ..datasources.ebay_auth import TokenCache
from ..resolver import SoldListingsResolver

_token_cache: Optional[TokenCache] = None
_resolver: Optional[SoldListingsResolver] = None


def get_token_cache() -> TokenCache:
    global _token_cache
    if _token_cache is None:
        _token_cache = TokenCache(settings)
    return _token_cache


def get_resolver() -> SoldListingsResolver:
    global _resolver
    if _resolver is None:
        _resolver = SoldListingsResolver(get_token_cache(), EbayAPIClient(settings))
    return _resolver


def reset() -> None:
    """Drop the shared resolver and token cache (tests, config reloads)."""
    global _token_cache, _resolver
    _token_cache = None
    _resolver = None


def search_sold(title: str, limit: Any = 10, mode: Optional[str] = None) -> Dict[str, Any]:
    return get_resolver().resolve(title, limit, mode).to_dict()


def auth_test() -> Dict[str, Any]:
    """Run a fresh credential exchange, bypassing the cache."""
    token = get_token_cache().exchange()
    return {"ok": True, "tokenPreview": token.value[:20]}


def health_summary() -> Dict[str, Any]:
    return {
        "status": "ok",
        "time": datetime.now(timezone.utc).isoformat(),
        "configured": {
            "browse": bool(settings.EBAY_CLIENT_ID and settings.EBAY_CLIENT_SECRET),
            "finding": bool(settings.EBAY_APP_ID),
            "deletion": bool(
                settings.EBAY_DELETION_VERIFICATION_TOKEN
                and settings.EBAY_DELETION_ENDPOINT_URL
            ),
        },
    }
