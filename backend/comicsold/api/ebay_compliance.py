"""
eBay Marketplace Account Deletion endpoints.

eBay verifies the endpoint with a GET carrying ``challenge_code`` and expects
``{"challengeResponse": sha256(code + verification token + endpoint URL)}``.
Afterwards it POSTs deletion notifications, which are kept in memory for
inspection through ``/deletion-notifications``.
"""

import hashlib
import logging
import threading
from collections import deque
from datetime import datetime, timezone
from typing import Any, Dict, List, Optional

from fastapi import APIRouter, Query, Request

from ..config import settings

router = APIRouter(tags=["eBay Compliance"])

logger = logging.getLogger(__name__)


def respond_to_challenge(
    challenge_code: str, verification_token: str, endpoint_url: str
) -> str:
    # eBay hashes the three values back to back, in this order, no separators
    hash_obj = hashlib.sha256()
    hash_obj.update(challenge_code.encode("utf-8"))
    hash_obj.update(verification_token.encode("utf-8"))
    hash_obj.update(endpoint_url.encode("utf-8"))
    return hash_obj.hexdigest()


class NotificationStore:
    """Bounded, newest-first record of received deletion notifications."""

    def __init__(self, maxlen: int = 50):
        self._items: deque = deque(maxlen=maxlen)
        self._lock = threading.Lock()

    def add(self, payload: Any) -> Dict[str, Any]:
        entry = {
            "receivedAt": datetime.now(timezone.utc).isoformat(),
            "payload": payload,
        }
        with self._lock:
            self._items.appendleft(entry)
        return entry

    def recent(self, limit: Optional[int] = None) -> List[Dict[str, Any]]:
        with self._lock:
            items = list(self._items)
        return items[:limit] if limit else items

    def clear(self) -> None:
        with self._lock:
            self._items.clear()

    def __len__(self) -> int:
        with self._lock:
            return len(self._items)


notification_store = NotificationStore(settings.DELETION_NOTIFICATIONS_MAX)


@router.api_route("/account-deletion", methods=["GET", "POST"])
@router.api_route("/ebay/account-deletion", methods=["GET", "POST"])
async def account_deletion(request: Request, challenge_code: Optional[str] = None):
    """
    Challenge verification (with ``challenge_code``) or notification delivery.

    Example eBay call:
    GET /account-deletion?challenge_code=abc123
    """
    if challenge_code:
        settings.require(
            "EBAY_DELETION_VERIFICATION_TOKEN", "EBAY_DELETION_ENDPOINT_URL"
        )
        challenge_response = respond_to_challenge(
            challenge_code,
            settings.EBAY_DELETION_VERIFICATION_TOKEN,
            settings.EBAY_DELETION_ENDPOINT_URL,
        )
        logger.info(f"Answered eBay deletion challenge (code length {len(challenge_code)})")
        return {"challengeResponse": challenge_response}

    if request.method == "POST":
        try:
            payload = await request.json()
        except ValueError:
            logger.warning("Deletion notification body was not JSON")
            payload = {}

        notification = payload.get("notification") if isinstance(payload, dict) else None
        if not isinstance(notification, dict):
            notification = {}
        logger.info(
            f"eBay account deletion notification received: "
            f"{notification.get('notificationId')}"
        )
        notification_store.add(payload)
        return {"ok": True}

    return {"ok": True, "note": "Ready for challenge and notifications"}


@router.get("/deletion-notifications")
async def deletion_notifications(limit: int = Query(20, ge=1, le=500)):
    """Most recent stored deletion notifications, newest first."""
    items = notification_store.recent(limit)
    return {"count": len(items), "notifications": items}
