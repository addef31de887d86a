"""
eBay Browse (OAuth) and Finding (App ID) search calls.

Both calls return the provider's raw JSON payload; shape translation lives in
``comicsold.normalize``.
"""

from __future__ import annotations

import logging
import time
from datetime import datetime, timedelta, timezone
from typing import Any, Callable, Dict, Optional

import requests

from ..config import Settings, settings as default_settings
from ..errors import AuthError, UpstreamError
from ..logging_config import truncate

logger = logging.getLogger(__name__)

BROWSE_MAX_LIMIT = 200
FINDING_MAX_ENTRIES = 100
FINDING_RATE_LIMIT_ERROR_ID = "10001"
AUTH_STATUSES = (401, 403)


class RateLimited(Exception):
    """Raised inside a single attempt when eBay reports a rate limit."""

    def __init__(self, detail: Any = None):
        super().__init__("rate limited")
        self.detail = detail


def _finding_error(payload: Dict[str, Any]) -> Optional[Dict[str, str]]:
    """First error of a Finding reply as ``{errorId, message}``, if any."""
    response = payload.get("findCompletedItemsResponse")
    if isinstance(response, list) and response:
        response = response[0]
    sources = [payload]
    if isinstance(response, dict):
        sources.insert(0, response)
    for src in sources:
        try:
            error = src["errorMessage"][0]["error"][0]
        except (KeyError, IndexError, TypeError):
            continue
        return {
            "errorId": str((error.get("errorId") or [""])[0]),
            "message": str((error.get("message") or ["Unknown eBay error"])[0]),
        }
    return None


def _finding_ack(payload: Dict[str, Any]) -> Optional[str]:
    try:
        return payload["findCompletedItemsResponse"][0]["ack"][0]
    except (KeyError, IndexError, TypeError):
        return None


class EbayAPIClient:
    """Thin client over the two eBay search endpoints used for sold comps."""

    def __init__(
        self,
        cfg: Optional[Settings] = None,
        session: Optional[requests.Session] = None,
        sleep: Callable[[float], None] = time.sleep,
    ):
        self.cfg = cfg or default_settings
        self.session = session or requests.Session()
        self.sleep = sleep

        if self.cfg.is_sandbox:
            self.finding_url = (
                "https://svcs.sandbox.ebay.com/services/search/FindingService/v1"
            )
            self.browse_url = "https://api.sandbox.ebay.com/buy/browse/v1"
        else:
            self.finding_url = "https://svcs.ebay.com/services/search/FindingService/v1"
            self.browse_url = "https://api.ebay.com/buy/browse/v1"

    def _with_rate_limit_backoff(self, attempt: Callable[[], Dict[str, Any]], name: str):
        """Run ``attempt``, retrying only on RateLimited with doubling delay."""
        retries = max(1, self.cfg.EBAY_RATE_LIMIT_RETRIES)
        delay = self.cfg.EBAY_RATE_LIMIT_BACKOFF_SEC
        last: Optional[RateLimited] = None
        for n in range(retries):
            try:
                return attempt()
            except RateLimited as e:
                last = e
                if n == retries - 1:
                    break
                logger.warning(
                    f"{name} rate limited (attempt {n + 1}/{retries}), retrying in {delay:.1f}s"
                )
                self.sleep(delay)
                delay *= 2
        raise UpstreamError(
            f"eBay {name} rate limit exceeded",
            detail=last.detail if last else None,
            status_code=429,
        )

    def search_browse(self, token: str, query: str, limit: int) -> Dict[str, Any]:
        """Browse item_summary search. Auth-class failures raise AuthError."""
        params = {
            "q": query,
            "limit": min(limit, BROWSE_MAX_LIMIT),
            "sort": "-price",
            "fieldgroups": "SUMMARY",
        }
        start_from = datetime.now(timezone.utc) - timedelta(days=self.cfg.SOLD_LOOKBACK_DAYS)
        date_clause = f"itemStartDate:[{start_from.strftime('%Y-%m-%dT%H:%M:%SZ')}..]"
        params["filter"] = ",".join(
            clause for clause in (self.cfg.EBAY_BROWSE_FILTER, date_clause) if clause
        )
        headers = {
            "Authorization": f"Bearer {token}",
            "Accept": "application/json",
            "X-EBAY-C-MARKETPLACE-ID": self.cfg.EBAY_MARKETPLACE_ID,
        }
        url = f"{self.browse_url}/item_summary/search"

        def attempt() -> Dict[str, Any]:
            try:
                resp = self.session.get(
                    url, params=params, headers=headers, timeout=self.cfg.EBAY_HTTP_TIMEOUT
                )
            except requests.RequestException as e:
                logger.error(f"eBay Browse request failed: {e}")
                raise UpstreamError("eBay Browse request failed", detail=str(e))

            if resp.status_code == 200:
                try:
                    return resp.json()
                except ValueError:
                    logger.error(f"eBay Browse non-JSON reply: {truncate(resp.text)}")
                    raise UpstreamError(
                        "eBay Browse returned an unreadable reply",
                        detail={"upstreamStatus": resp.status_code, "body": truncate(resp.text)},
                    )

            body = truncate(resp.text)
            logger.error(f"eBay Browse error: {resp.status_code} {body}")
            if resp.status_code == 429:
                raise RateLimited(detail=body)
            if resp.status_code in AUTH_STATUSES or "invalid_client" in (resp.text or ""):
                raise AuthError(
                    "eBay Browse rejected credentials",
                    detail={"upstreamStatus": resp.status_code, "body": body},
                )
            raise UpstreamError(
                "eBay Browse request failed",
                detail={"upstreamStatus": resp.status_code, "body": body},
            )

        return self._with_rate_limit_backoff(attempt, "Browse")

    def search_finding(self, query: str, limit: int) -> Dict[str, Any]:
        """Finding findCompletedItems search restricted to sold US listings."""
        self.cfg.require("EBAY_APP_ID")
        end_time_from = datetime.now(timezone.utc) - timedelta(
            days=self.cfg.SOLD_LOOKBACK_DAYS
        )
        params = {
            "OPERATION-NAME": "findCompletedItems",
            "SERVICE-VERSION": "1.13.0",
            "SECURITY-APPNAME": self.cfg.EBAY_APP_ID,
            "RESPONSE-DATA-FORMAT": "JSON",
            "REST-PAYLOAD": "",
            "keywords": query,
            "paginationInput.entriesPerPage": min(limit, FINDING_MAX_ENTRIES),
            "sortOrder": "EndTimeSoonest",
            "itemFilter(0).name": "SoldItemsOnly",
            "itemFilter(0).value": "true",
            "itemFilter(1).name": "LocatedIn",
            "itemFilter(1).value": "US",
            "itemFilter(2).name": "EndTimeFrom",
            "itemFilter(2).value": end_time_from.strftime("%Y-%m-%dT%H:%M:%S.000Z"),
        }

        def attempt() -> Dict[str, Any]:
            try:
                resp = self.session.get(
                    self.finding_url, params=params, timeout=self.cfg.EBAY_HTTP_TIMEOUT
                )
            except requests.RequestException as e:
                logger.error(f"eBay Finding request failed: {e}")
                raise UpstreamError("eBay Finding request failed", detail=str(e))

            try:
                payload = resp.json()
            except ValueError:
                logger.error(
                    f"eBay Finding non-JSON reply: {resp.status_code} {truncate(resp.text)}"
                )
                raise UpstreamError(
                    "eBay Finding returned an unreadable reply",
                    detail={"upstreamStatus": resp.status_code, "body": truncate(resp.text)},
                )

            error = _finding_error(payload)
            if error and error["errorId"] == FINDING_RATE_LIMIT_ERROR_ID:
                logger.error(f"eBay Finding rate limit: {error['message']}")
                raise RateLimited(detail=error["message"])

            ack = _finding_ack(payload)
            if resp.status_code != 200 or ack not in ("Success", "Warning"):
                message = error["message"] if error else f"ack={ack}"
                logger.error(
                    f"eBay Finding error: {resp.status_code} {truncate(resp.text)}"
                )
                raise UpstreamError(message, detail=error or {"upstreamStatus": resp.status_code})
            return payload

        return self._with_rate_limit_backoff(attempt, "Finding")
