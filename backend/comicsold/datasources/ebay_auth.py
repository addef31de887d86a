"""
In-memory cache for eBay application (client-credentials) OAuth tokens.
"""

from __future__ import annotations

import logging
import threading
import time
from dataclasses import dataclass
from typing import Callable, Optional

import requests

from ..config import Settings, settings as default_settings
from ..errors import AuthError
from ..logging_config import truncate

logger = logging.getLogger(__name__)

PRODUCTION_OAUTH_URL = "https://api.ebay.com/identity/v1/oauth2/token"
SANDBOX_OAUTH_URL = "https://api.sandbox.ebay.com/identity/v1/oauth2/token"
DEFAULT_EXPIRES_IN = 7200


@dataclass
class CachedToken:
    value: str
    expires_at: float

    def is_valid(self, now: float) -> bool:
        return now < self.expires_at


class TokenCache:
    """Hands out a bearer token, exchanging credentials only when the cached
    one has expired.

    The lock only guards the cached value. Two threads that both see an
    expired token will each run an exchange; both tokens are valid and the
    later one is kept.
    """

    def __init__(
        self,
        cfg: Optional[Settings] = None,
        session: Optional[requests.Session] = None,
        clock: Callable[[], float] = time.time,
    ):
        self.cfg = cfg or default_settings
        self.session = session or requests.Session()
        self.clock = clock
        self._token: Optional[CachedToken] = None
        self._lock = threading.Lock()

    @property
    def oauth_url(self) -> str:
        return SANDBOX_OAUTH_URL if self.cfg.is_sandbox else PRODUCTION_OAUTH_URL

    def cached(self) -> Optional[CachedToken]:
        with self._lock:
            return self._token

    def invalidate(self) -> None:
        with self._lock:
            self._token = None

    def acquire_token(self) -> str:
        now = self.clock()
        with self._lock:
            token = self._token
        if token is not None and token.is_valid(now):
            return token.value

        token = self.exchange()
        with self._lock:
            self._token = token
        return token.value

    def exchange(self) -> CachedToken:
        """POST the credential pair and build a CachedToken from the reply."""
        self.cfg.require("EBAY_CLIENT_ID", "EBAY_CLIENT_SECRET")

        started = self.clock()
        try:
            resp = self.session.post(
                self.oauth_url,
                auth=(self.cfg.EBAY_CLIENT_ID, self.cfg.EBAY_CLIENT_SECRET),
                headers={"Content-Type": "application/x-www-form-urlencoded"},
                data={
                    "grant_type": "client_credentials",
                    "scope": self.cfg.EBAY_OAUTH_SCOPE,
                },
                timeout=self.cfg.EBAY_HTTP_TIMEOUT,
            )
        except requests.RequestException as e:
            logger.error(f"eBay OAuth endpoint unreachable: {e}")
            raise AuthError("OAuth token request failed", detail=str(e))

        if resp.status_code != 200:
            logger.error(
                f"eBay OAuth failed: {resp.status_code} {truncate(resp.text)}"
            )
            raise AuthError(
                "OAuth failed (likely invalid client id/secret)",
                detail={"upstreamStatus": resp.status_code, "body": truncate(resp.text)},
            )

        try:
            payload = resp.json()
        except ValueError:
            payload = {}
        if not isinstance(payload, dict):
            payload = {}
        access_token = payload.get("access_token")
        if not access_token:
            logger.error(f"eBay OAuth reply without access_token: {truncate(resp.text)}")
            raise AuthError("OAuth reply did not contain an access token")

        try:
            expires_in = int(payload.get("expires_in") or DEFAULT_EXPIRES_IN)
        except (TypeError, ValueError):
            logger.error(f"eBay OAuth reply with bad expires_in: {truncate(resp.text)}")
            raise AuthError(
                "OAuth reply had an unreadable expires_in",
                detail=str(payload.get("expires_in")),
            )
        lifetime = expires_in * self.cfg.EBAY_TOKEN_SAFETY_FRACTION
        logger.info(f"Acquired eBay application token (expires_in={expires_in}s)")
        return CachedToken(value=access_token, expires_at=started + lifetime)
