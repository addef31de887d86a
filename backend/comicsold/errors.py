"""
Error taxonomy shared by the resolver, the token cache and the HTTP layer.

Every error carries the HTTP status it is surfaced with, so the FastAPI
handler can render ``{error, detail}`` without knowing where it came from.
"""

from typing import Any, Optional


class ComicSoldError(Exception):
    status_code = 500

    def __init__(
        self,
        message: str,
        detail: Optional[Any] = None,
        status_code: Optional[int] = None,
    ):
        super().__init__(message)
        self.message = message
        self.detail = detail
        if status_code is not None:
            self.status_code = status_code

    def to_dict(self) -> dict:
        return {"error": self.message, "detail": self.detail}


class ValidationError(ComicSoldError):
    """Bad or missing caller input."""

    status_code = 400


class AuthError(ComicSoldError):
    """Credential or token failure against eBay."""

    status_code = 502


class UpstreamError(ComicSoldError):
    """eBay answered, but reported a failure."""

    status_code = 502


class ConfigError(ComicSoldError):
    """A required setting is missing."""

    status_code = 500
