from typing import List

from pydantic import Field
from pydantic_settings import BaseSettings

from .errors import ConfigError


class Settings(BaseSettings):
    # eBay application credentials
    EBAY_CLIENT_ID: str = Field("", description="OAuth client id (App ID)")
    EBAY_CLIENT_SECRET: str = Field("", description="OAuth client secret (Cert ID)")
    EBAY_APP_ID: str = Field(
        "", description="Static App ID used by the Finding API fallback"
    )
    EBAY_ENVIRONMENT: str = Field(
        "production", description="eBay environment: production or sandbox"
    )
    EBAY_MARKETPLACE_ID: str = Field("EBAY_US", description="Browse marketplace")
    EBAY_OAUTH_SCOPE: str = Field(
        "https://api.ebay.com/oauth/api_scope",
        description="Scope requested in the client-credentials grant",
    )

    # Upstream request behavior
    EBAY_HTTP_TIMEOUT: float = Field(15.0, description="Upstream timeout in seconds")
    EBAY_TOKEN_SAFETY_FRACTION: float = Field(
        0.9, description="Fraction of the declared token lifetime to trust"
    )
    EBAY_RATE_LIMIT_RETRIES: int = Field(
        3, description="Total attempts when eBay reports a rate limit"
    )
    EBAY_RATE_LIMIT_BACKOFF_SEC: float = Field(
        1.0, description="Initial backoff delay, doubled per attempt"
    )
    EBAY_BROWSE_FILTER: str = Field(
        "price:[1..],itemLocationCountry:US,conditionIds:{1000|3000}",
        description="Browse filter expression (country/condition/price)",
    )
    SOLD_LOOKBACK_DAYS: int = Field(
        90, description="Days of completed listings requested from Finding"
    )

    # Marketplace Account Deletion webhook
    EBAY_DELETION_VERIFICATION_TOKEN: str = Field(
        "", description="Verification token registered with eBay"
    )
    EBAY_DELETION_ENDPOINT_URL: str = Field(
        "", description="Public endpoint URL exactly as registered with eBay"
    )
    DELETION_NOTIFICATIONS_MAX: int = Field(
        50, description="Deletion notifications kept in memory"
    )

    # Server
    PORT: int = Field(10000, description="Listening port")
    CORS_ORIGINS: str = Field("*", description="Comma-separated allowed origins")
    LOG_LEVEL: str = Field("INFO", description="Root log level")

    class Config:
        env_file = ".env"
        case_sensitive = False
        str_strip_whitespace = True
        extra = "ignore"

    @property
    def is_sandbox(self) -> bool:
        if self.EBAY_ENVIRONMENT.lower() == "sandbox":
            return True
        return "SBX" in self.EBAY_CLIENT_ID or "SBX" in self.EBAY_APP_ID

    @property
    def cors_origins(self) -> List[str]:
        return [o.strip() for o in self.CORS_ORIGINS.split(",") if o.strip()]

    def require(self, *names: str) -> None:
        """Raise ConfigError listing every named setting that is empty."""
        missing = [name for name in names if not getattr(self, name, None)]
        if missing:
            raise ConfigError(
                "Server not configured", detail=f"Missing {', '.join(missing)}"
            )


settings = Settings()
