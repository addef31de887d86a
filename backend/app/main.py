from __future__ import annotations

import logging
from typing import Optional

from dotenv import load_dotenv

# Load environment variables from .env file
load_dotenv()

from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

# dual import fallback for local vs package layout
try:
    from comicsold.api import service
    from comicsold.api.ebay_compliance import router as ebay_router
    from comicsold.api.schemas import (
        AuthTestResponse,
        ErrorResponse,
        HealthResponse,
        SoldResponse,
    )
    from comicsold.config import settings
    from comicsold.errors import ComicSoldError
    from comicsold.logging_config import setup_logging
except ModuleNotFoundError:
    from backend.comicsold.api import service  # type: ignore
    from backend.comicsold.api.ebay_compliance import (
        router as ebay_router,  # type: ignore
    )
    from backend.comicsold.api.schemas import (  # type: ignore
        AuthTestResponse,
        ErrorResponse,
        HealthResponse,
        SoldResponse,
    )
    from backend.comicsold.config import settings  # type: ignore
    from backend.comicsold.errors import ComicSoldError  # type: ignore
    from backend.comicsold.logging_config import setup_logging  # type: ignore

setup_logging(settings.LOG_LEVEL)
logger = logging.getLogger(__name__)

app = FastAPI(title="Comic Sold Proxy")

app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.cors_origins,
    allow_methods=["GET", "POST", "OPTIONS"],
    allow_headers=["*"],
)

# Marketplace Account Deletion challenge + notifications
app.include_router(ebay_router)


@app.exception_handler(ComicSoldError)
async def comicsold_error_handler(request: Request, exc: ComicSoldError):
    if exc.status_code >= 500:
        logger.error(f"{request.url.path} failed: {exc.message} ({exc.detail})")
    return JSONResponse(status_code=exc.status_code, content=exc.to_dict())


@app.get("/health", response_model=HealthResponse)
@app.get("/api/health", response_model=HealthResponse)
def health():
    """Liveness plus which upstreams are configured."""
    return service.health_summary()


@app.get(
    "/sold",
    response_model=SoldResponse,
    response_model_exclude_none=True,
    responses={400: {"model": ErrorResponse}, 502: {"model": ErrorResponse}},
)
@app.get(
    "/api/sold",
    response_model=SoldResponse,
    response_model_exclude_none=True,
    include_in_schema=False,
)
def sold(title: Optional[str] = None, limit: str = "10", mode: Optional[str] = None):
    """Sold/listed items for a title, Browse first with Finding fallback."""
    try:
        return service.search_sold(title, limit, mode)
    except ComicSoldError:
        raise
    except Exception as e:
        logger.exception("Sold search error")
        return JSONResponse(
            status_code=500,
            content={"error": "Error fetching eBay data", "detail": str(e)},
        )


@app.get("/auth-test", response_model=AuthTestResponse, response_model_exclude_none=True)
@app.get("/api/auth-test", include_in_schema=False)
def auth_test():
    """Fresh OAuth exchange against eBay, reporting only a token preview."""
    try:
        return service.auth_test()
    except ComicSoldError as e:
        return JSONResponse(
            status_code=e.status_code,
            content={"ok": False, **e.to_dict()},
        )


if __name__ == "__main__":
    import uvicorn

    uvicorn.run(app, host="0.0.0.0", port=settings.PORT)
