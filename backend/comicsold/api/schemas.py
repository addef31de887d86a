from typing import Any, Dict, List, Optional

from pydantic import BaseModel, ConfigDict, Field


class PriceOut(BaseModel):
    value: str
    currency: str = "USD"


class ImageOut(BaseModel):
    imageUrl: str


class SoldItem(BaseModel):
    title: str
    itemId: Optional[str] = None
    price: Optional[PriceOut] = None
    image: Optional[ImageOut] = None
    detailUrl: Optional[str] = None
    soldDate: Optional[str] = Field(None, description="ISO-8601 sold/listing date")
    condition: Optional[str] = None


class SoldResponse(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    source: str = Field(..., description="Upstream that produced the items")
    legacy_source: str = Field(..., alias="_source")
    count: int
    items: List[SoldItem]


class ErrorResponse(BaseModel):
    error: str
    detail: Optional[Any] = None


class HealthResponse(BaseModel):
    status: str
    time: str
    configured: Dict[str, bool]


class AuthTestResponse(BaseModel):
    ok: bool
    tokenPreview: Optional[str] = None
