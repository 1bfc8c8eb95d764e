"""Pydantic models for request/response payloads."""
from __future__ import annotations

from enum import Enum
from typing import Literal

from pydantic import BaseModel, ConfigDict, Field


class BodyFormat(str, Enum):
    """Wire representation of a request or response body."""

    JSON = "json"
    XML = "xml"


class SearchRequest(BaseModel):
    model_config = ConfigDict(frozen=True)

    query: str = Field(..., min_length=3, max_length=10, description="Search query string")
    page: int = Field(1, ge=1, description="1-based result page")


class UpstreamProduct(BaseModel):
    """Product record as returned by the external search API."""

    model_config = ConfigDict(allow_inf_nan=False)

    title: str
    description: str
    price: float
    discountPercentage: float


class TransformedProduct(BaseModel):
    title: str
    description: str
    final_price: float


class ErrorResponse(BaseModel):
    code: int
    message: str
    fault: str | None = None
    body: str | None = None


class LogEntry(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    type: Literal["messageIn", "messageOut"]
    body: str
    method: str | None = None
    path: str | None = None
    date_time: str = Field(..., alias="dateTime")
    fault: str | None = None
