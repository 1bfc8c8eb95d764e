"""Client for the external product search API.

Each search issues one GET with ``q``/``limit``/``skip`` parameters and reads
the whole streamed body before parsing it. Transport failures and malformed
payloads are reported as distinct errors so callers can shape them.
"""
from __future__ import annotations

import json
import logging
from functools import lru_cache
from typing import List

import httpx
from pydantic import ValidationError

from .config import settings
from .errors import UpstreamFormatError, UpstreamTransportError, describe_exception
from .models import UpstreamProduct

logger = logging.getLogger(__name__)

PAGE_SIZE = 2


def _reject_constant(name: str) -> float:
    raise ValueError(f"Non-finite number {name} is not valid JSON")


def compute_skip(page: int, page_size: int = PAGE_SIZE) -> int:
    return (page - 1) * page_size


def parse_products(payload: bytes) -> List[UpstreamProduct]:
    """Extract the ``products`` array from a raw upstream response body."""

    try:
        document = json.loads(payload, parse_constant=_reject_constant)
        products = document["products"]
        if not isinstance(products, list):
            raise TypeError(f"'products' is {type(products).__name__}, expected list")
        return [UpstreamProduct.model_validate(item) for item in products]
    except (ValueError, KeyError, TypeError, ValidationError) as exc:
        # json.JSONDecodeError and pydantic's ValidationError are both ValueErrors
        logger.error("Failed to parse upstream response: %s", exc)
        raise UpstreamFormatError(describe_exception(exc)) from exc


class ProductSearchClient:
    def __init__(
        self,
        base_url: str,
        timeout: float = 5.0,
        page_size: int = PAGE_SIZE,
        transport: httpx.AsyncBaseTransport | None = None,
    ) -> None:
        self.base_url = base_url
        self.timeout = timeout
        self.page_size = page_size
        self._transport = transport

    def build_params(self, query: str, page: int) -> dict:
        return {"q": query, "limit": self.page_size, "skip": compute_skip(page, self.page_size)}

    async def fetch_raw(self, query: str, page: int) -> bytes:
        params = self.build_params(query, page)
        body = bytearray()
        try:
            async with httpx.AsyncClient(timeout=self.timeout, transport=self._transport) as client:
                async with client.stream("GET", self.base_url, params=params) as response:
                    async for chunk in response.aiter_bytes():
                        body.extend(chunk)
        except httpx.HTTPError as exc:
            logger.error("Upstream request to %s failed: %s", self.base_url, exc)
            raise UpstreamTransportError(describe_exception(exc)) from exc
        logger.debug(
            "upstream GET %s params=%s status=%s bytes=%s",
            self.base_url,
            params,
            response.status_code,
            len(body),
        )
        return bytes(body)

    async def search(self, query: str, page: int) -> List[UpstreamProduct]:
        payload = await self.fetch_raw(query, page)
        return parse_products(payload)


@lru_cache(maxsize=1)
def get_upstream_client() -> ProductSearchClient:
    logger.info("Using product search API at %s", settings.upstream_url)
    return ProductSearchClient(settings.upstream_url, timeout=settings.upstream_timeout_seconds)
