"""Search pipeline: decode, validate, query upstream, transform, render."""
from __future__ import annotations

import logging
from time import perf_counter
from typing import Any, List

from fastapi.responses import Response

from .access_log import log_message_out
from .decoding import classify_content_type, decode_body, search_fields
from .errors import SearchGatewayError
from .models import SearchRequest, TransformedProduct
from .negotiation import render
from .transform import transform_products
from .upstream import ProductSearchClient
from .validation import validate

logger = logging.getLogger(__name__)

PRODUCT_XML_TAG = "product"


async def search_products(client: ProductSearchClient, request: SearchRequest) -> List[TransformedProduct]:
    t0 = perf_counter()
    upstream_products = await client.search(request.query, request.page)
    t1 = perf_counter()
    products = transform_products(upstream_products)
    logger.info(
        "search q=%r page=%s hits=%s upstream=%.2fms",
        request.query,
        request.page,
        len(products),
        (t1 - t0) * 1000,
    )
    return products


async def run_search(raw_body: bytes, content_type: str | None, client: ProductSearchClient) -> List[dict]:
    """Run the pipeline up to the transformed payload; errors propagate."""

    body_format = classify_content_type(content_type)
    document = decode_body(raw_body, content_type)
    query, page = search_fields(document, body_format)
    request = validate(query, page)
    products = await search_products(client, request)
    return [product.model_dump() for product in products]


async def handle_search(
    raw_body: bytes,
    content_type: str | None,
    accept: str | None,
    client: ProductSearchClient,
) -> Response:
    payload: Any
    try:
        payload = await run_search(raw_body, content_type, client)
        status_code = 200
    except SearchGatewayError as exc:
        logger.warning("Search failed kind=%s status=%s: %s", exc.kind.value, exc.http_status, exc.message)
        payload = exc.to_response().model_dump(exclude_none=True)
        status_code = exc.http_status

    response = render(payload, accept, status_code, item_tag=PRODUCT_XML_TAG)
    log_message_out(response.body.decode("utf-8"), payload)
    return response
