"""FastAPI application wiring the search gateway."""
from __future__ import annotations

import logging

import uvicorn
from fastapi import Depends, FastAPI, Request
from fastapi.responses import Response

from .access_log import log_message_in
from .config import settings
from .decoding import MAX_BODY_BYTES
from .errors import body_preview
from .search import handle_search
from .upstream import ProductSearchClient, get_upstream_client

LOG_FORMAT = "%(asctime)s [%(levelname)s] %(name)s: %(message)s"
LOG_LEVEL = logging.getLevelName(settings.log_level.upper())

# Force a predictable logging setup even when run under uvicorn so the access
# log entries share one format. ``force=True`` replaces uvicorn's default handlers.
logging.basicConfig(level=LOG_LEVEL, format=LOG_FORMAT, force=True)
for name in ("uvicorn", "uvicorn.error", "uvicorn.access", "httpx"):
    logging.getLogger(name).setLevel(LOG_LEVEL)

logger = logging.getLogger(__name__)
logger.info("Logging configured at %s", settings.log_level.upper())

app = FastAPI(title="Product Search Gateway")


@app.get("/health")
async def health() -> dict:
    return {"status": "ok", "upstream": settings.upstream_url}


async def read_body(request: Request, limit: int = MAX_BODY_BYTES) -> bytes:
    """Read at most ``limit + 1`` bytes, enough for the decoder to reject oversized bodies."""
    body = bytearray()
    async for chunk in request.stream():
        body.extend(chunk)
        if len(body) > limit:
            break
    return bytes(body[: limit + 1])


@app.post("/search")
async def search(
    request: Request,
    client: ProductSearchClient = Depends(get_upstream_client),
) -> Response:
    raw_body = await read_body(request)
    log_message_in(body_preview(raw_body.decode("utf-8", errors="replace")), request.method, request.url.path)
    return await handle_search(
        raw_body,
        request.headers.get("content-type"),
        request.headers.get("accept"),
        client,
    )


def serve() -> None:
    logger.info("Server running at http://%s:%s/", settings.host, settings.port)
    uvicorn.run(app, host=settings.host, port=settings.port, log_config=None)


if __name__ == "__main__":
    serve()
