"""Structured logging of inbound requests and outbound responses."""
from __future__ import annotations

import logging
from datetime import datetime, timezone
from typing import Any

from .models import LogEntry

logger = logging.getLogger("search_gateway.access")

FAULT_PLACEHOLDER = "No fault details available"


def utc_timestamp() -> str:
    """ISO-8601 UTC timestamp with millisecond precision, e.g. ``2024-05-01T10:00:00.000Z``."""
    return datetime.now(timezone.utc).isoformat(timespec="milliseconds").replace("+00:00", "Z")


def _emit(label: str, entry: LogEntry) -> None:
    try:
        logger.info("%s: %s", label, entry.model_dump_json(by_alias=True, exclude_none=True))
    except Exception as exc:
        logger.warning("Access log write failed: %s", exc)


def log_message_in(body: str, method: str, path: str) -> LogEntry:
    entry = LogEntry(type="messageIn", body=body, method=method, path=path, dateTime=utc_timestamp())
    _emit("Incoming request", entry)
    return entry


def log_message_out(body: str, payload: Any) -> LogEntry:
    """Log a serialized response; ``fault`` is set only for error payloads."""

    fault = None
    if isinstance(payload, dict) and isinstance(payload.get("code"), int) and payload["code"] >= 400:
        fault = payload.get("fault") or FAULT_PLACEHOLDER
    entry = LogEntry(type="messageOut", body=body, dateTime=utc_timestamp(), fault=fault)
    _emit("Outgoing response", entry)
    return entry
