"""Inbound body decoding driven by the declared content type."""
from __future__ import annotations

import json
import logging
import re
import xml.etree.ElementTree as ET
from typing import Any, Dict, Tuple

from .errors import BodyParseError
from .models import BodyFormat

logger = logging.getLogger(__name__)

MAX_BODY_BYTES = 1024 * 1024
DEFAULT_PAGE = 1

_XML_MEDIA_TYPES = {"application/xml", "text/xml"}
_INTEGER_RE = re.compile(r"^[+-]?\d+$")


def media_type(header: str | None) -> str:
    """Strip parameters (``charset`` and friends) and lowercase a media type."""
    if not header:
        return ""
    return header.split(";", 1)[0].strip().lower()


def is_xml_media_type(value: str) -> bool:
    return value in _XML_MEDIA_TYPES or value.endswith("+xml")


def classify_content_type(header: str | None) -> BodyFormat:
    if is_xml_media_type(media_type(header)):
        return BodyFormat.XML
    return BodyFormat.JSON


def _element_value(element: ET.Element) -> Any:
    children = list(element)
    if not children:
        return (element.text or "").strip()
    grouped: Dict[str, list] = {}
    for child in children:
        grouped.setdefault(child.tag.lower(), []).append(_element_value(child))
    # single occurrences are flattened, repeated tags stay lists
    return {tag: values[0] if len(values) == 1 else values for tag, values in grouped.items()}


def _decode_xml(raw: bytes) -> Dict[str, Any]:
    root = ET.fromstring(raw)
    value = _element_value(root)
    return value if isinstance(value, dict) else {}


def _decode_json(text: str) -> Dict[str, Any]:
    document = json.loads(text)
    if isinstance(document, dict):
        return document
    if isinstance(document, list):
        return {}
    # only objects and arrays are accepted at the top level
    raise ValueError(f"top-level {type(document).__name__} is not an object or array")


def decode_body(raw: bytes, content_type: str | None) -> Dict[str, Any]:
    """Decode ``raw`` as JSON or XML depending on ``content_type``.

    Raises :class:`BodyParseError` for oversized or malformed payloads.
    """
    text = raw.decode("utf-8", errors="replace")
    if len(raw) > MAX_BODY_BYTES:
        logger.warning("Rejecting request body over %s bytes", MAX_BODY_BYTES)
        raise BodyParseError(text, f"Request body exceeds {MAX_BODY_BYTES} bytes")
    if not text.strip():
        return {}

    body_format = classify_content_type(content_type)
    try:
        if body_format is BodyFormat.XML:
            return _decode_xml(raw)
        return _decode_json(text)
    except (ValueError, ET.ParseError) as exc:
        logger.warning("Malformed %s request body: %s", body_format.value, exc)
        raise BodyParseError(text, f"Malformed {body_format.value.upper()} body: {exc}") from exc


def search_fields(document: Dict[str, Any], body_format: BodyFormat) -> Tuple[Any, Any]:
    """Pull ``query`` and ``page`` from a decoded document.

    ``page`` falls back to 1 only when the key is absent. XML carries no types,
    so an integer literal there is converted before validation.
    """
    query = document.get("query")
    page = document.get("page", DEFAULT_PAGE)
    if body_format is BodyFormat.XML and isinstance(page, str) and _INTEGER_RE.match(page):
        page = int(page)
    return query, page
