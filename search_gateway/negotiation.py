"""Content negotiation and serialization of outgoing payloads."""
from __future__ import annotations

import re
import xml.etree.ElementTree as ET
from typing import Any, List, Tuple

from fastapi.responses import JSONResponse, Response

from .decoding import is_xml_media_type, media_type
from .models import BodyFormat

XML_ROOT = "response"
XML_ITEM = "item"
_JSON_MEDIA_TYPES = {"application/json", "text/json"}
# characters outside the XML 1.0 Char production
_XML_INVALID_RE = re.compile("[^\x09\x0a\x0d\x20-\ud7ff\ue000-\ufffd\U00010000-\U0010ffff]")


def _media_ranges(header: str) -> List[Tuple[str, float]]:
    ranges: List[Tuple[str, float]] = []
    for part in header.split(","):
        name = media_type(part)
        if not name:
            continue
        weight = 1.0
        for param in part.split(";")[1:]:
            key, _, value = param.partition("=")
            if key.strip().lower() == "q":
                try:
                    weight = float(value.strip())
                except ValueError:
                    weight = 0.0
        ranges.append((name, weight))
    return ranges


def classify_accept(header: str | None) -> BodyFormat:
    """Pick JSON or XML from an ``Accept`` header; JSON unless XML clearly wins."""

    best_format, best_weight = BodyFormat.JSON, 0.0
    for name, weight in _media_ranges(header or ""):
        if weight <= 0:
            continue
        if is_xml_media_type(name):
            candidate = BodyFormat.XML
        elif name in _JSON_MEDIA_TYPES or name.endswith("+json") or name in {"*/*", "application/*"}:
            candidate = BodyFormat.JSON
        else:
            continue
        # earlier ranges win ties
        if weight > best_weight:
            best_format, best_weight = candidate, weight
    return best_format


def _render_scalar(value: Any) -> str:
    if isinstance(value, bool):
        return "true" if value else "false"
    return _XML_INVALID_RE.sub("\ufffd", str(value))


def _append(parent: ET.Element, tag: str, value: Any) -> None:
    if isinstance(value, list):
        for item in value:
            _append(parent, tag, item)
        return
    element = ET.SubElement(parent, tag)
    _fill(element, value)


def _fill(element: ET.Element, value: Any) -> None:
    if isinstance(value, dict):
        for key, child in value.items():
            _append(element, str(key), child)
    elif value is not None:
        element.text = _render_scalar(value)


def to_xml(payload: Any, root: str = XML_ROOT, item_tag: str = XML_ITEM) -> str:
    """Serialize dicts/lists/scalars under a single ``root`` element."""

    element = ET.Element(root)
    if isinstance(payload, list):
        for item in payload:
            _append(element, item_tag, item)
    else:
        _fill(element, payload)
    return ET.tostring(element, encoding="unicode", method="xml")


def render(payload: Any, accept: str | None, status_code: int = 200, item_tag: str = XML_ITEM) -> Response:
    if classify_accept(accept) is BodyFormat.XML:
        content = '<?xml version="1.0" encoding="UTF-8"?>\n' + to_xml(payload, item_tag=item_tag)
        return Response(content=content, status_code=status_code, media_type="application/xml")
    return JSONResponse(content=payload, status_code=status_code)
