"""Error hierarchy shared by every stage of the search pipeline.

Each error carries a :class:`ErrorKind` tag, the HTTP status it maps to, a
user-facing ``message`` and an optional diagnostic ``detail``. Diagnostics
only ever surface in the ``fault`` field of :class:`ErrorResponse`.
"""
from __future__ import annotations

import traceback
from enum import Enum
from typing import Sequence

from .models import ErrorResponse

BODY_PREVIEW_CHARS = 4096


class ErrorKind(str, Enum):
    BODY_PARSE = "body_parse"
    VALIDATION = "validation"
    UPSTREAM_TRANSPORT = "upstream_transport"
    UPSTREAM_FORMAT = "upstream_format"


def body_preview(text: str, limit: int = BODY_PREVIEW_CHARS) -> str:
    """Cap a raw payload before it is echoed back or logged."""
    if len(text) <= limit:
        return text
    return f"{text[:limit]}... [truncated {len(text) - limit} characters]"


def describe_exception(exc: BaseException) -> str:
    """Render an exception with its traceback, or its repr when it was never raised."""

    if exc.__traceback__ is None:
        return repr(exc)
    return "".join(traceback.format_exception(exc)).rstrip()


class SearchGatewayError(Exception):
    """Base class for failures that are answered with an error payload."""

    kind: ErrorKind
    http_status: int = 500

    def __init__(self, message: str, detail: str | None = None) -> None:
        super().__init__(message)
        self.message = message
        self.detail = detail

    def to_response(self) -> ErrorResponse:
        return ErrorResponse(code=self.http_status, message=self.message, fault=self.detail)


class BodyParseError(SearchGatewayError):
    kind = ErrorKind.BODY_PARSE
    http_status = 400

    def __init__(self, raw_body: str, diagnostic: str) -> None:
        super().__init__("Invalid request body", diagnostic)
        self.raw_body = body_preview(raw_body)

    def to_response(self) -> ErrorResponse:
        fault = self.detail
        if self.__cause__ is not None:
            fault = f"{fault}\n{describe_exception(self.__cause__)}"
        return ErrorResponse(code=self.http_status, message=self.message, fault=fault, body=self.raw_body)


class InputValidationError(SearchGatewayError):
    kind = ErrorKind.VALIDATION
    http_status = 400

    def __init__(self, messages: Sequence[str]) -> None:
        super().__init__(" ".join(messages))
        self.messages = list(messages)


class UpstreamTransportError(SearchGatewayError):
    kind = ErrorKind.UPSTREAM_TRANSPORT

    def __init__(self, detail: str) -> None:
        super().__init__("Failed to fetch products from external API", detail)


class UpstreamFormatError(SearchGatewayError):
    kind = ErrorKind.UPSTREAM_FORMAT

    def __init__(self, detail: str) -> None:
        super().__init__("Failed to parse response from external API", detail)
