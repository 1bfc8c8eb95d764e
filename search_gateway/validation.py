"""Validation of the decoded search fields."""
from __future__ import annotations

import logging
import math
from typing import Any, List

from .errors import InputValidationError
from .models import SearchRequest

logger = logging.getLogger(__name__)

QUERY_MIN_LENGTH = 3
QUERY_MAX_LENGTH = 10
PAGE_MIN = 1


def _is_number(value: Any) -> bool:
    # bool is an int subclass but never a page number
    if isinstance(value, bool) or not isinstance(value, (int, float)):
        return False
    return math.isfinite(value)


def collect_errors(query: Any, page: Any) -> List[str]:
    """Return every failed rule message; an empty list means the input is valid."""

    errors: List[str] = []

    if not isinstance(query, str):
        errors.append("Query must be a string.")
    elif not QUERY_MIN_LENGTH <= len(query) <= QUERY_MAX_LENGTH:
        errors.append(
            f"Query length must be between {QUERY_MIN_LENGTH} and {QUERY_MAX_LENGTH} characters."
        )

    if not _is_number(page):
        errors.append("Page must be a number.")
    elif page < PAGE_MIN:
        errors.append(f"Page must be greater than or equal to {PAGE_MIN}.")

    return errors


def validate(query: Any, page: Any = PAGE_MIN) -> SearchRequest:
    errors = collect_errors(query, page)
    if errors:
        logger.warning("Validation failed query=%r page=%r: %s", query, page, errors)
        raise InputValidationError(errors)
    return SearchRequest(query=query, page=int(page))
