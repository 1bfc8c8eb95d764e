"""Validation rules for query and page."""

import pytest

from search_gateway.errors import InputValidationError
from search_gateway.validation import collect_errors, validate

LENGTH_MESSAGE = "Query length must be between 3 and 10 characters."


@pytest.mark.parametrize("query", ["abc", "phone", "abcdefghij"])
@pytest.mark.parametrize("page", [1, 2, 50])
def test_valid_input_passes(query, page):
    request = validate(query, page)

    assert request.query == query
    assert request.page == page


def test_page_defaults_to_one():
    assert validate("phone").page == 1


def test_short_query_message():
    with pytest.raises(InputValidationError) as excinfo:
        validate("ab", 1)

    assert excinfo.value.http_status == 400
    assert excinfo.value.message == LENGTH_MESSAGE


def test_long_query_message():
    assert collect_errors("abcdefghijk", 1) == [LENGTH_MESSAGE]


def test_non_string_query_skips_length_check():
    assert collect_errors(12345, 1) == ["Query must be a string."]
    assert collect_errors(None, 1) == ["Query must be a string."]


@pytest.mark.parametrize("page", ["1", None, True, float("nan"), float("inf"), [1]])
def test_non_numeric_page(page):
    assert collect_errors("phone", page) == ["Page must be a number."]


@pytest.mark.parametrize("page", [0, -1, 0.5])
def test_page_below_minimum(page):
    assert collect_errors("phone", page) == ["Page must be greater than or equal to 1."]


def test_all_messages_are_joined_in_order():
    with pytest.raises(InputValidationError) as excinfo:
        validate("ab", 0)

    assert excinfo.value.message == (
        "Query length must be between 3 and 10 characters. Page must be greater than or equal to 1."
    )
    assert excinfo.value.to_response().fault is None


def test_type_errors_are_both_reported():
    with pytest.raises(InputValidationError) as excinfo:
        validate(None, "two")

    assert excinfo.value.message == "Query must be a string. Page must be a number."
