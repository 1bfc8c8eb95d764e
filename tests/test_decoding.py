"""Tests for content-type driven body decoding."""

import pytest

from search_gateway.decoding import (
    MAX_BODY_BYTES,
    classify_content_type,
    decode_body,
    search_fields,
)
from search_gateway.errors import BODY_PREVIEW_CHARS, BodyParseError
from search_gateway.models import BodyFormat


@pytest.mark.parametrize(
    "header, expected",
    [
        ("application/xml", BodyFormat.XML),
        ("text/xml; charset=utf-8", BodyFormat.XML),
        ("application/soap+xml", BodyFormat.XML),
        ("APPLICATION/XML", BodyFormat.XML),
        ("application/json", BodyFormat.JSON),
        ("text/plain", BodyFormat.JSON),
        (None, BodyFormat.JSON),
        ("", BodyFormat.JSON),
    ],
)
def test_classify_content_type(header, expected):
    assert classify_content_type(header) is expected


def test_decode_json_body():
    document = decode_body(b'{"query": "phone", "page": 2}', "application/json")

    assert document == {"query": "phone", "page": 2}


def test_decode_json_array_yields_empty_record():
    assert decode_body(b"[1, 2, 3]", "application/json") == {}


@pytest.mark.parametrize("raw", [b'"abc"', b"42", b"true", b"null"])
def test_decode_json_scalar_is_rejected(raw):
    """Only objects and arrays are accepted as a top-level JSON body."""

    with pytest.raises(BodyParseError) as excinfo:
        decode_body(raw, "application/json")

    assert "not an object or array" in excinfo.value.detail


def test_decode_empty_body():
    assert decode_body(b"", None) == {}


def test_decode_xml_normalizes_tags_and_trims_text():
    raw = b"<Request>\n  <QUERY>  phone  </QUERY>\n  <Page>2</Page>\n</Request>"

    document = decode_body(raw, "application/xml")

    assert document == {"query": "phone", "page": "2"}


def test_decode_xml_keeps_repeated_tags_as_list():
    raw = b"<request><query>phone</query><tag>a</tag><tag>b</tag></request>"

    document = decode_body(raw, "text/xml")

    assert document["query"] == "phone"
    assert document["tag"] == ["a", "b"]


def test_malformed_json_raises_body_parse_error():
    raw = b'{"query": "phone",'

    with pytest.raises(BodyParseError) as excinfo:
        decode_body(raw, "application/json")

    error = excinfo.value
    assert error.http_status == 400
    assert error.raw_body == raw.decode()
    response = error.to_response()
    assert response.code == 400
    assert response.body == raw.decode()
    assert "Malformed JSON body" in response.fault


def test_malformed_xml_raises_body_parse_error():
    with pytest.raises(BodyParseError) as excinfo:
        decode_body(b"<request><query>phone</request>", "application/xml")

    assert "Malformed XML body" in excinfo.value.detail


def test_oversized_body_is_rejected():
    raw = b'{"query": "' + b"a" * MAX_BODY_BYTES + b'"}'

    with pytest.raises(BodyParseError) as excinfo:
        decode_body(raw, "application/json")

    assert "exceeds" in excinfo.value.detail


def test_search_fields_defaults_missing_page():
    assert search_fields({"query": "phone"}, BodyFormat.JSON) == ("phone", 1)


def test_search_fields_keeps_explicit_null_page():
    """Only an absent page is defaulted; null still reaches validation."""

    assert search_fields({"query": "phone", "page": None}, BodyFormat.JSON) == ("phone", None)


def test_search_fields_converts_xml_integer_page():
    assert search_fields({"query": "phone", "page": "3"}, BodyFormat.XML) == ("phone", 3)
    assert search_fields({"query": "phone", "page": "abc"}, BodyFormat.XML) == ("phone", "abc")


def test_search_fields_leaves_json_string_page():
    assert search_fields({"query": "phone", "page": "3"}, BodyFormat.JSON) == ("phone", "3")


def _json_body_of_size(size):
    prefix, suffix = b'{"query": "', b'"}'
    return prefix + b"a" * (size - len(prefix) - len(suffix)) + suffix


def test_body_at_size_limit_is_accepted():
    raw = _json_body_of_size(MAX_BODY_BYTES)
    assert len(raw) == MAX_BODY_BYTES

    document = decode_body(raw, "application/json")

    assert len(document["query"]) == MAX_BODY_BYTES - 13


def test_body_one_byte_over_limit_is_rejected():
    raw = _json_body_of_size(MAX_BODY_BYTES + 1)

    with pytest.raises(BodyParseError):
        decode_body(raw, "application/json")


def test_rejected_body_is_truncated_in_error_response():
    raw = b"x" * (MAX_BODY_BYTES + 1)

    with pytest.raises(BodyParseError) as excinfo:
        decode_body(raw, "application/json")

    body = excinfo.value.to_response().body
    assert body.startswith("x" * BODY_PREVIEW_CHARS)
    assert len(body) < BODY_PREVIEW_CHARS + 100
