"""Access log entries for inbound and outbound messages."""

import json
import logging

from search_gateway.access_log import FAULT_PLACEHOLDER, log_message_in, log_message_out, utc_timestamp


def test_timestamp_is_iso_utc():
    stamp = utc_timestamp()

    assert stamp.endswith("Z")
    assert "T" in stamp


def test_message_in_entry(caplog):
    with caplog.at_level(logging.INFO, logger="search_gateway.access"):
        entry = log_message_in('{"query":"phone"}', "POST", "/search")

    assert entry.type == "messageIn"
    assert entry.fault is None
    record = caplog.records[-1]
    assert record.getMessage().startswith("Incoming request: ")
    logged = json.loads(record.getMessage().split(": ", 1)[1])
    assert logged["method"] == "POST"
    assert logged["path"] == "/search"
    assert "dateTime" in logged
    assert "fault" not in logged


def test_message_out_success_has_no_fault(caplog):
    with caplog.at_level(logging.INFO, logger="search_gateway.access"):
        entry = log_message_out("[]", [])

    assert entry.fault is None
    assert "fault" not in caplog.records[-1].getMessage()


def test_message_out_error_carries_fault():
    entry = log_message_out("{}", {"code": 500, "message": "x", "fault": "trace"})

    assert entry.fault == "trace"


def test_message_out_error_without_fault_uses_placeholder():
    entry = log_message_out("{}", {"code": 400, "message": "Query must be a string."})

    assert entry.fault == FAULT_PLACEHOLDER
