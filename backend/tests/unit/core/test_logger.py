"""JSON log formatting and request correlation."""

from __future__ import annotations

import json
import logging

from staff_records.core.logger import JSONFormatter, ensure_request_id


def test_formatter_includes_extra_fields():
    record = logging.makeLogRecord(
        {"name": "staff_records.test", "msg": "moved %s", "args": ("x",), "levelname": "INFO"}
    )
    record.employee_id = 7

    payload = json.loads(JSONFormatter().format(record))

    assert payload["message"] == "moved x"
    assert payload["level"] == "INFO"
    assert payload["employee_id"] == 7
    assert "args" not in payload


def test_request_id_adopts_correlation_header(app):
    with app.app_context(), app.test_request_context(headers={"X-Correlation-ID": "abc-1"}):
        assert ensure_request_id() == "abc-1"
        assert ensure_request_id() == "abc-1"


def test_request_id_is_generated_and_stable(app):
    with app.app_context(), app.test_request_context():
        first = ensure_request_id()
        assert first
        assert ensure_request_id() == first


def test_outside_a_request_ids_are_throwaway():
    assert ensure_request_id() != ensure_request_id()
