import json
import logging

from bilemo.core.logging_setup import JsonFormatter
from bilemo.core.request_context import clear_request_context, set_request_context


def _record(message: str, **extra) -> logging.LogRecord:
    record = logging.LogRecord("bilemo.test", logging.INFO, __file__, 1, message, None, None)
    for key, value in extra.items():
        setattr(record, key, value)
    return record


def test_json_formatter_includes_request_context():
    set_request_context(request_id="req-1", customer_id="7")
    try:
        payload = json.loads(JsonFormatter("%(message)s").format(_record("phone created", entity="phone", entity_id=3)))
    finally:
        clear_request_context()

    assert payload["request_id"] == "req-1"
    assert payload["customer_id"] == "7"
    assert payload["module"] == "bilemo.test"
    assert payload["entity"] == "phone"
    assert payload["entity_id"] == 3
    assert "endpoint" not in payload


def test_json_formatter_masks_credentials():
    formatter = JsonFormatter("%(message)s")

    payload = json.loads(
        formatter.format(_record("Authorization: Bearer abc.def.ghi password=hunter2 secret=xyz"))
    )

    assert "abc.def.ghi" not in payload["message"]
    assert "hunter2" not in payload["message"]
    assert "xyz" not in payload["message"]
