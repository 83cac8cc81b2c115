import json
import logging

from app.utils.logging import JsonFormatter, RequestIdFilter, request_id_var


def _record(message="erp_retry operation=get_stocks"):
    return logging.LogRecord("app.erp.retry", logging.WARNING, __file__, 1, message, None, None)


def test_request_id_is_attached_to_json_log_lines():
    token = request_id_var.set("req-42")
    try:
        record = _record()
        RequestIdFilter().filter(record)
    finally:
        request_id_var.reset(token)

    line = json.loads(JsonFormatter().format(record))

    assert line["request_id"] == "req-42"
    assert line["logger"] == "app.erp.retry"
    assert line["level"] == "WARNING"


def test_request_id_is_null_outside_a_request():
    record = _record()
    RequestIdFilter().filter(record)

    assert json.loads(JsonFormatter().format(record))["request_id"] is None
