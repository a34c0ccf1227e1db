from __future__ import annotations

import io
import json
import logging

from taskdesk.app.core.config import Settings
from taskdesk.app.core.context import bind_actor_id, bind_request_id, reset_actor_id, reset_request_id
from taskdesk.app.core.logging import AUDIT_FIELDS, JsonLogFormatter, RequestContextFilter, configure_logging


def test_configure_logging_outputs_json_with_request_id() -> None:
    settings = Settings(environment="test")
    settings.log_level = "INFO"
    configure_logging(settings)

    root_logger = logging.getLogger()
    handler = next(
        (h for h in root_logger.handlers if isinstance(h, logging.StreamHandler)),
        None,
    )
    assert handler is not None, "Expected JSON stream handler to be configured"

    buffer = io.StringIO()
    previous_stream = handler.setStream(buffer)

    token = bind_request_id("req-json-1")
    try:
        logger = logging.getLogger("taskdesk.tests.logging")
        logger.info("task updated", extra={"entity_kind": "task", "actor_id": "u1"})
    finally:
        handler.flush()
        reset_request_id(token)
        handler.setStream(previous_stream)

    log_lines = buffer.getvalue().strip().splitlines()
    assert log_lines, "Expected structured log line to be captured"
    payload = json.loads(log_lines[-1])

    assert payload["message"] == "task updated"
    assert payload["request_id"] == "req-json-1"
    assert payload["environment"] == settings.environment
    assert payload["level"] == "INFO"
    assert payload["entity_kind"] == "task"
    assert payload["actor_id"] == "u1"
    assert payload["service"] == settings.project_name


def _record(**extra) -> logging.LogRecord:
    record = logging.LogRecord("taskdesk.tests.audit", logging.WARNING, __file__, 1, "Authorization denied", None, None)
    for key, value in extra.items():
        setattr(record, key, value)
    return record


def test_audit_fields_are_always_present() -> None:
    formatter = JsonLogFormatter(defaults={"service": "TaskDesk"})

    payload = json.loads(formatter.format(_record()))

    for field_name in AUDIT_FIELDS:
        assert field_name in payload
        assert payload[field_name] is None
    assert payload["service"] == "TaskDesk"


def test_actor_comes_from_request_context_unless_named() -> None:
    request_filter = RequestContextFilter()
    formatter = JsonLogFormatter()

    token = bind_actor_id("employee-1")
    try:
        implicit = _record(entity_kind="task", entity_id="t1")
        explicit = _record(actor_id="admin-1")
        request_filter.filter(implicit)
        request_filter.filter(explicit)
    finally:
        reset_actor_id(token)

    implicit_payload = json.loads(formatter.format(implicit))
    assert implicit_payload["actor_id"] == "employee-1"
    assert implicit_payload["entity_kind"] == "task"
    assert implicit_payload["entity_id"] == "t1"
    assert json.loads(formatter.format(explicit))["actor_id"] == "admin-1"
