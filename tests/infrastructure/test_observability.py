"""Structured Logging — JSON fields and idempotent setup."""

import json
import logging

import pytest

from gtasks_mcp.infrastructure.observability import JSONFormatter, setup_logging


@pytest.fixture
def restore_root_logger():
    handlers = list(logging.root.handlers)
    level = logging.root.level
    yield
    logging.root.handlers[:] = handlers
    logging.root.setLevel(level)


def test_json_formatter_includes_extras():
    record = logging.LogRecord(
        "gtasks_mcp.test", logging.WARNING, __file__, 1, "Tool '%s' failed", ("get_task",), None,
    )
    record.operation = "get_task"
    record.error_code = "INVALID_ARGUMENTS"
    record.duration_ms = 1.5
    log = json.loads(JSONFormatter().format(record))
    assert log["level"] == "WARNING"
    assert log["message"] == "Tool 'get_task' failed"
    assert log["operation"] == "get_task"
    assert log["error_code"] == "INVALID_ARGUMENTS"
    assert log["duration_ms"] == 1.5
    assert "client_ip" not in log


def test_setup_logging_is_idempotent(restore_root_logger):
    setup_logging("DEBUG", "json")
    count = len(logging.root.handlers)
    setup_logging("INFO", "text")
    assert len(logging.root.handlers) == count
    assert logging.root.level == logging.INFO
