"""Tests for structured JSON logging."""

from __future__ import annotations

import json
import logging

from factorfive_mcp.utils.logging import JsonFormatter, configure_logging


def _record(**extra: object) -> logging.LogRecord:
    record = logging.LogRecord("factorfive", logging.WARNING, __file__, 1, "Peer fetch %s", ("failed",), None)
    for key, value in extra.items():
        setattr(record, key, value)
    return record


def test_json_formatter_includes_extra_fields() -> None:
    payload = json.loads(JsonFormatter().format(_record(peer="NVDA", attempt=2)))
    assert payload["message"] == "Peer fetch failed"
    assert payload["level"] == "WARNING"
    assert payload["logger"] == "factorfive"
    assert payload["peer"] == "NVDA"
    assert payload["attempt"] == 2
    assert "args" not in payload
    assert "exception" not in payload


def test_configure_logging_replaces_root_handlers() -> None:
    root = logging.getLogger()
    previous_handlers, previous_level = root.handlers[:], root.level
    try:
        configure_logging("debug")
        assert root.level == logging.DEBUG
        assert len(root.handlers) == 1
        assert isinstance(root.handlers[0].formatter, JsonFormatter)
    finally:
        root.handlers = previous_handlers
        root.setLevel(previous_level)
