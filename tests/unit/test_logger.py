"""Tests for structured logging setup and trace-id propagation."""

import json
import logging

import pytest

from trade_psychology.observability.logger import (
    get_trace_id,
    new_trace_id,
    set_trace_id,
    setup_logging,
)


@pytest.fixture
def restore_root_logger():
    root = logging.getLogger()
    handlers, level = root.handlers[:], root.level
    yield
    root.handlers = handlers
    root.setLevel(level)


class TestTraceId:
    def test_set_and_get(self):
        set_trace_id("trace-1")
        assert get_trace_id() == "trace-1"

    def test_new_trace_id_is_current(self):
        tid = new_trace_id()
        assert get_trace_id() == tid
        assert len(tid) == 36


class TestSetupLogging:
    def test_stdlib_records_render_as_json(self, capsys, restore_root_logger):
        setup_logging("INFO", "json")
        set_trace_id("abc-123")
        logging.getLogger("trade_psychology.test").info("found %d trades", 3)

        line = capsys.readouterr().err.strip().splitlines()[-1]
        record = json.loads(line)
        assert record["event"] == "found 3 trades"
        assert record["trace_id"] == "abc-123"
        assert record["level"] == "info"
        assert record["logger"] == "trade_psychology.test"

    def test_level_filters(self, capsys, restore_root_logger):
        setup_logging("WARNING", "console")
        logging.getLogger("trade_psychology.test").info("hidden")
        assert "hidden" not in capsys.readouterr().err
