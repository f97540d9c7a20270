"""Tests for the structured logging layer."""
import json
import logging

import pytest

from core.logging.config import bootstrap_logging, shutdown_logging
from core.logging.context import context, get_context
from core.logging.formatter import ConsoleFormatter, JSONFormatter
from core.logging.levels import LogLevel, register_levels, to_level
from core.logging.logger import get_logger


def _record(msg="served", **extra):
    record = logging.LogRecord("stats", logging.INFO, __file__, 10, msg, None, None, func="resolve")
    for k, v in extra.items():
        setattr(record, k, v)
    return record


class TestLevels:
    def test_custom_levels(self):
        register_levels()
        assert logging.getLevelName(int(LogLevel.TRACE)) == "TRACE"
        assert to_level("success") == 25
        assert to_level("bogus") == logging.INFO
        assert to_level(10) == 10


class TestContext:
    def test_scoped_context_is_restored(self):
        with context(alias="aatrox", lane="top"):
            with context(channel="primary", lane=None):
                assert get_context() == {"alias": "aatrox", "lane": "top", "channel": "primary"}
            assert get_context() == {"alias": "aatrox", "lane": "top"}
        assert get_context() == {}


class TestFormatters:
    def test_json_formatter_includes_pipeline_fields(self):
        record = _record(service="stats", channel="secondary", attempt=2, context={"alias": "aatrox"})
        payload = json.loads(JSONFormatter().format(record))
        assert payload["message"] == "served"
        assert payload["service"] == "stats"
        assert payload["channel"] == "secondary"
        assert payload["attempt"] == 2
        assert payload["context"] == {"alias": "aatrox"}
        assert "variant" not in payload

    def test_console_formatter(self):
        line = ConsoleFormatter().format(_record(variant="json patch=30 lane=top"))
        assert "served" in line
        assert "variant=json patch=30 lane=top" in line


class TestStructuredLogger:
    def test_lazy_message_only_evaluated_when_enabled(self, caplog):
        logger = get_logger("tests.lazy", service="stats")
        calls = []

        def message():
            calls.append(1)
            return "expensive"

        with caplog.at_level(logging.INFO, logger="tests.lazy"):
            logger.debug(message)
            assert calls == []
            logger.info(message)

        assert calls == [1]
        assert caplog.records[-1].service == "stats"

    def test_context_is_attached_to_records(self, caplog):
        logger = get_logger("tests.ctx")
        with caplog.at_level(logging.INFO, logger="tests.ctx"):
            with context(alias="darius"):
                logger.info("hello")
        assert caplog.records[-1].context == {"alias": "darius"}


class TestBootstrap:
    @pytest.fixture(autouse=True)
    def restore_root(self):
        root = logging.getLogger()
        handlers, level = list(root.handlers), root.level
        yield
        shutdown_logging()
        root.handlers[:] = handlers
        root.setLevel(level)

    def test_writes_json_lines(self, tmp_path):
        bootstrap_logging(service="stats", level="DEBUG", log_dir=tmp_path, log_file_name="t.jsonl", console=False)
        get_logger("tests.file", service="stats").success("cached")
        shutdown_logging()

        lines = (tmp_path / "t.jsonl").read_text().splitlines()
        entries = [json.loads(line) for line in lines]
        assert any(e["message"] == "cached" and e["level"] == "SUCCESS" for e in entries)
