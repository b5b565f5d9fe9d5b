"""Tests for logging setup."""

from __future__ import annotations

import json
import logging
import sys

import pytest

from stylecraft.logs import ConsoleFormatter, JsonFormatter, configure_logging


def _record(msg: str = "stored %d", *args, **extra) -> logging.LogRecord:
    record = logging.LogRecord("stylecraft.test", logging.INFO, __file__, 1, msg, args, None)
    for key, value in extra.items():
        setattr(record, key, value)
    return record


@pytest.fixture(autouse=True)
def _reset_logger():
    logger = logging.getLogger("stylecraft")
    handlers, level = list(logger.handlers), logger.level
    yield
    logger.handlers = handlers
    logger.setLevel(level)


class TestJsonFormatter:
    def test_fields(self):
        payload = json.loads(JsonFormatter().format(_record("stored %d", 3)))
        assert payload["msg"] == "stored 3"
        assert payload["level"] == "info"
        assert payload["name"] == "stylecraft.test"
        assert "time" in payload

    def test_extra_fields(self):
        payload = json.loads(JsonFormatter().format(_record(counts={"axe": 52})))
        assert payload["counts"] == {"axe": 52}

    def test_exception(self):
        try:
            raise ValueError("bad")
        except ValueError:
            record = logging.LogRecord(
                "stylecraft", logging.ERROR, __file__, 1, "failed", (), sys.exc_info()
            )
        payload = json.loads(JsonFormatter().format(record))
        assert "ValueError: bad" in payload["exc"]


class TestConsoleFormatter:
    def test_extra_appended(self):
        line = ConsoleFormatter().format(_record("stored %d", 2, source="aria"))
        assert "stored 2" in line
        assert line.endswith("source=aria")

    def test_plain(self):
        line = ConsoleFormatter().format(_record("hello"))
        assert "INFO" in line
        assert "stylecraft.test: hello" in line


class TestConfigureLogging:
    def test_installs_single_handler(self):
        configure_logging("DEBUG")
        configure_logging("WARNING", json_output=True)
        logger = logging.getLogger("stylecraft")
        ours = [h for h in logger.handlers if getattr(h, "_stylecraft", False)]
        assert len(ours) == 1
        assert isinstance(ours[0].formatter, JsonFormatter)
        assert logger.level == logging.WARNING

    def test_invalid_level(self):
        with pytest.raises(ValueError):
            configure_logging("LOUD")
