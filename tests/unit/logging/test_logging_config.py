"""Unit tests for logging configuration and the JSON formatter."""

import json
import logging
from logging.handlers import RotatingFileHandler
from pathlib import Path

import pytest

from vshrink.config.models import LoggingConfig
from vshrink.logging.config import configure_logging
from vshrink.logging.context import FileContextFilter, file_context
from vshrink.logging.handlers import JSONFormatter


@pytest.fixture(autouse=True)
def reset_root_logger():
    """Save and restore root logger state between tests."""
    root = logging.getLogger()
    original_handlers = root.handlers[:]
    original_level = root.level
    yield
    for handler in root.handlers:
        if handler not in original_handlers:
            handler.close()
    root.handlers[:] = original_handlers
    root.setLevel(original_level)


def _record(msg: str = "hello", **extra) -> logging.LogRecord:
    record = logging.LogRecord(
        name="vshrink.test",
        level=logging.INFO,
        pathname=__file__,
        lineno=1,
        msg=msg,
        args=(),
        exc_info=None,
    )
    for key, value in extra.items():
        setattr(record, key, value)
    return record


class TestConfigureLogging:
    """Tests for configure_logging()."""

    @pytest.mark.parametrize(
        ("level", "expected"),
        [
            ("debug", logging.DEBUG),
            ("info", logging.INFO),
            ("warning", logging.WARNING),
            ("ERROR", logging.ERROR),
        ],
    )
    def test_levels(self, level: str, expected: int) -> None:
        configure_logging(LoggingConfig(level=level))

        assert logging.getLogger().level == expected

    def test_unknown_level_falls_back_to_info(self) -> None:
        configure_logging(LoggingConfig(level="chatty"))

        assert logging.getLogger().level == logging.INFO

    def test_stderr_only_by_default(self) -> None:
        configure_logging(LoggingConfig())

        root = logging.getLogger()
        assert len(root.handlers) == 1
        assert isinstance(root.handlers[0], logging.StreamHandler)

    def test_file_handler(self, tmp_path: Path) -> None:
        configure_logging(LoggingConfig(level="info", file=tmp_path / "v.log"))

        root = logging.getLogger()
        assert len(root.handlers) == 1
        assert isinstance(root.handlers[0], RotatingFileHandler)

    def test_file_and_stderr(self, tmp_path: Path) -> None:
        configure_logging(
            LoggingConfig(level="info", file=tmp_path / "v.log", include_stderr=True)
        )

        assert len(logging.getLogger().handlers) == 2

    def test_creates_log_directory(self, tmp_path: Path) -> None:
        log_file = tmp_path / "logs" / "nested" / "v.log"

        configure_logging(LoggingConfig(file=log_file))

        assert log_file.parent.is_dir()

    def test_text_format_carries_file_tag(self, tmp_path: Path) -> None:
        log_file = tmp_path / "v.log"
        configure_logging(LoggingConfig(level="info", file=log_file))

        with file_context("F002", "/videos/b.avi"):
            logging.getLogger("vshrink.test").info("probing")
        for handler in logging.getLogger().handlers:
            handler.flush()

        assert "[F002] vshrink.test - INFO - probing" in log_file.read_text()

    def test_json_format(self, tmp_path: Path) -> None:
        log_file = tmp_path / "v.log"
        configure_logging(LoggingConfig(level="info", file=log_file, format="json"))

        logging.getLogger("vshrink.test").info("done", extra={"outcome": "converted"})
        for handler in logging.getLogger().handlers:
            handler.flush()

        entry = json.loads(log_file.read_text().splitlines()[-1])
        assert entry["message"] == "done"
        assert entry["context"]["outcome"] == "converted"


class TestJSONFormatter:
    """Tests for JSONFormatter output."""

    def test_basic_fields(self) -> None:
        entry = json.loads(JSONFormatter().format(_record("hello")))

        assert entry["level"] == "INFO"
        assert entry["message"] == "hello"
        assert entry["logger"] == "vshrink.test"
        assert "timestamp" in entry

    def test_extra_in_context(self) -> None:
        entry = json.loads(JSONFormatter().format(_record(state="probing")))

        assert entry["context"] == {"state": "probing"}

    def test_file_context_included(self) -> None:
        record = _record()
        with file_context("F001", "/videos/a.avi"):
            FileContextFilter().filter(record)

        entry = json.loads(JSONFormatter().format(record))

        assert entry["context"]["file_id"] == "F001"
        assert entry["context"]["file_path"] == "/videos/a.avi"
        assert "file_tag" not in entry["context"]

    def test_no_context_key_without_extras(self) -> None:
        record = _record()
        FileContextFilter().filter(record)

        entry = json.loads(JSONFormatter().format(record))

        assert "context" not in entry
