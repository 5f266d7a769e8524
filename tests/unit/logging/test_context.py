"""Unit tests for per-file logging context."""

import logging
import threading
from pathlib import Path

from vshrink.logging.context import (
    FileContextFilter,
    clear_file_context,
    file_context,
    get_file_context,
    set_file_context,
)


def _record() -> logging.LogRecord:
    return logging.LogRecord("test", logging.INFO, "", 0, "msg", (), None)


class TestSetAndGetFileContext:
    """Tests for set_file_context and get_file_context."""

    def test_set_and_get(self) -> None:
        set_file_context("F001", "/videos/a.avi")

        assert get_file_context() == ("F001", "/videos/a.avi")

        clear_file_context()

    def test_path_object_stored_as_string(self) -> None:
        set_file_context("F001", Path("/videos/a.avi"))
        _, file_path = get_file_context()

        assert file_path == "/videos/a.avi"

        clear_file_context()

    def test_clear(self) -> None:
        set_file_context("F001", "/videos/a.avi")
        clear_file_context()

        assert get_file_context() == (None, None)

    def test_default_is_none(self) -> None:
        assert get_file_context() == (None, None)


class TestFileContextManager:
    def test_restores_previous_context(self) -> None:
        with file_context("F001", "a.avi"):
            with file_context("F002", "b.avi"):
                assert get_file_context() == ("F002", "b.avi")
            assert get_file_context() == ("F001", "a.avi")

        assert get_file_context() == (None, None)

    def test_restores_after_exception(self) -> None:
        try:
            with file_context("F009"):
                raise RuntimeError("boom")
        except RuntimeError:
            pass

        assert get_file_context() == (None, None)

    def test_isolated_between_threads(self) -> None:
        seen: list[tuple[str | None, str | None]] = []

        def worker() -> None:
            seen.append(get_file_context())

        with file_context("F001", "a.avi"):
            thread = threading.Thread(target=worker)
            thread.start()
            thread.join()

        assert seen == [(None, None)]


class TestFileContextFilter:
    def test_adds_attributes(self) -> None:
        record = _record()
        with file_context("F003", "/videos/c.avi"):
            assert FileContextFilter().filter(record) is True

        assert record.file_id == "F003"
        assert record.file_path == "/videos/c.avi"
        assert record.file_tag == "[F003] "

    def test_empty_tag_outside_context(self) -> None:
        record = _record()
        FileContextFilter().filter(record)

        assert record.file_id is None
        assert record.file_tag == ""
