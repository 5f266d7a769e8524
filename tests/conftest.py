"""Shared test fixtures for vshrink."""

import os
import stat
import sys
import textwrap
from pathlib import Path

import pytest

from vshrink.domain.models import ConversionRequest, RunContext

RUN_TIMESTAMP = "20260101-120000"


@pytest.fixture
def run_context(tmp_path: Path) -> RunContext:
    """Run context with a fixed timestamp and an isolated temp directory."""
    temp_dir = tmp_path / "tmp"
    temp_dir.mkdir()
    return RunContext(timestamp=RUN_TIMESTAMP, temp_dir=temp_dir, cwd=tmp_path)


@pytest.fixture
def conversion_request() -> ConversionRequest:
    """Default conversion request with progress output disabled."""
    return ConversionRequest(quiet=True)


@pytest.fixture
def make_input(tmp_path: Path):
    """Factory creating an input file of a given size."""

    def _make(name: str = "movie.avi", size: int = 1000, mtime: float | None = None):
        path = tmp_path / name
        path.parent.mkdir(parents=True, exist_ok=True)
        path.write_bytes(b"x" * size)
        if mtime is not None:
            os.utime(path, (mtime, mtime))
        return path

    return _make


@pytest.fixture
def fake_tool():
    """Factory writing an executable Python script that stands in for a tool.

    The script body runs with sys already imported.
    """

    def _write(directory: Path, name: str, body: str) -> Path:
        directory.mkdir(parents=True, exist_ok=True)
        script = directory / name
        script.write_text(
            f"#!{sys.executable}\nimport sys\n" + textwrap.dedent(body),
            encoding="utf-8",
        )
        script.chmod(
            script.stat().st_mode | stat.S_IXUSR | stat.S_IXGRP | stat.S_IXOTH
        )
        return script

    return _write
