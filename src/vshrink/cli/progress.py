"""Terminal progress rendering for running encode passes."""

from __future__ import annotations

import sys
from typing import TextIO

from vshrink.core.formatting import truncate_filename
from vshrink.executor.monitor import ProgressUpdate


class StderrProgressReporter:
    """Writes progress updates to stderr with in-place updates.

    Each update overwrites the current line; finish() ends the line once a
    pass is done.
    """

    def __init__(self, enabled: bool = True, stream: TextIO | None = None) -> None:
        """Initialize the reporter.

        Args:
            enabled: If False, suppresses output (quiet or JSON mode).
            stream: Output stream (defaults to sys.stderr).
        """
        self.enabled = enabled
        self.stream = stream or sys.stderr
        self._line_open = False
        self._last_pass: int | None = None

    def __call__(self, update: ProgressUpdate) -> None:
        if not self.enabled:
            return
        if self._line_open and update.pass_number != self._last_pass:
            self.finish()
        self._last_pass = update.pass_number
        msg = (
            f"\r[pass {update.pass_number}/2] "
            f"{truncate_filename(update.original_name, 30)} -> "
            f"{truncate_filename(update.new_name, 40)} "
            f"{update.percent:5.1f}% ETA {update.remaining}"
        )
        self.stream.write(msg)
        self.stream.flush()
        self._line_open = True

    def finish(self) -> None:
        """Terminate the in-place progress line."""
        if self.enabled and self._line_open:
            self.stream.write("\n")
            self.stream.flush()
        self._line_open = False
