"""FFmpeg -progress log parsing.

ffmpeg appends key=value blocks to the file given with ``-progress``. Only
``out_time_ms`` is consumed, and only its last occurrence matters.

Note that ffmpeg reports ``out_time_ms`` in microseconds despite the name.
The value is scaled by 1/10000, so dividing it by the duration in seconds
yields a percentage directly.
"""

from __future__ import annotations

import logging
import re
from dataclasses import dataclass
from pathlib import Path

logger = logging.getLogger(__name__)

# A line counts only once its newline is written; a half-flushed tail is skipped
OUT_TIME_PATTERN = re.compile(r"^out_time_ms=(-?\d+)[ \t]*\r?\n", re.MULTILINE)

# out_time_ms / TIME_SCALE / duration_seconds == percent complete
TIME_SCALE = 10_000

MIN_PERCENT = 1.0
MAX_PERCENT = 100.0


@dataclass(frozen=True)
class ProgressSample:
    """Progress derived from the tail of a progress log."""

    out_time_ms: int

    @property
    def time_value(self) -> float:
        """Scaled, non-negative time value (hundredths of a second)."""
        return max(0.0, self.out_time_ms / TIME_SCALE)

    def percent(self, duration_seconds: float) -> float:
        """Completion against the total duration, clamped to [1, 100].

        Args:
            duration_seconds: Probed duration; non-positive values are
                treated as unknown and report the minimum.

        Returns:
            Completion percentage.
        """
        if duration_seconds <= 0:
            return MIN_PERCENT
        return clamp_percent(self.time_value / duration_seconds)


def clamp_percent(value: float) -> float:
    """Clamp a percentage to [1, 100]."""
    return max(MIN_PERCENT, min(MAX_PERCENT, value))


def parse_out_time(text: str) -> int | None:
    """Return the last out_time_ms value in progress log text.

    Args:
        text: Full or partial progress log content.

    Returns:
        The last value on a complete line, or None if no complete
        out_time_ms line has been written yet.
    """
    matches = OUT_TIME_PATTERN.findall(text)
    if not matches:
        return None
    return int(matches[-1])


def read_progress_sample(path: Path) -> ProgressSample | None:
    """Read the current progress sample from a progress log file.

    A missing file is expected early in a pass and is not an error.

    Args:
        path: Progress log written by ffmpeg.

    Returns:
        ProgressSample, or None if nothing usable is present yet.
    """
    try:
        text = path.read_text(encoding="utf-8", errors="replace")
    except FileNotFoundError:
        return None
    except OSError as e:
        logger.debug("Could not read progress log %s: %s", path, e)
        return None

    value = parse_out_time(text)
    if value is None:
        return None
    return ProgressSample(out_time_ms=value)
