"""Formatting utilities.

Pure functions for presenting sizes, durations and percentages.
"""

import math


def format_duration(seconds: float) -> str:
    """Format a duration as H:MM:SS.

    Args:
        seconds: Duration in seconds; negative and non-finite values
            render as 0:00:00.

    Returns:
        Formatted string (e.g., "1:02:03").
    """
    if not math.isfinite(seconds) or seconds < 0:
        seconds = 0
    total = int(round(seconds))
    hours, rest = divmod(total, 3600)
    minutes, secs = divmod(rest, 60)
    return f"{hours}:{minutes:02d}:{secs:02d}"


def format_file_size(size_bytes: int) -> str:
    """Format file size in human-readable format.

    Args:
        size_bytes: File size in bytes (negative sizes keep their sign).

    Returns:
        Formatted string (e.g., "4.2 GB", "128.0 MB", "1.5 KB").
    """
    sign = "-" if size_bytes < 0 else ""
    size = abs(size_bytes)
    if size >= 1024**3:
        return f"{sign}{size / (1024**3):.1f} GB"
    elif size >= 1024**2:
        return f"{sign}{size / (1024**2):.1f} MB"
    elif size >= 1024:
        return f"{sign}{size / 1024:.1f} KB"
    else:
        return f"{sign}{size} B"


def format_improvement(percent: float) -> str:
    """Format a signed size improvement, e.g. "+23.4%" or "-5.0%"."""
    return f"{percent:+.1f}%"


def truncate_filename(filename: str, max_length: int = 40) -> str:
    """Truncate filename preserving start and extension.

    Examples:
        >>> truncate_filename("some-very-long-movie-name.mkv", 25)
        'some-very-long-movie….mkv'
        >>> truncate_filename("short.mp4", 40)
        'short.mp4'
    """
    if not filename or len(filename) <= max_length:
        return filename

    dot_index = filename.rfind(".")
    if dot_index > 0:
        extension = filename[dot_index:]
        base = filename[:dot_index]
    else:
        extension = ""
        base = filename

    available_for_base = max_length - len(extension) - 1
    if available_for_base < 1:
        return filename[: max_length - 1] + "…"

    return base[:available_for_base] + "…" + extension
