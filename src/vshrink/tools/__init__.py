"""External tool discovery and output parsing.

- locator.py: ffmpeg/ffprobe path resolution
- progress_log.py: parsing of ffmpeg -progress log files
"""

from vshrink.tools.locator import (
    BinaryLocator,
    ToolNotFoundError,
    ToolPaths,
    executable_name,
    locate_tools,
)
from vshrink.tools.progress_log import (
    ProgressSample,
    clamp_percent,
    parse_out_time,
    read_progress_sample,
)

__all__ = [
    "BinaryLocator",
    "ProgressSample",
    "ToolNotFoundError",
    "ToolPaths",
    "clamp_percent",
    "executable_name",
    "locate_tools",
    "parse_out_time",
    "read_progress_sample",
]
