"""Core utilities package.

Pure helpers with no knowledge of the conversion pipeline: display
formatting and file metadata handling.
"""

from vshrink.core.file_utils import (
    FileTimestampError,
    get_file_mtime,
    remove_file,
    set_file_mtime,
)
from vshrink.core.formatting import (
    format_duration,
    format_file_size,
    format_improvement,
    truncate_filename,
)

__all__ = [
    "FileTimestampError",
    "format_duration",
    "format_file_size",
    "format_improvement",
    "get_file_mtime",
    "remove_file",
    "set_file_mtime",
    "truncate_filename",
]
