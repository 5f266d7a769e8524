"""Exit codes for the vshrink command.

Exit code ranges:
    0: Success
    1-9: General errors
    10-19: Configuration errors
    20-29: Target/file errors
    30-39: Tool errors
    40-49: Operation errors
"""

from enum import IntEnum


class ExitCode(IntEnum):
    """Exit codes for the vshrink CLI."""

    SUCCESS = 0
    GENERAL_ERROR = 1
    INTERRUPTED = 2

    CONFIG_ERROR = 11

    # No input pattern matched a file
    TARGET_NOT_FOUND = 20

    # ffmpeg or ffprobe could not be located
    TOOL_NOT_AVAILABLE = 30

    # At least one file ended Unreadable or Error
    OPERATION_FAILED = 40
