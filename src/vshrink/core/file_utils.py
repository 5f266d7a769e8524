"""File metadata utilities.

Used after an encode to carry the original modification time over to the
output and to delete rejected outputs.
"""

from __future__ import annotations

import logging
import os
from pathlib import Path

logger = logging.getLogger(__name__)


class FileTimestampError(OSError):
    """Error reading or setting a file modification time."""


def get_file_mtime(file_path: Path) -> float:
    """Get file modification time as Unix timestamp.

    Raises:
        FileTimestampError: If the file cannot be stat-ed.
    """
    try:
        return file_path.stat().st_mtime
    except OSError as e:
        raise FileTimestampError(f"Cannot read mtime for {file_path}: {e}") from e


def set_file_mtime(file_path: Path, mtime: float) -> None:
    """Set the modification time, preserving the access time.

    Raises:
        FileTimestampError: If the times cannot be set.
    """
    if mtime < 0:
        raise FileTimestampError(
            f"Invalid timestamp {mtime}: cannot be before Unix epoch (1970-01-01)"
        )
    try:
        atime = file_path.stat().st_atime
        os.utime(file_path, (atime, mtime))
    except OSError as e:
        raise FileTimestampError(f"Cannot set mtime for {file_path}: {e}") from e


def remove_file(path: Path) -> bool:
    """Delete a file if it exists.

    Returns:
        True if the file is gone afterwards.
    """
    try:
        path.unlink(missing_ok=True)
    except OSError as e:
        logger.warning("Could not remove %s: %s", path, e)
        return False
    return True
