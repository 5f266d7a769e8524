"""Expansion of input arguments into file paths."""

from __future__ import annotations

import glob
import logging
from collections.abc import Iterable
from pathlib import Path

logger = logging.getLogger(__name__)


def expand_inputs(patterns: Iterable[str]) -> list[Path]:
    """Expand wildcard patterns into files, keeping argument order.

    Literal paths are passed through; a pattern that matches no file is
    reported as a warning. Duplicates keep their first position.

    Args:
        patterns: Command-line input arguments.

    Returns:
        Files to convert, in order.
    """
    files: list[Path] = []
    seen: set[Path] = set()

    for pattern in patterns:
        if glob.has_magic(pattern):
            matches = [Path(m) for m in sorted(glob.glob(pattern)) if Path(m).is_file()]
        else:
            path = Path(pattern)
            matches = [path] if path.is_file() else []

        if not matches:
            logger.warning("No files match %s", pattern)
            continue

        for match in matches:
            key = match.absolute()
            if key not in seen:
                seen.add(key)
                files.append(match)

    return files
