"""External tool discovery.

Resolves the ffmpeg and ffprobe executables with an ordered search:

1. A suggested directory (relative hints resolve against the working dir)
2. The directory containing this program
3. The current working directory
4. The PATH lookup

A miss returns an empty string; locate_tools() turns a miss into a fatal
ToolNotFoundError for the whole batch.
"""

from __future__ import annotations

import logging
import os
import platform
import shutil
import sys
from collections.abc import Callable
from dataclasses import dataclass
from pathlib import Path

logger = logging.getLogger(__name__)


class ToolNotFoundError(RuntimeError):
    """Raised when a required external tool cannot be located."""

    def __init__(self, name: str) -> None:
        self.name = name
        super().__init__(
            f"{name} not found in the suggested directory, program directory, "
            f"working directory or PATH"
        )


@dataclass(frozen=True)
class ToolPaths:
    """Resolved paths of the two required external tools."""

    ffmpeg: Path
    ffprobe: Path


def executable_name(name: str, system: str | None = None) -> str:
    """Apply the platform executable suffix to a tool name.

    Args:
        name: Bare tool name (e.g., "ffmpeg").
        system: Platform name override (defaults to platform.system()).

    Returns:
        "ffmpeg.exe" on Windows, the name unchanged elsewhere.
    """
    system = system or platform.system()
    if system == "Windows" and not name.casefold().endswith(".exe"):
        return f"{name}.exe"
    return name


def _program_dir() -> Path | None:
    """Directory containing the running program (frozen binary or script)."""
    if getattr(sys, "frozen", False):
        return Path(sys.executable).resolve().parent
    if sys.argv and sys.argv[0]:
        return Path(sys.argv[0]).resolve().parent
    return None


class BinaryLocator:
    """Finds external executables using a fixed search order.

    All environment lookups are injectable so tests can control every
    location independently.
    """

    def __init__(
        self,
        cwd: Path | None = None,
        program_dir: Path | None = None,
        which: Callable[[str], str | None] = shutil.which,
        system: str | None = None,
    ) -> None:
        """Initialize the locator.

        Args:
            cwd: Working directory (None = Path.cwd() at lookup time).
            program_dir: Directory of this program (None = auto-detect).
            which: PATH lookup function.
            system: Platform name override for executable suffixing.
        """
        self._cwd = cwd
        self._program_dir = program_dir
        self._which = which
        self._system = system

    def _candidate_dirs(self, suggested_dir: str) -> list[Path]:
        cwd = self._cwd or Path.cwd()
        dirs: list[Path] = []

        hint = suggested_dir.rstrip("/\\") if suggested_dir else ""
        if hint:
            hint_path = Path(hint).expanduser()
            if not hint_path.is_absolute():
                try:
                    hint_path = (cwd / hint_path).resolve()
                except (OSError, RuntimeError) as e:
                    logger.warning(
                        "Could not resolve suggested directory %s: %s", hint, e
                    )
                    hint_path = None
            if hint_path is not None:
                dirs.append(hint_path)

        program_dir = self._program_dir or _program_dir()
        if program_dir is not None:
            dirs.append(program_dir)

        dirs.append(cwd)
        return dirs

    def locate(self, suggested_dir: str, binary_name: str) -> str:
        """Resolve the path of an executable.

        Args:
            suggested_dir: Directory hint; empty means no hint.
            binary_name: Tool name without platform suffix.

        Returns:
            Full path of the first match, or "" when nothing was found.
        """
        name = executable_name(binary_name, self._system)

        for directory in self._candidate_dirs(suggested_dir):
            candidate = directory / name
            if candidate.is_file():
                logger.debug("Found %s at %s", binary_name, candidate)
                return str(candidate)

        which_result = self._which(name)
        if which_result:
            logger.debug("Found %s on PATH: %s", binary_name, which_result)
            return os.fspath(which_result)

        return ""


def locate_tools(
    ffmpeg_dir: str = "",
    ffprobe_dir: str = "",
    locator: BinaryLocator | None = None,
) -> ToolPaths:
    """Resolve both required tools or fail the batch.

    Args:
        ffmpeg_dir: Directory hint for ffmpeg.
        ffprobe_dir: Directory hint for ffprobe.
        locator: Locator to use (None = default BinaryLocator).

    Returns:
        ToolPaths with both executables.

    Raises:
        ToolNotFoundError: If either tool cannot be found.
    """
    locator = locator or BinaryLocator()

    ffmpeg = locator.locate(ffmpeg_dir, "ffmpeg")
    if not ffmpeg:
        raise ToolNotFoundError("ffmpeg")

    ffprobe = locator.locate(ffprobe_dir, "ffprobe")
    if not ffprobe:
        raise ToolNotFoundError("ffprobe")

    logger.info(
        "Using ffmpeg=%s ffprobe=%s",
        ffmpeg,
        ffprobe,
        extra={"ffmpeg": ffmpeg, "ffprobe": ffprobe},
    )
    return ToolPaths(ffmpeg=Path(ffmpeg), ffprobe=Path(ffprobe))
