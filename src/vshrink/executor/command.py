"""Argument vectors for ffprobe and the two ffmpeg passes.

The executable itself is not part of the returned lists; ProcessRunner
prepends it.
"""

from __future__ import annotations

import logging
import math
import platform
from dataclasses import dataclass
from pathlib import Path

from vshrink.domain.models import ConversionRequest

logger = logging.getLogger(__name__)


def null_device() -> str:
    """Platform null output target for pass 1."""
    return "NUL" if platform.system() == "Windows" else "/dev/null"


@dataclass
class TwoPassStats:
    """Statistics files shared by pass 1 and pass 2.

    ffmpeg derives the actual file names from the prefix:
    x264 writes prefix-0.log and prefix-0.log.mbtree,
    x265 writes prefix.log and prefix.log.cutree.
    """

    prefix: Path

    SUFFIXES = ("-0.log", "-0.log.mbtree", ".log", ".log.cutree", "-0.log.temp")

    def files(self) -> list[Path]:
        return [Path(str(self.prefix) + suffix) for suffix in self.SUFFIXES]

    def cleanup(self) -> None:
        """Remove statistics files left by the encoder."""
        for stats_file in self.files():
            if stats_file.exists():
                try:
                    stats_file.unlink()
                    logger.debug("Cleaned up pass log file: %s", stats_file)
                except OSError as e:
                    logger.warning(
                        "Could not clean up pass log file %s: %s", stats_file, e
                    )


def build_probe_args(input_path: Path) -> list[str]:
    """Ask ffprobe for the container duration only, as a bare number."""
    return [
        "-v",
        "error",
        "-show_entries",
        "format=duration",
        "-of",
        "default=noprint_wrappers=1:nokey=1",
        str(input_path),
    ]


def _video_args(
    request: ConversionRequest, pass_number: int, stats: TwoPassStats
) -> list[str]:
    return [
        "-c:v",
        request.video_encoder,
        "-b:v",
        f"{request.video_bitrate}k",
        "-pass",
        str(pass_number),
        "-passlogfile",
        str(stats.prefix),
    ]


def build_pass1_args(
    input_path: Path,
    request: ConversionRequest,
    stats: TwoPassStats,
    progress_log: Path,
) -> list[str]:
    """Build ffmpeg arguments for the statistics-gathering first pass.

    Video only, output discarded to the null device.
    """
    return [
        "-y",
        "-hide_banner",
        "-nostdin",
        "-nostats",
        "-loglevel",
        "error",
        "-i",
        str(input_path),
        *_video_args(request, 1, stats),
        "-an",
        "-progress",
        str(progress_log),
        "-f",
        "null",
        null_device(),
    ]


def build_pass2_args(
    input_path: Path,
    output_path: Path,
    request: ConversionRequest,
    stats: TwoPassStats,
    progress_log: Path,
) -> list[str]:
    """Build ffmpeg arguments for the final pass writing the real output."""
    return [
        "-y",
        "-hide_banner",
        "-nostdin",
        "-nostats",
        "-loglevel",
        "error",
        "-i",
        str(input_path),
        *_video_args(request, 2, stats),
        "-c:a",
        request.audio_encoder,
        "-b:a",
        f"{request.audio_bitrate}k",
        "-progress",
        str(progress_log),
        str(output_path),
    ]


def parse_probe_duration(stdout_text: str) -> float | None:
    """Parse the duration printed by build_probe_args().

    Returns:
        Positive duration in seconds, or None if missing or unusable.
    """
    for line in stdout_text.splitlines():
        line = line.strip()
        if not line:
            continue
        try:
            value = float(line)
        except ValueError:
            return None
        return value if math.isfinite(value) and value > 0 else None
    return None
