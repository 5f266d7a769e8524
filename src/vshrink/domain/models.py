"""Domain models for vshrink.

This module contains the values threaded through a conversion batch:

- ConversionRequest: immutable batch configuration (validated with pydantic)
- RunContext: run-scoped timestamp, temp directory and working directory
- FileTask: one input file while it is being processed
- FileResult: the record emitted for every processed file
"""

from __future__ import annotations

import logging
import tempfile
from dataclasses import dataclass
from datetime import datetime
from pathlib import Path

from pydantic import BaseModel, ConfigDict, Field, field_validator

from vshrink.domain.enums import ConversionOutcome

logger = logging.getLogger(__name__)

# Bounds for the required size improvement, in percent
MIN_REQUIRED_IMPROVEMENT = 0
MAX_REQUIRED_IMPROVEMENT = 99

# Duration used when the probe output cannot be parsed
PLACEHOLDER_DURATION = 1.0

# Prefix for all run-scoped log files
LOG_PREFIX = "vshrink"


class ConversionRequest(BaseModel):
    """Immutable configuration for a conversion batch.

    Created once per invocation and shared read-only by every file task.
    """

    model_config = ConfigDict(extra="forbid", frozen=True)

    extension: str = "mkv"
    required_improvement: int = 10
    video_encoder: str = "libx265"
    video_bitrate: int = Field(default=1500, gt=0)
    audio_encoder: str = "aac"
    audio_bitrate: int = Field(default=128, gt=0)
    match_timestamps: bool = True
    full_paths: bool = False
    quiet: bool = False
    cleanup_partial: bool = False
    keep_logs: bool = False

    @field_validator("extension")
    @classmethod
    def normalize_extension(cls, v: str) -> str:
        """Strip a leading dot and reject empty extensions."""
        v = v.strip().lstrip(".")
        if not v:
            raise ValueError("extension must not be empty")
        return v

    @field_validator("required_improvement")
    @classmethod
    def clamp_required_improvement(cls, v: int) -> int:
        """Clamp the improvement threshold into [0, 99] instead of rejecting."""
        clamped = max(MIN_REQUIRED_IMPROVEMENT, min(MAX_REQUIRED_IMPROVEMENT, v))
        if clamped != v:
            logger.warning(
                "Required improvement %d%% is out of range, using %d%%",
                v,
                clamped,
            )
        return clamped

    @field_validator("video_encoder", "audio_encoder")
    @classmethod
    def require_encoder_name(cls, v: str) -> str:
        """Encoder identifiers are passed to ffmpeg verbatim."""
        v = v.strip()
        if not v:
            raise ValueError("encoder name must not be empty")
        return v


@dataclass(frozen=True)
class RunContext:
    """Run-scoped values shared by every file in a batch.

    The timestamp groups all artifacts of one run; log files and the pass
    statistics prefix live in temp_dir.
    """

    timestamp: str
    temp_dir: Path
    cwd: Path

    @classmethod
    def create(
        cls,
        temp_dir: Path | None = None,
        now: datetime | None = None,
    ) -> RunContext:
        """Build a context from the clock and the environment.

        Args:
            temp_dir: Directory for run logs (None = system temp directory).
            now: Override for the run timestamp.

        Returns:
            A new RunContext.
        """
        moment = now or datetime.now()
        return cls(
            timestamp=moment.strftime("%Y%m%d-%H%M%S"),
            temp_dir=temp_dir or Path(tempfile.gettempdir()),
            cwd=Path.cwd(),
        )

    def log_path(self, purpose: str) -> Path:
        """Path of a run log file, e.g. ``vshrink_<ts>_pass1_progress.log``."""
        return self.temp_dir / f"{LOG_PREFIX}_{self.timestamp}_{purpose}.log"

    @property
    def passlog_prefix(self) -> Path:
        """Prefix handed to ffmpeg for two-pass statistics files."""
        return self.temp_dir / f"{LOG_PREFIX}_{self.timestamp}_passlog"

    def output_path_for(self, input_path: Path, extension: str) -> Path:
        """Derive the output path for an input file.

        The full input name is kept and the run timestamp is appended before
        the new extension, e.g. ``clip.avi`` -> ``clip.avi.<ts>.mkv``. The
        output never collides with the input, and inputs that share a stem
        (``clip.avi``, ``clip.mp4``) never share an output.
        """
        return input_path.with_name(
            f"{input_path.name}.{self.timestamp}.{extension.lstrip('.')}"
        )

    def display_path(self, path: Path, full_paths: bool) -> str:
        """Render a path absolute or relative to the working directory."""
        if full_paths:
            return str(path.absolute())
        try:
            return str(path.absolute().relative_to(self.cwd))
        except ValueError:
            return str(path)


@dataclass
class FileTask:
    """One input file being processed.

    duration_seconds is filled in after probing and never drops below a
    positive placeholder, so percentage math is always defined.
    """

    input_path: Path
    output_path: Path
    original_mtime: float
    original_size: int
    duration_seconds: float = PLACEHOLDER_DURATION

    @property
    def short_name(self) -> str:
        """File name without directory, used for display."""
        return self.input_path.name

    @property
    def output_name(self) -> str:
        """Output file name without directory, used for display."""
        return self.output_path.name


@dataclass(frozen=True)
class FileResult:
    """Record emitted for every processed file."""

    input: str
    outcome: ConversionOutcome = ConversionOutcome.UNKNOWN
    improvement: float = 0.0
    output: str = ""

    def to_dict(self) -> dict[str, str | float]:
        """Serialize for JSON output."""
        return {
            "input": self.input,
            "outcome": self.outcome.value,
            "improvement": round(self.improvement, 2),
            "output": self.output,
        }
