"""Configuration data models for vshrink."""

from __future__ import annotations

from dataclasses import dataclass, field
from pathlib import Path

from vshrink.domain.models import ConversionRequest


@dataclass
class ToolPathsConfig:
    """Directory hints for the external tools.

    Empty strings trigger the full fallback search.
    """

    ffmpeg_dir: str = ""
    ffprobe_dir: str = ""


@dataclass
class LoggingConfig:
    """Logging configuration."""

    # Log level: debug, info, warning, error
    level: str = "warning"

    # Log file path (None = stderr only)
    file: Path | None = None

    # Output format: text or json
    format: str = "text"

    # Also log to stderr when a file is configured
    include_stderr: bool = False

    # Rotation settings
    max_bytes: int = 10_485_760
    backup_count: int = 5


@dataclass
class VShrinkConfig:
    """Complete resolved configuration for one invocation."""

    conversion: ConversionRequest = field(default_factory=ConversionRequest)
    tools: ToolPathsConfig = field(default_factory=ToolPathsConfig)
    logging: LoggingConfig = field(default_factory=LoggingConfig)

    # Directory for run logs (None = system temp directory)
    temp_directory: Path | None = None
