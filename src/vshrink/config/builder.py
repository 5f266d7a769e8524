"""Configuration builder with explicit layering.

ConfigBuilder composes VShrinkConfig from several ConfigSource values;
later sources override earlier ones for every field they specify.
"""

from __future__ import annotations

from dataclasses import dataclass, fields
from pathlib import Path
from typing import Any

from pydantic import ValidationError

from vshrink.config.env import EnvReader
from vshrink.config.models import LoggingConfig, ToolPathsConfig, VShrinkConfig
from vshrink.domain.models import ConversionRequest


class ConfigError(Exception):
    """Raised when configuration cannot be read or is invalid."""


@dataclass
class ConfigSource:
    """Configuration values from a single source.

    None values mean "not specified in this source" and do not override
    values from lower-precedence sources.
    """

    # Conversion settings
    extension: str | None = None
    required_improvement: int | None = None
    video_encoder: str | None = None
    video_bitrate: int | None = None
    audio_encoder: str | None = None
    audio_bitrate: int | None = None
    match_timestamps: bool | None = None
    full_paths: bool | None = None
    quiet: bool | None = None
    cleanup_partial: bool | None = None
    keep_logs: bool | None = None

    # Tool directory hints
    ffmpeg_dir: str | None = None
    ffprobe_dir: str | None = None

    # Run logs
    temp_directory: Path | None = None

    # Logging
    logging_level: str | None = None
    logging_file: Path | None = None
    logging_format: str | None = None
    logging_include_stderr: bool | None = None
    logging_max_bytes: int | None = None
    logging_backup_count: int | None = None


# ConfigSource fields that map 1:1 onto ConversionRequest
_CONVERSION_FIELDS = (
    "extension",
    "required_improvement",
    "video_encoder",
    "video_bitrate",
    "audio_encoder",
    "audio_bitrate",
    "match_timestamps",
    "full_paths",
    "quiet",
    "cleanup_partial",
    "keep_logs",
)


class ConfigBuilder:
    """Builds VShrinkConfig by layering ConfigSources with precedence.

    Example:
        builder = ConfigBuilder()
        builder.apply(source_from_file(file_config))
        builder.apply(source_from_env(EnvReader()))
        builder.apply(cli_source)
        config = builder.build()
    """

    def __init__(self) -> None:
        self._values: dict[str, Any] = {}

    def apply(self, source: ConfigSource) -> None:
        """Apply a source; its non-None values override existing ones."""
        for field_obj in fields(source):
            value = getattr(source, field_obj.name)
            if value is not None:
                self._values[field_obj.name] = value

    def _get(self, key: str, default: Any) -> Any:
        return self._values.get(key, default)

    def build(self) -> VShrinkConfig:
        """Build the final configuration with defaults for unset values.

        Raises:
            ConfigError: If the conversion settings fail validation.
        """
        conversion_values = {
            name: self._values[name]
            for name in _CONVERSION_FIELDS
            if name in self._values
        }
        try:
            conversion = ConversionRequest(**conversion_values)
        except ValidationError as e:
            raise ConfigError(f"Invalid conversion settings: {e}") from e

        tools = ToolPathsConfig(
            ffmpeg_dir=self._get("ffmpeg_dir", ""),
            ffprobe_dir=self._get("ffprobe_dir", ""),
        )

        logging_config = LoggingConfig(
            level=self._get("logging_level", "warning"),
            file=self._get("logging_file", None),
            format=self._get("logging_format", "text"),
            include_stderr=self._get("logging_include_stderr", False),
            max_bytes=self._get("logging_max_bytes", 10_485_760),
            backup_count=self._get("logging_backup_count", 5),
        )

        return VShrinkConfig(
            conversion=conversion,
            tools=tools,
            logging=logging_config,
            temp_directory=self._get("temp_directory", None),
        )


def source_from_file(file_config: dict[str, Any]) -> ConfigSource:
    """Create a ConfigSource from a parsed TOML config file.

    Args:
        file_config: Parsed configuration dictionary.

    Returns:
        ConfigSource with values from the file.
    """
    convert = file_config.get("convert", {})
    tools = file_config.get("tools", {})
    logging_conf = file_config.get("logging", {})

    temp_dir_str = file_config.get("temp_directory")
    log_file_str = logging_conf.get("file")

    return ConfigSource(
        extension=convert.get("extension"),
        required_improvement=convert.get("required_improvement"),
        video_encoder=convert.get("video_encoder"),
        video_bitrate=convert.get("video_bitrate"),
        audio_encoder=convert.get("audio_encoder"),
        audio_bitrate=convert.get("audio_bitrate"),
        match_timestamps=convert.get("match_timestamps"),
        full_paths=convert.get("full_paths"),
        quiet=convert.get("quiet"),
        cleanup_partial=convert.get("cleanup_partial"),
        keep_logs=convert.get("keep_logs"),
        ffmpeg_dir=tools.get("ffmpeg_dir"),
        ffprobe_dir=tools.get("ffprobe_dir"),
        temp_directory=Path(temp_dir_str).expanduser() if temp_dir_str else None,
        logging_level=logging_conf.get("level"),
        logging_file=Path(log_file_str).expanduser() if log_file_str else None,
        logging_format=logging_conf.get("format"),
        logging_include_stderr=logging_conf.get("include_stderr"),
        logging_max_bytes=logging_conf.get("max_bytes"),
        logging_backup_count=logging_conf.get("backup_count"),
    )


def source_from_env(reader: EnvReader) -> ConfigSource:
    """Create a ConfigSource from VSHRINK_* environment variables."""
    return ConfigSource(
        required_improvement=reader.get_int("VSHRINK_REQUIRED_IMPROVEMENT"),
        ffmpeg_dir=reader.get_str("VSHRINK_FFMPEG_DIR"),
        ffprobe_dir=reader.get_str("VSHRINK_FFPROBE_DIR"),
        temp_directory=reader.get_path("VSHRINK_TEMP_DIR"),
        logging_level=reader.get_str("VSHRINK_LOG_LEVEL"),
    )
