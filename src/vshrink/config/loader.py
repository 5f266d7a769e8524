"""Configuration loader with precedence handling.

Configuration is loaded with the following precedence (highest to lowest):
1. CLI arguments
2. Environment variables (VSHRINK_*)
3. Config file (~/.vshrink/config.toml)
4. Default values

Environment variables:
- VSHRINK_CONFIG_PATH: Path to config file (overrides default location)
- VSHRINK_FFMPEG_DIR: Directory hint for ffmpeg
- VSHRINK_FFPROBE_DIR: Directory hint for ffprobe
- VSHRINK_TEMP_DIR: Directory for run logs
- VSHRINK_LOG_LEVEL: Log level (debug, info, warning, error)
- VSHRINK_REQUIRED_IMPROVEMENT: Required size improvement in percent
"""

from __future__ import annotations

import logging
import tomllib
from pathlib import Path
from typing import Any

from vshrink.config.builder import (
    ConfigBuilder,
    ConfigError,
    ConfigSource,
    source_from_env,
    source_from_file,
)
from vshrink.config.env import EnvReader
from vshrink.config.models import VShrinkConfig

logger = logging.getLogger(__name__)

DEFAULT_CONFIG_DIR = Path.home() / ".vshrink"
DEFAULT_CONFIG_FILE = DEFAULT_CONFIG_DIR / "config.toml"


def get_default_config_path(reader: EnvReader | None = None) -> Path:
    """Get the config file path, honoring VSHRINK_CONFIG_PATH."""
    reader = reader or EnvReader()
    env_path = reader.get_str("VSHRINK_CONFIG_PATH")
    if env_path:
        return Path(env_path).expanduser()
    return DEFAULT_CONFIG_FILE


def load_config_file(path: Path | None = None) -> dict[str, Any]:
    """Load configuration from a TOML file.

    A missing file yields an empty dict.

    Args:
        path: Config file path (None = default location).

    Returns:
        Parsed configuration dictionary.

    Raises:
        ConfigError: If the file exists but cannot be read or parsed.
    """
    config_path = path or get_default_config_path()
    if not config_path.exists():
        logger.debug("No config file at %s", config_path)
        return {}

    try:
        with config_path.open("rb") as f:
            return tomllib.load(f)
    except tomllib.TOMLDecodeError as e:
        raise ConfigError(f"Invalid TOML in {config_path}: {e}") from e
    except OSError as e:
        raise ConfigError(f"Cannot read config file {config_path}: {e}") from e


def load_config(
    cli_source: ConfigSource | None = None,
    config_path: Path | None = None,
    env: EnvReader | None = None,
) -> VShrinkConfig:
    """Resolve the complete configuration for one invocation.

    Args:
        cli_source: Values from command-line options.
        config_path: Explicit config file (None = default location).
        env: Environment reader (None = os.environ).

    Returns:
        Resolved VShrinkConfig.

    Raises:
        ConfigError: If the file is invalid or settings fail validation.
    """
    env = env or EnvReader()
    builder = ConfigBuilder()
    file_config = load_config_file(config_path or get_default_config_path(env))
    builder.apply(source_from_file(file_config))
    builder.apply(source_from_env(env))
    if cli_source is not None:
        builder.apply(cli_source)
    return builder.build()
