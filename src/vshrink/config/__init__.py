"""Configuration for vshrink.

Layered resolution of conversion settings, tool hints and logging from
defaults, the TOML config file, VSHRINK_* environment variables and CLI
options.
"""

from vshrink.config.builder import (
    ConfigBuilder,
    ConfigError,
    ConfigSource,
    source_from_env,
    source_from_file,
)
from vshrink.config.env import EnvReader
from vshrink.config.loader import (
    get_default_config_path,
    load_config,
    load_config_file,
)
from vshrink.config.models import LoggingConfig, ToolPathsConfig, VShrinkConfig

__all__ = [
    "ConfigBuilder",
    "ConfigError",
    "ConfigSource",
    "EnvReader",
    "LoggingConfig",
    "ToolPathsConfig",
    "VShrinkConfig",
    "get_default_config_path",
    "load_config",
    "load_config_file",
    "source_from_env",
    "source_from_file",
]
