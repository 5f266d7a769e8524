"""Structured logging for vshrink.

Provides configurable logging with JSON format support and file rotation,
plus per-file context tagging while a batch runs.
"""

from vshrink.logging.config import configure_logging
from vshrink.logging.context import (
    FileContextFilter,
    clear_file_context,
    file_context,
    get_file_context,
    set_file_context,
)
from vshrink.logging.handlers import JSONFormatter

__all__ = [
    "FileContextFilter",
    "JSONFormatter",
    "clear_file_context",
    "configure_logging",
    "file_context",
    "get_file_context",
    "set_file_context",
]
