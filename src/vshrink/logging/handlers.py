"""JSON log formatting for vshrink.

Records are rendered one JSON object per line. Anything passed through
``extra=`` ends up under a ``context`` key, next to the per-file fields
injected by FileContextFilter.
"""

from __future__ import annotations

import json
import logging
from datetime import datetime, timezone
from typing import Any

# Attributes every LogRecord carries, plus the ones Formatter.format() adds
_RECORD_ATTRS: frozenset[str] = frozenset(
    logging.LogRecord("", logging.NOTSET, "", 0, "", (), None).__dict__
) | {"message", "asctime", "taskName"}

# Set by FileContextFilter; emitted explicitly, and file_tag only for text
_FILE_ATTRS = ("file_id", "file_path")
_FILTER_ATTRS = frozenset({*_FILE_ATTRS, "file_tag"})


class JSONFormatter(logging.Formatter):
    """Format log records as JSON objects.

    Keys: timestamp (ISO-8601, UTC), level, message, logger (unless root),
    context (extra fields and file context, if any) and exception.
    """

    def format(self, record: logging.LogRecord) -> str:
        entry: dict[str, Any] = {
            "timestamp": datetime.fromtimestamp(
                record.created, tz=timezone.utc
            ).isoformat(),
            "level": record.levelname,
            "message": record.getMessage(),
        }
        if record.name and record.name != "root":
            entry["logger"] = record.name

        context = self._context(record)
        if context:
            entry["context"] = context

        if record.exc_info:
            entry["exception"] = self.formatException(record.exc_info)

        return json.dumps(entry, default=str)

    @staticmethod
    def _context(record: logging.LogRecord) -> dict[str, Any]:
        context = {
            key: value
            for key, value in vars(record).items()
            if key not in _RECORD_ATTRS
            and key not in _FILTER_ATTRS
            and not key.startswith("_")
        }
        # The filter's values win over a caller's extra={"file_path": ...}
        for name in _FILE_ATTRS:
            value = getattr(record, name, None)
            if value:
                context[name] = value
        return context
