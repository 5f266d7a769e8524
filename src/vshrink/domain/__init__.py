"""Domain types for vshrink.

This package holds the values that flow through a conversion batch:
the immutable request, the per-file task and result, and the outcome enum.
"""

from vshrink.domain.enums import ConversionOutcome
from vshrink.domain.models import (
    ConversionRequest,
    FileResult,
    FileTask,
    RunContext,
)

__all__ = [
    "ConversionOutcome",
    "ConversionRequest",
    "FileResult",
    "FileTask",
    "RunContext",
]
