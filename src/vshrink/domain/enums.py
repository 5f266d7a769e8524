"""Domain enums for vshrink."""

from enum import Enum


class ConversionOutcome(Enum):
    """Final state of a single file in a conversion batch.

    UNKNOWN is the initial value only; every processed file ends in exactly
    one of the four terminal states.
    """

    UNKNOWN = "unknown"
    CONVERTED = "converted"  # Output kept
    DISCARDED = "discarded"  # Output deleted, not enough size reduction
    UNREADABLE = "unreadable"  # Missing, or probe failed (not a media file)
    ERROR = "error"  # An encode pass failed

    @property
    def is_terminal(self) -> bool:
        """True for every state except UNKNOWN."""
        return self is not ConversionOutcome.UNKNOWN

    @property
    def is_failure(self) -> bool:
        """True when the file could not be converted at all."""
        return self in (ConversionOutcome.UNREADABLE, ConversionOutcome.ERROR)
