"""Batch summary accumulated while a conversion run progresses."""

from __future__ import annotations

from collections import Counter
from dataclasses import dataclass, field

from vshrink.core.formatting import format_file_size
from vshrink.domain.enums import ConversionOutcome
from vshrink.domain.models import FileResult


@dataclass
class BatchSummary:
    """Outcome counts and space saved for a batch."""

    counts: Counter = field(default_factory=Counter)
    bytes_saved: int = 0

    def record(self, result: FileResult, bytes_saved: int = 0) -> None:
        self.counts[result.outcome] += 1
        self.bytes_saved += bytes_saved

    @property
    def total(self) -> int:
        return sum(self.counts.values())

    @property
    def failures(self) -> int:
        """Files that ended Unreadable or Error."""
        return sum(n for outcome, n in self.counts.items() if outcome.is_failure)

    def count(self, outcome: ConversionOutcome) -> int:
        return self.counts.get(outcome, 0)

    def describe(self) -> str:
        """One-line human-readable summary."""
        parts = [
            f"{self.count(outcome)} {outcome.value}"
            for outcome in ConversionOutcome
            if outcome.is_terminal
        ]
        return (
            f"{self.total} file(s): {', '.join(parts)}; "
            f"saved {format_file_size(self.bytes_saved)}"
        )

    def to_dict(self) -> dict[str, int]:
        data = {
            outcome.value: self.count(outcome)
            for outcome in ConversionOutcome
            if outcome.is_terminal
        }
        data["total"] = self.total
        data["bytes_saved"] = self.bytes_saved
        return data
