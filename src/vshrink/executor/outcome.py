"""Post-encode acceptance policy.

An output is kept only when it is at most (100 - required)% of the original
size; otherwise it is deleted and the file is reported as discarded.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from pathlib import Path

from vshrink.core.file_utils import FileTimestampError, remove_file, set_file_mtime
from vshrink.domain.enums import ConversionOutcome

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class Evaluation:
    """Keep/discard decision with the measured improvement."""

    keep: bool
    improvement: float

    @property
    def outcome(self) -> ConversionOutcome:
        return ConversionOutcome.CONVERTED if self.keep else ConversionOutcome.DISCARDED


def improvement_percent(original_size: int, new_size: int) -> float:
    """Relative size reduction in percent; negative when the output grew."""
    if original_size <= 0:
        return 0.0
    return (original_size - new_size) / original_size * 100


def evaluate(
    original_size: int,
    new_size: int,
    required_improvement: int,
) -> Evaluation:
    """Decide whether an output file is small enough to keep.

    The output is discarded when
    ``new_size > original_size * (1 - required_improvement / 100)``,
    so a threshold of 0 keeps anything not larger than the original and a
    result exactly on the threshold is kept.

    Args:
        original_size: Input size in bytes.
        new_size: Output size in bytes.
        required_improvement: Required reduction in percent (0-99).

    Returns:
        Evaluation with the decision and measured improvement.
    """
    limit = original_size * (1 - required_improvement / 100)
    return Evaluation(
        keep=not new_size > limit,
        improvement=improvement_percent(original_size, new_size),
    )


class OutcomeEvaluator:
    """Applies timestamp policy and the keep/discard decision to an output."""

    def __init__(self, required_improvement: int, match_timestamps: bool = True):
        self.required_improvement = required_improvement
        self.match_timestamps = match_timestamps

    def evaluate(self, original_size: int, new_size: int) -> Evaluation:
        return evaluate(original_size, new_size, self.required_improvement)

    def finalize(
        self,
        output_path: Path,
        original_size: int,
        original_mtime: float,
    ) -> Evaluation:
        """Evaluate a finished output and keep or delete it.

        The original modification time is copied first, independently of
        the decision.

        Args:
            output_path: File written by the final pass.
            original_size: Input size in bytes.
            original_mtime: Input modification time.

        Returns:
            The Evaluation that was applied.

        Raises:
            OSError: If the output cannot be stat-ed.
        """
        if self.match_timestamps:
            try:
                set_file_mtime(output_path, original_mtime)
            except FileTimestampError as e:
                logger.warning("Could not match timestamp: %s", e)

        new_size = output_path.stat().st_size
        result = self.evaluate(original_size, new_size)

        if not result.keep:
            remove_file(output_path)
            logger.info(
                "Discarded %s: improvement %.1f%% below required %d%%",
                output_path.name,
                result.improvement,
                self.required_improvement,
                extra={
                    "output_path": str(output_path),
                    "original_size": original_size,
                    "new_size": new_size,
                },
            )
        else:
            logger.info(
                "Kept %s: improvement %.1f%%",
                output_path.name,
                result.improvement,
                extra={
                    "output_path": str(output_path),
                    "original_size": original_size,
                    "new_size": new_size,
                },
            )
        return result
