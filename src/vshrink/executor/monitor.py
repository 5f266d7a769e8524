"""Progress monitoring for running encode passes.

ffmpeg offers no progress notification besides the -progress log file, so
the monitor polls it at a fixed interval until the tracked process exits.
The log source is a ProgressSampler so tests can feed synthetic samples.
"""

from __future__ import annotations

import logging
import time
from collections.abc import Callable
from dataclasses import dataclass
from pathlib import Path
from typing import Protocol

from vshrink.core.formatting import format_duration
from vshrink.executor.process import ProcessHandle
from vshrink.tools.progress_log import ProgressSample, read_progress_sample

logger = logging.getLogger(__name__)

# ffmpeg does not refresh the progress log faster than this
DEFAULT_POLL_INTERVAL = 0.5


class ProgressSampler(Protocol):
    """Source of progress samples for a single pass."""

    def sample(self) -> ProgressSample | None:
        """Return the latest sample, or None if nothing is available yet."""
        ...


class LogFileSampler:
    """Samples an ffmpeg -progress log file."""

    def __init__(self, path: Path) -> None:
        self.path = path

    def sample(self) -> ProgressSample | None:
        return read_progress_sample(self.path)


@dataclass(frozen=True)
class ProgressUpdate:
    """One progress report for a running pass."""

    percent: float
    remaining_seconds: float
    original_name: str
    new_name: str
    pass_number: int = 1

    @property
    def remaining(self) -> str:
        """Remaining time formatted as H:MM:SS."""
        return format_duration(self.remaining_seconds)


ProgressCallback = Callable[[ProgressUpdate], None]


def estimate_remaining(elapsed_seconds: float, percent: float) -> float:
    """Estimate remaining wall-clock time from elapsed time and completion.

    Args:
        elapsed_seconds: Time since tracking started.
        percent: Completion in [1, 100].

    Returns:
        Estimated seconds left.
    """
    if percent <= 0:
        return 0.0
    return elapsed_seconds * (100.0 - percent) / percent


class ProgressMonitor:
    """Polls a progress source while a process runs."""

    def __init__(
        self,
        poll_interval: float = DEFAULT_POLL_INTERVAL,
        quiet: bool = False,
        sleep: Callable[[float], None] = time.sleep,
        clock: Callable[[], float] = time.monotonic,
    ) -> None:
        """Initialize the monitor.

        Args:
            poll_interval: Seconds between polls.
            quiet: If True, samples are computed but no updates emitted.
            sleep: Sleep function (injectable for tests).
            clock: Monotonic clock (injectable for tests).
        """
        self.poll_interval = poll_interval
        self.quiet = quiet
        self._sleep = sleep
        self._clock = clock

    def track(
        self,
        process: ProcessHandle,
        progress_log: Path | ProgressSampler,
        total_duration: float,
        on_update: ProgressCallback | None = None,
        original_name: str = "",
        new_name: str = "",
        pass_number: int = 1,
    ) -> float | None:
        """Poll progress until the process exits.

        There is no timeout; a process that never exits blocks this call.

        Args:
            process: Live process handle (anything with poll()).
            progress_log: Progress log path or a sampler.
            total_duration: Probed duration in seconds.
            on_update: Callback receiving ProgressUpdate values.
            original_name: Display label of the input file.
            new_name: Display label of the output file.
            pass_number: Encode pass being tracked.

        Returns:
            Last reported percentage, or None if no sample was ever seen.
        """
        sampler: ProgressSampler = (
            LogFileSampler(progress_log)
            if isinstance(progress_log, Path)
            else progress_log
        )
        start = self._clock()
        percent: float | None = None

        while process.poll() is None:
            sample = sampler.sample()
            if sample is not None:
                current = sample.percent(total_duration)
                # Never report going backwards within a pass
                percent = current if percent is None else max(percent, current)
                elapsed = self._clock() - start

                if not self.quiet and on_update is not None:
                    update = ProgressUpdate(
                        percent=percent,
                        remaining_seconds=estimate_remaining(elapsed, percent),
                        original_name=original_name,
                        new_name=new_name,
                        pass_number=pass_number,
                    )
                    try:
                        on_update(update)
                    except Exception as e:
                        logger.warning("Progress callback error: %s", e)

            self._sleep(self.poll_interval)

        return percent
