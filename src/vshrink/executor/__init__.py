"""Execution of the external tools for a single file.

- process.py: subprocess launching and dual-signal failure check
- monitor.py: progress polling while a pass runs
- command.py: ffprobe / ffmpeg argument vectors
- outcome.py: keep/discard decision after the final pass
"""

from vshrink.executor.command import (
    TwoPassStats,
    build_pass1_args,
    build_pass2_args,
    build_probe_args,
    parse_probe_duration,
)
from vshrink.executor.monitor import (
    LogFileSampler,
    ProgressMonitor,
    ProgressSampler,
    ProgressUpdate,
    estimate_remaining,
)
from vshrink.executor.outcome import (
    Evaluation,
    OutcomeEvaluator,
    evaluate,
    improvement_percent,
)
from vshrink.executor.process import (
    ProcessRunner,
    RunningProcess,
    check_failed,
)

__all__ = [
    "Evaluation",
    "LogFileSampler",
    "OutcomeEvaluator",
    "ProcessRunner",
    "ProgressMonitor",
    "ProgressSampler",
    "ProgressUpdate",
    "RunningProcess",
    "TwoPassStats",
    "build_pass1_args",
    "build_pass2_args",
    "build_probe_args",
    "check_failed",
    "estimate_remaining",
    "evaluate",
    "improvement_percent",
    "parse_probe_duration",
]
