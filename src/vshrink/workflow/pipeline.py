"""Per-file conversion pipeline.

Each input file moves through

    Init -> Probing -> Pass1Running -> Pass2Running -> Evaluating -> Terminal

and yields exactly one FileResult. Files are processed strictly one after
another; a failing file never aborts the batch.
"""

from __future__ import annotations

import logging
import time
from collections.abc import Iterable, Iterator
from enum import Enum
from pathlib import Path

from vshrink.core.file_utils import remove_file
from vshrink.domain.enums import ConversionOutcome
from vshrink.domain.models import (
    PLACEHOLDER_DURATION,
    ConversionRequest,
    FileResult,
    FileTask,
    RunContext,
)
from vshrink.executor.command import (
    TwoPassStats,
    build_pass1_args,
    build_pass2_args,
    build_probe_args,
    parse_probe_duration,
)
from vshrink.executor.monitor import ProgressCallback, ProgressMonitor
from vshrink.executor.outcome import OutcomeEvaluator
from vshrink.executor.process import ProcessRunner
from vshrink.logging import file_context
from vshrink.tools.locator import ToolPaths
from vshrink.workflow.summary import BatchSummary

logger = logging.getLogger(__name__)

# Purposes of the run-scoped log files
LOG_PURPOSES = (
    "probe_stdout",
    "probe_stderr",
    "pass1_stdout",
    "pass1_stderr",
    "pass1_progress",
    "pass2_stdout",
    "pass2_stderr",
    "pass2_progress",
)


class PipelineState(Enum):
    """States of a single file's conversion."""

    INIT = "init"
    PROBING = "probing"
    PASS1_RUNNING = "pass1_running"
    PASS2_RUNNING = "pass2_running"
    EVALUATING = "evaluating"
    TERMINAL = "terminal"


class ConversionPipeline:
    """Coordinates probe, two encode passes and evaluation per file."""

    def __init__(
        self,
        request: ConversionRequest,
        tools: ToolPaths,
        context: RunContext,
        runner: ProcessRunner | None = None,
        monitor: ProgressMonitor | None = None,
        on_progress: ProgressCallback | None = None,
    ) -> None:
        """Initialize the pipeline.

        Args:
            request: Batch configuration.
            tools: Resolved ffmpeg/ffprobe paths.
            context: Run-scoped timestamp and directories.
            runner: Process runner (injectable for tests).
            monitor: Progress monitor (injectable for tests).
            on_progress: Callback receiving progress updates. Never called
                when request.quiet is set, whichever monitor is used.
        """
        self.request = request
        self.tools = tools
        self.context = context
        self.runner = runner or ProcessRunner()
        self.monitor = monitor or ProgressMonitor(quiet=request.quiet)
        self.on_progress = on_progress
        self.evaluator = OutcomeEvaluator(
            request.required_improvement,
            match_timestamps=request.match_timestamps,
        )
        self.summary = BatchSummary()

    # ------------------------------------------------------------------
    # Batch
    # ------------------------------------------------------------------

    def run(self, inputs: Iterable[Path]) -> Iterator[FileResult]:
        """Convert every input in order, yielding one result per file.

        Args:
            inputs: Input files, processed sequentially.

        Yields:
            FileResult for each input, in input order.
        """
        start = time.monotonic()
        try:
            for number, input_path in enumerate(inputs, start=1):
                yield self.process_file(input_path, number)
        finally:
            if not self.request.keep_logs:
                self.cleanup_logs()
            logger.info(
                "Batch finished in %.1fs: %s",
                time.monotonic() - start,
                self.summary.describe(),
                extra=self.summary.to_dict(),
            )

    def process_file(self, input_path: Path, number: int = 1) -> FileResult:
        """Convert one file. Never raises.

        Unexpected errors are logged and reported as an Error outcome so
        that the batch continues with the next file.
        """
        with file_context(f"F{number:03d}", input_path):
            try:
                result, bytes_saved = self._convert(input_path)
            except Exception as e:
                logger.exception("Conversion of %s failed: %s", input_path, e)
                result = FileResult(
                    input=str(input_path), outcome=ConversionOutcome.ERROR
                )
                bytes_saved = 0
            self.summary.record(result, bytes_saved)
            logger.info(
                "%s: %s",
                input_path.name,
                result.outcome.value,
                extra={
                    "state": PipelineState.TERMINAL.value,
                    "outcome": result.outcome.value,
                    "improvement": round(result.improvement, 2),
                },
            )
            return result

    def cleanup_logs(self) -> None:
        """Remove the run's stdout/stderr/progress log files."""
        for purpose in LOG_PURPOSES:
            remove_file(self.context.log_path(purpose))

    # ------------------------------------------------------------------
    # Per-file states
    # ------------------------------------------------------------------

    def _new_task(self, input_path: Path) -> FileTask:
        stat = input_path.stat()
        return FileTask(
            input_path=input_path,
            output_path=self.context.output_path_for(
                input_path, self.request.extension
            ),
            original_mtime=stat.st_mtime,
            original_size=stat.st_size,
        )

    def _enter(self, state: PipelineState, task: FileTask) -> None:
        logger.debug(
            "%s -> %s",
            task.short_name,
            state.value,
            extra={"state": state.value},
        )

    def _convert(self, input_path: Path) -> tuple[FileResult, int]:
        input_id = str(input_path)
        try:
            task = self._new_task(input_path)
        except OSError as e:
            logger.warning("Cannot read %s: %s", input_path, e)
            return FileResult(input=input_id, outcome=ConversionOutcome.UNREADABLE), 0
        self._enter(PipelineState.INIT, task)

        self._enter(PipelineState.PROBING, task)
        if not self._probe(task):
            return FileResult(input=input_id, outcome=ConversionOutcome.UNREADABLE), 0

        stats = TwoPassStats(self.context.passlog_prefix)
        try:
            self._enter(PipelineState.PASS1_RUNNING, task)
            pass1_args = build_pass1_args(
                task.input_path,
                self.request,
                stats,
                self.context.log_path("pass1_progress"),
            )
            if not self._run_pass(task, 1, pass1_args):
                return FileResult(input=input_id, outcome=ConversionOutcome.ERROR), 0

            self._enter(PipelineState.PASS2_RUNNING, task)
            pass2_args = build_pass2_args(
                task.input_path,
                task.output_path,
                self.request,
                stats,
                self.context.log_path("pass2_progress"),
            )
            if not self._run_pass(task, 2, pass2_args):
                if self.request.cleanup_partial:
                    remove_file(task.output_path)
                return FileResult(input=input_id, outcome=ConversionOutcome.ERROR), 0
        finally:
            stats.cleanup()

        self._enter(PipelineState.EVALUATING, task)
        evaluation = self.evaluator.finalize(
            task.output_path, task.original_size, task.original_mtime
        )
        output_id = (
            self.context.display_path(task.output_path, self.request.full_paths)
            if evaluation.keep
            else ""
        )
        bytes_saved = (
            task.original_size - task.output_path.stat().st_size
            if evaluation.keep
            else 0
        )
        return (
            FileResult(
                input=input_id,
                outcome=evaluation.outcome,
                improvement=evaluation.improvement,
                output=output_id,
            ),
            bytes_saved,
        )

    def _probe(self, task: FileTask) -> bool:
        """Run ffprobe to fill in the task duration.

        Returns:
            False if the probe failed (the file is unreadable).
        """
        stdout_log = self.context.log_path("probe_stdout")
        process = self.runner.run(
            self.tools.ffprobe,
            build_probe_args(task.input_path),
            stdout_log,
            self.context.log_path("probe_stderr"),
            name="ffprobe",
        )
        self.runner.wait(process)
        if self.runner.has_failed(process):
            logger.warning("Cannot read %s, skipping", task.input_path)
            return False

        try:
            probe_output = stdout_log.read_text(encoding="utf-8", errors="replace")
        except OSError as e:
            logger.debug("Could not read probe output: %s", e)
            probe_output = ""

        duration = parse_probe_duration(probe_output)
        if duration is None:
            logger.warning(
                "Could not determine duration of %s, progress will be inaccurate",
                task.input_path,
            )
            duration = PLACEHOLDER_DURATION
        task.duration_seconds = duration
        logger.debug(
            "Probed %s: %.2fs",
            task.short_name,
            duration,
            extra={"duration_seconds": duration},
        )
        return True

    def _run_pass(self, task: FileTask, pass_number: int, args: list[str]) -> bool:
        """Run one encode pass while tracking its progress.

        Returns:
            False if the pass failed.
        """
        progress_log = self.context.log_path(f"pass{pass_number}_progress")
        # A stale log from an earlier pass would skew the first readings
        remove_file(progress_log)

        logger.info(
            "Starting pass %d: %s",
            pass_number,
            task.short_name,
            extra={"pass": pass_number, "output_path": str(task.output_path)},
        )
        pass_start = time.monotonic()

        process = self.runner.run(
            self.tools.ffmpeg,
            args,
            self.context.log_path(f"pass{pass_number}_stdout"),
            self.context.log_path(f"pass{pass_number}_stderr"),
            name="ffmpeg",
        )
        self.monitor.track(
            process,
            progress_log,
            task.duration_seconds,
            on_update=None if self.request.quiet else self.on_progress,
            original_name=task.short_name,
            new_name=task.output_name,
            pass_number=pass_number,
        )
        self.runner.wait(process)

        if self.runner.has_failed(process):
            logger.error("Pass %d failed for %s", pass_number, task.input_path)
            return False

        logger.info(
            "Pass %d complete (%.1fs)",
            pass_number,
            time.monotonic() - pass_start,
            extra={"pass": pass_number},
        )
        return True
