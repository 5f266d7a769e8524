"""Subprocess launching for external tools.

Every child process gets its stdout and stderr redirected to files so the
output can be inspected after exit without interleaving with progress
display. Exit codes are surfaced raw; check_failed() classifies them.
"""

from __future__ import annotations

import logging
import subprocess  # nosec B404 - subprocess is required for ffmpeg invocation
from dataclasses import dataclass, field
from pathlib import Path
from typing import IO, Protocol

logger = logging.getLogger(__name__)


class ProcessHandle(Protocol):
    """Minimal live-process interface used by the progress monitor."""

    def poll(self) -> int | None: ...


@dataclass
class RunningProcess:
    """A started child process with its redirected log files."""

    name: str
    args: list[str]
    stdout_log: Path
    stderr_log: Path
    popen: subprocess.Popen
    _handles: list[IO[bytes]] = field(default_factory=list, repr=False)

    def poll(self) -> int | None:
        """Return the exit code, or None while the process is running."""
        return self.popen.poll()

    @property
    def returncode(self) -> int | None:
        return self.popen.returncode

    def close_logs(self) -> None:
        """Close the redirected log file handles."""
        for handle in self._handles:
            if not handle.closed:
                handle.close()
        self._handles.clear()


class ProcessRunner:
    """Starts external processes and waits for them.

    No timeout is applied: a hung child blocks wait() until an operator
    kills it.
    """

    def run(
        self,
        executable: Path | str,
        argv: list[str],
        stdout_log: Path,
        stderr_log: Path,
        name: str | None = None,
    ) -> RunningProcess:
        """Start a process without waiting for it.

        Args:
            executable: Path of the program to run.
            argv: Arguments, excluding the program itself.
            stdout_log: File receiving standard output (truncated).
            stderr_log: File receiving standard error (truncated).
            name: Label used in log messages (defaults to the program name).

        Returns:
            RunningProcess handle.

        Raises:
            OSError: If the log files cannot be opened or the program
                cannot be started.
        """
        args = [str(executable), *argv]
        label = name or Path(str(executable)).stem

        stdout_log.parent.mkdir(parents=True, exist_ok=True)
        stderr_log.parent.mkdir(parents=True, exist_ok=True)

        logger.debug(
            "Executing %s: %s",
            label,
            " ".join(args),
            extra={"command": label, "arg_count": len(args)},
        )

        stdout_handle = open(stdout_log, "wb")  # noqa: SIM115
        try:
            stderr_handle = open(stderr_log, "wb")  # noqa: SIM115
        except OSError:
            stdout_handle.close()
            raise

        try:
            popen = subprocess.Popen(  # nosec B603 - fixed flags and tool paths
                args,
                stdin=subprocess.DEVNULL,
                stdout=stdout_handle,
                stderr=stderr_handle,
            )
        except OSError:
            stdout_handle.close()
            stderr_handle.close()
            raise

        return RunningProcess(
            name=label,
            args=args,
            stdout_log=stdout_log,
            stderr_log=stderr_log,
            popen=popen,
            _handles=[stdout_handle, stderr_handle],
        )

    def wait(self, process: RunningProcess) -> int:
        """Block until the process exits and close its log files.

        Args:
            process: Handle returned by run().

        Returns:
            The raw exit status.
        """
        try:
            return process.popen.wait()
        finally:
            process.close_logs()

    def has_failed(self, process: RunningProcess) -> bool:
        """Classify an exited process, see check_failed()."""
        returncode = process.returncode
        if returncode is None:
            returncode = self.wait(process)
        return check_failed(process.name, returncode, process.stderr_log)


def check_failed(name: str, returncode: int, stderr_log: Path) -> bool:
    """Decide whether an exited process failed.

    A run fails if its exit code is strictly positive OR its error log is
    non-empty. ffmpeg sometimes reports a fault on stderr while exiting
    with status 0, so both signals are checked.

    When the run failed, every line of the error log is logged as a
    warning prefixed with the process name.

    Args:
        name: Process label for warnings.
        returncode: Exit status.
        stderr_log: Redirected standard error file.

    Returns:
        True if the run failed.
    """
    try:
        error_text = stderr_log.read_text(encoding="utf-8", errors="replace")
    except FileNotFoundError:
        error_text = ""

    failed = returncode > 0 or bool(error_text)
    if not failed:
        return False

    logger.warning(
        "%s failed with exit code %d",
        name,
        returncode,
        extra={"command": name, "returncode": returncode},
    )
    for line in error_text.splitlines():
        if line.strip():
            logger.warning("%s: %s", name, line.rstrip())
    return True
