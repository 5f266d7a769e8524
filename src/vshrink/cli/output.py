"""Result and error output for the vshrink command."""

from __future__ import annotations

import json
import sys
from typing import NoReturn

import click

from vshrink.cli.exit_codes import ExitCode
from vshrink.core.formatting import format_improvement
from vshrink.domain.enums import ConversionOutcome
from vshrink.domain.models import FileResult
from vshrink.workflow.summary import BatchSummary

_OUTCOME_COLORS = {
    ConversionOutcome.CONVERTED: "green",
    ConversionOutcome.DISCARDED: "yellow",
    ConversionOutcome.UNREADABLE: "red",
    ConversionOutcome.ERROR: "red",
}


def error_exit(message: str, code: ExitCode, json_output: bool = False) -> NoReturn:
    """Print an error and exit with the given code."""
    if json_output:
        click.echo(
            json.dumps(
                {
                    "status": "failed",
                    "error": {"code": code.name, "message": message},
                }
            ),
            err=True,
        )
    else:
        click.echo(f"Error: {message}", err=True)
    sys.exit(int(code))


def format_result_human(result: FileResult) -> str:
    """Format a file result as a single line.

    Examples:
        converted   +42.3%  movie.avi -> movie.20261018-120000.mkv
        discarded    -3.1%  clip.mp4
        unreadable          notes.txt
    """
    label = click.style(
        f"{result.outcome.value:<11}",
        fg=_OUTCOME_COLORS.get(result.outcome),
    )
    if result.outcome in (ConversionOutcome.CONVERTED, ConversionOutcome.DISCARDED):
        improvement = f"{format_improvement(result.improvement):>7}"
    else:
        improvement = " " * 7
    line = f"{label} {improvement}  {result.input}"
    if result.output:
        line += f" -> {result.output}"
    return line


def echo_result(result: FileResult, json_output: bool = False) -> None:
    """Print one file result to stdout."""
    if json_output:
        click.echo(json.dumps(result.to_dict()))
    else:
        click.echo(format_result_human(result))


def echo_summary(summary: BatchSummary, json_output: bool = False) -> None:
    """Print the batch summary (stderr in JSON mode, keeping stdout parseable)."""
    if json_output:
        click.echo(json.dumps({"summary": summary.to_dict()}), err=True)
    else:
        click.echo(summary.describe())
