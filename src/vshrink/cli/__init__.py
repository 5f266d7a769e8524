"""Command-line interface for vshrink."""

import logging
from pathlib import Path

import click

from vshrink import __version__
from vshrink.cli.exit_codes import ExitCode
from vshrink.cli.inputs import expand_inputs
from vshrink.cli.output import echo_result, echo_summary, error_exit
from vshrink.cli.progress import StderrProgressReporter
from vshrink.config import ConfigError, ConfigSource, load_config
from vshrink.domain.models import RunContext
from vshrink.logging import configure_logging
from vshrink.tools.locator import ToolNotFoundError, locate_tools
from vshrink.workflow import ConversionPipeline

logger = logging.getLogger(__name__)


def _flag(value: bool) -> bool | None:
    """Map an unset CLI flag to None so it does not override config."""
    return True if value else None


@click.command(name="vshrink")
@click.version_option(version=__version__, prog_name="vshrink")
@click.argument("inputs", nargs=-1, required=True)
@click.option(
    "--extension",
    "-e",
    default=None,
    help="Extension (container) of the output files [default: mkv].",
)
@click.option(
    "--improvement",
    "-i",
    "required_improvement",
    type=int,
    default=None,
    help="Required size reduction in percent, clamped to 0..99 [default: 10].",
)
@click.option("--video-encoder", default=None, help="ffmpeg video encoder.")
@click.option(
    "--video-bitrate", type=int, default=None, help="Video bitrate in kbit/s."
)
@click.option("--audio-encoder", default=None, help="ffmpeg audio encoder.")
@click.option(
    "--audio-bitrate", type=int, default=None, help="Audio bitrate in kbit/s."
)
@click.option("--quiet", "-q", is_flag=True, help="Do not show progress.")
@click.option(
    "--skip-timestamps",
    is_flag=True,
    help="Do not copy the modification time of inputs onto outputs.",
)
@click.option(
    "--full-paths",
    is_flag=True,
    help="Report absolute output paths instead of relative ones.",
)
@click.option(
    "--ffmpeg-dir",
    default=None,
    help="Directory to search for ffmpeg first.",
)
@click.option(
    "--ffprobe-dir",
    default=None,
    help="Directory to search for ffprobe first.",
)
@click.option(
    "--temp-dir",
    type=click.Path(file_okay=False, path_type=Path),
    default=None,
    help="Directory for run logs and pass statistics.",
)
@click.option(
    "--keep-logs",
    is_flag=True,
    help="Keep the run's stdout/stderr/progress logs.",
)
@click.option(
    "--cleanup-partial",
    is_flag=True,
    help="Delete partial output when the final pass fails.",
)
@click.option(
    "--config",
    "config_path",
    type=click.Path(dir_okay=False, path_type=Path),
    default=None,
    help="Config file (default: ~/.vshrink/config.toml).",
)
@click.option(
    "--json",
    "json_output",
    is_flag=True,
    help="Print one JSON object per file instead of text.",
)
@click.option(
    "--log-level",
    type=click.Choice(["debug", "info", "warning", "error"], case_sensitive=False),
    default=None,
    help="Override log level from config.",
)
@click.option(
    "--log-file",
    type=click.Path(path_type=Path),
    default=None,
    help="Override log file path from config.",
)
@click.option(
    "--log-json",
    is_flag=True,
    help="Use JSON log format.",
)
def main(
    inputs: tuple[str, ...],
    extension: str | None,
    required_improvement: int | None,
    video_encoder: str | None,
    video_bitrate: int | None,
    audio_encoder: str | None,
    audio_bitrate: int | None,
    quiet: bool,
    skip_timestamps: bool,
    full_paths: bool,
    ffmpeg_dir: str | None,
    ffprobe_dir: str | None,
    temp_dir: Path | None,
    keep_logs: bool,
    cleanup_partial: bool,
    config_path: Path | None,
    json_output: bool,
    log_level: str | None,
    log_file: Path | None,
    log_json: bool,
) -> None:
    """Re-encode video files with two-pass ffmpeg, keeping smaller results.

    Each INPUT is a file or a wildcard pattern. An output is kept only if
    it is at least the required percentage smaller than its input.

    \b
    Examples:
        vshrink movie.avi
        vshrink -i 25 -e mp4 "*.avi"
        vshrink --json --quiet videos/*.mkv
    """
    cli_source = ConfigSource(
        extension=extension,
        required_improvement=required_improvement,
        video_encoder=video_encoder,
        video_bitrate=video_bitrate,
        audio_encoder=audio_encoder,
        audio_bitrate=audio_bitrate,
        match_timestamps=False if skip_timestamps else None,
        full_paths=_flag(full_paths),
        quiet=_flag(quiet),
        cleanup_partial=_flag(cleanup_partial),
        keep_logs=_flag(keep_logs),
        ffmpeg_dir=ffmpeg_dir,
        ffprobe_dir=ffprobe_dir,
        temp_directory=temp_dir,
        logging_level=log_level,
        logging_file=log_file,
        logging_format="json" if log_json else None,
    )

    try:
        config = load_config(cli_source, config_path=config_path)
    except ConfigError as e:
        error_exit(str(e), ExitCode.CONFIG_ERROR, json_output)

    configure_logging(config.logging)
    logger.debug("vshrink %s starting", __version__)

    files = expand_inputs(inputs)
    if not files:
        error_exit("No input files found", ExitCode.TARGET_NOT_FOUND, json_output)

    try:
        tools = locate_tools(config.tools.ffmpeg_dir, config.tools.ffprobe_dir)
    except ToolNotFoundError as e:
        error_exit(str(e), ExitCode.TOOL_NOT_AVAILABLE, json_output)

    temp_directory = config.temp_directory
    if temp_directory is not None:
        try:
            temp_directory.mkdir(parents=True, exist_ok=True)
        except OSError as e:
            error_exit(
                f"Cannot create temp directory {temp_directory}: {e}",
                ExitCode.CONFIG_ERROR,
                json_output,
            )

    request = config.conversion
    reporter = StderrProgressReporter(enabled=not (request.quiet or json_output))
    pipeline = ConversionPipeline(
        request,
        tools,
        RunContext.create(temp_directory),
        on_progress=reporter,
    )

    try:
        for result in pipeline.run(files):
            reporter.finish()
            echo_result(result, json_output)
    except KeyboardInterrupt:
        reporter.finish()
        error_exit("Interrupted", ExitCode.INTERRUPTED, json_output)

    echo_summary(pipeline.summary, json_output)

    if pipeline.summary.failures:
        raise SystemExit(int(ExitCode.OPERATION_FAILED))
