"""Command-line interface for dir-analyzer."""

from __future__ import annotations

import asyncio
from datetime import date, datetime
from importlib.metadata import PackageNotFoundError, version
from pathlib import Path

import click

from dir_analyzer.app.progress import create_progress_callback
from dir_analyzer.app.render import render_json, render_summary, render_tree_report, render_watch_update
from dir_analyzer.app.watch import run_watch
from dir_analyzer.core.analyzer import analyze
from dir_analyzer.core.config import (
    DEFAULT_LARGE_SIZE_THRESHOLD,
    AnalyzerConfig,
    discover_config_file,
    load_config,
)
from dir_analyzer.exceptions import ConfigurationError, PathError
from dir_analyzer.types.models import AnalysisResult
from dir_analyzer.utils.logging import configure_logging

try:
    __version__ = version("dir-analyzer")
except PackageNotFoundError:
    __version__ = "unknown"

EXIT_INTERRUPTED = 130

VALID_LOG_LEVELS = frozenset({"DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"})


def validate_config_path(
    ctx: click.Context,  # pyright: ignore[reportUnusedParameter] # required by Click callback signature
    param: click.Parameter,  # pyright: ignore[reportUnusedParameter] # required by Click callback signature
    value: Path | None,
) -> Path | None:
    """Validate configuration file path.

    Raises:
        click.BadParameter: If the path is a directory or has an unsupported extension
    """
    if value is None:
        return value

    if value.is_dir():
        raise click.BadParameter("Configuration path must be a file, not a directory")

    valid_extensions = {".yaml", ".yml", ".json"}
    if value.suffix.lower() not in valid_extensions:
        extensions_str = ", ".join(sorted(valid_extensions))
        raise click.BadParameter(f"Invalid configuration file extension. Supported extensions: {extensions_str}")

    return value


def validate_log_level(
    ctx: click.Context,  # pyright: ignore[reportUnusedParameter] # required by Click callback signature
    param: click.Parameter,  # pyright: ignore[reportUnusedParameter] # required by Click callback signature
    value: str | None,
) -> str | None:
    """Validate and normalize log level.

    Raises:
        click.BadParameter: If the level is unknown
    """
    if value is None:
        return value

    normalized_value = value.upper().strip()
    if normalized_value not in VALID_LOG_LEVELS:
        raise click.BadParameter(f'Invalid log level "{value}". Valid options: {", ".join(sorted(VALID_LOG_LEVELS))}')
    return normalized_value


def resolve_config(config_path: Path | None, start: Path) -> AnalyzerConfig:
    """Load the explicit config file, else the nearest discovered one, else defaults."""
    if config_path is None:
        config_path = discover_config_file(start)
    if config_path is None:
        return AnalyzerConfig()
    return load_config(config_path)


def render_result(result: AnalysisResult, output_format: str, show_types: bool) -> str:
    if output_format == "json":
        return render_json(result)
    if output_format == "tree":
        return render_tree_report(result)
    return render_summary(result, show_types=show_types)


def _as_date(value: datetime | None) -> date | None:
    return value.date() if value is not None else None


@click.command()
@click.argument("directory", required=False, type=click.Path(path_type=Path))
@click.option(
    "--path",
    "-p",
    "path_option",
    type=click.Path(path_type=Path),
    default=None,
    help="Target directory to analyze (alternative to DIRECTORY). Defaults to the current directory.",
)
@click.option("--recursive/--no-recursive", "-r", default=True, help="Descend into nested directories")
@click.option("--exclude", "-e", multiple=True, help="Directory/file name or *-glob to skip (repeatable)")
@click.option(
    "--large-files",
    "-l",
    "large_files",
    type=click.IntRange(min=1),
    is_flag=False,
    flag_value=DEFAULT_LARGE_SIZE_THRESHOLD,
    default=None,
    metavar="[THRESHOLD]",
    help="Report files of at least THRESHOLD bytes (default: 100 MiB)",
)
@click.option("--duplicates", "-d", is_flag=True, default=None, help="Enable duplicate file detection")
@click.option("--max-depth", type=click.IntRange(min=-1), default=None, help="Maximum directory depth, -1 for unlimited")
@click.option("--min-size", type=click.IntRange(min=0), default=None, help="Minimum file size in bytes")
@click.option("--max-size", type=click.IntRange(min=0), default=None, help="Maximum file size in bytes")
@click.option(
    "--date-from",
    type=click.DateTime(formats=["%Y-%m-%d"]),
    default=None,
    help="Only files modified on or after this day (YYYY-MM-DD)",
)
@click.option(
    "--date-to",
    type=click.DateTime(formats=["%Y-%m-%d"]),
    default=None,
    help="Only files modified on or before this day (YYYY-MM-DD)",
)
@click.option("--top-n", type=click.IntRange(min=1), default=None, help="Number of largest files to list")
@click.option("--empty-files", is_flag=True, default=None, help="List zero-byte files")
@click.option("--json", "-j", "as_json", is_flag=True, help="Output results as JSON")
@click.option("--tree", "as_tree", is_flag=True, help="Display results as a tree")
@click.option("--types/--no-types", "-t", default=True, help="Show the file type summary")
@click.option("--progress/--no-progress", default=None, help="Show a progress bar on stderr")
@click.option(
    "--config",
    "-c",
    "config_path",
    type=click.Path(path_type=Path),
    default=None,
    callback=validate_config_path,
    help="Configuration file (.yaml, .yml, .json). If not specified, the nearest .dir-analyzer.* file is used.",
)
@click.option(
    "--log-level",
    type=str,
    default=None,
    callback=validate_log_level,
    help="Logging verbosity level (DEBUG, INFO, WARNING, ERROR, CRITICAL)",
)
@click.option("--hash-algorithm", type=str, default=None, help="hashlib algorithm for duplicate detection")
@click.option("--watch", "-w", is_flag=True, help="Re-analyze whenever the directory changes")
@click.version_option(version=__version__, prog_name="dir-analyzer")
@click.pass_context
def cli(
    ctx: click.Context,
    directory: Path | None,
    path_option: Path | None,
    recursive: bool,
    exclude: tuple[str, ...],
    large_files: int | None,
    duplicates: bool | None,
    max_depth: int | None,
    min_size: int | None,
    max_size: int | None,
    date_from: datetime | None,
    date_to: datetime | None,
    top_n: int | None,
    empty_files: bool | None,
    as_json: bool,
    as_tree: bool,
    types: bool,
    progress: bool | None,
    config_path: Path | None,
    log_level: str | None,
    hash_algorithm: str | None,
    watch: bool,
) -> None:
    """Analyze a directory: size, counts, file types, large files and duplicates.

    Examples:

        # Analyze the current directory
        dir-analyzer

        # Find duplicates and files over 10 MB, as JSON
        dir-analyzer ~/Downloads --duplicates --large-files 10485760 --json

        # Tree view, two levels deep
        dir-analyzer src --tree --max-depth 2

        # Re-run whenever something changes
        dir-analyzer . --watch
    """
    target = path_option if path_option is not None else (directory if directory is not None else Path("."))

    output_format = None
    if as_json:
        output_format = "json"
    elif as_tree:
        output_format = "tree"

    try:
        config = resolve_config(config_path, Path.cwd())
        config = config.merge_cli_overrides(
            {
                "exclude_patterns": [*config.exclude_patterns, *exclude] if exclude else None,
                "large_size_threshold": large_files,
                "enable_duplicate_detection": duplicates,
                "enable_progress_bar": progress,
                "output_format": output_format,
                "max_depth": max_depth,
                "min_size": min_size,
                "max_size": max_size,
                "date_from": _as_date(date_from),
                "date_to": _as_date(date_to),
                "top_n": top_n,
                "show_empty_files": empty_files,
                "hash_algorithm": hash_algorithm,
                "log_level": log_level,
            }
        )
    except ConfigurationError as e:
        raise click.ClickException(str(e)) from e

    configure_logging(log_level=config.log_level)

    root = str(target)
    show_progress = config.enable_progress_bar and not watch
    options = config.to_options(
        root,
        recursive=recursive,
        progress_callback=create_progress_callback(show_progress),
    )

    if watch:
        click.echo(click.style(f"Watching {root} for changes (press Ctrl+C to stop)...", fg="cyan"))

        def on_result(current: AnalysisResult, previous: AnalysisResult | None) -> None:
            click.echo(render_watch_update(current, previous))

        try:
            asyncio.run(run_watch(options, on_result))
        except PathError as e:
            raise click.ClickException(str(e)) from e
        except KeyboardInterrupt:
            click.echo("\nStopping watch mode...")
        return

    try:
        result = asyncio.run(analyze(options))
    except PathError as e:
        raise click.ClickException(str(e)) from e
    except KeyboardInterrupt:
        click.echo("\nAnalysis interrupted", err=True)
        ctx.exit(EXIT_INTERRUPTED)

    click.echo(render_result(result, config.output_format, show_types=types))
