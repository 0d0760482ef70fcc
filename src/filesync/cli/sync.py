"""Sync command for the filesync CLI.

Commands:
- sync: Copy new and newer matching files from SOURCE to DEST
"""

from __future__ import annotations

import sys
from pathlib import Path
from typing import Any

import click

from filesync.cli.config import load_config
from filesync.cli.logs import setup_logging
from filesync.core.cancel import CancellationToken
from filesync.core.config import SyncConfig
from filesync.core.types import (
    SourceNotFoundError,
    SyncCancelledError,
    SyncProgress,
    ValidationError,
)
from filesync.sync.synchronizer import FileSynchronizer

EXIT_OK = 0
EXIT_FILES_FAILED = 1
EXIT_INVALID = 2
EXIT_CANCELLED = 130


def merge_settings(settings: dict[str, Any], **overrides: Any) -> SyncConfig:
    """Merge command-line values over settings-store values.

    None overrides are ignored so unset options keep the stored value.
    """
    merged = dict(settings)
    merged.update({k: v for k, v in overrides.items() if v is not None})
    return SyncConfig.from_mapping(merged)


@click.command()
@click.argument("source", required=False, type=click.Path(file_okay=False, path_type=Path))
@click.argument("dest", required=False, type=click.Path(file_okay=False, path_type=Path))
@click.option(
    "--pattern", "-p", default=None,
    help="Semicolon-separated regular expressions matched against file names.",
)
@click.option(
    "--exclude", "-x", default=None,
    help="Semicolon-separated regular expressions for file names to leave out.",
)
@click.option("--retries", "-r", type=click.IntRange(min=0), default=None,
              help="Retries per file after the first attempt.")
@click.option("--dry-run", is_flag=True, help="Report actions without copying.")
@click.option("--concurrency", "-j", type=int, default=None,
              help="Files processed at once (default: CPU count).")
@click.option("--config", "config_path", type=click.Path(dir_okay=False, exists=True, path_type=Path),
              default=None, help="JSON settings file.")
@click.option("--verbose", "-v", is_flag=True, help="Show debug logging.")
@click.option("--log-file", type=click.Path(dir_okay=False, path_type=Path), default=None,
              help="Also write logs to this file.")
@click.option("--no-progress", is_flag=True, help="Do not print per-file progress.")
def sync(
    source: Path | None,
    dest: Path | None,
    pattern: str | None,
    exclude: str | None,
    retries: int | None,
    dry_run: bool,
    concurrency: int | None,
    config_path: Path | None,
    verbose: bool,
    log_file: Path | None,
    no_progress: bool,
) -> None:
    """Copy files matching PATTERN from SOURCE to DEST.

    Files missing from DEST are created, files older in DEST are updated,
    everything else is skipped. Nothing is deleted.
    """
    setup_logging(verbose=verbose, log_path=log_file)

    try:
        settings = load_config(config_path)
    except (OSError, ValueError) as e:
        click.echo(f"Error: cannot read config: {e}", err=True)
        sys.exit(EXIT_INVALID)

    try:
        config = merge_settings(
            settings,
            source_directory=str(source) if source else None,
            destination_directory=str(dest) if dest else None,
            include_patterns=pattern,
            exclude_patterns=exclude,
            max_retries=retries,
            dry_run=True if dry_run else None,
            max_concurrency=concurrency,
        )
    except (TypeError, ValueError) as e:
        click.echo(f"Error: invalid settings: {e}", err=True)
        sys.exit(EXIT_INVALID)

    def on_progress(progress: SyncProgress) -> None:
        click.echo(f"  {progress}")

    token = CancellationToken()

    with FileSynchronizer(max_concurrency=config.effective_concurrency) as synchronizer:
        future = synchronizer.submit(
            config.source,
            config.destination,
            config.patterns,
            max_retries=config.max_retries,
            dry_run=config.dry_run,
            on_progress=None if no_progress else on_progress,
            cancel_token=token,
            exclude_patterns=config.exclude_patterns,
        )
        try:
            try:
                result = future.result()
            except KeyboardInterrupt:
                click.echo("Cancelling...", err=True)
                token.cancel()
                result = future.result()
        except (ValidationError, SourceNotFoundError) as e:
            click.echo(f"Error: {e}", err=True)
            sys.exit(EXIT_INVALID)
        except SyncCancelledError:
            click.echo("Synchronization cancelled.", err=True)
            sys.exit(EXIT_CANCELLED)
        except OSError as e:
            click.echo(f"Error: synchronization failed: {e}", err=True)
            sys.exit(EXIT_FILES_FAILED)

    click.echo(str(result))
    for error in result.errors:
        click.echo(f"  ✗ {error}", err=True)

    sys.exit(EXIT_OK if result.is_success else EXIT_FILES_FAILED)
