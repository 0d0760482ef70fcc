"""Command-line interface for filesync.

This module provides the main CLI entry point and assembles all commands.

Commands:
- sync: Copy new and newer matching files from a source to a destination
"""

from __future__ import annotations

import click

from filesync.cli.config import get_config_dir, get_config_file, load_config
from filesync.cli.sync import sync


@click.group()
@click.version_option(package_name="filesync")
def cli() -> None:
    """filesync - One-directional, pattern-filtered directory synchronization."""


cli.add_command(sync)


def main() -> None:
    """Entry point for the CLI."""
    cli()


__all__ = [
    "cli",
    "get_config_dir",
    "get_config_file",
    "load_config",
    "main",
]
