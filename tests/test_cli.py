"""Tests for the filesync CLI."""

from __future__ import annotations

import json
from pathlib import Path
from unittest.mock import patch

import pytest
from click.testing import CliRunner

from filesync.cli import cli
from filesync.cli.config import load_config
from filesync.cli.sync import (
    EXIT_CANCELLED,
    EXIT_FILES_FAILED,
    EXIT_INVALID,
    merge_settings,
)
from filesync.core.types import SyncCancelledError


@pytest.fixture
def runner() -> CliRunner:
    """Create a CLI test runner."""
    return CliRunner()


@pytest.fixture(autouse=True)
def no_default_config(tmp_path: Path):
    """Point the default config location at an empty directory."""
    with patch("filesync.cli.config.get_config_dir", return_value=tmp_path / ".filesync"):
        yield


@pytest.fixture(autouse=True)
def quiet_logging():
    """Keep CLI logging setup from touching the test session's loggers."""
    with patch("filesync.cli.sync.setup_logging"):
        yield


class TestLoadConfig:
    """Tests for load_config."""

    def test_missing_default_is_empty(self) -> None:
        """Should return an empty dict when the default file is absent."""
        assert load_config() == {}

    def test_explicit_file(self, tmp_path: Path) -> None:
        """Should read settings from an explicit file."""
        path = tmp_path / "settings.json"
        path.write_text(json.dumps({"include_patterns": r"\.txt$"}))
        assert load_config(path) == {"include_patterns": r"\.txt$"}

    def test_explicit_missing_file_raises(self, tmp_path: Path) -> None:
        """Should raise when an explicit file does not exist."""
        with pytest.raises(FileNotFoundError):
            load_config(tmp_path / "nope.json")

    def test_non_object_raises(self, tmp_path: Path) -> None:
        """Should reject a file that is not a JSON object."""
        path = tmp_path / "settings.json"
        path.write_text("[1, 2]")
        with pytest.raises(ValueError):
            load_config(path)


class TestMergeSettings:
    """Tests for merge_settings."""

    def test_cli_values_override(self) -> None:
        """Should let command-line values override stored settings."""
        config = merge_settings(
            {"source_directory": "/stored", "include_patterns": "a", "max_retries": 2},
            source_directory="/cli",
            include_patterns=None,
            max_retries=None,
        )
        assert config.source == "/cli"
        assert config.patterns == "a"
        assert config.max_retries == 2


class TestSyncCommand:
    """Tests for 'filesync sync'."""

    def test_sync_copies_files(
        self, runner: CliRunner, source_dir: Path, dest_dir: Path, make_file
    ) -> None:
        """Should copy matching files and print progress and summary."""
        make_file(source_dir, "a.txt", "hello")
        make_file(source_dir, "b.png", "image")

        result = runner.invoke(
            cli, ["sync", str(source_dir), str(dest_dir), "--pattern", r"\.txt$"]
        )

        assert result.exit_code == 0, result.output
        assert "Sync completed: 1 total, 1 created" in result.output
        assert "1/1 (100.0%) - Created: a.txt" in result.output
        assert (dest_dir / "a.txt").read_text() == "hello"
        assert not (dest_dir / "b.png").exists()

    def test_dry_run(self, runner: CliRunner, source_dir: Path, dest_dir: Path, make_file) -> None:
        """Should report would-be actions without creating subdirectories."""
        make_file(source_dir, "sub/a.txt", "hello")

        result = runner.invoke(cli, ["sync", str(source_dir), str(dest_dir), "--dry-run"])

        assert result.exit_code == 0, result.output
        assert "[DRY RUN] Sync completed" in result.output
        assert "[DRY RUN] Would Create: a.txt" in result.output
        assert not (dest_dir / "sub").exists()

    def test_no_progress(self, runner: CliRunner, source_dir: Path, dest_dir: Path, make_file) -> None:
        """Should print only the summary with --no-progress."""
        make_file(source_dir, "a.txt")

        result = runner.invoke(cli, ["sync", str(source_dir), str(dest_dir), "--no-progress"])

        assert result.exit_code == 0
        assert "Created: a.txt" not in result.output
        assert "Sync completed" in result.output

    def test_settings_from_config_file(
        self, runner: CliRunner, tmp_path: Path, source_dir: Path, dest_dir: Path, make_file
    ) -> None:
        """Should take paths and patterns from a --config file."""
        make_file(source_dir, "a.txt")
        make_file(source_dir, "a.log")
        settings = tmp_path / "settings.json"
        settings.write_text(
            json.dumps(
                {
                    "source_directory": str(source_dir),
                    "destination_directory": str(dest_dir),
                    "include_patterns": r"\.log$",
                }
            )
        )

        result = runner.invoke(cli, ["sync", "--config", str(settings)])

        assert result.exit_code == 0, result.output
        assert (dest_dir / "a.log").exists()
        assert not (dest_dir / "a.txt").exists()

    def test_invalid_pattern(self, runner: CliRunner, source_dir: Path, dest_dir: Path) -> None:
        """Should exit with the invalid-input code for a malformed pattern."""
        result = runner.invoke(cli, ["sync", str(source_dir), str(dest_dir), "-p", "[bad"])

        assert result.exit_code == EXIT_INVALID
        assert "Error:" in result.output
        assert not dest_dir.exists()

    def test_missing_source(self, runner: CliRunner, tmp_path: Path, dest_dir: Path) -> None:
        """Should exit with the invalid-input code for a missing source."""
        result = runner.invoke(cli, ["sync", str(tmp_path / "missing"), str(dest_dir)])

        assert result.exit_code == EXIT_INVALID
        assert "not found" in result.output

    def test_missing_arguments(self, runner: CliRunner) -> None:
        """Without arguments or settings the paths are empty."""
        result = runner.invoke(cli, ["sync"])

        assert result.exit_code == EXIT_INVALID
        assert "must not be empty" in result.output

    def test_failed_files_exit_code(
        self, runner: CliRunner, source_dir: Path, dest_dir: Path, make_file
    ) -> None:
        """Should exit with 1 and list errors when a file fails."""
        make_file(source_dir, "a.txt")

        with patch("filesync.sync.retry.copy_file", side_effect=PermissionError("locked")):
            result = runner.invoke(cli, ["sync", str(source_dir), str(dest_dir), "-r", "0"])

        assert result.exit_code == EXIT_FILES_FAILED
        assert "a.txt: locked" in result.output

    def test_cancelled_exit_code(
        self, runner: CliRunner, source_dir: Path, dest_dir: Path
    ) -> None:
        """Should exit with 130 when the run is cancelled."""
        with patch(
            "filesync.sync.synchronizer.scan_tree",
            side_effect=SyncCancelledError("cancelled"),
        ):
            result = runner.invoke(cli, ["sync", str(source_dir), str(dest_dir)])

        assert result.exit_code == EXIT_CANCELLED

    def test_invalid_settings_value(
        self, runner: CliRunner, tmp_path: Path, source_dir: Path, dest_dir: Path
    ) -> None:
        """Should exit with the invalid-input code for a malformed settings value."""
        settings = tmp_path / "settings.json"
        settings.write_text(json.dumps({"max_concurrency": "lots"}))

        result = runner.invoke(
            cli, ["sync", str(source_dir), str(dest_dir), "--config", str(settings)]
        )

        assert result.exit_code == EXIT_INVALID
        assert "invalid settings" in result.output
        assert not dest_dir.exists()

    def test_string_concurrency_setting(
        self, runner: CliRunner, tmp_path: Path, source_dir: Path, dest_dir: Path, make_file
    ) -> None:
        """Should accept max_concurrency given as a string in the settings file."""
        make_file(source_dir, "a.txt")
        settings = tmp_path / "settings.json"
        settings.write_text(json.dumps({"max_concurrency": "4"}))

        result = runner.invoke(
            cli, ["sync", str(source_dir), str(dest_dir), "--config", str(settings)]
        )

        assert result.exit_code == 0, result.output
        assert (dest_dir / "a.txt").exists()

    def test_negative_retries_rejected(
        self, runner: CliRunner, source_dir: Path, dest_dir: Path
    ) -> None:
        """Should reject a negative retry count before touching the destination."""
        result = runner.invoke(cli, ["sync", str(source_dir), str(dest_dir), "-r", "-1"])
        assert result.exit_code != 0
        assert not dest_dir.exists()
