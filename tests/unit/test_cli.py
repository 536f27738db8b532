"""Unit tests for the CLI entry point.

These tests verify the Click-based CLI interface, including version output,
help text, verbosity handling and exit codes.
"""

from __future__ import annotations

import logging
from pathlib import Path
from unittest.mock import patch

import pytest
from click.testing import CliRunner

from ref_publisher import __version__
from ref_publisher.main import cli


@pytest.fixture
def cli_runner() -> CliRunner:
    """Provide a Click CLI test runner."""
    return CliRunner()


def test_version_output(cli_runner: CliRunner) -> None:
    result = cli_runner.invoke(cli, ["--version"])

    assert result.exit_code == 0
    assert __version__ in result.output


def test_help_lists_commands(cli_runner: CliRunner) -> None:
    result = cli_runner.invoke(cli, ["--help"])

    assert result.exit_code == 0
    assert "branch" in result.output
    assert "tag" in result.output


def test_exit_code_usage_error(cli_runner: CliRunner) -> None:
    result = cli_runner.invoke(cli, ["--invalid-option"])

    assert result.exit_code == 2


def test_missing_ref_argument_is_usage_error(cli_runner: CliRunner) -> None:
    result = cli_runner.invoke(cli, ["tag"])

    assert result.exit_code == 2


@pytest.mark.parametrize(
    ("args", "level"),
    [
        ([], logging.WARNING),
        (["-v"], logging.INFO),
        (["-vv"], logging.DEBUG),
        (["-q", "-vv"], logging.ERROR),
    ],
)
def test_verbosity_flags(
    cli_runner: CliRunner, clean_env: None, args: list[str], level: int
) -> None:
    with patch("ref_publisher.main.configure_logging") as mock_configure:
        # An invalid name fails before the repository is touched
        cli_runner.invoke(cli, [*args, "branch", "not-a-release"])

    mock_configure.assert_called_once()
    assert mock_configure.call_args.kwargs["level"] == level


def test_verbosity_from_config(
    cli_runner: CliRunner, clean_env: None, tmp_path: Path
) -> None:
    (tmp_path / "ref-publisher.yaml").write_text('verbosity: "debug"\n')

    with patch("ref_publisher.main.configure_logging") as mock_configure:
        cli_runner.invoke(cli, ["branch", "not-a-release"])

    assert mock_configure.call_args.kwargs["level"] == logging.DEBUG


def test_invalid_config_exits_with_failure(
    cli_runner: CliRunner, clean_env: None, tmp_path: Path
) -> None:
    (tmp_path / "ref-publisher.yaml").write_text("verbosity: chatty\n")

    result = cli_runner.invoke(cli, ["branch", "release-1.19"])

    assert result.exit_code == 1
    assert "Field: verbosity" in result.output
