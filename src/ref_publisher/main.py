"""CLI entry point for ref-publisher.

This module defines the Click-based command-line interface.
"""

from __future__ import annotations

import logging
from pathlib import Path

import click
from dotenv import load_dotenv

from ref_publisher.logging import configure_logging

# Load REF_PUBLISHER_* settings from a .env file in the current directory
# before any settings are read
load_dotenv(dotenv_path=Path.cwd() / ".env", override=False)

from ref_publisher import __version__  # noqa: E402
from ref_publisher.cli.commands.publish import branch, tag  # noqa: E402
from ref_publisher.cli.context import CLIContext, ExitCode  # noqa: E402
from ref_publisher.cli.output import format_error  # noqa: E402
from ref_publisher.config import load_config  # noqa: E402
from ref_publisher.exceptions import ConfigError  # noqa: E402

VERBOSITY_LEVELS = {
    "error": logging.ERROR,
    "warning": logging.WARNING,
    "info": logging.INFO,
    "debug": logging.DEBUG,
}


@click.group()
@click.version_option(version=__version__, prog_name="ref-publisher")
@click.option(
    "-c",
    "--config",
    "config_file",
    type=click.Path(exists=False, path_type=str),
    default=None,
    help="Path to config file (overrides project config).",
)
@click.option(
    "-v",
    "--verbose",
    count=True,
    help="Increase verbosity (-v for INFO, -vv for DEBUG).",
)
@click.option(
    "-q",
    "--quiet",
    is_flag=True,
    default=False,
    help="Suppress non-essential output (ERROR level only).",
)
@click.pass_context
def cli(
    ctx: click.Context,
    config_file: str | None,
    verbose: int,
    quiet: bool,
) -> None:
    """ref-publisher - idempotently push release branches and tags."""
    ctx.ensure_object(dict)

    config_path = Path(config_file) if config_file else None
    try:
        settings = load_config(config_path)
    except ConfigError as e:
        details = []
        if e.field:
            details.append(f"Field: {e.field}")
        if e.value is not None:
            details.append(f"Value: {e.value}")
        click.echo(format_error(e.message, details or None), err=True)
        ctx.exit(ExitCode.FAILURE)

    ctx.obj["cli_ctx"] = CLIContext(
        settings=settings,
        config_path=config_path,
        verbosity=verbose,
        quiet=quiet,
    )

    # Priority: quiet > verbose > config
    if quiet:
        level = logging.ERROR
    elif verbose > 0:
        level = logging.INFO if verbose == 1 else logging.DEBUG
    else:
        level = VERBOSITY_LEVELS.get(settings.verbosity, logging.WARNING)

    configure_logging(level=level)


cli.add_command(branch)
cli.add_command(tag)


if __name__ == "__main__":
    cli()
