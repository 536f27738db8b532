from __future__ import annotations

import contextlib
from collections.abc import Generator

import click

from ref_publisher.cli.context import ExitCode
from ref_publisher.cli.output import format_error
from ref_publisher.exceptions import (
    ConfigError,
    GitError,
    PublishError,
    RefNotFoundError,
    RefPublisherError,
)
from ref_publisher.logging import get_logger


@contextlib.contextmanager
def cli_error_handler() -> Generator[None, None, None]:
    """Context manager for common CLI error handling.

    - KeyboardInterrupt: Exit with code 130
    - PublishError: Format error with the ref and failed step
    - GitError: Format error with operation details
    - ConfigError: Format error with the offending field
    - RefPublisherError: Format error with message
    - Generic exceptions: Log and format error
    """
    logger = get_logger(__name__)

    try:
        yield
    except KeyboardInterrupt:
        click.echo("\n\nInterrupted by user.", err=True)
        raise SystemExit(ExitCode.INTERRUPTED) from None
    except PublishError as e:
        details = [f"Step: {e.operation}"]
        if e.ref:
            details.insert(0, f"Ref: {e.ref}")
        suggestion = None
        if isinstance(e, RefNotFoundError):
            suggestion = "Create the ref locally before publishing it"
        click.echo(format_error(e.message, details, suggestion), err=True)
        raise SystemExit(ExitCode.FAILURE) from e
    except GitError as e:
        error_msg = format_error(
            e.message,
            details=[f"Operation: {e.operation}"] if e.operation else None,
        )
        click.echo(error_msg, err=True)
        raise SystemExit(ExitCode.FAILURE) from e
    except ConfigError as e:
        details = []
        if e.field:
            details.append(f"Field: {e.field}")
        if e.value is not None:
            details.append(f"Value: {e.value}")
        click.echo(format_error(e.message, details or None), err=True)
        raise SystemExit(ExitCode.FAILURE) from e
    except RefPublisherError as e:
        click.echo(format_error(e.message), err=True)
        raise SystemExit(ExitCode.FAILURE) from e
    except Exception as e:
        logger.exception("unexpected_error")
        click.echo(f"Error: {e!s}", err=True)
        raise SystemExit(ExitCode.FAILURE) from e
