"""CLI commands for ``ref-publisher branch`` and ``ref-publisher tag``.

Both commands default to a dry run; pass ``--no-dry-run`` to push for real.
"""

from __future__ import annotations

from collections.abc import Callable
from pathlib import Path
from typing import Any

import click

from ref_publisher.cli.common import cli_error_handler
from ref_publisher.cli.console import console
from ref_publisher.cli.context import CLIContext
from ref_publisher.cli.output import format_result
from ref_publisher.logging import bind_context, clear_context
from ref_publisher.publisher import PublishResult, RefPublisher
from ref_publisher.refs import RefKind, validate_branch_name, validate_tag_name


def _publish_options(f: Callable[..., Any]) -> Callable[..., Any]:
    """Options shared by the branch and tag commands."""
    options = [
        click.option(
            "--repo",
            "repo_path",
            type=click.Path(file_okay=False, path_type=Path),
            default=None,
            help="Path to the repository (default: settings or cwd).",
        ),
        click.option(
            "--dry-run/--no-dry-run",
            "dry_run",
            default=None,
            help="Simulate the push (default: on).",
        ),
        click.option(
            "--max-retries",
            type=click.IntRange(min=0),
            default=None,
            help="Number of times to retry a failed push.",
        ),
        click.option(
            "--remote",
            default=None,
            help="Remote to publish to (default: origin).",
        ),
    ]
    for option in reversed(options):
        f = option(f)
    return f


def _run(
    ctx: click.Context,
    kind: RefKind,
    name: str,
    **overrides: Any,
) -> None:
    cli_ctx: CLIContext = ctx.obj["cli_ctx"]

    with cli_error_handler():
        config = cli_ctx.settings.publisher_config(**overrides)
        # Reject bad names before the checkout touches the working tree
        if kind is RefKind.BRANCH:
            validate_branch_name(name)
        else:
            validate_tag_name(name, config.tag_prefix)

        bind_context(command=kind.value, ref=name)
        try:
            with RefPublisher.create(config) as publisher:
                result: PublishResult
                if kind is RefKind.BRANCH:
                    result = publisher.publish_branch(name)
                else:
                    result = publisher.publish_tag(name)
        finally:
            clear_context()

        console.print(
            format_result(result, config.remote), markup=False, soft_wrap=True
        )


@click.command()
@click.argument("branch_name")
@_publish_options
@click.pass_context
def branch(
    ctx: click.Context,
    branch_name: str,
    repo_path: Path | None,
    dry_run: bool | None,
    max_retries: int | None,
    remote: str | None,
) -> None:
    """Publish release branch BRANCH_NAME (e.g. release-1.19)."""
    _run(
        ctx,
        RefKind.BRANCH,
        branch_name,
        repo_path=repo_path,
        dry_run=dry_run,
        max_retries=max_retries,
        remote=remote,
    )


@click.command()
@click.argument("tag_name")
@_publish_options
@click.pass_context
def tag(
    ctx: click.Context,
    tag_name: str,
    repo_path: Path | None,
    dry_run: bool | None,
    max_retries: int | None,
    remote: str | None,
) -> None:
    """Publish release tag TAG_NAME (e.g. v1.19.0)."""
    _run(
        ctx,
        RefKind.TAG,
        tag_name,
        repo_path=repo_path,
        dry_run=dry_run,
        max_retries=max_retries,
        remote=remote,
    )
