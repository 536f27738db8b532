"""Output formatting utilities for the ref-publisher CLI."""

from __future__ import annotations

from ref_publisher.publisher import PublishResult

__all__ = [
    "dry_run_label",
    "format_error",
    "format_result",
]


def dry_run_label(dry_run: bool) -> str:
    """Prefix shown in front of simulated results."""
    return "[dry-run] " if dry_run else ""


def format_error(
    message: str, details: list[str] | None = None, suggestion: str | None = None
) -> str:
    """Format an error message with optional details and suggestion.

    Example:
        >>> print(format_error(
        ...     "Unable to push tag v1.19.0",
        ...     details=["Ref: v1.19.0"],
        ...     suggestion="Create the tag before publishing it",
        ... ))
        Error: Unable to push tag v1.19.0
          Ref: v1.19.0
        Suggestion: Create the tag before publishing it
    """
    lines = [f"Error: {message}"]

    if details:
        for detail in details:
            lines.append(f"  {detail}")

    if suggestion:
        lines.append(f"Suggestion: {suggestion}")

    return "\n".join(lines)


def format_result(result: PublishResult, remote: str) -> str:
    """Describe a publish outcome in one line.

    Example:
        >>> format_result(
        ...     PublishResult("v1.19.0", RefKind.TAG, pushed=True, dry_run=True),
        ...     "origin",
        ... )
        '[dry-run] Pushed tag v1.19.0 to origin'
    """
    label = dry_run_label(result.dry_run)
    kind = result.kind.value
    if result.pushed:
        return f"{label}Pushed {kind} {result.ref} to {remote}"
    return f"{label}The {kind} {result.ref} already exists in {remote}, nothing to do"
