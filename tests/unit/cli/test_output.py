"""Tests for CLI output formatting."""

from __future__ import annotations

from ref_publisher.cli.output import dry_run_label, format_error, format_result
from ref_publisher.publisher import PublishResult
from ref_publisher.refs import RefKind


def test_dry_run_label() -> None:
    assert dry_run_label(True) == "[dry-run] "
    assert dry_run_label(False) == ""


def test_format_error_with_details_and_suggestion() -> None:
    result = format_error(
        "Unable to push tag v1.19.0",
        details=["Ref: v1.19.0", "Step: local_lookup"],
        suggestion="Create the ref locally before publishing it",
    )

    assert result.splitlines() == [
        "Error: Unable to push tag v1.19.0",
        "  Ref: v1.19.0",
        "  Step: local_lookup",
        "Suggestion: Create the ref locally before publishing it",
    ]


def test_format_error_message_only() -> None:
    assert format_error("boom") == "Error: boom"


def test_format_pushed_result() -> None:
    result = PublishResult("release-1.19", RefKind.BRANCH, pushed=True, dry_run=False)

    assert format_result(result, "origin") == "Pushed branch release-1.19 to origin"


def test_format_noop_dry_run_result() -> None:
    result = PublishResult("v1.19.0", RefKind.TAG, pushed=False, dry_run=True)

    assert format_result(result, "upstream") == (
        "[dry-run] The tag v1.19.0 already exists in upstream, nothing to do"
    )
