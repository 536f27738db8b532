"""CLI context and exit codes for ref-publisher."""

from __future__ import annotations

from dataclasses import dataclass
from enum import IntEnum
from pathlib import Path

from ref_publisher.config import PublisherSettings

__all__ = [
    "CLIContext",
    "ExitCode",
]


class ExitCode(IntEnum):
    """Standard exit codes for the CLI.

    Follows Unix conventions:
    - 0 for success, including refs that were already published
    - 1 for failure
    - 2 for usage errors (raised by click)
    - 130 for keyboard interrupt (128 + SIGINT=2)
    """

    SUCCESS = 0
    FAILURE = 1
    USAGE = 2
    INTERRUPTED = 130


@dataclass(frozen=True, slots=True)
class CLIContext:
    """Type-safe CLI context containing global options and configuration.

    Attributes:
        settings: Loaded settings.
        config_path: Path to config file (if specified via --config).
        verbosity: Verbosity level (0=default, 1=INFO, 2+=DEBUG).
        quiet: Suppress non-essential output.
    """

    settings: PublisherSettings
    config_path: Path | None = None
    verbosity: int = 0
    quiet: bool = False
