"""CLI subcommands."""

from __future__ import annotations
