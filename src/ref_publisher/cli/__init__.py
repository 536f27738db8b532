"""Command line interface for ref-publisher."""

from __future__ import annotations
