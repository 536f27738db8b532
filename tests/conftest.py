from __future__ import annotations

import logging
import os
from collections.abc import Generator
from pathlib import Path

import pytest

# Register fixture plugins from tests/fixtures/
pytest_plugins = [
    "tests.fixtures.git",
    "tests.fixtures.publisher",
]


@pytest.fixture(autouse=True)
def configure_test_logging() -> Generator[None, None, None]:
    """Configure structlog for the test environment.

    Runs for every test so log output goes to stderr at WARNING level and
    does not mix with command output on stdout.
    """
    from ref_publisher.logging import configure_logging

    configure_logging(level=logging.WARNING)
    yield


@pytest.fixture
def clean_env(
    tmp_path: Path, monkeypatch: pytest.MonkeyPatch
) -> Generator[None, None, None]:
    """Remove REF_PUBLISHER_ variables and isolate cwd and home."""
    for key in list(os.environ):
        if key.startswith("REF_PUBLISHER_"):
            monkeypatch.delenv(key)
    home = tmp_path / "home"
    home.mkdir()
    monkeypatch.setattr(Path, "home", lambda: home)
    monkeypatch.chdir(tmp_path)
    yield
