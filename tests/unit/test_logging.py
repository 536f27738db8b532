"""Tests for the ref_publisher.logging module."""

from __future__ import annotations

import json
import logging
import os
from unittest.mock import patch

import pytest
import structlog

from ref_publisher.logging import (
    bind_context,
    clear_context,
    configure_logging,
    get_logger,
)


class TestConfigureLogging:
    """Tests for configure_logging."""

    def test_custom_level(self) -> None:
        configure_logging(level=logging.DEBUG)

        assert logging.getLogger().level == logging.DEBUG

    def test_level_from_env(self) -> None:
        with patch.dict(os.environ, {"REF_PUBLISHER_LOG_LEVEL": "ERROR"}):
            configure_logging()

        assert logging.getLogger().level == logging.ERROR

    def test_unknown_level_falls_back_to_info(self) -> None:
        with patch.dict(os.environ, {"REF_PUBLISHER_LOG_LEVEL": "LOUD"}):
            configure_logging()

        assert logging.getLogger().level == logging.INFO

    def test_single_handler_after_reconfigure(self) -> None:
        configure_logging()
        configure_logging()

        assert len(logging.getLogger().handlers) == 1

    def test_git_logger_not_below_info(self) -> None:
        configure_logging(level=logging.DEBUG)

        assert logging.getLogger("git").level == logging.INFO

    def test_json_output(self, capsys: pytest.CaptureFixture[str]) -> None:
        configure_logging(force_json=True, level=logging.INFO)

        get_logger("ref_publisher.test").info("ref_pushed", ref="v1.19.0")

        line = capsys.readouterr().err.strip().splitlines()[-1]
        event = json.loads(line)
        assert event["event"] == "ref_pushed"
        assert event["ref"] == "v1.19.0"
        assert event["level"] == "info"


class TestContext:
    """Tests for bind_context and clear_context."""

    def test_bind_and_clear(self) -> None:
        bind_context(command="tag", ref="v1.19.0")
        assert structlog.contextvars.get_contextvars() == {
            "command": "tag",
            "ref": "v1.19.0",
        }

        clear_context()
        assert structlog.contextvars.get_contextvars() == {}


def test_get_logger_returns_bound_logger() -> None:
    log = get_logger(__name__)

    assert hasattr(log, "bind")
    assert hasattr(log, "info")
