"""Tests for PublisherConfig and layered settings loading."""

from __future__ import annotations

from pathlib import Path

import pytest
from pydantic import ValidationError

from ref_publisher.config import (
    PublisherConfig,
    PublisherSettings,
    get_user_config_path,
    load_config,
)
from ref_publisher.exceptions import ConfigError


class TestPublisherConfig:
    """Tests for the per-run PublisherConfig model."""

    def test_defaults(self) -> None:
        config = PublisherConfig(repo_path=Path("/repo"))

        assert config.dry_run is True
        assert config.max_retries == 3
        assert config.default_branch == "master"
        assert config.remote == "origin"
        assert config.tag_prefix == "v"

    def test_is_frozen(self) -> None:
        config = PublisherConfig(repo_path=Path("/repo"))

        with pytest.raises(ValidationError):
            config.dry_run = False  # type: ignore[misc]

    def test_repo_path_accepts_string(self) -> None:
        config = PublisherConfig(repo_path="/repo")  # type: ignore[arg-type]

        assert config.repo_path == Path("/repo")

    def test_negative_retries_rejected(self) -> None:
        with pytest.raises(ValidationError):
            PublisherConfig(max_retries=-1)

    def test_large_retry_count_allowed(self) -> None:
        assert PublisherConfig(max_retries=25).max_retries == 25

    def test_blank_remote_rejected(self) -> None:
        with pytest.raises(ValidationError):
            PublisherConfig(remote="  ")


class TestLoadConfig:
    """Tests for load_config."""

    def test_defaults_without_files(self, clean_env: None) -> None:
        settings = load_config()

        assert settings.verbosity == "warning"
        assert settings.publisher.dry_run is True
        assert settings.publisher.repo_path == Path.cwd()

    def test_project_yaml(self, clean_env: None, tmp_path: Path) -> None:
        (tmp_path / "ref-publisher.yaml").write_text(
            "verbosity: info\n"
            "publisher:\n"
            "  default_branch: main\n"
            "  max_retries: 5\n"
        )

        settings = load_config()

        assert settings.verbosity == "info"
        assert settings.publisher.default_branch == "main"
        assert settings.publisher.max_retries == 5

    def test_explicit_config_path(self, clean_env: None, tmp_path: Path) -> None:
        config_path = tmp_path / "custom.yaml"
        config_path.write_text("publisher:\n  remote: upstream\n")

        settings = load_config(config_path)

        assert settings.publisher.remote == "upstream"

    def test_user_yaml_is_lowest_priority(
        self, clean_env: None, tmp_path: Path
    ) -> None:
        user_config = get_user_config_path()
        user_config.parent.mkdir(parents=True)
        user_config.write_text("verbosity: debug\npublisher:\n  remote: fork\n")
        (tmp_path / "ref-publisher.yaml").write_text("publisher:\n  remote: upstream\n")

        settings = load_config()

        assert settings.publisher.remote == "upstream"
        assert settings.verbosity == "debug"

    def test_env_overrides_yaml(
        self, clean_env: None, tmp_path: Path, monkeypatch: pytest.MonkeyPatch
    ) -> None:
        (tmp_path / "ref-publisher.yaml").write_text("verbosity: info\n")
        monkeypatch.setenv("REF_PUBLISHER_VERBOSITY", "error")

        assert load_config().verbosity == "error"

    def test_nested_env_variable(
        self, clean_env: None, monkeypatch: pytest.MonkeyPatch
    ) -> None:
        monkeypatch.setenv("REF_PUBLISHER_PUBLISHER__MAX_RETRIES", "7")

        assert load_config().publisher.max_retries == 7

    def test_invalid_yaml(self, clean_env: None, tmp_path: Path) -> None:
        (tmp_path / "ref-publisher.yaml").write_text("publisher: [unclosed\n")

        with pytest.raises(ConfigError) as exc_info:
            load_config()

        assert "Invalid YAML" in exc_info.value.message

    def test_non_mapping_yaml(self, clean_env: None, tmp_path: Path) -> None:
        (tmp_path / "ref-publisher.yaml").write_text("- just\n- a list\n")

        with pytest.raises(ConfigError):
            load_config()

    def test_empty_yaml_uses_defaults(self, clean_env: None, tmp_path: Path) -> None:
        (tmp_path / "ref-publisher.yaml").write_text("")

        assert load_config().publisher.max_retries == 3

    def test_invalid_value(self, clean_env: None, tmp_path: Path) -> None:
        (tmp_path / "ref-publisher.yaml").write_text(
            "publisher:\n  max_retries: -3\n"
        )

        with pytest.raises(ConfigError) as exc_info:
            load_config()

        assert exc_info.value.field == "publisher.max_retries"
        assert exc_info.value.value == -3


class TestPublisherConfigOverrides:
    """Tests for PublisherSettings.publisher_config."""

    def test_none_overrides_are_ignored(self, clean_env: None) -> None:
        settings = PublisherSettings()

        config = settings.publisher_config(dry_run=None, max_retries=None)

        assert config == settings.publisher

    def test_overrides_applied(self, clean_env: None, tmp_path: Path) -> None:
        settings = PublisherSettings()

        config = settings.publisher_config(
            repo_path=tmp_path, dry_run=False, max_retries=0
        )

        assert config.repo_path == tmp_path
        assert config.dry_run is False
        assert config.max_retries == 0

    def test_invalid_override(self, clean_env: None) -> None:
        settings = PublisherSettings()

        with pytest.raises(ConfigError) as exc_info:
            settings.publisher_config(max_retries=-1)

        assert exc_info.value.field == "max_retries"
