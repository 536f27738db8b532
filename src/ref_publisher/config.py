from __future__ import annotations

from pathlib import Path
from typing import Any, ClassVar, Literal

import yaml
from pydantic import BaseModel, ConfigDict, Field, ValidationError, field_validator
from pydantic.fields import FieldInfo
from pydantic_settings import (
    BaseSettings,
    PydanticBaseSettingsSource,
    SettingsConfigDict,
)

from ref_publisher.exceptions import ConfigError
from ref_publisher.logging import get_logger

__all__ = [
    "DEFAULT_BRANCH",
    "DEFAULT_REMOTE",
    "PROJECT_CONFIG_FILENAME",
    "PublisherConfig",
    "PublisherSettings",
    "get_user_config_path",
    "load_config",
]

logger = get_logger(__name__)

#: Branch checked out before publishing and whose tags may be pushed
DEFAULT_BRANCH = "master"

#: Remote all refs are published to
DEFAULT_REMOTE = "origin"

#: Default number of push retries after the first attempt
DEFAULT_MAX_RETRIES = 3

PROJECT_CONFIG_FILENAME = "ref-publisher.yaml"


class PublisherConfig(BaseModel):
    """Options for a single publish run.

    Attributes:
        dry_run: Simulate pushes (passes --dry-run to git).
        max_retries: Number of times to retry a failed push.
        repo_path: Path to the repository.
        default_branch: Branch checked out before pushing; tags must be
            reachable from it.
        remote: Name of the remote refs are published to.
        tag_prefix: Prefix required in front of the version in tag names.
    """

    model_config = ConfigDict(frozen=True)

    dry_run: bool = True
    max_retries: int = Field(default=DEFAULT_MAX_RETRIES, ge=0)
    repo_path: Path = Field(default_factory=Path.cwd)
    default_branch: str = DEFAULT_BRANCH
    remote: str = DEFAULT_REMOTE
    tag_prefix: str = "v"

    @field_validator("default_branch", "remote")
    @classmethod
    def check_not_blank(cls, v: str) -> str:
        if not v.strip():
            raise ValueError("must not be empty")
        return v


class YamlConfigSource(PydanticBaseSettingsSource):
    """Custom settings source that loads from YAML files."""

    def __init__(
        self,
        settings_cls: type[BaseSettings],
        yaml_file: Path | None = None,
    ):
        super().__init__(settings_cls)
        self.yaml_file = yaml_file
        self._config_data: dict[str, Any] = {}
        if yaml_file and yaml_file.exists():
            try:
                with open(yaml_file) as f:
                    loaded = yaml.safe_load(f)
            except yaml.YAMLError as e:
                raise ConfigError(f"Invalid YAML in {yaml_file}: {e}") from e
            if loaded is None:
                logger.warning("config_file_empty", path=str(yaml_file))
            elif not isinstance(loaded, dict):
                raise ConfigError(
                    f"Config file {yaml_file} must contain a mapping",
                    value=loaded,
                )
            else:
                self._config_data = loaded

    def get_field_value(
        self, field: FieldInfo, field_name: str
    ) -> tuple[Any, str, bool]:
        """Get value for a specific field from the YAML config."""
        if field_name in self._config_data:
            return self._config_data[field_name], field_name, False
        return None, field_name, False

    def __call__(self) -> dict[str, Any]:
        """Return the complete config data."""
        return self._config_data


class PublisherSettings(BaseSettings):
    """Layered settings for the command line.

    Priority (highest to lowest):
    1. Environment variables (REF_PUBLISHER_*)
    2. Project YAML config (./ref-publisher.yaml or --config)
    3. User YAML config (~/.config/ref-publisher/config.yaml)
    4. Defaults
    """

    model_config = SettingsConfigDict(
        env_prefix="REF_PUBLISHER_",
        env_nested_delimiter="__",
        extra="ignore",
    )

    publisher: PublisherConfig = Field(default_factory=PublisherConfig)
    verbosity: Literal["error", "warning", "info", "debug"] = "warning"

    #: Project config file chosen by load_config; not a settings field
    config_file: ClassVar[Path | None] = None

    @classmethod
    def settings_customise_sources(
        cls,
        settings_cls: type[BaseSettings],
        init_settings: PydanticBaseSettingsSource,
        env_settings: PydanticBaseSettingsSource,
        dotenv_settings: PydanticBaseSettingsSource,
        file_secret_settings: PydanticBaseSettingsSource,
    ) -> tuple[PydanticBaseSettingsSource, ...]:
        project_config_path = (
            cls.config_file or Path.cwd() / PROJECT_CONFIG_FILENAME
        )
        return (
            init_settings,
            env_settings,
            YamlConfigSource(settings_cls, project_config_path),
            YamlConfigSource(settings_cls, get_user_config_path()),
        )

    def publisher_config(self, **overrides: Any) -> PublisherConfig:
        """Build the PublisherConfig for one run, applying CLI overrides.

        Overrides whose value is None are ignored.
        """
        updates = {k: v for k, v in overrides.items() if v is not None}
        try:
            return PublisherConfig.model_validate(
                {**self.publisher.model_dump(), **updates}
            )
        except ValidationError as e:
            raise _to_config_error(e) from e


def get_user_config_path() -> Path:
    """Get the path to the user configuration file.

    Returns:
        Path to ~/.config/ref-publisher/config.yaml
    """
    return Path.home() / ".config" / "ref-publisher" / "config.yaml"


def _to_config_error(e: ValidationError) -> ConfigError:
    first_error = e.errors()[0]
    field = ".".join(str(loc) for loc in first_error["loc"])
    return ConfigError(
        message=f"Invalid configuration: {first_error['msg']}",
        field=field,
        value=first_error.get("input"),
    )


def load_config(config_path: Path | None = None) -> PublisherSettings:
    """Load settings with hierarchy: defaults -> user -> project -> env.

    Args:
        config_path: Optional path to project config file. Defaults to
            ./ref-publisher.yaml

    Returns:
        PublisherSettings instance with merged configuration

    Raises:
        ConfigError: If configuration is invalid
    """
    if config_path is None:
        config_path = Path.cwd() / PROJECT_CONFIG_FILENAME

    if not config_path.exists():
        logger.info("no_project_config", path=str(config_path))

    PublisherSettings.config_file = config_path
    try:
        return PublisherSettings()
    except ValidationError as e:
        raise _to_config_error(e) from e
    finally:
        PublisherSettings.config_file = None
