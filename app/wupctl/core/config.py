"""Updater configuration and settings.

This module provides the configuration model and I/O functions for
wupctl. Configuration is stored in <config dir>/config.toml:

    upgrade_timeout_seconds = 1800

    [sources.winget]
    enabled = true
    exclusions = ["Microsoft.Edge"]

    [sources.chocolatey]
    exclusions = ["python"]

    [report]
    enabled = true
    format = "html"

    [restore_point]
    enabled = true
    required = false

The configuration is passed explicitly into the update pipeline; nothing
in the core looks it up on its own.
"""

import os
import tomllib
from pathlib import Path
from tempfile import NamedTemporaryFile
from typing import Annotated

import tomli_w
from pydantic import BaseModel, ConfigDict, Field, ValidationError, field_validator

from wupctl.core.paths import get_config_path
from wupctl.core.report import ReportFormat
from wupctl.models.package import ExclusionSet, PackageSource, make_exclusion_set


class SourceConfig(BaseModel):
    """Settings for one package source.

    Attributes:
        enabled: Whether the source takes part in runs.
        exclusions: Package identifiers never upgraded (case-insensitive).
    """

    model_config = ConfigDict(extra="forbid")

    enabled: bool = True
    exclusions: Annotated[
        list[str],
        Field(description="Package ids to leave alone (case-insensitive)"),
    ] = []

    @field_validator("exclusions")
    @classmethod
    def strip_exclusions(cls, value: list[str]) -> list[str]:
        """Drop blank entries and surrounding whitespace."""
        return [item.strip() for item in value if item.strip()]


class SourcesConfig(BaseModel):
    """Per-source settings."""

    model_config = ConfigDict(extra="forbid")

    winget: SourceConfig = SourceConfig()
    chocolatey: SourceConfig = SourceConfig()
    store: SourceConfig = SourceConfig()

    def get(self, source: PackageSource) -> SourceConfig:
        """Return the settings of a source."""
        return getattr(self, source.value)


class ReportConfig(BaseModel):
    """Report generation settings.

    Attributes:
        enabled: Write a report after every update run.
        format: Report format (json, csv or html).
        directory: Output directory. None uses <state dir>/reports.
    """

    model_config = ConfigDict(extra="forbid")

    enabled: bool = False
    format: ReportFormat = ReportFormat.HTML
    directory: Path | None = None


class LoggingConfig(BaseModel):
    """Transcript log settings.

    Attributes:
        enabled: Append a transcript of every run to the log file.
        file: Log file path. None uses <state dir>/wupctl.log.
    """

    model_config = ConfigDict(extra="forbid")

    enabled: bool = True
    file: Path | None = None


class RestorePointConfig(BaseModel):
    """System restore point settings.

    Attributes:
        enabled: Create a restore point before upgrading.
        required: Abort the run when the restore point cannot be created.
        description: Description shown in System Restore.
    """

    model_config = ConfigDict(extra="forbid")

    enabled: bool = False
    required: bool = False
    description: Annotated[str, Field(min_length=1, max_length=256)] = (
        "wupctl pre-update checkpoint"
    )


class UpdaterConfig(BaseModel):
    """Complete wupctl configuration.

    Attributes:
        sources: Per-source enable flags and exclusions.
        upgrade_timeout_seconds: Optional limit for a single package upgrade.
            None waits for the package manager however long it takes.
        report: Report generation settings.
        logging: Transcript log settings.
        restore_point: Restore point settings.
    """

    model_config = ConfigDict(extra="forbid")

    sources: SourcesConfig = SourcesConfig()
    upgrade_timeout_seconds: Annotated[
        int | None,
        Field(ge=60, le=86400, description="Per-package timeout (60-86400), unset = no limit"),
    ] = None
    report: ReportConfig = ReportConfig()
    logging: LoggingConfig = LoggingConfig()
    restore_point: RestorePointConfig = RestorePointConfig()

    def is_enabled(self, source: PackageSource) -> bool:
        """Check if a source is enabled."""
        return self.sources.get(source).enabled

    def exclusions_for(self, source: PackageSource) -> ExclusionSet:
        """Return the case-insensitive exclusion set of a source."""
        return make_exclusion_set(self.sources.get(source).exclusions)


class ConfigError(Exception):
    """Base exception for configuration errors."""


class ConfigNotFoundError(ConfigError):
    """Raised when the config file is not found."""


class ConfigParseError(ConfigError):
    """Raised when the config file cannot be parsed."""


def load_config(path: Path | None = None) -> UpdaterConfig:
    """Load configuration from a TOML file.

    Args:
        path: Path to the config file. If None, uses the default config path.

    Returns:
        Validated UpdaterConfig object.

    Raises:
        ConfigNotFoundError: If the config file doesn't exist.
        ConfigParseError: If the TOML syntax is invalid.
        ConfigError: If the content doesn't match the schema.
    """
    config_path = path or get_config_path()

    if not config_path.exists():
        raise ConfigNotFoundError(f"Config not found: {config_path}")

    try:
        with open(config_path, "rb") as f:
            data = tomllib.load(f)
    except tomllib.TOMLDecodeError as e:
        raise ConfigParseError(f"Invalid TOML syntax in {config_path}: {e}") from e
    except OSError as e:
        raise ConfigError(f"Failed to read config: {e}") from e

    try:
        return UpdaterConfig.model_validate(data)
    except ValidationError as e:
        raise ConfigError(f"Invalid config content in {config_path}: {e}") from e


def load_config_or_default(path: Path | None = None) -> UpdaterConfig:
    """Load configuration, falling back to defaults when no file exists.

    An explicitly given path must exist; only the default location may be
    missing.

    Args:
        path: Explicit config path, or None for the default location.

    Returns:
        Validated UpdaterConfig object.

    Raises:
        ConfigError: If the file is invalid, or an explicit path is missing.
    """
    try:
        return load_config(path)
    except ConfigNotFoundError:
        if path is not None:
            raise
        return UpdaterConfig()


def save_config(config: UpdaterConfig, path: Path | None = None) -> Path:
    """Save configuration to a TOML file.

    The file is written atomically by first writing to a temporary file
    and then using os.replace() for atomic rename.

    Args:
        config: The UpdaterConfig object to save.
        path: Path to save the config. If None, uses the default config path.

    Returns:
        Path where the config was saved.

    Raises:
        ConfigError: If the file cannot be written.
    """
    config_path = path or get_config_path()
    data = config.model_dump(mode="json", exclude_none=True)

    tmp_path: Path | None = None
    try:
        config_path.parent.mkdir(parents=True, exist_ok=True)
        with NamedTemporaryFile(
            mode="wb",
            dir=config_path.parent,
            delete=False,
            suffix=".tmp",
        ) as f:
            tmp_path = Path(f.name)
            tomli_w.dump(data, f)
        os.replace(str(tmp_path), str(config_path))
    except OSError as e:
        if tmp_path is not None and tmp_path.exists():
            tmp_path.unlink()
        raise ConfigError(f"Failed to write config: {e}") from e

    return config_path
