"""
medspec configuration.

Settings are read from ``medspec.toml``:

    [pipeline]
    rulebook = "rules/ux_rule.yaml"   # relative to medspec.toml
    tablet_platform = "mobile"

    [context.overrides]
    isDestructive = true

    [logging]
    level = "INFO"

    [storage]
    directory = ".medspec/specs"

Every section is optional; a missing file yields the defaults.
"""

from __future__ import annotations

import logging
import tomllib
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any

from .context import override_errors
from .errors import ConfigError, ErrorContext

logger = logging.getLogger(__name__)

CONFIG_FILE = "medspec.toml"
DEFAULT_STORAGE_DIR = ".medspec/specs"

_POLICY_PLATFORMS = ("desktop", "mobile")
_LOG_LEVELS = ("DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL")


@dataclass
class PipelineConfig:
    """Pipeline configuration."""

    rulebook: Path | None = None  # None = packaged rulebook
    tablet_platform: str = "mobile"  # policy used for tablet viewports


@dataclass
class ContextConfig:
    """Context signals forced regardless of derivation."""

    overrides: dict[str, Any] = field(default_factory=dict)


@dataclass
class LoggingConfig:
    level: str = "WARNING"


@dataclass
class StorageConfig:
    """Local spec store."""

    directory: str = DEFAULT_STORAGE_DIR


@dataclass
class MedspecConfig:
    """Root configuration."""

    pipeline: PipelineConfig = field(default_factory=PipelineConfig)
    context: ContextConfig = field(default_factory=ContextConfig)
    logging: LoggingConfig = field(default_factory=LoggingConfig)
    storage: StorageConfig = field(default_factory=StorageConfig)
    path: Path | None = None  # file this config was read from


def find_config(start: Path) -> Path | None:
    """Walk up from ``start`` looking for medspec.toml."""
    current = start.resolve()
    for directory in (current, *current.parents):
        candidate = directory / CONFIG_FILE
        if candidate.is_file():
            return candidate
    return None


def load_config(path: Path) -> MedspecConfig:
    """Load configuration from a medspec.toml file.

    Raises:
        ConfigError: If the file is unreadable or holds invalid values.
    """
    try:
        data = tomllib.loads(path.read_text(encoding="utf-8"))
    except FileNotFoundError as e:
        raise ConfigError(f"Config not found: {path}") from e
    except tomllib.TOMLDecodeError as e:
        raise ConfigError(f"Invalid TOML: {e}", ErrorContext(file=path)) from e

    pipeline_data = data.get("pipeline", {})
    context_data = data.get("context", {})
    logging_data = data.get("logging", {})
    storage_data = data.get("storage", {})

    rulebook = pipeline_data.get("rulebook")
    rulebook_path = None
    if rulebook:
        rulebook_path = Path(rulebook)
        if not rulebook_path.is_absolute():
            rulebook_path = path.parent / rulebook_path

    tablet_platform = pipeline_data.get("tablet_platform", "mobile")
    if tablet_platform not in _POLICY_PLATFORMS:
        raise ConfigError(
            f"pipeline.tablet_platform must be one of {', '.join(_POLICY_PLATFORMS)}, "
            f"got '{tablet_platform}'",
            ErrorContext(file=path, pointer="pipeline.tablet_platform"),
        )

    overrides = context_data.get("overrides", {})
    if not isinstance(overrides, dict):
        raise ConfigError(
            "context.overrides must be a table",
            ErrorContext(file=path, pointer="context.overrides"),
        )
    override_problems = override_errors(overrides)
    if override_problems:
        raise ConfigError(
            f"context.overrides has invalid values: {'; '.join(override_problems)}",
            ErrorContext(file=path, pointer="context.overrides"),
        )

    level = str(logging_data.get("level", "WARNING")).upper()
    if level not in _LOG_LEVELS:
        raise ConfigError(
            f"logging.level must be one of {', '.join(_LOG_LEVELS)}, got '{level}'",
            ErrorContext(file=path, pointer="logging.level"),
        )

    return MedspecConfig(
        pipeline=PipelineConfig(rulebook=rulebook_path, tablet_platform=tablet_platform),
        context=ContextConfig(overrides=dict(overrides)),
        logging=LoggingConfig(level=level),
        storage=StorageConfig(directory=storage_data.get("directory", DEFAULT_STORAGE_DIR)),
        path=path,
    )


def resolve_config(start: Path | None = None) -> MedspecConfig:
    """Load the nearest medspec.toml, or defaults when there is none."""
    config_path = find_config(start or Path.cwd())
    if config_path is None:
        logger.debug("No medspec.toml found, using defaults")
        return MedspecConfig()
    return load_config(config_path)
