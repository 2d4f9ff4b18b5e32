"""Shared CLI helpers to reduce boilerplate across CLI command modules."""

from __future__ import annotations

import logging
from pathlib import Path
from typing import Any

import typer

from medspec.core.config import MedspecConfig, load_config, resolve_config
from medspec.core.errors import ConfigError, ModelOutputError, RulebookError
from medspec.core.ir.ux import UXRulebook
from medspec.core.model_output import parse_model_output
from medspec.core.rulebook_loader import get_default_rulebook, load_rulebook

# Set by the main callback
_config_path_override: Path | None = None


def set_config_path(path: Path | None) -> None:
    global _config_path_override
    _config_path_override = path


def get_config() -> MedspecConfig:
    """Load the --config file, else the nearest medspec.toml.

    Exits with code 1 if the configuration is invalid.
    """
    try:
        if _config_path_override is not None:
            return load_config(_config_path_override)
        return resolve_config()
    except ConfigError as e:
        typer.echo(f"Configuration error: {e}", err=True)
        raise typer.Exit(code=1)


def configure_logging(verbose: bool, config: MedspecConfig) -> None:
    level = logging.DEBUG if verbose else getattr(logging, config.logging.level)
    logging.basicConfig(level=level, format="%(levelname)s %(name)s: %(message)s")


def read_model_output(file: Path) -> Any:
    """Read a file of model output (bare or fenced JSON).

    Exits with code 1 if the file is missing or holds no JSON.
    """
    if not file.exists():
        typer.echo(f"File not found: {file}", err=True)
        raise typer.Exit(code=1)
    try:
        return parse_model_output(file.read_text(encoding="utf-8"))
    except ModelOutputError as e:
        typer.echo(f"Error reading {file}: {e}", err=True)
        raise typer.Exit(code=1)


def resolve_rulebook(path: Path | None, config: MedspecConfig) -> UXRulebook:
    """Rulebook from --rulebook, the config, or the packaged default.

    Exits with code 1 if the rulebook cannot be loaded.
    """
    try:
        if path is not None:
            return load_rulebook(path)
        if config.pipeline.rulebook is not None:
            return load_rulebook(config.pipeline.rulebook)
        return get_default_rulebook()
    except RulebookError as e:
        typer.echo(f"Rulebook error: {e}", err=True)
        raise typer.Exit(code=1)
