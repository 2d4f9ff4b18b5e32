"""
medspec CLI.

- spec.py: normalize, validate, run, context and schema commands
- rulebook.py: rulebook inspection and linting
- common.py: shared helpers (config, input files, rulebook resolution)
"""

from __future__ import annotations

import sys
from pathlib import Path
from typing import Annotated

import typer

from medspec._version import get_version

from .common import configure_logging, get_config, set_config_path
from .rulebook import rulebook_app
from .spec import (
    context_command,
    normalize_command,
    run_command,
    schema_command,
    validate_command,
)

app = typer.Typer(
    help="""medspec - MEDS design specs from UI screenshots

Turns vision-model output into a validated MEDS spec enriched with
UX decisions from a rulebook.
""",
    no_args_is_help=True,
)


def version_callback(value: bool) -> None:
    if value:
        typer.echo(f"medspec {get_version()}")
        raise typer.Exit()


@app.callback()
def main_callback(
    version: Annotated[
        bool | None,
        typer.Option(
            "--version",
            callback=version_callback,
            is_eager=True,
            help="Show version and exit",
        ),
    ] = None,
    verbose: Annotated[
        bool, typer.Option("--verbose", "-v", help="Enable debug logging")
    ] = False,
    config: Annotated[
        Path | None,
        typer.Option("--config", "-c", help="medspec.toml to use (default: nearest one)"),
    ] = None,
) -> None:
    """medspec CLI main callback for global options."""
    set_config_path(config)
    configure_logging(verbose, get_config())


app.command(name="normalize")(normalize_command)
app.command(name="validate")(validate_command)
app.command(name="run")(run_command)
app.command(name="context")(context_command)
app.command(name="schema")(schema_command)

app.add_typer(rulebook_app, name="rulebook")


def main(argv: list[str] | None = None) -> None:
    app(args=argv, standalone_mode=True)


__all__ = ["app", "main", "version_callback"]


if __name__ == "__main__":
    main(sys.argv[1:])
