"""
Spec commands for the medspec CLI.

Commands operating on model output files:
- normalize: print the repaired document
- validate: check it against the MEDS schema
- run: full pipeline, optionally storing the result
- context: print the derived UX signals
- schema: print the MEDS JSON schema
"""

from __future__ import annotations

import json
from pathlib import Path
from typing import Annotated, Any

import typer
from rich.console import Console
from rich.markup import escape
from rich.table import Table

from medspec.core.context import (
    analyze_component_patterns,
    derive_context_with_overrides,
    infer_user_intent_categories,
)
from medspec.core.errors import Violation
from medspec.core.ir.meds import MedsSpec, SourceInfo
from medspec.core.ir.ux import UXEvaluation
from medspec.core.normalize import normalize
from medspec.core.pipeline import run_pipeline
from medspec.core.spec_persistence import save_spec
from medspec.core.validator import medsspec_json_schema, validate_and_fill

from .common import get_config, read_model_output, resolve_rulebook

console = Console()
err_console = Console(stderr=True)

_OUTPUT_FORMATS = ("json", "summary")


def _echo_json(data: Any) -> None:
    typer.echo(json.dumps(data, indent=2, ensure_ascii=False))


def _print_violations(errors: list[Violation]) -> None:
    table = Table(title=f"{len(errors)} schema violation(s)")
    table.add_column("Path", style="cyan")
    table.add_column("Message")
    for error in errors:
        table.add_row(escape(error.path or "<root>"), escape(error.message))
    err_console.print(table)


def _validated_spec(file: Path) -> MedsSpec:
    """Normalize and validate a file, exiting with code 1 on violations."""
    result = validate_and_fill(normalize(read_model_output(file)))
    if not result.ok or result.spec is None:
        _print_violations(result.errors)
        raise typer.Exit(code=1)
    return result.spec


def _print_summary(spec: MedsSpec, evaluation: UXEvaluation) -> None:
    meta = evaluation.policy_meta

    console.print(
        f"[bold]{spec.platform}[/bold] spec, policy [cyan]{meta.policy_id}[/cyan] "
        f"(rulebook {meta.version})"
    )

    table = Table(title="UX decisions")
    table.add_column("Rule", style="cyan")
    table.add_column("Family")
    table.add_column("Event")
    table.add_column("Action", style="green")
    table.add_column("Priority")
    table.add_column("Guard", justify="right")
    for decision in evaluation.decisions:
        guard = str(decision.matched_guard_index) if decision.matched_guard_index >= 0 else "-"
        table.add_row(
            decision.rule_id,
            decision.family,
            decision.event,
            decision.action,
            decision.priority,
            guard,
        )
    console.print(table)

    types = ", ".join(c.type for c in spec.components) or "none"
    console.print(f"Components: {types}")


# =============================================================================
# Commands
# =============================================================================


def normalize_command(
    file: Annotated[Path, typer.Argument(help="Model output file (JSON, optionally fenced)")],
) -> None:
    """Repair model output and print the normalized document."""
    _echo_json(normalize(read_model_output(file)))


def validate_command(
    file: Annotated[Path, typer.Argument(help="Model output file (JSON, optionally fenced)")],
) -> None:
    """
    Normalize and validate model output against the MEDS schema.

    Exits with code 1 and lists every violation when the document is invalid.
    """
    spec = _validated_spec(file)
    console.print(
        f"[green]✓ Valid MEDS spec[/green] ({spec.platform}, {len(spec.components)} component(s))"
    )


def run_command(
    file: Annotated[Path, typer.Argument(help="Model output file (JSON, optionally fenced)")],
    rulebook: Annotated[
        Path | None,
        typer.Option("--rulebook", "-r", help="Rulebook file (default: configured or packaged)"),
    ] = None,
    source: Annotated[
        Path | None,
        typer.Option("--source", help="Screenshot the output was extracted from"),
    ] = None,
    save: Annotated[
        bool, typer.Option("--save", help="Store the integrated spec locally")
    ] = False,
    output_format: Annotated[
        str, typer.Option("--format", "-f", help="Output format (json or summary)")
    ] = "json",
) -> None:
    """
    Run the full pipeline: normalize, validate, derive context, evaluate, integrate.

    Examples:
        medspec run output.json                  # Integrated spec as JSON
        medspec run output.json -f summary       # Decision table
        medspec run output.json --save           # Also store under .medspec/specs
    """
    if output_format not in _OUTPUT_FORMATS:
        typer.echo(
            f"Unknown format '{output_format}' (expected {' or '.join(_OUTPUT_FORMATS)})",
            err=True,
        )
        raise typer.Exit(code=1)

    config = get_config()
    book = resolve_rulebook(rulebook, config)
    raw = read_model_output(file)

    source_info = None
    if source is not None:
        size = source.stat().st_size if source.exists() else None
        source_info = SourceInfo(file_name=source.name, file_size=size)

    result = run_pipeline(raw, book, config=config, source=source_info)
    spec, evaluation = result.spec, result.evaluation
    if not result.ok or spec is None or evaluation is None:
        if output_format == "json":
            _echo_json(result.to_dict())
        else:
            _print_violations(result.errors)
        raise typer.Exit(code=1)

    if output_format == "json":
        _echo_json(result.to_dict())
    else:
        _print_summary(spec, evaluation)

    if save:
        spec_id = save_spec(
            Path.cwd(),
            spec,
            source_meta={
                "input": file.name,
                "policyId": evaluation.policy_meta.policy_id,
            },
            directory=config.storage.directory,
        )
        err_console.print(f"[green]✓ Saved spec {spec_id}[/green]")


def context_command(
    file: Annotated[Path, typer.Argument(help="Model output file (JSON, optionally fenced)")],
) -> None:
    """Print the UX context derived from a spec, with component analysis."""
    config = get_config()
    spec = _validated_spec(file)
    context = derive_context_with_overrides(spec, config.context.overrides)
    _echo_json(
        {
            "context": context.as_signals(),
            "componentPatterns": analyze_component_patterns(spec),
            "userIntents": infer_user_intent_categories(spec),
        }
    )


def schema_command() -> None:
    """Print the MEDS JSON schema (usable as a model response schema)."""
    _echo_json(medsspec_json_schema())
