"""
Rulebook commands for the medspec CLI.

- rulebook show: list the policies and rules of a rulebook
- rulebook check: lint a rulebook for unreachable or malformed guards
"""

from __future__ import annotations

from pathlib import Path
from typing import Annotated

import typer
from rich.console import Console
from rich.markup import escape
from rich.table import Table

from medspec.core.rulebook_loader import get_default_rulebook_path, validate_rulebook

from .common import get_config, resolve_rulebook

rulebook_app = typer.Typer(
    help="Inspect and lint UX rulebooks",
    no_args_is_help=True,
)

console = Console()


@rulebook_app.command(name="show")
def rulebook_show(
    path: Annotated[
        Path | None, typer.Argument(help="Rulebook file (default: configured or packaged)")
    ] = None,
    platform: Annotated[
        str | None, typer.Option("--platform", "-p", help="Only show this policy platform")
    ] = None,
) -> None:
    """List the policies and rules of a rulebook."""
    book = resolve_rulebook(path, get_config())
    console.print(f"[bold]Rulebook {book.version}[/bold] ({book.evaluation.order})")

    policies = [p for p in book.policies if platform is None or p.platform == platform]
    if not policies:
        console.print(f"[yellow]No '{platform}' policy[/yellow]")
        return

    for policy in policies:
        table = Table(title=f"{policy.policy_id} ({policy.platform})")
        table.add_column("Rule", style="cyan")
        table.add_column("Family")
        table.add_column("Event")
        table.add_column("Default action", style="green")
        table.add_column("Guards", justify="right")
        for rule in policy.rules:
            table.add_row(rule.id, rule.family, rule.event, rule.action, str(len(rule.guards)))
        console.print(table)


@rulebook_app.command(name="check")
def rulebook_check(
    path: Annotated[
        Path | None, typer.Argument(help="Rulebook file (default: configured or packaged)")
    ] = None,
) -> None:
    """
    Lint a rulebook.

    Exits with code 1 if the rulebook cannot be loaded or has errors.
    Warnings are reported but do not fail the check.
    """
    config = get_config()
    book = resolve_rulebook(path, config)
    shown = path or config.pipeline.rulebook or get_default_rulebook_path()

    result = validate_rulebook(book)
    for error in result.errors:
        console.print(f"[red]✗ {escape(error)}[/red]")
    for warning in result.warnings:
        console.print(f"[yellow]⚠ {escape(warning)}[/yellow]")

    if not result.is_valid:
        console.print(f"[red]{shown}: {len(result.errors)} error(s)[/red]")
        raise typer.Exit(code=1)

    rules = sum(len(p.rules) for p in book.policies)
    console.print(
        f"[green]✓ {shown}: {len(book.policies)} policies, {rules} rules, "
        f"{len(result.warnings)} warning(s)[/green]"
    )
