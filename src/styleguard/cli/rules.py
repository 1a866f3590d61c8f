"""`styleguard rules`: list the rule registry."""

import json
from pathlib import Path
from typing import Optional

import typer
from rich.console import Console
from rich.table import Table

from ..exceptions import ConfigurationError
from ..rules import list_rules
from . import app
from ._common import CONFIG_OPTION, ExitCode, console, resolve_config


@app.command()
def rules(
    config: Optional[Path] = CONFIG_OPTION,
    as_json: bool = typer.Option(False, "--json", help="Print the registry as JSON"),
) -> None:
    """List registered rules with their effective severity."""
    try:
        settings = resolve_config(config=config)
        registry = list_rules()
        settings.validate_rule_ids({rule.id for rule in registry})
    except ConfigurationError as e:
        console.print(f"[red]Configuration error:[/red] {e}")
        raise typer.Exit(ExitCode.CONFIG_ERROR)

    rows = [
        {
            "id": rule.id,
            "category": rule.category.value,
            "severity": settings.severity_for(rule.id, rule.severity).value,
            "scope": rule.scope.value,
            "enabled": settings.is_enabled(rule),
            "description": rule.description,
            "rationale": rule.rationale,
        }
        for rule in registry
    ]

    if as_json:
        typer.echo(json.dumps(rows, indent=2))
        return

    table = Table(title="styleguard rules")
    table.add_column("Rule", style="cyan")
    table.add_column("Category")
    table.add_column("Severity")
    table.add_column("Scope", style="dim")
    table.add_column("Description")
    table.add_column("Rationale", style="dim")
    for row in rows:
        severity = row["severity"] if row["enabled"] else f"[dim]{row['severity']} (off)[/dim]"
        table.add_row(
            row["id"],
            row["category"],
            severity,
            row["scope"],
            row["description"],
            row["rationale"],
        )
    Console().print(table)
