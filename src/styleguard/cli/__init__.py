"""CLI entry point, registers all subcommands."""

import typer

from .. import __version__
from ._common import console

app = typer.Typer(
    name="styleguard",
    help="styleguard - static rule checker for safety-critical coding style",
    add_completion=False,
    rich_markup_mode="rich",
)


@app.callback(invoke_without_command=True)
def main(
    ctx: typer.Context,
    version: bool = typer.Option(False, "--version", help="Show version and exit"),
) -> None:
    """Check source files against safety-critical style rules."""
    if version:
        console.print(f"[bold cyan]styleguard[/bold cyan] version [green]{__version__}[/green]")
        raise typer.Exit(0)
    if ctx.invoked_subcommand is None:
        console.print(ctx.get_help())
        raise typer.Exit(0)


# Import subcommands to register them
from .analyze import analyze as _analyze  # noqa: F401, E402
from .check import check as _check  # noqa: F401, E402
from .rules import rules as _rules  # noqa: F401, E402
