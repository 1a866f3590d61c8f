"""`styleguard check`: violations only, one per line, for CI."""

from pathlib import Path
from typing import List, Optional

import typer

from . import app
from ._common import (
    ALLOW_OPTION,
    ASSERTION_MIN_OPTION,
    CONFIG_OPTION,
    FUNCTION_LENGTH_OPTION,
    LINE_LENGTH_OPTION,
    NAMING_OPTION,
    OUTPUT_OPTION,
    QUIET_OPTION,
    VERBOSE_OPTION,
    WORKERS_OPTION,
    run_checker,
)


@app.command()
def check(
    paths: List[Path] = typer.Argument(..., help="Files or directories to check"),
    output_format: str = typer.Option(
        "check", "--format", "-f", help="check | github | json | markdown | rich"
    ),
    config: Optional[Path] = CONFIG_OPTION,
    output: Optional[Path] = OUTPUT_OPTION,
    workers: Optional[int] = WORKERS_OPTION,
    line_length_max: Optional[int] = LINE_LENGTH_OPTION,
    function_length_max: Optional[int] = FUNCTION_LENGTH_OPTION,
    assertion_min: Optional[int] = ASSERTION_MIN_OPTION,
    naming_convention: Optional[str] = NAMING_OPTION,
    allow: Optional[List[str]] = ALLOW_OPTION,
    verbose: bool = VERBOSE_OPTION,
    quiet: bool = QUIET_OPTION,
) -> None:
    """
    Print violations as [cyan]severity | location | rule | issue[/cyan].

    Exits 1 when any critical or major violation remains.

    [bold]Examples:[/bold]

      styleguard check src/

      styleguard check src/ --format github
    """
    run_checker(
        paths,
        output_format,
        output,
        verbose,
        quiet,
        config=config,
        workers=workers,
        line_length_max=line_length_max,
        function_length_max=function_length_max,
        assertion_min=assertion_min,
        naming_convention=naming_convention,
        allow=allow,
    )
