"""Shared CLI helpers: consoles, exit codes, options and the run wrapper."""

from pathlib import Path
from typing import List, Optional

import typer
from rich.console import Console

from ..config import CheckerConfig, load_config
from ..exceptions import ConfigurationError, InternalInvariantViolation
from ..formatters import FORMATS, get_formatter
from ..logging_config import setup_logging
from ..pipeline import run_batch
from ..reporting import Report

console = Console(stderr=True)


class ExitCode:
    """Semantic exit codes for CI.

    Ranges:
      0: No critical or major violations
      1: Critical or major violations found
      80-89: User errors (bad input)
      100+: Internal errors
    """

    SUCCESS = 0
    FINDINGS_EXIST = 1
    BAD_USAGE = 80
    CONFIG_ERROR = 81
    INTERNAL_ERROR = 100


# Options shared by `analyze` and `check`
CONFIG_OPTION = typer.Option(
    None,
    "--config",
    "-c",
    help="Configuration file (TOML)",
    exists=False,
    dir_okay=False,
)
OUTPUT_OPTION = typer.Option(
    None, "--output", "-o", help="Write the report to a file instead of stdout", dir_okay=False
)
WORKERS_OPTION = typer.Option(
    None, "--workers", "-w", help="Parallel workers (default: auto-detect)", min=1, max=32
)
LINE_LENGTH_OPTION = typer.Option(None, "--line-length-max", help="Longest allowed line", min=1)
FUNCTION_LENGTH_OPTION = typer.Option(
    None, "--function-length-max", help="Longest allowed function body (lines)", min=1
)
ASSERTION_MIN_OPTION = typer.Option(
    None, "--assertion-min", help="Minimum assertions per function", min=0
)
NAMING_OPTION = typer.Option(
    None, "--naming-convention", help="snake_case | camelCase | PascalCase | any"
)
ALLOW_OPTION = typer.Option(
    None, "--allow", help="Accept an abbreviation (repeatable)", show_default=False
)
VERBOSE_OPTION = typer.Option(False, "--verbose", "-v", help="Enable verbose logging")
QUIET_OPTION = typer.Option(False, "--quiet", "-q", help="Only log errors")


def resolve_config(
    config: Optional[Path] = None,
    workers: Optional[int] = None,
    line_length_max: Optional[int] = None,
    function_length_max: Optional[int] = None,
    assertion_min: Optional[int] = None,
    naming_convention: Optional[str] = None,
    allow: Optional[List[str]] = None,
) -> CheckerConfig:
    """Build configuration from CLI options."""
    return load_config(
        config_file=config,
        workers=workers,
        line_length_max=line_length_max,
        function_length_max=function_length_max,
        assertion_min=assertion_min,
        naming_convention=naming_convention,
        allow=allow or None,
    )


def emit(report: Report, output_format: str, output: Optional[Path]) -> None:
    """Render a report to stdout or write it to ``output``."""
    formatter = get_formatter(output_format)
    if output is None:
        formatter.render(report)
        return
    output.write_text(formatter.format(report), encoding="utf-8")
    console.print(f"[green]Report written to[/green] {output}")


def run_checker(
    paths: List[Path],
    output_format: str,
    output: Optional[Path],
    verbose: bool,
    quiet: bool,
    **options,
) -> None:
    """Run a batch and exit with the CI status code.

    Always raises typer.Exit.
    """
    logger = setup_logging(verbose=verbose, quiet=quiet)

    if output_format not in FORMATS:
        console.print(
            f"[red]Error:[/red] unknown format {output_format!r} "
            f"(choose from {', '.join(FORMATS)})"
        )
        raise typer.Exit(ExitCode.BAD_USAGE)

    try:
        settings = resolve_config(**options)
        report = run_batch(paths, settings)
        emit(report, output_format, output)
    except ConfigurationError as e:
        logger.error(f"Configuration error: {e}")
        console.print(f"[red]Configuration error:[/red] {e}")
        raise typer.Exit(ExitCode.CONFIG_ERROR)
    except InternalInvariantViolation as e:
        logger.error(str(e))
        console.print(f"[red]Internal error:[/red] {e}")
        if verbose:
            console.print_exception()
        raise typer.Exit(ExitCode.INTERNAL_ERROR)
    except OSError as e:
        console.print(f"[red]Error:[/red] cannot write report: {e}")
        raise typer.Exit(ExitCode.BAD_USAGE)

    if report.has_gating_violations:
        raise typer.Exit(ExitCode.FINDINGS_EXIST)
    raise typer.Exit(ExitCode.SUCCESS)
