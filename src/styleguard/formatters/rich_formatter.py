"""Rich terminal formatter for styleguard."""

import io

from rich.console import Console
from rich.markup import escape
from rich.panel import Panel
from rich.table import Table

from ..reporting.models import Report
from ..rules.models import Severity
from .base import BaseFormatter

_SEVERITY_STYLE = {
    Severity.CRITICAL: "red bold",
    Severity.MAJOR: "red",
    Severity.MINOR: "yellow",
}


def _severity_label(severity: Severity) -> str:
    style = _SEVERITY_STYLE[severity]
    return f"[{style}]{severity.value}[/{style}]"


class RichFormatter(BaseFormatter):
    """Summary panel plus violation and gray-area tables."""

    def render(self, report: Report) -> None:
        self._print(report, Console())

    def format(self, report: Report) -> str:
        buffer = io.StringIO()
        self._print(report, Console(file=buffer, width=120, color_system=None))
        return buffer.getvalue()

    def _print(self, report: Report, console: Console) -> None:
        summary = report.summary()
        counts = "  ".join(
            f"{_severity_label(Severity(name))}: {count}"
            for name, count in summary["by_severity"].items()
        )
        console.print(
            Panel(
                f"[bold]{summary['files']}[/bold] files, "
                f"[bold]{summary['functions']}[/bold] functions\n"
                f"{counts}\n"
                f"gray areas: {summary['gray_areas']}  input errors: {summary['input_errors']}",
                title="[bold cyan]Style Rule Report[/bold cyan]",
                expand=False,
            )
        )

        if report.violations:
            table = Table(title="Violations", show_lines=False)
            table.add_column("Severity")
            table.add_column("Location", style="cyan")
            table.add_column("Rule")
            table.add_column("Issue")
            for finding in report.violations:
                table.add_row(
                    _severity_label(finding.severity),
                    escape(finding.location),
                    finding.rule_id,
                    escape(finding.issue),
                )
            console.print(table)
        else:
            console.print("[green]No violations.[/green]")

        if report.gray_areas:
            table = Table(title="Gray Areas")
            table.add_column("Location", style="cyan")
            table.add_column("Rule")
            table.add_column("Justification", style="dim")
            table.add_column("Note")
            for finding in report.gray_areas:
                table.add_row(
                    escape(finding.location),
                    finding.rule_id,
                    escape(finding.justification or ""),
                    escape(finding.note),
                )
            console.print(table)

        aligned = report.aligned()
        if aligned:
            console.print("[bold]Aligned patterns:[/bold]")
            for note in aligned:
                console.print(f"  [green]✓[/green] {note.rule_id}: {escape(note.description)}")

        for failure in report.input_errors:
            console.print(
                f"[yellow]skipped[/yellow] {escape(failure.path)}: "
                f"{escape(failure.reason)} ({failure.code})"
            )
