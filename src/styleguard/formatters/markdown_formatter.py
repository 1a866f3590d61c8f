"""Markdown formatter: the default human-readable report."""

from ..evaluation.models import Finding
from ..reporting.models import Report
from .base import BaseFormatter


def _bullet(finding: Finding) -> str:
    return f"- `{finding.location}` **{finding.rule_id}**: {finding.issue}"


class MarkdownFormatter(BaseFormatter):
    """Summary, violations by severity, gray areas, aligned patterns, input errors."""

    def render(self, report: Report) -> None:
        print(self.format(report))

    def format(self, report: Report) -> str:
        summary = report.summary()
        lines: list[str] = ["# Style Rule Report", "", "## Summary", ""]
        lines.append(
            f"Files: {summary['files']} | Functions: {summary['functions']} | "
            f"Violations: {summary['violations']} | Gray areas: {summary['gray_areas']} | "
            f"Input errors: {summary['input_errors']}"
        )
        lines += ["", "| Severity | Violations |", "|----------|------------|"]
        for name, count in summary["by_severity"].items():
            lines.append(f"| {name} | {count} |")
        lines += ["", "| Category | Violations |", "|----------|------------|"]
        for name, count in summary["by_category"].items():
            lines.append(f"| {name} | {count} |")
        if report.partial_files:
            lines += ["", "Partially scanned: " + ", ".join(f"`{p}`" for p in report.partial_files)]

        lines += ["", "## Violations"]
        for severity, findings in report.violations_by_severity().items():
            lines += ["", f"### {severity.value.capitalize()}", ""]
            lines += [_bullet(f) for f in findings] or ["_None._"]

        lines += ["", "## Gray Areas", ""]
        gray = []
        for finding in report.gray_areas:
            gray.append(_bullet(finding))
            label = f" ({finding.note})" if finding.note else ""
            gray.append(f"  - Justification: `{finding.justification}`{label}")
        lines += gray or ["_None._"]

        lines += ["", "## Aligned Patterns", ""]
        lines += [
            f"- **{note.rule_id}**: {note.description} ({note.functions} functions)"
            for note in report.aligned()
        ] or ["_None._"]

        lines += ["", "## Input Errors", ""]
        lines += [
            f"- `{failure.path}`: {failure.reason} [{failure.code}]"
            for failure in report.input_errors
        ] or ["_None._"]

        return "\n".join(lines) + "\n"
