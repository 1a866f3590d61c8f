"""GitHub Actions formatter: workflow annotations."""

from ..evaluation.models import Finding
from ..reporting.models import Report
from .base import BaseFormatter


def _escape_data(value: str) -> str:
    return value.replace("%", "%25").replace("\r", "%0D").replace("\n", "%0A")


def _escape_property(value: str) -> str:
    return _escape_data(value).replace(":", "%3A").replace(",", "%2C")


class GithubFormatter(BaseFormatter):
    """Output ``::error`` / ``::warning`` / ``::notice`` annotations.

    Critical and major violations are errors, minor ones warnings, gray
    areas notices.
    """

    def render(self, report: Report) -> None:
        text = self.format(report)
        if text:
            print(text)

    def format(self, report: Report) -> str:
        lines: list[str] = []
        for finding in report.findings:
            if not finding.is_violation:
                level = "notice"
            elif finding.severity.gates:
                level = "error"
            else:
                level = "warning"
            lines.append(self._annotation(level, finding))
        for failure in report.input_errors:
            lines.append(
                f"::warning file={_escape_property(failure.path)},"
                f"title={failure.code}::{_escape_data(failure.reason)}"
            )
        return "\n".join(lines)

    def _annotation(self, level: str, finding: Finding) -> str:
        title = f"{finding.rule_id} ({finding.severity.value})"
        message = finding.issue
        if finding.justification:
            label = finding.note or "justified"
            message += f" [{label}: {finding.justification}]"
        return (
            f"::{level} file={_escape_property(finding.path)},line={finding.line},"
            f"title={_escape_property(title)}::{_escape_data(message)}"
        )
