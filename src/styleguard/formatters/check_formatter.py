"""Check formatter: violation lines only, for CI logs and grep."""

from ..reporting.models import Report
from .base import BaseFormatter


class CheckFormatter(BaseFormatter):
    """One line per violation: ``severity | location | rule | issue``."""

    def render(self, report: Report) -> None:
        text = self.format(report)
        if text:
            print(text)

    def format(self, report: Report) -> str:
        return "\n".join(
            f"{f.severity.value} | {f.location} | {f.rule_id} | {f.issue}"
            for f in report.violations
        )
