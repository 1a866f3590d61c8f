"""JSON formatter for styleguard."""

import json

from ..reporting.models import Report
from .base import BaseFormatter


class JsonFormatter(BaseFormatter):
    """Render a report as a JSON document for CI consumption."""

    def render(self, report: Report) -> None:
        print(self.format(report))

    def format(self, report: Report) -> str:
        data = {
            "summary": report.summary(),
            "files": [
                {
                    "path": file_report.path,
                    "language": file_report.language,
                    "functions": file_report.functions_scanned,
                    "partial": file_report.partial,
                }
                for file_report in report.files
            ],
            "violations": [f.to_dict() for f in report.violations],
            "gray_areas": [f.to_dict() for f in report.gray_areas],
            "aligned": [
                {"rule": n.rule_id, "description": n.description, "functions": n.functions}
                for n in report.aligned()
            ],
            "input_errors": [e.to_dict() for e in report.input_errors],
        }
        return json.dumps(data, indent=2)
