"""Report models: per-file reports and the merged batch report.

Nothing here carries timestamps or environment data, so two runs over the
same inputs produce equal reports.
"""

from __future__ import annotations

from collections import Counter
from dataclasses import dataclass, field

from ..evaluation.models import Finding
from ..rules.models import Category, Severity


@dataclass(frozen=True)
class AlignedNote:
    """A function-scope rule that no function in scope violated."""

    rule_id: str
    description: str
    functions: int


@dataclass(frozen=True)
class InputFailure:
    """A file the batch could not read."""

    path: str
    reason: str
    code: str

    def to_dict(self) -> dict:
        return {"path": self.path, "reason": self.reason, "code": self.code}


@dataclass(frozen=True)
class FileReport:
    """Sorted findings for one file.

    Attributes:
        path: File path
        language: Language the file was scanned as
        findings: Findings sorted by severity, then location, then rule id
        functions_scanned: Number of functions found by the scanner
        partial: True if the scanner reported diagnostics
        aligned: Rules every function in the file satisfies
    """

    path: str
    language: str
    findings: tuple[Finding, ...] = ()
    functions_scanned: int = 0
    partial: bool = False
    aligned: tuple[AlignedNote, ...] = ()


@dataclass(frozen=True)
class Report:
    """Merged batch report, file reports ordered by path."""

    files: tuple[FileReport, ...] = ()
    input_errors: tuple[InputFailure, ...] = ()
    findings: tuple[Finding, ...] = field(init=False)

    def __post_init__(self) -> None:
        merged = [finding for report in self.files for finding in report.findings]
        object.__setattr__(self, "findings", tuple(sorted(merged, key=Finding.sort_key)))

    @property
    def violations(self) -> list[Finding]:
        return [f for f in self.findings if f.is_violation]

    @property
    def gray_areas(self) -> list[Finding]:
        return [f for f in self.findings if not f.is_violation]

    @property
    def functions_scanned(self) -> int:
        return sum(report.functions_scanned for report in self.files)

    @property
    def partial_files(self) -> list[str]:
        return [report.path for report in self.files if report.partial]

    def violations_by_severity(self) -> dict[Severity, list[Finding]]:
        grouped: dict[Severity, list[Finding]] = {s: [] for s in sorted(Severity, reverse=True)}
        for finding in self.violations:
            grouped[finding.severity].append(finding)
        return grouped

    def summary(self) -> dict:
        """Violation counts by severity and by category, plus totals."""
        by_severity = Counter(f.severity for f in self.violations)
        by_category = Counter(f.category for f in self.violations)
        return {
            "files": len(self.files),
            "functions": self.functions_scanned,
            "violations": len(self.violations),
            "gray_areas": len(self.gray_areas),
            "input_errors": len(self.input_errors),
            "by_severity": {s.value: by_severity.get(s, 0) for s in sorted(Severity, reverse=True)},
            "by_category": {c.value: by_category.get(c, 0) for c in Category},
        }

    def aligned(self) -> list[AlignedNote]:
        """Rules satisfied by every function in every file."""
        scanned = [report for report in self.files if report.functions_scanned]
        if not scanned:
            return []
        common = set.intersection(*({note.rule_id for note in r.aligned} for r in scanned))
        notes = []
        for note in scanned[0].aligned:
            if note.rule_id in common:
                notes.append(AlignedNote(note.rule_id, note.description, self.functions_scanned))
        return notes

    @property
    def has_gating_violations(self) -> bool:
        """True if any critical or major violation remains."""
        return any(f.severity.gates for f in self.violations)
