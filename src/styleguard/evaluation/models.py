"""Finding model: one rule violation at one location."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Optional

from ..rules.models import Category, Severity

MODULE_SCOPE = "<module>"

VIOLATION = "violation"
GRAY_AREA = "gray_area"


@dataclass(frozen=True)
class Finding:
    """A rule violation.

    Attributes:
        rule_id: Id of the registered rule that produced it
        severity: Effective severity (after configuration overrides)
        category: Rule family
        path: File the finding belongs to
        function: Enclosing function, ``<module>`` for file-level findings
        line: 1-indexed line number
        issue: Human-readable description
        disposition: ``violation`` or ``gray_area``
        justification: Matched exception text when disposition is gray_area
        note: Label of the gray-area pattern that matched
    """

    rule_id: str
    severity: Severity
    category: Category
    path: str
    function: str
    line: int
    issue: str
    disposition: str = VIOLATION
    justification: Optional[str] = None
    note: str = ""

    @property
    def is_violation(self) -> bool:
        return self.disposition == VIOLATION

    @property
    def location(self) -> str:
        """``path:line (function)``."""
        return f"{self.path}:{self.line} ({self.function})"

    def sort_key(self) -> tuple:
        """Severity descending, then path, line, function, then rule id."""
        return (-self.severity.rank, self.path, self.line, self.function, self.rule_id)

    def to_dict(self) -> dict:
        return {
            "rule": self.rule_id,
            "severity": self.severity.value,
            "category": self.category.value,
            "path": self.path,
            "function": self.function,
            "line": self.line,
            "issue": self.issue,
            "disposition": self.disposition,
            "justification": self.justification,
            "note": self.note,
        }
