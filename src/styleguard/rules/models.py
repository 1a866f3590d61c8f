"""Rule and severity models.

Rules are plain data: an id, a category, a severity and the name of the
predicate that detects violations. The predicate name is resolved against
``styleguard.rules.predicates.PREDICATES`` when the registry is loaded.
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum


class Severity(Enum):
    """Violation severity, totally ordered: critical > major > minor."""

    CRITICAL = "critical"
    MAJOR = "major"
    MINOR = "minor"

    @property
    def rank(self) -> int:
        """Higher rank = more severe."""
        return _SEVERITY_RANK[self]

    @property
    def gates(self) -> bool:
        """True if a violation at this severity fails a CI run."""
        return self is not Severity.MINOR

    @classmethod
    def parse(cls, value: str) -> "Severity":
        """Parse a severity name, case-insensitively.

        Raises:
            ValueError: If value is not critical, major or minor.
        """
        try:
            return cls(str(value).strip().lower())
        except ValueError:
            choices = ", ".join(s.value for s in cls)
            raise ValueError(f"severity must be one of {choices}, got {value!r}") from None

    def __lt__(self, other: object) -> bool:
        if not isinstance(other, Severity):
            return NotImplemented
        return self.rank < other.rank


_SEVERITY_RANK = {
    Severity.CRITICAL: 3,
    Severity.MAJOR: 2,
    Severity.MINOR: 1,
}


class Category(Enum):
    """Rule families from the style guide."""

    ASSERTIONS = "assertions"
    CONTROL_FLOW = "control-flow"
    MEMORY = "memory"
    NAMING = "naming"
    FORMATTING = "formatting"
    COMMENTS = "comments"


class RuleScope(Enum):
    """What a predicate is applied to."""

    FUNCTION = "function"
    FILE = "file"


@dataclass(frozen=True)
class Rule:
    """A registered style rule.

    Attributes:
        id:          Unique rule identifier (e.g. "unbounded-loop").
        category:    Rule family.
        severity:    Default severity; configuration may override it.
        description: One-line statement of the rule.
        predicate:   Name of the detection function in ``PREDICATES``.
        scope:       FUNCTION rules run once per function, FILE rules once per unit.
        rationale:   Why the rule exists, shown by ``styleguard rules``.
        default_enabled: False for opt-in rules, switched on through
                     ``enabled_rules`` in the configuration.
    """

    id: str
    category: Category
    severity: Severity
    description: str
    predicate: str
    scope: RuleScope = RuleScope.FUNCTION
    rationale: str = ""
    default_enabled: bool = True
