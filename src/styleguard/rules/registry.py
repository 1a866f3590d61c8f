"""Rule registry: the static rule table and its validation.

The table is plain data. ``load_registry`` validates it and resolves each
predicate name; ``list_rules`` caches the result for the life of the
process so every caller sees the same tuple.
"""

from __future__ import annotations

from functools import lru_cache
from typing import Any, Iterable, Mapping, Optional

from ..exceptions import RegistryError
from .models import Category, Rule, RuleScope, Severity
from .predicates import PREDICATES

RULE_TABLE: tuple[dict[str, Any], ...] = (
    {
        "id": "assertion-count",
        "category": "assertions",
        "severity": "critical",
        "description": "Every function contains at least the configured number of assertions",
        "predicate": "check_assertion_count",
        "rationale": "Assertions catch impossible states close to their cause.",
    },
    {
        "id": "unbounded-loop",
        "category": "control-flow",
        "severity": "critical",
        "description": "Every loop has a statically visible upper bound",
        "predicate": "check_unbounded_loops",
        "rationale": "A loop without a bound cannot be shown to terminate.",
    },
    {
        "id": "recursion",
        "category": "control-flow",
        "severity": "critical",
        "description": "Functions do not call themselves",
        "predicate": "check_recursion",
        "rationale": "Recursion makes stack usage unbounded and hard to verify.",
    },
    {
        "id": "non-local-jump",
        "category": "control-flow",
        "severity": "critical",
        "description": "No goto, setjmp or longjmp",
        "predicate": "check_jumps",
        "rationale": "Non-local jumps break structured control flow.",
    },
    {
        "id": "function-length",
        "category": "formatting",
        "severity": "major",
        "description": "Function bodies stay within the configured line limit",
        "predicate": "check_function_length",
        "rationale": "A function should fit on one printed page.",
    },
    {
        "id": "dynamic-allocation",
        "category": "memory",
        "severity": "major",
        "description": "No heap allocation outside initialization functions",
        "predicate": "check_dynamic_allocation",
        "rationale": "Allocation after start-up introduces unpredictable failure modes.",
    },
    {
        "id": "compound-condition",
        "category": "control-flow",
        "severity": "minor",
        "description": "Conditions do not combine clauses with && / || / and / or",
        "predicate": "check_compound_conditions",
        "rationale": "Simple conditions are easier to review and to cover in tests.",
    },
    {
        "id": "naming-case",
        "category": "naming",
        "severity": "minor",
        "description": "Identifiers follow the configured naming convention",
        "predicate": "check_naming_case",
        "rationale": "One convention per code base keeps names predictable.",
    },
    {
        "id": "naming-abbreviation",
        "category": "naming",
        "severity": "minor",
        "description": "Identifiers are spelled out rather than abbreviated",
        "predicate": "check_abbreviations",
        "rationale": "Abbreviations force readers to guess.",
    },
    {
        "id": "missing-comment",
        "category": "comments",
        "severity": "minor",
        "description": "Non-trivial functions carry a leading comment or docstring",
        "predicate": "check_leading_comment",
        "rationale": "Comments record intent that the code cannot express.",
        "default_enabled": False,
    },
    {
        "id": "line-length",
        "category": "formatting",
        "severity": "minor",
        "description": "Lines stay within the configured column limit",
        "predicate": "check_line_length",
        "scope": "file",
        "rationale": "Short lines keep side-by-side review readable.",
    },
    {
        "id": "scan-partial",
        "category": "formatting",
        "severity": "major",
        "description": "The file could be scanned completely",
        "predicate": "report_scan_diagnostics",
        "scope": "file",
        "rationale": "Malformed input means other findings for the file may be missing.",
    },
)

_REQUIRED_KEYS = ("id", "category", "severity", "description", "predicate")


def load_registry(table: Iterable[Mapping[str, Any]] = RULE_TABLE) -> tuple[Rule, ...]:
    """Validate a rule table and build Rule objects.

    Args:
        table: Rule entries (defaults to the built-in table)

    Returns:
        Rules in table order

    Raises:
        RegistryError: On duplicate id, unknown category/severity/scope,
            unknown predicate or missing keys
    """
    rules: list[Rule] = []
    seen: set[str] = set()

    for entry in table:
        rule_id = str(entry.get("id") or "<missing id>")
        missing = [key for key in _REQUIRED_KEYS if not entry.get(key)]
        if missing:
            raise RegistryError(rule_id, f"missing keys: {', '.join(missing)}")
        if rule_id in seen:
            raise RegistryError(rule_id, "duplicate rule id")
        seen.add(rule_id)

        try:
            severity = Severity.parse(entry["severity"])
        except ValueError as e:
            raise RegistryError(rule_id, str(e)) from None
        try:
            category = Category(entry["category"])
        except ValueError:
            raise RegistryError(rule_id, f"unknown category {entry['category']!r}") from None
        try:
            scope = RuleScope(entry.get("scope", "function"))
        except ValueError:
            raise RegistryError(rule_id, f"unknown scope {entry.get('scope')!r}") from None
        if entry["predicate"] not in PREDICATES:
            raise RegistryError(rule_id, f"unknown predicate {entry['predicate']!r}")

        rules.append(
            Rule(
                id=rule_id,
                category=category,
                severity=severity,
                description=entry["description"],
                predicate=entry["predicate"],
                scope=scope,
                rationale=entry.get("rationale", ""),
                default_enabled=bool(entry.get("default_enabled", True)),
            )
        )

    return tuple(rules)


@lru_cache(maxsize=1)
def list_rules() -> tuple[Rule, ...]:
    """All registered rules, loaded once per process."""
    return load_registry(RULE_TABLE)


def get_rule(rule_id: str) -> Optional[Rule]:
    for rule in list_rules():
        if rule.id == rule_id:
            return rule
    return None


def rules_by_category() -> dict[Category, list[Rule]]:
    grouped: dict[Category, list[Rule]] = {category: [] for category in Category}
    for rule in list_rules():
        grouped[rule.category].append(rule)
    return grouped
