"""Rule evaluator: SourceUnit + rules + config -> findings.

Every enabled rule's predicate runs exactly once per function (function
scope) or once per unit (file scope). Hits become Findings with the
effective severity; duplicates on (rule, function, line) are dropped with
the first one kept; matches against the gray-area patterns downgrade a
finding's disposition without removing it.
"""

from __future__ import annotations

from typing import Iterable, Optional

from ..config import DEFAULT_CONFIG, CheckerConfig
from ..exceptions import ErrorCode, InternalInvariantViolation, RegistryError
from ..logging_config import get_logger
from ..rules.models import Rule, RuleScope, Severity
from ..rules.predicates import PREDICATES, Hit
from ..rules.registry import list_rules
from ..scanning.models import SourceUnit
from .models import GRAY_AREA, MODULE_SCOPE, VIOLATION, Finding

logger = get_logger(__name__)


def evaluate(
    unit: SourceUnit,
    rules: Optional[Iterable[Rule]] = None,
    config: Optional[CheckerConfig] = None,
) -> list[Finding]:
    """Apply rules to a scanned unit.

    Args:
        unit: Scanner output for one file
        rules: Rules to apply (defaults to the full registry)
        config: Thresholds, overrides and gray-area patterns

    Returns:
        Findings in evaluation order (callers sort for reporting)

    Raises:
        RegistryError: If a rule names a predicate that does not exist
        InternalInvariantViolation: If a finding references an unregistered
            rule or carries an unordered severity
    """
    config = config or DEFAULT_CONFIG
    active = [r for r in (list_rules() if rules is None else rules) if config.is_enabled(r)]

    function_rules = [r for r in active if r.scope is RuleScope.FUNCTION]
    file_rules = [r for r in active if r.scope is RuleScope.FILE]

    findings: list[Finding] = []
    seen: set[tuple[str, str, int]] = set()

    def add(rule: Rule, function: str, hit: Hit) -> None:
        key = (rule.id, function, hit.line)
        if key in seen:
            return
        seen.add(key)
        justification, note = _gray_area_match(rule.id, hit.line, unit, config)
        findings.append(
            Finding(
                rule_id=rule.id,
                severity=config.severity_for(rule.id, rule.severity),
                category=rule.category,
                path=unit.path,
                function=function,
                line=hit.line,
                issue=hit.issue,
                disposition=GRAY_AREA if justification else VIOLATION,
                justification=justification,
                note=note,
            )
        )

    for fn in unit.functions:
        for rule in function_rules:
            for hit in _predicate(rule)(fn, unit, config):
                add(rule, fn.name, hit)

    for rule in file_rules:
        for hit in _predicate(rule)(unit, config):
            enclosing = unit.function_at(hit.line)
            add(rule, enclosing.name if enclosing else MODULE_SCOPE, hit)

    _check_invariants(findings)
    logger.debug(f"{unit.path}: {len(findings)} finding(s) from {len(active)} rule(s)")
    return findings


def _predicate(rule: Rule):
    predicate = PREDICATES.get(rule.predicate)
    if predicate is None:
        raise RegistryError(rule.id, f"unknown predicate {rule.predicate!r}")
    return predicate


def _gray_area_match(
    rule_id: str, line: int, unit: SourceUnit, config: CheckerConfig
) -> tuple[Optional[str], str]:
    """(text of the line that exempts a finding, pattern note), or (None, "").

    The flagged line is searched first, then up to ``gray_area_window``
    lines above it, nearest first.
    """
    candidates = range(line, max(0, line - config.gray_area_window - 1), -1)
    for pattern in config.effective_gray_areas:
        if not pattern.applies_to(rule_id):
            continue
        for number in candidates:
            text = unit.line_text(number)
            if pattern.search(text):
                return text.strip(), pattern.note
    return None, ""


def _check_invariants(findings: list[Finding]) -> None:
    known = {rule.id for rule in list_rules()}
    for finding in findings:
        if finding.rule_id not in known:
            raise InternalInvariantViolation(
                ErrorCode.SG700, f"finding references unknown rule {finding.rule_id!r}"
            )
        if not isinstance(finding.severity, Severity):
            raise InternalInvariantViolation(
                ErrorCode.SG701, f"finding for {finding.rule_id!r} has severity {finding.severity!r}"
            )
