"""Build per-file reports and merge them into a batch report."""

from __future__ import annotations

from typing import Iterable, Optional

from ..config import DEFAULT_CONFIG, CheckerConfig
from ..evaluation.models import Finding
from ..exceptions import InputError
from ..rules.models import RuleScope
from ..rules.registry import list_rules
from ..scanning.models import SourceUnit
from .models import AlignedNote, FileReport, InputFailure, Report


def build_file_report(
    findings: Iterable[Finding], unit: SourceUnit, config: Optional[CheckerConfig] = None
) -> FileReport:
    """Sort one file's findings and note the rules it fully satisfies.

    Order: severity descending, then (path, line, function) ascending,
    ties broken by rule id.
    """
    config = config or DEFAULT_CONFIG
    ordered = tuple(sorted(findings, key=Finding.sort_key))
    hit_rules = {finding.rule_id for finding in ordered}

    aligned: tuple[AlignedNote, ...] = ()
    if unit.functions:
        aligned = tuple(
            AlignedNote(rule.id, rule.description, len(unit.functions))
            for rule in list_rules()
            if rule.scope is RuleScope.FUNCTION
            and config.is_enabled(rule)
            and rule.id not in hit_rules
        )

    return FileReport(
        path=unit.path,
        language=unit.language,
        findings=ordered,
        functions_scanned=len(unit.functions),
        partial=unit.partial,
        aligned=aligned,
    )


def merge_reports(
    file_reports: Iterable[FileReport], input_errors: Iterable[InputError] = ()
) -> Report:
    """Combine per-file reports, ordered by path regardless of completion order."""
    failures = sorted(
        (InputFailure(str(e.filepath), e.reason, e.code.value) for e in input_errors),
        key=lambda failure: failure.path,
    )
    return Report(
        files=tuple(sorted(file_reports, key=lambda report: report.path)),
        input_errors=tuple(failures),
    )
