"""Tests for reporting - ordering, summaries, aligned notes."""

from styleguard.evaluation import Finding
from styleguard.pipeline import analyze_source
from styleguard.reporting import build_file_report, merge_reports
from styleguard.rules import Category, Severity
from styleguard.scanning import scan


def _finding(rule_id, severity, line, path="a.c", function="f"):
    return Finding(
        rule_id=rule_id,
        severity=severity,
        category=Category.CONTROL_FLOW,
        path=path,
        function=function,
        line=line,
        issue="x",
    )


class TestOrdering:
    def test_severity_then_location_then_rule(self):
        unit = scan("", "a.c")
        findings = [
            _finding("naming-case", Severity.MINOR, 1),
            _finding("unbounded-loop", Severity.CRITICAL, 9),
            _finding("assertion-count", Severity.CRITICAL, 9),
            _finding("function-length", Severity.MAJOR, 2),
            _finding("recursion", Severity.CRITICAL, 3),
        ]
        report = build_file_report(findings, unit)
        assert [(f.rule_id, f.line) for f in report.findings] == [
            ("recursion", 3),
            ("assertion-count", 9),
            ("unbounded-loop", 9),
            ("function-length", 2),
            ("naming-case", 1),
        ]

    def test_merged_findings_sorted_across_files(self):
        unit_a, unit_b = scan("", "a.c"), scan("", "b.c")
        report = merge_reports(
            [
                build_file_report([_finding("recursion", Severity.CRITICAL, 5, path="b.c")], unit_b),
                build_file_report([_finding("naming-case", Severity.MINOR, 1, path="a.c")], unit_a),
                build_file_report([_finding("recursion", Severity.CRITICAL, 7, path="a.c")], unit_a),
            ]
        )
        assert [(f.path, f.line) for f in report.findings] == [("a.c", 7), ("b.c", 5), ("a.c", 1)]


class TestSummary:
    def test_scenario_a_summary(self, scenario_a_source):
        report = merge_reports([analyze_source(scenario_a_source, "a.c")])
        summary = report.summary()
        assert summary["violations"] == 4
        assert summary["by_severity"] == {"critical": 2, "major": 1, "minor": 1}
        assert summary["by_category"]["control-flow"] == 2
        assert list(report.violations_by_severity()) == [
            Severity.CRITICAL,
            Severity.MAJOR,
            Severity.MINOR,
        ]

    def test_aligned_notes(self, scenario_b_source):
        report = merge_reports([analyze_source(scenario_b_source, "b.c")])
        aligned = {note.rule_id for note in report.aligned()}
        assert {"assertion-count", "unbounded-loop", "function-length"} <= aligned
        assert "line-length" not in aligned

    def test_gray_areas_do_not_gate(self, scenario_c_source):
        report = merge_reports([analyze_source(scenario_c_source, "c.c")])
        assert len(report.gray_areas) == 1
        assert report.violations == []
        assert not report.has_gating_violations

    def test_location_format(self):
        assert _finding("recursion", Severity.CRITICAL, 4).location == "a.c:4 (f)"
