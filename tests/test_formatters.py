"""Tests for output formatters."""

import json

import pytest

from styleguard.formatters import (
    FORMATS,
    CheckFormatter,
    GithubFormatter,
    JsonFormatter,
    MarkdownFormatter,
    RichFormatter,
    get_formatter,
)
from styleguard.pipeline import analyze_source
from styleguard.reporting import merge_reports


@pytest.fixture
def report(scenario_a_source, scenario_c_source):
    return merge_reports(
        [analyze_source(scenario_a_source, "a.c"), analyze_source(scenario_c_source, "c.c")]
    )


class TestGetFormatter:
    @pytest.mark.parametrize("name", FORMATS)
    def test_known_names(self, name):
        assert get_formatter(name) is not None

    def test_unknown_name(self):
        with pytest.raises(ValueError, match="Unknown formatter"):
            get_formatter("xml")


class TestMarkdownFormatter:
    def test_sections_in_order(self, report):
        text = MarkdownFormatter().format(report)
        headings = [line for line in text.splitlines() if line.startswith("#")]
        assert headings == [
            "# Style Rule Report",
            "## Summary",
            "## Violations",
            "### Critical",
            "### Major",
            "### Minor",
            "## Gray Areas",
            "## Aligned Patterns",
            "## Input Errors",
        ]

    def test_gray_area_justification_shown(self, report):
        text = MarkdownFormatter().format(report)
        assert (
            "Justification: `// intentional event loop: runs until power-off` (event loop exemption)"
            in text
        )

    def test_empty_sections(self, scenario_b_source):
        text = MarkdownFormatter().format(merge_reports([analyze_source(scenario_b_source, "b.c")]))
        assert text.count("_None._") == 5


class TestJsonFormatter:
    def test_document_shape(self, report):
        data = json.loads(JsonFormatter().format(report))
        assert set(data) == {"summary", "files", "violations", "gray_areas", "aligned", "input_errors"}
        assert data["summary"]["violations"] == 4
        assert [g["rule"] for g in data["gray_areas"]] == ["unbounded-loop"]
        assert data["gray_areas"][0]["note"] == "event loop exemption"
        assert data["violations"][0]["severity"] == "critical"


class TestCheckFormatter:
    def test_one_line_per_violation(self, report):
        lines = CheckFormatter().format(report).splitlines()
        assert len(lines) == 4
        severity, location, rule, issue = lines[0].split(" | ", 3)
        assert severity == "critical"
        assert location.startswith("a.c:")
        assert location.endswith("(process_readings)")
        assert issue

    def test_no_violations_no_output(self, scenario_b_source):
        report = merge_reports([analyze_source(scenario_b_source, "b.c")])
        assert CheckFormatter().format(report) == ""


class TestGithubFormatter:
    def test_levels(self, report):
        lines = GithubFormatter().format(report).splitlines()
        levels = [line.split(" ", 1)[0] for line in lines]
        assert levels.count("::error") == 3
        assert levels.count("::warning") == 1
        assert levels.count("::notice") == 1

    def test_gray_area_note_labels_justification(self, report):
        lines = GithubFormatter().format(report).splitlines()
        notice = next(line for line in lines if line.startswith("::notice"))
        justification = "// intentional event loop: runs until power-off"
        assert notice.endswith(f"[event loop exemption: {justification}]")

    def test_escaping(self):
        from styleguard.formatters.github_formatter import _escape_data, _escape_property

        assert _escape_data("50%\nnext") == "50%25%0Anext"
        assert _escape_property("a:b,c") == "a%3Ab%2Cc"


class TestRichFormatter:
    def test_format_returns_plain_text(self, report):
        text = RichFormatter().format(report)
        assert "Style Rule Report" in text
        assert "unbounded-loop" in text
        assert "exemption" in text
        assert "[red" not in text
