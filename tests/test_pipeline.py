"""Tests for pipeline.py - batch runs, parallel merge, input errors."""

import pytest

from styleguard.config import CheckerConfig
from styleguard.exceptions import InvalidConfigError
from styleguard.formatters import get_formatter
from styleguard.pipeline import analyze_source, resolve_workers, run_batch
from styleguard.reporting import merge_reports


class TestRunBatch:
    def test_scenario_d_parallel_matches_sequential(self, source_tree):
        alpha, beta = source_tree / "alpha.c", source_tree / "beta.c"
        parallel = run_batch([alpha, beta], CheckerConfig(workers=2))
        sequential = run_batch([alpha, beta], CheckerConfig(workers=1))
        reversed_order = run_batch([beta, alpha], CheckerConfig(workers=1))

        assert parallel == sequential == reversed_order
        markdown = get_formatter("markdown")
        assert markdown.format(parallel) == markdown.format(reversed_order)

    def test_merge_is_order_independent(self, scenario_a_source, scenario_b_source):
        first = analyze_source(scenario_a_source, "a.c")
        second = analyze_source(scenario_b_source, "b.c")
        assert merge_reports([first, second]) == merge_reports([second, first])

    def test_directory_batch(self, source_tree):
        report = run_batch([source_tree])
        assert [r.path for r in report.files] == [
            str(source_tree / "alpha.c"),
            str(source_tree / "beta.c"),
        ]
        assert report.has_gating_violations

    def test_input_errors_do_not_stop_batch(self, source_tree, tmp_path):
        report = run_batch([tmp_path / "missing.c", source_tree / "beta.c"])
        assert len(report.files) == 1
        assert [e.code for e in report.input_errors] == ["SG201"]
        assert not report.has_gating_violations

    def test_oversized_file_is_input_error(self, source_tree):
        report = run_batch([source_tree], CheckerConfig(max_file_size_mb=0.0001))
        assert report.files == ()
        assert {e.code for e in report.input_errors} == {"SG202"}

    def test_unknown_rule_in_config(self, source_tree):
        with pytest.raises(InvalidConfigError):
            run_batch([source_tree], CheckerConfig(disabled_rules={"no-such-rule"}))

    def test_idempotent_reports(self, source_tree):
        json_formatter = get_formatter("json")
        assert json_formatter.format(run_batch([source_tree])) == json_formatter.format(
            run_batch([source_tree])
        )


class TestWorkers:
    def test_explicit(self):
        assert resolve_workers(3) == 3

    def test_auto_is_capped(self):
        assert 1 <= resolve_workers(None) <= 8
