"""
styleguard - static rule checker for safety-critical coding style

Scans C-family, Go, Rust and Python sources for assertion density,
bounded loops, recursion, function length, simple conditions, naming and
formatting, and reports violations ordered by severity.
"""

__version__ = "0.1.0"

from .config import CheckerConfig, load_config
from .evaluation import Finding, evaluate
from .pipeline import analyze_source, run_batch
from .reporting import Report
from .rules import Rule, Severity, list_rules
from .scanning import SourceUnit, scan

__all__ = [
    "run_batch",  # Main entry point
    "analyze_source",
    "scan",
    "evaluate",
    "list_rules",
    "load_config",
    "CheckerConfig",
    "Finding",
    "Report",
    "Rule",
    "Severity",
    "SourceUnit",
]
