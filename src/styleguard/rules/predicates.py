"""Detection predicates, one per rule.

Each predicate is a pure function over scanner output:

    function scope:  predicate(fn, unit, config) -> list[Hit]
    file scope:      predicate(unit, config) -> list[Hit]

Predicates never raise on well-formed scanner output and never look at
severities or gray areas; the evaluator layers those on top.
"""

from __future__ import annotations

import re
from dataclasses import dataclass
from fnmatch import fnmatchcase
from typing import TYPE_CHECKING, Callable

if TYPE_CHECKING:
    from ..config import CheckerConfig
    from ..scanning.models import Function, SourceUnit


@dataclass(frozen=True)
class Hit:
    """A single predicate match, before it becomes a Finding."""

    line: int
    issue: str


# ── Assertions ─────────────────────────────────────────────────────


def check_assertion_count(fn: Function, unit: SourceUnit, config: CheckerConfig) -> list[Hit]:
    count = fn.assertion_count
    if count >= config.assertion_min:
        return []
    noun = "assertion" if count == 1 else "assertions"
    return [
        Hit(
            fn.start_line,
            f"{count} {noun} in '{fn.name}', at least {config.assertion_min} required",
        )
    ]


# ── Control flow ───────────────────────────────────────────────────


def check_unbounded_loops(fn: Function, unit: SourceUnit, config: CheckerConfig) -> list[Hit]:
    hits = []
    for loop in fn.loops:
        if loop.bounded:
            continue
        issue = f"{loop.keyword} loop has no statically visible upper bound"
        if loop.header.strip():
            issue += f": {loop.header.strip()}"
        hits.append(Hit(loop.line, issue))
    return hits


def check_recursion(fn: Function, unit: SourceUnit, config: CheckerConfig) -> list[Hit]:
    return [Hit(line, f"'{fn.name}' calls itself") for line in fn.self_calls]


def check_jumps(fn: Function, unit: SourceUnit, config: CheckerConfig) -> list[Hit]:
    return [Hit(line, f"non-local jump '{token}'") for line, token in fn.jumps]


def check_compound_conditions(fn: Function, unit: SourceUnit, config: CheckerConfig) -> list[Hit]:
    return [
        Hit(cond.line, f"compound condition in {cond.keyword}: {cond.text}")
        for cond in fn.conditions
        if cond.compound
    ]


# ── Formatting ─────────────────────────────────────────────────────


def check_function_length(fn: Function, unit: SourceUnit, config: CheckerConfig) -> list[Hit]:
    if fn.body_line_count <= config.function_length_max:
        return []
    return [
        Hit(
            fn.start_line,
            f"'{fn.name}' body is {fn.body_line_count} lines, limit is {config.function_length_max}",
        )
    ]


def check_line_length(unit: SourceUnit, config: CheckerConfig) -> list[Hit]:
    return [
        Hit(number, f"line is {length} columns, limit is {config.line_length_max}")
        for number, length in enumerate(unit.line_lengths, start=1)
        if length > config.line_length_max
    ]


def report_scan_diagnostics(unit: SourceUnit, config: CheckerConfig) -> list[Hit]:
    return [
        Hit(diag.line, f"[{diag.code.value}] {diag.message}; results for this file are partial")
        for diag in unit.diagnostics
    ]


# ── Memory ─────────────────────────────────────────────────────────


def check_dynamic_allocation(fn: Function, unit: SourceUnit, config: CheckerConfig) -> list[Hit]:
    if any(fnmatchcase(fn.name, pattern) for pattern in config.allocation_allowed_functions):
        return []
    return [
        Hit(line, f"heap allocation '{token}' after initialization")
        for line, token in fn.allocations
    ]


# ── Naming ─────────────────────────────────────────────────────────

_SNAKE = re.compile(r"^_*[a-z][a-z0-9]*(?:_[a-z0-9]+)*_*$")
_CAMEL = re.compile(r"^_*[a-z][a-zA-Z0-9]*$")
_PASCAL = re.compile(r"^_*[A-Z][a-zA-Z0-9]*$")
_CONSTANT = re.compile(r"^_*[A-Z][A-Z0-9]*(?:_[A-Z0-9]+)*$")
_DUNDER = re.compile(r"^__\w+__$")

_CONVENTION_PATTERNS = {
    "snake_case": _SNAKE,
    "camelCase": _CAMEL,
    "PascalCase": _PASCAL,
}

_VOWELS = set("aeiouy")


def _follows_convention(name: str, convention: str) -> bool:
    if convention == "any" or len(name.strip("_")) <= 1:
        return True
    if _CONSTANT.match(name) or _DUNDER.match(name):
        return True
    return bool(_CONVENTION_PATTERNS[convention].match(name))


def check_naming_case(fn: Function, unit: SourceUnit, config: CheckerConfig) -> list[Hit]:
    convention = config.naming_convention
    return [
        Hit(ident.line, f"{ident.kind} '{ident.name}' is not {convention}")
        for ident in fn.identifiers
        if not _follows_convention(ident.name, convention)
    ]


def split_words(name: str) -> list[str]:
    """Split an identifier into lower-case words.

    >>> split_words("parseHTTPHeader_v2")
    ['parse', 'http', 'header', 'v2']
    """
    words = []
    for part in re.split(r"[_$]+", name):
        words.extend(re.findall(r"[A-Z]+(?![a-z])|[A-Z]?[a-z]+[0-9]*|[0-9]+|[A-Z]", part))
    return [w.lower() for w in words if w and not w.isdigit()]


def abbreviation_in(word: str, config: CheckerConfig) -> bool:
    """True if ``word`` reads as an abbreviation under the configured lists."""
    if word in config.abbreviation_allowlist:
        return False
    if word in config.abbreviation_denylist:
        return True
    if config.flag_vowelless_words and len(word) >= 3 and word.isalpha():
        return not (set(word) & _VOWELS)
    return False


def check_abbreviations(fn: Function, unit: SourceUnit, config: CheckerConfig) -> list[Hit]:
    hits = []
    for ident in fn.identifiers:
        short = [w for w in split_words(ident.name) if abbreviation_in(w, config)]
        if short:
            listed = ", ".join(dict.fromkeys(short))
            hits.append(Hit(ident.line, f"{ident.kind} '{ident.name}' uses abbreviation(s): {listed}"))
    return hits


# ── Comments ───────────────────────────────────────────────────────


def check_leading_comment(fn: Function, unit: SourceUnit, config: CheckerConfig) -> list[Hit]:
    if fn.has_leading_comment or fn.body_line_count <= config.comment_required_over:
        return []
    return [
        Hit(
            fn.start_line,
            f"'{fn.name}' ({fn.body_line_count} lines) has no comment describing it",
        )
    ]


PREDICATES: dict[str, Callable[..., list[Hit]]] = {
    "check_assertion_count": check_assertion_count,
    "check_unbounded_loops": check_unbounded_loops,
    "check_recursion": check_recursion,
    "check_jumps": check_jumps,
    "check_function_length": check_function_length,
    "check_dynamic_allocation": check_dynamic_allocation,
    "check_compound_conditions": check_compound_conditions,
    "check_naming_case": check_naming_case,
    "check_abbreviations": check_abbreviations,
    "check_leading_comment": check_leading_comment,
    "check_line_length": check_line_length,
    "report_scan_diagnostics": report_scan_diagnostics,
}
