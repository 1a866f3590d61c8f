"""Structured facts extracted from one source file.

The scanner produces a SourceUnit per file. Everything here is frozen and
uses tuples so that two scans of the same bytes compare equal.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Optional

from ..exceptions.taxonomy import ErrorCode


@dataclass(frozen=True)
class AssertionSite:
    line: int
    marker: str


@dataclass(frozen=True)
class LoopSite:
    """A loop construct.

    Attributes:
        line: Line of the loop keyword (the ``do`` line for do/while loops)
        keyword: ``for``, ``while``, ``do``, ``loop``
        header: Condition or iteration clause as written (comments/strings blanked)
        bounded: True if an explicit upper limit is lexically present
    """

    line: int
    keyword: str
    header: str
    bounded: bool


@dataclass(frozen=True)
class ConditionSite:
    """A conditional expression (``if``, ``else if``, ``elif``, ``while``)."""

    line: int
    keyword: str
    text: str
    compound: bool


@dataclass(frozen=True)
class Identifier:
    """A declared name: function, parameter or local variable."""

    name: str
    line: int
    kind: str


@dataclass(frozen=True)
class Diagnostic:
    """Scanner complaint about malformed input. Marks the unit partial."""

    code: ErrorCode
    line: int
    message: str


@dataclass(frozen=True)
class Function:
    """A function or method definition.

    Attributes:
        name: Function name
        start_line: Line of the header (1-indexed)
        end_line: Line of the closing brace / last body line (1-indexed)
        body_line_count: Non-blank lines inside the body
        assertions: Assertion call sites
        loops: Loop constructs
        conditions: Conditional expressions
        identifiers: Function name, parameters and declared locals
        self_calls: Lines where the function calls itself
        jumps: (line, token) pairs for goto/setjmp/longjmp
        allocations: (line, token) pairs for heap allocation calls
        has_leading_comment: Comment directly above the header, or a docstring
        truncated: Body still open at end of input
    """

    name: str
    start_line: int
    end_line: int
    body_line_count: int
    assertions: tuple[AssertionSite, ...] = ()
    loops: tuple[LoopSite, ...] = ()
    conditions: tuple[ConditionSite, ...] = ()
    identifiers: tuple[Identifier, ...] = ()
    self_calls: tuple[int, ...] = ()
    jumps: tuple[tuple[int, str], ...] = ()
    allocations: tuple[tuple[int, str], ...] = ()
    has_leading_comment: bool = False
    truncated: bool = False

    @property
    def assertion_count(self) -> int:
        return len(self.assertions)

    def contains(self, line: int) -> bool:
        return self.start_line <= line <= self.end_line


@dataclass(frozen=True)
class SourceUnit:
    """One analysed file.

    Attributes:
        path: Display path of the file
        language: Language name from the language table
        lines: Raw text lines (no trailing newlines)
        functions: Outermost functions in source order
        line_lengths: Length of each line, tabs expanded
        indentation: Leading-whitespace width of each line, tabs expanded
        comment_lines: Line numbers that carry a comment
        diagnostics: Problems found while scanning
    """

    path: str
    language: str
    lines: tuple[str, ...]
    functions: tuple[Function, ...] = ()
    line_lengths: tuple[int, ...] = ()
    indentation: tuple[int, ...] = ()
    comment_lines: frozenset[int] = field(default_factory=frozenset)
    diagnostics: tuple[Diagnostic, ...] = ()

    @property
    def partial(self) -> bool:
        """True if the scanner could only produce a best-effort result."""
        return bool(self.diagnostics)

    def function_at(self, line: int) -> Optional[Function]:
        for fn in self.functions:
            if fn.contains(line):
                return fn
        return None

    def line_text(self, line: int) -> str:
        if 1 <= line <= len(self.lines):
            return self.lines[line - 1]
        return ""
