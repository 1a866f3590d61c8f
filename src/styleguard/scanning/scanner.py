"""Source scanner: file text -> SourceUnit.

The scanner is lexical, not semantic. It works in three passes:

    1. mask     - blank out comments and string literals (positions kept)
    2. structure- find function boundaries with an explicit block stack
    3. facts    - per function, regex over the masked body for assertions,
                  loops, conditions, identifiers, self-calls, jumps and
                  heap allocations

Nothing here recurses and every loop runs over a finite sequence, so the
scan is linear in the input size and terminates on any input. Malformed
input produces Diagnostics on the SourceUnit instead of exceptions.

Loop boundedness is a heuristic:
    bounded   - a relational comparison (<, <=, >, >=) appears in the loop
                condition, or the loop iterates a collection (for x in xs,
                for (x : xs), for (x of xs), Go range)
    unbounded - everything else: while (1), while True, for (;;), for {,
                Rust loop, while (p != NULL)

Known false positives: pointer/sentinel walks such as ``while (p != NULL)``.
Known false negatives: a bound that the body later mutates, iteration over
an endless generator other than itertools.count/cycle/repeat.
"""

from __future__ import annotations

import re
from dataclasses import dataclass
from fnmatch import fnmatchcase
from typing import Optional, Union

from ..config import DEFAULT_CONFIG, CheckerConfig
from ..exceptions.taxonomy import ErrorCode
from ..logging_config import get_logger
from .languages import LanguageConfig, detect_language, get_language
from .models import (
    AssertionSite,
    ConditionSite,
    Diagnostic,
    Function,
    Identifier,
    LoopSite,
    SourceUnit,
)

logger = get_logger(__name__)

# Words that start a non-function block header
CONTROL_KEYWORDS = frozenset(
    {
        "if", "else", "for", "while", "do", "switch", "try", "catch", "finally",
        "return", "case", "default", "class", "struct", "enum", "union",
        "namespace", "interface", "extern", "typedef", "impl", "trait", "mod",
        "match", "loop", "select", "go", "defer", "unsafe", "with",
        "synchronized", "type", "package", "import", "use", "module",
    }
)

# Identifiers followed by "(" that never name the function being defined
_NOT_FUNCTION_NAMES = CONTROL_KEYWORDS | frozenset(
    {
        "func", "fn", "function", "sizeof", "alignof", "alignas", "decltype",
        "noexcept", "throw", "throws", "requires", "__attribute__",
        "__declspec", "operator", "new", "await", "async",
    }
)

_HEADER_CALL = re.compile(r"([A-Za-z_$][\w$]*)\s*(?:<[^<>()]*(?:<[^<>()]*>[^<>()]*)*>)?\s*\(")
_ARROW = re.compile(
    r"\b(?:const|let|var)\s+([A-Za-z_$][\w$]*)\s*(?::[^=]+)?=\s*(?:async\s*)?"
    r"(?:\(([^()]*)\)|[A-Za-z_$][\w$]*)\s*(?::[^=]+)?=>\s*$"
)
_FIRST_WORD = re.compile(r"[A-Za-z_$][\w$]*")
_WORD = re.compile(r"[A-Za-z_$][\w$]*")

_PY_DEF = re.compile(r"^[ \t]*(?:async[ \t]+)?def[ \t]+([A-Za-z_]\w*)")
_PY_CLASS = re.compile(r"^[ \t]*class[ \t]+([A-Za-z_]\w*)")
_PY_STATEMENT = re.compile(r"(?m)^[ \t]*(?:async[ \t]+)?(for|while|if|elif)\b")
_PY_ASSERT = re.compile(r"(?m)^[ \t]*assert\b(?![ \t]*\()")
_PY_INFINITE_ITER = re.compile(r"\b(?:count|cycle)\s*\(|\brepeat\s*\([^,()]*\)")
_DOCSTRING = re.compile(r"""^\s*[rRbBuUfF]{0,2}("|')""")

_CALL = re.compile(r"(?<![\w$])([A-Za-z_]\w*)\s*\(")
_JUMP = re.compile(r"\bgoto\b|\b(setjmp|longjmp|sigsetjmp|siglongjmp)\s*\(")
_DEFINITION_PREFIX = re.compile(r"\b(?:def|function|fn|func)\s+$")
_NEW_PREFIX = re.compile(r"\bnew\s+$")
_ELSE_PREFIX = re.compile(r"\belse\s*$")

RELATIONAL = re.compile(r"<=|>=|(?<![<\-=>])<(?![<=])|(?<![<\-=>])>(?![>=])")
LOGICAL = re.compile(r"&&|\|\||\band\b|\bor\b")
_FOREACH_COLON = re.compile(r"(?<!:):(?!:)")
_OPEN_RANGE = re.compile(r"\.\.\s*(?:\)|$)")

_SKIPPED_PARAMS = frozenset({"self", "cls", "this", "void"})

# Mask states
_CODE = 0
_LINE_COMMENT = 1
_BLOCK_COMMENT = 2
_STRING = 3
_PREPROC = 4

# Cap on header segments joined when looking for a function signature
_MAX_HEADER_SEGMENTS = 8


@dataclass
class _Masked:
    text: str
    comment_lines: frozenset[int]
    diagnostics: list[Diagnostic]
    string_lines: frozenset[int] = frozenset()  # lines that start inside a string


@dataclass
class _RawFunction:
    """Function boundaries before fact extraction."""

    name: str
    params: str
    start_line: int
    body: str
    body_first_line: int  # line on which ``body`` starts
    count_from: int  # first line counted as body
    end_line: int
    truncated: bool = False


def scan(
    file_text: Union[str, bytes],
    path: str = "<memory>",
    language: Optional[str] = None,
    config: Optional[CheckerConfig] = None,
) -> SourceUnit:
    """Scan source text into a SourceUnit.

    Deterministic: identical input always yields an equal SourceUnit. Total:
    any str or bytes input produces a SourceUnit, malformed input is
    reported through ``SourceUnit.diagnostics``.

    Args:
        file_text: Source text, or raw bytes (decoded as UTF-8 with replacement)
        path: Display path, also used for language detection
        language: Force a language from the language table
        config: Marker sets and scanner limits (defaults when None)

    Returns:
        SourceUnit for the text
    """
    config = config or DEFAULT_CONFIG
    diagnostics: list[Diagnostic] = []

    if isinstance(file_text, (bytes, bytearray)):
        text = _decode(bytes(file_text), diagnostics)
    else:
        text = file_text
    text = text.replace("\r\n", "\n").replace("\r", "\n")

    lang = get_language(language or detect_language(path))
    lines = text.split("\n")
    if text.endswith("\n") or text == "":
        lines.pop()

    masked = _mask(text, lang)
    diagnostics.extend(masked.diagnostics)

    if lang.block_mode == "indent":
        raw_functions = _indent_functions(
            masked.text.split("\n"),
            len(lines),
            config.max_nesting_depth,
            diagnostics,
            masked.string_lines,
        )
    else:
        raw_functions = _brace_functions(
            masked.text, len(lines), config.max_nesting_depth, diagnostics
        )

    functions = tuple(
        _build_function(raw, lang, config, lines, masked.comment_lines)
        for raw in sorted(raw_functions, key=lambda r: (r.start_line, r.name))
    )

    diagnostics.sort(key=lambda d: (d.line, d.code.value, d.message))
    if diagnostics:
        logger.debug(f"Partial scan of {path}: {len(diagnostics)} diagnostic(s)")

    tab = config.tab_width
    return SourceUnit(
        path=path,
        language=lang.name,
        lines=tuple(lines),
        functions=functions,
        line_lengths=tuple(len(line.expandtabs(tab)) for line in lines),
        indentation=tuple(_indent_width(line, tab) for line in lines),
        comment_lines=masked.comment_lines,
        diagnostics=tuple(diagnostics),
    )


def _decode(data: bytes, diagnostics: list[Diagnostic]) -> str:
    try:
        return data.decode("utf-8")
    except UnicodeDecodeError as e:
        line = data[: e.start].count(b"\n") + 1
        diagnostics.append(
            Diagnostic(ErrorCode.SG105, line, "undecodable bytes replaced while reading")
        )
        return data.decode("utf-8", errors="replace")


def _indent_width(line: str, tab_width: int = 4) -> int:
    stripped = line.lstrip(" \t")
    return len(line[: len(line) - len(stripped)].expandtabs(tab_width))


def _starts_with_any(text: str, index: int, tokens: tuple[str, ...]) -> str:
    for token in tokens:
        if text.startswith(token, index):
            return token
    return ""


# ── Pass 1: masking ────────────────────────────────────────────────


def _mask(text: str, lang: LanguageConfig) -> _Masked:
    """Blank comments and string contents, keeping offsets and newlines.

    String delimiters stay in place so tokens on either side do not merge.
    """
    out = list(text)
    comment_lines: set[int] = set()
    string_lines: set[int] = set()
    diagnostics: list[Diagnostic] = []

    state = _CODE
    delimiter = ""
    opened_at = 0
    line = 1
    at_line_start = True
    n = len(text)
    i = 0

    while i < n:
        ch = text[i]

        if state == _CODE:
            if ch == "\n":
                line += 1
                at_line_start = True
                i += 1
                continue
            if lang.preprocessor and ch == "#" and at_line_start:
                state = _PREPROC
                out[i] = " "
                i += 1
                continue
            if not ch.isspace():
                at_line_start = False

            token = _starts_with_any(text, i, lang.line_comments)
            if token:
                state = _LINE_COMMENT
                comment_lines.add(line)
                for k in range(i, i + len(token)):
                    out[k] = " "
                i += len(token)
                continue

            if lang.block_comment and text.startswith(lang.block_comment[0], i):
                state = _BLOCK_COMMENT
                opened_at = line
                comment_lines.add(line)
                for k in range(i, i + len(lang.block_comment[0])):
                    out[k] = " "
                i += len(lang.block_comment[0])
                continue

            token = _starts_with_any(text, i, lang.string_delimiters)
            if token:
                state = _STRING
                delimiter = token
                opened_at = line
                i += len(token)
                continue

            i += 1
            continue

        if state in (_LINE_COMMENT, _PREPROC):
            if ch == "\n":
                if state == _PREPROC and i > 0 and text[i - 1] == "\\":
                    line += 1
                    i += 1
                    continue
                # newline handled by the code branch
                state = _CODE
                continue
            out[i] = " "
            i += 1
            continue

        if state == _BLOCK_COMMENT:
            closer = lang.block_comment[1]
            if text.startswith(closer, i):
                for k in range(i, i + len(closer)):
                    out[k] = " "
                i += len(closer)
                state = _CODE
                continue
            if ch == "\n":
                line += 1
                comment_lines.add(line)
                i += 1
                continue
            out[i] = " "
            i += 1
            continue

        # _STRING
        if ch == "\\" and delimiter not in lang.raw_delimiters:
            out[i] = " "
            if i + 1 < n and text[i + 1] == "\n":
                line += 1
                string_lines.add(line)
            elif i + 1 < n:
                out[i + 1] = " "
            i += 2
            continue
        if text.startswith(delimiter, i):
            i += len(delimiter)
            state = _CODE
            continue
        if ch == "\n":
            if delimiter in lang.multiline_delimiters:
                line += 1
                string_lines.add(line)
                i += 1
                continue
            diagnostics.append(
                Diagnostic(ErrorCode.SG104, opened_at, "unterminated string literal")
            )
            state = _CODE
            continue
        out[i] = " "
        i += 1

    if state == _BLOCK_COMMENT:
        diagnostics.append(
            Diagnostic(ErrorCode.SG103, opened_at, "comment is never closed")
        )
    elif state == _STRING:
        diagnostics.append(
            Diagnostic(ErrorCode.SG104, opened_at, "unterminated string literal")
        )

    return _Masked(
        "".join(out), frozenset(comment_lines), diagnostics, frozenset(string_lines)
    )


# ── Pass 2: structure ──────────────────────────────────────────────


@dataclass
class _BraceFrame:
    is_function: bool
    name: str
    params: str
    start_line: int
    open_line: int
    open_index: int


def _brace_functions(
    masked: str, total_lines: int, max_depth: int, diagnostics: list[Diagnostic]
) -> list[_RawFunction]:
    """Match braces with an explicit stack; outermost functions only."""
    stack: list[_BraceFrame] = []
    functions: list[_RawFunction] = []
    function_depth = 0
    overflow = 0
    depth_reported = False

    # Header text since the last ';', '{' or '}', split into segments at
    # newlines outside parentheses: [start_line, text]
    segments: list[list] = []
    new_segment = True
    paren = 0
    line = 1

    for index, ch in enumerate(masked):
        if ch == "\n":
            line += 1
            if paren == 0:
                new_segment = True
            elif segments:
                segments[-1][1] += " "
            continue

        if ch == "{":
            if overflow or len(stack) >= max_depth:
                overflow += 1
                if not depth_reported:
                    diagnostics.append(
                        Diagnostic(
                            ErrorCode.SG102,
                            line,
                            f"nesting deeper than {max_depth} levels; inner blocks not analysed",
                        )
                    )
                    depth_reported = True
            else:
                header = None if function_depth else _function_header(segments)
                if header is not None:
                    name, params, start_line = header
                    stack.append(_BraceFrame(True, name, params, start_line, line, index))
                    function_depth += 1
                else:
                    stack.append(_BraceFrame(False, "", "", line, line, index))
            segments = []
            new_segment = True
            paren = 0
            continue

        if ch == "}":
            if overflow:
                overflow -= 1
            elif not stack:
                diagnostics.append(
                    Diagnostic(ErrorCode.SG101, line, "closing brace without matching opening brace")
                )
            else:
                frame = stack.pop()
                if frame.is_function:
                    function_depth -= 1
                    functions.append(
                        _RawFunction(
                            name=frame.name,
                            params=frame.params,
                            start_line=frame.start_line,
                            body=masked[frame.open_index + 1 : index],
                            body_first_line=frame.open_line,
                            count_from=frame.open_line + 1,
                            end_line=line,
                        )
                    )
            segments = []
            new_segment = True
            paren = 0
            continue

        if ch == "(":
            paren += 1
        elif ch == ")":
            paren = max(0, paren - 1)
        elif ch == ";" and paren == 0:
            segments = []
            new_segment = True
            continue

        if new_segment:
            if ch.isspace():
                continue
            segments.append([line, ""])
            new_segment = False
        segments[-1][1] += ch

    if stack or overflow:
        outermost = stack[0].open_line if stack else line
        diagnostics.append(
            Diagnostic(
                ErrorCode.SG100,
                outermost,
                f"{len(stack) + overflow} block(s) still open at end of input",
            )
        )
        last_line = max(total_lines, 1)
        for frame in stack:
            if frame.is_function:
                functions.append(
                    _RawFunction(
                        name=frame.name,
                        params=frame.params,
                        start_line=frame.start_line,
                        body=masked[frame.open_index + 1 :],
                        body_first_line=frame.open_line,
                        count_from=frame.open_line + 1,
                        end_line=last_line,
                        truncated=True,
                    )
                )

    return functions


def _function_header(segments: list[list]) -> Optional[tuple[str, str, int]]:
    """Decide whether the text before a '{' is a function signature.

    Tries the last header segment first, then progressively longer
    suffixes, so that ``int\\nmain(void)`` and multi-line signatures with a
    trailing ``throws`` clause are both recognised.

    Returns:
        (name, parameter text, start line) or None
    """
    usable = [seg for seg in segments if seg[1].strip()]
    for count in range(1, min(len(usable), _MAX_HEADER_SEGMENTS) + 1):
        chosen = usable[-count:]
        text = " ".join(seg[1].strip() for seg in chosen)
        verdict = _match_header(text)
        if verdict == "reject":
            return None
        if verdict is not None:
            name, params = verdict
            return name, params, chosen[0][0]
    return None


def _match_header(text: str):
    """Return (name, params), "reject", or None when undecided."""
    arrow = _ARROW.search(text)
    if arrow:
        return arrow.group(1), arrow.group(2) or ""

    first = _FIRST_WORD.match(text)
    if first and first.group(0) in CONTROL_KEYWORDS:
        return "reject"
    if "=>" in text or _has_top_level_assignment(text):
        return "reject"

    for match in _HEADER_CALL.finditer(text):
        name = match.group(1)
        if name in _NOT_FUNCTION_NAMES:
            continue
        before = text[: match.start()].rstrip()
        if before.endswith(("@", ".")) or _NEW_PREFIX.search(text[: match.start()]):
            continue
        return name, _balanced(text, match.end() - 1)
    return None


def _has_top_level_assignment(text: str) -> bool:
    depth = 0
    for index, ch in enumerate(text):
        if ch in "([":
            depth += 1
        elif ch in ")]":
            depth = max(0, depth - 1)
        elif ch == "=" and depth == 0:
            prev = text[index - 1] if index else ""
            nxt = text[index + 1] if index + 1 < len(text) else ""
            if prev not in "=!<>+-*/%&|^" and nxt != "=":
                return True
    return False


def _balanced(text: str, open_index: int) -> str:
    """Text inside the parentheses opening at ``open_index``.

    Unbalanced input returns everything to the end of ``text``.
    """
    depth = 0
    for index in range(open_index, len(text)):
        ch = text[index]
        if ch == "(":
            depth += 1
        elif ch == ")":
            depth -= 1
            if depth == 0:
                return text[open_index + 1 : index]
    return text[open_index + 1 :]


@dataclass
class _IndentFrame:
    indent: int
    is_def: bool
    record: bool
    name: str
    start_line: int
    header_end: int


def _indent_functions(
    masked_lines: list[str],
    total_lines: int,
    max_depth: int,
    diagnostics: list[Diagnostic],
    string_lines: frozenset[int] = frozenset(),
) -> list[_RawFunction]:
    """Indentation-based block matching with an explicit frame stack.

    Lines that start inside a multi-line string never open or close a block,
    whatever their indentation.
    """
    stack: list[_IndentFrame] = []
    functions: list[_RawFunction] = []
    depth_reported = False
    pending: Optional[_IndentFrame] = None
    bracket_depth = 0
    bracket_opened_at = 0
    continued = False
    last_code_line = 0

    def close(frame: _IndentFrame, end_line: int) -> None:
        if not frame.record:
            return
        end_line = max(end_line, frame.header_end)
        header = "\n".join(masked_lines[frame.start_line - 1 : frame.header_end])
        paren = header.find("(")
        functions.append(
            _RawFunction(
                name=frame.name,
                params=_balanced(header, paren) if paren >= 0 else "",
                start_line=frame.start_line,
                body="\n".join(masked_lines[frame.header_end : end_line]),
                body_first_line=frame.header_end + 1,
                count_from=frame.header_end + 1,
                end_line=end_line,
            )
        )

    for number, code in enumerate(masked_lines[:total_lines], start=1):
        if not code.strip():
            continue

        if bracket_depth == 0 and not continued and number not in string_lines:
            indent = _indent_width(code)
            while stack and indent <= stack[-1].indent:
                close(stack.pop(), last_code_line)

            match = _PY_DEF.match(code)
            is_def = match is not None
            if match is None:
                match = _PY_CLASS.match(code)
            if match is not None:
                if len(stack) >= max_depth:
                    if not depth_reported:
                        diagnostics.append(
                            Diagnostic(
                                ErrorCode.SG102,
                                number,
                                f"nesting deeper than {max_depth} levels; inner blocks not analysed",
                            )
                        )
                        depth_reported = True
                else:
                    inside_def = any(frame.is_def for frame in stack)
                    frame = _IndentFrame(
                        indent=indent,
                        is_def=is_def,
                        record=is_def and not inside_def,
                        name=match.group(1),
                        start_line=number,
                        header_end=number,
                    )
                    stack.append(frame)
                    pending = frame

        if bracket_depth == 0:
            bracket_opened_at = number
        for ch in code:
            if ch in "([{":
                bracket_depth += 1
            elif ch in ")]}":
                bracket_depth = max(0, bracket_depth - 1)
        continued = code.rstrip().endswith("\\")

        if bracket_depth == 0 and not continued and pending is not None:
            pending.header_end = number
            pending = None
        last_code_line = number

    if bracket_depth > 0:
        diagnostics.append(
            Diagnostic(ErrorCode.SG100, bracket_opened_at, "bracket still open at end of input")
        )

    for frame in reversed(stack):
        close(frame, last_code_line)

    return functions


# ── Pass 3: per-function facts ─────────────────────────────────────


def _build_function(
    raw: _RawFunction,
    lang: LanguageConfig,
    config: CheckerConfig,
    lines: list[str],
    comment_lines: frozenset[int],
) -> Function:
    body = raw.body
    base = raw.body_first_line

    def line_of(pos: int) -> int:
        return base + body.count("\n", 0, pos)

    last_counted = raw.end_line if (raw.truncated or lang.block_mode == "indent") else raw.end_line - 1
    body_line_count = sum(
        1 for number in range(raw.count_from, last_counted + 1)
        if number <= len(lines) and lines[number - 1].strip()
    )

    assertions: list[AssertionSite] = []
    allocations: list[tuple[int, str]] = []
    allocation_markers = set(config.allocation_markers)
    for match in _CALL.finditer(body):
        name = match.group(1)
        start = match.start(1)
        if _DEFINITION_PREFIX.search(body[max(0, start - 12) : start]):
            continue
        if name not in CONTROL_KEYWORDS and any(
            fnmatchcase(name, marker) for marker in config.assertion_markers
        ):
            assertions.append(AssertionSite(line_of(start), name))
        if name in allocation_markers and not _member_access(body, start):
            allocations.append((line_of(start), name))
    if lang.block_mode == "indent":
        for match in _PY_ASSERT.finditer(body):
            assertions.append(AssertionSite(line_of(match.start()), "assert"))
    assertions.sort(key=lambda site: (site.line, site.marker))

    loops, conditions = _loops_and_conditions(body, line_of, lang)

    self_calls = tuple(
        line_of(match.start())
        for match in _self_call_pattern(raw.name).finditer(body)
        if not _NEW_PREFIX.search(body[max(0, match.start() - 8) : match.start()])
        and not _DEFINITION_PREFIX.search(body[max(0, match.start() - 12) : match.start()])
    )

    jumps = tuple(
        (line_of(match.start()), match.group(1) or "goto") for match in _JUMP.finditer(body)
    )

    return Function(
        name=raw.name,
        start_line=raw.start_line,
        end_line=raw.end_line,
        body_line_count=body_line_count,
        assertions=tuple(assertions),
        loops=tuple(loops),
        conditions=tuple(conditions),
        identifiers=_identifiers(raw, body, line_of, lang),
        self_calls=self_calls,
        jumps=jumps,
        allocations=tuple(allocations),
        has_leading_comment=_has_leading_comment(raw, lang, lines, comment_lines),
        truncated=raw.truncated,
    )


def _member_access(text: str, start: int) -> bool:
    before = text[max(0, start - 2) : start]
    return before.endswith(".") or before.endswith("->")


def _self_call_pattern(name: str) -> re.Pattern:
    escaped = re.escape(name)
    return re.compile(
        r"(?<![\w$.>])" + escaped + r"\s*\(|\b(?:self|this)\s*(?:\.|->)\s*" + escaped + r"\s*\("
    )


def _loops_and_conditions(body: str, line_of, lang: LanguageConfig):
    loops: list[LoopSite] = []
    conditions: list[ConditionSite] = []

    if lang.block_mode == "indent":
        for match in _PY_STATEMENT.finditer(body):
            keyword = match.group(1)
            line = line_of(match.start(1))
            clause, _ = _clause_after(body, match.end(), lang)
            clause = " ".join(clause.split())
            if keyword == "for":
                loops.append(LoopSite(line, "for", clause, _for_is_bounded(clause, lang)))
                continue
            conditions.append(ConditionSite(line, keyword, clause, bool(LOGICAL.search(clause))))
            if keyword == "while":
                loops.append(LoopSite(line, "while", clause, bool(RELATIONAL.search(clause))))
        return loops, conditions

    keywords = "|".join(sorted(set(lang.loop_keywords) | {"if"}))
    pending_do: list[int] = []
    for match in re.finditer(r"\b(" + keywords + r")\b", body):
        keyword = match.group(1)
        line = line_of(match.start(1))

        if keyword == "do":
            pending_do.append(line)
            continue
        if keyword == "loop":
            loops.append(LoopSite(line, "loop", "", False))
            continue

        clause, end = _clause_after(body, match.end(), lang)
        clause = " ".join(clause.split())

        if keyword == "if":
            if _ELSE_PREFIX.search(body[max(0, match.start() - 12) : match.start()]):
                keyword = "else if"
            conditions.append(ConditionSite(line, keyword, clause, bool(LOGICAL.search(clause))))
        elif keyword == "while":
            conditions.append(ConditionSite(line, "while", clause, bool(LOGICAL.search(clause))))
            bounded = bool(RELATIONAL.search(clause))
            if pending_do and body[end:].lstrip().startswith(";"):
                loops.append(LoopSite(pending_do.pop(), "do", clause, bounded))
            else:
                loops.append(LoopSite(line, "while", clause, bounded))
        else:
            loops.append(LoopSite(line, "for", clause, _for_is_bounded(clause, lang)))

    # do-blocks whose while-tail never appeared
    for line in pending_do:
        loops.append(LoopSite(line, "do", "", False))

    loops.sort(key=lambda site: (site.line, site.keyword))
    return loops, conditions


def _clause_after(body: str, pos: int, lang: LanguageConfig) -> tuple[str, int]:
    """Condition / iteration clause following a keyword.

    Parenthesised languages take the balanced parentheses. Others read up
    to the block opener ('{' or ':') at bracket depth zero.

    Returns:
        (clause text, index just past the clause)
    """
    index = pos
    while index < len(body) and body[index] in " \t\n":
        index += 1

    if lang.parenthesised_conditions and index < len(body) and body[index] == "(":
        depth = 0
        for end in range(index, len(body)):
            if body[end] == "(":
                depth += 1
            elif body[end] == ")":
                depth -= 1
                if depth == 0:
                    return body[index + 1 : end], end + 1
        return body[index + 1 :], len(body)

    opener = ":" if lang.block_mode == "indent" else "{"
    depth = 0
    for end in range(index, len(body)):
        ch = body[end]
        if ch in "([":
            depth += 1
        elif ch in ")]":
            depth = max(0, depth - 1)
        elif depth == 0 and ch == opener:
            return body[index:end], end
        elif depth == 0 and ch == "\n" and lang.block_mode == "indent":
            return body[index:end], end
    return body[index:], len(body)


def _split_top_level(text: str, separator: str, angle: bool = False) -> list[str]:
    openers = "([{<" if angle else "([{"
    closers = ")]}>" if angle else ")]}"
    parts: list[str] = []
    depth = 0
    current: list[str] = []
    for ch in text:
        if ch in openers:
            depth += 1
        elif ch in closers:
            depth = max(0, depth - 1)
        if ch == separator and depth == 0:
            parts.append("".join(current))
            current = []
            continue
        current.append(ch)
    parts.append("".join(current))
    return parts


def _for_is_bounded(clause: str, lang: LanguageConfig) -> bool:
    text = clause.strip()
    if not text:
        # for (;;) reaches here only via the clause split below; Go "for {"
        return False

    clauses = _split_top_level(text, ";")
    if len(clauses) >= 3:
        return bool(RELATIONAL.search(clauses[1]))

    if lang.block_mode == "indent":
        return not _PY_INFINITE_ITER.search(text)

    if re.search(r"\brange\b", text):
        return True
    if re.search(r"\b(?:in|of)\b", text) or _FOREACH_COLON.search(text):
        return not _OPEN_RANGE.search(text)

    return bool(RELATIONAL.search(text))


def _identifiers(raw: _RawFunction, body: str, line_of, lang: LanguageConfig) -> tuple[Identifier, ...]:
    found: list[Identifier] = [Identifier(raw.name, raw.start_line, "function")]

    for piece in _split_top_level(raw.params, ",", angle=lang.param_style != "name_first"):
        name = _param_name(piece, lang.param_style)
        if name:
            found.append(Identifier(name, raw.start_line, "parameter"))

    for pattern in lang.declaration_patterns:
        for match in re.finditer(pattern, body):
            name = match.group(1)
            if name in _NOT_FUNCTION_NAMES or name in _SKIPPED_PARAMS:
                continue
            found.append(Identifier(name, line_of(match.start(1)), "variable"))

    found.sort(key=lambda ident: (ident.line, ident.kind, ident.name))
    return tuple(found)


def _param_name(piece: str, style: str) -> Optional[str]:
    piece = piece.split("=", 1)[0].strip()
    if not piece or piece in ("...", "*", "/"):
        return None

    if style == "name_colon":
        words = _WORD.findall(piece.split(":", 1)[0])
        name = words[-1] if words else None
    elif style == "name_first":
        words = _WORD.findall(piece)
        name = words[0] if words else None
    else:
        words = _WORD.findall(re.sub(r"\[[^\]]*\]", "", piece))
        name = words[-1] if words else None

    if name is None or name in _SKIPPED_PARAMS:
        return None
    return name


def _has_leading_comment(
    raw: _RawFunction, lang: LanguageConfig, lines: list[str], comment_lines: frozenset[int]
) -> bool:
    if raw.start_line in comment_lines:
        return True

    if lang.block_mode == "indent":
        for number in range(raw.count_from, raw.end_line + 1):
            text = lines[number - 1] if number <= len(lines) else ""
            if text.strip():
                if _DOCSTRING.match(text):
                    return True
                break

    # Nearest line above the header, skipping decorators/annotations
    for number in range(raw.start_line - 1, 0, -1):
        text = lines[number - 1].strip()
        if text.startswith("@"):
            continue
        return number in comment_lines
    return False
