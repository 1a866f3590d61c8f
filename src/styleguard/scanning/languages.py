"""Language configurations: the single source of truth for language syntax.

Adding a new language:
  1. Add a LanguageConfig entry to LANGUAGES below.
  2. That's it. The scanner picks it up through detect_language().
"""

from __future__ import annotations

from dataclasses import dataclass, field
from pathlib import Path
from typing import Optional

DEFAULT_LANGUAGE = "c"


@dataclass(frozen=True)
class LanguageConfig:
    """Everything the scanner needs to know about a language."""

    name: str
    extensions: tuple[str, ...]

    # "brace" (blocks delimited by {}) or "indent" (blocks by indentation)
    block_mode: str = "brace"

    # Comment syntax
    line_comments: tuple[str, ...] = ("//",)
    block_comment: Optional[tuple[str, str]] = ("/*", "*/")

    # String delimiters. Multi-line delimiters may span newlines; the rest
    # end at an unescaped newline.
    string_delimiters: tuple[str, ...] = ('"', "'")
    multiline_delimiters: tuple[str, ...] = ()
    raw_delimiters: tuple[str, ...] = ()  # no backslash escapes inside

    # Lines starting with '#' are preprocessor directives
    preprocessor: bool = False

    # Loop keywords recognised by the scanner
    loop_keywords: tuple[str, ...] = ("for", "while", "do")

    # True when loop/if conditions are always parenthesised
    parenthesised_conditions: bool = True

    # Parameter syntax: "type_first" (int x), "name_colon" (x: int),
    # "name_first" (x int)
    param_style: str = "type_first"

    # Local variable declarations. Group 1 is the declared name.
    declaration_patterns: tuple[str, ...] = field(default_factory=tuple)


# ── Re-usable building blocks ──────────────────────────────────────

_C_TYPE = (
    r"(?:(?:const|static|unsigned|signed|long|short|volatile|register|final)\s+)*"
    r"(?:int|char|short|long|float|double|bool|boolean|byte|size_t|ssize_t"
    r"|u?int(?:8|16|32|64)_t|auto|var|let|const|String)"
)
_C_DECLARATION = r"\b" + _C_TYPE + r"\b\s*\**\s*([A-Za-z_]\w*)\s*(?=[=;,\[)])"
_JS_DECLARATION = r"\b(?:const|let|var)\s+([A-Za-z_$][\w$]*)\s*(?=[=;,:])"


# ── Language definitions ───────────────────────────────────────────

LANGUAGES = {
    "c": LanguageConfig(
        name="c",
        extensions=(".c", ".h"),
        preprocessor=True,
        declaration_patterns=(_C_DECLARATION,),
    ),
    "cpp": LanguageConfig(
        name="cpp",
        extensions=(".cc", ".cpp", ".cxx", ".hh", ".hpp", ".hxx"),
        preprocessor=True,
        declaration_patterns=(_C_DECLARATION,),
    ),
    "java": LanguageConfig(
        name="java",
        extensions=(".java",),
        declaration_patterns=(_C_DECLARATION,),
    ),
    "javascript": LanguageConfig(
        name="javascript",
        extensions=(".js", ".jsx", ".mjs", ".cjs"),
        multiline_delimiters=("`",),
        declaration_patterns=(_JS_DECLARATION,),
    ),
    "typescript": LanguageConfig(
        name="typescript",
        extensions=(".ts", ".tsx"),
        multiline_delimiters=("`",),
        param_style="name_colon",
        declaration_patterns=(_JS_DECLARATION,),
    ),
    "go": LanguageConfig(
        name="go",
        extensions=(".go",),
        string_delimiters=('"', "'"),
        multiline_delimiters=("`",),
        raw_delimiters=("`",),
        loop_keywords=("for",),
        parenthesised_conditions=False,
        param_style="name_first",
        declaration_patterns=(
            r"\b([A-Za-z_]\w*)\s*:=",
            r"\bvar\s+([A-Za-z_]\w*)",
        ),
    ),
    "rust": LanguageConfig(
        name="rust",
        extensions=(".rs",),
        # Single quotes also mark lifetimes ('a), so only double quotes
        string_delimiters=('"',),
        multiline_delimiters=('"',),
        loop_keywords=("for", "while", "loop"),
        parenthesised_conditions=False,
        param_style="name_colon",
        declaration_patterns=(r"\blet\s+(?:mut\s+)?([A-Za-z_]\w*)",),
    ),
    "python": LanguageConfig(
        name="python",
        extensions=(".py", ".pyi"),
        block_mode="indent",
        line_comments=("#",),
        block_comment=None,
        string_delimiters=('"""', "'''", '"', "'"),
        multiline_delimiters=('"""', "'''"),
        loop_keywords=("for", "while"),
        parenthesised_conditions=False,
        param_style="name_colon",
        declaration_patterns=(r"(?m)^[ \t]*([A-Za-z_]\w*)[ \t]*(?::[^=\n]*)?=(?!=)",),
    ),
}


_EXTENSION_MAP = {ext: lang for lang, cfg in LANGUAGES.items() for ext in cfg.extensions}


def supported_extensions() -> frozenset[str]:
    """All file extensions the scanner understands."""
    return frozenset(_EXTENSION_MAP)


def detect_language(path: Optional[Path | str]) -> str:
    """Language name for a file path (by extension), C when unknown."""
    if path is None:
        return DEFAULT_LANGUAGE
    suffix = Path(str(path)).suffix.lower()
    return _EXTENSION_MAP.get(suffix, DEFAULT_LANGUAGE)


def get_language(name: Optional[str]) -> LanguageConfig:
    """Look up a language by name, falling back to C."""
    if name is None:
        return LANGUAGES[DEFAULT_LANGUAGE]
    return LANGUAGES.get(name.lower(), LANGUAGES[DEFAULT_LANGUAGE])
