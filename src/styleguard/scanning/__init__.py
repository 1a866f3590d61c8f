"""Source scanning: language table, scanner and file discovery."""

from .discovery import discover_files, read_source, should_skip_file
from .languages import LANGUAGES, LanguageConfig, detect_language, get_language, supported_extensions
from .models import (
    AssertionSite,
    ConditionSite,
    Diagnostic,
    Function,
    Identifier,
    LoopSite,
    SourceUnit,
)
from .scanner import scan

__all__ = [
    "scan",
    "discover_files",
    "read_source",
    "should_skip_file",
    "LANGUAGES",
    "LanguageConfig",
    "detect_language",
    "get_language",
    "supported_extensions",
    "AssertionSite",
    "ConditionSite",
    "Diagnostic",
    "Function",
    "Identifier",
    "LoopSite",
    "SourceUnit",
]
