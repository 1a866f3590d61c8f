"""Configuration loading and management for styleguard.

This module provides configuration discovery and validation. Configuration
sources are merged in priority order:
    1. Defaults (defined in CheckerConfig)
    2. Global config (~/.styleguard.toml)
    3. Project config (./styleguard.toml)
    4. Explicit config file
    5. Environment variables (STYLEGUARD_* prefix)
    6. CLI overrides (passed as kwargs)

Example:
    >>> config = load_config(function_length_max=60)
    >>> config.function_length_max
    60
    >>> config.assertion_min
    2
"""

from __future__ import annotations

import os
import re
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Literal, Optional, get_type_hints

from .exceptions import ConfigurationError, InvalidConfigError, InvalidPathError
from .rules.models import Rule, Severity

# Type aliases for clarity
NamingConvention = Literal["snake_case", "camelCase", "PascalCase", "any"]

NAMING_CONVENTIONS = ("snake_case", "camelCase", "PascalCase", "any")

DEFAULT_ABBREVIATION_DENYLIST = frozenset(
    {
        "arr", "btn", "buf", "cb", "cfg", "cnt", "ctr", "ctx", "cur", "dst",
        "err", "fn", "func", "hdr", "hndl", "idx", "itm", "lst", "mgr", "msg",
        "num", "obj", "pkt", "prev", "ptr", "pwd", "qty", "rec", "req", "res",
        "ret", "sz", "src", "str", "tbl", "tmp", "usr", "val", "var",
    }
)

DEFAULT_ABBREVIATION_ALLOWLIST = frozenset(
    {
        "api", "cpu", "csv", "db", "fd", "gpu", "html", "http", "https", "id",
        "io", "ip", "json", "max", "min", "ok", "os", "rgb", "sql", "std",
        "tcp", "udp", "ui", "uri", "url", "utf", "xml",
    }
)


@dataclass(frozen=True)
class GrayAreaPattern:
    """An exception pattern that downgrades a finding to a gray area.

    Matched (regex search, case-insensitive) against the flagged line and
    the ``gray_area_window`` lines above it.

    Attributes:
        pattern: Regular expression
        rules: Rule ids the pattern applies to (empty = every rule)
        note: Label shown next to the justification in reports
    """

    pattern: str
    rules: tuple[str, ...] = ()
    note: str = ""

    def __post_init__(self) -> None:
        if not self.pattern:
            raise InvalidConfigError("gray_area.pattern", self.pattern, "pattern must not be empty")
        try:
            re.compile(self.pattern)
        except re.error as e:
            raise InvalidConfigError("gray_area.pattern", self.pattern, f"invalid regex: {e}")
        object.__setattr__(self, "rules", tuple(self.rules))

    def applies_to(self, rule_id: str) -> bool:
        return not self.rules or rule_id in self.rules

    def search(self, text: str) -> Optional[str]:
        """Return the matched text, or None."""
        match = re.search(self.pattern, text, re.IGNORECASE)
        return match.group(0) if match else None


DEFAULT_GRAY_AREAS = (
    GrayAreaPattern(r"\bjustif(?:y|ied|ication)\s*:", note="documented justification"),
    GrayAreaPattern(r"styleguard:\s*allow\b", note="inline allow"),
)


@dataclass(frozen=True)
class CheckerConfig:
    """Configuration for a styleguard run.

    All fields have defaults taken from the style guide. Users typically
    override only a few via CLI flags or a ``styleguard.toml`` file.

    Attributes:
        Thresholds:
            line_length_max: Longest allowed line (columns, tabs expanded)
            function_length_max: Longest allowed function body (non-blank lines)
            assertion_min: Minimum assertion call sites per function
            comment_required_over: Body size above which a leading comment is required

        Naming:
            naming_convention: snake_case, camelCase, PascalCase or any
            abbreviation_allowlist: Words never reported as abbreviations
            abbreviation_denylist: Words always reported as abbreviations
            flag_vowelless_words: Also report words of 3+ letters with no vowel

        Detection markers:
            assertion_markers: Glob patterns for assertion call tokens
            allocation_markers: Heap allocation call tokens
            allocation_allowed_functions: Function-name globs where allocation is allowed

        Gray areas:
            event_loop_marker: Annotation that exempts an unbounded loop
            gray_areas: Exception patterns that downgrade findings
            gray_area_window: Lines above the flagged line searched for patterns

        Rule selection:
            severity_overrides: rule id -> severity name
            disabled_rules: Rule ids that are never evaluated
            enabled_rules: Opt-in rule ids to evaluate (e.g. missing-comment)

        Scanner limits:
            max_nesting_depth: Deepest block nesting tracked before giving up
            tab_width: Columns per tab when measuring lines

        Batch:
            workers: Parallel worker threads (None = auto-detect)
            exclude_patterns: Glob patterns skipped while walking directories
            max_file_size_mb: Larger files are reported as input errors
            allow_hidden_files: Walk into dot-files and dot-directories
    """

    # Thresholds
    line_length_max: int = 80
    function_length_max: int = 70
    assertion_min: int = 2
    comment_required_over: int = 10

    # Naming
    naming_convention: NamingConvention = "snake_case"
    abbreviation_allowlist: frozenset[str] = DEFAULT_ABBREVIATION_ALLOWLIST
    abbreviation_denylist: frozenset[str] = DEFAULT_ABBREVIATION_DENYLIST
    flag_vowelless_words: bool = True

    # Detection markers
    assertion_markers: tuple[str, ...] = (
        "assert",
        "assert*",
        "*_assert",
        "ASSERT*",
        "static_assert",
    )
    allocation_markers: tuple[str, ...] = ("malloc", "calloc", "realloc", "alloca", "free")
    allocation_allowed_functions: tuple[str, ...] = ("*init*", "setup*", "main")

    # Gray areas
    event_loop_marker: str = "intentional event loop"
    gray_areas: tuple[GrayAreaPattern, ...] = DEFAULT_GRAY_AREAS
    gray_area_window: int = 1

    # Rule selection
    severity_overrides: dict[str, str] = field(default_factory=dict)
    disabled_rules: frozenset[str] = frozenset()
    enabled_rules: frozenset[str] = frozenset()

    # Scanner limits
    max_nesting_depth: int = 64
    tab_width: int = 4

    # Batch
    workers: Optional[int] = None
    exclude_patterns: tuple[str, ...] = (
        ".git/*",
        "node_modules/*",
        "vendor/*",
        "build/*",
        "dist/*",
        "__pycache__/*",
        ".venv/*",
        "venv/*",
        "*.min.js",
        "*.generated.*",
    )
    max_file_size_mb: float = 10.0
    allow_hidden_files: bool = False

    def __post_init__(self) -> None:
        """Normalize collection fields and validate values."""
        # TOML and CLI hand us lists; store immutable, order-stable forms
        object.__setattr__(self, "abbreviation_allowlist", _lower_set(self.abbreviation_allowlist))
        object.__setattr__(self, "abbreviation_denylist", _lower_set(self.abbreviation_denylist))
        object.__setattr__(self, "assertion_markers", tuple(self.assertion_markers))
        object.__setattr__(self, "allocation_markers", tuple(self.allocation_markers))
        object.__setattr__(
            self, "allocation_allowed_functions", tuple(self.allocation_allowed_functions)
        )
        object.__setattr__(self, "exclude_patterns", tuple(self.exclude_patterns))
        object.__setattr__(self, "disabled_rules", frozenset(self.disabled_rules))
        object.__setattr__(self, "enabled_rules", frozenset(self.enabled_rules))
        object.__setattr__(self, "gray_areas", tuple(_as_gray_area(g) for g in self.gray_areas))
        object.__setattr__(self, "severity_overrides", dict(self.severity_overrides))

        for name in ("line_length_max", "function_length_max", "max_nesting_depth", "tab_width"):
            value = getattr(self, name)
            if not isinstance(value, int) or value < 1:
                raise InvalidConfigError(name, value, "must be a positive integer")
        for name in ("assertion_min", "comment_required_over", "gray_area_window"):
            value = getattr(self, name)
            if not isinstance(value, int) or value < 0:
                raise InvalidConfigError(name, value, "must be a non-negative integer")

        if self.naming_convention not in NAMING_CONVENTIONS:
            raise InvalidConfigError(
                "naming_convention",
                self.naming_convention,
                f"must be one of {', '.join(NAMING_CONVENTIONS)}",
            )

        for rule_id, severity in self.severity_overrides.items():
            try:
                Severity.parse(severity)
            except ValueError as e:
                raise InvalidConfigError(f"severity_overrides.{rule_id}", severity, str(e))

        if self.workers is not None and self.workers < 1:
            raise InvalidConfigError("workers", self.workers, "must be at least 1")
        if self.max_file_size_mb <= 0:
            raise InvalidConfigError("max_file_size_mb", self.max_file_size_mb, "must be positive")

    @property
    def max_file_size_bytes(self) -> int:
        """Get max file size in bytes."""
        return int(self.max_file_size_mb * 1024 * 1024)

    @property
    def effective_gray_areas(self) -> tuple[GrayAreaPattern, ...]:
        """Configured gray-area patterns, event-loop marker first."""
        if not self.event_loop_marker:
            return self.gray_areas
        marker = GrayAreaPattern(
            re.escape(self.event_loop_marker),
            rules=("unbounded-loop",),
            note="event loop exemption",
        )
        return (marker,) + self.gray_areas

    def severity_for(self, rule_id: str, default: Severity) -> Severity:
        """Effective severity of a rule after overrides."""
        override = self.severity_overrides.get(rule_id)
        if override is None:
            return default
        return Severity.parse(override)

    def is_enabled(self, rule: Rule) -> bool:
        """True if the rule runs: on by default or opted in, and not disabled."""
        if rule.id in self.disabled_rules:
            return False
        return rule.default_enabled or rule.id in self.enabled_rules

    def validate_rule_ids(self, known_ids: set[str]) -> None:
        """Check that overrides and disabled rules name registered rules.

        Raises:
            InvalidConfigError: If an unknown rule id is referenced
        """
        referenced = set(self.severity_overrides) | self.disabled_rules | self.enabled_rules
        for rule_id in sorted(referenced):
            if rule_id not in known_ids:
                raise InvalidConfigError("rule", rule_id, "no such rule in the registry")
        for gray in self.gray_areas:
            for rule_id in gray.rules:
                if rule_id not in known_ids:
                    raise InvalidConfigError("gray_area.rules", rule_id, "no such rule in the registry")


def _lower_set(values) -> frozenset[str]:
    if isinstance(values, str):
        values = [values]
    return frozenset(str(v).lower() for v in values)


def _as_gray_area(value: Any) -> GrayAreaPattern:
    if isinstance(value, GrayAreaPattern):
        return value
    if isinstance(value, str):
        return GrayAreaPattern(value)
    if isinstance(value, dict):
        unknown = set(value) - {"pattern", "rules", "note"}
        if unknown:
            raise InvalidConfigError("gray_area", ", ".join(sorted(unknown)), "unknown keys")
        return GrayAreaPattern(
            pattern=value.get("pattern", ""),
            rules=tuple(value.get("rules", ())),
            note=value.get("note", ""),
        )
    raise InvalidConfigError("gray_area", value, "expected a table with a 'pattern' key")


# Default configuration (singleton)
DEFAULT_CONFIG = CheckerConfig()


def load_config(config_file: Optional[Path] = None, **overrides) -> CheckerConfig:
    """Load configuration with auto-discovery and merging.

    Args:
        config_file: Optional explicit config file path
        **overrides: Direct overrides (typically from CLI flags). ``allow``
            adds words to the abbreviation allowlist instead of replacing it.

    Returns:
        Validated CheckerConfig instance

    Raises:
        ConfigurationError: If a config file is missing or invalid

    Example:
        >>> config = load_config(allow=["tmp"])
        >>> "tmp" in config.abbreviation_allowlist
        True
    """
    # Start with empty dict - dataclass defaults will fill in
    merged: dict = {}

    # 1. Try global config
    global_config = Path.home() / ".styleguard.toml"
    if global_config.exists():
        merged.update(_load_toml_section(global_config))

    # 2. Try project config
    project_config = Path.cwd() / "styleguard.toml"
    if project_config.exists():
        merged.update(_load_toml_section(project_config))

    # 3. Explicit config file (highest priority from files)
    if config_file is not None:
        if not config_file.exists():
            raise InvalidPathError(config_file, "config file not found")
        merged.update(_load_toml_section(config_file))

    # 4. Environment variables (STYLEGUARD_* prefix)
    merged.update(_load_env_vars())

    # 5. CLI overrides (highest priority); None means "flag not given"
    overrides = {k: v for k, v in overrides.items() if v is not None}
    extra_allow = overrides.pop("allow", None)
    merged.update(overrides)
    if extra_allow:
        base = merged.get("abbreviation_allowlist", DEFAULT_ABBREVIATION_ALLOWLIST)
        merged["abbreviation_allowlist"] = _lower_set(base) | _lower_set(extra_allow)

    # [[gray_area]] array of tables maps onto gray_areas
    if "gray_area" in merged:
        merged["gray_areas"] = tuple(merged.pop("gray_area"))

    try:
        return CheckerConfig(**merged)
    except TypeError as e:
        # Unknown field in config
        raise ConfigurationError(f"Invalid configuration: {e}")


def _load_env_vars() -> dict[str, Any]:
    """Load configuration from STYLEGUARD_* environment variables.

    Only scalar fields are read (e.g. STYLEGUARD_LINE_LENGTH_MAX=100,
    STYLEGUARD_NAMING_CONVENTION=camelCase). Collection fields are
    config-file only.

    Returns:
        Dict of field_name -> parsed_value for any STYLEGUARD_* vars found.
    """
    type_hints = get_type_hints(CheckerConfig)

    result: dict[str, Any] = {}

    for field_name in CheckerConfig.__dataclass_fields__:
        env_key = f"STYLEGUARD_{field_name.upper()}"
        env_value = os.environ.get(env_key)

        if env_value is None:
            continue

        type_hint = type_hints.get(field_name)
        if type_hint is None:
            continue

        try:
            parsed = _parse_env_value(env_value, type_hint)
        except ValueError as e:
            raise InvalidConfigError(env_key, env_value, str(e))
        if parsed is not None:
            result[field_name] = parsed

    return result


def _parse_env_value(value: str, type_hint: Any) -> Any:
    """Parse environment variable string to the correct type.

    Returns:
        Parsed value or None for types that cannot come from the environment

    Raises:
        ValueError: If value can't be parsed to expected type
    """
    origin = getattr(type_hint, "__origin__", None)

    # Handle Optional[X] which is Union[X, None]
    args = getattr(type_hint, "__args__", ())
    if type(None) in args:
        non_none_types = [t for t in args if t is not type(None)]
        if non_none_types:
            type_hint = non_none_types[0]
            origin = getattr(type_hint, "__origin__", None)

    # Bool: accept true/false/1/0/yes/no
    if type_hint is bool:
        lower = value.lower()
        if lower in ("true", "1", "yes", "on"):
            return True
        elif lower in ("false", "0", "no", "off"):
            return False
        else:
            raise ValueError(f"expected true/false, got '{value}'")

    if type_hint is int:
        return int(value)

    if type_hint is float:
        return float(value)

    # String (including Literal types like NamingConvention)
    if type_hint is str or origin is Literal:
        return value

    # Collections are config-file only
    return None


def _load_toml_section(path: Path) -> dict:
    """Load a config file, wrapping parse errors."""
    try:
        return _load_toml_file(path)
    except ConfigurationError:
        raise
    except Exception as e:
        raise ConfigurationError(f"Invalid config file '{path}': {e}")


def _load_toml_file(path: Path) -> dict:
    """Load TOML file and return parsed dict.

    Raises:
        ConfigurationError: If tomllib/tomli not available
        Exception: If TOML parsing fails
    """
    try:
        # Python 3.11+ has tomllib in stdlib
        import tomllib
    except ModuleNotFoundError:
        try:
            # Fallback to tomli for Python 3.9-3.10
            import tomli as tomllib  # type: ignore
        except ImportError:
            raise ConfigurationError(
                "TOML support requires Python 3.11+ or 'tomli' package. "
                "Install with: pip install tomli"
            )

    with open(path, "rb") as f:
        return tomllib.load(f)
