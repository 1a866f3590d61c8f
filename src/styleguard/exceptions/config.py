"""Configuration exceptions: options, rule registry, paths.

Every error in this module is fatal: the process exits before any file is
scanned.
"""

from pathlib import Path
from typing import Any

from .base import StyleGuardError


class ConfigurationError(StyleGuardError):
    """Base class for configuration-related errors."""

    pass


class InvalidPathError(ConfigurationError):
    """Raised when a provided config path is invalid."""

    def __init__(self, path: Path, reason: str):
        super().__init__(f"Invalid path: {path}", details={"path": str(path), "reason": reason})
        self.path = path
        self.reason = reason


class InvalidConfigError(ConfigurationError):
    """Raised when configuration values are invalid."""

    def __init__(self, key: str, value: Any, reason: str):
        super().__init__(
            f"Invalid configuration for {key}: {value}",
            details={"key": key, "value": str(value), "reason": reason},
        )
        self.key = key
        self.value = value
        self.reason = reason


class RegistryError(ConfigurationError):
    """Raised when the rule table is malformed (duplicate id, bad severity...)."""

    def __init__(self, rule_id: str, reason: str):
        super().__init__(
            f"Malformed rule registry entry: {rule_id}",
            details={"rule": rule_id, "reason": reason},
        )
        self.rule_id = rule_id
        self.reason = reason
