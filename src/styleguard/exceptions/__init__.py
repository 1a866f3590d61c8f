"""Exception hierarchy for styleguard."""

from .analysis import AnalysisError, InputError, InternalInvariantViolation
from .base import StyleGuardError
from .config import (
    ConfigurationError,
    InvalidConfigError,
    InvalidPathError,
    RegistryError,
)
from .taxonomy import ErrorCode

__all__ = [
    "StyleGuardError",
    "AnalysisError",
    "InputError",
    "InternalInvariantViolation",
    "ConfigurationError",
    "InvalidPathError",
    "InvalidConfigError",
    "RegistryError",
    "ErrorCode",
]
