"""Analysis-related exceptions: unreadable input, checker defects."""

from pathlib import Path

from .base import StyleGuardError
from .taxonomy import ErrorCode


class AnalysisError(StyleGuardError):
    """Base class for analysis-related errors."""
    pass


class InputError(AnalysisError):
    """Raised when a source file or path cannot be read.

    Recoverable: the pipeline records the error, skips the file and keeps
    going with the rest of the batch.
    """

    def __init__(self, filepath: Path, reason: str, code: ErrorCode = ErrorCode.SG200):
        super().__init__(
            f"Cannot read input: {filepath}",
            details={"filepath": filepath, "reason": reason},
            code=code,
        )
        self.filepath = filepath
        self.reason = reason


class InternalInvariantViolation(AnalysisError):
    """Raised when the checker breaks one of its own invariants.

    Never recoverable. Indicates a defect in styleguard itself, e.g. a
    finding that references a rule missing from the registry.
    """

    def __init__(self, code: ErrorCode, reason: str):
        super().__init__(
            f"Internal invariant violated: {reason}",
            code=code,
        )
        self.reason = reason
