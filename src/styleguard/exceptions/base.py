"""Root of the styleguard exception hierarchy."""

from typing import TYPE_CHECKING, Any, Dict, Optional

if TYPE_CHECKING:
    from .taxonomy import ErrorCode


class StyleGuardError(Exception):
    """Base exception for all styleguard errors.

    Attributes:
        message: One-line description, shown first on the CLI error line
        details: Key/value context, values stored as strings
        code: Taxonomy code for errors that appear in reports, else None
    """

    def __init__(
        self,
        message: str,
        details: Optional[Dict[str, Any]] = None,
        code: Optional["ErrorCode"] = None,
    ):
        super().__init__(message)
        self.message = message
        self.details = {key: str(value) for key, value in (details or {}).items()}
        self.code = code

    def __str__(self) -> str:
        text = f"[{self.code.value}] {self.message}" if self.code else self.message
        if self.details:
            details_str = ", ".join(f"{k}={v}" for k, v in self.details.items())
            return f"{text} ({details_str})"
        return text
