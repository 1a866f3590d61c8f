"""Error codes for diagnostics and fatal errors.

Error Code Convention:
    SG1xx - Scanning diagnostics (input parsed only partially)
    SG2xx - Input errors (file could not be read)
    SG7xx - Internal invariant violations
"""

from __future__ import annotations

from enum import Enum


class ErrorCode(Enum):
    """Structured error codes for reports and logs."""

    # Scanning diagnostics (SG1xx)
    SG100 = "SG100"  # Unterminated block at end of input
    SG101 = "SG101"  # Unmatched closing brace
    SG102 = "SG102"  # Maximum nesting depth exceeded
    SG103 = "SG103"  # Unterminated comment
    SG104 = "SG104"  # Unterminated string literal
    SG105 = "SG105"  # Undecodable bytes replaced

    # Input errors (SG2xx)
    SG200 = "SG200"  # File read error
    SG201 = "SG201"  # Path does not exist
    SG202 = "SG202"  # File exceeds size limit

    # Internal invariants (SG7xx)
    SG700 = "SG700"  # Finding references unknown rule id
    SG701 = "SG701"  # Severity outside the total order

    @property
    def is_partial_scan(self) -> bool:
        return self.value.startswith("SG1")
