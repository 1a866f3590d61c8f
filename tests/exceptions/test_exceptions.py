"""Tests for the exception hierarchy and error codes."""

from pathlib import Path

from styleguard.exceptions import (
    AnalysisError,
    ConfigurationError,
    ErrorCode,
    InputError,
    InternalInvariantViolation,
    InvalidConfigError,
    RegistryError,
    StyleGuardError,
)


class TestErrorCode:
    def test_partial_scan_codes(self):
        assert all(code.is_partial_scan for code in ErrorCode if code.value.startswith("SG1"))
        assert not ErrorCode.SG200.is_partial_scan
        assert not ErrorCode.SG700.is_partial_scan

    def test_values_match_names(self):
        for code in ErrorCode:
            assert code.value == code.name


class TestHierarchy:
    def test_configuration_errors_are_fatal_family(self):
        assert issubclass(InvalidConfigError, ConfigurationError)
        assert issubclass(RegistryError, ConfigurationError)
        assert issubclass(ConfigurationError, StyleGuardError)

    def test_analysis_errors(self):
        assert issubclass(InputError, AnalysisError)
        assert issubclass(InternalInvariantViolation, AnalysisError)

    def test_details_in_str(self):
        error = InputError(Path("missing.c"), "path does not exist", ErrorCode.SG201)
        text = str(error)
        assert "missing.c" in text
        assert "SG201" in text
        assert error.code is ErrorCode.SG201

    def test_registry_error_fields(self):
        error = RegistryError("dup", "duplicate rule id")
        assert error.rule_id == "dup"
        assert error.details["reason"] == "duplicate rule id"

    def test_plain_message(self):
        assert str(StyleGuardError("boom")) == "boom"

    def test_code_prefixes_message(self):
        error = InternalInvariantViolation(ErrorCode.SG700, "finding for unknown rule")
        assert str(error) == "[SG700] Internal invariant violated: finding for unknown rule"

    def test_details_stored_as_strings(self):
        error = InputError(Path("big.c"), "too large", ErrorCode.SG202)
        assert error.details == {"filepath": "big.c", "reason": "too large"}
        assert str(error).startswith("[SG202] Cannot read input: big.c")
