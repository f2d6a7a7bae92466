"""
Unit tests for exception hierarchy.

Tests the FraudLens exception classes, their severities and the dict
round-trip used to carry errors out of the ingestion worker.
"""

import pytest

from fraudlens.core.exceptions import (
    FraudLensException,
    ErrorSeverity,
    ConfigError,
    YAMLSizeError,
    ConfigValidationError,
    DataLoadError,
    DataFileNotFoundError,
    UnsupportedFormatError,
    MissingColumnError,
    DataParseError,
    EmptyFileError,
    AnalysisError,
    ColumnNotFoundError,
    NoValidDataError,
    InsufficientDataError,
)


class TestErrorSeverity:
    """Test error severity enum."""

    def test_severity_values(self):
        """Test that all severity levels exist."""
        assert ErrorSeverity.FATAL.value == "fatal"
        assert ErrorSeverity.CRITICAL.value == "critical"
        assert ErrorSeverity.RECOVERABLE.value == "recoverable"
        assert ErrorSeverity.WARNING.value == "warning"


class TestFraudLensException:
    """Test base exception class."""

    def test_basic_exception(self):
        """Test basic exception creation."""
        exc = FraudLensException("Test error")

        assert str(exc) == "Test error"
        assert exc.message == "Test error"
        assert exc.severity == ErrorSeverity.RECOVERABLE
        assert exc.details == {}
        assert exc.original_exception is None

    def test_wraps_original_exception(self):
        original = ValueError("bad value")
        exc = FraudLensException("Wrapped", original_exception=original)

        assert exc.original_exception is original
        assert exc.to_dict()['original_error'] == "bad value"

    def test_to_dict(self):
        exc = FraudLensException("Test", severity=ErrorSeverity.WARNING, details={'file': 'a.csv'})

        assert exc.to_dict() == {
            'type': 'FraudLensException',
            'message': 'Test',
            'severity': 'warning',
            'details': {'file': 'a.csv'},
            'original_error': None,
        }


class TestSubclasses:
    """Test severities and details of the concrete exceptions."""

    def test_config_errors_are_fatal(self):
        assert ConfigError("bad").severity == ErrorSeverity.FATAL
        assert YAMLSizeError("big", file_size=10, max_size=5).details['file_size'] == 10
        exc = ConfigValidationError("range", field="default_bin_count", expected="3-20", actual="42")
        assert exc.field == "default_bin_count"
        assert exc.details == {'field': 'default_bin_count', 'expected': '3-20', 'actual': '42'}

    def test_load_errors_are_critical(self):
        exc = DataLoadError("broken", file_path="a.csv", line_number=3)

        assert exc.severity == ErrorSeverity.CRITICAL
        assert exc.file_path == "a.csv"
        assert exc.details['line_number'] == 3

    def test_file_not_found(self):
        exc = DataFileNotFoundError("missing.csv")

        assert isinstance(exc, DataLoadError)
        assert "missing.csv" in exc.message

    def test_unsupported_format(self):
        exc = UnsupportedFormatError("a.xlsx", format="xlsx", supported_formats=["csv", "parquet"])

        assert "xlsx" in exc.message
        assert "csv, parquet" in exc.message

    def test_missing_column(self):
        exc = MissingColumnError("a.csv", column="fraud_combined", available_columns=["amount"])

        assert exc.column == "fraud_combined"
        assert exc.message == "Missing required column: 'fraud_combined'"
        assert exc.details['available_columns'] == ["amount"]

    def test_parse_and_empty_are_load_errors(self):
        assert isinstance(DataParseError("bad", "a.csv"), DataLoadError)
        exc = EmptyFileError("a.csv")
        assert isinstance(exc, DataLoadError)
        assert "no data rows" in exc.message

    def test_analysis_errors_are_recoverable(self):
        exc = AnalysisError("oops", variable="amount", details={'extra': 1})

        assert exc.severity == ErrorSeverity.RECOVERABLE
        assert exc.details == {'variable': 'amount', 'extra': 1}

    def test_column_not_found(self):
        exc = ColumnNotFoundError("amount_usd", available_columns=["amount"])

        assert isinstance(exc, AnalysisError)
        assert exc.column == "amount_usd"
        assert exc.variable == "amount_usd"

    def test_no_valid_data(self):
        exc = NoValidDataError("amount", total_rows=12)

        assert exc.message == "No valid numeric data found for variable 'amount'"
        assert exc.details['total_rows'] == 12

    def test_insufficient_data(self):
        exc = InsufficientDataError("ks_test", required=1, actual=0)

        assert exc.message == "ks_test needs at least 1 data point(s), got 0"
        assert exc.operation == "ks_test"


class TestRoundTrip:
    """Test rebuilding exceptions from their dict form."""

    def test_rebuilds_concrete_type(self):
        original = MissingColumnError("a.csv", column="sessionid", available_columns=["amount"])

        rebuilt = FraudLensException.from_dict(original.to_dict())

        assert type(rebuilt) is MissingColumnError
        assert isinstance(rebuilt, DataLoadError)
        assert rebuilt.message == original.message
        assert rebuilt.severity == ErrorSeverity.CRITICAL
        assert rebuilt.column == "sessionid"
        assert rebuilt.file_path == "a.csv"
        assert str(rebuilt) == original.message

    def test_can_be_raised_and_caught_by_type(self):
        data = EmptyFileError("empty.csv").to_dict()

        with pytest.raises(EmptyFileError):
            raise FraudLensException.from_dict(data)

    def test_unknown_type_falls_back_to_base(self):
        rebuilt = FraudLensException.from_dict({'type': 'Mystery', 'message': 'm', 'severity': 'bogus'})

        assert type(rebuilt) is FraudLensException
        assert rebuilt.severity == ErrorSeverity.RECOVERABLE
