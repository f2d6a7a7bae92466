"""
FraudLens Exception Hierarchy.

Every error raised by FraudLens derives from FraudLensException, which carries
a severity used by callers to decide how far an error should propagate.

Exception Severity Levels:
    - FATAL: Stop all processing immediately (bad configuration)
    - CRITICAL: Stop processing the current file, continue with other files
    - RECOVERABLE: Leave the affected chart empty, keep the session running
    - WARNING: Log and continue
"""

from typing import Optional, Dict, Any, List
from enum import Enum


class ErrorSeverity(Enum):
    """
    Classify error severity for handling decisions.

    Attributes:
        FATAL: Unrecoverable error, stop all processing
        CRITICAL: File-level error, stop processing this file
        RECOVERABLE: Analysis-level error, chart is left empty
        WARNING: Non-critical issue, log and continue
    """
    FATAL = "fatal"
    CRITICAL = "critical"
    RECOVERABLE = "recoverable"
    WARNING = "warning"


class FraudLensException(Exception):
    """
    Base exception for all FraudLens errors.

    Provides:
    - Severity classification for handling decisions
    - Structured details dictionary for logging/reporting
    - Original exception preservation for debugging
    - Dict round-trip so errors can cross the ingestion worker boundary

    Attributes:
        message (str): Human-readable error message
        severity (ErrorSeverity): Error severity level
        details (Dict[str, Any]): Additional context (file path, column, etc.)
        original_exception (Optional[Exception]): Original exception if wrapping

    Example:
        >>> try:
        ...     frame = pd.read_csv(path)
        ... except Exception as e:
        ...     raise FraudLensException(
        ...         "Could not read transactions",
        ...         severity=ErrorSeverity.CRITICAL,
        ...         details={'file': 'transactions.csv'},
        ...         original_exception=e
        ...     )
    """

    def __init__(
        self,
        message: str,
        severity: ErrorSeverity = ErrorSeverity.RECOVERABLE,
        details: Optional[Dict[str, Any]] = None,
        original_exception: Optional[Exception] = None
    ):
        """
        Initialize FraudLens exception.

        Args:
            message: Human-readable error description
            severity: Error severity level (default: RECOVERABLE)
            details: Additional context dictionary
            original_exception: Original exception if this wraps another error
        """
        super().__init__(message)
        self.message = message
        self.severity = severity
        self.details = details or {}
        self.original_exception = original_exception

    def to_dict(self) -> Dict[str, Any]:
        """
        Serialize exception to dictionary for logging/reporting.

        Returns:
            Dictionary containing exception details suitable for JSON serialization
        """
        return {
            'type': self.__class__.__name__,
            'message': self.message,
            'severity': self.severity.value,
            'details': self.details,
            'original_error': str(self.original_exception) if self.original_exception else None
        }

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> 'FraudLensException':
        """
        Rebuild an exception from its to_dict() payload.

        The concrete class is looked up by name among the FraudLens exceptions;
        unknown names fall back to the base class. Constructor signatures
        differ per subclass, so the instance is built without calling them and
        the named attributes are restored from ``details``.

        Args:
            data: Dictionary produced by to_dict()

        Returns:
            Exception instance of the original type
        """
        exc_class = _EXCEPTION_TYPES.get(data.get('type', ''), FraudLensException)
        exc = exc_class.__new__(exc_class)
        try:
            severity = ErrorSeverity(data.get('severity', ErrorSeverity.RECOVERABLE.value))
        except ValueError:
            severity = ErrorSeverity.RECOVERABLE
        FraudLensException.__init__(
            exc,
            data.get('message', ''),
            severity=severity,
            details=dict(data.get('details') or {}),
        )
        for key, value in exc.details.items():
            if key.isidentifier() and not hasattr(exc, key):
                setattr(exc, key, value)
        return exc


# ============================================================================
# Configuration Errors (Fatal)
# ============================================================================

class ConfigError(FraudLensException):
    """
    Configuration errors (fatal - stop all processing).

    Raised when:
    - Configuration file not found
    - Invalid YAML syntax
    - Invalid configuration structure

    Attributes:
        field (Optional[str]): Specific config field that caused error
    """

    def __init__(self, message: str, field: Optional[str] = None):
        super().__init__(
            message,
            severity=ErrorSeverity.FATAL,
            details={'field': field} if field else {}
        )
        self.field = field


class YAMLSizeError(ConfigError):
    """
    YAML file too large.

    Example:
        >>> raise YAMLSizeError(
        ...     "Config file exceeds 1MB limit",
        ...     file_size=1500000,
        ...     max_size=1048576
        ... )
    """

    def __init__(self, message: str, file_size: Optional[int] = None, max_size: Optional[int] = None):
        super().__init__(message)
        self.details.update({
            'file_size': file_size,
            'max_size': max_size
        })


class ConfigValidationError(ConfigError):
    """
    Configuration value out of range or of the wrong type.

    Example:
        >>> raise ConfigValidationError(
        ...     "default_bin_count must be between 3 and 20",
        ...     field="default_bin_count",
        ...     expected="3-20",
        ...     actual="42"
        ... )
    """

    def __init__(
        self,
        message: str,
        field: Optional[str] = None,
        expected: Optional[str] = None,
        actual: Optional[str] = None
    ):
        super().__init__(message, field)
        self.details.update({
            'expected': expected,
            'actual': actual
        })


# ============================================================================
# Data Loading Errors (Critical)
# ============================================================================

class DataLoadError(FraudLensException):
    """
    Data file loading errors (critical - stop processing this file).

    Processing stops for this file but continues with other files.

    Attributes:
        file_path (str): Path to file that failed to load
        line_number (Optional[int]): Line number where error occurred
    """

    def __init__(
        self,
        message: str,
        file_path: str,
        line_number: Optional[int] = None,
        original_exception: Optional[Exception] = None
    ):
        super().__init__(
            message,
            severity=ErrorSeverity.CRITICAL,
            details={'file_path': file_path, 'line_number': line_number},
            original_exception=original_exception
        )
        self.file_path = file_path
        self.line_number = line_number


class DataFileNotFoundError(DataLoadError):
    """Data file does not exist at the given path."""

    def __init__(self, file_path: str):
        super().__init__(f"File not found: {file_path}", file_path)


class UnsupportedFormatError(DataLoadError):
    """
    File format not supported by FraudLens.

    Example:
        >>> raise UnsupportedFormatError(
        ...     "transactions.xlsx",
        ...     format="xlsx",
        ...     supported_formats=["csv", "parquet"]
        ... )
    """

    def __init__(self, file_path: str, format: str, supported_formats: list):
        super().__init__(
            f"Unsupported file format '{format}'. Supported: {', '.join(supported_formats)}",
            file_path
        )
        self.details.update({
            'format': format,
            'supported_formats': supported_formats
        })


class MissingColumnError(DataLoadError):
    """
    A reserved column (fraud flag or session id) is absent from the file.

    Example:
        >>> raise MissingColumnError(
        ...     "transactions.csv",
        ...     column="fraud_combined",
        ...     available_columns=["sessionid", "amount"]
        ... )
    """

    def __init__(self, file_path: str, column: str, available_columns: Optional[List[str]] = None):
        super().__init__(f"Missing required column: '{column}'", file_path)
        self.details.update({
            'column': column,
            'available_columns': available_columns or []
        })
        self.column = column


class DataParseError(DataLoadError):
    """File exists but its content could not be parsed."""


class EmptyFileError(DataLoadError):
    """File has no content, or a header but no data rows."""

    def __init__(self, file_path: str, message: Optional[str] = None):
        super().__init__(message or f"File contains no data rows: {file_path}", file_path)


# ============================================================================
# Analysis Errors (Recoverable)
# ============================================================================

class AnalysisError(FraudLensException):
    """
    Errors raised while analyzing a variable (recoverable - chart left empty).

    Attributes:
        variable (Optional[str]): Variable being analyzed
    """

    def __init__(
        self,
        message: str,
        variable: Optional[str] = None,
        details: Optional[Dict[str, Any]] = None
    ):
        merged = {'variable': variable} if variable else {}
        merged.update(details or {})
        super().__init__(
            message,
            severity=ErrorSeverity.RECOVERABLE,
            details=merged
        )
        self.variable = variable


class ColumnNotFoundError(AnalysisError):
    """
    Requested variable is not a column of the dataset.

    Example:
        >>> raise ColumnNotFoundError(
        ...     "amount_usd",
        ...     available_columns=["amount", "hour"]
        ... )
    """

    def __init__(self, column: str, available_columns: Optional[List[str]] = None):
        super().__init__(
            f"Variable '{column}' not found in the dataset",
            variable=column,
            details={'available_columns': available_columns or []}
        )
        self.column = column


class NoValidDataError(AnalysisError):
    """Every row failed to parse for the variable or the fraud flag."""

    def __init__(self, variable: str, total_rows: int = 0):
        super().__init__(
            f"No valid numeric data found for variable '{variable}'",
            variable=variable,
            details={'total_rows': total_rows}
        )


class InsufficientDataError(AnalysisError):
    """
    Fewer points than an operation needs.

    Example:
        >>> raise InsufficientDataError("ks_test", required=1, actual=0)
    """

    def __init__(self, operation: str, required: int = 1, actual: int = 0, variable: Optional[str] = None):
        super().__init__(
            f"{operation} needs at least {required} data point(s), got {actual}",
            variable=variable,
            details={'operation': operation, 'required': required, 'actual': actual}
        )
        self.operation = operation
        self.required = required
        self.actual = actual


_EXCEPTION_TYPES: Dict[str, type] = {
    exc_class.__name__: exc_class
    for exc_class in (
        FraudLensException,
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
}
