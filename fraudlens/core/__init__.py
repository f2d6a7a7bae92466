"""
Core building blocks: configuration, exceptions, logging and the dataset model.
"""

from .config import AnalysisConfig
from .dataset import TabularDataset, ValueFlagSeries
from .exceptions import (
    ErrorSeverity,
    FraudLensException,
    ConfigError,
    ConfigValidationError,
    DataLoadError,
    MissingColumnError,
    DataParseError,
    EmptyFileError,
    AnalysisError,
    ColumnNotFoundError,
    NoValidDataError,
    InsufficientDataError,
)

__all__ = [
    'AnalysisConfig',
    'TabularDataset',
    'ValueFlagSeries',
    'ErrorSeverity',
    'FraudLensException',
    'ConfigError',
    'ConfigValidationError',
    'DataLoadError',
    'MissingColumnError',
    'DataParseError',
    'EmptyFileError',
    'AnalysisError',
    'ColumnNotFoundError',
    'NoValidDataError',
    'InsufficientDataError',
]
