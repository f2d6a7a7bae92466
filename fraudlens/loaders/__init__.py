"""Transaction file loaders and ingestion."""

from .base import DataLoader
from .csv_loader import CSVLoader, detect_delimiter, detect_encoding
from .polars_parquet_loader import PolarsParquetLoader
from .factory import LoaderFactory
from .ingestion import (
    IngestionOutcome,
    load_dataset,
    read_table,
    ingest_file_async,
    ingest_files_async,
)

__all__ = [
    'DataLoader',
    'CSVLoader',
    'detect_delimiter',
    'detect_encoding',
    'PolarsParquetLoader',
    'LoaderFactory',
    'IngestionOutcome',
    'load_dataset',
    'read_table',
    'ingest_file_async',
    'ingest_files_async',
]
