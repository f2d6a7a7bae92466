"""
Polars-based Parquet data loader.

Polars scans the file lazily, so only one chunk is materialized at a time.
Chunks are handed on as pandas DataFrames of strings so Parquet and CSV
sources look identical to the rest of FraudLens.
"""

from typing import Iterator, List

import pandas as pd
import polars as pl

from fraudlens.core.exceptions import DataParseError
from fraudlens.loaders.base import DataLoader


class PolarsParquetLoader(DataLoader):
    """Loader for Parquet files, casting every column to text."""

    def _scan(self) -> pl.LazyFrame:
        try:
            return pl.scan_parquet(str(self.file_path))
        except (pl.exceptions.PolarsError, OSError) as e:
            raise DataParseError(
                f"Error reading Parquet file {self.file_path}: {str(e)}. "
                f"Ensure the file is a valid Parquet format.",
                str(self.file_path),
                original_exception=e
            ) from e

    def load(self) -> Iterator[pd.DataFrame]:
        """
        Load Parquet data in chunks using lazy slicing.

        Booleans become 0/1 before the string cast so a boolean fraud flag
        still parses. Nulls become "".

        Yields:
            DataFrames of raw string cells

        Raises:
            DataParseError: If the file is not valid Parquet or a column
                cannot be rendered as text
        """
        lazy_df = self._scan()
        try:
            # Do NOT collect() the entire file
            total_rows = lazy_df.select(pl.len()).collect().item()
            as_text = (
                lazy_df
                .with_columns(pl.col(pl.Boolean).cast(pl.Int8))
                .select(pl.all().cast(pl.Utf8).fill_null(""))
            )

            for start_row in range(0, total_rows, self.chunk_size):
                chunk = as_text.slice(start_row, self.chunk_size).collect()
                yield chunk.to_pandas()

        except (pl.exceptions.PolarsError, OSError) as e:
            raise DataParseError(
                f"Error loading Parquet file {self.file_path}: {str(e)}. "
                f"Ensure the file is a valid Parquet format.",
                str(self.file_path),
                original_exception=e
            ) from e

    def get_columns(self) -> List[str]:
        """Column names from the Parquet schema, without loading data."""
        lazy_df = self._scan()
        try:
            return list(lazy_df.collect_schema().names())
        except (pl.exceptions.PolarsError, OSError) as e:
            raise DataParseError(
                f"Error reading column names from {self.file_path}: {str(e)}",
                str(self.file_path),
                original_exception=e
            ) from e

    def get_row_count(self) -> int:
        """Exact row count from the Parquet metadata."""
        lazy_df = self._scan()
        return lazy_df.select(pl.len()).collect().item()
