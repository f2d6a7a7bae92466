"""CSV data loader with chunked reading for large files."""

import codecs
import csv
import logging
from typing import Iterator, List

import pandas as pd

from fraudlens.core.exceptions import DataParseError, EmptyFileError
from fraudlens.loaders.base import DataLoader

logger = logging.getLogger(__name__)


def detect_delimiter(file_path: str, sample_size: int = 8192) -> str:
    """
    Auto-detect the delimiter used in a CSV file.

    Args:
        file_path: Path to the CSV file
        sample_size: Number of bytes to sample for detection

    Returns:
        Detected delimiter character, defaults to ',' if detection fails
    """
    encodings = ['utf-8', 'utf-8-sig', 'cp1252', 'latin-1']

    for encoding in encodings:
        try:
            with open(file_path, 'r', newline='', encoding=encoding) as f:
                sample = f.read(sample_size)

            dialect = csv.Sniffer().sniff(sample, delimiters=',\t|;')
            return dialect.delimiter
        except (UnicodeDecodeError, csv.Error):
            continue

    return ','


def detect_encoding(file_path: str) -> str:
    """
    Detect the encoding of a file by trying common encodings.

    A UTF-8 byte order mark selects 'utf-8-sig' so it never ends up glued
    to the first header name.

    Args:
        file_path: Path to the file

    Returns:
        Detected encoding name, defaults to 'utf-8'
    """
    with open(file_path, 'rb') as f:
        if f.read(len(codecs.BOM_UTF8)) == codecs.BOM_UTF8:
            return 'utf-8-sig'

    for encoding in ['utf-8', 'cp1252', 'latin-1']:
        try:
            with open(file_path, 'r', encoding=encoding) as f:
                f.read(8192)
            return encoding
        except UnicodeDecodeError:
            continue

    return 'utf-8'


class CSVLoader(DataLoader):
    """Loader for CSV and delimited text files, keeping every cell as text."""

    def __init__(self, file_path: str, chunk_size: int = 50_000, **kwargs):
        """
        Initialize CSVLoader with auto-detection capabilities.

        Args:
            file_path: Path to CSV file
            chunk_size: Number of rows per chunk
            **kwargs: Additional options (delimiter, encoding)
        """
        super().__init__(file_path, chunk_size, **kwargs)

        # Auto-detect delimiter if not specified
        if self.kwargs.get('delimiter') is None:
            self.kwargs['delimiter'] = detect_delimiter(str(self.file_path))
            if self.kwargs['delimiter'] != ',':
                logger.info(f"Auto-detected delimiter: {repr(self.kwargs['delimiter'])}")

        # Auto-detect encoding if not specified
        if self.kwargs.get('encoding') is None:
            self.kwargs['encoding'] = detect_encoding(str(self.file_path))
            if self.kwargs['encoding'] != 'utf-8':
                logger.info(f"Auto-detected encoding: {self.kwargs['encoding']}")

    def _read_csv(self, **options):
        return pd.read_csv(
            self.file_path,
            delimiter=self.kwargs['delimiter'],
            encoding=self.kwargs['encoding'],
            header=0,
            dtype=str,
            keep_default_na=False,
            on_bad_lines='warn',
            **options
        )

    def load(self) -> Iterator[pd.DataFrame]:
        """
        Load CSV data in chunks.

        Yields:
            DataFrames of raw string cells with stripped header names

        Raises:
            EmptyFileError: If the file has no header
            DataParseError: If the file cannot be parsed or decoded
        """
        delimiter = self.kwargs['delimiter']
        encoding = self.kwargs['encoding']

        try:
            for chunk in self._read_csv(chunksize=self.chunk_size):
                chunk.columns = [str(c).strip() for c in chunk.columns]
                # Short rows leave NaN in the trailing cells
                yield chunk.fillna("")

        except pd.errors.EmptyDataError as e:
            raise EmptyFileError(
                str(self.file_path),
                message=f"CSV must contain headers and data: {self.file_path}"
            ) from e

        except pd.errors.ParserError as e:
            error_msg = str(e)
            if "Expected" in error_msg and "fields" in error_msg:
                raise DataParseError(
                    f"CSV parsing error in {self.file_path}: Row has inconsistent number of columns. "
                    f"This often means the delimiter is incorrect (current: {repr(delimiter)}) "
                    f"or the file contains unquoted delimiters in data fields.",
                    str(self.file_path),
                    original_exception=e
                ) from e
            raise DataParseError(
                f"CSV parsing error in {self.file_path}: {error_msg}",
                str(self.file_path),
                original_exception=e
            ) from e

        except UnicodeDecodeError as e:
            raise DataParseError(
                f"Encoding error in {self.file_path}: Cannot decode file with {encoding} encoding.",
                str(self.file_path),
                original_exception=e
            ) from e

    def get_columns(self) -> List[str]:
        """
        Header columns of the file.

        Raises:
            EmptyFileError: If the file has no header
        """
        try:
            header = self._read_csv(nrows=0)
        except pd.errors.EmptyDataError as e:
            raise EmptyFileError(
                str(self.file_path),
                message=f"CSV must contain headers and data: {self.file_path}"
            ) from e
        return [str(c).strip() for c in header.columns]
