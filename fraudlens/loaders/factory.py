"""Loader selection by file format."""

import logging
from pathlib import Path
from typing import Optional

from fraudlens.core.constants import DEFAULT_CHUNK_SIZE, FILE_EXTENSION_MAP, SUPPORTED_FILE_FORMATS
from fraudlens.core.exceptions import DataFileNotFoundError, UnsupportedFormatError
from fraudlens.loaders.base import DataLoader
from fraudlens.loaders.csv_loader import CSVLoader
from fraudlens.loaders.polars_parquet_loader import PolarsParquetLoader

logger = logging.getLogger(__name__)


class LoaderFactory:
    """Create the right loader for a transaction file."""

    _loaders = {
        "csv": CSVLoader,
        "parquet": PolarsParquetLoader,
    }

    @staticmethod
    def detect_format(file_path: str) -> str:
        """
        Format name from the file extension.

        Raises:
            UnsupportedFormatError: If the extension is not recognized
        """
        suffix = Path(file_path).suffix.lower()
        file_format = FILE_EXTENSION_MAP.get(suffix)
        if file_format is None:
            raise UnsupportedFormatError(
                str(file_path),
                format=suffix.lstrip(".") or "(none)",
                supported_formats=SUPPORTED_FILE_FORMATS
            )
        return file_format

    @classmethod
    def create_loader(
        cls,
        file_path: str,
        file_format: Optional[str] = None,
        chunk_size: int = DEFAULT_CHUNK_SIZE,
        **kwargs
    ) -> DataLoader:
        """
        Create a loader for a file.

        Args:
            file_path: Path to the data file
            file_format: 'csv' or 'parquet' (default: from the extension)
            chunk_size: Rows per chunk
            **kwargs: Loader options (delimiter, encoding for CSV)

        Returns:
            DataLoader instance

        Raises:
            DataFileNotFoundError: If the file does not exist
            UnsupportedFormatError: If the format is not supported
        """
        if not Path(file_path).is_file():
            raise DataFileNotFoundError(str(file_path))

        if file_format is None:
            file_format = cls.detect_format(file_path)

        loader_class = cls._loaders.get(file_format.lower())
        if loader_class is None:
            raise UnsupportedFormatError(
                str(file_path),
                format=file_format,
                supported_formats=SUPPORTED_FILE_FORMATS
            )

        logger.debug(f"Using {loader_class.__name__} for {file_path}")
        return loader_class(str(file_path), chunk_size=chunk_size, **kwargs)
