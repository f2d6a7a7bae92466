"""Base class for chunked file loaders."""

from abc import ABC, abstractmethod
from pathlib import Path
from typing import Iterator, List

import pandas as pd

from fraudlens.core.constants import DEFAULT_CHUNK_SIZE


class DataLoader(ABC):
    """
    Reads a transaction file as a stream of DataFrame chunks.

    Every chunk has the same columns, in header order, and every cell is
    the raw string found in the file (absent cells become "").
    """

    def __init__(self, file_path: str, chunk_size: int = DEFAULT_CHUNK_SIZE, **kwargs):
        """
        Args:
            file_path: Path to the data file
            chunk_size: Number of rows per chunk
            **kwargs: Format-specific options
        """
        self.file_path = Path(file_path)
        self.chunk_size = chunk_size
        self.kwargs = kwargs

    @abstractmethod
    def load(self) -> Iterator[pd.DataFrame]:
        """Yield DataFrame chunks of raw string cells."""

    @abstractmethod
    def get_columns(self) -> List[str]:
        """Header columns without reading the data rows."""

    def get_file_size(self) -> int:
        """File size in bytes."""
        return self.file_path.stat().st_size

    def is_empty(self) -> bool:
        return self.get_file_size() == 0
