"""
Unit tests for LoaderFactory.
"""

import pytest

from fraudlens.core.exceptions import DataFileNotFoundError, UnsupportedFormatError
from fraudlens.loaders.csv_loader import CSVLoader
from fraudlens.loaders.factory import LoaderFactory
from fraudlens.loaders.polars_parquet_loader import PolarsParquetLoader


class TestDetectFormat:
    """Test format detection from the extension."""

    @pytest.mark.parametrize("name,expected", [
        ("t.csv", "csv"),
        ("t.TSV", "csv"),
        ("t.txt", "csv"),
        ("t.parquet", "parquet"),
        ("t.pq", "parquet"),
    ])
    def test_known_extensions(self, name, expected):
        assert LoaderFactory.detect_format(name) == expected

    @pytest.mark.parametrize("name", ["t.xlsx", "t.json", "noextension"])
    def test_unknown_extensions(self, name):
        with pytest.raises(UnsupportedFormatError) as exc_info:
            LoaderFactory.detect_format(name)

        assert exc_info.value.details["supported_formats"] == ["csv", "parquet"]


class TestCreateLoader:
    """Test loader construction."""

    def test_csv(self, transactions_csv):
        loader = LoaderFactory.create_loader(transactions_csv, chunk_size=5000)

        assert isinstance(loader, CSVLoader)
        assert loader.chunk_size == 5000

    def test_parquet(self, transactions_parquet):
        assert isinstance(LoaderFactory.create_loader(transactions_parquet), PolarsParquetLoader)

    def test_explicit_format_overrides_extension(self, tmp_path):
        path = tmp_path / "export.dat"
        path.write_text("sessionid,amount,fraud_combined\na,1,0\n", encoding="utf-8")

        assert isinstance(LoaderFactory.create_loader(str(path), file_format="CSV"), CSVLoader)

    def test_missing_file(self, tmp_path):
        with pytest.raises(DataFileNotFoundError):
            LoaderFactory.create_loader(str(tmp_path / "missing.csv"))

    def test_unsupported_file(self, tmp_path):
        path = tmp_path / "book.xlsx"
        path.write_bytes(b"")

        with pytest.raises(UnsupportedFormatError):
            LoaderFactory.create_loader(str(path))
