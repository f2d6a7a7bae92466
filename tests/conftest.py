"""
Shared fixtures for the FraudLens test suite.
"""

import logging

import pandas as pd
import pytest

from fraudlens.core.config import AnalysisConfig
from fraudlens.core.dataset import TabularDataset
from fraudlens.core.logging_config import PACKAGE_LOGGER
from tests.testsuite.generators.generate_test_data import (
    generate_transactions,
    generate_dirty_transactions,
)


def make_dataset(columns: dict, name: str = "test.csv", config: AnalysisConfig = None) -> TabularDataset:
    """
    Build a TabularDataset straight from column lists.

    Cells are stringified the way the loaders leave them; None becomes "".

    Args:
        columns: Mapping of column name to cell values
        name: Dataset display name
        config: Configuration naming the reserved columns
    """
    config = config or AnalysisConfig()
    rows = pd.DataFrame({
        column: ["" if value is None else str(value) for value in values]
        for column, values in columns.items()
    })
    reserved = set(config.reserved_columns)
    return TabularDataset(
        name=name,
        rows=rows,
        available_variables=[c for c in rows.columns if c not in reserved],
        fraud_flag_column=config.fraud_flag_column,
        session_id_column=config.session_id_column,
    )


@pytest.fixture(autouse=True)
def reset_package_logging():
    """Drop handlers left behind by setup_logging (CLI tests)."""
    yield
    package_logger = logging.getLogger(PACKAGE_LOGGER)
    for handler in list(package_logger.handlers):
        package_logger.removeHandler(handler)
        handler.close()
    package_logger.setLevel(logging.NOTSET)


@pytest.fixture
def config():
    """Default analysis configuration."""
    return AnalysisConfig()


@pytest.fixture(scope="session")
def transactions_df():
    """1,000 synthetic transactions with a rising amount/fraud relationship."""
    return generate_transactions(1000, seed=42)


@pytest.fixture
def transactions_csv(tmp_path, transactions_df):
    """Synthetic transactions written as CSV."""
    path = tmp_path / "transactions.csv"
    transactions_df.to_csv(path, index=False)
    return str(path)


@pytest.fixture
def transactions_parquet(tmp_path, transactions_df):
    """Synthetic transactions written as Parquet."""
    path = tmp_path / "transactions.parquet"
    transactions_df.to_parquet(path, index=False)
    return str(path)


@pytest.fixture
def dirty_csv(tmp_path):
    """Transactions with unparseable amounts and labels."""
    path = tmp_path / "dirty.csv"
    generate_dirty_transactions().to_csv(path, index=False)
    return str(path)


@pytest.fixture
def small_dataset():
    """Ten rows, fraud concentrated at high amounts."""
    return make_dataset({
        "sessionid": [f"s{i}" for i in range(10)],
        "amount": [1, 2, 3, 4, 5, 6, 7, 8, 9, 10],
        "hour": [0, 1, 2, 3, 4, 5, 6, 7, 8, 9],
        "fraud_combined": [0, 0, 0, 0, 0, 0, 0, 1, 1, 1],
    }, name="small.csv")
