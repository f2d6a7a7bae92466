"""
FraudLens Test Suite - Shared test data.

Directory Structure:
    testsuite/
    ├── data/          # Generated files (testsuite_ prefix), not committed
    └── generators/    # Data generation scripts

Usage:
    python -m tests.testsuite.generators.generate_test_data
"""

from pathlib import Path

# Base directory for generated test suite data
TESTSUITE_DATA_DIR = Path(__file__).parent / "data"

TESTSUITE_TRANSACTIONS_CSV = TESTSUITE_DATA_DIR / "testsuite_transactions.csv"
TESTSUITE_TRANSACTIONS_PARQUET = TESTSUITE_DATA_DIR / "testsuite_transactions.parquet"
TESTSUITE_DIRTY_TRANSACTIONS = TESTSUITE_DATA_DIR / "testsuite_dirty_transactions.csv"
