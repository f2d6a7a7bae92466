"""
Tabular dataset and value/flag series.

A TabularDataset is what ingestion hands to the rest of FraudLens: every cell
as the raw string found in the source file, plus the list of analyzable
variables. Analysis never works on the raw table directly; it first extracts
a ValueFlagSeries for one variable, keeping only rows where both the variable
and the fraud flag parse.
"""

import itertools
from dataclasses import dataclass, field
from typing import Dict, Iterator, List, Tuple

import numpy as np
import pandas as pd

from fraudlens.core.exceptions import ColumnNotFoundError, NoValidDataError
from fraudlens.core.logging_config import get_logger

logger = get_logger(__name__)

_dataset_ids = itertools.count(1)


def _next_dataset_id() -> str:
    return f"ds-{next(_dataset_ids)}"


@dataclass(eq=False)
class TabularDataset:
    """
    In-memory table of one uploaded file.

    Attributes:
        name: Display label (usually the file name)
        rows: DataFrame whose cells are raw strings; absent cells are ""
        available_variables: Header columns minus the reserved columns
        fraud_flag_column: Name of the fraud flag column
        session_id_column: Name of the session id column
        dataset_id: Stable opaque identifier, never reused in a process
    """
    name: str
    rows: pd.DataFrame
    available_variables: List[str]
    fraud_flag_column: str
    session_id_column: str
    dataset_id: str = field(default_factory=_next_dataset_id)

    @property
    def total_records(self) -> int:
        """Number of rows."""
        return len(self.rows)

    @property
    def variables(self) -> List[str]:
        """Analyzable variables in header order."""
        return list(self.available_variables)

    @property
    def columns(self) -> List[str]:
        """All header columns."""
        return list(self.rows.columns)

    def iter_rows(self) -> Iterator[Dict[str, str]]:
        """Yield each row as a column -> raw string mapping."""
        for record in self.rows.to_dict(orient="records"):
            yield record

    def extract_series(self, variable: str) -> "ValueFlagSeries":
        """
        Build the value/flag pair series for one variable.

        A row is kept when the variable parses as a finite number and the
        fraud flag parses as exactly 0 or 1. Row order is preserved.

        Args:
            variable: Column to analyze

        Returns:
            ValueFlagSeries with parallel values/flags arrays

        Raises:
            ColumnNotFoundError: If the variable is not a column
            NoValidDataError: If no row survives parsing
        """
        if variable not in self.rows.columns:
            raise ColumnNotFoundError(variable, available_columns=self.variables)

        values = pd.to_numeric(self.rows[variable].astype(str).str.strip(), errors="coerce").to_numpy(dtype=np.float64)
        flags = pd.to_numeric(self.rows[self.fraud_flag_column].astype(str).str.strip(), errors="coerce").to_numpy(dtype=np.float64)

        valid = np.isfinite(values) & ((flags == 0) | (flags == 1))
        valid_count = int(valid.sum())

        logger.debug(f"{self.name}: {valid_count}/{self.total_records} valid points for '{variable}'")

        if valid_count == 0:
            raise NoValidDataError(variable, total_rows=self.total_records)

        return ValueFlagSeries(
            values=values[valid],
            flags=flags[valid].astype(np.uint8),
            variable=variable,
            row_positions=np.flatnonzero(valid),
        )


@dataclass(eq=False)
class ValueFlagSeries:
    """
    Parallel arrays of parsed values and fraud flags for one variable.

    Attributes:
        values: float64 values in original row order
        flags: uint8 flags (0 or 1), same length as values
        variable: Variable name
        row_positions: Position of each point in the source table
    """
    values: np.ndarray
    flags: np.ndarray
    variable: str = ""
    row_positions: np.ndarray = None

    def __post_init__(self):
        self.values = np.asarray(self.values, dtype=np.float64)
        self.flags = np.asarray(self.flags, dtype=np.uint8)
        if len(self.values) != len(self.flags):
            raise ValueError(
                f"values and flags must have the same length ({len(self.values)} != {len(self.flags)})"
            )
        if self.row_positions is None:
            self.row_positions = np.arange(len(self.values))

    def __len__(self) -> int:
        return len(self.values)

    @property
    def domain(self) -> Tuple[float, float]:
        """(min, max) of the values."""
        return float(self.values.min()), float(self.values.max())

    @property
    def overall_fraud_rate(self) -> float:
        """Mean flag over the whole series (0.0 for an empty series)."""
        if len(self.flags) == 0:
            return 0.0
        return float(self.flags.mean())

    def sorted_values(self) -> np.ndarray:
        """Ascending copy of the values."""
        return np.sort(self.values)

    def split_by_flag(self) -> Tuple[np.ndarray, np.ndarray]:
        """Return (fraud values, legitimate values)."""
        fraud_mask = self.flags == 1
        return self.values[fraud_mask], self.values[~fraud_mask]

    def points(self) -> List[Dict[str, float]]:
        """Per-point mappings for the outlier detector."""
        return [
            {"value": float(value), "flag": int(flag), "row": int(row)}
            for value, flag, row in zip(self.values, self.flags, self.row_positions)
        ]
