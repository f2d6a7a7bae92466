"""
File ingestion.

Turns a CSV or Parquet file into a TabularDataset. Loading runs in a worker
process so a large upload never blocks the caller's event loop; the worker
sends back a plain message and the caller turns it into an IngestionOutcome.
Failures arrive as the original FraudLensException subclass, rebuilt from
its dict form.
"""

import asyncio
import logging
from concurrent.futures import Executor, ProcessPoolExecutor
from concurrent.futures.process import BrokenProcessPool
from dataclasses import dataclass
from pathlib import Path
from typing import Any, Dict, List, Optional, Sequence

import pandas as pd

from fraudlens.core.config import AnalysisConfig
from fraudlens.core.dataset import TabularDataset
from fraudlens.core.exceptions import (
    DataLoadError,
    EmptyFileError,
    FraudLensException,
    MissingColumnError,
)
from fraudlens.loaders.factory import LoaderFactory

logger = logging.getLogger(__name__)


def read_table(file_path: str, config: Optional[AnalysisConfig] = None, **loader_kwargs) -> Dict[str, Any]:
    """
    Read a file into a string DataFrame and check the reserved columns.

    Args:
        file_path: CSV or Parquet file
        config: Analysis configuration (reserved column names, chunk size)
        **loader_kwargs: Passed to the loader (delimiter, encoding)

    Returns:
        Dict with ``name``, ``rows`` (DataFrame) and ``available_variables``

    Raises:
        DataLoadError: Or one of its subclasses on any load failure
    """
    config = config or AnalysisConfig()
    loader = LoaderFactory.create_loader(file_path, chunk_size=config.chunk_size, **loader_kwargs)

    columns = loader.get_columns()
    if not columns:
        raise EmptyFileError(str(file_path), message=f"File must contain headers and data: {file_path}")

    for reserved in config.reserved_columns:
        if reserved not in columns:
            raise MissingColumnError(str(file_path), column=reserved, available_columns=columns)

    chunks = [chunk for chunk in loader.load() if len(chunk) > 0]
    if not chunks:
        raise EmptyFileError(str(file_path), message=f"File must contain headers and data: {file_path}")

    rows = pd.concat(chunks, ignore_index=True) if len(chunks) > 1 else chunks[0].reset_index(drop=True)
    rows = rows.fillna("")

    reserved = set(config.reserved_columns)
    available_variables = [c for c in rows.columns if c not in reserved]

    logger.info(
        f"Loaded {Path(file_path).name}: {len(rows):,} rows, "
        f"{len(available_variables)} variable(s)"
    )
    return {
        "name": Path(file_path).name,
        "rows": rows,
        "available_variables": available_variables,
    }


def load_dataset(file_path: str, config: Optional[AnalysisConfig] = None, **loader_kwargs) -> TabularDataset:
    """
    Load a file into a TabularDataset in the current process.

    Raises:
        DataLoadError: Or one of its subclasses on any load failure
    """
    config = config or AnalysisConfig()
    table = read_table(file_path, config, **loader_kwargs)
    return _to_dataset(table, config)


def _to_dataset(table: Dict[str, Any], config: AnalysisConfig) -> TabularDataset:
    return TabularDataset(
        name=table["name"],
        rows=table["rows"],
        available_variables=table["available_variables"],
        fraud_flag_column=config.fraud_flag_column,
        session_id_column=config.session_id_column,
    )


def _ingest_worker(file_path: str, config_dict: Dict[str, Any]) -> Dict[str, Any]:
    """Worker-process entry point. Always returns a message, never raises FraudLens errors."""
    try:
        config = AnalysisConfig.from_dict(config_dict)
        return {"ok": True, "payload": read_table(file_path, config)}
    except FraudLensException as e:
        return {"ok": False, "error": e.to_dict()}


@dataclass
class IngestionOutcome:
    """
    Result of ingesting one file.

    Exactly one of ``dataset`` and ``error`` is set.
    """
    path: str
    dataset: Optional[TabularDataset] = None
    error: Optional[FraudLensException] = None

    @property
    def ok(self) -> bool:
        return self.error is None


async def ingest_file_async(
    file_path: str,
    config: Optional[AnalysisConfig] = None,
    executor: Optional[Executor] = None
) -> IngestionOutcome:
    """
    Ingest one file off the event loop.

    Args:
        file_path: CSV or Parquet file
        config: Analysis configuration
        executor: Executor to run the load in (default: a one-off process pool)

    Returns:
        IngestionOutcome holding the dataset or the load error
    """
    config = config or AnalysisConfig()
    loop = asyncio.get_running_loop()

    try:
        if executor is None:
            with ProcessPoolExecutor(max_workers=1) as pool:
                message = await loop.run_in_executor(pool, _ingest_worker, str(file_path), config.to_dict())
        else:
            message = await loop.run_in_executor(executor, _ingest_worker, str(file_path), config.to_dict())
    except BrokenProcessPool as e:
        error = DataLoadError(
            f"Loader process died while reading {file_path}",
            str(file_path),
            original_exception=e
        )
        return IngestionOutcome(path=str(file_path), error=error)

    if not message["ok"]:
        error = FraudLensException.from_dict(message["error"])
        logger.warning(f"Failed to load {file_path}: {error.message}")
        return IngestionOutcome(path=str(file_path), error=error)

    return IngestionOutcome(path=str(file_path), dataset=_to_dataset(message["payload"], config))


async def ingest_files_async(
    file_paths: Sequence[str],
    config: Optional[AnalysisConfig] = None,
    executor: Optional[Executor] = None
) -> List[IngestionOutcome]:
    """
    Ingest several files concurrently.

    One failing file never stops the others.

    Returns:
        One IngestionOutcome per path, in input order
    """
    config = config or AnalysisConfig()
    if executor is not None:
        return list(await asyncio.gather(
            *(ingest_file_async(path, config, executor) for path in file_paths)
        ))

    with ProcessPoolExecutor() as pool:
        return list(await asyncio.gather(
            *(ingest_file_async(path, config, pool) for path in file_paths)
        ))
