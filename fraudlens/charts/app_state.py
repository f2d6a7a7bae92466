"""
Application state.

AppState owns every dataset and chart of a session. Datasets are keyed by
their stable id, so removing one never shifts the references held by other
charts. Removing a dataset removes every chart and merged chart built on it.

User gestures come in through dispatch(), which turns FraudLens errors into
status messages instead of letting them escape to the interface.
"""

import itertools
import logging
from concurrent.futures import Executor
from dataclasses import dataclass
from typing import Dict, List, Optional, Sequence, Union

from fraudlens.charts.chart_state import ChartState
from fraudlens.charts.chart_types import ChartType
from fraudlens.charts.merge import MergedChart
from fraudlens.core.config import AnalysisConfig
from fraudlens.core.dataset import TabularDataset
from fraudlens.core.exceptions import AnalysisError, FraudLensException
from fraudlens.loaders.ingestion import IngestionOutcome, ingest_files_async

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class StatusMessage:
    """
    Entry in the persistent status area.

    Attributes:
        level: 'info', 'success', 'warning' or 'error'
        text: Message shown to the user
    """
    level: str
    text: str


class AppState:
    """Datasets, charts and status messages of one session."""

    CHART_GESTURES = (
        "select_dataset",
        "select_variable",
        "set_bin_count",
        "set_chart_type",
        "set_color",
        "brush",
        "reset_zoom",
    )
    MERGED_GESTURES = ("brush", "reset_zoom")

    def __init__(self, config: Optional[AnalysisConfig] = None):
        self.config = config or AnalysisConfig()
        self.datasets: Dict[str, TabularDataset] = {}
        self.charts: Dict[str, ChartState] = {}
        self.merged_charts: Dict[str, MergedChart] = {}
        self.status: List[StatusMessage] = []
        self._chart_ids = itertools.count(1)
        self._merged_ids = itertools.count(1)

    # ------------------------------------------------------------------
    # Status area
    # ------------------------------------------------------------------

    def report(self, level: str, text: str) -> StatusMessage:
        message = StatusMessage(level, text)
        self.status.append(message)
        log_level = logging.ERROR if level == "error" else logging.WARNING if level == "warning" else logging.INFO
        logger.log(log_level, text)
        return message

    @property
    def last_status(self) -> Optional[StatusMessage]:
        return self.status[-1] if self.status else None

    # ------------------------------------------------------------------
    # Datasets
    # ------------------------------------------------------------------

    def add_dataset(self, dataset: TabularDataset) -> str:
        """Register a dataset and return its id."""
        self.datasets[dataset.dataset_id] = dataset
        self.report("success", f"Loaded: {dataset.name} ({dataset.total_records:,} records)")
        return dataset.dataset_id

    def get_dataset(self, dataset_id: str) -> TabularDataset:
        """
        Raises:
            AnalysisError: If no dataset has this id
        """
        try:
            return self.datasets[dataset_id]
        except KeyError:
            raise AnalysisError(f"Unknown dataset: {dataset_id}") from None

    def remove_dataset(self, dataset_id: str) -> List[str]:
        """
        Remove a dataset together with every chart that reads from it.

        Returns:
            Ids of the removed charts and merged charts

        Raises:
            AnalysisError: If no dataset has this id
        """
        dataset = self.get_dataset(dataset_id)
        del self.datasets[dataset_id]

        removed = [
            chart_id for chart_id, chart in self.charts.items()
            if chart.dataset is dataset
        ]
        removed += [
            chart_id for chart_id, merged in self.merged_charts.items()
            if merged.uses_dataset(dataset_id)
        ]
        for chart_id in removed:
            self.charts.pop(chart_id, None)
            self.merged_charts.pop(chart_id, None)

        logger.info(f"Removed dataset {dataset.name} and {len(removed)} chart(s)")
        return removed

    async def load_files_async(
        self,
        file_paths: Sequence[str],
        executor: Optional[Executor] = None
    ) -> List[IngestionOutcome]:
        """
        Ingest files and register every one that loads.

        A failing file is reported in the status area; the others still load.
        """
        outcomes = await ingest_files_async(file_paths, self.config, executor=executor)
        for outcome in outcomes:
            if outcome.ok:
                self.add_dataset(outcome.dataset)
            else:
                self.report("error", f"Error: {outcome.error.message}")
        return outcomes

    # ------------------------------------------------------------------
    # Charts
    # ------------------------------------------------------------------

    def create_chart(
        self,
        dataset_id: Optional[str] = None,
        variable: Optional[str] = None,
        chart_type: Union[ChartType, str] = ChartType.HISTOGRAM,
        bin_count: Optional[int] = None,
        color: Optional[str] = None
    ) -> ChartState:
        """
        Add a chart, bound to a dataset (default: the first one loaded).

        Raises:
            AnalysisError: If dataset_id is unknown
            FraudLensException: If the initial variable cannot be analyzed
        """
        if dataset_id is not None:
            dataset = self.get_dataset(dataset_id)
        else:
            dataset = next(iter(self.datasets.values()), None)

        chart = ChartState(
            f"chart-{next(self._chart_ids)}",
            dataset=dataset,
            config=self.config,
            chart_type=chart_type,
            bin_count=bin_count,
            color=color,
        )
        self.charts[chart.chart_id] = chart
        if variable is not None:
            chart.select_variable(variable)
        return chart

    def get_chart(self, chart_id: str) -> ChartState:
        try:
            return self.charts[chart_id]
        except KeyError:
            raise AnalysisError(f"Unknown chart: {chart_id}") from None

    def remove_chart(self, chart_id: str) -> None:
        """
        Remove a chart or merged chart. Merged charts built from it stay.

        Raises:
            AnalysisError: If no chart has this id
        """
        if self.charts.pop(chart_id, None) is None and self.merged_charts.pop(chart_id, None) is None:
            raise AnalysisError(f"Unknown chart: {chart_id}")

    def merge_charts(self, first_id: str, second_id: str) -> MergedChart:
        """
        Merge two charts showing the same variable.

        Raises:
            AnalysisError: If the ids are equal or unknown, a chart has no
                data, or the variables differ
        """
        if first_id == second_id:
            raise AnalysisError("Select two different charts to merge")
        merged = MergedChart(
            f"chart-merged-{next(self._merged_ids)}",
            self.get_chart(first_id),
            self.get_chart(second_id),
        )
        self.merged_charts[merged.chart_id] = merged
        return merged

    def dispatch(self, chart_id: str, gesture: str, *args) -> bool:
        """
        Apply a user gesture to a chart.

        ``select_dataset`` takes a dataset id. Failures are recorded in the
        status area.

        Returns:
            False if the gesture failed, otherwise True (or the gesture's own
            result for brush / reset_zoom)

        Raises:
            ValueError: If the gesture name is unknown for the chart
        """
        if chart_id in self.merged_charts:
            target = self.merged_charts[chart_id]
            allowed = self.MERGED_GESTURES
        else:
            target = self.charts.get(chart_id)
            allowed = self.CHART_GESTURES
        if gesture not in allowed:
            raise ValueError(f"Unknown gesture for {chart_id}: {gesture}")

        try:
            if target is None:
                raise AnalysisError(f"Unknown chart: {chart_id}")
            if gesture == "select_dataset":
                dataset_id = args[0] if args else None
                dataset = self.get_dataset(dataset_id) if dataset_id is not None else None
                target.select_dataset(dataset)
                return True
            result = getattr(target, gesture)(*args)
        except FraudLensException as e:
            self.report("error", f"Error: {e.message}")
            return False

        return result if isinstance(result, bool) else True
