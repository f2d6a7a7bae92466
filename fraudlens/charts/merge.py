"""
Merged chart: one variable from two charts, binned over a shared domain.

The merged chart snapshots the series of both source charts when it is
created; later gestures on the sources do not change it.
"""

import logging
from dataclasses import dataclass
from typing import Any, Dict, List, Tuple

from fraudlens.charts.chart_state import ChartState
from fraudlens.core.constants import Y_AXIS_HEADROOM
from fraudlens.core.dataset import ValueFlagSeries
from fraudlens.core.exceptions import AnalysisError
from fraudlens.stats.binning import bins_for_sources, shared_domain
from fraudlens.stats.models import Bin

logger = logging.getLogger(__name__)


@dataclass
class MergeSource:
    """One side of a merged chart."""
    dataset_id: str
    dataset_name: str
    color: str
    series: ValueFlagSeries
    bins: Tuple[Bin, ...] = ()

    def to_dict(self) -> Dict[str, Any]:
        return {
            "dataset_id": self.dataset_id,
            "dataset": self.dataset_name,
            "color": self.color,
            "bins": [b.to_dict() for b in self.bins],
        }


class MergedChart:
    """
    Fraud-ratio bins of two sources side by side.

    Attributes:
        chart_id: Identifier assigned by the owner
        variable: Variable shared by both sources
        bin_count: Larger of the two source bin counts
        sources: The two MergeSource entries, in merge order
        initial_domain: (min, max) over both series
        domain: Current (possibly zoomed) domain
        is_zoomed: Whether a brush narrowed the domain
    """

    def __init__(self, chart_id: str, first: ChartState, second: ChartState):
        """
        Raises:
            AnalysisError: If a chart has no series or the variables differ
        """
        for chart in (first, second):
            if chart.series is None or chart.dataset is None:
                raise AnalysisError(f"Chart {chart.chart_id} has no data to merge")
        if first.variable != second.variable:
            raise AnalysisError(
                "Charts must have the same variable to be merged",
                details={"variables": [first.variable, second.variable]}
            )

        self.chart_id = chart_id
        self.variable = first.variable
        self.bin_count = max(first.bin_count, second.bin_count)
        self.source_chart_ids = (first.chart_id, second.chart_id)
        self.sources = [
            MergeSource(
                dataset_id=chart.dataset.dataset_id,
                dataset_name=chart.dataset.name,
                color=chart.color,
                series=chart.series,
            )
            for chart in (first, second)
        ]
        self.initial_domain = shared_domain([source.series.values for source in self.sources])
        self.domain = self.initial_domain
        self.is_zoomed = False
        self.recompute()

    @property
    def title(self) -> str:
        return f"Merged: {self.variable}"

    @property
    def dataset_ids(self) -> List[str]:
        return [source.dataset_id for source in self.sources]

    @property
    def y_max(self) -> float:
        top = max((b.fraud_ratio for source in self.sources for b in source.bins), default=0.0)
        return top * Y_AXIS_HEADROOM if top > 0 else 1.0

    def recompute(self) -> None:
        """Bin every source over the current domain."""
        all_bins = bins_for_sources(
            [(source.series.values, source.series.flags) for source in self.sources],
            self.domain,
            self.bin_count,
        )
        for source, bins in zip(self.sources, all_bins):
            source.bins = tuple(bins)
        logger.debug(f"{self.chart_id}: merged bins over {self.domain}")

    def brush(self, x0: float, x1: float) -> bool:
        """Zoom into [x0, x1]; False for an empty selection."""
        low, high = sorted((float(x0), float(x1)))
        if low == high:
            return False
        self.domain = (low, high)
        self.is_zoomed = True
        self.recompute()
        return True

    def reset_zoom(self) -> bool:
        self.domain = self.initial_domain
        self.is_zoomed = False
        self.recompute()
        return True

    def uses_dataset(self, dataset_id: str) -> bool:
        return dataset_id in self.dataset_ids

    def to_dict(self) -> Dict[str, Any]:
        return {
            "chart_id": self.chart_id,
            "title": self.title,
            "variable": self.variable,
            "bin_count": self.bin_count,
            "domain": list(self.domain),
            "initial_domain": list(self.initial_domain),
            "is_zoomed": self.is_zoomed,
            "y_max": self.y_max,
            "sources": [source.to_dict() for source in self.sources],
        }
