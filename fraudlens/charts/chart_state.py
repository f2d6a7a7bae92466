"""
Chart state.

One ChartState per on-screen chart. It holds the chart's selections
(dataset, variable, bin count, chart type, color), the extracted value/flag
series, the current and initial domain, and the most recent result view.
Every gesture recomputes the view from scratch.

Mode transitions:
    EMPTY -> VARIABLE_SELECTED -> HISTOGRAMMED | COMPARED | OUTLIER_ANALYZED

A chart stays in VARIABLE_SELECTED when the variable has no valid data or
the selected analysis cannot run on it. Zoom (brush / reset) only applies in
HISTOGRAMMED mode; elsewhere both gestures are no-ops.
"""

import logging
import re
from typing import List, Optional, Tuple, Union

from fraudlens.charts.chart_types import ChartMode, ChartType
from fraudlens.charts.views import ComparisonView, HistogramView, OutlierView, histogram_y_max
from fraudlens.core.config import AnalysisConfig
from fraudlens.core.dataset import TabularDataset, ValueFlagSeries
from fraudlens.core.exceptions import (
    AnalysisError,
    ColumnNotFoundError,
    ConfigValidationError,
    InsufficientDataError,
)
from fraudlens.stats.binning import compute_bins
from fraudlens.stats.comparison import compare_fraud_populations
from fraudlens.stats.models import Bin, OutlierResult, Regression, SeriesComparison
from fraudlens.stats.outliers import detect_outliers
from fraudlens.stats.trend import fit_bins

logger = logging.getLogger(__name__)

_HEX_COLOR = re.compile(r"^#[0-9A-Fa-f]{6}$")

ChartView = Union[HistogramView, ComparisonView, OutlierView]


class ChartState:
    """
    Selections, domain and computed view of a single chart.

    Attributes:
        chart_id: Identifier assigned by the owner
        config: Analysis configuration
        dataset: Dataset the chart reads from (not owned)
        variable: Selected variable, None when nothing is selected
        bin_count: Bins for the histogram modes
        chart_type: Current ChartType
        color: Series color handed to the rendering layer
        series: Value/flag series of the selected variable
        initial_domain: (min, max) of the series values
        domain: Current (possibly zoomed) domain
        is_zoomed: Whether domain differs from initial_domain by a brush
        view: Last computed result, None when nothing could be computed
    """

    def __init__(
        self,
        chart_id: str,
        dataset: Optional[TabularDataset] = None,
        config: Optional[AnalysisConfig] = None,
        chart_type: Union[ChartType, str] = ChartType.HISTOGRAM,
        bin_count: Optional[int] = None,
        color: Optional[str] = None
    ):
        self.chart_id = chart_id
        self.config = config or AnalysisConfig()
        self.dataset = dataset
        self.variable: Optional[str] = None
        self.bin_count = _check_bin_count(bin_count if bin_count is not None else self.config.default_bin_count)
        self.chart_type = ChartType.parse(chart_type)
        self.color = _check_color(color or self.config.default_color)

        self.series: Optional[ValueFlagSeries] = None
        self.initial_domain: Optional[Tuple[float, float]] = None
        self.domain: Optional[Tuple[float, float]] = None
        self.is_zoomed = False
        self.view: Optional[ChartView] = None

    # ------------------------------------------------------------------
    # Read-outs
    # ------------------------------------------------------------------

    @property
    def mode(self) -> ChartMode:
        if self.dataset is None or self.variable is None:
            return ChartMode.EMPTY
        if isinstance(self.view, HistogramView):
            return ChartMode.HISTOGRAMMED
        if isinstance(self.view, ComparisonView):
            return ChartMode.COMPARED
        if isinstance(self.view, OutlierView):
            return ChartMode.OUTLIER_ANALYZED
        return ChartMode.VARIABLE_SELECTED

    @property
    def bins(self) -> List[Bin]:
        if isinstance(self.view, HistogramView):
            return list(self.view.bins)
        return []

    @property
    def regression(self) -> Optional[Regression]:
        if isinstance(self.view, HistogramView):
            return self.view.regression
        return None

    @property
    def comparison(self) -> Optional[SeriesComparison]:
        if isinstance(self.view, ComparisonView):
            return self.view.comparison
        return None

    @property
    def outliers(self) -> Optional[OutlierResult]:
        if isinstance(self.view, OutlierView):
            return self.view.result
        return None

    @property
    def title(self) -> str:
        variable = self.variable or "Select a variable"
        dataset = self.dataset.name if self.dataset is not None else "Dataset"
        return f"Analysis: {variable} ({dataset})"

    # ------------------------------------------------------------------
    # Gestures
    # ------------------------------------------------------------------

    def select_dataset(self, dataset: Optional[TabularDataset]) -> None:
        """
        Point the chart at another dataset.

        The selected variable is kept when the new dataset offers it (and
        the series, domain and view are rebuilt from the new rows);
        otherwise the chart goes back to EMPTY.
        """
        self.dataset = dataset
        variable = self.variable
        self._clear_series()
        self.variable = None

        if dataset is not None and variable is not None and variable in dataset.available_variables:
            self.select_variable(variable)

    def select_variable(self, variable: Optional[str]) -> None:
        """
        Select the variable to analyze and compute the view.

        Raises:
            AnalysisError: If no dataset is selected
            ColumnNotFoundError: If the dataset does not offer the variable
            NoValidDataError: If no row of the variable is valid (the chart
                stays in VARIABLE_SELECTED)
            InsufficientDataError: If the current chart type cannot run on
                the series (the chart stays in VARIABLE_SELECTED)
        """
        if not variable:
            self._clear_series()
            self.variable = None
            return
        if self.dataset is None:
            raise AnalysisError("Select a dataset before choosing a variable", variable=variable)
        if variable not in self.dataset.available_variables:
            raise ColumnNotFoundError(variable, available_columns=self.dataset.variables)

        self._clear_series()
        self.variable = variable
        self.series = self.dataset.extract_series(variable)
        self.initial_domain = self.series.domain
        self.domain = self.initial_domain
        logger.debug(f"{self.chart_id}: selected '{variable}', domain {self.initial_domain}")
        self.recompute()

    def set_bin_count(self, bin_count: int) -> None:
        """
        Change the bin count, keeping the current zoom.

        Raises:
            ConfigValidationError: If bin_count is not a positive integer
        """
        self.bin_count = _check_bin_count(bin_count)
        self.recompute()

    def set_chart_type(self, chart_type: Union[ChartType, str]) -> None:
        """
        Change the chart type.

        The previous view (and any trend line with it) is dropped before
        the new mode computes. Modes without zoom go back to the full domain.

        Raises:
            ConfigValidationError: If the chart type is unknown
        """
        self.chart_type = ChartType.parse(chart_type)
        self.view = None
        if not self.chart_type.zoomable and self.initial_domain is not None:
            self.domain = self.initial_domain
            self.is_zoomed = False
        self.recompute()

    def set_color(self, color: str) -> None:
        """
        Change the series color. No recomputation is needed.

        Raises:
            ConfigValidationError: If color is not a #RRGGBB string
        """
        self.color = _check_color(color)

    def brush(self, x0: float, x1: float) -> bool:
        """
        Zoom into [x0, x1] (either order).

        Returns:
            True if the chart zoomed; False for a no-op (no series, a mode
            without zoom, or an empty selection)
        """
        if self.series is None or not self.chart_type.zoomable:
            return False
        low, high = sorted((float(x0), float(x1)))
        if low == high:
            return False

        self.domain = (low, high)
        self.is_zoomed = True
        logger.debug(f"{self.chart_id}: zoomed to {self.domain}")
        self.recompute()
        return True

    def reset_zoom(self) -> bool:
        """
        Return to the full domain of the current series.

        Returns:
            True if the domain was reset; False for a no-op
        """
        if self.series is None or not self.chart_type.zoomable:
            return False
        self.domain = self.initial_domain
        self.is_zoomed = False
        self.recompute()
        return True

    # ------------------------------------------------------------------
    # Computation
    # ------------------------------------------------------------------

    def recompute(self) -> Optional[ChartView]:
        """
        Rebuild the view from the current selections.

        Raises:
            InsufficientDataError: If the comparison or outlier analysis
                cannot run (the view is left empty)
        """
        self.view = None
        if self.series is None:
            return None

        mode = self.chart_type.mode
        if mode is ChartMode.HISTOGRAMMED:
            self.view = self._histogram_view()
        elif mode is ChartMode.COMPARED:
            self.view = ComparisonView(compare_fraud_populations(
                self.series,
                bin_count=self.config.compare_bins,
                kde_points=self.config.kde_points,
                bandwidth=self.config.kde_bandwidth,
            ))
        else:
            self.view = OutlierView(detect_outliers(self.series.points(), multiplier=self.config.iqr_multiplier))
        return self.view

    def _histogram_view(self) -> HistogramView:
        bins = compute_bins(self.series.values, self.series.flags, self.domain, self.bin_count)
        try:
            regression = fit_bins(bins)
        except InsufficientDataError:
            regression = None
        return HistogramView(
            bins=tuple(bins),
            regression=regression,
            domain=self.domain,
            y_max=histogram_y_max(bins, regression, self.domain),
        )

    def _clear_series(self) -> None:
        self.series = None
        self.initial_domain = None
        self.domain = None
        self.is_zoomed = False
        self.view = None

    def __repr__(self) -> str:
        return (
            f"ChartState(id={self.chart_id!r}, variable={self.variable!r}, "
            f"type={self.chart_type.value}, mode={self.mode.value})"
        )


def _check_bin_count(bin_count) -> int:
    if isinstance(bin_count, bool) or not isinstance(bin_count, int) or bin_count < 1:
        raise ConfigValidationError(
            "bin_count must be a positive integer",
            field="bin_count", expected="> 0", actual=str(bin_count)
        )
    return bin_count


def _check_color(color) -> str:
    if not isinstance(color, str) or not _HEX_COLOR.match(color):
        raise ConfigValidationError(
            "color must be a #RRGGBB hex string",
            field="color", expected="#RRGGBB", actual=str(color)
        )
    return color
