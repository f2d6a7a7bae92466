"""
Chart types and analysis modes.

Every chart type maps to exactly one analysis mode. Only the binning types
(histogram and its line/area/scatter variants) support zoom; the
comparison and outlier charts always cover the full series.
"""

from enum import Enum
from typing import List

from fraudlens.core.exceptions import ConfigValidationError


class ChartMode(Enum):
    """
    State of a chart's analysis pipeline.

    Attributes:
        EMPTY: No dataset or no variable selected
        VARIABLE_SELECTED: Variable chosen, no result computed (or no valid data)
        HISTOGRAMMED: Fraud-ratio bins and trend computed
        COMPARED: Fraud vs legitimate distributions compared
        OUTLIER_ANALYZED: IQR outlier partition computed
    """
    EMPTY = "empty"
    VARIABLE_SELECTED = "variable_selected"
    HISTOGRAMMED = "histogrammed"
    COMPARED = "compared"
    OUTLIER_ANALYZED = "outlier_analyzed"


class ChartType(Enum):
    """Chart types offered by the chart controls, keyed by their option value."""
    HISTOGRAM = "histogram"
    LINE = "line"
    AREA = "area"
    SCATTER = "scatter"
    HORIZONTAL_BAR = "bar-horizontal"
    SMOOTH_LINE = "smooth-line"
    STEP = "step"
    DOT = "dot"
    COMPARE_HISTOGRAM = "compare-histogram"
    OUTLIER_DETECTION = "outlier-detection"

    @classmethod
    def parse(cls, key) -> "ChartType":
        """
        Chart type from its key (case-insensitive) or an existing member.

        Raises:
            ConfigValidationError: If the key is not a known chart type
        """
        if isinstance(key, cls):
            return key
        try:
            return cls(str(key).strip().lower())
        except ValueError:
            raise ConfigValidationError(
                f"Unknown chart type: {key!r}",
                field="chart_type",
                expected=", ".join(cls.keys()),
                actual=str(key)
            ) from None

    @classmethod
    def keys(cls) -> List[str]:
        return [member.value for member in cls]

    @property
    def mode(self) -> ChartMode:
        """Analysis mode this chart type renders."""
        if self is ChartType.COMPARE_HISTOGRAM:
            return ChartMode.COMPARED
        if self is ChartType.OUTLIER_DETECTION:
            return ChartMode.OUTLIER_ANALYZED
        return ChartMode.HISTOGRAMMED

    @property
    def zoomable(self) -> bool:
        return self.mode is ChartMode.HISTOGRAMMED

    @property
    def label(self) -> str:
        return _LABELS[self]


_LABELS = {
    ChartType.HISTOGRAM: "Histogram (Bars)",
    ChartType.LINE: "Line Chart",
    ChartType.AREA: "Area Chart",
    ChartType.SCATTER: "Scatter Plot",
    ChartType.HORIZONTAL_BAR: "Horizontal Bars",
    ChartType.SMOOTH_LINE: "Smooth Line",
    ChartType.STEP: "Step Chart",
    ChartType.DOT: "Dot Plot",
    ChartType.COMPARE_HISTOGRAM: "Compare Distributions",
    ChartType.OUTLIER_DETECTION: "Outlier Detection",
}
