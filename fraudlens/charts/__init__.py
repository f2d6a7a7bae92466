"""Chart state, merged charts and session state."""

from .chart_types import ChartMode, ChartType
from .views import ComparisonView, HistogramView, OutlierView, histogram_y_max
from .chart_state import ChartState
from .merge import MergedChart, MergeSource
from .app_state import AppState, StatusMessage

__all__ = [
    'ChartMode',
    'ChartType',
    'ComparisonView',
    'HistogramView',
    'OutlierView',
    'histogram_y_max',
    'ChartState',
    'MergedChart',
    'MergeSource',
    'AppState',
    'StatusMessage',
]
