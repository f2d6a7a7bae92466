"""Chart exporters."""

from .chart_exporter import ChartExporter, NumpyJSONEncoder, sanitize

__all__ = ['ChartExporter', 'NumpyJSONEncoder', 'sanitize']
