"""
Chart export to JSON and CSV.

JSON carries the full chart (selections, domain and computed view). CSV
carries the table behind the chart: fraud-ratio bins for histogram and
merged charts, density bins for comparison charts, and one row per point
for outlier charts. NaN and infinity never reach the output; they become
null in JSON and empty cells in CSV.
"""

import json
import logging
import math
from pathlib import Path
from typing import Any, Dict, Union

import numpy as np
import pandas as pd

from fraudlens.charts.chart_state import ChartState
from fraudlens.charts.merge import MergedChart
from fraudlens.stats.models import convert_numpy_types, finite_or_none

logger = logging.getLogger(__name__)

AnyChart = Union[ChartState, MergedChart]


class NumpyJSONEncoder(json.JSONEncoder):
    """
    JSON encoder that handles numpy types.

    Converts:
    - numpy int types → Python int
    - numpy float types → Python float (NaN/inf → null)
    - numpy bool → Python bool
    - numpy arrays → Python lists
    """

    def default(self, obj: Any) -> Any:
        if isinstance(obj, np.integer):
            return int(obj)
        if isinstance(obj, np.floating):
            return finite_or_none(float(obj))
        if isinstance(obj, np.bool_):
            return bool(obj)
        if isinstance(obj, np.ndarray):
            return sanitize(obj.tolist())
        return super().default(obj)


def sanitize(obj: Any) -> Any:
    """Recursively replace non-finite floats with None."""
    if isinstance(obj, float):
        return finite_or_none(obj)
    if isinstance(obj, dict):
        return {key: sanitize(value) for key, value in obj.items()}
    if isinstance(obj, (list, tuple)):
        return [sanitize(item) for item in obj]
    return obj


class ChartExporter:
    """Serialize charts for downstream tools."""

    @staticmethod
    def to_dict(chart: AnyChart) -> Dict[str, Any]:
        """
        Dictionary form of a chart.

        Args:
            chart: ChartState or MergedChart

        Returns:
            JSON-ready dictionary
        """
        if isinstance(chart, MergedChart):
            return sanitize(convert_numpy_types(chart.to_dict()))

        series = chart.series
        result = {
            "chart_id": chart.chart_id,
            "title": chart.title,
            "dataset": chart.dataset.name if chart.dataset is not None else None,
            "dataset_id": chart.dataset.dataset_id if chart.dataset is not None else None,
            "variable": chart.variable,
            "chart_type": chart.chart_type.value,
            "mode": chart.mode.value,
            "bin_count": chart.bin_count,
            "color": chart.color,
            "domain": list(chart.domain) if chart.domain is not None else None,
            "initial_domain": list(chart.initial_domain) if chart.initial_domain is not None else None,
            "is_zoomed": chart.is_zoomed,
            "valid_points": len(series) if series is not None else 0,
            "overall_fraud_rate": series.overall_fraud_rate if series is not None else None,
            "view": chart.view.to_dict() if chart.view is not None else None,
        }
        return sanitize(convert_numpy_types(result))

    @classmethod
    def write_json(cls, chart: AnyChart, output_path: str) -> Path:
        """Write a chart as indented JSON and return the path."""
        path = Path(output_path)
        path.parent.mkdir(parents=True, exist_ok=True)
        with open(path, "w", encoding="utf-8") as f:
            json.dump(cls.to_dict(chart), f, indent=2, cls=NumpyJSONEncoder, allow_nan=False)
        logger.info(f"Wrote chart JSON to {path}")
        return path

    @staticmethod
    def bins_frame(chart: AnyChart) -> pd.DataFrame:
        """
        Table behind a chart.

        Returns:
            DataFrame; empty when the chart has no view
        """
        if isinstance(chart, MergedChart):
            frames = []
            for source in chart.sources:
                frame = pd.DataFrame([b.to_dict() for b in source.bins])
                frame.insert(0, "dataset", source.dataset_name)
                frames.append(frame)
            return pd.concat(frames, ignore_index=True)

        if chart.bins:
            frame = pd.DataFrame([b.to_dict() for b in chart.bins])
            regression = chart.regression
            if regression is not None:
                frame["trend"] = [regression.predict(x) for x in frame["x_mid"]]
            return frame

        comparison = chart.comparison
        if comparison is not None:
            edges = comparison.histogram.edges
            return pd.DataFrame({
                "x0": edges[:-1],
                "x1": edges[1:],
                f"density_{comparison.label_a}": comparison.histogram.density_a,
                f"density_{comparison.label_b}": comparison.histogram.density_b,
            })

        outliers = chart.outliers
        if outliers is not None:
            rows = [{**point, "outlier": True} for point in outliers.outliers]
            rows += [{**point, "outlier": False} for point in outliers.non_outliers]
            frame = pd.DataFrame(rows)
            return frame.sort_values("row").reset_index(drop=True) if "row" in frame else frame

        return pd.DataFrame()

    @classmethod
    def write_csv(cls, chart: AnyChart, output_path: str) -> Path:
        """Write the chart's table as CSV and return the path."""
        path = Path(output_path)
        path.parent.mkdir(parents=True, exist_ok=True)
        frame = cls.bins_frame(chart).replace([math.inf, -math.inf], np.nan)
        frame.to_csv(path, index=False)
        logger.info(f"Wrote {len(frame)} row(s) to {path}")
        return path
