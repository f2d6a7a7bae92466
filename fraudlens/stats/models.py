"""
Data structures for statistics results.

Every result is a small dataclass with a to_dict() used by the exporters and
the CLI. Values are plain Python floats so results compare and serialize
without numpy surprises.
"""

import math
from dataclasses import dataclass, field
from typing import Any, Dict, List, Optional, Tuple

import numpy as np


def convert_numpy_types(obj):
    """
    Recursively convert numpy types to Python native types for JSON serialization.

    Args:
        obj: Any object that might contain numpy types

    Returns:
        Object with numpy types converted to Python types
    """
    if isinstance(obj, np.bool_):
        return bool(obj)
    elif isinstance(obj, np.integer):
        return int(obj)
    elif isinstance(obj, np.floating):
        return float(obj)
    elif isinstance(obj, np.ndarray):
        return obj.tolist()
    elif isinstance(obj, dict):
        return {key: convert_numpy_types(value) for key, value in obj.items()}
    elif isinstance(obj, list):
        return [convert_numpy_types(item) for item in obj]
    elif isinstance(obj, tuple):
        return tuple(convert_numpy_types(item) for item in obj)
    else:
        return obj


@dataclass(frozen=True)
class Bin:
    """
    One equal-width interval of a variable's domain.

    Attributes:
        x0: Inclusive lower edge
        x1: Upper edge (exclusive, except for the last bin)
        x_mid: Midpoint (x0 + x1) / 2
        count: Points falling in the bin
        fraud_rate: Fraud count / count (0 for an empty bin)
        fraud_ratio: fraud_rate / overall fraud rate (0 when that rate is 0)
    """
    x0: float
    x1: float
    x_mid: float
    count: int
    fraud_rate: float
    fraud_ratio: float

    @property
    def width(self) -> float:
        return self.x1 - self.x0

    def to_dict(self) -> Dict[str, Any]:
        """Convert to dictionary representation."""
        return {
            "x0": self.x0,
            "x1": self.x1,
            "x_mid": self.x_mid,
            "count": self.count,
            "fraud_rate": self.fraud_rate,
            "fraud_ratio": self.fraud_ratio,
        }


@dataclass(frozen=True)
class Regression:
    """Least-squares line y = slope * x + intercept."""
    slope: float
    intercept: float

    def predict(self, x: float) -> float:
        """Trend value at x."""
        return self.slope * x + self.intercept

    def to_dict(self) -> Dict[str, Any]:
        return {"slope": self.slope, "intercept": self.intercept}


@dataclass(frozen=True)
class ComparisonResult:
    """
    Two-sample Kolmogorov-Smirnov result.

    Attributes:
        statistic: Largest gap between the two empirical CDFs (0..1)
        p_value: Approximate significance, clamped to [0, 1]
    """
    statistic: float
    p_value: float

    def to_dict(self) -> Dict[str, Any]:
        return {"statistic": self.statistic, "p_value": self.p_value}


@dataclass(frozen=True)
class DensityHistogram:
    """
    Two series histogrammed over the same edges.

    Attributes:
        edges: len(density_a) + 1 shared bin edges
        density_a: count / len(series A) per bin
        density_b: count / len(series B) per bin
    """
    edges: Tuple[float, ...]
    density_a: Tuple[float, ...]
    density_b: Tuple[float, ...]

    def to_dict(self) -> Dict[str, Any]:
        return {
            "edges": list(self.edges),
            "density_a": list(self.density_a),
            "density_b": list(self.density_b),
        }


@dataclass(frozen=True)
class DensityCurve:
    """
    Gaussian kernel density estimates on a shared grid.

    Attributes:
        grid: Evaluation points across the combined domain
        density_a: Estimate for series A at each grid point
        density_b: Estimate for series B at each grid point
        bandwidth: Fixed kernel bandwidth used
    """
    grid: Tuple[float, ...]
    density_a: Tuple[float, ...]
    density_b: Tuple[float, ...]
    bandwidth: float

    def to_dict(self) -> Dict[str, Any]:
        return {
            "grid": list(self.grid),
            "density_a": list(self.density_a),
            "density_b": list(self.density_b),
            "bandwidth": self.bandwidth,
        }


@dataclass(frozen=True)
class SeriesComparison:
    """
    Everything a comparative distribution chart needs.

    Attributes:
        ks: KS statistic and p-value
        histogram: Density histograms on shared edges
        kde: Smoothed density curves
        label_a: Name of series A (e.g. "fraud")
        label_b: Name of series B (e.g. "legitimate")
        size_a: Points in series A
        size_b: Points in series B
    """
    ks: ComparisonResult
    histogram: DensityHistogram
    kde: DensityCurve
    label_a: str = "A"
    label_b: str = "B"
    size_a: int = 0
    size_b: int = 0

    def to_dict(self) -> Dict[str, Any]:
        return {
            "ks": self.ks.to_dict(),
            "histogram": self.histogram.to_dict(),
            "kde": self.kde.to_dict(),
            "label_a": self.label_a,
            "label_b": self.label_b,
            "size_a": self.size_a,
            "size_b": self.size_b,
        }


@dataclass(frozen=True)
class OutlierBounds:
    """Quartiles, median and Tukey fences of a sample."""
    lower_bound: float
    upper_bound: float
    q1: float
    q3: float
    median: float

    @property
    def iqr(self) -> float:
        return self.q3 - self.q1

    def to_dict(self) -> Dict[str, Any]:
        return {
            "lower_bound": self.lower_bound,
            "upper_bound": self.upper_bound,
            "q1": self.q1,
            "q3": self.q3,
            "median": self.median,
            "iqr": self.iqr,
        }


@dataclass
class OutlierResult:
    """
    Outlier partition of a set of points.

    Attributes:
        bounds: Quartiles and fences
        outliers: Points strictly outside the fences, in input order
        non_outliers: Remaining points, in input order
    """
    bounds: OutlierBounds
    outliers: List[Dict[str, Any]] = field(default_factory=list)
    non_outliers: List[Dict[str, Any]] = field(default_factory=list)

    @property
    def outlier_count(self) -> int:
        return len(self.outliers)

    @property
    def outlier_percentage(self) -> float:
        total = len(self.outliers) + len(self.non_outliers)
        if total == 0:
            return 0.0
        return 100.0 * len(self.outliers) / total

    def to_dict(self, include_points: bool = True) -> Dict[str, Any]:
        """
        Convert to dictionary representation.

        Args:
            include_points: Include the per-point lists (can be large)
        """
        result = {
            "bounds": self.bounds.to_dict(),
            "outlier_count": self.outlier_count,
            "outlier_percentage": self.outlier_percentage,
        }
        if include_points:
            result["outliers"] = convert_numpy_types(self.outliers)
            result["non_outliers"] = convert_numpy_types(self.non_outliers)
        return result


def finite_or_none(value: Optional[float]) -> Optional[float]:
    """Map NaN/inf to None so nothing non-finite reaches a consumer."""
    if value is None or not math.isfinite(value):
        return None
    return value
