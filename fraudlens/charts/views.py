"""
Computed chart results.

A chart holds at most one view, tagged by type: the rendering layer picks
its drawing routine with an isinstance check instead of a string lookup.
"""

from dataclasses import dataclass
from typing import Any, Dict, List, Optional, Tuple

from fraudlens.core.constants import Y_AXIS_HEADROOM
from fraudlens.stats.models import Bin, OutlierResult, Regression, SeriesComparison


def histogram_y_max(bins: List[Bin], regression: Optional[Regression], domain: Tuple[float, float]) -> float:
    """
    Top of the fraud-ratio axis.

    Headroom above the tallest bar and the trend line at both domain ends,
    so neither is clipped. Falls back to 1.0 when nothing is positive.
    """
    candidates = [b.fraud_ratio for b in bins]
    if regression is not None:
        candidates.extend(regression.predict(x) for x in domain)
    top = max(candidates, default=0.0)
    if top <= 0:
        return 1.0
    return top * Y_AXIS_HEADROOM


@dataclass(frozen=True)
class HistogramView:
    """
    Fraud-ratio bins over the current domain, with the fitted trend.

    Attributes:
        bins: Bins across the domain
        regression: Trend line, None when no bin could be fitted
        domain: (min, max) the bins cover
        y_max: Top of the fraud-ratio axis
    """
    bins: Tuple[Bin, ...]
    regression: Optional[Regression]
    domain: Tuple[float, float]
    y_max: float

    def to_dict(self) -> Dict[str, Any]:
        return {
            "kind": "histogram",
            "domain": list(self.domain),
            "y_max": self.y_max,
            "bins": [b.to_dict() for b in self.bins],
            "regression": self.regression.to_dict() if self.regression else None,
        }


@dataclass(frozen=True)
class ComparisonView:
    """Fraud vs legitimate distribution comparison."""
    comparison: SeriesComparison

    def to_dict(self) -> Dict[str, Any]:
        return {"kind": "comparison", **self.comparison.to_dict()}


@dataclass(frozen=True)
class OutlierView:
    """IQR outlier partition of every point."""
    result: OutlierResult

    def to_dict(self) -> Dict[str, Any]:
        return {"kind": "outliers", **self.result.to_dict()}
