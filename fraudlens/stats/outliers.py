"""
Outlier detector (IQR method).

Quartiles use linear interpolation between closest ranks:
index = p·(n - 1), interpolated between the floor and ceil neighbours.
Points strictly below Q1 - k·IQR or above Q3 + k·IQR are outliers
(k = 1.5 by default).
"""

import math
from typing import Any, Dict, Mapping, Sequence

import numpy as np

from fraudlens.core.constants import OUTLIER_IQR_MULTIPLIER
from fraudlens.core.exceptions import InsufficientDataError
from fraudlens.core.logging_config import get_logger
from fraudlens.stats.models import OutlierBounds, OutlierResult

logger = get_logger(__name__)


def percentile(sorted_values: Sequence[float], p: float) -> float:
    """
    Percentile of an ascending sample by linear interpolation.

    Args:
        sorted_values: Sample sorted ascending
        p: Fraction in [0, 1] (0.25 for Q1)

    Returns:
        Interpolated value

    Raises:
        InsufficientDataError: If the sample is empty
        ValueError: If p is outside [0, 1]
    """
    n = len(sorted_values)
    if n == 0:
        raise InsufficientDataError("percentile", required=1, actual=0)
    if not 0.0 <= p <= 1.0:
        raise ValueError(f"p must be within [0, 1], got {p}")

    index = p * (n - 1)
    lower = math.floor(index)
    upper = math.ceil(index)
    low_value = float(sorted_values[lower])
    if lower == upper:
        return low_value
    return low_value + (index - lower) * (float(sorted_values[upper]) - low_value)


def outlier_bounds(values: Sequence[float], multiplier: float = OUTLIER_IQR_MULTIPLIER) -> OutlierBounds:
    """
    Quartiles, median and fences of a sample.

    Raises:
        InsufficientDataError: If the sample is empty
    """
    ordered = np.sort(np.asarray(values, dtype=np.float64))
    if len(ordered) == 0:
        raise InsufficientDataError("outlier_bounds", required=1, actual=0)

    q1 = percentile(ordered, 0.25)
    q3 = percentile(ordered, 0.75)
    iqr = q3 - q1
    return OutlierBounds(
        lower_bound=q1 - multiplier * iqr,
        upper_bound=q3 + multiplier * iqr,
        q1=q1,
        q3=q3,
        median=percentile(ordered, 0.5),
    )


def detect_outliers(
    points: Sequence[Mapping[str, Any]],
    multiplier: float = OUTLIER_IQR_MULTIPLIER
) -> OutlierResult:
    """
    Split points into outliers and non-outliers by the IQR rule.

    Each point is a mapping with a numeric ``value``; any other keys ride
    along untouched.

    Args:
        points: Points to classify
        multiplier: Fence width in IQRs

    Returns:
        OutlierResult with bounds and both partitions (input order kept)

    Raises:
        InsufficientDataError: If there are no points
    """
    if len(points) == 0:
        raise InsufficientDataError("detect_outliers", required=1, actual=0)

    bounds = outlier_bounds([point["value"] for point in points], multiplier=multiplier)

    outliers = []
    non_outliers = []
    for point in points:
        value = point["value"]
        if value < bounds.lower_bound or value > bounds.upper_bound:
            outliers.append(dict(point))
        else:
            non_outliers.append(dict(point))

    logger.debug(
        f"IQR fences [{bounds.lower_bound:.4g}, {bounds.upper_bound:.4g}]: "
        f"{len(outliers)}/{len(points)} outliers"
    )
    return OutlierResult(bounds=bounds, outliers=outliers, non_outliers=non_outliers)


def outlier_summary_by_flag(result: OutlierResult) -> Dict[str, Dict[str, int]]:
    """
    Count outliers and non-outliers per fraud flag.

    Points without a ``flag`` key are skipped.
    """
    summary = {
        "fraud": {"outliers": 0, "non_outliers": 0},
        "legitimate": {"outliers": 0, "non_outliers": 0},
    }
    for key, group in (("outliers", result.outliers), ("non_outliers", result.non_outliers)):
        for point in group:
            if "flag" not in point:
                continue
            label = "fraud" if point["flag"] == 1 else "legitimate"
            summary[label][key] += 1
    return summary
