"""
Trend fitter.

Ordinary least-squares line through (bin midpoint, fraud ratio) points.
"""

import math
from typing import Iterable, Sequence, Tuple

from fraudlens.core.exceptions import InsufficientDataError
from fraudlens.stats.models import Bin, Regression


def fit_linear(points: Sequence[Tuple[float, float]]) -> Regression:
    """
    Fit y = slope * x + intercept by ordinary least squares.

    slope = (nΣxy - ΣxΣy) / (nΣx² - (Σx)²), intercept = (Σy - slope·Σx) / n.
    One point, or all x equal, gives slope 0 and intercept mean(y).

    The fitter does not screen non-finite input; callers drop such points.

    Args:
        points: (x, y) pairs

    Returns:
        Regression

    Raises:
        InsufficientDataError: If there are no points
    """
    points = list(points)
    n = len(points)
    if n == 0:
        raise InsufficientDataError("fit_linear", required=1, actual=0)

    if n == 1:
        return Regression(slope=0.0, intercept=float(points[0][1]))

    sum_x = sum_y = sum_xy = sum_xx = 0.0
    for x, y in points:
        sum_x += x
        sum_y += y
        sum_xy += x * y
        sum_xx += x * x

    first_x = points[0][0]
    denominator = n * sum_xx - sum_x * sum_x

    # All-equal x can leave rounding residue in the denominator
    if denominator == 0 or all(x == first_x for x, _ in points):
        return Regression(slope=0.0, intercept=sum_y / n)

    slope = (n * sum_xy - sum_x * sum_y) / denominator
    intercept = (sum_y - slope * sum_x) / n
    return Regression(slope=float(slope), intercept=float(intercept))


def fit_bins(bins: Iterable[Bin]) -> Regression:
    """
    Fit the trend of fraud ratio against bin midpoint.

    Points with a non-finite midpoint or ratio are dropped first.

    Raises:
        InsufficientDataError: If no finite point remains
    """
    points = [
        (b.x_mid, b.fraud_ratio)
        for b in bins
        if math.isfinite(b.x_mid) and math.isfinite(b.fraud_ratio)
    ]
    return fit_linear(points)
