"""
Two-sample comparator.

Compares two numeric series, typically the fraud and legitimate populations
of one variable:

- Kolmogorov-Smirnov statistic with an asymptotic p-value approximation
- Density histograms on shared edges, so the two shapes line up
- Gaussian kernel density curves on a shared grid

The kernel bandwidth is a fixed constant rather than a data-driven choice;
on variables whose scale is far from 1 the curve will look either spiky or
flat.
"""

import math
from typing import Optional, Sequence, Tuple

import numpy as np
from scipy.stats import norm

from fraudlens.core.constants import (
    DEFAULT_COMPARE_BINS,
    DEFAULT_KDE_POINTS,
    DEFAULT_KDE_BANDWIDTH,
)
from fraudlens.core.exceptions import InsufficientDataError
from fraudlens.core.logging_config import get_logger
from fraudlens.stats.models import (
    ComparisonResult,
    DensityHistogram,
    DensityCurve,
    SeriesComparison,
)

logger = get_logger(__name__)


def ks_test(series_a: Sequence[float], series_b: Sequence[float]) -> ComparisonResult:
    """
    Two-sample Kolmogorov-Smirnov test.

    Both series are sorted and walked together. At each step the series
    with the smaller current value advances; on a tie both advance past
    every copy of the tied value. D is the largest |Fa - Fb| seen.

    The p-value uses n = |A||B| / (|A| + |B|) and
    x = D·√n + 0.12 + 0.11/√n:
    p = 1 - 0.627·e^(-1.2x²) when x < 1.18, else 2·e^(-2x²),
    clamped to [0, 1]. D = 0 gives p = 1.

    Args:
        series_a: First sample
        series_b: Second sample

    Returns:
        ComparisonResult(statistic, p_value)

    Raises:
        InsufficientDataError: If either series is empty
    """
    a = np.sort(np.asarray(series_a, dtype=np.float64))
    b = np.sort(np.asarray(series_b, dtype=np.float64))
    n_a, n_b = len(a), len(b)

    if n_a == 0 or n_b == 0:
        raise InsufficientDataError("ks_test", required=1, actual=min(n_a, n_b))

    i = j = 0
    d = 0.0
    while i < n_a and j < n_b:
        value_a, value_b = a[i], b[j]
        if value_a < value_b:
            i += 1
        elif value_b < value_a:
            j += 1
        else:
            while i < n_a and a[i] == value_a:
                i += 1
            while j < n_b and b[j] == value_b:
                j += 1
        d = max(d, abs(i / n_a - j / n_b))

    return ComparisonResult(statistic=float(d), p_value=ks_p_value(d, n_a, n_b))


def ks_p_value(statistic: float, n_a: int, n_b: int) -> float:
    """Approximate p-value for a two-sample KS statistic."""
    if statistic == 0:
        return 1.0

    n = n_a * n_b / (n_a + n_b)
    root_n = math.sqrt(n)
    x = statistic * root_n + 0.12 + 0.11 / root_n

    if x < 1.18:
        p = 1 - 0.627 * math.exp(-1.2 * x * x)
    else:
        p = 2 * math.exp(-2 * x * x)
    return min(1.0, max(0.0, p))


def combined_domain(series_a: np.ndarray, series_b: np.ndarray) -> Tuple[float, float]:
    combined = np.concatenate([series_a, series_b])
    return float(combined.min()), float(combined.max())


def density_histograms(
    series_a: Sequence[float],
    series_b: Sequence[float],
    bin_count: int = DEFAULT_COMPARE_BINS,
    domain: Optional[Tuple[float, float]] = None
) -> DensityHistogram:
    """
    Histogram both series on the same edges as count / series length.

    Args:
        series_a: First sample
        series_b: Second sample
        bin_count: Number of shared bins
        domain: Range to cover (default: combined min/max)

    Raises:
        InsufficientDataError: If either series is empty
    """
    a = np.asarray(series_a, dtype=np.float64)
    b = np.asarray(series_b, dtype=np.float64)
    if len(a) == 0 or len(b) == 0:
        raise InsufficientDataError("density_histograms", required=1, actual=min(len(a), len(b)))

    if domain is None:
        domain = combined_domain(a, b)

    counts_a, edges = np.histogram(a, bins=bin_count, range=domain)
    counts_b, _ = np.histogram(b, bins=edges)

    return DensityHistogram(
        edges=tuple(float(e) for e in edges),
        density_a=tuple(float(c) / len(a) for c in counts_a),
        density_b=tuple(float(c) / len(b) for c in counts_b),
    )


def kernel_density(
    values: Sequence[float],
    grid: np.ndarray,
    bandwidth: float = DEFAULT_KDE_BANDWIDTH
) -> np.ndarray:
    """
    Gaussian kernel density estimate on a grid.

    density(x) = (1 / (n·h)) Σ K((x - xi) / h), K the standard normal pdf.

    Args:
        values: Sample
        grid: Points to evaluate at
        bandwidth: Fixed bandwidth h

    Returns:
        Density at each grid point (zeros for an empty sample)
    """
    values = np.asarray(values, dtype=np.float64)
    grid = np.asarray(grid, dtype=np.float64)
    if len(values) == 0:
        return np.zeros_like(grid)

    scaled = (grid[:, np.newaxis] - values[np.newaxis, :]) / bandwidth
    return norm.pdf(scaled).sum(axis=1) / (len(values) * bandwidth)


def density_curves(
    series_a: Sequence[float],
    series_b: Sequence[float],
    points: int = DEFAULT_KDE_POINTS,
    bandwidth: float = DEFAULT_KDE_BANDWIDTH,
    domain: Optional[Tuple[float, float]] = None
) -> DensityCurve:
    """
    Kernel density curves for both series on one evenly spaced grid.

    Raises:
        InsufficientDataError: If either series is empty
    """
    a = np.asarray(series_a, dtype=np.float64)
    b = np.asarray(series_b, dtype=np.float64)
    if len(a) == 0 or len(b) == 0:
        raise InsufficientDataError("density_curves", required=1, actual=min(len(a), len(b)))

    if domain is None:
        domain = combined_domain(a, b)
    grid = np.linspace(domain[0], domain[1], points)

    return DensityCurve(
        grid=tuple(float(x) for x in grid),
        density_a=tuple(float(y) for y in kernel_density(a, grid, bandwidth)),
        density_b=tuple(float(y) for y in kernel_density(b, grid, bandwidth)),
        bandwidth=float(bandwidth),
    )


def compare_series(
    series_a: Sequence[float],
    series_b: Sequence[float],
    label_a: str = "A",
    label_b: str = "B",
    bin_count: int = DEFAULT_COMPARE_BINS,
    kde_points: int = DEFAULT_KDE_POINTS,
    bandwidth: float = DEFAULT_KDE_BANDWIDTH
) -> SeriesComparison:
    """
    KS test plus both density views for two series.

    Raises:
        InsufficientDataError: If either series is empty
    """
    a = np.asarray(series_a, dtype=np.float64)
    b = np.asarray(series_b, dtype=np.float64)

    ks = ks_test(a, b)
    domain = combined_domain(a, b)

    logger.debug(
        f"Compared {label_a} (n={len(a)}) vs {label_b} (n={len(b)}): "
        f"D={ks.statistic:.4f}, p={ks.p_value:.4g}"
    )

    return SeriesComparison(
        ks=ks,
        histogram=density_histograms(a, b, bin_count=bin_count, domain=domain),
        kde=density_curves(a, b, points=kde_points, bandwidth=bandwidth, domain=domain),
        label_a=label_a,
        label_b=label_b,
        size_a=len(a),
        size_b=len(b),
    )


def compare_fraud_populations(series, **kwargs) -> SeriesComparison:
    """
    Compare the fraud (flag 1) and legitimate (flag 0) values of a series.

    Args:
        series: ValueFlagSeries
        **kwargs: Passed to compare_series (bin_count, kde_points, bandwidth)

    Raises:
        InsufficientDataError: If either population is empty
    """
    fraud_values, legit_values = series.split_by_flag()
    if len(fraud_values) == 0 or len(legit_values) == 0:
        raise InsufficientDataError(
            "fraud vs legitimate comparison",
            required=1,
            actual=min(len(fraud_values), len(legit_values)),
            variable=series.variable or None,
        )
    return compare_series(fraud_values, legit_values, label_a="fraud", label_b="legitimate", **kwargs)
