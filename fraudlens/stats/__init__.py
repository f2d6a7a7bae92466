"""
Statistics engine: binning, trend fitting, two-sample comparison and outliers.

All functions are pure; calling them twice with the same input gives the
same result.
"""

from .models import (
    Bin,
    Regression,
    ComparisonResult,
    DensityHistogram,
    DensityCurve,
    SeriesComparison,
    OutlierBounds,
    OutlierResult,
)
from .binning import compute_bins, bins_for_sources, bin_edges, shared_domain
from .trend import fit_linear, fit_bins
from .comparison import (
    ks_test,
    density_histograms,
    kernel_density,
    density_curves,
    compare_series,
    compare_fraud_populations,
)
from .outliers import percentile, outlier_bounds, detect_outliers, outlier_summary_by_flag

__all__ = [
    'Bin',
    'Regression',
    'ComparisonResult',
    'DensityHistogram',
    'DensityCurve',
    'SeriesComparison',
    'OutlierBounds',
    'OutlierResult',
    'compute_bins',
    'bins_for_sources',
    'bin_edges',
    'shared_domain',
    'fit_linear',
    'fit_bins',
    'ks_test',
    'density_histograms',
    'kernel_density',
    'density_curves',
    'compare_series',
    'compare_fraud_populations',
    'percentile',
    'outlier_bounds',
    'detect_outliers',
    'outlier_summary_by_flag',
]
