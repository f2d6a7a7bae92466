"""
Binning engine.

Turns a value/flag series into equal-width bins, each carrying how its fraud
rate compares with the fraud rate of the whole series. The overall rate is
always taken over the full series passed in, never just the points inside
the requested domain, so a zoomed chart still measures deviation from the
population baseline.
"""

from typing import List, Sequence, Tuple

import numpy as np

from fraudlens.core.logging_config import get_logger
from fraudlens.stats.models import Bin

logger = get_logger(__name__)


def bin_edges(domain: Tuple[float, float], bin_count: int) -> np.ndarray:
    """
    Equal-width edges partitioning a domain.

    The first and last edges are exactly domain[0] and domain[1].

    Args:
        domain: (low, high) with low <= high
        bin_count: Number of bins (positive)

    Returns:
        Array of bin_count + 1 edges
    """
    low, high = float(domain[0]), float(domain[1])
    edges = np.linspace(low, high, bin_count + 1)
    edges[0], edges[-1] = low, high
    return edges


def compute_bins(
    values: Sequence[float],
    flags: Sequence[int],
    domain: Tuple[float, float],
    bin_count: int
) -> List[Bin]:
    """
    Compute per-bin fraud statistics over a domain.

    Bins are half-open [x0, x1) except the last, which also includes x1.
    Values outside the domain are excluded, not clamped.

    Edge cases:
        - Empty series: returns an empty list.
        - low == high: returns a single bin [low, low] holding every value
          equal to low, whatever bin_count is.
        - Overall fraud rate of 0: every fraud_ratio is 0.

    Args:
        values: Numeric values
        flags: 0/1 fraud flags, parallel to values
        domain: (low, high) range to partition
        bin_count: Number of bins (positive integer)

    Returns:
        List of Bin, ordered by x0

    Raises:
        ValueError: On mismatched lengths, bad bin count or inverted domain
    """
    values = np.asarray(values, dtype=np.float64)
    flags = np.asarray(flags, dtype=np.float64)

    if values.shape != flags.shape:
        raise ValueError(f"values and flags must have the same length ({len(values)} != {len(flags)})")
    if isinstance(bin_count, bool) or int(bin_count) != bin_count or bin_count < 1:
        raise ValueError(f"bin_count must be a positive integer, got {bin_count!r}")
    bin_count = int(bin_count)

    low, high = float(domain[0]), float(domain[1])
    if not low <= high:
        raise ValueError(f"domain must satisfy low <= high, got ({low}, {high})")

    if len(values) == 0:
        return []

    overall_rate = float(flags.mean())

    if low == high:
        in_bin = values == low
        return [_make_bin(low, high, int(in_bin.sum()), float(flags[in_bin].sum()), overall_rate)]

    edges = bin_edges((low, high), bin_count)
    in_domain = (values >= low) & (values <= high)
    domain_values = values[in_domain]
    domain_flags = flags[in_domain]

    # side='right' puts a value equal to an inner edge in the bin starting there
    indices = np.searchsorted(edges, domain_values, side="right") - 1
    indices = np.clip(indices, 0, bin_count - 1)

    counts = np.bincount(indices, minlength=bin_count)
    fraud_counts = np.bincount(indices, weights=domain_flags, minlength=bin_count)

    bins = [
        _make_bin(float(edges[i]), float(edges[i + 1]), int(counts[i]), float(fraud_counts[i]), overall_rate)
        for i in range(bin_count)
    ]

    logger.debug(
        f"Binned {len(domain_values)}/{len(values)} values into {bin_count} bins "
        f"over [{low}, {high}], overall fraud rate {overall_rate:.4f}"
    )
    return bins


def _make_bin(x0: float, x1: float, count: int, fraud_count: float, overall_rate: float) -> Bin:
    fraud_rate = fraud_count / count if count > 0 else 0.0
    fraud_ratio = fraud_rate / overall_rate if overall_rate > 0 else 0.0
    return Bin(
        x0=x0,
        x1=x1,
        x_mid=(x0 + x1) / 2,
        count=count,
        fraud_rate=fraud_rate,
        fraud_ratio=fraud_ratio,
    )


def shared_domain(series_values: Sequence[Sequence[float]]) -> Tuple[float, float]:
    """
    (min, max) over several value arrays.

    Raises:
        ValueError: If every array is empty
    """
    non_empty = [np.asarray(v, dtype=np.float64) for v in series_values if len(v) > 0]
    if not non_empty:
        raise ValueError("Cannot derive a domain from empty series")
    return (
        float(min(v.min() for v in non_empty)),
        float(max(v.max() for v in non_empty)),
    )


def bins_for_sources(
    sources: Sequence[Tuple[Sequence[float], Sequence[int]]],
    domain: Tuple[float, float],
    bin_count: int
) -> List[List[Bin]]:
    """
    Bin several (values, flags) sources over one shared domain.

    Each source keeps its own overall fraud rate as its baseline.

    Args:
        sources: (values, flags) pairs
        domain: Domain shared by every source
        bin_count: Number of bins

    Returns:
        One bin list per source, in input order
    """
    return [compute_bins(values, flags, domain, bin_count) for values, flags in sources]
