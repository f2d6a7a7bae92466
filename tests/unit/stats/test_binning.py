"""
Unit tests for the binning engine.

Tests equal-width partitioning, fraud ratio computation and the
degenerate inputs (empty series, zero-width domain, no fraud at all).
"""

import numpy as np
import pytest

from fraudlens.stats.binning import bin_edges, bins_for_sources, compute_bins, shared_domain


@pytest.mark.unit
class TestComputeBins:
    """Test compute_bins partitioning and statistics."""

    def test_returns_requested_bin_count(self):
        """Bins partition the domain without gaps or overlaps."""
        values = np.arange(10, dtype=float)
        flags = np.zeros(10, dtype=np.uint8)

        bins = compute_bins(values, flags, (0.0, 10.0), 5)

        assert len(bins) == 5
        assert bins[0].x0 == 0.0
        assert bins[-1].x1 == 10.0
        for left, right in zip(bins, bins[1:]):
            assert left.x1 == right.x0
        for b in bins:
            assert b.width == pytest.approx(2.0)
            assert b.x_mid == pytest.approx((b.x0 + b.x1) / 2)

    def test_equal_width_for_awkward_domain(self):
        """Widths stay equal for domains that do not divide evenly."""
        bins = compute_bins([0.1, 0.5, 0.7], [0, 1, 0], (0.1, 0.7), 7)

        assert len(bins) == 7
        for b in bins:
            assert b.width == pytest.approx(0.6 / 7)

    def test_counts_sum_to_values_inside_domain(self):
        """Values outside the domain are excluded, not clamped."""
        values = [-1.0, 0.0, 5.0, 10.0, 11.0]
        flags = [1, 0, 0, 1, 1]

        bins = compute_bins(values, flags, (0.0, 10.0), 2)

        assert [b.count for b in bins] == [1, 2]
        assert sum(b.count for b in bins) == 3

    def test_inner_edge_belongs_to_right_bin(self):
        """Bins are half-open, except the last which includes its upper edge."""
        bins = compute_bins([0.0, 5.0, 10.0], [0, 0, 0], (0.0, 10.0), 2)

        assert bins[0].count == 1
        assert bins[1].count == 2

    def test_fraud_ratio_relative_to_overall_rate(self):
        """fraud_ratio = bin fraud rate / overall fraud rate."""
        bins = compute_bins([1, 2, 3, 4], [0, 0, 1, 1], (1.0, 4.0), 2)

        assert bins[0].fraud_rate == 0.0
        assert bins[0].fraud_ratio == 0.0
        assert bins[1].fraud_rate == 1.0
        assert bins[1].fraud_ratio == pytest.approx(2.0)

    def test_overall_rate_uses_whole_series(self):
        """A narrower domain still measures against the full-series baseline."""
        bins = compute_bins([1, 2, 3, 4], [1, 0, 0, 0], (1.0, 2.0), 1)

        assert bins[0].count == 2
        assert bins[0].fraud_rate == pytest.approx(0.5)
        assert bins[0].fraud_ratio == pytest.approx(2.0)

    def test_zero_overall_fraud_rate(self):
        """No fraud at all gives ratio 0 everywhere, never NaN."""
        bins = compute_bins([1, 2, 3, 4, 5], [0, 0, 0, 0, 0], (1.0, 5.0), 3)

        assert all(b.fraud_ratio == 0.0 for b in bins)
        assert all(np.isfinite(b.fraud_ratio) for b in bins)

    def test_empty_bin_has_zero_rate(self):
        """An empty bin reports rate and ratio 0."""
        bins = compute_bins([0.0, 10.0], [1, 0], (0.0, 10.0), 5)

        assert bins[2].count == 0
        assert bins[2].fraud_rate == 0.0
        assert bins[2].fraud_ratio == 0.0

    def test_empty_series_returns_no_bins(self):
        """An empty series gives an empty list."""
        assert compute_bins([], [], (0.0, 1.0), 10) == []

    def test_zero_width_domain_gives_single_bin(self):
        """low == high collapses to one bin holding every value."""
        bins = compute_bins([3.0, 3.0, 3.0], [1, 0, 0], (3.0, 3.0), 10)

        assert len(bins) == 1
        assert bins[0].x0 == bins[0].x1 == 3.0
        assert bins[0].count == 3
        assert bins[0].fraud_ratio == pytest.approx(1.0)

    def test_bin_count_outside_ui_range(self):
        """The engine accepts any positive bin count."""
        assert len(compute_bins([0, 1], [0, 1], (0.0, 1.0), 1)) == 1
        assert len(compute_bins([0, 1], [0, 1], (0.0, 1.0), 100)) == 100

    def test_idempotent(self):
        """Repeated calls give identical output."""
        rng = np.random.default_rng(3)
        values = rng.normal(size=500)
        flags = (rng.random(500) < 0.1).astype(np.uint8)
        domain = (float(values.min()), float(values.max()))

        assert compute_bins(values, flags, domain, 12) == compute_bins(values, flags, domain, 12)

    def test_mismatched_lengths_rejected(self):
        with pytest.raises(ValueError):
            compute_bins([1, 2, 3], [0, 1], (1.0, 3.0), 2)

    @pytest.mark.parametrize("bin_count", [0, -1, 2.5, True])
    def test_invalid_bin_count_rejected(self, bin_count):
        with pytest.raises(ValueError):
            compute_bins([1, 2], [0, 1], (1.0, 2.0), bin_count)

    def test_inverted_domain_rejected(self):
        with pytest.raises(ValueError):
            compute_bins([1, 2], [0, 1], (2.0, 1.0), 2)


@pytest.mark.unit
class TestBinHelpers:
    """Test edges, shared domains and multi-source binning."""

    def test_bin_edges_hit_domain_exactly(self):
        edges = bin_edges((0.1, 0.7), 3)

        assert len(edges) == 4
        assert edges[0] == 0.1
        assert edges[-1] == 0.7

    def test_shared_domain(self):
        assert shared_domain([[1.0, 5.0], [], [-2.0, 3.0]]) == (-2.0, 5.0)

    def test_shared_domain_all_empty(self):
        with pytest.raises(ValueError):
            shared_domain([[], []])

    def test_bins_for_sources_share_edges(self):
        """Every source is binned on the same edges with its own baseline."""
        sources = [
            ([1, 2, 3, 4], [0, 0, 1, 1]),
            ([2, 4, 6, 8], [1, 0, 0, 0]),
        ]

        result = bins_for_sources(sources, (1.0, 8.0), 4)

        assert len(result) == 2
        assert [b.x0 for b in result[0]] == [b.x0 for b in result[1]]
        assert sum(b.count for b in result[0]) == 4
        assert sum(b.count for b in result[1]) == 4
        # Second source: overall rate 0.25, the only fraud value (2) sits in bin 0
        assert result[1][0].fraud_ratio == pytest.approx(4.0)
