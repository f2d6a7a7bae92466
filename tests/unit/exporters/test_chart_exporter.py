"""
Unit tests for ChartExporter: dict form, JSON and CSV output per chart mode.
"""

import dataclasses
import json
import math

import numpy as np
import pandas as pd
import pytest

from fraudlens.charts.chart_state import ChartState
from fraudlens.charts.merge import MergedChart
from fraudlens.exporters.chart_exporter import ChartExporter, NumpyJSONEncoder, sanitize


def _chart(dataset, chart_type="histogram", bin_count=3):
    chart = ChartState("chart-1", dataset=dataset, chart_type=chart_type, bin_count=bin_count)
    chart.select_variable("amount")
    return chart


class TestSanitize:
    """Test non-finite value handling."""

    def test_nested_non_finite_become_none(self):
        data = {"a": math.nan, "b": [1.0, math.inf, (-math.inf, 2.0)], "c": "text", "d": 3}

        assert sanitize(data) == {"a": None, "b": [1.0, None, [None, 2.0]], "c": "text", "d": 3}

    def test_encoder_handles_numpy(self):
        payload = {
            "i": np.int64(4),
            "f": np.float64(0.5),
            "flag": np.bool_(True),
            "arr": np.array([1.0, np.inf]),
        }

        decoded = json.loads(json.dumps(payload, cls=NumpyJSONEncoder))

        assert decoded == {"i": 4, "f": 0.5, "flag": True, "arr": [1.0, None]}


class TestToDict:
    """Test the dictionary form of charts."""

    def test_empty_chart(self):
        data = ChartExporter.to_dict(ChartState("chart-1"))

        assert data["mode"] == "empty"
        assert data["view"] is None
        assert data["domain"] is None
        assert data["valid_points"] == 0

    def test_histogram_chart(self, small_dataset):
        data = ChartExporter.to_dict(_chart(small_dataset))

        assert data["title"] == "Analysis: amount (small.csv)"
        assert data["dataset_id"] == small_dataset.dataset_id
        assert data["mode"] == "histogrammed"
        assert data["domain"] == [1.0, 10.0]
        assert data["valid_points"] == 10
        assert data["overall_fraud_rate"] == pytest.approx(0.3)
        assert data["view"]["kind"] == "histogram"
        assert [b["count"] for b in data["view"]["bins"]] == [3, 3, 4]
        assert set(data["view"]["regression"]) == {"slope", "intercept"}

    def test_comparison_chart(self, small_dataset):
        data = ChartExporter.to_dict(_chart(small_dataset, "compare-histogram"))

        view = data["view"]
        assert view["kind"] == "comparison"
        assert view["label_a"] == "fraud"
        assert view["ks"]["statistic"] == pytest.approx(1.0)

    def test_outlier_chart(self, small_dataset):
        data = ChartExporter.to_dict(_chart(small_dataset, "outlier-detection"))

        assert data["view"]["kind"] == "outliers"
        assert data["view"]["outlier_count"] == 0
        assert len(data["view"]["non_outliers"]) == 10

    def test_merged_chart(self, small_dataset):
        merged = MergedChart("chart-merged-1", _chart(small_dataset), _chart(small_dataset))

        data = ChartExporter.to_dict(merged)

        assert data["title"] == "Merged: amount"
        assert len(data["sources"]) == 2


class TestWriteJson:
    """Test JSON output."""

    def test_round_trip_through_file(self, tmp_path, small_dataset):
        chart = _chart(small_dataset)
        path = ChartExporter.write_json(chart, str(tmp_path / "out" / "chart.json"))

        with open(path, encoding="utf-8") as f:
            data = json.load(f)

        assert data == ChartExporter.to_dict(chart)

    def test_no_infinity_tokens(self, tmp_path, small_dataset):
        chart = _chart(small_dataset)
        chart.view = dataclasses.replace(chart.view, y_max=math.inf)

        path = ChartExporter.write_json(chart, str(tmp_path / "chart.json"))
        text = path.read_text(encoding="utf-8")

        assert "Infinity" not in text
        assert json.loads(text)["view"]["y_max"] is None


class TestBinsFrame:
    """Test the table behind each chart mode."""

    def test_histogram(self, small_dataset):
        frame = ChartExporter.bins_frame(_chart(small_dataset))

        assert list(frame.columns) == ["x0", "x1", "x_mid", "count", "fraud_rate", "fraud_ratio", "trend"]
        assert frame["count"].tolist() == [3, 3, 4]

    def test_comparison(self, small_dataset):
        chart = _chart(small_dataset, "compare-histogram")

        frame = ChartExporter.bins_frame(chart)

        assert list(frame.columns) == ["x0", "x1", "density_fraud", "density_legitimate"]
        assert len(frame) == chart.config.compare_bins
        assert frame["density_fraud"].sum() == pytest.approx(1.0)
        assert frame["density_legitimate"].sum() == pytest.approx(1.0)

    def test_outliers_in_row_order(self, small_dataset):
        frame = ChartExporter.bins_frame(_chart(small_dataset, "outlier-detection"))

        assert frame["row"].tolist() == list(range(10))
        assert not frame["outlier"].any()

    def test_merged(self, small_dataset):
        merged = MergedChart("m", _chart(small_dataset), _chart(small_dataset))

        frame = ChartExporter.bins_frame(merged)

        assert frame.columns[0] == "dataset"
        assert len(frame) == 6

    def test_empty_chart(self):
        assert ChartExporter.bins_frame(ChartState("chart-1")).empty


class TestWriteCsv:
    """Test CSV output."""

    def test_histogram_csv(self, tmp_path, small_dataset):
        path = ChartExporter.write_csv(_chart(small_dataset), str(tmp_path / "nested" / "bins.csv"))

        frame = pd.read_csv(path)

        assert len(frame) == 3
        assert frame["fraud_ratio"].iloc[-1] == pytest.approx(2.5)

    def test_empty_chart_csv(self, tmp_path):
        path = ChartExporter.write_csv(ChartState("chart-1"), str(tmp_path / "empty.csv"))

        assert path.exists()
