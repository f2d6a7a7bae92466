"""
Integration tests for the FraudLens CLI.

Each command runs through click's CliRunner against files written to
tmp_path. Files are loaded in a worker process, as in normal use.
"""

import json

import pandas as pd
import pytest
import yaml
from click.testing import CliRunner

from fraudlens import __version__
from fraudlens.cli import cli


@pytest.fixture
def runner():
    return CliRunner()


@pytest.fixture
def second_csv(tmp_path):
    path = tmp_path / "second.csv"
    pd.DataFrame({
        "sessionid": ["a", "b", "c", "d"],
        "amount": [10.0, 500.0, 900.0, 2000.0],
        "fraud_combined": [0, 1, 0, 1],
    }).to_csv(path, index=False)
    return str(path)


@pytest.mark.integration
class TestAnalyzeCommand:
    """Test 'fraudlens analyze'."""

    def test_histogram(self, runner, transactions_csv):
        result = runner.invoke(cli, ["analyze", transactions_csv, "-v", "amount", "-b", "5"])

        assert result.exit_code == 0, result.output
        assert "Loaded: transactions.csv (1,000 records)" in result.output
        assert "Fraud Ratio by Bin" in result.output
        assert "Trend" in result.output

    def test_zoom(self, runner, transactions_csv, tmp_path):
        json_path = tmp_path / "chart.json"

        result = runner.invoke(cli, [
            "analyze", transactions_csv, "-v", "amount", "--zoom", "100", "20", "-j", str(json_path),
        ])

        assert result.exit_code == 0, result.output
        data = json.loads(json_path.read_text(encoding="utf-8"))
        assert data["is_zoomed"] is True
        assert data["domain"] == [20.0, 100.0]
        assert data["view"]["bins"][0]["x0"] == 20.0

    def test_zoom_ignored_for_comparison(self, runner, transactions_csv):
        result = runner.invoke(cli, [
            "analyze", transactions_csv, "-v", "amount", "-t", "compare-histogram", "--zoom", "0", "50",
        ])

        assert result.exit_code == 0, result.output
        assert "Zoom ignored for chart type 'compare-histogram'" in result.output
        assert "Kolmogorov-Smirnov Test" in result.output

    def test_outliers_with_outputs(self, runner, transactions_parquet, tmp_path):
        json_path = tmp_path / "out" / "outliers.json"
        csv_path = tmp_path / "out" / "outliers.csv"

        result = runner.invoke(cli, [
            "analyze", transactions_parquet, "-v", "amount", "-t", "outlier-detection",
            "-j", str(json_path), "--csv-output", str(csv_path),
        ])

        assert result.exit_code == 0, result.output
        assert "IQR Outliers" in result.output
        assert json.loads(json_path.read_text(encoding="utf-8"))["mode"] == "outlier_analyzed"
        frame = pd.read_csv(csv_path)
        assert len(frame) == 1000
        assert set(frame.columns) == {"value", "flag", "row", "outlier"}

    def test_histogram_csv(self, runner, transactions_csv, tmp_path):
        csv_path = tmp_path / "bins.csv"

        result = runner.invoke(cli, ["analyze", transactions_csv, "-v", "hour", "-b", "4", "--csv-output", str(csv_path)])

        assert result.exit_code == 0, result.output
        frame = pd.read_csv(csv_path)
        assert len(frame) == 4
        assert frame["count"].sum() == 1000

    def test_config_file(self, runner, tmp_path):
        data = tmp_path / "t.csv"
        data.write_text("txn,value,is_fraud\n1,10,0\n2,20,1\n3,30,0\n", encoding="utf-8")
        config = tmp_path / "fraudlens.yaml"
        config.write_text(yaml.safe_dump({
            "analysis": {"fraud_flag_column": "is_fraud", "session_id_column": "txn", "default_bin_count": 3},
        }), encoding="utf-8")
        json_path = tmp_path / "chart.json"

        result = runner.invoke(cli, ["analyze", str(data), "-v", "value", "-c", str(config), "-j", str(json_path)])

        assert result.exit_code == 0, result.output
        assert json.loads(json_path.read_text(encoding="utf-8"))["bin_count"] == 3

    def test_missing_column_exits_1(self, runner, tmp_path):
        data = tmp_path / "t.csv"
        data.write_text("sessionid,amount\n1,2\n", encoding="utf-8")

        result = runner.invoke(cli, ["analyze", str(data), "-v", "amount"])

        assert result.exit_code == 1
        assert "Missing required column: 'fraud_combined'" in result.output

    def test_unknown_variable_exits_1(self, runner, transactions_csv):
        result = runner.invoke(cli, ["analyze", transactions_csv, "-v", "velocity"])

        assert result.exit_code == 1
        assert "Variable 'velocity' not found in the dataset" in result.output

    def test_unknown_chart_type_rejected(self, runner, transactions_csv):
        result = runner.invoke(cli, ["analyze", transactions_csv, "-v", "amount", "-t", "pie"])

        assert result.exit_code == 2


@pytest.mark.integration
class TestOtherCommands:
    """Test 'variables', 'merge', 'init-config' and 'version'."""

    def test_variables(self, runner, transactions_csv):
        result = runner.invoke(cli, ["variables", transactions_csv])

        assert result.exit_code == 0, result.output
        assert "Variables (3)" in result.output
        for name in ("amount", "hour", "account_age_days"):
            assert name in result.output

    def test_merge(self, runner, transactions_csv, second_csv, tmp_path):
        json_path = tmp_path / "merged.json"
        csv_path = tmp_path / "merged.csv"

        result = runner.invoke(cli, [
            "merge", transactions_csv, second_csv, "-v", "amount", "-b", "4",
            "-j", str(json_path), "--csv-output", str(csv_path),
        ])

        assert result.exit_code == 0, result.output
        assert "Merged: amount" in result.output
        data = json.loads(json_path.read_text(encoding="utf-8"))
        assert [s["dataset"] for s in data["sources"]] == ["transactions.csv", "second.csv"]
        assert data["initial_domain"][1] == 2000.0
        assert len(pd.read_csv(csv_path)) == 8

    def test_merge_missing_variable(self, runner, transactions_csv, second_csv):
        result = runner.invoke(cli, ["merge", transactions_csv, second_csv, "-v", "hour"])

        assert result.exit_code == 1

    def test_init_config(self, runner, tmp_path):
        output = tmp_path / "configs" / "fraudlens.yaml"

        result = runner.invoke(cli, ["init-config", str(output)])

        assert result.exit_code == 0, result.output
        assert "Sample configuration written to" in result.output
        with open(output, encoding="utf-8") as f:
            assert "analysis" in yaml.safe_load(f)

    def test_version(self, runner):
        result = runner.invoke(cli, ["version"])

        assert result.exit_code == 0
        assert f"FraudLens v{__version__}" in result.output
