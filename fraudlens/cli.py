"""
Command-line interface for FraudLens.

Provides commands for:
- Analyzing one variable of a transaction file (fraud-ratio bins, trend,
  distribution comparison or outliers)
- Listing the analyzable variables of a file
- Merging the same variable from two files
- Writing a sample configuration
"""

import asyncio
import sys
from pathlib import Path

import click
from colorama import Fore

from fraudlens import __version__
from fraudlens.charts.app_state import AppState
from fraudlens.charts.chart_state import ChartState
from fraudlens.charts.chart_types import ChartMode, ChartType
from fraudlens.core.config import AnalysisConfig, SAMPLE_CONFIG_YAML
from fraudlens.core.exceptions import FraudLensException
from fraudlens.core.logging_config import setup_logging, get_logger
from fraudlens.core.pretty_output import PrettyOutput as po
from fraudlens.exporters.chart_exporter import ChartExporter
from fraudlens.stats.outliers import outlier_summary_by_flag

logger = get_logger(__name__)

LOG_LEVELS = click.Choice(['DEBUG', 'INFO', 'WARNING', 'ERROR'], case_sensitive=False)


@click.group()
@click.version_option(version=__version__)
def cli():
    """
    FraudLens - Fraud-ratio exploration for labeled transaction data.

    Bins a numeric variable, compares each bin's fraud rate with the
    overall fraud rate, fits a trend across the bins, and compares fraud
    and legitimate distributions.
    """
    pass


def _load_config(config_file):
    if config_file:
        return AnalysisConfig.from_yaml(config_file)
    return AnalysisConfig()


def _load_files(app: AppState, file_paths):
    """Ingest files into the session; exit 1 if any of them fails."""
    outcomes = asyncio.run(app.load_files_async(file_paths))
    failed = [outcome for outcome in outcomes if not outcome.ok]
    for outcome in failed:
        po.error(f"{outcome.path}: {outcome.error.message}")
    if failed:
        sys.exit(1)
    return [outcome.dataset for outcome in outcomes]


def _print_histogram(chart: ChartState):
    view = chart.view
    po.section("Fraud Ratio by Bin")
    rows = [
        (
            f"{b.x0:.4g} - {b.x1:.4g}",
            f"{b.count:,}",
            f"{b.fraud_rate:.2%}",
            f"{b.fraud_ratio:.2f}",
            po.ratio_bar(b.fraud_ratio, view.y_max),
        )
        for b in view.bins
    ]
    po.compact_table(["Range", "Count", "Fraud rate", "Ratio", ""], rows, col_widths=[23, 9, 10, 6, 20])
    po.blank_line()
    if view.regression is not None:
        direction = "rising" if view.regression.slope > 0 else "falling" if view.regression.slope < 0 else "flat"
        po.key_value("Trend", f"ratio = {view.regression.slope:.4g} * x + {view.regression.intercept:.4g} ({direction})")
    else:
        po.key_value("Trend", "not available")


def _print_comparison(chart: ChartState):
    comparison = chart.comparison
    po.section("Fraud vs Legitimate Distribution")
    significant = comparison.ks.p_value < 0.05
    po.summary_box("Kolmogorov-Smirnov Test", [
        ("Fraud points", f"{comparison.size_a:,}", Fore.RED),
        ("Legitimate points", f"{comparison.size_b:,}", Fore.GREEN),
        ("KS statistic (D)", f"{comparison.ks.statistic:.4f}", po.PRIMARY),
        ("p-value", f"{comparison.ks.p_value:.4g}", po.WARNING if significant else po.DIM),
    ])
    if significant:
        po.warning("Distributions differ significantly (p < 0.05)")
    else:
        po.info("No significant difference between the distributions")


def _print_outliers(chart: ChartState):
    result = chart.outliers
    bounds = result.bounds
    po.section("IQR Outliers")
    po.key_value("Q1", f"{bounds.q1:.4g}")
    po.key_value("Median", f"{bounds.median:.4g}")
    po.key_value("Q3", f"{bounds.q3:.4g}")
    po.key_value("Fences", f"[{bounds.lower_bound:.4g}, {bounds.upper_bound:.4g}]")
    po.key_value("Outliers", f"{result.outlier_count:,} ({result.outlier_percentage:.1f}%)")
    by_flag = outlier_summary_by_flag(result)
    po.compact_table(
        ["Population", "Outliers", "Non-outliers"],
        [(label, f"{counts['outliers']:,}", f"{counts['non_outliers']:,}") for label, counts in by_flag.items()]
    )


def _export(chart, json_output, csv_output):
    if not (json_output or csv_output):
        return
    po.blank_line()
    po.section("Output Files")
    if json_output:
        po.output_file("JSON", ChartExporter.write_json(chart, json_output))
    if csv_output:
        po.output_file("CSV", ChartExporter.write_csv(chart, csv_output))


@cli.command()
@click.argument('file_path', type=click.Path(exists=True, dir_okay=False))
@click.option('--variable', '-v', required=True, help='Variable (column) to analyze')
@click.option('--bins', '-b', type=click.IntRange(min=1), default=None, help='Number of bins (default from config)')
@click.option('--chart-type', '-t', type=click.Choice(ChartType.keys(), case_sensitive=False),
              default=ChartType.HISTOGRAM.value, help='Chart type, which selects the analysis')
@click.option('--zoom', nargs=2, type=float, default=None, metavar='MIN MAX', help='Restrict the domain (binning chart types only)')
@click.option('--config', '-c', 'config_file', type=click.Path(exists=True, dir_okay=False), help='YAML configuration file')
@click.option('--json-output', '-j', type=click.Path(), help='Path for JSON chart output')
@click.option('--csv-output', type=click.Path(), help='Path for CSV table output')
@click.option('--log-level', type=LOG_LEVELS, default='WARNING', help='Logging level')
@click.option('--log-file', type=click.Path(), help='Optional log file path')
def analyze(file_path, variable, bins, chart_type, zoom, config_file, json_output, csv_output, log_level, log_file):
    """
    Analyze one variable of a CSV or Parquet file.

    FILE_PATH: Transaction file with fraud flag and session id columns

    Examples:

    \b
    fraudlens analyze transactions.csv -v amount
    fraudlens analyze transactions.csv -v amount -b 15 --zoom 0 500
    fraudlens analyze transactions.parquet -v hour -t compare-histogram
    """
    setup_logging(log_level, log_file)

    try:
        config = _load_config(config_file)
        app = AppState(config)

        po.header("FraudLens Analysis")
        dataset = _load_files(app, [file_path])[0]
        po.success(app.last_status.text)

        chart = app.create_chart(dataset.dataset_id, variable=variable, chart_type=chart_type, bin_count=bins)

        if zoom:
            if not chart.brush(*zoom):
                po.warning(f"Zoom ignored for chart type '{chart.chart_type.value}'")

        po.key_value("Variable", variable)
        po.key_value("Valid points", f"{len(chart.series):,} of {dataset.total_records:,}")
        po.key_value("Overall fraud rate", f"{chart.series.overall_fraud_rate:.2%}")
        po.key_value("Domain", f"[{chart.domain[0]:.4g}, {chart.domain[1]:.4g}]" + (" (zoomed)" if chart.is_zoomed else ""))

        if chart.mode is ChartMode.HISTOGRAMMED:
            _print_histogram(chart)
        elif chart.mode is ChartMode.COMPARED:
            _print_comparison(chart)
        else:
            _print_outliers(chart)

        _export(chart, json_output, csv_output)

    except FraudLensException as e:
        po.blank_line()
        po.error(e.message)
        logger.debug(f"Analysis failed: {e.to_dict()}")
        sys.exit(1)

    except OSError as e:
        po.blank_line()
        po.error(f"Could not write output: {str(e)}")
        sys.exit(1)


@cli.command()
@click.argument('file_path', type=click.Path(exists=True, dir_okay=False))
@click.option('--config', '-c', 'config_file', type=click.Path(exists=True, dir_okay=False), help='YAML configuration file')
@click.option('--log-level', type=LOG_LEVELS, default='WARNING', help='Logging level')
def variables(file_path, config_file, log_level):
    """
    List the analyzable variables of a file.

    FILE_PATH: Transaction file with fraud flag and session id columns
    """
    setup_logging(log_level)

    try:
        app = AppState(_load_config(config_file))
        dataset = _load_files(app, [file_path])[0]
    except FraudLensException as e:
        po.error(e.message)
        sys.exit(1)

    po.header(dataset.name)
    po.key_value("Records", f"{dataset.total_records:,}")
    po.key_value("Fraud flag column", dataset.fraud_flag_column)
    po.key_value("Session id column", dataset.session_id_column)
    po.section(f"Variables ({len(dataset.variables)})")
    for name in dataset.variables:
        po.item(name, indent=2)


@cli.command()
@click.argument('file_a', type=click.Path(exists=True, dir_okay=False))
@click.argument('file_b', type=click.Path(exists=True, dir_okay=False))
@click.option('--variable', '-v', required=True, help='Variable present in both files')
@click.option('--bins', '-b', type=click.IntRange(min=1), default=None, help='Number of bins (default from config)')
@click.option('--zoom', nargs=2, type=float, default=None, metavar='MIN MAX', help='Restrict the shared domain')
@click.option('--config', '-c', 'config_file', type=click.Path(exists=True, dir_okay=False), help='YAML configuration file')
@click.option('--json-output', '-j', type=click.Path(), help='Path for JSON chart output')
@click.option('--csv-output', type=click.Path(), help='Path for CSV table output')
@click.option('--log-level', type=LOG_LEVELS, default='WARNING', help='Logging level')
def merge(file_a, file_b, variable, bins, zoom, config_file, json_output, csv_output, log_level):
    """
    Compare one variable across two files on a shared domain.

    \b
    fraudlens merge january.csv february.csv -v amount
    """
    setup_logging(log_level)

    try:
        app = AppState(_load_config(config_file))
        po.header("FraudLens Merge")
        first, second = _load_files(app, [file_a, file_b])

        chart_a = app.create_chart(first.dataset_id, variable=variable, bin_count=bins)
        chart_b = app.create_chart(second.dataset_id, variable=variable, bin_count=bins)
        merged = app.merge_charts(chart_a.chart_id, chart_b.chart_id)
        if zoom:
            merged.brush(*zoom)

        po.key_value("Chart", merged.title)
        po.key_value("Shared domain", f"[{merged.domain[0]:.4g}, {merged.domain[1]:.4g}]")
        for source in merged.sources:
            po.section(f"{source.dataset_name} (overall fraud rate {source.series.overall_fraud_rate:.2%})")
            rows = [
                (f"{b.x0:.4g} - {b.x1:.4g}", f"{b.count:,}", f"{b.fraud_ratio:.2f}", po.ratio_bar(b.fraud_ratio, merged.y_max))
                for b in source.bins
            ]
            po.compact_table(["Range", "Count", "Ratio", ""], rows, col_widths=[23, 9, 6, 20])

        _export(merged, json_output, csv_output)

    except FraudLensException as e:
        po.blank_line()
        po.error(e.message)
        sys.exit(1)

    except OSError as e:
        po.blank_line()
        po.error(f"Could not write output: {str(e)}")
        sys.exit(1)


@cli.command('init-config')
@click.argument('output_path', type=click.Path())
def init_config(output_path):
    """
    Generate a sample configuration file.

    OUTPUT_PATH: Path where sample config should be written

    Example:

    \b
    fraudlens init-config fraudlens.yaml
    """
    try:
        output_file = Path(output_path)
        output_file.parent.mkdir(parents=True, exist_ok=True)

        with open(output_file, 'w', encoding='utf-8') as f:
            f.write(SAMPLE_CONFIG_YAML)

        click.echo(f"✓ Sample configuration written to: {output_path}")
        click.echo(f"\nEdit the file to match your columns, then run:")
        click.echo(f"  fraudlens analyze transactions.csv -v amount -c {output_path}")

    except OSError as e:
        click.echo(f"❌ Error creating config file: {str(e)}", err=True)
        sys.exit(1)


@cli.command()
def version():
    """Display version information."""
    click.echo(f"FraudLens v{__version__}")
    click.echo("Fraud-ratio exploration for labeled transaction data")


if __name__ == '__main__':
    cli()
