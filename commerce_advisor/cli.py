"""
commerce-advisor - CLI entry point.

All commands follow this pattern:
  1. Load ``AppConfig`` via ``load_config()``.
  2. Configure logging.
  3. Load and validate the input bundle (``AdvisorInputs`` JSON).
  4. Run one advisor, or all of them.
  5. Print a summary table to stdout; ``run-all`` also writes a report file.

Install and run::

    pip install -e .
    commerce-advisor --help
    commerce-advisor validate-config
    commerce-advisor restock --input data/inputs/store.json
    commerce-advisor run-all --input data/inputs/store.json --format csv
"""

from __future__ import annotations

import json
from pathlib import Path
from typing import Optional

import typer

app = typer.Typer(
    name="commerce-advisor",
    help="Recommendation & insight engine for e-commerce operations data.",
    add_completion=False,
)

_INPUT_HELP = "Path to an AdvisorInputs JSON file."
_CONFIG_HELP = "Path to TOML config file (default: config/default.toml)."


# ── Helpers ───────────────────────────────────────────────────────────────────

def _load_config_or_exit(config_path: Optional[str] = None):
    """Load AppConfig, printing a friendly error and exiting on failure."""
    from commerce_advisor.config import load_config

    try:
        cfg_path = Path(config_path) if config_path else None
        return load_config(cfg_path)
    except FileNotFoundError as exc:
        typer.echo(f"[ERROR] {exc}", err=True)
        raise typer.Exit(code=1)
    except Exception as exc:
        typer.echo(f"[ERROR] Config validation failed: {exc}", err=True)
        raise typer.Exit(code=1)


def _configure_logging(config):
    """Set up logging from config."""
    from commerce_advisor.utils.logging import configure_logging
    configure_logging(config.logging)


def _load_inputs_or_exit(input_path: str):
    """Load AdvisorInputs, printing a friendly error and exiting on failure."""
    from pydantic import ValidationError

    from commerce_advisor.pipeline.engine import load_inputs

    try:
        return load_inputs(Path(input_path))
    except FileNotFoundError as exc:
        typer.echo(f"[ERROR] {exc}", err=True)
        raise typer.Exit(code=1)
    except ValidationError as exc:
        typer.echo(f"[ERROR] Input validation failed: {exc}", err=True)
        raise typer.Exit(code=1)


def _setup(config_path: Optional[str], input_path: str):
    config = _load_config_or_exit(config_path)
    _configure_logging(config)
    return config, _load_inputs_or_exit(input_path)


# ── Commands ──────────────────────────────────────────────────────────────────

@app.command("validate-config")
def validate_config(
    config_path: Optional[str] = typer.Option(None, "--config", help=_CONFIG_HELP),
    show_full: bool = typer.Option(
        False,
        "--full",
        help="Print full config including all fields.",
    ),
) -> None:
    """Validate the configuration file and print parsed values.

    Exits with code 1 if the config fails validation.
    """
    config = _load_config_or_exit(config_path)

    typer.echo("Configuration validated successfully.")
    typer.echo("")
    typer.echo(f"  Restock horizon:     {config.restock.horizon_days}d")
    typer.echo(f"  Target margin:       {config.pricing.target_margin:.0%}")
    typer.echo(f"  ROAS target:         {config.marketing.roas_target}")
    typer.echo(f"  Cross-sell support:  {config.cross_sell.min_support} orders")
    typer.echo(f"  Anomaly sensitivity: {config.insights.anomaly_sensitivity}")
    typer.echo(f"  Output dir:          {config.reporting.output_dir}")
    typer.echo(f"  Log level:           {config.logging.level}")
    typer.echo(f"  Debug mode:          {config.debug}")

    if show_full:
        typer.echo("")
        typer.echo("Full config (JSON):")
        typer.echo(json.dumps(config.model_dump(), indent=2, default=str))

    typer.echo("")
    typer.echo("[OK] Config valid.")


@app.command("restock")
def restock(
    input_path: str = typer.Option(..., "--input", "-i", help=_INPUT_HELP),
    config_path: Optional[str] = typer.Option(None, "--config", help=_CONFIG_HELP),
) -> None:
    """Rank products by restock urgency using the baseline demand forecaster."""
    from commerce_advisor.advisors.restock import generate_restock_recommendations
    from commerce_advisor.providers.baseline import SmoothedTrendForecaster
    from commerce_advisor.reporting.formatters import format_restock_table

    config, inputs = _setup(config_path, input_path)
    forecaster = SmoothedTrendForecaster(min_points=config.restock.min_history_days)
    recs = generate_restock_recommendations(inputs.products, forecaster, config.restock)
    typer.echo(format_restock_table(recs))


@app.command("pricing")
def pricing(
    input_path: str = typer.Option(..., "--input", "-i", help=_INPUT_HELP),
    config_path: Optional[str] = typer.Option(None, "--config", help=_CONFIG_HELP),
) -> None:
    """Propose price changes from observed price elasticity."""
    from commerce_advisor.advisors.pricing import generate_pricing_recommendations
    from commerce_advisor.reporting.formatters import format_pricing_table

    config, inputs = _setup(config_path, input_path)
    recs = generate_pricing_recommendations(inputs.products, config.pricing)
    typer.echo(format_pricing_table(recs))


@app.command("marketing")
def marketing(
    input_path: str = typer.Option(..., "--input", "-i", help=_INPUT_HELP),
    config_path: Optional[str] = typer.Option(None, "--config", help=_CONFIG_HELP),
) -> None:
    """Triage ad campaigns by ROAS and CTR."""
    from commerce_advisor.advisors.marketing import generate_marketing_recommendations
    from commerce_advisor.reporting.formatters import format_marketing_table

    config, inputs = _setup(config_path, input_path)
    recs = generate_marketing_recommendations(inputs.campaigns, config.marketing)
    typer.echo(format_marketing_table(recs))


@app.command("cross-sell")
def cross_sell(
    input_path: str = typer.Option(..., "--input", "-i", help=_INPUT_HELP),
    config_path: Optional[str] = typer.Option(None, "--config", help=_CONFIG_HELP),
) -> None:
    """Mine order baskets for co-purchase pairings."""
    from commerce_advisor.advisors.cross_sell import generate_cross_sell_recommendations
    from commerce_advisor.reporting.formatters import format_cross_sell_table

    config, inputs = _setup(config_path, input_path)
    recs = generate_cross_sell_recommendations(inputs.orders, config.cross_sell)
    typer.echo(format_cross_sell_table(recs))


@app.command("insights")
def insights(
    input_path: str = typer.Option(..., "--input", "-i", help=_INPUT_HELP),
    config_path: Optional[str] = typer.Option(None, "--config", help=_CONFIG_HELP),
) -> None:
    """Synthesize revenue, margin, concentration, and anomaly insights."""
    from commerce_advisor.advisors.insights import generate_business_insights
    from commerce_advisor.providers.baseline import ZScoreAnomalyDetector
    from commerce_advisor.reporting.formatters import format_insights_table

    config, inputs = _setup(config_path, input_path)
    revenues = [d.revenue for d in inputs.daily_sales]
    anomalies = ZScoreAnomalyDetector().detect_anomalies(
        revenues, config.insights.anomaly_sensitivity
    )
    result = generate_business_insights(
        inputs.daily_sales,
        inputs.product_performance,
        inputs.customers,
        anomalies,
        config.insights,
    )
    typer.echo(format_insights_table(result))


@app.command("run-all")
def run_all(
    input_path: str = typer.Option(..., "--input", "-i", help=_INPUT_HELP),
    output_dir: Optional[str] = typer.Option(
        None,
        "--output-dir",
        help="Directory for the report file. Uses config.reporting.output_dir if omitted.",
    ),
    fmt: str = typer.Option(
        "json",
        "--format",
        "-f",
        help="Report file format: json, csv, or parquet.",
    ),
    config_path: Optional[str] = typer.Option(None, "--config", help=_CONFIG_HELP),
) -> None:
    """Run every advisor, print a summary, and write a report file."""
    from commerce_advisor.pipeline.engine import run_advisors
    from commerce_advisor.reporting.export import write_report
    from commerce_advisor.reporting.formatters import format_report_summary

    fmt = fmt.lower()
    if fmt not in ("json", "csv", "parquet"):
        typer.echo(f"[ERROR] Unknown --format '{fmt}'. Use json, csv, or parquet.", err=True)
        raise typer.Exit(code=1)

    config, inputs = _setup(config_path, input_path)
    report = run_advisors(inputs, config)
    typer.echo(format_report_summary(report))

    target_dir = Path(output_dir or config.reporting.output_dir)
    path = write_report(report, target_dir, fmt=fmt)
    typer.echo("")
    typer.echo(f"[OK] Report written: {path}")


# ── Entry point ───────────────────────────────────────────────────────────────

if __name__ == "__main__":
    app()
