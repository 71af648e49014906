# src/dev_metrics/cli/summary.py

"""CLI command for printing the headline numbers of a metrics document."""

import click
from rich.console import Console
from rich.table import Table

from ..engine.store import MetricsNotAvailableError, MetricsStore

console = Console()

RATING_STYLES = {"elite": "green", "high": "cyan", "medium": "yellow", "low": "red"}


@click.command()
@click.option(
    "--metrics-file",
    default=None,
    help="Path to the metrics JSON file (defaults to <data_dir>/metrics.json)",
    type=click.Path(dir_okay=False),
)
@click.pass_obj
def summary_command(settings, metrics_file):
    """Displays summary counters and DORA ratings."""
    store = MetricsStore(metrics_file or settings.metrics_file)
    try:
        document = store.load()
    except MetricsNotAvailableError as exc:
        raise click.ClickException(str(exc)) from exc

    summary = Table(
        title=f"Activity for {document.config.owner} (last {document.config.lookback_days} days)",
        show_header=True,
        header_style="bold magenta",
    )
    summary.add_column("Metric", style="cyan", width=32)
    summary.add_column("Value", style="green")
    for field, value in document.summary.model_dump().items():
        summary.add_row(field.replace("_", " ").title(), str(value))
    console.print(summary)

    dora = Table(title="DORA Metrics", show_header=True, header_style="bold magenta")
    dora.add_column("Metric", style="cyan", width=32)
    dora.add_column("Value")
    dora.add_column("Rating")
    for name, result in document.dora:
        style = RATING_STYLES[result.rating]
        dora.add_row(
            name.replace("_", " ").title(),
            f"{result.value} {result.unit.replace('_', ' ')}",
            f"[{style}]{result.rating}[/{style}]",
        )
    console.print(dora)
