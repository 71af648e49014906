# src/dev_metrics/cli/build.py

"""CLI command for building the metrics document from a fetched snapshot."""

import os

import click
from rich.console import Console

from ..data.models import RecordSet
from ..engine.assembler import build_metrics

console = Console()


@click.command()
@click.option(
    "--data-dir",
    default=None,
    help="Directory containing records.json (defaults to data_dir)",
    type=click.Path(exists=True, file_okay=False, dir_okay=True),
)
@click.option(
    "--output",
    default=None,
    help="Output file for the metrics document (defaults to <data-dir>/metrics.json)",
    type=click.Path(dir_okay=False),
)
@click.pass_obj
def build_command(settings, data_dir, output):
    """Aggregate a snapshot into the metrics document."""
    data_dir = data_dir or settings.data_dir
    records_path = os.path.join(data_dir, "records.json")
    if not os.path.isfile(records_path):
        raise click.ClickException(
            f"No snapshot at {records_path}. Run 'dev-metrics fetch' or 'dev-metrics sample' first."
        )
    output = output or os.path.join(data_dir, "metrics.json")

    with console.status("[bold green]Building metrics..."):
        records = RecordSet.load(records_path)
        document = build_metrics(records, settings)
        document.save(output)

    console.print(f"[green]Metrics saved to {output}[/green]")
    console.print(
        f"[bold]{document.summary.total_commits} commits · {document.summary.total_prs} PRs · "
        f"{document.summary.total_contributors} contributors[/bold]"
    )
