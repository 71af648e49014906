"""CLI command for rendering the SVG charts."""

import click
from rich.console import Console

from ..engine.store import MetricsNotAvailableError, MetricsStore
from ..report.charts import render_all_charts

console = Console()


@click.command()
@click.option(
    "--metrics-file",
    default=None,
    help="Path to the metrics JSON file (defaults to <data_dir>/metrics.json)",
    type=click.Path(dir_okay=False),
)
@click.option(
    "--output-dir",
    default="assets",
    help="Directory for the generated SVG files",
    type=click.Path(file_okay=False, dir_okay=True),
)
@click.pass_obj
def charts_command(settings, metrics_file, output_dir):
    """Render the README charts as SVG files."""
    store = MetricsStore(metrics_file or settings.metrics_file)
    try:
        document = store.load()
    except MetricsNotAvailableError as exc:
        raise click.ClickException(str(exc)) from exc

    paths = render_all_charts(document, output_dir, width=settings.readme.chart_width)
    for path in paths:
        console.print(f"  [green]✓[/green] {path.name}")
    console.print(f"[green]Generated {len(paths)} SVG charts in {output_dir}/[/green]")
