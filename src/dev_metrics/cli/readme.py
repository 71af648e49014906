"""CLI command for regenerating the README."""

import click
from rich.console import Console

from ..engine.store import MetricsNotAvailableError, MetricsStore
from ..report.readme import format_number, render_readme

console = Console()


@click.command()
@click.option(
    "--metrics-file",
    default=None,
    help="Path to the metrics JSON file (defaults to <data_dir>/metrics.json)",
    type=click.Path(dir_okay=False),
)
@click.option(
    "--output",
    default="README.md",
    help="Path of the README to write.",
    type=click.Path(dir_okay=False),
)
@click.option("--assets-dir", default="assets", help="Where the SVG charts live, relative to the README.")
@click.pass_obj
def readme_command(settings, metrics_file, output, assets_dir):
    """Write a README with live stats and chart images."""
    store = MetricsStore(metrics_file or settings.metrics_file)
    try:
        document = store.load()
    except MetricsNotAvailableError as exc:
        raise click.ClickException(str(exc)) from exc

    with open(output, "w", encoding="utf-8") as f:
        f.write(render_readme(document, assets_dir=assets_dir, dashboard_url=settings.readme.dashboard_url))

    s = document.summary
    console.print(f"[green]README saved to {output}[/green]")
    console.print(
        f"{format_number(s.total_commits)} commits · {format_number(s.total_prs)} PRs · "
        f"{s.total_contributors} contributors · {s.total_repositories} repos"
    )
