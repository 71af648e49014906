"""CLI command for generating a synthetic snapshot."""

import os

import click
from rich.console import Console

from ..data.sample import generate_sample_records

console = Console()


@click.command()
@click.option(
    "--output-dir",
    default=None,
    help="Directory to save the snapshot (defaults to data_dir)",
    type=click.Path(file_okay=False, dir_okay=True),
)
@click.option("--seed", default=42, show_default=True, help="Random seed.")
@click.pass_obj
def sample_command(settings, output_dir, seed):
    """Write a synthetic records.json for previewing without a token."""
    output_dir = output_dir or settings.data_dir
    os.makedirs(output_dir, exist_ok=True)

    records = generate_sample_records(
        owner=settings.owner or "octocat",
        lookback_days=settings.metrics.lookback_days,
        seed=seed,
    )
    path = os.path.join(output_dir, "records.json")
    records.save(path)

    console.print(f"[green]Sample snapshot with {len(records.commits)} commits saved to {path}[/green]")
