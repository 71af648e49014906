"""Main entry point for the dev-metrics CLI."""

import click
from pydantic import ValidationError
from rich.console import Console

from .cli.build import build_command
from .cli.charts import charts_command
from .cli.fetch import fetch_command
from .cli.readme import readme_command
from .cli.sample import sample_command
from .cli.summary import summary_command
from .config.settings import DEFAULT_CONFIG_FILE, get_settings
from .utils.log import setup_logging

console = Console()


@click.group()
@click.version_option(package_name="dev-metrics-dash")
@click.option(
    "--config",
    "config_file",
    default=DEFAULT_CONFIG_FILE,
    help="YAML config file (ignored if missing)",
    type=click.Path(dir_okay=False),
)
@click.option("--verbose", "-v", is_flag=True, help="Enable debug logging.")
@click.pass_context
def main(ctx, config_file, verbose):
    """Developer Metrics - GitHub activity, DORA metrics and charts."""
    setup_logging(verbose)
    try:
        ctx.obj = get_settings(config_file)
    except (ValueError, ValidationError) as exc:
        raise click.ClickException(f"Invalid configuration: {exc}") from exc


main.add_command(fetch_command, name="fetch")
main.add_command(sample_command, name="sample")
main.add_command(build_command, name="build")
main.add_command(charts_command, name="charts")
main.add_command(readme_command, name="readme")
main.add_command(summary_command, name="summary")


if __name__ == "__main__":
    main()
