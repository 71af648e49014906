"""CLI command for fetching data from GitHub."""

import click
import requests
from rich.console import Console

from ..data.fetcher import GitHubAPIError, GitHubDataFetcher

console = Console()


@click.command()
@click.option(
    "--output-dir",
    default=None,
    help="Directory to save the fetched snapshot (defaults to data_dir)",
    type=click.Path(file_okay=False, dir_okay=True),
)
@click.pass_obj
def fetch_command(settings, output_dir):
    """Fetch data from GitHub API."""
    if not settings.github_token:
        raise click.UsageError("GITHUB_TOKEN must be set (environment or .env).")
    if not settings.owner:
        raise click.UsageError("No owner configured. Set 'owner' in config.yml or GITHUB_OWNER.")

    fetcher = GitHubDataFetcher(
        token=settings.github_token,
        owner=settings.owner,
        lookback_days=settings.metrics.lookback_days,
        repositories=settings.repositories,
        auto_discover_limit=settings.auto_discover_limit,
        collect=settings.metrics.collect,
        output_dir=output_dir or settings.data_dir,
        max_retries=settings.max_retries,
    )

    with console.status(f"[bold green]Fetching data for {settings.owner} from GitHub..."):
        try:
            records = fetcher.fetch_all()
        except (GitHubAPIError, requests.RequestException) as exc:
            raise click.ClickException(f"Could not list repositories: {exc}") from exc

    console.print(
        f"[green]Saved {len(records.repositories)} repositories, {len(records.commits)} commits, "
        f"{len(records.pull_requests)} PRs, {len(records.issues)} issues and "
        f"{len(records.releases)} releases.[/green]"
    )
