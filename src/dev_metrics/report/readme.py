# src/dev_metrics/report/readme.py

"""Generates the project README from a metrics document."""

from typing import List

from ..engine.models import MetricsDocument

CHART_SECTIONS = [
    ("Overview", "stats-banner", "Stats Banner"),
    ("Contribution Activity", "contribution-heatmap", "Contribution Heatmap"),
    ("Activity Trends", "activity-chart", "Activity Chart"),
    ("Pull Request Analytics", "pr-stats", "PR Stats"),
    ("Top Contributors", "top-contributors", "Top Contributors"),
    ("Language Breakdown", "language-breakdown", "Languages"),
    ("DORA Metrics", "dora-metrics", "DORA Metrics"),
]

RATING_MARKERS = {"elite": "🟢", "high": "🔵", "medium": "🟡", "low": "🔴"}


def format_number(n: float) -> str:
    """1234 -> 1.2K, 2500000 -> 2.5M."""
    if n >= 1_000_000:
        return f"{n / 1_000_000:.1f}M"
    if n >= 1000:
        return f"{n / 1000:.1f}K"
    return f"{n:,}"


def format_hours(hours: float) -> str:
    """Human-sized duration: minutes, hours, days or weeks."""
    if hours < 1:
        return f"{round(hours * 60)}m"
    if hours < 24:
        return f"{hours:.1f}h"
    if hours < 168:
        return f"{hours / 24:.1f}d"
    return f"{hours / 168:.1f}w"


def render_readme(
    document: MetricsDocument, assets_dir: str = "assets", dashboard_url: str = ""
) -> str:
    s = document.summary
    dora = document.dora
    lines: List[str] = [
        '<div align="center">',
        "",
        "# Developer Metrics",
        "",
        f"Tracking **{s.total_repositories}** repositories · **{s.total_contributors}** contributors · "
        f"**{document.config.lookback_days}** day window for `{document.config.owner}`",
        "",
        f"{format_number(s.total_commits)} commits · {format_number(s.total_prs)} PRs · "
        f"{format_number(s.total_issues)} issues · {format_number(s.total_releases)} releases",
        "",
        "</div>",
        "",
    ]

    for heading, chart, alt in CHART_SECTIONS:
        lines += [
            f"## {heading}",
            "",
            '<div align="center">',
            "",
            f"![{alt}](./{assets_dir}/{chart}.svg)",
            "",
            "</div>",
            "",
        ]

    lines += [
        "## DORA Summary",
        "",
        "| Metric | Value | Rating |",
        "|---|---|---|",
        f"| Deployment frequency | {dora.deployment_frequency.value}/week | "
        f"{RATING_MARKERS[dora.deployment_frequency.rating]} {dora.deployment_frequency.rating} |",
        f"| Lead time for changes | {format_hours(dora.lead_time_for_changes.value)} | "
        f"{RATING_MARKERS[dora.lead_time_for_changes.rating]} {dora.lead_time_for_changes.rating} |",
        f"| Change failure rate | {dora.change_failure_rate.value}% | "
        f"{RATING_MARKERS[dora.change_failure_rate.rating]} {dora.change_failure_rate.rating} |",
        f"| Mean time to recovery | {format_hours(dora.mean_time_to_recovery.value)} | "
        f"{RATING_MARKERS[dora.mean_time_to_recovery.rating]} {dora.mean_time_to_recovery.rating} |",
        "",
    ]

    if document.contributors:
        lines += ["## Contributors", "", "| Contributor | Commits | PRs | Active days |", "|---|---|---|---|"]
        for contributor in document.contributors[:10]:
            lines.append(
                f"| @{contributor.username} | {contributor.total_commits} | "
                f"{contributor.total_prs} | {contributor.active_days} |"
            )
        lines.append("")

    if dashboard_url:
        lines += [f"### [View the full dashboard →]({dashboard_url})", ""]

    lines += [
        "---",
        "",
        f"<sub>Auto-generated · last updated {document.generated_at.date().isoformat()}</sub>",
    ]
    return "\n".join(lines) + "\n"
