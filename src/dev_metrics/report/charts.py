# src/dev_metrics/report/charts.py

"""Static SVG charts rendered from a metrics document."""

import logging
from pathlib import Path
from typing import Callable, Dict, List
from xml.sax.saxutils import escape

from ..engine.models import HeatmapCell, MetricsDocument

logger = logging.getLogger(__name__)

DEFAULT_WIDTH = 840
FONT = "'Segoe UI', system-ui, sans-serif"

COLORS = {
    "bg": "#0D1117",
    "border": "#30363D",
    "text": "#E6EDF3",
    "muted": "#8B949E",
    "dim": "#484F58",
    "purple": "#8B5CF6",
    "blue": "#3B82F6",
    "cyan": "#06B6D4",
    "green": "#10B981",
    "yellow": "#F59E0B",
    "orange": "#F97316",
    "red": "#EF4444",
    "pink": "#EC4899",
}
HEATMAP_COLORS = ["#161B22", "#0E4429", "#006D32", "#26A641", "#39D353"]
RATING_COLORS = {
    "elite": COLORS["green"],
    "high": COLORS["cyan"],
    "medium": COLORS["yellow"],
    "low": COLORS["red"],
}
MONTHS = ["Jan", "Feb", "Mar", "Apr", "May", "Jun", "Jul", "Aug", "Sep", "Oct", "Nov", "Dec"]


def _fmt(value: float) -> str:
    """Compact number for SVG attributes."""
    return f"{value:.1f}".rstrip("0").rstrip(".")


def _frame(width: int, height: int, title: str, body: List[str], extra_style: str = "") -> str:
    return "\n".join(
        [
            f'<svg xmlns="http://www.w3.org/2000/svg" width="{width}" height="{height}" '
            f'viewBox="0 0 {width} {height}">',
            "  <style>",
            f"    .title {{ font: 600 13px {FONT}; fill: {COLORS['text']}; }}",
            f"    .label {{ font: 400 10px {FONT}; fill: {COLORS['muted']}; }}",
            f"    .dim {{ font: 400 9px {FONT}; fill: {COLORS['dim']}; }}",
            f"    .value {{ font: 700 12px {FONT}; }}",
            extra_style,
            "  </style>",
            f'  <rect width="{width}" height="{height}" rx="10" fill="{COLORS["bg"]}" '
            f'stroke="{COLORS["border"]}" stroke-width="1"/>',
            f'  <text x="15" y="22" class="title">{escape(title)}</text>',
            *body,
            "</svg>",
        ]
    )


def render_heatmap(heatmap: List[HeatmapCell], width: int = DEFAULT_WIDTH) -> str:
    """GitHub-style contribution calendar, one column per week."""
    cell, gap = 11, 3
    step = cell + gap
    height, offset_x, offset_y = 180, 35, 40
    body = []

    total = sum(day.count for day in heatmap)
    active = sum(1 for day in heatmap if day.count > 0)
    body.append(
        f'  <text x="{width - 15}" y="22" class="label" text-anchor="end">'
        f"{total:,} contributions · {active} active days</text>"
    )

    last_month = None
    for index, day in enumerate(heatmap):
        week, weekday = divmod(index, 7)
        x = offset_x + week * step
        if day.date.month != last_month:
            last_month = day.date.month
            body.append(
                f'  <text x="{x}" y="{offset_y - 4}" class="label">{MONTHS[day.date.month - 1]}</text>'
            )
        body.append(
            f'  <rect x="{x}" y="{offset_y + weekday * step}" width="{cell}" height="{cell}" '
            f'rx="2" fill="{HEATMAP_COLORS[day.level]}"><title>{day.date.isoformat()}: '
            f"{day.count} contributions</title></rect>"
        )

    for weekday, name in ((1, "Mon"), (3, "Wed"), (5, "Fri")):
        body.append(
            f'  <text x="{offset_x - 25}" y="{offset_y + weekday * step + cell - 1}" class="dim">{name}</text>'
        )

    legend_x, legend_y = width - 160, height - 22
    body.append(f'  <text x="{legend_x - 30}" y="{legend_y + 9}" class="dim">Less</text>')
    for level, color in enumerate(HEATMAP_COLORS):
        body.append(
            f'  <rect x="{legend_x + level * 15}" y="{legend_y}" width="11" height="11" rx="2" fill="{color}"/>'
        )
    body.append(f'  <text x="{legend_x + 80}" y="{legend_y + 9}" class="dim">More</text>')

    return _frame(width, height, "Contribution Activity", body)


def render_activity(document: MetricsDocument, width: int = DEFAULT_WIDTH, days: int = 30) -> str:
    """Commits and merged PRs over the most recent days."""
    height = 200
    left, right, top, bottom = 50, 20, 40, 35
    chart_w = width - left - right
    chart_h = height - top - bottom
    daily = document.daily_activity[-days:]
    body = []

    max_value = max([1] + [max(day.commits, day.prs_merged) for day in daily])
    x_step = chart_w / max(len(daily) - 1, 1)

    def point(index: int, value: int) -> str:
        return f"{_fmt(left + index * x_step)},{_fmt(top + chart_h - value / max_value * chart_h)}"

    for i in range(5):
        y = top + chart_h / 4 * i
        body.append(
            f'  <line x1="{left}" y1="{_fmt(y)}" x2="{width - right}" y2="{_fmt(y)}" '
            f'stroke="{COLORS["border"]}" stroke-width="0.5" stroke-dasharray="4,4"/>'
        )
        body.append(
            f'  <text x="{left - 8}" y="{_fmt(y + 3)}" class="dim" text-anchor="end">'
            f"{round(max_value - max_value / 4 * i)}</text>"
        )

    if daily:
        commit_line = " L".join(point(i, day.commits) for i, day in enumerate(daily))
        pr_line = " L".join(point(i, day.prs_merged) for i, day in enumerate(daily))
        baseline = _fmt(top + chart_h)
        area = (
            f"M{_fmt(left)},{baseline} L{commit_line} "
            f"L{_fmt(left + (len(daily) - 1) * x_step)},{baseline} Z"
        )
        body.append(f'  <path d="{area}" fill="{COLORS["purple"]}" fill-opacity="0.15"/>')
        body.append(
            f'  <path d="M{commit_line}" fill="none" stroke="{COLORS["purple"]}" stroke-width="2.5"/>'
        )
        body.append(f'  <path d="M{pr_line}" fill="none" stroke="{COLORS["cyan"]}" stroke-width="2"/>')
        for i, day in enumerate(daily):
            if i % 5 == 0:
                body.append(
                    f'  <text x="{_fmt(left + i * x_step)}" y="{height - 10}" class="dim" '
                    f'text-anchor="middle">{MONTHS[day.date.month - 1]} {day.date.day}</text>'
                )

    body.append(f'  <circle cx="{width - 170}" cy="18" r="4" fill="{COLORS["purple"]}"/>')
    body.append(f'  <text x="{width - 162}" y="22" class="label">Commits</text>')
    body.append(f'  <circle cx="{width - 100}" cy="18" r="4" fill="{COLORS["cyan"]}"/>')
    body.append(f'  <text x="{width - 92}" y="22" class="label">PRs Merged</text>')

    return _frame(width, height, f"Activity (Last {days} Days)", body)


def render_stats_banner(document: MetricsDocument, width: int = DEFAULT_WIDTH) -> str:
    height = 110
    s = document.summary
    stats = [
        ("Commits", f"{s.total_commits:,}", COLORS["purple"]),
        ("PRs Merged", f"{s.total_prs_merged:,}", COLORS["cyan"]),
        ("Reviews", f"{s.total_reviews:,}", COLORS["green"]),
        ("Issues Closed", f"{s.total_issues_closed:,}", COLORS["yellow"]),
        ("Releases", f"{s.total_releases:,}", COLORS["pink"]),
        ("Avg Merge", f"{s.avg_pr_merge_time_hours}h", COLORS["orange"]),
    ]
    column = (width - 30) / len(stats)
    body = []
    for i, (label, value, color) in enumerate(stats):
        x = _fmt(15 + i * column + column / 2)
        body.append(
            f'  <text x="{x}" y="62" class="big" text-anchor="middle" fill="{color}">{value}</text>'
        )
        body.append(f'  <text x="{x}" y="82" class="label" text-anchor="middle">{label}</text>')
        if i < len(stats) - 1:
            divider = _fmt(15 + (i + 1) * column)
            body.append(
                f'  <line x1="{divider}" y1="35" x2="{divider}" y2="95" '
                f'stroke="{COLORS["border"]}" stroke-width="0.5"/>'
            )
    return _frame(
        width, height, "Overview", body, f"    .big {{ font: 700 20px {FONT}; }}"
    )


def render_languages(document: MetricsDocument, width: int = DEFAULT_WIDTH) -> str:
    height, bar_y, bar_h = 80, 36, 12
    bar_w = width - 30
    body = []

    offset = 15.0
    for lang in document.languages:
        w = lang.percentage / 100 * bar_w
        body.append(
            f'  <rect x="{_fmt(offset)}" y="{bar_y}" width="{_fmt(w)}" height="{bar_h}" '
            f'fill="{lang.color}"><title>{escape(lang.language)}: {lang.percentage}%</title></rect>'
        )
        offset += w
    body.append(
        f'  <rect x="15" y="{bar_y}" width="{bar_w}" height="{bar_h}" rx="6" fill="none" '
        f'stroke="{COLORS["border"]}" stroke-width="0.5"/>'
    )

    legend_x = 15
    for lang in document.languages[:6]:
        body.append(f'  <circle cx="{legend_x + 5}" cy="{bar_y + bar_h + 18}" r="4" fill="{lang.color}"/>')
        body.append(
            f'  <text x="{legend_x + 12}" y="{bar_y + bar_h + 22}" class="label">'
            f"{escape(lang.language)} {lang.percentage}%</text>"
        )
        legend_x += len(lang.language) * 6 + 55
    if not document.languages:
        body.append(f'  <text x="15" y="{bar_y + bar_h + 22}" class="label">No language data</text>')

    return _frame(width, height, "Languages", body)


def render_pr_stats(document: MetricsDocument, width: int = DEFAULT_WIDTH) -> str:
    height = 160
    s = document.summary
    rows = [
        ("Opened", s.total_prs, max(s.total_prs, 1), COLORS["blue"], ""),
        ("Merged", s.total_prs_merged, max(s.total_prs, 1), COLORS["green"], ""),
        ("Avg Merge Time", s.avg_pr_merge_time_hours, 48, COLORS["purple"], "h"),
        ("Avg Review Time", s.avg_time_to_first_review_hours, 24, COLORS["cyan"], "h"),
    ]
    bar_max = width - 200
    body = []
    for i, (label, value, ceiling, color, suffix) in enumerate(rows):
        y = 45 + i * 28
        bar = max(4.0, min(value / ceiling, 1.0) * bar_max)
        body.append(f'  <text x="15" y="{y + 12}" class="label">{label}</text>')
        body.append(
            f'  <rect x="140" y="{y}" width="{_fmt(bar)}" height="16" rx="8" fill="{color}" fill-opacity="0.8"/>'
        )
        body.append(
            f'  <text x="{_fmt(146 + bar)}" y="{y + 12}" class="value" fill="{color}">{value}{suffix}</text>'
        )
    return _frame(width, height, "Pull Request Analytics", body)


def render_contributors(document: MetricsDocument, width: int = DEFAULT_WIDTH, top: int = 5) -> str:
    height = 200
    palette = [COLORS["purple"], COLORS["cyan"], COLORS["green"], COLORS["yellow"], COLORS["pink"]]
    leaders = document.contributors[:top]
    most = max([1] + [c.total_commits for c in leaders])
    bar_max = width - 250
    body = []
    for i, contributor in enumerate(leaders):
        y = 42 + i * 30
        color = palette[i % len(palette)]
        bar = max(4.0, contributor.total_commits / most * bar_max)
        name = escape(contributor.username)
        body.append(f'  <circle cx="28" cy="{y + 10}" r="10" fill="{color}" fill-opacity="0.2"/>')
        body.append(
            f'  <text x="28" y="{y + 14}" text-anchor="middle" class="value" fill="{color}">'
            f"{escape(contributor.username[:1].upper())}</text>"
        )
        body.append(f'  <text x="45" y="{y + 8}" class="value" fill="{COLORS["text"]}">@{name}</text>')
        body.append(
            f'  <text x="45" y="{y + 20}" class="dim">{contributor.total_commits} commits · '
            f"{contributor.total_prs} PRs · +{contributor.additions / 1000:.1f}k/"
            f"-{contributor.deletions / 1000:.1f}k</text>"
        )
        body.append(
            f'  <rect x="200" y="{y + 2}" width="{_fmt(bar)}" height="8" rx="4" fill="{color}" fill-opacity="0.7"/>'
        )
        body.append(
            f'  <text x="{_fmt(208 + bar)}" y="{y + 11}" class="value" fill="{color}">'
            f"{contributor.total_commits}</text>"
        )
    if not leaders:
        body.append('  <text x="15" y="60" class="label">No contributors in this window</text>')
    return _frame(width, height, "Top Contributors", body)


def render_dora(document: MetricsDocument, width: int = DEFAULT_WIDTH) -> str:
    height = 160
    dora = document.dora
    metrics = [
        ("Deployment Frequency", f"{dora.deployment_frequency.value}/week", dora.deployment_frequency.rating),
        ("Lead Time for Changes", f"{dora.lead_time_for_changes.value}h", dora.lead_time_for_changes.rating),
        ("Change Failure Rate", f"{dora.change_failure_rate.value}%", dora.change_failure_rate.rating),
        ("Mean Time to Recovery", f"{dora.mean_time_to_recovery.value}h", dora.mean_time_to_recovery.rating),
    ]
    column = (width - 30) / len(metrics)
    body = []
    for i, (label, value, rating) in enumerate(metrics):
        x = 15 + i * column + column / 2
        color = RATING_COLORS[rating]
        body.append(f'  <text x="{_fmt(x)}" y="55" class="big" text-anchor="middle" fill="{color}">{value}</text>')
        body.append(f'  <text x="{_fmt(x)}" y="75" class="label" text-anchor="middle">{label}</text>')
        body.append(
            f'  <rect x="{_fmt(x - 25)}" y="88" width="50" height="18" rx="9" fill="{color}" fill-opacity="0.15"/>'
        )
        body.append(
            f'  <text x="{_fmt(x)}" y="100" class="dim" text-anchor="middle" fill="{color}">{rating.upper()}</text>'
        )
    body.append(
        f'  <text x="{width / 2:g}" y="{height - 15}" class="dim" text-anchor="middle">'
        "Based on DORA (DevOps Research and Assessment) industry benchmarks</text>"
    )
    return _frame(width, height, "DORA Metrics", body, f"    .big {{ font: 700 18px {FONT}; }}")


CHARTS: Dict[str, Callable[[MetricsDocument, int], str]] = {
    "stats-banner": render_stats_banner,
    "contribution-heatmap": lambda document, width: render_heatmap(document.heatmap, width),
    "activity-chart": render_activity,
    "language-breakdown": render_languages,
    "pr-stats": render_pr_stats,
    "top-contributors": render_contributors,
    "dora-metrics": render_dora,
}


def render_all_charts(
    document: MetricsDocument, output_dir: str | Path, width: int = DEFAULT_WIDTH
) -> List[Path]:
    """Writes every chart as <name>.svg into output_dir and returns the paths."""
    output_dir = Path(output_dir)
    output_dir.mkdir(parents=True, exist_ok=True)
    written = []
    for name, render in CHARTS.items():
        path = output_dir / f"{name}.svg"
        path.write_text(render(document, width), encoding="utf-8")
        logger.debug("Wrote %s", path)
        written.append(path)
    return written
