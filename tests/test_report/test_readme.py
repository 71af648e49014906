# tests/test_report/test_readme.py

from datetime import datetime, timezone

import pytest

from dev_metrics.data.models import RecordSet
from dev_metrics.engine.assembler import MetricsAssembler
from dev_metrics.report.readme import format_hours, format_number, render_readme

NOW = datetime(2024, 1, 15, 12, 0, 0, tzinfo=timezone.utc)


@pytest.mark.parametrize("n,text", [(999, "999"), (1234, "1.2K"), (2_500_000, "2.5M")])
def test_format_number(n, text):
    assert format_number(n) == text


@pytest.mark.parametrize("hours,text", [(0.5, "30m"), (5.5, "5.5h"), (36, "1.5d"), (336, "2.0w")])
def test_format_hours(hours, text):
    assert format_hours(hours) == text


def test_render_readme(sample_records):
    document = MetricsAssembler(sample_records, lookback_days=7, now=NOW).assemble(generated_at=NOW)

    readme = render_readme(document, assets_dir="img", dashboard_url="https://example.com/dash")

    assert "`octocat`" in readme
    assert "![DORA Metrics](./img/dora-metrics.svg)" in readme
    assert "| Deployment frequency | 1.0/week |" in readme
    assert "| @alice | 3 | 1 | 2 |" in readme
    assert "(https://example.com/dash)" in readme
    assert "last updated 2024-01-15" in readme


def test_render_readme_without_dashboard(sample_records):
    document = MetricsAssembler(sample_records, lookback_days=7, now=NOW).assemble(generated_at=NOW)
    assert "View the full dashboard" not in render_readme(document)


def test_render_readme_for_empty_snapshot():
    document = MetricsAssembler(RecordSet(owner="octocat", fetched_at=NOW), lookback_days=1, now=NOW).assemble()

    readme = render_readme(document)

    assert "0 commits · 0 PRs" in readme
    assert "| Deployment frequency | 0.0/week |" in readme
    assert "## Contributors" not in readme
