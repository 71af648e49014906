# tests/test_report/test_charts.py

from datetime import datetime, timezone
from xml.etree import ElementTree

import pytest

from dev_metrics.data.models import RecordSet
from dev_metrics.engine.assembler import MetricsAssembler
from dev_metrics.report.charts import CHARTS, render_all_charts, render_contributors, render_heatmap

NOW = datetime(2024, 1, 15, 12, 0, 0, tzinfo=timezone.utc)
SVG = "{http://www.w3.org/2000/svg}"


@pytest.fixture
def document(sample_records):
    return MetricsAssembler(sample_records, lookback_days=30, now=NOW).assemble(generated_at=NOW)


@pytest.mark.parametrize("name", sorted(CHARTS))
def test_every_chart_is_well_formed_svg(document, name):
    root = ElementTree.fromstring(CHARTS[name](document, 600))
    assert root.tag == f"{SVG}svg"
    assert root.get("width") == "600"


def test_heatmap_draws_one_cell_per_day(document):
    root = ElementTree.fromstring(render_heatmap(document.heatmap))
    day_cells = [rect for rect in root.iter(f"{SVG}rect") if rect.find(f"{SVG}title") is not None]
    assert len(day_cells) == 366


def test_user_text_is_escaped(document):
    evil = document.contributors[0].model_copy(update={"username": "<script>&"})
    svg = render_contributors(document.model_copy(update={"contributors": [evil]}))

    assert "<script>" not in svg
    assert "@&lt;script&gt;&amp;" in svg
    ElementTree.fromstring(svg)


def test_render_all_charts_writes_files(document, tmp_path):
    paths = render_all_charts(document, tmp_path / "assets")

    assert sorted(p.name for p in paths) == sorted(f"{name}.svg" for name in CHARTS)
    assert all(p.read_text().startswith("<svg") for p in paths)


@pytest.fixture
def empty_document():
    return MetricsAssembler(RecordSet(owner="octocat", fetched_at=NOW), lookback_days=1, now=NOW).assemble()


@pytest.mark.parametrize("name", sorted(CHARTS))
def test_empty_document_renders_every_chart(empty_document, name):
    root = ElementTree.fromstring(CHARTS[name](empty_document, 600))
    assert root.tag == f"{SVG}svg"


def test_empty_document_shows_placeholders(empty_document):
    assert "No language data" in CHARTS["language-breakdown"](empty_document, 600)
    assert "No contributors in this window" in CHARTS["top-contributors"](empty_document, 600)
