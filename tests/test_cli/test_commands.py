# tests/test_cli/test_commands.py

import json
from unittest.mock import patch

import pytest
import requests
from click.testing import CliRunner

from dev_metrics.__main__ import main


@pytest.fixture
def runner(monkeypatch, tmp_path):
    monkeypatch.delenv("GITHUB_TOKEN", raising=False)
    monkeypatch.chdir(tmp_path)
    return CliRunner()


def test_sample_build_charts_readme_summary(runner, tmp_path):
    result = runner.invoke(main, ["sample", "--seed", "3"])
    assert result.exit_code == 0, result.output
    assert (tmp_path / "data" / "records.json").exists()

    result = runner.invoke(main, ["build"])
    assert result.exit_code == 0, result.output
    metrics = json.loads((tmp_path / "data" / "metrics.json").read_text())
    assert metrics["config"]["lookback_days"] == 90
    assert len(metrics["heatmap"]) == 366

    result = runner.invoke(main, ["charts", "--output-dir", "assets"])
    assert result.exit_code == 0, result.output
    assert len(list((tmp_path / "assets").glob("*.svg"))) == 7

    result = runner.invoke(main, ["readme", "--output", "PROFILE.md"])
    assert result.exit_code == 0, result.output
    assert "# Developer Metrics" in (tmp_path / "PROFILE.md").read_text(encoding="utf-8")

    result = runner.invoke(main, ["summary"])
    assert result.exit_code == 0, result.output
    assert "DORA Metrics" in result.output


def test_presentation_commands_need_metrics(runner):
    for command in ("charts", "readme", "summary"):
        result = runner.invoke(main, [command])
        assert result.exit_code == 1
        assert "No metrics data" in result.output


def test_build_needs_a_snapshot(runner, tmp_path):
    (tmp_path / "data").mkdir()
    result = runner.invoke(main, ["build"])
    assert result.exit_code == 1
    assert "dev-metrics sample" in result.output


def test_fetch_requires_token(runner):
    result = runner.invoke(main, ["fetch"])
    assert result.exit_code == 2
    assert "GITHUB_TOKEN" in result.output


def test_invalid_config_is_reported(runner, tmp_path):
    (tmp_path / "config.yml").write_text("metrics:\n  lookback_days: 0\n")
    result = runner.invoke(main, ["summary"])
    assert result.exit_code == 1
    assert "Invalid configuration" in result.output


@patch("dev_metrics.cli.fetch.GitHubDataFetcher.fetch_all")
def test_fetch_reports_connection_failure(mock_fetch_all, runner, monkeypatch):
    monkeypatch.setenv("GITHUB_TOKEN", "fake_token")
    monkeypatch.setenv("GITHUB_OWNER", "fake_owner")
    mock_fetch_all.side_effect = requests.ConnectionError("connection refused")

    result = runner.invoke(main, ["fetch"])

    assert result.exit_code == 1
    assert "Could not list repositories: connection refused" in result.output
    assert not isinstance(result.exception, requests.RequestException)
