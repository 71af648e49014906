# tests/test_engine/test_dora.py

from datetime import datetime, timezone

import pytest

from dev_metrics.engine.dora import (
    RATINGS,
    classify,
    compute_dora,
    rate_deployment_frequency,
)

NOW = datetime(2024, 1, 15, 12, 0, 0, tzinfo=timezone.utc)


@pytest.mark.parametrize(
    "metric,value,rating",
    [
        ("deployment_frequency", 7, "elite"),
        ("deployment_frequency", 6.9, "high"),
        ("deployment_frequency", 1, "high"),
        ("deployment_frequency", 0.25, "medium"),
        ("deployment_frequency", 0.2, "low"),
        ("lead_time_for_changes", 23.9, "elite"),
        ("lead_time_for_changes", 24, "high"),
        ("lead_time_for_changes", 168, "medium"),
        ("lead_time_for_changes", 720, "low"),
        ("change_failure_rate", 5, "elite"),
        ("change_failure_rate", 10, "high"),
        ("change_failure_rate", 15, "medium"),
        ("change_failure_rate", 15.1, "low"),
        ("mean_time_to_recovery", 0.5, "elite"),
        ("mean_time_to_recovery", 1, "high"),
        ("mean_time_to_recovery", 24, "medium"),
        ("mean_time_to_recovery", 168, "low"),
    ],
)
def test_classify_bands(metric, value, rating):
    assert classify(metric, value) == rating


def test_deployment_rating_is_monotonic():
    ranks = [RATINGS.index(rate_deployment_frequency(x / 10)) for x in range(0, 120)]
    assert ranks == sorted(ranks, reverse=True)


def test_no_deployments_rates_low_and_empty_populations_elite():
    dora = compute_dora([], [], [], lookback_days=30, now=NOW)

    assert dora.deployment_frequency.value == 0.0
    assert dora.deployment_frequency.rating == "low"
    assert dora.lead_time_for_changes.rating == "elite"
    assert dora.change_failure_rate.value == 0.0
    assert dora.change_failure_rate.rating == "elite"
    assert dora.mean_time_to_recovery.rating == "elite"


def test_releases_count_as_deployments(make_release):
    releases = [make_release(f"v{i}", days_ago=i) for i in range(7)]
    releases.append(make_release("old", days_ago=40))

    dora = compute_dora([], [], releases, lookback_days=7, now=NOW)

    assert dora.deployment_frequency.value == 7.0
    assert dora.deployment_frequency.unit == "per_week"
    assert dora.deployment_frequency.rating == "elite"


def test_merged_prs_stand_in_when_there_are_no_releases(make_pr):
    prs = [make_pr(i, created_days_ago=i + 2, merge_hours=36) for i in range(4)]
    prs.append(make_pr(9, created_days_ago=2))

    dora = compute_dora(prs, [], [], lookback_days=14, now=NOW)

    assert dora.deployment_frequency.value == 2.0
    assert dora.deployment_frequency.rating == "high"
    assert dora.lead_time_for_changes.value == 36.0
    assert dora.lead_time_for_changes.unit == "hours"
    assert dora.lead_time_for_changes.rating == "high"


def test_failure_rate_and_recovery_from_labelled_issues(make_release, make_issue):
    releases = [make_release(f"v{i}", days_ago=i * 5) for i in range(10)]
    issues = [
        make_issue(1, created_days_ago=3, close_hours=12, labels=("Bug",)),
        make_issue(2, created_days_ago=3, close_hours=2, labels=("enhancement",)),
        make_issue(3, created_days_ago=1, labels=("documentation",)),
    ]

    dora = compute_dora([], issues, releases, lookback_days=70, now=NOW)

    assert dora.deployment_frequency.value == 1.0
    assert dora.change_failure_rate.value == 10.0
    assert dora.change_failure_rate.unit == "percent"
    assert dora.change_failure_rate.rating == "high"
    assert dora.mean_time_to_recovery.value == 12.0
    assert dora.mean_time_to_recovery.rating == "high"


def test_failure_rate_is_capped(make_release, make_issue):
    issues = [make_issue(i, created_days_ago=1, labels=("incident",)) for i in range(3)]
    dora = compute_dora([], issues, [make_release()], lookback_days=7, now=NOW)

    assert dora.change_failure_rate.value == 100.0
    assert dora.change_failure_rate.rating == "low"


def test_custom_failure_pattern(make_release, make_issue):
    issues = [make_issue(1, created_days_ago=1, close_hours=0.5, labels=("outage",))]
    dora = compute_dora([], issues, [make_release()], lookback_days=7, now=NOW, failure_pattern="outage")

    assert dora.change_failure_rate.value == 100.0
    assert dora.mean_time_to_recovery.value == 0.5
    assert dora.mean_time_to_recovery.rating == "elite"
