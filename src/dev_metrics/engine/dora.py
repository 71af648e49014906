# src/dev_metrics/engine/dora.py

"""DORA delivery metrics and their industry rating bands."""

import operator
import re
from datetime import datetime, timedelta
from typing import Callable, Dict, Pattern, Sequence, Tuple

from ..data.models import IssueRecord, PullRequestRecord, ReleaseRecord
from ..utils.helpers import round_half_up, safe_mean
from .models import DoraMetricResult, DoraMetrics, Rating
from .rollups import merged_durations

DEFAULT_FAILURE_PATTERN = r"bug|incident|hotfix"

RATINGS: Tuple[Rating, ...] = ("elite", "high", "medium", "low")

# Bounds for elite, high and medium, checked in that order; anything else is low.
THRESHOLDS: Dict[str, Tuple[Callable[[float, float], bool], Tuple[float, float, float]]] = {
    "deployment_frequency": (operator.ge, (7, 1, 0.25)),  # per week, higher is better
    "lead_time_for_changes": (operator.lt, (24, 168, 720)),  # hours
    "change_failure_rate": (operator.le, (5, 10, 15)),  # percent
    "mean_time_to_recovery": (operator.lt, (1, 24, 168)),  # hours
}


def classify(metric: str, value: float) -> Rating:
    """Rates a value against the fixed bands of one metric."""
    compare, bounds = THRESHOLDS[metric]
    for rating, bound in zip(RATINGS, bounds):
        if compare(value, bound):
            return rating
    return "low"


def rate_deployment_frequency(per_week: float) -> Rating:
    return classify("deployment_frequency", per_week)


def rate_lead_time(hours: float) -> Rating:
    return classify("lead_time_for_changes", hours)


def rate_change_failure_rate(percent: float) -> Rating:
    return classify("change_failure_rate", percent)


def rate_time_to_recovery(hours: float) -> Rating:
    return classify("mean_time_to_recovery", hours)


def is_failure(labels: Sequence[str], pattern: Pattern[str]) -> bool:
    return any(pattern.search(label) for label in labels)


def compute_dora(
    prs: Sequence[PullRequestRecord],
    issues: Sequence[IssueRecord],
    releases: Sequence[ReleaseRecord],
    lookback_days: int,
    now: datetime,
    failure_pattern: str | Pattern[str] = DEFAULT_FAILURE_PATTERN,
) -> DoraMetrics:
    """Computes the four DORA metrics over the lookback window.

    Deployments are releases published in the window, or merged PRs when the
    window has no releases. Change failure rate and recovery time are
    estimated from issues whose labels match the failure pattern.
    """
    if isinstance(failure_pattern, str):
        failure_pattern = re.compile(failure_pattern, re.IGNORECASE)
    window_start = now - timedelta(days=lookback_days)

    def in_window(when: datetime | None) -> bool:
        return when is not None and window_start <= when <= now

    deployments = sum(1 for release in releases if in_window(release.published_at))
    if deployments == 0:
        deployments = sum(1 for pr in prs if pr.state == "merged" and in_window(pr.merged_at))
    weeks = max(lookback_days, 1) / 7
    per_week = deployments / weeks

    lead_time = safe_mean(merged_durations(prs))

    failures = [issue for issue in issues if is_failure(issue.labels, failure_pattern)]
    opened_failures = sum(1 for issue in failures if in_window(issue.created_at))
    failure_rate = min(opened_failures / deployments * 100, 100.0) if deployments else 0.0

    recovery = safe_mean(
        issue.time_to_close_hours
        for issue in failures
        if issue.state == "closed" and issue.time_to_close_hours is not None
    )

    return DoraMetrics(
        deployment_frequency=DoraMetricResult(
            value=round_half_up(per_week),
            unit="per_week",
            rating=rate_deployment_frequency(per_week),
        ),
        lead_time_for_changes=DoraMetricResult(
            value=round_half_up(lead_time), unit="hours", rating=rate_lead_time(lead_time)
        ),
        change_failure_rate=DoraMetricResult(
            value=round_half_up(failure_rate),
            unit="percent",
            rating=rate_change_failure_rate(failure_rate),
        ),
        mean_time_to_recovery=DoraMetricResult(
            value=round_half_up(recovery), unit="hours", rating=rate_time_to_recovery(recovery)
        ),
    )
