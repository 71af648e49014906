# src/dev_metrics/engine/bucketing.py

"""Daily, weekly and heatmap time buckets."""

from collections import Counter, defaultdict
from datetime import date, datetime, timedelta
from typing import Dict, List, Sequence

from ..data.models import CommitRecord, IssueRecord, PullRequestRecord
from ..utils.helpers import date_range, utc_date, week_start
from .models import BUCKET_COUNTERS, DailyBucket, HeatmapCell, WeeklyBucket

HEATMAP_DAYS = 365

# Upper bounds (inclusive) for heatmap levels 1-3; anything above is level 4.
HEATMAP_BRACKETS = (3, 7, 12)


def heatmap_level(count: int) -> int:
    """Maps a daily commit count to an intensity level 0-4."""
    if count <= 0:
        return 0
    for level, upper in enumerate(HEATMAP_BRACKETS, start=1):
        if count <= upper:
            return level
    return len(HEATMAP_BRACKETS) + 1


def _bump(buckets: Dict[date, Dict[str, int]], when: datetime | None, **increments: int) -> None:
    if when is None:
        return
    bucket = buckets.get(utc_date(when))
    if bucket is None:
        return
    for counter, amount in increments.items():
        bucket[counter] += amount


def build_daily_buckets(
    commits: Sequence[CommitRecord],
    prs: Sequence[PullRequestRecord],
    issues: Sequence[IssueRecord],
    lookback_days: int,
    now: datetime,
) -> List[DailyBucket]:
    """Builds one bucket per calendar day in [now - lookback_days, now].

    Days without activity are present with zeroed counters; records dated
    outside the window are dropped.
    """
    end = utc_date(now)
    start = end - timedelta(days=lookback_days)
    buckets = {day: dict.fromkeys(BUCKET_COUNTERS, 0) for day in date_range(start, end)}

    for commit in commits:
        _bump(buckets, commit.date, commits=1, additions=commit.additions, deletions=commit.deletions)

    for pr in prs:
        _bump(buckets, pr.created_at, prs_opened=1)
        _bump(buckets, pr.merged_at, prs_merged=1)
        for review in pr.review_events:
            _bump(buckets, review.submitted_at, reviews=1)

    for issue in issues:
        _bump(buckets, issue.created_at, issues_opened=1)
        _bump(buckets, issue.closed_at, issues_closed=1)

    return [DailyBucket(date=day, **counters) for day, counters in buckets.items()]


def build_weekly_buckets(
    daily: Sequence[DailyBucket], commits: Sequence[CommitRecord]
) -> List[WeeklyBucket]:
    """Rolls daily buckets into Sunday-aligned weeks.

    The first and last week may cover fewer than seven days when the window
    does not start on a Sunday. Active contributors are the distinct commit
    authors whose commit date falls inside the days a week actually covers.
    """
    weeks: Dict[date, List[DailyBucket]] = defaultdict(list)
    for bucket in daily:
        weeks[week_start(bucket.date)].append(bucket)

    authors_by_day: Dict[date, set] = defaultdict(set)
    for commit in commits:
        authors_by_day[utc_date(commit.date)].add(commit.author)

    weekly = []
    for start in sorted(weeks):
        days = weeks[start]
        totals = {counter: sum(getattr(day, counter) for day in days) for counter in BUCKET_COUNTERS}
        authors = set()
        for day in date_range(days[0].date, days[-1].date):
            authors |= authors_by_day.get(day, set())
        weekly.append(WeeklyBucket(week_start=start, active_contributors=len(authors), **totals))
    return weekly


def build_heatmap(
    commits: Sequence[CommitRecord], now: datetime, days: int = HEATMAP_DAYS
) -> List[HeatmapCell]:
    """Builds the trailing contribution calendar, today inclusive (days + 1 cells)."""
    end = utc_date(now)
    counts = Counter(utc_date(commit.date) for commit in commits)
    return [
        HeatmapCell(date=day, count=counts[day], level=heatmap_level(counts[day]))
        for day in date_range(end - timedelta(days=days), end)
    ]
