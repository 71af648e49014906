# tests/test_engine/test_bucketing.py

from datetime import date, datetime, timedelta, timezone

import pytest

from dev_metrics.engine.bucketing import (
    build_daily_buckets,
    build_heatmap,
    build_weekly_buckets,
    heatmap_level,
)
from dev_metrics.engine.models import BUCKET_COUNTERS

# Monday
NOW = datetime(2024, 1, 15, 12, 0, 0, tzinfo=timezone.utc)


@pytest.mark.parametrize(
    "count,level",
    [(0, 0), (1, 1), (3, 1), (4, 2), (7, 2), (8, 3), (12, 3), (13, 4), (100, 4)],
)
def test_heatmap_level(count, level):
    assert heatmap_level(count) == level


def test_daily_buckets_cover_window_inclusive(make_commit):
    daily = build_daily_buckets([make_commit(days_ago=0)], [], [], lookback_days=7, now=NOW)

    assert len(daily) == 8
    assert daily[0].date == date(2024, 1, 8)
    assert daily[-1].date == date(2024, 1, 15)
    # Idle days are present with zero counters
    assert sum(1 for day in daily if day.commits == 0) == 7


def test_daily_buckets_count_each_event_on_its_own_day(make_commit, make_pr, make_issue):
    commits = [make_commit(days_ago=1, additions=10, deletions=3), make_commit(days_ago=1, additions=5, deletions=0)]
    pr = make_pr(created_days_ago=3, merge_hours=48, reviewers=("bob", "carol"), review_after_hours=1)
    issue = make_issue(created_days_ago=2, close_hours=24)

    daily = {day.date: day for day in build_daily_buckets(commits, [pr], [issue], 7, NOW)}

    assert daily[date(2024, 1, 14)].commits == 2
    assert daily[date(2024, 1, 14)].additions == 15
    assert daily[date(2024, 1, 14)].deletions == 3
    assert daily[date(2024, 1, 12)].prs_opened == 1
    assert daily[date(2024, 1, 12)].reviews == 2
    assert daily[date(2024, 1, 14)].prs_merged == 1
    assert daily[date(2024, 1, 13)].issues_opened == 1
    assert daily[date(2024, 1, 14)].issues_closed == 1


def test_daily_buckets_drop_records_outside_window(make_commit, make_pr):
    commits = [make_commit(days_ago=30), make_commit(date=NOW + timedelta(days=1))]
    daily = build_daily_buckets(commits, [make_pr(created_days_ago=20)], [], 7, NOW)

    assert sum(day.commits for day in daily) == 0
    assert sum(day.prs_opened for day in daily) == 0


def test_daily_buckets_use_utc_dates(make_commit):
    late_evening_pst = datetime(2024, 1, 14, 23, 30, tzinfo=timezone(timedelta(hours=-8)))
    daily = {day.date: day for day in build_daily_buckets([make_commit(date=late_evening_pst)], [], [], 7, NOW)}

    assert daily[date(2024, 1, 15)].commits == 1
    assert daily[date(2024, 1, 14)].commits == 0


def test_weekly_buckets_conserve_daily_totals(make_commit, make_pr, make_issue):
    commits = [make_commit(days_ago=d) for d in (0, 1, 3, 8, 15, 20)]
    prs = [make_pr(i, created_days_ago=d, merge_hours=5, reviewers=("bob",)) for i, d in enumerate((2, 9, 19))]
    issues = [make_issue(i, created_days_ago=d, close_hours=3) for i, d in enumerate((4, 12))]

    daily = build_daily_buckets(commits, prs, issues, 20, NOW)
    weekly = build_weekly_buckets(daily, commits)

    for counter in BUCKET_COUNTERS:
        assert sum(getattr(w, counter) for w in weekly) == sum(getattr(d, counter) for d in daily)


def test_weekly_buckets_start_on_sunday_with_partial_edges():
    daily = build_daily_buckets([], [], [], 10, NOW)
    weekly = build_weekly_buckets(daily, [])

    # Window is Fri 2024-01-05 .. Mon 2024-01-15
    assert [w.week_start for w in weekly] == [date(2023, 12, 31), date(2024, 1, 7), date(2024, 1, 14)]
    assert all(w.week_start.weekday() == 6 for w in weekly)


def test_weekly_active_contributors_are_distinct_authors(make_commit):
    commits = [
        make_commit("alice", days_ago=0),
        make_commit("alice", days_ago=1),
        make_commit("bob", days_ago=1),
        make_commit("carol", days_ago=3),
    ]
    weekly = build_weekly_buckets(build_daily_buckets(commits, [], [], 7, NOW), commits)

    by_start = {w.week_start: w for w in weekly}
    assert by_start[date(2024, 1, 14)].active_contributors == 2
    assert by_start[date(2024, 1, 7)].active_contributors == 1


def test_heatmap_has_366_cells_ending_today(make_commit):
    commits = [make_commit(days_ago=0) for _ in range(8)] + [make_commit(days_ago=400)]
    heatmap = build_heatmap(commits, NOW)

    assert len(heatmap) == 366
    assert heatmap[0].date == date(2023, 1, 15)
    assert heatmap[-1].date == date(2024, 1, 15)
    assert heatmap[-1].count == 8
    assert heatmap[-1].level == 3
    assert sum(cell.count for cell in heatmap) == 8
