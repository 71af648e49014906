"""Pytest configuration for the developer metrics pipeline."""

import itertools
from datetime import datetime, timedelta, timezone
from typing import Any, Dict

import pytest

from dev_metrics.data.models import (
    CommitRecord,
    IssueRecord,
    PullRequestRecord,
    RecordSet,
    ReleaseRecord,
    RepositoryInfo,
    ReviewEvent,
)
from dev_metrics.utils.helpers import hours_between

# Static anchor so windows and buckets are predictable
NOW = datetime(2024, 1, 15, 12, 0, 0, tzinfo=timezone.utc)


@pytest.fixture
def now() -> datetime:
    return NOW


@pytest.fixture
def sample_commit_data() -> Dict[str, Any]:
    """Sample raw commit from the commits endpoint."""
    return {
        "sha": "3f4e5d6c7b8a9f0e1d2c3b4a5f6e7d8c9b0a1f2e",
        "commit": {
            "message": "feat: add login form\n\nLong description here",
            "author": {"name": "Alice Doe", "date": "2024-01-10T09:30:00Z"},
            "committer": {"name": "GitHub", "date": "2024-01-10T09:35:00Z"},
        },
        "author": {"login": "alice", "avatar_url": "https://avatars.example/alice"},
        "stats": {"additions": 40, "deletions": 5},
        "files": [{"filename": "a.py"}, {"filename": "b.py"}],
    }


@pytest.fixture
def sample_pr_data() -> Dict[str, Any]:
    """Sample raw PR from the pulls endpoint."""
    return {
        "number": 123,
        "title": "Test PR",
        "state": "closed",
        "created_at": "2024-01-01T00:00:00Z",
        "merged_at": "2024-01-02T12:00:00Z",
        "closed_at": "2024-01-02T12:00:00Z",
        "user": {"login": "testuser", "avatar_url": "https://avatars.example/testuser"},
        "labels": [{"name": "enhancement"}],
        "additions": 120,
        "deletions": 30,
        "changed_files": 4,
        "comments": 2,
        "review_comments": 3,
    }


@pytest.fixture
def sample_reviews_data() -> list[Dict[str, Any]]:
    return [
        {"user": {"login": "reviewer2"}, "submitted_at": "2024-01-01T09:00:00Z", "state": "APPROVED"},
        {"user": {"login": "reviewer"}, "submitted_at": "2024-01-01T03:00:00Z", "state": "COMMENTED"},
    ]


@pytest.fixture
def sample_issue_data() -> Dict[str, Any]:
    """Sample raw issue from the issues endpoint."""
    return {
        "number": 456,
        "title": "Test Issue",
        "state": "closed",
        "created_at": "2024-01-01T10:00:00Z",
        "closed_at": "2024-01-03T10:00:00Z",
        "user": {"login": "testuser"},
        "labels": [{"name": "bug"}, {"name": "incident"}],
        "comments": 4,
    }


@pytest.fixture
def make_commit():
    """Factory for canonical commits; days_ago is measured from NOW."""

    shas = itertools.count(1)

    def _make(author="alice", days_ago=1, repo="web", additions=10, deletions=2, **extra):
        return CommitRecord(
            sha=extra.pop("sha", f"{next(shas):08x}"),
            message=extra.pop("message", "chore: work"),
            author=author,
            author_avatar=extra.pop("author_avatar", f"https://avatars.example/{author}"),
            date=extra.pop("date", NOW - timedelta(days=days_ago)),
            additions=additions,
            deletions=deletions,
            repo=repo,
            **extra,
        )

    return _make


@pytest.fixture
def make_pr():
    """Factory for canonical PRs; merge_hours=None leaves the PR open."""

    def _make(
        number=1,
        author="alice",
        created_days_ago=5,
        merge_hours=None,
        repo="web",
        reviewers=(),
        review_after_hours=2,
        labels=(),
    ):
        created_at = NOW - timedelta(days=created_days_ago)
        merged_at = created_at + timedelta(hours=merge_hours) if merge_hours is not None else None
        reviews = tuple(
            ReviewEvent(author=name, submitted_at=created_at + timedelta(hours=review_after_hours))
            for name in reviewers
        )
        return PullRequestRecord(
            number=number,
            title=f"PR {number}",
            author=author,
            state="merged" if merged_at else "open",
            created_at=created_at,
            merged_at=merged_at,
            closed_at=merged_at,
            reviews=len(reviews),
            review_events=reviews,
            time_to_merge_hours=hours_between(created_at, merged_at),
            time_to_first_review_hours=hours_between(
                created_at, reviews[0].submitted_at if reviews else None
            ),
            repo=repo,
            labels=tuple(labels),
        )

    return _make


@pytest.fixture
def make_issue():
    """Factory for canonical issues; close_hours=None leaves the issue open."""

    def _make(number=1, author="alice", created_days_ago=3, close_hours=None, labels=(), repo="web"):
        created_at = NOW - timedelta(days=created_days_ago)
        closed_at = created_at + timedelta(hours=close_hours) if close_hours is not None else None
        return IssueRecord(
            number=number,
            title=f"Issue {number}",
            author=author,
            state="closed" if closed_at else "open",
            created_at=created_at,
            closed_at=closed_at,
            labels=tuple(labels),
            time_to_close_hours=hours_between(created_at, closed_at),
            repo=repo,
        )

    return _make


@pytest.fixture
def make_release():
    def _make(tag="v1.0.0", days_ago=2, repo="web"):
        return ReleaseRecord(
            tag=tag,
            name=tag,
            published_at=NOW - timedelta(days=days_ago),
            author="alice",
            repo=repo,
        )

    return _make


@pytest.fixture
def sample_records(make_commit, make_pr, make_issue, make_release) -> RecordSet:
    """A small but complete snapshot across two repositories."""
    return RecordSet(
        owner="octocat",
        fetched_at=NOW,
        repositories=[
            RepositoryInfo(
                name="web",
                full_name="octocat/web",
                language="TypeScript",
                stars=12,
                languages={"TypeScript": 3000, "CSS": 1000},
            ),
            RepositoryInfo(
                name="api",
                full_name="octocat/api",
                language="Python",
                languages={"Python": 1000},
            ),
        ],
        commits=[
            make_commit("alice", 1, "web"),
            make_commit("alice", 2, "web"),
            make_commit("alice", 2, "api", additions=5),
            make_commit("bob", 3, "api"),
        ],
        pull_requests=[
            make_pr(1, "alice", created_days_ago=6, merge_hours=24, reviewers=("bob",)),
            make_pr(2, "bob", created_days_ago=4, merge_hours=48, repo="api"),
            make_pr(3, "carol", created_days_ago=1),
        ],
        issues=[
            make_issue(10, "bob", created_days_ago=5, close_hours=12, labels=("bug",)),
            make_issue(11, "alice", created_days_ago=2),
        ],
        releases=[make_release("v1.0.0", 3)],
    )
