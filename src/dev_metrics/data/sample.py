# src/dev_metrics/data/sample.py

"""Deterministic synthetic snapshot for previewing charts without a token."""

import random
from datetime import datetime, timedelta
from typing import List, Optional

from ..utils.helpers import hours_between, now_utc
from .models import (
    CommitRecord,
    IssueRecord,
    PullRequestRecord,
    RecordSet,
    ReleaseRecord,
    RepositoryInfo,
    ReviewEvent,
)

CONTRIBUTORS = ["alexchen", "sarahdev", "mikejones", "emilyz", "jamesw", "priyak"]

REPOSITORIES = [
    ("web-platform", "TypeScript", "Main web application platform"),
    ("api-gateway", "Go", "API gateway and routing service"),
    ("mobile-app", "TypeScript", "React Native mobile application"),
    ("ml-pipeline", "Python", "Machine learning data pipeline"),
    ("infra-config", "HCL", "Infrastructure as code configurations"),
]

COMMIT_MESSAGES = [
    "feat: implement user authentication flow",
    "fix: resolve memory leak in data processing",
    "refactor: optimize database query performance",
    "feat: add real-time notification system",
    "fix: handle edge case in payment processing",
    "chore: update dependencies to latest versions",
    "docs: document the deployment process",
    "test: cover retry logic in the http client",
]

ISSUE_LABELS = [["bug"], ["enhancement"], ["bug", "incident"], ["documentation"], ["hotfix"], []]


def _avatar(index: int) -> str:
    return f"https://avatars.githubusercontent.com/u/{index + 1}?v=4"


def _moment(rng: random.Random, now: datetime, days_back: int) -> datetime:
    day = now - timedelta(days=rng.randint(0, days_back))
    moment = day.replace(hour=rng.randint(8, 22), minute=rng.randint(0, 59), second=0, microsecond=0)
    return min(moment, now)


def generate_sample_records(
    owner: str = "octocat",
    lookback_days: int = 90,
    now: Optional[datetime] = None,
    seed: int = 42,
) -> RecordSet:
    """Builds a plausible RecordSet; the same seed and now give the same snapshot."""
    rng = random.Random(seed)
    now = now or now_utc()

    repositories = []
    for name, language, description in REPOSITORIES:
        languages = {language: rng.randint(50_000, 900_000)}
        for extra in rng.sample(["Shell", "CSS", "HTML", "Dockerfile", "Makefile"], 2):
            languages[extra] = rng.randint(1_000, 60_000)
        repositories.append(
            RepositoryInfo(
                name=name,
                full_name=f"{owner}/{name}",
                description=description,
                language=language,
                stars=rng.randint(10, 400),
                forks=rng.randint(1, 80),
                open_issues=rng.randint(0, 30),
                pushed_at=now - timedelta(hours=rng.randint(1, 72)),
                languages=languages,
            )
        )

    commits: List[CommitRecord] = []
    for i in range(lookback_days * 4):
        author = rng.randrange(len(CONTRIBUTORS))
        commits.append(
            CommitRecord(
                sha=f"{rng.getrandbits(32):08x}",
                message=rng.choice(COMMIT_MESSAGES),
                author=CONTRIBUTORS[author],
                author_avatar=_avatar(author),
                date=_moment(rng, now, lookback_days),
                additions=rng.randint(1, 400),
                deletions=rng.randint(0, 200),
                files_changed=rng.randint(1, 12),
                repo=rng.choice(REPOSITORIES)[0],
            )
        )

    prs: List[PullRequestRecord] = []
    for number in range(1, lookback_days // 2 + 1):
        author = rng.randrange(len(CONTRIBUTORS))
        created_at = _moment(rng, now, lookback_days)
        reviewer = CONTRIBUTORS[(author + 1) % len(CONTRIBUTORS)]
        first_review = created_at + timedelta(hours=rng.randint(1, 30))
        reviews = (ReviewEvent(author=reviewer, submitted_at=first_review),) if first_review <= now else ()

        merged_at = None
        closed_at = None
        state = "open"
        roll = rng.random()
        if roll < 0.75:
            merged_at = created_at + timedelta(hours=rng.randint(2, 96))
            if merged_at <= now:
                state, closed_at = "merged", merged_at
            else:
                merged_at = None
        elif roll < 0.85:
            closed_at = created_at + timedelta(hours=rng.randint(2, 48))
            if closed_at <= now:
                state = "closed"
            else:
                closed_at = None

        prs.append(
            PullRequestRecord(
                number=number,
                title=rng.choice(COMMIT_MESSAGES),
                author=CONTRIBUTORS[author],
                author_avatar=_avatar(author),
                state=state,
                created_at=created_at,
                merged_at=merged_at,
                closed_at=closed_at,
                additions=rng.randint(5, 1200),
                deletions=rng.randint(0, 600),
                files_changed=rng.randint(1, 30),
                comments=rng.randint(0, 10),
                review_comments=rng.randint(0, 15),
                reviews=len(reviews),
                review_events=reviews,
                time_to_merge_hours=hours_between(created_at, merged_at),
                time_to_first_review_hours=hours_between(
                    created_at, reviews[0].submitted_at if reviews else None
                ),
                repo=rng.choice(REPOSITORIES)[0],
                labels=tuple(rng.choice(ISSUE_LABELS)),
            )
        )

    issues: List[IssueRecord] = []
    for number in range(1000, 1000 + lookback_days // 3):
        created_at = _moment(rng, now, lookback_days)
        closed_at = created_at + timedelta(hours=rng.randint(1, 240))
        if rng.random() < 0.3 or closed_at > now:
            closed_at = None
        issues.append(
            IssueRecord(
                number=number,
                title=f"Issue {number}",
                author=rng.choice(CONTRIBUTORS),
                state="closed" if closed_at else "open",
                created_at=created_at,
                closed_at=closed_at,
                labels=tuple(rng.choice(ISSUE_LABELS)),
                comments=rng.randint(0, 12),
                time_to_close_hours=hours_between(created_at, closed_at),
                repo=rng.choice(REPOSITORIES)[0],
            )
        )

    releases = [
        ReleaseRecord(
            tag=f"v1.{minor}.0",
            name=f"Release 1.{minor}",
            published_at=_moment(rng, now, lookback_days),
            author=rng.choice(CONTRIBUTORS),
            repo=rng.choice(REPOSITORIES)[0],
            is_prerelease=rng.random() < 0.2,
        )
        for minor in range(max(lookback_days // 10, 1))
    ]

    return RecordSet(
        owner=owner,
        fetched_at=now,
        repositories=repositories,
        commits=commits,
        pull_requests=prs,
        issues=issues,
        releases=releases,
    )
