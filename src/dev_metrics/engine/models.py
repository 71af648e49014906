# src/dev_metrics/engine/models.py

"""Derived entities and the metrics document read by every presentation surface."""

import datetime as dt
from datetime import datetime
from pathlib import Path
from typing import Dict, List, Literal, Optional

from pydantic import BaseModel, ConfigDict, Field

from ..data.models import CommitRecord, IssueRecord, PullRequestRecord, ReleaseRecord

Rating = Literal["elite", "high", "medium", "low"]


class DerivedModel(BaseModel):
    model_config = ConfigDict(frozen=True)


class ContributorRollup(DerivedModel):
    username: str
    avatar_url: str = ""
    total_commits: int = 0
    total_prs: int = 0
    total_reviews: int = 0
    total_issues: int = 0
    additions: int = 0
    deletions: int = 0
    active_days: int = 0
    first_commit_date: datetime
    last_commit_date: datetime


class RepositoryRollup(DerivedModel):
    name: str
    full_name: str = ""
    description: str = ""
    language: str = "Unknown"
    stars: int = 0
    forks: int = 0
    open_issues: int = 0
    total_commits: int = 0
    total_prs: int = 0
    avg_pr_merge_time_hours: float = 0.0
    contributors_count: int = 0
    last_commit_date: Optional[datetime] = None
    languages: Dict[str, float] = Field(default_factory=dict)


class DailyBucket(DerivedModel):
    date: dt.date
    commits: int = 0
    prs_opened: int = 0
    prs_merged: int = 0
    issues_opened: int = 0
    issues_closed: int = 0
    reviews: int = 0
    additions: int = 0
    deletions: int = 0


# Counters shared by daily and weekly buckets.
BUCKET_COUNTERS = (
    "commits",
    "prs_opened",
    "prs_merged",
    "issues_opened",
    "issues_closed",
    "reviews",
    "additions",
    "deletions",
)


class WeeklyBucket(DerivedModel):
    week_start: dt.date
    commits: int = 0
    prs_opened: int = 0
    prs_merged: int = 0
    issues_opened: int = 0
    issues_closed: int = 0
    reviews: int = 0
    additions: int = 0
    deletions: int = 0
    active_contributors: int = 0


class HeatmapCell(DerivedModel):
    date: dt.date
    count: int
    level: Literal[0, 1, 2, 3, 4]


class DoraMetricResult(DerivedModel):
    value: float
    unit: str
    rating: Rating


class DoraMetrics(DerivedModel):
    deployment_frequency: DoraMetricResult
    lead_time_for_changes: DoraMetricResult
    change_failure_rate: DoraMetricResult
    mean_time_to_recovery: DoraMetricResult


class LanguageShare(DerivedModel):
    language: str
    percentage: float
    color: str
    bytes: int


class Summary(DerivedModel):
    total_commits: int = 0
    total_prs: int = 0
    total_prs_merged: int = 0
    total_issues: int = 0
    total_issues_closed: int = 0
    total_reviews: int = 0
    total_releases: int = 0
    total_contributors: int = 0
    total_repositories: int = 0
    avg_pr_merge_time_hours: float = 0.0
    avg_time_to_first_review_hours: float = 0.0
    avg_issue_close_time_hours: float = 0.0
    code_additions: int = 0
    code_deletions: int = 0


class DocumentConfig(DerivedModel):
    owner: str
    lookback_days: int


class MetricsDocument(DerivedModel):
    """The single output of an aggregation run."""

    generated_at: datetime
    config: DocumentConfig
    summary: Summary
    contributors: List[ContributorRollup]
    commits: List[CommitRecord]
    pull_requests: List[PullRequestRecord]
    issues: List[IssueRecord]
    releases: List[ReleaseRecord]
    daily_activity: List[DailyBucket]
    weekly_activity: List[WeeklyBucket]
    repositories: List[RepositoryRollup]
    dora: DoraMetrics
    heatmap: List[HeatmapCell]
    languages: List[LanguageShare]

    def to_json(self) -> str:
        return self.model_dump_json(indent=2)

    def save(self, path: str | Path) -> None:
        path = Path(path)
        path.parent.mkdir(parents=True, exist_ok=True)
        path.write_text(self.to_json(), encoding="utf-8")

    @classmethod
    def load(cls, path: str | Path) -> "MetricsDocument":
        return cls.model_validate_json(Path(path).read_text(encoding="utf-8"))
