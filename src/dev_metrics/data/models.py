# src/dev_metrics/data/models.py

"""Canonical record types produced by the normalizer."""

from collections import Counter
from datetime import datetime
from pathlib import Path
from typing import Dict, List, Literal, Optional, Tuple

from pydantic import BaseModel, ConfigDict, Field


class CanonicalModel(BaseModel):
    """Base for immutable records."""

    model_config = ConfigDict(frozen=True, extra="ignore")


class CommitRecord(CanonicalModel):
    sha: str
    message: str
    author: str
    author_avatar: str = ""
    date: datetime
    additions: int = Field(default=0, ge=0)
    deletions: int = Field(default=0, ge=0)
    files_changed: int = Field(default=0, ge=0)
    repo: str


class ReviewEvent(CanonicalModel):
    author: str
    submitted_at: datetime


class PullRequestRecord(CanonicalModel):
    number: int
    title: str
    author: str
    author_avatar: str = ""
    state: Literal["open", "merged", "closed"]
    created_at: datetime
    merged_at: Optional[datetime] = None
    closed_at: Optional[datetime] = None
    additions: int = Field(default=0, ge=0)
    deletions: int = Field(default=0, ge=0)
    files_changed: int = Field(default=0, ge=0)
    comments: int = Field(default=0, ge=0)
    review_comments: int = Field(default=0, ge=0)
    reviews: int = Field(default=0, ge=0)
    review_events: Tuple[ReviewEvent, ...] = ()
    time_to_merge_hours: Optional[float] = None
    time_to_first_review_hours: Optional[float] = None
    repo: str
    labels: Tuple[str, ...] = ()


class IssueRecord(CanonicalModel):
    number: int
    title: str
    author: str
    state: Literal["open", "closed"]
    created_at: datetime
    closed_at: Optional[datetime] = None
    labels: Tuple[str, ...] = ()
    comments: int = Field(default=0, ge=0)
    time_to_close_hours: Optional[float] = None
    repo: str


class ReleaseRecord(CanonicalModel):
    tag: str
    name: str
    published_at: datetime
    author: str
    repo: str
    is_prerelease: bool = False


class RepositoryInfo(CanonicalModel):
    name: str
    full_name: str = ""
    description: str = ""
    language: str = "Unknown"
    stars: int = 0
    forks: int = 0
    open_issues: int = 0
    pushed_at: Optional[datetime] = None
    languages: Dict[str, int] = Field(default_factory=dict)


class RecordSet(CanonicalModel):
    """One immutable snapshot of everything fetched for an owner."""

    owner: str
    fetched_at: datetime
    repositories: List[RepositoryInfo] = Field(default_factory=list)
    commits: List[CommitRecord] = Field(default_factory=list)
    pull_requests: List[PullRequestRecord] = Field(default_factory=list)
    issues: List[IssueRecord] = Field(default_factory=list)
    releases: List[ReleaseRecord] = Field(default_factory=list)

    def language_bytes(self) -> Dict[str, int]:
        """Language byte counts summed across all tracked repositories."""
        totals: Counter = Counter()
        for repo in self.repositories:
            totals.update(repo.languages)
        return dict(totals)

    def save(self, path: str | Path) -> None:
        Path(path).write_text(self.model_dump_json(indent=2), encoding="utf-8")

    @classmethod
    def load(cls, path: str | Path) -> "RecordSet":
        return cls.model_validate_json(Path(path).read_text(encoding="utf-8"))
