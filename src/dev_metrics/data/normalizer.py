"""Data normalization utilities for the developer metrics pipeline."""

import logging
from datetime import datetime
from typing import Any, Dict, Iterable, List, Optional

from ..utils.helpers import first_line, hours_between, parse_datetime
from .models import (
    CommitRecord,
    IssueRecord,
    PullRequestRecord,
    ReleaseRecord,
    RepositoryInfo,
    ReviewEvent,
)

logger = logging.getLogger(__name__)

MAX_TITLE_LENGTH = 100
UNKNOWN_AUTHOR = "unknown"


def _author_name(user: Optional[Dict[str, Any]], fallback_name: Optional[str] = None) -> str:
    """Login handle, then display name, then "unknown"."""
    user = user or {}
    return user.get("login") or user.get("name") or fallback_name or UNKNOWN_AUTHOR


def _label_names(labels: Optional[Iterable[Any]]) -> tuple[str, ...]:
    names: List[str] = []
    for label in labels or []:
        name = label if isinstance(label, str) else (label or {}).get("name")
        if name and name not in names:
            names.append(name)
    return tuple(names)


def _count(value: Any) -> int:
    try:
        return max(int(value or 0), 0)
    except (TypeError, ValueError):
        return 0


class DataNormalizer:
    """Normalizes raw GitHub REST payloads into canonical records."""

    @staticmethod
    def normalize_commit(commit: Dict[str, Any], repo: str) -> CommitRecord | None:
        """Normalize a single commit.

        Args:
            commit: Raw commit object from the commits endpoint.
            repo: Name of the owning repository.

        Returns:
            A CommitRecord, or None when the commit carries no usable timestamp.
        """
        details = commit.get("commit") or {}
        git_author = details.get("author") or {}
        git_committer = details.get("committer") or {}

        date = parse_datetime(git_author.get("date")) or parse_datetime(
            git_committer.get("date")
        )
        if date is None:
            logger.debug("Dropping commit %s in %s: no timestamp", commit.get("sha"), repo)
            return None

        stats = commit.get("stats") or {}
        user = commit.get("author") or {}
        return CommitRecord(
            sha=(commit.get("sha") or "")[:8],
            message=first_line(details.get("message"), MAX_TITLE_LENGTH),
            author=_author_name(user, git_author.get("name")),
            author_avatar=user.get("avatar_url") or "",
            date=date,
            additions=_count(stats.get("additions")),
            deletions=_count(stats.get("deletions")),
            files_changed=len(commit.get("files") or []),
            repo=repo,
        )

    @classmethod
    def normalize_commits(cls, commits: List[Dict[str, Any]], repo: str) -> List[CommitRecord]:
        """Normalize a page (or full set) of commits, dropping unusable ones."""
        normalized = (cls.normalize_commit(commit, repo) for commit in commits)
        return [commit for commit in normalized if commit is not None]

    @staticmethod
    def normalize_pull_request(
        pr: Dict[str, Any],
        repo: str,
        reviews: Optional[List[Dict[str, Any]]] = None,
    ) -> PullRequestRecord:
        """Normalize pull request data.

        Args:
            pr: Raw PR object from the pulls list or detail endpoint.
            repo: Name of the owning repository.
            reviews: Raw review objects for this PR, if they were fetched.

        Returns:
            A PullRequestRecord with derived durations.
        """
        created_at = parse_datetime(pr.get("created_at"))
        merged_at = parse_datetime(pr.get("merged_at"))
        closed_at = parse_datetime(pr.get("closed_at"))

        if merged_at:
            state = "merged"
        else:
            state = "closed" if pr.get("state") == "closed" else "open"

        # Extract review information
        review_events = []
        for review in reviews or []:
            submitted_at = parse_datetime(review.get("submitted_at"))
            if submitted_at is None:
                continue
            review_events.append(
                ReviewEvent(author=_author_name(review.get("user")), submitted_at=submitted_at)
            )
        review_events.sort(key=lambda event: event.submitted_at)

        first_review_at = review_events[0].submitted_at if review_events else None
        user = pr.get("user") or {}

        return PullRequestRecord(
            number=pr["number"],
            title=(pr.get("title") or "")[:MAX_TITLE_LENGTH],
            author=_author_name(user),
            author_avatar=user.get("avatar_url") or "",
            state=state,
            created_at=created_at,
            merged_at=merged_at,
            closed_at=closed_at,
            additions=_count(pr.get("additions")),
            deletions=_count(pr.get("deletions")),
            files_changed=_count(pr.get("changed_files")),
            comments=_count(pr.get("comments")),
            review_comments=_count(pr.get("review_comments")),
            reviews=len(review_events),
            review_events=tuple(review_events),
            time_to_merge_hours=hours_between(created_at, merged_at),
            time_to_first_review_hours=hours_between(created_at, first_review_at),
            repo=repo,
            labels=_label_names(pr.get("labels")),
        )

    @classmethod
    def normalize_pull_requests(
        cls,
        prs: List[Dict[str, Any]],
        repo: str,
        since: Optional[datetime] = None,
        reviews_by_number: Optional[Dict[int, List[Dict[str, Any]]]] = None,
    ) -> List[PullRequestRecord]:
        """Normalize pull requests, keeping only those created on or after since."""
        reviews_by_number = reviews_by_number or {}
        normalized = []
        for pr in prs:
            created_at = parse_datetime(pr.get("created_at"))
            if created_at is None:
                logger.debug("Dropping PR #%s in %s: no creation date", pr.get("number"), repo)
                continue
            if since and created_at < since:
                continue
            normalized.append(
                cls.normalize_pull_request(pr, repo, reviews_by_number.get(pr["number"]))
            )
        return normalized

    @staticmethod
    def normalize_issue(issue: Dict[str, Any], repo: str) -> IssueRecord | None:
        """Normalize issue data.

        Issues backed by a pull request are skipped and None is returned.
        """
        if issue.get("pull_request") is not None:
            return None

        created_at = parse_datetime(issue.get("created_at"))
        if created_at is None:
            logger.debug("Dropping issue #%s in %s: no creation date", issue.get("number"), repo)
            return None
        closed_at = parse_datetime(issue.get("closed_at"))

        return IssueRecord(
            number=issue["number"],
            title=(issue.get("title") or "")[:MAX_TITLE_LENGTH],
            author=_author_name(issue.get("user")),
            state="closed" if issue.get("state") == "closed" else "open",
            created_at=created_at,
            closed_at=closed_at,
            labels=_label_names(issue.get("labels")),
            comments=_count(issue.get("comments")),
            time_to_close_hours=hours_between(created_at, closed_at),
            repo=repo,
        )

    @classmethod
    def normalize_issues(cls, issues: List[Dict[str, Any]], repo: str) -> List[IssueRecord]:
        """Normalize issues, excluding pull requests from the feed."""
        normalized = (cls.normalize_issue(issue, repo) for issue in issues)
        return [issue for issue in normalized if issue is not None]

    @staticmethod
    def normalize_release(release: Dict[str, Any], repo: str) -> ReleaseRecord | None:
        published_at = parse_datetime(release.get("published_at")) or parse_datetime(
            release.get("created_at")
        )
        if published_at is None:
            return None
        tag = release.get("tag_name") or ""
        return ReleaseRecord(
            tag=tag,
            name=release.get("name") or tag,
            published_at=published_at,
            author=_author_name(release.get("author")),
            repo=repo,
            is_prerelease=bool(release.get("prerelease")),
        )

    @classmethod
    def normalize_releases(cls, releases: List[Dict[str, Any]], repo: str) -> List[ReleaseRecord]:
        normalized = (cls.normalize_release(release, repo) for release in releases)
        return [release for release in normalized if release is not None]

    @staticmethod
    def normalize_repository(
        repo: Dict[str, Any], languages: Optional[Dict[str, int]] = None
    ) -> RepositoryInfo:
        """Normalize repository metadata plus its language byte counts."""
        return RepositoryInfo(
            name=repo["name"],
            full_name=repo.get("full_name") or repo["name"],
            description=repo.get("description") or "",
            language=repo.get("language") or "Unknown",
            stars=_count(repo.get("stargazers_count")),
            forks=_count(repo.get("forks_count")),
            open_issues=_count(repo.get("open_issues_count")),
            pushed_at=parse_datetime(repo.get("pushed_at")),
            languages={name: _count(size) for name, size in (languages or {}).items()},
        )
