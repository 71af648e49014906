# src/dev_metrics/engine/rollups.py

"""Per-contributor and per-repository rollups."""

from collections import defaultdict
from typing import Any, Dict, List, Sequence

from ..data.models import CommitRecord, IssueRecord, PullRequestRecord, RepositoryInfo
from ..utils.helpers import round_half_up, safe_mean, utc_date
from .languages import language_percentages
from .models import ContributorRollup, RepositoryRollup


def merged_durations(prs: Sequence[PullRequestRecord]) -> List[float]:
    """Merge durations of merged PRs that have one."""
    return [
        pr.time_to_merge_hours
        for pr in prs
        if pr.state == "merged" and pr.time_to_merge_hours is not None
    ]


def build_contributor_rollups(
    commits: Sequence[CommitRecord],
    prs: Sequence[PullRequestRecord],
    issues: Sequence[IssueRecord],
) -> List[ContributorRollup]:
    """Builds one rollup per commit author.

    PRs, reviews and issues only count towards authors who also committed.
    """
    rollups: Dict[str, Dict[str, Any]] = {}
    active_dates: Dict[str, set] = defaultdict(set)

    for commit in commits:
        entry = rollups.get(commit.author)
        if entry is None:
            entry = rollups[commit.author] = {
                "username": commit.author,
                "avatar_url": commit.author_avatar,
                "total_commits": 0,
                "total_prs": 0,
                "total_reviews": 0,
                "total_issues": 0,
                "additions": 0,
                "deletions": 0,
                "first_commit_date": commit.date,
                "last_commit_date": commit.date,
            }
        entry["total_commits"] += 1
        entry["additions"] += commit.additions
        entry["deletions"] += commit.deletions
        entry["first_commit_date"] = min(entry["first_commit_date"], commit.date)
        entry["last_commit_date"] = max(entry["last_commit_date"], commit.date)
        if not entry["avatar_url"]:
            entry["avatar_url"] = commit.author_avatar
        active_dates[commit.author].add(utc_date(commit.date))

    for pr in prs:
        if pr.author in rollups:
            rollups[pr.author]["total_prs"] += 1
        for review in pr.review_events:
            if review.author in rollups:
                rollups[review.author]["total_reviews"] += 1

    for issue in issues:
        if issue.author in rollups:
            rollups[issue.author]["total_issues"] += 1

    contributors = [
        ContributorRollup(active_days=len(active_dates[username]), **entry)
        for username, entry in rollups.items()
    ]
    contributors.sort(key=lambda c: (-c.total_commits, c.username))
    return contributors


def build_repository_rollups(
    commits: Sequence[CommitRecord],
    prs: Sequence[PullRequestRecord],
    repositories: Sequence[RepositoryInfo] = (),
) -> List[RepositoryRollup]:
    """Builds one rollup per repository seen in commits, PRs or the tracked list."""
    commits_by_repo: Dict[str, List[CommitRecord]] = defaultdict(list)
    prs_by_repo: Dict[str, List[PullRequestRecord]] = defaultdict(list)
    for commit in commits:
        commits_by_repo[commit.repo].append(commit)
    for pr in prs:
        prs_by_repo[pr.repo].append(pr)

    info_by_name = {repo.name: repo for repo in repositories}
    names = list(info_by_name)
    for name in list(commits_by_repo) + list(prs_by_repo):
        if name not in info_by_name and name not in names:
            names.append(name)

    rollups = []
    for name in names:
        info = info_by_name.get(name) or RepositoryInfo(name=name, full_name=name)
        repo_commits = commits_by_repo.get(name, [])
        repo_prs = prs_by_repo.get(name, [])
        rollups.append(
            RepositoryRollup(
                name=name,
                full_name=info.full_name or name,
                description=info.description,
                language=info.language,
                stars=info.stars,
                forks=info.forks,
                open_issues=info.open_issues,
                total_commits=len(repo_commits),
                total_prs=len(repo_prs),
                avg_pr_merge_time_hours=round_half_up(safe_mean(merged_durations(repo_prs))),
                contributors_count=len({commit.author for commit in repo_commits}),
                last_commit_date=max((commit.date for commit in repo_commits), default=None),
                languages=language_percentages(info.languages),
            )
        )

    rollups.sort(key=lambda r: (-r.total_commits, r.name))
    return rollups
