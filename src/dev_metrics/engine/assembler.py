# src/dev_metrics/engine/assembler.py

"""Joins every aggregation into the metrics document."""

import logging
from datetime import datetime
from typing import Optional

from ..data.models import RecordSet
from ..utils.helpers import now_utc, round_half_up, safe_mean
from .bucketing import build_daily_buckets, build_heatmap, build_weekly_buckets
from .dora import DEFAULT_FAILURE_PATTERN, compute_dora
from .languages import DEFAULT_TOP_LANGUAGES, summarize_languages
from .models import DocumentConfig, MetricsDocument, Summary
from .rollups import build_contributor_rollups, build_repository_rollups, merged_durations

logger = logging.getLogger(__name__)

DEFAULT_MAX_LISTED_ITEMS = 500


class MetricsAssembler:
    """Builds a MetricsDocument from one RecordSet snapshot."""

    def __init__(
        self,
        records: RecordSet,
        lookback_days: int,
        now: Optional[datetime] = None,
        top_languages: int = DEFAULT_TOP_LANGUAGES,
        max_listed_items: int = DEFAULT_MAX_LISTED_ITEMS,
        failure_pattern: str = DEFAULT_FAILURE_PATTERN,
    ):
        """
        Initialize the assembler.

        Args:
            records: The canonical record snapshot to aggregate.
            lookback_days: Length of the bucketing window in days.
            now: Anchor of the window; defaults to the current time.
            top_languages: Cap on the language breakdown.
            max_listed_items: Cap on the commit and PR lists in the output.
            failure_pattern: Label regex marking failure/incident issues.
        """
        self.records = records
        self.lookback_days = lookback_days
        self.now = now or now_utc()
        self.top_languages = top_languages
        self.max_listed_items = max_listed_items
        self.failure_pattern = failure_pattern

    def build_summary(self, total_contributors: int, total_repositories: int) -> Summary:
        """Global counters and averages, taken straight from the canonical records."""
        commits = self.records.commits
        prs = self.records.pull_requests
        issues = self.records.issues

        review_durations = [
            pr.time_to_first_review_hours
            for pr in prs
            if pr.time_to_first_review_hours is not None
        ]
        close_durations = [
            issue.time_to_close_hours
            for issue in issues
            if issue.time_to_close_hours is not None
        ]

        return Summary(
            total_commits=len(commits),
            total_prs=len(prs),
            total_prs_merged=sum(1 for pr in prs if pr.state == "merged"),
            total_issues=len(issues),
            total_issues_closed=sum(1 for issue in issues if issue.state == "closed"),
            total_reviews=sum(pr.reviews for pr in prs),
            total_releases=len(self.records.releases),
            total_contributors=total_contributors,
            total_repositories=total_repositories,
            avg_pr_merge_time_hours=round_half_up(safe_mean(merged_durations(prs))),
            avg_time_to_first_review_hours=round_half_up(safe_mean(review_durations)),
            avg_issue_close_time_hours=round_half_up(safe_mean(close_durations)),
            code_additions=sum(commit.additions for commit in commits),
            code_deletions=sum(commit.deletions for commit in commits),
        )

    def assemble(self, generated_at: Optional[datetime] = None) -> MetricsDocument:
        """Runs every aggregation and returns the finished document."""
        records = self.records
        commits = records.commits
        prs = records.pull_requests
        issues = records.issues

        # 1. Time buckets
        daily = build_daily_buckets(commits, prs, issues, self.lookback_days, self.now)
        weekly = build_weekly_buckets(daily, commits)
        heatmap = build_heatmap(commits, self.now)

        # 2. Entity rollups
        contributors = build_contributor_rollups(commits, prs, issues)
        repositories = build_repository_rollups(commits, prs, records.repositories)

        # 3. Ratings and language shares
        dora = compute_dora(
            prs, issues, records.releases, self.lookback_days, self.now, self.failure_pattern
        )
        languages = summarize_languages(records.language_bytes(), self.top_languages)

        logger.debug(
            "Aggregated %d commits, %d PRs, %d issues into %d daily buckets",
            len(commits),
            len(prs),
            len(issues),
            len(daily),
        )

        return MetricsDocument(
            generated_at=generated_at or now_utc(),
            config=DocumentConfig(owner=records.owner, lookback_days=self.lookback_days),
            summary=self.build_summary(len(contributors), len(repositories)),
            contributors=contributors,
            commits=sorted(commits, key=lambda c: c.date, reverse=True)[: self.max_listed_items],
            pull_requests=sorted(prs, key=lambda p: p.created_at, reverse=True)[
                : self.max_listed_items
            ],
            issues=sorted(issues, key=lambda i: i.created_at, reverse=True),
            releases=sorted(records.releases, key=lambda r: r.published_at, reverse=True),
            daily_activity=daily,
            weekly_activity=weekly,
            repositories=repositories,
            dora=dora,
            heatmap=heatmap,
            languages=languages,
        )


def build_metrics(records: RecordSet, settings, now: Optional[datetime] = None) -> MetricsDocument:
    """Assembles a document using the metrics options from Settings."""
    options = settings.metrics
    assembler = MetricsAssembler(
        records,
        lookback_days=options.lookback_days,
        now=now,
        top_languages=options.top_languages,
        max_listed_items=options.max_listed_items,
        failure_pattern=options.failure_label_pattern,
    )
    return assembler.assemble()
