# src/dev_metrics/data/fetcher.py

"""REST data fetcher for GitHub activity data."""

import logging
import os
import time
from datetime import datetime, timedelta
from typing import Any, Callable, Dict, List, Optional, TypeVar

import requests

from ..config.settings import CollectOptions
from ..utils.helpers import now_utc, parse_datetime
from .models import (
    CommitRecord,
    IssueRecord,
    PullRequestRecord,
    RecordSet,
    ReleaseRecord,
    RepositoryInfo,
)
from .normalizer import DataNormalizer

logger = logging.getLogger(__name__)

T = TypeVar("T")

MAX_RATE_LIMIT_WAIT = 300.0


class GitHubAPIError(Exception):
    """A GitHub request failed for good (non-retryable status or retries exhausted)."""

    def __init__(self, message: str, status: int = 0):
        super().__init__(message)
        self.status = status


class GitHubDataFetcher:
    """Fetches activity data from the GitHub REST API and normalizes it."""

    def __init__(
        self,
        token: str,
        owner: str,
        lookback_days: int,
        repositories: Optional[List[str]] = None,
        auto_discover_limit: int = 10,
        collect: Optional[CollectOptions] = None,
        output_dir: str = "data",
        max_retries: int = 3,
        session: Optional[requests.Session] = None,
    ):
        """Initialize the fetcher."""
        self.token = token
        self.owner = owner
        self.lookback_days = lookback_days
        self.repositories = repositories or []
        self.auto_discover_limit = auto_discover_limit
        self.collect = collect or CollectOptions()
        self.output_dir = output_dir
        self.max_retries = max_retries
        self.since = now_utc() - timedelta(days=lookback_days)
        self.api_url = "https://api.github.com"
        self.session = session or requests.Session()
        self.session.headers.update(
            {
                "Authorization": f"Bearer {token}",
                "Accept": "application/vnd.github+json",
                "X-GitHub-Api-Version": "2022-11-28",
            }
        )

    @staticmethod
    def _rate_limit_wait(response: requests.Response) -> Optional[float]:
        """Seconds to wait before retrying, or None if the response is not rate limited."""
        headers = response.headers
        retry_after = headers.get("Retry-After")
        if retry_after is not None:
            try:
                return min(float(retry_after), MAX_RATE_LIMIT_WAIT)
            except ValueError:
                return MAX_RATE_LIMIT_WAIT
        if response.status_code == 429 or (
            response.status_code == 403 and headers.get("X-RateLimit-Remaining") == "0"
        ):
            reset = headers.get("X-RateLimit-Reset")
            if reset is None:
                return 1.0
            try:
                return min(max(float(reset) - time.time(), 0.0), MAX_RATE_LIMIT_WAIT)
            except ValueError:
                return MAX_RATE_LIMIT_WAIT
        return None

    def _request(self, url: str, params: Optional[Dict[str, Any]] = None) -> requests.Response:
        """Execute a GET request, retrying on rate limits."""
        if not url.startswith("http"):
            url = f"{self.api_url}{url}"

        for attempt in range(self.max_retries + 1):
            response = self.session.get(url, params=params, timeout=30)
            if response.ok:
                return response

            wait = self._rate_limit_wait(response)
            if wait is None or attempt == self.max_retries:
                raise GitHubAPIError(
                    f"GET {url} failed with {response.status_code}: {response.text[:200]}",
                    status=response.status_code,
                )
            logger.info("Rate limited on %s, retrying in %.0fs", url, wait)
            time.sleep(wait)

        raise GitHubAPIError(f"GET {url} failed after {self.max_retries} retries")

    def _get_json(self, url: str, params: Optional[Dict[str, Any]] = None) -> Any:
        return self._request(url, params).json()

    def _paginate(
        self,
        url: str,
        params: Optional[Dict[str, Any]] = None,
        stop: Optional[Callable[[Dict[str, Any]], bool]] = None,
    ) -> List[Dict[str, Any]]:
        """Collect every page by following the Link header.

        If stop returns True for an item, that item is dropped and paging ends.
        """
        items: List[Dict[str, Any]] = []
        params = {"per_page": 100, **(params or {})}
        next_url: Optional[str] = url

        while next_url:
            response = self._request(next_url, params)
            for item in response.json():
                if stop and stop(item):
                    return items
                items.append(item)
            next_url = response.links.get("next", {}).get("url")
            # The next link already carries the query string
            params = None

        return items

    def _safely(self, what: str, repo: str, call: Callable[[], T], empty: T) -> T:
        """Run one fetch step; a failure only empties that step for that repository."""
        try:
            return call()
        except (requests.RequestException, GitHubAPIError, ValueError) as exc:
            logger.warning("Could not fetch %s for %s: %s", what, repo, exc)
            return empty

    def fetch_repositories(self) -> List[Dict[str, Any]]:
        """Explicitly configured repositories, or the owner's most recently updated ones."""
        if self.repositories:
            repos = []
            for name in self.repositories:
                repo = self._safely(
                    "repository", name, lambda: self._get_json(f"/repos/{self.owner}/{name}"), None
                )
                if repo:
                    repos.append(repo)
            return repos

        repos = self._get_json(
            f"/users/{self.owner}/repos",
            {"sort": "updated", "direction": "desc", "per_page": self.auto_discover_limit},
        )
        return repos[: self.auto_discover_limit]

    def fetch_commits(self, repo: str) -> List[CommitRecord]:
        raw = self._paginate(
            f"/repos/{self.owner}/{repo}/commits", {"since": self.since.isoformat()}
        )
        if self.collect.code_frequency:
            raw = [self._get_json(f"/repos/{self.owner}/{repo}/commits/{c['sha']}") for c in raw]
        return DataNormalizer.normalize_commits(raw, repo)

    def fetch_pull_requests(self, repo: str) -> List[PullRequestRecord]:
        def older_than_window(pr: Dict[str, Any]) -> bool:
            created = parse_datetime(pr.get("created_at"))
            return created is not None and created < self.since

        raw = self._paginate(
            f"/repos/{self.owner}/{repo}/pulls",
            {"state": "all", "sort": "created", "direction": "desc"},
            stop=older_than_window,
        )
        if self.collect.code_frequency:
            raw = [self._get_json(f"/repos/{self.owner}/{repo}/pulls/{pr['number']}") for pr in raw]

        reviews_by_number = {}
        if self.collect.code_reviews:
            for pr in raw:
                reviews_by_number[pr["number"]] = self._safely(
                    f"reviews of #{pr['number']}",
                    repo,
                    lambda: self._paginate(
                        f"/repos/{self.owner}/{repo}/pulls/{pr['number']}/reviews"
                    ),
                    [],
                )

        return DataNormalizer.normalize_pull_requests(
            raw, repo, since=self.since, reviews_by_number=reviews_by_number
        )

    def fetch_issues(self, repo: str) -> List[IssueRecord]:
        raw = self._paginate(
            f"/repos/{self.owner}/{repo}/issues",
            {"state": "all", "since": self.since.isoformat()},
        )
        return DataNormalizer.normalize_issues(raw, repo)

    def fetch_releases(self, repo: str) -> List[ReleaseRecord]:
        raw = self._get_json(f"/repos/{self.owner}/{repo}/releases", {"per_page": 50})
        return DataNormalizer.normalize_releases(raw, repo)

    def fetch_languages(self, repo: str) -> Dict[str, int]:
        return self._get_json(f"/repos/{self.owner}/{repo}/languages")

    def fetch_all(self, now: Optional[datetime] = None) -> RecordSet:
        """Fetch every tracked repository, save the snapshot and return it."""
        repositories: List[RepositoryInfo] = []
        commits: List[CommitRecord] = []
        prs: List[PullRequestRecord] = []
        issues: List[IssueRecord] = []
        releases: List[ReleaseRecord] = []

        for raw_repo in self.fetch_repositories():
            name = raw_repo["name"]
            logger.info("Processing %s", name)

            if self.collect.commits:
                commits += self._safely("commits", name, lambda: self.fetch_commits(name), [])
            if self.collect.pull_requests:
                prs += self._safely("pull requests", name, lambda: self.fetch_pull_requests(name), [])
            if self.collect.issues:
                issues += self._safely("issues", name, lambda: self.fetch_issues(name), [])
            if self.collect.releases:
                releases += self._safely("releases", name, lambda: self.fetch_releases(name), [])

            languages = self._safely("languages", name, lambda: self.fetch_languages(name), {})
            repositories.append(DataNormalizer.normalize_repository(raw_repo, languages))

        records = RecordSet(
            owner=self.owner,
            fetched_at=now or now_utc(),
            repositories=repositories,
            commits=commits,
            pull_requests=prs,
            issues=issues,
            releases=releases,
        )

        os.makedirs(self.output_dir, exist_ok=True)
        records.save(os.path.join(self.output_dir, "records.json"))
        return records
