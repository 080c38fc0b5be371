"""GitHub source collector.

Collects two kinds of code-host items:
- Latest releases of a curated list of AI repositories
- Recently created, fast-rising repositories for AI topics

Uses the GitHub REST API v3. A token raises the rate limit but is optional.
"""

import asyncio
from datetime import UTC, datetime, timedelta
from typing import Any

import httpx
from pydantic import ValidationError

from hotnews.config.sources import GitHubConfig
from hotnews.core.exceptions import RateLimitError
from hotnews.core.logging import get_logger
from hotnews.infrastructure.http_client import HTTPClient
from hotnews.models.item import Item, ItemKind
from hotnews.models.source import SourceType
from hotnews.services.collector.base import BaseSource, RawItem, SourceSpec
from hotnews.services.collector.normalizer import djb2_hex
from hotnews.services.collector.scorer import ImportanceScorer

logger = get_logger(__name__)

GITHUB_API = "https://api.github.com"
RELEASE_TEMPLATE = GITHUB_API + "/repos/{repo}/releases/latest"
SEARCH_REPOSITORIES = GITHUB_API + "/search/repositories"

SOURCE_KEY = "github"
RELEASE_PREFIX = "release:"
TRENDING_PREFIX = "trending:"
TRENDING_TAG_LIMIT = 3
DEFAULT_DESCRIPTION = "New trending repository"


def _parse_timestamp(value: Any) -> datetime | None:
    """Parse a GitHub ISO 8601 timestamp ("2024-01-15T10:30:00Z")."""
    if not isinstance(value, str) or not value:
        return None
    try:
        return datetime.fromisoformat(value.replace("Z", "+00:00")).astimezone(UTC)
    except ValueError:
        return None


class GitHubSource(BaseSource[GitHubConfig]):
    """GitHub releases and trending repositories collector.

    Releases are immutable once stored. Trending repositories are refreshed
    when their star count moves by more than star_delta_threshold.

    Config options:
        tracked_repos: Repositories whose latest release is collected
        topics / topics_per_run: Topics searched for trending repositories
        results_per_topic: Search results kept per topic (default: 3)
        token: Optional API token
    """

    source_type = SourceType.GITHUB
    config_class = GitHubConfig

    def __init__(
        self,
        config: GitHubConfig,
        http_client: HTTPClient,
        scorer: ImportanceScorer | None = None,
    ) -> None:
        super().__init__(config, http_client)
        self._scorer = scorer or ImportanceScorer()

    @property
    def spec(self) -> SourceSpec:
        """Source row this collector writes to."""
        return SourceSpec(
            key=SOURCE_KEY,
            name=self._config.name,
            type=SourceType.GITHUB,
            base_importance=self._config.base_importance,
            config={"poll_interval_minutes": self._config.poll_interval_minutes},
        )

    @property
    def headers(self) -> dict[str, str]:
        headers = {"Accept": "application/vnd.github.v3+json"}
        if self._config.token:
            headers["Authorization"] = f"Bearer {self._config.token}"
        return headers

    async def collect(self) -> list[RawItem]:
        """Collect releases and trending repositories.

        A rate-limit response stops the run early; items gathered so far
        are still returned.

        Returns:
            List of RawItem from GitHub
        """
        logger.info(
            "Collecting from GitHub",
            tracked_repos=len(self._config.tracked_repos),
            topics=self._config.topics[: self._config.topics_per_run],
        )

        items: list[RawItem] = []
        try:
            await self._collect_releases(items)
            await self._collect_trending(items)
        except RateLimitError as e:
            logger.warning("GitHub rate limit reached, stopping run", **e.context)

        logger.info("GitHub collection complete", collected=len(items))
        return items

    # ============================================
    # Releases
    # ============================================

    async def _collect_releases(self, items: list[RawItem]) -> None:
        """Append latest releases; items already appended survive a rate limit."""
        for repo in self._config.tracked_repos:
            release = await self._fetch_latest_release(repo)
            if release:
                item = self._release_to_raw_item(repo, release)
                if item:
                    items.append(item)

            if self._config.release_delay > 0:
                await asyncio.sleep(self._config.release_delay)

    async def _fetch_latest_release(self, repo: str) -> dict[str, Any] | None:
        """Fetch the latest release of a repository.

        Args:
            repo: "owner/name"

        Returns:
            Release payload, or None when the repository has no release
            or the call failed

        Raises:
            RateLimitError: If the API rate limit is exhausted
        """
        url = RELEASE_TEMPLATE.format(repo=repo)
        try:
            response = await self._http_client.get(url, headers=self.headers)
        except httpx.HTTPError as e:
            logger.warning("Failed to fetch GitHub release", repo=repo, error=str(e))
            return None

        if response.status_code == 404:
            logger.debug("No GitHub release", repo=repo)
            return None
        self._check_rate_limit(response, url)

        try:
            response.raise_for_status()
            data = response.json()
        except (httpx.HTTPError, ValueError) as e:
            logger.warning("Failed to fetch GitHub release", repo=repo, error=str(e))
            return None
        return data if isinstance(data, dict) else None

    def _release_to_raw_item(self, repo: str, release: dict[str, Any]) -> RawItem | None:
        """Convert a release payload to RawItem (None when malformed)."""
        tag = release.get("tag_name")
        html_url = release.get("html_url")
        published_at = _parse_timestamp(release.get("published_at"))
        if not tag or not html_url or published_at is None:
            logger.debug("Skipping malformed GitHub release", repo=repo)
            return None

        try:
            owner = repo.split("/")[0]
            return RawItem(
                source=self.spec,
                external_id=f"{RELEASE_PREFIX}{repo}:{tag}",
                kind=ItemKind.REPO,
                title=f"{repo} {release.get('name') or tag}",
                url=html_url,
                author=owner,
                body=release.get("body"),
                published_at=published_at,
                tags=["Release", owner],
                hash_key=djb2_hex(f"{repo}:{tag}"),
            )
        except (ValidationError, TypeError, AttributeError) as e:
            logger.debug("Skipping malformed GitHub release", repo=repo, error=str(e))
            return None

    # ============================================
    # Trending
    # ============================================

    async def _collect_trending(self, items: list[RawItem]) -> None:
        topics = self._config.topics[: self._config.topics_per_run]
        for index, topic in enumerate(topics):
            repos = await self._search_trending(topic)
            for repo in repos[: self._config.results_per_topic]:
                item = self._repo_to_raw_item(repo)
                if item:
                    items.append(item)

            if index + 1 < len(topics) and self._config.topic_delay > 0:
                await asyncio.sleep(self._config.topic_delay)

    def _search_query(self, topic: str, now: datetime) -> str:
        since = (now - timedelta(days=self._config.lookback_days)).date().isoformat()
        return f"topic:{topic} created:>{since} stars:>{self._config.min_stars}"

    async def _search_trending(self, topic: str) -> list[dict[str, Any]]:
        """Search recently created repositories for a topic.

        Raises:
            RateLimitError: If the API rate limit is exhausted
        """
        params = {
            "q": self._search_query(topic, datetime.now(UTC)),
            "sort": "stars",
            "order": "desc",
            "per_page": self._config.search_per_page,
        }
        try:
            response = await self._http_client.get(
                SEARCH_REPOSITORIES, params=params, headers=self.headers
            )
        except httpx.HTTPError as e:
            logger.warning("GitHub search failed", topic=topic, error=str(e))
            return []

        self._check_rate_limit(response, SEARCH_REPOSITORIES)
        try:
            response.raise_for_status()
            data = response.json()
        except (httpx.HTTPError, ValueError) as e:
            logger.warning("GitHub search failed", topic=topic, error=str(e))
            return []

        repos = data.get("items") if isinstance(data, dict) else None
        return [repo for repo in repos or [] if isinstance(repo, dict)]

    def _repo_to_raw_item(self, repo: dict[str, Any]) -> RawItem | None:
        """Convert a search result to RawItem (None when malformed)."""
        full_name = repo.get("full_name")
        html_url = repo.get("html_url")
        created_at = _parse_timestamp(repo.get("created_at"))
        if not full_name or not html_url or created_at is None:
            logger.debug("Skipping malformed GitHub repository", repo=full_name)
            return None

        try:
            topics = [t for t in repo.get("topics") or [] if isinstance(t, str) and t]
            return RawItem(
                source=self.spec,
                external_id=f"{TRENDING_PREFIX}{full_name}",
                kind=ItemKind.REPO,
                title=f"{full_name}: {repo.get('description') or DEFAULT_DESCRIPTION}",
                url=html_url,
                author=full_name.split("/")[0],
                published_at=created_at,
                score=int(repo.get("stargazers_count") or 0),
                comments_count=int(repo.get("forks_count") or 0),
                comments_url=f"{html_url}/network/members",
                tags=[t[0].upper() + t[1:] for t in topics[:TRENDING_TAG_LIMIT]],
                hash_key=djb2_hex(full_name),
            )
        except (ValidationError, TypeError, AttributeError, ValueError) as e:
            logger.debug("Skipping malformed GitHub repository", repo=full_name, error=str(e))
            return None

    def _check_rate_limit(self, response: httpx.Response, endpoint: str) -> None:
        """Raise RateLimitError for an exhausted-quota 403."""
        if response.status_code != 403:
            return
        if response.headers.get("X-RateLimit-Remaining") != "0":
            return
        reset = response.headers.get("X-RateLimit-Reset")
        retry_after = None
        if reset and reset.isdigit():
            retry_after = max(0, int(reset) - int(datetime.now(UTC).timestamp()))
        raise RateLimitError("github", retry_after=retry_after, endpoint=endpoint)

    # ============================================
    # Scoring
    # ============================================

    def score(self, raw: RawItem, base_importance: int, now: datetime) -> int:
        if raw.external_id.startswith(RELEASE_PREFIX):
            return self._scorer.score_release()
        return self._scorer.score_trending_repo(raw.score or 0)

    def refresh(self, item: Item, raw: RawItem, base_importance: int, now: datetime) -> bool:
        """Refresh a trending repository after a large enough star change."""
        if not raw.external_id.startswith(TRENDING_PREFIX):
            return False

        stars = raw.score or 0
        if abs((item.score or 0) - stars) <= self._config.star_delta_threshold:
            return False

        item.score = stars
        item.importance_score = self._scorer.score_trending_repo(stars)
        return True


__all__ = ["GitHubSource"]
