"""TTL-bounded result cache and a caching decorator for repository clients."""

from __future__ import annotations

import logging
import time
from collections.abc import Awaitable, Callable, Sequence
from dataclasses import dataclass
from typing import Any, TypeVar

from fair_maturity.evaluator import RateLimitStatus
from fair_maturity.repository.client import (
    Contributor,
    Outcome,
    PullRequest,
    Release,
    RepositoryClient,
    RepositoryMetadata,
    Review,
    Workflow,
)
from fair_maturity.repository.identifier import RepositoryRef

logger = logging.getLogger(__name__)

T = TypeVar("T")

DEFAULT_TTL_SECONDS = 300.0


@dataclass(frozen=True)
class CacheEntry:
    key: str
    value: Any
    timestamp: float


class ResultCache:
    """Key/value memo whose entries expire after ``ttl_seconds``.

    Entries are inserted, never updated in place. Must be cleared at the start
    of every evaluation so results never leak across repositories or runs.
    """

    def __init__(
        self,
        ttl_seconds: float = DEFAULT_TTL_SECONDS,
        clock: Callable[[], float] = time.monotonic,
    ) -> None:
        self.ttl_seconds = ttl_seconds
        self._clock = clock
        self._entries: dict[str, CacheEntry] = {}

    def get(self, key: str) -> Any | None:
        entry = self._entries.get(key)
        if entry is None:
            return None
        if self._clock() - entry.timestamp >= self.ttl_seconds:
            self._entries.pop(key, None)
            return None
        return entry.value

    def set(self, key: str, value: Any) -> None:
        self._entries[key] = CacheEntry(key=key, value=value, timestamp=self._clock())

    def clear(self) -> None:
        self._entries.clear()

    def __len__(self) -> int:
        return len(self._entries)


class CachedRepositoryClient(RepositoryClient):
    """Memoize successful outcomes of another client in a ``ResultCache``.

    Failures are not cached, so a transient error is retried by the next
    check that asks for the same resource.
    """

    def __init__(self, inner: RepositoryClient, cache: ResultCache) -> None:
        self.inner = inner
        self.cache = cache
        self.host = inner.host

    def supports(self, host: str) -> bool:
        return self.inner.supports(host)

    async def _cached(
        self,
        key: str,
        loader: Callable[[], Awaitable[Outcome[T]]],
    ) -> Outcome[T]:
        hit = self.cache.get(key)
        if hit is not None:
            logger.debug("Cache hit: %s", key)
            return hit
        outcome = await loader()
        if outcome.ok:
            self.cache.set(key, outcome)
        return outcome

    async def path_exists(self, repo: RepositoryRef, path: str) -> Outcome[bool]:
        return await self._cached(
            f"{repo.slug}:path_exists:{path}", lambda: self.inner.path_exists(repo, path)
        )

    async def get_text_file(self, repo: RepositoryRef, path: str) -> Outcome[str]:
        return await self._cached(
            f"{repo.slug}:get_text_file:{path}", lambda: self.inner.get_text_file(repo, path)
        )

    async def get_readme(self, repo: RepositoryRef) -> Outcome[str]:
        return await self._cached(f"{repo.slug}:get_readme", lambda: self.inner.get_readme(repo))

    async def get_metadata(self, repo: RepositoryRef) -> Outcome[RepositoryMetadata]:
        return await self._cached(
            f"{repo.slug}:get_metadata", lambda: self.inner.get_metadata(repo)
        )

    async def list_languages(self, repo: RepositoryRef) -> Outcome[dict[str, int]]:
        return await self._cached(
            f"{repo.slug}:list_languages", lambda: self.inner.list_languages(repo)
        )

    async def list_contributors(self, repo: RepositoryRef) -> Outcome[list[Contributor]]:
        return await self._cached(
            f"{repo.slug}:list_contributors", lambda: self.inner.list_contributors(repo)
        )

    async def list_pull_requests(
        self, repo: RepositoryRef, state: str = "all"
    ) -> Outcome[list[PullRequest]]:
        return await self._cached(
            f"{repo.slug}:list_pull_requests:{state}",
            lambda: self.inner.list_pull_requests(repo, state),
        )

    async def list_pull_request_reviews(
        self, repo: RepositoryRef, number: int
    ) -> Outcome[list[Review]]:
        return await self._cached(
            f"{repo.slug}:list_pull_request_reviews:{number}",
            lambda: self.inner.list_pull_request_reviews(repo, number),
        )

    async def list_releases(self, repo: RepositoryRef) -> Outcome[list[Release]]:
        return await self._cached(
            f"{repo.slug}:list_releases", lambda: self.inner.list_releases(repo)
        )

    async def list_workflows(self, repo: RepositoryRef) -> Outcome[list[Workflow]]:
        return await self._cached(
            f"{repo.slug}:list_workflows", lambda: self.inner.list_workflows(repo)
        )

    async def search_code(
        self, repo: RepositoryRef, patterns: Sequence[str]
    ) -> Outcome[str | None]:
        return await self._cached(
            f"{repo.slug}:search_code:{'|'.join(patterns)}",
            lambda: self.inner.search_code(repo, patterns),
        )

    async def rate_limit_status(self) -> Outcome[RateLimitStatus]:
        # Quota changes with every request; never memoized.
        return await self.inner.rate_limit_status()

    async def aclose(self) -> None:
        await self.inner.aclose()
