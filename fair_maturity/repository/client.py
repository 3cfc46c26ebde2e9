"""Repository client contract — the seam between checks and a hosting platform.

Every operation returns an ``Outcome``: a success value, a definite negative,
or a failure carrying a diagnostic string. Implementations must never raise
into the caller; one unreachable endpoint cannot be allowed to abort a whole
evaluation.
"""

from __future__ import annotations

from abc import ABC, abstractmethod
from collections.abc import Sequence
from dataclasses import dataclass
from typing import Any, Generic, TypeVar

from pydantic import BaseModel, Field

from fair_maturity.evaluator import RateLimitStatus
from fair_maturity.repository.identifier import DEFAULT_HOST, RepositoryRef

T = TypeVar("T")


@dataclass(frozen=True)
class Outcome(Generic[T]):
    """Result envelope for a single adapter call.

    Attributes:
        ok: True when the platform answered and ``value`` holds the answer.
        value: The answer (may be a definite negative such as ``False`` or ``[]``).
        error: Diagnostic string when ``ok`` is False.
        status_code: HTTP status of the failing response, if any.
        quota_exhausted: True when the failure is a rate-limit exhaustion.
    """

    ok: bool
    value: T | None = None
    error: str | None = None
    status_code: int | None = None
    quota_exhausted: bool = False

    @classmethod
    def success(cls, value: T) -> Outcome[T]:
        return cls(ok=True, value=value)

    @classmethod
    def failure(
        cls,
        error: str,
        *,
        status_code: int | None = None,
        quota_exhausted: bool = False,
    ) -> Outcome[T]:
        return cls(ok=False, error=error, status_code=status_code, quota_exhausted=quota_exhausted)

    @property
    def not_found(self) -> bool:
        return not self.ok and self.status_code == 404

    def as_failure(self) -> Outcome[Any]:
        """Re-type a failed outcome so another operation can return it unchanged."""
        return Outcome(
            ok=False,
            error=self.error or "unknown error",
            status_code=self.status_code,
            quota_exhausted=self.quota_exhausted,
        )


class RepositoryMetadata(BaseModel):
    full_name: str
    html_url: str = ""
    description: str | None = None
    license: str | None = None  # SPDX id
    topics: list[str] = Field(default_factory=list)
    has_issues: bool = False
    default_branch: str | None = None
    archived: bool = False


class Contributor(BaseModel):
    login: str | None = None
    type: str = "User"
    contributions: int = 0

    @property
    def is_bot(self) -> bool:
        return self.type == "Bot" or bool(self.login and self.login.endswith("[bot]"))


class PullRequest(BaseModel):
    number: int
    title: str = ""
    state: str = "open"
    author: str | None = None


class Review(BaseModel):
    reviewer: str | None = None
    state: str = ""


class Release(BaseModel):
    tag_name: str
    name: str | None = None
    body: str | None = None
    draft: bool = False
    prerelease: bool = False


class Workflow(BaseModel):
    name: str
    path: str = ""
    state: str = "active"


class RepositoryClient(ABC):
    """Abstract interface to a hosting platform's repository API.

    A client serves exactly one host; callers check ``supports(repo.host)``
    before handing it a repository.
    """

    host: str = DEFAULT_HOST

    def supports(self, host: str) -> bool:
        return host.lower() == self.host.lower()

    @abstractmethod
    async def path_exists(self, repo: RepositoryRef, path: str) -> Outcome[bool]:
        """Return ``success(False)`` for a definite miss, ``failure`` when unsure."""

    @abstractmethod
    async def get_text_file(self, repo: RepositoryRef, path: str) -> Outcome[str]:
        ...

    @abstractmethod
    async def get_readme(self, repo: RepositoryRef) -> Outcome[str]:
        ...

    @abstractmethod
    async def get_metadata(self, repo: RepositoryRef) -> Outcome[RepositoryMetadata]:
        ...

    @abstractmethod
    async def list_languages(self, repo: RepositoryRef) -> Outcome[dict[str, int]]:
        """Languages mapped to bytes of code, largest first."""

    @abstractmethod
    async def list_contributors(self, repo: RepositoryRef) -> Outcome[list[Contributor]]:
        ...

    @abstractmethod
    async def list_pull_requests(
        self, repo: RepositoryRef, state: str = "all"
    ) -> Outcome[list[PullRequest]]:
        ...

    @abstractmethod
    async def list_pull_request_reviews(
        self, repo: RepositoryRef, number: int
    ) -> Outcome[list[Review]]:
        ...

    @abstractmethod
    async def list_releases(self, repo: RepositoryRef) -> Outcome[list[Release]]:
        ...

    @abstractmethod
    async def list_workflows(self, repo: RepositoryRef) -> Outcome[list[Workflow]]:
        ...

    @abstractmethod
    async def search_code(
        self, repo: RepositoryRef, patterns: Sequence[str]
    ) -> Outcome[str | None]:
        """Try each pattern in order; the value is the first pattern with a hit, or None."""

    @abstractmethod
    async def rate_limit_status(self) -> Outcome[RateLimitStatus]:
        ...

    async def aclose(self) -> None:
        """Release network resources. No-op by default."""
