"""GitHub REST v3 binding of the repository client contract."""

from __future__ import annotations

import logging
from collections.abc import Callable, Sequence
from datetime import UTC, datetime
from typing import Any, TypeVar

import httpx

from fair_maturity.config import Settings
from fair_maturity.evaluator import RateLimitStatus
from fair_maturity.evaluator.exceptions import format_quota_error, is_rate_limit_error
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
from fair_maturity.repository.identifier import DEFAULT_HOST, RepositoryRef

logger = logging.getLogger(__name__)

T = TypeVar("T")

GITHUB_API_URL = "https://api.github.com"
_JSON_ACCEPT = "application/vnd.github+json"
_RAW_ACCEPT = "application/vnd.github.raw+json"
_API_VERSION = "2022-11-28"


def _error_message(response: httpx.Response) -> str:
    """Extract GitHub's ``message`` field, falling back to the raw body."""
    try:
        body = response.json()
    except ValueError:
        return response.text[:200]
    if isinstance(body, dict) and body.get("message"):
        return str(body["message"])
    return response.text[:200]


def _reset_time(headers: httpx.Headers) -> str | None:
    raw = headers.get("x-ratelimit-reset")
    if not raw or not raw.isdigit():
        return None
    return datetime.fromtimestamp(int(raw), UTC).strftime("%H:%M:%S UTC")


class GitHubClient(RepositoryClient):
    """Talk to the GitHub REST API through a shared ``httpx.AsyncClient``.

    Works unauthenticated (low quota) or with a token; the evaluation core
    only ever sees quota through ``rate_limit_status()``.

    Attributes:
        host: Repository host this API serves (``github.com`` or an Enterprise host).
        api_url: Base URL of the REST API.
        authenticated: Whether requests carry a token.
    """

    def __init__(
        self,
        token: str | None = None,
        *,
        host: str = DEFAULT_HOST,
        api_url: str = GITHUB_API_URL,
        timeout: float = 30.0,
        transport: httpx.AsyncBaseTransport | None = None,
    ) -> None:
        self.host = host.lower()
        self.api_url = api_url.rstrip("/")
        self.authenticated = bool(token)
        headers = {"Accept": _JSON_ACCEPT, "X-GitHub-Api-Version": _API_VERSION}
        if token:
            headers["Authorization"] = f"Bearer {token}"
        self._http = httpx.AsyncClient(
            base_url=self.api_url,
            headers=headers,
            timeout=timeout,
            follow_redirects=True,
            transport=transport,
        )

    @classmethod
    def from_settings(cls, settings: Settings) -> GitHubClient:
        return cls(
            token=settings.github_token,
            host=settings.github_host,
            api_url=settings.github_api_url,
            timeout=settings.github_request_timeout,
        )

    async def aclose(self) -> None:
        await self._http.aclose()

    # ── Transport helpers ────────────────────────────

    async def _get(
        self,
        path: str,
        *,
        params: dict[str, Any] | None = None,
        accept: str | None = None,
        resource: str = "core",
    ) -> Outcome[httpx.Response]:
        headers = {"Accept": accept} if accept else None
        try:
            response = await self._http.get(path, params=params, headers=headers)
        except httpx.HTTPError as exc:
            logger.warning("GitHub request failed: GET %s: %s", path, exc)
            return Outcome.failure(f"Network error contacting GitHub: {type(exc).__name__}: {exc}")

        if response.status_code >= 400:
            message = _error_message(response)
            if is_rate_limit_error(response.status_code, response.headers, message):
                logger.warning("GitHub %s quota exhausted on GET %s", resource, path)
                return Outcome.failure(
                    format_quota_error(resource, _reset_time(response.headers)),
                    status_code=response.status_code,
                    quota_exhausted=True,
                )
            if response.status_code != 404:
                logger.warning("GitHub returned %d for GET %s: %s", response.status_code, path, message)
            return Outcome.failure(
                f"GitHub API returned {response.status_code}: {message}",
                status_code=response.status_code,
            )
        return Outcome.success(response)

    async def _get_json(
        self,
        path: str,
        parse: Callable[[Any], T],
        *,
        params: dict[str, Any] | None = None,
        resource: str = "core",
    ) -> Outcome[T]:
        outcome = await self._get(path, params=params, resource=resource)
        if not outcome.ok:
            return outcome.as_failure()
        response = outcome.value
        if response.status_code == 204:
            return Outcome.success(parse(None))
        try:
            return Outcome.success(parse(response.json()))
        except (ValueError, KeyError, TypeError, AttributeError) as exc:
            logger.warning("Malformed GitHub response for %s: %s", path, exc)
            return Outcome.failure(f"Malformed response from GitHub for {path}: {exc}")

    @staticmethod
    def _repo_path(repo: RepositoryRef, suffix: str = "") -> str:
        return f"/repos/{repo.owner}/{repo.name}{suffix}"

    # ── Contract ─────────────────────────────────────

    async def path_exists(self, repo: RepositoryRef, path: str) -> Outcome[bool]:
        outcome = await self._get(self._repo_path(repo, f"/contents/{path.lstrip('/')}"))
        if outcome.ok:
            return Outcome.success(True)
        if outcome.not_found:
            return Outcome.success(False)
        return outcome.as_failure()

    async def get_text_file(self, repo: RepositoryRef, path: str) -> Outcome[str]:
        outcome = await self._get(
            self._repo_path(repo, f"/contents/{path.lstrip('/')}"), accept=_RAW_ACCEPT
        )
        if not outcome.ok:
            return outcome.as_failure()
        return Outcome.success(outcome.value.text)

    async def get_readme(self, repo: RepositoryRef) -> Outcome[str]:
        outcome = await self._get(self._repo_path(repo, "/readme"), accept=_RAW_ACCEPT)
        if not outcome.ok:
            return outcome.as_failure()
        return Outcome.success(outcome.value.text)

    async def get_metadata(self, repo: RepositoryRef) -> Outcome[RepositoryMetadata]:
        def parse(data: dict) -> RepositoryMetadata:
            license_info = data.get("license") or {}
            return RepositoryMetadata(
                full_name=data["full_name"],
                html_url=data.get("html_url") or "",
                description=data.get("description"),
                license=license_info.get("spdx_id") or license_info.get("name"),
                topics=data.get("topics") or [],
                has_issues=bool(data.get("has_issues")),
                default_branch=data.get("default_branch"),
                archived=bool(data.get("archived")),
            )

        return await self._get_json(self._repo_path(repo), parse)

    async def list_languages(self, repo: RepositoryRef) -> Outcome[dict[str, int]]:
        def parse(data: dict) -> dict[str, int]:
            ordered = sorted(data.items(), key=lambda item: item[1], reverse=True)
            return {name: int(size) for name, size in ordered}

        return await self._get_json(self._repo_path(repo, "/languages"), parse)

    async def list_contributors(self, repo: RepositoryRef) -> Outcome[list[Contributor]]:
        def parse(data: list | None) -> list[Contributor]:
            # 204 No Content for repositories without commits
            return [
                Contributor(
                    login=item.get("login"),
                    type=item.get("type") or "User",
                    contributions=item.get("contributions") or 0,
                )
                for item in data or []
            ]

        return await self._get_json(
            self._repo_path(repo, "/contributors"),
            parse,
            params={"per_page": 100, "anon": "true"},
        )

    async def list_pull_requests(
        self, repo: RepositoryRef, state: str = "all"
    ) -> Outcome[list[PullRequest]]:
        def parse(data: list) -> list[PullRequest]:
            return [
                PullRequest(
                    number=item["number"],
                    title=item.get("title") or "",
                    state=item.get("state") or "open",
                    author=(item.get("user") or {}).get("login"),
                )
                for item in data
            ]

        return await self._get_json(
            self._repo_path(repo, "/pulls"), parse, params={"state": state, "per_page": 30}
        )

    async def list_pull_request_reviews(
        self, repo: RepositoryRef, number: int
    ) -> Outcome[list[Review]]:
        def parse(data: list) -> list[Review]:
            return [
                Review(reviewer=(item.get("user") or {}).get("login"), state=item.get("state") or "")
                for item in data
            ]

        return await self._get_json(
            self._repo_path(repo, f"/pulls/{number}/reviews"), parse, params={"per_page": 10}
        )

    async def list_releases(self, repo: RepositoryRef) -> Outcome[list[Release]]:
        def parse(data: list) -> list[Release]:
            return [
                Release(
                    tag_name=item["tag_name"],
                    name=item.get("name"),
                    body=item.get("body"),
                    draft=bool(item.get("draft")),
                    prerelease=bool(item.get("prerelease")),
                )
                for item in data
            ]

        return await self._get_json(
            self._repo_path(repo, "/releases"), parse, params={"per_page": 30}
        )

    async def list_workflows(self, repo: RepositoryRef) -> Outcome[list[Workflow]]:
        def parse(data: dict) -> list[Workflow]:
            return [
                Workflow(name=item["name"], path=item.get("path") or "", state=item.get("state") or "active")
                for item in data.get("workflows", [])
            ]

        return await self._get_json(self._repo_path(repo, "/actions/workflows"), parse)

    async def search_code(
        self, repo: RepositoryRef, patterns: Sequence[str]
    ) -> Outcome[str | None]:
        for pattern in patterns:
            outcome = await self._get_json(
                "/search/code",
                lambda data: int(data.get("total_count", 0)),
                params={"q": f'"{pattern}" repo:{repo.slug}', "per_page": 1},
                resource="search",
            )
            if not outcome.ok:
                return outcome.as_failure()
            if outcome.value:
                return Outcome.success(pattern)
        return Outcome.success(None)

    async def rate_limit_status(self) -> Outcome[RateLimitStatus]:
        def parse(data: dict) -> RateLimitStatus:
            resources = data.get("resources", {})
            core = resources.get("core", {})
            search = resources.get("search", {})
            reset = search.get("reset")
            return RateLimitStatus(
                core_limit=core.get("limit", 0),
                core_remaining=core.get("remaining", 0),
                search_limit=search.get("limit", 0),
                search_remaining=search.get("remaining", 0),
                search_reset_at=datetime.fromtimestamp(reset, UTC) if reset else None,
            )

        return await self._get_json("/rate_limit", parse)
