"""Shared building blocks for automated check functions.

A check is an ``async`` callable taking a ``CheckContext`` and returning a
``CheckOutcome``. Checks read the repository only through the client held by
the context; they may raise, and the runner turns any exception into an
unmet result carrying the message.
"""

from __future__ import annotations

import logging
import re
from collections.abc import Awaitable, Callable, Sequence
from dataclasses import dataclass, field

from fair_maturity.evaluator import Status
from fair_maturity.evaluator.exceptions import CheckFailure, QuotaExceededError
from fair_maturity.repository.client import RepositoryClient
from fair_maturity.repository.identifier import RepositoryRef

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class CheckOutcome:
    status: Status
    evidence: str | None = None
    error: str | None = None

    @property
    def met(self) -> bool:
        return self.status == Status.MET


def met(evidence: str) -> CheckOutcome:
    return CheckOutcome(status=Status.MET, evidence=evidence)


def unmet(evidence: str | None = None, error: str | None = None) -> CheckOutcome:
    return CheckOutcome(status=Status.UNMET, evidence=evidence, error=error)


@dataclass(frozen=True)
class CheckContext:
    """Everything a check needs to inspect one repository.

    Attributes:
        client: Repository client (normally the caching decorator).
        repo: The repository under evaluation.
        community_members: Logins treated as members of the hosting community.
        pull_request_sample_size: Recent pull requests inspected for reviews.
    """

    client: RepositoryClient
    repo: RepositoryRef
    community_members: frozenset[str] = field(default_factory=frozenset)
    pull_request_sample_size: int = 10


CheckFunction = Callable[[CheckContext], Awaitable[CheckOutcome]]


# ── Helpers ──────────────────────────────────────────


async def first_existing_path(ctx: CheckContext, paths: Sequence[str]) -> CheckOutcome:
    """Met with the first path that exists.

    A lookup that failed for a reason other than "not found" is remembered;
    if no candidate exists the result is unmet *with* that error, since the
    miss may be an artefact of the failure.
    """
    failures: list[str] = []
    for path in paths:
        outcome = await ctx.client.path_exists(ctx.repo, path)
        if not outcome.ok:
            failures.append(f"{path}: {outcome.error}")
            continue
        if outcome.value:
            return met(f"Found {path}")

    if failures:
        return unmet(error="; ".join(failures))
    return unmet(evidence=f"None of {', '.join(paths)} found")


async def fetch_readme(ctx: CheckContext) -> str | None:
    """Return README text, ``None`` when the repository has none.

    Raises:
        CheckFailure: When the README could not be read for another reason.
    """
    outcome = await ctx.client.get_readme(ctx.repo)
    if outcome.ok:
        return outcome.value
    if outcome.not_found:
        return None
    raise CheckFailure(outcome.error or "README could not be read")


def search_text(pattern: re.Pattern[str], text: str) -> str | None:
    match = pattern.search(text)
    return match.group(0) if match else None


async def search_first(ctx: CheckContext, patterns: Sequence[str]) -> str | None:
    """Run a code search and return the first pattern with a hit.

    Raises:
        QuotaExceededError: When the search quota is exhausted.
        CheckFailure: When the search failed for any other reason.
    """
    outcome = await ctx.client.search_code(ctx.repo, patterns)
    if outcome.ok:
        return outcome.value
    if outcome.quota_exhausted:
        raise QuotaExceededError(outcome.error or "search quota exhausted", context={"repo": ctx.repo.slug})
    raise CheckFailure(outcome.error or "code search failed")


def require(outcome, what: str):
    """Unwrap a successful ``Outcome`` or raise ``CheckFailure`` naming what failed."""
    if outcome.ok:
        return outcome.value
    if outcome.quota_exhausted:
        raise QuotaExceededError(outcome.error or f"quota exhausted while reading {what}")
    raise CheckFailure(f"Could not read {what}: {outcome.error}")
