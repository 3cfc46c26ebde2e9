"""Check runner node — executes automated checks concurrently against the repository.

All checks in scope are dispatched at once inside an ``asyncio.TaskGroup``.
Each task captures its own exceptions so that one failing check never
cancels its siblings; the stage always yields one result per criterion.
"""

from __future__ import annotations

import asyncio
import logging
from collections.abc import Sequence

from langchain_core.messages import AIMessage
from langchain_core.runnables import RunnableConfig

from fair_maturity.checks.base import CheckContext, CheckFunction, CheckOutcome
from fair_maturity.checks.registry import CheckRegistry
from fair_maturity.evaluator import CheckResult, RateLimitStatus, Status
from fair_maturity.evaluator.criteria import Criterion
from fair_maturity.evaluator.exceptions import QuotaExceededError, UnreachableTargetError
from fair_maturity.pipeline.state import EvaluationState, ProgressCallback, get_runtime
from fair_maturity.repository.client import RepositoryClient
from fair_maturity.repository.identifier import RepositoryRef

logger = logging.getLogger(__name__)

UNREACHABLE_ERROR = "repository not found or inaccessible"
NOT_IMPLEMENTED_ERROR = "test function not implemented"


async def _ensure_reachable(client: RepositoryClient, repo: RepositoryRef) -> None:
    outcome = await client.get_metadata(repo)
    if not outcome.ok:
        raise UnreachableTargetError(
            UNREACHABLE_ERROR,
            context={"repo": str(repo), "status_code": outcome.status_code, "detail": outcome.error},
        )


async def _read_rate_limit(client: RepositoryClient) -> RateLimitStatus | None:
    outcome = await client.rate_limit_status()
    if not outcome.ok:
        logger.info("Rate limit status unavailable: %s", outcome.error)
        return None
    status = outcome.value
    logger.info(
        "Rate limit: core %d/%d, search %d/%d",
        status.core_remaining,
        status.core_limit,
        status.search_remaining,
        status.search_limit,
    )
    if status.search_exhausted:
        logger.warning("Code search quota is exhausted; search-based checks will not be verified")
    return status


def _to_result(criterion_id: int, outcome: object) -> CheckResult:
    if not isinstance(outcome, CheckOutcome):
        return CheckResult(
            criterion_id=criterion_id,
            status=Status.UNMET,
            error=f"check returned {type(outcome).__name__} instead of a CheckOutcome",
        )
    return CheckResult(
        criterion_id=criterion_id,
        status=outcome.status,
        evidence=outcome.evidence,
        error=outcome.error,
    )


def _notify(progress: ProgressCallback | None, completed: int, total: int, label: str) -> None:
    if progress is None:
        return
    try:
        progress(completed, total, label)
    except Exception:
        logger.exception("Progress callback failed at %d/%d", completed, total)


async def run_checks(
    criteria: Sequence[Criterion],
    repo: RepositoryRef,
    client: RepositoryClient,
    registry: CheckRegistry,
    *,
    progress: ProgressCallback | None = None,
    community_members: Sequence[str] = (),
    pull_request_sample_size: int = 10,
) -> tuple[dict[int, CheckResult], RateLimitStatus | None]:
    """Run the automated checks for ``criteria`` and collect one result each.

    Args:
        criteria: Automatic criteria in scope; manual ones are ignored.
        repo: Repository under evaluation.
        client: Repository client, normally wrapped in the caching decorator.
        registry: Criterion id to check function bindings.
        progress: Called as ``progress(completed, total, title)`` after each check.
        community_members: Logins of the hosting community.
        pull_request_sample_size: Pull requests inspected by review checks.

    Returns:
        Results keyed by criterion id in catalog order, and the quota
        snapshot read before dispatch (None if unavailable).
    """
    automatic = [c for c in criteria if c.is_automatic]
    if not automatic:
        return {}, None

    try:
        await _ensure_reachable(client, repo)
    except UnreachableTargetError as exc:
        logger.warning("Skipping automated checks for %s: %s context=%s", repo, exc, exc.context)
        return {
            c.id: CheckResult(criterion_id=c.id, status=Status.UNMET, error=UNREACHABLE_ERROR)
            for c in automatic
        }, None

    rate_limit = await _read_rate_limit(client)

    results: dict[int, CheckResult] = {}
    dispatch: list[tuple[Criterion, CheckFunction]] = []
    for criterion in automatic:
        check = registry.get(criterion.id)
        if check is None:
            results[criterion.id] = CheckResult(
                criterion_id=criterion.id, status=Status.UNMET, error=NOT_IMPLEMENTED_ERROR
            )
        else:
            dispatch.append((criterion, check))

    ctx = CheckContext(
        client=client,
        repo=repo,
        community_members=frozenset(community_members),
        pull_request_sample_size=pull_request_sample_size,
    )
    total = len(dispatch)
    completed = 0

    async def _run_one(criterion: Criterion, check: CheckFunction) -> None:
        nonlocal completed
        try:
            result = _to_result(criterion.id, await check(ctx))
        except QuotaExceededError as exc:
            logger.warning("Check %d quota exceeded: %s", criterion.id, exc)
            result = CheckResult(criterion_id=criterion.id, status=Status.UNMET, error=str(exc))
        except Exception as exc:
            logger.exception("Check %d (%s) failed", criterion.id, getattr(check, "__name__", check))
            result = CheckResult(
                criterion_id=criterion.id,
                status=Status.UNMET,
                error=str(exc) or type(exc).__name__,
            )
        results[criterion.id] = result
        completed += 1
        _notify(progress, completed, total, criterion.title)

    async with asyncio.TaskGroup() as group:
        for criterion, check in dispatch:
            group.create_task(_run_one(criterion, check))

    return {c.id: results[c.id] for c in automatic}, rate_limit


async def run_automated_checks(state: EvaluationState, config: RunnableConfig) -> dict:
    """Execute the automated checks in scope.

    Args:
        state: Current state containing repo and criteria.
        config: Runnable config whose ``configurable`` holds client, registry,
            settings and an optional progress callback.

    Returns:
        State update dict with automatic_results, rate_limit and messages.
    """
    runtime = get_runtime(config)
    settings = runtime.get("settings")
    criteria = state.get("criteria", [])

    results, rate_limit = await run_checks(
        criteria,
        state["repo"],
        runtime["client"],
        runtime["registry"],
        progress=runtime.get("progress"),
        community_members=settings.community_members if settings else (),
        pull_request_sample_size=settings.pull_request_sample_size if settings else 10,
    )

    met_count = sum(1 for r in results.values() if r.met)
    unverified = sum(1 for r in results.values() if not r.verified)
    summary = f"Automated checks: {met_count}/{len(results)} met"
    if unverified:
        summary += f", {unverified} could not be verified"

    return {
        "automatic_results": results,
        "rate_limit": rate_limit,
        "current_step": "checks_complete",
        "messages": [AIMessage(content=summary)],
    }
