"""High-level evaluation service — validates input, runs the graph and returns the report.

Provides a ``ComplianceEvaluationService`` that owns the result cache and the
repository client for its lifetime, clears the cache at the start of every
run, and streams the LangGraph pipeline to an ``EvaluationReport``.
"""

from __future__ import annotations

import logging
import time
from collections.abc import Mapping
from pathlib import Path
from typing import Any

from fair_maturity.checks import get_default_registry
from fair_maturity.checks.registry import CheckRegistry
from fair_maturity.config import Settings, get_settings
from fair_maturity.config.eval_config import EvalConfig, load_eval_config
from fair_maturity.evaluator import EvaluationReport, Level
from fair_maturity.evaluator.criteria import CriteriaCatalog, get_default_catalog
from fair_maturity.evaluator.exceptions import EvaluatorError, InputError
from fair_maturity.evaluator.snapshot import EvaluationSnapshot
from fair_maturity.pipeline.graph import get_graph
from fair_maturity.pipeline.state import ProgressCallback
from fair_maturity.repository.cache import CachedRepositoryClient, ResultCache
from fair_maturity.repository.client import RepositoryClient
from fair_maturity.repository.identifier import parse_repository

logger = logging.getLogger(__name__)


def parse_target_level(value: Level | str | None) -> Level | None:
    """Resolve an optional target level.

    Raises:
        InputError: If the value names no tier.
    """
    if value is None or value == "":
        return None
    try:
        return Level.parse(value)
    except ValueError as exc:
        raise InputError(str(exc), context={"target_level": value}) from exc


class ComplianceEvaluationService:
    """Orchestrates repository evaluation via the LangGraph pipeline.

    Attributes:
        client: Underlying repository client (not the caching wrapper).
        cache: Result cache shared by every run of this service; cleared per run.
        catalog: Full criteria catalog.
        registry: Check bindings, validated against the catalog at construction.
        eval_config: Scoring weights and thresholds.
        settings: Application settings.
    """

    def __init__(
        self,
        client: RepositoryClient,
        *,
        cache: ResultCache | None = None,
        catalog: CriteriaCatalog | None = None,
        registry: CheckRegistry | None = None,
        eval_config: EvalConfig | None = None,
        settings: Settings | None = None,
    ) -> None:
        self.settings = settings or get_settings()
        self.client = client
        self.cache = cache if cache is not None else ResultCache(ttl_seconds=self.settings.cache_ttl_seconds)
        self.catalog = catalog if catalog is not None else get_default_catalog()
        self.registry = registry if registry is not None else get_default_registry()
        self.registry.validate(self.catalog)
        if eval_config is None:
            path = self.settings.eval_config_path
            eval_config = load_eval_config(Path(path) if path else None)
        self.eval_config = eval_config

    async def evaluate(
        self,
        repository: str,
        target_level: Level | str | None = None,
        manual_answers: Mapping[Any, Any] | None = None,
        progress: ProgressCallback | None = None,
    ) -> EvaluationReport:
        """Evaluate a repository and return its report.

        Input is validated before any network access. Every other failure
        (unreachable repository, exhausted quota, failing check) degrades to
        per-criterion results instead of aborting.

        Args:
            repository: Identifier such as ``owner/name`` or a repository URL.
            target_level: Highest tier to evaluate against; None for all tiers.
            manual_answers: Answers for manual criteria keyed by criterion id.
            progress: Called as ``progress(completed, total, title)`` during the
                automated check stage.

        Returns:
            The immutable ``EvaluationReport``.

        Raises:
            InputError: If the identifier or target level is malformed, or the
                repository lives on a host the client does not serve.
            EvaluatorError: If the pipeline failed unexpectedly.
        """
        repo = parse_repository(repository)
        if not self.client.supports(repo.host):
            raise InputError(
                f"Repository host {repo.host!r} is not served by the configured client "
                f"(expected {self.client.host!r})",
                context={"repository": repository, "host": repo.host},
            )
        target = parse_target_level(target_level)
        criteria = self.catalog.filter(target)

        self.cache.clear()
        client = CachedRepositoryClient(self.client, self.cache)

        initial_state: dict[str, Any] = {
            "messages": [],
            "repo": repo,
            "target_level": target,
            "criteria": criteria,
            "manual_inputs": dict(manual_answers or {}),
            "started_at": time.monotonic(),
        }
        config = {
            "configurable": {
                "client": client,
                "registry": self.registry,
                "catalog": self.catalog,
                "eval_config": self.eval_config,
                "settings": self.settings,
                "progress": progress,
            }
        }

        logger.info(
            "Evaluating %s against %s (%d criteria)",
            repo,
            target.value if target else "all levels",
            len(criteria),
        )

        try:
            final_state: dict[str, Any] = {}
            async for event in get_graph().astream(  # type: ignore[attr-defined]
                initial_state, config=config, stream_mode="updates"
            ):
                for _node_name, state_update in event.items():
                    if isinstance(state_update, dict):
                        final_state.update(state_update)
        except EvaluatorError:
            logger.exception("Evaluation of %s failed with domain error", repo)
            raise
        except Exception as exc:
            logger.exception("Unexpected evaluation error for %s", repo)
            raise EvaluatorError(
                f"Unexpected error: {type(exc).__name__}: {exc}", context={"repository": str(repo)}
            ) from exc

        report: EvaluationReport | None = final_state.get("report")
        if report is None:
            raise EvaluatorError("Evaluation produced no report.", context={"repository": str(repo)})
        return report

    async def reevaluate(
        self,
        snapshot: EvaluationSnapshot,
        progress: ProgressCallback | None = None,
    ) -> EvaluationReport:
        """Re-run a stored evaluation with its manual answers re-injected."""
        return await self.evaluate(
            snapshot.repository,
            target_level=snapshot.target_level,
            manual_answers=snapshot.manual_answers,
            progress=progress,
        )

    async def aclose(self) -> None:
        await self.client.aclose()
