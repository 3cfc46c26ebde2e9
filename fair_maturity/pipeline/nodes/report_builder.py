"""Report builder node — assembles the immutable EvaluationReport."""

from __future__ import annotations

import logging
import time

from langchain_core.messages import AIMessage
from langchain_core.runnables import RunnableConfig

from fair_maturity.evaluator import EvaluationReport, EvaluationStats, Level
from fair_maturity.evaluator.exceptions import EvaluatorError
from fair_maturity.pipeline.state import EvaluationState

logger = logging.getLogger(__name__)


def _build_stats(state: EvaluationState) -> EvaluationStats:
    criteria = state.get("criteria", [])
    results = state.get("results") or {}
    started_at = state.get("started_at")
    automatic = sum(1 for c in criteria if c.is_automatic)
    met_count = sum(1 for r in results.values() if r.met)
    return EvaluationStats(
        total_criteria=len(criteria),
        automatic_count=automatic,
        manual_count=len(criteria) - automatic,
        met_count=met_count,
        unmet_count=len(results) - met_count,
        unverified_count=sum(1 for r in results.values() if not r.verified),
        total_weight=state.get("total_weight", 0.0),
        earned_weight=state.get("earned_weight", 0.0),
        duration_seconds=round(time.monotonic() - started_at, 3) if started_at else 0.0,
        rate_limit=state.get("rate_limit"),
    )


async def build_report(state: EvaluationState, config: RunnableConfig) -> dict:
    """Assemble the final report from the scoring and feedback stages.

    Args:
        state: Current state after feedback generation.
        config: Runnable config (unused by this stage).

    Returns:
        State update dict with report and messages.

    Raises:
        EvaluatorError: If the report fails validation.
    """
    repo = state["repo"]
    try:
        report = EvaluationReport(
            repository=str(repo),
            target_level=state.get("target_level"),
            results=state.get("results") or {},
            global_score=state.get("global_score", 0.0),
            raw_level=state.get("raw_level") or Level.NOVICE,
            achieved_level=state.get("achieved_level"),
            capped_level=state.get("capped_level") or Level.NOVICE,
            level_scores=state.get("level_scores") or {},
            feedback=tuple(state.get("feedback") or ()),
            stats=_build_stats(state),
        )
    except ValueError as exc:
        raise EvaluatorError(
            f"Report assembly failed: {exc}", context={"repository": str(repo)}
        ) from exc

    logger.info(
        "Evaluated %s: %s (%.1f%%) in %.2fs",
        report.repository,
        report.capped_level.value,
        report.global_score * 100,
        report.stats.duration_seconds,
    )

    return {
        "report": report,
        "current_step": "report_complete",
        "messages": [AIMessage(content=f"Report ready for {report.repository}")],
    }
