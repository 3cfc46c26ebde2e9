"""Scorer node — merges results, computes the weighted score and the levels."""

from __future__ import annotations

import logging
from collections.abc import Iterable, Mapping

from langchain_core.messages import AIMessage
from langchain_core.runnables import RunnableConfig

from fair_maturity.config.eval_config import EvalConfig, load_eval_config
from fair_maturity.evaluator import LEVEL_ORDER, CheckResult, Level, LevelScore, Status, min_level
from fair_maturity.evaluator.criteria import Criterion, get_default_catalog
from fair_maturity.pipeline.state import EvaluationState, get_runtime

logger = logging.getLogger(__name__)

NOT_EVALUATED_ERROR = "criterion was not evaluated"


def merge_results(
    criteria: Iterable[Criterion],
    *sources: Mapping[int, CheckResult],
) -> dict[int, CheckResult]:
    """One result per criterion in catalog order; a criterion no stage answered is unmet."""
    merged: dict[int, CheckResult] = {}
    for criterion in criteria:
        for source in sources:
            if criterion.id in source:
                merged[criterion.id] = source[criterion.id]
                break
        else:
            merged[criterion.id] = CheckResult(
                criterion_id=criterion.id, status=Status.UNMET, error=NOT_EVALUATED_ERROR
            )
    return merged


def compute_score(
    criteria: Iterable[Criterion],
    results: Mapping[int, CheckResult],
    config: EvalConfig,
) -> tuple[float, float, float]:
    """Return ``(total_weight, earned_weight, global_score)``.

    The score is ``earned / total``, or 0.0 when nothing is in scope.
    """
    total = 0.0
    earned = 0.0
    for criterion in criteria:
        weight = config.weight_for(criterion.level)
        total += weight
        result = results.get(criterion.id)
        if result is not None and result.met:
            earned += weight
    score = earned / total if total > 0 else 0.0
    return total, earned, min(max(score, 0.0), 1.0)


def compute_level_scores(
    criteria: Iterable[Criterion],
    results: Mapping[int, CheckResult],
    config: EvalConfig,
) -> dict[Level, LevelScore]:
    """Per-tier breakdown of the weighted score, lowest tier first.

    Only tiers with criteria in scope appear. ``unmet`` lists criterion ids
    in catalog order.
    """
    totals: dict[Level, float] = {}
    earned: dict[Level, float] = {}
    unmet: dict[Level, list[int]] = {}
    for criterion in criteria:
        level = criterion.level
        weight = config.weight_for(level)
        totals[level] = totals.get(level, 0.0) + weight
        earned.setdefault(level, 0.0)
        unmet.setdefault(level, [])
        result = results.get(criterion.id)
        if result is not None and result.met:
            earned[level] += weight
        else:
            unmet[level].append(criterion.id)

    scores: dict[Level, LevelScore] = {}
    for level in LEVEL_ORDER:
        if level not in totals:
            continue
        total = totals[level]
        scores[level] = LevelScore(
            total_weight=total,
            earned_weight=earned[level],
            ratio=min(earned[level] / total, 1.0) if total > 0 else 0.0,
            unmet=tuple(unmet[level]),
        )
    return scores


def compute_achieved_level(
    catalog: Iterable[Criterion],
    results: Mapping[int, CheckResult],
) -> Level | None:
    """Highest tier whose criteria, and those of every tier below, are all met.

    Walks the full catalog upward. Tiers without criteria are skipped; the
    first tier with an unmet or unevaluated criterion ends the walk.
    """
    by_level: dict[Level, list[Criterion]] = {}
    for criterion in catalog:
        by_level.setdefault(criterion.level, []).append(criterion)

    achieved: Level | None = None
    for level in LEVEL_ORDER:
        tier = by_level.get(level)
        if not tier:
            continue
        if not all(results.get(c.id) is not None and results[c.id].met for c in tier):
            break
        achieved = level
    return achieved


def compute_capped_level(raw_level: Level, target_level: Level | None) -> Level:
    return min_level(raw_level, target_level) if target_level is not None else raw_level


async def score_results(state: EvaluationState, config: RunnableConfig) -> dict:
    """Compute the global score and the raw, achieved and capped levels.

    Args:
        state: Current state containing criteria, manual_results and automatic_results.
        config: Runnable config; ``catalog`` and ``eval_config`` are read from
            ``configurable`` with built-in defaults.

    Returns:
        State update dict with results, weights, score, per-tier scores,
        levels and messages.
    """
    runtime = get_runtime(config)
    eval_config: EvalConfig = runtime.get("eval_config") or load_eval_config()
    catalog = runtime.get("catalog")
    if catalog is None:
        catalog = get_default_catalog()
    criteria = state.get("criteria", [])
    target = state.get("target_level")

    results = merge_results(
        criteria,
        state.get("manual_results") or {},
        state.get("automatic_results") or {},
    )
    total, earned, score = compute_score(criteria, results, eval_config)
    level_scores = compute_level_scores(criteria, results, eval_config)
    raw_level = eval_config.classify(score)
    achieved = compute_achieved_level(catalog, results)
    capped = compute_capped_level(raw_level, target)

    logger.info(
        "Scored %d criteria: %.3f (raw=%s, achieved=%s, capped=%s)",
        len(results),
        score,
        raw_level.value,
        achieved.value if achieved else None,
        capped.value,
    )

    summary = f"Score: {score:.0%} ({earned:g}/{total:g}) -> **{capped.value}**"
    if achieved is None:
        summary += ", no tier fully met"
    else:
        summary += f", all criteria met up to {achieved.value}"

    return {
        "results": results,
        "total_weight": total,
        "earned_weight": earned,
        "global_score": score,
        "level_scores": level_scores,
        "raw_level": raw_level,
        "achieved_level": achieved,
        "capped_level": capped,
        "current_step": "scoring_complete",
        "messages": [AIMessage(content=summary)],
    }
