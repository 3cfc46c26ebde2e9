"""Feedback node — groups unmet criteria into prioritized remediation items."""

from __future__ import annotations

import logging
from collections.abc import Iterable, Mapping

from langchain_core.messages import AIMessage
from langchain_core.runnables import RunnableConfig

from fair_maturity.evaluator import (
    LEVEL_ORDER,
    CheckResult,
    FeedbackItem,
    Level,
    MissingCriterion,
    Priority,
)
from fair_maturity.evaluator.criteria import Criterion
from fair_maturity.pipeline.state import EvaluationState

logger = logging.getLogger(__name__)

CONGRATULATION_LEVELS = (Level.ADVANCED, Level.EXPERT)


def is_blocker(level: Level, current_level: Level) -> bool:
    """A criterion blocks progress when it sits at most one tier above the current level."""
    return level.rank <= current_level.rank + 1


def _next_level(current_level: Level) -> Level | None:
    rank = current_level.rank + 1
    return LEVEL_ORDER[rank] if rank < len(LEVEL_ORDER) else None


def _category_message(category: str, missing: list[MissingCriterion], current_level: Level) -> str:
    blockers = sum(1 for m in missing if m.is_blocker)
    if not blockers:
        return f"{category}: {len(missing)} criterion(s) from higher tiers to address later."
    target = _next_level(current_level)
    goal = f"to reach {target.value}" if target else f"to consolidate {current_level.value}"
    return f"{category}: address {blockers} criterion(s) {goal}."


def build_feedback(
    criteria: Iterable[Criterion],
    results: Mapping[int, CheckResult],
    current_level: Level,
) -> list[FeedbackItem]:
    """Group unmet criteria by category and rank the categories.

    Categories with more blockers come first (ties broken by name). Inside a
    category, blockers come first, then lower tiers, then lower ids.
    Categories with nothing unmet are omitted.
    """
    grouped: dict[str, list[tuple[Criterion, bool]]] = {}
    for criterion in criteria:
        result = results.get(criterion.id)
        if result is not None and result.met:
            continue
        grouped.setdefault(criterion.category, []).append(
            (criterion, is_blocker(criterion.level, current_level))
        )

    items: list[FeedbackItem] = []
    for category, entries in grouped.items():
        entries.sort(key=lambda e: (not e[1], e[0].level.rank, e[0].id))
        missing = [
            MissingCriterion(
                criterion_id=criterion.id,
                title=criterion.title,
                level=criterion.level,
                is_blocker=blocker,
            )
            for criterion, blocker in entries
        ]
        has_blockers = any(m.is_blocker for m in missing)
        items.append(
            FeedbackItem(
                category=category,
                priority=Priority.HIGH if has_blockers else Priority.LOW,
                message=_category_message(category, missing, current_level),
                missing_criteria=missing,
            )
        )

    items.sort(key=lambda item: (-item.blocker_count, item.category))

    if current_level in CONGRATULATION_LEVELS:
        items.insert(
            0,
            FeedbackItem(
                category="Overall",
                priority=Priority.INFO,
                message=f"Congratulations! The project reaches the {current_level.value} maturity level.",
            ),
        )
    return items


async def generate_feedback(state: EvaluationState, config: RunnableConfig) -> dict:
    """Build remediation feedback relative to the capped level.

    Args:
        state: Current state containing criteria, results and capped_level.
        config: Runnable config (unused by this stage).

    Returns:
        State update dict with feedback and a summary message.
    """
    current = state.get("capped_level") or Level.NOVICE
    feedback = build_feedback(state.get("criteria", []), state.get("results") or {}, current)

    high = sum(1 for item in feedback if item.priority == Priority.HIGH)
    logger.debug("Generated %d feedback item(s), %d high priority", len(feedback), high)

    return {
        "feedback": feedback,
        "current_step": "feedback_complete",
        "messages": [AIMessage(content=f"Feedback: {len(feedback)} item(s), {high} high priority")],
    }
