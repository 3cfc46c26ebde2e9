"""LangGraph state schema for the compliance evaluation pipeline."""

from __future__ import annotations

from collections.abc import Callable, Mapping
from typing import Annotated, Any

from langchain_core.messages import BaseMessage
from langchain_core.runnables import RunnableConfig
from langgraph.graph.message import add_messages
from typing_extensions import TypedDict

from fair_maturity.evaluator import (
    CheckResult,
    EvaluationReport,
    FeedbackItem,
    Level,
    LevelScore,
    RateLimitStatus,
)
from fair_maturity.evaluator.criteria import Criterion
from fair_maturity.repository.identifier import RepositoryRef

ProgressCallback = Callable[[int, int, str], None]


class EvaluationState(TypedDict, total=False):
    """State passed between LangGraph nodes.

    The `messages` field collects one summary message per stage via
    LangGraph's message reducer.
    """

    # Stage summaries (auto-appended via reducer)
    messages: Annotated[list[BaseMessage], add_messages]

    # Input
    repo: RepositoryRef
    target_level: Level | None
    criteria: list[Criterion]  # in scope, catalog order
    manual_inputs: Mapping[Any, Any]
    started_at: float  # time.monotonic() at run start

    # Populated by process_manual_answers
    manual_results: dict[int, CheckResult]

    # Populated by run_automated_checks
    automatic_results: dict[int, CheckResult]
    rate_limit: RateLimitStatus | None

    # Populated by score_results
    results: dict[int, CheckResult]
    total_weight: float
    earned_weight: float
    global_score: float
    level_scores: dict[Level, LevelScore]
    raw_level: Level
    achieved_level: Level | None
    capped_level: Level

    # Populated by generate_feedback
    feedback: list[FeedbackItem]

    # Populated by build_report
    report: EvaluationReport

    # Control flow
    current_step: str | None


def get_runtime(config: RunnableConfig | None) -> dict[str, Any]:
    """Return the runtime collaborators passed under ``config["configurable"]``.

    Keys used by the nodes: ``client``, ``registry``, ``catalog``,
    ``eval_config``, ``settings`` and ``progress``.
    """
    if not config:
        return {}
    return dict(config.get("configurable") or {})
