"""Manual answer node — turns caller-supplied answers into per-criterion results.

Answers are never trusted as-is: a ``met`` claim needs written evidence, and
anything malformed folds to ``unmet`` instead of raising.
"""

from __future__ import annotations

import logging
from collections.abc import Mapping
from typing import Any

from langchain_core.messages import AIMessage
from langchain_core.runnables import RunnableConfig

from fair_maturity.evaluator import CheckResult, ManualAnswer, Status
from fair_maturity.evaluator.criteria import Criterion
from fair_maturity.pipeline.state import EvaluationState

logger = logging.getLogger(__name__)

EVIDENCE_REQUIRED = "Evidence required."


def coerce_answer_keys(answers: Mapping[Any, Any] | None) -> dict[int, Any]:
    """Key answers by integer criterion id.

    String keys holding an integer literal (as produced by a JSON round trip)
    are accepted; any other key is dropped with a warning.
    """
    coerced: dict[int, Any] = {}
    for key, value in (answers or {}).items():
        if isinstance(key, bool):
            logger.warning("Ignoring manual answer with non-integer key %r", key)
            continue
        if isinstance(key, int):
            coerced[key] = value
            continue
        try:
            coerced[int(str(key).strip())] = value
        except ValueError:
            logger.warning("Ignoring manual answer with non-integer key %r", key)
    return coerced


def _is_met(status: Any) -> bool:
    if isinstance(status, bool):
        return status
    if isinstance(status, Status):
        return status == Status.MET
    if isinstance(status, str):
        return status.strip().lower() == Status.MET.value
    return False


def normalize_answer(criterion_id: int, raw: Any) -> CheckResult:
    """Normalize one raw answer into a ``CheckResult``.

    Accepted shapes: ``ManualAnswer``, a mapping with ``status`` and optional
    ``evidence``, a bare status string, or a bool. Evidence is kept verbatim
    when it is a non-blank string. A ``met`` answer without such evidence is
    recorded as unmet with the error ``"Evidence required."``.
    """
    evidence: Any = None
    if isinstance(raw, ManualAnswer):
        status, evidence = raw.status, raw.evidence
    elif isinstance(raw, Mapping):
        status, evidence = raw.get("status"), raw.get("evidence")
    elif isinstance(raw, (bool, str)):
        status = raw
    else:
        status = None

    if not isinstance(evidence, str) or not evidence.strip():
        evidence = None

    if not _is_met(status):
        return CheckResult(criterion_id=criterion_id, status=Status.UNMET, evidence=evidence)
    if evidence is None:
        return CheckResult(criterion_id=criterion_id, status=Status.UNMET, error=EVIDENCE_REQUIRED)
    return CheckResult(criterion_id=criterion_id, status=Status.MET, evidence=evidence)


def evaluate_manual_criteria(
    criteria: list[Criterion], answers: Mapping[Any, Any] | None
) -> dict[int, CheckResult]:
    """Produce one result per manual criterion; unanswered criteria are unmet."""
    by_id = coerce_answer_keys(answers)
    return {
        criterion.id: normalize_answer(criterion.id, by_id.get(criterion.id))
        for criterion in criteria
        if not criterion.is_automatic
    }


def to_manual_answers(answers: Mapping[Any, Any] | None) -> dict[int, ManualAnswer]:
    """Convert raw answers to ``ManualAnswer`` records for storage in a snapshot."""
    stored: dict[int, ManualAnswer] = {}
    for criterion_id, raw in coerce_answer_keys(answers).items():
        if isinstance(raw, ManualAnswer):
            stored[criterion_id] = raw
            continue
        evidence = raw.get("evidence") if isinstance(raw, Mapping) else None
        status_raw = raw.get("status") if isinstance(raw, Mapping) else raw
        stored[criterion_id] = ManualAnswer(
            criterion_id=criterion_id,
            status=Status.MET if _is_met(status_raw) else Status.UNMET,
            evidence=evidence if isinstance(evidence, str) else "",
        )
    return stored


async def process_manual_answers(state: EvaluationState, config: RunnableConfig) -> dict:
    """Validate manual answers against the manual criteria in scope.

    Args:
        state: Current state containing criteria and manual_inputs.
        config: Runnable config (unused by this stage).

    Returns:
        State update dict with manual_results and a summary message.
    """
    results = evaluate_manual_criteria(state.get("criteria", []), state.get("manual_inputs"))
    met_count = sum(1 for r in results.values() if r.met)
    rejected = sum(1 for r in results.values() if r.error == EVIDENCE_REQUIRED)
    if rejected:
        logger.info("%d manual answer(s) claimed met without evidence", rejected)

    summary = f"Manual criteria: {met_count}/{len(results)} met"
    if rejected:
        summary += f" ({rejected} rejected for missing evidence)"

    return {
        "manual_results": results,
        "current_step": "manual_answers_processed",
        "messages": [AIMessage(content=summary)],
    }
