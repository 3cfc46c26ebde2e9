"""Builders for small, hand-made criteria catalogs."""

from __future__ import annotations

from fair_maturity.evaluator import CriterionType, Level
from fair_maturity.evaluator.criteria import Criterion


def make_criterion(
    criterion_id: int,
    level: Level = Level.NOVICE,
    type: CriterionType = CriterionType.MANUAL,
    category: str = "Documentation",
    title: str | None = None,
) -> Criterion:
    return Criterion(
        id=criterion_id,
        title=title or f"Criterion {criterion_id}",
        level=level,
        type=type,
        category=category,
    )


def auto(criterion_id: int, level: Level = Level.NOVICE, category: str = "Documentation") -> Criterion:
    return make_criterion(criterion_id, level, CriterionType.AUTOMATIC, category)


def manual(criterion_id: int, level: Level = Level.NOVICE, category: str = "Documentation") -> Criterion:
    return make_criterion(criterion_id, level, CriterionType.MANUAL, category)
