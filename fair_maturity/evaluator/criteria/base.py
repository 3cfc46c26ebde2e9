"""Base dataclass for maturity criteria."""

from __future__ import annotations

from dataclasses import dataclass

from fair_maturity.evaluator import CriterionType, Level


@dataclass(frozen=True)
class Criterion:
    """A single rubric rule."""

    id: int
    title: str
    level: Level
    type: CriterionType
    category: str

    @property
    def is_automatic(self) -> bool:
        return self.type == CriterionType.AUTOMATIC
