"""Criteria catalog: the ordered rubric and its level filtering.

The catalog is immutable once built. ``filter`` keeps every criterion whose
tier is at or below the requested target, so evaluating against
"Intermediate" covers Novice, Beginner and Intermediate rules.
"""

from __future__ import annotations

from collections.abc import Iterable, Iterator, Sequence
from pathlib import Path
from typing import Any

import yaml

from fair_maturity.evaluator import CriterionType, Level
from fair_maturity.evaluator.criteria.base import Criterion
from fair_maturity.evaluator.criteria.guidelines import GUIDELINES
from fair_maturity.evaluator.exceptions import CatalogError


class CriteriaCatalog:
    """Static ordered sequence of criteria, indexed by id."""

    def __init__(self, criteria: Iterable[Criterion]) -> None:
        self._criteria: tuple[Criterion, ...] = tuple(criteria)
        self._by_id: dict[int, Criterion] = {}
        for criterion in self._criteria:
            if criterion.id in self._by_id:
                raise CatalogError(
                    f"Duplicate criterion id {criterion.id}",
                    context={"title": criterion.title},
                )
            self._by_id[criterion.id] = criterion

    def __iter__(self) -> Iterator[Criterion]:
        return iter(self._criteria)

    def __len__(self) -> int:
        return len(self._criteria)

    def __contains__(self, criterion_id: object) -> bool:
        return criterion_id in self._by_id

    def get(self, criterion_id: int) -> Criterion | None:
        return self._by_id.get(criterion_id)

    def filter(self, target_level: Level | None = None) -> list[Criterion]:
        """Return the criteria in scope for a target level.

        Args:
            target_level: Highest tier to evaluate against, or None for the full catalog.

        Returns:
            Criteria in catalog order whose tier is at or below the target.
        """
        if target_level is None:
            return list(self._criteria)
        return [c for c in self._criteria if c.level.rank <= target_level.rank]

    def automatic(self, criteria: Sequence[Criterion] | None = None) -> list[Criterion]:
        pool = self._criteria if criteria is None else criteria
        return [c for c in pool if c.type == CriterionType.AUTOMATIC]

    def manual(self, criteria: Sequence[Criterion] | None = None) -> list[Criterion]:
        pool = self._criteria if criteria is None else criteria
        return [c for c in pool if c.type == CriterionType.MANUAL]

    def by_level(self) -> dict[Level, list[Criterion]]:
        grouped: dict[Level, list[Criterion]] = {}
        for criterion in self._criteria:
            grouped.setdefault(criterion.level, []).append(criterion)
        return grouped


def _criterion_from_dict(raw: dict[str, Any]) -> Criterion:
    try:
        return Criterion(
            id=int(raw["id"]),
            title=str(raw["title"]),
            level=Level.parse(raw["level"]),
            type=CriterionType(str(raw.get("type", "manual")).lower()),
            category=str(raw.get("category") or "General"),
        )
    except (KeyError, TypeError, ValueError) as exc:
        raise CatalogError(f"Invalid criterion entry: {exc}", context={"entry": raw}) from exc


def load_catalog(path: Path) -> CriteriaCatalog:
    """Load a catalog from a YAML list of criteria.

    Each entry needs ``id``, ``title`` and ``level``; ``type`` defaults to
    manual and ``category`` to "General". A top-level ``criteria`` key is
    accepted as a wrapper.

    Raises:
        CatalogError: If the file is missing, malformed, or repeats an id.
    """
    if not path.exists():
        raise CatalogError(f"Catalog file not found: {path}")

    with open(path) as f:
        data = yaml.safe_load(f)

    if isinstance(data, dict):
        data = data.get("criteria", [])
    if not isinstance(data, list):
        raise CatalogError(f"Catalog file must contain a list of criteria: {path}")

    return CriteriaCatalog(_criterion_from_dict(entry) for entry in data)


def get_default_catalog() -> CriteriaCatalog:
    """Return the built-in maturity guidelines."""
    return CriteriaCatalog(GUIDELINES)


__all__ = [
    "Criterion",
    "CriteriaCatalog",
    "GUIDELINES",
    "get_default_catalog",
    "load_catalog",
]
