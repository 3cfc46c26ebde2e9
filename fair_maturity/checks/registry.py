"""Typed mapping from criterion id to check function."""

from __future__ import annotations

from collections.abc import Iterable, Iterator

from fair_maturity.checks.base import CheckFunction
from fair_maturity.evaluator.criteria import CriteriaCatalog
from fair_maturity.evaluator.exceptions import RegistryError


class CheckRegistry:
    """Immutable set of ``(criterion_id, check)`` bindings."""

    def __init__(self, bindings: dict[int, CheckFunction] | None = None) -> None:
        self._bindings: dict[int, CheckFunction] = dict(bindings or {})

    @classmethod
    def from_bindings(cls, bindings: Iterable[tuple[int, CheckFunction]]) -> CheckRegistry:
        """Build a registry, rejecting a criterion bound twice.

        Raises:
            RegistryError: On a duplicate criterion id.
        """
        mapping: dict[int, CheckFunction] = {}
        for criterion_id, check in bindings:
            if criterion_id in mapping:
                raise RegistryError(
                    f"Criterion {criterion_id} is bound to more than one check",
                    context={
                        "existing": getattr(mapping[criterion_id], "__name__", repr(mapping[criterion_id])),
                        "duplicate": getattr(check, "__name__", repr(check)),
                    },
                )
            mapping[criterion_id] = check
        return cls(mapping)

    def get(self, criterion_id: int) -> CheckFunction | None:
        return self._bindings.get(criterion_id)

    def __contains__(self, criterion_id: object) -> bool:
        return criterion_id in self._bindings

    def __len__(self) -> int:
        return len(self._bindings)

    def __iter__(self) -> Iterator[int]:
        return iter(self._bindings)

    def validate(self, catalog: CriteriaCatalog) -> None:
        """Check that bindings and catalog agree.

        Every automatic criterion must have a check, and every check must
        point at an automatic criterion of the catalog.

        Raises:
            RegistryError: Listing every mismatch found.
        """
        problems: list[str] = []
        for criterion in catalog.automatic():
            if criterion.id not in self._bindings:
                problems.append(f"automatic criterion {criterion.id} has no check")
        for criterion_id in sorted(self._bindings):
            criterion = catalog.get(criterion_id)
            if criterion is None:
                problems.append(f"check bound to unknown criterion {criterion_id}")
            elif not criterion.is_automatic:
                problems.append(f"check bound to manual criterion {criterion_id}")
        if problems:
            raise RegistryError("Check registry does not match catalog: " + "; ".join(problems))
