"""Evaluation snapshot: a report plus the inputs needed to re-run it."""

from __future__ import annotations

from collections.abc import Mapping
from datetime import UTC, datetime
from typing import Any

from pydantic import BaseModel, Field, ValidationError

from fair_maturity.evaluator import CheckResult, EvaluationReport, Level, ManualAnswer
from fair_maturity.evaluator.exceptions import InputError
from fair_maturity.pipeline.nodes.manual_answers import to_manual_answers


class EvaluationSnapshot(BaseModel):
    """Everything needed to show a past evaluation and re-run its automatic checks.

    Serializes losslessly to JSON; integer criterion ids survive the
    round trip through JSON's string keys.
    """

    repository: str
    target_level: Level | None = None
    results: dict[int, CheckResult] = Field(default_factory=dict)
    manual_answers: dict[int, ManualAnswer] = Field(default_factory=dict)
    report: EvaluationReport
    timestamp: datetime = Field(default_factory=lambda: datetime.now(UTC))

    @classmethod
    def from_report(
        cls,
        report: EvaluationReport,
        manual_answers: Mapping[Any, Any] | None = None,
    ) -> EvaluationSnapshot:
        return cls(
            repository=report.repository,
            target_level=report.target_level,
            results=dict(report.results),
            manual_answers=to_manual_answers(manual_answers),
            report=report,
        )

    def to_json(self) -> str:
        return self.model_dump_json(indent=2)

    @classmethod
    def from_json(cls, data: str | bytes) -> EvaluationSnapshot:
        """Parse a snapshot produced by ``to_json``.

        Raises:
            InputError: If the payload is not a valid snapshot.
        """
        try:
            return cls.model_validate_json(data)
        except ValidationError as exc:
            raise InputError(
                f"Invalid evaluation snapshot: {exc.error_count()} error(s)",
                context={"errors": exc.errors()},
            ) from exc
