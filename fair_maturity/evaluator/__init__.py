"""Pydantic models for evaluation inputs, outputs, and scores."""

from __future__ import annotations

from collections.abc import Mapping
from datetime import UTC, datetime
from enum import Enum
from types import MappingProxyType
from typing import Annotated, Any

from pydantic import AfterValidator, BaseModel, ConfigDict, Field, PlainSerializer


class Level(str, Enum):
    NOVICE = "Novice"
    BEGINNER = "Beginner"
    INTERMEDIATE = "Intermediate"
    ADVANCED = "Advanced"
    EXPERT = "Expert"

    @property
    def rank(self) -> int:
        """Position of the tier in ``LEVEL_ORDER`` (Novice is 0)."""
        return LEVEL_ORDER.index(self)

    @classmethod
    def parse(cls, value: Level | str) -> Level:
        """Resolve a level from an enum member or a case-insensitive name.

        Raises:
            ValueError: If the value names no tier.
        """
        if isinstance(value, Level):
            return value
        for level in cls:
            if level.value.lower() == str(value).strip().lower():
                return level
        raise ValueError(f"Unknown level: {value!r}")


LEVEL_ORDER: tuple[Level, ...] = (
    Level.NOVICE,
    Level.BEGINNER,
    Level.INTERMEDIATE,
    Level.ADVANCED,
    Level.EXPERT,
)

# Higher tiers weigh more in the global score.
LEVEL_WEIGHTS: dict[Level, float] = {
    Level.NOVICE: 1.0,
    Level.BEGINNER: 1.2,
    Level.INTERMEDIATE: 1.5,
    Level.ADVANCED: 2.0,
    Level.EXPERT: 2.5,
}


def min_level(a: Level, b: Level) -> Level:
    """Return the lower of two tiers."""
    return a if a.rank <= b.rank else b


class CriterionType(str, Enum):
    AUTOMATIC = "automatic"
    MANUAL = "manual"


class Status(str, Enum):
    MET = "met"
    UNMET = "unmet"


class Priority(str, Enum):
    HIGH = "high"
    LOW = "low"
    INFO = "info"


class CheckResult(BaseModel):
    """Outcome for a single criterion in one run."""

    model_config = ConfigDict(frozen=True)

    criterion_id: int
    status: Status
    evidence: str | None = None
    error: str | None = None

    @property
    def met(self) -> bool:
        return self.status == Status.MET

    @property
    def verified(self) -> bool:
        """False when the criterion could not be checked (as opposed to checked and unmet)."""
        return self.error is None


class ManualAnswer(BaseModel):
    """Caller-supplied answer for a criterion that cannot be checked automatically."""

    model_config = ConfigDict(frozen=True)

    criterion_id: int
    status: Status
    evidence: str = ""


class RateLimitStatus(BaseModel):
    """Remaining request quota on the hosting platform."""

    core_limit: int = 0
    core_remaining: int = 0
    search_limit: int = 0
    search_remaining: int = 0
    search_reset_at: datetime | None = None

    @property
    def search_exhausted(self) -> bool:
        return self.search_limit > 0 and self.search_remaining == 0


class MissingCriterion(BaseModel):
    """An unmet criterion listed inside a feedback item."""

    model_config = ConfigDict(frozen=True)

    criterion_id: int
    title: str = ""
    level: Level
    is_blocker: bool


class FeedbackItem(BaseModel):
    """Remediation advice for one category."""

    model_config = ConfigDict(frozen=True)

    category: str
    priority: Priority
    message: str
    missing_criteria: tuple[MissingCriterion, ...] = ()

    @property
    def blocker_count(self) -> int:
        return sum(1 for c in self.missing_criteria if c.is_blocker)


class LevelScore(BaseModel):
    """Weighted score of the in-scope criteria of one tier."""

    model_config = ConfigDict(frozen=True)

    total_weight: float = 0.0
    earned_weight: float = 0.0
    ratio: float = Field(default=0.0, ge=0.0, le=1.0)
    unmet: tuple[int, ...] = ()

    @property
    def complete(self) -> bool:
        return not self.unmet


class EvaluationStats(BaseModel):
    model_config = ConfigDict(frozen=True)

    total_criteria: int = 0
    automatic_count: int = 0
    manual_count: int = 0
    met_count: int = 0
    unmet_count: int = 0
    unverified_count: int = 0
    total_weight: float = 0.0
    earned_weight: float = 0.0
    duration_seconds: float = 0.0
    rate_limit: RateLimitStatus | None = None


def _read_only(value: dict[Any, Any]) -> Mapping[Any, Any]:
    return MappingProxyType(value)


def _as_dict(value: Mapping[Any, Any]) -> dict[Any, Any]:
    return dict(value)


# Validated into read-only views; serialized back as plain dicts.
ResultMap = Annotated[
    dict[int, CheckResult],
    AfterValidator(_read_only),
    PlainSerializer(_as_dict, return_type=dict[int, CheckResult]),
]
LevelScoreMap = Annotated[
    dict[Level, LevelScore],
    AfterValidator(_read_only),
    PlainSerializer(_as_dict, return_type=dict[Level, LevelScore]),
]


class EvaluationReport(BaseModel):
    """Complete evaluation output. Created once per run and never mutated.

    ``results`` and ``level_scores`` are read-only mappings and ``feedback``
    is a tuple, so the report cannot be changed in place either.
    """

    model_config = ConfigDict(frozen=True)

    repository: str
    target_level: Level | None = None

    results: ResultMap

    # Scores
    global_score: float = Field(ge=0.0, le=1.0)
    raw_level: Level
    achieved_level: Level | None = None
    capped_level: Level
    level_scores: LevelScoreMap = Field(default_factory=lambda: MappingProxyType({}))

    feedback: tuple[FeedbackItem, ...] = ()
    stats: EvaluationStats = Field(default_factory=EvaluationStats)

    # Metadata
    created_at: datetime = Field(default_factory=lambda: datetime.now(UTC))

    def unmet(self) -> list[CheckResult]:
        return [r for r in self.results.values() if not r.met]

    def errors(self) -> dict[int, str]:
        """Per-criterion error strings for criteria that could not be verified."""
        return {cid: r.error for cid, r in self.results.items() if r.error}
