"""Load and validate scoring configuration from YAML files."""

from __future__ import annotations

from pathlib import Path
from typing import Any

import yaml
from pydantic import BaseModel, Field, model_validator

from fair_maturity.evaluator import LEVEL_ORDER, LEVEL_WEIGHTS, Level
from fair_maturity.evaluator.exceptions import ConfigurationError

DEFAULT_CONFIG_PATH = Path(__file__).parent / "defaults" / "eval_config.yaml"


class LevelThresholds(BaseModel):
    """Score a run must strictly exceed to be classified at each tier."""

    expert: float = Field(default=0.9, ge=0.0, le=1.0)
    advanced: float = Field(default=0.75, ge=0.0, le=1.0)
    intermediate: float = Field(default=0.6, ge=0.0, le=1.0)
    beginner: float = Field(default=0.4, ge=0.0, le=1.0)

    @model_validator(mode="after")
    def _check_descending(self) -> LevelThresholds:
        values = [self.expert, self.advanced, self.intermediate, self.beginner]
        if values != sorted(values, reverse=True):
            raise ValueError("Level thresholds must decrease from expert to beginner")
        return self


class EvalConfig(BaseModel):
    """Full scoring configuration."""

    level_weights: dict[Level, float] = Field(default_factory=lambda: dict(LEVEL_WEIGHTS))
    level_thresholds: LevelThresholds = LevelThresholds()

    @model_validator(mode="after")
    def _check_weights(self) -> EvalConfig:
        missing = [level.value for level in LEVEL_ORDER if level not in self.level_weights]
        if missing:
            raise ValueError(f"Missing weights for levels: {', '.join(missing)}")
        if any(weight <= 0 for weight in self.level_weights.values()):
            raise ValueError("Level weights must be positive")
        return self

    def weight_for(self, level: Level) -> float:
        return self.level_weights[level]

    def classify(self, score: float) -> Level:
        """Map a global score to a tier, checking thresholds top-down with strict comparison."""
        t = self.level_thresholds
        if score > t.expert:
            return Level.EXPERT
        elif score > t.advanced:
            return Level.ADVANCED
        elif score > t.intermediate:
            return Level.INTERMEDIATE
        elif score > t.beginner:
            return Level.BEGINNER
        return Level.NOVICE


def load_eval_config(path: Path | None = None) -> EvalConfig:
    """Load scoring config from a YAML file.

    Without ``path`` the bundled defaults file is read, and a missing
    defaults file falls back to the built-in values.

    Args:
        path: Optional explicit path to a YAML config file.

    Raises:
        ConfigurationError: If an explicit path does not exist, or the file
            is not valid YAML, not a mapping, or does not validate.
    """
    if path is None:
        path = DEFAULT_CONFIG_PATH
        if not path.exists():
            return EvalConfig()
    elif not path.exists():
        raise ConfigurationError(f"Scoring config not found: {path}", context={"path": str(path)})

    try:
        with open(path, encoding="utf-8") as f:
            data: Any = yaml.safe_load(f) or {}
    except (OSError, yaml.YAMLError) as exc:
        raise ConfigurationError(f"Cannot read scoring config {path}: {exc}", context={"path": str(path)}) from exc

    section = data.get("scoring", data) if isinstance(data, dict) else data
    if not isinstance(section, dict):
        raise ConfigurationError(
            f"Invalid scoring config {path}: expected a mapping, got {type(section).__name__}",
            context={"path": str(path)},
        )

    try:
        return EvalConfig(**section)
    except (TypeError, ValueError) as exc:
        raise ConfigurationError(f"Invalid scoring config {path}: {exc}", context={"path": str(path)}) from exc
