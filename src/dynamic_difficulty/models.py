"""Result records produced by one evaluation."""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime
from typing import Any, Literal

from .constants import CHANGE_EPSILON, EASY_UPPER_BOUND, MEDIUM_UPPER_BOUND, NO_CHANGE_REASON

QuitType = Literal["normal", "rage_quit", "mid_play"]
QUIT_TYPES: tuple[QuitType, ...] = ("normal", "rage_quit", "mid_play")

DifficultyLevel = Literal["easy", "medium", "hard"]


def difficulty_level(value: float) -> DifficultyLevel:
    """Band a difficulty value: easy <= 3 < medium <= 7 < hard."""
    if value <= EASY_UPPER_BOUND:
        return "easy"
    if value <= MEDIUM_UPPER_BOUND:
        return "medium"
    return "hard"


@dataclass(frozen=True)
class ModifierResult:
    """One modifier's signed contribution. Positive = harder, negative = easier."""

    name: str
    value: float
    reason: str
    metadata: dict[str, Any] = field(default_factory=dict)

    @classmethod
    def no_change(cls, name: str, reason: str = NO_CHANGE_REASON, **metadata: Any) -> ModifierResult:
        return cls(name=name, value=0.0, reason=reason, metadata=dict(metadata))

    @property
    def applied(self) -> bool:
        return self.value != 0.0

    def to_dict(self) -> dict[str, Any]:
        return {
            "name": self.name,
            "value": self.value,
            "reason": self.reason,
            "metadata": dict(self.metadata),
        }


@dataclass(frozen=True)
class DifficultyResult:
    """Immutable snapshot of one evaluation; applying it is a separate step."""

    previous_difficulty: float
    new_difficulty: float
    applied_modifiers: list[ModifierResult]
    primary_reason: str
    evaluated_at: datetime

    @property
    def total_adjustment(self) -> float:
        return self.new_difficulty - self.previous_difficulty

    @property
    def has_changed(self) -> bool:
        return abs(self.total_adjustment) > CHANGE_EPSILON

    @property
    def difficulty_level(self) -> DifficultyLevel:
        return difficulty_level(self.new_difficulty)

    def to_dict(self) -> dict[str, Any]:
        return {
            "previous_difficulty": self.previous_difficulty,
            "new_difficulty": self.new_difficulty,
            "total_adjustment": self.total_adjustment,
            "has_changed": self.has_changed,
            "difficulty_level": self.difficulty_level,
            "primary_reason": self.primary_reason,
            "evaluated_at": self.evaluated_at.isoformat(),
            "applied_modifiers": [result.to_dict() for result in self.applied_modifiers],
        }
