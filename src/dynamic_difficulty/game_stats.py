"""Derive a starting configuration from aggregate game analytics."""

from __future__ import annotations

import logging
import math
from pathlib import Path

from pydantic import BaseModel, ConfigDict, Field, ValidationError, model_validator

from .constants import SECONDS_IN_HOUR
from .errors import ConfigurationError
from .modifier_config import (
    DifficultyConfig,
    GlobalConfig,
    LevelProgressConfig,
    LossStreakConfig,
    SessionPatternConfig,
    TimeDecayConfig,
    WinStreakConfig,
    default_modifier_configs,
)

logger = logging.getLogger(__name__)

# Bounds for generated knobs
MIN_DECAY_PER_DAY, MAX_DECAY_PER_DAY = 0.1, 2.0
MIN_MAX_DECAY, MAX_MAX_DECAY = 0.5, 5.0
MAX_GRACE_HOURS = 48.0
MIN_STREAK_THRESHOLD, MAX_STREAK_THRESHOLD = 1, 10
MIN_NORMAL_SESSION_SECONDS, MAX_NORMAL_SESSION_SECONDS = 60.0, 600.0


class GameStats(BaseModel):
    """Analytics a designer already has for their game. Defaults describe a typical casual title."""

    model_config = ConfigDict(extra="forbid", allow_inf_nan=False)

    # player behavior
    avg_consecutive_wins: float = 3.5
    avg_consecutive_losses: float = 2.0
    win_rate_percentage: float = 65.0
    avg_attempts_per_level: float = 2.5

    # sessions and time
    avg_hours_between_sessions: float = 24.0
    avg_session_duration_minutes: float = 15.0
    avg_levels_per_session: float = 5.0
    rage_quit_percentage: float = Field(default=10.0, ge=0, le=100)

    # level design
    difficulty_min: float = 1.0
    difficulty_max: float = 10.0
    difficulty_default: float = 3.0
    avg_level_completion_time_seconds: float = 60.0

    # progression
    total_levels: int = 100
    difficulty_increase_start_level: int = 20
    target_retention_days: int = 7
    max_difficulty_change_per_session: float = 2.0
    game_completion_rate: float = Field(default=5.0, ge=0, le=100)

    @model_validator(mode="after")
    def validate_stats(self) -> GameStats:
        if self.avg_consecutive_wins <= 0:
            raise ValueError("Average consecutive wins must be greater than 0")
        if self.avg_consecutive_losses <= 0:
            raise ValueError("Average consecutive losses must be greater than 0")
        if not 0 <= self.win_rate_percentage <= 100:
            raise ValueError("Win rate percentage must be between 0 and 100")
        if self.difficulty_min >= self.difficulty_max:
            raise ValueError("Difficulty min must be less than difficulty max")
        if not self.difficulty_min <= self.difficulty_default <= self.difficulty_max:
            raise ValueError("Difficulty default must be between min and max")
        if self.avg_hours_between_sessions <= 0:
            raise ValueError("Average hours between sessions must be greater than 0")
        if self.total_levels <= 0:
            raise ValueError("Total levels must be greater than 0")
        if self.target_retention_days <= 0:
            raise ValueError("Target retention days must be greater than 0")
        if self.max_difficulty_change_per_session <= 0:
            raise ValueError("Max difficulty change per session must be greater than 0")
        return self


def _clamp(value: float, low: float, high: float) -> float:
    return max(low, min(value, high))


def _round_half_up(value: float) -> int:
    return math.floor(value + 0.5)


def _streak_threshold(average_streak: float) -> int:
    return int(_clamp(_round_half_up(average_streak), MIN_STREAK_THRESHOLD, MAX_STREAK_THRESHOLD))


def generate_config(stats: GameStats) -> DifficultyConfig:
    """Build a full ``DifficultyConfig`` tuned to ``stats``.

    Knobs the stats say nothing about keep their defaults.
    """
    max_change = stats.max_difficulty_change_per_session
    modifiers = default_modifier_configs()

    modifiers["win_streak"] = WinStreakConfig(
        win_threshold=_streak_threshold(stats.avg_consecutive_wins),
        max_bonus=max_change,
    )
    modifiers["loss_streak"] = LossStreakConfig(
        loss_threshold=_streak_threshold(stats.avg_consecutive_losses),
        max_reduction=max_change,
    )
    modifiers["time_decay"] = TimeDecayConfig(
        decay_per_day=_clamp(max_change / stats.target_retention_days, MIN_DECAY_PER_DAY, MAX_DECAY_PER_DAY),
        max_decay=_clamp(max_change, MIN_MAX_DECAY, MAX_MAX_DECAY),
        grace_hours=_clamp(stats.avg_hours_between_sessions, 0.0, MAX_GRACE_HOURS),
    )

    level_progress: dict[str, float] = {
        "high_attempts_threshold": max(_round_half_up(stats.avg_attempts_per_level * 2), 1),
    }
    if stats.avg_level_completion_time_seconds > 0:
        level_progress["expected_levels_per_hour"] = SECONDS_IN_HOUR / stats.avg_level_completion_time_seconds
    modifiers["level_progress"] = LevelProgressConfig(**level_progress)

    modifiers["session_pattern"] = SessionPatternConfig(
        min_normal_session_duration=_clamp(
            stats.avg_session_duration_minutes * 60 / 2,
            MIN_NORMAL_SESSION_SECONDS,
            MAX_NORMAL_SESSION_SECONDS,
        ),
    )

    global_settings = GlobalConfig(
        min_difficulty=stats.difficulty_min,
        max_difficulty=stats.difficulty_max,
        default_difficulty=stats.difficulty_default,
        max_change_per_evaluation=max_change,
    )
    logger.info(
        "Generated difficulty config from game stats",
        extra={"dd_retention_days": stats.target_retention_days, "dd_max_change": max_change},
    )
    return DifficultyConfig(global_settings=global_settings, modifiers=modifiers)


def load_game_stats(path: str | Path) -> GameStats:
    stats_path = Path(path)
    try:
        return GameStats.model_validate_json(stats_path.read_text(encoding="utf-8"))
    except OSError as exc:
        raise ConfigurationError(f"Cannot read game stats {stats_path}: {exc}") from exc
    except ValidationError as exc:
        raise ConfigurationError(f"Invalid game stats {stats_path}: {exc}") from exc
