"""Typed configuration records, one pydantic model per modifier type.

Each record is registered under its modifier-type identifier so a JSON
document like ``{"modifiers": {"win_streak": {...}}}`` resolves to the right
model. Invariant violations between related knobs (min above max, low
threshold above high threshold) are corrected here, at load time, and logged;
evaluation never sees an inconsistent record.
"""

from __future__ import annotations

import json
import logging
from pathlib import Path
from typing import Annotated, Any, Literal

from pydantic import BaseModel, ConfigDict, Field, ValidationError, field_validator, model_validator

from .constants import (
    COMPLETION_RATE,
    DEFAULT_DIFFICULTY,
    DEFAULT_DIMINISHING_FACTOR,
    DEFAULT_MAX_CHANGE,
    LEVEL_PROGRESS,
    LOSS_STREAK,
    MAX_DIFFICULTY,
    MIN_DIFFICULTY,
    MODIFIER_TYPES_IN_ORDER,
    RAGE_QUIT,
    SESSION_PATTERN,
    TIME_DECAY,
    WIN_STREAK,
)
from .errors import ConfigurationError, UnknownModifierError

logger = logging.getLogger(__name__)

NonNegative = Annotated[float, Field(ge=0)]
Ratio = Annotated[float, Field(ge=0, le=1)]
Count = Annotated[int, Field(ge=0)]

AggregationStrategy = Literal["sum", "weighted", "max", "diminishing"]

# modifier_type → config record class
CONFIG_TYPES: dict[str, type[ModifierConfig]] = {}


def register_config(modifier_type: str):
    """Register a config record class under ``modifier_type``."""

    def decorator(cls: type[ModifierConfig]) -> type[ModifierConfig]:
        if modifier_type in CONFIG_TYPES:
            raise ValueError(f"Duplicate config for modifier_type={modifier_type!r}")
        CONFIG_TYPES[modifier_type] = cls
        return cls

    return decorator


class ModifierConfig(BaseModel):
    """Fields shared by every modifier record."""

    model_config = ConfigDict(extra="forbid", allow_inf_nan=False)

    modifier_type: str

    enabled: bool = True
    priority: int = 0


@register_config(WIN_STREAK)
class WinStreakConfig(ModifierConfig):
    modifier_type: Literal["win_streak"] = WIN_STREAK

    priority: int = 1
    win_threshold: NonNegative = 3
    step_size: NonNegative = 0.5
    max_bonus: NonNegative = 2.0


@register_config(LOSS_STREAK)
class LossStreakConfig(ModifierConfig):
    modifier_type: Literal["loss_streak"] = LOSS_STREAK

    priority: int = 2
    loss_threshold: NonNegative = 2
    step_size: NonNegative = 0.3
    max_reduction: NonNegative = 1.5


@register_config(TIME_DECAY)
class TimeDecayConfig(ModifierConfig):
    modifier_type: Literal["time_decay"] = TIME_DECAY

    priority: int = 3
    decay_per_day: NonNegative = 0.5
    max_decay: NonNegative = 2.0
    grace_hours: NonNegative = 6.0


@register_config(RAGE_QUIT)
class RageQuitConfig(ModifierConfig):
    modifier_type: Literal["rage_quit"] = RAGE_QUIT

    priority: int = 4
    rage_quit_reduction: NonNegative = 1.0
    quit_reduction: NonNegative = 0.2
    mid_play_reduction: NonNegative = 0.3
    rage_quit_count_threshold: Annotated[int, Field(ge=1)] = 2
    penalty_multiplier: NonNegative = 0.5


@register_config(COMPLETION_RATE)
class CompletionRateConfig(ModifierConfig):
    modifier_type: Literal["completion_rate"] = COMPLETION_RATE

    priority: int = 5
    low_completion_threshold: Ratio = 0.4
    high_completion_threshold: Ratio = 0.7
    low_completion_decrease: NonNegative = 0.5
    high_completion_increase: NonNegative = 0.5
    min_attempts_required: Count = 10
    level_rate_weight: Ratio = 0.3

    @model_validator(mode="after")
    def thresholds_ordered(self) -> CompletionRateConfig:
        if self.low_completion_threshold > self.high_completion_threshold:
            logger.warning(
                "completion_rate: low_completion_threshold %.2f > high_completion_threshold %.2f, clamping",
                self.low_completion_threshold,
                self.high_completion_threshold,
            )
            self.low_completion_threshold = self.high_completion_threshold
        return self


@register_config(LEVEL_PROGRESS)
class LevelProgressConfig(ModifierConfig):
    modifier_type: Literal["level_progress"] = LEVEL_PROGRESS

    priority: int = 6

    # attempts
    high_attempts_threshold: Count = 5
    difficulty_decrease_per_attempt: NonNegative = 0.2

    # time performance (ratio of actual to expected completion time)
    fast_completion_ratio: NonNegative = 0.7
    slow_completion_ratio: NonNegative = 1.5
    fast_completion_bonus: NonNegative = 0.3
    slow_completion_penalty: NonNegative = 0.3
    max_slow_penalty_multiplier: NonNegative = 2.0

    # progression speed
    expected_levels_per_hour: NonNegative = 15
    level_progression_factor: NonNegative = 0.1
    max_progression_adjustment: NonNegative | None = None

    # mastery / struggle
    hard_level_threshold: NonNegative = 3.0
    easy_level_threshold: NonNegative = 2.0
    mastery_completion_rate: Ratio = 0.7
    struggle_completion_rate: Ratio = 0.3
    mastery_bonus: NonNegative = 0.3
    struggle_penalty: NonNegative = 0.3

    @model_validator(mode="after")
    def bands_ordered(self) -> LevelProgressConfig:
        if self.fast_completion_ratio > self.slow_completion_ratio:
            logger.warning(
                "level_progress: fast_completion_ratio %.2f > slow_completion_ratio %.2f, clamping",
                self.fast_completion_ratio,
                self.slow_completion_ratio,
            )
            self.fast_completion_ratio = self.slow_completion_ratio
        if self.easy_level_threshold > self.hard_level_threshold:
            logger.warning(
                "level_progress: easy_level_threshold %.2f > hard_level_threshold %.2f, clamping",
                self.easy_level_threshold,
                self.hard_level_threshold,
            )
            self.easy_level_threshold = self.hard_level_threshold
        return self


@register_config(SESSION_PATTERN)
class SessionPatternConfig(ModifierConfig):
    modifier_type: Literal["session_pattern"] = SESSION_PATTERN

    priority: int = 7

    # durations are seconds
    min_normal_session_duration: NonNegative = 180.0
    very_short_session_threshold: NonNegative = 60.0
    very_short_session_decrease: NonNegative = 0.5
    max_short_average_decrease: NonNegative = 0.5

    session_history_size: Annotated[int, Field(ge=1)] = 5
    short_session_ratio: Ratio = 0.5
    consistent_short_sessions_decrease: NonNegative = 0.8

    rage_quit_pattern_decrease: NonNegative = 1.0
    rage_quit_count_threshold: Annotated[int, Field(ge=1)] = 2
    rage_quit_penalty_multiplier: NonNegative = 0.5

    mid_level_quit_decrease: NonNegative = 0.4
    mid_level_quit_ratio: Ratio = 0.3

    difficulty_improvement_threshold: NonNegative = 1.2
    ineffective_adjustment_decrease: NonNegative = 0.2


class GlobalConfig(BaseModel):
    """Range, step and aggregation settings for the whole pipeline."""

    model_config = ConfigDict(extra="forbid", allow_inf_nan=False)

    min_difficulty: float = MIN_DIFFICULTY
    max_difficulty: float = MAX_DIFFICULTY
    default_difficulty: float = DEFAULT_DIFFICULTY
    max_change_per_evaluation: NonNegative = DEFAULT_MAX_CHANGE
    aggregation_strategy: AggregationStrategy = "sum"
    diminishing_factor: Ratio = DEFAULT_DIMINISHING_FACTOR
    aggregation_weights: dict[str, NonNegative] = Field(default_factory=dict)
    debug_logs: bool = False

    @model_validator(mode="after")
    def correct_range(self) -> GlobalConfig:
        if self.min_difficulty > self.max_difficulty:
            logger.warning(
                "min_difficulty %.2f > max_difficulty %.2f, clamping min to max",
                self.min_difficulty,
                self.max_difficulty,
            )
            self.min_difficulty = self.max_difficulty
        if self.default_difficulty < self.min_difficulty:
            logger.warning(
                "default_difficulty %.2f below min_difficulty %.2f, clamping",
                self.default_difficulty,
                self.min_difficulty,
            )
            self.default_difficulty = self.min_difficulty
        if self.default_difficulty > self.max_difficulty:
            logger.warning(
                "default_difficulty %.2f above max_difficulty %.2f, clamping",
                self.default_difficulty,
                self.max_difficulty,
            )
            self.default_difficulty = self.max_difficulty
        return self


def parse_modifier_config(data: dict[str, Any] | ModifierConfig) -> ModifierConfig:
    """Validate one modifier section into its typed record, dispatching on ``modifier_type``.

    Raises UnknownModifierError for unregistered types and
    pydantic.ValidationError for invalid knobs.
    """
    if isinstance(data, ModifierConfig):
        return data
    modifier_type = data.get("modifier_type")
    config_cls = CONFIG_TYPES.get(modifier_type) if isinstance(modifier_type, str) else None
    if config_cls is None:
        raise UnknownModifierError(modifier_type)
    return config_cls.model_validate(data)


def default_modifier_configs() -> dict[str, ModifierConfig]:
    return {modifier_type: CONFIG_TYPES[modifier_type]() for modifier_type in MODIFIER_TYPES_IN_ORDER}


class DifficultyConfig(BaseModel):
    """Global settings plus the per-modifier records, keyed by modifier type."""

    model_config = ConfigDict(extra="forbid")

    global_settings: GlobalConfig = Field(default_factory=GlobalConfig)
    modifiers: dict[str, ModifierConfig] = Field(default_factory=default_modifier_configs)

    @field_validator("modifiers", mode="before")
    @classmethod
    def parse_modifiers(cls, value: Any) -> dict[str, ModifierConfig]:
        # Sections that are left out keep their defaults.
        merged = default_modifier_configs()
        if value is None:
            return merged
        if not isinstance(value, dict):
            raise ValueError("modifiers must map modifier_type to its settings")
        for modifier_type, data in value.items():
            if data is None:
                data = {}
            if isinstance(data, dict):
                data = {"modifier_type": modifier_type, **data}
            elif not isinstance(data, ModifierConfig):
                raise ValueError(f"modifiers[{modifier_type!r}] must be an object")
            record = parse_modifier_config(data)
            if record.modifier_type != modifier_type:
                raise ValueError(
                    f"modifiers[{modifier_type!r}] holds a {record.modifier_type!r} record"
                )
            merged[modifier_type] = record
        return merged

    @classmethod
    def default(cls) -> DifficultyConfig:
        return cls()

    def get(self, modifier_type: str) -> ModifierConfig | None:
        return self.modifiers.get(modifier_type)

    def is_enabled(self, modifier_type: str) -> bool:
        config = self.get(modifier_type)
        return config is not None and config.enabled


def dump_config(config: DifficultyConfig) -> dict[str, Any]:
    """JSON-ready dict, including every subclass field of each modifier record."""
    return {
        "global_settings": config.global_settings.model_dump(),
        "modifiers": {
            modifier_type: modifier_config.model_dump()
            for modifier_type, modifier_config in config.modifiers.items()
        },
    }


def load_config(path: str | Path) -> DifficultyConfig:
    """Read a JSON difficulty configuration.

    Raises ConfigurationError when the file is unreadable, is not JSON, or
    fails validation.
    """
    config_path = Path(path)
    try:
        raw = json.loads(config_path.read_text(encoding="utf-8"))
    except OSError as exc:
        raise ConfigurationError(f"Cannot read config {config_path}: {exc}") from exc
    except json.JSONDecodeError as exc:
        raise ConfigurationError(f"Config {config_path} is not valid JSON: {exc}") from exc

    if not isinstance(raw, dict):
        raise ConfigurationError(f"Config {config_path} must contain a JSON object")

    try:
        config = DifficultyConfig.model_validate(raw)
    except ValidationError as exc:
        raise ConfigurationError(f"Invalid config {config_path}: {exc}") from exc

    logger.debug("Loaded difficulty config from %s", config_path)
    return config
