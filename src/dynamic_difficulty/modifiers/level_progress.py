"""Level-progress analysis.

Four sub-analyses feed one contribution:

1. attempts on the current level beyond a threshold,
2. completion time relative to the expected time for the level,
3. progression speed (actual level against the level expected from play time),
4. mastery of hard levels or struggle on easy ones (at most one of the pair).

The first three always add up; only the last pair excludes each other.
"""

from __future__ import annotations

import logging
from typing import Any

from ..constants import CHANGE_EPSILON, LEVEL_PROGRESS, SECONDS_IN_HOUR
from ..modifier_config import LevelProgressConfig
from ..models import ModifierResult
from ..providers import LevelProgressProvider
from ..registry import register_modifier
from .base import DifficultyModifier


@register_modifier(LEVEL_PROGRESS)
class LevelProgressModifier(DifficultyModifier):
    required_providers = ("level_progress",)
    config: LevelProgressConfig

    def __init__(
        self,
        config: LevelProgressConfig,
        provider: LevelProgressProvider,
        *,
        logger: logging.Logger | None = None,
    ) -> None:
        super().__init__(config, logger=logger)
        self.provider = provider

    def _attempts_adjustment(self, attempts: int) -> tuple[float, str | None]:
        threshold = self.config.high_attempts_threshold
        if attempts <= threshold:
            return 0.0, None
        adjustment = -(attempts - threshold) * self.config.difficulty_decrease_per_attempt
        return adjustment, f"High attempts ({attempts})"

    def _time_adjustment(self, time_ratio: float) -> tuple[float, str | None]:
        if time_ratio <= 0:
            return 0.0, None

        fast = self.config.fast_completion_ratio
        slow = self.config.slow_completion_ratio
        if time_ratio < fast:
            bonus = self.config.fast_completion_bonus * (fast - time_ratio) / fast
            return bonus, f"Fast completion ({time_ratio:.0%} of expected)"
        if slow > 0 and time_ratio > slow:
            overshoot = min((time_ratio - slow) / slow, self.config.max_slow_penalty_multiplier)
            return -self.config.slow_completion_penalty * overshoot, f"Slow completion ({time_ratio:.0%} of expected)"
        return 0.0, None

    def _progression_adjustment(self, current_level: int, average_time: float) -> tuple[float, float | None, str | None]:
        if current_level <= 0 or average_time <= 0:
            return 0.0, None, None

        hours_played = current_level * average_time / SECONDS_IN_HOUR
        expected_level = hours_played * self.config.expected_levels_per_hour
        adjustment = (current_level - expected_level) * self.config.level_progression_factor
        bound = self.config.max_progression_adjustment
        if bound is not None:
            adjustment = max(-bound, min(adjustment, bound))

        if abs(adjustment) <= CHANGE_EPSILON:
            return 0.0, expected_level, None
        label = "Fast progression" if adjustment > 0 else "Slow progression"
        return adjustment, expected_level, f"{label} (L{current_level} vs expected L{expected_level:.0f})"

    def _mastery_adjustment(self, level_difficulty: float, completion_rate: float) -> tuple[float, str | None]:
        # 0 means the host does not rate its levels.
        if level_difficulty <= 0:
            return 0.0, None
        if (
            level_difficulty >= self.config.hard_level_threshold
            and completion_rate > self.config.mastery_completion_rate
        ):
            return self.config.mastery_bonus, "Mastering hard levels"
        if (
            level_difficulty <= self.config.easy_level_threshold
            and completion_rate < self.config.struggle_completion_rate
        ):
            return -self.config.struggle_penalty, "Struggling on easy levels"
        return 0.0, None

    def calculate(self) -> ModifierResult:
        attempts = self.provider.get_attempts_on_current_level()
        time_ratio = self.provider.get_current_level_time_percentage()
        current_level = self.provider.get_current_level()
        average_time = self.provider.get_average_completion_time()
        level_difficulty = self.provider.get_current_level_difficulty()
        completion_rate = self.provider.get_completion_rate()

        value = 0.0
        reasons: list[str] = []
        metadata: dict[str, Any] = {
            "attempts": attempts,
            "time_ratio": time_ratio,
            "current_level": current_level,
            "level_difficulty": level_difficulty,
            "completion_rate": completion_rate,
        }

        for adjustment, reason in (
            self._attempts_adjustment(attempts),
            self._time_adjustment(time_ratio),
        ):
            value += adjustment
            if reason:
                reasons.append(reason)

        progression, expected_level, reason = self._progression_adjustment(current_level, average_time)
        value += progression
        if reason:
            reasons.append(reason)
        if expected_level is not None:
            metadata["expected_level"] = expected_level

        adjustment, reason = self._mastery_adjustment(level_difficulty, completion_rate)
        value += adjustment
        if reason:
            reasons.append(reason)

        if not reasons:
            return self.no_change("Normal level progression", **metadata)

        self.logger.debug("Level progress -> adjustment %.2f (%s)", value, "; ".join(reasons))
        return self.result(value, ", ".join(reasons), **metadata)
