from __future__ import annotations

import logging

from ..constants import COMPLETION_RATE
from ..modifier_config import CompletionRateConfig
from ..models import ModifierResult
from ..providers import LevelProgressProvider, WinStreakProvider
from ..registry import register_modifier
from .base import DifficultyModifier


@register_modifier(COMPLETION_RATE)
class CompletionRateModifier(DifficultyModifier):
    """Blends lifetime win rate with the current level's completion rate.

    Stays silent until enough attempts are recorded to judge.
    """

    required_providers = ("win_streak", "level_progress")
    config: CompletionRateConfig

    def __init__(
        self,
        config: CompletionRateConfig,
        win_streak_provider: WinStreakProvider,
        level_progress_provider: LevelProgressProvider,
        *,
        logger: logging.Logger | None = None,
    ) -> None:
        super().__init__(config, logger=logger)
        self.win_streak_provider = win_streak_provider
        self.level_progress_provider = level_progress_provider

    def calculate(self) -> ModifierResult:
        wins = self.win_streak_provider.get_total_wins()
        losses = self.win_streak_provider.get_total_losses()
        attempts = wins + losses
        required = self.config.min_attempts_required

        if attempts <= 0 or attempts < required:
            return self.no_change(
                f"Not enough attempts ({attempts}/{required})",
                total_attempts=attempts,
                required=required,
            )

        overall_rate = wins / attempts
        level_rate = self.level_progress_provider.get_completion_rate()
        weight = self.config.level_rate_weight
        weighted_rate = overall_rate * (1 - weight) + level_rate * weight

        value = 0.0
        reason = "Completion rate normal"
        if weighted_rate < self.config.low_completion_threshold:
            value = -self.config.low_completion_decrease
            reason = f"Low completion rate ({weighted_rate:.0%})"
        elif weighted_rate > self.config.high_completion_threshold:
            value = self.config.high_completion_increase
            reason = f"High completion rate ({weighted_rate:.0%})"

        self.logger.debug(
            "Completion rate %.2f (W:%d/L:%d) -> adjustment %.2f", weighted_rate, wins, losses, value
        )
        return self.result(
            value,
            reason,
            completion_rate=overall_rate,
            level_completion_rate=level_rate,
            weighted_rate=weighted_rate,
            total_wins=wins,
            total_losses=losses,
        )
