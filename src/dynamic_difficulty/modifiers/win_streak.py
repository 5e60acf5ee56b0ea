from __future__ import annotations

import logging

from ..constants import WIN_STREAK
from ..modifier_config import WinStreakConfig
from ..models import ModifierResult
from ..providers import WinStreakProvider
from ..registry import register_modifier
from .base import DifficultyModifier, capped_streak_value


@register_modifier(WIN_STREAK)
class WinStreakModifier(DifficultyModifier):
    """Raises difficulty once consecutive wins reach the threshold."""

    required_providers = ("win_streak",)
    config: WinStreakConfig

    def __init__(
        self,
        config: WinStreakConfig,
        provider: WinStreakProvider,
        *,
        logger: logging.Logger | None = None,
    ) -> None:
        super().__init__(config, logger=logger)
        self.provider = provider

    def calculate(self) -> ModifierResult:
        streak = self.provider.get_win_streak()
        value, capped = capped_streak_value(
            streak, self.config.win_threshold, self.config.step_size, self.config.max_bonus
        )
        if value == 0.0:
            return self.no_change("No win streak", win_streak=streak, threshold=self.config.win_threshold)

        reason = f"Win streak: {streak} consecutive wins"
        if capped:
            reason += " (capped)"
        self.logger.debug("Win streak %d -> adjustment %.2f", streak, value)
        return self.result(
            value,
            reason,
            win_streak=streak,
            threshold=self.config.win_threshold,
            capped=capped,
        )
