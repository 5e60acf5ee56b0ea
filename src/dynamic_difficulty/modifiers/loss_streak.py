from __future__ import annotations

import logging

from ..constants import LOSS_STREAK
from ..modifier_config import LossStreakConfig
from ..models import ModifierResult
from ..providers import WinStreakProvider
from ..registry import register_modifier
from .base import DifficultyModifier, capped_streak_value


@register_modifier(LOSS_STREAK)
class LossStreakModifier(DifficultyModifier):
    """Mirror of the win-streak response: lowers difficulty after consecutive losses."""

    required_providers = ("win_streak",)
    config: LossStreakConfig

    def __init__(
        self,
        config: LossStreakConfig,
        provider: WinStreakProvider,
        *,
        logger: logging.Logger | None = None,
    ) -> None:
        super().__init__(config, logger=logger)
        self.provider = provider

    def calculate(self) -> ModifierResult:
        streak = self.provider.get_loss_streak()
        magnitude, capped = capped_streak_value(
            streak, self.config.loss_threshold, self.config.step_size, self.config.max_reduction
        )
        if magnitude == 0.0:
            return self.no_change("No loss streak", loss_streak=streak, threshold=self.config.loss_threshold)

        value = -magnitude
        reason = f"Loss streak: {streak} consecutive losses"
        if capped:
            reason += " (capped)"
        self.logger.debug("Loss streak %d -> adjustment %.2f", streak, value)
        return self.result(
            value,
            reason,
            loss_streak=streak,
            threshold=self.config.loss_threshold,
            capped=capped,
        )
