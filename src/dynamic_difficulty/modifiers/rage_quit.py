from __future__ import annotations

import logging

from ..constants import RAGE_QUIT
from ..modifier_config import RageQuitConfig
from ..models import ModifierResult
from ..providers import RageQuitProvider
from ..registry import register_modifier
from .base import DifficultyModifier

QUIT_REASONS = {
    "rage_quit": "Rage quit detected",
    "mid_play": "Quit during play",
    "normal": "Quit after session",
}


@register_modifier(RAGE_QUIT)
class RageQuitModifier(DifficultyModifier):
    """Penalizes the last quit by its classification, plus once more for a rage-quit pattern."""

    required_providers = ("rage_quit",)
    config: RageQuitConfig

    def __init__(
        self,
        config: RageQuitConfig,
        provider: RageQuitProvider,
        *,
        logger: logging.Logger | None = None,
    ) -> None:
        super().__init__(config, logger=logger)
        self.provider = provider

    def _quit_penalty(self, quit_type: str) -> float:
        if quit_type == "rage_quit":
            return self.config.rage_quit_reduction
        if quit_type == "mid_play":
            return self.config.mid_play_reduction
        return self.config.quit_reduction

    def calculate(self) -> ModifierResult:
        quit_type = self.provider.get_last_quit_type()
        rage_quit_count = self.provider.get_recent_rage_quit_count()
        current_duration = self.provider.get_current_session_duration()
        average_duration = self.provider.get_average_session_duration()

        value = -self._quit_penalty(quit_type)
        reasons = [QUIT_REASONS.get(quit_type, QUIT_REASONS["normal"])]

        pattern = rage_quit_count >= self.config.rage_quit_count_threshold
        if pattern:
            value -= self.config.rage_quit_reduction * self.config.penalty_multiplier
            reasons.append(f"{rage_quit_count} recent rage quits")

        self.logger.debug(
            "Quit type %s, %d recent rage quits -> adjustment %.2f", quit_type, rage_quit_count, value
        )
        return self.result(
            value,
            ", ".join(reasons),
            quit_type=quit_type,
            recent_rage_quit_count=rage_quit_count,
            rage_quit_pattern=pattern,
            current_session_duration=current_duration,
            average_session_duration=average_duration,
        )
