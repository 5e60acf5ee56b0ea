from __future__ import annotations

import logging

from ..constants import DAYS_IN_WEEK, HOURS_IN_DAY, SECONDS_IN_HOUR, TIME_DECAY
from ..modifier_config import TimeDecayConfig
from ..models import ModifierResult
from ..providers import TimeDecayProvider
from ..registry import register_modifier
from .base import DifficultyModifier


def describe_absence(hours: float) -> str:
    if hours < HOURS_IN_DAY:
        return f"Away for {hours:.1f} hours"
    days = hours / HOURS_IN_DAY
    if days < DAYS_IN_WEEK:
        return f"Away for {days:.1f} days"
    return f"Away for {days / DAYS_IN_WEEK:.1f} weeks"


@register_modifier(TIME_DECAY)
class TimeDecayModifier(DifficultyModifier):
    """Eases returning players back in.

    Decay accrues per fractional day once the grace period has passed, so a
    36 hour absence costs one and a half days of decay, and flattens at
    ``max_decay``.
    """

    required_providers = ("time_decay",)
    config: TimeDecayConfig

    def __init__(
        self,
        config: TimeDecayConfig,
        provider: TimeDecayProvider,
        *,
        logger: logging.Logger | None = None,
    ) -> None:
        super().__init__(config, logger=logger)
        self.provider = provider

    def calculate(self) -> ModifierResult:
        elapsed = self.provider.get_time_since_last_play()
        # Clock skew can produce a negative duration.
        hours = max(elapsed.total_seconds() / SECONDS_IN_HOUR, 0.0)

        if hours <= self.config.grace_hours:
            return self.no_change("Recently played", hours_away=hours, grace_hours=self.config.grace_hours)

        days_away = hours / HOURS_IN_DAY
        value = -min(self.config.decay_per_day * days_away, self.config.max_decay)
        self.logger.debug("Time decay: %.1f hours away -> %.2f adjustment", hours, value)
        return self.result(
            value,
            describe_absence(hours),
            hours_away=hours,
            days_away=days_away,
            capped=value == -self.config.max_decay,
        )
