"""Session-pattern analysis.

Baseline checks read the quit provider (session durations, last quit type,
recent rage quits). When the host also supplies a multi-session history, three
more checks look at the recent window: how many sessions were very short, how
many quits happened mid-level, and whether the last difficulty adjustment
lengthened sessions. Every check that fires adds its own penalty and reason.
"""

from __future__ import annotations

import logging
from typing import Any

from ..constants import SESSION_PATTERN
from ..modifier_config import SessionPatternConfig
from ..models import ModifierResult
from ..providers import Providers, RageQuitProvider, SessionPatternProvider
from ..registry import register_modifier
from .base import DifficultyModifier

NORMAL_REASON = "Normal session patterns"


@register_modifier(SESSION_PATTERN)
class SessionPatternModifier(DifficultyModifier):
    required_providers = ("rage_quit",)
    config: SessionPatternConfig

    def __init__(
        self,
        config: SessionPatternConfig,
        provider: RageQuitProvider,
        history_provider: SessionPatternProvider | None = None,
        *,
        logger: logging.Logger | None = None,
    ) -> None:
        super().__init__(config, logger=logger)
        self.provider = provider
        self.history_provider = history_provider

    @classmethod
    def from_providers(
        cls,
        config: SessionPatternConfig,
        providers: Providers,
        *,
        logger: logging.Logger | None = None,
    ) -> SessionPatternModifier:
        return cls(config, providers.rage_quit, providers.session_pattern, logger=logger)

    def calculate(self) -> ModifierResult:
        cfg = self.config
        current = self.provider.get_current_session_duration()
        average = self.provider.get_average_session_duration()
        rage_quits = self.provider.get_recent_rage_quit_count()
        quit_type = self.provider.get_last_quit_type()

        value = 0.0
        reasons: list[str] = []
        metadata: dict[str, Any] = {
            "current_session_duration": current,
            "average_session_duration": average,
            "recent_rage_quit_count": rage_quits,
            "last_quit_type": quit_type,
        }

        if 0 < current < cfg.very_short_session_threshold:
            value -= cfg.very_short_session_decrease
            reasons.append(f"Very short session ({current:.0f}s)")

        normal = cfg.min_normal_session_duration
        if normal > 0 and 0 < average < normal:
            shortfall = 1 - average / normal
            value -= min(shortfall * cfg.consistent_short_sessions_decrease, cfg.max_short_average_decrease)
            reasons.append(f"Short avg sessions ({average:.0f}s)")

        if rage_quits >= cfg.rage_quit_count_threshold:
            value -= cfg.rage_quit_pattern_decrease * cfg.rage_quit_penalty_multiplier
            reasons.append(f"Recent rage quits ({rage_quits})")

        if quit_type == "mid_play":
            value -= cfg.mid_level_quit_decrease
            reasons.append("Mid-level quit")

        if normal > 0 and average > 0:
            duration_ratio = average / normal
            metadata["duration_ratio"] = duration_ratio
            if duration_ratio < cfg.short_session_ratio:
                value -= (1 - duration_ratio) * cfg.consistent_short_sessions_decrease
                reasons.append(f"Pattern of short sessions ({duration_ratio:.0%})")

        if self.history_provider is not None:
            value += self._history_adjustments(self.history_provider, current, reasons, metadata)

        if not reasons:
            return self.no_change(NORMAL_REASON, **metadata)

        self.logger.debug("Session pattern -> adjustment %.2f (%s)", value, "; ".join(reasons))
        return self.result(value, ", ".join(reasons), **metadata)

    def _history_adjustments(
        self,
        history: SessionPatternProvider,
        current: float,
        reasons: list[str],
        metadata: dict[str, Any],
    ) -> float:
        cfg = self.config
        value = 0.0

        window = list(history.get_recent_session_durations(cfg.session_history_size))
        if window and len(window) >= cfg.session_history_size:
            short_count = sum(1 for duration in window if duration < cfg.very_short_session_threshold)
            short_fraction = short_count / len(window)
            metadata["short_session_fraction"] = short_fraction
            if short_fraction > cfg.short_session_ratio:
                value -= cfg.consistent_short_sessions_decrease * short_fraction
                reasons.append(f"{short_count} of last {len(window)} sessions very short")

        total_quits = history.get_total_recent_quits()
        if total_quits > 0:
            mid_ratio = history.get_recent_mid_level_quits() / total_quits
            threshold = cfg.mid_level_quit_ratio
            metadata["mid_level_quit_ratio"] = mid_ratio
            if threshold < 1 and mid_ratio > threshold:
                value -= cfg.mid_level_quit_decrease * (mid_ratio - threshold) / (1 - threshold)
                reasons.append(f"Frequent mid-level quits ({mid_ratio:.0%})")

        previous_difficulty = history.get_previous_difficulty()
        before = history.get_session_duration_before_last_adjustment()
        if previous_difficulty > 0 and before > 0 and current > 0:
            improvement = current / before
            metadata["improvement_ratio"] = improvement
            if improvement < cfg.difficulty_improvement_threshold:
                value -= cfg.ineffective_adjustment_decrease
                reasons.append(f"Last adjustment did not help ({improvement:.0%} of previous session)")

        return value
