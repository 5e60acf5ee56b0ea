"""Single-pass evaluation pipeline.

read current difficulty -> run enabled modifiers by priority -> aggregate ->
clamp the delta -> clamp the result. Faults in one modifier never abort the
evaluation, and the returned difficulty is always finite and within range.
"""

from __future__ import annotations

import logging
import math
import time
from collections.abc import Callable, Sequence
from datetime import UTC, datetime

from .aggregator import ModifierAggregator
from .constants import NO_CHANGE_REASON
from .modifier_config import DifficultyConfig, GlobalConfig
from .modifiers.base import DifficultyModifier
from .models import DifficultyResult, ModifierResult
from .providers import DataProvider

DEFAULT_SLOW_MODIFIER_MS = 20.0


def utc_now() -> datetime:
    return datetime.now(UTC)


def clamp(value: float, low: float, high: float) -> float:
    return max(low, min(value, high))


def primary_reason(results: Sequence[ModifierResult]) -> str:
    """Reason of the largest-magnitude non-zero result; earlier execution wins ties."""
    contributing = [result for result in results if result.applied]
    if not contributing:
        return NO_CHANGE_REASON
    return max(contributing, key=lambda result: abs(result.value)).reason


class DifficultyCalculator:
    def __init__(
        self,
        config: GlobalConfig | DifficultyConfig | None = None,
        *,
        aggregator: ModifierAggregator | None = None,
        logger: logging.Logger | None = None,
        clock: Callable[[], datetime] = utc_now,
        slow_modifier_ms: float = DEFAULT_SLOW_MODIFIER_MS,
    ) -> None:
        if isinstance(config, DifficultyConfig):
            config = config.global_settings
        self.config = config or GlobalConfig()
        self.aggregator = aggregator or ModifierAggregator(self.config)
        self.logger = logger or logging.getLogger(__name__)
        self.clock = clock
        self.slow_modifier_ms = slow_modifier_ms

    def current_difficulty(self, data_provider: DataProvider | None) -> float:
        """Stored difficulty, clamped into range; the default when it is unusable."""
        cfg = self.config
        if data_provider is None:
            return cfg.default_difficulty
        try:
            raw = data_provider.get_current_difficulty()
        except Exception:
            self.logger.exception("Reading current difficulty failed, using default")
            return cfg.default_difficulty

        if raw is None or not math.isfinite(raw) or raw <= 0:
            return cfg.default_difficulty
        return clamp(float(raw), cfg.min_difficulty, cfg.max_difficulty)

    def run_modifiers(self, modifiers: Sequence[DifficultyModifier]) -> list[ModifierResult]:
        # sorted() is stable, so equal priorities keep registration order.
        active = sorted((m for m in modifiers if m.is_enabled), key=lambda m: m.priority)
        results: list[ModifierResult] = []
        for modifier in active:
            started = time.perf_counter()
            try:
                result = modifier.calculate()
            except Exception:
                self.logger.exception(
                    "Modifier %s failed, contributing nothing",
                    modifier.name,
                    extra={"dd_modifier": modifier.name},
                )
                continue
            duration_ms = (time.perf_counter() - started) * 1000

            if duration_ms > self.slow_modifier_ms:
                self.logger.warning(
                    "Modifier %s took %.1fms (threshold %.1fms)",
                    modifier.name,
                    duration_ms,
                    self.slow_modifier_ms,
                    extra={"dd_modifier": modifier.name, "dd_duration_ms": round(duration_ms, 3)},
                )
            if not math.isfinite(result.value):
                self.logger.error(
                    "Modifier %s returned non-finite value %r, contributing nothing",
                    modifier.name,
                    result.value,
                    extra={"dd_modifier": modifier.name, "dd_value": repr(result.value)},
                )
                continue
            results.append(result)
        return results

    def calculate(
        self,
        modifiers: Sequence[DifficultyModifier],
        data_provider: DataProvider | None = None,
    ) -> DifficultyResult:
        cfg = self.config
        current = self.current_difficulty(data_provider)
        results = self.run_modifiers(modifiers)

        try:
            aggregate = self.aggregator.aggregate(results)
        except Exception:
            self.logger.exception("Aggregation failed, applying no change")
            aggregate = 0.0
        if not math.isfinite(aggregate):
            self.logger.error("Aggregate %r is not finite, applying no change", aggregate)
            aggregate = 0.0

        max_change = cfg.max_change_per_evaluation
        delta = clamp(aggregate, -max_change, max_change)
        if delta != aggregate:
            self.logger.debug("Clamped delta %.3f to %.3f", aggregate, delta)

        unclamped = current + delta
        new_difficulty = clamp(unclamped, cfg.min_difficulty, cfg.max_difficulty)
        if new_difficulty != unclamped:
            self.logger.debug("Clamped difficulty %.3f to %.3f", unclamped, new_difficulty)

        result = DifficultyResult(
            previous_difficulty=current,
            new_difficulty=new_difficulty,
            applied_modifiers=results,
            primary_reason=primary_reason(results),
            evaluated_at=self.clock(),
        )
        self.logger.log(
            logging.INFO if cfg.debug_logs else logging.DEBUG,
            "Difficulty %.2f -> %.2f (%s)",
            result.previous_difficulty,
            result.new_difficulty,
            result.primary_reason,
            extra={"dd_previous": result.previous_difficulty, "dd_new": result.new_difficulty},
        )
        return result
