"""Reducers that fold modifier contributions into one difficulty delta.

Every strategy returns 0 for an empty input.
"""

from __future__ import annotations

from collections.abc import Callable, Mapping, Sequence

from .constants import DEFAULT_AGGREGATION_WEIGHT, DEFAULT_DIMINISHING_FACTOR
from .modifier_config import AggregationStrategy, GlobalConfig
from .models import ModifierResult


def aggregate_sum(results: Sequence[ModifierResult]) -> float:
    return sum((result.value for result in results), 0.0)


def aggregate_weighted(
    results: Sequence[ModifierResult],
    weights: Mapping[str, float] | None = None,
) -> float:
    """Weighted average keyed by modifier name; unlisted modifiers weigh 1."""
    weights = weights or {}
    total_weight = 0.0
    weighted_sum = 0.0
    for result in results:
        weight = weights.get(result.name, DEFAULT_AGGREGATION_WEIGHT)
        weighted_sum += result.value * weight
        total_weight += weight
    if total_weight <= 0:
        return 0.0
    return weighted_sum / total_weight


def aggregate_max(results: Sequence[ModifierResult]) -> float:
    """The single largest-magnitude value; the earliest one wins a tie."""
    if not results:
        return 0.0
    strongest = results[0]
    for result in results[1:]:
        if abs(result.value) > abs(strongest.value):
            strongest = result
    return strongest.value


def aggregate_diminishing(
    results: Sequence[ModifierResult],
    factor: float = DEFAULT_DIMINISHING_FACTOR,
) -> float:
    """Strongest signal counts fully, each following one ``factor`` times less."""
    ordered = sorted(results, key=lambda result: abs(result.value), reverse=True)
    total = 0.0
    multiplier = 1.0
    for result in ordered:
        total += result.value * multiplier
        multiplier *= factor
    return total


class ModifierAggregator:
    """Applies the strategy selected by ``GlobalConfig.aggregation_strategy``."""

    def __init__(self, config: GlobalConfig | None = None) -> None:
        self.config = config or GlobalConfig()
        self._strategies: dict[str, Callable[[Sequence[ModifierResult]], float]] = {
            "sum": aggregate_sum,
            "weighted": lambda results: aggregate_weighted(results, self.config.aggregation_weights),
            "max": aggregate_max,
            "diminishing": lambda results: aggregate_diminishing(results, self.config.diminishing_factor),
        }

    @property
    def strategy(self) -> AggregationStrategy:
        return self.config.aggregation_strategy

    def aggregate(self, results: Sequence[ModifierResult], strategy: AggregationStrategy | None = None) -> float:
        if not results:
            return 0.0
        name = strategy or self.strategy
        reducer = self._strategies.get(name)
        if reducer is None:
            raise ValueError(f"Unknown aggregation strategy: {name!r}")
        return reducer(results)
