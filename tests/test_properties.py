"""Property tests for the pipeline guarantees.

Whatever the modifiers return and whatever the host has stored, an
evaluation yields a finite difficulty inside the configured range that moved
by at most the configured step.
"""

from __future__ import annotations

import math

from hypothesis import HealthCheck, given, settings
from hypothesis import strategies as st

from dynamic_difficulty.aggregator import aggregate_diminishing, aggregate_max, aggregate_sum
from dynamic_difficulty.calculator import DifficultyCalculator
from dynamic_difficulty.logging import null_logger
from dynamic_difficulty.modifier_config import GlobalConfig, LossStreakConfig, TimeDecayConfig, WinStreakConfig
from dynamic_difficulty.models import ModifierResult
from dynamic_difficulty.modifiers.loss_streak import LossStreakModifier
from dynamic_difficulty.modifiers.time_decay import TimeDecayModifier
from dynamic_difficulty.modifiers.win_streak import WinStreakModifier

from .fakes import FIXED_NOW, FakeData, FakeStreaks, FakeTimeAway, StubModifier

PROPERTY_SETTINGS = settings(
    max_examples=200,
    suppress_health_check=[HealthCheck.too_slow],
    deadline=None,
)

QUIET = null_logger("dynamic_difficulty.tests.properties")

any_value = st.one_of(
    st.floats(min_value=-1e6, max_value=1e6, allow_nan=False),
    st.sampled_from([math.nan, math.inf, -math.inf]),
)
stored_difficulty = st.one_of(st.none(), st.floats(allow_nan=True, allow_infinity=True))
finite_values = st.floats(min_value=-100, max_value=100, allow_nan=False, allow_infinity=False)

global_configs = st.builds(
    GlobalConfig,
    min_difficulty=st.floats(min_value=-50, max_value=50),
    max_difficulty=st.floats(min_value=-50, max_value=50),
    default_difficulty=st.floats(min_value=-50, max_value=50),
    max_change_per_evaluation=st.floats(min_value=0, max_value=20),
    aggregation_strategy=st.sampled_from(["sum", "weighted", "max", "diminishing"]),
    diminishing_factor=st.floats(min_value=0, max_value=1),
)


def _calculator(config: GlobalConfig | None = None) -> DifficultyCalculator:
    return DifficultyCalculator(config, logger=QUIET, clock=lambda: FIXED_NOW)


class TestPipelineBounds:
    @given(values=st.lists(any_value, max_size=8), stored=stored_difficulty, config=global_configs)
    @PROPERTY_SETTINGS
    def test_result_is_finite_and_in_range(self, values, stored, config):
        modifiers = [StubModifier(v, name=f"m{i}") for i, v in enumerate(values)]
        result = _calculator(config).calculate(modifiers, FakeData(difficulty=stored))
        assert math.isfinite(result.new_difficulty)
        assert config.min_difficulty <= result.new_difficulty <= config.max_difficulty

    @given(values=st.lists(any_value, max_size=8), stored=stored_difficulty, config=global_configs)
    @PROPERTY_SETTINGS
    def test_step_is_bounded(self, values, stored, config):
        modifiers = [StubModifier(v, name=f"m{i}") for i, v in enumerate(values)]
        result = _calculator(config).calculate(modifiers, FakeData(difficulty=stored))
        assert abs(result.total_adjustment) <= config.max_change_per_evaluation + 1e-9

    @given(values=st.lists(finite_values, max_size=8), stored=st.floats(min_value=1, max_value=10))
    @PROPERTY_SETTINGS
    def test_evaluation_is_deterministic(self, values, stored):
        modifiers = [StubModifier(v, name=f"m{i}") for i, v in enumerate(values)]
        first = _calculator().calculate(modifiers, FakeData(difficulty=stored))
        second = _calculator().calculate(modifiers, FakeData(difficulty=stored))
        assert first == second

    @given(config=global_configs)
    @PROPERTY_SETTINGS
    def test_corrected_range_is_consistent(self, config):
        assert config.min_difficulty <= config.default_difficulty <= config.max_difficulty


class TestAggregation:
    @given(values=st.lists(finite_values, max_size=10))
    @PROPERTY_SETTINGS
    def test_sum_matches_plain_sum(self, values):
        results = [ModifierResult(name=f"m{i}", value=v, reason="") for i, v in enumerate(values)]
        assert aggregate_sum(results) == sum(values, 0.0)

    @given(values=st.lists(finite_values, min_size=1, max_size=10), factor=st.floats(min_value=0, max_value=1))
    @PROPERTY_SETTINGS
    def test_diminishing_never_exceeds_sum_of_magnitudes(self, values, factor):
        results = [ModifierResult(name=f"m{i}", value=v, reason="") for i, v in enumerate(values)]
        assert abs(aggregate_diminishing(results, factor)) <= sum(abs(v) for v in values) + 1e-9
        assert abs(aggregate_max(results)) == max(abs(v) for v in values)


class TestMonotonicModifiers:
    @given(a=st.integers(min_value=-5, max_value=100), b=st.integers(min_value=-5, max_value=100))
    @PROPERTY_SETTINGS
    def test_longer_win_streak_never_eases(self, a, b):
        low, high = sorted((a, b))
        config = WinStreakConfig()
        low_value = WinStreakModifier(config, FakeStreaks(win_streak=low), logger=QUIET).calculate().value
        high_value = WinStreakModifier(config, FakeStreaks(win_streak=high), logger=QUIET).calculate().value
        assert 0.0 <= low_value <= high_value <= config.max_bonus

    @given(a=st.integers(min_value=-5, max_value=100), b=st.integers(min_value=-5, max_value=100))
    @PROPERTY_SETTINGS
    def test_longer_loss_streak_never_hardens(self, a, b):
        low, high = sorted((a, b))
        config = LossStreakConfig()
        low_value = LossStreakModifier(config, FakeStreaks(loss_streak=low), logger=QUIET).calculate().value
        high_value = LossStreakModifier(config, FakeStreaks(loss_streak=high), logger=QUIET).calculate().value
        assert -config.max_reduction <= high_value <= low_value <= 0.0

    @given(a=st.floats(min_value=-48, max_value=5000), b=st.floats(min_value=-48, max_value=5000))
    @PROPERTY_SETTINGS
    def test_longer_absence_never_hardens(self, a, b):
        low, high = sorted((a, b))
        config = TimeDecayConfig()
        low_value = TimeDecayModifier(config, FakeTimeAway(hours=low), logger=QUIET).calculate().value
        high_value = TimeDecayModifier(config, FakeTimeAway(hours=high), logger=QUIET).calculate().value
        assert -config.max_decay <= high_value <= low_value <= 0.0
