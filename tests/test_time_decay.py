from __future__ import annotations

from datetime import timedelta

import pytest

from dynamic_difficulty.modifier_config import TimeDecayConfig
from dynamic_difficulty.modifiers.time_decay import TimeDecayModifier, describe_absence

from .fakes import FakeTimeAway


def _calculate(hours: float, **config):
    return TimeDecayModifier(TimeDecayConfig(**config), FakeTimeAway(hours=hours)).calculate()


@pytest.mark.parametrize(
    ("hours", "expected"),
    [(0, 0.0), (6, 0.0), (24, -0.5), (36, -0.75), (96, -2.0), (240, -2.0)],
)
def test_decay_examples(hours: float, expected: float) -> None:
    assert _calculate(hours).value == pytest.approx(expected)


def test_partial_days_produce_partial_penalty() -> None:
    # 12h away, just past a 6h grace: half a day of decay
    assert _calculate(12).value == pytest.approx(-0.25)


def test_within_grace_reports_recent_play() -> None:
    result = _calculate(2)
    assert result.value == 0.0
    assert result.reason == "Recently played"


def test_negative_duration_counts_as_zero() -> None:
    class SkewedClock(FakeTimeAway):
        def get_time_since_last_play(self) -> timedelta:
            return timedelta(hours=-30)

    result = TimeDecayModifier(TimeDecayConfig(), SkewedClock()).calculate()
    assert result.value == 0.0


def test_capped_flag_in_metadata() -> None:
    assert _calculate(500).metadata["capped"] is True
    assert _calculate(30).metadata["capped"] is False


def test_zero_grace_decays_immediately() -> None:
    assert _calculate(1, grace_hours=0).value == pytest.approx(-0.5 / 24)


class TestDescribeAbsence:
    def test_hours(self):
        assert describe_absence(7.5) == "Away for 7.5 hours"

    def test_days(self):
        assert describe_absence(60) == "Away for 2.5 days"

    def test_weeks(self):
        assert describe_absence(24 * 14) == "Away for 2.0 weeks"
