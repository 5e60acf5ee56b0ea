"""Fixtures shared across the test suite."""

from __future__ import annotations

import logging

import pytest

from dynamic_difficulty.logging import null_logger
from dynamic_difficulty.providers import Providers

from .fakes import FIXED_NOW, FakeData, FakeHistory, FakeLevelProgress, FakeQuits, FakeStreaks, FakeTimeAway


@pytest.fixture
def quiet_logger() -> logging.Logger:
    return null_logger("dynamic_difficulty.tests")


@pytest.fixture
def fixed_clock():
    return lambda: FIXED_NOW


@pytest.fixture
def full_providers() -> Providers:
    return Providers(
        data=FakeData(difficulty=5.0),
        win_streak=FakeStreaks(),
        time_decay=FakeTimeAway(),
        rage_quit=FakeQuits(),
        level_progress=FakeLevelProgress(),
        session_pattern=FakeHistory(),
    )
