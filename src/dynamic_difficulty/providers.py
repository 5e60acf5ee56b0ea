"""Read-only capability contracts over the host's telemetry and save data.

A modifier only runs when every provider it needs is supplied; see
``DifficultyModifier.required_providers``.
"""

from __future__ import annotations

from dataclasses import dataclass, fields
from datetime import datetime, timedelta
from typing import Protocol, Sequence, runtime_checkable

from .models import QuitType


@runtime_checkable
class DataProvider(Protocol):
    def get_current_difficulty(self) -> float | None: ...

    def set_current_difficulty(self, value: float) -> None: ...


@runtime_checkable
class WinStreakProvider(Protocol):
    def get_win_streak(self) -> int: ...

    def get_loss_streak(self) -> int: ...

    def get_total_wins(self) -> int: ...

    def get_total_losses(self) -> int: ...


@runtime_checkable
class TimeDecayProvider(Protocol):
    def get_last_play_time(self) -> datetime | None: ...

    def get_time_since_last_play(self) -> timedelta: ...

    def get_days_away_from_game(self) -> int: ...


@runtime_checkable
class RageQuitProvider(Protocol):
    def get_last_quit_type(self) -> QuitType: ...

    def get_current_session_duration(self) -> float: ...

    def get_average_session_duration(self) -> float: ...

    def get_recent_rage_quit_count(self) -> int: ...


@runtime_checkable
class LevelProgressProvider(Protocol):
    def get_current_level(self) -> int: ...

    def get_attempts_on_current_level(self) -> int: ...

    def get_average_completion_time(self) -> float: ...

    def get_completion_rate(self) -> float: ...

    def get_current_level_difficulty(self) -> float: ...

    def get_current_level_time_percentage(self) -> float: ...


@runtime_checkable
class SessionPatternProvider(Protocol):
    """Multi-session history. Optional; only session_pattern uses it."""

    def get_recent_session_durations(self, count: int) -> Sequence[float]: ...

    def get_total_recent_quits(self) -> int: ...

    def get_recent_mid_level_quits(self) -> int: ...

    def get_previous_difficulty(self) -> float: ...

    def get_session_duration_before_last_adjustment(self) -> float: ...


@dataclass(frozen=True)
class Providers:
    """The capabilities a host supplies. ``None`` means the capability is absent."""

    data: DataProvider | None = None
    win_streak: WinStreakProvider | None = None
    time_decay: TimeDecayProvider | None = None
    rage_quit: RageQuitProvider | None = None
    level_progress: LevelProgressProvider | None = None
    session_pattern: SessionPatternProvider | None = None

    def has(self, *names: str) -> bool:
        return all(getattr(self, name) is not None for name in names)

    def available(self) -> list[str]:
        return [f.name for f in fields(self) if getattr(self, f.name) is not None]
