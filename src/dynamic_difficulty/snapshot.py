"""In-memory provider over a single player snapshot.

A snapshot is what a host would otherwise serve from its save store: each
optional section backs one provider contract, and a section left out disables
the modifiers that depend on it.
"""

from __future__ import annotations

import logging
from datetime import datetime, timedelta
from pathlib import Path
from typing import Annotated, Sequence

from pydantic import BaseModel, ConfigDict, Field, ValidationError

from .constants import HOURS_IN_DAY, MAX_HOURS_AWAY
from .errors import SnapshotError
from .models import QuitType
from .providers import Providers

logger = logging.getLogger(__name__)

NonNegative = Annotated[float, Field(ge=0)]
Count = Annotated[int, Field(ge=0)]


class _Section(BaseModel):
    model_config = ConfigDict(extra="forbid", allow_inf_nan=False)


class StreakStats(_Section):
    win_streak: Count = 0
    loss_streak: Count = 0
    total_wins: Count = 0
    total_losses: Count = 0


class TimeAwayStats(_Section):
    last_play_time: datetime | None = None
    hours_since_last_play: float = 0.0


class QuitStats(_Section):
    last_quit_type: QuitType = "normal"
    # seconds
    current_session_duration: NonNegative = 0.0
    average_session_duration: NonNegative = 0.0
    recent_rage_quit_count: Count = 0


class LevelProgressStats(_Section):
    current_level: Count = 0
    attempts_on_current_level: Count = 0
    # seconds
    average_completion_time: NonNegative = 0.0
    completion_rate: Annotated[float, Field(ge=0, le=1)] = 0.0
    current_level_difficulty: NonNegative = 0.0
    # actual / expected completion time, 0 when unknown
    current_level_time_percentage: NonNegative = 0.0


class SessionHistory(_Section):
    # oldest first, seconds
    recent_session_durations: list[NonNegative] = Field(default_factory=list)
    total_recent_quits: Count = 0
    recent_mid_level_quits: Count = 0
    previous_difficulty: NonNegative = 0.0
    session_duration_before_last_adjustment: NonNegative = 0.0


class PlayerSnapshot(_Section):
    current_difficulty: float | None = None
    streaks: StreakStats | None = None
    time_away: TimeAwayStats | None = None
    quits: QuitStats | None = None
    level_progress: LevelProgressStats | None = None
    session_history: SessionHistory | None = None


class SnapshotProvider:
    """Implements every provider contract over one ``PlayerSnapshot``.

    Only ``set_current_difficulty`` mutates state, and only this provider's
    copy of the difficulty; the snapshot itself is left untouched.
    """

    def __init__(self, snapshot: PlayerSnapshot) -> None:
        self.snapshot = snapshot
        self.current_difficulty = snapshot.current_difficulty
        self._streaks = snapshot.streaks or StreakStats()
        self._time_away = snapshot.time_away or TimeAwayStats()
        self._quits = snapshot.quits or QuitStats()
        self._level = snapshot.level_progress or LevelProgressStats()
        self._history = snapshot.session_history or SessionHistory()

    # DataProvider
    def get_current_difficulty(self) -> float | None:
        return self.current_difficulty

    def set_current_difficulty(self, value: float) -> None:
        self.current_difficulty = value

    # WinStreakProvider
    def get_win_streak(self) -> int:
        return self._streaks.win_streak

    def get_loss_streak(self) -> int:
        return self._streaks.loss_streak

    def get_total_wins(self) -> int:
        return self._streaks.total_wins

    def get_total_losses(self) -> int:
        return self._streaks.total_losses

    # TimeDecayProvider
    def get_last_play_time(self) -> datetime | None:
        return self._time_away.last_play_time

    def _hours_away(self) -> float:
        hours = self._time_away.hours_since_last_play
        return max(-MAX_HOURS_AWAY, min(hours, MAX_HOURS_AWAY))

    def get_time_since_last_play(self) -> timedelta:
        return timedelta(hours=self._hours_away())

    def get_days_away_from_game(self) -> int:
        return max(int(self._hours_away() // HOURS_IN_DAY), 0)

    # RageQuitProvider
    def get_last_quit_type(self) -> QuitType:
        return self._quits.last_quit_type

    def get_current_session_duration(self) -> float:
        return self._quits.current_session_duration

    def get_average_session_duration(self) -> float:
        return self._quits.average_session_duration

    def get_recent_rage_quit_count(self) -> int:
        return self._quits.recent_rage_quit_count

    # LevelProgressProvider
    def get_current_level(self) -> int:
        return self._level.current_level

    def get_attempts_on_current_level(self) -> int:
        return self._level.attempts_on_current_level

    def get_average_completion_time(self) -> float:
        return self._level.average_completion_time

    def get_completion_rate(self) -> float:
        return self._level.completion_rate

    def get_current_level_difficulty(self) -> float:
        return self._level.current_level_difficulty

    def get_current_level_time_percentage(self) -> float:
        return self._level.current_level_time_percentage

    # SessionPatternProvider
    def get_recent_session_durations(self, count: int) -> Sequence[float]:
        if count <= 0:
            return []
        return list(self._history.recent_session_durations[-count:])

    def get_total_recent_quits(self) -> int:
        return self._history.total_recent_quits

    def get_recent_mid_level_quits(self) -> int:
        return self._history.recent_mid_level_quits

    def get_previous_difficulty(self) -> float:
        return self._history.previous_difficulty

    def get_session_duration_before_last_adjustment(self) -> float:
        return self._history.session_duration_before_last_adjustment


def providers_from_snapshot(snapshot: PlayerSnapshot) -> tuple[Providers, SnapshotProvider]:
    """Expose only the contracts whose snapshot section is present.

    Returns the bundle plus the backing provider, which also serves as the
    ``DataProvider`` that an apply step writes to.
    """
    provider = SnapshotProvider(snapshot)
    providers = Providers(
        data=provider,
        win_streak=provider if snapshot.streaks is not None else None,
        time_decay=provider if snapshot.time_away is not None else None,
        rage_quit=provider if snapshot.quits is not None else None,
        level_progress=provider if snapshot.level_progress is not None else None,
        session_pattern=provider if snapshot.session_history is not None else None,
    )
    logger.debug("Snapshot providers available: %s", ", ".join(providers.available()))
    return providers, provider


def load_snapshot(path: str | Path) -> PlayerSnapshot:
    snapshot_path = Path(path)
    try:
        return PlayerSnapshot.model_validate_json(snapshot_path.read_text(encoding="utf-8"))
    except OSError as exc:
        raise SnapshotError(f"Cannot read snapshot {snapshot_path}: {exc}") from exc
    except ValidationError as exc:
        raise SnapshotError(f"Invalid snapshot {snapshot_path}: {exc}") from exc
