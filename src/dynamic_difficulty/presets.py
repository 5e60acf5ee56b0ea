"""Pre-built player snapshots for quick evaluation from the command line."""

from __future__ import annotations

from .snapshot import (
    LevelProgressStats,
    PlayerSnapshot,
    QuitStats,
    SessionHistory,
    StreakStats,
    TimeAwayStats,
)

NEW_PLAYER = PlayerSnapshot(
    current_difficulty=0.0,
    streaks=StreakStats(),
    time_away=TimeAwayStats(),
    quits=QuitStats(),
    level_progress=LevelProgressStats(),
    session_history=SessionHistory(),
)

WIN_STREAK = PlayerSnapshot(
    current_difficulty=4.0,
    streaks=StreakStats(win_streak=6, total_wins=32, total_losses=8),
    time_away=TimeAwayStats(hours_since_last_play=3.0),
    quits=QuitStats(current_session_duration=600.0, average_session_duration=540.0),
    level_progress=LevelProgressStats(
        current_level=24,
        attempts_on_current_level=1,
        average_completion_time=150.0,
        completion_rate=0.85,
        current_level_difficulty=3.5,
        current_level_time_percentage=0.6,
    ),
)

LOSS_STREAK = PlayerSnapshot(
    current_difficulty=5.0,
    streaks=StreakStats(loss_streak=5, total_wins=9, total_losses=14),
    time_away=TimeAwayStats(hours_since_last_play=1.0),
    quits=QuitStats(current_session_duration=420.0, average_session_duration=480.0),
    level_progress=LevelProgressStats(
        current_level=12,
        attempts_on_current_level=7,
        average_completion_time=300.0,
        completion_rate=0.35,
        current_level_difficulty=2.5,
        current_level_time_percentage=1.8,
    ),
)

RETURNING_PLAYER = PlayerSnapshot(
    current_difficulty=6.0,
    streaks=StreakStats(total_wins=40, total_losses=25),
    time_away=TimeAwayStats(hours_since_last_play=24.0 * 10),
    quits=QuitStats(average_session_duration=900.0),
)

FRUSTRATED_PLAYER = PlayerSnapshot(
    current_difficulty=4.5,
    streaks=StreakStats(loss_streak=3, total_wins=6, total_losses=15),
    time_away=TimeAwayStats(hours_since_last_play=0.5),
    quits=QuitStats(
        last_quit_type="rage_quit",
        current_session_duration=45.0,
        average_session_duration=90.0,
        recent_rage_quit_count=3,
    ),
    level_progress=LevelProgressStats(
        current_level=8,
        attempts_on_current_level=9,
        average_completion_time=200.0,
        completion_rate=0.2,
        current_level_difficulty=1.5,
        current_level_time_percentage=2.2,
    ),
    session_history=SessionHistory(
        recent_session_durations=[50.0, 40.0, 300.0, 35.0, 45.0],
        total_recent_quits=5,
        recent_mid_level_quits=4,
        previous_difficulty=5.0,
        session_duration_before_last_adjustment=60.0,
    ),
)

STEADY_PLAYER = PlayerSnapshot(
    current_difficulty=5.0,
    streaks=StreakStats(win_streak=1, total_wins=30, total_losses=20),
    time_away=TimeAwayStats(hours_since_last_play=4.0),
    quits=QuitStats(current_session_duration=720.0, average_session_duration=700.0),
    level_progress=LevelProgressStats(
        current_level=15,
        attempts_on_current_level=2,
        average_completion_time=240.0,
        completion_rate=0.6,
        current_level_difficulty=2.5,
        current_level_time_percentage=1.0,
    ),
    session_history=SessionHistory(
        recent_session_durations=[650.0, 700.0, 720.0, 690.0, 710.0],
        total_recent_quits=5,
    ),
)

PRESETS: dict[str, PlayerSnapshot] = {
    "new_player": NEW_PLAYER,
    "win_streak": WIN_STREAK,
    "loss_streak": LOSS_STREAK,
    "returning_player": RETURNING_PLAYER,
    "frustrated_player": FRUSTRATED_PLAYER,
    "steady_player": STEADY_PLAYER,
}

PRESET_DESCRIPTIONS: dict[str, str] = {
    "new_player": "First session, no history and no stored difficulty",
    "win_streak": "Six wins in a row, clearing hard levels quickly",
    "loss_streak": "Five losses in a row, stuck on the current level",
    "returning_player": "Back after ten days away",
    "frustrated_player": "Repeated rage quits and very short sessions",
    "steady_player": "Balanced results and normal session lengths",
}
