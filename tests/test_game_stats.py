from __future__ import annotations

import pytest
from pydantic import ValidationError

from dynamic_difficulty.errors import ConfigurationError
from dynamic_difficulty.game_stats import GameStats, generate_config, load_game_stats


class TestValidation:
    def test_defaults_are_valid(self):
        stats = GameStats()
        assert stats.avg_consecutive_wins == 3.5
        assert stats.target_retention_days == 7

    @pytest.mark.parametrize(
        ("field", "value", "message"),
        [
            ("avg_consecutive_wins", 0, "consecutive wins"),
            ("avg_consecutive_losses", -1, "consecutive losses"),
            ("win_rate_percentage", 120, "Win rate percentage"),
            ("difficulty_default", 12, "Difficulty default"),
            ("avg_hours_between_sessions", 0, "hours between sessions"),
            ("total_levels", 0, "Total levels"),
            ("target_retention_days", 0, "retention days"),
        ],
    )
    def test_rejects_bad_stats(self, field, value, message):
        with pytest.raises(ValidationError, match=message):
            GameStats(**{field: value})

    def test_min_must_be_below_max(self):
        with pytest.raises(ValidationError, match="less than difficulty max"):
            GameStats(difficulty_min=5.0, difficulty_max=5.0, difficulty_default=5.0)


class TestGenerateConfig:
    def test_defaults(self):
        config = generate_config(GameStats())
        win = config.modifiers["win_streak"]
        loss = config.modifiers["loss_streak"]
        decay = config.modifiers["time_decay"]
        # round half up: 3.5 -> 4
        assert win.win_threshold == 4
        assert win.max_bonus == 2.0
        assert loss.loss_threshold == 2
        assert loss.max_reduction == 2.0
        assert decay.decay_per_day == pytest.approx(2.0 / 7)
        assert decay.max_decay == 2.0
        assert decay.grace_hours == 24.0

    def test_global_settings_follow_stats(self):
        stats = GameStats(difficulty_min=2.0, difficulty_max=8.0, difficulty_default=4.0,
                          max_difficulty_change_per_session=1.5)
        settings = generate_config(stats).global_settings
        assert (settings.min_difficulty, settings.max_difficulty, settings.default_difficulty) == (2.0, 8.0, 4.0)
        assert settings.max_change_per_evaluation == 1.5

    def test_streak_thresholds_are_bounded(self):
        config = generate_config(GameStats(avg_consecutive_wins=0.2, avg_consecutive_losses=40))
        assert config.modifiers["win_streak"].win_threshold == 1
        assert config.modifiers["loss_streak"].loss_threshold == 10

    def test_time_decay_bounds(self):
        stats = GameStats(max_difficulty_change_per_session=9.0, target_retention_days=1,
                          avg_hours_between_sessions=200.0)
        decay = generate_config(stats).modifiers["time_decay"]
        assert decay.decay_per_day == 2.0
        assert decay.max_decay == 5.0
        assert decay.grace_hours == 48.0

    def test_small_change_floors_decay(self):
        stats = GameStats(max_difficulty_change_per_session=0.1, target_retention_days=30)
        decay = generate_config(stats).modifiers["time_decay"]
        assert decay.decay_per_day == 0.1
        assert decay.max_decay == 0.5

    def test_level_and_session_knobs(self):
        config = generate_config(GameStats(avg_attempts_per_level=2.5, avg_level_completion_time_seconds=120.0,
                                           avg_session_duration_minutes=4.0))
        assert config.modifiers["level_progress"].high_attempts_threshold == 5
        assert config.modifiers["level_progress"].expected_levels_per_hour == pytest.approx(30.0)
        assert config.modifiers["session_pattern"].min_normal_session_duration == 120.0

    def test_untouched_modifiers_keep_defaults(self):
        config = generate_config(GameStats())
        assert config.modifiers["rage_quit"].rage_quit_reduction == 1.0
        assert config.modifiers["completion_rate"].min_attempts_required == 10


class TestLoadGameStats:
    def test_loads_partial_file(self, tmp_path):
        path = tmp_path / "stats.json"
        path.write_text('{"avg_consecutive_wins": 5, "target_retention_days": 14}')
        stats = load_game_stats(path)
        assert stats.avg_consecutive_wins == 5
        assert stats.win_rate_percentage == 65.0

    def test_invalid_stats(self, tmp_path):
        path = tmp_path / "stats.json"
        path.write_text('{"total_levels": 0}')
        with pytest.raises(ConfigurationError, match="Invalid game stats"):
            load_game_stats(path)

    def test_missing_file(self, tmp_path):
        with pytest.raises(ConfigurationError, match="Cannot read game stats"):
            load_game_stats(tmp_path / "nope.json")
