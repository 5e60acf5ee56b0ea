from __future__ import annotations

import json
import logging

import pytest
from pydantic import ValidationError

from dynamic_difficulty.constants import MODIFIER_TYPES_IN_ORDER
from dynamic_difficulty.errors import ConfigurationError, UnknownModifierError
from dynamic_difficulty.modifier_config import (
    CONFIG_TYPES,
    CompletionRateConfig,
    DifficultyConfig,
    GlobalConfig,
    WinStreakConfig,
    dump_config,
    load_config,
    parse_modifier_config,
    register_config,
)
from dynamic_difficulty.modifiers import build_modifiers
from dynamic_difficulty.providers import Providers
from dynamic_difficulty.registry import (
    MODIFIER_TYPES,
    get_modifier_class,
    register_modifier,
    registered_modifier_types,
)

from .fakes import FakeStreaks


class TestDefaults:
    def test_every_modifier_has_a_record(self):
        config = DifficultyConfig.default()
        assert list(config.modifiers) == list(MODIFIER_TYPES_IN_ORDER)
        assert all(config.is_enabled(name) for name in MODIFIER_TYPES_IN_ORDER)

    def test_global_defaults(self):
        settings = GlobalConfig()
        assert (settings.min_difficulty, settings.max_difficulty, settings.default_difficulty) == (1.0, 10.0, 3.0)
        assert settings.max_change_per_evaluation == 2.0
        assert settings.aggregation_strategy == "sum"

    def test_priorities_follow_registration_order(self):
        priorities = [record.priority for record in DifficultyConfig.default().modifiers.values()]
        assert priorities == sorted(priorities)

    def test_unknown_lookup(self):
        config = DifficultyConfig.default()
        assert config.get("weather") is None
        assert config.is_enabled("weather") is False


class TestCorrections:
    def test_min_above_max_is_clamped(self, caplog):
        with caplog.at_level(logging.WARNING):
            settings = GlobalConfig(min_difficulty=12.0, max_difficulty=10.0)
        assert settings.min_difficulty == 10.0
        assert settings.default_difficulty == 10.0
        assert "min_difficulty" in caplog.text

    def test_default_below_min_is_raised(self):
        assert GlobalConfig(min_difficulty=4.0, default_difficulty=2.0).default_difficulty == 4.0

    def test_completion_thresholds_ordered(self):
        config = CompletionRateConfig(low_completion_threshold=0.9, high_completion_threshold=0.6)
        assert config.low_completion_threshold == 0.6

    def test_easy_above_hard_is_clamped(self):
        from dynamic_difficulty.modifier_config import LevelProgressConfig

        config = LevelProgressConfig(easy_level_threshold=5.0, hard_level_threshold=3.0)
        assert config.easy_level_threshold == 3.0


class TestRejections:
    @pytest.mark.parametrize(
        "kwargs",
        [
            {"step_size": -0.5},
            {"max_bonus": float("nan")},
            {"win_threshold": float("inf")},
            {"surprise": 1},
        ],
    )
    def test_invalid_win_streak_knobs(self, kwargs):
        with pytest.raises(ValidationError):
            WinStreakConfig(**kwargs)

    def test_ratio_out_of_range(self):
        with pytest.raises(ValidationError):
            CompletionRateConfig(level_rate_weight=1.5)

    def test_unknown_strategy(self):
        with pytest.raises(ValidationError):
            GlobalConfig(aggregation_strategy="median")

    def test_negative_weight(self):
        with pytest.raises(ValidationError):
            GlobalConfig(aggregation_weights={"win_streak": -1.0})


class TestParsing:
    def test_dispatch_on_modifier_type(self):
        record = parse_modifier_config({"modifier_type": "win_streak", "win_threshold": 4})
        assert isinstance(record, WinStreakConfig)
        assert record.win_threshold == 4

    def test_instance_passes_through(self):
        record = WinStreakConfig()
        assert parse_modifier_config(record) is record

    @pytest.mark.parametrize("payload", [{"modifier_type": "weather"}, {}, {"modifier_type": 7}])
    def test_unknown_type(self, payload):
        with pytest.raises(UnknownModifierError, match="Unknown modifier type"):
            parse_modifier_config(payload)

    def test_partial_sections_merge_over_defaults(self):
        config = DifficultyConfig.model_validate(
            {"modifiers": {"win_streak": {"step_size": 1.0}, "rage_quit": None}}
        )
        assert config.modifiers["win_streak"].step_size == 1.0
        assert config.modifiers["win_streak"].win_threshold == 3
        assert config.modifiers["rage_quit"] == CONFIG_TYPES["rage_quit"]()
        assert len(config.modifiers) == len(MODIFIER_TYPES_IN_ORDER)

    def test_mismatched_tag_rejected(self):
        with pytest.raises(ValidationError):
            DifficultyConfig.model_validate({"modifiers": {"win_streak": {"modifier_type": "loss_streak"}}})

    def test_non_object_section_rejected(self):
        with pytest.raises(ValidationError):
            DifficultyConfig.model_validate({"modifiers": {"win_streak": 3}})

    def test_duplicate_config_registration(self):
        with pytest.raises(ValueError, match="Duplicate"):
            register_config("win_streak")(WinStreakConfig)


class TestLoadAndDump:
    def test_dump_keeps_subclass_fields(self):
        payload = dump_config(DifficultyConfig.default())
        assert payload["modifiers"]["level_progress"]["expected_levels_per_hour"] == 15
        assert payload["modifiers"]["session_pattern"]["modifier_type"] == "session_pattern"
        json.dumps(payload)

    def test_dump_then_load(self, tmp_path):
        config = DifficultyConfig(
            global_settings=GlobalConfig(aggregation_strategy="diminishing"),
            modifiers={"time_decay": {"decay_per_day": 0.75}},
        )
        path = tmp_path / "config.json"
        path.write_text(json.dumps(dump_config(config)))
        assert load_config(path) == config

    def test_missing_file(self, tmp_path):
        with pytest.raises(ConfigurationError, match="Cannot read config"):
            load_config(tmp_path / "missing.json")

    def test_not_json(self, tmp_path):
        path = tmp_path / "config.json"
        path.write_text("global_settings: {}")
        with pytest.raises(ConfigurationError, match="not valid JSON"):
            load_config(path)

    def test_not_an_object(self, tmp_path):
        path = tmp_path / "config.json"
        path.write_text("[1, 2]")
        with pytest.raises(ConfigurationError, match="JSON object"):
            load_config(path)

    def test_invalid_values(self, tmp_path):
        path = tmp_path / "config.json"
        path.write_text(json.dumps({"global_settings": {"max_change_per_evaluation": -1}}))
        with pytest.raises(ConfigurationError, match="Invalid config"):
            load_config(path)

    def test_unknown_section(self, tmp_path):
        path = tmp_path / "config.json"
        path.write_text(json.dumps({"modifiers": {"weather": {}}}))
        with pytest.raises(ConfigurationError):
            load_config(path)


class TestRegistry:
    def test_every_config_type_has_a_modifier(self):
        assert sorted(registered_modifier_types()) == sorted(CONFIG_TYPES)
        assert get_modifier_class("win_streak").modifier_type == "win_streak"
        assert get_modifier_class("weather") is None

    def test_duplicate_registration_raises(self):
        with pytest.raises(ValueError, match="Duplicate"):
            register_modifier("win_streak")(type("Again", (), {}))
        assert MODIFIER_TYPES["win_streak"].__name__ == "WinStreakModifier"


class TestBuildModifiers:
    def test_missing_providers_skip_modifier(self, quiet_logger):
        providers = Providers(win_streak=FakeStreaks())
        built = build_modifiers(DifficultyConfig.default(), providers, logger=quiet_logger)
        assert [m.name for m in built] == ["win_streak", "loss_streak"]

    def test_modifiers_receive_their_records(self, full_providers, quiet_logger):
        config = DifficultyConfig(modifiers={"win_streak": {"priority": 42}})
        built = {m.name: m for m in build_modifiers(config, full_providers, logger=quiet_logger)}
        assert built["win_streak"].priority == 42
        assert built["win_streak"].config is config.modifiers["win_streak"]

    def test_unregistered_record_type_is_skipped(self, full_providers, caplog):
        config = DifficultyConfig.default()
        config.modifiers["custom"] = WinStreakConfig()
        with caplog.at_level(logging.WARNING):
            built = build_modifiers(config, full_providers)
        assert len(built) == len(MODIFIER_TYPES_IN_ORDER)
        assert "custom" in caplog.text
