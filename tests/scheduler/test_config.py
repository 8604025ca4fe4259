"""Tests for the constraints configuration."""

import pytest

from timetable_engine.exceptions import ConfigError
from timetable_engine.scheduler.config import ConstraintsConfig, UnitSegment
from timetable_engine.scheduler.models import Day


class TestConstraintsConfigDefault:
    def test_default_values(self):
        config = ConstraintsConfig.default()

        assert config.allowed_days == [Day.MON, Day.TUE, Day.WED, Day.THU, Day.FRI]
        assert config.consecutive_pairs[0] == ("TS3", "TS4")
        assert len(config.consecutive_pairs) == 5
        assert config.limits.candidate_limit_per_event == 25
        assert config.limits.max_sessions_per_lecturer_per_day == 3
        assert config.soft_weights.lecturer_overload == 10

    def test_default_lab_mapping(self):
        config = ConstraintsConfig.default()

        assert config.segments_for("lab", 4) == [
            UnitSegment(duration_slots=2, preferred_pair=("TS7", "TS8"))
        ]

    def test_defaults_are_independent(self):
        first = ConstraintsConfig.default()
        first.unit_mapping["lecture"]["1"].append(UnitSegment(duration_slots=1))

        assert len(ConstraintsConfig.default().unit_mapping["lecture"]["1"]) == 1


class TestConstraintsConfigFromDict:
    """Tests for parsing stored configurations."""

    def test_missing_sections_fall_back(self):
        config = ConstraintsConfig.from_dict({"allowed_days": ["mon", "Wed"]})

        assert config.allowed_days == [Day.MON, Day.WED]
        assert config.limits.candidate_limit_per_event == 25
        assert config.segments_for("lecture", 3) is not None

    def test_partial_overrides(self):
        config = ConstraintsConfig.from_dict(
            {"defaults": {"candidate_limit_per_event": 5}, "soft_weights": {"avoid_early": 7}}
        )

        assert config.limits.candidate_limit_per_event == 5
        assert config.limits.max_sessions_per_lecturer_per_day == 3
        assert config.soft_weights.avoid_early == 7.0
        assert config.soft_weights.avoid_late == 2.0

    def test_unknown_day(self):
        with pytest.raises(ConfigError, match="unknown day 'FUNDAY'"):
            ConstraintsConfig.from_dict({"allowed_days": ["MON", "FUNDAY"]}, source="test.json")

    def test_day_names_in_any_form(self):
        config = ConstraintsConfig.from_dict({"allowed_days": ["monday", " Tue ", "WED"]})
        assert config.allowed_days == [Day.MON, Day.TUE, Day.WED]

    def test_empty_days(self):
        with pytest.raises(ConfigError, match="allowed_days must not be empty"):
            ConstraintsConfig.from_dict({"allowed_days": []})

    def test_invalid_duration(self):
        with pytest.raises(ConfigError, match="duration_slots"):
            ConstraintsConfig.from_dict(
                {"unit_mapping": {"lecture": {"1": [{"duration_slots": 3}]}}}
            )

    def test_invalid_pair(self):
        with pytest.raises(ConfigError, match="two slots"):
            ConstraintsConfig.from_dict({"consecutive_pairs": [["TS1", "TS2", "TS3"]]})

    def test_non_positive_limit(self):
        with pytest.raises(ConfigError, match="candidate_limit_per_event"):
            ConstraintsConfig.from_dict({"defaults": {"candidate_limit_per_event": 0}})

    def test_error_names_source(self):
        with pytest.raises(ConfigError) as exc_info:
            ConstraintsConfig.from_dict({"allowed_days": ["XYZ"]}, source="constraints.json")
        assert exc_info.value.source == "constraints.json"
        assert "constraints.json" in str(exc_info.value)

    def test_to_dict_is_accepted_by_from_dict(self):
        config = ConstraintsConfig.default()
        assert ConstraintsConfig.from_dict(config.to_dict()) == config


class TestSegmentsFor:
    def test_exact_units_win(self):
        config = ConstraintsConfig.from_dict(
            {
                "unit_mapping": {
                    "lab": {
                        "1": [{"duration_slots": 1}],
                        "default": [{"duration_slots": 2}],
                    }
                }
            }
        )

        assert config.segments_for("lab", 1) == [UnitSegment(duration_slots=1)]
        assert config.segments_for("lab", 3) == [UnitSegment(duration_slots=2)]

    def test_unmapped(self):
        config = ConstraintsConfig.default()

        assert config.segments_for("tutorial", 2) is None
        assert config.segments_for("lecture", 5) is None
