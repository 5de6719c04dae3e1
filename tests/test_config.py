"""
Tests for YAML configuration loading and validation.
"""

import pytest
from pydantic import ValidationError

from vetpro.config import AppConfig, ScheduleSettings
from vetpro.domain.models import CareKind


class TestScheduleSettings:
    """Tests for ScheduleSettings validation."""

    def test_defaults(self):
        settings = ScheduleSettings()
        config = settings.to_configuration()

        assert config.opening_time == "08:00"
        assert config.closing_time == "18:00"
        assert config.slot_duration == 30
        assert config.lunch_break_start == "12:00"
        assert "sunday" not in config.working_days

    @pytest.mark.parametrize("duration", [0, -30])
    def test_rejects_non_positive_duration(self, duration):
        with pytest.raises(ValidationError, match="slot_duration"):
            ScheduleSettings(slot_duration=duration)

    def test_rejects_closing_before_opening(self):
        with pytest.raises(ValidationError, match="closing_time must be later"):
            ScheduleSettings(opening_time="18:00", closing_time="08:00")

    @pytest.mark.parametrize("value", ["8h00", "25:00", "12:75", "noon"])
    def test_rejects_malformed_times(self, value):
        with pytest.raises(ValidationError, match="HH:MM"):
            ScheduleSettings(opening_time=value)

    def test_lunch_bounds_set_together(self):
        with pytest.raises(ValidationError, match="set together"):
            ScheduleSettings(lunch_break_start="12:00", lunch_break_end=None)

    def test_lunch_order(self):
        with pytest.raises(ValidationError, match="lunch_break_end must be later"):
            ScheduleSettings(lunch_break_start="13:00", lunch_break_end="12:00")

    def test_no_lunch(self):
        settings = ScheduleSettings(lunch_break_start=None, lunch_break_end=None)

        assert settings.to_configuration().lunch_break_start is None

    def test_working_days_normalized(self):
        settings = ScheduleSettings(working_days=["Monday", " TUESDAY", "monday"])

        assert settings.working_days == ["monday", "tuesday"]

    def test_working_days_rejects_unknown_names(self):
        with pytest.raises(ValidationError, match="weekday"):
            ScheduleSettings(working_days=["lundi"])


class TestAppConfig:
    """Tests for AppConfig loading and protocol lookups."""

    def test_load_from_yaml(self, config_file):
        config = AppConfig.load_from_yaml(config_file)

        assert config.clinic_name == "Clinique Test"
        assert config.schedule.closing_time == "12:00"
        assert len(config.protocols) == 4

    def test_missing_file(self, tmp_path):
        with pytest.raises(FileNotFoundError, match="Config file not found"):
            AppConfig.load_from_yaml(tmp_path / "missing.yaml")

    def test_invalid_yaml(self, tmp_path):
        path = tmp_path / "config.yaml"
        path.write_text("schedule: [unclosed", encoding="utf-8")

        with pytest.raises(ValueError, match="Invalid YAML"):
            AppConfig.load_from_yaml(path)

    def test_root_must_be_mapping(self, tmp_path):
        path = tmp_path / "config.yaml"
        path.write_text("- a\n- b\n", encoding="utf-8")

        with pytest.raises(ValueError, match="mapping"):
            AppConfig.load_from_yaml(path)

    def test_empty_file_uses_defaults(self, tmp_path):
        path = tmp_path / "config.yaml"
        path.write_text("", encoding="utf-8")

        config = AppConfig.load_from_yaml(path)

        assert config.protocols == []
        assert config.schedule.slot_duration == 30

    def test_duplicate_protocol_ids(self):
        with pytest.raises(ValidationError, match="Duplicate protocol id"):
            AppConfig(
                protocols=[
                    {"id": "p", "name": "Rage", "species": "Chien"},
                    {"id": "p", "name": "Rage", "species": "Chat"},
                ]
            )

    def test_get_protocols_by_kind(self, config_file):
        config = AppConfig.load_from_yaml(config_file)

        antiparasitic = config.get_protocols(kind=CareKind.ANTIPARASITIC)
        active = config.get_protocols(include_inactive=False)

        assert [p.id for p in antiparasitic] == ["ap-vermifuge", "ap-old"]
        assert "ap-old" not in [p.id for p in active]

    def test_to_protocol_keeps_interval_order(self, config_file):
        config = AppConfig.load_from_yaml(config_file)
        old = next(p for p in config.get_protocols() if p.id == "ap-old")

        assert [i.offset_days for i in old.intervals] == [60, 30]
        assert not old.is_active

    def test_find_protocol_active_only(self, config_file):
        config = AppConfig.load_from_yaml(config_file)

        assert config.find_protocol("CHPPiL", "Chien").id == "vac-chppil"
        assert config.find_protocol("Ancien collier", "Chien") is None
        assert config.find_protocol("Rage", "Chat") is None
