"""
Tests for interpreter settings
"""
import pytest
from pydantic import ValidationError

from soulscript.settings import InterpreterSettings


class TestInterpreterSettings:

    def test_defaults(self):
        settings = InterpreterSettings()
        assert settings.tick_delta == pytest.approx(1 / 60)
        assert settings.max_log_entries == 100
        assert settings.random_seed is None
        assert settings.bind_entities is True

    @pytest.mark.parametrize("field,value", [
        ("tick_delta", 0),
        ("max_log_entries", 0),
        ("max_log_entries", 1001),
        ("max_call_depth", 0),
        ("spawn_margin", -1),
    ])
    def test_validation(self, field, value):
        with pytest.raises(ValidationError):
            InterpreterSettings(**{field: value})

    def test_from_env(self, monkeypatch):
        monkeypatch.setenv("SOULSCRIPT_TICK_DELTA", "0.5")
        monkeypatch.setenv("SOULSCRIPT_RANDOM_SEED", "9")
        monkeypatch.setenv("SOULSCRIPT_BIND_ENTITIES", "false")
        settings = InterpreterSettings.from_env()
        assert settings.tick_delta == 0.5
        assert settings.random_seed == 9
        assert settings.bind_entities is False

    def test_overrides_beat_env(self, monkeypatch):
        monkeypatch.setenv("SOULSCRIPT_MAX_LOG_ENTRIES", "10")
        assert InterpreterSettings.from_env(max_log_entries=20).max_log_entries == 20

    def test_bad_env_value(self, monkeypatch):
        monkeypatch.setenv("SOULSCRIPT_MAX_CALL_DEPTH", "deep")
        with pytest.raises(ValidationError):
            InterpreterSettings.from_env()
