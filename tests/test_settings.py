import importlib

import pytest

from config.settings import get_allowed_origins, load_settings, validate_environment


def test_defaults(monkeypatch):
    for name in ("MAX_PARTICIPANTS", "ROOM_EVICTION_DELAY", "ALLOWED_ORIGINS", "LOG_LEVEL"):
        monkeypatch.delenv(name, raising=False)

    settings = load_settings()

    assert settings.max_participants == 4
    assert settings.room_eviction_delay == 30.0
    assert settings.allowed_origins == ["*"]


def test_overrides_from_environment(monkeypatch):
    monkeypatch.setenv("MAX_PARTICIPANTS", "2")
    monkeypatch.setenv("ROOM_EVICTION_DELAY", "5")
    monkeypatch.setenv("ALLOWED_ORIGINS", "https://a.example, https://b.example,")

    settings = validate_environment()

    assert settings.max_participants == 2
    assert settings.room_eviction_delay == 5.0
    assert get_allowed_origins() == ["https://a.example", "https://b.example"]


@pytest.mark.parametrize("name,value", [
    ("MAX_PARTICIPANTS", "0"),
    ("MAX_PARTICIPANTS", "four"),
    ("ROOM_EVICTION_DELAY", "-1"),
    ("LOG_LEVEL", "chatty"),
])
def test_invalid_environment_is_rejected(monkeypatch, name, value):
    monkeypatch.setenv(name, value)
    with pytest.raises(RuntimeError):
        validate_environment()


def test_bad_log_level_fails_before_logging_setup(monkeypatch):
    import main

    monkeypatch.setenv("LOG_LEVEL", "chatty")
    with pytest.raises(RuntimeError, match="Unknown LOG_LEVEL"):
        importlib.reload(main)
