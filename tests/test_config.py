"""Tests for environment-driven settings."""

import pytest

from gammon.config import Config


def test_defaults(monkeypatch):
    for name in ("GAMMON_AGENT_URL", "GAMMON_AGENT_TIMEOUT", "GAMMON_AGENT_LOG",
                 "GAMMON_DEBUG", "GAMMON_UNDO_DEPTH", "GAMMON_LOG_LEVEL"):
        monkeypatch.delenv(name, raising=False)

    config = Config.from_env()

    assert config.AGENT_URL == Config.AGENT_URL
    assert config.AGENT_TIMEOUT == 30.0
    assert config.AGENT_LOG_FILE == ""
    assert config.DEBUG is False
    assert config.UNDO_DEPTH == 8
    assert config.LOG_LEVEL == "WARNING"


def test_overrides(monkeypatch):
    monkeypatch.setenv("GAMMON_AGENT_URL", "http://agent.test/move")
    monkeypatch.setenv("GAMMON_AGENT_TIMEOUT", "2.5")
    monkeypatch.setenv("GAMMON_AGENT_LOG", "logs/agent.log")
    monkeypatch.setenv("GAMMON_DEBUG", "yes")
    monkeypatch.setenv("GAMMON_UNDO_DEPTH", "4")
    monkeypatch.setenv("GAMMON_LOG_LEVEL", "debug")

    config = Config.from_env()

    assert config.AGENT_URL == "http://agent.test/move"
    assert config.AGENT_TIMEOUT == 2.5
    assert config.AGENT_LOG_FILE == "logs/agent.log"
    assert config.DEBUG is True
    assert config.UNDO_DEPTH == 4
    assert config.LOG_LEVEL == "DEBUG"


def test_bad_number(monkeypatch):
    monkeypatch.setenv("GAMMON_AGENT_TIMEOUT", "soon")
    with pytest.raises(ValueError, match="GAMMON_AGENT_TIMEOUT"):
        Config.from_env()


def test_class_defaults_untouched(monkeypatch):
    monkeypatch.setenv("GAMMON_UNDO_DEPTH", "2")
    Config.from_env()
    assert Config.UNDO_DEPTH == 8


@pytest.mark.parametrize("depth", ["0", "-3"])
def test_undo_depth_must_be_positive(monkeypatch, depth):
    monkeypatch.setenv("GAMMON_UNDO_DEPTH", depth)
    with pytest.raises(ValueError, match="GAMMON_UNDO_DEPTH must be at least 1"):
        Config.from_env()
