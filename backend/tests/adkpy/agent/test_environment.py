import logging

import pytest

from adkpy.agent import environment
from adkpy.agent.environment import AgentSettings, configure_logging, get_agent_settings, reload_environment


def test_defaults_when_unset():
    settings = get_agent_settings()
    assert settings == AgentSettings()
    assert settings.temperature == 0.7
    assert settings.max_tokens is None
    assert settings.max_tool_loops is None
    assert settings.log_level == "INFO"


def test_values_read_from_env(monkeypatch):
    monkeypatch.setenv("AGENT_MAX_TOKENS", "512")
    monkeypatch.setenv("AGENT_TEMPERATURE", "0.2")
    monkeypatch.setenv("AGENT_MAX_TOOL_LOOPS", "4")
    monkeypatch.setenv("AGENT_LOG_LEVEL", "debug")

    settings = get_agent_settings()

    assert settings.max_tokens == 512
    assert settings.temperature == 0.2
    assert settings.max_tool_loops == 4
    assert settings.log_level == "DEBUG"


@pytest.mark.parametrize("value", ["abc", "0", "-3", ""])
def test_invalid_or_non_positive_loop_cap_disables_it(monkeypatch, value):
    monkeypatch.setenv("AGENT_MAX_TOOL_LOOPS", value)
    assert get_agent_settings().max_tool_loops is None


@pytest.mark.parametrize("value", ["warm", "5"])
def test_invalid_temperature_falls_back(monkeypatch, value):
    monkeypatch.setenv("AGENT_TEMPERATURE", value)
    assert get_agent_settings().temperature == 0.7


def test_reload_environment_reports_changes(monkeypatch):
    monkeypatch.delenv("ADKPY_TEST_RELOAD", raising=False)

    def fake_load_dotenv(override=False):
        monkeypatch.setenv("ADKPY_TEST_RELOAD", "fresh")
        return True

    monkeypatch.setattr(environment, "load_dotenv", fake_load_dotenv)
    changed = reload_environment()

    assert changed == {"ADKPY_TEST_RELOAD": "fresh"}


def test_configure_logging_applies_level(monkeypatch):
    root = logging.getLogger()
    previous = root.level
    try:
        monkeypatch.setenv("AGENT_LOG_LEVEL", "WARNING")
        configure_logging()
        assert root.level == logging.WARNING
        configure_logging("not-a-level")
        assert root.level == logging.INFO
    finally:
        root.setLevel(previous)
