"""
Test settings loading from the environment and from .env files.

Already-set environment variables take precedence over .env values, and
.env is discovered in the current or any parent directory.
"""

import os

import pytest

from clinictriage.core.config import (
    LoggingSettings,
    MessagingSettings,
    Settings,
    TriageSettings,
    _load_env_file_if_available,
    get_settings,
    reset_settings,
)
from clinictriage.core.exceptions import ConfigurationError

QUEUE_VAR = "TRIAGE_HIGH_PRIORITY_QUEUE"


@pytest.fixture(autouse=True)
def fresh_settings(monkeypatch):
    monkeypatch.delenv(QUEUE_VAR, raising=False)
    reset_settings()
    yield
    reset_settings()
    # load_dotenv writes straight to os.environ
    os.environ.pop(QUEUE_VAR, None)


def test_defaults():
    settings = Settings()
    assert settings.triage.high_priority_queue == "triage_high_priority"
    assert settings.triage.critical_priority_threshold == 2
    assert settings.triage.serialize_doctor_assignment is True
    assert settings.messaging.max_queue_size == 1000
    assert settings.is_production is False


def test_environment_overrides(monkeypatch):
    monkeypatch.setenv(QUEUE_VAR, "alerts")
    monkeypatch.setenv("TRIAGE_SERIALIZE_DOCTOR_ASSIGNMENT", "false")
    monkeypatch.setenv("LOG_LEVEL", "debug")
    monkeypatch.setenv("MESSAGING_MAX_QUEUE_SIZE", "5")

    settings = get_settings()

    assert settings.triage.high_priority_queue == "alerts"
    assert settings.triage.serialize_doctor_assignment is False
    assert settings.logging.level == "DEBUG"
    assert settings.messaging.max_queue_size == 5
    assert get_settings() is settings


def test_invalid_environment_raises_configuration_error(monkeypatch):
    monkeypatch.setenv("TRIAGE_CRITICAL_PRIORITY_THRESHOLD", "9")
    with pytest.raises(ConfigurationError):
        get_settings()


@pytest.mark.parametrize(
    "factory,kwargs",
    [
        (TriageSettings, {"critical_priority_threshold": 0}),
        (TriageSettings, {"high_priority_queue": "  "}),
        (LoggingSettings, {"level": "LOUD"}),
        (LoggingSettings, {"format": "xml"}),
        (MessagingSettings, {"max_queue_size": 0}),
    ],
)
def test_validators_reject_bad_values(factory, kwargs):
    with pytest.raises(ValueError):
        factory(**kwargs)


def test_env_file_found_in_parent_directory(monkeypatch, tmp_path):
    (tmp_path / ".env").write_text(f"{QUEUE_VAR}=from_env_file\n")
    nested = tmp_path / "nested" / "deeper"
    nested.mkdir(parents=True)
    monkeypatch.chdir(nested)

    _load_env_file_if_available()

    assert os.getenv(QUEUE_VAR) == "from_env_file"


def test_already_set_env_vars_take_precedence(monkeypatch, tmp_path):
    monkeypatch.setenv(QUEUE_VAR, "already_set")
    (tmp_path / ".env").write_text(f"{QUEUE_VAR}=from_env_file\n")
    monkeypatch.chdir(tmp_path)

    assert get_settings().triage.high_priority_queue == "already_set"


def test_no_env_files_no_crash(monkeypatch, tmp_path):
    monkeypatch.chdir(tmp_path)
    _load_env_file_if_available()
    assert get_settings().triage.high_priority_queue == "triage_high_priority"
