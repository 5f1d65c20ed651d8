"""Tests for layered SRS configuration."""

import pytest

from lexirep.application.config import SrsSettings, resolve_config
from lexirep.domain.errors import ConfigurationError


def test_defaults():
    config = resolve_config()

    assert config.initial_efactor == 2.5
    assert config.minimum_efactor == 1.3
    assert config.maximum_interval == 36525
    assert config.load_balance is True
    assert config.max_fuzzing_days == 3
    assert config.max_new_per_day == 20
    assert config.max_review_per_day == 100


def test_overrides_ignore_none():
    config = resolve_config({"load_balance": False, "max_fuzzing_days": None})
    assert config.load_balance is False
    assert config.max_fuzzing_days == 3


def test_env_overrides(monkeypatch):
    monkeypatch.setenv("LEXIREP_MAX_FUZZING_DAYS", "5")
    monkeypatch.setenv("LEXIREP_LOAD_BALANCE", "false")

    config = resolve_config()

    assert config.max_fuzzing_days == 5
    assert config.load_balance is False


def test_toml_file(mock_home, monkeypatch):
    config_dir = mock_home / ".config" / "lexirep"
    config_dir.mkdir(parents=True)
    (config_dir / "config.toml").write_text("maximum_interval = 365\nmax_new_per_day = 5\n")

    config = resolve_config()
    assert config.maximum_interval == 365
    assert config.max_new_per_day == 5

    # Environment beats the file, explicit overrides beat both
    monkeypatch.setenv("LEXIREP_MAXIMUM_INTERVAL", "400")
    assert resolve_config().maximum_interval == 400
    assert resolve_config({"maximum_interval": 500}).maximum_interval == 500


@pytest.mark.parametrize(
    "overrides",
    [
        {"maximum_interval": -1},
        {"maximum_interval": 0},
        {"max_fuzzing_days": -2},
        {"minimum_efactor": 3.0},
        {"initial_efactor": 0},
        {"session_size": 0},
    ],
)
def test_invalid_values_rejected(overrides):
    with pytest.raises(ConfigurationError):
        resolve_config(overrides)


def test_settings_can_be_built_directly():
    settings = SrsSettings(load_balance=False)
    assert settings.load_balance is False
