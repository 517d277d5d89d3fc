#!/usr/bin/env python3
"""
Tests for layered settings loading.
"""

import sys
from pathlib import Path

import pytest
import yaml

# Add parent directory to path
sys.path.insert(0, str(Path(__file__).resolve().parent.parent))

from lanekan.config import load_settings, Settings, ConfigError


def test_defaults_with_empty_environment():
    settings = load_settings(environ={})
    assert settings == Settings()


def test_yaml_file_then_environment(tmp_path):
    config = tmp_path / "lanekan.yaml"
    config.write_text(yaml.safe_dump({
        "log_level": "DEBUG",
        "history_size": 10,
        "board_name": "From file",
        "seed_file": "seed.yaml",
    }))

    settings = load_settings(config, environ={"LANEKAN_BOARD_NAME": "From env"})

    assert settings.log_level == "DEBUG"
    assert settings.history_size == 10
    assert settings.board_name == "From env"
    assert settings.seed_file == Path("seed.yaml")


def test_config_path_from_environment(tmp_path):
    config = tmp_path / "lanekan.yaml"
    config.write_text(yaml.safe_dump({"component_release": True}))

    settings = load_settings(environ={"LANEKAN_CONFIG": str(config)})

    assert settings.component_release is True


def test_environment_values_are_coerced():
    settings = load_settings(environ={
        "LANEKAN_HISTORY_SIZE": "7",
        "LANEKAN_COMPONENT_RELEASE": "yes",
        "LANEKAN_LOG_LEVEL": "warning",
        "LANEKAN_ACTIVITY_LOG": "/tmp/activity.log",
    })
    assert settings.history_size == 7
    assert settings.component_release is True
    assert settings.log_level == "WARNING"
    assert settings.activity_log == Path("/tmp/activity.log")


@pytest.mark.parametrize("key,value", [
    ("LANEKAN_HISTORY_SIZE", "lots"),
    ("LANEKAN_HISTORY_SIZE", "0"),
    ("LANEKAN_COMPONENT_RELEASE", "maybe"),
    ("LANEKAN_LOG_LEVEL", "LOUD"),
])
def test_invalid_environment_values(key, value):
    with pytest.raises(ConfigError):
        load_settings(environ={key: value})


def test_unknown_key_in_settings_file(tmp_path):
    config = tmp_path / "lanekan.yaml"
    config.write_text(yaml.safe_dump({"colour": "blue"}))
    with pytest.raises(ConfigError):
        load_settings(config, environ={})


def test_missing_settings_file(tmp_path):
    with pytest.raises(ConfigError):
        load_settings(tmp_path / "nope.yaml", environ={})


def test_dotenv_file_is_loaded(tmp_path, monkeypatch):
    env_file = tmp_path / ".env"
    env_file.write_text("LANEKAN_BOARD_NAME=Dotenv Board\n")
    # Registered so teardown removes the value python-dotenv writes
    monkeypatch.setenv("LANEKAN_BOARD_NAME", "placeholder")
    monkeypatch.delenv("LANEKAN_BOARD_NAME")
    monkeypatch.delenv("LANEKAN_CONFIG", raising=False)

    settings = load_settings(env_file=env_file)

    assert settings.board_name == "Dotenv Board"
