# config.py

"""
Settings for a LaneKan session.

Values are read in this order, later sources winning:

1. Defaults on `Settings`
2. A `.env` file (loaded into the environment with python-dotenv)
3. A YAML settings file (`LANEKAN_CONFIG` or an explicit path)
4. `LANEKAN_*` environment variables
"""

import logging
import os
from dataclasses import dataclass, fields
from pathlib import Path
from typing import Optional, Dict, Any

from dotenv import load_dotenv

from lanekan.utils import load_yaml, SETTINGS_SCHEMA, YAMLError, SchemaValidationError

logger = logging.getLogger(__name__)

ENV_PREFIX = "LANEKAN_"
TRUTHY = {"1", "true", "yes", "on"}
FALSY = {"0", "false", "no", "off", ""}


class ConfigError(Exception):
    pass


@dataclass
class Settings:
    log_level: str = "INFO"
    log_file: Optional[Path] = None
    activity_log: Optional[Path] = None
    seed_file: Optional[Path] = None
    history_size: int = 50
    board_name: str = "LaneKan"
    component_url: str = "http://localhost:3001"
    component_release: bool = False


_PATH_FIELDS = {"log_file", "activity_log", "seed_file"}


def _coerce(name: str, value: Any) -> Any:
    """Convert a raw config value to the type of the Settings field."""
    if value is None:
        return None
    if name in _PATH_FIELDS:
        return Path(value).expanduser() if str(value) else None
    if name == "history_size":
        try:
            size = int(value)
        except (TypeError, ValueError) as e:
            raise ConfigError(f"history_size must be an integer, got {value!r}") from e
        if size < 1:
            raise ConfigError(f"history_size must be at least 1, got {size}")
        return size
    if name == "component_release":
        if isinstance(value, bool):
            return value
        text = str(value).strip().lower()
        if text in TRUTHY:
            return True
        if text in FALSY:
            return False
        raise ConfigError(f"component_release must be a boolean, got {value!r}")
    if name == "log_level":
        level = str(value).upper()
        if not isinstance(logging.getLevelName(level), int):
            raise ConfigError(f"Unknown log level {value!r}")
        return level
    return str(value)


def _from_env(environ) -> Dict[str, str]:
    values = {}
    for f in fields(Settings):
        key = ENV_PREFIX + f.name.upper()
        if key in environ:
            values[f.name] = environ[key]
    return values


def load_settings(
    config_path: Optional[str | Path] = None,
    env_file: Optional[str | Path] = None,
    environ=None,
) -> Settings:
    """
    Build Settings from the layered sources.

    Args:
        config_path: YAML settings file (default: $LANEKAN_CONFIG, if set)
        env_file: .env file to load (default: search from the working directory)
        environ: Mapping used instead of os.environ (tests)

    Raises:
        ConfigError: If a value is invalid or the settings file is unusable
    """
    if environ is None:
        # Existing environment variables take precedence over .env entries.
        load_dotenv(dotenv_path=env_file, override=False)
        environ = os.environ

    config_path = config_path or environ.get(ENV_PREFIX + "CONFIG")

    raw: Dict[str, Any] = {}
    if config_path:
        config_path = Path(config_path)
        if not config_path.exists():
            raise ConfigError(f"Settings file {config_path} does not exist")
        try:
            raw.update(load_yaml(config_path, default={}, schema_path=SETTINGS_SCHEMA))
        except (YAMLError, SchemaValidationError) as e:
            raise ConfigError(str(e)) from e
        logger.debug(f"Loaded settings from {config_path}")

    raw.update(_from_env(environ))

    settings = Settings()
    for name, value in raw.items():
        setattr(settings, name, _coerce(name, value))
    return settings
