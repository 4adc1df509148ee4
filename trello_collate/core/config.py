"""Configuration loading for boards, columns and Trello credentials.

The board configuration and the credentials live in separate YAML files so
the credentials file can be kept out of version control. Credentials can
also come from the TRELLO_APP_KEY and TRELLO_TOKEN environment variables,
which take precedence over the file.
"""

import logging
import os
import re
from pathlib import Path
from typing import Any

import yaml
from pydantic import ValidationError

from .exceptions import ConfigurationError
from .models import AuthConfig, CollateConfig
from .types import Seconds

logger = logging.getLogger(__name__)

DEFAULT_CONFIG_PATH = Path("config.yaml")
DEFAULT_AUTH_PATH = Path("auth.yaml")
DEFAULT_PERIOD = "30m"

APP_KEY_ENV = "TRELLO_APP_KEY"
TOKEN_ENV = "TRELLO_TOKEN"

_DURATION_PART = re.compile(r"(\d+(?:\.\d+)?)(ms|h|m|s)")
_UNIT_SECONDS = {"h": 3600.0, "m": 60.0, "s": 1.0, "ms": 0.001}


def _read_yaml(path: Path, config_key: str) -> dict[str, Any]:
    """Read a YAML mapping from disk."""
    if not path.exists():
        raise ConfigurationError(config_key, f"file not found: {path}")

    try:
        with open(path, "r", encoding="utf-8") as f:
            data = yaml.safe_load(f)
    except yaml.YAMLError as e:
        raise ConfigurationError(config_key, f"invalid YAML in {path}: {e}")

    if data is None:
        return {}
    if not isinstance(data, dict):
        raise ConfigurationError(config_key, f"{path} must contain a mapping")
    return data


def _first_error(e: ValidationError) -> str:
    err = e.errors()[0]
    location = ".".join(str(part) for part in err["loc"])
    return f"{location}: {err['msg']}" if location else err["msg"]


def load_config(path: Path | str = DEFAULT_CONFIG_PATH) -> CollateConfig:
    """
    Load the board configuration.

    Args:
        path: YAML file with `boards`, `columns` and optional `on_board_error`

    Returns:
        CollateConfig instance
    """
    path = Path(path)
    data = _read_yaml(path, "config")

    try:
        config = CollateConfig.model_validate(data)
    except ValidationError as e:
        raise ConfigurationError("config", _first_error(e))

    if not config.boards:
        logger.warning(f"No boards configured in {path}")
    if not config.columns:
        logger.warning(f"No columns configured in {path}; every card will be ignored")

    return config


def load_auth(path: Path | str = DEFAULT_AUTH_PATH) -> AuthConfig:
    """
    Load Trello credentials from environment variables and/or a YAML file.

    Environment variables win over file values. The file is only required
    when the environment does not supply both values.

    Args:
        path: YAML file with `appkey` and `token`

    Returns:
        AuthConfig instance
    """
    path = Path(path)
    env_key = os.getenv(APP_KEY_ENV)
    env_token = os.getenv(TOKEN_ENV)

    data: dict[str, Any] = {}
    if not (env_key and env_token):
        data = _read_yaml(path, "auth")

    if env_key:
        data["appkey"] = env_key
    if env_token:
        data["token"] = env_token

    try:
        return AuthConfig.model_validate(data)
    except ValidationError as e:
        raise ConfigurationError("auth", _first_error(e))


def parse_period(value: str) -> Seconds:
    """
    Parse a duration such as "30m", "90s", "1h30m" or "1.5h" into seconds.

    A bare number is taken as seconds.
    """
    text = value.strip().lower()
    if not text:
        raise ConfigurationError("period", "empty duration")

    try:
        seconds = float(text)
    except ValueError:
        pass
    else:
        if seconds < 0:
            raise ConfigurationError("period", f"negative duration: {value}")
        return seconds

    position = 0
    total = 0.0
    for match in _DURATION_PART.finditer(text):
        if match.start() != position:
            break
        amount, unit = match.groups()
        total += float(amount) * _UNIT_SECONDS[unit]
        position = match.end()

    if position != len(text):
        raise ConfigurationError("period", f"invalid duration: {value}")
    return total
